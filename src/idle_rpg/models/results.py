"""Result objects returned by engine operations.

Gameplay preconditions (unknown ids, locked content, not enough gold) are
reported through these results instead of exceptions. A failed result is
falsy, so callers can write ``if not ledger.spend("gold", 5): ...``.
"""

from __future__ import annotations

from dataclasses import dataclass

from idle_rpg.models.enums import FailureReason


@dataclass(frozen=True, slots=True)
class OperationResult:
    """Outcome of a ledger, skill or upgrade operation.

    Attributes:
        ok: Whether the operation took effect.
        reason: Failure reason code when ``ok`` is False.
        applied: Amount actually applied (after clamping), when relevant.
        message: Optional human-readable detail.
    """

    ok: bool
    reason: FailureReason | None = None
    applied: float = 0
    message: str = ""

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, applied: float = 0, message: str = "") -> OperationResult:
        return cls(ok=True, applied=applied, message=message)

    @classmethod
    def failure(cls, reason: FailureReason, message: str = "") -> OperationResult:
        return cls(ok=False, reason=reason, message=message)


__all__ = ["OperationResult"]
