"""Outcome of a player command."""

from __future__ import annotations

from dataclasses import dataclass

from kingdom.core.enums import FailureReason


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Success flag plus, on failure, a reason a UI can render.

    A failed command never mutates the world.
    """

    ok: bool
    reason: FailureReason | None = None
    message: str = ""
    entity_id: int | None = None

    @classmethod
    def success(cls, entity_id: int | None = None, message: str = "") -> CommandResult:
        return cls(ok=True, entity_id=entity_id, message=message)

    @classmethod
    def failure(cls, reason: FailureReason, message: str = "") -> CommandResult:
        return cls(ok=False, reason=reason, message=message or reason.value.replace("_", " "))

    def __bool__(self) -> bool:
        return self.ok
