"""Base action proposal: the universal currency between AI and World."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from kingdom.core.enums import ActionType, HeroState
from kingdom.core.models import Vector2


@dataclass(frozen=True, slots=True)
class ActionProposal:
    """An intent produced by a hero or enemy brain.

    The WorldLoop validates and applies (or rejects) each proposal.
    ``reason`` becomes the hero's last-action label.
    """

    actor_id: int
    verb: ActionType
    target: Any = None
    reason: str = ""
    new_state: HeroState | None = None
    actor_kind: str = "hero"
    destination: Vector2 | None = None   # longer-range goal behind a MOVE step

    def __repr__(self) -> str:
        return (
            f"Proposal({self.actor_kind}={self.actor_id}, {self.verb.name}, "
            f"target={self.target}, reason={self.reason!r})"
        )
