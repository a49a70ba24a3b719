"""Core data models and world representation."""

from kingdom.core.enums import ActionType, Domain, FailureReason, HeroState
from kingdom.core.models import Building, Enemy, Flag, Hero, Resources, Vector2
from kingdom.core.grid import Grid
from kingdom.core.results import CommandResult
from kingdom.core.world_state import WorldState
from kingdom.core.snapshot import Snapshot

__all__ = [
    "ActionType",
    "Building",
    "CommandResult",
    "Domain",
    "Enemy",
    "FailureReason",
    "Flag",
    "Grid",
    "Hero",
    "HeroState",
    "Resources",
    "Snapshot",
    "Vector2",
    "WorldState",
]
