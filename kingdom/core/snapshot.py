"""Immutable snapshot of the world state for readers outside the tick."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from kingdom.core.grid import Grid
from kingdom.core.models import Building, Enemy, Flag, GameStatistics, Hero, Resources
from kingdom.core.world_state import WorldState


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Read-only view of the kingdom, safe to share across threads.

    Entities are deep-copied and exposed through MappingProxyType so no
    reader can reach into live simulation state.
    """

    tick: int
    seed: int
    grid: Grid
    resources: Resources
    statistics: GameStatistics
    buildings: Mapping[int, Building]
    heroes: Mapping[int, Hero]
    enemies: Mapping[int, Enemy]
    flags: Mapping[int, Flag]
    game_over: bool
    game_over_reason: str
    paused: bool

    @classmethod
    def from_world(cls, world: WorldState, paused: bool = False) -> Snapshot:
        return cls(
            tick=world.tick,
            seed=world.seed,
            grid=world.grid.copy(),
            resources=world.resources.copy(),
            statistics=world.statistics.copy(),
            buildings=MappingProxyType({k: b.copy() for k, b in world.buildings.items()}),
            heroes=MappingProxyType({k: h.copy() for k, h in world.heroes.items()}),
            enemies=MappingProxyType({k: e.copy() for k, e in world.enemies.items()}),
            flags=MappingProxyType({k: f.copy() for k, f in world.flags.items()}),
            game_over=world.game_over,
            game_over_reason=world.game_over_reason,
            paused=paused,
        )
