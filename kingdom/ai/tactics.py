"""Position and formation bonuses.

Both the hero decision engine (target scoring, approach cells) and the
combat resolver (damage multiplier) read the same numbers from here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from kingdom.ai.perception import Perception
from kingdom.core.models import CARDINAL_OFFSETS, Vector2

if TYPE_CHECKING:
    from kingdom.config import SimulationConfig
    from kingdom.core.models import Enemy, Hero
    from kingdom.core.world_state import WorldState


@dataclass(frozen=True, slots=True)
class TacticalBonus:
    building: float = 0.0
    flank: float = 0.0
    formation: float = 0.0
    diversity: float = 0.0

    @property
    def total(self) -> float:
        return self.building + self.flank + self.formation + self.diversity


class Tactics:
    """Stateless bonus calculator parameterised by the run config."""

    __slots__ = ("_config",)

    def __init__(self, config: SimulationConfig) -> None:
        self._config = config

    @staticmethod
    def near_building(world: WorldState, pos: Vector2) -> bool:
        """Any building in the 3x3 block centred on *pos*."""
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                if world.grid.building_at(Vector2(pos.x + dx, pos.y + dy)) is not None:
                    return True
        return False

    @staticmethod
    def is_flanking(world: WorldState, hero: Hero, enemy: Enemy, pos: Vector2 | None = None) -> bool:
        """Another hero stands on the cell opposite *pos* across the enemy."""
        origin = pos if pos is not None else hero.pos
        if origin.manhattan(enemy.pos) != 1:
            return False
        opposite = enemy.pos + (enemy.pos - origin)
        other = world.grid.hero_at(opposite)
        return other is not None and other != hero.id

    def allies_near(self, world: WorldState, hero: Hero, pos: Vector2 | None = None) -> list[Hero]:
        origin = pos if pos is not None else hero.pos
        return [
            h for h in Perception.nearby(origin, world.heroes.values(), self._config.formation_radius)
            if h.id != hero.id
        ]

    def bonus(
        self,
        world: WorldState,
        hero: Hero,
        enemy: Enemy | None = None,
        pos: Vector2 | None = None,
    ) -> TacticalBonus:
        """Bonuses *hero* would enjoy standing at *pos* (default: where it is)."""
        cfg = self._config
        origin = pos if pos is not None else hero.pos

        building = cfg.building_adjacency_bonus if self.near_building(world, origin) else 0.0
        flank = 0.0
        if enemy is not None and self.is_flanking(world, hero, enemy, origin):
            flank = cfg.flank_bonus

        allies = self.allies_near(world, hero, origin)
        formation = min(cfg.formation_bonus_cap, cfg.formation_bonus_per_ally * len(allies))
        diversity = cfg.diversity_bonus if len({a.hero_class for a in allies}) > 1 else 0.0
        return TacticalBonus(building=building, flank=flank, formation=formation, diversity=diversity)

    def approach_cell(self, world: WorldState, hero: Hero, enemy: Enemy) -> Vector2 | None:
        """Best free cell next to *enemy* with a tactical bonus, or None.

        Ties go to the cell closer to the hero, then to N/E/S/W order.
        """
        best: Vector2 | None = None
        best_key: tuple[float, int] | None = None
        for off in CARDINAL_OFFSETS:
            cell = enemy.pos + off
            if not world.can_enter(hero, cell):
                continue
            score = self.bonus(world, hero, enemy, cell).total
            if score <= 0.0:
                continue
            key = (score, -hero.pos.manhattan(cell))
            if best_key is None or key > best_key:
                best, best_key = cell, key
        return best
