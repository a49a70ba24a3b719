"""Hero progression: experience, levels, morale, specializations, equipment."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kingdom.core.classes import SPECIALIZATION_DEFS
from kingdom.core.enums import FailureReason
from kingdom.core.items import EQUIPMENT_DEFS
from kingdom.core.results import CommandResult

if TYPE_CHECKING:
    from kingdom.config import SimulationConfig
    from kingdom.core.models import GameStatistics, Hero, Resources

logger = logging.getLogger(__name__)

MORALE_MIN = 0.0
MORALE_MAX = 100.0


class Progression:
    """Stateless rules for growing heroes. Mutates only the hero passed in."""

    __slots__ = ("_config",)

    def __init__(self, config: SimulationConfig) -> None:
        self._config = config

    # ------------------------------------------------------------------
    # Experience & levels
    # ------------------------------------------------------------------

    def grant_experience(self, hero: Hero, amount: int) -> None:
        hero.experience += max(0, amount)

    def check_level_up(self, hero: Hero, stats: GameStatistics | None = None) -> bool:
        """Apply at most one level-up. Call again to cascade further."""
        if hero.experience < hero.experience_to_next:
            return False

        cfg = self._config
        hero.level += 1
        hero.experience -= hero.experience_to_next
        gain = int(hero.level * cfg.level_multiplier)
        hero.max_health += gain
        hero.health += gain
        hero.damage += int(gain * 0.8)
        hero.speed += int(gain * 0.3)
        hero.experience_to_next = max(
            hero.experience_to_next + 1,
            int(hero.experience_to_next * cfg.level_multiplier),
        )
        self.adjust_morale(hero, cfg.morale_on_level_up)
        if stats is not None:
            stats.highest_hero_level = max(stats.highest_hero_level, hero.level)
        logger.info("Hero %d (%s) reached level %d", hero.id, hero.hero_class, hero.level)
        return True

    # ------------------------------------------------------------------
    # Morale
    # ------------------------------------------------------------------

    @staticmethod
    def adjust_morale(hero: Hero, delta: float) -> None:
        hero.morale = max(MORALE_MIN, min(MORALE_MAX, hero.morale + delta))

    # ------------------------------------------------------------------
    # Specialization
    # ------------------------------------------------------------------

    @staticmethod
    def assign_specialization(hero: Hero, spec_id: str) -> CommandResult:
        spec = SPECIALIZATION_DEFS.get(spec_id)
        if spec is None:
            return CommandResult.failure(FailureReason.UNKNOWN_TYPE, f"unknown specialization {spec_id!r}")
        if hero.specialization is not None:
            return CommandResult.failure(FailureReason.NOT_ELIGIBLE, "hero already specialized")
        if spec.hero_class != hero.hero_class:
            return CommandResult.failure(
                FailureReason.NOT_ELIGIBLE, f"{spec.name} is not a {hero.hero_class} specialization",
            )
        if hero.level < spec.unlock_level:
            return CommandResult.failure(
                FailureReason.NOT_ELIGIBLE, f"{spec.name} unlocks at level {spec.unlock_level}",
            )

        hero.specialization = spec.spec_id
        hero.max_health += spec.health_bonus
        hero.health += spec.health_bonus
        hero.damage += spec.damage_bonus
        hero.speed += spec.speed_bonus
        logger.info("Hero %d specialized as %s", hero.id, spec.name)
        return CommandResult.success(hero.id, f"hero specialized as {spec.name}")

    # ------------------------------------------------------------------
    # Equipment
    # ------------------------------------------------------------------

    @staticmethod
    def equip(hero: Hero, equipment_id: str, resources: Resources) -> CommandResult:
        """Buy ``equipment_id`` from the treasury and put it in its slot.

        The replaced item is discarded; health moves by the difference of the
        two items' health bonuses and stays within the new maximum.
        """
        item = EQUIPMENT_DEFS.get(equipment_id)
        if item is None:
            return CommandResult.failure(FailureReason.UNKNOWN_TYPE, f"unknown equipment {equipment_id!r}")
        if not resources.spend(gold=item.cost):
            return CommandResult.failure(FailureReason.INSUFFICIENT_RESOURCES)

        old_id = hero.equipped_in(item.slot)
        old = EQUIPMENT_DEFS.get(old_id) if old_id is not None else None
        health_delta = item.health_bonus - (old.health_bonus if old is not None else 0)

        setattr(hero, item.slot.value, item.equipment_id)
        hero.health = max(1, min(hero.effective_max_health(), hero.health + health_delta))
        logger.info("Hero %d equipped %s", hero.id, item.name)
        return CommandResult.success(hero.id, f"equipped {item.name}")
