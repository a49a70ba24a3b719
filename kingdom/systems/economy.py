"""Kingdom economy: periodic income, building upgrades, flag refunds."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from kingdom.core.buildings import BUILDING_DEFS
from kingdom.core.enums import FailureReason
from kingdom.core.results import CommandResult

if TYPE_CHECKING:
    from kingdom.core.world_state import WorldState

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IncomeReport:
    gold: int = 0
    mana: int = 0
    supplies: int = 0


def collect_income(world: WorldState) -> IncomeReport:
    """Add every building's production to the treasury."""
    gold = sum(b.gold_income for b in world.buildings.values())
    mana = sum(b.mana_income for b in world.buildings.values())
    supplies = sum(b.supplies_income for b in world.buildings.values())
    world.resources.add(gold=gold, mana=mana, supplies=supplies)
    world.statistics.total_gold_earned += gold
    logger.debug("Tick %d: Income +%d gold, +%d mana, +%d supplies", world.tick, gold, mana, supplies)
    return IncomeReport(gold=gold, mana=mana, supplies=supplies)


def upgrade_building(world: WorldState, building_id: int) -> CommandResult:
    building = world.buildings.get(building_id)
    if building is None:
        return CommandResult.failure(FailureReason.NOT_FOUND, f"no building #{building_id}")
    bdef = BUILDING_DEFS[building.building_type]
    upgrade = bdef.upgrade_for(building.level + 1)
    if building.level >= bdef.max_level or upgrade is None:
        return CommandResult.failure(FailureReason.MAX_LEVEL, f"{bdef.name} cannot be upgraded further")
    if not world.resources.spend(gold=upgrade.gold_cost, supplies=upgrade.supplies_cost):
        return CommandResult.failure(FailureReason.INSUFFICIENT_RESOURCES)

    building.level = upgrade.level
    building.gold_income += upgrade.gold_bonus
    building.mana_income += upgrade.mana_bonus
    building.supplies_income += upgrade.supplies_bonus
    building.housing += upgrade.housing_bonus
    world.resources.max_population += upgrade.housing_bonus
    logger.info("Tick %d: %s %d upgraded to %s (level %d)", world.tick, bdef.name, building.id, upgrade.name, building.level)
    return CommandResult.success(building.id, f"{bdef.name} upgraded to {upgrade.name}")


def cancel_flag(world: WorldState, flag_id: int, refund_ratio: float) -> CommandResult:
    flag = world.flags.get(flag_id)
    if flag is None:
        return CommandResult.failure(FailureReason.NOT_FOUND, f"no flag #{flag_id}")
    refund = math.floor(flag.cost * refund_ratio)
    world.remove_entity(flag)
    world.resources.add(gold=refund)
    logger.info("Tick %d: Flag %d cancelled, %d gold refunded", world.tick, flag.id, refund)
    return CommandResult.success(flag.id, f"flag cancelled, {refund} gold refunded")
