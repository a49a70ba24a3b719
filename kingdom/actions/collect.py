"""CollectAction: a hero next to (or on) a flag claims its reward."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from kingdom.actions.base import ActionProposal
from kingdom.core.enums import ActionType

if TYPE_CHECKING:
    from kingdom.config import SimulationConfig
    from kingdom.core.world_state import WorldState
    from kingdom.systems.progression import Progression

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CollectReport:
    hero_id: int
    flag_id: int
    flag_type: str
    reward: int


class CollectAction:
    """Handler for COLLECT proposals."""

    def __init__(self, config: SimulationConfig, progression: Progression) -> None:
        self._config = config
        self._progression = progression

    @staticmethod
    def validate(proposal: ActionProposal, world: WorldState) -> bool:
        if proposal.verb != ActionType.COLLECT:
            return False
        hero = world.heroes.get(proposal.actor_id)
        flag = world.flags.get(proposal.target)
        return hero is not None and flag is not None and hero.pos.manhattan(flag.pos) <= 1

    def apply(self, proposal: ActionProposal, world: WorldState) -> CollectReport | None:
        hero = world.heroes.get(proposal.actor_id)
        flag = world.flags.get(proposal.target)
        if hero is None or flag is None:
            return None
        hero.gold += flag.reward
        world.statistics.flags_collected += 1
        self._progression.adjust_morale(hero, self._config.morale_on_flag)
        world.remove_entity(flag)
        logger.info(
            "Tick %d: Hero %d collected %s flag %d (+%d gold)",
            world.tick, hero.id, flag.flag_type, flag.id, flag.reward,
        )
        return CollectReport(hero_id=hero.id, flag_id=flag.id, flag_type=flag.flag_type, reward=flag.reward)
