"""RestAction: the hero stays put and recovers a little morale."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kingdom.actions.base import ActionProposal
from kingdom.core.enums import ActionType, HeroState

if TYPE_CHECKING:
    from kingdom.config import SimulationConfig
    from kingdom.core.world_state import WorldState
    from kingdom.systems.progression import Progression


class RestAction:
    """Stateless handler for REST proposals (resting, standing guard, idling)."""

    def __init__(self, config: SimulationConfig, progression: Progression) -> None:
        self._config = config
        self._progression = progression

    @staticmethod
    def validate(proposal: ActionProposal, world: WorldState) -> bool:
        if proposal.verb != ActionType.REST:
            return False
        if proposal.actor_kind == "enemy":
            return proposal.actor_id in world.enemies
        return proposal.actor_id in world.heroes

    def apply(self, proposal: ActionProposal, world: WorldState) -> None:
        if proposal.actor_kind != "hero" or proposal.new_state != HeroState.RESTING:
            return
        hero = world.heroes.get(proposal.actor_id)
        if hero is not None:
            self._progression.adjust_morale(hero, self._config.rest_morale_regen)
