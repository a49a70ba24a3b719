"""Validates and applies proposals by dispatching on their verb."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from kingdom.actions.base import ActionProposal
from kingdom.actions.collect import CollectAction, CollectReport
from kingdom.actions.combat import CombatAction, CombatReport
from kingdom.actions.move import MoveAction
from kingdom.actions.rest import RestAction
from kingdom.core.enums import ActionType

if TYPE_CHECKING:
    from kingdom.ai.tactics import Tactics
    from kingdom.config import SimulationConfig
    from kingdom.core.world_state import WorldState
    from kingdom.systems.progression import Progression
    from kingdom.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Resolution:
    applied: bool
    report: CombatReport | CollectReport | None = None


class ActionResolver:
    """Applies one proposal at a time; proposals are processed in the order given."""

    __slots__ = ("_combat", "_collect", "_rest")

    def __init__(
        self,
        config: SimulationConfig,
        rng: DeterministicRNG,
        progression: Progression,
        tactics: Tactics | None = None,
    ) -> None:
        self._combat = CombatAction(config, rng, progression, tactics)
        self._collect = CollectAction(config, progression)
        self._rest = RestAction(config, progression)

    @property
    def combat(self) -> CombatAction:
        return self._combat

    def resolve(self, proposal: ActionProposal, world: WorldState) -> Resolution:
        match proposal.verb:
            case ActionType.REST:
                if RestAction.validate(proposal, world):
                    self._rest.apply(proposal, world)
                    return Resolution(True)

            case ActionType.MOVE:
                if MoveAction.validate(proposal, world):
                    return Resolution(MoveAction.apply(proposal, world))

            case ActionType.ATTACK:
                if self._combat.validate(proposal, world):
                    return Resolution(True, self._combat.apply(proposal, world))

            case ActionType.COLLECT:
                if CollectAction.validate(proposal, world):
                    return Resolution(True, self._collect.apply(proposal, world))

        logger.debug("Rejected: %s", proposal)
        return Resolution(False)
