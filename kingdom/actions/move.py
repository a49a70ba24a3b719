"""MoveAction: validates and applies single-step movement proposals."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kingdom.actions.base import ActionProposal
from kingdom.core.enums import ActionType

if TYPE_CHECKING:
    from kingdom.core.models import Enemy, Hero, Vector2
    from kingdom.core.world_state import WorldState

logger = logging.getLogger(__name__)


def _actor(proposal: ActionProposal, world: WorldState) -> Hero | Enemy | None:
    if proposal.actor_kind == "enemy":
        return world.enemies.get(proposal.actor_id)
    return world.heroes.get(proposal.actor_id)


class MoveAction:
    """Stateless handler for MOVE proposals."""

    @staticmethod
    def validate(proposal: ActionProposal, world: WorldState) -> bool:
        if proposal.verb != ActionType.MOVE:
            return False
        actor = _actor(proposal, world)
        if actor is None or not actor.alive:
            return False
        target: Vector2 = proposal.target
        if target.manhattan(actor.pos) > 1:
            logger.debug("%s %d cannot jump to %s", proposal.actor_kind, proposal.actor_id, target)
            return False
        if not world.can_enter(actor, target):
            logger.debug("%s %d blocked at %s", proposal.actor_kind, proposal.actor_id, target)
            return False
        return True

    @staticmethod
    def apply(proposal: ActionProposal, world: WorldState) -> bool:
        actor = _actor(proposal, world)
        if actor is None:
            return False
        return world.move_entity(actor, proposal.target)
