"""Action system: proposals, validation, and execution."""

from kingdom.actions.base import ActionProposal
from kingdom.actions.collect import CollectAction, CollectReport
from kingdom.actions.combat import CombatAction, CombatReport
from kingdom.actions.move import MoveAction
from kingdom.actions.rest import RestAction

__all__ = [
    "ActionProposal",
    "CollectAction",
    "CollectReport",
    "CombatAction",
    "CombatReport",
    "MoveAction",
    "RestAction",
]
