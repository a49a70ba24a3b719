"""EnemyBrain: march on the castle, with the occasional random stagger."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kingdom.actions.base import ActionProposal
from kingdom.ai.movement import random_step, step_toward
from kingdom.core.enums import ActionType, Domain

if TYPE_CHECKING:
    from kingdom.config import SimulationConfig
    from kingdom.core.models import Enemy
    from kingdom.core.world_state import WorldState
    from kingdom.systems.rng import DeterministicRNG


class EnemyBrain:
    """No scoring and no memory."""

    __slots__ = ("_config", "_rng")

    def __init__(self, config: SimulationConfig, rng: DeterministicRNG) -> None:
        self._config = config
        self._rng = rng

    def decide(self, enemy: Enemy, world: WorldState) -> ActionProposal:
        tick = world.tick
        castle = world.castle()
        if castle is not None and self._rng.next_bool(
            Domain.ENEMY_AI, enemy.id, tick, self._config.enemy_advance_chance,
        ):
            dest = step_toward(enemy.pos, castle.pos, world.grid)
            return ActionProposal(
                enemy.id, ActionType.MOVE, target=dest, reason="advancing on the castle",
                actor_kind="enemy", destination=castle.pos,
            )

        dest = random_step(world, enemy, self._rng, Domain.ENEMY_AI, tick)
        if dest is None:
            return ActionProposal(enemy.id, ActionType.REST, reason="waiting", actor_kind="enemy")
        return ActionProposal(enemy.id, ActionType.MOVE, target=dest, reason="wandering", actor_kind="enemy")
