"""HeroBrain: per-tick decision engine for heroes.

Nothing about the decision is remembered between ticks. Each call
re-derives the hero's situation from health, position and surroundings:

  1. low-morale gate          -> rest
  2. perception               -> enemies / flags / allies in range
  3. health gate              -> retreating / neutral / aggressive
  4-5. target scoring         -> best enemy, best flag
  6. decision, by priority    -> retreat, engage, collect, support, patrol, guard
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kingdom.actions.base import ActionProposal
from kingdom.ai.movement import random_step, step_away, step_toward
from kingdom.ai.perception import Perception
from kingdom.ai.scorers import EnemyScorer, FlagScorer
from kingdom.ai.tactics import Tactics
from kingdom.core.classes import CLASS_DEFS
from kingdom.core.enums import ActionType, Domain, HeroState

if TYPE_CHECKING:
    from kingdom.config import SimulationConfig
    from kingdom.core.models import Hero, Vector2
    from kingdom.core.world_state import WorldState
    from kingdom.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)

DEFAULT_SIGHT = 4


class HeroBrain:
    """Turns a hero and the current world into one ActionProposal."""

    __slots__ = ("_config", "_rng", "_tactics", "_enemy_scorer", "_flag_scorer")

    def __init__(self, config: SimulationConfig, rng: DeterministicRNG, tactics: Tactics | None = None) -> None:
        self._config = config
        self._rng = rng
        self._tactics = tactics or Tactics(config)
        self._enemy_scorer = EnemyScorer(self._tactics)
        self._flag_scorer = FlagScorer(config)

    def decide(self, hero: Hero, world: WorldState) -> ActionProposal:
        cfg = self._config

        # 1. Gate
        if hero.morale < cfg.low_morale_threshold:
            return ActionProposal(hero.id, ActionType.REST, reason="resting", new_state=HeroState.RESTING)

        # 2. Perception
        class_def = CLASS_DEFS.get(hero.hero_class)
        sight = class_def.sight_range if class_def is not None else DEFAULT_SIGHT
        enemies = Perception.nearby(hero.pos, world.enemies.values(), sight)
        flags = Perception.nearby(hero.pos, world.flags.values(), cfg.flag_sight_range)
        allies = [
            h for h in Perception.nearby(hero.pos, world.heroes.values(), cfg.support_range)
            if h.id != hero.id
        ]

        # 3. Health gate
        ratio = hero.health_ratio
        retreating = ratio < cfg.retreat_threshold
        aggressive = ratio > cfg.aggression_threshold

        # 6a. Retreat
        if retreating and enemies:
            threat = Perception.centroid(enemies)
            dest = step_away(hero.pos, threat, world.grid)
            return self._move(hero, dest, "retreating", HeroState.RETREATING)

        # 4. + 6b. Engage
        best_enemy = self._enemy_scorer.best(world, hero, enemies, sight) if enemies else None
        if best_enemy is not None and (aggressive or best_enemy.score > cfg.engage_threshold):
            enemy = world.enemies[best_enemy.target_id]
            label = f"{enemy.enemy_type} #{enemy.id}"
            if hero.pos.manhattan(enemy.pos) <= 1:
                return ActionProposal(
                    hero.id, ActionType.ATTACK, target=enemy.id,
                    reason=f"attacking {label}", new_state=HeroState.ATTACKING,
                )
            goal = self._tactics.approach_cell(world, hero, enemy) or enemy.pos
            dest = step_toward(hero.pos, goal, world.grid)
            return self._move(hero, dest, f"pursuing {label}", HeroState.PURSUING, goal)

        # 5. + 6c. Collect
        best_flag = self._flag_scorer.best(hero, flags, bool(enemies)) if flags else None
        if best_flag is not None and best_flag.score > cfg.collect_threshold:
            flag = world.flags[best_flag.target_id]
            label = f"{flag.flag_type} flag #{flag.id}"
            if hero.pos.manhattan(flag.pos) <= 1:
                return ActionProposal(
                    hero.id, ActionType.COLLECT, target=flag.id,
                    reason=f"collecting {label}", new_state=HeroState.COLLECTING,
                )
            dest = step_toward(hero.pos, flag.pos, world.grid)
            return self._move(hero, dest, f"moving to {label}", HeroState.COLLECTING, flag.pos)

        # 6d. Support / patrol / guard
        if not allies:
            ally = Perception.nearest(hero.pos, (h for h in world.heroes.values() if h.id != hero.id))
            if ally is not None:
                dest = step_toward(hero.pos, ally.pos, world.grid)
                return self._move(
                    hero, dest, f"moving to support {ally.hero_class} #{ally.id}",
                    HeroState.SUPPORTING, ally.pos,
                )

        tick = world.tick
        if self._rng.next_bool(Domain.PATROL, hero.id, tick, cfg.patrol_move_chance):
            dest = random_step(world, hero, self._rng, Domain.PATROL, tick)
            if dest is not None:
                return self._move(hero, dest, "patrolling", HeroState.PATROLLING)

        return ActionProposal(hero.id, ActionType.REST, reason="standing guard", new_state=HeroState.GUARDING)

    @staticmethod
    def _move(
        hero: Hero,
        dest: Vector2,
        reason: str,
        state: HeroState,
        goal: Vector2 | None = None,
    ) -> ActionProposal:
        return ActionProposal(
            hero.id, ActionType.MOVE, target=dest, reason=reason,
            new_state=state, destination=goal if goal is not None else dest,
        )
