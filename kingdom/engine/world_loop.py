"""WorldLoop: the authoritative tick engine.

Phase cycle:
  1. Heroes   - each ready hero acts with ``hero_act_chance``
  2. Enemies  - each ready enemy acts with ``enemy_act_chance``
  3. Engagement - heroes sharing a cell with an enemy fight it
  4. Economy  - income every ``income_interval`` ticks, spawn attempt every ``spawn_interval``
  5. Upkeep   - morale decay, game-over check, advance tick
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kingdom.actions.collect import CollectReport
from kingdom.actions.combat import FATE_RESPAWNED, CombatReport
from kingdom.ai.brain import HeroBrain
from kingdom.ai.enemy_brain import EnemyBrain
from kingdom.ai.tactics import Tactics
from kingdom.core.enums import ActionType, CombatOutcome, Domain
from kingdom.engine.action_resolver import ActionResolver
from kingdom.systems.economy import collect_income
from kingdom.systems.generator import EntityGenerator
from kingdom.systems.progression import Progression
from kingdom.utils.event_log import SimEvent

if TYPE_CHECKING:
    from kingdom.config import SimulationConfig
    from kingdom.core.world_state import WorldState
    from kingdom.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)

_SPAWN_ROLL_SALT = 9


class WorldLoop:
    """The heartbeat of the kingdom. Single-threaded mutation of WorldState."""

    __slots__ = (
        "_config",
        "_world",
        "_rng",
        "_progression",
        "_hero_brain",
        "_enemy_brain",
        "_resolver",
        "_generator",
        "_tick_events",
    )

    def __init__(
        self,
        config: SimulationConfig,
        world: WorldState,
        rng: DeterministicRNG,
        progression: Progression | None = None,
        generator: EntityGenerator | None = None,
    ) -> None:
        self._config = config
        self._world = world
        self._rng = rng
        self._progression = progression or Progression(config)
        tactics = Tactics(config)
        self._hero_brain = HeroBrain(config, rng, tactics)
        self._enemy_brain = EnemyBrain(config, rng)
        self._resolver = ActionResolver(config, rng, self._progression, tactics)
        self._generator = generator or EntityGenerator(config, rng)
        self._tick_events: list[SimEvent] = []

    @property
    def world(self) -> WorldState:
        return self._world

    @world.setter
    def world(self, world: WorldState) -> None:
        self._world = world

    @property
    def resolver(self) -> ActionResolver:
        return self._resolver

    @property
    def tick_events(self) -> list[SimEvent]:
        """Events emitted during the most recent tick."""
        return self._tick_events

    def _emit(self, category: str, message: str,
              entity_ids: tuple[int, ...] = (), metadata: dict | None = None) -> None:
        self._tick_events.append(SimEvent(
            tick=self._world.tick,
            category=category,
            message=message,
            entity_ids=entity_ids,
            metadata=metadata,
        ))

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick_once(self) -> bool:
        """Execute a single tick. Returns False once the game is over (nothing mutated)."""
        world = self._world
        cfg = self._config
        self._tick_events = []

        if world.game_over:
            return False
        if cfg.max_ticks and world.tick >= cfg.max_ticks:
            logger.info("Tick %d: Max ticks reached.", world.tick)
            return False

        fought: set[int] = set()
        self._heroes_phase(fought)
        self._enemies_phase()
        self._engagement_phase(fought)
        self._economy_phase()
        self._upkeep_phase()

        world.tick += 1
        return not world.game_over

    # -- phases --

    def _heroes_phase(self, fought: set[int]) -> None:
        world = self._world
        cfg = self._config
        tick = world.tick
        for hero in list(world.heroes.values()):
            if hero.id not in world.heroes:
                continue
            if hero.move_cooldown > 0:
                hero.move_cooldown -= 1
                continue
            if not self._rng.next_bool(Domain.HERO_ACT, hero.id, tick, cfg.hero_act_chance):
                continue

            proposal = self._hero_brain.decide(hero, world)
            resolution = self._resolver.resolve(proposal, world)
            if proposal.verb == ActionType.ATTACK and resolution.applied:
                fought.add(hero.id)
            self._report(resolution.report)

            if hero.id not in world.heroes:
                continue
            hero.last_action = proposal.reason
            if proposal.new_state is not None:
                hero.state = proposal.new_state
            if proposal.destination is not None:
                hero.target = proposal.destination
            hero.move_cooldown = max(0, cfg.hero_cooldown_base - hero.effective_speed())

    def _enemies_phase(self) -> None:
        world = self._world
        cfg = self._config
        tick = world.tick
        for enemy in list(world.enemies.values()):
            if enemy.id not in world.enemies:
                continue
            if enemy.move_cooldown > 0:
                enemy.move_cooldown -= 1
                continue
            if not self._rng.next_bool(Domain.ENEMY_ACT, enemy.id, tick, cfg.enemy_act_chance):
                continue
            self._resolver.resolve(self._enemy_brain.decide(enemy, world), world)
            enemy.move_cooldown = cfg.enemy_move_cooldown

    def _engagement_phase(self, fought: set[int]) -> None:
        """Heroes that share a cell with an enemy and have not fought yet fight now."""
        world = self._world
        for hero in list(world.heroes.values()):
            if hero.id in fought or hero.id not in world.heroes:
                continue
            enemy_id = world.grid.enemy_at(hero.pos)
            if enemy_id is None:
                continue
            enemy = world.enemies[enemy_id]
            fought.add(hero.id)
            hero.last_action = f"fighting {enemy.enemy_type} #{enemy.id}"
            self._report(self._resolver.combat.resolve(hero, enemy, world))

    def _economy_phase(self) -> None:
        world = self._world
        cfg = self._config
        elapsed = world.tick + 1

        if cfg.income_interval > 0 and elapsed % cfg.income_interval == 0:
            income = collect_income(world)
            self._emit(
                "income",
                f"Income collected: +{income.gold} gold, +{income.mana} mana, +{income.supplies} supplies",
                metadata={"gold": income.gold, "mana": income.mana, "supplies": income.supplies},
            )

        if cfg.spawn_interval > 0 and elapsed % cfg.spawn_interval == 0:
            if self._rng.next_bool(Domain.SPAWN, 0, world.tick, cfg.spawn_chance, salt=_SPAWN_ROLL_SALT):
                enemy = self._generator.spawn_enemy(world)
                if enemy is not None:
                    self._emit(
                        "enemy_spawned",
                        f"A {enemy.enemy_type} appeared at {enemy.pos}",
                        (enemy.id,),
                        {"enemy_type": enemy.enemy_type},
                    )

    def _upkeep_phase(self) -> None:
        world = self._world
        for hero in world.heroes.values():
            self._progression.adjust_morale(hero, -self._config.morale_decay)
        self._check_game_over()

    def _check_game_over(self) -> None:
        world = self._world
        castle = world.castle()
        reason = ""
        if castle is None:
            reason = "The castle has fallen."
        else:
            for enemy in world.enemies.values():
                if enemy.pos.manhattan(castle.pos) <= 1:
                    reason = f"A {enemy.enemy_type} reached the castle."
                    break
        if reason:
            world.game_over = True
            world.game_over_reason = reason
            self._emit("game_over", reason)
            logger.info("Tick %d: GAME OVER - %s", world.tick, reason)

    # ------------------------------------------------------------------
    # Reports -> events
    # ------------------------------------------------------------------

    def _report(self, report: CombatReport | CollectReport | None) -> None:
        match report:
            case None:
                return
            case CollectReport():
                self._emit(
                    "flag_collected",
                    f"Hero #{report.hero_id} collected a {report.flag_type} flag (+{report.reward} gold)",
                    (report.hero_id, report.flag_id),
                    {"reward": report.reward},
                )
            case CombatReport():
                self._report_combat(report)

    def _report_combat(self, r: CombatReport) -> None:
        ids = (r.hero_id, r.enemy_id)
        crit = " Critical hit!" if r.critical else ""
        match r.outcome:
            case CombatOutcome.VICTORY:
                self._emit(
                    "enemy_defeated",
                    f"Hero #{r.hero_id} defeated {r.enemy_type} #{r.enemy_id} for {r.gold_gained} gold.{crit}",
                    ids,
                    {"damage": r.damage_dealt, "gold": r.gold_gained,
                     "experience": r.experience_gained, "kingdom_gold": r.kingdom_gold},
                )
                if r.flag_id is not None:
                    self._emit(
                        "flag_collected",
                        f"Hero #{r.hero_id} completed attack flag #{r.flag_id}",
                        (r.hero_id, r.flag_id),
                    )
            case CombatOutcome.DEFEAT:
                self._emit(
                    "hero_defeated",
                    f"Hero #{r.hero_id} was defeated by {r.enemy_type} #{r.enemy_id}.",
                    ids,
                    {"damage_taken": r.damage_taken, "fate": r.hero_fate},
                )
                if r.hero_fate == FATE_RESPAWNED:
                    self._emit("hero_respawned", f"Hero #{r.hero_id} respawned at their guild.", (r.hero_id,))
            case _:
                self._emit(
                    "combat",
                    f"Hero #{r.hero_id} hit {r.enemy_type} #{r.enemy_id} for {r.damage_dealt} "
                    f"and took {r.damage_taken}.{crit}",
                    ids,
                    {"damage": r.damage_dealt, "damage_taken": r.damage_taken},
                )
        if r.leveled_up:
            self._emit("level_up", f"Hero #{r.hero_id} reached level {r.new_level}!", (r.hero_id,),
                       {"level": r.new_level})
