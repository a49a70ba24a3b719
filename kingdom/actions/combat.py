"""CombatAction: validates attack proposals and resolves hero/enemy exchanges.

One exchange is: the hero strikes; a surviving enemy strikes back. Exactly
one of these holds afterwards:
  - the enemy was removed and the hero gained gold and experience, or
  - the hero lost health (and was respawned or removed at 0).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from kingdom.actions.base import ActionProposal
from kingdom.actions.damage import enemy_strike, hero_strike
from kingdom.ai.tactics import Tactics
from kingdom.core.buildings import guild_types_for
from kingdom.core.enums import ActionType, CombatOutcome
from kingdom.core.models import CombatRecord

if TYPE_CHECKING:
    from kingdom.config import SimulationConfig
    from kingdom.core.models import Building, Enemy, Hero
    from kingdom.core.world_state import WorldState
    from kingdom.systems.progression import Progression
    from kingdom.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)

FATE_ALIVE = "alive"
FATE_RESPAWNED = "respawned"
FATE_FALLEN = "fallen"


@dataclass(frozen=True, slots=True)
class CombatReport:
    """Everything observers need to know about one exchange."""

    hero_id: int
    enemy_id: int
    enemy_type: str
    outcome: CombatOutcome
    damage_dealt: int
    damage_taken: int = 0
    critical: bool = False
    gold_gained: int = 0
    experience_gained: int = 0
    kingdom_gold: int = 0
    flag_id: int | None = None
    hero_fate: str = FATE_ALIVE
    leveled_up: bool = False
    new_level: int = 0


class CombatAction:
    """Stateful only in its collaborators; holds no per-combat state."""

    def __init__(
        self,
        config: SimulationConfig,
        rng: DeterministicRNG,
        progression: Progression,
        tactics: Tactics | None = None,
    ) -> None:
        self._config = config
        self._rng = rng
        self._progression = progression
        self._tactics = tactics or Tactics(config)

    def validate(self, proposal: ActionProposal, world: WorldState) -> bool:
        if proposal.verb != ActionType.ATTACK:
            return False
        hero = world.heroes.get(proposal.actor_id)
        enemy = world.enemies.get(proposal.target)
        if hero is None or enemy is None:
            logger.debug("Hero %d attack on %s failed: participant missing", proposal.actor_id, proposal.target)
            return False
        if hero.pos.manhattan(enemy.pos) > 1:
            logger.debug("Hero %d attack on %d failed: out of range", hero.id, enemy.id)
            return False
        return True

    def apply(self, proposal: ActionProposal, world: WorldState) -> CombatReport | None:
        hero = world.heroes.get(proposal.actor_id)
        enemy = world.enemies.get(proposal.target)
        if hero is None or enemy is None:
            return None
        return self.resolve(hero, enemy, world)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, hero: Hero, enemy: Enemy, world: WorldState) -> CombatReport:
        cfg = self._config
        tick = world.tick

        bonus = self._tactics.bonus(world, hero, enemy)
        strike = hero_strike(hero, enemy, bonus, cfg, self._rng, tick)
        dealt = strike.amount
        enemy.health -= dealt

        if enemy.health <= 0:
            return self._victory(hero, enemy, world, dealt, strike.critical)

        counter = enemy_strike(enemy, hero, cfg, self._rng, tick)
        taken = counter.amount
        hero.health -= taken

        if hero.health <= 0:
            return self._defeat(hero, enemy, world, dealt, taken, strike.critical)

        xp = math.floor(dealt * cfg.combat_xp_rate)
        self._progression.grant_experience(hero, xp)
        hero.combat_history.append(CombatRecord(
            tick=tick, enemy_id=enemy.id, enemy_type=enemy.enemy_type,
            outcome=CombatOutcome.EXCHANGE, damage_dealt=dealt, damage_taken=taken,
            experience_gained=xp, critical=strike.critical,
        ))
        leveled = self._progression.check_level_up(hero, world.statistics)
        logger.debug(
            "Tick %d: Hero %d and %s %d traded blows (%d dealt, %d taken)",
            tick, hero.id, enemy.enemy_type, enemy.id, dealt, taken,
        )
        return CombatReport(
            hero_id=hero.id, enemy_id=enemy.id, enemy_type=enemy.enemy_type,
            outcome=CombatOutcome.EXCHANGE, damage_dealt=dealt, damage_taken=taken,
            critical=strike.critical, experience_gained=xp,
            leveled_up=leveled, new_level=hero.level,
        )

    def _victory(self, hero: Hero, enemy: Enemy, world: WorldState, dealt: int, critical: bool) -> CombatReport:
        cfg = self._config
        tick = world.tick
        reward = enemy.reward
        xp = math.floor(reward * cfg.xp_reward_multiplier)
        kingdom_share = math.floor(reward * cfg.kingdom_reward_share)

        hero.gold += reward
        self._progression.grant_experience(hero, xp)
        world.resources.add(gold=kingdom_share)
        world.statistics.total_gold_earned += kingdom_share
        world.statistics.enemies_defeated += 1
        self._progression.adjust_morale(hero, cfg.morale_on_victory)
        hero.combat_history.append(CombatRecord(
            tick=tick, enemy_id=enemy.id, enemy_type=enemy.enemy_type,
            outcome=CombatOutcome.VICTORY, damage_dealt=dealt,
            experience_gained=xp, critical=critical,
        ))
        world.remove_entity(enemy)

        # An attack bounty planted on the enemy's cell is paid out too.
        flag_id = None
        flag_ref = world.grid.flag_at(enemy.pos)
        flag = world.flags.get(flag_ref) if flag_ref is not None else None
        if flag is not None and flag.flag_type == "attack":
            flag_id = flag.id
            hero.gold += flag.reward
            world.statistics.flags_collected += 1
            world.remove_entity(flag)

        leveled = self._progression.check_level_up(hero, world.statistics)
        logger.info(
            "Tick %d: Hero %d (%s) defeated %s %d%s (+%d gold, +%d xp)",
            tick, hero.id, hero.hero_class, enemy.enemy_type, enemy.id,
            " with a critical hit" if critical else "", reward, xp,
        )
        return CombatReport(
            hero_id=hero.id, enemy_id=enemy.id, enemy_type=enemy.enemy_type,
            outcome=CombatOutcome.VICTORY, damage_dealt=dealt, critical=critical,
            gold_gained=reward, experience_gained=xp, kingdom_gold=kingdom_share,
            flag_id=flag_id, leveled_up=leveled, new_level=hero.level,
        )

    def _defeat(
        self, hero: Hero, enemy: Enemy, world: WorldState, dealt: int, taken: int, critical: bool,
    ) -> CombatReport:
        cfg = self._config
        tick = world.tick
        hero.combat_history.append(CombatRecord(
            tick=tick, enemy_id=enemy.id, enemy_type=enemy.enemy_type,
            outcome=CombatOutcome.DEFEAT, damage_dealt=dealt, damage_taken=taken, critical=critical,
        ))
        self._progression.adjust_morale(hero, -cfg.morale_on_defeat)

        guild = self._respawn_guild(hero, world)
        cell = world.hero_landing_cell(guild.pos, hero.id) if guild is not None else None
        if cell is not None and world.resources.spend(gold=cfg.respawn_fee):
            hero.health = hero.effective_max_health()
            hero.move_cooldown = 0
            world.relocate(hero, cell)
            fate = FATE_RESPAWNED
            logger.info(
                "Tick %d: Hero %d fell to %s %d and respawned at guild %d for %d gold",
                tick, hero.id, enemy.enemy_type, enemy.id, guild.id, cfg.respawn_fee,
            )
        else:
            world.remove_entity(hero)
            world.resources.population = max(0, world.resources.population - 1)
            world.statistics.heroes_lost += 1
            fate = FATE_FALLEN
            logger.info("Tick %d: Hero %d fell to %s %d", tick, hero.id, enemy.enemy_type, enemy.id)

        return CombatReport(
            hero_id=hero.id, enemy_id=enemy.id, enemy_type=enemy.enemy_type,
            outcome=CombatOutcome.DEFEAT, damage_dealt=dealt, damage_taken=taken,
            critical=critical, hero_fate=fate, new_level=hero.level,
        )

    @staticmethod
    def _respawn_guild(hero: Hero, world: WorldState) -> Building | None:
        """The hero's own guild if it still stands, else any guild of its archetype."""
        if hero.guild_id is not None and hero.guild_id in world.buildings:
            return world.buildings[hero.guild_id]
        for guild_type in guild_types_for(hero.hero_class):
            guilds = world.buildings_of_type(guild_type)
            if guilds:
                return guilds[0]
        return None
