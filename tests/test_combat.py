"""Tests for combat resolution: damage rolls, victory, defeat and respawn."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from kingdom.actions.base import ActionProposal
from kingdom.actions.combat import FATE_FALLEN, FATE_RESPAWNED, CombatAction
from kingdom.actions.damage import DamageRoll
from kingdom.config import SimulationConfig
from kingdom.core.enums import ActionType, CombatOutcome, Domain
from kingdom.core.models import Vector2
from kingdom.engine.action_resolver import ActionResolver
from kingdom.systems.progression import Progression
from kingdom.systems.rng import DeterministicRNG
from tests.helpers.kingdom_builder import (
    ScriptedRNG,
    add_building,
    add_enemy,
    add_flag,
    add_hero,
    make_world,
)

CONFIG = SimulationConfig()

# Salts used by one exchange against enemy #1 by hero #1.
CRIT_SALT = 8
HERO_NOISE_SALT = 9
ENEMY_NOISE_SALT = 10


def _make_combat(script=None, default=0.99) -> CombatAction:
    return CombatAction(CONFIG, ScriptedRNG(script, default=default), Progression(CONFIG))


def _no_noise(crit: bool = False) -> dict:
    return {
        (Domain.COMBAT, CRIT_SALT): 0.0 if crit else 0.99,
        (Domain.COMBAT, HERO_NOISE_SALT): 0.0,
        (Domain.COMBAT, ENEMY_NOISE_SALT): 0.0,
    }


class TestDamageRoll:
    def test_amount_is_floored(self):
        assert DamageRoll(base=8.5, noise=1).amount == 9
        assert DamageRoll(base=8.9, noise=0).amount == 8

    def test_amount_is_never_negative(self):
        assert DamageRoll(base=-5.0, noise=0).amount == 0


class TestVictory:
    def test_twenty_damage_kills_fifteen_health(self):
        world = make_world()
        hero = add_hero(world, (3, 3), damage=20)
        enemy = add_enemy(world, (4, 3), health=15, reward=20)

        report = _make_combat(_no_noise()).resolve(hero, enemy, world)

        assert report.outcome == CombatOutcome.VICTORY
        assert report.damage_dealt == 20
        assert enemy.id not in world.enemies
        assert world.grid.enemy_at(Vector2(4, 3)) is None
        assert hero.gold == 20
        assert hero.experience == 30
        assert world.resources.gold == 510
        assert world.statistics.enemies_defeated == 1
        assert hero.combat_history[-1].outcome == CombatOutcome.VICTORY
        world.check_invariants()

    def test_attack_bounty_on_enemy_cell_is_paid(self):
        world = make_world()
        hero = add_hero(world, (3, 3), damage=20)
        enemy = add_enemy(world, (4, 3), health=15, reward=20)
        flag = add_flag(world, "attack", (4, 3), reward=50)

        report = _make_combat(_no_noise()).resolve(hero, enemy, world)

        assert report.flag_id == flag.id
        assert hero.gold == 70
        assert flag.id not in world.flags
        assert world.statistics.flags_collected == 1
        assert world.resources.gold == 510

    def test_other_flags_are_left_alone(self):
        world = make_world()
        hero = add_hero(world, (3, 3), damage=20)
        enemy = add_enemy(world, (4, 3), health=15)
        flag = add_flag(world, "explore", (4, 3))
        _make_combat(_no_noise()).resolve(hero, enemy, world)
        assert flag.id in world.flags


class TestCriticalHits:
    def test_critical_doubles_pre_noise_damage(self):
        world = make_world()
        hero = add_hero(world, (3, 3), damage=20)
        enemy = add_enemy(world, (4, 3), health=200, damage=1)
        report = _make_combat(_no_noise(crit=True)).resolve(hero, enemy, world)
        assert report.critical
        assert report.damage_dealt == 40
        assert enemy.health == 160

    def test_normal_hit(self):
        world = make_world()
        hero = add_hero(world, (3, 3), damage=20)
        enemy = add_enemy(world, (4, 3), health=200, damage=1)
        report = _make_combat(_no_noise()).resolve(hero, enemy, world)
        assert not report.critical
        assert report.damage_dealt == 20


class TestExchange:
    def test_enemy_counterattack_is_reduced(self):
        world = make_world()
        hero = add_hero(world, (3, 3), damage=20)
        enemy = add_enemy(world, (4, 3), health=200, damage=10)
        report = _make_combat(_no_noise()).resolve(hero, enemy, world)
        # warrior defense 0.15: 10 * 0.85 = 8.5 -> 8
        assert report.outcome == CombatOutcome.EXCHANGE
        assert report.damage_taken == 8
        assert hero.health == 92
        assert hero.experience == 4
        assert enemy.id in world.enemies

    def test_enemy_always_lands_one_point(self):
        world = make_world()
        hero = add_hero(world, (3, 3), damage=5, armor="plate_armor")
        enemy = add_enemy(world, (4, 3), health=200, damage=1)
        report = _make_combat(_no_noise()).resolve(hero, enemy, world)
        assert report.damage_taken == 1


class TestDefeat:
    def test_respawn_at_guild_for_a_fee(self):
        world = make_world()
        guild = add_building(world, "warriorGuild", (1, 1))
        hero = add_hero(world, (3, 3), health=5, guild_id=guild.id)
        enemy = add_enemy(world, (4, 3), health=500, damage=50)

        report = _make_combat(_no_noise()).resolve(hero, enemy, world)

        assert report.outcome == CombatOutcome.DEFEAT
        assert report.hero_fate == FATE_RESPAWNED
        assert hero.id in world.heroes
        assert hero.pos == guild.pos
        assert hero.health == hero.effective_max_health()
        assert hero.morale == 80.0
        assert world.resources.gold == 450
        world.check_invariants()

    def test_defeat_costs_morale_from_current_value(self):
        world = make_world()
        guild = add_building(world, "warriorGuild", (1, 1))
        hero = add_hero(world, (3, 3), health=5, guild_id=guild.id, morale=50.0)
        enemy = add_enemy(world, (4, 3), health=500, damage=50)
        _make_combat(_no_noise()).resolve(hero, enemy, world)
        assert hero.id in world.heroes
        assert hero.morale == 30.0

    def test_defeat_morale_floor(self):
        world = make_world()
        guild = add_building(world, "warriorGuild", (1, 1))
        hero = add_hero(world, (3, 3), health=5, guild_id=guild.id, morale=10.0)
        enemy = add_enemy(world, (4, 3), health=500, damage=50)
        _make_combat(_no_noise()).resolve(hero, enemy, world)
        assert hero.morale == 0.0

    def test_respawn_at_any_guild_of_the_class(self):
        world = make_world()
        guild = add_building(world, "warriorGuild", (1, 1))
        hero = add_hero(world, (3, 3), health=5, guild_id=999)
        enemy = add_enemy(world, (4, 3), health=500, damage=50)
        report = _make_combat(_no_noise()).resolve(hero, enemy, world)
        assert report.hero_fate == FATE_RESPAWNED
        assert hero.pos == guild.pos

    def test_no_guild_means_permanent_loss(self):
        world = make_world()
        hero = add_hero(world, (3, 3), health=5)
        enemy = add_enemy(world, (4, 3), health=500, damage=50)

        report = _make_combat(_no_noise()).resolve(hero, enemy, world)

        assert report.hero_fate == FATE_FALLEN
        assert hero.id not in world.heroes
        assert world.grid.hero_at(Vector2(3, 3)) is None
        assert world.resources.population == 0
        assert world.statistics.heroes_lost == 1
        world.check_invariants()

    def test_no_gold_for_the_fee(self):
        world = make_world(gold=10)
        guild = add_building(world, "warriorGuild", (1, 1))
        hero = add_hero(world, (3, 3), health=5, guild_id=guild.id)
        enemy = add_enemy(world, (4, 3), health=500, damage=50)
        report = _make_combat(_no_noise()).resolve(hero, enemy, world)
        assert report.hero_fate == FATE_FALLEN
        assert world.resources.gold == 10


class TestValidation:
    def test_out_of_range_attack_is_rejected(self):
        world = make_world()
        hero = add_hero(world, (3, 3))
        enemy = add_enemy(world, (6, 3))
        resolver = ActionResolver(CONFIG, ScriptedRNG(), Progression(CONFIG))
        resolution = resolver.resolve(ActionProposal(hero.id, ActionType.ATTACK, target=enemy.id), world)
        assert not resolution.applied
        assert enemy.health == enemy.max_health

    def test_same_cell_is_in_range(self):
        world = make_world()
        hero = add_hero(world, (3, 3))
        enemy = add_enemy(world, (3, 3))
        combat = _make_combat()
        assert combat.validate(ActionProposal(hero.id, ActionType.ATTACK, target=enemy.id), world)


class TestConservation:
    def test_exactly_one_side_pays(self):
        for seed in range(25):
            world = make_world(seed=seed)
            hero = add_hero(world, (3, 3), "rogue")
            enemy = add_enemy(world, (4, 3), "orc", health=30, damage=12, reward=35)
            world.tick = seed
            combat = CombatAction(CONFIG, DeterministicRNG(seed), Progression(CONFIG))

            health_before = hero.health
            report = combat.resolve(hero, enemy, world)

            assert report.damage_dealt >= 0
            if report.outcome == CombatOutcome.VICTORY:
                assert enemy.id not in world.enemies
                assert hero.gold == 35
                assert hero.experience > 0 or hero.level > 1
            else:
                assert enemy.id in world.enemies
                assert report.damage_taken >= 1
                assert hero.health < health_before
            world.check_invariants()
