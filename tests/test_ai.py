"""Tests for perception, movement primitives, tactics, target scoring and both brains."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from kingdom.ai.brain import HeroBrain
from kingdom.ai.enemy_brain import EnemyBrain
from kingdom.ai.movement import free_steps, step_away, step_toward
from kingdom.ai.perception import Perception
from kingdom.ai.scorers import AFFINITY_REGISTRY, ONE_HIT_KILL_BONUS, EnemyScorer, FlagScorer
from kingdom.ai.tactics import Tactics
from kingdom.config import SimulationConfig
from kingdom.core.enums import ActionType, Domain, HeroState
from kingdom.core.grid import Grid
from kingdom.core.models import Vector2
from tests.helpers.kingdom_builder import (
    ScriptedRNG,
    add_enemy,
    add_flag,
    add_hero,
    make_world,
)


CONFIG = SimulationConfig()


def _make_brain(script=None, default=0.5) -> HeroBrain:
    return HeroBrain(CONFIG, ScriptedRNG(script, default=default))


class TestPerception:
    def test_nearby_uses_manhattan_and_keeps_order(self):
        world = make_world()
        a = add_enemy(world, (5, 5))
        b = add_enemy(world, (7, 6))
        add_enemy(world, (9, 9))
        found = Perception.nearby(Vector2(5, 5), world.enemies.values(), 3)
        assert found == [a, b]

    def test_nearest_breaks_ties_by_id(self):
        world = make_world()
        a = add_enemy(world, (4, 5))
        add_enemy(world, (6, 5))
        assert Perception.nearest(Vector2(5, 5), world.enemies.values()) is a

    def test_nearest_of_nothing(self):
        assert Perception.nearest(Vector2(0, 0), []) is None

    def test_centroid(self):
        world = make_world()
        add_enemy(world, (2, 2))
        add_enemy(world, (4, 6))
        assert Perception.centroid(world.enemies.values()) == (3.0, 4.0)


class TestMovement:
    def test_step_toward_larger_axis(self):
        grid = Grid(10, 10)
        assert step_toward(Vector2(0, 0), Vector2(5, 2), grid) == Vector2(1, 0)
        assert step_toward(Vector2(0, 0), Vector2(1, 4), grid) == Vector2(0, 1)

    def test_step_toward_tie_moves_vertically(self):
        assert step_toward(Vector2(0, 0), Vector2(2, 2), Grid(10, 10)) == Vector2(0, 1)

    def test_step_toward_self(self):
        assert step_toward(Vector2(3, 3), Vector2(3, 3), Grid(10, 10)) == Vector2(3, 3)

    def test_step_away_clamps_to_grid(self):
        grid = Grid(10, 10)
        assert step_away(Vector2(5, 5), (6.0, 5.0), grid) == Vector2(4, 5)
        assert step_away(Vector2(0, 5), (1.0, 5.0), grid) == Vector2(0, 5)

    def test_free_steps_skip_buildings(self):
        world = make_world(castle=(5, 4))
        hero = add_hero(world, (5, 5))
        assert free_steps(world, hero) == [Vector2(6, 5), Vector2(5, 6), Vector2(4, 5)]


class TestTactics:
    def test_building_adjacency(self):
        world = make_world(castle=(5, 5))
        hero = add_hero(world, (6, 6))
        bonus = Tactics(CONFIG).bonus(world, hero)
        assert bonus.building == CONFIG.building_adjacency_bonus

    def test_flanking(self):
        world = make_world()
        hero = add_hero(world, (4, 5))
        add_hero(world, (6, 5))
        enemy = add_enemy(world, (5, 5))
        tactics = Tactics(CONFIG)
        assert tactics.is_flanking(world, hero, enemy)
        assert tactics.bonus(world, hero, enemy).flank == CONFIG.flank_bonus

    def test_no_flank_from_distance(self):
        world = make_world()
        hero = add_hero(world, (3, 5))
        add_hero(world, (7, 5))
        enemy = add_enemy(world, (5, 5))
        assert not Tactics(CONFIG).is_flanking(world, hero, enemy)

    def test_formation_is_capped(self):
        world = make_world()
        hero = add_hero(world, (5, 5))
        for pos in [(4, 5), (6, 5), (5, 4), (5, 6), (6, 6)]:
            add_hero(world, pos)
        bonus = Tactics(CONFIG).bonus(world, hero)
        assert bonus.formation == CONFIG.formation_bonus_cap

    def test_diversity_needs_two_classes(self):
        world = make_world()
        hero = add_hero(world, (5, 5))
        add_hero(world, (4, 5), "ranger")
        tactics = Tactics(CONFIG)
        assert tactics.bonus(world, hero).diversity == 0.0
        add_hero(world, (6, 5), "wizard")
        assert tactics.bonus(world, hero).diversity == CONFIG.diversity_bonus

    def test_approach_cell_prefers_flank(self):
        world = make_world()
        hero = add_hero(world, (5, 8))
        add_hero(world, (5, 4))
        enemy = add_enemy(world, (5, 5))
        assert Tactics(CONFIG).approach_cell(world, hero, enemy) == Vector2(5, 6)

    def test_approach_cell_without_bonus(self):
        world = make_world()
        hero = add_hero(world, (1, 1))
        enemy = add_enemy(world, (10, 10))
        assert Tactics(CONFIG).approach_cell(world, hero, enemy) is None


class TestScorers:
    def test_one_hit_kill_is_preferred(self):
        world = make_world()
        hero = add_hero(world, (5, 5), damage=20)
        tough = add_enemy(world, (5, 3), health=100, damage=8)
        weak = add_enemy(world, (5, 7), health=15, damage=8)
        scorer = EnemyScorer(Tactics(CONFIG))
        best = scorer.best(world, hero, [tough, weak], 4)
        assert best.target_id == weak.id
        gap = scorer.score(world, hero, weak, [tough, weak], 4) - scorer.score(world, hero, tough, [tough, weak], 4)
        assert gap == ONE_HIT_KILL_BONUS

    def test_ties_go_to_lower_id(self):
        world = make_world()
        hero = add_hero(world, (5, 5))
        first = add_enemy(world, (5, 3))
        second = add_enemy(world, (5, 7))
        best = EnemyScorer(Tactics(CONFIG)).best(world, hero, [first, second], 4)
        assert best.target_id == first.id

    def test_every_archetype_has_an_affinity(self):
        assert set(AFFINITY_REGISTRY) == {"warrior", "ranger", "wizard", "rogue"}

    def test_flag_preference(self):
        world = make_world()
        hero = add_hero(world, (5, 5))
        liked = add_flag(world, "attack", (5, 8))
        other = add_flag(world, "gold", (5, 2))
        hero.gold = 500
        best = FlagScorer(CONFIG).best(hero, [liked, other], enemies_near=False)
        assert best.target_id == liked.id

    def test_gold_flag_when_poor(self):
        world = make_world()
        hero = add_hero(world, (5, 5), "rogue")
        flag = add_flag(world, "gold", (5, 8))
        scorer = FlagScorer(CONFIG)
        poor = scorer.score(hero, flag, False)
        hero.gold = 100
        assert poor - scorer.score(hero, flag, False) == 20.0


class TestHeroBrain:
    def test_low_morale_rests(self):
        world = make_world()
        hero = add_hero(world, (5, 5), morale=10.0)
        add_enemy(world, (6, 5))
        proposal = _make_brain().decide(hero, world)
        assert proposal.verb == ActionType.REST
        assert proposal.reason == "resting"
        assert proposal.new_state == HeroState.RESTING

    def test_wounded_hero_retreats(self):
        world = make_world()
        hero = add_hero(world, (5, 5), health=20)
        add_enemy(world, (6, 5))
        proposal = _make_brain().decide(hero, world)
        assert proposal.verb == ActionType.MOVE
        assert proposal.target == Vector2(4, 5)
        assert proposal.new_state == HeroState.RETREATING

    def test_adjacent_enemy_is_attacked(self):
        world = make_world()
        hero = add_hero(world, (5, 5))
        enemy = add_enemy(world, (6, 5))
        proposal = _make_brain().decide(hero, world)
        assert proposal.verb == ActionType.ATTACK
        assert proposal.target == enemy.id
        assert proposal.reason == f"attacking goblin #{enemy.id}"

    def test_distant_enemy_is_pursued(self):
        world = make_world()
        hero = add_hero(world, (5, 5))
        enemy = add_enemy(world, (8, 5))
        proposal = _make_brain().decide(hero, world)
        assert proposal.verb == ActionType.MOVE
        assert proposal.target == Vector2(6, 5)
        assert proposal.destination == enemy.pos
        assert proposal.new_state == HeroState.PURSUING

    def test_adjacent_flag_is_collected(self):
        world = make_world()
        hero = add_hero(world, (5, 5))
        flag = add_flag(world, "attack", (5, 6))
        proposal = _make_brain().decide(hero, world)
        assert proposal.verb == ActionType.COLLECT
        assert proposal.target == flag.id

    def test_walks_to_flag(self):
        world = make_world()
        hero = add_hero(world, (5, 5))
        flag = add_flag(world, "defend", (5, 9))
        proposal = _make_brain().decide(hero, world)
        assert proposal.verb == ActionType.MOVE
        assert proposal.target == Vector2(5, 6)
        assert proposal.destination == flag.pos
        assert proposal.reason == f"moving to defend flag #{flag.id}"

    def test_lonely_hero_seeks_allies(self):
        world = make_world()
        hero = add_hero(world, (2, 2))
        ally = add_hero(world, (12, 2), "ranger")
        proposal = _make_brain().decide(hero, world)
        assert proposal.verb == ActionType.MOVE
        assert proposal.target == Vector2(3, 2)
        assert proposal.reason == f"moving to support ranger #{ally.id}"

    def test_guard_when_patrol_roll_fails(self):
        world = make_world()
        hero = add_hero(world, (5, 5))
        proposal = _make_brain({Domain.PATROL: 0.99}).decide(hero, world)
        assert proposal.verb == ActionType.REST
        assert proposal.new_state == HeroState.GUARDING

    def test_patrol_step(self):
        world = make_world()
        hero = add_hero(world, (5, 5))
        proposal = _make_brain({Domain.PATROL: 0.0}).decide(hero, world)
        assert proposal.verb == ActionType.MOVE
        assert proposal.reason == "patrolling"
        assert proposal.target == Vector2(5, 4)

    def test_decision_is_memoryless(self):
        world = make_world()
        hero = add_hero(world, (5, 5))
        add_enemy(world, (6, 5))
        brain = _make_brain()
        hero.state = HeroState.RETREATING
        hero.last_action = "retreating"
        assert brain.decide(hero, world).verb == ActionType.ATTACK


class TestEnemyBrain:
    def test_advances_on_castle(self):
        world = make_world(castle=(10, 7))
        enemy = add_enemy(world, (0, 7))
        proposal = EnemyBrain(CONFIG, ScriptedRNG({Domain.ENEMY_AI: 0.0})).decide(enemy, world)
        assert proposal.verb == ActionType.MOVE
        assert proposal.target == Vector2(1, 7)
        assert proposal.actor_kind == "enemy"

    def test_wanders_otherwise(self):
        world = make_world(castle=(10, 7))
        enemy = add_enemy(world, (5, 5))
        proposal = EnemyBrain(CONFIG, ScriptedRNG({Domain.ENEMY_AI: 0.99})).decide(enemy, world)
        assert proposal.reason == "wandering"
        assert proposal.target == Vector2(4, 5)

    def test_waits_when_boxed_in(self):
        world = make_world()
        enemy = add_enemy(world, (0, 0))
        add_enemy(world, (1, 0))
        add_enemy(world, (0, 1))
        proposal = EnemyBrain(CONFIG, ScriptedRNG({Domain.ENEMY_AI: 0.99})).decide(enemy, world)
        assert proposal.verb == ActionType.REST
