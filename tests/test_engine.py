"""Tests for the tick loop and the KingdomSimulation surface."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import json

import pytest

from kingdom.core.document import SaveGameError
from kingdom.core.enums import FailureReason
from kingdom.core.models import Vector2
from kingdom.engine import KingdomSimulation, WorldLoop
from kingdom.systems.rng import DeterministicRNG
from tests.helpers.kingdom_builder import add_enemy, add_hero, make_world, quiet_config


def _make_loop(world, **overrides):
    return WorldLoop(quiet_config(**overrides), world, DeterministicRNG(1))


def _make_kingdom(seed: int = 42, **overrides) -> KingdomSimulation:
    """Simulation with one guild of each melee-ish class and a recruit from each."""
    sim = KingdomSimulation(quiet_config(world_seed=seed, **overrides), rng=DeterministicRNG(seed))
    for building_type, (x, y) in (("warriorGuild", (8, 7)), ("rogueGuild", (12, 7))):
        guild_id = sim.place_building(building_type, x, y).entity_id
        assert sim.spawn_hero_from_guild(guild_id).ok
    return sim


# ---------------------------------------------------------------------------
# WorldLoop
# ---------------------------------------------------------------------------

class TestWorldLoop:
    def test_tick_advances(self):
        world = make_world(castle=(10, 7))
        loop = _make_loop(world)
        assert loop.tick_once()
        assert world.tick == 1

    def test_income_every_fifth_tick(self):
        world = make_world(castle=(10, 7))
        loop = _make_loop(world)
        for _ in range(4):
            loop.tick_once()
        assert world.resources.gold == 500
        loop.tick_once()
        assert world.resources.gold == 510
        assert [e.category for e in loop.tick_events] == ["income"]

    def test_max_ticks(self):
        world = make_world(castle=(10, 7))
        loop = _make_loop(world, max_ticks=3)
        assert all(loop.tick_once() for _ in range(3))
        assert not loop.tick_once()
        assert world.tick == 3

    def test_morale_decays(self):
        world = make_world(castle=(10, 7))
        hero = add_hero(world, (2, 2), move_cooldown=5)
        _make_loop(world).tick_once()
        assert hero.morale == pytest.approx(99.9)
        assert hero.move_cooldown == 4

    def test_engagement_on_shared_cell(self):
        world = make_world(castle=(10, 7))
        hero = add_hero(world, (3, 3), move_cooldown=5)
        enemy = add_enemy(world, (3, 3), health=1, move_cooldown=5)
        loop = _make_loop(world)
        loop.tick_once()
        assert enemy.id not in world.enemies
        assert hero.gold == 20
        assert "enemy_defeated" in [e.category for e in loop.tick_events]
        world.check_invariants()


class TestGameOver:
    @pytest.mark.parametrize("pos", [(11, 7), (9, 7), (10, 6), (10, 8), (10, 7)])
    def test_enemy_next_to_castle_ends_game(self, pos):
        world = make_world(castle=(10, 7))
        add_enemy(world, pos, move_cooldown=5)
        loop = _make_loop(world)

        assert not loop.tick_once()
        assert world.game_over
        assert world.tick == 1
        assert [e.category for e in loop.tick_events] == ["game_over"]

    def test_game_over_is_terminal(self):
        world = make_world(castle=(10, 7))
        enemy = add_enemy(world, (11, 7), move_cooldown=5)
        loop = _make_loop(world)
        loop.tick_once()

        assert not loop.tick_once()
        assert world.tick == 1
        assert enemy.move_cooldown == 4
        assert loop.tick_events == []

    def test_missing_castle_ends_game(self):
        world = make_world()
        loop = _make_loop(world)
        assert not loop.tick_once()
        assert world.game_over_reason == "The castle has fallen."

    @pytest.mark.parametrize("pos", [(11, 8), (9, 6), (11, 6), (9, 8)])
    def test_diagonal_enemy_does_not_end_game(self, pos):
        world = make_world(castle=(10, 7))
        add_enemy(world, pos, move_cooldown=5)
        assert _make_loop(world).tick_once()
        assert not world.game_over

    def test_enemy_two_cells_away_is_harmless(self):
        world = make_world(castle=(10, 7))
        add_enemy(world, (12, 7), move_cooldown=5)
        assert _make_loop(world).tick_once()


# ---------------------------------------------------------------------------
# KingdomSimulation
# ---------------------------------------------------------------------------

class TestSimulationSetup:
    def test_default_kingdom(self):
        sim = KingdomSimulation(quiet_config())
        castle = sim.world.castle()
        assert castle.pos == Vector2(10, 7)
        assert sim.world.resources.gold == 500
        assert sim.world.resources.max_population == 10
        assert sim.tick == 0
        assert not sim.paused

    def test_castle_cell_is_taken(self):
        sim = KingdomSimulation(quiet_config())
        result = sim.place_building("marketplace", 10, 7)
        assert result.reason == FailureReason.CELL_OCCUPIED
        assert sim.world.resources.gold == 500

    def test_castle_cannot_be_built(self):
        sim = KingdomSimulation(quiet_config())
        assert sim.place_building("castle", 1, 1).reason == FailureReason.NOT_ELIGIBLE

    def test_guild_and_recruit_emit_events(self):
        sim = KingdomSimulation(quiet_config())
        guild_id = sim.place_building("warriorGuild", 8, 7).entity_id
        hero_id = sim.spawn_hero_from_guild(guild_id).entity_id
        assert sim.world.heroes[hero_id].pos == Vector2(8, 7)
        assert [e.category for e in sim.events.latest()] == ["building_placed", "hero_recruited"]

    def test_missing_hero(self):
        sim = KingdomSimulation(quiet_config())
        assert sim.assign_specialization(9, "guardian").reason == FailureReason.NOT_FOUND
        assert sim.equip_item(9, "iron_sword").reason == FailureReason.NOT_FOUND


class TestTimeControl:
    def test_pause_blocks_advance(self):
        sim = KingdomSimulation(quiet_config())
        sim.pause()
        assert not sim.advance_tick()
        assert sim.tick == 0
        assert sim.step()
        assert sim.tick == 1
        assert sim.paused

    def test_resume(self):
        sim = KingdomSimulation(quiet_config())
        sim.pause()
        sim.resume()
        assert sim.advance_tick()

    def test_restart(self):
        sim = _make_kingdom()
        for _ in range(10):
            sim.advance_tick()
        sim.restart()
        assert sim.tick == 0
        assert sim.world.heroes == {}
        assert [e.category for e in sim.events.latest()] == ["restart"]


class TestGameOverCommands:
    def test_commands_rejected_after_game_over(self):
        sim = _make_kingdom()
        sim.world.game_over = True
        gold = sim.world.resources.gold
        assert sim.place_building("inn", 1, 1).reason == FailureReason.GAME_OVER
        assert sim.place_flag("explore", 1, 1).reason == FailureReason.GAME_OVER
        assert sim.spawn_hero_from_guild(2).reason == FailureReason.GAME_OVER
        assert sim.world.resources.gold == gold
        assert not sim.advance_tick()
        assert not sim.step()


class TestSnapshot:
    def test_snapshot_is_detached(self):
        sim = _make_kingdom()
        snap = sim.snapshot()
        hero_id = next(iter(snap.heroes))
        snap.heroes[hero_id].health = 1
        assert sim.world.heroes[hero_id].health != 1
        with pytest.raises(TypeError):
            snap.heroes[99] = None

    def test_snapshot_reports_pause(self):
        sim = KingdomSimulation(quiet_config())
        sim.pause()
        assert sim.snapshot().paused


class TestEvents:
    def test_subscribe_and_unsubscribe(self):
        sim = KingdomSimulation(quiet_config())
        seen = []
        unsubscribe = sim.subscribe(seen.append)
        sim.place_flag("explore", 2, 2)
        unsubscribe()
        sim.place_flag("gold", 3, 2)
        assert [e.category for e in seen] == ["flag_placed"]


class TestDeterminism:
    def test_same_seed_same_history(self):
        a = _make_kingdom(seed=7, spawn_chance=0.9)
        b = _make_kingdom(seed=7, spawn_chance=0.9)
        for _ in range(150):
            a.advance_tick()
            b.advance_tick()
        assert a.to_document() == b.to_document()

    def test_invariants_hold_every_tick(self):
        sim = _make_kingdom(seed=11, spawn_chance=0.9)
        sim.place_flag("attack", 3, 3)
        sim.place_flag("explore", 16, 12)
        for _ in range(200):
            sim.advance_tick()
            sim.world.check_invariants()
            for hero in sim.world.heroes.values():
                assert 0.0 <= hero.morale <= 100.0
                assert hero.health <= hero.effective_max_health()


class TestPersistence:
    def test_restored_simulation_continues_identically(self):
        running = _make_kingdom(seed=5, spawn_chance=0.9)
        for _ in range(40):
            running.advance_tick()

        document = json.loads(json.dumps(running.to_document()))
        restored = KingdomSimulation.from_document(document, config=running.config, rng=DeterministicRNG(5))
        assert restored.to_document() == running.to_document()

        for _ in range(40):
            running.advance_tick()
            restored.advance_tick()
        assert restored.to_document() == running.to_document()

    def test_bad_document_leaves_world_untouched(self):
        sim = _make_kingdom()
        sim.advance_tick()
        before = sim.to_document()
        with pytest.raises(SaveGameError):
            sim.load_document({"version": 99})
        assert sim.to_document() == before

    def test_load_replaces_world(self):
        sim = _make_kingdom()
        document = sim.to_document()
        for _ in range(5):
            sim.advance_tick()
        sim.load_document(document)
        assert sim.tick == 0
        assert sim.events.latest(1)[0].category == "loaded"
