"""Tests for the save document codec, save files and the event log."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import json

import pytest

from kingdom.core.document import DOCUMENT_VERSION, SaveGameError, from_document, to_document
from kingdom.core.enums import CombatOutcome, HeroState
from kingdom.core.grid import HERO
from kingdom.core.models import CombatRecord, Vector2
from kingdom.utils.event_log import EventLog, SimEvent
from kingdom.utils.savegame import read_save, write_save
from tests.helpers.kingdom_builder import add_enemy, add_flag, add_hero, make_world


def _make_populated_world():
    world = make_world(castle=(10, 7))
    world.place_building("warriorGuild", 3, 3)
    hero = add_hero(world, (4, 3), level=3, weapon="iron_sword", specialization="guardian",
                    state=HeroState.PURSUING, target=Vector2(6, 3), morale=87.5)
    hero.combat_history.append(CombatRecord(
        tick=4, enemy_id=9, enemy_type="orc", outcome=CombatOutcome.EXCHANGE,
        damage_dealt=12, damage_taken=6, experience_gained=2,
    ))
    add_enemy(world, (6, 3), "orc", health=60, damage=12, reward=35)
    add_flag(world, "explore", (1, 1), reward=30)
    world.tick = 17
    world.statistics.enemies_defeated = 3
    return world


class TestDocument:
    def test_round_trip_through_json(self):
        world = _make_populated_world()
        document = json.loads(json.dumps(to_document(world)))
        restored = from_document(document)

        assert to_document(restored) == to_document(world)
        assert restored.tick == 17
        hero = next(iter(restored.heroes.values()))
        assert hero.state == HeroState.PURSUING
        assert hero.target == Vector2(6, 3)
        assert hero.combat_history[0].outcome == CombatOutcome.EXCHANGE
        assert restored.grid.hero_at(Vector2(4, 3)) == hero.id
        restored.check_invariants()

    def test_counters_survive(self):
        world = _make_populated_world()
        restored = from_document(to_document(world))
        assert restored.allocate_id(HERO) == world.allocate_id(HERO)

    def test_document_is_plain_data(self):
        document = to_document(_make_populated_world())
        assert document["version"] == DOCUMENT_VERSION
        assert json.loads(json.dumps(document)) == document

    @pytest.mark.parametrize("version", [None, 0, 2, "1"])
    def test_unsupported_version(self, version):
        document = to_document(make_world(castle=(10, 7)))
        document["version"] = version
        with pytest.raises(SaveGameError):
            from_document(document)

    def test_not_a_mapping(self):
        with pytest.raises(SaveGameError):
            from_document([1, 2, 3])

    def test_missing_key(self):
        document = to_document(make_world(castle=(10, 7)))
        del document["resources"]
        with pytest.raises(SaveGameError):
            from_document(document)

    def test_out_of_bounds_entity(self):
        document = to_document(_make_populated_world())
        document["enemies"][0]["pos"] = {"x": 40, "y": 3}
        with pytest.raises(SaveGameError, match="out of bounds"):
            from_document(document)

    def test_two_heroes_on_one_cell(self):
        world = _make_populated_world()
        add_hero(world, (8, 8))
        document = to_document(world)
        document["heroes"][1]["pos"] = {"x": 4, "y": 3}
        with pytest.raises(SaveGameError, match="two hero"):
            from_document(document)

    def test_id_beyond_counter(self):
        document = to_document(_make_populated_world())
        document["next_ids"]["enemy"] = 1
        with pytest.raises(SaveGameError):
            from_document(document)

    @pytest.mark.parametrize("key, value", [
        ("buildings", [1]),
        ("resources", "lots"),
        ("next_ids", [1, 2]),
        ("heroes", {"id": 1}),
        ("statistics", 7),
    ])
    def test_malformed_part(self, key, value):
        document = to_document(_make_populated_world())
        document[key] = value
        with pytest.raises(SaveGameError, match="malformed"):
            from_document(document)

    def test_wrongly_typed_hero_field(self):
        document = to_document(_make_populated_world())
        document["heroes"][0]["health"] = "forty"
        with pytest.raises(SaveGameError, match="malformed"):
            from_document(document)

    def test_numeric_strings_are_coerced(self):
        document = to_document(_make_populated_world())
        document["heroes"][0]["health"] = "40"
        hero = next(iter(from_document(document).heroes.values()))
        assert hero.health == 40

    def test_duplicate_id(self):
        world = _make_populated_world()
        add_hero(world, (8, 8))
        document = to_document(world)
        document["heroes"][1]["id"] = document["heroes"][0]["id"]
        with pytest.raises(SaveGameError, match="appears twice"):
            from_document(document)

    def test_unknown_building_type(self):
        document = to_document(_make_populated_world())
        document["buildings"][0]["building_type"] = "moatHouse"
        with pytest.raises(SaveGameError, match="unknown building type"):
            from_document(document)

    def test_negative_gold(self):
        document = to_document(_make_populated_world())
        document["resources"]["gold"] = -5
        with pytest.raises(SaveGameError, match="negative"):
            from_document(document)

    def test_population_above_cap(self):
        document = to_document(_make_populated_world())
        document["resources"]["population"] = document["resources"]["max_population"] + 1
        with pytest.raises(SaveGameError, match="above cap"):
            from_document(document)


class TestSaveFile:
    def test_write_and_read(self, tmp_path):
        document = to_document(_make_populated_world())
        path = write_save(tmp_path / "save.json", document)
        assert read_save(path) == document
        assert not (tmp_path / "save.json.tmp").exists()

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(SaveGameError):
            read_save(path)

    def test_not_a_document(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(SaveGameError):
            read_save(path)


# ---------------------------------------------------------------------------
# Event log
# ---------------------------------------------------------------------------

def _event(tick: int, category: str = "combat") -> SimEvent:
    return SimEvent(tick=tick, category=category, message=f"{category} at {tick}")


class TestEventLog:
    def test_since_tick(self):
        log = EventLog()
        log.append_many([_event(1), _event(2), _event(3)])
        assert [e.tick for e in log.since_tick(2)] == [2, 3]

    def test_latest(self):
        log = EventLog()
        for tick in range(10):
            log.append(_event(tick))
        assert [e.tick for e in log.latest(3)] == [7, 8, 9]
        assert len(log) == 10

    def test_bounded(self):
        log = EventLog(maxlen=5)
        for tick in range(8):
            log.append(_event(tick))
        assert len(log) == 5
        assert log.latest(1)[0].tick == 7

    def test_clear(self):
        log = EventLog()
        log.append(_event(1))
        log.clear()
        assert len(log) == 0

    def test_subscribers_receive_events(self):
        log = EventLog()
        seen = []
        log.subscribe(seen.append)
        log.append_many([_event(1, "income"), _event(1, "combat")])
        assert [e.category for e in seen] == ["income", "combat"]

    def test_failing_subscriber_is_skipped(self):
        log = EventLog()
        seen = []

        def broken(event):
            raise RuntimeError("listener crashed")

        log.subscribe(broken)
        log.subscribe(seen.append)
        log.append(_event(1))
        assert len(seen) == 1
        assert len(log) == 1

    def test_unsubscribe(self):
        log = EventLog()
        seen = []
        unsubscribe = log.subscribe(seen.append)
        unsubscribe()
        unsubscribe()
        log.append(_event(1))
        assert seen == []
