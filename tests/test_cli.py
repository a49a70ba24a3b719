"""Headless run: builds the starter kingdom, ticks to the limit, writes a save."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import argparse

from kingdom.__main__ import _build_parser, _run_cli
from kingdom.engine import KingdomSimulation
from kingdom.utils.savegame import read_save


def test_parser_defaults():
    args = _build_parser().parse_args(["cli"])
    assert args.ticks == 200
    assert args.seed == 42


def test_headless_run_writes_loadable_save(tmp_path):
    path = tmp_path / "run.json"
    _run_cli(argparse.Namespace(seed=3, ticks=30, save=str(path), log_level="WARNING"))

    document = read_save(path)
    assert 1 <= document["tick"] <= 30
    assert {b["building_type"] for b in document["buildings"]} >= {"castle", "warriorGuild", "marketplace"}
    assert document["statistics"]["heroes_recruited"] == 2

    restored = KingdomSimulation.from_document(document)
    restored.world.check_invariants()


def test_run_without_castle_stops_cleanly(tmp_path, monkeypatch):
    from kingdom.core.world_state import WorldState

    monkeypatch.setattr(WorldState, "castle", lambda self: None)
    path = tmp_path / "run.json"
    _run_cli(argparse.Namespace(seed=3, ticks=30, save=str(path), log_level="WARNING"))
    assert not path.exists()
