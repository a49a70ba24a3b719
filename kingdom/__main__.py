"""Entry point: ``python -m kingdom``.

Supports two modes:
  - ``python -m kingdom``            -> Launch the FastAPI server
  - ``python -m kingdom cli``        -> Headless run that writes a save document
"""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)

# (building type, dx, dy) relative to the castle, then the guilds to recruit from
STARTER_LAYOUT: tuple[tuple[str, int, int], ...] = (
    ("warriorGuild", -2, 0),
    ("marketplace", 2, 0),
    ("rogueGuild", 0, 2),
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tick-driven kingdom simulation")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--tick-rate", type=float, default=0.25, help="Seconds between ticks")
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run a headless simulation")
    cli.add_argument("--seed", type=int, default=42)
    cli.add_argument("--ticks", type=int, default=200)
    cli.add_argument("--save", type=str, default="savegame.json")
    cli.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from kingdom.api.app import create_app
    from kingdom.config import SimulationConfig

    config = SimulationConfig(
        world_seed=args.seed,
        tick_rate=args.tick_rate,
        log_level=args.log_level,
    )
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _run_cli(args: argparse.Namespace) -> None:
    from kingdom.config import SimulationConfig
    from kingdom.engine.simulation import KingdomSimulation
    from kingdom.utils.logging import setup_logging
    from kingdom.utils.savegame import write_save

    config = SimulationConfig(
        world_seed=args.seed,
        max_ticks=args.ticks,
        log_level=args.log_level,
        save_file=args.save,
    )
    setup_logging(config.log_level)

    sim = KingdomSimulation(config)
    castle = sim.world.castle()
    if castle is None:
        logger.error("No castle to build around; nothing to run.")
        return

    guilds: list[int] = []
    for building_type, dx, dy in STARTER_LAYOUT:
        result = sim.place_building(building_type, castle.pos.x + dx, castle.pos.y + dy)
        if not result:
            logger.warning("Starter %s not placed: %s", building_type, result.message)
            continue
        if building_type.endswith("Guild"):
            guilds.append(result.entity_id)
    for guild_id in guilds:
        result = sim.spawn_hero_from_guild(guild_id)
        if not result:
            logger.warning("No recruit from guild #%d: %s", guild_id, result.message)

    while sim.advance_tick():
        pass

    snap = sim.snapshot()
    stats = snap.statistics
    logger.info(
        "Finished at tick %d%s: %d heroes, %d enemies, %d gold, %d enemies defeated, %d heroes lost",
        snap.tick, " (game over)" if snap.game_over else "",
        len(snap.heroes), len(snap.enemies), snap.resources.gold,
        stats.enemies_defeated, stats.heroes_lost,
    )
    write_save(config.save_file, sim.to_document())


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "cli":
        _run_cli(args)


if __name__ == "__main__":
    main()
