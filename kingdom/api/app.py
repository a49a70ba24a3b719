"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kingdom.api.dependencies import set_engine_manager
from kingdom.api.engine_manager import EngineManager
from kingdom.api.routes import api_router
from kingdom.config import SimulationConfig
from kingdom.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: SimulationConfig | None = None, autostart: bool = True) -> FastAPI:
    """Build and return the fully-configured FastAPI application.

    With ``autostart=False`` the engine is built but its thread is not
    started; ticks then happen only through ``/control/step`` or ``/control/start``.
    """
    if config is None:
        config = SimulationConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        manager = EngineManager(_config)
        set_engine_manager(manager)
        if autostart:
            manager.start()
            logger.info("API server started, kingdom running.")
        yield
        manager.stop()
        set_engine_manager(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Kingdom Simulation",
        description=(
            "Tick-driven kingdom simulation API.\n\n"
            "## API Groups\n\n"
            "- **State**: live kingdom state, statistics and event feed\n"
            "- **Map**: grid occupancy\n"
            "- **Control**: start, pause, resume, single-step, restart\n"
            "- **Commands**: buildings, flags, heroes\n"
            "- **Persistence**: save and load documents\n"
            "- **Config**: read-only simulation configuration\n"
            "- **Metadata**: game definitions (buildings, classes, equipment, enemies, flags)\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "State", "description": "Live kingdom state polled by a client."},
            {"name": "Map", "description": "Occupied cells of the grid."},
            {"name": "Control", "description": "Simulation lifecycle controls and tick speed."},
            {"name": "Commands", "description": "Player commands. Rejections carry a failure reason."},
            {"name": "Persistence", "description": "Save documents out and load them back in."},
            {"name": "Config", "description": "Read-only simulation configuration parameters."},
            {"name": "Metadata", "description": "Catalog definitions served from the pydantic dataclasses in kingdom/core/."},
        ],
    )

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app
