"""GET /api/v1/config: expose simulation configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from kingdom.api.dependencies import get_engine_manager
from kingdom.api.engine_manager import EngineManager
from kingdom.api.schemas import SimulationConfigResponse

router = APIRouter()


@router.get("/config", response_model=SimulationConfigResponse)
def get_config(
    manager: EngineManager = Depends(get_engine_manager),
) -> SimulationConfigResponse:
    cfg = manager.config
    return SimulationConfigResponse(
        world_seed=cfg.world_seed,
        grid_width=cfg.grid_width,
        grid_height=cfg.grid_height,
        max_ticks=cfg.max_ticks,
        hero_act_chance=cfg.hero_act_chance,
        enemy_act_chance=cfg.enemy_act_chance,
        income_interval=cfg.income_interval,
        spawn_interval=cfg.spawn_interval,
        spawn_chance=cfg.spawn_chance,
        respawn_fee=cfg.respawn_fee,
        flag_refund_ratio=cfg.flag_refund_ratio,
        tick_rate=manager.tick_rate,
    )
