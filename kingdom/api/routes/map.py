"""GET /api/v1/map: sparse cell occupancy of the kingdom grid."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from kingdom.api.dependencies import get_engine_manager
from kingdom.api.engine_manager import EngineManager
from kingdom.api.schemas import MapCellSchema, MapResponse

router = APIRouter()


@router.get("/map", response_model=MapResponse)
def get_map(manager: EngineManager = Depends(get_engine_manager)) -> MapResponse:
    snapshot = manager.get_snapshot()
    if snapshot is None:
        raise HTTPException(status_code=503, detail="Simulation not initialized yet.")

    grid = snapshot.grid
    cells = [
        MapCellSchema(x=c.x, y=c.y, building=c.building, hero=c.hero, enemy=c.enemy, flag=c.flag)
        for c in grid.occupied_cells()
    ]
    return MapResponse(width=grid.width, height=grid.height, cells=cells)
