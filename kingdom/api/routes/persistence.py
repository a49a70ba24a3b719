"""GET /api/v1/save and POST /api/v1/load: the save document over HTTP."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from kingdom.api.dependencies import get_engine_manager
from kingdom.api.engine_manager import EngineManager
from kingdom.api.schemas import ControlResponse
from kingdom.core.document import SaveGameError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/save")
def save_game(manager: EngineManager = Depends(get_engine_manager)) -> dict[str, Any]:
    return manager.save_document()


@router.post("/load", response_model=ControlResponse)
def load_game(
    document: dict[str, Any] = Body(...),
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    try:
        manager.load_document(document)
    except SaveGameError as exc:
        logger.warning("Rejected save document: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    snapshot = manager.get_snapshot()
    tick = snapshot.tick if snapshot else 0
    return ControlResponse(status="ok", message=f"Save loaded at tick {tick}.", tick=tick)
