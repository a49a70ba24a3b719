"""Player commands: buildings, flags and heroes.

A rejected command is a normal response (``status="error"`` plus the
failure reason), not an HTTP error; unknown ids come back as ``not_found``.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from kingdom.api.dependencies import get_engine_manager
from kingdom.api.engine_manager import EngineManager
from kingdom.api.schemas import (
    CommandResponse,
    EquipRequest,
    PlaceBuildingRequest,
    PlaceFlagRequest,
    RecruitHeroRequest,
    SpecializationRequest,
)
from kingdom.core.results import CommandResult

router = APIRouter()


def _respond(result: CommandResult, manager: EngineManager) -> CommandResponse:
    snapshot = manager.get_snapshot()
    return CommandResponse(
        status="ok" if result.ok else "error",
        reason=result.reason.value if result.reason is not None else None,
        message=result.message,
        entity_id=result.entity_id,
        tick=snapshot.tick if snapshot else 0,
    )


# -- buildings --

@router.post("/buildings", response_model=CommandResponse)
def place_building(
    body: PlaceBuildingRequest,
    manager: EngineManager = Depends(get_engine_manager),
) -> CommandResponse:
    return _respond(manager.place_building(body.building_type, body.x, body.y), manager)


@router.post("/buildings/{building_id}/upgrade", response_model=CommandResponse)
def upgrade_building(
    building_id: int,
    manager: EngineManager = Depends(get_engine_manager),
) -> CommandResponse:
    return _respond(manager.upgrade_building(building_id), manager)


# -- flags --

@router.post("/flags", response_model=CommandResponse)
def place_flag(
    body: PlaceFlagRequest,
    manager: EngineManager = Depends(get_engine_manager),
) -> CommandResponse:
    return _respond(manager.place_flag(body.flag_type, body.x, body.y), manager)


@router.delete("/flags/{flag_id}", response_model=CommandResponse)
def cancel_flag(
    flag_id: int,
    manager: EngineManager = Depends(get_engine_manager),
) -> CommandResponse:
    return _respond(manager.cancel_flag(flag_id), manager)


# -- heroes --

@router.post("/heroes", response_model=CommandResponse)
def recruit_hero(
    body: RecruitHeroRequest,
    manager: EngineManager = Depends(get_engine_manager),
) -> CommandResponse:
    return _respond(manager.recruit_hero(body.guild_id), manager)


@router.post("/heroes/{hero_id}/specialization", response_model=CommandResponse)
def assign_specialization(
    hero_id: int,
    body: SpecializationRequest,
    manager: EngineManager = Depends(get_engine_manager),
) -> CommandResponse:
    return _respond(manager.assign_specialization(hero_id, body.specialization), manager)


@router.post("/heroes/{hero_id}/equip", response_model=CommandResponse)
def equip_item(
    hero_id: int,
    body: EquipRequest,
    manager: EngineManager = Depends(get_engine_manager),
) -> CommandResponse:
    return _respond(manager.equip_item(hero_id, body.equipment_id), manager)
