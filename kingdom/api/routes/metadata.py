"""Metadata endpoints: expose every game definition so a UI needs no hardcoded data.

The catalog models (BuildingDef, HeroClassDef, SpecializationDef,
EquipmentDef, EnemyDef, FlagDef) are pydantic dataclasses defined in
kingdom/core/. They are serialized here directly; this module only adds
thin aggregate wrappers and the enum listings.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field, TypeAdapter

from kingdom.core.buildings import BUILDING_DEFS, BuildingDef
from kingdom.core.classes import CLASS_DEFS, SPECIALIZATION_DEFS, HeroClassDef, SpecializationDef
from kingdom.core.enemies import ENEMY_DEFS, EnemyDef
from kingdom.core.enums import EquipmentSlot, FailureReason, HeroState, Rarity
from kingdom.core.flags import FLAG_DEFS, FlagDef
from kingdom.core.items import EQUIPMENT_DEFS, EquipmentDef

router = APIRouter(prefix="/metadata", tags=["Metadata"])


# ---------------------------------------------------------------------------
# Response wrappers
# ---------------------------------------------------------------------------

class EnumEntry(BaseModel):
    id: int | str
    name: str


class EnumsResponse(BaseModel):
    hero_states: list[EnumEntry]
    rarities: list[EnumEntry]
    equipment_slots: list[EnumEntry]
    failure_reasons: list[EnumEntry]


class MetadataResponse(BaseModel):
    buildings: list[dict[str, Any]] = Field(default_factory=list)
    classes: list[dict[str, Any]] = Field(default_factory=list)
    specializations: list[dict[str, Any]] = Field(default_factory=list)
    equipment: list[dict[str, Any]] = Field(default_factory=list)
    enemies: list[dict[str, Any]] = Field(default_factory=list)
    flags: list[dict[str, Any]] = Field(default_factory=list)
    enums: EnumsResponse


# ---------------------------------------------------------------------------
# TypeAdapters for core models
# ---------------------------------------------------------------------------

_building_ta = TypeAdapter(BuildingDef)
_class_ta = TypeAdapter(HeroClassDef)
_spec_ta = TypeAdapter(SpecializationDef)
_equipment_ta = TypeAdapter(EquipmentDef)
_enemy_ta = TypeAdapter(EnemyDef)
_flag_ta = TypeAdapter(FlagDef)


def _buildings() -> list[dict[str, Any]]:
    return [_building_ta.dump_python(d, mode="json") for d in BUILDING_DEFS.values()]


def _classes() -> list[dict[str, Any]]:
    return [_class_ta.dump_python(d, mode="json") for d in CLASS_DEFS.values()]


def _specializations() -> list[dict[str, Any]]:
    return [_spec_ta.dump_python(d, mode="json") for d in SPECIALIZATION_DEFS.values()]


def _equipment() -> list[dict[str, Any]]:
    return [_equipment_ta.dump_python(d, mode="json") for d in EQUIPMENT_DEFS.values()]


def _enemies() -> list[dict[str, Any]]:
    return [_enemy_ta.dump_python(d, mode="json") for d in ENEMY_DEFS.values()]


def _flags() -> list[dict[str, Any]]:
    # reward is a property, so it is not part of the dataclass dump
    return [{**_flag_ta.dump_python(d, mode="json"), "reward": d.reward} for d in FLAG_DEFS.values()]


def _enums() -> EnumsResponse:
    return EnumsResponse(
        hero_states=[EnumEntry(id=int(s), name=s.name.lower()) for s in HeroState],
        rarities=[EnumEntry(id=int(r), name=r.name.lower()) for r in Rarity],
        equipment_slots=[EnumEntry(id=s.value, name=s.name.lower()) for s in EquipmentSlot],
        failure_reasons=[EnumEntry(id=f.value, name=f.name) for f in FailureReason],
    )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.get("", response_model=MetadataResponse)
def get_metadata() -> MetadataResponse:
    """Every catalog in one response."""
    return MetadataResponse(
        buildings=_buildings(),
        classes=_classes(),
        specializations=_specializations(),
        equipment=_equipment(),
        enemies=_enemies(),
        flags=_flags(),
        enums=_enums(),
    )


@router.get("/buildings")
def get_buildings() -> list[dict[str, Any]]:
    return _buildings()


@router.get("/classes")
def get_classes() -> dict[str, list[dict[str, Any]]]:
    return {"classes": _classes(), "specializations": _specializations()}


@router.get("/equipment")
def get_equipment() -> list[dict[str, Any]]:
    return _equipment()


@router.get("/enums", response_model=EnumsResponse)
def get_enums() -> EnumsResponse:
    return _enums()
