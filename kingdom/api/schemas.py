"""Pydantic request and response models for the REST API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


# --- Entities ---

class ResourcesSchema(BaseModel):
    gold: int
    mana: int
    supplies: int
    population: int
    max_population: int


class BuildingSchema(BaseModel):
    id: int
    building_type: str
    name: str
    x: int
    y: int
    level: int
    health: int
    max_health: int
    gold_income: int = 0
    mana_income: int = 0
    supplies_income: int = 0
    housing: int = 0


class CombatRecordSchema(BaseModel):
    tick: int
    enemy_id: int
    enemy_type: str
    outcome: str
    damage_dealt: int
    damage_taken: int = 0
    experience_gained: int = 0
    critical: bool = False


class HeroSchema(BaseModel):
    id: int
    hero_class: str
    x: int
    y: int
    health: int
    max_health: int
    damage: int
    speed: int
    guild_id: int | None = None
    target_x: int | None = None
    target_y: int | None = None
    gold: int = 0
    level: int = 1
    experience: int = 0
    experience_to_next: int = 100
    morale: float = 100.0
    state: str
    last_action: str = "idle"
    weapon: str | None = None
    armor: str | None = None
    accessory: str | None = None
    specialization: str | None = None
    combat_history: list[CombatRecordSchema] = Field(default_factory=list)


class EnemySchema(BaseModel):
    id: int
    enemy_type: str
    x: int
    y: int
    health: int
    max_health: int
    damage: int
    reward: int


class FlagSchema(BaseModel):
    id: int
    flag_type: str
    x: int
    y: int
    reward: int
    cost: int


# --- Map ---

class MapCellSchema(BaseModel):
    x: int
    y: int
    building: int | None = None
    hero: int | None = None
    enemy: int | None = None
    flag: int | None = None


class MapResponse(BaseModel):
    width: int
    height: int
    cells: list[MapCellSchema] = Field(description="Occupied cells only; every other cell is empty")


# --- World State ---

class EventSchema(BaseModel):
    tick: int
    category: str
    message: str
    entity_ids: list[int] = Field(default_factory=list)
    metadata: dict[str, Any] | None = None


class WorldStateResponse(BaseModel):
    tick: int
    paused: bool
    game_over: bool
    game_over_reason: str = ""
    resources: ResourcesSchema
    buildings: list[BuildingSchema] = Field(default_factory=list)
    heroes: list[HeroSchema] = Field(default_factory=list)
    enemies: list[EnemySchema] = Field(default_factory=list)
    flags: list[FlagSchema] = Field(default_factory=list)
    events: list[EventSchema] = Field(default_factory=list)


# --- Control ---

class ControlResponse(BaseModel):
    status: str
    message: str
    tick: int = 0


# --- Commands ---

class PlaceBuildingRequest(BaseModel):
    building_type: str
    x: int
    y: int


class PlaceFlagRequest(BaseModel):
    flag_type: str
    x: int
    y: int


class RecruitHeroRequest(BaseModel):
    guild_id: int


class SpecializationRequest(BaseModel):
    specialization: str


class EquipRequest(BaseModel):
    equipment_id: str


class CommandResponse(BaseModel):
    status: str
    reason: str | None = None
    message: str = ""
    entity_id: int | None = None
    tick: int = 0


# --- Config ---

class SimulationConfigResponse(BaseModel):
    world_seed: int
    grid_width: int
    grid_height: int
    max_ticks: int
    hero_act_chance: float
    enemy_act_chance: float
    income_interval: int
    spawn_interval: int
    spawn_chance: float
    respawn_fee: int
    flag_refund_ratio: float
    tick_rate: float


# --- Stats ---

class SimulationStats(BaseModel):
    tick: int
    hero_count: int
    enemy_count: int
    building_count: int
    flag_count: int
    total_gold_earned: int
    heroes_recruited: int
    heroes_lost: int
    enemies_defeated: int
    buildings_constructed: int
    flags_collected: int
    highest_hero_level: int
    running: bool
    paused: bool
    game_over: bool
