"""GET /api/v1/state, /stats, /events: dynamic kingdom data (polled by UI)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from kingdom.api.dependencies import get_engine_manager
from kingdom.api.engine_manager import EngineManager
from kingdom.api.schemas import (
    BuildingSchema,
    CombatRecordSchema,
    EnemySchema,
    EventSchema,
    FlagSchema,
    HeroSchema,
    ResourcesSchema,
    SimulationStats,
    WorldStateResponse,
)
from kingdom.core.buildings import BUILDING_DEFS
from kingdom.core.models import Building, Enemy, Flag, Hero
from kingdom.core.snapshot import Snapshot
from kingdom.utils.event_log import SimEvent

router = APIRouter()


def _require_snapshot(manager: EngineManager) -> Snapshot:
    snapshot = manager.get_snapshot()
    if snapshot is None:
        raise HTTPException(status_code=503, detail="No snapshot available yet.")
    return snapshot


def _serialize_building(b: Building) -> BuildingSchema:
    bdef = BUILDING_DEFS.get(b.building_type)
    return BuildingSchema(
        id=b.id, building_type=b.building_type, name=bdef.name if bdef else b.building_type,
        x=b.pos.x, y=b.pos.y, level=b.level, health=b.health, max_health=b.max_health,
        gold_income=b.gold_income, mana_income=b.mana_income,
        supplies_income=b.supplies_income, housing=b.housing,
    )


def _serialize_hero(h: Hero) -> HeroSchema:
    return HeroSchema(
        id=h.id, hero_class=h.hero_class, x=h.pos.x, y=h.pos.y,
        health=h.health, max_health=h.effective_max_health(),
        damage=h.effective_damage(), speed=h.effective_speed(),
        guild_id=h.guild_id,
        target_x=h.target.x if h.target else None,
        target_y=h.target.y if h.target else None,
        gold=h.gold, level=h.level, experience=h.experience,
        experience_to_next=h.experience_to_next, morale=round(h.morale, 2),
        state=h.state.name.lower(), last_action=h.last_action,
        weapon=h.weapon, armor=h.armor, accessory=h.accessory,
        specialization=h.specialization,
        combat_history=[
            CombatRecordSchema(
                tick=r.tick, enemy_id=r.enemy_id, enemy_type=r.enemy_type,
                outcome=r.outcome.value, damage_dealt=r.damage_dealt,
                damage_taken=r.damage_taken, experience_gained=r.experience_gained,
                critical=r.critical,
            )
            for r in h.combat_history[-10:]
        ],
    )


def _serialize_enemy(e: Enemy) -> EnemySchema:
    return EnemySchema(
        id=e.id, enemy_type=e.enemy_type, x=e.pos.x, y=e.pos.y,
        health=e.health, max_health=e.max_health, damage=e.damage, reward=e.reward,
    )


def _serialize_flag(f: Flag) -> FlagSchema:
    return FlagSchema(id=f.id, flag_type=f.flag_type, x=f.pos.x, y=f.pos.y, reward=f.reward, cost=f.cost)


def _serialize_event(e: SimEvent) -> EventSchema:
    return EventSchema(
        tick=e.tick, category=e.category, message=e.message,
        entity_ids=list(e.entity_ids), metadata=e.metadata,
    )


@router.get("/state", response_model=WorldStateResponse)
def get_state(
    since_tick: int = Query(0, ge=0, description="Only return events since this tick"),
    manager: EngineManager = Depends(get_engine_manager),
) -> WorldStateResponse:
    snapshot = _require_snapshot(manager)
    r = snapshot.resources
    return WorldStateResponse(
        tick=snapshot.tick,
        paused=snapshot.paused,
        game_over=snapshot.game_over,
        game_over_reason=snapshot.game_over_reason,
        resources=ResourcesSchema(
            gold=r.gold, mana=r.mana, supplies=r.supplies,
            population=r.population, max_population=r.max_population,
        ),
        buildings=[_serialize_building(b) for b in snapshot.buildings.values()],
        heroes=[_serialize_hero(h) for h in snapshot.heroes.values()],
        enemies=[_serialize_enemy(e) for e in snapshot.enemies.values()],
        flags=[_serialize_flag(f) for f in snapshot.flags.values()],
        events=[_serialize_event(e) for e in manager.event_log.since_tick(since_tick)[-100:]],
    )


@router.get("/stats", response_model=SimulationStats)
def get_stats(manager: EngineManager = Depends(get_engine_manager)) -> SimulationStats:
    snapshot = _require_snapshot(manager)
    s = snapshot.statistics
    return SimulationStats(
        tick=snapshot.tick,
        hero_count=len(snapshot.heroes),
        enemy_count=len(snapshot.enemies),
        building_count=len(snapshot.buildings),
        flag_count=len(snapshot.flags),
        total_gold_earned=s.total_gold_earned,
        heroes_recruited=s.heroes_recruited,
        heroes_lost=s.heroes_lost,
        enemies_defeated=s.enemies_defeated,
        buildings_constructed=s.buildings_constructed,
        flags_collected=s.flags_collected,
        highest_hero_level=s.highest_hero_level,
        running=manager.running,
        paused=snapshot.paused,
        game_over=snapshot.game_over,
    )


@router.get("/events", response_model=list[EventSchema])
def get_events(
    since_tick: int | None = Query(None, ge=0, description="Only events at or after this tick"),
    limit: int = Query(50, ge=1, le=500),
    manager: EngineManager = Depends(get_engine_manager),
) -> list[EventSchema]:
    if since_tick is None:
        events = manager.event_log.latest(limit)
    else:
        events = manager.event_log.since_tick(since_tick)[-limit:]
    return [_serialize_event(e) for e in events]
