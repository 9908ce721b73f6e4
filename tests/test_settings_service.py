import pytest
from datetime import datetime
from services.settings_service import (
    DEFAULT_TABLES,
    ensure_cafe_settings,
    seed_default_tables,
    get_booking_rules,
    get_time_slots_for_date,
    update_cafe_settings
)
from services.table_service import create_table
from utils.errors import ValidationError

@pytest.mark.asyncio
async def test_rules_without_stored_settings(store):
    rules = await get_booking_rules(store)
    assert rules["booking_duration"] == 120
    assert rules["min_party_size"] == 1
    assert rules["max_party_size"] == 10
    assert rules["time_slots"][0] == "09:00"

@pytest.mark.asyncio
async def test_stored_settings_override_defaults(store):
    await ensure_cafe_settings(store)
    await update_cafe_settings(store, booking_duration=90, max_party_size=6)

    rules = await get_booking_rules(store)
    assert rules["booking_duration"] == 90
    assert rules["max_party_size"] == 6

@pytest.mark.asyncio
async def test_ensure_cafe_settings_is_idempotent(store):
    first = await ensure_cafe_settings(store)
    second = await ensure_cafe_settings(store)
    assert first.id == second.id
    assert second.name == "Cafe Delight"

@pytest.mark.asyncio
async def test_seed_default_tables_once(store):
    tables = await seed_default_tables(store)
    again = await seed_default_tables(store)

    assert len(tables) == len(DEFAULT_TABLES) == 8
    assert [t.id for t in again] == [t.id for t in tables]
    assert [t.capacity for t in tables] == [2, 2, 4, 4, 6, 8, 2, 4]

@pytest.mark.asyncio
async def test_time_slots_follow_opening_hours(store):
    await ensure_cafe_settings(store)

    # Воскресенье: закрываемся в 21:00
    sunday = await get_time_slots_for_date(store, datetime(2024, 6, 2))
    assert sunday[0] == "09:00"
    assert sunday[-1] == "20:30"

    # Суббота: до 23:00, последний слот по умолчанию 21:30
    saturday = await get_time_slots_for_date(store, datetime(2024, 6, 1))
    assert saturday[-1] == "21:30"

@pytest.mark.asyncio
async def test_create_table_validation(store):
    await create_table(store, 1, 2)

    with pytest.raises(ValidationError):
        await create_table(store, 1, 4)
    with pytest.raises(ValidationError):
        await create_table(store, 2, 0)
