"""
Сервис настроек кафе
Настройки только читаются ядром бронирования; записываются при инициализации
и из админ-панели
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from loguru import logger
from config.settings import settings
from database.store import EntityStore
from models.cafe_settings import CafeSettings
from models.table import Table
from utils.validators import WEEKDAYS, parse_time

DEFAULT_OPENING_HOURS = {
    "monday": {"open": "09:00", "close": "22:00"},
    "tuesday": {"open": "09:00", "close": "22:00"},
    "wednesday": {"open": "09:00", "close": "22:00"},
    "thursday": {"open": "09:00", "close": "22:00"},
    "friday": {"open": "09:00", "close": "23:00"},
    "saturday": {"open": "09:00", "close": "23:00"},
    "sunday": {"open": "09:00", "close": "21:00"},
}

DEFAULT_TIME_SLOTS = [f"{hour:02d}:{minute:02d}" for hour in range(9, 22) for minute in (0, 30)]

DEFAULT_CAFE_SETTINGS = {
    "name": "Cafe Delight",
    "description": "Fine dining experience with locally-sourced ingredients",
    "address": "123 Main Street, Downtown",
    "phone": "(555) 123-4567",
    "email": "info@cafedelight.com",
    "opening_hours": DEFAULT_OPENING_HOURS,
    "min_party_size": 1,
    "max_party_size": 10,
    "booking_duration": 120,
    "time_slots": DEFAULT_TIME_SLOTS,
    "is_active": True,
}

DEFAULT_TABLES = [
    {"number": 1, "capacity": 2, "location": "Window", "description": "Cozy table by the window with natural light"},
    {"number": 2, "capacity": 2, "location": "Window", "description": "Intimate window seating for two"},
    {"number": 3, "capacity": 4, "location": "Center", "description": "Spacious table in the main dining area"},
    {"number": 4, "capacity": 4, "location": "Center", "description": "Comfortable seating for small groups"},
    {"number": 5, "capacity": 6, "location": "Corner", "description": "Large corner table perfect for groups"},
    {"number": 6, "capacity": 8, "location": "Private", "description": "Semi-private dining area for larger parties"},
    {"number": 7, "capacity": 2, "location": "Patio", "description": "Outdoor seating with garden view"},
    {"number": 8, "capacity": 4, "location": "Patio", "description": "Spacious outdoor dining table"},
]

async def ensure_cafe_settings(store: EntityStore) -> CafeSettings:
    cafe_settings = await store.get_cafe_settings()
    if cafe_settings:
        return cafe_settings

    fields = dict(DEFAULT_CAFE_SETTINGS)
    fields.update(
        min_party_size=settings.MIN_PARTY_SIZE,
        max_party_size=settings.MAX_PARTY_SIZE,
        booking_duration=settings.DEFAULT_BOOKING_DURATION
    )
    cafe_settings = await store.create_cafe_settings(**fields)
    logger.info(f"Созданы настройки кафе по умолчанию: {cafe_settings.name}")
    return cafe_settings

async def seed_default_tables(store: EntityStore) -> List[Table]:
    """Создает стандартный набор столиков, если столиков еще нет"""
    tables = await store.get_tables()
    if tables:
        return tables

    created = []
    for table_data in DEFAULT_TABLES:
        created.append(await store.create_table(**table_data))
    logger.info(f"Создано {len(created)} столиков по умолчанию")
    return created

async def get_booking_rules(store: EntityStore) -> Dict[str, Any]:
    """
    Правила бронирования: настройки кафе из хранилища поверх значений из .env

    Returns:
        Dict с ключами min_party_size, max_party_size, booking_duration,
        time_slots, opening_hours
    """
    cafe_settings = await store.get_cafe_settings()
    rules = {
        "min_party_size": settings.MIN_PARTY_SIZE,
        "max_party_size": settings.MAX_PARTY_SIZE,
        "booking_duration": settings.DEFAULT_BOOKING_DURATION,
        "time_slots": DEFAULT_TIME_SLOTS,
        "opening_hours": DEFAULT_OPENING_HOURS,
    }
    if cafe_settings:
        for key in rules:
            value = getattr(cafe_settings, key, None)
            if value is not None:
                rules[key] = value
    return rules

async def get_time_slots_for_date(store: EntityStore, date: datetime) -> List[str]:
    """Слоты дня, попадающие в часы работы кафе"""
    rules = await get_booking_rules(store)
    day = (rules["opening_hours"] or {}).get(WEEKDAYS[date.weekday()])
    if rules["opening_hours"] and not day:
        return []
    if not day:
        return list(rules["time_slots"])

    open_time = parse_time(day["open"])
    close_time = parse_time(day["close"])
    return [slot for slot in rules["time_slots"] if open_time <= parse_time(slot) < close_time]

async def update_cafe_settings(store: EntityStore, **fields: Any) -> Optional[CafeSettings]:
    cafe_settings = await store.update_cafe_settings(**fields)
    if cafe_settings:
        logger.info(f"Настройки кафе обновлены: {', '.join(fields)}")
    return cafe_settings
