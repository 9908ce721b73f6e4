from typing import List, Optional
from loguru import logger
from database.store import EntityStore
from models.table import Table
from utils.errors import ValidationError

async def get_all_tables(store: EntityStore, active_only: bool = True) -> List[Table]:
    return await store.get_tables(active_only=active_only)

async def get_table_by_id(store: EntityStore, table_id: int) -> Optional[Table]:
    return await store.get_table_by_id(table_id)

async def create_table(store: EntityStore, number: int, capacity: int, location: Optional[str] = None,
                       description: Optional[str] = None, is_active: bool = True) -> Table:
    if capacity < 1:
        raise ValidationError("Вместимость столика должна быть не меньше 1")
    existing = await store.get_tables()
    if any(t.number == number for t in existing):
        raise ValidationError(f"Столик №{number} уже существует")

    table = await store.create_table(number, capacity, location, description, is_active)
    logger.info(f"Создан столик №{table.number} на {table.capacity} мест")
    return table

async def update_table(store: EntityStore, table_id: int, capacity: Optional[int] = None,
                       location: Optional[str] = None, description: Optional[str] = None,
                       is_active: Optional[bool] = None) -> Optional[Table]:
    fields = {}
    if capacity is not None:
        if capacity < 1:
            raise ValidationError("Вместимость столика должна быть не меньше 1")
        fields["capacity"] = capacity
    if location is not None:
        fields["location"] = location
    if description is not None:
        fields["description"] = description
    if is_active is not None:
        fields["is_active"] = is_active

    table = await store.update_table(table_id, **fields)
    if table:
        logger.info(f"Столик №{table.number} обновлен: {', '.join(fields) or 'без изменений'}")
    return table

async def set_table_active(store: EntityStore, table_id: int, is_active: bool) -> Optional[Table]:
    return await update_table(store, table_id, is_active=is_active)
