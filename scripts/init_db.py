import asyncio
import sys
from pathlib import Path

# Добавляем корневую директорию проекта в PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from datetime import datetime, timedelta
from config.settings import settings
from database.base import Base
from database.database import create_engine_for_url, init_db
from database.sql_store import SqlEntityStore
from services.booking_service import create_booking, update_booking_status
from services.settings_service import ensure_cafe_settings, seed_default_tables
from models.booking import BookingStatus

DEMO_CUSTOMERS = [
    {"name": "Иван Петров", "email": "ivan.petrov@gmail.com", "phone": "+7 (900) 123-45-67"},
    {"name": "Мария Соколова", "email": "maria.sokolova@gmail.com", "phone": None},
    {"name": "Алексей Смирнов", "email": "alexey.smirnov@gmail.com", "phone": "+7 (900) 765-43-21"},
]

async def create_demo_bookings(store: SqlEntityStore, tables) -> int:
    """Несколько броней на завтра для проверки админ-панели"""
    tomorrow = (datetime.now() + timedelta(days=1)).replace(hour=0, minute=0, second=0, microsecond=0)
    demo = [
        (DEMO_CUSTOMERS[0], tables[2], tomorrow.replace(hour=19), 4, BookingStatus.CONFIRMED, "Столик у окна, если можно"),
        (DEMO_CUSTOMERS[1], tables[0], tomorrow.replace(hour=13), 2, BookingStatus.PENDING, None),
        (DEMO_CUSTOMERS[2], tables[4], tomorrow.replace(hour=20, minute=30), 6, BookingStatus.PENDING, "День рождения"),
    ]

    created = 0
    for customer, table, date, party_size, status, requests in demo:
        booking = await create_booking(store, customer, table.id, date, party_size, requests)
        if status != BookingStatus.PENDING:
            await update_booking_status(store, booking.id, status)
        created += 1
    return created

async def create_test_data(force: bool = False, demo: bool = False):
    """
    Создает начальные данные для бота:
    - Настройки кафе
    - Стандартный набор столиков
    - Демонстрационные брони (опционально)

    Args:
        force: Если True, удаляет существующие данные и создает заново
        demo: Если True, создает демонстрационные брони на завтра
    """
    print("[INFO] Инициализация базы данных...")
    engine = create_engine_for_url(settings.DATABASE_URL)

    if force:
        print("[INFO] Удаление существующих данных...")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        print("[OK] Старые данные удалены")

    session_factory = await init_db(engine)
    store = SqlEntityStore(session_factory, engine)

    try:
        existing_tables = await store.get_tables()
        if existing_tables and not force:
            print("[WARNING] Данные уже существуют")
            print("[TIP] Используйте --force для пересоздания данных")
            return

        cafe_settings = await ensure_cafe_settings(store)
        print(f"[OK] Настройки кафе: {cafe_settings.name}")

        tables = await seed_default_tables(store)
        print(f"[OK] Создано {len(tables)} столиков")

        bookings_created = 0
        if demo:
            print("[INFO] Создание демонстрационных броней...")
            bookings_created = await create_demo_bookings(store, tables)
            print(f"[OK] Создано {bookings_created} броней")

        print("\n" + "="*50)
        print("[SUCCESS] Данные успешно созданы!")
        print("="*50)
        print("[STATS] Статистика:")
        print(f"   - Столиков: {len(tables)}")
        print(f"   - Мест: {sum(t.capacity for t in tables)}")
        print(f"   - Броней: {bookings_created}")
        print("\n[TIP] Теперь вы можете запустить бота и протестировать функциональность!")
    finally:
        await store.close()

if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Инициализация данных бота бронирования")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Удалить существующие данные и создать заново"
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Создать демонстрационные брони на завтра"
    )

    args = parser.parse_args()
    asyncio.run(create_test_data(force=args.force, demo=args.demo))
