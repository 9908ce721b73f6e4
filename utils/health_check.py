"""
Модуль для проверки работоспособности системы
Используется для мониторинга и health checks
"""
from datetime import datetime
from loguru import logger
from config.settings import settings
from database.store import EntityStore
from utils.errors import StorageError

async def check_store_connection(store: EntityStore) -> tuple[bool, str]:
    """
    Проверяет доступность хранилища

    Returns:
        tuple[bool, str]: (доступно ли хранилище, сообщение)
    """
    try:
        await store.ping()
        return True, "Хранилище доступно"
    except StorageError as e:
        logger.error(f"Ошибка подключения к хранилищу: {e.message}")
        return False, f"Ошибка подключения к хранилищу: {e.message}"

async def check_system_health(store: EntityStore) -> dict:
    store_status, store_message = await check_store_connection(store)

    return {
        "status": "healthy" if store_status else "unhealthy",
        "timestamp": datetime.now().isoformat(),
        "checks": {
            "storage": {
                "status": "ok" if store_status else "error",
                "message": store_message
            }
        }
    }

def get_system_info() -> dict:
    if settings.STORAGE_BACKEND == "memory":
        storage_type = "Память"
    elif settings.DATABASE_URL.startswith("postgresql"):
        storage_type = "PostgreSQL"
    else:
        storage_type = "SQLite"

    return {
        "bot_token_set": bool(settings.BOT_TOKEN and settings.BOT_TOKEN != "your_bot_token_here"),
        "storage_type": storage_type,
        "admin_count": len(settings.ADMIN_IDS),
        "booking_duration": settings.DEFAULT_BOOKING_DURATION,
        "party_size": f"{settings.MIN_PARTY_SIZE}-{settings.MAX_PARTY_SIZE}",
        "horizon_days": settings.BOOKING_HORIZON_DAYS
    }
