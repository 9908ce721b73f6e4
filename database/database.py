from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool, StaticPool
from config.settings import settings
from database.base import Base
from database.store import EntityStore
from loguru import logger
import models  # noqa: F401  регистрирует все таблицы в Base.metadata

def create_engine_for_url(database_url: str) -> AsyncEngine:
    """
    Создает движок для подключения к базе данных
    Поддерживает SQLite (для разработки) и PostgreSQL (для продакшена)
    """
    if database_url.startswith("sqlite"):
        # SQLite для локальной разработки
        database_url = database_url.replace("sqlite:///", "sqlite+aiosqlite:///")
        if ":memory:" in database_url:
            # Одно соединение на весь процесс, иначе каждая сессия увидит пустую базу
            logger.info("Используется SQLite в памяти")
            return create_async_engine(
                database_url,
                echo=False,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False}
            )
        logger.info("Используется SQLite база данных (локальная разработка)")
        return create_async_engine(
            database_url,
            echo=False,
            poolclass=NullPool,  # SQLite не поддерживает пулы
            connect_args={"check_same_thread": False}
        )

    if database_url.startswith("postgresql://") or database_url.startswith("postgresql+asyncpg://"):
        # PostgreSQL для продакшена
        if not database_url.startswith("postgresql+asyncpg://"):
            database_url = database_url.replace("postgresql://", "postgresql+asyncpg://")
        logger.info("Используется PostgreSQL база данных (продакшен)")
        return create_async_engine(
            database_url,
            echo=False,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,  # Проверка соединения перед использованием
            pool_recycle=3600,   # Переиспользование соединений каждый час
        )

    logger.warning(f"Неизвестный тип базы данных: {database_url}. Используются стандартные настройки.")
    return create_async_engine(database_url, echo=False)

async def init_db(engine: AsyncEngine) -> async_sessionmaker:
    """
    Создает таблицы, если их нет, и возвращает фабрику сессий
    """
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("База данных инициализирована успешно")
    except Exception as e:
        logger.error(f"Ошибка при инициализации базы данных: {e}")
        raise

    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

async def create_store(backend: Optional[str] = None, database_url: Optional[str] = None) -> EntityStore:
    """
    Собирает хранилище по конфигурации: STORAGE_BACKEND=sql|memory
    Вызывается один раз при старте процесса; закрывает его тот, кто создал
    """
    backend = (backend or settings.STORAGE_BACKEND).lower()

    if backend == "memory":
        from database.memory_store import MemoryEntityStore
        logger.info("Используется хранилище в памяти")
        return MemoryEntityStore()

    if backend != "sql":
        raise ValueError(f"Неизвестный тип хранилища: {backend}")

    from database.sql_store import SqlEntityStore
    engine = create_engine_for_url(database_url or settings.DATABASE_URL)
    session_factory = await init_db(engine)
    return SqlEntityStore(session_factory, engine)
