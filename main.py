import asyncio
import sys
from aiogram import Bot, Dispatcher
from aiogram.fsm.storage.memory import MemoryStorage
from loguru import logger
from config.settings import settings
from handlers import start, help, callbacks, booking, my_bookings, admin
from database.database import create_store
from middleware.logging_middleware import LoggingMiddleware
from middleware.error_middleware import ErrorMiddleware
from middleware.rate_limit_middleware import RateLimitMiddleware
from services.settings_service import ensure_cafe_settings, seed_default_tables
from pathlib import Path

logger.remove()
logger.add(
    sys.stdout,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
    level=settings.LOG_LEVEL
)
logger.add(
    "logs/bot_{time:YYYY-MM-DD}.log",
    rotation="00:00",
    retention="30 days",
    format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
    level="DEBUG"
)

def setup_dispatcher(store) -> Dispatcher:
    # Хранилище доступно обработчикам как параметр store
    dp = Dispatcher(storage=MemoryStorage(), store=store)

    dp.message.middleware(LoggingMiddleware())
    dp.callback_query.middleware(LoggingMiddleware())
    dp.message.middleware(RateLimitMiddleware(settings.RATE_LIMIT_MESSAGES, settings.RATE_LIMIT_WINDOW))
    dp.callback_query.middleware(RateLimitMiddleware(settings.RATE_LIMIT_CALLBACKS, settings.RATE_LIMIT_WINDOW))
    dp.message.middleware(ErrorMiddleware())
    dp.callback_query.middleware(ErrorMiddleware())

    logger.info("Регистрация роутеров...")
    dp.include_router(start.router)
    dp.include_router(help.router)
    dp.include_router(callbacks.router)
    dp.include_router(booking.router)
    dp.include_router(my_bookings.router)
    dp.include_router(admin.router)
    logger.info("✅ Все роутеры зарегистрированы")
    return dp

async def main():
    Path("logs").mkdir(exist_ok=True)

    if not settings.BOT_TOKEN:
        logger.error("BOT_TOKEN не установлен в .env файле!")
        return

    logger.info(f"Инициализация хранилища ({settings.STORAGE_BACKEND})...")
    store = await create_store()
    await ensure_cafe_settings(store)
    await seed_default_tables(store)
    logger.info("✅ Хранилище инициализировано")

    bot = Bot(token=settings.BOT_TOKEN)
    dp = setup_dispatcher(store)

    logger.info("🚀 Бот запущен и готов к работе!")
    logger.info(f"👤 ADMIN_IDS: {settings.ADMIN_IDS}")

    try:
        await dp.start_polling(bot)
    finally:
        await store.close()
        await bot.session.close()

if __name__ == '__main__':
    asyncio.run(main())
