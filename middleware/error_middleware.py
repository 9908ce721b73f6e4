from aiogram import BaseMiddleware
from aiogram.types import TelegramObject, Message, CallbackQuery
from aiogram.exceptions import TelegramBadRequest
from loguru import logger
from typing import Callable, Dict, Any, Awaitable
from utils.errors import BookingError, StorageError

GENERIC_ERROR = (
    "Произошла ошибка при обработке запроса. "
    "Попробуйте позже или обратитесь к администратору."
)

class ErrorMiddleware(BaseMiddleware):
    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any]
    ) -> Any:
        try:
            return await handler(event, data)
        except TelegramBadRequest as e:
            if "message is not modified" in str(e).lower() and isinstance(event, CallbackQuery):
                await event.answer()
                return None
            logger.exception(f"Ошибка Telegram API в обработчике: {e}")
            await self._notify(event, GENERIC_ERROR)
        except StorageError as e:
            logger.error(f"Ошибка хранилища в обработчике: {e.message}")
            await self._notify(event, GENERIC_ERROR)
        except BookingError as e:
            # Бизнес-ошибки, не перехваченные обработчиком, показываем пользователю как есть
            logger.warning(f"Необработанная ошибка бронирования ({e.code}): {e.message}")
            await self._notify(event, f"❌ {e.message}")
        except Exception as e:
            logger.exception(f"Error in handler: {e}")
            await self._notify(event, GENERIC_ERROR)
        return None

    @staticmethod
    async def _notify(event: TelegramObject, text: str) -> None:
        try:
            if isinstance(event, Message):
                await event.answer(text)
            elif isinstance(event, CallbackQuery):
                await event.answer(text, show_alert=True)
        except Exception as inner_e:
            logger.exception(f"Error in error handler: {inner_e}")
