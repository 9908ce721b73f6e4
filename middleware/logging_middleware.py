from aiogram import BaseMiddleware
from aiogram.types import TelegramObject, Message, CallbackQuery
from loguru import logger
from typing import Callable, Dict, Any, Awaitable

class LoggingMiddleware(BaseMiddleware):
    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any]
    ) -> Any:
        if hasattr(event, 'from_user') and event.from_user:
            user = event.from_user
            if isinstance(event, CallbackQuery):
                action = f"callback {event.data}"
            elif isinstance(event, Message) and event.text and event.text.startswith("/"):
                action = f"command {event.text.split()[0]}"
            else:
                action = type(event).__name__
            logger.info(f"User {user.id} (@{user.username}) - Action: {action}")
        return await handler(event, data)
