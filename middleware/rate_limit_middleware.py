from aiogram import BaseMiddleware
from aiogram.types import TelegramObject, Message, CallbackQuery
from typing import Callable, Deque, Dict, Any, Awaitable
from collections import defaultdict, deque
from datetime import datetime, timedelta
from loguru import logger

class RateLimitMiddleware(BaseMiddleware):
    """Ограничивает число запросов пользователя в скользящем окне"""

    def __init__(self, max_requests: int = 10, time_window: int = 60):
        self.max_requests = max_requests
        self.window = timedelta(seconds=time_window)
        self.user_requests: Dict[int, Deque[datetime]] = defaultdict(deque)

    def is_limited(self, user_id: int, now: datetime) -> bool:
        requests = self.user_requests[user_id]
        while requests and now - requests[0] >= self.window:
            requests.popleft()
        if len(requests) >= self.max_requests:
            return True
        requests.append(now)
        return False

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any]
    ) -> Any:
        if isinstance(event, (Message, CallbackQuery)) and event.from_user:
            user_id = event.from_user.id
            if self.is_limited(user_id, datetime.now()):
                logger.warning(f"Rate limit exceeded for user {user_id}")
                if isinstance(event, Message):
                    await event.answer(
                        "⚠️ <b>Слишком много запросов</b>\n\n"
                        "Пожалуйста, подождите немного перед следующим запросом.",
                        parse_mode="HTML"
                    )
                else:
                    await event.answer(
                        "Слишком много запросов. Пожалуйста, подождите.",
                        show_alert=True
                    )
                return None

        return await handler(event, data)
