from functools import wraps
from typing import Callable
from aiogram.types import Message, CallbackQuery
from config.settings import settings

def is_admin(user_id: int) -> bool:
    return user_id in settings.ADMIN_IDS

def admin_required(func: Callable) -> Callable:
    @wraps(func)
    async def wrapper(event: Message | CallbackQuery, *args, **kwargs):
        user_id = event.from_user.id if event.from_user else None
        if not user_id:
            if isinstance(event, Message):
                await event.answer("Ошибка: не удалось определить пользователя")
            elif isinstance(event, CallbackQuery):
                await event.answer("Ошибка: не удалось определить пользователя", show_alert=True)
            return

        if not is_admin(user_id):
            if isinstance(event, Message):
                await event.answer("У вас нет прав администратора")
            elif isinstance(event, CallbackQuery):
                await event.answer("У вас нет прав администратора", show_alert=True)
            return

        return await func(event, *args, **kwargs)

    return wrapper
