from aiogram import Router
from aiogram.types import Message
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from database.store import EntityStore
from services.settings_service import ensure_cafe_settings
from utils.decorators import is_admin
from utils.keyboards import get_main_menu_keyboard
from loguru import logger

router = Router()

async def get_welcome_text(store: EntityStore, first_name: str) -> str:
    cafe_settings = await ensure_cafe_settings(store)
    return f"""👋 <b>Добро пожаловать в {cafe_settings.name}!</b>

Привет, <b>{first_name}</b>! 🍷

Я помогу забронировать столик быстро и удобно.

📋 <b>Что я умею:</b>

📅 Бронировать столик на нужные дату и время
📋 Показывать ваши брони по email
🪑 Рассказывать о столиках кафе

💡 Выберите действие из меню ниже 👇"""

@router.message(Command("start"))
async def cmd_start(message: Message, state: FSMContext, store: EntityStore):
    user_id = message.from_user.id
    logger.info(f"Команда /start от пользователя {user_id} (@{message.from_user.username or 'без username'})")

    await state.clear()
    welcome_text = await get_welcome_text(store, message.from_user.first_name or "гость")
    await message.answer(
        welcome_text,
        reply_markup=get_main_menu_keyboard(is_admin=is_admin(user_id)),
        parse_mode="HTML"
    )
