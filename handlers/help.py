from aiogram import Router
from aiogram.types import Message, CallbackQuery
from aiogram.filters import Command
from database.store import EntityStore
from services.settings_service import get_booking_rules
from utils.keyboards import get_back_keyboard

router = Router()

async def get_help_text(store: EntityStore) -> str:
    rules = await get_booking_rules(store)
    return f"""
📖 <b>Помощь</b>

🎯 <b>Основные функции:</b>

📅 <b>Забронировать столик</b>
   Выберите дату, время, количество гостей и свободный столик

📋 <b>Мои брони</b>
   Найдите свои брони по email, указанному при бронировании

🪑 <b>Столики</b>
   Список столиков кафе и их вместимость

ℹ️ <b>Правила:</b>

Бронь длится <b>{rules['booking_duration']} мин.</b>
Гостей: от <b>{rules['min_party_size']}</b> до <b>{rules['max_party_size']}</b>
Новая бронь ожидает подтверждения администратором

⌨️ <b>Команды:</b>

/start - Главное меню
/book - Забронировать столик
/mybookings - Мои брони
/help - Эта справка
/cancel - Отменить текущую операцию
    """

@router.message(Command("help"))
async def cmd_help(message: Message, store: EntityStore):
    await message.answer(await get_help_text(store), reply_markup=get_back_keyboard(), parse_mode="HTML")

@router.callback_query(lambda c: c.data == "help")
async def callback_help(callback: CallbackQuery, store: EntityStore):
    await callback.message.edit_text(await get_help_text(store), reply_markup=get_back_keyboard(), parse_mode="HTML")
    await callback.answer()
