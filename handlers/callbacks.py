from aiogram import Router
from aiogram.types import CallbackQuery, Message, InlineKeyboardMarkup, InlineKeyboardButton
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from database.store import EntityStore
from handlers.start import get_welcome_text
from services.table_service import get_all_tables
from utils.decorators import is_admin
from utils.formatters import format_tables_list
from utils.keyboards import get_main_menu_keyboard, get_back_keyboard

router = Router()

@router.callback_query(lambda c: c.data == "cancel")
async def callback_cancel(callback: CallbackQuery, state: FSMContext):
    await state.clear()
    await callback.message.edit_text(
        "❌ <b>Операция отменена</b>\n\n"
        "💡 Выберите действие из главного меню:",
        reply_markup=get_main_menu_keyboard(is_admin=is_admin(callback.from_user.id)),
        parse_mode="HTML"
    )
    await callback.answer()

@router.message(Command("cancel"))
async def cmd_cancel(message: Message, state: FSMContext):
    current_state = await state.get_state()
    await state.clear()
    keyboard = get_main_menu_keyboard(is_admin=is_admin(message.from_user.id))

    if current_state and "BookingStates" in current_state:
        await message.answer(
            "❌ <b>Бронирование отменено</b>\n\n"
            "💡 Вы можете начать заново из главного меню.",
            reply_markup=InlineKeyboardMarkup(inline_keyboard=[
                [InlineKeyboardButton(text="📅 Забронировать столик", callback_data="create_booking")],
                [InlineKeyboardButton(text="🏠 Главное меню", callback_data="start")]
            ]),
            parse_mode="HTML"
        )
    elif current_state:
        await message.answer(
            "❌ <b>Операция отменена</b>\n\n"
            "💡 Выберите действие из главного меню:",
            reply_markup=keyboard,
            parse_mode="HTML"
        )
    else:
        await message.answer(
            "❌ <b>Нет активных операций для отмены</b>\n\n"
            "💡 Выберите действие из главного меню:",
            reply_markup=keyboard,
            parse_mode="HTML"
        )

@router.callback_query(lambda c: c.data == "start")
async def callback_start(callback: CallbackQuery, state: FSMContext, store: EntityStore):
    await state.clear()
    welcome_text = await get_welcome_text(store, callback.from_user.first_name or "гость")
    await callback.message.edit_text(
        welcome_text,
        reply_markup=get_main_menu_keyboard(is_admin=is_admin(callback.from_user.id)),
        parse_mode="HTML"
    )
    await callback.answer()

@router.callback_query(lambda c: c.data == "tables_list")
async def callback_tables_list(callback: CallbackQuery, store: EntityStore):
    tables = await get_all_tables(store, active_only=True)
    await callback.message.edit_text(
        f"🪑 <b>Столики кафе</b>\n\n{format_tables_list(tables)}",
        reply_markup=get_back_keyboard(),
        parse_mode="HTML"
    )
    await callback.answer()
