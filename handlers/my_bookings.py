from aiogram import Router
from aiogram.types import Message, CallbackQuery, InlineKeyboardMarkup, InlineKeyboardButton
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State, StatesGroup
from loguru import logger
from database.store import EntityStore
from services.booking_service import cancel_booking, get_booking_by_id, get_bookings_by_customer_email
from utils.errors import InvalidTransitionError, NotFoundError
from utils.formatters import format_booking, format_booking_short
from utils.keyboards import get_back_keyboard, get_cancel_keyboard
from utils.validators import normalize_email, validate_email

router = Router()

class MyBookingsStates(StatesGroup):
    waiting_for_email = State()

ASK_EMAIL_TEXT = "📧 Введите email, указанный при бронировании:"

@router.message(Command("mybookings"))
async def cmd_my_bookings(message: Message, state: FSMContext):
    await state.set_state(MyBookingsStates.waiting_for_email)
    await message.answer(ASK_EMAIL_TEXT, reply_markup=get_cancel_keyboard())

@router.callback_query(lambda c: c.data == "my_bookings")
async def callback_my_bookings(callback: CallbackQuery, state: FSMContext, store: EntityStore):
    email = (await state.get_data()).get("my_bookings_email")
    if email:
        await send_bookings_list(callback.message, state, store, email, edit=True)
    else:
        await state.set_state(MyBookingsStates.waiting_for_email)
        await callback.message.edit_text(ASK_EMAIL_TEXT, reply_markup=get_cancel_keyboard())
    await callback.answer()

@router.callback_query(lambda c: c.data == "my_bookings_other_email")
async def callback_other_email(callback: CallbackQuery, state: FSMContext):
    await state.update_data(my_bookings_email=None)
    await state.set_state(MyBookingsStates.waiting_for_email)
    await callback.message.edit_text(ASK_EMAIL_TEXT, reply_markup=get_cancel_keyboard())
    await callback.answer()

@router.message(MyBookingsStates.waiting_for_email)
async def process_my_bookings_email(message: Message, state: FSMContext, store: EntityStore):
    email = (message.text or "").strip()
    is_valid, error_msg = validate_email(email)
    if not is_valid:
        await message.answer(f"❌ {error_msg}. Попробуйте еще раз:", reply_markup=get_cancel_keyboard())
        return
    await send_bookings_list(message, state, store, normalize_email(email))

async def send_bookings_list(message: Message, state: FSMContext, store: EntityStore, email: str, edit: bool = False):
    await state.set_state(None)
    try:
        bookings = await get_bookings_by_customer_email(store, email)
    except NotFoundError:
        bookings = []

    if not bookings:
        text = (
            "📭 <b>Броней не найдено</b>\n\n"
            "💡 Используйте кнопку '📅 Забронировать столик' для новой брони."
        )
        keyboard = InlineKeyboardMarkup(inline_keyboard=[
            [InlineKeyboardButton(text="📧 Другой email", callback_data="my_bookings_other_email")],
            [InlineKeyboardButton(text="🏠 Главное меню", callback_data="start")]
        ])
    else:
        await state.update_data(my_bookings_email=email)
        text = f"📋 <b>Ваши брони</b> ({len(bookings)})\n\n" + "\n".join(
            format_booking_short(b) for b in bookings
        )
        rows = [
            [InlineKeyboardButton(
                text=f"❌ Отменить #{b.id}",
                callback_data=f"user_cancel_booking_{b.id}"
            )]
            for b in bookings if b.is_active
        ]
        rows.append([InlineKeyboardButton(text="📧 Другой email", callback_data="my_bookings_other_email")])
        rows.append([InlineKeyboardButton(text="🏠 Главное меню", callback_data="start")])
        keyboard = InlineKeyboardMarkup(inline_keyboard=rows)

    if edit:
        await message.edit_text(text, reply_markup=keyboard, parse_mode="HTML")
    else:
        await message.answer(text, reply_markup=keyboard, parse_mode="HTML")

@router.callback_query(lambda c: c.data.startswith("user_cancel_booking_"))
async def callback_user_cancel_booking(callback: CallbackQuery, state: FSMContext, store: EntityStore):
    try:
        booking_id = int(callback.data.replace("user_cancel_booking_", ""))
    except ValueError:
        await callback.answer("Некорректная бронь", show_alert=True)
        return

    email = (await state.get_data()).get("my_bookings_email")
    booking = await get_booking_by_id(store, booking_id)
    # Отменить можно только бронь, найденную по email из состояния этого пользователя.
    # Email не подтверждается, так что это защита от случайной отмены, а не авторизация
    # TODO: хранить telegram id автора брони и сверять его с callback.from_user.id
    if not booking or not email or booking.customer.email != email:
        await callback.answer("Бронь не найдена", show_alert=True)
        return

    try:
        booking = await cancel_booking(store, booking_id)
    except (InvalidTransitionError, NotFoundError) as e:
        await callback.answer(e.message, show_alert=True)
        return

    logger.info(f"Пользователь {callback.from_user.id} отменил бронь #{booking_id}")
    await callback.message.edit_text(
        f"❌ <b>Бронь отменена</b>\n{format_booking(booking)}",
        reply_markup=get_back_keyboard("my_bookings", "◀️ К моим броням"),
        parse_mode="HTML"
    )
    await callback.answer("Бронь отменена")
