"""
Мастер бронирования столика
Дата -> время -> количество гостей -> свободный столик -> контакты -> подтверждение
"""
from datetime import datetime
from html import escape
from aiogram import Router
from aiogram.types import Message, CallbackQuery, InlineKeyboardMarkup, InlineKeyboardButton
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State, StatesGroup
from loguru import logger
from config.settings import settings
from database.store import EntityStore
from services.booking_api import create_booking_request
from services.booking_service import find_available_tables
from services.settings_service import get_booking_rules, get_time_slots_for_date
from utils.callback_data import CallbackData
from utils.formatters import format_date, format_datetime
from utils.keyboards import (
    get_cancel_keyboard,
    get_confirm_booking_keyboard,
    get_dates_keyboard,
    get_party_size_keyboard,
    get_skip_keyboard,
    get_slots_keyboard,
    get_tables_keyboard
)
from utils.messages import format_booking_created, format_booking_failed, format_no_tables_message
from utils.validators import (
    is_within_opening_hours,
    validate_booking_date,
    validate_booking_time,
    validate_email,
    validate_name,
    validate_time_slot
)

router = Router()

class BookingStates(StatesGroup):
    choosing_date = State()
    choosing_slot = State()
    choosing_party_size = State()
    choosing_table = State()
    waiting_for_name = State()
    waiting_for_email = State()
    waiting_for_phone = State()
    waiting_for_requests = State()
    confirming = State()

DATES_TEXT = (
    "📅 <b>Бронирование столика</b>\n\n"
    "Шаг 1 из 5. Выберите дату:"
)

@router.message(Command("book"))
async def cmd_book(message: Message, state: FSMContext):
    await state.clear()
    await state.set_state(BookingStates.choosing_date)
    await message.answer(
        DATES_TEXT,
        reply_markup=get_dates_keyboard(settings.BOOKING_HORIZON_DAYS),
        parse_mode="HTML"
    )

@router.callback_query(lambda c: c.data == "create_booking")
async def callback_create_booking(callback: CallbackQuery, state: FSMContext):
    await state.clear()
    await state.set_state(BookingStates.choosing_date)
    await callback.message.edit_text(
        DATES_TEXT,
        reply_markup=get_dates_keyboard(settings.BOOKING_HORIZON_DAYS),
        parse_mode="HTML"
    )
    await callback.answer()

@router.callback_query(BookingStates.choosing_date, lambda c: c.data.startswith("booking_date_"))
async def callback_booking_date(callback: CallbackQuery, state: FSMContext, store: EntityStore):
    booking_date = CallbackData.parse_booking_date(callback.data)
    if not booking_date:
        await callback.answer("Некорректная дата", show_alert=True)
        return

    is_valid, error_msg = validate_booking_date(booking_date)
    if not is_valid:
        await callback.answer(error_msg, show_alert=True)
        return

    now = datetime.now()
    slots = [
        slot for slot in await get_time_slots_for_date(store, booking_date)
        if booking_date.replace(hour=int(slot[:2]), minute=int(slot[3:])) > now
    ]
    if not slots:
        await callback.answer("На эту дату нет доступного времени, выберите другую", show_alert=True)
        return

    await state.update_data(booking_date=booking_date.strftime("%Y-%m-%d"))
    await state.set_state(BookingStates.choosing_slot)
    await callback.message.edit_text(
        f"📅 <b>{format_date(booking_date)}</b>\n\n"
        "Шаг 2 из 5. Выберите время:",
        reply_markup=get_slots_keyboard(slots),
        parse_mode="HTML"
    )
    await callback.answer()

@router.callback_query(BookingStates.choosing_slot, lambda c: c.data.startswith("booking_slot_"))
async def callback_booking_slot(callback: CallbackQuery, state: FSMContext, store: EntityStore):
    slot = CallbackData.parse_booking_slot(callback.data)
    data = await state.get_data()
    if not slot or "booking_date" not in data:
        await callback.answer("Некорректное время", show_alert=True)
        return

    rules = await get_booking_rules(store)
    is_valid, error_msg = validate_time_slot(slot, rules["time_slots"])
    if not is_valid:
        await callback.answer(error_msg, show_alert=True)
        return

    start = datetime.strptime(f"{data['booking_date']} {slot}", "%Y-%m-%d %H:%M")
    for check in (validate_booking_time(start), is_within_opening_hours(start, rules["opening_hours"])):
        is_valid, error_msg = check
        if not is_valid:
            await callback.answer(error_msg, show_alert=True)
            return

    await state.update_data(booking_start=start.isoformat())
    await state.set_state(BookingStates.choosing_party_size)
    await callback.message.edit_text(
        f"🕐 <b>{format_datetime(start)}</b>\n\n"
        "Шаг 3 из 5. Сколько будет гостей?",
        reply_markup=get_party_size_keyboard(rules["min_party_size"], rules["max_party_size"]),
        parse_mode="HTML"
    )
    await callback.answer()

@router.callback_query(BookingStates.choosing_party_size, lambda c: c.data.startswith("booking_party_"))
async def callback_booking_party(callback: CallbackQuery, state: FSMContext, store: EntityStore):
    party_size = CallbackData.parse_booking_party(callback.data)
    data = await state.get_data()
    if not party_size or "booking_start" not in data:
        await callback.answer("Некорректное количество гостей", show_alert=True)
        return

    start = datetime.fromisoformat(data["booking_start"])
    tables = await find_available_tables(store, start, party_size)
    if not tables:
        await callback.message.edit_text(
            format_no_tables_message(start, party_size),
            reply_markup=InlineKeyboardMarkup(inline_keyboard=[
                [InlineKeyboardButton(
                    text="🕐 Другое время",
                    callback_data=CallbackData.create_booking_date(start)
                )],
                [InlineKeyboardButton(text="📅 Другая дата", callback_data="create_booking")],
                [InlineKeyboardButton(text="🏠 Главное меню", callback_data="start")]
            ]),
            parse_mode="HTML"
        )
        await state.set_state(BookingStates.choosing_date)
        await callback.answer()
        return

    await state.update_data(party_size=party_size)
    await state.set_state(BookingStates.choosing_table)
    await callback.message.edit_text(
        f"🕐 <b>{format_datetime(start)}</b> · 👥 {party_size}\n\n"
        f"Шаг 4 из 5. Свободные столики ({len(tables)}):",
        reply_markup=get_tables_keyboard(tables),
        parse_mode="HTML"
    )
    await callback.answer()

@router.callback_query(BookingStates.choosing_table, lambda c: c.data.startswith("booking_table_"))
async def callback_booking_table(callback: CallbackQuery, state: FSMContext):
    table_id = CallbackData.parse_booking_table(callback.data)
    if not table_id:
        await callback.answer("Некорректный столик", show_alert=True)
        return

    await state.update_data(table_id=table_id)
    await state.set_state(BookingStates.waiting_for_name)
    await callback.message.edit_text(
        "👤 Шаг 5 из 5. Контактные данные\n\n"
        "Как к вам обращаться? Введите имя:",
        reply_markup=get_cancel_keyboard()
    )
    await callback.answer()

@router.message(BookingStates.waiting_for_name)
async def process_name(message: Message, state: FSMContext):
    name = (message.text or "").strip()
    is_valid, error_msg = validate_name(name)
    if not is_valid:
        await message.answer(f"❌ {error_msg}. Попробуйте еще раз:", reply_markup=get_cancel_keyboard())
        return

    await state.update_data(customer_name=name)
    await state.set_state(BookingStates.waiting_for_email)
    await message.answer("📧 Введите email для подтверждения брони:", reply_markup=get_cancel_keyboard())

@router.message(BookingStates.waiting_for_email)
async def process_email(message: Message, state: FSMContext):
    email = (message.text or "").strip()
    is_valid, error_msg = validate_email(email)
    if not is_valid:
        await message.answer(f"❌ {error_msg}. Попробуйте еще раз:", reply_markup=get_cancel_keyboard())
        return

    await state.update_data(customer_email=email)
    await state.set_state(BookingStates.waiting_for_phone)
    await message.answer(
        "📞 Введите номер телефона или пропустите этот шаг:",
        reply_markup=get_skip_keyboard("booking_skip_phone")
    )

async def ask_special_requests(message: Message, state: FSMContext):
    await state.set_state(BookingStates.waiting_for_requests)
    await message.answer(
        "💬 Есть пожелания к брони? Напишите их или пропустите этот шаг:",
        reply_markup=get_skip_keyboard("booking_skip_requests")
    )

@router.message(BookingStates.waiting_for_phone)
async def process_phone(message: Message, state: FSMContext):
    phone = (message.text or "").strip()
    if len(phone) > 20:
        await message.answer("❌ Слишком длинный номер. Попробуйте еще раз:", reply_markup=get_skip_keyboard("booking_skip_phone"))
        return
    await state.update_data(customer_phone=phone)
    await ask_special_requests(message, state)

@router.callback_query(BookingStates.waiting_for_phone, lambda c: c.data == "booking_skip_phone")
async def callback_skip_phone(callback: CallbackQuery, state: FSMContext):
    await state.update_data(customer_phone=None)
    await ask_special_requests(callback.message, state)
    await callback.answer()

async def show_confirmation(message: Message, state: FSMContext, store: EntityStore):
    data = await state.get_data()
    start = datetime.fromisoformat(data["booking_start"])
    table = await store.get_table_by_id(data["table_id"])
    rules = await get_booking_rules(store)

    text = (
        "📋 <b>Проверьте бронь</b>\n\n"
        f"🕐 {format_datetime(start)} ({rules['booking_duration']} мин.)\n"
        f"🪑 Столик №{table.number if table else data['table_id']}\n"
        f"👥 Гостей: {data['party_size']}\n"
        f"👤 {escape(data['customer_name'])}\n"
        f"📧 {escape(data['customer_email'])}"
    )
    if data.get("customer_phone"):
        text += f"\n📞 {escape(data['customer_phone'])}"
    if data.get("special_requests"):
        text += f"\n💬 {escape(data['special_requests'])}"

    await state.set_state(BookingStates.confirming)
    await message.answer(text, reply_markup=get_confirm_booking_keyboard(), parse_mode="HTML")

@router.message(BookingStates.waiting_for_requests)
async def process_special_requests(message: Message, state: FSMContext, store: EntityStore):
    await state.update_data(special_requests=(message.text or "").strip()[:500])
    await show_confirmation(message, state, store)

@router.callback_query(BookingStates.waiting_for_requests, lambda c: c.data == "booking_skip_requests")
async def callback_skip_requests(callback: CallbackQuery, state: FSMContext, store: EntityStore):
    await state.update_data(special_requests=None)
    await show_confirmation(callback.message, state, store)
    await callback.answer()

@router.callback_query(BookingStates.confirming, lambda c: c.data == "booking_confirm")
async def callback_booking_confirm(callback: CallbackQuery, state: FSMContext, store: EntityStore):
    data = await state.get_data()
    result = await create_booking_request(store, {
        "customerName": data.get("customer_name"),
        "customerEmail": data.get("customer_email"),
        "customerPhone": data.get("customer_phone"),
        "date": data.get("booking_start"),
        "partySize": data.get("party_size"),
        "tableId": data.get("table_id"),
        "specialRequests": data.get("special_requests"),
    })

    if "error" in result:
        logger.info(f"Бронь пользователя {callback.from_user.id} не создана: {result['code']}")
        await callback.message.edit_text(
            format_booking_failed(result),
            reply_markup=InlineKeyboardMarkup(inline_keyboard=[
                [InlineKeyboardButton(text="📅 Забронировать заново", callback_data="create_booking")],
                [InlineKeyboardButton(text="🏠 Главное меню", callback_data="start")]
            ]),
            parse_mode="HTML"
        )
        await state.clear()
        await callback.answer()
        return

    booking = result["booking"]
    await state.clear()
    await callback.message.edit_text(
        format_booking_created(booking),
        reply_markup=InlineKeyboardMarkup(inline_keyboard=[
            [InlineKeyboardButton(text="📋 Мои брони", callback_data="my_bookings")],
            [InlineKeyboardButton(text="🏠 Главное меню", callback_data="start")]
        ]),
        parse_mode="HTML"
    )
    await callback.answer("Бронь создана")
