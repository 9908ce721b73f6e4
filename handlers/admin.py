from aiogram import Router
from aiogram.types import Message, CallbackQuery, InlineKeyboardMarkup, InlineKeyboardButton, BufferedInputFile
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State, StatesGroup
from datetime import datetime
from database.store import EntityStore
from services.booking_service import (
    delete_booking,
    get_allowed_transitions,
    get_booking_by_id,
    get_bookings_for_date,
    get_recent_bookings,
    update_booking_status
)
from services.report_service import get_bookings_summary, get_table_utilisation
from services.table_service import get_all_tables, set_table_active
from utils.callback_data import CallbackData
from utils.decorators import admin_required, is_admin
from utils.errors import InvalidTransitionError, NotFoundError
from utils.export_service import export_bookings_to_excel, export_summary_to_excel
from utils.formatters import STATUS_TEXT, format_booking, format_date, format_summary, format_table
from utils.health_check import check_system_health, get_system_info
from utils.keyboards import get_admin_booking_keyboard, get_admin_bookings_keyboard, get_back_keyboard
from loguru import logger

router = Router()

class AdminBookingFilterStates(StatesGroup):
    waiting_for_date = State()

async def check_admin(callback: CallbackQuery) -> bool:
    if not is_admin(callback.from_user.id):
        await callback.answer("У вас нет прав администратора", show_alert=True)
        return False
    return True

def get_admin_panel_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="📅 Брони на сегодня", callback_data="admin_today_bookings")],
        [InlineKeyboardButton(text="🔎 Брони на дату", callback_data="admin_date_bookings")],
        [InlineKeyboardButton(text="📋 Последние брони", callback_data="admin_recent_bookings")],
        [InlineKeyboardButton(text="📈 Статистика", callback_data="admin_stats")],
        [InlineKeyboardButton(text="🪑 Столики", callback_data="admin_tables")],
        [InlineKeyboardButton(text="📥 Экспорт в Excel", callback_data="admin_export")],
        [InlineKeyboardButton(text="🔍 Статус системы", callback_data="admin_health")],
        [InlineKeyboardButton(text="🏠 Главное меню", callback_data="start")]
    ])

@router.message(Command("admin"))
@admin_required
async def cmd_admin(message: Message):
    await message.answer("⚙️ Админ-панель", reply_markup=get_admin_panel_keyboard())

@router.callback_query(lambda c: c.data == "admin_panel")
async def callback_admin_panel(callback: CallbackQuery, state: FSMContext):
    if not await check_admin(callback):
        return
    await state.set_state(None)
    await callback.message.edit_text("⚙️ Админ-панель", reply_markup=get_admin_panel_keyboard())
    await callback.answer()

async def show_bookings(callback: CallbackQuery, title: str, bookings: list):
    if not bookings:
        await callback.message.edit_text(
            f"📭 <b>{title}</b>\n\nБроней нет",
            reply_markup=get_back_keyboard("admin_panel", "◀️ Назад"),
            parse_mode="HTML"
        )
    else:
        await callback.message.edit_text(
            f"📋 <b>{title}</b> ({len(bookings)})\n\n💡 Выберите бронь:",
            reply_markup=get_admin_bookings_keyboard(bookings),
            parse_mode="HTML"
        )
    await callback.answer()

@router.callback_query(lambda c: c.data == "admin_today_bookings")
async def callback_admin_today_bookings(callback: CallbackQuery, store: EntityStore):
    if not await check_admin(callback):
        return
    today = datetime.now()
    bookings = await get_bookings_for_date(store, today)
    await show_bookings(callback, f"Брони на {format_date(today)}", bookings)

@router.callback_query(lambda c: c.data == "admin_recent_bookings")
async def callback_admin_recent_bookings(callback: CallbackQuery, store: EntityStore):
    if not await check_admin(callback):
        return
    bookings = await get_recent_bookings(store)
    await show_bookings(callback, "Последние брони", bookings)

@router.callback_query(lambda c: c.data == "admin_date_bookings")
async def callback_admin_date_bookings(callback: CallbackQuery, state: FSMContext):
    if not await check_admin(callback):
        return
    await state.set_state(AdminBookingFilterStates.waiting_for_date)
    await callback.message.edit_text(
        "🔎 Введите дату в формате ДД.ММ.ГГГГ:",
        reply_markup=get_back_keyboard("admin_panel", "◀️ Назад")
    )
    await callback.answer()

@router.message(AdminBookingFilterStates.waiting_for_date)
@admin_required
async def process_admin_date(message: Message, state: FSMContext, store: EntityStore):
    try:
        date = datetime.strptime((message.text or "").strip(), "%d.%m.%Y")
    except ValueError:
        await message.answer(
            "❌ Неверный формат даты. Используйте ДД.ММ.ГГГГ",
            reply_markup=get_back_keyboard("admin_panel", "◀️ Назад")
        )
        return

    await state.set_state(None)
    bookings = await get_bookings_for_date(store, date)
    if not bookings:
        await message.answer(
            f"📭 На {format_date(date)} броней нет",
            reply_markup=get_back_keyboard("admin_panel", "◀️ Назад")
        )
        return
    await message.answer(
        f"📋 <b>Брони на {format_date(date)}</b> ({len(bookings)})",
        reply_markup=get_admin_bookings_keyboard(bookings),
        parse_mode="HTML"
    )

async def show_booking_card(callback: CallbackQuery, store: EntityStore, booking_id: int):
    booking = await get_booking_by_id(store, booking_id)
    if not booking:
        await callback.answer("Бронь не найдена", show_alert=True)
        return
    await callback.message.edit_text(
        format_booking(booking),
        reply_markup=get_admin_booking_keyboard(booking, get_allowed_transitions(booking.status)),
        parse_mode="HTML"
    )

@router.callback_query(lambda c: CallbackData.parse_admin_booking(c.data) is not None)
async def callback_admin_booking(callback: CallbackQuery, store: EntityStore):
    if not await check_admin(callback):
        return
    await show_booking_card(callback, store, CallbackData.parse_admin_booking(callback.data))
    await callback.answer()

@router.callback_query(lambda c: CallbackData.parse_admin_booking_status(c.data) is not None)
async def callback_admin_booking_status(callback: CallbackQuery, store: EntityStore):
    if not await check_admin(callback):
        return
    booking_id, status = CallbackData.parse_admin_booking_status(callback.data)
    try:
        booking = await update_booking_status(store, booking_id, status)
    except (NotFoundError, InvalidTransitionError) as e:
        await callback.answer(e.message, show_alert=True)
        return

    logger.info(f"Администратор {callback.from_user.id} сменил статус брони #{booking_id} на {status}")
    await show_booking_card(callback, store, booking_id)
    await callback.answer(f"Статус: {STATUS_TEXT[booking.status]}")

@router.callback_query(lambda c: CallbackData.parse_delete_booking_confirm(c.data) is not None)
async def callback_delete_booking_confirm(callback: CallbackQuery, store: EntityStore):
    if not await check_admin(callback):
        return
    booking_id = CallbackData.parse_delete_booking_confirm(callback.data)
    try:
        await delete_booking(store, booking_id)
    except NotFoundError as e:
        await callback.answer(e.message, show_alert=True)
        return

    logger.info(f"Администратор {callback.from_user.id} удалил бронь #{booking_id}")
    await callback.message.edit_text(
        f"🗑️ Бронь #{booking_id} удалена",
        reply_markup=get_back_keyboard("admin_recent_bookings", "◀️ К броням")
    )
    await callback.answer()

@router.callback_query(lambda c: CallbackData.parse_delete_booking(c.data) is not None)
async def callback_delete_booking(callback: CallbackQuery):
    if not await check_admin(callback):
        return
    booking_id = CallbackData.parse_delete_booking(callback.data)
    await callback.message.edit_text(
        f"⚠️ Удалить бронь #{booking_id}? Это действие нельзя отменить.",
        reply_markup=InlineKeyboardMarkup(inline_keyboard=[
            [InlineKeyboardButton(
                text="🗑️ Да, удалить",
                callback_data=CallbackData.create_delete_booking_confirm(booking_id)
            )],
            [InlineKeyboardButton(text="◀️ Назад", callback_data=CallbackData.create_admin_booking(booking_id))]
        ])
    )
    await callback.answer()

@router.callback_query(lambda c: c.data == "admin_stats")
async def callback_admin_stats(callback: CallbackQuery, store: EntityStore):
    if not await check_admin(callback):
        return
    summary = await get_bookings_summary(store)
    today_summary = await get_bookings_summary(store, datetime.now())

    text = (
        "📈 <b>Статистика бронирований</b>\n\n"
        f"{format_summary(summary)}\n\n"
        f"📅 <b>Сегодня:</b> {today_summary['total_bookings']} броней, "
        f"{today_summary['total_guests']} гостей"
    )
    await callback.message.edit_text(
        text,
        reply_markup=get_back_keyboard("admin_panel", "◀️ Назад"),
        parse_mode="HTML"
    )
    await callback.answer()

async def show_admin_tables(callback: CallbackQuery, store: EntityStore):
    tables = await get_all_tables(store, active_only=False)
    rows = [
        [InlineKeyboardButton(
            text=f"{'🔴 Выключить' if t.is_active else '🟢 Включить'} №{t.number}",
            callback_data=CallbackData.create_toggle_table(t.id)
        )]
        for t in tables
    ]
    rows.append([InlineKeyboardButton(text="◀️ Назад", callback_data="admin_panel")])
    text = "🪑 <b>Столики</b>\n\n" + ("\n".join(format_table(t) for t in tables) or "Столиков нет")
    await callback.message.edit_text(
        text,
        reply_markup=InlineKeyboardMarkup(inline_keyboard=rows),
        parse_mode="HTML"
    )

@router.callback_query(lambda c: c.data == "admin_tables")
async def callback_admin_tables(callback: CallbackQuery, store: EntityStore):
    if not await check_admin(callback):
        return
    await show_admin_tables(callback, store)
    await callback.answer()

@router.callback_query(lambda c: CallbackData.parse_toggle_table(c.data) is not None)
async def callback_toggle_table(callback: CallbackQuery, store: EntityStore):
    if not await check_admin(callback):
        return
    table_id = CallbackData.parse_toggle_table(callback.data)
    table = await store.get_table_by_id(table_id)
    if not table:
        await callback.answer("Столик не найден", show_alert=True)
        return

    table = await set_table_active(store, table_id, not table.is_active)
    logger.info(f"Администратор {callback.from_user.id}: столик №{table.number} активен={table.is_active}")
    await show_admin_tables(callback, store)
    await callback.answer("Столик включен" if table.is_active else "Столик выключен")

@router.callback_query(lambda c: c.data == "admin_export")
async def callback_admin_export(callback: CallbackQuery, store: EntityStore):
    if not await check_admin(callback):
        return

    today = datetime.now()
    bookings = await get_recent_bookings(store)
    summary = await get_bookings_summary(store)
    utilisation = await get_table_utilisation(store, today)

    bookings_file = export_bookings_to_excel(bookings)
    summary_file = export_summary_to_excel(summary, utilisation)

    await callback.message.answer_document(
        BufferedInputFile(bookings_file.read(), filename=f"bookings_{today.strftime('%Y-%m-%d')}.xlsx"),
        caption=f"📋 Последние брони ({len(bookings)})"
    )
    await callback.message.answer_document(
        BufferedInputFile(summary_file.read(), filename=f"report_{today.strftime('%Y-%m-%d')}.xlsx"),
        caption=f"📊 Отчет за {format_date(today)}"
    )
    await callback.answer("Отчет отправлен")

@router.callback_query(lambda c: c.data == "admin_health")
async def callback_admin_health(callback: CallbackQuery, store: EntityStore):
    """Проверка состояния системы"""
    if not await check_admin(callback):
        return

    health = await check_system_health(store)
    info = get_system_info()

    status_emoji = "✅" if health["status"] == "healthy" else "❌"
    text = f"{status_emoji} Статус системы: {health['status']}\n\n"
    text += "📊 Проверки:\n"
    for name, check in health["checks"].items():
        check_emoji = "✅" if check["status"] == "ok" else "❌"
        text += f"{check_emoji} {name}: {check['message']}\n"

    text += "\n⚙️ Конфигурация:\n"
    text += f"• Токен бота: {'установлен' if info['bot_token_set'] else 'не установлен'}\n"
    text += f"• Хранилище: {info['storage_type']}\n"
    text += f"• Администраторов: {info['admin_count']}\n"
    text += f"• Длительность брони: {info['booking_duration']} мин.\n"
    text += f"• Гостей: {info['party_size']}\n"
    text += f"• Горизонт бронирования: {info['horizon_days']} дн."

    await callback.message.edit_text(text, reply_markup=get_back_keyboard("admin_panel", "◀️ Назад"))
    await callback.answer()
