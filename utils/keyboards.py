"""
Утилиты для создания клавиатур с кнопками навигации
"""
from datetime import datetime, timedelta
from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton
from typing import List, Optional
from models.booking import Booking, BookingStatus
from models.table import Table
from utils.callback_data import CallbackData
from utils.formatters import STATUS_EMOJI, STATUS_TEXT, format_date


def get_back_keyboard(back_callback: str = "start", text: str = "🏠 Главное меню") -> InlineKeyboardMarkup:
    """
    Создает клавиатуру с одной кнопкой возврата

    Args:
        back_callback: callback_data для кнопки возврата
        text: текст кнопки возврата

    Returns:
        InlineKeyboardMarkup с кнопкой возврата
    """
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text=text, callback_data=back_callback)]
    ])


def add_back_button(
    keyboard_buttons: List[List[InlineKeyboardButton]],
    back_callback: str = "start",
    text: str = "🏠 Главное меню"
) -> List[List[InlineKeyboardButton]]:
    result = keyboard_buttons.copy()
    result.append([InlineKeyboardButton(text=text, callback_data=back_callback)])
    return result


def get_main_menu_keyboard(is_admin: bool = False) -> InlineKeyboardMarkup:
    """
    Создает главное меню с кнопками

    Args:
        is_admin: является ли пользователь администратором
    """
    keyboard_buttons = [
        [InlineKeyboardButton(text="📅 Забронировать столик", callback_data="create_booking")],
        [InlineKeyboardButton(text="📋 Мои брони", callback_data="my_bookings")],
        [InlineKeyboardButton(text="🪑 Столики", callback_data="tables_list")],
        [InlineKeyboardButton(text="❓ Помощь", callback_data="help")]
    ]

    if is_admin:
        keyboard_buttons.append([InlineKeyboardButton(text="⚙️ Админ-панель", callback_data="admin_panel")])

    return InlineKeyboardMarkup(inline_keyboard=keyboard_buttons)


def get_cancel_keyboard(cancel_callback: str = "cancel") -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="❌ Отмена", callback_data=cancel_callback)],
        [InlineKeyboardButton(text="🏠 Главное меню", callback_data="start")]
    ])


def get_skip_keyboard(skip_callback: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="⏭️ Пропустить", callback_data=skip_callback)],
        [InlineKeyboardButton(text="❌ Отмена", callback_data="cancel")]
    ])


def get_dates_keyboard(days: int, start: Optional[datetime] = None) -> InlineKeyboardMarkup:
    """Даты для брони, начиная с сегодняшней, по два в ряд"""
    start = (start or datetime.now()).replace(hour=0, minute=0, second=0, microsecond=0)
    buttons = [
        InlineKeyboardButton(
            text=format_date(start + timedelta(days=i)),
            callback_data=CallbackData.create_booking_date(start + timedelta(days=i))
        )
        for i in range(days + 1)
    ]
    rows = [buttons[i:i + 2] for i in range(0, len(buttons), 2)]
    return InlineKeyboardMarkup(inline_keyboard=add_back_button(rows, "cancel", "❌ Отмена"))


def get_slots_keyboard(slots: List[str]) -> InlineKeyboardMarkup:
    buttons = [
        InlineKeyboardButton(text=slot, callback_data=CallbackData.create_booking_slot(slot))
        for slot in slots
    ]
    rows = [buttons[i:i + 4] for i in range(0, len(buttons), 4)]
    rows.append([InlineKeyboardButton(text="◀️ Другая дата", callback_data="create_booking")])
    return InlineKeyboardMarkup(inline_keyboard=add_back_button(rows, "cancel", "❌ Отмена"))


def get_party_size_keyboard(min_size: int, max_size: int) -> InlineKeyboardMarkup:
    buttons = [
        InlineKeyboardButton(text=str(size), callback_data=CallbackData.create_booking_party(size))
        for size in range(min_size, max_size + 1)
    ]
    rows = [buttons[i:i + 5] for i in range(0, len(buttons), 5)]
    return InlineKeyboardMarkup(inline_keyboard=add_back_button(rows, "cancel", "❌ Отмена"))


def get_tables_keyboard(tables: List[Table]) -> InlineKeyboardMarkup:
    rows = [
        [InlineKeyboardButton(
            text=f"🪑 №{table.number} · до {table.capacity} · {table.location or 'зал'}",
            callback_data=CallbackData.create_booking_table(table.id)
        )]
        for table in tables
    ]
    return InlineKeyboardMarkup(inline_keyboard=add_back_button(rows, "cancel", "❌ Отмена"))


def get_confirm_booking_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="✅ Подтвердить", callback_data="booking_confirm")],
        [InlineKeyboardButton(text="❌ Отмена", callback_data="cancel")]
    ])


def get_admin_bookings_keyboard(bookings: List[Booking], back_callback: str = "admin_panel") -> InlineKeyboardMarkup:
    rows = [
        [InlineKeyboardButton(
            text=f"{STATUS_EMOJI.get(b.status, '📋')} #{b.id} {b.date:%d.%m %H:%M} · №{b.table.number if b.table else '?'}",
            callback_data=CallbackData.create_admin_booking(b.id)
        )]
        for b in bookings
    ]
    return InlineKeyboardMarkup(inline_keyboard=add_back_button(rows, back_callback, "◀️ Назад"))


def get_admin_booking_keyboard(booking: Booking, transitions: List[BookingStatus]) -> InlineKeyboardMarkup:
    """Кнопки разрешенных переходов статуса и удаления брони"""
    rows = [
        [InlineKeyboardButton(
            text=f"{STATUS_EMOJI[status]} {STATUS_TEXT[status]}",
            callback_data=CallbackData.create_admin_booking_status(booking.id, status.value)
        )]
        for status in transitions
    ]
    rows.append([InlineKeyboardButton(
        text="🗑️ Удалить",
        callback_data=CallbackData.create_delete_booking(booking.id)
    )])
    rows.append([InlineKeyboardButton(text="◀️ Назад", callback_data="admin_recent_bookings")])
    return InlineKeyboardMarkup(inline_keyboard=rows)
