from datetime import datetime
from html import escape
from typing import Any, Dict, List
from models.booking import Booking, BookingStatus
from models.table import Table

STATUS_EMOJI = {
    BookingStatus.PENDING: "⏳",
    BookingStatus.CONFIRMED: "✅",
    BookingStatus.CANCELLED: "❌",
    BookingStatus.COMPLETED: "🎉",
    BookingStatus.NO_SHOW: "🚫"
}

STATUS_TEXT = {
    BookingStatus.PENDING: "Ожидает подтверждения",
    BookingStatus.CONFIRMED: "Подтверждена",
    BookingStatus.CANCELLED: "Отменена",
    BookingStatus.COMPLETED: "Завершена",
    BookingStatus.NO_SHOW: "Гость не пришел"
}

def format_status(status: BookingStatus) -> str:
    return f"{STATUS_EMOJI.get(status, '📋')} {STATUS_TEXT.get(status, status.value)}"

def format_booking(booking: Booking) -> str:
    """Карточка брони для сообщений бота"""
    customer = booking.customer
    table = booking.table
    end_time = booking.end_time

    text = f"""
📅 Бронь #{booking.id}

🕐 Время: {format_datetime(booking.date)} - {end_time.strftime('%H:%M')}
🪑 Столик: №{table.number if table else booking.table_id}
👥 Гостей: {booking.party_size}
{format_status(booking.status)}
"""
    if customer:
        text += f"\n👤 {escape(customer.name)}\n📧 {escape(customer.email)}"
        if customer.phone:
            text += f"\n📞 {escape(customer.phone)}"
    if booking.special_requests:
        text += f"\n\n💬 Пожелания: {escape(booking.special_requests)}"
    return text

def format_booking_short(booking: Booking) -> str:
    table_number = booking.table.number if booking.table else booking.table_id
    return (
        f"{STATUS_EMOJI.get(booking.status, '📋')} #{booking.id} · {format_datetime(booking.date)} · "
        f"столик №{table_number} · {booking.party_size} гост."
    )

def format_table(table: Table) -> str:
    status = "🟢" if table.is_active else "🔴"
    text = f"{status} Столик №{table.number} · до {table.capacity} гостей"
    if table.location:
        text += f" · {escape(table.location)}"
    return text

def format_tables_list(tables: List[Table]) -> str:
    if not tables:
        return "Столиков пока нет"
    return "\n".join(format_table(table) for table in tables)

def format_summary(summary: Dict[str, Any]) -> str:
    lines = [
        f"📋 Всего броней: {summary['total_bookings']}",
        f"👥 Гостей: {summary['total_guests']}",
        f"🧑 Клиентов: {summary['unique_customers']}",
        f"📅 На сегодня: {summary['today_bookings']}",
        f"🏁 Доля завершенных: {summary['completion_rate']:.0f}%",
        "",
    ]
    for status in BookingStatus:
        lines.append(f"{format_status(status)}: {summary['by_status'].get(status.value, 0)}")
    return "\n".join(lines)

def format_date(date: datetime) -> str:
    return date.strftime('%d.%m.%Y')

def format_datetime(dt: datetime) -> str:
    return dt.strftime('%d.%m.%Y %H:%M')
