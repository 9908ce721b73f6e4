"""
Проверка доступности столиков
Чистые функции без побочных эффектов: решают, свободен ли столик на окно
[start, start + duration) с учетом активных бронирований
"""
from datetime import datetime, timedelta
from typing import Iterable, List, Tuple
from models.table import Table
from models.booking import Booking, ACTIVE_STATUSES

def booking_window(start: datetime, duration_minutes: int) -> Tuple[datetime, datetime]:
    """Окно брони; длительность всегда в минутах"""
    return start, start + timedelta(minutes=duration_minutes)

def intervals_overlap(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    # Полуоткрытые интервалы: бронь до 19:00 не мешает брони с 19:00
    return start_a < end_b and end_a > start_b

def find_conflicts(
    candidate_start: datetime,
    duration_minutes: int,
    existing_bookings: Iterable[Booking]
) -> List[Booking]:
    """
    Находит активные бронирования, пересекающиеся с окном кандидата

    Args:
        candidate_start: Начало запрашиваемого окна
        duration_minutes: Длительность запрашиваемого окна в минутах
        existing_bookings: Бронирования одного столика

    Returns:
        list[Booking]: Конфликтующие бронирования (PENDING/CONFIRMED)
    """
    candidate_start, candidate_end = booking_window(candidate_start, duration_minutes)
    conflicts = []
    for booking in existing_bookings:
        if booking.status not in ACTIVE_STATUSES:
            continue
        booking_start, booking_end = booking_window(booking.date, booking.duration)
        if intervals_overlap(candidate_start, candidate_end, booking_start, booking_end):
            conflicts.append(booking)
    return conflicts

def is_available(
    table: Table,
    candidate_start: datetime,
    duration_minutes: int,
    party_size: int,
    existing_bookings: Iterable[Booking]
) -> bool:
    """Свободен ли столик: активен, вмещает компанию и не занят на это время"""
    if not table.is_active:
        return False
    if table.capacity < party_size:
        return False
    return not find_conflicts(candidate_start, duration_minutes, existing_bookings)

def list_available_tables(
    all_tables: Iterable[Table],
    candidate_start: datetime,
    duration_minutes: int,
    party_size: int,
    bookings_on_date: Iterable[Booking]
) -> List[Table]:
    """Свободные столики по возрастанию номера"""
    bookings = list(bookings_on_date)
    available = [
        table for table in all_tables
        if is_available(
            table, candidate_start, duration_minutes, party_size,
            [b for b in bookings if b.table_id == table.id]
        )
    ]
    return sorted(available, key=lambda t: t.number)

def get_table_status(
    table: Table,
    candidate_start: datetime,
    duration_minutes: int,
    party_size: int,
    bookings_on_date: Iterable[Booking]
) -> str:
    if not table.is_active:
        return "inactive"
    if table.capacity < party_size:
        return "too_small"
    own_bookings = [b for b in bookings_on_date if b.table_id == table.id]
    if is_available(table, candidate_start, duration_minutes, party_size, own_bookings):
        return "available"
    return "booked"
