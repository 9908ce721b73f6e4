from datetime import datetime, timedelta
from collections import defaultdict
from typing import Dict, List, Optional, Any
from database.store import EntityStore
from models.booking import BookingStatus, ACTIVE_STATUSES
from services.booking_service import get_day_bounds

async def get_bookings_summary(store: EntityStore, date: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Сводка по бронированиям для админ-панели

    Args:
        store: Хранилище сущностей
        date: Дата для отчета (если None - по всем бронированиям)

    Returns:
        Dict с общим числом броней, разбивкой по статусам и числом гостей
    """
    if date:
        date_start, date_end = get_day_bounds(date)
        bookings = await store.get_bookings_by_date_range(date_start, date_end)
    else:
        bookings = await store.get_bookings()

    by_status = {status.value: 0 for status in BookingStatus}
    for booking in bookings:
        by_status[booking.status.value] += 1

    today_start, today_end = get_day_bounds(datetime.now())
    today_bookings = [b for b in bookings if today_start <= b.date <= today_end]

    completed = by_status[BookingStatus.COMPLETED.value]
    completion_rate = completed / len(bookings) * 100 if bookings else 0.0

    return {
        "total_bookings": len(bookings),
        "by_status": by_status,
        "total_guests": sum(b.party_size for b in bookings if b.status != BookingStatus.CANCELLED),
        "unique_customers": len(set(b.customer_id for b in bookings)),
        "today_bookings": len(today_bookings),
        "confirmed_bookings": by_status[BookingStatus.CONFIRMED.value],
        "completion_rate": completion_rate,
        "bookings": bookings
    }

async def get_table_utilisation(store: EntityStore, date: datetime) -> List[Dict[str, Any]]:
    """
    Загрузка столиков за день по активным и завершенным броням

    Returns:
        List по столикам (по возрастанию номера) с числом броней, гостей
        и занятыми минутами
    """
    date_start, date_end = get_day_bounds(date)
    tables = await store.get_tables()
    bookings = await store.get_bookings_by_date_range(date_start, date_end)

    stats = defaultdict(lambda: {"bookings": 0, "guests": 0, "minutes": 0})
    counted = ACTIVE_STATUSES | {BookingStatus.COMPLETED}
    for booking in bookings:
        if booking.status not in counted:
            continue
        # Бронь, переходящая за полночь, учитывается только до конца дня
        end = min(booking.end_time, date_start + timedelta(days=1))
        stats[booking.table_id]["bookings"] += 1
        stats[booking.table_id]["guests"] += booking.party_size
        stats[booking.table_id]["minutes"] += int((end - booking.date).total_seconds() // 60)

    return [
        {
            "table_id": table.id,
            "number": table.number,
            "capacity": table.capacity,
            "is_active": table.is_active,
            "bookings_count": stats[table.id]["bookings"],
            "guests": stats[table.id]["guests"],
            "booked_minutes": stats[table.id]["minutes"],
            "utilisation": stats[table.id]["minutes"] / (24 * 60) * 100
        }
        for table in tables
    ]
