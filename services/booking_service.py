"""
Сервис бронирований
Обеспечивает создание брони с проверкой доступности столика, смену статуса
по конечному автомату, удаление и выборки для админ-панели
"""
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple, Union
from loguru import logger
from config.settings import settings
from database.store import EntityStore
from models.booking import Booking, BookingStatus, ALLOWED_TRANSITIONS, TERMINAL_STATUSES
from models.table import Table
from services.availability_service import booking_window, find_conflicts, list_available_tables
from services.customer_service import get_or_create_customer, get_customer_by_email
from services.settings_service import get_booking_rules
from utils.errors import ConflictError, InvalidTransitionError, NotFoundError, ValidationError
from utils.validators import (
    parse_booking_date,
    parse_whole_number,
    validate_duration,
    validate_email,
    validate_party_size
)

# Бронь не длиннее суток, поэтому для проверки пересечений достаточно
# бронирований, начавшихся не раньше чем за сутки до кандидата
MAX_DURATION_MINUTES = 24 * 60
CONFLICT_LOOKBACK = timedelta(minutes=MAX_DURATION_MINUTES)

def get_day_bounds(date: datetime) -> Tuple[datetime, datetime]:
    date_start = date.replace(hour=0, minute=0, second=0, microsecond=0)
    date_end = date.replace(hour=23, minute=59, second=59, microsecond=999999)
    return date_start, date_end

def check_booking_window(rules: Dict[str, Any], party_size: int, duration: Optional[int]) -> int:
    """
    Проверяет размер компании и длительность по правилам кафе

    Returns:
        int: Длительность в минутах (по умолчанию из правил)

    Raises:
        ValidationError: Если компания или длительность вне допустимых границ
    """
    is_valid, error_msg = validate_party_size(party_size, rules["min_party_size"], rules["max_party_size"])
    if not is_valid:
        raise ValidationError(error_msg)

    if duration is None:
        duration = rules["booking_duration"]
    is_valid, error_msg = validate_duration(duration)
    if not is_valid:
        raise ValidationError(error_msg)
    if duration > MAX_DURATION_MINUTES:
        raise ValidationError("Бронь не может быть длиннее суток")
    return duration

def _coerce_status(status: Union[BookingStatus, str]) -> BookingStatus:
    if isinstance(status, BookingStatus):
        return status
    try:
        return BookingStatus(str(status).upper())
    except ValueError:
        raise ValidationError(f"Неизвестный статус: {status}")

def can_transition(current: BookingStatus, new_status: BookingStatus) -> bool:
    return new_status in ALLOWED_TRANSITIONS.get(current, frozenset())

def get_allowed_transitions(current: BookingStatus) -> List[BookingStatus]:
    return sorted(ALLOWED_TRANSITIONS.get(current, frozenset()), key=lambda s: list(BookingStatus).index(s))

async def get_table_bookings_around(store: EntityStore, table_id: int, start: datetime,
                                    duration: int) -> List[Booking]:
    """Бронирования столика, которые могут пересечься с окном [start, start + duration)"""
    _, end = booking_window(start, duration)
    return await store.get_bookings_by_date_range(start - CONFLICT_LOOKBACK, end, table_id=table_id)

async def create_booking(
    store: EntityStore,
    customer_info: Dict[str, Any],
    table_id: Optional[int],
    date: Optional[Union[datetime, str]],
    party_size: Optional[int],
    special_requests: Optional[str] = None,
    duration: Optional[int] = None
) -> Booking:
    """
    Создает бронь со статусом PENDING

    Args:
        store: Хранилище сущностей
        customer_info: {"name": str, "email": str, "phone": str | None}
        table_id: ID столика
        date: Начало брони
        party_size: Количество гостей
        special_requests: Пожелания (пустая строка сохраняется как None)
        duration: Длительность в минутах (по умолчанию из настроек кафе)

    Returns:
        Booking: Созданная бронь с загруженными клиентом и столиком

    Raises:
        ValidationError: Не хватает обязательных полей или они некорректны
        NotFoundError: Столик не найден
        ConflictError: Столик неактивен, мал для компании или занят
    """
    customer_info = customer_info or {}
    name = (customer_info.get("name") or "").strip()
    email = (customer_info.get("email") or "").strip()
    phone = (customer_info.get("phone") or "").strip() or None

    required = {
        "name": name,
        "email": email,
        "date": date,
        "party_size": party_size,
        "table_id": table_id,
    }
    missing = [field for field, value in required.items() if value is None or value == ""]
    if missing:
        raise ValidationError(f"Не заполнены обязательные поля: {', '.join(missing)}", code="missing_fields")

    try:
        date = parse_booking_date(date)
        party_size = parse_whole_number(party_size)
        table_id = parse_whole_number(table_id)
        if duration is not None:
            duration = parse_whole_number(duration)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Некорректные данные брони: {e}")

    is_valid, error_msg = validate_email(email)
    if not is_valid:
        raise ValidationError(error_msg)

    rules = await get_booking_rules(store)
    duration = check_booking_window(rules, party_size, duration)

    table = await store.get_table_by_id(table_id)
    if not table:
        raise NotFoundError(f"Столик #{table_id} не найден", code="table_not_found")
    if not table.is_active:
        raise ConflictError(f"Столик №{table.number} недоступен для бронирования", code="table_unavailable")
    if table.capacity < party_size:
        raise ConflictError(
            f"Столик №{table.number} рассчитан на {table.capacity} гостей, запрошено {party_size}",
            code="table_unavailable"
        )

    async with store.table_lock(table.id):
        existing = await get_table_bookings_around(store, table.id, date, duration)
        conflicts = find_conflicts(date, duration, existing)
        if conflicts:
            logger.info(
                f"Конфликт брони: столик №{table.number}, {date:%d.%m.%Y %H:%M}, "
                f"пересекается с бронью #{conflicts[0].id}"
            )
            raise ConflictError(
                f"Столик №{table.number} уже забронирован на это время",
                code="table_conflict"
            )

        customer = await get_or_create_customer(store, name, email, phone)
        booking = await store.create_booking(
            customer_id=customer.id,
            table_id=table.id,
            date=date,
            duration=duration,
            party_size=party_size,
            status=BookingStatus.PENDING,
            special_requests=(special_requests or "").strip() or None
        )

    logger.info(
        f"Создана бронь #{booking.id}: столик №{table.number}, {date:%d.%m.%Y %H:%M}, "
        f"{party_size} гост., клиент {customer.email}"
    )
    return booking

async def update_booking_status(
    store: EntityStore,
    booking_id: int,
    new_status: Union[BookingStatus, str]
) -> Booking:
    """
    Смена статуса брони (для администраторов)
    Доступность столика повторно не проверяется

    Raises:
        NotFoundError: Бронь не найдена
        InvalidTransitionError: Переход запрещен
    """
    new_status = _coerce_status(new_status)
    booking = await store.get_booking_by_id(booking_id)
    if not booking:
        raise NotFoundError(f"Бронь #{booking_id} не найдена")

    old_status = booking.status
    if not can_transition(old_status, new_status):
        raise InvalidTransitionError(
            f"Нельзя сменить статус брони #{booking_id} с {old_status.value} на {new_status.value}"
        )

    booking = await store.update_booking(booking_id, status=new_status)
    logger.info(f"Бронь #{booking_id}: {old_status.value} -> {new_status.value}")
    return booking

async def update_booking(
    store: EntityStore,
    booking_id: int,
    status: Optional[Union[BookingStatus, str]] = None,
    special_requests: Optional[str] = None
) -> Booking:
    """
    Частичное обновление брони: статус и/или пожелания
    Повторная установка текущего статуса считается отсутствием изменений,
    пустая строка в special_requests очищает пожелания
    """
    booking = await store.get_booking_by_id(booking_id)
    if not booking:
        raise NotFoundError(f"Бронь #{booking_id} не найдена")

    fields: Dict[str, Any] = {}
    if status is not None:
        new_status = _coerce_status(status)
        if new_status != booking.status:
            if not can_transition(booking.status, new_status):
                raise InvalidTransitionError(
                    f"Нельзя сменить статус брони #{booking_id} с {booking.status.value} на {new_status.value}"
                )
            fields["status"] = new_status
    if special_requests is not None:
        fields["special_requests"] = special_requests.strip() or None

    if not fields:
        return booking

    updated = await store.update_booking(booking_id, **fields)
    logger.info(f"Бронь #{booking_id} обновлена: {', '.join(fields)}")
    return updated

async def cancel_booking(store: EntityStore, booking_id: int) -> Booking:
    return await update_booking_status(store, booking_id, BookingStatus.CANCELLED)

async def delete_booking(store: EntityStore, booking_id: int) -> None:
    """
    Удаляет бронь без каскада на клиента и столик

    Raises:
        NotFoundError: Бронь не найдена
    """
    deleted = await store.delete_booking(booking_id)
    if not deleted:
        raise NotFoundError(f"Бронь #{booking_id} не найдена")
    logger.info(f"Бронь #{booking_id} удалена")

async def get_booking_by_id(store: EntityStore, booking_id: int) -> Optional[Booking]:
    return await store.get_booking_by_id(booking_id)

async def get_bookings_for_date(store: EntityStore, date: datetime) -> List[Booking]:
    date_start, date_end = get_day_bounds(date)
    return await store.get_bookings_by_date_range(date_start, date_end)

async def get_bookings_for_range(store: EntityStore, start: datetime, end: datetime) -> List[Booking]:
    if end < start:
        raise ValidationError("Конец периода раньше начала")
    return await store.get_bookings_by_date_range(start, end)

async def get_bookings_by_customer_email(store: EntityStore, email: str) -> List[Booking]:
    """
    Raises:
        NotFoundError: Клиент с таким email не найден
    """
    customer = await get_customer_by_email(store, email)
    if not customer:
        raise NotFoundError(f"Клиент {email} не найден", code="customer_not_found")
    return await store.get_bookings_by_customer(customer.id)

async def get_recent_bookings(store: EntityStore, limit: Optional[int] = None) -> List[Booking]:
    return await store.get_bookings(limit=limit or settings.RECENT_BOOKINGS_LIMIT)

async def list_bookings(
    store: EntityStore,
    date: Optional[datetime] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    customer_email: Optional[str] = None
) -> List[Booking]:
    """
    Выборка бронирований для админ-панели
    Приоритет фильтров: период, дата, email клиента; без фильтров последние 50
    """
    if start_date and end_date:
        return await get_bookings_for_range(store, start_date, end_date)
    if date:
        return await get_bookings_for_date(store, date)
    if customer_email:
        return await get_bookings_by_customer_email(store, customer_email)
    return await get_recent_bookings(store)

async def find_available_tables(
    store: EntityStore,
    start: datetime,
    party_size: int,
    duration: Optional[int] = None
) -> List[Table]:
    """
    Активные столики, свободные на окно брони, по возрастанию номера

    Raises:
        ValidationError: Размер компании или длительность некорректны
    """
    try:
        party_size = parse_whole_number(party_size)
        if duration is not None:
            duration = parse_whole_number(duration)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Некорректные параметры поиска: {e}")

    rules = await get_booking_rules(store)
    duration = check_booking_window(rules, party_size, duration)

    tables = await store.get_tables(active_only=True)
    _, end = booking_window(start, duration)
    bookings = await store.get_bookings_by_date_range(start - CONFLICT_LOOKBACK, end)
    return list_available_tables(tables, start, duration, party_size, bookings)
