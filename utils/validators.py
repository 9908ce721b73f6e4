from datetime import datetime, time, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple
from email_validator import validate_email as _validate_email, EmailNotValidError
from config.settings import settings

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

def validate_booking_date(booking_date: datetime, horizon_days: Optional[int] = None) -> Tuple[bool, str]:
    today = datetime.now().date()
    horizon_days = horizon_days if horizon_days is not None else settings.BOOKING_HORIZON_DAYS
    max_future_date = today + timedelta(days=horizon_days)

    if booking_date.date() < today:
        return False, "Нельзя забронировать на прошедшую дату"

    if booking_date.date() > max_future_date:
        return False, f"Нельзя забронировать более чем на {horizon_days} дней вперед"

    return True, ""

def validate_booking_time(booking_date: datetime) -> Tuple[bool, str]:
    if booking_date <= datetime.now():
        return False, "Это время уже прошло, выберите другое"
    return True, ""

def validate_party_size(party_size: int, min_size: int = 1, max_size: int = 10) -> Tuple[bool, str]:
    if party_size < 1:
        return False, "Количество гостей должно быть больше 0"
    if party_size < min_size:
        return False, f"Минимальное количество гостей: {min_size}"
    if party_size > max_size:
        return False, f"Максимальное количество гостей: {max_size}"
    return True, ""

def validate_duration(duration: int) -> Tuple[bool, str]:
    if duration <= 0:
        return False, "Длительность брони должна быть больше 0 минут"
    return True, ""

def parse_whole_number(value: Any) -> int:
    """Целое из int, строки или float без дробной части; иначе ValueError"""
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValueError(f"ожидалось целое число, получено {value!r}")
    return int(value)

def normalize_email(email: str) -> str:
    return email.strip().lower()

def validate_email(email: str) -> Tuple[bool, str]:
    try:
        _validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False, "Некорректный email"
    return True, ""

def validate_name(name: str) -> Tuple[bool, str]:
    if len(name.strip()) < 2:
        return False, "Имя слишком короткое"
    if len(name) > 100:
        return False, "Имя слишком длинное (максимум 100 символов)"
    return True, ""

def validate_time_slot(slot: str, time_slots: List[str]) -> Tuple[bool, str]:
    if slot not in time_slots:
        return False, f"Время {slot} недоступно для бронирования"
    return True, ""

def parse_time(value: str) -> time:
    return datetime.strptime(value, "%H:%M").time()

def is_within_opening_hours(booking_date: datetime, opening_hours: Optional[Dict[str, Dict[str, str]]]) -> Tuple[bool, str]:
    if not opening_hours:
        return True, ""

    day = opening_hours.get(WEEKDAYS[booking_date.weekday()])
    if not day:
        return False, "В этот день кафе не работает"

    open_time = parse_time(day["open"])
    close_time = parse_time(day["close"])
    if not (open_time <= booking_date.time() < close_time):
        return False, f"Кафе работает с {day['open']} до {day['close']}"
    return True, ""

def parse_booking_date(value: Any) -> datetime:
    """
    Приводит дату брони к наивному datetime
    Строки принимаются в ISO 8601, даты с часовым поясом переводятся в UTC

    Raises:
        ValueError: Если значение не является датой
    """
    if isinstance(value, datetime):
        result = value
    elif isinstance(value, str):
        result = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    else:
        raise ValueError(f"Некорректная дата: {value!r}")

    if result.tzinfo is not None:
        result = result.astimezone(timezone.utc).replace(tzinfo=None)
    return result
