"""
Иерархия ошибок бронирования
Каждая ошибка несет семантический код, который API отдает клиенту
"""
from typing import Optional


class BookingError(Exception):
    code = "booking_error"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class ValidationError(BookingError, ValueError):
    """Отсутствует или некорректно обязательное поле"""
    code = "validation_error"


class NotFoundError(BookingError):
    """Бронирование, клиент или столик не найдены по id"""
    code = "not_found"


class ConflictError(BookingError):
    """Столик неактивен, мал для компании или уже занят на это время"""
    code = "table_conflict"


class InvalidTransitionError(BookingError):
    """Смена статуса не разрешена конечным автоматом"""
    code = "invalid_transition"


class StorageError(BookingError):
    """Сбой хранилища, отдается вызывающему без повторов"""
    code = "internal_error"
