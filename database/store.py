"""
Контракт хранилища сущностей
Общий интерфейс для SQL-базы и хранилища в памяти: CRUD по клиентам,
столикам, бронированиям и настройкам кафе плюс выборка по диапазону дат
"""
import asyncio
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Dict, List, Optional, Any
from models.customer import Customer
from models.table import Table
from models.booking import Booking
from models.cafe_settings import CafeSettings


class EntityStore(ABC):
    def __init__(self):
        self._table_locks: Dict[int, asyncio.Lock] = {}

    @asynccontextmanager
    async def table_lock(self, table_id: int) -> AsyncIterator[None]:
        """
        Мьютекс на столик: проверка пересечений и запись брони выполняются
        под ним, чтобы два параллельных запроса не заняли один слот
        """
        lock = self._table_locks.setdefault(table_id, asyncio.Lock())
        async with lock:
            yield

    # Клиенты
    @abstractmethod
    async def get_customers(self) -> List[Customer]: ...

    @abstractmethod
    async def get_customer_by_id(self, customer_id: int) -> Optional[Customer]: ...

    @abstractmethod
    async def get_customer_by_email(self, email: str) -> Optional[Customer]: ...

    @abstractmethod
    async def create_customer(self, name: str, email: str, phone: Optional[str] = None) -> Customer:
        """Создает клиента; при дубликате email возвращает уже существующую запись"""

    @abstractmethod
    async def update_customer(self, customer_id: int, **fields: Any) -> Optional[Customer]: ...

    @abstractmethod
    async def delete_customer(self, customer_id: int) -> bool: ...

    # Столики
    @abstractmethod
    async def get_tables(self, active_only: bool = False) -> List[Table]:
        """Столики по возрастанию номера"""

    @abstractmethod
    async def get_table_by_id(self, table_id: int) -> Optional[Table]: ...

    @abstractmethod
    async def create_table(self, number: int, capacity: int, location: Optional[str] = None,
                           description: Optional[str] = None, is_active: bool = True) -> Table: ...

    @abstractmethod
    async def update_table(self, table_id: int, **fields: Any) -> Optional[Table]: ...

    # Бронирования
    @abstractmethod
    async def get_bookings(self, limit: Optional[int] = None) -> List[Booking]:
        """Бронирования по убыванию даты, с клиентом и столиком"""

    @abstractmethod
    async def get_booking_by_id(self, booking_id: int) -> Optional[Booking]: ...

    @abstractmethod
    async def get_bookings_by_date_range(self, start: datetime, end: datetime,
                                         table_id: Optional[int] = None) -> List[Booking]:
        """Бронирования с датой начала в [start, end], по возрастанию даты"""

    @abstractmethod
    async def get_bookings_by_customer(self, customer_id: int) -> List[Booking]: ...

    @abstractmethod
    async def create_booking(self, customer_id: int, table_id: int, date: datetime, duration: int,
                             party_size: int, status: Any, special_requests: Optional[str] = None) -> Booking: ...

    @abstractmethod
    async def update_booking(self, booking_id: int, **fields: Any) -> Optional[Booking]: ...

    @abstractmethod
    async def delete_booking(self, booking_id: int) -> bool: ...

    # Настройки кафе
    @abstractmethod
    async def get_cafe_settings(self) -> Optional[CafeSettings]: ...

    @abstractmethod
    async def create_cafe_settings(self, **fields: Any) -> CafeSettings: ...

    @abstractmethod
    async def update_cafe_settings(self, **fields: Any) -> Optional[CafeSettings]: ...

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        return None
