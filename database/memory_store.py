"""
Хранилище сущностей в памяти процесса
Используется для локального запуска без базы и в тестах; хранит те же
ORM-объекты, что и SQL-хранилище, но не подключает их к сессии
"""
from datetime import datetime, timezone
from itertools import count
from typing import Dict, List, Optional, Any
from loguru import logger
from database.store import EntityStore
from models.customer import Customer
from models.table import Table
from models.booking import Booking, DEFAULT_DURATION_MINUTES
from models.cafe_settings import CafeSettings


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryEntityStore(EntityStore):
    def __init__(self):
        super().__init__()
        self._customers: Dict[int, Customer] = {}
        self._tables: Dict[int, Table] = {}
        self._bookings: Dict[int, Booking] = {}
        self._cafe_settings: Optional[CafeSettings] = None
        self._ids = {
            "customers": count(1),
            "tables": count(1),
            "bookings": count(1),
        }

    def _attach(self, booking: Booking) -> Booking:
        booking.customer = self._customers.get(booking.customer_id)
        booking.table = self._tables.get(booking.table_id)
        return booking

    # Клиенты
    async def get_customers(self) -> List[Customer]:
        customers = sorted(self._customers.values(), key=lambda c: c.name)
        for customer in customers:
            customer.bookings = sorted(
                (self._attach(b) for b in self._bookings.values() if b.customer_id == customer.id),
                key=lambda b: b.date,
                reverse=True
            )
        return customers

    async def get_customer_by_id(self, customer_id: int) -> Optional[Customer]:
        return self._customers.get(customer_id)

    async def get_customer_by_email(self, email: str) -> Optional[Customer]:
        return next((c for c in self._customers.values() if c.email == email), None)

    async def create_customer(self, name: str, email: str, phone: Optional[str] = None) -> Customer:
        existing = await self.get_customer_by_email(email)
        if existing:
            return existing

        now = _now()
        customer = Customer(
            id=next(self._ids["customers"]),
            name=name,
            email=email,
            phone=phone,
            created_at=now,
            updated_at=now
        )
        self._customers[customer.id] = customer
        return customer

    async def update_customer(self, customer_id: int, **fields: Any) -> Optional[Customer]:
        customer = self._customers.get(customer_id)
        if not customer:
            return None

        for key, value in fields.items():
            if hasattr(customer, key):
                setattr(customer, key, value)
        customer.updated_at = _now()
        return customer

    async def delete_customer(self, customer_id: int) -> bool:
        return self._customers.pop(customer_id, None) is not None

    # Столики
    async def get_tables(self, active_only: bool = False) -> List[Table]:
        tables = [t for t in self._tables.values() if t.is_active or not active_only]
        return sorted(tables, key=lambda t: t.number)

    async def get_table_by_id(self, table_id: int) -> Optional[Table]:
        return self._tables.get(table_id)

    async def create_table(self, number: int, capacity: int, location: Optional[str] = None,
                           description: Optional[str] = None, is_active: bool = True) -> Table:
        now = _now()
        table = Table(
            id=next(self._ids["tables"]),
            number=number,
            capacity=capacity,
            location=location,
            description=description,
            is_active=is_active,
            created_at=now,
            updated_at=now
        )
        self._tables[table.id] = table
        return table

    async def update_table(self, table_id: int, **fields: Any) -> Optional[Table]:
        table = self._tables.get(table_id)
        if not table:
            return None

        for key, value in fields.items():
            if hasattr(table, key):
                setattr(table, key, value)
        table.updated_at = _now()
        return table

    # Бронирования
    async def get_bookings(self, limit: Optional[int] = None) -> List[Booking]:
        bookings = sorted(self._bookings.values(), key=lambda b: b.date, reverse=True)
        if limit:
            bookings = bookings[:limit]
        return [self._attach(b) for b in bookings]

    async def get_booking_by_id(self, booking_id: int) -> Optional[Booking]:
        booking = self._bookings.get(booking_id)
        return self._attach(booking) if booking else None

    async def get_bookings_by_date_range(self, start: datetime, end: datetime,
                                         table_id: Optional[int] = None) -> List[Booking]:
        bookings = [
            b for b in self._bookings.values()
            if start <= b.date <= end and (table_id is None or b.table_id == table_id)
        ]
        return [self._attach(b) for b in sorted(bookings, key=lambda b: b.date)]

    async def get_bookings_by_customer(self, customer_id: int) -> List[Booking]:
        bookings = [b for b in self._bookings.values() if b.customer_id == customer_id]
        return [self._attach(b) for b in sorted(bookings, key=lambda b: b.date, reverse=True)]

    async def create_booking(self, customer_id: int, table_id: int, date: datetime, duration: int,
                             party_size: int, status: Any, special_requests: Optional[str] = None) -> Booking:
        now = _now()
        booking = Booking(
            id=next(self._ids["bookings"]),
            customer_id=customer_id,
            table_id=table_id,
            date=date,
            duration=duration or DEFAULT_DURATION_MINUTES,
            party_size=party_size,
            status=status,
            special_requests=special_requests,
            created_at=now,
            updated_at=now
        )
        self._bookings[booking.id] = booking
        return self._attach(booking)

    async def update_booking(self, booking_id: int, **fields: Any) -> Optional[Booking]:
        booking = self._bookings.get(booking_id)
        if not booking:
            return None

        for key, value in fields.items():
            if hasattr(booking, key):
                setattr(booking, key, value)
        booking.updated_at = _now()
        return self._attach(booking)

    async def delete_booking(self, booking_id: int) -> bool:
        booking = self._bookings.pop(booking_id, None)
        if booking is None:
            return False
        booking.customer = None
        booking.table = None
        return True

    # Настройки кафе
    async def get_cafe_settings(self) -> Optional[CafeSettings]:
        return self._cafe_settings

    async def create_cafe_settings(self, **fields: Any) -> CafeSettings:
        now = _now()
        self._cafe_settings = CafeSettings(id=1, created_at=now, updated_at=now, **fields)
        return self._cafe_settings

    async def update_cafe_settings(self, **fields: Any) -> Optional[CafeSettings]:
        if self._cafe_settings is None:
            return None

        for key, value in fields.items():
            if hasattr(self._cafe_settings, key):
                setattr(self._cafe_settings, key, value)
        self._cafe_settings.updated_at = _now()
        return self._cafe_settings

    async def close(self) -> None:
        logger.debug("Хранилище в памяти закрыто")
