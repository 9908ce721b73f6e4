"""
Хранилище сущностей поверх SQLAlchemy (SQLite для разработки, PostgreSQL для продакшена)
Каждая операция выполняется в отдельной сессии и фиксируется одной транзакцией
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, List, Optional, Any
from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload
from loguru import logger
from database.store import EntityStore
from models.customer import Customer
from models.table import Table
from models.booking import Booking
from models.cafe_settings import CafeSettings
from utils.errors import StorageError


class SqlEntityStore(EntityStore):
    def __init__(self, session_factory: async_sessionmaker, engine: Optional[AsyncEngine] = None):
        super().__init__()
        self._session_factory = session_factory
        self._engine = engine

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as e:
                await session.rollback()
                logger.exception(f"Ошибка в сессии базы данных: {e}")
                raise StorageError(f"Ошибка хранилища: {e}") from e

    def _booking_query(self):
        return select(Booking).options(
            selectinload(Booking.customer),
            selectinload(Booking.table)
        )

    async def _reload_booking(self, session: AsyncSession, booking_id: int) -> Optional[Booking]:
        result = await session.execute(
            self._booking_query().where(Booking.id == booking_id).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    # Клиенты
    async def get_customers(self) -> List[Customer]:
        async with self._session() as session:
            result = await session.execute(
                select(Customer).options(
                    selectinload(Customer.bookings).selectinload(Booking.table)
                ).order_by(Customer.name)
            )
            return list(result.scalars().all())

    async def get_customer_by_id(self, customer_id: int) -> Optional[Customer]:
        async with self._session() as session:
            result = await session.execute(select(Customer).where(Customer.id == customer_id))
            return result.scalar_one_or_none()

    async def get_customer_by_email(self, email: str) -> Optional[Customer]:
        async with self._session() as session:
            result = await session.execute(select(Customer).where(Customer.email == email))
            return result.scalar_one_or_none()

    async def create_customer(self, name: str, email: str, phone: Optional[str] = None) -> Customer:
        async with self._session() as session:
            customer = Customer(name=name, email=email, phone=phone)
            session.add(customer)
            try:
                await session.commit()
                await session.refresh(customer)
            except IntegrityError:
                # Параллельный запрос успел создать клиента с тем же email
                await session.rollback()
                result = await session.execute(select(Customer).where(Customer.email == email))
                customer = result.scalar_one_or_none()
                if not customer:
                    raise
            return customer

    async def update_customer(self, customer_id: int, **fields: Any) -> Optional[Customer]:
        async with self._session() as session:
            result = await session.execute(select(Customer).where(Customer.id == customer_id))
            customer = result.scalar_one_or_none()
            if not customer:
                return None

            for key, value in fields.items():
                if hasattr(customer, key):
                    setattr(customer, key, value)
            customer.updated_at = datetime.now(timezone.utc)

            await session.commit()
            await session.refresh(customer)
            return customer

    async def delete_customer(self, customer_id: int) -> bool:
        async with self._session() as session:
            result = await session.execute(select(Customer).where(Customer.id == customer_id))
            customer = result.scalar_one_or_none()
            if not customer:
                return False

            await session.delete(customer)
            await session.commit()
            return True

    # Столики
    async def get_tables(self, active_only: bool = False) -> List[Table]:
        async with self._session() as session:
            query = select(Table)
            if active_only:
                query = query.where(Table.is_active == True)
            query = query.order_by(Table.number)
            result = await session.execute(query)
            return list(result.scalars().all())

    async def get_table_by_id(self, table_id: int) -> Optional[Table]:
        async with self._session() as session:
            result = await session.execute(select(Table).where(Table.id == table_id))
            return result.scalar_one_or_none()

    async def create_table(self, number: int, capacity: int, location: Optional[str] = None,
                           description: Optional[str] = None, is_active: bool = True) -> Table:
        async with self._session() as session:
            table = Table(
                number=number,
                capacity=capacity,
                location=location,
                description=description,
                is_active=is_active
            )
            session.add(table)
            await session.commit()
            await session.refresh(table)
            return table

    async def update_table(self, table_id: int, **fields: Any) -> Optional[Table]:
        async with self._session() as session:
            result = await session.execute(select(Table).where(Table.id == table_id))
            table = result.scalar_one_or_none()
            if not table:
                return None

            for key, value in fields.items():
                if hasattr(table, key):
                    setattr(table, key, value)
            table.updated_at = datetime.now(timezone.utc)

            await session.commit()
            await session.refresh(table)
            return table

    # Бронирования
    async def get_bookings(self, limit: Optional[int] = None) -> List[Booking]:
        async with self._session() as session:
            query = self._booking_query().order_by(Booking.date.desc())
            if limit:
                query = query.limit(limit)
            result = await session.execute(query)
            return list(result.scalars().all())

    async def get_booking_by_id(self, booking_id: int) -> Optional[Booking]:
        async with self._session() as session:
            result = await session.execute(self._booking_query().where(Booking.id == booking_id))
            return result.scalar_one_or_none()

    async def get_bookings_by_date_range(self, start: datetime, end: datetime,
                                         table_id: Optional[int] = None) -> List[Booking]:
        async with self._session() as session:
            query = self._booking_query().where(
                Booking.date >= start,
                Booking.date <= end
            )
            if table_id is not None:
                query = query.where(Booking.table_id == table_id)
            query = query.order_by(Booking.date.asc())
            result = await session.execute(query)
            return list(result.scalars().all())

    async def get_bookings_by_customer(self, customer_id: int) -> List[Booking]:
        async with self._session() as session:
            result = await session.execute(
                self._booking_query().where(Booking.customer_id == customer_id).order_by(Booking.date.desc())
            )
            return list(result.scalars().all())

    async def create_booking(self, customer_id: int, table_id: int, date: datetime, duration: int,
                             party_size: int, status: Any, special_requests: Optional[str] = None) -> Booking:
        async with self._session() as session:
            booking = Booking(
                customer_id=customer_id,
                table_id=table_id,
                date=date,
                duration=duration,
                party_size=party_size,
                status=status,
                special_requests=special_requests
            )
            session.add(booking)
            await session.commit()
            return await self._reload_booking(session, booking.id)

    async def update_booking(self, booking_id: int, **fields: Any) -> Optional[Booking]:
        async with self._session() as session:
            result = await session.execute(select(Booking).where(Booking.id == booking_id))
            booking = result.scalar_one_or_none()
            if not booking:
                return None

            for key, value in fields.items():
                if hasattr(booking, key):
                    setattr(booking, key, value)
            booking.updated_at = datetime.now(timezone.utc)

            await session.commit()
            return await self._reload_booking(session, booking_id)

    async def delete_booking(self, booking_id: int) -> bool:
        async with self._session() as session:
            result = await session.execute(select(Booking).where(Booking.id == booking_id))
            booking = result.scalar_one_or_none()
            if not booking:
                return False

            await session.delete(booking)
            await session.commit()
            return True

    # Настройки кафе
    async def get_cafe_settings(self) -> Optional[CafeSettings]:
        async with self._session() as session:
            result = await session.execute(select(CafeSettings).order_by(CafeSettings.id).limit(1))
            return result.scalar_one_or_none()

    async def create_cafe_settings(self, **fields: Any) -> CafeSettings:
        async with self._session() as session:
            cafe_settings = CafeSettings(**fields)
            session.add(cafe_settings)
            await session.commit()
            await session.refresh(cafe_settings)
            return cafe_settings

    async def update_cafe_settings(self, **fields: Any) -> Optional[CafeSettings]:
        async with self._session() as session:
            result = await session.execute(select(CafeSettings).order_by(CafeSettings.id).limit(1))
            cafe_settings = result.scalar_one_or_none()
            if not cafe_settings:
                return None

            for key, value in fields.items():
                if hasattr(cafe_settings, key):
                    setattr(cafe_settings, key, value)
            cafe_settings.updated_at = datetime.now(timezone.utc)

            await session.commit()
            await session.refresh(cafe_settings)
            return cafe_settings

    async def ping(self) -> bool:
        async with self._session() as session:
            result = await session.execute(text("SELECT 1"))
            result.scalar()
            return True

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
