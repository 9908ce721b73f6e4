"""
Контракт хранилища: одни и те же проверки для SQL и хранилища в памяти
"""
import pytest
from datetime import datetime, timedelta
from database.database import create_store
from database.memory_store import MemoryEntityStore
from models.booking import BookingStatus

DAY = datetime(2024, 6, 1)

async def add_booking(store, customer, table, date, status=BookingStatus.PENDING):
    return await store.create_booking(
        customer_id=customer.id,
        table_id=table.id,
        date=date,
        duration=90,
        party_size=2,
        status=status,
        special_requests=None
    )

@pytest.mark.asyncio
async def test_create_customer_is_idempotent_by_email(store):
    first = await store.create_customer("Alice", "alice@gmail.com", None)
    second = await store.create_customer("Alice Again", "alice@gmail.com", "555")

    assert first.id == second.id
    assert len(await store.get_customers()) == 1
    assert (await store.get_customer_by_email("alice@gmail.com")).name == "Alice"

@pytest.mark.asyncio
async def test_update_customer(store):
    customer = await store.create_customer("Alice", "alice@gmail.com")
    updated = await store.update_customer(customer.id, phone="555-0100")

    assert updated.phone == "555-0100"
    assert await store.update_customer(999, phone="1") is None

@pytest.mark.asyncio
async def test_tables_are_ordered_by_number(store):
    await store.create_table(5, 6, "Corner")
    await store.create_table(2, 2, "Window", is_active=False)
    await store.create_table(3, 4, "Center")

    assert [t.number for t in await store.get_tables()] == [2, 3, 5]
    assert [t.number for t in await store.get_tables(active_only=True)] == [3, 5]

@pytest.mark.asyncio
async def test_update_table(store):
    table = await store.create_table(1, 2)
    updated = await store.update_table(table.id, capacity=4, is_active=False)

    assert updated.capacity == 4
    assert updated.is_active is False
    assert await store.update_table(999, capacity=1) is None

@pytest.mark.asyncio
async def test_booking_crud(store):
    customer = await store.create_customer("Alice", "alice@gmail.com")
    table = await store.create_table(3, 4)

    booking = await add_booking(store, customer, table, DAY.replace(hour=19))
    assert booking.customer.email == "alice@gmail.com"
    assert booking.table.number == 3
    assert booking.end_time == DAY.replace(hour=20, minute=30)

    updated = await store.update_booking(booking.id, status=BookingStatus.CONFIRMED)
    assert updated.status == BookingStatus.CONFIRMED
    assert updated.table.number == 3

    assert await store.delete_booking(booking.id) is True
    assert await store.delete_booking(booking.id) is False
    assert await store.get_booking_by_id(booking.id) is None
    assert await store.update_booking(booking.id, status=BookingStatus.CANCELLED) is None

@pytest.mark.asyncio
async def test_bookings_by_date_range_is_inclusive(store):
    customer = await store.create_customer("Alice", "alice@gmail.com")
    table_a = await store.create_table(1, 2)
    table_b = await store.create_table(2, 2)

    start = DAY.replace(hour=12)
    end = DAY.replace(hour=20)
    at_start = await add_booking(store, customer, table_a, start)
    at_end = await add_booking(store, customer, table_b, end)
    await add_booking(store, customer, table_a, end + timedelta(minutes=1))
    await add_booking(store, customer, table_a, start - timedelta(minutes=1))

    in_range = await store.get_bookings_by_date_range(start, end)
    assert [b.id for b in in_range] == [at_start.id, at_end.id]

    for_table = await store.get_bookings_by_date_range(start, end, table_id=table_a.id)
    assert [b.id for b in for_table] == [at_start.id]

@pytest.mark.asyncio
async def test_get_bookings_newest_first(store):
    customer = await store.create_customer("Alice", "alice@gmail.com")
    table = await store.create_table(1, 2)
    for day in range(3):
        await add_booking(store, customer, table, DAY + timedelta(days=day))

    bookings = await store.get_bookings()
    assert [b.date.day for b in bookings] == [3, 2, 1]
    assert len(await store.get_bookings(limit=2)) == 2

    by_customer = await store.get_bookings_by_customer(customer.id)
    assert [b.date.day for b in by_customer] == [3, 2, 1]

@pytest.mark.asyncio
async def test_customers_include_bookings(store):
    alice = await store.create_customer("Alice", "alice@gmail.com")
    table = await store.create_table(7, 2)
    await add_booking(store, alice, table, DAY)

    customers = await store.get_customers()
    assert customers[0].bookings[0].table.number == 7

@pytest.mark.asyncio
async def test_cafe_settings(store):
    assert await store.get_cafe_settings() is None
    assert await store.update_cafe_settings(name="Nope") is None

    created = await store.create_cafe_settings(name="Cafe Delight", booking_duration=90, time_slots=["18:00"])
    assert created.name == "Cafe Delight"

    updated = await store.update_cafe_settings(max_party_size=12)
    assert updated.max_party_size == 12
    assert (await store.get_cafe_settings()).time_slots == ["18:00"]

@pytest.mark.asyncio
async def test_ping(store):
    assert await store.ping() is True

@pytest.mark.asyncio
async def test_create_store_backends():
    memory = await create_store("memory")
    assert isinstance(memory, MemoryEntityStore)

    sql = await create_store("sql", "sqlite:///:memory:")
    assert await sql.ping() is True
    await sql.close()

    with pytest.raises(ValueError):
        await create_store("redis")
