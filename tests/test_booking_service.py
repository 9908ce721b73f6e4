import asyncio
import pytest
from datetime import datetime, timedelta
from services.booking_service import (
    create_booking,
    update_booking_status,
    update_booking,
    cancel_booking,
    delete_booking,
    get_booking_by_id,
    get_bookings_for_date,
    get_bookings_by_customer_email,
    get_recent_bookings,
    list_bookings,
    find_available_tables,
    get_allowed_transitions
)
from services.customer_service import get_all_customers, get_customer_by_email
from services.table_service import set_table_active
from models.booking import BookingStatus
from utils.errors import ConflictError, InvalidTransitionError, NotFoundError, ValidationError

EVENING = datetime(2024, 6, 1, 19, 0)
TABLE_1 = 1  # вместимость 2
TABLE_3 = 3  # вместимость 4

@pytest.mark.asyncio
async def test_create_booking(seeded_store, customer_info):
    booking = await create_booking(seeded_store, customer_info, TABLE_3, EVENING, 4, "У окна")

    assert booking.id is not None
    assert booking.status == BookingStatus.PENDING
    assert booking.duration == 120
    assert booking.date == EVENING
    assert booking.table.number == 3
    assert booking.customer.email == "alice@gmail.com"
    assert booking.special_requests == "У окна"

@pytest.mark.asyncio
async def test_create_booking_accepts_iso_string(seeded_store, customer_info):
    booking = await create_booking(seeded_store, customer_info, TABLE_3, "2024-06-01T19:00:00", 2)
    assert booking.date == EVENING

@pytest.mark.asyncio
async def test_overlapping_booking_is_rejected(seeded_store, customer_info):
    await create_booking(seeded_store, customer_info, TABLE_3, EVENING, 4)

    with pytest.raises(ConflictError) as exc_info:
        await create_booking(
            seeded_store,
            {"name": "Bob", "email": "bob@gmail.com"},
            TABLE_3,
            EVENING + timedelta(hours=1),
            2
        )
    assert exc_info.value.code == "table_conflict"

    bookings = await get_bookings_for_date(seeded_store, EVENING)
    assert len(bookings) == 1
    # Отклоненный запрос не оставляет после себя клиента
    assert await get_customer_by_email(seeded_store, "bob@gmail.com") is None
    assert len(await get_all_customers(seeded_store)) == 1

@pytest.mark.asyncio
async def test_touching_bookings_are_allowed(seeded_store, customer_info):
    await create_booking(seeded_store, customer_info, TABLE_3, EVENING, 4, duration=60)

    after = await create_booking(seeded_store, customer_info, TABLE_3, EVENING + timedelta(hours=1), 2)
    before = await create_booking(seeded_store, customer_info, TABLE_3, EVENING - timedelta(hours=1), 2, duration=60)

    assert after.date == datetime(2024, 6, 1, 20, 0)
    assert before.date == datetime(2024, 6, 1, 18, 0)

@pytest.mark.asyncio
async def test_default_duration_blocks_next_hour(seeded_store, customer_info):
    await create_booking(seeded_store, customer_info, TABLE_3, EVENING, 4)

    with pytest.raises(ConflictError):
        await create_booking(seeded_store, customer_info, TABLE_3, EVENING + timedelta(hours=1), 2)

    later = await create_booking(seeded_store, customer_info, TABLE_3, EVENING + timedelta(hours=2), 2)
    assert later.status == BookingStatus.PENDING

@pytest.mark.asyncio
async def test_booking_overlapping_from_previous_day(seeded_store, customer_info):
    await create_booking(seeded_store, customer_info, TABLE_3, datetime(2024, 6, 1, 23, 0), 2, duration=180)

    with pytest.raises(ConflictError):
        await create_booking(seeded_store, customer_info, TABLE_3, datetime(2024, 6, 2, 1, 0), 2)

@pytest.mark.asyncio
async def test_party_larger_than_table_is_rejected_without_writes(seeded_store):
    with pytest.raises(ConflictError) as exc_info:
        await create_booking(
            seeded_store,
            {"name": "Carol", "email": "carol@gmail.com"},
            TABLE_1,
            EVENING,
            4
        )
    assert exc_info.value.code == "table_unavailable"
    assert await get_recent_bookings(seeded_store) == []
    assert await get_all_customers(seeded_store) == []

@pytest.mark.asyncio
async def test_inactive_table_is_rejected(seeded_store, customer_info):
    await set_table_active(seeded_store, TABLE_3, False)

    with pytest.raises(ConflictError) as exc_info:
        await create_booking(seeded_store, customer_info, TABLE_3, EVENING, 2)
    assert exc_info.value.code == "table_unavailable"

@pytest.mark.asyncio
async def test_unknown_table(seeded_store, customer_info):
    with pytest.raises(NotFoundError) as exc_info:
        await create_booking(seeded_store, customer_info, 999, EVENING, 2)
    assert exc_info.value.code == "table_not_found"

@pytest.mark.asyncio
async def test_missing_fields(seeded_store):
    with pytest.raises(ValidationError) as exc_info:
        await create_booking(seeded_store, {"name": "Dave"}, TABLE_3, EVENING, 2)
    assert exc_info.value.code == "missing_fields"
    assert "email" in exc_info.value.message

@pytest.mark.asyncio
@pytest.mark.parametrize("party_size", [0, 11])
async def test_party_size_out_of_range(seeded_store, customer_info, party_size):
    with pytest.raises(ValidationError) as exc_info:
        await create_booking(seeded_store, customer_info, 6, EVENING, party_size)
    assert exc_info.value.code == "validation_error"

@pytest.mark.asyncio
@pytest.mark.parametrize("party_size", [2.7, "2.7", True])
async def test_party_size_must_be_whole(seeded_store, customer_info, party_size):
    with pytest.raises(ValidationError):
        await create_booking(seeded_store, customer_info, TABLE_3, EVENING, party_size)
    assert await get_recent_bookings(seeded_store) == []

@pytest.mark.asyncio
async def test_whole_float_party_size_is_accepted(seeded_store, customer_info):
    booking = await create_booking(seeded_store, customer_info, TABLE_3, EVENING, 4.0)
    assert booking.party_size == 4

@pytest.mark.asyncio
async def test_invalid_email(seeded_store):
    with pytest.raises(ValidationError):
        await create_booking(seeded_store, {"name": "Eve", "email": "not-an-email"}, TABLE_3, EVENING, 2)

@pytest.mark.asyncio
async def test_duration_longer_than_a_day(seeded_store, customer_info):
    with pytest.raises(ValidationError):
        await create_booking(seeded_store, customer_info, TABLE_3, EVENING, 2, duration=24 * 60 + 1)

@pytest.mark.asyncio
async def test_customer_is_reused_by_email(seeded_store, customer_info):
    first = await create_booking(seeded_store, customer_info, TABLE_3, EVENING, 2)
    second = await create_booking(
        seeded_store,
        {"name": "Alice S.", "email": "  ALICE@gmail.com "},
        TABLE_1,
        EVENING,
        2
    )

    assert first.customer_id == second.customer_id
    customers = await get_all_customers(seeded_store)
    assert len(customers) == 1
    assert customers[0].name == "Alice Smith"

@pytest.mark.asyncio
async def test_cancelled_booking_frees_the_table(seeded_store, customer_info):
    booking = await create_booking(seeded_store, customer_info, TABLE_3, EVENING, 4)
    await cancel_booking(seeded_store, booking.id)

    again = await create_booking(seeded_store, customer_info, TABLE_3, EVENING + timedelta(hours=1), 4)
    assert again.status == BookingStatus.PENDING

@pytest.mark.asyncio
async def test_status_lifecycle(seeded_store, customer_info):
    booking = await create_booking(seeded_store, customer_info, TABLE_3, EVENING, 2)

    booking = await update_booking_status(seeded_store, booking.id, BookingStatus.CONFIRMED)
    assert booking.status == BookingStatus.CONFIRMED

    booking = await update_booking_status(seeded_store, booking.id, "completed")
    assert booking.status == BookingStatus.COMPLETED

    with pytest.raises(InvalidTransitionError):
        await update_booking_status(seeded_store, booking.id, BookingStatus.CANCELLED)

    stored = await get_booking_by_id(seeded_store, booking.id)
    assert stored.status == BookingStatus.COMPLETED

@pytest.mark.asyncio
async def test_self_transition_is_rejected(seeded_store, customer_info):
    booking = await create_booking(seeded_store, customer_info, TABLE_3, EVENING, 2)

    with pytest.raises(InvalidTransitionError) as exc_info:
        await update_booking_status(seeded_store, booking.id, BookingStatus.PENDING)
    assert exc_info.value.code == "invalid_transition"

@pytest.mark.asyncio
async def test_pending_can_become_no_show(seeded_store, customer_info):
    booking = await create_booking(seeded_store, customer_info, TABLE_3, EVENING, 2)
    booking = await update_booking_status(seeded_store, booking.id, BookingStatus.NO_SHOW)
    assert booking.status == BookingStatus.NO_SHOW

@pytest.mark.asyncio
async def test_pending_cannot_be_completed(seeded_store, customer_info):
    booking = await create_booking(seeded_store, customer_info, TABLE_3, EVENING, 2)
    with pytest.raises(InvalidTransitionError):
        await update_booking_status(seeded_store, booking.id, BookingStatus.COMPLETED)

@pytest.mark.asyncio
async def test_unknown_status(seeded_store, customer_info):
    booking = await create_booking(seeded_store, customer_info, TABLE_3, EVENING, 2)
    with pytest.raises(ValidationError):
        await update_booking_status(seeded_store, booking.id, "ARCHIVED")

@pytest.mark.asyncio
async def test_update_status_of_missing_booking(seeded_store):
    with pytest.raises(NotFoundError):
        await update_booking_status(seeded_store, 999, BookingStatus.CONFIRMED)

@pytest.mark.asyncio
async def test_update_booking_special_requests(seeded_store, customer_info):
    booking = await create_booking(seeded_store, customer_info, TABLE_3, EVENING, 2, "Торт")

    booking = await update_booking(seeded_store, booking.id, status="PENDING", special_requests="Цветы")
    assert booking.status == BookingStatus.PENDING
    assert booking.special_requests == "Цветы"

    booking = await update_booking(seeded_store, booking.id, special_requests="")
    assert booking.special_requests is None

@pytest.mark.asyncio
async def test_update_booking_checks_transitions(seeded_store, customer_info):
    booking = await create_booking(seeded_store, customer_info, TABLE_3, EVENING, 2)
    await cancel_booking(seeded_store, booking.id)

    with pytest.raises(InvalidTransitionError):
        await update_booking(seeded_store, booking.id, status=BookingStatus.CONFIRMED)

@pytest.mark.asyncio
async def test_delete_booking(seeded_store, customer_info):
    booking = await create_booking(seeded_store, customer_info, TABLE_3, EVENING, 2)

    await delete_booking(seeded_store, booking.id)

    assert await get_booking_by_id(seeded_store, booking.id) is None
    assert len(await get_all_customers(seeded_store)) == 1
    assert await seeded_store.get_table_by_id(TABLE_3) is not None

    with pytest.raises(NotFoundError):
        await delete_booking(seeded_store, booking.id)

@pytest.mark.asyncio
async def test_list_bookings_filters(seeded_store, customer_info):
    bob = {"name": "Bob", "email": "bob@gmail.com"}
    b1 = await create_booking(seeded_store, customer_info, TABLE_3, EVENING, 2)
    b2 = await create_booking(seeded_store, bob, TABLE_3, EVENING + timedelta(days=1), 2)
    b3 = await create_booking(seeded_store, bob, TABLE_1, EVENING + timedelta(days=3), 2)

    by_date = await list_bookings(seeded_store, date=EVENING)
    assert [b.id for b in by_date] == [b1.id]

    by_range = await list_bookings(
        seeded_store,
        start_date=datetime(2024, 6, 1),
        end_date=datetime(2024, 6, 2, 23, 59)
    )
    assert [b.id for b in by_range] == [b1.id, b2.id]

    by_email = await list_bookings(seeded_store, customer_email="BOB@gmail.com")
    assert [b.id for b in by_email] == [b3.id, b2.id]

    recent = await list_bookings(seeded_store)
    assert [b.id for b in recent] == [b3.id, b2.id, b1.id]

    with pytest.raises(ValidationError):
        await list_bookings(seeded_store, start_date=datetime(2024, 6, 2), end_date=datetime(2024, 6, 1))

@pytest.mark.asyncio
async def test_bookings_by_unknown_email(seeded_store):
    with pytest.raises(NotFoundError) as exc_info:
        await get_bookings_by_customer_email(seeded_store, "nobody@gmail.com")
    assert exc_info.value.code == "customer_not_found"

@pytest.mark.asyncio
async def test_recent_bookings_limit(seeded_store, customer_info):
    for day in range(5):
        await create_booking(seeded_store, customer_info, TABLE_3, EVENING + timedelta(days=day), 2)

    recent = await get_recent_bookings(seeded_store, limit=3)
    assert [b.date.day for b in recent] == [5, 4, 3]

@pytest.mark.asyncio
async def test_find_available_tables(seeded_store, customer_info):
    await create_booking(seeded_store, customer_info, TABLE_3, EVENING, 4)
    await set_table_active(seeded_store, 8, False)

    tables = await find_available_tables(seeded_store, EVENING + timedelta(minutes=30), 4)

    assert [t.number for t in tables] == [4, 5, 6]

@pytest.mark.asyncio
async def test_find_available_tables_negative_duration(seeded_store, customer_info):
    await create_booking(seeded_store, customer_info, TABLE_3, EVENING, 4)

    # Отрицательная длительность дала бы пустое окно и "свободный" занятый столик
    with pytest.raises(ValidationError):
        await find_available_tables(seeded_store, EVENING + timedelta(minutes=30), 2, duration=-60)

@pytest.mark.asyncio
@pytest.mark.parametrize("party_size", [-2, 0, 2.5])
async def test_find_available_tables_bad_party_size(seeded_store, party_size):
    with pytest.raises(ValidationError):
        await find_available_tables(seeded_store, EVENING, party_size)

def test_allowed_transitions():
    assert get_allowed_transitions(BookingStatus.PENDING) == [
        BookingStatus.CONFIRMED, BookingStatus.CANCELLED, BookingStatus.NO_SHOW
    ]
    assert get_allowed_transitions(BookingStatus.CONFIRMED) == [
        BookingStatus.CANCELLED, BookingStatus.COMPLETED, BookingStatus.NO_SHOW
    ]
    assert get_allowed_transitions(BookingStatus.COMPLETED) == []

@pytest.mark.asyncio
async def test_concurrent_requests_for_same_slot(memory_store, customer_info):
    from services.settings_service import seed_default_tables
    await seed_default_tables(memory_store)

    results = await asyncio.gather(
        create_booking(memory_store, customer_info, TABLE_3, EVENING, 2),
        create_booking(memory_store, {"name": "Bob", "email": "bob@gmail.com"}, TABLE_3, EVENING, 2),
        return_exceptions=True
    )

    created = [r for r in results if not isinstance(r, Exception)]
    conflicts = [r for r in results if isinstance(r, ConflictError)]
    assert len(created) == 1
    assert len(conflicts) == 1
