import pytest
from datetime import datetime, timedelta
from models.booking import Booking, BookingStatus
from models.table import Table
from services.availability_service import (
    booking_window,
    intervals_overlap,
    find_conflicts,
    is_available,
    list_available_tables,
    get_table_status
)

EVENING = datetime(2024, 6, 1, 19, 0)

def make_table(id, number, capacity, is_active=True):
    return Table(id=id, number=number, capacity=capacity, is_active=is_active)

def make_booking(id, table_id, date, duration=120, status=BookingStatus.PENDING):
    return Booking(
        id=id,
        customer_id=1,
        table_id=table_id,
        date=date,
        duration=duration,
        party_size=2,
        status=status
    )

class TestIntervalsOverlap:
    def test_touching_intervals_do_not_overlap(self):
        assert not intervals_overlap(
            EVENING, EVENING + timedelta(hours=2),
            EVENING + timedelta(hours=2), EVENING + timedelta(hours=4)
        )

    def test_partial_overlap(self):
        assert intervals_overlap(
            EVENING, EVENING + timedelta(hours=2),
            EVENING + timedelta(hours=1), EVENING + timedelta(hours=3)
        )

    def test_containment(self):
        assert intervals_overlap(
            EVENING, EVENING + timedelta(hours=4),
            EVENING + timedelta(hours=1), EVENING + timedelta(hours=2)
        )

    @pytest.mark.parametrize("offset_minutes", [-180, -120, -60, -1, 0, 1, 60, 119, 120, 121])
    def test_overlap_is_symmetric(self, offset_minutes):
        a = booking_window(EVENING, 120)
        b = booking_window(EVENING + timedelta(minutes=offset_minutes), 60)
        assert intervals_overlap(*a, *b) == intervals_overlap(*b, *a)

    def test_window_uses_minutes(self):
        start, end = booking_window(EVENING, 90)
        assert start == EVENING
        assert end == datetime(2024, 6, 1, 20, 30)

class TestFindConflicts:
    def test_overlapping_active_booking_conflicts(self):
        existing = [make_booking(1, 3, EVENING)]
        conflicts = find_conflicts(EVENING + timedelta(hours=1), 120, existing)
        assert [b.id for b in conflicts] == [1]

    def test_booking_ending_at_candidate_start_is_not_a_conflict(self):
        existing = [make_booking(1, 3, EVENING)]
        assert find_conflicts(EVENING + timedelta(hours=2), 120, existing) == []

    def test_candidate_ending_at_booking_start_is_not_a_conflict(self):
        existing = [make_booking(1, 3, EVENING)]
        assert find_conflicts(EVENING - timedelta(hours=1), 60, existing) == []

    @pytest.mark.parametrize("status", [BookingStatus.CANCELLED, BookingStatus.COMPLETED, BookingStatus.NO_SHOW])
    def test_inactive_statuses_are_ignored(self, status):
        existing = [make_booking(1, 3, EVENING, status=status)]
        assert find_conflicts(EVENING, 120, existing) == []

    def test_confirmed_booking_conflicts(self):
        existing = [make_booking(1, 3, EVENING, status=BookingStatus.CONFIRMED)]
        assert len(find_conflicts(EVENING, 30, existing)) == 1

class TestIsAvailable:
    def test_free_table(self):
        assert is_available(make_table(3, 3, 4), EVENING, 120, 4, [])

    def test_table_too_small(self):
        assert not is_available(make_table(1, 1, 2), EVENING, 120, 4, [])

    def test_inactive_table(self):
        assert not is_available(make_table(3, 3, 4, is_active=False), EVENING, 120, 2, [])

    def test_booked_table(self):
        table = make_table(3, 3, 4)
        existing = [make_booking(1, 3, EVENING - timedelta(minutes=30))]
        assert not is_available(table, EVENING, 120, 2, existing)

class TestListAvailableTables:
    def test_filters_and_sorts_by_number(self):
        tables = [
            make_table(1, 5, 6),
            make_table(2, 1, 2),
            make_table(3, 3, 4),
            make_table(4, 4, 4, is_active=False),
            make_table(5, 2, 4),
        ]
        bookings = [
            make_booking(1, 3, EVENING),
            make_booking(2, 5, EVENING - timedelta(hours=2)),
        ]

        available = list_available_tables(tables, EVENING, 120, 3, bookings)

        # №3 занят, №4 выключен, №1 мал; бронь столика №2 закончилась ровно к 19:00
        assert [t.number for t in available] == [2, 5]

    def test_bookings_of_other_tables_do_not_block(self):
        tables = [make_table(1, 1, 4), make_table(2, 2, 4)]
        bookings = [make_booking(1, 2, EVENING)]
        available = list_available_tables(tables, EVENING, 120, 2, bookings)
        assert [t.number for t in available] == [1]

class TestGetTableStatus:
    def test_statuses(self):
        bookings = [make_booking(1, 3, EVENING)]
        assert get_table_status(make_table(3, 3, 4, is_active=False), EVENING, 120, 2, bookings) == "inactive"
        assert get_table_status(make_table(3, 3, 4), EVENING, 120, 6, bookings) == "too_small"
        assert get_table_status(make_table(3, 3, 4), EVENING, 120, 2, bookings) == "booked"
        assert get_table_status(make_table(4, 4, 4), EVENING, 120, 2, bookings) == "available"
