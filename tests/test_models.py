import pytest
from datetime import datetime
from models.customer import Customer
from models.table import Table
from models.booking import (
    Booking,
    BookingStatus,
    ACTIVE_STATUSES,
    TERMINAL_STATUSES,
    ALLOWED_TRANSITIONS
)
from models.cafe_settings import CafeSettings

class TestCustomerModel:
    def test_customer_creation(self):
        customer = Customer(name="Alice Smith", email="alice@gmail.com", phone="555-0100")
        assert customer.name == "Alice Smith"
        assert customer.email == "alice@gmail.com"
        assert customer.bookings == []

class TestTableModel:
    def test_table_creation(self):
        table = Table(number=3, capacity=4, location="Center", is_active=True)
        assert table.number == 3
        assert table.capacity == 4
        assert table.is_active

class TestBookingModel:
    def test_end_time(self):
        booking = Booking(date=datetime(2024, 6, 1, 23, 0), duration=90, party_size=2, status=BookingStatus.PENDING)
        assert booking.end_time == datetime(2024, 6, 2, 0, 30)

    def test_is_active(self):
        booking = Booking(date=datetime(2024, 6, 1, 19, 0), duration=120, party_size=2, status=BookingStatus.CONFIRMED)
        assert booking.is_active
        booking.status = BookingStatus.CANCELLED
        assert not booking.is_active

    def test_status_values(self):
        assert [s.value for s in BookingStatus] == ["PENDING", "CONFIRMED", "CANCELLED", "COMPLETED", "NO_SHOW"]

class TestTransitions:
    def test_terminal_statuses_have_no_exits(self):
        for status in TERMINAL_STATUSES:
            assert ALLOWED_TRANSITIONS[status] == frozenset()

    def test_active_statuses_can_be_cancelled(self):
        for status in ACTIVE_STATUSES:
            assert BookingStatus.CANCELLED in ALLOWED_TRANSITIONS[status]

    def test_no_self_transitions(self):
        for status, targets in ALLOWED_TRANSITIONS.items():
            assert status not in targets

    def test_every_status_is_covered(self):
        assert set(ALLOWED_TRANSITIONS) == set(BookingStatus)
        assert ACTIVE_STATUSES | TERMINAL_STATUSES == set(BookingStatus)

class TestCafeSettingsModel:
    def test_cafe_settings_creation(self):
        cafe_settings = CafeSettings(name="Cafe Delight", time_slots=["18:00", "18:30"])
        assert cafe_settings.name == "Cafe Delight"
        assert cafe_settings.time_slots == ["18:00", "18:30"]
