import pytest
from datetime import datetime
from utils.formatters import (
    format_date,
    format_datetime,
    format_booking,
    format_booking_short,
    format_status,
    format_table,
    format_tables_list,
    format_summary
)
from models.booking import Booking, BookingStatus
from models.customer import Customer
from models.table import Table

def make_booking(**overrides):
    fields = dict(
        id=7,
        customer_id=1,
        table_id=3,
        date=datetime(2024, 6, 1, 19, 0),
        duration=120,
        party_size=4,
        status=BookingStatus.PENDING,
        special_requests=None,
        customer=Customer(id=1, name="Alice Smith", email="alice@gmail.com", phone=None),
        table=Table(id=3, number=3, capacity=4, is_active=True)
    )
    fields.update(overrides)
    return Booking(**fields)

class TestFormatDate:
    def test_format_date(self):
        assert format_date(datetime(2024, 12, 1)) == "01.12.2024"

    def test_format_datetime(self):
        assert format_datetime(datetime(2024, 12, 1, 14, 30)) == "01.12.2024 14:30"

class TestFormatBooking:
    def test_format_booking(self):
        result = format_booking(make_booking(special_requests="Торт"))
        assert "Бронь #7" in result
        assert "01.06.2024 19:00 - 21:00" in result
        assert "№3" in result
        assert "Гостей: 4" in result
        assert "Ожидает подтверждения" in result
        assert "Alice Smith" in result
        assert "Торт" in result

    def test_user_text_is_escaped(self):
        booking = make_booking(
            special_requests="<b>VIP</b>",
            customer=Customer(id=1, name="<Alice>", email="alice@gmail.com")
        )
        result = format_booking(booking)
        assert "<b>VIP</b>" not in result
        assert "&lt;Alice&gt;" in result

    def test_format_booking_short(self):
        result = format_booking_short(make_booking(status=BookingStatus.CONFIRMED))
        assert result.startswith("✅ #7")
        assert "столик №3" in result

    def test_format_status(self):
        assert format_status(BookingStatus.NO_SHOW) == "🚫 Гость не пришел"

class TestFormatTable:
    def test_active_table(self):
        table = Table(number=5, capacity=6, location="Corner", is_active=True)
        assert format_table(table) == "🟢 Столик №5 · до 6 гостей · Corner"

    def test_inactive_table(self):
        table = Table(number=2, capacity=2, is_active=False)
        assert format_table(table).startswith("🔴")

    def test_empty_list(self):
        assert format_tables_list([]) == "Столиков пока нет"

def test_format_summary():
    summary = {
        "total_bookings": 3,
        "total_guests": 8,
        "unique_customers": 2,
        "today_bookings": 0,
        "completion_rate": 50.0,
        "by_status": {"PENDING": 1, "COMPLETED": 1, "NO_SHOW": 1},
    }
    result = format_summary(summary)
    assert "Всего броней: 3" in result
    assert "50%" in result
    assert "Подтверждена: 0" in result
