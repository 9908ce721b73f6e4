from datetime import datetime
from utils.messages import (
    format_booking_created,
    format_booking_failed,
    format_no_tables_message
)

def test_format_booking_created():
    text = format_booking_created({
        "id": 12,
        "date": "2024-06-01T19:00:00",
        "tableNumber": 3,
        "customerName": "Alice <b>Smith</b>",
        "status": "PENDING",
    })

    assert text.startswith("✅ <b>Бронь создана</b>")
    assert "• Номер брони: #12" in text
    assert "• Дата: 01.06.2024 19:00" in text
    assert "• Столик: №3" in text
    assert "Alice &lt;b&gt;Smith&lt;/b&gt;" in text

def test_format_booking_failed_suggestion_by_code():
    conflict = format_booking_failed({"error": "Столик №3 уже забронирован", "code": "table_conflict"})
    assert "❌ <b>Не удалось создать бронь</b>" in conflict
    assert "Столик только что заняли" in conflict

    other = format_booking_failed({"error": "Некорректный email", "code": "validation_error"})
    assert "Попробуйте начать бронирование заново" in other

def test_format_no_tables_message():
    text = format_no_tables_message(datetime(2024, 6, 1, 19, 0), 4)
    assert "01.06.2024 19:00" in text
    assert "для 4 гост." in text
