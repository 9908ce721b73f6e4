"""Тексты итоговых сообщений мастера бронирования"""
from datetime import datetime
from html import escape
from typing import Optional, Dict, Any
from utils.formatters import format_datetime

RETRY_SUGGESTIONS = {
    "table_conflict": "Столик только что заняли, выберите другое время или столик",
    "table_unavailable": "Столик только что заняли, выберите другое время или столик",
}
DEFAULT_RETRY_SUGGESTION = "Попробуйте начать бронирование заново"

def format_success_message(title: str, message: str = "", details: Optional[Dict[str, Any]] = None) -> str:
    result = f"✅ <b>{title}</b>"
    if message:
        result += f"\n\n{message}"
    if details:
        details_text = "\n".join([f"• {k}: {v}" for k, v in details.items()])
        result += f"\n\n{details_text}"
    return result

def format_error_message(title: str, message: str = "", suggestion: str = "") -> str:
    result = f"❌ <b>{title}</b>"
    if message:
        result += f"\n\n{message}"
    if suggestion:
        result += f"\n\n💡 {suggestion}"
    return result

def format_booking_created(booking: Dict[str, Any]) -> str:
    """
    Подтверждение созданной брони

    Args:
        booking: Краткая бронь из ответа create_booking_request
            (id, date в ISO, tableNumber, customerName)
    """
    return format_success_message(
        "Бронь создана",
        "Бронь ожидает подтверждения администратором.",
        {
            "Номер брони": f"#{booking['id']}",
            "Дата": format_datetime(datetime.fromisoformat(booking["date"])),
            "Столик": f"№{booking['tableNumber']}",
            "Гость": escape(booking["customerName"]),
        }
    )

def format_booking_failed(error: Dict[str, Any]) -> str:
    suggestion = RETRY_SUGGESTIONS.get(error.get("code"), DEFAULT_RETRY_SUGGESTION)
    return format_error_message("Не удалось создать бронь", escape(error["error"]), suggestion)

def format_no_tables_message(start: datetime, party_size: int) -> str:
    return format_error_message(
        "Нет свободных столиков",
        f"На {format_datetime(start)} для {party_size} гост. все подходящие столики заняты.",
        "Попробуйте выбрать другое время или дату"
    )
