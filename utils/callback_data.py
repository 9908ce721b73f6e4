from typing import Optional, Tuple
from datetime import datetime

class CallbackData:
    @staticmethod
    def create_booking_date(date: datetime) -> str:
        return f"booking_date_{date.strftime('%Y-%m-%d')}"

    @staticmethod
    def parse_booking_date(callback_data: str) -> Optional[datetime]:
        if not callback_data.startswith("booking_date_"):
            return None
        try:
            date_str = callback_data.replace("booking_date_", "")
            return datetime.strptime(date_str, "%Y-%m-%d")
        except ValueError:
            return None

    @staticmethod
    def create_booking_slot(slot: str) -> str:
        return f"booking_slot_{slot}"

    @staticmethod
    def parse_booking_slot(callback_data: str) -> Optional[str]:
        if not callback_data.startswith("booking_slot_"):
            return None
        slot = callback_data.replace("booking_slot_", "")
        try:
            datetime.strptime(slot, "%H:%M")
        except ValueError:
            return None
        return slot

    @staticmethod
    def create_booking_party(party_size: int) -> str:
        return f"booking_party_{party_size}"

    @staticmethod
    def parse_booking_party(callback_data: str) -> Optional[int]:
        if not callback_data.startswith("booking_party_"):
            return None
        try:
            return int(callback_data.replace("booking_party_", ""))
        except ValueError:
            return None

    @staticmethod
    def create_booking_table(table_id: int) -> str:
        return f"booking_table_{table_id}"

    @staticmethod
    def parse_booking_table(callback_data: str) -> Optional[int]:
        if not callback_data.startswith("booking_table_"):
            return None
        try:
            return int(callback_data.replace("booking_table_", ""))
        except ValueError:
            return None

    @staticmethod
    def create_admin_booking(booking_id: int) -> str:
        return f"admin_booking_{booking_id}"

    @staticmethod
    def parse_admin_booking(callback_data: str) -> Optional[int]:
        if not callback_data.startswith("admin_booking_"):
            return None
        try:
            return int(callback_data.replace("admin_booking_", ""))
        except ValueError:
            return None

    @staticmethod
    def create_admin_booking_status(booking_id: int, status: str) -> str:
        return f"admin_status_{booking_id}_{status}"

    @staticmethod
    def parse_admin_booking_status(callback_data: str) -> Optional[Tuple[int, str]]:
        if not callback_data.startswith("admin_status_"):
            return None
        try:
            booking_id, status = callback_data.replace("admin_status_", "").split("_", 1)
            return int(booking_id), status
        except ValueError:
            return None

    @staticmethod
    def create_delete_booking(booking_id: int) -> str:
        return f"delete_booking_{booking_id}"

    @staticmethod
    def parse_delete_booking(callback_data: str) -> Optional[int]:
        if not callback_data.startswith("delete_booking_"):
            return None
        try:
            return int(callback_data.replace("delete_booking_", ""))
        except ValueError:
            return None

    @staticmethod
    def create_delete_booking_confirm(booking_id: int) -> str:
        return f"delete_booking_confirm_{booking_id}"

    @staticmethod
    def parse_delete_booking_confirm(callback_data: str) -> Optional[int]:
        if not callback_data.startswith("delete_booking_confirm_"):
            return None
        try:
            return int(callback_data.replace("delete_booking_confirm_", ""))
        except ValueError:
            return None

    @staticmethod
    def create_toggle_table(table_id: int) -> str:
        return f"admin_toggle_table_{table_id}"

    @staticmethod
    def parse_toggle_table(callback_data: str) -> Optional[int]:
        if not callback_data.startswith("admin_toggle_table_"):
            return None
        try:
            return int(callback_data.replace("admin_toggle_table_", ""))
        except ValueError:
            return None
