from .customer import Customer
from .table import Table
from .booking import Booking, BookingStatus, ACTIVE_STATUSES, TERMINAL_STATUSES, ALLOWED_TRANSITIONS
from .cafe_settings import CafeSettings

__all__ = [
    "Customer",
    "Table",
    "Booking", "BookingStatus", "ACTIVE_STATUSES", "TERMINAL_STATUSES", "ALLOWED_TRANSITIONS",
    "CafeSettings"
]
