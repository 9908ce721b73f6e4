from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum, Index, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timedelta, timezone
import enum
from database.base import Base

DEFAULT_DURATION_MINUTES = 120

class BookingStatus(enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    NO_SHOW = "NO_SHOW"

# Статусы, которые занимают столик
ACTIVE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})

TERMINAL_STATUSES = frozenset({BookingStatus.CANCELLED, BookingStatus.COMPLETED, BookingStatus.NO_SHOW})

ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED, BookingStatus.NO_SHOW}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.CANCELLED, BookingStatus.COMPLETED, BookingStatus.NO_SHOW}),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.NO_SHOW: frozenset(),
}

class Booking(Base):
    __tablename__ = "bookings"
    
    id = Column(Integer, primary_key=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    table_id = Column(Integer, ForeignKey("tables.id"), nullable=False, index=True)
    date = Column(DateTime, nullable=False, index=True)
    duration = Column(Integer, nullable=False, default=DEFAULT_DURATION_MINUTES)
    party_size = Column(Integer, nullable=False)
    status = Column(Enum(BookingStatus), default=BookingStatus.PENDING, index=True)
    special_requests = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
    
    customer = relationship("Customer", back_populates="bookings")
    table = relationship("Table", back_populates="bookings")
    
    __table_args__ = (
        Index('idx_booking_table_date', 'table_id', 'date'),
        Index('idx_booking_date_status', 'date', 'status'),
        CheckConstraint("party_size >= 1", name="ck_booking_party_size_positive"),
        CheckConstraint("duration > 0", name="ck_booking_duration_positive"),
    )
    
    @property
    def end_time(self) -> datetime:
        return self.date + timedelta(minutes=self.duration)
    
    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES
