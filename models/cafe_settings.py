from sqlalchemy import Column, Integer, String, DateTime, Boolean, JSON
from datetime import datetime, timezone
from database.base import Base

class CafeSettings(Base):
    __tablename__ = "cafe_settings"
    
    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    address = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    # {"monday": {"open": "09:00", "close": "22:00"}, ...}
    opening_hours = Column(JSON, nullable=True)
    min_party_size = Column(Integer, default=1)
    max_party_size = Column(Integer, default=10)
    booking_duration = Column(Integer, default=120)
    # ["09:00", "09:30", ...]
    time_slots = Column(JSON, nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
