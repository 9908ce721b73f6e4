from sqlalchemy import Column, Integer, String, DateTime, Boolean, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from database.base import Base

class Table(Base):
    __tablename__ = "tables"
    
    id = Column(Integer, primary_key=True)
    number = Column(Integer, unique=True, nullable=False)
    capacity = Column(Integer, nullable=False)
    location = Column(String, nullable=True)
    description = Column(String, nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
    
    bookings = relationship("Booking", back_populates="table")
    
    __table_args__ = (
        CheckConstraint("capacity >= 1", name="ck_table_capacity_positive"),
    )
