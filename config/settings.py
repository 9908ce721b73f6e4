import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    BOT_TOKEN: str = os.getenv("BOT_TOKEN", "")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./cafe_booking.db")
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "sql").lower()
    ADMIN_IDS: list[int] = [int(id) for id in os.getenv("ADMIN_IDS", "").split(",") if id]
    DEFAULT_BOOKING_DURATION: int = int(os.getenv("DEFAULT_BOOKING_DURATION", "120"))
    MIN_PARTY_SIZE: int = int(os.getenv("MIN_PARTY_SIZE", "1"))
    MAX_PARTY_SIZE: int = int(os.getenv("MAX_PARTY_SIZE", "10"))
    RECENT_BOOKINGS_LIMIT: int = int(os.getenv("RECENT_BOOKINGS_LIMIT", "50"))
    BOOKING_HORIZON_DAYS: int = int(os.getenv("BOOKING_HORIZON_DAYS", "30"))
    RATE_LIMIT_MESSAGES: int = int(os.getenv("RATE_LIMIT_MESSAGES", "20"))
    RATE_LIMIT_CALLBACKS: int = int(os.getenv("RATE_LIMIT_CALLBACKS", "30"))
    RATE_LIMIT_WINDOW: int = int(os.getenv("RATE_LIMIT_WINDOW", "60"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()
