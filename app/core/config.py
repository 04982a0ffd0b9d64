from typing import List, Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "Travel Booking System"
    API_V1_STR: str = "/api"

    # Server
    PORT: int = 4000
    ENVIRONMENT: str = "development"
    CORS_ORIGINS: List[str] = ["*"]

    # MongoDB (required at startup, no default on purpose)
    MONGO_URI: Optional[str] = None
    MONGO_DB_NAME: str = "travel"
    BOOKINGS_COLLECTION: str = "bookings"

    # Client
    BOOKING_API_URL: str = "http://localhost:4000/api/operations"

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
