"""
Configuration settings for the Negocio dashboard
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str = "sqlite:///./negocio.db"

    # Sessions
    SECRET_KEY: str = "change-me-negocio-session-key"
    SESSION_COOKIE: str = "negocio_session"
    SESSION_MAX_AGE: int = 60 * 60 * 8

    # Seeded operator account
    ADMIN_EMAIL: str = "admin@negocio.local"
    ADMIN_PASSWORD: str = "negocio-admin"

    # Service
    SERVICE_NAME: str = "negocio-dashboard"
    SERVICE_PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8000"
    ]

    # Presentation
    LOW_STOCK_THRESHOLD: int = 10
    RECENT_LIMIT: int = 5
    CURRENCY_SYMBOL: str = "$"

    class Config:
        env_file = ".env"
        case_sensitive = True


# Create global settings instance
settings = Settings()
