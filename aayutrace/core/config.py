from pydantic_settings import BaseSettings
from typing import Optional, List


class Settings(BaseSettings):
    APP_NAME: str = "AayuTrace API"
    VERSION: str = "1.0.0"
    DEBUG: bool = False

    DATABASE_URL: str = "sqlite:///./aayutrace.db"

    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    PASSWORD_RESET_EXPIRE_MINUTES: int = 60

    # Seuils d'urgence partagés par toutes les vues
    CRITICAL_THRESHOLD_DAYS: int = 3
    WARNING_THRESHOLD_DAYS: int = 7

    DEFAULT_EXPIRY_REMINDER_DAYS: int = 7
    DEFAULT_WARRANTY_REMINDER_DAYS: int = 30

    NOTIFICATION_FEED_LIMIT: int = 50
    UPCOMING_WINDOW_DAYS: int = 30
    INVITATION_EXPIRE_DAYS: int = 7

    SCHEDULER_ENABLED: bool = True
    REMINDER_CHECK_INTERVAL_HOURS: int = 1
    SEND_DAILY_DIGEST: bool = True
    DAILY_DIGEST_TIME: str = "08:00"

    REALTIME_POLL_SECONDS: float = 5.0

    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_FROM_EMAIL: str = "noreply@aayutrace.app"

    FRONTEND_URL: str = "http://localhost:3000"
    ALLOWED_ORIGINS: List[str] = ["http://localhost", "http://localhost:3000"]

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
