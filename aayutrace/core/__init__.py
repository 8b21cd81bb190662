from aayutrace.core.config import settings
from aayutrace.core.database import Base, engine, SessionLocal, get_db
from aayutrace.core.security import (
    get_password_hash,
    verify_password,
    create_access_token,
    create_refresh_token,
    create_password_reset_token,
    decode_token,
)

__all__ = [
    "settings",
    "Base",
    "engine",
    "SessionLocal",
    "get_db",
    "get_password_hash",
    "verify_password",
    "create_access_token",
    "create_refresh_token",
    "create_password_reset_token",
    "decode_token",
]
