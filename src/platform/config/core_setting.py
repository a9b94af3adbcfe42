from pathlib import Path
from typing import List, Optional

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Food Ordering Service'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Logging
    LOG_LEVEL: Optional[str] = None  # Defaults to DEBUG when DEBUG is on, INFO otherwise
    LOG_JSON: bool = False  # One JSON object per line on stdout
    LOG_TO_FILE: Optional[bool] = None  # Defaults to DEBUG
    LOG_TIMEZONE: str = 'Asia/Kolkata'  # Log file naming

    # Security (token verification only, issuance lives in the auth service)
    SECRET_KEY: SecretStr = SecretStr('test_secret_key_change_in_production')
    ALGORITHM: str = 'HS256'

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',')]
        elif isinstance(v, list):
            return v
        return []

    # MongoDB Configuration
    MONGODB_URL: str = 'mongodb://localhost:27017'
    MONGODB_DATABASE: str = 'food_ordering'
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = 5000

    # Booking lifecycle
    BOOKING_VENDOR_WAIT_SECONDS: float = 120.0  # How long create_booking waits for the vendor
    BOOKING_POLL_INTERVAL_SECONDS: float = 2.0  # Re-read interval while waiting

    # Live status stream
    SSE_PING_SECONDS: int = 30  # Keep-alive comment frame interval
    SSE_STREAM_BUFFER_SIZE: int = 10  # Per-subscriber buffered events before dropping

    # Payment
    PAYMENT_CURRENCY: str = 'INR'
    DEFAULT_PAYMENT_METHOD: str = 'ONLINE'


settings = Settings()  # type: ignore
