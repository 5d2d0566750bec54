from pathlib import Path
from typing import Annotated, List, Optional

import orjson
from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'NFT Ticketing Service'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production
    SERVICE_NAME: str = 'ticket-service'

    # CORS
    # Comma-separated or a JSON list
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and v.strip().startswith('['):
            return [str(origin) for origin in orjson.loads(v)]
        if isinstance(v, str):
            return [i.strip() for i in v.split(',') if i.strip()]
        elif isinstance(v, list):
            return v
        return []

    # PostgreSQL
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'nft_ticketing'
    DATABASE_URL: Optional[str] = None  # Overrides POSTGRES_* when set (e.g. sqlite+aiosqlite)

    # Connection pool (ignored for sqlite)
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_PRE_PING: bool = True

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f'postgresql+asyncpg://{self.POSTGRES_USER}:'
            f'{self.POSTGRES_PASSWORD.get_secret_value()}'
            f'@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'
        )

    # Collaborator services
    EVENT_SERVICE_URL: str = 'http://localhost:50053'
    BLOCKCHAIN_SERVICE_URL: str = 'http://localhost:50055'
    IPFS_SERVICE_URL: str = 'http://localhost:50058'

    # Collaborator deadlines (seconds)
    EVENT_SERVICE_TIMEOUT: float = 10.0
    BLOCKCHAIN_READ_TIMEOUT: float = 5.0
    BLOCKCHAIN_VERIFY_TIMEOUT: float = 15.0
    BLOCKCHAIN_MINT_TIMEOUT: float = 30.0
    IPFS_PIN_TIMEOUT: float = 10.0

    # Purchase rules
    PURCHASE_EXPIRY_MINUTES: int = 15
    MAX_TICKETS_PER_PURCHASE: int = 10
    TICKET_VALIDITY_FALLBACK_DAYS: int = 30

    # Check-in credentials
    CHECKIN_SIGNING_KEY: SecretStr = SecretStr(
        '4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318'
    )
    CHECKIN_CREDENTIAL_MAX_AGE_SECONDS: int = 24 * 60 * 60
    CHECKIN_CLOCK_SKEW_SECONDS: int = 5 * 60
    # GenerateQRCode re-signs credentials older than this
    CHECKIN_CREDENTIAL_REFRESH_SECONDS: int = 12 * 60 * 60
    QR_CODE_SCALE: int = 8
    QR_CODE_BORDER: int = 1

    # Fees
    PLATFORM_FEE_PERCENT: int = 10

    # Expiry reaper
    EXPIRY_REAPER_ENABLED: bool = True
    EXPIRY_REAPER_INTERVAL_SECONDS: float = 300.0

    # Pagination
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # Tracing
    OTEL_EXPORTER_OTLP_ENDPOINT: Optional[str] = None
    OTEL_CONSOLE_EXPORT: bool = False


settings = Settings()  # type: ignore
