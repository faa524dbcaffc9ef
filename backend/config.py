# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, List
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

DEFAULT_CORS_ORIGINS = ",".join([
    "http://localhost:3000",
    "http://localhost:5173",
    "https://caffinity-front-end.vercel.app",
    "https://caffinity-fe.vercel.app",
])

class Settings(BaseSettings):
    APP_NAME: str = "Caffinity Coffee Shop API"
    APP_VERSION: str = "1.0.0"

    DATABASE_URL: str = "sqlite:///./caffinity.db"

    # Connection pool bounds (ignored for SQLite)
    DB_POOL_SIZE: int = 20
    DB_POOL_TIMEOUT: int = 5
    DB_POOL_RECYCLE: int = 30

    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7

    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # Comma separated list of allowed frontend origins
    CORS_ORIGINS: str = DEFAULT_CORS_ORIGINS

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

settings = Settings()
