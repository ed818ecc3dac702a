from typing import List
from decouple import config, Csv


def _redis_url(host: str, port: int, db: int, password: str = "", tls: bool = False) -> str:
    scheme = "rediss" if tls else "redis"
    auth = f":{password}@" if password else ""
    return f"{scheme}://{auth}{host}:{port}/{db}"


class Settings:
    # --- Storage ---
    # required; import fails without it
    DATABASE_URL: str = config("DATABASE_URL")
    SQL_ECHO: bool = config("SQL_ECHO", default=False, cast=bool)

    # --- HTTP ---
    HOST: str = config("HOST", default="0.0.0.0")
    PORT: int = config("PORT", default=8000, cast=int)
    CORS_ORIGINS: List[str] = config(
        "CORS_ORIGINS",
        default="http://localhost:3000,http://127.0.0.1:3000",
        cast=Csv(),
    )

    # --- Benchmark index ---
    INDEX_SYMBOL: str = config("INDEX_SYMBOL", default="^GSPC")
    INDEX_PERIOD: str = config("INDEX_PERIOD", default="1y")
    # seconds before a cached series is refetched
    INDEX_CACHE_MAX_AGE: int = config("INDEX_CACHE_MAX_AGE", default=3600, cast=int)

    # --- Scheduled refreshes, only run inside the market window ---
    INDEX_REFRESH_MINUTES: int = config("INDEX_REFRESH_MINUTES", default=15, cast=int)
    PRICE_REFRESH_MINUTES: int = config("PRICE_REFRESH_MINUTES", default=5, cast=int)
    MARKET_TIMEZONE: str = config("MARKET_TIMEZONE", default="America/New_York")
    MARKET_OPEN: str = config("MARKET_OPEN", default="09:30")
    MARKET_CLOSE: str = config("MARKET_CLOSE", default="16:00")

    # --- Redis (benchmark cache, Celery broker) ---
    REDIS_HOST: str = config("REDIS_HOST", default="localhost")
    REDIS_PORT: int = config("REDIS_PORT", default=6379, cast=int)
    REDIS_DB: int = config("REDIS_DB", default=0, cast=int)
    REDIS_PASSWORD: str = config("REDIS_PASSWORD", default="")
    REDIS_USE_TLS: bool = config("REDIS_USE_TLS", default=False, cast=bool)
    # seconds
    REDIS_SOCKET_TIMEOUT: float = config("REDIS_SOCKET_TIMEOUT", default=2.0, cast=float)

    @property
    def REDIS_URL(self) -> str:
        return _redis_url(self.REDIS_HOST, self.REDIS_PORT, self.REDIS_DB, self.REDIS_PASSWORD, self.REDIS_USE_TLS)

    CELERY_BROKER_URL: str = config("CELERY_BROKER_URL", default=_redis_url(REDIS_HOST, REDIS_PORT, 1))
    CELERY_RESULT_BACKEND: str = config("CELERY_RESULT_BACKEND", default=_redis_url(REDIS_HOST, REDIS_PORT, 2))
    CELERY_TIMEZONE: str = config("CELERY_TIMEZONE", default="UTC")
    CELERY_ENABLE_UTC: bool = config("CELERY_ENABLE_UTC", default=True, cast=bool)
    CELERY_BEAT_ENABLED: bool = config("CELERY_BEAT_ENABLED", default=True, cast=bool)
    CELERY_WORKER_CONCURRENCY: int = config("CELERY_WORKER_CONCURRENCY", default=1, cast=int)

    # --- Logging ---
    LOG_LEVEL: str = config("LOG_LEVEL", default="INFO").upper()
    LOG_DIR: str = config("LOG_DIR", default="logs")
    LOG_FILE: str = config("LOG_FILE", default="tracker.log")
    LOG_MAX_BYTES: int = config("LOG_MAX_BYTES", default=5_000_000, cast=int)
    LOG_BACKUP_COUNT: int = config("LOG_BACKUP_COUNT", default=5, cast=int)
    SQL_LOG_LEVEL: str = config("SQL_LOG_LEVEL", default="WARNING").upper()
    UVICORN_LOG_LEVEL: str = config("UVICORN_LOG_LEVEL", default="info").upper()
    MARKET_DATA_LOG_LEVEL: str = config("MARKET_DATA_LOG_LEVEL", default="WARNING").upper()


settings = Settings()
