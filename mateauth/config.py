from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_env_file() -> str | None:
    cur = Path(__file__).resolve()
    for parent in [cur.parent, *cur.parents]:
        candidate = parent / ".env"
        if candidate.exists():
            return str(candidate)
    return None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_find_env_file() or ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # backend
    API_BASE_URI: str = "http://localhost:8787"
    APP_NAME: str = "mateapp"
    HTTP_TIMEOUT_SEC: float = 8.0

    # server-side session cookie, if one was issued outside this process
    SESSION_COOKIE_NAME: str = "session"
    SESSION_COOKIE: str | None = None

    # wallet session store
    TOKEN_STORE: str = "redis"  # "redis" | "memory"
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    WALLET_SESSION_KEY: str = "mateapp:wallet-session"
    WALLET_SESSION_TTL_SEC: int = 0

    LOG_LEVEL: str = "INFO"


settings = Settings()
