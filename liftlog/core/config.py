from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
    DATABASE_URL: str = "sqlite+aiosqlite:///./dev.db"
    DB_ECHO: bool = False
    # Local dev only, deployments run alembic
    CREATE_TABLES_ON_STARTUP: bool = False

    # Tokens are issued by the external auth provider; we only verify them
    AUTH_JWT_SECRET: str = "change-me"
    AUTH_JWT_ALG: str = "HS256"
    AUTH_JWT_AUDIENCE: str | None = None

    AUTO_CLOSE_AFTER_SECONDS: int = 10800
    MIN_DISPLAY_DURATION_MINUTES: int = 5
    DEFAULT_FALLBACK_SETS: int = 3

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["http://localhost:8081", "http://127.0.0.1:8081"]

settings = Settings()
