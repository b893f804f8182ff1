from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # .env is optional; unknown keys are ignored
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Database ---
    DATABASE_URL: str = "sqlite:///./reservations.db"
    SQL_ECHO: bool = False

    # --- JWT ---
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # --- Logging ---
    LOG_LEVEL: str = "INFO"

    # --- Defaults for a new business schedule ---
    DEFAULT_MIN_ADVANCE_BOOKING_HOURS: int | None = 2
    DEFAULT_MAX_ADVANCE_BOOKING_DAYS: int | None = 30
    DEFAULT_SLOT_DURATION_MINUTES: int = 30
    DEFAULT_AUTO_CONFIRM: bool = True


settings = Settings()
