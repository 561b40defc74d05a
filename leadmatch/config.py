from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- Runtime ---
    ENV: str = "dev"  # dev|prod
    LEADMATCH_DB_URL: str = "sqlite+aiosqlite:///./leadmatch.db"
    LOG_LEVEL: str = "INFO"

    # --- Operator endpoints (integrations, jobs) ---
    # Send: X-API-Key: <key>
    API_KEY: str | None = None

    # --- Buyer/marketer sessions ---
    SESSION_TTL_MINUTES: int = 60 * 24 * 7
    BCRYPT_ROUNDS: int = 12

    # --- Outbox delivery ---
    OUTBOX_BATCH_SIZE: int = 50
    OUTBOX_MAX_ATTEMPTS: int = 10
    # per-process cap across all sinks
    OUTBOX_WEBHOOK_RPS: float = 2.0
    OUTBOX_BACKOFF_BASE_SECONDS: float = 5.0
    OUTBOX_BACKOFF_CAP_SECONDS: float = 3600.0  # 1 hour cap
    WEBHOOK_TIMEOUT_S: int = 20

    # --- Scheduler tuning ---
    SCHED_DISPATCH_INTERVAL_MINUTES: int = 5


settings = Settings()
