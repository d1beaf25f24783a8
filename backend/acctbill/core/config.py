from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "acctbill"
    version: str = "0.1.0"
    DEBUG: bool = False
    APP_DOMAIN: str = "example.com"
    APP_DATABASE_DSN: str = "sqlite:////tmp/acctbill.db"
    REDIS_URL: str = "redis://localhost:6379"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Cron trigger; empty disables the bearer check
    CRON_SECRET: str = ""

    # LINE Messaging API
    LINE_API_URL: str = "https://api.line.me/v2/bot"
    LINE_PUSH_TIMEOUT_SECONDS: float = 10.0

    # Recurring billing
    SCHEDULE_RUN_HOUR_UTC: int = 1  # 09:00 Asia/Taipei
    BUSINESS_TIMEZONE: str = "Asia/Taipei"
    BILLING_NUMBER_PREFIX: str = "BIL"
    # Revenue category booked when a billing request is paid
    INCOME_CATEGORY_CODE: str = "4100"
    DEFAULT_DAYS_BEFORE_DUE: int = 14
    RECURRING_SWEEP_DEADLINE_SECONDS: float = 0.0  # 0 disables the deadline

    @property
    def sweep_deadline_enabled(self) -> bool:
        return self.RECURRING_SWEEP_DEADLINE_SECONDS > 0


settings = Settings()
