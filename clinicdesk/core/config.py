from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    PROJECT_NAME: str = "ClinicDesk"
    API_V1_STR: str = "/api/v1"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "password"
    POSTGRES_DB: str = "clinicdesk"
    DATABASE_URL: Optional[str] = None
    SQL_ECHO: bool = False

    REDIS_URL: str = "redis://localhost:6379/0"

    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12

    LOG_LEVEL: str = "INFO"

    # Scheduling
    DEFAULT_SLOT_DURATION: int = 30
    PUBLIC_BOOKING_LEAD_MINUTES: int = 30
    SLOT_LOCK_SECONDS: int = 10

    CAPTCHA_VERIFY_URL: str = "https://api.friendlycaptcha.com/api/v1/siteverify"
    CAPTCHA_TIMEOUT_SECONDS: float = 5.0

    class Config:
        case_sensitive = True
        env_file = ".env"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if not self.DATABASE_URL:
            self.DATABASE_URL = f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}/{self.POSTGRES_DB}"

settings = Settings()
