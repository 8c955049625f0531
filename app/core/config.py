from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "local"
    APP_NAME: str = "Car Rental API"
    # Comma-separated origins for CORS. If empty, uses localhost defaults.
    CORS_ORIGINS: str = ""
    LOG_LEVEL: str = "INFO"

    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # database | json
    STORAGE_BACKEND: str = "database"
    DATABASE_URL: str = "sqlite:///./carrental.db"
    DATA_DIR: str = "./data"

    @field_validator("DATABASE_URL", mode="after")
    @classmethod
    def normalize_database_url(cls, v: str) -> str:
        """Render and others give postgres://; SQLAlchemy expects postgresql+psycopg2://."""
        if v and v.startswith("postgres://"):
            return "postgresql+psycopg2://" + v[11:]
        return v

    @field_validator("STORAGE_BACKEND", mode="after")
    @classmethod
    def check_storage_backend(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("database", "json"):
            raise ValueError("STORAGE_BACKEND must be 'database' or 'json'")
        return v

    SEED_ON_STARTUP: bool = False
    SEED_DIR: str = ""  # folder holding legacy users.json / cars.json / rentItem.json exports
    ADMIN_EMAIL: str = "admin@carrental.local"
    ADMIN_PASSWORD: str = ""

    REDIS_URL: str = "redis://localhost:6379/0"


settings = Settings()
