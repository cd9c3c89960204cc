"""Application configuration settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Student Registration Backend"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    API_PREFIX: str = "/api"

    # Database (REST backend)
    DATABASE_URL: str = "sqlite:///./students.db"

    # Admin credentials checked by POST /api/admin/login
    ADMIN_EMAIL: str | None = None
    ADMIN_PASSWORD: str | None = None

    # REST backend as seen by the dashboard
    REST_API_URL: str = "http://localhost:5000/api"
    PROBE_PATH: str = "/students"
    PROBE_TIMEOUT_SECONDS: float = 2.0
    REQUEST_TIMEOUT_SECONDS: float = 10.0

    # Firestore
    FIRESTORE_PROJECT_ID: str | None = None
    FIRESTORE_STUDENTS_COLLECTION: str = "students"
    FIRESTORE_ADMINS_COLLECTION: str = "admins"

    # Dashboard client state
    CLIENT_STATE_FILE: str = ".student_registry_state.json"
    SESSION_TIMEOUT_MINUTES: int = 30

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
