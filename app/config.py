from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import Optional
from functools import lru_cache
import json


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # App Settings
    APP_NAME: str = "QC Inspection Service"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS - accepts JSON string, comma-separated, or list
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # External QC API (job details, drafts, submissions)
    USE_MOCK_API: bool = True  # Serve jobs from the in-memory mock backend
    MOCK_API_DELAY_MS: int = 300  # Simulated network latency of the mock backend
    QC_API_BASE_URL: str = "http://localhost:8000/api"
    QC_API_TIMEOUT: float = 30.0  # Seconds
    QC_API_TOKEN: Optional[str] = None  # Bearer token, if the QC API needs one

    # Draft autosave
    AUTOSAVE_ENABLED: bool = True
    AUTOSAVE_DELAY_SECONDS: float = 2.0  # Debounce window after the last edit

    # Scheduler
    SCHEDULER_TIMEZONE: str = "UTC"

    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [origin.strip() for origin in v.split(',')]
        return v

    @property
    def cors_origins_list(self) -> list[str]:
        """CORS origins as a list, for CORSMiddleware."""
        return [origin for origin in self.CORS_ORIGINS if origin]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
