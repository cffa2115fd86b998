from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "ER Triage Guardrails"

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # Patient intake and doctor dashboard dev servers
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:5174",
    ]

    # Guardrail thresholds
    guardrail_low_confidence_threshold: float = 0.6
    guardrail_pediatric_age: int = 5
    guardrail_geriatric_age: int = 65
    guardrail_elderly_red_flag_age: int = 75
    guardrail_heart_rate_threshold: float = 110
    guardrail_respiration_rate_threshold: float = 22

    # Logging
    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
