"""
Configuration management for the feedback insights service.

Secrets and tunable analysis thresholds are read from environment
variables (or a local .env file) so they can be changed without code
changes.
"""

from typing import List, Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    # Database Configuration
    database_url: str = "sqlite:///./feedback_insights.db"

    # JWT Authentication - MUST be overridden in production
    jwt_secret_key: str = "dev-secret-change-in-production"
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 30

    # API
    cors_origins: List[str] = ["http://localhost:5173"]

    # Environment Settings
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"
    log_sql_queries: bool = False

    # Sentiment scoring
    sentiment_positive_threshold: float = 0.5
    sentiment_negative_threshold: float = -0.5
    sentiment_confidence_bias: float = 0.3

    # Feedback summary rules
    overall_sentiment_threshold: float = 0.3
    low_rating_threshold: float = 3.0
    well_received_rating_threshold: float = 4.0
    high_risk_rating_threshold: float = 2.5
    medium_risk_rating_threshold: float = 3.5
    recent_feedback_limit: int = 3

    # Topic extraction
    topic_limit: int = 5
    topic_min_length: int = 3
    topic_spacy_model: str = "en_core_web_sm"

    # Admin analytics
    analytics_default_days: int = 30
    analytics_max_days: int = 365

    # Optional per-item listing cap for the chef insight view
    menu_item_feedback_limit: Optional[int] = None

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @model_validator(mode="after")
    def validate_jwt_secret(self):
        """Ensure JWT secret is not using default in production."""
        if (
            self.is_production
            and self.jwt_secret_key == "dev-secret-change-in-production"
        ):
            raise ValueError(
                "JWT_SECRET_KEY must be set to a secure value in production"
            )
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Returns:
        Settings instance with environment variables loaded
    """
    return Settings()


# Export settings instance for easy import
settings = get_settings()
