"""Application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    app_name: str = "rehabcompanion"
    debug: bool = False
    database_url: str = "sqlite:///./rehabcompanion.db"

    # JWT (verification only, tokens are issued elsewhere)
    jwt_secret: str = "change-me-in-production-use-openssl-rand-hex-32"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 7  # 7 days

    # Notes encryption
    encryption_master_key: str = "default_key_change_in_production"

    # Mood rules
    mood_lookback_days: int = 7


settings = Settings()
