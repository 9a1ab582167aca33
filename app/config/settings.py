"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

import re

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.config.business_constants import (
    DEFAULT_WEB_APP_URL,
    FRIENDS_PER_REWARD,
    INVITE_BONUS,
    REWARD_AMOUNT,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Telegram Bot
    telegram_bot_token: str
    telegram_bot_username: str | None = None

    # Database
    database_url: str
    database_echo: bool = False

    # Admin
    admin_telegram_ids: str = ""  # Comma-separated list

    # Game front-end
    web_app_url: str = DEFAULT_WEB_APP_URL

    # Referral program
    invite_bonus: int = Field(
        default=INVITE_BONUS, ge=0, description="Flat bonus per invited friend"
    )
    friends_per_reward: int = Field(
        default=FRIENDS_PER_REWARD,
        gt=0,
        description="Number of friends that completes one reward batch",
    )
    reward_amount: int = Field(
        default=REWARD_AMOUNT,
        ge=0,
        description="Extra bonus paid for every completed batch of friends",
    )

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    health_check_host: str = "0.0.0.0"
    health_check_port: int = Field(
        default=8080, ge=1, le=65535, description="Liveness HTTP server port"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode='after')
    def validate_production(self) -> 'Settings':
        """Validate production-specific requirements."""
        if self.environment == 'production':
            if self.debug:
                raise ValueError(
                    'DEBUG must be False in production environment. '
                    'Set DEBUG=false in your .env file.'
                )
            if self.database_url.startswith('sqlite'):
                logger.warning(
                    'DATABASE_URL points to SQLite in production. '
                    'Concurrent referral credits need a server database.'
                )
        return self

    @field_validator('telegram_bot_token')
    @classmethod
    def validate_bot_token(cls, v: str) -> str:
        """Validate Telegram bot token format."""
        pattern = r'^\d+:[A-Za-z0-9_-]{35}$'
        if not re.match(pattern, v):
            raise ValueError(
                'Invalid Telegram bot token format. '
                'Expected format: 123456789:ABCdefGHIjklMNOpqrsTUVwxyz'
            )
        return v

    @field_validator('database_url')
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL."""
        if not v.startswith(
            ('postgresql://', 'postgresql+asyncpg://', 'sqlite+aiosqlite://')
        ):
            raise ValueError(
                'DATABASE_URL must start with postgresql+asyncpg:// '
                'or sqlite+aiosqlite://'
            )
        if v.startswith('postgresql://'):
            # Async engine needs the asyncpg driver
            v = v.replace('postgresql://', 'postgresql+asyncpg://', 1)
        return v

    @field_validator('web_app_url')
    @classmethod
    def validate_web_app_url(cls, v: str) -> str:
        """Telegram only opens Web Apps over HTTPS."""
        if not v.startswith('https://'):
            raise ValueError('WEB_APP_URL must be an https:// URL')
        return v.rstrip('/')

    def get_admin_ids(self) -> list[int]:
        """Parse admin IDs from comma-separated string with error handling."""
        if not self.admin_telegram_ids:
            return []

        result = []
        for id_ in self.admin_telegram_ids.split(","):
            id_stripped = id_.strip()
            if not id_stripped:
                continue
            try:
                result.append(int(id_stripped))
            except ValueError:
                logger.warning(f"Invalid admin ID: {id_stripped}")
                continue
        return result


# Global settings instance
settings = Settings()
