"""
Configuration management for Trading Mind using Pydantic Settings.

Loads configuration from environment variables with type validation and sane defaults.
"""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = Field(default="development", description="Environment: development, staging, production")
    debug: bool = Field(default=False, description="Debug mode")
    timezone: Optional[str] = Field(
        default=None,
        description="IANA timezone used for 'today' in check-ins; server-local date when unset",
    )

    # Database
    database_url: str = Field(
        default="sqlite:///./trading_mind.db",
        description="SQLAlchemy connection URL (PostgreSQL in production)",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level: DEBUG, INFO, WARNING, ERROR")
    log_format: str = Field(default="text", description="Log format: json or text")
    log_file: str = Field(default="", description="Log file path (empty disables file logging)")

    # Security
    bcrypt_rounds: int = Field(default=10, description="bcrypt cost factor")
    password_min_length: int = Field(default=6, description="Minimum password length")
    username_min_length: int = Field(default=2, description="Minimum username length")
    username_max_length: int = Field(default=20, description="Maximum username length")
    default_password: str = Field(default="123456", description="Password assigned by phone-only quick registration")

    # SMS verification
    require_sms_verification: bool = Field(default=False, description="Require an SMS code on /register")
    sms_mock_mode: bool = Field(default=True, description="Skip the SMS provider and use a fixed code")
    sms_mock_code: str = Field(default="123456", description="Code issued in mock mode")
    sms_access_key_id: str = Field(default="", description="Aliyun AccessKey ID")
    sms_access_key_secret: str = Field(default="", description="Aliyun AccessKey secret")
    sms_sign_name: str = Field(default="", description="Aliyun SMS signature name")
    sms_template_code: str = Field(default="", description="Aliyun SMS template code")
    sms_template_param_name: str = Field(default="code", description="Template variable holding the code")
    sms_endpoint: str = Field(default="https://dysmsapi.aliyuncs.com/", description="Aliyun SMS endpoint")
    sms_timeout_seconds: float = Field(default=10.0, description="SMS provider request timeout")

    verification_code_length: int = Field(default=6, description="Verification code length")
    verification_code_expiry_minutes: int = Field(default=5, description="Verification code expiry")

    @field_validator("bcrypt_rounds")
    @classmethod
    def clamp_bcrypt_rounds(cls, v: int) -> int:
        """bcrypt accepts cost factors between 4 and 31."""
        return min(max(v, 4), 31)

    @field_validator("timezone")
    @classmethod
    def blank_timezone_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env == "development"


# Global settings instance
settings = Settings()
