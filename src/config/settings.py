"""
Application settings - pydantic-settings configuration.

This module defines application configuration using pydantic-settings
for environment variable loading with validation and defaults.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
    )

    # Supabase project credentials
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str | None = None  # Loaded but not used by any call
    supabase_auth_base_url: str | None = None  # Defaults to {supabase_url}/auth/v1

    # Outbound HTTP client
    http_connect_timeout_seconds: float = 5.0
    http_read_timeout_seconds: float = 10.0

    # OTP settings (enforced by the provider)
    otp_expiry_minutes: int = 60
    otp_email_template_type: str = "signup"

    # Rate limit translation for provider 429 responses
    rate_limit_enabled: bool = True
    rate_limit_wait_time_seconds: int = 60
    rate_limit_message: str = (
        "Too many OTP requests. Please wait {waitTime} seconds before trying again."
    )

    # Probe /otp for an existing account before signup (sends an extra email)
    precheck_existing_user: bool = False

    log_level: str = "INFO"

    @property
    def auth_base_url(self) -> str:
        """GoTrue base URL, derived from the project URL unless overridden."""
        if self.supabase_auth_base_url:
            return self.supabase_auth_base_url.rstrip("/")
        if not self.supabase_url:
            return ""
        return f"{self.supabase_url.rstrip('/')}/auth/v1"

    def format_rate_limit_message(self) -> str:
        """Render the rate limit template with the configured wait time."""
        return self.rate_limit_message.replace(
            "{waitTime}", str(self.rate_limit_wait_time_seconds)
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
