"""SDK configuration via environment variables."""

from pydantic_settings import BaseSettings

DEFAULT_BASE_URL = "https://api.stablecoin-gateway.com"


class Settings(BaseSettings):
    # Gateway REST API
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout_ms: int = 30000
    max_retries: int = 3

    # Webhook receipt
    webhook_secret: str = ""
    webhook_tolerance_seconds: int = 300

    # Logging
    log_level: str = "info"
    json_logs: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "STABLECOIN_",
        "extra": "ignore",
    }


settings = Settings()


def get_settings() -> Settings:
    """Return the process-wide settings, read once at import."""
    return settings
