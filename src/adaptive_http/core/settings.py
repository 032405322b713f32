# Logging adapter for application-wide logging
from adaptive_http.adapters.logging_adapter import LoggingAdapter

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from rich import print

from adaptive_http.core.interfaces.logging import LoggingPort

# using pydantic_settings to manage environment variables
# and do automatic type casting in a central place
class AdaptiveHttpSettings(BaseSettings):
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore"
    }
    ADAPTIVE_HTTP_LOG_LEVEL: str = "INFO"
    # Optional YAML file overriding the invocation settings below
    ADAPTIVE_HTTP_CONFIG_FILE: Path | None = None
    ADAPTIVE_HTTP_RETRY_COUNT: int = Field(default=2, ge=0)
    ADAPTIVE_HTTP_CONNECT_TIMEOUT_MS: int = Field(default=5000, gt=0)
    ADAPTIVE_HTTP_CONNECTION_REQUEST_TIMEOUT_MS: int = Field(default=5000, gt=0)
    ADAPTIVE_HTTP_READ_TIMEOUT_MS: int = Field(default=5000, gt=0)
    # JSON list, e.g. '["example", "wso2"]'. Empty list allows every host.
    ADAPTIVE_HTTP_ALLOWED_DOMAINS: list[str] = []
    # Backoff between retries; zero means retries are sent back-to-back
    ADAPTIVE_HTTP_RETRY_WAIT_INITIAL: float = Field(default=0.0, ge=0)
    ADAPTIVE_HTTP_RETRY_WAIT_MAX: float = Field(default=0.0, ge=0)

    def print_settings(self, logger: LoggingPort):
        """Prints the settings for debugging purposes"""
        logger.info("Adaptive HTTP settings:")
        print(self)

    @field_validator("ADAPTIVE_HTTP_ALLOWED_DOMAINS", mode="after")
    def strip_domains(cls, value: list[str]) -> list[str]:
        """Drop blank entries so a stray comma does not deny everything."""
        return [domain.strip() for domain in value if domain and domain.strip()]


app_settings = AdaptiveHttpSettings()

logger = LoggingAdapter("adaptive_http", app_settings.ADAPTIVE_HTTP_LOG_LEVEL)
