"""Configuration models for core domain components.

Pydantic models consolidating the settings the engine reads once at
construction. They are frozen: the engine never reacts to configuration
changes after it has been built.
"""

from typing import Tuple
from pydantic import BaseModel, Field, field_validator


class TimeoutConfig(BaseModel):
    """Timeouts applied by the shared transport to every attempt.

    Attributes:
        connect_timeout_ms: Time allowed to establish the TCP/TLS connection
        connection_request_timeout_ms: Time allowed to obtain a connection
            from the pool (including connecting)
        read_timeout_ms: Maximum silence between two reads of the response
    """

    connect_timeout_ms: int = Field(default=5000, gt=0)
    connection_request_timeout_ms: int = Field(default=5000, gt=0)
    read_timeout_ms: int = Field(default=5000, gt=0)

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }

    @property
    def connect_seconds(self) -> float:
        return self.connect_timeout_ms / 1000.0

    @property
    def connection_request_seconds(self) -> float:
        return self.connection_request_timeout_ms / 1000.0

    @property
    def read_seconds(self) -> float:
        return self.read_timeout_ms / 1000.0


class InvocationConfig(BaseModel):
    """Configuration for the HTTP function engine.

    Attributes:
        retry_count: Additional attempts allowed after a retry-triggering first attempt
        timeouts: Per-attempt transport timeouts
        allowed_domains: Parent domains that may be called (empty = all hosts)
        retry_wait_initial: Base backoff in seconds between retries (0 = none)
        retry_wait_max: Upper bound for the backoff in seconds
    """

    retry_count: int = Field(
        default=2,
        ge=0,
        description="Maximum additional attempts after a first attempt with status in [400, 500]",
    )
    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)
    allowed_domains: Tuple[str, ...] = Field(
        default=(),
        description="Lowercase parent domains permitted as targets; empty permits every host",
    )
    retry_wait_initial: float = Field(default=0.0, ge=0)
    retry_wait_max: float = Field(default=0.0, ge=0)

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }

    @field_validator("allowed_domains", mode="before")
    def normalize_domains(cls, value):
        if value is None:
            return ()
        if isinstance(value, str):
            value = value.split(",")
        seen = []
        for domain in value:
            domain = str(domain).strip().lower()
            if domain and domain not in seen:
                seen.append(domain)
        return tuple(seen)

    @classmethod
    def from_app_settings(cls, settings) -> "InvocationConfig":
        """Factory method to construct config from AdaptiveHttpSettings instance.

        Args:
            settings: AdaptiveHttpSettings instance from core.settings

        Returns:
            InvocationConfig with values from app settings
        """
        return cls(
            retry_count=settings.ADAPTIVE_HTTP_RETRY_COUNT,
            timeouts=TimeoutConfig(
                connect_timeout_ms=settings.ADAPTIVE_HTTP_CONNECT_TIMEOUT_MS,
                connection_request_timeout_ms=settings.ADAPTIVE_HTTP_CONNECTION_REQUEST_TIMEOUT_MS,
                read_timeout_ms=settings.ADAPTIVE_HTTP_READ_TIMEOUT_MS,
            ),
            allowed_domains=settings.ADAPTIVE_HTTP_ALLOWED_DOMAINS,
            retry_wait_initial=settings.ADAPTIVE_HTTP_RETRY_WAIT_INITIAL,
            retry_wait_max=settings.ADAPTIVE_HTTP_RETRY_WAIT_MAX,
        )
