import os
from typing import Optional

import yaml
from pydantic import ValidationError

from adaptive_http.core.config import InvocationConfig
from adaptive_http.core.exceptions import ConfigurationError
from adaptive_http.core.interfaces.config_provider import ConfigProviderPort
from adaptive_http.core.settings import logger


class ConfigFileAdapter(ConfigProviderPort):
    """Loads the invocation configuration from a YAML file, once.

    Example file::

        retry_count: 2
        allowed_domains: [example, wso2]
        timeouts:
          connect_timeout_ms: 5000
          connection_request_timeout_ms: 5000
          read_timeout_ms: 5000
    """

    def __init__(self, config_path: str):
        self._config_path = os.path.abspath(config_path)
        self._config: Optional[InvocationConfig] = None

    def get_invocation_config(self) -> InvocationConfig:
        if self._config is None:
            self._config = self._load()
        return self._config

    def _load(self) -> InvocationConfig:
        logger.info("Loading invocation config from %s", self._config_path)
        try:
            with open(self._config_path, encoding="UTF-8") as file:
                content = yaml.safe_load(file) or {}
        except FileNotFoundError as e:
            logger.error("Config file not found: %s", self._config_path)
            raise ConfigurationError(f"Config file not found: {self._config_path}") from e
        except yaml.YAMLError as e:
            logger.error("Failed to parse config file: %s", e)
            raise ConfigurationError(f"Failed to parse config file {self._config_path}") from e

        if not isinstance(content, dict):
            raise ConfigurationError(f"Config file {self._config_path} must contain a mapping")

        try:
            config = InvocationConfig(**content)
        except ValidationError as e:
            logger.error("Validation error in config file: %s", e)
            raise ConfigurationError(f"Invalid config in {self._config_path}: {e}") from e

        logger.info(
            "Invocation config loaded retry_count=%s allowed_domains=%s",
            config.retry_count,
            ",".join(config.allowed_domains) or "<all>",
        )
        return config


class SettingsConfigAdapter(ConfigProviderPort):
    """Builds the invocation configuration from environment settings."""

    def __init__(self, settings):
        self._settings = settings

    def get_invocation_config(self) -> InvocationConfig:
        return InvocationConfig.from_app_settings(self._settings)
