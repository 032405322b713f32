# main.py
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from adaptive_http.adapters.aiohttp_client_adapter import AioHttpClientAdapter
from adaptive_http.adapters.auth_decorators import AuthDecoratorResolver
from adaptive_http.adapters.config_file_adapter import ConfigFileAdapter, SettingsConfigAdapter
from adaptive_http.adapters.retry_tenacity import TenacityRetryAdapter
from adaptive_http.core.config import InvocationConfig
from adaptive_http.core.interfaces.diagnostics import DiagnosticSink
from adaptive_http.core.interfaces.http_client import HttpClientPort
from adaptive_http.core.logging_config import configure_logging
from adaptive_http.core.managers.attempt_executor import AttemptExecutor
from adaptive_http.core.managers.diagnostics import LoggingDiagnosticSink
from adaptive_http.core.managers.domain_guard import DomainGuard
from adaptive_http.core.managers.http_functions import HttpFunctions
from adaptive_http.core.managers.invocation_adapter import InvocationAdapter
from adaptive_http.core.managers.retry_coordinator import RetryCoordinator
from adaptive_http.core.settings import AdaptiveHttpSettings, app_settings, logger


# main lives at the outermost layer (not in core)
# Instantiates all the concrete adapters
# Wires dependencies together

def load_invocation_config(settings: AdaptiveHttpSettings) -> InvocationConfig:
    if settings.ADAPTIVE_HTTP_CONFIG_FILE is not None:
        return ConfigFileAdapter(str(settings.ADAPTIVE_HTTP_CONFIG_FILE)).get_invocation_config()
    return SettingsConfigAdapter(settings).get_invocation_config()


def create_http_functions(
    config: InvocationConfig,
    client: HttpClientPort,
    diagnostics: Optional[DiagnosticSink] = None,
) -> HttpFunctions:
    domain_guard = DomainGuard(config.allowed_domains)
    executor = AttemptExecutor(client, diagnostics)
    coordinator = RetryCoordinator(
        executor,
        TenacityRetryAdapter(wait_initial=config.retry_wait_initial, wait_max=config.retry_wait_max),
        diagnostics,
    )
    adapter = InvocationAdapter(
        retry_coordinator=coordinator,
        domain_guard=domain_guard,
        auth_resolver=AuthDecoratorResolver(client, domain_guard),
        config=config,
        diagnostics=diagnostics,
    )
    return HttpFunctions(adapter)


@asynccontextmanager
async def lifespan(
    settings: Optional[AdaptiveHttpSettings] = None,
    client: Optional[HttpClientPort] = None,
    diagnostics: Optional[DiagnosticSink] = None,
) -> AsyncIterator[HttpFunctions]:
    """Open the shared transport, yield the HTTP functions, drain on exit."""
    settings = settings or app_settings
    configure_logging(settings.ADAPTIVE_HTTP_LOG_LEVEL)
    settings.print_settings(logger)

    config = load_invocation_config(settings)
    client = client or AioHttpClientAdapter(config.timeouts)
    diagnostics = diagnostics if diagnostics is not None else LoggingDiagnosticSink()

    async with client:
        functions = create_http_functions(config, client, diagnostics)
        try:
            yield functions
        finally:
            await functions.aclose()
