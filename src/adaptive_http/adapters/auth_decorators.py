import json
from typing import Callable, Dict, Optional, Type
from urllib.parse import urlencode

import aiohttp
from pydantic import BaseModel, ValidationError

from adaptive_http.core.exceptions import AuthDecorationError, TransportError, UnknownAuthTypeError
from adaptive_http.core.interfaces.auth import AuthDecorator
from adaptive_http.core.interfaces.http_client import HttpClientPort
from adaptive_http.core.managers.domain_guard import DomainGuard
from adaptive_http.core.models.auth_config import (
    ApiKeyProperties,
    AuthConfigModel,
    BasicAuthProperties,
    BearerTokenProperties,
    ClientCredentialProperties,
)
from adaptive_http.core.models.request import (
    ACCEPT,
    AUTHORIZATION,
    CONTENT_TYPE,
    TYPE_APPLICATION_FORM_URLENCODED,
    TYPE_APPLICATION_JSON,
    OutboundRequest,
)
from adaptive_http.core.settings import logger


def _properties(model: Type[BaseModel], config: AuthConfigModel):
    try:
        return model.model_validate(config.properties)
    except ValidationError as exc:
        raise AuthDecorationError(
            f"Invalid properties for auth type '{config.type}': {exc.error_count()} error(s)"
        ) from exc


class BasicAuthDecorator:
    async def apply_auth(self, request: OutboundRequest, config: AuthConfigModel) -> OutboundRequest:
        props = _properties(BasicAuthProperties, config)
        auth = aiohttp.BasicAuth(props.username, props.password.get_secret_value())
        return request.with_headers({AUTHORIZATION: auth.encode()})


class ApiKeyDecorator:
    async def apply_auth(self, request: OutboundRequest, config: AuthConfigModel) -> OutboundRequest:
        props = _properties(ApiKeyProperties, config)
        return request.with_headers({props.header_name: props.api_key.get_secret_value()})


class BearerTokenDecorator:
    async def apply_auth(self, request: OutboundRequest, config: AuthConfigModel) -> OutboundRequest:
        props = _properties(BearerTokenProperties, config)
        return request.with_headers({AUTHORIZATION: f"Bearer {props.token.get_secret_value()}"})


class ClientCredentialDecorator:
    """OAuth2 client credentials grant.

    Exchanges the consumer key/secret for an access token at the configured
    token endpoint (through the shared transport, so the same timeouts and
    domain restriction apply) and adds it as a bearer token.
    """

    ACCESS_TOKEN = "access_token"

    def __init__(self, http_client: HttpClientPort, domain_guard: DomainGuard):
        self._http = http_client
        self._guard = domain_guard

    async def apply_auth(self, request: OutboundRequest, config: AuthConfigModel) -> OutboundRequest:
        props = _properties(ClientCredentialProperties, config)
        token = await self._request_token(props)
        return request.with_headers({AUTHORIZATION: f"Bearer {token}"})

    async def _request_token(self, props: ClientCredentialProperties) -> str:
        token_endpoint = str(props.token_endpoint)
        if not self._guard.permit(token_endpoint):
            raise AuthDecorationError(
                f"Token endpoint {token_endpoint} is not in the allowed domain list"
            )

        form = {"grant_type": "client_credentials"}
        if props.scopes:
            form["scope"] = props.scopes
        basic = aiohttp.BasicAuth(props.consumer_key, props.consumer_secret.get_secret_value())
        token_request = OutboundRequest(
            method="POST",
            uri=token_endpoint,
            headers={
                AUTHORIZATION: basic.encode(),
                CONTENT_TYPE: TYPE_APPLICATION_FORM_URLENCODED,
                ACCEPT: TYPE_APPLICATION_JSON,
            },
            body=urlencode(form),
        )

        logger.debug("[auth] requesting client credentials token endpoint=%s", token_endpoint)
        try:
            response = await self._http.send(token_request)
        except TransportError as exc:
            raise AuthDecorationError(f"Token request to {token_endpoint} failed: {exc}") from exc

        if not 200 <= response.status < 300:
            raise AuthDecorationError(
                f"Token endpoint {token_endpoint} returned status {response.status}"
            )
        try:
            payload = json.loads(response.text or "")
        except ValueError as exc:
            raise AuthDecorationError(f"Token endpoint {token_endpoint} returned invalid JSON") from exc

        token = payload.get(self.ACCESS_TOKEN) if isinstance(payload, dict) else None
        if not isinstance(token, str) or not token:
            raise AuthDecorationError(f"No access token in response from {token_endpoint}")
        return token


class AuthDecoratorResolver:
    """Registry of auth decorators keyed by the auth config type tag."""

    def __init__(self, http_client: HttpClientPort, domain_guard: DomainGuard):
        self._factories: Dict[str, Callable[[], AuthDecorator]] = {
            "BasicAuth": BasicAuthDecorator,
            "ApiKey": ApiKeyDecorator,
            "BearerToken": BearerTokenDecorator,
            "ClientCredential": lambda: ClientCredentialDecorator(http_client, domain_guard),
        }

    def register(self, auth_type: str, factory: Callable[[], AuthDecorator]) -> None:
        self._factories[auth_type] = factory

    def supported_types(self) -> list[str]:
        return sorted(self._factories)

    def resolve(self, config: Optional[AuthConfigModel]) -> AuthDecorator:
        if config is None:
            raise AuthDecorationError("No auth configuration provided")
        factory = self._factories.get(config.type)
        if factory is None:
            raise UnknownAuthTypeError(config.type)
        return factory()
