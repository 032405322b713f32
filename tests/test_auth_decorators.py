"""Unit tests for auth decorators and their registry."""

import base64

import pytest
from unittest.mock import AsyncMock
from urllib.parse import parse_qs

from adaptive_http.adapters.auth_decorators import (
    ApiKeyDecorator,
    AuthDecoratorResolver,
    BasicAuthDecorator,
    BearerTokenDecorator,
    ClientCredentialDecorator,
)
from adaptive_http.core.exceptions import (
    AuthDecorationError,
    UnknownAuthTypeError,
    UpstreamTimeoutError,
)
from adaptive_http.core.managers.domain_guard import DomainGuard
from adaptive_http.core.models.auth_config import AuthConfigModel
from adaptive_http.core.models.request import HttpResponse, OutboundRequest


TOKEN_ENDPOINT = "https://idp.example.com/oauth2/token"


@pytest.fixture
def request_():
    return OutboundRequest(uri="https://api.example.com/users", headers={"X-Trace": "1"})


@pytest.fixture
def http_client():
    return AsyncMock()


class TestStaticDecorators:
    @pytest.mark.asyncio
    async def test_basic_auth(self, request_):
        config = AuthConfigModel(type="BasicAuth", properties={"username": "admin", "password": "s3cret"})

        decorated = await BasicAuthDecorator().apply_auth(request_, config)

        expected = base64.b64encode(b"admin:s3cret").decode()
        assert decorated.headers["Authorization"] == f"Basic {expected}"
        assert decorated.headers["X-Trace"] == "1"
        # Original request untouched
        assert "Authorization" not in request_.headers

    @pytest.mark.asyncio
    async def test_api_key(self, request_):
        config = AuthConfigModel(type="ApiKey", properties={"apiKey": "k-123", "headerName": "X-API-KEY"})

        decorated = await ApiKeyDecorator().apply_auth(request_, config)

        assert decorated.headers["X-API-KEY"] == "k-123"

    @pytest.mark.asyncio
    async def test_bearer_token_replaces_existing_authorization(self):
        request = OutboundRequest(uri="https://api.example.com/", headers={"authorization": "old"})
        config = AuthConfigModel(type="BearerToken", properties={"token": "abc"})

        decorated = await BearerTokenDecorator().apply_auth(request, config)

        assert decorated.headers == {"Authorization": "Bearer abc"}

    @pytest.mark.asyncio
    async def test_missing_properties(self, request_):
        config = AuthConfigModel(type="BasicAuth", properties={"username": "admin"})

        with pytest.raises(AuthDecorationError):
            await BasicAuthDecorator().apply_auth(request_, config)


class TestClientCredential:
    @pytest.fixture
    def config(self):
        return AuthConfigModel(
            type="ClientCredential",
            properties={
                "consumerKey": "client",
                "consumerSecret": "secret",
                "tokenEndpoint": TOKEN_ENDPOINT,
                "scopes": "read write",
            },
        )

    @pytest.mark.asyncio
    async def test_token_exchange(self, http_client, request_, config):
        http_client.send.return_value = HttpResponse(
            status=200,
            content_type="application/json",
            text='{"access_token": "tok-1", "token_type": "Bearer"}',
        )
        decorator = ClientCredentialDecorator(http_client, DomainGuard())

        decorated = await decorator.apply_auth(request_, config)

        assert decorated.headers["Authorization"] == "Bearer tok-1"
        token_request = http_client.send.await_args.args[0]
        assert token_request.method == "POST"
        assert token_request.uri == TOKEN_ENDPOINT
        assert parse_qs(token_request.body) == {
            "grant_type": ["client_credentials"],
            "scope": ["read write"],
        }
        expected = base64.b64encode(b"client:secret").decode()
        assert token_request.headers["Authorization"] == f"Basic {expected}"

    @pytest.mark.asyncio
    async def test_token_endpoint_subject_to_allow_list(self, http_client, request_, config):
        decorator = ClientCredentialDecorator(http_client, DomainGuard(["wso2"]))

        with pytest.raises(AuthDecorationError):
            await decorator.apply_auth(request_, config)
        http_client.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_token_endpoint_error_status(self, http_client, request_, config):
        http_client.send.return_value = HttpResponse(status=401)
        decorator = ClientCredentialDecorator(http_client, DomainGuard())

        with pytest.raises(AuthDecorationError):
            await decorator.apply_auth(request_, config)

    @pytest.mark.asyncio
    async def test_token_endpoint_timeout(self, http_client, request_, config):
        http_client.send.side_effect = UpstreamTimeoutError("slow", url=TOKEN_ENDPOINT)
        decorator = ClientCredentialDecorator(http_client, DomainGuard())

        with pytest.raises(AuthDecorationError):
            await decorator.apply_auth(request_, config)

    @pytest.mark.asyncio
    async def test_response_without_token(self, http_client, request_, config):
        http_client.send.return_value = HttpResponse(status=200, text='{"error": "nope"}')
        decorator = ClientCredentialDecorator(http_client, DomainGuard())

        with pytest.raises(AuthDecorationError):
            await decorator.apply_auth(request_, config)


class TestResolver:
    def test_resolves_registered_types(self, http_client):
        resolver = AuthDecoratorResolver(http_client, DomainGuard())

        assert isinstance(resolver.resolve(AuthConfigModel(type="BasicAuth")), BasicAuthDecorator)
        assert isinstance(resolver.resolve(AuthConfigModel(type="ApiKey")), ApiKeyDecorator)
        assert isinstance(resolver.resolve(AuthConfigModel(type="BearerToken")), BearerTokenDecorator)
        assert isinstance(
            resolver.resolve(AuthConfigModel(type="ClientCredential")), ClientCredentialDecorator
        )

    def test_unknown_type(self, http_client):
        resolver = AuthDecoratorResolver(http_client, DomainGuard())

        with pytest.raises(UnknownAuthTypeError) as excinfo:
            resolver.resolve(AuthConfigModel(type="Kerberos"))
        assert excinfo.value.auth_type == "Kerberos"

    def test_register_custom_decorator(self, http_client):
        resolver = AuthDecoratorResolver(http_client, DomainGuard())
        custom = BearerTokenDecorator()
        resolver.register("Custom", lambda: custom)

        assert resolver.resolve(AuthConfigModel(type="Custom")) is custom
        assert "Custom" in resolver.supported_types()
