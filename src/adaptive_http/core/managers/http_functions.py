"""HTTP functions exposed to authentication scripts.

`http_get` and `http_post` validate their input synchronously (bad input
is a programmer error and raises immediately), build the outbound request
and hand it to the InvocationAdapter. The result reaches the graph through
its event handlers; the returned task is for callers that prefer to await.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Callable, Dict, Mapping, Optional
from urllib.parse import urlencode

from adaptive_http.core.exceptions import InvalidAuthConfigError, InvalidHeaderError
from adaptive_http.core.managers.continuation import EventHandlerContinuation
from adaptive_http.core.managers.invocation_adapter import InvocationAdapter
from adaptive_http.core.models.auth_config import AuthConfigModel
from adaptive_http.core.models.outcome import InvocationResult
from adaptive_http.core.models.request import (
    CONTENT_TYPE,
    TYPE_APPLICATION_FORM_URLENCODED,
    TYPE_APPLICATION_JSON,
    OutboundRequest,
)
from adaptive_http.core.settings import logger


def validate_headers(headers: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Return a copy of `headers`, rejecting non-string values."""
    if headers is None:
        return {}
    for name, value in headers.items():
        if not isinstance(value, str):
            raise InvalidHeaderError("Header values must be of type String")
    return {str(name): value for name, value in headers.items()}


def get_auth_config_model(auth_config: Optional[Mapping[str, Any]]) -> Optional[AuthConfigModel]:
    """Build an AuthConfigModel from a `{type, properties}` map.

    Raises:
        InvalidAuthConfigError: when either key is missing or has the wrong type.
    """
    if auth_config is None:
        return None
    if not isinstance(auth_config, Mapping):
        raise InvalidAuthConfigError(
            "Invalid argument type. Expected {type: string, properties: map}"
        )
    auth_type = auth_config.get("type")
    properties = auth_config.get("properties")
    if auth_type is None or properties is None:
        raise InvalidAuthConfigError(
            "Invalid argument type. Expected {type: string, properties: map}"
        )
    if not isinstance(auth_type, str) or not isinstance(properties, Mapping):
        raise InvalidAuthConfigError(
            "Invalid argument type. Expected {type: string, properties: map}"
        )
    return AuthConfigModel(type=auth_type, properties=dict(properties))


def encode_payload(payload: Optional[Mapping[str, Any]], headers: Dict[str, str]) -> Optional[str]:
    """Serialize a POST payload according to the caller's Content-Type.

    Defaults the Content-Type to JSON when the caller did not set one.
    """
    content_type = next((v for k, v in headers.items() if k.lower() == CONTENT_TYPE.lower()), None)
    if content_type is None:
        headers[CONTENT_TYPE] = TYPE_APPLICATION_JSON
        content_type = TYPE_APPLICATION_JSON

    if payload is None:
        return None
    if TYPE_APPLICATION_FORM_URLENCODED in content_type.lower():
        return urlencode({k: "" if v is None else str(v) for k, v in payload.items()})
    return json.dumps(payload)


class HttpFunctions:
    def __init__(self, invocation_adapter: InvocationAdapter):
        self._adapter = invocation_adapter

    def http_get(
        self,
        url: str,
        event_handlers: Optional[Mapping[str, Callable[..., Any]]] = None,
        headers: Optional[Mapping[str, Any]] = None,
        auth_config: Optional[Mapping[str, Any]] = None,
    ) -> asyncio.Task[InvocationResult]:
        request_headers = validate_headers(headers)
        auth = get_auth_config_model(auth_config)
        request = OutboundRequest(method="GET", uri=url, headers=request_headers)
        logger.debug(f"[function:get] url={url} auth={auth.type if auth else None}")
        return self._adapter.invoke(request, auth, EventHandlerContinuation(event_handlers))

    def http_post(
        self,
        url: str,
        payload: Optional[Mapping[str, Any]] = None,
        event_handlers: Optional[Mapping[str, Callable[..., Any]]] = None,
        headers: Optional[Mapping[str, Any]] = None,
        auth_config: Optional[Mapping[str, Any]] = None,
    ) -> asyncio.Task[InvocationResult]:
        request_headers = validate_headers(headers)
        auth = get_auth_config_model(auth_config)
        body = encode_payload(payload, request_headers)
        request = OutboundRequest(method="POST", uri=url, headers=request_headers, body=body)
        logger.debug(f"[function:post] url={url} auth={auth.type if auth else None}")
        return self._adapter.invoke(request, auth, EventHandlerContinuation(event_handlers))

    async def aclose(self) -> None:
        await self._adapter.aclose()
