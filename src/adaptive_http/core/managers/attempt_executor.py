"""AttemptExecutor: performs one round trip and classifies its result.

Classification by response status:
- 2xx: SUCCESS; body parsed (text/plain wrapped as {"response": text})
- 3xx: FAIL, redirects are never followed
- 4xx: FAIL
- anything else: FAIL ("unknown" response)

Classification of failures where no usable response was obtained:
- malformed URL            -> 400 / FAIL
- connect or read timeout  -> 408 / TIMEOUT
- other I/O failure        -> 408 / TIMEOUT
- unparseable 2xx body     -> 500 / FAIL
- anything unexpected      -> 500 / FAIL

`execute` never raises; every path yields a fresh AttemptResult and one
diagnostic event.
"""

import json
from typing import Any, Dict, Optional

from adaptive_http.core.exceptions import (
    InvalidRequestUrlError,
    ResponseParseError,
    UpstreamConnectionError,
    UpstreamTimeoutError,
)
from adaptive_http.core.interfaces.diagnostics import DiagnosticSink
from adaptive_http.core.interfaces.http_client import HttpClientPort
from adaptive_http.core.managers.diagnostics import notify
from adaptive_http.core.models.diagnostic_event import DiagnosticEvent
from adaptive_http.core.models.outcome import (
    STATUS_BAD_REQUEST,
    STATUS_INTERNAL_SERVER_ERROR,
    STATUS_REQUEST_TIMEOUT,
    AttemptResult,
    Outcome,
)
from adaptive_http.core.models.request import TYPE_TEXT_PLAIN, HttpResponse, OutboundRequest
from adaptive_http.core.settings import logger

RESPONSE_KEY = "response"


class AttemptExecutor:
    def __init__(self, http_client: HttpClientPort, diagnostics: Optional[DiagnosticSink] = None):
        self._http = http_client
        self._diagnostics = diagnostics

    async def execute(self, request: OutboundRequest) -> AttemptResult:
        endpoint = request.uri
        try:
            response = await self._http.send(request)
            return self._classify_response(response, endpoint)

        except InvalidRequestUrlError as exc:
            self._emit(DiagnosticEvent.invalid_url, endpoint, "Invalid Url for external API call.")
            logger.error("[attempt] invalid url=%s error=%s", endpoint, exc)
            return AttemptResult.failed(STATUS_BAD_REQUEST)

        except UpstreamTimeoutError as exc:
            self._emit(DiagnosticEvent.timeout, endpoint, "Received timeout from external API call.")
            logger.error("[attempt] timeout while calling url=%s error=%s", endpoint, exc)
            return AttemptResult(status_code=STATUS_REQUEST_TIMEOUT, outcome=Outcome.TIMEOUT)

        except UpstreamConnectionError as exc:
            self._emit(DiagnosticEvent.io_error, endpoint, "I/O error while calling external API.")
            logger.error("[attempt] i/o error while calling url=%s error=%s", endpoint, exc)
            return AttemptResult(status_code=STATUS_REQUEST_TIMEOUT, outcome=Outcome.TIMEOUT)

        except ResponseParseError as exc:
            self._emit(
                DiagnosticEvent.parse_error,
                endpoint,
                "Failed to parse the response from the external API.",
            )
            logger.error("[attempt] error while parsing response url=%s error=%s", endpoint, exc)
            return AttemptResult.failed(STATUS_INTERNAL_SERVER_ERROR)

        except Exception as exc:
            self._emit(
                DiagnosticEvent.unknown_error,
                endpoint,
                "Received unknown exception from external API call.",
            )
            logger.exception("[attempt] unexpected error while calling url=%s error=%s", endpoint, exc)
            return AttemptResult.failed(STATUS_INTERNAL_SERVER_ERROR)

    def _classify_response(self, response: HttpResponse, endpoint: str) -> AttemptResult:
        status = response.status

        if 200 <= status < 300:
            body = self._parse_body(response)
            self._emit(
                DiagnosticEvent.success,
                endpoint,
                f"Successfully called the external api. Status code: {status}",
                status_code=status,
            )
            logger.info(
                "[attempt] successfully called the external api status=%s url=%s", status, endpoint
            )
            return AttemptResult(status_code=status, outcome=Outcome.SUCCESS, body=body)

        if 300 <= status < 400:
            self._emit(
                DiagnosticEvent.redirect,
                endpoint,
                f"External api invocation returned a redirection. Status code: {status}",
                status_code=status,
            )
            logger.warning("[attempt] external api returned a redirection status=%s url=%s", status, endpoint)
            return AttemptResult.failed(status)

        if 400 <= status < 500:
            self._emit(
                DiagnosticEvent.client_error,
                endpoint,
                f"External api invocation returned a client error. Status code: {status}",
                status_code=status,
            )
            logger.warning("[attempt] external api returned a client error status=%s url=%s", status, endpoint)
            return AttemptResult.failed(status)

        self._emit(
            DiagnosticEvent.server_error,
            endpoint,
            f"Received unknown response from external API call. Status code: {status}",
            status_code=status,
        )
        logger.error("[attempt] unknown response from external api status=%s url=%s", status, endpoint)
        return AttemptResult.failed(status)

    def _parse_body(self, response: HttpResponse) -> Optional[Dict[str, Any]]:
        text = response.text
        if not text:
            return None

        content_type = (response.content_type or "").lower()
        if TYPE_TEXT_PLAIN in content_type:
            return {RESPONSE_KEY: text}

        try:
            parsed = json.loads(text)
        except ValueError as exc:
            raise ResponseParseError(f"Response body is not valid JSON: {exc}") from exc
        if not isinstance(parsed, dict):
            raise ResponseParseError(
                f"Expected a JSON object but received {type(parsed).__name__}"
            )
        return parsed

    def _emit(self, event: DiagnosticEvent, endpoint: str, message: str, **details: Any) -> None:
        notify(self._diagnostics, event, endpoint, message, **details)
