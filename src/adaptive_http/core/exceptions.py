from typing import Optional


class AdaptiveHttpError(Exception):
    """Base exception for the adaptive HTTP function engine."""


# Programmer errors raised synchronously to the calling feature

class InvalidAuthConfigError(AdaptiveHttpError, ValueError):
    """Raised when an auth configuration map does not have the
    `{type: string, properties: map}` shape."""


class InvalidHeaderError(AdaptiveHttpError, ValueError):
    """Raised when a header value supplied by the caller is not a string."""


class ConfigurationError(AdaptiveHttpError):
    """Raised when engine configuration cannot be loaded or validated."""


# Transport errors translated by the HTTP client adapter

class TransportError(AdaptiveHttpError):
    """Base exception for failures reaching the remote endpoint.

    Attributes:
        url: Endpoint the request was sent to (if known)
        diagnostic: Technical detail from the underlying client
    """
    def __init__(self, message: str, url: Optional[str] = None, diagnostic: Optional[str] = None):
        self.message = message
        self.url = url
        self.diagnostic = diagnostic
        super().__init__(message)


class InvalidRequestUrlError(TransportError):
    """The target URI is malformed or uses an unsupported scheme."""


class UpstreamTimeoutError(TransportError):
    """Connect, pool acquisition or socket read timed out."""


class UpstreamConnectionError(TransportError):
    """Any other I/O failure while talking to the endpoint."""


class ResponseParseError(AdaptiveHttpError):
    """A 2xx response body could not be parsed into a JSON object."""


# Auth decoration

class AuthDecorationError(AdaptiveHttpError):
    """Applying authentication material to a request failed."""


class UnknownAuthTypeError(AuthDecorationError):
    """No auth decorator is registered for the configured type tag."""
    def __init__(self, auth_type: str):
        self.auth_type = auth_type
        super().__init__(f"Unknown auth type: {auth_type}")


class ContinuationAlreadyResumedError(AdaptiveHttpError):
    """A continuation was asked to resume the workflow a second time."""
