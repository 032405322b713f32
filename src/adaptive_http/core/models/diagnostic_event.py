from enum import StrEnum


class DiagnosticEvent(StrEnum):
    success = "success"
    redirect = "redirect"
    client_error = "client-error"
    server_error = "server-error"
    timeout = "timeout"
    io_error = "io-error"
    parse_error = "parse-error"
    invalid_url = "invalid-url"
    unknown_error = "unknown-error"
    retry = "retry"
    domain_denied = "domain-denied"
    auth_failed = "auth-failed"


# Events that report a failed interaction with the endpoint
FAILURE_EVENTS = frozenset(
    {
        DiagnosticEvent.redirect,
        DiagnosticEvent.client_error,
        DiagnosticEvent.server_error,
        DiagnosticEvent.timeout,
        DiagnosticEvent.io_error,
        DiagnosticEvent.parse_error,
        DiagnosticEvent.invalid_url,
        DiagnosticEvent.unknown_error,
        DiagnosticEvent.retry,
        DiagnosticEvent.domain_denied,
        DiagnosticEvent.auth_failed,
    }
)
