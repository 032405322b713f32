from enum import StrEnum
from typing import Dict, Optional

from pydantic import BaseModel, JsonValue


class Outcome(StrEnum):
    # Values are the event names the authentication graph branches on
    SUCCESS = "onSuccess"
    FAIL = "onFail"
    TIMEOUT = "onTimeout"


# Synthetic status codes for attempts that never produced a usable response
STATUS_NO_RESPONSE = 0
STATUS_BAD_REQUEST = 400
STATUS_REQUEST_TIMEOUT = 408
STATUS_INTERNAL_SERVER_ERROR = 500


class AttemptResult(BaseModel):
    """Result of exactly one request/response (or failure) cycle.

    `status_code` is the HTTP status returned by the endpoint, a synthetic
    code (400/408/500) when the attempt failed before a usable response was
    read, or 0 when no attempt was made. The workflow only ever branches on
    `outcome`; the status code is carried for retry decisions and diagnostics.
    """

    status_code: int = STATUS_NO_RESPONSE
    outcome: Outcome = Outcome.FAIL
    body: Optional[Dict[str, JsonValue]] = None

    model_config = {"frozen": True}

    @classmethod
    def failed(cls, status_code: int = STATUS_NO_RESPONSE) -> "AttemptResult":
        return cls(status_code=status_code, outcome=Outcome.FAIL, body=None)

    def body_or_empty(self) -> Dict[str, JsonValue]:
        return dict(self.body) if self.body is not None else {}

    def is_success_or_redirect(self) -> bool:
        return 200 <= self.status_code < 400

    def is_retry_trigger(self) -> bool:
        # Inclusive upper bound: a 500 triggers retries, 501+ does not.
        # Timeouts (408) and malformed urls (400) fall inside the range.
        return 400 <= self.status_code <= 500


class InvocationResult(BaseModel):
    """Terminal value handed to the workflow continuation."""

    outcome: Outcome
    body: Dict[str, JsonValue] = {}

    model_config = {"frozen": True}

    @classmethod
    def from_attempt(cls, attempt: AttemptResult) -> "InvocationResult":
        return cls(outcome=attempt.outcome, body=attempt.body_or_empty())

    @classmethod
    def failed(cls) -> "InvocationResult":
        return cls(outcome=Outcome.FAIL, body={})
