from typing import Dict, Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, Field

ACCEPT = "Accept"
CONTENT_TYPE = "Content-Type"
AUTHORIZATION = "Authorization"

TYPE_APPLICATION_JSON = "application/json"
TYPE_APPLICATION_FORM_URLENCODED = "application/x-www-form-urlencoded"
TYPE_TEXT_PLAIN = "text/plain"


class OutboundRequest(BaseModel):
    """Request descriptor for one outbound call.

    Immutable: header merging and auth decoration return modified copies.
    Header names are compared case-insensitively by `get_header` and
    `with_headers`; the transport deduplicates them the same way.
    """

    method: str = "GET"
    uri: str
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Optional[str | bytes] = None

    model_config = {"frozen": True}

    @property
    def host(self) -> Optional[str]:
        try:
            return urlsplit(self.uri).hostname or None
        except ValueError:
            return None

    def get_header(self, name: str) -> Optional[str]:
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None

    def with_headers(self, headers: Dict[str, str]) -> "OutboundRequest":
        """Return a copy with `headers` set, replacing same-named entries."""
        replaced = {name.lower() for name in headers}
        merged = {k: v for k, v in self.headers.items() if k.lower() not in replaced}
        merged.update(headers)
        return self.model_copy(update={"headers": merged})

    def with_uri(self, uri: str) -> "OutboundRequest":
        return self.model_copy(update={"uri": uri})


class HttpResponse(BaseModel):
    """Transport-level view of a response, before classification."""

    status: int
    content_type: Optional[str] = None
    text: Optional[str] = None
    headers: Dict[str, str] = Field(default_factory=dict)

    model_config = {"frozen": True}
