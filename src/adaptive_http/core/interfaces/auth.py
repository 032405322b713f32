from typing import Protocol

from adaptive_http.core.models.auth_config import AuthConfigModel
from adaptive_http.core.models.request import OutboundRequest


class AuthDecorator(Protocol):
    """Adds authentication material to an outgoing request.

    Implementations return a new request (headers added, URL signed, token
    injected). They may await I/O such as a token exchange; that work runs
    inside the same invocation task. Failures raise `AuthDecorationError`.
    """

    async def apply_auth(
        self, request: OutboundRequest, config: AuthConfigModel
    ) -> OutboundRequest:
        ...


class AuthDecoratorResolverPort(Protocol):
    def resolve(self, config: AuthConfigModel) -> AuthDecorator:
        """Return the decorator registered for `config.type`.

        Raises:
            UnknownAuthTypeError: no decorator is registered for the tag.
        """
        ...
