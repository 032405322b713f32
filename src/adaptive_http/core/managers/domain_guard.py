"""Allow-list check for outbound request targets.

The guard compares the *parent domain* of the target host against the
configured allow-list. The parent domain is the second-to-last label of
the host (`a.b.example.com` -> `example`), or the host itself when it has
a single label. This two-label rule does not know about public suffixes
(`login.example.co.uk` -> `co`); deployments already rely on it, so it is
kept as is.

An empty allow-list permits every host. That is the default configuration,
so deployments that want restriction must configure at least one domain.
"""

from typing import Iterable, Optional, Tuple
from urllib.parse import urlsplit

from adaptive_http.core.settings import logger

DOMAIN_SEPARATOR = "."


def parent_domain(host: Optional[str]) -> Optional[str]:
    """Return the lowercase parent domain of `host`, or None if it has none."""
    if not host:
        return None
    labels = [label for label in host.split(DOMAIN_SEPARATOR) if label]
    if not labels:
        return None
    domain = labels[0] if len(labels) == 1 else labels[-2]
    return domain.lower()


class DomainGuard:
    """Decides whether a target URI may be called.

    The allow-list is normalized and frozen at construction, so one guard
    can be shared by all concurrent invocations without locking.
    """

    def __init__(self, allowed_domains: Iterable[str] = ()):
        normalized = []
        for domain in allowed_domains:
            domain = domain.strip().lower()
            if domain and domain not in normalized:
                normalized.append(domain)
        self._allowed: Tuple[str, ...] = tuple(normalized)

    @property
    def allowed_domains(self) -> Tuple[str, ...]:
        return self._allowed

    def permit(self, uri: Optional[str]) -> bool:
        if uri is None:
            logger.debug("[guard] no url provided for domain restriction check")
            return False

        if not self._allowed:
            logger.debug("[guard] no domains configured, allowing url by default url=%s", uri)
            return True

        try:
            host = urlsplit(uri).hostname
        except ValueError:
            host = None

        domain = parent_domain(host)
        if not domain:
            logger.error("[guard] unable to determine the domain of url=%s", uri)
            return False

        logger.debug("[guard] parent domain=%s extracted from url=%s", domain, uri)
        if domain in self._allowed:
            return True

        logger.debug(
            "[guard] domain=%s from url=%s is not in allowed domains=%s",
            domain,
            uri,
            ",".join(self._allowed),
        )
        return False
