"""Resolves the backend base URL from the host the application runs on.

Loopback hosts talk to a local development backend, every other host talks
to the production backend. The result is computed once, when the client is
built, and kept in an immutable EndpointConfig.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from reviewclient.domain.models.common import BaseUrl, HostName, RequestPath

logger = logging.getLogger(__name__)

DEFAULT_LOCAL_URL = "http://localhost:3000"
DEFAULT_PRODUCTION_URL = "https://reviews-api.onrender.com"

LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})


@dataclass(frozen=True)
class Endpoints:
    """The two candidate backend addresses."""
    local_url: str = DEFAULT_LOCAL_URL
    production_url: str = DEFAULT_PRODUCTION_URL


@dataclass(frozen=True)
class EndpointConfig:
    """Read-only endpoint configuration, created once per client."""
    host: HostName
    base_url: BaseUrl

    def url_for(self, path: RequestPath) -> str:
        """Joins the base URL and a request path."""
        if not path.startswith("/"):
            path = RequestPath(f"/{path}")
        return f"{self.base_url}{path}"


DEFAULT_ENDPOINTS = Endpoints()


def _normalize_host(host: Optional[str]) -> str:
    """Strips whitespace, case, IPv6 brackets and any ':port' suffix."""
    value = (host or "").strip().lower()
    if value.startswith("["):
        # '[::1]' or '[::1]:8080'
        return value[1:].split("]", 1)[0]
    if value.count(":") == 1:
        value = value.split(":", 1)[0]
    return value


def is_loopback_host(host: Optional[str]) -> bool:
    """Returns True if the host name designates the local machine."""
    return _normalize_host(host) in LOOPBACK_HOSTS


def resolve_base_url(host: Optional[str], endpoints: Endpoints = DEFAULT_ENDPOINTS) -> BaseUrl:
    """Picks the backend base URL for the given host.

    Pure function: no network access, no failure mode. Trailing slashes are
    removed so that ``base_url + path`` is always well formed.
    """
    chosen = endpoints.local_url if is_loopback_host(host) else endpoints.production_url
    return BaseUrl(chosen.rstrip("/"))


def build_endpoint_config(host: Optional[str], endpoints: Endpoints = DEFAULT_ENDPOINTS) -> EndpointConfig:
    """Resolves the base URL once and freezes it together with the host."""
    config = EndpointConfig(host=HostName(host or ""), base_url=resolve_base_url(host, endpoints))
    logger.info(f"Backend endpoint resolved. host='{config.host}', base_url={config.base_url}")
    return config
