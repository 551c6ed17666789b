import pytest

from reviewclient.domain.models.common import RequestPath
from reviewclient.infrastructure.endpoint.resolver import (
    DEFAULT_LOCAL_URL,
    DEFAULT_PRODUCTION_URL,
    Endpoints,
    build_endpoint_config,
    is_loopback_host,
    resolve_base_url,
)


@pytest.mark.parametrize("host", [
    "localhost",
    "LOCALHOST",
    "127.0.0.1",
    "localhost:8080",
    "127.0.0.1:5500",
    "::1",
    "[::1]",
    "[::1]:8000",
    "  localhost  ",
])
def test_loopback_hosts_resolve_to_local_backend(host):
    assert is_loopback_host(host)
    assert resolve_base_url(host) == DEFAULT_LOCAL_URL


@pytest.mark.parametrize("host", [
    "example.com",
    "www.example.com",
    "my-site.netlify.app",
    "192.168.1.10",
    "10.0.0.1:3000",
    "localhost.example.com",
    "127.0.0.2",
    "",
    None,
])
def test_other_hosts_resolve_to_production_backend(host):
    assert not is_loopback_host(host)
    assert resolve_base_url(host) == DEFAULT_PRODUCTION_URL


def test_configured_endpoints_are_used_without_trailing_slash():
    endpoints = Endpoints(local_url="http://127.0.0.1:9000/", production_url="https://api.example.org/")

    assert resolve_base_url("localhost", endpoints) == "http://127.0.0.1:9000"
    assert resolve_base_url("example.org", endpoints) == "https://api.example.org"


def test_endpoint_config_is_immutable_and_joins_paths():
    config = build_endpoint_config("localhost")

    assert config.url_for(RequestPath("/api/reviews")) == "http://localhost:3000/api/reviews"
    assert config.url_for(RequestPath("healthz")) == "http://localhost:3000/healthz"
    with pytest.raises(AttributeError):
        config.base_url = "https://elsewhere.example"
