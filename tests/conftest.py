import pytest

from trino_opa.access_control import OpaAccessControl
from trino_opa.client import OpaHttpClient
from trino_opa.high_level import OpaHighLevelClient
from trino_opa.spi import Identity, SystemSecurityContext
from trino_opa.transports import InMemoryTransport

POLICY_URI = "http://opa/v1/data/trino/allow"
BATCHED_URI = "http://opa/v1/data/trino/batch"


@pytest.fixture
def make_access_control():
    """Factory wiring an OpaAccessControl over the given transport."""

    def factory(
        transport, batched: bool = False, max_concurrent_requests: int = 32
    ) -> OpaAccessControl:
        http_client = OpaHttpClient(
            transport, max_concurrent_requests=max_concurrent_requests
        )
        return OpaAccessControl(
            OpaHighLevelClient(
                http_client,
                policy_uri=POLICY_URI,
                policy_batched_uri=BATCHED_URI if batched else None,
                engine_version="455",
            )
        )

    return factory


@pytest.fixture
def make_context():
    def factory(user: str = "alice", *groups: str) -> SystemSecurityContext:
        return SystemSecurityContext(identity=Identity.for_user(user, *groups))

    return factory


@pytest.fixture
def context() -> SystemSecurityContext:
    return SystemSecurityContext(identity=Identity.for_user("alice", "analysts"))


@pytest.fixture
def recording_transport():
    """Transport answering every single request with True."""
    return InMemoryTransport(lambda uri, document: True)
