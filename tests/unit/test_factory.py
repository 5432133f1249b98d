import pytest

from trino_opa import Identity, SystemSecurityContext, create_access_control
from trino_opa.config import OpaConfig, TrinoOpaConfig
from trino_opa.transports import InMemoryTransport, allow_all


def test_create_access_control_wires_config():
    config = TrinoOpaConfig(
        opa=OpaConfig(
            policy_uri="http://opa/allow",
            policy_batched_uri="http://opa/batch",
            max_concurrent_requests=5,
            log_requests=True,
        ),
        engine_version="455",
    )
    transport = InMemoryTransport(allow_all)

    access_control = create_access_control(config, transport=transport)

    high_level = access_control.opa_high_level_client
    assert high_level.policy_uri == "http://opa/allow"
    assert high_level.policy_batched_uri == "http://opa/batch"
    assert high_level.engine_version == "455"
    http_client = high_level._http_client
    assert http_client.transport is transport
    assert http_client.max_concurrent_requests == 5
    assert http_client.log_requests is True


@pytest.mark.asyncio
async def test_created_access_control_reports_engine_version():
    transport = InMemoryTransport(allow_all)
    config = TrinoOpaConfig(engine_version="455")

    async with create_access_control(config, transport=transport) as access_control:
        await access_control.check_can_show_roles(
            SystemSecurityContext(identity=Identity.for_user("alice"))
        )

    software_stack = transport.requests[0][1]["input"]["context"]["softwareStack"]
    assert software_stack == {"trinoVersion": "455"}
