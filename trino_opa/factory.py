"""Wiring of configuration, transport and clients into an access control."""

from __future__ import annotations

import logging
from typing import Optional

from .access_control import OpaAccessControl
from .client import OpaHttpClient
from .config import TrinoOpaConfig, load_config
from .high_level import OpaHighLevelClient
from .transports import BaseTransport, get_transport

logger = logging.getLogger(__name__)


def create_access_control(
    config: Optional[TrinoOpaConfig] = None,
    transport: Optional[BaseTransport] = None,
) -> OpaAccessControl:
    """Build a ready to use :class:`OpaAccessControl`.

    Args:
        config: Settings to use. Loaded with :func:`load_config` when omitted.
        transport: Transport to submit requests over. Chosen by
            :func:`get_transport` when omitted.
    """

    config = config or load_config()
    transport = transport or get_transport(config=config)

    http_client = OpaHttpClient(
        transport,
        max_concurrent_requests=config.opa.max_concurrent_requests,
        log_requests=config.opa.log_requests,
        log_responses=config.opa.log_responses,
    )
    high_level_client = OpaHighLevelClient(
        http_client,
        policy_uri=config.opa.policy_uri,
        policy_batched_uri=config.opa.policy_batched_uri,
        engine_version=config.engine_version,
    )
    logger.info(
        f"OPA access control using {config.opa.policy_uri}"
        + (
            f" with batched endpoint {config.opa.policy_batched_uri}"
            if config.opa.policy_batched_uri
            else ""
        )
    )
    return OpaAccessControl(high_level_client)
