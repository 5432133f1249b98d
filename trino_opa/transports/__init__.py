"""Transport factory and initialization."""

from __future__ import annotations

import os
from typing import Optional

from ..config import TrinoOpaConfig, load_config
from .base import BaseTransport, TransportResponse
from .inmemory import InMemoryTransport, allow_all, deny_all


def get_transport(
    backend: Optional[str] = None, config: Optional[TrinoOpaConfig] = None
) -> BaseTransport:
    """Factory function to get the configured transport."""

    config = config or load_config()
    backend = (
        backend
        or os.getenv("TRINO_OPA_TRANSPORT")
        or config.transport.backend
    ).lower()

    if backend == "inmemory":
        return InMemoryTransport(allow_all)
    elif backend == "http":
        from .http import HttpTransport

        return HttpTransport(
            max_connections=config.opa.max_concurrent_requests,
            timeout=config.opa.request_timeout,
        )
    else:
        raise ValueError(f"Unsupported transport backend: {backend}")


__all__ = [
    "BaseTransport",
    "InMemoryTransport",
    "TransportResponse",
    "allow_all",
    "deny_all",
    "get_transport",
]
