"""Base transport interface for reaching the decision service."""

from __future__ import annotations

import abc
from typing import NamedTuple


class TransportResponse(NamedTuple):
    status_code: int
    body: bytes


class BaseTransport(metaclass=abc.ABCMeta):
    """Abstract request/response channel to a policy endpoint.

    Implementations must be safe to share between concurrent callers and
    must raise :class:`~trino_opa.exceptions.OpaTransportError` when the
    endpoint cannot be reached.
    """

    async def connect(self) -> None:
        """Open underlying connections (no-op by default)."""
        pass

    async def disconnect(self) -> None:
        """Release underlying connections (no-op by default)."""
        pass

    @abc.abstractmethod
    async def post(self, uri: str, body: bytes) -> TransportResponse:
        """Send ``body`` to ``uri`` and return the raw response."""
        raise NotImplementedError
