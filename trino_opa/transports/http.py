"""HTTP transport backed by httpx."""

from __future__ import annotations

import asyncio
import logging
import threading
import weakref
from typing import Optional

import httpx

from ..exceptions import OpaTransportError
from .base import BaseTransport, TransportResponse

logger = logging.getLogger(__name__)


class HttpTransport(BaseTransport):
    """POSTs JSON documents to the decision service.

    An ``httpx.AsyncClient`` and its pooled connections belong to the event
    loop that opened them, so one client is kept per running loop. Engine
    threads may each drive their own loop against the same transport.
    """

    def __init__(
        self,
        max_connections: int = 32,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.max_connections = max_connections
        self.timeout = timeout
        self._client = client
        self._transport = transport
        self._clients: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, httpx.AsyncClient]" = (
            weakref.WeakKeyDictionary()
        )
        self._lock = threading.Lock()

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            limits=httpx.Limits(
                max_connections=self.max_connections,
                max_keepalive_connections=self.max_connections,
            ),
            transport=self._transport,
        )

    def _client_for_running_loop(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        loop = asyncio.get_running_loop()
        with self._lock:
            for closed_loop in [other for other in self._clients if other.is_closed()]:
                del self._clients[closed_loop]
            client = self._clients.get(loop)
            if client is None or client.is_closed:
                client = self._new_client()
                self._clients[loop] = client
                logger.debug(f"Opened HTTP client for event loop {id(loop)}")
            return client

    async def connect(self) -> None:
        """Open the pooled HTTP client for the running event loop."""
        self._client_for_running_loop()

    async def disconnect(self) -> None:
        """Close every HTTP client this transport created.

        Injected clients are left open.
        """
        with self._lock:
            clients = list(self._clients.items())
            self._clients.clear()

        current = asyncio.get_running_loop()
        for loop, client in clients:
            if loop is current:
                await client.aclose()
            elif loop.is_running():
                asyncio.run_coroutine_threadsafe(client.aclose(), loop)

    async def post(self, uri: str, body: bytes) -> TransportResponse:
        """POST ``body`` as JSON to ``uri``."""
        client = self._client_for_running_loop()
        try:
            response = await client.post(
                uri,
                content=body,
                headers={"Content-Type": "application/json"},
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Request to OPA server at {uri} failed: {e}")
            raise OpaTransportError(f"Failed to query OPA server at {uri}: {e}") from e
        return TransportResponse(response.status_code, response.content)
