"""In-memory transport for testing."""

from __future__ import annotations

import asyncio
import json
import threading
from typing import Any, Callable, Dict, List, Tuple

from .base import BaseTransport, TransportResponse

Policy = Callable[[str, Dict[str, Any]], Any]


class InMemoryTransport(BaseTransport):
    """Answers requests from an in-process policy callable.

    ``policy`` receives the request URI and the ``input`` document and
    returns the value placed under ``result`` in the response. Every request
    is recorded in :attr:`requests` for inspection.
    """

    def __init__(self, policy: Policy, status_code: int = 200) -> None:
        self._policy = policy
        self._status_code = status_code
        self._lock = threading.Lock()
        self.requests: List[Tuple[str, Dict[str, Any]]] = []

    async def post(self, uri: str, body: bytes) -> TransportResponse:
        """Evaluate the request against the in-process policy."""
        document = json.loads(body)
        with self._lock:
            self.requests.append((uri, document))
        # Yield so concurrent requests interleave like real network calls.
        await asyncio.sleep(0)
        result = self._policy(uri, document["input"])
        payload = json.dumps({"result": result}).encode("utf-8")
        return TransportResponse(self._status_code, payload)


def allow_all(uri: str, document: Dict[str, Any]) -> Any:
    filter_resources = document["action"].get("filterResources")
    if filter_resources is not None:
        return list(range(len(filter_resources)))
    return True


def deny_all(uri: str, document: Dict[str, Any]) -> Any:
    if "filterResources" in document["action"]:
        return []
    return False
