"""Low-level client submitting decision requests over a transport."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Collection, List, Optional, Set, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .exceptions import OpaQueryResultError, OpaServerError
from .schema import OpaBatchQueryResult, OpaQueryInput, OpaQueryResult
from .transports import BaseTransport

logger = logging.getLogger(__name__)

T = TypeVar("T")
ResultT = TypeVar("ResultT", bound=BaseModel)


def unique_items(items: Optional[Collection[T]]) -> List[T]:
    """Collapse duplicates while keeping first-seen order."""
    return list(dict.fromkeys(items or ()))


class OpaHttpClient:
    """Sends decision requests and parses their results.

    Holds no per-request state, so one instance serves any number of
    concurrent checks. ``max_concurrent_requests`` caps the fan-out of
    :meth:`parallel_filter`.
    """

    def __init__(
        self,
        transport: BaseTransport,
        max_concurrent_requests: int = 32,
        log_requests: bool = False,
        log_responses: bool = False,
    ) -> None:
        if max_concurrent_requests < 1:
            raise ValueError("max_concurrent_requests must be at least 1")
        self._transport = transport
        self.max_concurrent_requests = max_concurrent_requests
        self.log_requests = log_requests
        self.log_responses = log_responses

    @property
    def transport(self) -> BaseTransport:
        return self._transport

    async def _submit(
        self, input: OpaQueryInput, uri: str, result_type: Type[ResultT]
    ) -> ResultT:
        body = input.to_request_body()
        if self.log_requests:
            logger.info(f"Sending OPA request to {uri}: {body.decode('utf-8')}")

        response = await self._transport.post(uri, body)
        if self.log_responses:
            logger.info(
                f"Received OPA response from {uri} with status {response.status_code}: "
                f"{response.body.decode('utf-8', errors='replace')}"
            )

        if response.status_code != 200:
            error = OpaServerError(
                uri,
                response.status_code,
                response.body.decode("utf-8", errors="replace"),
            )
            logger.error(str(error))
            raise error

        try:
            return result_type.model_validate_json(response.body)
        except ValidationError as e:
            logger.error(f"Failed to parse OPA response from {uri}: {e}")
            raise OpaQueryResultError(
                f"Malformed response from OPA server at {uri}: {e}"
            ) from e

    async def evaluate(self, input: OpaQueryInput, uri: str) -> bool:
        """Return the boolean decision for ``input``."""
        result = await self._submit(input, uri, OpaQueryResult)
        return result.result

    async def parallel_filter(
        self,
        items: Collection[T],
        request_builder: Callable[[T], OpaQueryInput],
        uri: str,
    ) -> Set[T]:
        """Ask about every item separately and keep the approved ones.

        At most ``max_concurrent_requests`` requests are in flight at once.
        The first failure cancels whatever is still pending and propagates;
        no partial result is ever returned.
        """
        candidates = unique_items(items)
        if not candidates:
            return set()

        semaphore = asyncio.Semaphore(self.max_concurrent_requests)

        async def decide(item: T) -> bool:
            async with semaphore:
                return await self.evaluate(request_builder(item), uri)

        tasks = [asyncio.ensure_future(decide(item)) for item in candidates]
        try:
            decisions = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return {item for item, allowed in zip(candidates, decisions) if allowed}

    async def batch_filter(
        self,
        items: Collection[T],
        request_builder: Callable[[List[T]], OpaQueryInput],
        uri: str,
    ) -> Set[T]:
        """Ask about all items in one request answered by approved indices."""
        candidates = unique_items(items)
        if not candidates:
            return set()

        result = await self._submit(request_builder(candidates), uri, OpaBatchQueryResult)
        approved: Set[T] = set()
        for index in result.result:
            if not 0 <= index < len(candidates):
                logger.error(
                    f"OPA server at {uri} returned index {index} for {len(candidates)} items"
                )
                raise OpaQueryResultError(
                    f"OPA server at {uri} returned out of range index {index} "
                    f"for a batch of {len(candidates)}"
                )
            approved.add(candidates[index])
        return approved

    async def close(self) -> None:
        await self._transport.disconnect()
