"""Decision helpers shared by every access control check."""

from __future__ import annotations

from typing import Callable, Collection, List, NoReturn, Optional, Set, TypeVar

from .client import OpaHttpClient
from .query_input import (
    build_query_input_for_filter,
    build_query_input_for_simple_action,
    build_query_input_for_simple_resource,
    build_query_input_for_source_and_target_resource,
)
from .schema import OpaQueryInput, OpaQueryInputResource
from .spi import SystemSecurityContext

T = TypeVar("T")
DenyCallable = Callable[[], NoReturn]


class OpaHighLevelClient:
    """Binds the policy endpoints to the request shapes checks need."""

    def __init__(
        self,
        http_client: OpaHttpClient,
        policy_uri: str,
        policy_batched_uri: Optional[str] = None,
        engine_version: str = "unknown",
    ) -> None:
        self._http_client = http_client
        self.policy_uri = policy_uri
        self.policy_batched_uri = policy_batched_uri
        self.engine_version = engine_version

    async def query_opa(self, input: OpaQueryInput) -> bool:
        return await self._http_client.evaluate(input, self.policy_uri)

    async def query_opa_with_simple_action(
        self, context: SystemSecurityContext, operation: str
    ) -> bool:
        return await self.query_opa(
            build_query_input_for_simple_action(context, operation, self.engine_version)
        )

    async def query_opa_with_simple_resource(
        self,
        context: SystemSecurityContext,
        operation: str,
        resource: OpaQueryInputResource,
    ) -> bool:
        return await self.query_opa(
            build_query_input_for_simple_resource(
                context, operation, resource, self.engine_version
            )
        )

    async def query_opa_with_source_and_target_resource(
        self,
        context: SystemSecurityContext,
        operation: str,
        resource: OpaQueryInputResource,
        target_resource: OpaQueryInputResource,
    ) -> bool:
        return await self.query_opa(
            build_query_input_for_source_and_target_resource(
                context, operation, resource, target_resource, self.engine_version
            )
        )

    async def query_and_enforce(
        self,
        context: SystemSecurityContext,
        operation: str,
        deny: DenyCallable,
        resource: Optional[OpaQueryInputResource] = None,
    ) -> None:
        """Ask once and call ``deny`` when the answer is no.

        Without a ``resource`` the request carries no resource field at all.
        """
        if resource is None:
            allowed = await self.query_opa_with_simple_action(context, operation)
        else:
            allowed = await self.query_opa_with_simple_resource(
                context, operation, resource
            )
        if not allowed:
            deny()

    async def enforce(self, input: OpaQueryInput, deny: DenyCallable) -> None:
        """Submit a prebuilt request and call ``deny`` when refused."""
        if not await self.query_opa(input):
            deny()

    async def filter_from_opa(
        self,
        context: SystemSecurityContext,
        operation: str,
        items: Collection[T],
        resource_builder: Callable[[T], OpaQueryInputResource],
    ) -> Set[T]:
        """Return the subset of ``items`` the policy approves.

        Uses a single batched request when a batched endpoint is configured and
        one request per item otherwise; both give the same answer.
        """
        if self.policy_batched_uri:
            def batch_request(candidates: List[T]) -> OpaQueryInput:
                return build_query_input_for_filter(
                    context,
                    operation,
                    [resource_builder(item) for item in candidates],
                    self.engine_version,
                )

            return await self._http_client.batch_filter(
                items, batch_request, self.policy_batched_uri
            )

        def item_request(item: T) -> OpaQueryInput:
            return build_query_input_for_simple_resource(
                context, operation, resource_builder(item), self.engine_version
            )

        return await self._http_client.parallel_filter(
            items, item_request, self.policy_uri
        )

    async def close(self) -> None:
        await self._http_client.close()
