"""Builders turning an engine check into a decision request.

All builders are pure: they allocate fresh immutable models and never touch
the network.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .schema import (
    OpaQueryContext,
    OpaQueryInput,
    OpaQueryInputAction,
    OpaQueryInputGrant,
    OpaQueryInputResource,
    TrinoGrantPrincipal,
)
from .spi import SystemSecurityContext, TrinoPrincipal


def _wrap(
    context: SystemSecurityContext, action: OpaQueryInputAction, engine_version: str
) -> OpaQueryInput:
    return OpaQueryInput(
        context=OpaQueryContext.from_system_security_context(context, engine_version),
        action=action,
    )


def build_query_input_for_simple_action(
    context: SystemSecurityContext, operation: str, engine_version: str
) -> OpaQueryInput:
    return _wrap(context, OpaQueryInputAction(operation=operation), engine_version)


def build_query_input_for_simple_resource(
    context: SystemSecurityContext,
    operation: str,
    resource: OpaQueryInputResource,
    engine_version: str,
) -> OpaQueryInput:
    return _wrap(
        context,
        OpaQueryInputAction(operation=operation, resource=resource),
        engine_version,
    )


def build_query_input_for_source_and_target_resource(
    context: SystemSecurityContext,
    operation: str,
    resource: OpaQueryInputResource,
    target_resource: OpaQueryInputResource,
    engine_version: str,
) -> OpaQueryInput:
    """Rename-style request: the pair is approved or refused as one decision."""
    return _wrap(
        context,
        OpaQueryInputAction(
            operation=operation, resource=resource, target_resource=target_resource
        ),
        engine_version,
    )


def build_query_input_for_grant(
    context: SystemSecurityContext,
    operation: str,
    resource: OpaQueryInputResource,
    grantee: Optional[OpaQueryInputGrant],
    engine_version: str,
    grantor: Optional[TrinoPrincipal] = None,
) -> OpaQueryInput:
    return _wrap(
        context,
        OpaQueryInputAction(
            operation=operation,
            resource=resource,
            grantee=grantee,
            grantor=TrinoGrantPrincipal.from_principal(grantor),
        ),
        engine_version,
    )


def build_query_input_for_filter(
    context: SystemSecurityContext,
    operation: str,
    resources: Sequence[OpaQueryInputResource],
    engine_version: str,
) -> OpaQueryInput:
    """Batch request; the answer is the set of approved indices into ``resources``."""
    return _wrap(
        context,
        OpaQueryInputAction(operation=operation, filter_resources=tuple(resources)),
        engine_version,
    )
