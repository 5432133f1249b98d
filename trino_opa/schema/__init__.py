"""Wire models exchanged with the decision service."""

from .grants import OpaQueryInputGrant, TrinoGrantPrincipal
from .query import (
    OpaBatchQueryResult,
    OpaIdentity,
    OpaQueryContext,
    OpaQueryInput,
    OpaQueryInputAction,
    OpaQueryResult,
    OpaSoftwareStack,
)
from .resources import (
    ABSENT_PROPERTY_MARKER,
    NamedEntity,
    OpaQueryInputResource,
    PropertyValue,
    TrinoFunction,
    TrinoSchema,
    TrinoTable,
    TrinoUser,
    normalize_properties,
)

__all__ = [
    "ABSENT_PROPERTY_MARKER",
    "NamedEntity",
    "OpaBatchQueryResult",
    "OpaIdentity",
    "OpaQueryContext",
    "OpaQueryInput",
    "OpaQueryInputAction",
    "OpaQueryInputGrant",
    "OpaQueryInputResource",
    "OpaQueryResult",
    "OpaSoftwareStack",
    "PropertyValue",
    "TrinoFunction",
    "TrinoGrantPrincipal",
    "TrinoSchema",
    "TrinoTable",
    "TrinoUser",
    "normalize_properties",
]
