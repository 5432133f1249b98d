"""trino-opa: OPA backed access control for the Trino query engine."""

from .access_control import OpaAccessControl
from .client import OpaHttpClient
from .config import TrinoOpaConfig, load_config
from .exceptions import (
    AccessDeniedError,
    OpaQueryError,
    OpaQueryResultError,
    OpaServerError,
    OpaTransportError,
)
from .factory import create_access_control
from .high_level import OpaHighLevelClient
from .spi import (
    CatalogSchemaName,
    CatalogSchemaRoutineName,
    CatalogSchemaTableName,
    FunctionKind,
    Identity,
    PrincipalType,
    Privilege,
    SchemaTableName,
    SystemSecurityContext,
    TrinoPrincipal,
)
from .transports import get_transport

__version__ = "0.1.0"
__all__ = [
    "AccessDeniedError",
    "CatalogSchemaName",
    "CatalogSchemaRoutineName",
    "CatalogSchemaTableName",
    "FunctionKind",
    "Identity",
    "OpaAccessControl",
    "OpaHighLevelClient",
    "OpaHttpClient",
    "OpaQueryError",
    "OpaQueryResultError",
    "OpaServerError",
    "OpaTransportError",
    "PrincipalType",
    "Privilege",
    "SchemaTableName",
    "SystemSecurityContext",
    "TrinoOpaConfig",
    "TrinoPrincipal",
    "create_access_control",
    "get_transport",
    "load_config",
]
