"""Engine-side value types passed into access control checks."""

from __future__ import annotations

from enum import Enum
from typing import FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field


class _EngineValue(BaseModel):
    model_config = ConfigDict(frozen=True)


class PrincipalType(str, Enum):
    USER = "USER"
    ROLE = "ROLE"


class Privilege(str, Enum):
    CREATE = "CREATE"
    SELECT = "SELECT"
    DELETE = "DELETE"
    INSERT = "INSERT"
    UPDATE = "UPDATE"

    def __str__(self) -> str:
        return self.value


class FunctionKind(str, Enum):
    SCALAR = "SCALAR"
    AGGREGATE = "AGGREGATE"
    WINDOW = "WINDOW"
    TABLE = "TABLE"


class Identity(_EngineValue):
    """Authenticated user as resolved by the engine."""

    user: str
    groups: FrozenSet[str] = Field(default_factory=frozenset)
    enabled_roles: FrozenSet[str] = Field(default_factory=frozenset)

    @classmethod
    def for_user(cls, user: str, *groups: str) -> "Identity":
        return cls(user=user, groups=frozenset(groups))


class SystemSecurityContext(_EngineValue):
    """Per-check context handed over by the engine."""

    identity: Identity
    query_id: Optional[str] = None


class TrinoPrincipal(_EngineValue):
    type: PrincipalType
    name: str

    def __str__(self) -> str:
        return f"{self.type.value} {self.name}"


class CatalogSchemaName(_EngineValue):
    catalog_name: str
    schema_name: str

    def __str__(self) -> str:
        return f"{self.catalog_name}.{self.schema_name}"


class SchemaTableName(_EngineValue):
    schema_name: str
    table_name: str

    def __str__(self) -> str:
        return f"{self.schema_name}.{self.table_name}"


class CatalogSchemaTableName(_EngineValue):
    catalog_name: str
    schema_name: str
    table_name: str

    @classmethod
    def parse(cls, qualified_name: str) -> "CatalogSchemaTableName":
        """Build from a dotted ``catalog.schema.table`` string."""
        parts = qualified_name.split(".")
        if len(parts) != 3:
            raise ValueError(f"Expected catalog.schema.table, got: {qualified_name}")
        return cls(catalog_name=parts[0], schema_name=parts[1], table_name=parts[2])

    @property
    def schema_table_name(self) -> SchemaTableName:
        return SchemaTableName(schema_name=self.schema_name, table_name=self.table_name)

    def __str__(self) -> str:
        return f"{self.catalog_name}.{self.schema_name}.{self.table_name}"


class CatalogSchemaRoutineName(_EngineValue):
    catalog_name: str
    schema_name: str
    routine_name: str

    def __str__(self) -> str:
        return f"{self.catalog_name}.{self.schema_name}.{self.routine_name}"
