"""Resources an operation acts on, as seen by the decision service.

Every model here serializes with camelCase keys and leaves out fields that
were never set: policies match on field presence, so ``null`` must never
stand in for "not applicable".
"""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    field_serializer,
    model_serializer,
)
from pydantic.alias_generators import to_camel

from ..spi import CatalogSchemaName, CatalogSchemaTableName, Identity

ABSENT_PROPERTY_MARKER: Dict[str, Any] = {}


class OpaModel(BaseModel):
    """Base for immutable wire models."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PropertyValue(BaseModel):
    """A property that was set, either to a value or explicitly to nothing."""

    model_config = ConfigDict(frozen=True)

    is_present: bool
    value: Any = None

    @classmethod
    def present(cls, value: Any) -> "PropertyValue":
        return cls(is_present=True, value=value)

    @classmethod
    def absent(cls) -> "PropertyValue":
        return cls(is_present=False)

    @classmethod
    def of_nullable(cls, value: Any) -> "PropertyValue":
        if isinstance(value, PropertyValue):
            return value
        return cls.absent() if value is None else cls.present(value)

    @model_serializer
    def serialize_value(self) -> Any:
        if not self.is_present:
            return dict(ABSENT_PROPERTY_MARKER)
        return self.value


def normalize_properties(
    properties: Optional[Mapping[str, Any]],
) -> Optional[Dict[str, PropertyValue]]:
    """Wrap every property value so ``None`` survives serialization.

    Returns ``None`` for a missing or empty mapping, so the field is left out
    of the request altogether.
    """
    if not properties:
        return None
    return {key: PropertyValue.of_nullable(value) for key, value in properties.items()}


class NamedEntity(OpaModel):
    name: str


class TrinoUser(OpaModel):
    name: str
    groups: Optional[FrozenSet[str]] = None

    @classmethod
    def from_identity(cls, identity: Identity) -> "TrinoUser":
        return cls(name=identity.user, groups=identity.groups)

    @field_serializer("groups")
    def serialize_groups(self, groups: Optional[FrozenSet[str]]) -> Optional[List[str]]:
        return sorted(groups) if groups is not None else None


class TrinoFunction(OpaModel):
    name: str
    kind: Optional[str] = None


class TrinoSchema(OpaModel):
    catalog_name: str
    schema_name: str
    properties: Optional[Dict[str, PropertyValue]] = None

    @classmethod
    def from_catalog_schema(
        cls,
        schema: CatalogSchemaName,
        properties: Optional[Mapping[str, Any]] = None,
    ) -> "TrinoSchema":
        return cls(
            catalog_name=schema.catalog_name,
            schema_name=schema.schema_name,
            properties=normalize_properties(properties),
        )


class TrinoTable(OpaModel):
    catalog_name: str
    schema_name: str
    table_name: str
    properties: Optional[Dict[str, PropertyValue]] = None
    columns: Optional[FrozenSet[str]] = None

    @classmethod
    def from_catalog_schema_table(
        cls,
        table: CatalogSchemaTableName,
        properties: Optional[Mapping[str, Any]] = None,
        columns: Optional[Iterable[str]] = None,
    ) -> "TrinoTable":
        return cls(
            catalog_name=table.catalog_name,
            schema_name=table.schema_name,
            table_name=table.table_name,
            properties=normalize_properties(properties),
            columns=frozenset(columns) if columns is not None else None,
        )

    @field_serializer("columns")
    def serialize_columns(self, columns: Optional[FrozenSet[str]]) -> Optional[List[str]]:
        return sorted(columns) if columns is not None else None


class OpaQueryInputResource(OpaModel):
    """Tagged union of everything an operation can target."""

    user: Optional[TrinoUser] = None
    system_session_property: Optional[NamedEntity] = None
    catalog_session_property: Optional[NamedEntity] = None
    function: Optional[TrinoFunction] = None
    catalog: Optional[NamedEntity] = None
    schema_: Optional[TrinoSchema] = None
    table: Optional[TrinoTable] = None
    role: Optional[NamedEntity] = None
    roles: Optional[FrozenSet[NamedEntity]] = None

    model_config = ConfigDict(
        frozen=True,
        alias_generator=lambda name: to_camel(name.rstrip("_")),
        populate_by_name=True,
    )

    @field_serializer("roles")
    def serialize_roles(
        self, roles: Optional[FrozenSet[NamedEntity]]
    ) -> Optional[List[Dict[str, Any]]]:
        if roles is None:
            return None
        return [role.to_wire() for role in sorted(roles, key=lambda r: r.name)]


def user_resource(name: str) -> OpaQueryInputResource:
    return OpaQueryInputResource(user=TrinoUser(name=name))


def owner_resource(owner: Identity) -> OpaQueryInputResource:
    return OpaQueryInputResource(user=TrinoUser.from_identity(owner))


def catalog_resource(catalog_name: str) -> OpaQueryInputResource:
    return OpaQueryInputResource(catalog=NamedEntity(name=catalog_name))


def schema_resource(
    schema: CatalogSchemaName, properties: Optional[Mapping[str, Any]] = None
) -> OpaQueryInputResource:
    return OpaQueryInputResource(
        schema_=TrinoSchema.from_catalog_schema(schema, properties)
    )


def table_resource(
    table: CatalogSchemaTableName,
    properties: Optional[Mapping[str, Any]] = None,
    columns: Optional[Iterable[str]] = None,
) -> OpaQueryInputResource:
    return OpaQueryInputResource(
        table=TrinoTable.from_catalog_schema_table(table, properties, columns)
    )


def role_resource(role: str) -> OpaQueryInputResource:
    return OpaQueryInputResource(role=NamedEntity(name=role))


def roles_resource(roles: Iterable[str]) -> OpaQueryInputResource:
    return OpaQueryInputResource(roles=frozenset(NamedEntity(name=r) for r in roles))


def function_resource(function_name: str) -> OpaQueryInputResource:
    return OpaQueryInputResource(function=TrinoFunction(name=function_name))


def system_session_property_resource(property_name: str) -> OpaQueryInputResource:
    return OpaQueryInputResource(
        system_session_property=NamedEntity(name=property_name)
    )
