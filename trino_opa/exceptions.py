"""Access denied signals and policy service errors."""

from __future__ import annotations

from typing import Iterable, NoReturn, Optional

from .spi import Identity, TrinoPrincipal


class AccessDeniedError(PermissionError):
    """Raised when the decision service refuses an operation."""

    PREFIX = "Access Denied: "

    def __init__(self, message: str, extra_info: Optional[str] = None) -> None:
        text = f"{self.PREFIX}{message}"
        if extra_info:
            text = f"{text}: {extra_info}"
        super().__init__(text)


class OpaQueryError(RuntimeError):
    """The decision service could not produce a usable answer.

    Distinct from :class:`AccessDeniedError`: callers must not read it as
    either an allow or a deny.
    """


class OpaTransportError(OpaQueryError):
    """The decision endpoint was unreachable or timed out."""


class OpaServerError(OpaQueryError):
    """The decision endpoint answered with a non-200 status."""

    def __init__(self, uri: str, status_code: int, body: str = "") -> None:
        self.uri = uri
        self.status_code = status_code
        self.body = body
        message = f"OPA server at {uri} returned status {status_code}"
        if body:
            message = f"{message}: {body}"
        super().__init__(message)


class OpaQueryResultError(OpaQueryError):
    """The decision response did not match the expected result shape."""


def format_principal(principal: TrinoPrincipal) -> str:
    return f"{principal.type.value.lower()} '{principal.name}'"


def _format_principals(principals: Iterable[TrinoPrincipal]) -> str:
    return ", ".join(sorted(format_principal(p) for p in principals))


def _format_names(names: Iterable[str]) -> str:
    return "[" + ", ".join(sorted(names)) + "]"


def deny_impersonate_user(original_user: str, new_user: str) -> NoReturn:
    raise AccessDeniedError(f"User {original_user} cannot impersonate user {new_user}")


def deny_execute_query() -> NoReturn:
    raise AccessDeniedError("Cannot execute query")


def deny_view_query() -> NoReturn:
    raise AccessDeniedError("Cannot view query")


def deny_kill_query() -> NoReturn:
    raise AccessDeniedError("Cannot kill query")


def deny_read_system_information_access() -> NoReturn:
    raise AccessDeniedError("Cannot read system information")


def deny_write_system_information_access() -> NoReturn:
    raise AccessDeniedError("Cannot write system information")


def deny_set_system_session_property(property_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot set system session property {property_name}")


def deny_set_catalog_session_property(property_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot set catalog session property {property_name}")


def deny_catalog_access(catalog_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot access catalog {catalog_name}")


def deny_create_catalog(catalog_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot create catalog {catalog_name}")


def deny_drop_catalog(catalog_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot drop catalog {catalog_name}")


def deny_create_schema(schema_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot create schema {schema_name}")


def deny_drop_schema(schema_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot drop schema {schema_name}")


def deny_rename_schema(schema_name: str, new_schema_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot rename schema from {schema_name} to {new_schema_name}")


def deny_set_schema_authorization(schema_name: str, principal: TrinoPrincipal) -> NoReturn:
    raise AccessDeniedError(
        f"Cannot set authorization for schema {schema_name} to {format_principal(principal)}"
    )


def deny_show_schemas(catalog_name: Optional[str] = None) -> NoReturn:
    if catalog_name:
        raise AccessDeniedError(f"Cannot show schemas of catalog {catalog_name}")
    raise AccessDeniedError("Cannot show schemas")


def deny_show_create_schema(schema_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot show create schema for {schema_name}")


def deny_show_create_table(table_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot show create table for {table_name}")


def deny_create_table(table_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot create table {table_name}")


def deny_drop_table(table_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot drop table {table_name}")


def deny_rename_table(table_name: str, new_table_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot rename table from {table_name} to {new_table_name}")


def deny_set_table_properties(table_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot set table properties to {table_name}")


def deny_comment_table(table_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot comment table to {table_name}")


def deny_comment_view(view_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot comment view to {view_name}")


def deny_comment_column(table_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot comment column to {table_name}")


def deny_show_tables(schema_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot show tables of schema {schema_name}")


def deny_show_columns(table_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot show columns of table {table_name}")


def deny_add_column(table_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot add a column to table {table_name}")


def deny_alter_column(table_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot alter a column for table {table_name}")


def deny_drop_column(table_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot drop a column from table {table_name}")


def deny_rename_column(table_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot rename a column in table {table_name}")


def deny_set_table_authorization(table_name: str, principal: TrinoPrincipal) -> NoReturn:
    raise AccessDeniedError(
        f"Cannot set authorization for table {table_name} to {format_principal(principal)}"
    )


def deny_select_columns(table_name: str, column_names: Iterable[str]) -> NoReturn:
    raise AccessDeniedError(
        f"Cannot select from columns {_format_names(column_names)} in table or view {table_name}"
    )


def deny_insert_table(table_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot insert into table {table_name}")


def deny_delete_table(table_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot delete from table {table_name}")


def deny_truncate_table(table_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot truncate table {table_name}")


def deny_update_table_columns(table_name: str, column_names: Iterable[str]) -> NoReturn:
    raise AccessDeniedError(
        f"Cannot update columns {_format_names(column_names)} in table {table_name}"
    )


def deny_create_view(view_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot create view {view_name}")


def deny_create_view_with_select(source_name: str, identity: Identity) -> NoReturn:
    raise AccessDeniedError(
        f"View owner '{identity.user}' cannot create view that selects from {source_name}"
    )


def deny_rename_view(view_name: str, new_view_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot rename view from {view_name} to {new_view_name}")


def deny_set_view_authorization(view_name: str, principal: TrinoPrincipal) -> NoReturn:
    raise AccessDeniedError(
        f"Cannot set authorization for view {view_name} to {format_principal(principal)}"
    )


def deny_drop_view(view_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot drop view {view_name}")


def deny_create_materialized_view(view_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot create materialized view {view_name}")


def deny_refresh_materialized_view(view_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot refresh materialized view {view_name}")


def deny_set_materialized_view_properties(view_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot set properties of materialized view {view_name}")


def deny_drop_materialized_view(view_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot drop materialized view {view_name}")


def deny_rename_materialized_view(view_name: str, new_view_name: str) -> NoReturn:
    raise AccessDeniedError(
        f"Cannot rename materialized view from {view_name} to {new_view_name}"
    )


def deny_grant_execute_function_privilege(
    function_name: str, identity: Identity, grantee: str
) -> NoReturn:
    raise AccessDeniedError(
        f"'{identity.user}' cannot grant '{function_name}' execution to {grantee}"
    )


def deny_grant_schema_privilege(privilege: str, schema_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot grant privilege {privilege} on schema {schema_name}")


def deny_deny_schema_privilege(privilege: str, schema_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot deny privilege {privilege} on schema {schema_name}")


def deny_revoke_schema_privilege(privilege: str, schema_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot revoke privilege {privilege} on schema {schema_name}")


def deny_grant_table_privilege(privilege: str, table_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot grant privilege {privilege} on table {table_name}")


def deny_deny_table_privilege(privilege: str, table_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot deny privilege {privilege} on table {table_name}")


def deny_revoke_table_privilege(privilege: str, table_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot revoke privilege {privilege} on table {table_name}")


def deny_show_roles() -> NoReturn:
    raise AccessDeniedError("Cannot show roles")


def deny_create_role(role_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot create role {role_name}")


def deny_drop_role(role_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot drop role {role_name}")


def deny_grant_roles(roles: Iterable[str], grantees: Iterable[TrinoPrincipal]) -> NoReturn:
    raise AccessDeniedError(
        f"Cannot grant roles {_format_names(roles)} to {_format_principals(grantees)}"
    )


def deny_revoke_roles(roles: Iterable[str], grantees: Iterable[TrinoPrincipal]) -> NoReturn:
    raise AccessDeniedError(
        f"Cannot revoke roles {_format_names(roles)} from {_format_principals(grantees)}"
    )


def deny_show_role_authorization_descriptors() -> NoReturn:
    raise AccessDeniedError("Cannot show role authorization descriptors")


def deny_show_current_roles() -> NoReturn:
    raise AccessDeniedError("Cannot show current roles")


def deny_show_role_grants() -> NoReturn:
    raise AccessDeniedError("Cannot show role grants")


def deny_execute_procedure(procedure_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot execute procedure {procedure_name}")


def deny_execute_function(function_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot execute function {function_name}")


def deny_execute_table_procedure(table_name: str, procedure_name: str) -> NoReturn:
    raise AccessDeniedError(f"Cannot execute table procedure {procedure_name} on {table_name}")
