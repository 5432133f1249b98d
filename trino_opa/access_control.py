"""Engine access control checks backed by an OPA decision service."""

from __future__ import annotations

import logging
from functools import partial
from typing import AbstractSet, Any, Collection, Mapping, Optional, Set, Union

from . import exceptions as denials
from .exceptions import format_principal
from .high_level import DenyCallable, OpaHighLevelClient
from .query_input import build_query_input_for_grant
from .schema import (
    NamedEntity,
    OpaQueryInputGrant,
    OpaQueryInputResource,
    TrinoFunction,
    TrinoSchema,
    TrinoTable,
)
from .schema.resources import (
    catalog_resource,
    function_resource,
    owner_resource,
    role_resource,
    roles_resource,
    schema_resource,
    system_session_property_resource,
    table_resource,
    user_resource,
)
from .spi import (
    CatalogSchemaName,
    CatalogSchemaRoutineName,
    CatalogSchemaTableName,
    FunctionKind,
    Identity,
    Privilege,
    SchemaTableName,
    SystemSecurityContext,
    TrinoPrincipal,
)

logger = logging.getLogger(__name__)


def _routine_schema(routine: CatalogSchemaRoutineName) -> TrinoSchema:
    return TrinoSchema(catalog_name=routine.catalog_name, schema_name=routine.schema_name)


class OpaAccessControl:
    """One coroutine per engine security check.

    Each check builds a decision request, asks the policy service and raises
    :class:`~trino_opa.exceptions.AccessDeniedError` when refused. Filter
    methods never raise a denial; they return the approved subset instead.
    Errors reaching the service propagate as
    :class:`~trino_opa.exceptions.OpaQueryError`.
    """

    def __init__(self, opa_high_level_client: OpaHighLevelClient) -> None:
        self.opa_high_level_client = opa_high_level_client

    async def __aenter__(self) -> "OpaAccessControl":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        logger.info("Closing OPA access control")
        await self.opa_high_level_client.close()

    @property
    def _version(self) -> str:
        return self.opa_high_level_client.engine_version

    async def _enforce_rename(
        self,
        context: SystemSecurityContext,
        operation: str,
        resource: OpaQueryInputResource,
        target_resource: OpaQueryInputResource,
        deny: DenyCallable,
    ) -> None:
        if not await self.opa_high_level_client.query_opa_with_source_and_target_resource(
            context, operation, resource, target_resource
        ):
            deny()

    async def _enforce_grant(
        self,
        context: SystemSecurityContext,
        operation: str,
        resource: OpaQueryInputResource,
        grantee: OpaQueryInputGrant,
        deny: DenyCallable,
        grantor: Optional[TrinoPrincipal] = None,
    ) -> None:
        await self.opa_high_level_client.enforce(
            build_query_input_for_grant(
                context, operation, resource, grantee, self._version, grantor=grantor
            ),
            deny,
        )

    # Identity and query lifecycle

    async def check_can_impersonate_user(
        self, context: SystemSecurityContext, user_name: str
    ) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context,
            "ImpersonateUser",
            partial(denials.deny_impersonate_user, context.identity.user, user_name),
            user_resource(user_name),
        )

    async def check_can_set_user(self, principal: Optional[Any], user_name: str) -> None:
        """Deprecated by the engine and called for every identity; always allowed."""
        return None

    async def check_can_execute_query(self, context: SystemSecurityContext) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context, "ExecuteQuery", denials.deny_execute_query
        )

    async def check_can_view_query_owned_by(
        self, context: SystemSecurityContext, query_owner: Identity
    ) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context, "ViewQueryOwnedBy", denials.deny_view_query, owner_resource(query_owner)
        )

    async def filter_view_query_owned_by(
        self, context: SystemSecurityContext, query_owners: Collection[Identity]
    ) -> Set[Identity]:
        return await self.opa_high_level_client.filter_from_opa(
            context, "FilterViewQueryOwnedBy", query_owners, owner_resource
        )

    async def check_can_kill_query_owned_by(
        self, context: SystemSecurityContext, query_owner: Identity
    ) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context, "KillQueryOwnedBy", denials.deny_kill_query, owner_resource(query_owner)
        )

    async def check_can_read_system_information(
        self, context: SystemSecurityContext
    ) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context, "ReadSystemInformation", denials.deny_read_system_information_access
        )

    async def check_can_write_system_information(
        self, context: SystemSecurityContext
    ) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context, "WriteSystemInformation", denials.deny_write_system_information_access
        )

    async def check_can_set_system_session_property(
        self, context: SystemSecurityContext, property_name: str
    ) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context,
            "SetSystemSessionProperty",
            partial(denials.deny_set_system_session_property, property_name),
            system_session_property_resource(property_name),
        )

    # Catalogs

    async def check_can_access_catalog(
        self, context: SystemSecurityContext, catalog_name: str
    ) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context,
            "AccessCatalog",
            partial(denials.deny_catalog_access, catalog_name),
            catalog_resource(catalog_name),
        )

    async def check_can_create_catalog(
        self, context: SystemSecurityContext, catalog_name: str
    ) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context,
            "CreateCatalog",
            partial(denials.deny_create_catalog, catalog_name),
            catalog_resource(catalog_name),
        )

    async def check_can_drop_catalog(
        self, context: SystemSecurityContext, catalog_name: str
    ) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context,
            "DropCatalog",
            partial(denials.deny_drop_catalog, catalog_name),
            catalog_resource(catalog_name),
        )

    async def filter_catalogs(
        self, context: SystemSecurityContext, catalogs: AbstractSet[str]
    ) -> Set[str]:
        return await self.opa_high_level_client.filter_from_opa(
            context, "FilterCatalogs", catalogs, catalog_resource
        )

    async def check_can_set_catalog_session_property(
        self, context: SystemSecurityContext, catalog_name: str, property_name: str
    ) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context,
            "SetCatalogSessionProperty",
            partial(denials.deny_set_catalog_session_property, property_name),
            OpaQueryInputResource(
                catalog=NamedEntity(name=catalog_name),
                catalog_session_property=NamedEntity(name=property_name),
            ),
        )

    # Schemas

    async def check_can_create_schema(
        self,
        context: SystemSecurityContext,
        schema: CatalogSchemaName,
        properties: Optional[Mapping[str, Any]] = None,
    ) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context,
            "CreateSchema",
            partial(denials.deny_create_schema, str(schema)),
            schema_resource(schema, properties),
        )

    async def check_can_drop_schema(
        self, context: SystemSecurityContext, schema: CatalogSchemaName
    ) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context,
            "DropSchema",
            partial(denials.deny_drop_schema, str(schema)),
            schema_resource(schema),
        )

    async def check_can_rename_schema(
        self, context: SystemSecurityContext, schema: CatalogSchemaName, new_schema_name: str
    ) -> None:
        new_schema = CatalogSchemaName(
            catalog_name=schema.catalog_name, schema_name=new_schema_name
        )
        await self._enforce_rename(
            context,
            "RenameSchema",
            schema_resource(schema),
            schema_resource(new_schema),
            partial(denials.deny_rename_schema, str(schema), str(new_schema)),
        )

    async def check_can_set_schema_authorization(
        self,
        context: SystemSecurityContext,
        schema: CatalogSchemaName,
        principal: TrinoPrincipal,
    ) -> None:
        await self._enforce_grant(
            context,
            "SetSchemaAuthorization",
            schema_resource(schema),
            OpaQueryInputGrant.for_principals([principal]),
            partial(denials.deny_set_schema_authorization, str(schema), principal),
        )

    async def check_can_show_schemas(
        self, context: SystemSecurityContext, catalog_name: str
    ) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context,
            "ShowSchemas",
            partial(denials.deny_show_schemas, catalog_name),
            catalog_resource(catalog_name),
        )

    async def filter_schemas(
        self,
        context: SystemSecurityContext,
        catalog_name: str,
        schema_names: AbstractSet[str],
    ) -> Set[str]:
        def resource(schema_name: str) -> OpaQueryInputResource:
            return OpaQueryInputResource(
                schema_=TrinoSchema(catalog_name=catalog_name, schema_name=schema_name)
            )

        return await self.opa_high_level_client.filter_from_opa(
            context, "FilterSchemas", schema_names, resource
        )

    async def check_can_show_create_schema(
        self, context: SystemSecurityContext, schema: CatalogSchemaName
    ) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context,
            "ShowCreateSchema",
            partial(denials.deny_show_create_schema, str(schema)),
            schema_resource(schema),
        )

    async def check_can_show_tables(
        self, context: SystemSecurityContext, schema: CatalogSchemaName
    ) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context,
            "ShowTables",
            partial(denials.deny_show_tables, str(schema)),
            schema_resource(schema),
        )

    # Tables

    async def _enforce_table(
        self,
        context: SystemSecurityContext,
        operation: str,
        deny: DenyCallable,
        table: CatalogSchemaTableName,
        properties: Optional[Mapping[str, Any]] = None,
        columns: Optional[AbstractSet[str]] = None,
    ) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context,
            operation,
            partial(deny, str(table)),
            table_resource(table, properties, columns),
        )

    async def check_can_show_create_table(
        self, context: SystemSecurityContext, table: CatalogSchemaTableName
    ) -> None:
        await self._enforce_table(
            context, "ShowCreateTable", denials.deny_show_create_table, table
        )

    async def check_can_create_table(
        self,
        context: SystemSecurityContext,
        table: CatalogSchemaTableName,
        properties: Optional[Mapping[str, Any]] = None,
    ) -> None:
        await self._enforce_table(
            context, "CreateTable", denials.deny_create_table, table, properties
        )

    async def check_can_drop_table(
        self, context: SystemSecurityContext, table: CatalogSchemaTableName
    ) -> None:
        await self._enforce_table(context, "DropTable", denials.deny_drop_table, table)

    async def check_can_rename_table(
        self,
        context: SystemSecurityContext,
        table: CatalogSchemaTableName,
        new_table: CatalogSchemaTableName,
    ) -> None:
        await self._enforce_rename(
            context,
            "RenameTable",
            table_resource(table),
            table_resource(new_table),
            partial(denials.deny_rename_table, str(table), str(new_table)),
        )

    async def check_can_set_table_properties(
        self,
        context: SystemSecurityContext,
        table: CatalogSchemaTableName,
        properties: Mapping[str, Any],
    ) -> None:
        await self._enforce_table(
            context,
            "SetTableProperties",
            denials.deny_set_table_properties,
            table,
            properties,
        )

    async def check_can_set_table_comment(
        self, context: SystemSecurityContext, table: CatalogSchemaTableName
    ) -> None:
        await self._enforce_table(
            context, "SetTableComment", denials.deny_comment_table, table
        )

    async def check_can_set_view_comment(
        self, context: SystemSecurityContext, view: CatalogSchemaTableName
    ) -> None:
        await self._enforce_table(context, "SetViewComment", denials.deny_comment_view, view)

    async def check_can_set_column_comment(
        self, context: SystemSecurityContext, table: CatalogSchemaTableName
    ) -> None:
        await self._enforce_table(
            context, "SetColumnComment", denials.deny_comment_column, table
        )

    async def filter_tables(
        self,
        context: SystemSecurityContext,
        catalog_name: str,
        table_names: AbstractSet[SchemaTableName],
    ) -> Set[SchemaTableName]:
        def resource(table_name: SchemaTableName) -> OpaQueryInputResource:
            return OpaQueryInputResource(
                table=TrinoTable(
                    catalog_name=catalog_name,
                    schema_name=table_name.schema_name,
                    table_name=table_name.table_name,
                )
            )

        return await self.opa_high_level_client.filter_from_opa(
            context, "FilterTables", table_names, resource
        )

    async def check_can_show_columns(
        self, context: SystemSecurityContext, table: CatalogSchemaTableName
    ) -> None:
        await self._enforce_table(context, "ShowColumns", denials.deny_show_columns, table)

    async def filter_columns(
        self,
        context: SystemSecurityContext,
        table: CatalogSchemaTableName,
        columns: AbstractSet[str],
    ) -> Set[str]:
        def resource(column: str) -> OpaQueryInputResource:
            return table_resource(table, columns=[column])

        return await self.opa_high_level_client.filter_from_opa(
            context, "FilterColumns", columns, resource
        )

    async def check_can_add_column(
        self, context: SystemSecurityContext, table: CatalogSchemaTableName
    ) -> None:
        await self._enforce_table(context, "AddColumn", denials.deny_add_column, table)

    async def check_can_alter_column(
        self, context: SystemSecurityContext, table: CatalogSchemaTableName
    ) -> None:
        await self._enforce_table(context, "AlterColumn", denials.deny_alter_column, table)

    async def check_can_drop_column(
        self, context: SystemSecurityContext, table: CatalogSchemaTableName
    ) -> None:
        await self._enforce_table(context, "DropColumn", denials.deny_drop_column, table)

    async def check_can_rename_column(
        self, context: SystemSecurityContext, table: CatalogSchemaTableName
    ) -> None:
        await self._enforce_table(
            context, "RenameColumn", denials.deny_rename_column, table
        )

    async def check_can_set_table_authorization(
        self,
        context: SystemSecurityContext,
        table: CatalogSchemaTableName,
        principal: TrinoPrincipal,
    ) -> None:
        await self._enforce_grant(
            context,
            "SetTableAuthorization",
            table_resource(table),
            OpaQueryInputGrant.for_principals([principal]),
            partial(denials.deny_set_table_authorization, str(table), principal),
        )

    async def check_can_select_from_columns(
        self,
        context: SystemSecurityContext,
        table: CatalogSchemaTableName,
        columns: AbstractSet[str],
    ) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context,
            "SelectFromColumns",
            partial(denials.deny_select_columns, str(table), columns),
            table_resource(table, columns=columns),
        )

    async def check_can_insert_into_table(
        self, context: SystemSecurityContext, table: CatalogSchemaTableName
    ) -> None:
        await self._enforce_table(
            context, "InsertIntoTable", denials.deny_insert_table, table
        )

    async def check_can_delete_from_table(
        self, context: SystemSecurityContext, table: CatalogSchemaTableName
    ) -> None:
        await self._enforce_table(
            context, "DeleteFromTable", denials.deny_delete_table, table
        )

    async def check_can_truncate_table(
        self, context: SystemSecurityContext, table: CatalogSchemaTableName
    ) -> None:
        await self._enforce_table(
            context, "TruncateTable", denials.deny_truncate_table, table
        )

    async def check_can_update_table_columns(
        self,
        context: SystemSecurityContext,
        table: CatalogSchemaTableName,
        updated_column_names: AbstractSet[str],
    ) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context,
            "UpdateTableColumns",
            partial(denials.deny_update_table_columns, str(table), updated_column_names),
            table_resource(table, columns=updated_column_names),
        )

    # Views and materialized views

    async def check_can_create_view(
        self, context: SystemSecurityContext, view: CatalogSchemaTableName
    ) -> None:
        await self._enforce_table(context, "CreateView", denials.deny_create_view, view)

    async def check_can_rename_view(
        self,
        context: SystemSecurityContext,
        view: CatalogSchemaTableName,
        new_view: CatalogSchemaTableName,
    ) -> None:
        await self._enforce_rename(
            context,
            "RenameView",
            table_resource(view),
            table_resource(new_view),
            partial(denials.deny_rename_view, str(view), str(new_view)),
        )

    async def check_can_set_view_authorization(
        self,
        context: SystemSecurityContext,
        view: CatalogSchemaTableName,
        principal: TrinoPrincipal,
    ) -> None:
        await self._enforce_grant(
            context,
            "SetViewAuthorization",
            table_resource(view),
            OpaQueryInputGrant.for_principals([principal]),
            partial(denials.deny_set_view_authorization, str(view), principal),
        )

    async def check_can_drop_view(
        self, context: SystemSecurityContext, view: CatalogSchemaTableName
    ) -> None:
        await self._enforce_table(context, "DropView", denials.deny_drop_view, view)

    async def check_can_create_view_with_select_from_columns(
        self,
        context: SystemSecurityContext,
        table: CatalogSchemaTableName,
        columns: AbstractSet[str],
    ) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context,
            "CreateViewWithSelectFromColumns",
            partial(denials.deny_create_view_with_select, str(table), context.identity),
            table_resource(table, columns=columns),
        )

    async def check_can_create_materialized_view(
        self,
        context: SystemSecurityContext,
        materialized_view: CatalogSchemaTableName,
        properties: Optional[Mapping[str, Any]] = None,
    ) -> None:
        await self._enforce_table(
            context,
            "CreateMaterializedView",
            denials.deny_create_materialized_view,
            materialized_view,
            properties,
        )

    async def check_can_refresh_materialized_view(
        self, context: SystemSecurityContext, materialized_view: CatalogSchemaTableName
    ) -> None:
        await self._enforce_table(
            context,
            "RefreshMaterializedView",
            denials.deny_refresh_materialized_view,
            materialized_view,
        )

    async def check_can_set_materialized_view_properties(
        self,
        context: SystemSecurityContext,
        materialized_view: CatalogSchemaTableName,
        properties: Mapping[str, Any],
    ) -> None:
        await self._enforce_table(
            context,
            "SetMaterializedViewProperties",
            denials.deny_set_materialized_view_properties,
            materialized_view,
            properties,
        )

    async def check_can_drop_materialized_view(
        self, context: SystemSecurityContext, materialized_view: CatalogSchemaTableName
    ) -> None:
        await self._enforce_table(
            context,
            "DropMaterializedView",
            denials.deny_drop_materialized_view,
            materialized_view,
        )

    async def check_can_rename_materialized_view(
        self,
        context: SystemSecurityContext,
        view: CatalogSchemaTableName,
        new_view: CatalogSchemaTableName,
    ) -> None:
        await self._enforce_rename(
            context,
            "RenameMaterializedView",
            table_resource(view),
            table_resource(new_view),
            partial(denials.deny_rename_materialized_view, str(view), str(new_view)),
        )

    # Privileges

    async def check_can_grant_execute_function_privilege(
        self,
        context: SystemSecurityContext,
        function_name: Union[str, CatalogSchemaRoutineName],
        grantee: TrinoPrincipal,
        grant_option: bool,
        function_kind: Optional[FunctionKind] = None,
    ) -> None:
        """Check granting EXECUTE on a function.

        ``function_name`` is either a plain name or, together with
        ``function_kind``, a fully qualified routine.
        """
        if isinstance(function_name, CatalogSchemaRoutineName):
            resource = OpaQueryInputResource(
                schema_=_routine_schema(function_name),
                function=TrinoFunction(
                    name=function_name.routine_name,
                    kind=function_kind.value if function_kind else None,
                ),
            )
        else:
            resource = function_resource(function_name)
        await self._enforce_grant(
            context,
            "GrantExecuteFunctionPrivilege",
            resource,
            OpaQueryInputGrant.for_principals([grantee], grant_option=grant_option),
            partial(
                denials.deny_grant_execute_function_privilege,
                str(function_name),
                context.identity,
                format_principal(grantee),
            ),
        )

    async def check_can_grant_schema_privilege(
        self,
        context: SystemSecurityContext,
        privilege: Privilege,
        schema: CatalogSchemaName,
        grantee: TrinoPrincipal,
        grant_option: bool,
    ) -> None:
        await self._enforce_grant(
            context,
            "GrantSchemaPrivilege",
            schema_resource(schema),
            OpaQueryInputGrant.for_principals(
                [grantee], grant_option=grant_option, privilege=privilege
            ),
            partial(denials.deny_grant_schema_privilege, str(privilege), str(schema)),
        )

    async def check_can_deny_schema_privilege(
        self,
        context: SystemSecurityContext,
        privilege: Privilege,
        schema: CatalogSchemaName,
        grantee: TrinoPrincipal,
    ) -> None:
        await self._enforce_grant(
            context,
            "DenySchemaPrivilege",
            schema_resource(schema),
            OpaQueryInputGrant.for_principals([grantee], privilege=privilege),
            partial(denials.deny_deny_schema_privilege, str(privilege), str(schema)),
        )

    async def check_can_revoke_schema_privilege(
        self,
        context: SystemSecurityContext,
        privilege: Privilege,
        schema: CatalogSchemaName,
        revokee: TrinoPrincipal,
        grant_option: bool,
    ) -> None:
        await self._enforce_grant(
            context,
            "RevokeSchemaPrivilege",
            schema_resource(schema),
            OpaQueryInputGrant.for_principals(
                [revokee], grant_option=grant_option, privilege=privilege
            ),
            partial(denials.deny_revoke_schema_privilege, str(privilege), str(schema)),
        )

    async def check_can_grant_table_privilege(
        self,
        context: SystemSecurityContext,
        privilege: Privilege,
        table: CatalogSchemaTableName,
        grantee: TrinoPrincipal,
        grant_option: bool,
    ) -> None:
        await self._enforce_grant(
            context,
            "GrantTablePrivilege",
            table_resource(table),
            OpaQueryInputGrant.for_principals(
                [grantee], grant_option=grant_option, privilege=privilege
            ),
            partial(denials.deny_grant_table_privilege, str(privilege), str(table)),
        )

    async def check_can_deny_table_privilege(
        self,
        context: SystemSecurityContext,
        privilege: Privilege,
        table: CatalogSchemaTableName,
        grantee: TrinoPrincipal,
    ) -> None:
        await self._enforce_grant(
            context,
            "DenyTablePrivilege",
            table_resource(table),
            OpaQueryInputGrant.for_principals([grantee], privilege=privilege),
            partial(denials.deny_deny_table_privilege, str(privilege), str(table)),
        )

    async def check_can_revoke_table_privilege(
        self,
        context: SystemSecurityContext,
        privilege: Privilege,
        table: CatalogSchemaTableName,
        revokee: TrinoPrincipal,
        grant_option: bool,
    ) -> None:
        await self._enforce_grant(
            context,
            "RevokeTablePrivilege",
            table_resource(table),
            OpaQueryInputGrant.for_principals(
                [revokee], grant_option=grant_option, privilege=privilege
            ),
            partial(denials.deny_revoke_table_privilege, str(privilege), str(table)),
        )

    # Roles

    async def check_can_show_roles(self, context: SystemSecurityContext) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context, "ShowRoles", denials.deny_show_roles
        )

    async def check_can_create_role(
        self,
        context: SystemSecurityContext,
        role: str,
        grantor: Optional[TrinoPrincipal] = None,
    ) -> None:
        await self.opa_high_level_client.enforce(
            build_query_input_for_grant(
                context, "CreateRole", role_resource(role), None, self._version, grantor=grantor
            ),
            partial(denials.deny_create_role, role),
        )

    async def check_can_drop_role(self, context: SystemSecurityContext, role: str) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context, "DropRole", partial(denials.deny_drop_role, role), role_resource(role)
        )

    async def check_can_grant_roles(
        self,
        context: SystemSecurityContext,
        roles: AbstractSet[str],
        grantees: AbstractSet[TrinoPrincipal],
        admin_option: bool,
        grantor: Optional[TrinoPrincipal] = None,
    ) -> None:
        await self._enforce_grant(
            context,
            "GrantRoles",
            roles_resource(roles),
            OpaQueryInputGrant.for_principals(grantees, grant_option=admin_option),
            partial(denials.deny_grant_roles, roles, grantees),
            grantor=grantor,
        )

    async def check_can_revoke_roles(
        self,
        context: SystemSecurityContext,
        roles: AbstractSet[str],
        grantees: AbstractSet[TrinoPrincipal],
        admin_option: bool,
        grantor: Optional[TrinoPrincipal] = None,
    ) -> None:
        await self._enforce_grant(
            context,
            "RevokeRoles",
            roles_resource(roles),
            OpaQueryInputGrant.for_principals(grantees, grant_option=admin_option),
            partial(denials.deny_revoke_roles, roles, grantees),
            grantor=grantor,
        )

    async def check_can_show_role_authorization_descriptors(
        self, context: SystemSecurityContext
    ) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context,
            "ShowRoleAuthorizationDescriptors",
            denials.deny_show_role_authorization_descriptors,
        )

    async def check_can_show_current_roles(self, context: SystemSecurityContext) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context, "ShowCurrentRoles", denials.deny_show_current_roles
        )

    async def check_can_show_role_grants(self, context: SystemSecurityContext) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context, "ShowRoleGrants", denials.deny_show_role_grants
        )

    # Routines

    async def check_can_execute_procedure(
        self, context: SystemSecurityContext, procedure: CatalogSchemaRoutineName
    ) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context,
            "ExecuteProcedure",
            partial(denials.deny_execute_procedure, str(procedure)),
            OpaQueryInputResource(
                schema_=_routine_schema(procedure),
                function=TrinoFunction(name=procedure.routine_name),
            ),
        )

    async def check_can_execute_function(
        self,
        context: SystemSecurityContext,
        function_name: Union[str, CatalogSchemaRoutineName],
        function_kind: Optional[FunctionKind] = None,
    ) -> None:
        if isinstance(function_name, CatalogSchemaRoutineName):
            resource = OpaQueryInputResource(
                schema_=_routine_schema(function_name),
                function=TrinoFunction(
                    name=function_name.routine_name,
                    kind=function_kind.value if function_kind else None,
                ),
            )
        else:
            resource = function_resource(function_name)
        await self.opa_high_level_client.query_and_enforce(
            context,
            "ExecuteFunction",
            partial(denials.deny_execute_function, str(function_name)),
            resource,
        )

    async def check_can_execute_table_procedure(
        self,
        context: SystemSecurityContext,
        table: CatalogSchemaTableName,
        procedure: str,
    ) -> None:
        await self.opa_high_level_client.query_and_enforce(
            context,
            "ExecuteTableProcedure",
            partial(denials.deny_execute_table_procedure, str(table), procedure),
            OpaQueryInputResource(
                table=TrinoTable.from_catalog_schema_table(table),
                function=TrinoFunction(name=procedure),
            ),
        )
