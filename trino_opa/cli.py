"""Command line interface for querying the OPA decision service."""

from __future__ import annotations

import asyncio
import json
from typing import List, Optional

import typer

from trino_opa import OpaQueryError, create_access_control, load_config
from trino_opa.query_input import (
    build_query_input_for_simple_action,
    build_query_input_for_simple_resource,
)
from trino_opa.schema import OpaQueryInput, OpaQueryInputResource
from trino_opa.schema.resources import (
    catalog_resource,
    schema_resource,
    table_resource,
)
from trino_opa.spi import (
    CatalogSchemaName,
    CatalogSchemaTableName,
    Identity,
    SystemSecurityContext,
)

app = typer.Typer(help="CLI for OPA backed Trino access control")


@app.callback()
def main() -> None:
    """trino-opa CLI entry point."""
    pass


def _context(user: str, groups: Optional[List[str]]) -> SystemSecurityContext:
    return SystemSecurityContext(identity=Identity.for_user(user, *(groups or [])))


def _resource(
    catalog: Optional[str], schema: Optional[str], table: Optional[str]
) -> Optional[OpaQueryInputResource]:
    if table is not None:
        if catalog is None or schema is None:
            raise typer.BadParameter("--table requires --catalog and --schema")
        return table_resource(
            CatalogSchemaTableName(
                catalog_name=catalog, schema_name=schema, table_name=table
            )
        )
    if schema is not None:
        if catalog is None:
            raise typer.BadParameter("--schema requires --catalog")
        return schema_resource(
            CatalogSchemaName(catalog_name=catalog, schema_name=schema)
        )
    if catalog is not None:
        return catalog_resource(catalog)
    return None


def _build_input(
    operation: str,
    user: str,
    groups: Optional[List[str]],
    catalog: Optional[str],
    schema: Optional[str],
    table: Optional[str],
    engine_version: str,
) -> OpaQueryInput:
    context = _context(user, groups)
    resource = _resource(catalog, schema, table)
    if resource is None:
        return build_query_input_for_simple_action(context, operation, engine_version)
    return build_query_input_for_simple_resource(
        context, operation, resource, engine_version
    )


@app.command("check")
def check(
    operation: str,
    user: str = typer.Option(..., help="User the decision is made for"),
    group: Optional[List[str]] = typer.Option(None, help="Group of the user"),
    catalog: Optional[str] = None,
    schema: Optional[str] = None,
    table: Optional[str] = None,
    config: Optional[str] = typer.Option(None, help="Path to a config file"),
) -> None:
    """
    Ask the decision service about a single operation.

    Prints ALLOW or DENY. Exits with code 1 on DENY and 2 when the
    service could not be queried.

    Example:
        trino-opa check AccessCatalog --user alice --catalog tpch
        trino-opa check SelectFromColumns --user bob --catalog c --schema s --table t
    """
    settings = load_config(config)
    query_input = _build_input(
        operation, user, group, catalog, schema, table, settings.engine_version
    )

    async def run() -> bool:
        async with create_access_control(settings) as access_control:
            return await access_control.opa_high_level_client.query_opa(query_input)

    try:
        allowed = asyncio.run(run())
    except OpaQueryError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)

    if allowed:
        typer.echo("ALLOW")
        return
    typer.echo("DENY")
    raise typer.Exit(code=1)


@app.command("filter-catalogs")
def filter_catalogs(
    catalogs: List[str],
    user: str = typer.Option(..., help="User the decision is made for"),
    group: Optional[List[str]] = typer.Option(None, help="Group of the user"),
    config: Optional[str] = typer.Option(None, help="Path to a config file"),
) -> None:
    """Print the catalogs the user may see, one per line."""

    settings = load_config(config)
    context = _context(user, group)

    async def run() -> set:
        async with create_access_control(settings) as access_control:
            return await access_control.filter_catalogs(context, set(catalogs))

    try:
        visible = asyncio.run(run())
    except OpaQueryError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)

    for catalog in sorted(visible):
        typer.echo(catalog)


@app.command("show-input")
def show_input(
    operation: str,
    user: str = typer.Option(..., help="User the decision is made for"),
    group: Optional[List[str]] = typer.Option(None, help="Group of the user"),
    catalog: Optional[str] = None,
    schema: Optional[str] = None,
    table: Optional[str] = None,
    engine_version: str = typer.Option("unknown", help="Reported engine version"),
) -> None:
    """Print the request document for an operation without sending it."""

    query_input = _build_input(
        operation, user, group, catalog, schema, table, engine_version
    )
    typer.echo(json.dumps(query_input.to_document(), indent=2, sort_keys=True))


if __name__ == "__main__":
    app()
