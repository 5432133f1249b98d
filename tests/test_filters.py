"""Batch filter tests for OpaAccessControl."""

import pytest

from trino_opa.exceptions import OpaQueryResultError, OpaServerError
from trino_opa.spi import CatalogSchemaTableName, Identity, SchemaTableName
from trino_opa.transports import InMemoryTransport

BATCHED_URI = "http://opa/v1/data/trino/batch"


def per_resource(predicate):
    """Turn a predicate on one resource into a policy serving both endpoints."""

    def policy(uri, document):
        action = document["action"]
        if "filterResources" in action:
            return [
                i for i, resource in enumerate(action["filterResources"]) if predicate(resource)
            ]
        return predicate(action["resource"])

    return policy


def schema_not_b(resource):
    return resource["schema"]["schemaName"] != "b"


@pytest.mark.asyncio
@pytest.mark.parametrize("batched", [False, True], ids=["parallel", "batched"])
async def test_filter_schemas(batched, context, make_access_control):
    transport = InMemoryTransport(per_resource(schema_not_b))
    access_control = make_access_control(transport, batched=batched)

    result = await access_control.filter_schemas(context, "cat", {"a", "b", "c"})

    assert result == {"a", "c"}
    if batched:
        assert len(transport.requests) == 1
        uri, document = transport.requests[0]
        assert uri == BATCHED_URI
        assert document["input"]["action"]["operation"] == "FilterSchemas"
        assert {
            r["schema"]["catalogName"] for r in document["input"]["action"]["filterResources"]
        } == {"cat"}
    else:
        assert len(transport.requests) == 3


@pytest.mark.asyncio
@pytest.mark.parametrize("batched", [False, True], ids=["parallel", "batched"])
async def test_filter_catalogs(batched, make_access_control, make_context):
    transport = InMemoryTransport(
        per_resource(lambda resource: resource["catalog"]["name"].startswith("t"))
    )
    access_control = make_access_control(transport, batched=batched)

    result = await access_control.filter_catalogs(
        make_context("alice"), {"tpch", "tpcds", "system", "hive"}
    )

    assert result == {"tpch", "tpcds"}


@pytest.mark.asyncio
async def test_filter_paths_agree(context, make_access_control):
    def predicate(resource):
        table = resource["table"]
        return table["tableName"].endswith("_public") or table["schemaName"] == "open"

    tables = {
        SchemaTableName(schema_name=schema, table_name=table)
        for schema in ("open", "closed", "misc")
        for table in ("orders_public", "orders", "lineitem", "nation_public")
    }

    parallel = make_access_control(InMemoryTransport(per_resource(predicate)))
    batched = make_access_control(InMemoryTransport(per_resource(predicate)), batched=True)

    parallel_result = await parallel.filter_tables(context, "cat", tables)
    batched_result = await batched.filter_tables(context, "cat", tables)

    assert parallel_result == batched_result
    assert SchemaTableName(schema_name="closed", table_name="orders") not in parallel_result
    assert SchemaTableName(schema_name="open", table_name="orders") in parallel_result
    assert parallel_result <= tables


@pytest.mark.asyncio
@pytest.mark.parametrize("batched", [False, True], ids=["parallel", "batched"])
async def test_filter_columns_sends_one_column_per_resource(
    batched, context, make_access_control
):
    transport = InMemoryTransport(
        per_resource(lambda resource: resource["table"]["columns"] != ["ssn"])
    )
    access_control = make_access_control(transport, batched=batched)
    table = CatalogSchemaTableName.parse("cat.hr.employees")

    result = await access_control.filter_columns(context, table, {"name", "ssn", "dept"})

    assert result == {"name", "dept"}
    for _, document in transport.requests:
        action = document["input"]["action"]
        resources = action.get("filterResources") or [action["resource"]]
        for resource in resources:
            assert resource["table"]["tableName"] == "employees"
            assert len(resource["table"]["columns"]) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("batched", [False, True], ids=["parallel", "batched"])
async def test_filter_view_query_owned_by(batched, context, make_access_control):
    transport = InMemoryTransport(
        per_resource(lambda resource: "etl" in resource["user"].get("groups", []))
    )
    access_control = make_access_control(transport, batched=batched)
    bob = Identity.for_user("bob", "etl")
    carol = Identity.for_user("carol")

    result = await access_control.filter_view_query_owned_by(context, [bob, carol])

    assert result == {bob}


@pytest.mark.asyncio
@pytest.mark.parametrize("batched", [False, True], ids=["parallel", "batched"])
async def test_empty_filter_sends_nothing(batched, context, make_access_control):
    transport = InMemoryTransport(per_resource(lambda resource: True))
    access_control = make_access_control(transport, batched=batched)

    assert await access_control.filter_catalogs(context, set()) == set()
    assert transport.requests == []


@pytest.mark.asyncio
async def test_partial_failure_aborts_parallel_filter(context, make_access_control):
    def policy(uri, document):
        if document["action"]["resource"]["catalog"]["name"] == "broken":
            return "not a decision"
        return True

    access_control = make_access_control(
        InMemoryTransport(policy), max_concurrent_requests=2
    )

    with pytest.raises(OpaQueryResultError):
        await access_control.filter_catalogs(context, {"a", "b", "broken", "c"})


@pytest.mark.asyncio
async def test_batched_filter_error_propagates(context, make_access_control):
    transport = InMemoryTransport(per_resource(lambda resource: True), status_code=503)
    access_control = make_access_control(transport, batched=True)

    with pytest.raises(OpaServerError):
        await access_control.filter_catalogs(context, {"a", "b"})
