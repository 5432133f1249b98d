"""Tests for decision request builders."""

import json

from trino_opa.query_input import (
    build_query_input_for_filter,
    build_query_input_for_grant,
    build_query_input_for_simple_action,
    build_query_input_for_simple_resource,
    build_query_input_for_source_and_target_resource,
)
from trino_opa.schema import OpaQueryInputGrant
from trino_opa.schema.resources import catalog_resource, role_resource, table_resource
from trino_opa.spi import (
    CatalogSchemaTableName,
    Identity,
    PrincipalType,
    SystemSecurityContext,
    TrinoPrincipal,
)


def _context(query_id=None) -> SystemSecurityContext:
    return SystemSecurityContext(
        identity=Identity.for_user("alice", "dev", "analysts"), query_id=query_id
    )


def test_simple_action_has_no_resource():
    document = build_query_input_for_simple_action(
        _context(), "ExecuteQuery", "455"
    ).to_document()
    assert document == {
        "input": {
            "context": {
                "identity": {"user": "alice", "groups": ["analysts", "dev"]},
                "softwareStack": {"trinoVersion": "455"},
            },
            "action": {"operation": "ExecuteQuery"},
        }
    }


def test_query_id_is_included_when_known():
    document = build_query_input_for_simple_action(
        _context("q-1"), "ExecuteQuery", "455"
    ).to_document()
    assert document["input"]["context"]["queryId"] == "q-1"


def test_user_without_groups_sends_empty_list():
    context = SystemSecurityContext(identity=Identity.for_user("bob"))
    document = build_query_input_for_simple_action(
        context, "ShowRoles", "455"
    ).to_document()
    assert document["input"]["context"]["identity"] == {"user": "bob", "groups": []}


def test_simple_resource_request():
    document = build_query_input_for_simple_resource(
        _context(), "AccessCatalog", catalog_resource("tpch"), "455"
    ).to_document()
    assert document["input"]["action"] == {
        "operation": "AccessCatalog",
        "resource": {"catalog": {"name": "tpch"}},
    }


def test_rename_carries_both_resources():
    source = CatalogSchemaTableName.parse("cat.s.t1")
    target = CatalogSchemaTableName.parse("cat.s.t2")
    document = build_query_input_for_source_and_target_resource(
        _context(),
        "RenameTable",
        table_resource(source),
        table_resource(target),
        "455",
    ).to_document()
    action = document["input"]["action"]
    assert action["resource"]["table"]["tableName"] == "t1"
    assert action["targetResource"]["table"]["tableName"] == "t2"


def test_grant_request_with_grantor():
    grantee = OpaQueryInputGrant.for_principals(
        [TrinoPrincipal(type=PrincipalType.USER, name="bob")], grant_option=False
    )
    document = build_query_input_for_grant(
        _context(),
        "GrantRoles",
        role_resource("admin"),
        grantee,
        "455",
        grantor=TrinoPrincipal(type=PrincipalType.ROLE, name="owner"),
    ).to_document()
    assert document["input"]["action"] == {
        "operation": "GrantRoles",
        "resource": {"role": {"name": "admin"}},
        "grantee": {
            "principals": [{"name": "bob", "type": "USER"}],
            "grantOption": False,
        },
        "grantor": {"name": "owner", "type": "ROLE"},
    }


def test_filter_request_keeps_resource_order():
    document = build_query_input_for_filter(
        _context(),
        "FilterCatalogs",
        [catalog_resource("b"), catalog_resource("a")],
        "455",
    ).to_document()
    assert document["input"]["action"] == {
        "operation": "FilterCatalogs",
        "filterResources": [{"catalog": {"name": "b"}}, {"catalog": {"name": "a"}}],
    }


def test_request_body_is_json_of_document():
    query_input = build_query_input_for_simple_action(_context(), "ShowRoles", "455")
    assert json.loads(query_input.to_request_body()) == query_input.to_document()
