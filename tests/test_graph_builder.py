import pytest

from schema_scope.errors import ClosureError
from schema_scope.graph_builder import (
    build_graph_from_schema,
    collect_tables_and_relations,
    summarize_graph,
)
from schema_scope.metadata_loader import schema_from_dict


def test_graph_has_one_edge_per_relation(schema):
    G = build_graph_from_schema(schema)
    assert G.number_of_nodes() == 10
    assert G.number_of_edges() == 8
    assert G.number_of_edges("comments", "posts") == 1
    assert G.nodes["users"]["table"] is schema.find_table_by_name("users")
    assert G.nodes["billing_invoices"]["labels"] == ["billing"]


def test_summarize_graph(schema):
    summary = summarize_graph(build_graph_from_schema(schema))
    assert summary == {
        "tables": 10,
        "relations": 8,
        "virtual_relations": 0,
        "isolated_tables": 2,
        "connected_components": 3,
    }


def test_zero_or_negative_distance_returns_only_start_table(schema):
    G = build_graph_from_schema(schema)
    for distance in (0, -1):
        tables, relations = collect_tables_and_relations(G, "posts", distance)
        assert [t.name for t in tables] == ["posts"]
        assert relations == []


def test_collect_accepts_table_objects(schema):
    G = build_graph_from_schema(schema)
    tags = schema.find_table_by_name("tags")
    tables, relations = collect_tables_and_relations(G, tags, 1)
    assert [t.name for t in tables] == ["tags", "post_tags"]
    assert [(r.table.name, r.parent_table.name) for r in relations] == [("post_tags", "tags")]


def test_collect_two_hops_in_both_directions(schema):
    G = build_graph_from_schema(schema)
    tables, relations = collect_tables_and_relations(G, "tags", 2)
    assert {t.name for t in tables} == {"tags", "post_tags", "posts"}
    assert {(r.table.name, r.parent_table.name) for r in relations} == {
        ("post_tags", "tags"),
        ("post_tags", "posts"),
    }


def test_collect_outgoing_only(schema):
    G = build_graph_from_schema(schema)
    tables, relations = collect_tables_and_relations(G, "comments", 3, both_directions=False)
    assert {t.name for t in tables} == {"comments", "posts", "users"}
    assert len(relations) == 3

    tables, _ = collect_tables_and_relations(G, "users", 3, both_directions=False)
    assert [t.name for t in tables] == ["users"]


def test_collect_unknown_table_raises(schema):
    G = build_graph_from_schema(schema)
    with pytest.raises(ClosureError) as exc_info:
        collect_tables_and_relations(G, "missing", 1)
    assert exc_info.value.table_name == "missing"


def test_self_referencing_relation():
    schema = schema_from_dict(
        {
            "tables": [{"name": "employees", "columns": [{"name": "id"}, {"name": "manager_id"}]}],
            "relations": [
                {
                    "table": "employees",
                    "columns": ["manager_id"],
                    "parent_table": "employees",
                    "parent_columns": ["id"],
                    "virtual": True,
                }
            ],
        }
    )
    G = build_graph_from_schema(schema)
    tables, relations = collect_tables_and_relations(G, "employees", 2)
    assert [t.name for t in tables] == ["employees"]
    assert len(relations) == 1
    assert summarize_graph(G)["virtual_relations"] == 1
