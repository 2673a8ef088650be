"""Utilities for exporting schema documents and schema packs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from networkx.readwrite import json_graph

from .graph_builder import build_graph_from_schema, summarize_graph
from .metadata_loader import Labels, Schema, Table


def schema_to_dict(schema: Schema) -> Dict[str, Any]:
    """Serialize a schema in the same layout load_schema reads."""

    document: Dict[str, Any] = {
        "name": schema.name,
        "desc": schema.desc,
        "tables": [_table_to_dict(table) for table in schema.tables],
        "relations": [
            {
                "table": r.table.name,
                "columns": [c.name for c in r.columns],
                "parent_table": r.parent_table.name,
                "parent_columns": [c.name for c in r.parent_columns],
                "cardinality": r.cardinality,
                "parent_cardinality": r.parent_cardinality,
                "def": r.definition,
                "virtual": r.virtual,
            }
            for r in schema.relations
        ],
        "labels": _labels_to_list(schema.labels),
    }
    if schema.driver is not None:
        document["driver"] = {
            "name": schema.driver.name,
            "database_version": schema.driver.database_version,
            "meta": {
                "current_schema": schema.driver.meta.current_schema,
                "search_paths": list(schema.driver.meta.search_paths),
            },
        }
    return document


def _table_to_dict(table: Table) -> Dict[str, Any]:
    return {
        "name": table.name,
        "type": table.type,
        "comment": table.comment,
        "columns": [
            {
                "name": col.name,
                "type": col.type,
                "nullable": col.nullable,
                "default": col.default,
                "comment": col.comment,
                "labels": _labels_to_list(col.labels),
            }
            for col in table.columns
        ],
        "labels": _labels_to_list(table.labels),
    }


def _labels_to_list(labels: Labels) -> List[Dict[str, Any]]:
    return [{"name": label.name, "virtual": label.virtual} for label in labels]


def export_schema_pack(
    schema: Schema,
    output_dir: Path,
    separation: Optional[Tuple[List[Table], List[Table]]] = None,
) -> Dict[str, Path]:
    """Export schema document + graph + summary for a (filtered) schema."""

    output_dir.mkdir(parents=True, exist_ok=True)

    schema_path = output_dir / "schema.json"
    with schema_path.open("w", encoding="utf-8") as f:
        json.dump(schema_to_dict(schema), f, indent=2)

    graph = build_graph_from_schema(schema)
    # Table and Relation objects are not JSON serializable
    for _, attrs in graph.nodes(data=True):
        attrs.pop("table", None)
    for _, _, attrs in graph.edges(data=True):
        relation = attrs.pop("relation", None)
        if relation is not None:
            attrs["columns"] = [c.name for c in relation.columns]
            attrs["parent_columns"] = [c.name for c in relation.parent_columns]
    graph_path = output_dir / "graph.json"
    with graph_path.open("w", encoding="utf-8") as f:
        json.dump(json_graph.node_link_data(graph), f, indent=2)

    summary: Dict[str, Any] = {
        "schema": schema.name,
        "table_count": schema.table_count,
        "column_count": schema.column_count,
        "relation_count": len(schema.relations),
        "graph_stats": summarize_graph(graph),
    }
    if separation is not None:
        includes, excludes = separation
        summary["included"] = [t.name for t in includes]
        summary["excluded"] = [t.name for t in excludes]
    summary_path = output_dir / "summary.json"
    with summary_path.open("w", encoding="utf-8") as f:
        json.dump(summary, f, indent=2)

    return {
        "schema": schema_path,
        "graph": graph_path,
        "summary": summary_path,
    }
