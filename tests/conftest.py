import copy
import json
from typing import Any, Dict, List

import pytest

from schema_scope.metadata_loader import schema_from_dict


def _table(name: str, columns: List[str], labels=None, column_labels=None) -> Dict[str, Any]:
    column_labels = column_labels or {}
    return {
        "name": name,
        "type": "BASE TABLE",
        "comment": "",
        "columns": [
            {
                "name": col,
                "type": "int",
                "nullable": col != "id",
                "default": None,
                "comment": "",
                "labels": column_labels.get(col, []),
            }
            for col in columns
        ],
        "labels": labels or [],
    }


def _relation(table: str, column: str, parent_table: str, parent_column: str = "id") -> Dict[str, Any]:
    return {
        "table": table,
        "columns": [column],
        "parent_table": parent_table,
        "parent_columns": [parent_column],
        "cardinality": "zero_or_more",
        "parent_cardinality": "exactly_one",
        "def": f"FOREIGN KEY ({column}) REFERENCES {parent_table}({parent_column})",
        "virtual": False,
    }


# users <- user_secret, user_profiles, posts, comments, billing_invoices
# posts <- comments, post_tags -> tags
# legacy_logs and legacy_audit have no relations
SHOP_SCHEMA: Dict[str, Any] = {
    "name": "shop",
    "desc": "sample shop schema",
    "tables": [
        _table("users", ["id", "email"], column_labels={"email": [{"name": "pii", "virtual": True}]}),
        _table("user_secret", ["id", "user_id"]),
        _table("user_profiles", ["id", "user_id"]),
        _table("posts", ["id", "user_id"]),
        _table("comments", ["id", "post_id", "user_id"]),
        _table("tags", ["id"]),
        _table("post_tags", ["post_id", "tag_id"]),
        _table("billing_invoices", ["id", "user_id"], labels=[{"name": "billing", "virtual": False}]),
        _table("legacy_logs", ["id"]),
        _table("legacy_audit", ["id"]),
    ],
    "relations": [
        _relation("user_secret", "user_id", "users"),
        _relation("user_profiles", "user_id", "users"),
        _relation("posts", "user_id", "users"),
        _relation("comments", "post_id", "posts"),
        _relation("comments", "user_id", "users"),
        _relation("post_tags", "post_id", "posts"),
        _relation("post_tags", "tag_id", "tags"),
        _relation("billing_invoices", "user_id", "users"),
    ],
    "labels": [],
    "driver": {"name": "sqlite", "database_version": "3.45.0", "meta": {}},
}


@pytest.fixture
def schema_doc():
    return copy.deepcopy(SHOP_SCHEMA)


@pytest.fixture
def schema(schema_doc):
    return schema_from_dict(schema_doc)


@pytest.fixture
def schema_file(tmp_path, schema_doc):
    path = tmp_path / "shop.json"
    path.write_text(json.dumps(schema_doc), encoding="utf-8")
    return path


