"""Load relational schema documents into an in-memory graph."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import SchemaLoadError


@dataclass
class Label:
    """Free-form tag attached to a table or column."""

    name: str
    virtual: bool = False


Labels = List[Label]


@dataclass
class DriverMeta:
    current_schema: str = ""
    search_paths: List[str] = field(default_factory=list)


@dataclass
class Driver:
    """Database driver the schema was read from."""

    name: str
    database_version: str = ""
    meta: DriverMeta = field(default_factory=DriverMeta)


@dataclass(eq=False)
class Column:
    """Column-level metadata plus cached relation references.

    ``child_relations`` lists relations in which this column sits on the
    referencing side, ``parent_relations`` the ones where it is referenced.
    Both hold references to relations owned by the schema.
    """

    name: str
    type: str = ""
    nullable: bool = True
    default: Optional[str] = None
    comment: str = ""
    labels: Labels = field(default_factory=list)
    table: Optional["Table"] = field(default=None, repr=False)
    child_relations: List["Relation"] = field(default_factory=list, repr=False)
    parent_relations: List["Relation"] = field(default_factory=list, repr=False)


@dataclass(eq=False)
class Table:
    """Table or view metadata. Tables are identified by name."""

    name: str
    type: str = "BASE TABLE"
    comment: str = ""
    columns: List[Column] = field(default_factory=list)
    labels: Labels = field(default_factory=list)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Table):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def find_column_by_name(self, name: str) -> Optional[Column]:
        for column in self.columns:
            if column.name == name:
                return column
        return None


@dataclass(eq=False)
class Relation:
    """Foreign-key edge from a child table to its parent table."""

    table: Table
    parent_table: Table
    columns: List[Column] = field(default_factory=list)
    parent_columns: List[Column] = field(default_factory=list)
    cardinality: str = ""
    parent_cardinality: str = ""
    definition: str = ""
    virtual: bool = False

    def __repr__(self) -> str:
        return f"Relation({self.table.name} -> {self.parent_table.name})"


@dataclass
class Schema:
    """Top-level schema graph handed to the filter."""

    name: str = ""
    desc: str = ""
    tables: List[Table] = field(default_factory=list)
    relations: List[Relation] = field(default_factory=list)
    labels: Labels = field(default_factory=list)
    driver: Optional[Driver] = None

    @property
    def table_count(self) -> int:
        return len(self.tables)

    @property
    def column_count(self) -> int:
        return sum(len(table.columns) for table in self.tables)

    def find_table_by_name(self, name: str) -> Optional[Table]:
        for table in self.tables:
            if table.name == name:
                return table
        return None


def normalize_table_name(schema: Schema, name: str) -> str:
    """Qualify a bare table name with the driver's current schema.

    Only postgres and redshift report tables as ``<schema>.<table>``, so only
    those drivers get the prefix.
    """
    driver = schema.driver
    if (
        driver is not None
        and driver.name in ("postgres", "redshift")
        and driver.meta.current_schema
        and "." not in name
    ):
        return f"{driver.meta.current_schema}.{name}"
    return name


def normalize_table_names(schema: Schema, names: List[str]) -> List[str]:
    return [normalize_table_name(schema, name) for name in names]


def discover_schemas(schema_root: Path) -> List[str]:
    """List schema document names (without extension) under a directory."""

    if not schema_root.exists():
        raise FileNotFoundError(f"Schema root not found: {schema_root}")

    return sorted(path.stem for path in schema_root.glob("*.json") if not path.name.startswith("."))


def load_schema(path: Path) -> Schema:
    """Load a schema document from a JSON file."""

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise SchemaLoadError(f"Failed to parse JSON at {path}") from exc

    if not isinstance(data, dict):
        raise SchemaLoadError(f"Schema document at {path} must be a JSON object")
    return schema_from_dict(data)


def schema_from_dict(data: Dict[str, Any]) -> Schema:
    """Build a Schema from its document form and wire column back-references."""

    _expect(data, dict, "schema document")
    schema = Schema(
        name=data.get("name") or "",
        desc=data.get("desc") or "",
        labels=_parse_labels(data.get("labels")),
        driver=_parse_driver(data.get("driver")),
    )

    for raw_table in _expect(data.get("tables") or [], list, "tables"):
        schema.tables.append(_parse_table(raw_table))

    for raw_relation in _expect(data.get("relations") or [], list, "relations"):
        relation = _parse_relation(_expect(raw_relation, dict, "relation entry"), schema)
        for column in relation.columns:
            column.child_relations.append(relation)
        for column in relation.parent_columns:
            column.parent_relations.append(relation)
        schema.relations.append(relation)

    return schema


def _expect(value: Any, kind: type, what: str) -> Any:
    if not isinstance(value, kind):
        raise SchemaLoadError(f"Expected {what} to be a JSON {'object' if kind is dict else 'array'}, got {value!r}")
    return value


def _parse_labels(raw: Optional[List[Any]]) -> Labels:
    labels: Labels = []
    for item in _expect(raw or [], list, "labels"):
        # Plain strings are accepted as a shorthand for non-virtual labels
        if isinstance(item, str):
            labels.append(Label(name=item))
        else:
            item = _expect(item, dict, "label entry")
            labels.append(Label(name=item.get("name") or "", virtual=bool(item.get("virtual", False))))
    return labels


def _parse_driver(raw: Optional[Dict[str, Any]]) -> Optional[Driver]:
    if not raw:
        return None
    _expect(raw, dict, "driver")
    meta = _expect(raw.get("meta") or {}, dict, "driver meta")
    return Driver(
        name=raw.get("name") or "",
        database_version=raw.get("database_version") or "",
        meta=DriverMeta(
            current_schema=meta.get("current_schema") or "",
            search_paths=list(meta.get("search_paths") or []),
        ),
    )


def _parse_table(raw: Dict[str, Any]) -> Table:
    _expect(raw, dict, "table entry")
    name = raw.get("name")
    if not name or not isinstance(name, str):
        raise SchemaLoadError(f"Table entry without a valid name: {name!r}")

    table = Table(
        name=name,
        type=raw.get("type") or "BASE TABLE",
        comment=raw.get("comment") or "",
        labels=_parse_labels(raw.get("labels")),
    )
    for raw_column in _expect(raw.get("columns") or [], list, f"columns of '{name}'"):
        _expect(raw_column, dict, f"column entry of '{name}'")
        table.columns.append(
            Column(
                name=raw_column.get("name") or "",
                type=raw_column.get("type") or "",
                nullable=bool(raw_column.get("nullable", True)),
                default=raw_column.get("default"),
                comment=raw_column.get("comment") or "",
                labels=_parse_labels(raw_column.get("labels")),
                table=table,
            )
        )
    return table


def _parse_relation(raw: Dict[str, Any], schema: Schema) -> Relation:
    table = _resolve_table(schema, raw.get("table"))
    parent_table = _resolve_table(schema, raw.get("parent_table"))
    return Relation(
        table=table,
        parent_table=parent_table,
        columns=[
            _resolve_column(table, name)
            for name in _expect(raw.get("columns") or [], list, "relation columns")
        ],
        parent_columns=[
            _resolve_column(parent_table, name)
            for name in _expect(raw.get("parent_columns") or [], list, "relation parent_columns")
        ],
        cardinality=raw.get("cardinality") or "",
        parent_cardinality=raw.get("parent_cardinality") or "",
        definition=raw.get("def") or "",
        virtual=bool(raw.get("virtual", False)),
    )


def _resolve_table(schema: Schema, name: Optional[str]) -> Table:
    table = schema.find_table_by_name(name or "")
    if table is None:
        raise SchemaLoadError(f"Relation references unknown table '{name}'")
    return table


def _resolve_column(table: Table, name: str) -> Column:
    column = table.find_column_by_name(name)
    if column is None:
        raise SchemaLoadError(f"Relation references unknown column '{table.name}.{name}'")
    return column
