"""Schema subset selection: keep the tables you need, prune the rest."""

from .metadata_loader import (
    Label,
    Column,
    Table,
    Relation,
    Schema,
    Driver,
    DriverMeta,
    discover_schemas,
    load_schema,
    schema_from_dict,
    normalize_table_name,
    normalize_table_names,
)
from .graph_builder import build_graph_from_schema, collect_tables_and_relations, summarize_graph
from .filter import (
    FilterOption,
    filter_schema,
    separate_tables_included_or_not,
    exclude_table_from_schema,
)
from .errors import (
    SchemaScopeError,
    SchemaLoadError,
    ConfigError,
    ClosureError,
    PartitionInvariantError,
    SurgeryError,
)
from .exporter import export_schema_pack, schema_to_dict

__all__ = [
    "Label",
    "Column",
    "Table",
    "Relation",
    "Schema",
    "Driver",
    "DriverMeta",
    "discover_schemas",
    "load_schema",
    "schema_from_dict",
    "normalize_table_name",
    "normalize_table_names",
    "build_graph_from_schema",
    "collect_tables_and_relations",
    "summarize_graph",
    "FilterOption",
    "filter_schema",
    "separate_tables_included_or_not",
    "exclude_table_from_schema",
    "SchemaScopeError",
    "SchemaLoadError",
    "ConfigError",
    "ClosureError",
    "PartitionInvariantError",
    "SurgeryError",
    "export_schema_pack",
    "schema_to_dict",
]
