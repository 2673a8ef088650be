"""Select a subset of a schema and prune everything outside it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import networkx as nx

from .errors import PartitionInvariantError, SchemaScopeError, SurgeryError
from .graph_builder import build_graph_from_schema, collect_tables_and_relations
from .metadata_loader import Labels, Relation, Schema, Table, normalize_table_names
from .wildcard import literal_length, match_simple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterOption:
    """Which tables to keep.

    ``include``/``exclude`` are table name patterns, ``include_labels`` label
    patterns, and ``distance`` the number of relation hops whose neighbours
    are kept alongside every included table.
    """

    include: Tuple[str, ...] = ()
    exclude: Tuple[str, ...] = ()
    include_labels: Tuple[str, ...] = ()
    distance: int = 0
    both_directions: bool = True


def filter_schema(schema: Schema, opt: FilterOption) -> None:
    """Remove every table not selected by ``opt`` from ``schema`` in place."""

    _, excludes = separate_tables_included_or_not(schema, opt)
    for table in excludes:
        try:
            exclude_table_from_schema(table.name, schema)
        except SchemaScopeError as exc:
            raise SurgeryError(table.name) from exc

    logger.info(f"Filtered schema '{schema.name}' down to {len(schema.tables)} tables")


def separate_tables_included_or_not(
    schema: Schema,
    opt: FilterOption,
    graph: Optional[nx.MultiDiGraph] = None,
) -> Tuple[List[Table], List[Table]]:
    """
    Split the schema's tables into included and excluded ones.

    Args:
        schema: Schema to classify; it is not modified
        opt: Filter option
        graph: Prebuilt table graph of ``schema`` (built when omitted)

    Returns:
        (included tables, excluded tables), both in schema order
    """
    include = list(opt.include) + normalize_table_names(schema, list(opt.include))
    exclude = list(opt.exclude) + normalize_table_names(schema, list(opt.exclude))
    no_positive_filter = not opt.include and not opt.include_labels

    includes: List[Table] = []
    excludes: List[Table] = []
    for table in schema.tables:
        li, mi = match_length(include, table.name)
        le, me = match_length(exclude, table.name)
        ml = match_table_or_column_labels(opt.include_labels, table)

        if mi:
            # A more specific exclude pattern overrides the include pattern
            included = not (me and li < le)
        elif ml:
            included = not me
        elif no_positive_filter:
            included = not me
        else:
            included = False

        logger.debug(f"{table.name}: include={mi}/{li} exclude={me}/{le} label={ml} -> {included}")
        (includes if included else excludes).append(table)

    logger.info(f"Tentatively included {len(includes)} and excluded {len(excludes)} tables")

    if graph is None:
        graph = build_graph_from_schema(schema)

    included_map: Dict[str, Table] = {}
    for table in includes:
        included_map[table.name] = table
        related, _ = collect_tables_and_relations(graph, table, opt.distance, opt.both_directions)
        for related_table in related:
            if related_table.name not in included_map:
                included_map[related_table.name] = related_table

    final_includes = [table for table in schema.tables if table.name in included_map]
    final_excludes = [table for table in schema.tables if table.name not in included_map]

    # Duplicate names or tables outside the schema break the partition
    actual = len(included_map) + len({table.name for table in final_excludes})
    if actual != len(schema.tables):
        raise PartitionInvariantError(len(schema.tables), actual)

    logger.info(
        f"Included {len(final_includes)} tables (distance={opt.distance}), "
        f"excluded {len(final_excludes)}"
    )
    return final_includes, final_excludes


def exclude_table_from_schema(name: str, schema: Schema) -> None:
    """Drop table ``name`` and every relation touching it, including column references."""

    tables: List[Table] = []
    for table in schema.tables:
        if table.name != name:
            tables.append(table)
        # Surviving tables may hold references to relations of the removed one
        for column in table.columns:
            column.child_relations = [r for r in column.child_relations if not _touches(r, name)]
            column.parent_relations = [r for r in column.parent_relations if not _touches(r, name)]
    schema.tables = tables

    schema.relations = [r for r in schema.relations if not _touches(r, name)]

    logger.debug(f"Removed table '{name}' from schema '{schema.name}'")


def _touches(relation: Relation, name: str) -> bool:
    return relation.table.name == name or relation.parent_table.name == name


def match_table_or_column_labels(patterns: Sequence[str], table: Table) -> bool:
    if match_labels(patterns, table.labels):
        return True
    for column in table.columns:
        if match_labels(patterns, column.labels):
            return True
    return False


def match_labels(patterns: Sequence[str], labels: Labels) -> bool:
    for label in labels:
        for pattern in patterns:
            if match_simple(pattern, label.name):
                return True
    return False


def match_length(patterns: Sequence[str], name: str) -> Tuple[int, bool]:
    """Specificity of the first pattern matching ``name``.

    Only the first match is scored, so pattern order matters when several
    patterns match.
    """
    for pattern in patterns:
        if match_simple(pattern, name):
            return literal_length(pattern), True
    return 0, False
