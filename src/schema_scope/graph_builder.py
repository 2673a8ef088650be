"""Build NetworkX graphs of tables and their foreign-key relations."""

from __future__ import annotations

from typing import Dict, List, Tuple, Union

import networkx as nx

from .errors import ClosureError
from .metadata_loader import Relation, Schema, Table


def build_graph_from_schema(schema: Schema) -> nx.MultiDiGraph:
    """Create a directed multigraph with one edge per relation.

    Nodes are table names carrying the Table under ``table``; edges point
    from the child table to the parent table and carry the Relation.
    """

    G = nx.MultiDiGraph(name=schema.name)

    for table in schema.tables:
        G.add_node(
            table.name,
            kind="table",
            table=table,
            labels=[label.name for label in table.labels],
        )

    for relation in schema.relations:
        G.add_edge(
            relation.table.name,
            relation.parent_table.name,
            rel="FOREIGN_KEY",
            relation=relation,
            virtual=relation.virtual,
        )

    return G


def collect_tables_and_relations(
    graph: nx.MultiDiGraph,
    table: Union[Table, str],
    distance: int,
    both_directions: bool = True,
) -> Tuple[List[Table], List[Relation]]:
    """
    Collect the tables reachable from ``table`` within ``distance`` hops.

    Args:
        graph: Graph produced by build_graph_from_schema
        table: Start table (or its name); always part of the result
        distance: Maximum number of relation hops; zero or less means none
        both_directions: Follow relations towards children too, not only
            from child to parent

    Returns:
        Tables in breadth-first order and the relations traversed to reach them
    """
    name = table.name if isinstance(table, Table) else table
    if name not in graph:
        raise ClosureError(name, f"table '{name}' is not part of the schema graph")

    if distance <= 0:
        return [graph.nodes[name]["table"]], []

    view = graph.to_undirected(as_view=True) if both_directions else graph
    depths: Dict[str, int] = nx.single_source_shortest_path_length(view, name, cutoff=distance)

    tables = [graph.nodes[node]["table"] for node in depths]

    relations: List[Relation] = []
    for source, target, relation in graph.subgraph(depths).edges(data="relation"):
        if both_directions:
            traversed = min(depths[source], depths[target]) < distance
        else:
            traversed = depths[source] < distance
        if traversed:
            relations.append(relation)

    return tables, relations


def summarize_graph(G: nx.MultiDiGraph) -> Dict[str, int]:
    """Quick counts for graph contents."""

    summary = {
        "tables": G.number_of_nodes(),
        "relations": G.number_of_edges(),
        "virtual_relations": sum(1 for _, _, virtual in G.edges(data="virtual") if virtual),
        "isolated_tables": nx.number_of_isolates(G),
        "connected_components": nx.number_weakly_connected_components(G) if G.number_of_nodes() else 0,
    }
    return summary
