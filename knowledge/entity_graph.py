"""
NetworkX projection of graph data for analysis and export.

The renderable ``GraphData`` is converted to a ``MultiDiGraph`` so that graph
statistics (isolated entities, connected components) and GraphML export can
reuse NetworkX instead of ad-hoc traversal code.

Usage:
    data = build_graph_data(result.entities, result.relations)
    stats = get_graph_stats(data)
    write_graphml(data, "notes.graphml")
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict

import networkx as nx

from knowledge.entity_models import EntityType
from knowledge.graph_builder import GraphData

logger = logging.getLogger(__name__)


@dataclass
class EntityGraphStats:
    """Statistics about the entity graph."""
    node_count: int
    edge_count: int
    orphan_count: int
    component_count: int
    type_counts: Dict[str, int]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def to_networkx(graph_data: GraphData) -> nx.MultiDiGraph:
    """
    Convert graph data to a NetworkX multigraph.

    Links whose endpoints are not among the nodes are skipped, since the
    projection itself never validates relations against entities.

    Args:
        graph_data: Nodes and links to convert

    Returns:
        MultiDiGraph keyed by entity id, edges keyed by relation type
    """
    graph = nx.MultiDiGraph()
    for node in graph_data.nodes:
        graph.add_node(
            node.id,
            name=node.name,
            type=node.type.value,
            val=node.val,
            color=node.color,
            document_ids=list(node.document_ids),
        )

    skipped = 0
    for link in graph_data.links:
        if link.source not in graph or link.target not in graph:
            skipped += 1
            continue
        graph.add_edge(
            link.source,
            link.target,
            key=link.type.value,
            type=link.type.value,
            context=link.context,
        )

    if skipped:
        logger.debug(f"Skipped {skipped} links with unknown endpoints")
    return graph


def get_graph_stats(graph_data: GraphData) -> EntityGraphStats:
    """Summarize node, edge, orphan and component counts."""
    graph = to_networkx(graph_data)
    type_counts = {entity_type.value: 0 for entity_type in EntityType}
    for _, data in graph.nodes(data=True):
        type_counts[data["type"]] += 1

    node_count = graph.number_of_nodes()
    return EntityGraphStats(
        node_count=node_count,
        edge_count=graph.number_of_edges(),
        orphan_count=sum(1 for _ in nx.isolates(graph)),
        component_count=nx.number_weakly_connected_components(graph) if node_count else 0,
        type_counts=type_counts,
    )


def write_graphml(graph_data: GraphData, filepath: str) -> None:
    """
    Export graph data to GraphML for debugging/visualization.

    GraphML only stores scalar attributes, so document ids are joined with
    commas and a missing context becomes an empty string.
    """
    graph = to_networkx(graph_data)
    for _, data in graph.nodes(data=True):
        data["document_ids"] = ",".join(data["document_ids"])
    for _, _, data in graph.edges(data=True):
        if data.get("context") is None:
            data["context"] = ""
    nx.write_graphml(graph, filepath)
    logger.info(f"Exported entity graph to {filepath}")
