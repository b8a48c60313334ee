"""
Projection of entities and relations into renderable graph data.

Nodes are sized by ``sqrt(frequency) * 2 + 3`` and colored by entity type.
Links reference entity ids; the rendering layer resolves them to nodes.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from knowledge.entity_models import Entity, EntityType, Relation, RelationType

ENTITY_COLORS: Dict[EntityType, str] = {
    EntityType.PERSON: "#FF6B6B",
    EntityType.ORGANIZATION: "#4ECDC4",
    EntityType.LOCATION: "#45B7D1",
    EntityType.CONCEPT: "#96CEB4",
    EntityType.EVENT: "#FFEAA7",
    EntityType.DATE: "#DDA0DD",
    EntityType.UNKNOWN: "#CCCCCC",
}


def get_entity_color(entity_type: EntityType) -> str:
    return ENTITY_COLORS.get(entity_type, ENTITY_COLORS[EntityType.UNKNOWN])


def node_size(frequency: int) -> float:
    return math.sqrt(frequency) * 2 + 3


@dataclass
class GraphNode:
    id: str
    name: str
    type: EntityType
    val: float
    color: str
    document_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "val": self.val,
            "color": self.color,
            "documentIds": list(self.document_ids),
        }


@dataclass
class GraphLink:
    source: str
    target: str
    type: RelationType
    context: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "type": self.type.value,
            "context": self.context,
        }


@dataclass
class GraphData:
    nodes: List[GraphNode] = field(default_factory=list)
    links: List[GraphLink] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "links": [link.to_dict() for link in self.links],
        }


def build_graph_data(entities: Sequence[Entity], relations: Sequence[Relation]) -> GraphData:
    """Project entities to nodes and relations to links. No filtering is applied."""
    nodes = [
        GraphNode(
            id=entity.id,
            name=entity.name,
            type=entity.type,
            val=node_size(entity.frequency),
            color=get_entity_color(entity.type),
            document_ids=list(entity.document_ids),
        )
        for entity in entities
    ]
    links = [
        GraphLink(
            source=relation.source_id,
            target=relation.target_id,
            type=relation.type,
            context=relation.context,
        )
        for relation in relations
    ]
    return GraphData(nodes=nodes, links=links)
