"""
Pydantic models for API requests and responses.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from knowledge.entity_models import EntityType, RelationType


class DocumentPayload(BaseModel):
    """A stored note as sent by the editor process."""

    id: int = Field(..., description="Numeric record id of the note")
    title: str = Field("", description="Note title")
    content: str = Field("", description="Plain text or JSON block-tree snapshot")


class GraphRequest(BaseModel):
    """Request model for building the knowledge graph."""

    documents: List[DocumentPayload] = Field(default_factory=list)
    document_id: Optional[str] = Field(None, description="Restrict to entities of one document (doc-<id>)")
    entity_type: Optional[EntityType] = Field(None, description="Restrict to one entity type")
    search: Optional[str] = Field(None, description="Case-insensitive entity name filter")


class GraphNodeModel(BaseModel):
    id: str
    name: str
    type: EntityType
    val: float
    color: str
    documentIds: List[str]


class GraphLinkModel(BaseModel):
    source: str
    target: str
    type: RelationType
    context: Optional[str] = None


class GraphStatsModel(BaseModel):
    node_count: int
    edge_count: int
    orphan_count: int
    component_count: int
    type_counts: Dict[str, int]


class GraphResponse(BaseModel):
    """Graph payload with nodes, links and per-type counts."""

    nodes: List[GraphNodeModel]
    links: List[GraphLinkModel]
    type_counts: Dict[str, int] = Field(
        ..., description="Entity counts per type over the unfiltered corpus"
    )
    stats: GraphStatsModel


class ExtractRequest(BaseModel):
    """Request model for single-document extraction."""

    content: str = Field(..., description="Plain text or JSON block-tree snapshot")
    document_id: str = Field(..., description="Document identifier")


class EntityModel(BaseModel):
    id: str
    name: str
    type: EntityType
    documentIds: List[str]
    frequency: int


class RelationModel(BaseModel):
    id: str
    sourceId: str
    targetId: str
    type: RelationType
    documentId: str
    context: Optional[str] = None


class ExtractResponse(BaseModel):
    entities: List[EntityModel]
    relations: List[RelationModel]


class CacheClearResponse(BaseModel):
    status: str
    cleared: int
