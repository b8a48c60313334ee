"""
Entity and Relation data models for the document analysis pipeline.

This module defines the core data structures shared by the extractors, the
merge step and the graph builder. Extracted separately to avoid circular imports.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class EntityType(str, Enum):
    """Closed set of entity types. Values are part of the output contract."""

    PERSON = "Person"
    ORGANIZATION = "Organization"
    LOCATION = "Location"
    CONCEPT = "Concept"
    EVENT = "Event"
    DATE = "Date"
    UNKNOWN = "Unknown"


class RelationType(str, Enum):
    """Closed set of relation types. Values are part of the output contract."""

    RELATED = "Related"
    PART_OF = "PartOf"
    HAS_PROPERTY = "HasProperty"
    CAUSES = "Causes"
    CREATED = "Created"
    LOCATED = "Located"
    PARTICIPATED = "Participated"
    SIMILAR = "Similar"
    OPPOSITE = "Opposite"


def make_entity_id(entity_type: EntityType, name: str) -> str:
    """Stable entity key. Type values never contain ':' so the key is unambiguous."""
    return f"{EntityType(entity_type).value}:{name}"


def make_relation_id(
    source_id: str,
    relation_type: RelationType,
    target_id: str,
    document_id: str,
    variant: Optional[str] = None,
) -> str:
    parts = [source_id, RelationType(relation_type).value, target_id, document_id]
    if variant:
        parts.append(variant)
    return "|".join(parts)


@dataclass
class Entity:
    """Represents an extracted entity."""

    id: str
    name: str
    type: EntityType
    document_ids: List[str] = field(default_factory=list)
    frequency: int = 1

    def add_document(self, document_id: str) -> None:
        if document_id not in self.document_ids:
            self.document_ids.append(document_id)

    def copy(self) -> "Entity":
        return Entity(
            id=self.id,
            name=self.name,
            type=self.type,
            document_ids=list(self.document_ids),
            frequency=self.frequency,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "documentIds": list(self.document_ids),
            "frequency": self.frequency,
        }


@dataclass
class Relation:
    """Represents a relation between two entities observed in one document."""

    id: str
    source_id: str
    target_id: str
    type: RelationType
    document_id: str
    context: Optional[str] = None

    def copy(self) -> "Relation":
        return Relation(
            id=self.id,
            source_id=self.source_id,
            target_id=self.target_id,
            type=self.type,
            document_id=self.document_id,
            context=self.context,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "sourceId": self.source_id,
            "targetId": self.target_id,
            "type": self.type.value,
            "documentId": self.document_id,
            "context": self.context,
        }


@dataclass
class AnalysisResult:
    """Accumulated entity and relation sets returned by the orchestrator."""

    entities: List[Entity] = field(default_factory=list)
    relations: List[Relation] = field(default_factory=list)
