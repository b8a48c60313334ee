"""Entity/relation filtering and per-type statistics for the graph view."""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from knowledge.entity_models import Entity, EntityType, Relation


def _prune_relations(relations: Iterable[Relation], entities: Sequence[Entity]) -> List[Relation]:
    entity_ids = {entity.id for entity in entities}
    return [r for r in relations if r.source_id in entity_ids and r.target_id in entity_ids]


def filter_graph(
    entities: Sequence[Entity],
    relations: Sequence[Relation],
    document_id: Optional[str] = None,
    entity_type: Optional[EntityType] = None,
    search_term: Optional[str] = None,
) -> Tuple[List[Entity], List[Relation]]:
    """
    Narrow the entity set and keep only relations whose endpoints survive.

    Filters are applied in order: document membership, entity type, then a
    case-insensitive substring match on the entity name.
    """
    filtered_entities = list(entities)
    filtered_relations = list(relations)

    if document_id:
        filtered_entities = [e for e in filtered_entities if document_id in e.document_ids]
        filtered_relations = _prune_relations(filtered_relations, filtered_entities)

    if entity_type is not None:
        entity_type = EntityType(entity_type)
        filtered_entities = [e for e in filtered_entities if e.type == entity_type]
        filtered_relations = _prune_relations(filtered_relations, filtered_entities)

    if search_term:
        needle = search_term.lower()
        filtered_entities = [e for e in filtered_entities if needle in e.name.lower()]
        filtered_relations = _prune_relations(filtered_relations, filtered_entities)

    return filtered_entities, filtered_relations


def count_entity_types(entities: Iterable[Entity]) -> Dict[EntityType, int]:
    """Count entities per type; every type is present in the result."""
    counts = {entity_type: 0 for entity_type in EntityType}
    for entity in entities:
        counts[entity.type] += 1
    return counts
