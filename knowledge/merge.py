"""
Incremental merge of per-document extraction results into corpus-wide sets.

Both functions are pure: inputs are never mutated and every returned object is
a fresh copy.
"""

from typing import Dict, List, Sequence

from knowledge.entity_models import Entity, Relation


def merge_entities(existing: Sequence[Entity], incoming: Sequence[Entity]) -> List[Entity]:
    """
    Merge entities by id.

    On collision frequencies are summed and document ids unioned; the existing
    entity's name is kept.
    """
    entity_map: Dict[str, Entity] = {}

    for entity in existing:
        entity_map[entity.id] = entity.copy()

    for entity in incoming:
        current = entity_map.get(entity.id)
        if current:
            current.frequency += entity.frequency
            for document_id in entity.document_ids:
                current.add_document(document_id)
        else:
            entity_map[entity.id] = entity.copy()

    return list(entity_map.values())


def merge_relations(existing: Sequence[Relation], incoming: Sequence[Relation]) -> List[Relation]:
    """Merge relations by id; on collision the existing relation wins unchanged."""
    relation_map: Dict[str, Relation] = {}

    for relation in existing:
        relation_map[relation.id] = relation.copy()

    for relation in incoming:
        if relation.id not in relation_map:
            relation_map[relation.id] = relation.copy()

    return list(relation_map.values())
