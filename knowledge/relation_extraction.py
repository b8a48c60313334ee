"""
Sentence co-occurrence relation extraction.

Relations are produced for every pair of entities that appear in the same
sentence; the relation type comes from the first keyword list (in table order)
that hits the sentence. A document whose sentences yield nothing but that has
at least two entities falls back to document-level "Related" pairs.
"""

import logging
from itertools import combinations
from typing import Dict, List, Optional, Sequence

from config.settings import settings
from knowledge.entity_models import Entity, Relation, RelationType, make_relation_id
from knowledge.extraction_tables import ExtractionTables
from knowledge.sentence_splitter import split_into_sentences

logger = logging.getLogger(__name__)

DOCUMENT_LEVEL_VARIANT = "document"
DOCUMENT_LEVEL_CONTEXT = "[document-level co-occurrence]"


class RelationExtractor:
    """Derives typed relations between entities from sentence co-occurrence."""

    def __init__(
        self,
        tables: Optional[ExtractionTables] = None,
        delimiters: Optional[str] = None,
        min_sentence_length: Optional[int] = None,
        context_max_chars: Optional[int] = None,
    ):
        self.tables = tables or ExtractionTables.default()
        self.delimiters = settings.sentence_delimiters if delimiters is None else delimiters
        self.min_sentence_length = (
            settings.min_sentence_length if min_sentence_length is None else min_sentence_length
        )
        self.context_max_chars = (
            settings.relation_context_max_chars if context_max_chars is None else context_max_chars
        )

    def classify(self, sentence: str) -> RelationType:
        """Return the first relation type whose keywords appear in the sentence."""
        for relation_type, keywords in self.tables.relation_keywords:
            if any(keyword in sentence for keyword in keywords):
                return relation_type
        return RelationType.RELATED

    def extract(
        self,
        text: str,
        entities: Sequence[Entity],
        document_id: str,
    ) -> List[Relation]:
        """
        Extract relations for one document.

        Args:
            text: Plain text of the document
            entities: Corpus-wide entity set; only entities attributed to
                document_id take part
            document_id: Identifier of the document being analyzed

        Returns:
            Relations de-duplicated by id, first occurrence kept
        """
        document_entities = [e for e in entities if document_id in e.document_ids]
        relations: Dict[str, Relation] = {}

        for sentence in split_into_sentences(text, self.delimiters, self.min_sentence_length):
            sentence_entities = [e for e in document_entities if e.name in sentence]
            if len(sentence_entities) < 2:
                continue

            relation_type = self.classify(sentence)
            context = sentence[: self.context_max_chars]
            for source, target in combinations(sentence_entities, 2):
                relation_id = make_relation_id(source.id, relation_type, target.id, document_id)
                if relation_id in relations:
                    continue
                relations[relation_id] = Relation(
                    id=relation_id,
                    source_id=source.id,
                    target_id=target.id,
                    type=relation_type,
                    document_id=document_id,
                    context=context,
                )
                logger.debug(f"Relation {source.name} -[{relation_type.value}]-> {target.name}")

        if not relations and len(document_entities) >= 2:
            for source, target in combinations(document_entities, 2):
                relation_id = make_relation_id(
                    source.id, RelationType.RELATED, target.id, document_id, DOCUMENT_LEVEL_VARIANT
                )
                relations[relation_id] = Relation(
                    id=relation_id,
                    source_id=source.id,
                    target_id=target.id,
                    type=RelationType.RELATED,
                    document_id=document_id,
                    context=DOCUMENT_LEVEL_CONTEXT,
                )
            logger.debug(
                f"No sentence-level relations in {document_id}; "
                f"added {len(relations)} document-level relations"
            )

        return list(relations.values())


def extract_relations(
    text: str,
    entities: Sequence[Entity],
    document_id: str,
    tables: Optional[ExtractionTables] = None,
) -> List[Relation]:
    """Extract relations with a default-configured extractor."""
    return RelationExtractor(tables=tables).extract(text, entities, document_id)
