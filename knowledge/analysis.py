"""
Document analysis orchestration.

``analyze_document`` runs the pipeline for one document against the
accumulated corpus state:

    text extraction -> entity extraction -> entity merge
                    -> relation extraction (on the merged entities) -> relation merge

``CorpusAnalyzer`` folds a whole document collection. Each document's own
contribution is memoized by document id and content hash, so the periodic
full re-analysis done by the graph view stays cheap and does not keep
inflating entity frequencies for unchanged notes.
"""

import hashlib
import logging
from typing import Iterable, Optional, Sequence

from config.settings import settings
from knowledge.cache import AnalysisCache
from knowledge.documents import DocumentRecord
from knowledge.entity_extraction import EntityExtractor
from knowledge.entity_models import AnalysisResult, Entity, Relation
from knowledge.merge import merge_entities, merge_relations
from knowledge.relation_extraction import RelationExtractor
from knowledge.text_extraction import extract_text_content

logger = logging.getLogger(__name__)


def content_fingerprint(content: str) -> str:
    return hashlib.sha256((content or "").encode("utf-8")).hexdigest()


def analyze_document(
    content: str,
    document_id: str,
    existing_entities: Optional[Sequence[Entity]] = None,
    existing_relations: Optional[Sequence[Relation]] = None,
    entity_extractor: Optional[EntityExtractor] = None,
    relation_extractor: Optional[RelationExtractor] = None,
) -> AnalysisResult:
    """
    Analyze one document and merge the result into the accumulated state.

    Args:
        content: Raw document content (plain text or JSON snapshot)
        document_id: Identifier of the document
        existing_entities: Accumulated corpus entities (not mutated)
        existing_relations: Accumulated corpus relations (not mutated)
        entity_extractor: Extractor to use (default tables when omitted)
        relation_extractor: Extractor to use (default tables when omitted)

    Returns:
        AnalysisResult with the merged entities and relations
    """
    entity_extractor = entity_extractor or EntityExtractor()
    relation_extractor = relation_extractor or RelationExtractor()

    text = extract_text_content(content)

    new_entities = entity_extractor.extract(text, document_id)
    entities = merge_entities(existing_entities or [], new_entities)

    new_relations = relation_extractor.extract(text, entities, document_id)
    relations = merge_relations(existing_relations or [], new_relations)

    logger.debug(
        f"Analyzed {document_id}: {len(new_entities)} entities, {len(new_relations)} relations"
    )
    return AnalysisResult(entities=entities, relations=relations)


class CorpusAnalyzer:
    """Builds the corpus-wide entity/relation sets from a document collection."""

    def __init__(
        self,
        entity_extractor: Optional[EntityExtractor] = None,
        relation_extractor: Optional[RelationExtractor] = None,
        cache: Optional[AnalysisCache] = None,
        min_content_length: Optional[int] = None,
    ):
        self.entity_extractor = entity_extractor or EntityExtractor()
        self.relation_extractor = relation_extractor or RelationExtractor()
        self.cache = cache
        self.min_content_length = (
            settings.min_document_content_length if min_content_length is None else min_content_length
        )

    def _document_contribution(self, document: DocumentRecord) -> AnalysisResult:
        document_id = document.document_id
        fingerprint = content_fingerprint(document.content)

        if self.cache is not None:
            cached = self.cache.get(document_id, fingerprint)
            if cached is not None:
                logger.debug(f"Analysis cache hit for {document_id}")
                return cached

        result = analyze_document(
            document.content,
            document_id,
            entity_extractor=self.entity_extractor,
            relation_extractor=self.relation_extractor,
        )
        if self.cache is not None:
            self.cache.put(document_id, fingerprint, result)
        return result

    def analyze(self, documents: Iterable[DocumentRecord]) -> AnalysisResult:
        """
        Analyze every document with enough content and merge the results.

        Documents are folded in the given order.
        """
        entities = []
        relations = []
        analyzed = 0
        skipped = 0

        for document in documents:
            if not isinstance(document.content, str) or len(document.content) <= self.min_content_length:
                skipped += 1
                continue
            contribution = self._document_contribution(document)
            entities = merge_entities(entities, contribution.entities)
            relations = merge_relations(relations, contribution.relations)
            analyzed += 1

        logger.info(
            f"Analyzed {analyzed} documents ({skipped} skipped): "
            f"{len(entities)} entities, {len(relations)} relations"
        )
        return AnalysisResult(entities=entities, relations=relations)


def analyze_corpus(
    documents: Iterable[DocumentRecord],
    cache: Optional[AnalysisCache] = None,
) -> AnalysisResult:
    """Analyze a document collection with default extractors."""
    return CorpusAnalyzer(cache=cache).analyze(documents)
