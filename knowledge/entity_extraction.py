"""
Pattern-based entity extraction.

Scans plain text with the typed pattern table and the place-name gazetteer
from ``ExtractionTables`` and returns de-duplicated entities with occurrence
counts for one document.
"""

import logging
from typing import Dict, List, Optional

from config.settings import settings
from knowledge.entity_models import Entity, EntityType, make_entity_id
from knowledge.extraction_tables import ExtractionTables

logger = logging.getLogger(__name__)


class EntityExtractor:
    """Extracts typed entities from text using regular expressions and a gazetteer."""

    def __init__(
        self,
        tables: Optional[ExtractionTables] = None,
        min_name_length: Optional[int] = None,
        max_name_length: Optional[int] = None,
    ):
        self.tables = tables or ExtractionTables.default()
        self.min_name_length = (
            settings.min_entity_name_length if min_name_length is None else min_name_length
        )
        self.max_name_length = (
            settings.max_entity_name_length if max_name_length is None else max_name_length
        )

    def _is_valid_name(self, name: str) -> bool:
        return self.min_name_length <= len(name) <= self.max_name_length

    def _record(
        self,
        entity_map: Dict[str, Entity],
        name: str,
        entity_type: EntityType,
        document_id: str,
    ) -> None:
        entity_id = make_entity_id(entity_type, name)
        existing = entity_map.get(entity_id)
        if existing:
            existing.frequency += 1
            existing.add_document(document_id)
        else:
            entity_map[entity_id] = Entity(
                id=entity_id,
                name=name,
                type=entity_type,
                document_ids=[document_id],
                frequency=1,
            )

    def extract(self, text: str, document_id: str) -> List[Entity]:
        """
        Extract entities from text.

        Every pattern match counts as one occurrence; each gazetteer name found
        in the text counts once. Candidates outside the configured name length
        range are discarded.

        Args:
            text: Plain text to scan
            document_id: Identifier of the owning document

        Returns:
            Entities in order of first appearance of their key
        """
        if not text or len(text.strip()) < 2:
            return []

        entity_map: Dict[str, Entity] = {}
        discarded = 0

        for entity_type, patterns in self.tables.entity_patterns:
            for pattern in patterns:
                for match in pattern.finditer(text):
                    name = match.group(0).strip()
                    if not self._is_valid_name(name):
                        discarded += 1
                        continue
                    self._record(entity_map, name, entity_type, document_id)

        for location in self.tables.gazetteer:
            if location in text and self._is_valid_name(location):
                self._record(entity_map, location, EntityType.LOCATION, document_id)

        entities = list(entity_map.values())
        logger.debug(
            f"Extracted {len(entities)} entities from {document_id} "
            f"({discarded} candidates discarded by length)"
        )
        return entities


def extract_entities(
    text: str,
    document_id: str,
    tables: Optional[ExtractionTables] = None,
) -> List[Entity]:
    """Extract entities with a default-configured extractor."""
    return EntityExtractor(tables=tables).extract(text, document_id)
