"""
Singleton manager for long-lived pipeline instances.

Extraction tables are compiled once per process and shared by the extractors;
the analysis cache lives as long as the process so repeated graph refreshes
reuse per-document results.
"""

import logging
import threading
from typing import Optional

from config.settings import settings
from knowledge.analysis import CorpusAnalyzer
from knowledge.cache import AnalysisCache
from knowledge.entity_extraction import EntityExtractor
from knowledge.extraction_tables import ExtractionTables, load_extraction_tables
from knowledge.relation_extraction import RelationExtractor

logger = logging.getLogger(__name__)

_extraction_tables: Optional[ExtractionTables] = None
_tables_lock = threading.Lock()

_analysis_cache: Optional[AnalysisCache] = None
_cache_lock = threading.Lock()


def get_extraction_tables() -> ExtractionTables:
    """Get or load the process-wide extraction tables."""
    global _extraction_tables

    if _extraction_tables is None:
        with _tables_lock:
            if _extraction_tables is None:
                _extraction_tables = load_extraction_tables()
    return _extraction_tables


def get_analysis_cache() -> Optional[AnalysisCache]:
    """Get or create the process-wide analysis cache; None when disabled."""
    global _analysis_cache

    if not settings.analysis_cache_enabled:
        return None

    if _analysis_cache is None:
        with _cache_lock:
            if _analysis_cache is None:
                _analysis_cache = AnalysisCache(max_size=settings.analysis_cache_size)
                logger.info(f"Initialized analysis cache (MaxSize={settings.analysis_cache_size})")
    return _analysis_cache


def get_entity_extractor() -> EntityExtractor:
    return EntityExtractor(tables=get_extraction_tables())


def get_relation_extractor() -> RelationExtractor:
    return RelationExtractor(tables=get_extraction_tables())


def get_corpus_analyzer() -> CorpusAnalyzer:
    return CorpusAnalyzer(
        entity_extractor=get_entity_extractor(),
        relation_extractor=get_relation_extractor(),
        cache=get_analysis_cache(),
    )


def cleanup_singletons() -> None:
    """Drop cached instances so the next access rebuilds them from settings."""
    global _extraction_tables, _analysis_cache

    with _tables_lock:
        _extraction_tables = None
    with _cache_lock:
        if _analysis_cache is not None:
            _analysis_cache.clear()
        _analysis_cache = None
    logger.debug("Pipeline singletons cleaned up")
