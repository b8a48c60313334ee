"""
Configuration management for the knowledge graph pipeline.
"""

import logging
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # CORS Configuration
    cors_origins: List[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"],
        description="Allowed origins for CORS"
    )

    # Entity extraction
    min_entity_name_length: int = Field(
        default=2, description="Shortest entity surface string kept after extraction"
    )
    max_entity_name_length: int = Field(
        default=20, description="Longest entity surface string kept after extraction"
    )
    extraction_tables_path: Optional[str] = Field(
        default=None,
        description="Optional JSON file overriding entity patterns, gazetteer and relation keywords",
    )

    # Relation extraction
    sentence_delimiters: str = Field(
        default="。！？；\n",
        description="Characters that terminate a sentence for co-occurrence analysis",
    )
    min_sentence_length: int = Field(
        default=2, description="Sentences shorter than this (after trimming) are ignored"
    )
    relation_context_max_chars: int = Field(
        default=100, description="Length of the sentence snippet stored on each relation"
    )

    # Corpus analysis
    min_document_content_length: int = Field(
        default=10,
        description="Documents whose raw content is not longer than this are skipped",
    )
    analysis_cache_enabled: bool = Field(
        default=True,
        description="Memoize per-document analysis by document id and content hash",
    )
    analysis_cache_size: int = Field(
        default=1024, description="Maximum number of memoized document analyses"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Global settings instance - will read from environment or use defaults
settings = Settings()

if settings.min_entity_name_length > settings.max_entity_name_length:
    logger.warning(
        f"min_entity_name_length ({settings.min_entity_name_length}) exceeds "
        f"max_entity_name_length ({settings.max_entity_name_length}); no entity will be kept"
    )
