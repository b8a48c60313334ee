"""
Document records handed over by the notes storage layer.

The notes database keeps one row per note in a ``markdowns`` table (id, title,
content, created_at, updated_at). Loaders here only read that table or a JSON
dump of it; storage itself belongs to the desktop application.
"""

import json
import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

logger = logging.getLogger(__name__)


@dataclass
class DocumentRecord:
    """A stored note: integer id, title and raw editor content."""

    id: int
    title: str
    content: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def document_id(self) -> str:
        return document_key(self.id)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DocumentRecord":
        return cls(
            id=int(data["id"]),
            title=str(data.get("title") or ""),
            content=data.get("content") or "",
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )


def document_key(record_id: Union[int, str]) -> str:
    """Opaque document id used for entity membership."""
    return f"doc-{record_id}"


def load_markdown_documents(db_path: Union[str, Path]) -> List[DocumentRecord]:
    """
    Read all notes from a notes SQLite database, newest first.

    Raises:
        FileNotFoundError: If the database file does not exist
        sqlite3.Error: If the markdowns table cannot be read
    """
    path = Path(db_path)
    if not path.exists():
        raise FileNotFoundError(f"Notes database not found: {path}")

    conn = sqlite3.connect(f"file:{path}?mode=ro", uri=True)
    try:
        conn.row_factory = sqlite3.Row
        rows = conn.execute(
            "SELECT id, title, content, created_at, updated_at FROM markdowns ORDER BY updated_at DESC"
        ).fetchall()
    finally:
        conn.close()

    documents = [DocumentRecord.from_mapping(dict(row)) for row in rows]
    logger.info(f"Loaded {len(documents)} documents from {path}")
    return documents


def load_documents_json(json_path: Union[str, Path]) -> List[DocumentRecord]:
    """
    Read documents from a JSON file holding a list of records.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a list of records with an id
    """
    path = Path(json_path)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"Expected a list of document records in {path}")

    documents = []
    for index, item in enumerate(data):
        if not isinstance(item, dict) or "id" not in item:
            raise ValueError(f"Record {index} in {path} is not an object with an 'id'")
        documents.append(DocumentRecord.from_mapping(item))

    logger.info(f"Loaded {len(documents)} documents from {path}")
    return documents
