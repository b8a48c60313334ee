"""
Plain-text extraction from editor documents.

Document content arrives either as plain text or as a JSON snapshot of the
editor's block tree:

    {"type": "page", "blocks": {"flavour": "...", "props": {"text": {"delta": [...]},
                                                             "title": {"delta": [...]}},
                                "children": [...]}}

The snapshot is parsed into a small typed tree (``Block`` / ``RichText``) and
then walked depth-first, pre-order, collecting each rich-text field as one
fragment. Anything that is not a JSON object is treated as plain text.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RichText:
    """Ordered insert runs of one rich-text field."""

    inserts: tuple = ()

    @property
    def plain_text(self) -> str:
        return "".join(self.inserts)

    @classmethod
    def from_raw(cls, raw: Any) -> Optional["RichText"]:
        if not isinstance(raw, dict):
            return None
        delta = raw.get("delta")
        if not isinstance(delta, list):
            return None
        inserts = tuple(
            op["insert"]
            for op in delta
            if isinstance(op, dict) and isinstance(op.get("insert"), str) and op["insert"]
        )
        return cls(inserts=inserts)


@dataclass(frozen=True)
class Block:
    """One node of the block tree."""

    flavour: Optional[str] = None
    text: Optional[RichText] = None
    title: Optional[RichText] = None
    children: tuple = field(default_factory=tuple)

    @classmethod
    def from_raw(cls, raw: Any) -> Optional["Block"]:
        if not isinstance(raw, dict):
            return None
        props = raw.get("props")
        if not isinstance(props, dict):
            props = {}
        raw_children = raw.get("children")
        children = ()
        if isinstance(raw_children, list):
            children = tuple(
                child for child in (cls.from_raw(c) for c in raw_children) if child is not None
            )
        flavour = raw.get("flavour")
        return cls(
            flavour=flavour if isinstance(flavour, str) else None,
            text=RichText.from_raw(props.get("text")),
            title=RichText.from_raw(props.get("title")),
            children=children,
        )

    def walk(self):
        """Yield this block and its descendants, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class Snapshot:
    """Parsed document snapshot: a forest of root blocks."""

    roots: tuple = ()

    @classmethod
    def from_raw(cls, raw: dict) -> "Snapshot":
        blocks = raw.get("blocks")
        if isinstance(blocks, list):
            candidates = blocks
        elif blocks is None:
            candidates = []
        else:
            candidates = [blocks]
        roots = tuple(block for block in (Block.from_raw(b) for b in candidates) if block is not None)
        return cls(roots=roots)

    def fragments(self) -> List[str]:
        texts: List[str] = []
        for root in self.roots:
            for block in root.walk():
                for rich_text in (block.text, block.title):
                    if rich_text is not None and rich_text.inserts:
                        texts.append(rich_text.plain_text)
        return texts


def parse_snapshot(content: str) -> Optional[Snapshot]:
    """
    Parse content as a block-tree snapshot.

    Returns:
        Snapshot, or None when the content is not a JSON object
    """
    try:
        raw = json.loads(content)
    except (ValueError, TypeError):
        return None
    if not isinstance(raw, dict):
        return None
    return Snapshot.from_raw(raw)


def extract_text_content(content: Any) -> str:
    """
    Flatten document content to plain text suitable for pattern scanning.

    Args:
        content: Raw document content (plain text or JSON snapshot)

    Returns:
        Collected text fragments joined with a single space, or the content
        unchanged when it is not a snapshot
    """
    if not isinstance(content, str):
        if content is not None:
            logger.warning(f"Ignoring non-string document content of type {type(content).__name__}")
        return ""

    snapshot = parse_snapshot(content)
    if snapshot is None:
        return content

    fragments = snapshot.fragments()
    logger.debug(f"Extracted {len(fragments)} text fragments from snapshot")
    return " ".join(fragments)
