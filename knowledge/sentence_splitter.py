"""
Sentence splitting utility for relation co-occurrence analysis.

Splits text on a configurable set of terminal punctuation characters.
"""

import logging
import re
from functools import lru_cache
from typing import List, Optional, Pattern

from config.settings import settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=32)
def _delimiter_pattern(delimiters: str) -> Pattern:
    return re.compile("[" + "".join(re.escape(c) for c in delimiters) + "]+")


def split_into_sentences(
    text: str,
    delimiters: Optional[str] = None,
    min_length: Optional[int] = None,
) -> List[str]:
    """
    Split text into sentences on runs of delimiter characters.

    Args:
        text: Input text to split
        delimiters: Characters that end a sentence (defaults to settings)
        min_length: Minimum trimmed character length for a valid sentence

    Returns:
        List of trimmed sentences, in order
    """
    if not text or not text.strip():
        return []

    delimiters = settings.sentence_delimiters if delimiters is None else delimiters
    min_length = settings.min_sentence_length if min_length is None else min_length

    if delimiters:
        raw_sentences = _delimiter_pattern(delimiters).split(text)
    else:
        raw_sentences = [text]

    sentences = []
    for sentence in raw_sentences:
        sentence = sentence.strip()
        if sentence and len(sentence) >= min_length:
            sentences.append(sentence)

    logger.debug(f"Split text into {len(sentences)} sentences")
    return sentences
