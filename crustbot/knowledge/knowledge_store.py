from __future__ import annotations

"""Keyword-overlap matcher over the static question/answer knowledge base."""

import logging
from typing import Iterable, Optional, Tuple

from ..models import KnowledgeBaseEntry
from ..utils import split_words, to_lower

logger = logging.getLogger("crustbot.knowledge")

DEFAULT_MIN_WORD_LENGTH = 4
DEFAULT_MATCH_THRESHOLD = 3


class KnowledgeStore:
    """Return the first knowledge-base answer whose question overlaps the input."""

    def __init__(
        self,
        entries: Iterable[KnowledgeBaseEntry],
        min_word_length: int = DEFAULT_MIN_WORD_LENGTH,
        match_threshold: int = DEFAULT_MATCH_THRESHOLD,
    ) -> None:
        self._entries: Tuple[KnowledgeBaseEntry, ...] = tuple(entries)
        self._min_word_length = min_word_length
        self._match_threshold = match_threshold

    def __len__(self) -> int:
        return len(self._entries)

    def count_overlap(self, question: str, user_lower: str) -> int:
        """Purpose: Count long question words that appear inside the user text.
        Inputs/Outputs: Inputs are an entry question and the lowercased user text;
            output is the number of qualifying words (duplicates count each time).
        Side Effects / State: None.
        Dependencies: Uses split_words and to_lower.
        Failure Modes: Empty question or input returns 0.
        If Removed: search() has no way to score an entry.
        Testing Notes: Words shorter than min_word_length never count; substring
            hits inside longer user words do.
        """
        count = 0
        for word in split_words(to_lower(question)):
            if len(word) >= self._min_word_length and word in user_lower:
                count += 1
        return count

    def search(self, user_lower: str) -> Optional[str]:
        """Purpose: Find the first entry whose overlap reaches the match threshold.
        Inputs/Outputs: Input is the lowercased user text; output is an answer or None.
        Side Effects / State: Debug logs the overlap per matched entry.
        Dependencies: Uses count_overlap; entries are scanned in catalog order.
        Failure Modes: Empty input or knowledge base returns None.
        If Removed: Knowledge-base answers are never returned.
        Testing Notes: Two qualifying entries must resolve to the earlier one.
        """
        if not user_lower:
            return None
        for index, entry in enumerate(self._entries):
            overlap = self.count_overlap(entry.question, user_lower)
            if overlap >= self._match_threshold:
                logger.debug("kb match index=%s overlap=%s question=%r", index, overlap, entry.question)
                return entry.answer
        return None
