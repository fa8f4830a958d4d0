from __future__ import annotations

from crustbot.knowledge.knowledge_store import KnowledgeStore
from crustbot.models import KnowledgeBaseEntry


def _store(*pairs, **kwargs):
    return KnowledgeStore([KnowledgeBaseEntry(question=q, answer=a) for q, a in pairs], **kwargs)


def test_count_overlap_ignores_short_words():
    store = _store()
    # "how" and "do" are too short; "data" has exactly four letters and counts.
    assert store.count_overlap("How do I normalize location data", "how do i normalize location data") == 3


def test_count_overlap_uses_substring_containment():
    store = _store()
    assert store.count_overlap("Normalize locations", "renormalized locationsx") == 2


def test_search_requires_three_overlapping_words():
    store = _store(("How do I normalize location data from Slack?", "KB"))
    assert store.search("need to normalize the location fields") is None
    assert store.search("need to normalize the location data") == "KB"


def test_search_returns_first_qualifying_entry():
    store = _store(
        ("alpha bravo charlie delta", "first"),
        ("alpha bravo charlie delta echo", "second"),
    )
    assert store.search("alpha bravo charlie delta echo") == "first"


def test_search_with_empty_input_or_store():
    assert _store(("alpha bravo charlie", "x")).search("") is None
    assert _store().search("alpha bravo charlie") is None


def test_threshold_is_configurable():
    store = _store(("alpha bravo charlie", "x"), match_threshold=2)
    assert store.search("alpha bravo") == "x"
    assert len(store) == 1
