from __future__ import annotations

from types import MappingProxyType

from crustbot.models import KnowledgeBaseEntry, Message, Role
from crustbot.regions import SAN_FRANCISCO_REGION, build_valid_request
from crustbot.resolver import ResponseResolver
from crustbot.resource_loader import StaticData

from .conftest import ANSWERS, REGIONS


def test_step_order(resolver):
    assert list(resolver.step_names) == ["region_request", "knowledge_base", "static_answers"]


def test_valid_region_request(resolver):
    answer = resolver.resolve(
        "curl https://api.crustdata.com/screener/person/search region=New York, New York, United States"
    )
    assert answer == build_valid_request("New York, New York, United States")
    assert "Invalid region" not in answer
    assert "Error:" not in answer


def test_invalid_region_lists_catalog_and_falls_back(resolver):
    answer = resolver.resolve("screener/person/search region=Gotham")
    assert 'Invalid region "Gotham".' in answer
    assert "Valid: " + ", ".join(REGIONS) in answer
    assert '"value": ["United States"]' in answer


def test_san_fran_region_is_auto_fixed(resolver):
    answer = resolver.resolve("SCREENER/PERSON/SEARCH Region=san fran")
    assert f'Auto-fixed => "{SAN_FRANCISCO_REGION}"' in answer
    assert answer.endswith(build_valid_request(SAN_FRANCISCO_REGION))


def test_region_request_wins_over_knowledge_base(resolver):
    answer = resolver.resolve("normalize location data from screener/person/search region=United States")
    assert answer == build_valid_request("United States")


def test_knowledge_base_answer(resolver):
    assert resolver.resolve("How should I normalize location data?") == "KB: normalize"


def test_knowledge_base_below_threshold_falls_through(resolver):
    assert resolver.resolve("need to normalize the location fields") == ANSWERS["fallback"]


def test_knowledge_base_wins_over_static_keywords(resolver):
    assert resolver.resolve("normalize location data for a region") == "KB: normalize"


def test_static_search_for_people(resolver):
    assert resolver.resolve("What about search for people") == ANSWERS["search for people"]


def test_static_keyword_order(resolver):
    assert resolver.resolve("search for people in a REGION") == ANSWERS["search for people"]
    assert resolver.resolve("Which region values exist?") == ANSWERS["region"]
    assert resolver.resolve("region and email") == ANSWERS["region"]
    assert resolver.resolve("Email enrichment?") == ANSWERS["email/enrichment"]
    assert resolver.resolve("tell me about enrichment") == ANSWERS["email/enrichment"]


def test_fallback(resolver):
    assert resolver.resolve("hello there") == ANSWERS["fallback"]
    assert resolver.resolve("") == ANSWERS["fallback"]
    assert resolver.resolve(None) == ANSWERS["fallback"]


def test_resolve_is_idempotent(resolver):
    question = "screener/person/search region=San Francisco"
    assert resolver.resolve(question) == resolver.resolve(question)


def test_history_is_accepted_and_ignored(resolver):
    history = [Message(id="1", role=Role.USER, text="search for people")]
    assert resolver.resolve("hello there", history=history) == ANSWERS["fallback"]


def test_missing_topic_key_falls_to_fallback():
    data = StaticData(
        answers=MappingProxyType({"fallback": "only fallback"}),
        regions=(),
        knowledge_base=(),
    )
    assert ResponseResolver(data).resolve("search for people") == "only fallback"


def test_unexpected_error_degrades_to_fallback(static_data, monkeypatch):
    resolver = ResponseResolver(static_data)

    def boom(question, catalog):  # noqa: ANN001
        raise RuntimeError("boom")

    monkeypatch.setattr("crustbot.resolver.handle_region_request", boom)
    assert resolver.resolve("anything") == ANSWERS["fallback"]


def test_from_settings_uses_matcher_limits(static_data):
    class FakeSettings:
        kb_min_word_length = 4
        kb_match_threshold = 1

    data = StaticData(
        answers=static_data.answers,
        regions=static_data.regions,
        knowledge_base=(KnowledgeBaseEntry(question="authentication", answer="auth"),),
    )
    resolver = ResponseResolver.from_settings(data, FakeSettings())
    assert resolver.resolve("authentication please") == "auth"
