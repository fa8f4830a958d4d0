from __future__ import annotations

import json
from pathlib import Path
import sys
from types import MappingProxyType

import pytest

_repo_root = Path(__file__).resolve().parent.parent
if str(_repo_root) not in sys.path:
    sys.path.insert(0, str(_repo_root))

from crustbot.models import KnowledgeBaseEntry  # noqa: E402
from crustbot.resolver import ResponseResolver  # noqa: E402
from crustbot.resource_loader import StaticData  # noqa: E402

ANSWERS = {
    "search for people": "ANSWER: search for people",
    "region": "ANSWER: region",
    "email/enrichment": "ANSWER: email/enrichment",
    "fallback": "ANSWER: fallback",
}
REGIONS = [
    "United States",
    "San Francisco, California, United States",
    "New York, New York, United States",
]
KB = [
    {"question": "How do I normalize location data from Slack?", "answer": "KB: normalize"},
    {"question": "Which authentication header should requests include?", "answer": "KB: auth"},
]


@pytest.fixture()
def static_data() -> StaticData:
    return StaticData(
        answers=MappingProxyType(dict(ANSWERS)),
        regions=tuple(REGIONS),
        knowledge_base=tuple(KnowledgeBaseEntry(**entry) for entry in KB),
    )


@pytest.fixture()
def resolver(static_data: StaticData) -> ResponseResolver:
    return ResponseResolver(static_data)


@pytest.fixture()
def data_dir(tmp_path: Path) -> Path:
    (tmp_path / "data.json").write_text(json.dumps(ANSWERS), encoding="utf-8")
    (tmp_path / "region_list.json").write_text(json.dumps({"regions": REGIONS}), encoding="utf-8")
    (tmp_path / "knowledge_base.json").write_text(json.dumps({"kb": KB}), encoding="utf-8")
    return tmp_path
