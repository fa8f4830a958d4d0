from __future__ import annotations

"""Static data loader for the responder.

This module reads the three JSON feeds (static answers, region catalog, knowledge
base) once, validates their shapes, and freezes them into a StaticData snapshot
that the resolver and adapters share read-only for the life of the process.
"""

import hashlib
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Tuple

from pydantic import ValidationError

from .models import KnowledgeBaseEntry, KnowledgeBaseFile, RegionCatalogFile, StaticAnswersFile
from .utils import load_json

logger = logging.getLogger("crustbot.resources")


class DataFileError(RuntimeError):
    """Raised when a static data file is missing, unreadable, or malformed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path.name}: {reason}")
        self.path = path
        self.reason = reason


@dataclass(frozen=True)
class ResourceMeta:
    """Metadata describing a data file version for logging."""
    file_name: str
    updated_at: str
    sha256: str


@dataclass(frozen=True)
class StaticData:
    """Immutable snapshot of every static feed the resolver reads."""
    answers: Mapping[str, str]
    regions: Tuple[str, ...]
    knowledge_base: Tuple[KnowledgeBaseEntry, ...]
    meta: Tuple[ResourceMeta, ...] = ()

    @property
    def fallback(self) -> str:
        return self.answers["fallback"]


class ResourceLoader:
    def __init__(self, answers_path: Path, regions_path: Path, knowledge_base_path: Path) -> None:
        """Purpose: Configure the loader with the three data file paths.
        Inputs/Outputs: Inputs are Paths to data.json, region_list.json and
            knowledge_base.json; no return value.
        Side Effects / State: Stores the paths for later load calls.
        Dependencies: None beyond Path usage.
        Failure Modes: None at init; load() reports read/parse errors.
        If Removed: Adapters cannot build the resolver's static data.
        Testing Notes: Instantiate with temp paths and call load().
        """
        # Store the file locations for subsequent loads.
        self._answers_path = answers_path
        self._regions_path = regions_path
        self._knowledge_base_path = knowledge_base_path

    @classmethod
    def from_settings(cls, settings: Any) -> "ResourceLoader":
        """Build a loader from a Settings instance."""
        return cls(settings.static_answers_path, settings.regions_path, settings.knowledge_base_path)

    def load(self) -> StaticData:
        """Purpose: Load, validate, and freeze all static feeds.
        Inputs/Outputs: No inputs; returns a StaticData snapshot.
        Side Effects / State: Reads file contents and computes hash/mtime per file.
        Dependencies: Uses load_json and the pydantic file schemas in models.
        Failure Modes: Missing files, invalid JSON, or schema violations (including a
            missing "fallback" answer) raise DataFileError.
        If Removed: Nothing can populate the resolver and startup fails.
        Testing Notes: Feed malformed JSON and a data.json without fallback.
        """
        # Parse each feed through its schema, then freeze containers.
        answers = self._parse(self._answers_path, lambda raw: StaticAnswersFile(answers=raw).answers)
        regions = self._parse(self._regions_path, lambda raw: RegionCatalogFile.model_validate(raw).regions)
        entries = self._parse(self._knowledge_base_path, lambda raw: KnowledgeBaseFile.model_validate(raw).kb)

        meta = tuple(
            _build_meta(path) for path in (self._answers_path, self._regions_path, self._knowledge_base_path)
        )
        for item in meta:
            logger.info("loaded %s updated_at=%s sha256=%s", item.file_name, item.updated_at, item.sha256[:12])
        logger.info(
            "static data ready: answers=%s regions=%s kb_entries=%s",
            len(answers),
            len(regions),
            len(entries),
        )
        return StaticData(
            answers=MappingProxyType(dict(answers)),
            regions=tuple(regions),
            knowledge_base=tuple(entries),
            meta=meta,
        )

    def _parse(self, path: Path, build: Any) -> Any:
        try:
            raw = load_json(path)
        except OSError as exc:
            raise DataFileError(path, f"cannot read file ({exc.strerror or exc})") from exc
        except json.JSONDecodeError as exc:
            raise DataFileError(path, f"invalid JSON at line {exc.lineno}") from exc
        try:
            return build(raw)
        except ValidationError as exc:
            raise DataFileError(path, f"unexpected shape: {exc.errors()[0]['msg']}") from exc


def _build_meta(path: Path) -> ResourceMeta:
    raw_bytes = path.read_bytes()
    return ResourceMeta(
        file_name=path.name,
        updated_at=datetime.fromtimestamp(path.stat().st_mtime).isoformat(),
        sha256=hashlib.sha256(raw_bytes).hexdigest(),
    )
