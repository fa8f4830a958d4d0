"""Response resolution pipeline.

Role:
    Turns one free-text user utterance into a canned answer. All front-end adapters
    (web chat, Slack) call ResponseResolver.resolve and render whatever string comes
    back; none of them carries matching logic of its own.

Resolution contract (first non-empty answer wins, containment is case-insensitive):
    Region Request:
        Person-search requests with a region clause are validated against the region
        catalog and answered with a request or a diagnostic plus corrected request.
    Knowledge Base:
        First knowledge-base entry with enough long-word overlap answers.
    Static Answers:
        Topic keywords select a canned answer; otherwise the fallback answer.

resolve() never raises. Unexpected step errors are logged and answered with the
fallback text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .knowledge.knowledge_store import KnowledgeStore
from .models import Message
from .regions import handle_region_request
from .resource_loader import StaticData
from .step_runtime import ResolverStep, StepRunner
from .utils import to_lower

logger = logging.getLogger("crustbot.resolver")

# Checked in order; the first keyword found in the input selects the answer key.
STATIC_TOPICS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("search for people",), "search for people"),
    (("region",), "region"),
    (("email", "enrichment"), "email/enrichment"),
)
FALLBACK_KEY = "fallback"


@dataclass
class ResolutionContext:
    """Per-call state passed through each resolution step."""
    question: str
    lower: str
    history: Tuple[Message, ...] = ()
    answer: str = ""


class ResponseResolver:
    def __init__(
        self,
        static_data: StaticData,
        min_word_length: int = 4,
        match_threshold: int = 3,
    ) -> None:
        """Purpose: Build the resolver over an immutable static data snapshot.
        Inputs/Outputs: Inputs are StaticData and the knowledge matcher limits; no
            return value.
        Side Effects / State: Constructs a KnowledgeStore and a StepRunner.
        Dependencies: Uses StepRunner/ResolverStep and the step methods on this class.
        Failure Modes: None at init; StaticData already guarantees a fallback answer.
        If Removed: Adapters have nothing to answer user messages with.
        Testing Notes: Build from a small StaticData and check step order.
        """
        # Keep the snapshot and register strategies in precedence order.
        self._data = static_data
        self._knowledge = KnowledgeStore(
            static_data.knowledge_base,
            min_word_length=min_word_length,
            match_threshold=match_threshold,
        )
        self._runner = StepRunner(
            steps=[
                ResolverStep("region_request", self._step_region_request),
                ResolverStep("knowledge_base", self._step_knowledge_base),
                ResolverStep("static_answers", self._step_static_answers),
            ]
        )

    @classmethod
    def from_settings(cls, static_data: StaticData, settings: object) -> "ResponseResolver":
        """Build a resolver using the knowledge matcher limits from Settings."""
        return cls(
            static_data,
            min_word_length=getattr(settings, "kb_min_word_length", 4),
            match_threshold=getattr(settings, "kb_match_threshold", 3),
        )

    @property
    def step_names(self) -> Sequence[str]:
        return self._runner.step_names

    def resolve(self, question: str, history: Optional[Sequence[Message]] = None) -> str:
        """Purpose: Produce the answer for one user utterance.
        Inputs/Outputs: Inputs are the raw question and optional prior turns (unused
            by current matching); output is always a non-empty string.
        Side Effects / State: Logs the answering step; no state survives the call.
        Dependencies: Uses StepRunner over the region, knowledge-base, and static steps.
        Failure Modes: Never raises; unexpected errors are logged and the fallback
            answer is returned.
        If Removed: Chat and Slack adapters cannot answer anything.
        Testing Notes: Same input twice yields the same string; "hello there" yields
            the fallback.
        """
        # Normalize None to empty text, then run the strategies.
        text = question or ""
        context = ResolutionContext(question=text, lower=to_lower(text), history=tuple(history or ()))
        try:
            step = self._runner.run(context)
        except Exception:
            logger.exception("resolution failed; answering with fallback question=%r", text)
            return self._data.fallback
        if step is None:
            return self._data.fallback
        logger.info("step=%s answered question_len=%s", step.name, len(text))
        return context.answer

    def _step_region_request(self, context: ResolutionContext) -> Optional[str]:
        return handle_region_request(context.question, self._data.regions)

    def _step_knowledge_base(self, context: ResolutionContext) -> Optional[str]:
        return self._knowledge.search(context.lower)

    def _step_static_answers(self, context: ResolutionContext) -> Optional[str]:
        """Purpose: Pick a canned answer by topic keyword, defaulting to fallback.
        Inputs/Outputs: Input is ResolutionContext; output is the selected answer.
        Side Effects / State: None.
        Dependencies: Uses STATIC_TOPICS order and StaticData.answers.
        Failure Modes: A topic key missing from the answers file falls through to
            the next topic and ultimately to the fallback.
        If Removed: Unmatched questions would get no answer at all.
        Testing Notes: "search for people" wins over "region" when both appear.
        """
        # First matching keyword group wins.
        answers = self._data.answers
        for keywords, key in STATIC_TOPICS:
            if key in answers and any(keyword in context.lower for keyword in keywords):
                return answers[key]
        return answers[FALLBACK_KEY]
