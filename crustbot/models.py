from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Role(str, Enum):
    """Author of a conversation turn."""
    USER = "user"
    BOT = "bot"


class Message(BaseModel):
    """Immutable conversation turn appended to a caller-owned log."""
    model_config = ConfigDict(frozen=True)

    id: str
    role: Role
    text: str


class KnowledgeBaseEntry(BaseModel):
    """Question/answer pair used by keyword-overlap retrieval."""
    model_config = ConfigDict(frozen=True)

    question: str
    answer: str


class RegionCatalogFile(BaseModel):
    """Shape of region_list.json."""
    regions: List[str] = Field(default_factory=list)


class KnowledgeBaseFile(BaseModel):
    """Shape of knowledge_base.json."""
    kb: List[KnowledgeBaseEntry] = Field(default_factory=list)


class StaticAnswersFile(BaseModel):
    """Shape of data.json: a flat topic -> answer map that must carry a fallback."""
    answers: Dict[str, str]

    @field_validator("answers")
    @classmethod
    def _require_fallback(cls, value: Dict[str, str]) -> Dict[str, str]:
        if "fallback" not in value:
            raise ValueError('static answers must define a "fallback" key')
        return value


class ChatRequest(BaseModel):
    """Request payload for chat API."""
    session_id: Optional[str] = Field(default=None)
    message: str

    @field_validator("message")
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("message must not be blank")
        return value


class ChatResponse(BaseModel):
    """Response payload returned by the chat API."""
    answer_text: str
    session_id: str
    typing_delay_ms: int


class SessionTranscript(BaseModel):
    """All turns recorded for one web chat session."""
    session_id: str
    messages: List[Message]
