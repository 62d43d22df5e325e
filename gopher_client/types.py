"""Wire models for the data-collection API."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class JobType(str, Enum):
    TWITTER_SEARCH = "twitter-search"
    WEB_SCRAPE = "web-scrape"
    REDDIT_SEARCH = "reddit-search"
    LINKEDIN_SEARCH = "linkedin-search"
    TIKTOK_SEARCH = "tiktok-search"
    TIKTOK_TRENDING = "tiktok-trending"
    TIKTOK_TRANSCRIPTION = "tiktok-transcription"


class JobStatus(str, Enum):
    QUEUED = "queued"
    IN_PROGRESS = "in-progress"
    DONE = "done"
    DONE_NOT_SAVED = "done-not-saved"
    ERROR = "error"
    RETRY_ERROR = "retry-error"

    @classmethod
    def parse(cls, raw: str) -> Optional["JobStatus"]:
        """Normalize backend spellings ("in progress", "done(not saved)")."""
        key = raw.strip().lower()
        key = key.replace("(", " ").replace(")", " ")
        key = "-".join(key.split())
        try:
            return cls(key)
        except ValueError:
            return None

    @property
    def is_done(self) -> bool:
        return self in (JobStatus.DONE, JobStatus.DONE_NOT_SAVED)

    @property
    def is_failed(self) -> bool:
        return self in (JobStatus.ERROR, JobStatus.RETRY_ERROR)


class JobRequest(BaseModel):
    """Envelope POSTed to the job endpoint."""

    model_config = ConfigDict(frozen=True)

    job_type: JobType
    args: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def build(cls, job_type: JobType, args: Any) -> "JobRequest":
        if isinstance(args, BaseModel):
            payload = args.model_dump(mode="json", exclude_none=True)
        else:
            payload = dict(args or {})
        return cls(job_type=job_type, args=payload)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class ResultResponse(BaseModel):
    uuid: str = ""
    error: str = ""

    @field_validator("uuid", "error", mode="before")
    @classmethod
    def _null_as_empty(cls, v: Any) -> Any:
        # the backend sends null for unset strings
        return "" if v is None else v


class JobStatusResponse(BaseModel):
    status: str = ""
    error: str = ""

    @field_validator("status", "error", mode="before")
    @classmethod
    def _null_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @property
    def job_status(self) -> Optional[JobStatus]:
        return JobStatus.parse(self.status)


class Document(BaseModel):
    """One retrieved item (tweet, page, post, profile, video).

    Unknown fields are kept so a document serializes back unchanged.
    """

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    source: Optional[str] = None
    content: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    updated_at: Optional[str] = None
    score: Optional[float] = None
    embedding: Optional[List[float]] = None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class ChatHistoryItem(BaseModel):
    query: str
    timestamp: str


class AnalysisRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tweets: List[str]
    prompt: str
    model: str = "openai/gpt-4o-mini"
    app: bool = False
    chat_history: Optional[List[ChatHistoryItem]] = Field(default=None, alias="chatHistory")
    current_query: Optional[str] = Field(default=None, alias="currentQuery")


class AnalysisResponse(BaseModel):
    analysis: str = ""
    reasoning: str = ""
    model_used: str = ""
    tokens_used: int = 0
    job_uuid: str = ""


class ContextualizeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_query: str = Field(alias="currentQuery")
    chat_history: List[ChatHistoryItem] = Field(default_factory=list, alias="chatHistory")
    max_history_items: int = Field(default=5, alias="maxHistoryItems")


class ContextualizeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    contextualized_query: str = Field(default="", alias="contextualizedQuery")
    original_query: str = Field(default="", alias="originalQuery")
    used_context: bool = Field(default=False, alias="usedContext")
    reasoning: str = ""


class ExtractionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_input: str = Field(alias="userInput")
    max_terms: int = Field(default=4, alias="maxTerms")


class ExtractionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    search_term: str = Field(default="", alias="searchTerm")
    thinking: str = ""
    uuid: str = ""


class HybridQuery(BaseModel):
    query: str
    weight: float


class HybridSearchRequest(BaseModel):
    text_query: HybridQuery
    similarity_query: HybridQuery
    sources: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    operator: str = ""
    max_results: int = 10


class SimilaritySearchRequest(BaseModel):
    query: str
    keywords: List[str] = Field(default_factory=list)
    sources: List[str] = Field(default_factory=list)
    max_results: int = 10
    keyword_operator: str = ""


class CollectionStats(BaseModel):
    model_config = ConfigDict(extra="allow")

    source: Optional[str] = None
    count: Optional[int] = None


__all__ = [
    "JobType",
    "JobStatus",
    "JobRequest",
    "ResultResponse",
    "JobStatusResponse",
    "Document",
    "ChatHistoryItem",
    "AnalysisRequest",
    "AnalysisResponse",
    "ContextualizeRequest",
    "ContextualizeResponse",
    "ExtractionRequest",
    "ExtractionResponse",
    "HybridQuery",
    "HybridSearchRequest",
    "SimilaritySearchRequest",
    "CollectionStats",
]
