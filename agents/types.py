from typing import Any, Dict, List, TypedDict

from pydantic import BaseModel, Field, ValidationError


class QueryErrorRecord(TypedDict):
    error: bool
    query: str
    error_msg: str


class SingleQueryFailure(TypedDict):
    error: bool
    query: str
    error_msg: str
    documents: List[Dict[str, Any]]


class BatchSearchResponse(TypedDict, total=False):
    documents: List[Dict[str, Any]]
    total_queries: int
    successful_queries: int
    failed_queries: int
    errors: List[QueryErrorRecord]


class AssetSentiment(BaseModel):
    asset: str = ""
    reasoning: str = ""
    sentiment: int = Field(default=0, ge=0, le=100)


class Output(BaseModel):
    """Structured agent answer: per-asset sentiment scores."""

    assets: List[AssetSentiment] = Field(default_factory=list)

    @classmethod
    def from_partial(cls, data: Any) -> "Output":
        """Keep whichever assets validate; drop the rest."""
        out = cls()
        if not isinstance(data, dict):
            return out
        raw = data.get("assets")
        if not isinstance(raw, list):
            return out
        for item in raw:
            try:
                out.assets.append(AssetSentiment.model_validate(item))
            except ValidationError:
                continue
        return out
