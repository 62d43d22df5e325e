"""Endpoints that answer immediately instead of going through the job queue."""

from typing import TYPE_CHECKING, Any, List, Optional, Sequence

from pydantic import ValidationError

from .errors import DecodeError
from .types import (
    AnalysisRequest,
    AnalysisResponse,
    ChatHistoryItem,
    CollectionStats,
    ContextualizeRequest,
    ContextualizeResponse,
    Document,
    ExtractionRequest,
    ExtractionResponse,
    HybridQuery,
    HybridSearchRequest,
    SimilaritySearchRequest,
)

if TYPE_CHECKING:  # pragma: no cover
    from .client import GopherClient

DEFAULT_ANALYSIS_MODEL = "openai/gpt-4o-mini"


def _clamp_default(value: int, low: int, high: int, default: int) -> int:
    return value if low <= value <= high else default


class InsightsMixin:
    def _post_model(self: "GopherClient", path: str, request: Any, response_model: type) -> Any:
        data = self._call("POST", path, request.model_dump(mode="json", by_alias=True, exclude_none=True))
        return self._validate(path, data, response_model)

    def _validate(self: "GopherClient", path: str, data: Any, model: Any) -> Any:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise DecodeError(self.base_url + path, str(data), exc) from exc

    def _documents(self: "GopherClient", path: str, data: Any) -> List[Document]:
        if not isinstance(data, list):
            raise DecodeError(self.base_url + path, str(data), "expected a JSON array of documents")
        return [self._validate(path, d, Document) for d in data]

    # --- analysis ---
    def analyze_data(
        self: "GopherClient",
        data: Sequence[str],
        prompt: str,
        model: str = "",
        app: bool = False,
        chat_history: Optional[List[ChatHistoryItem]] = None,
        current_query: str = "",
    ) -> AnalysisResponse:
        """Run an LLM analysis over `data` (tweets or other text) server-side."""
        request = AnalysisRequest(
            tweets=list(data),
            prompt=prompt,
            model=model or DEFAULT_ANALYSIS_MODEL,
            app=app,
            chat_history=chat_history,
            current_query=current_query or None,
        )
        return self._post_model("/v1/analysis", request, AnalysisResponse)

    def analyze_data_simple(self: "GopherClient", data: Sequence[str], prompt: str) -> AnalysisResponse:
        return self.analyze_data(data, prompt)

    def get_available_models(self: "GopherClient") -> List[str]:
        data = self._call("GET", "/v1/analysis")
        if not isinstance(data, list) or not all(isinstance(m, str) for m in data):
            raise DecodeError(self.base_url + "/v1/analysis", str(data), "expected a list of model names")
        return list(data)

    # --- query helpers ---
    def contextualize_query(
        self: "GopherClient",
        current_query: str,
        chat_history: List[ChatHistoryItem],
        max_history_items: int = 0,
    ) -> ContextualizeResponse:
        """Rewrite `current_query` using recent chat history (1-10 items, default 5)."""
        request = ContextualizeRequest(
            current_query=current_query,
            chat_history=chat_history,
            max_history_items=_clamp_default(max_history_items, 1, 10, 5),
        )
        return self._post_model("/v1/contextualize", request, ContextualizeResponse)

    def extract_search_terms(self: "GopherClient", user_input: str, max_terms: int = 0) -> ExtractionResponse:
        """Extract an optimized search term from free text (1-6 terms, default 4)."""
        request = ExtractionRequest(user_input=user_input, max_terms=_clamp_default(max_terms, 1, 6, 4))
        return self._post_model("/v1/extraction", request, ExtractionResponse)

    # --- indexed search ---
    def hybrid_search(
        self: "GopherClient",
        query: str,
        sources: Sequence[str],
        text: str,
        query_weight: float,
        text_weight: float,
        keywords: Sequence[str] = (),
        operator: str = "",
        max_results: int = 10,
    ) -> List[Document]:
        request = HybridSearchRequest(
            text_query=HybridQuery(query=query, weight=query_weight),
            similarity_query=HybridQuery(query=text, weight=text_weight),
            sources=list(sources),
            keywords=list(keywords),
            operator=operator,
            max_results=max_results,
        )
        path = "/v1/search/hybrid"
        return self._documents(path, self._call("POST", path, request.model_dump(mode="json")))

    def similarity_search(
        self: "GopherClient",
        query: str,
        sources: Sequence[str] = (),
        keywords: Sequence[str] = (),
        operator: str = "",
        max_results: int = 10,
    ) -> List[Document]:
        request = SimilaritySearchRequest(
            query=query,
            keywords=list(keywords),
            sources=list(sources),
            max_results=max_results,
            keyword_operator=operator,
        )
        path = "/v1/search/similarity"
        return self._documents(path, self._call("POST", path, request.model_dump(mode="json")))

    # --- metrics ---
    def get_all_metrics(self: "GopherClient", refresh: bool = False) -> List[CollectionStats]:
        path = f"/v1/metrics?refresh={str(refresh).lower()}"
        data = self._call("GET", path)
        if not isinstance(data, list):
            raise DecodeError(self.base_url + path, str(data), "expected a list of collection stats")
        return [self._validate(path, d, CollectionStats) for d in data]

    def get_metrics(self: "GopherClient", source: str, refresh: bool = False) -> CollectionStats:
        path = f"/v1/metrics/{source}?refresh={str(refresh).lower()}"
        return self._validate(path, self._call("GET", path), CollectionStats)
