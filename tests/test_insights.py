import pytest

from conftest import FakeResponse, make_client
from gopher_client.errors import DecodeError, HTTPStatusError, JobError
from gopher_client.types import ChatHistoryItem


class Recorder:
    def __init__(self, reply):
        self.reply = reply

    def __call__(self, method, url, payload):
        return self.reply


def _client(reply):
    return make_client(Recorder(reply))


def test_analyze_data_defaults_model():
    client = _client({"analysis": "bullish", "model_used": "openai/gpt-4o-mini", "tokens_used": 42})
    resp = client.analyze_data(["tweet one", "tweet two"], "Summarize sentiment")
    assert resp.analysis == "bullish"
    assert resp.tokens_used == 42
    call = client.session.calls[0]
    assert call["url"] == "https://api.test/api/v1/analysis"
    assert call["json"] == {
        "tweets": ["tweet one", "tweet two"],
        "prompt": "Summarize sentiment",
        "model": "openai/gpt-4o-mini",
        "app": False,
    }


def test_analysis_soft_error():
    client = _client({"error": "model unavailable"})
    with pytest.raises(JobError, match="model unavailable"):
        client.analyze_data_simple(["t"], "p")


def test_get_available_models():
    client = _client(["openai/gpt-4o-mini", "anthropic/claude"])
    assert client.get_available_models() == ["openai/gpt-4o-mini", "anthropic/claude"]
    assert client.session.calls[0]["method"] == "GET"


def test_get_available_models_rejects_non_list():
    client = _client({"models": []})
    with pytest.raises(DecodeError):
        client.get_available_models()


@pytest.mark.parametrize("requested,sent", [(0, 5), (3, 3), (11, 5), (-1, 5), (10, 10)])
def test_contextualize_clamps_history(requested, sent):
    client = _client({"contextualizedQuery": "btc price today", "usedContext": True})
    history = [ChatHistoryItem(query="btc", timestamp="2025-01-01T00:00:00Z")]
    resp = client.contextualize_query("price today", history, max_history_items=requested)
    assert resp.contextualized_query == "btc price today"
    assert resp.used_context is True
    body = client.session.calls[0]["json"]
    assert body["maxHistoryItems"] == sent
    assert body["currentQuery"] == "price today"
    assert client.session.calls[0]["url"].endswith("/v1/contextualize")


@pytest.mark.parametrize("requested,sent", [(0, 4), (1, 1), (6, 6), (7, 4)])
def test_extract_search_terms_clamps(requested, sent):
    client = _client({"searchTerm": "bitcoin etf"})
    resp = client.extract_search_terms("what do people think of the bitcoin etf", max_terms=requested)
    assert resp.search_term == "bitcoin etf"
    assert client.session.calls[0]["json"] == {
        "userInput": "what do people think of the bitcoin etf",
        "maxTerms": sent,
    }


def test_hybrid_search():
    client = _client([{"id": "a", "score": 0.9}])
    docs = client.hybrid_search("btc", ["twitter"], "bitcoin price", 0.3, 0.7, max_results=5)
    assert docs[0].score == 0.9
    body = client.session.calls[0]["json"]
    assert body["text_query"] == {"query": "btc", "weight": 0.3}
    assert body["similarity_query"] == {"query": "bitcoin price", "weight": 0.7}
    assert body["max_results"] == 5


def test_similarity_search_error_status():
    client = _client(FakeResponse(503, text="unavailable"))
    with pytest.raises(HTTPStatusError) as exc:
        client.similarity_search("btc", sources=["twitter"])
    assert exc.value.status_code == 503
    assert "/v1/search/similarity" in str(exc.value)


def test_metrics_paths():
    client = _client([{"source": "twitter", "count": 10}])
    stats = client.get_all_metrics(refresh=True)
    assert stats[0].count == 10
    assert client.session.calls[0]["url"] == "https://api.test/api/v1/metrics?refresh=true"

    client = _client({"source": "reddit", "count": 3})
    stat = client.get_metrics("reddit")
    assert stat.source == "reddit"
    assert client.session.calls[0]["url"] == "https://api.test/api/v1/metrics/reddit?refresh=false"
