import json
import threading
import time

from conftest import FakeBackend, FakeResponse, make_client
from agents.fanout import aggregate, run_queries
from agents.twitter_search import TwitterSearch
from gopher_client.types import Document


def test_run_queries_isolates_failures():
    def search(q):
        if q == "bad":
            raise RuntimeError("nope")
        return [Document(id=q)]

    results = run_queries(["a", "bad", "c"], search)
    assert len(results) == 3
    by_query = {r.query: r for r in results}
    assert by_query["bad"].error is not None
    assert [d.id for d in by_query["a"].documents] == ["a"]
    assert [d.id for d in by_query["c"].documents] == ["c"]


def test_run_queries_is_concurrent():
    barrier = threading.Barrier(3, timeout=2)

    def search(q):
        # all three branches must be in flight at once to pass the barrier
        barrier.wait()
        return []

    start = time.monotonic()
    results = run_queries(["a", "b", "c"], search)
    assert all(r.ok for r in results)
    assert time.monotonic() - start < 2


def test_run_queries_empty():
    assert run_queries([], lambda q: []) == []


def test_aggregate_counts_and_errors():
    from agents.fanout import QueryResult

    results = [
        QueryResult(query="a", documents=[Document(id="1")]),
        QueryResult(query="b", error=RuntimeError("boom")),
    ]
    agg = aggregate(results)
    assert agg["documents"] == [{"id": "1"}]
    assert agg["total_queries"] == 2
    assert agg["successful_queries"] == 1
    assert agg["failed_queries"] == 1
    assert agg["errors"] == [{"error": True, "query": "b", "error_msg": "boom"}]


def test_aggregate_omits_errors_when_all_succeed():
    from agents.fanout import QueryResult

    agg = aggregate([QueryResult(query="a")])
    assert "errors" not in agg
    assert agg["failed_queries"] == 0


def test_three_queries_one_http_500():
    backend = FakeBackend(
        statuses=["in progress", "done"],
        results={"q1": [{"id": "t1"}], "q3": [{"id": "t3"}, {"id": "t4"}]},
        fail_queries={"q2": FakeResponse(500, text="internal error")},
    )
    tool = TwitterSearch(make_client(backend))
    out = json.loads(tool.execute({"queries": ["q1", "q2", "q3"]}))
    assert out["total_queries"] == 3
    assert out["successful_queries"] == 2
    assert out["failed_queries"] == 1
    assert sorted(d["id"] for d in out["documents"]) == ["t1", "t3", "t4"]
    assert len(out["errors"]) == 1
    err = out["errors"][0]
    assert err["query"] == "q2"
    assert err["error"] is True
    assert "500" in err["error_msg"]


def test_single_query_and_batch_of_one_share_the_pipeline():
    docs = [{"id": "t1", "content": "gm"}]
    single = TwitterSearch(make_client(FakeBackend(results={"q": docs})))
    batch = TwitterSearch(make_client(FakeBackend(results={"q": docs})))

    single_out = json.loads(single.execute({"query": "q"}))
    batch_out = json.loads(batch.execute({"queries": ["q"]}))

    assert single_out == docs
    assert batch_out["documents"] == docs
    assert batch_out["total_queries"] == 1
    # both submitted the same job envelope
    assert single.client.session.calls[0]["json"] == batch.client.session.calls[0]["json"]
