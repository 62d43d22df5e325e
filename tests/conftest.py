"""Shared fakes: a scripted HTTP session standing in for requests.Session and
a scripted LLM standing in for the OpenAI-backed one."""

import json
import threading
from typing import Any, Callable, Dict, List, Optional

import pytest

from agents.llm import LLM, LLMReply, ToolCall
from gopher_client.client import GopherClient


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(body)


class FakeSession:
    """Answers `request()` from a handler and records every call."""

    def __init__(self, handler: Callable[[str, str, Optional[Dict[str, Any]]], Any]):
        self.handler = handler
        self.calls: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def request(self, method, url, data=None, headers=None, timeout=None):
        payload = json.loads(data) if data else None
        with self._lock:
            self.calls.append(
                {"method": method, "url": url, "json": payload, "headers": headers or {}, "timeout": timeout}
            )
        resp = self.handler(method, url, payload)
        if isinstance(resp, BaseException):
            raise resp
        if isinstance(resp, FakeResponse):
            return resp
        return FakeResponse(200, resp)

    def paths(self, method=None):
        return [c["url"] for c in self.calls if method is None or c["method"] == method]


class FakeBackend:
    """In-memory job API: each submitted job walks through a scripted list of
    statuses and then serves `results[query]` (or a per-query failure)."""

    def __init__(self, statuses=("done",), results=None, fail_queries=None):
        self.statuses = list(statuses)
        self.results: Dict[str, List[Dict[str, Any]]] = results or {}
        self.fail_queries: Dict[str, FakeResponse] = fail_queries or {}
        self.jobs: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def __call__(self, method, url, payload):
        if method == "POST" and url.endswith("/v1/search/live"):
            query = payload["args"].get("query") or payload["args"].get("url")
            if query in self.fail_queries:
                return self.fail_queries[query]
            with self._lock:
                job_id = f"job-{len(self.jobs) + 1}"
                self.jobs[job_id] = {"query": query, "polls": 0, "payload": payload}
            return {"uuid": job_id, "error": ""}
        if "/status/" in url:
            job = self.jobs[url.rsplit("/", 1)[1]]
            with self._lock:
                idx = min(job["polls"], len(self.statuses) - 1)
                job["polls"] += 1
            return {"status": self.statuses[idx], "error": ""}
        if "/result/" in url:
            job = self.jobs[url.rsplit("/", 1)[1]]
            return self.results.get(job["query"], [])
        return FakeResponse(404, text="not found")


class FakeLLM(LLM):
    """Replays scripted replies; records what it was sent."""

    def __init__(self, replies=None, extracted=None, extract_error=None):
        self.replies: List[LLMReply] = list(replies or [])
        self.extracted = extracted if extracted is not None else {"assets": []}
        self.extract_error = extract_error
        self.complete_calls: List[Dict[str, Any]] = []
        self.extract_calls: List[Dict[str, Any]] = []

    def complete(self, messages, tools=None, ctx=None):
        self.complete_calls.append({"messages": list(messages), "tools": tools, "ctx": ctx})
        if self.replies:
            return self.replies.pop(0)
        return LLMReply(content="done")

    def extract(self, messages, schema, ctx=None):
        self.extract_calls.append({"messages": list(messages), "schema": schema, "ctx": ctx})
        if self.extract_error is not None:
            raise self.extract_error
        return self.extracted


def tool_reply(name: str, arguments: Dict[str, Any], call_id: str = "call_1") -> LLMReply:
    return LLMReply(tool_calls=[ToolCall(id=call_id, name=name, raw_arguments=json.dumps(arguments))])


def make_client(handler, **kwargs) -> GopherClient:
    kwargs.setdefault("poll_interval", 0.01)
    kwargs.setdefault("timeout", 5.0)
    return GopherClient(base_url="https://api.test/api", token="secret", session=FakeSession(handler), **kwargs)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def client(backend):
    return make_client(backend)
