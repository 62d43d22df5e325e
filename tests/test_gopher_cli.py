import json

import pytest

from conftest import FakeBackend, FakeLLM, make_client, tool_reply
from agents.llm import LLMReply
from scripts import gopher


@pytest.fixture
def fake_env(monkeypatch, tmp_path):
    backend = FakeBackend(results={"from:a": [{"id": "1"}], "https://example.com": [{"id": "page"}]})
    client = make_client(backend)
    monkeypatch.setattr(gopher.GopherClient, "from_config", classmethod(lambda cls, cfg: client))
    monkeypatch.setenv("GOPHER_CLIENT_TOKEN", "t")
    monkeypatch.chdir(tmp_path)
    return client


def test_twitter_single(fake_env, capsys):
    assert gopher.main(["twitter", "from:a"]) == 0
    assert json.loads(capsys.readouterr().out) == [{"id": "1"}]


def test_twitter_batch(fake_env, capsys):
    assert gopher.main(["twitter", "from:a", "from:b"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["total_queries"] == 2
    assert out["successful_queries"] == 2


def test_web(fake_env, capsys):
    assert gopher.main(["web", "https://example.com"]) == 0
    assert json.loads(capsys.readouterr().out) == [{"id": "page"}]


def test_query_uses_agent(fake_env, capsys, monkeypatch):
    llm = FakeLLM(
        replies=[tool_reply("search_twitter", {"query": "from:a"}), LLMReply(content="final")],
        extracted={"assets": [{"asset": "BTC", "reasoning": "r", "sentiment": 55}]},
    )
    monkeypatch.setattr(
        gopher.Agent,
        "from_config",
        classmethod(lambda cls, cfg, client=None: gopher.Agent(llm, client)),
    )
    assert gopher.main(["query", "rate BTC", "--iterations", "1"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["assets"][0]["sentiment"] == 55


def test_error_exit_code(fake_env, capsys):
    fake_env.session.handler = lambda m, u, p: {"uuid": "", "error": "no credits"}
    assert gopher.main(["web", "https://example.com"]) == 1
    assert "no credits" in capsys.readouterr().err


def test_bad_timeout_config(monkeypatch, tmp_path, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GOPHER_CLIENT_TIMEOUT", "soon")
    assert gopher.main(["web", "https://example.com"]) == 2


def test_twitter_batch_forwards_timeout(fake_env, capsys, monkeypatch):
    seen = []
    original = type(fake_env).run_job

    def recording_run_job(self, job_type, args, timeout=None, ctx=None):
        seen.append(timeout)
        return original(self, job_type, args, timeout=timeout, ctx=ctx)

    monkeypatch.setattr(type(fake_env), "run_job", recording_run_job)
    assert gopher.main(["twitter", "from:a", "from:b", "--timeout", "7"]) == 0
    capsys.readouterr()
    assert seen == [7.0, 7.0]
