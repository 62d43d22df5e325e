import pytest
import requests

from conftest import FakeResponse, make_client
from gopher_client.args import TwitterSearchArguments
from gopher_client.client import GopherClient
from gopher_client.config import Config
from gopher_client.errors import (
    DecodeError,
    HTTPStatusError,
    JobError,
    JobSubmissionError,
    TransportError,
    is_timeout_error,
)
from gopher_client.types import JobStatus, JobType


def test_submit_job_envelope_and_auth():
    client = make_client(lambda m, u, p: {"uuid": "abc", "error": ""})
    resp = client.submit_job(JobType.TWITTER_SEARCH, TwitterSearchArguments(query="btc"))
    assert resp.uuid == "abc"

    call = client.session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://api.test/api/v1/search/live"
    assert call["headers"]["Authorization"] == "Bearer secret"
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["json"] == {"job_type": "twitter-search", "args": {"query": "btc", "max_results": 10}}


def test_no_auth_header_without_token():
    client = GopherClient(base_url="https://api.test/api", session=make_client(lambda m, u, p: {}).session)
    assert "Authorization" not in client._headers(True)


def test_non_2xx_reports_status_and_url():
    client = make_client(lambda m, u, p: FakeResponse(500, text="boom"))
    with pytest.raises(HTTPStatusError) as exc:
        client.submit_job(JobType.WEB_SCRAPE, {"url": "https://example.com"})
    msg = str(exc.value)
    assert "500" in msg
    assert "https://api.test/api/v1/search/live" in msg
    assert "boom" in msg
    assert exc.value.status_code == 500


def test_inline_error_on_2xx_is_submission_error():
    client = make_client(lambda m, u, p: {"uuid": "", "error": "quota exhausted"})
    with pytest.raises(JobSubmissionError, match="quota exhausted"):
        client.submit_job(JobType.TWITTER_SEARCH, {"query": "x"})


def test_null_error_on_submit_is_accepted():
    client = make_client(lambda m, u, p: {"uuid": "j1", "error": None})
    assert client.submit_job(JobType.TWITTER_SEARCH, {"query": "x"}).uuid == "j1"


def test_null_uuid_is_decode_error():
    client = make_client(lambda m, u, p: {"uuid": None, "error": None})
    with pytest.raises(DecodeError, match="no job uuid"):
        client.submit_job(JobType.TWITTER_SEARCH, {"query": "x"})


def test_missing_uuid_is_decode_error():
    client = make_client(lambda m, u, p: {"error": ""})
    with pytest.raises(DecodeError):
        client.submit_job(JobType.TWITTER_SEARCH, {"query": "x"})


def test_malformed_json_is_decode_error():
    client = make_client(lambda m, u, p: FakeResponse(200, text="<html>"))
    with pytest.raises(DecodeError):
        client.submit_job(JobType.TWITTER_SEARCH, {"query": "x"})


def test_transport_error_wraps_cause():
    client = make_client(lambda m, u, p: requests.ConnectionError("refused"))
    with pytest.raises(TransportError) as exc:
        client.submit_job(JobType.TWITTER_SEARCH, {"query": "x"})
    assert "failed to do POST request to https://api.test/api/v1/search/live" in str(exc.value)
    assert not is_timeout_error(exc.value)


def test_transport_timeout_is_classified():
    client = make_client(lambda m, u, p: requests.ReadTimeout("slow"))
    with pytest.raises(TransportError) as exc:
        client.get_job_status("abc")
    assert is_timeout_error(exc.value)


def test_status_aliases_normalized():
    client = make_client(lambda m, u, p: {"status": "done(not saved)"})
    assert client.get_job_status("abc").job_status is JobStatus.DONE_NOT_SAVED
    assert JobStatus.parse("in progress") is JobStatus.IN_PROGRESS
    assert JobStatus.parse("retry error") is JobStatus.RETRY_ERROR
    assert JobStatus.parse("mystery") is None


def test_null_fields_in_status_are_empty():
    client = make_client(lambda m, u, p: {"status": "done", "error": None})
    resp = client.get_job_status("abc")
    assert resp.error == ""
    assert resp.job_status is JobStatus.DONE


def test_run_job_with_null_errors_in_envelopes():
    docs = [{"id": "1", "content": "gm"}]

    def handler(method, url, payload):
        if method == "POST":
            return {"uuid": "j1", "error": None}
        if "/status/" in url:
            return {"status": "done", "error": None}
        return docs

    client = make_client(handler)
    result = client.run_job(JobType.TWITTER_SEARCH, {"query": "x"})
    assert [d.id for d in result] == ["1"]


def test_result_soft_error():
    client = make_client(lambda m, u, p: {"error": "not found"})
    with pytest.raises(JobError, match="not found"):
        client.get_result("abc")


def test_result_must_be_a_list():
    client = make_client(lambda m, u, p: {"documents": []})
    with pytest.raises(DecodeError):
        client.get_result("abc")


def test_from_config():
    cfg = Config(base_url="http://h/api/", token="t", timeout=12.0)
    client = GopherClient.from_config(cfg)
    assert client.base_url == "http://h/api"
    assert client.token == "t"
    assert client.timeout == 12.0
