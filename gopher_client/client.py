"""Job client and completion poller for the data-collection API.

Every search/scrape job goes through the same single endpoint:

  POST {base}/v1/search/live               -> {"uuid": ..., "error": ...}
  GET  {base}/v1/search/live/status/{uuid} -> {"status": ..., "error": ...}
  GET  {base}/v1/search/live/result/{uuid} -> [Document, ...]

`submit_job` never retries; `wait_for_job_completion` polls on a fixed tick
while an independent overall timeout runs against it.
"""

import json
import logging
import time
from typing import Any, Dict, List, Optional, Tuple

import requests
from pydantic import ValidationError

from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, Config, load_config
from .context import RunContext
from .errors import (
    ContextCancelledError,
    DecodeError,
    HTTPStatusError,
    JobError,
    JobFailedError,
    JobSubmissionError,
    JobTimeoutError,
    TransportError,
    is_timeout_error,
)
from .insights import InsightsMixin
from .sources import SourcesMixin
from .types import Document, JobRequest, JobStatusResponse, JobType, ResultResponse

logger = logging.getLogger(__name__)

JOB_ENDPOINT = "/v1/search/live"
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_REQUEST_TIMEOUT = 30.0
# floor for a request budget so requests never gets a zero/negative timeout
_MIN_BUDGET = 0.001


class GopherClient(SourcesMixin, InsightsMixin):
    """HTTP client for the job API.

    `timeout` is the overall job timeout used by the poller when a call does
    not pass its own; `request_timeout` bounds each individual HTTP request.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = float(timeout)
        self.session = session if session is not None else requests.Session()
        self.poll_interval = float(poll_interval)
        self.request_timeout = float(request_timeout)

    @classmethod
    def from_config(cls, config: Config, **kwargs: Any) -> "GopherClient":
        return cls(
            base_url=config.base_url,
            token=config.token,
            timeout=config.timeout,
            **kwargs,
        )

    @classmethod
    def from_env(cls, env_file: Optional[str] = ".env", **kwargs: Any) -> "GopherClient":
        return cls.from_config(load_config(env_file=env_file), **kwargs)

    # --- low-level transport ---
    def _headers(self, has_body: bool) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if has_body:
            headers["Content-Type"] = "application/json"
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _send(
        self,
        method: str,
        url: str,
        payload: Any = None,
        timeout: Optional[float] = None,
    ) -> Tuple[str, Any]:
        """Perform one request and return (raw body, parsed JSON)."""
        body = json.dumps(payload) if payload is not None else None
        try:
            resp = self.session.request(
                method,
                url,
                data=body,
                headers=self._headers(body is not None),
                timeout=timeout if timeout is not None else self.request_timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(method, url, exc) from exc

        text = resp.text or ""
        if resp.status_code < 200 or resp.status_code >= 300:
            raise HTTPStatusError(url, resp.status_code, text, request_body=body)

        try:
            return text, json.loads(text)
        except ValueError as exc:
            raise DecodeError(url, text, exc) from exc

    @staticmethod
    def _soft_error(data: Any) -> str:
        if isinstance(data, dict):
            err = data.get("error")
            if isinstance(err, str):
                return err
        return ""

    def _call(
        self,
        method: str,
        path: str,
        payload: Any = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Request + soft-error check, for endpoints that answer immediately."""
        url = self.base_url + path
        _, data = self._send(method, url, payload, timeout=timeout)
        err = self._soft_error(data)
        if err:
            raise JobError(err)
        return data

    @staticmethod
    def _parse(model: type, url: str, raw: str, data: Any) -> Any:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise DecodeError(url, raw, exc) from exc

    def _budget(self, deadline: Optional[float], ctx: Optional[RunContext]) -> float:
        budget = self.request_timeout
        if deadline is not None:
            budget = min(budget, max(deadline - time.monotonic(), _MIN_BUDGET))
        if ctx is not None:
            rem = ctx.remaining()
            if rem is not None:
                budget = min(budget, max(rem, _MIN_BUDGET))
        return budget

    # --- job API ---
    def submit_job(self, job_type: JobType, args: Any) -> ResultResponse:
        """Submit a job and return its server-assigned uuid.

        Raises JobSubmissionError when the envelope carries an inline error,
        even on HTTP 2xx.
        """
        request = JobRequest.build(job_type, args)
        url = self.base_url + JOB_ENDPOINT
        raw, data = self._send("POST", url, request.to_wire())
        resp: ResultResponse = self._parse(ResultResponse, url, raw, data)
        if resp.error:
            raise JobSubmissionError(resp.error)
        if not resp.uuid:
            raise DecodeError(url, raw, "response carries no job uuid")
        logger.debug("Submitted %s job %s", request.job_type.value, resp.uuid)
        return resp

    def get_job_status(self, job_id: str, timeout: Optional[float] = None) -> JobStatusResponse:
        url = f"{self.base_url}{JOB_ENDPOINT}/status/{job_id}"
        raw, data = self._send("GET", url, timeout=timeout)
        return self._parse(JobStatusResponse, url, raw, data)

    def get_result(self, job_id: str, timeout: Optional[float] = None) -> List[Document]:
        url = f"{self.base_url}{JOB_ENDPOINT}/result/{job_id}"
        raw, data = self._send("GET", url, timeout=timeout)
        err = self._soft_error(data)
        if err:
            raise JobError(err, job_id=job_id)
        if not isinstance(data, list):
            raise DecodeError(url, raw, "expected a JSON array of documents")
        try:
            return [Document.model_validate(d) for d in data]
        except ValidationError as exc:
            raise DecodeError(url, raw, exc) from exc

    def wait_for_job_completion(
        self,
        job_id: str,
        timeout: Optional[float] = None,
        ctx: Optional[RunContext] = None,
    ) -> List[Document]:
        """Poll until the job is terminal and return its documents.

        One control loop waits on whichever comes first: the next poll tick,
        the overall timeout, or cancellation of `ctx`. Status requests are
        bounded by the time left so they cannot outlive the timeout.
        """
        timeout = self.timeout if timeout is None else float(timeout)
        ctx = ctx if ctx is not None else RunContext.background()
        start = time.monotonic()
        deadline = start + timeout
        next_tick = start + self.poll_interval
        polls = 0

        while True:
            wake = min(next_tick, deadline)
            if ctx.deadline is not None:
                wake = min(wake, ctx.deadline)
            if ctx.wait(wake - time.monotonic()):
                raise ContextCancelledError()

            now = time.monotonic()
            if now >= deadline:
                raise JobTimeoutError(job_id, timeout)
            ctx.check()
            if now < next_tick:
                continue
            # ticker semantics: ticks missed while a request was running are dropped
            while next_tick <= now:
                next_tick += self.poll_interval

            polls += 1
            budget = self._budget(deadline, ctx)
            try:
                status = self.get_job_status(job_id, timeout=budget)
            except TransportError as exc:
                if is_timeout_error(exc) and time.monotonic() + _MIN_BUDGET >= deadline:
                    raise JobTimeoutError(job_id, timeout) from exc
                raise

            js = status.job_status
            logger.debug("Job %s poll %d: status=%r", job_id, polls, status.status)
            if js is not None and js.is_done:
                docs = self.get_result(job_id, timeout=self._budget(None, ctx))
                logger.info(
                    "Job %s finished after %d polls with %d documents", job_id, polls, len(docs)
                )
                return docs
            if js is not None and js.is_failed:
                raise JobFailedError(job_id, js.value, status.error)
            if status.error:
                raise JobFailedError(job_id, status.status or "unknown", status.error)

    def run_job(
        self,
        job_type: JobType,
        args: Any,
        timeout: Optional[float] = None,
        ctx: Optional[RunContext] = None,
    ) -> List[Document]:
        """Submit a job and wait for its documents."""
        if ctx is not None:
            ctx.check()
        resp = self.submit_job(job_type, args)
        return self.wait_for_job_completion(resp.uuid, timeout=timeout, ctx=ctx)


__all__ = ["GopherClient", "JOB_ENDPOINT", "DEFAULT_POLL_INTERVAL"]
