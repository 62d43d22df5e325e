"""Exception hierarchy for the job client.

Every failure the client can surface derives from GopherError so callers
(tools, the agent loop, the tool server) can catch one type and still
distinguish the cases they care about.
"""

from typing import Any, Optional

import requests


class GopherError(Exception):
    """Base class for client errors."""


class TransportError(GopherError):
    """Connection, DNS or TLS failure before a response was received."""

    def __init__(self, method: str, url: str, cause: BaseException) -> None:
        self.method = method
        self.url = url
        self.cause = cause
        super().__init__(f"failed to do {method} request to {url}: {cause}")


class HTTPStatusError(GopherError):
    """Non-2xx response from the API."""

    def __init__(
        self,
        url: str,
        status_code: int,
        body: str,
        request_body: Optional[str] = None,
    ) -> None:
        self.url = url
        self.status_code = status_code
        self.body = body
        self.request_body = request_body
        msg = f"job errored: status code {status_code} during call to {url}"
        if request_body:
            msg += f" with request body {request_body}"
        msg += f". Response body: {body}"
        super().__init__(msg)


class DecodeError(GopherError):
    """Response body could not be parsed into the expected shape."""

    def __init__(self, url: str, body: str, reason: Any = None) -> None:
        self.url = url
        self.body = body
        super().__init__(f"failed to unmarshal {url} response {body!r}: {reason}")


class JobError(GopherError):
    """Soft error reported by the backend inside an otherwise valid response."""

    def __init__(self, message: str, job_id: Optional[str] = None) -> None:
        self.message = message
        self.job_id = job_id
        super().__init__(f"job errored: {message}")


class JobSubmissionError(JobError):
    """The submission envelope came back with an inline error."""

    def __str__(self) -> str:
        return f"job submission failed: {self.message}"


class JobFailedError(JobError):
    """The job reached a terminal failure status (error / retry-error)."""

    def __init__(self, job_id: str, status: str, message: str) -> None:
        super().__init__(message, job_id=job_id)
        self.status = status

    def __str__(self) -> str:
        return f"job {self.job_id} failed with status {self.status}: {self.message}"


class JobTimeoutError(GopherError):
    def __init__(self, job_id: str, timeout: float) -> None:
        self.job_id = job_id
        self.timeout = timeout
        super().__init__(f"job {job_id} timed out after {timeout:g}s")


class ContextCancelledError(GopherError):
    def __init__(self) -> None:
        super().__init__("context cancelled")


class DeadlineExceededError(GopherError):
    def __init__(self) -> None:
        super().__init__("context deadline exceeded")


def is_timeout_error(exc: Optional[BaseException]) -> bool:
    """True when `exc` means "ran out of time" rather than "definitely failed"."""
    if exc is None:
        return False
    if isinstance(exc, (JobTimeoutError, DeadlineExceededError, requests.Timeout)):
        return True
    if isinstance(exc, TransportError):
        return isinstance(exc.cause, requests.Timeout)
    return False


__all__ = [
    "GopherError",
    "TransportError",
    "HTTPStatusError",
    "DecodeError",
    "JobError",
    "JobSubmissionError",
    "JobFailedError",
    "JobTimeoutError",
    "ContextCancelledError",
    "DeadlineExceededError",
    "is_timeout_error",
]
