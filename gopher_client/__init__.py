# Client package for the gopher data-collection API
from .client import GopherClient
from .config import Config, ConfigError, load_config
from .context import RunContext
from .errors import (
    ContextCancelledError,
    DeadlineExceededError,
    DecodeError,
    GopherError,
    HTTPStatusError,
    JobError,
    JobFailedError,
    JobSubmissionError,
    JobTimeoutError,
    TransportError,
    is_timeout_error,
)
from .types import Document, JobStatus, JobType

__all__ = [
    "GopherClient",
    "Config",
    "ConfigError",
    "load_config",
    "RunContext",
    "Document",
    "JobStatus",
    "JobType",
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
