"""Configuration loaded once at process start.

Values come from the process environment; an optional .env file fills in
variables the environment does not define. The resulting Config is passed
explicitly to GopherClient / Agent constructors.
"""

import logging
import os
import re
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://data.gopher-ai.com/api"
DEFAULT_TIMEOUT = 60.0
DEFAULT_OPENAI_MODEL = "gpt-5-nano"
DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_UNIT_SECONDS = {"h": 3600.0, "m": 60.0, "s": 1.0, "ms": 0.001}


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Config:
    base_url: str = DEFAULT_BASE_URL
    token: str = ""
    timeout: float = DEFAULT_TIMEOUT
    openai_token: str = ""
    openai_model: str = DEFAULT_OPENAI_MODEL
    openai_base_url: str = DEFAULT_OPENAI_BASE_URL


def parse_duration(value: str) -> float:
    """Parse "60s", "2m", "1m30s", "500ms" or a plain number of seconds."""
    s = value.strip()
    if not s:
        raise ConfigError("empty duration")
    try:
        return float(s)
    except ValueError:
        pass
    pos = 0
    total = 0.0
    for m in _DURATION_PART.finditer(s):
        if m.start() != pos:
            break
        total += float(m.group(1)) * _UNIT_SECONDS[m.group(2)]
        pos = m.end()
    if pos != len(s) or pos == 0:
        raise ConfigError(f"invalid duration {value!r}")
    return total


def load_config(
    env_file: Optional[str] = ".env", environ: Optional[Mapping[str, str]] = None
) -> Config:
    """Build a Config from the environment, with `env_file` as fallback."""
    env = dict(os.environ if environ is None else environ)
    if env_file:
        if os.path.exists(env_file):
            for k, v in dotenv_values(env_file).items():
                if v is not None:
                    env.setdefault(k, v)
        else:
            logger.debug("No %s file found, using environment only", env_file)

    raw_timeout = env.get("GOPHER_CLIENT_TIMEOUT", "")
    timeout = parse_duration(raw_timeout) if raw_timeout.strip() else DEFAULT_TIMEOUT
    if timeout <= 0:
        raise ConfigError(f"GOPHER_CLIENT_TIMEOUT must be positive, got {raw_timeout!r}")

    return Config(
        base_url=env.get("GOPHER_CLIENT_URL", DEFAULT_BASE_URL),
        token=env.get("GOPHER_CLIENT_TOKEN", ""),
        timeout=timeout,
        openai_token=env.get("OPENAI_TOKEN", ""),
        openai_model=env.get("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
        openai_base_url=env.get("OPENAI_BASE_URL") or DEFAULT_OPENAI_BASE_URL,
    )


__all__ = ["Config", "ConfigError", "load_config", "parse_duration"]
