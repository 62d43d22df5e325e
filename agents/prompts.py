"""Prompt templates for the agent, loaded from agents/prompts.json.

`PromptStore` looks prompts up by id and renders them with Jinja2. The file
ships inside the `agents` package; a store whose file is missing or unreadable
fails at construction instead of failing later on the first render.

`AGENT_PROMPTS` lists the ids the agent renders together with the variables it
passes to each. `PromptStore.contract_errors()` reports where a prompts file
does not serve that contract.
"""

import json
import os
from typing import Any, Callable, Dict, List, Optional, Tuple

from jinja2 import Environment, StrictUndefined, TemplateError, Undefined

DEFAULT_PROMPTS_PATH = os.path.join(os.path.dirname(__file__), "prompts.json")

DATA_COLLECTION_PROMPT = "pr-001"
TWITTER_QUERY_PROMPT = "pr-002"
PROMPT_SUFFIX_PROMPT = "pr-003"
FINAL_PROMPT = "pr-004"
EXTRACTION_PROMPT = "pr-005"

# id -> variables Agent passes when rendering it
AGENT_PROMPTS: Dict[str, Tuple[str, ...]] = {
    DATA_COLLECTION_PROMPT: ("tools", "since", "sample_min", "sample_max"),
    TWITTER_QUERY_PROMPT: ("since",),
    PROMPT_SUFFIX_PROMPT: ("lookback_days",),
    FINAL_PROMPT: (),
    EXTRACTION_PROMPT: ("schema",),
}


def _is_str_list(v: Any) -> bool:
    return isinstance(v, list) and all(isinstance(x, str) for x in v)


def _is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


# variable -> (check, description) applied to `example` values
EXAMPLE_TYPES: Dict[str, Tuple[Callable[[Any], bool], str]] = {
    "tools": (_is_str_list, "a list of strings"),
    "since": (lambda v: isinstance(v, str), "a string"),
    "lookback_days": (_is_int, "an integer"),
    "sample_min": (_is_int, "an integer"),
    "sample_max": (_is_int, "an integer"),
    "schema": (lambda v: isinstance(v, (str, dict)), "a string or object"),
}


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "0") not in ("0", "", "false", "False")


def _make_env(strict: bool = False) -> Environment:
    return Environment(
        undefined=StrictUndefined if strict else Undefined, keep_trailing_newline=True
    )


class PromptStore:
    def __init__(
        self,
        path: Optional[str] = None,
        strict: Optional[bool] = None,
        validate_schema: Optional[bool] = None,
    ):
        self.path = path or DEFAULT_PROMPTS_PATH
        # constructor args win over PROMPTS_STRICT / PROMPTS_VALIDATE_SCHEMA
        self.strict = _env_flag("PROMPTS_STRICT") if strict is None else bool(strict)
        self.validate_schema = (
            _env_flag("PROMPTS_VALIDATE_SCHEMA")
            if validate_schema is None
            else bool(validate_schema)
        )
        self.env = _make_env(self.strict)
        self._load()

    def _load(self) -> None:
        # OSError (missing file) and ValueError (bad JSON) propagate
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict) or not isinstance(data.get("prompts", []), list):
            raise ValueError(f"{self.path}: expected an object with a 'prompts' list")
        self._prompt_list: List[Dict[str, Any]] = data.get("prompts", [])
        self._prompts = {p.get("id"): p for p in self._prompt_list if isinstance(p, dict)}
        if self.validate_schema:
            problems = self.problems()
            if problems:
                raise ValueError("; ".join(problems))

    def list_prompts(self) -> List[str]:
        return list(self._prompts.keys())

    def get(self, prompt_id: str) -> Optional[Dict[str, Any]]:
        return self._prompts.get(prompt_id)

    def render(self, prompt_id: str, variables: Optional[Dict[str, Any]] = None) -> str:
        p = self.get(prompt_id)
        if not p:
            raise KeyError(f"prompt {prompt_id} not found")
        template = self.env.from_string(p.get("prompt_template", ""))
        # UndefinedError in strict mode when a variable is missing
        return str(template.render(**(variables or {})))

    def problems(self) -> List[str]:
        """Check every prompt's shape and example; return the problems found.

        The example must supply each declared variable, known variables must
        have the types the agent passes, and the template must render with
        the example.
        """
        found: List[str] = []
        for p in self._prompt_list:
            found.extend(_prompt_problems(p))
        return found

    def contract_errors(self) -> Dict[str, List[str]]:
        """Agent prompt ids this file cannot serve, mapped to what is wrong.

        A missing id maps to ["missing"]; otherwise to the agent variables
        the prompt does not declare.
        """
        errors: Dict[str, List[str]] = {}
        for pid, needed in AGENT_PROMPTS.items():
            p = self.get(pid)
            if p is None:
                errors[pid] = ["missing"]
                continue
            declared = set(p.get("variables") or [])
            undeclared = [v for v in needed if v not in declared]
            if undeclared:
                errors[pid] = undeclared
        return errors


def _prompt_problems(p: Any) -> List[str]:
    if not isinstance(p, dict):
        return [f"prompt entry is not an object: {p!r}"]
    pid = p.get("id")
    if not pid or not isinstance(pid, str):
        return [f"Prompt has invalid or missing id: {pid}"]
    tpl = p.get("prompt_template")
    if not tpl or not isinstance(tpl, str):
        return [f"Prompt {pid} missing or invalid prompt_template"]
    declared = p.get("variables", [])
    if not _is_str_list(declared):
        return [f"Prompt {pid} variables must be a list of strings"]
    tags = p.get("tags")
    if tags is not None and not _is_str_list(tags):
        return [f"Prompt {pid} tags must be a list of strings"]

    example = p.get("example") or {}
    missing = sorted(set(declared) - set(example))
    if missing:
        return [f"Prompt {pid} example missing variables: {missing}"]

    found = []
    for name in declared:
        check, what = EXAMPLE_TYPES.get(name, (None, ""))
        if check is not None and not check(example[name]):
            found.append(f"Prompt {pid} example {name} must be {what}")
    if found:
        return found
    try:
        _make_env().from_string(tpl).render(**example)
    except (TemplateError, TypeError) as exc:
        found.append(f"Prompt {pid} example failed to render: {exc}")
    return found


def set_default_promptstore(
    path: Optional[str] = None,
    strict: Optional[bool] = None,
    validate_schema: Optional[bool] = None,
) -> "PromptStore":
    """Replace the module-level `ps` used by agents without their own store."""
    global ps
    ps = PromptStore(path=path, strict=strict, validate_schema=validate_schema)
    return ps


ps = set_default_promptstore()
