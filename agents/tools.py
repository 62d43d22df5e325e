"""Tool interface exposed to the LLM and the query-parameter variants.

LLM tool arguments arrive as loose JSON objects; `parse_search_params` turns
them into either a SingleQuery or a BatchQueries before any job is submitted.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

from gopher_client.context import RunContext

from .errors import ToolParameterError


@dataclass(frozen=True)
class SingleQuery:
    value: str


@dataclass(frozen=True)
class BatchQueries:
    values: Tuple[str, ...]


SearchParams = Union[SingleQuery, BatchQueries]


def parse_search_params(
    params: Dict[str, Any], single_key: str = "query", batch_key: str = "queries"
) -> SearchParams:
    """Validate tool arguments into a SingleQuery or BatchQueries.

    A non-empty `batch_key` list wins; its non-string / blank entries are
    dropped, so it may yield an empty batch. Otherwise `single_key` must be a
    non-empty string.
    """
    batch = params.get(batch_key)
    if isinstance(batch, list) and batch:
        return BatchQueries(tuple(q for q in batch if isinstance(q, str) and q.strip()))
    single = params.get(single_key)
    if isinstance(single, str) and single.strip():
        return SingleQuery(single)
    raise ToolParameterError(
        f"expected a non-empty '{single_key}' string or '{batch_key}' array, got {json.dumps(params)}"
    )


class Tool(ABC):
    name: str = ""
    description: str = ""

    @abstractmethod
    def parameters(self) -> Dict[str, Any]:
        """JSON schema of the tool arguments."""

    @abstractmethod
    def execute(self, params: Dict[str, Any], ctx: Optional[RunContext] = None) -> str:
        """Run the tool and return a string result for the conversation."""

    def definition(self) -> Dict[str, Any]:
        """OpenAI function-tool description."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters(),
            },
        }


__all__ = [
    "Tool",
    "SingleQuery",
    "BatchQueries",
    "SearchParams",
    "parse_search_params",
]
