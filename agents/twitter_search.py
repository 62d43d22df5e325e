"""`search_twitter` tool: single or concurrent batch Twitter searches."""

import json
import logging
from typing import Any, Dict, List, Optional

from gopher_client.args import TwitterSearchArguments
from gopher_client.client import GopherClient
from gopher_client.context import RunContext
from gopher_client.errors import GopherError
from gopher_client.types import Document

from .fanout import aggregate, run_queries
from .tools import BatchQueries, Tool, parse_search_params
from .types import SingleQueryFailure

logger = logging.getLogger(__name__)

QUERY_HELP = (
    "Twitter advanced search query. CRITICAL: Use 'from:username' format with NO SPACE "
    "after 'from:' (e.g., 'from:JamesWynnReal (BTC OR Bitcoin)', NOT 'from: JamesWynnReal'). "
    "Include operators like 'since:YYYY-MM-DD' (typically one day before today), "
    "hashtags (#BTC), and keywords."
)


class TwitterSearch(Tool):
    name = "search_twitter"
    description = (
        "Search Twitter using the provided query or queries. Include operators like "
        "'since:YYYY-MM-DD' (typically one day before today). Defaults to last 1 day if none "
        "provided. You can provide a single 'query' or multiple 'queries' as an array. For "
        "multiple queries, they will be executed concurrently. CRITICAL: Use 'from:username' "
        "format with NO SPACE after 'from:' (e.g., 'from:JamesWynnReal', NOT "
        "'from: JamesWynnReal'). Randomly sample accounts - do not exhaustively query all "
        "accounts. Use hashtags and keywords like '#BTC OR #ETH OR bitcoin OR ethereum' to "
        "find relevant tweets."
    )

    def __init__(
        self, client: GopherClient, max_results: int = 10, timeout: Optional[float] = None
    ) -> None:
        self.client = client
        self.max_results = max_results
        # per-job timeout; None uses the client default
        self.timeout = timeout

    def parameters(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": QUERY_HELP},
                "queries": {
                    "type": "array",
                    "description": (
                        "Array of Twitter advanced search queries to execute concurrently. "
                        "Each query should follow the same format as 'query'."
                    ),
                    "items": {"type": "string"},
                },
            },
        }

    def _search(self, query: str, ctx: Optional[RunContext]) -> List[Document]:
        args = TwitterSearchArguments(query=query, max_results=self.max_results)
        return self.client.search_twitter_with_args(args, timeout=self.timeout, ctx=ctx)

    def execute(self, params: Dict[str, Any], ctx: Optional[RunContext] = None) -> str:
        parsed = parse_search_params(params)
        if isinstance(parsed, BatchQueries):
            if not parsed.values:
                return "[]"
            results = run_queries(parsed.values, lambda q: self._search(q, ctx))
            return json.dumps(aggregate(results))

        try:
            docs = self._search(parsed.value, ctx)
        except GopherError as exc:
            logger.warning("Twitter search %r failed: %s", parsed.value, exc)
            failure: SingleQueryFailure = {
                "error": True,
                "query": parsed.value,
                "error_msg": str(exc),
                "documents": [],
            }
            return json.dumps(failure)
        return json.dumps([d.to_dict() for d in docs])
