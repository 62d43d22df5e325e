"""`search_web` tool: scrape one URL through the job API."""

import json
from typing import Any, Dict, Optional

from gopher_client.client import GopherClient
from gopher_client.context import RunContext
from gopher_client.errors import GopherError, is_timeout_error

from .errors import ToolExecutionError, ToolParameterError
from .tools import Tool


class WebSearch(Tool):
    name = "search_web"
    description = "Web search using the provided url"

    def __init__(self, client: GopherClient) -> None:
        self.client = client

    def parameters(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {"url": {"type": "string", "description": "Web scrape url"}},
            "required": ["url"],
        }

    def execute(self, params: Dict[str, Any], ctx: Optional[RunContext] = None) -> str:
        url = params.get("url")
        if not isinstance(url, str) or not url.strip():
            raise ToolParameterError(f"expected a non-empty 'url' string, got {json.dumps(params)}")
        try:
            docs = self.client.scrape_web(url, ctx=ctx)
        except GopherError as exc:
            if is_timeout_error(exc):
                raise ToolExecutionError(f"web search timed out for URL {url}: {exc}") from exc
            raise
        return json.dumps([d.to_dict() for d in docs])
