"""FastAPI app exposing the agent tools over HTTP.

  GET  /health
  GET  /meta
  POST /call/{tool_name}   body: the tool's JSON parameters

The job client is built once from the environment; tests override the
`get_client` dependency.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional

from fastapi import Body, Depends, FastAPI, HTTPException

from agents.errors import ToolExecutionError, ToolParameterError
from agents.tools import Tool
from agents.twitter_search import TwitterSearch
from agents.web_search import WebSearch
from gopher_client.client import GopherClient
from gopher_client.errors import GopherError, is_timeout_error

from .schemas import CallResponse, MetaResponse, ToolInfo

logger = logging.getLogger(__name__)

SERVER_NAME = "gopher_search"
SERVER_VERSION = "0.1"

app = FastAPI()


@lru_cache(maxsize=1)
def get_client() -> GopherClient:
    return GopherClient.from_env()


def get_tools(client: GopherClient = Depends(get_client)) -> Dict[str, Tool]:
    tools: List[Tool] = [WebSearch(client), TwitterSearch(client)]
    return {t.name: t for t in tools}


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/meta")
def meta(tools: Dict[str, Tool] = Depends(get_tools)) -> MetaResponse:
    return MetaResponse(
        name=SERVER_NAME,
        version=SERVER_VERSION,
        tools=[
            ToolInfo(name=t.name, description=t.description, parameters=t.parameters())
            for t in tools.values()
        ],
    )


@app.post("/call/{tool_name}")
def call(
    tool_name: str,
    params: Optional[Dict[str, Any]] = Body(default=None),
    tools: Dict[str, Tool] = Depends(get_tools),
) -> CallResponse:
    tool = tools.get(tool_name)
    if tool is None:
        raise HTTPException(status_code=404, detail=f"unknown tool {tool_name}")
    try:
        raw = tool.execute(params or {})
    except ToolParameterError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except (ToolExecutionError, GopherError) as e:
        logger.warning("Tool %s failed: %s", tool_name, e)
        cause = e.__cause__ if isinstance(e, ToolExecutionError) else e
        status = 504 if is_timeout_error(cause) else 502
        raise HTTPException(status_code=status, detail=str(e))
    return CallResponse(tool=tool_name, result=json.loads(raw))
