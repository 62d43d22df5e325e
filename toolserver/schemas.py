from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel


class ToolInfo(BaseModel):
    name: str
    description: str
    parameters: Dict[str, Any]


class MetaResponse(BaseModel):
    name: str
    version: str
    tools: List[ToolInfo]


class CallResponse(BaseModel):
    tool: str
    result: Any
