"""LLM abstraction used by the agent loop, plus an OpenAI-backed implementation.

Messages use the OpenAI chat format (role/content/tool_calls/tool_call_id) so a
conversation can be handed to any OpenAI-compatible endpoint unchanged.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from openai import OpenAI, OpenAIError

from gopher_client.config import DEFAULT_OPENAI_BASE_URL, DEFAULT_OPENAI_MODEL
from gopher_client.context import RunContext

from .errors import ExtractionError, LLMError, ToolParameterError

logger = logging.getLogger(__name__)

Message = Dict[str, Any]

EXTRACT_FUNCTION = "json"


@dataclass
class ToolCall:
    id: str
    name: str
    raw_arguments: str = "{}"

    def arguments(self) -> Dict[str, Any]:
        if not self.raw_arguments or not self.raw_arguments.strip():
            return {}
        try:
            parsed = json.loads(self.raw_arguments)
        except ValueError as exc:
            raise ToolParameterError(f"invalid JSON arguments for {self.name}: {exc}") from exc
        if not isinstance(parsed, dict):
            raise ToolParameterError(f"arguments for {self.name} must be a JSON object")
        return parsed


@dataclass
class LLMReply:
    content: str = ""
    tool_calls: List[ToolCall] = field(default_factory=list)

    def to_message(self) -> Message:
        msg: Message = {"role": "assistant", "content": self.content}
        if self.tool_calls:
            msg["tool_calls"] = [
                {
                    "id": c.id,
                    "type": "function",
                    "function": {"name": c.name, "arguments": c.raw_arguments},
                }
                for c in self.tool_calls
            ]
        return msg


class LLM(ABC):
    @abstractmethod
    def complete(
        self,
        messages: List[Message],
        tools: Optional[List[Dict[str, Any]]] = None,
        ctx: Optional[RunContext] = None,
    ) -> LLMReply:
        """One chat completion; may request tool calls when `tools` is given."""

    @abstractmethod
    def extract(
        self,
        messages: List[Message],
        schema: Dict[str, Any],
        ctx: Optional[RunContext] = None,
    ) -> Dict[str, Any]:
        """Return a JSON object conforming to `schema` built from `messages`."""


def _loads_object(text: str) -> Dict[str, Any]:
    s = text.strip()
    # tolerate ```json fences around the object
    if s.startswith("```"):
        s = s.strip("`")
        if s.lower().startswith("json"):
            s = s[4:]
    data = json.loads(s)
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")
    return data


class OpenAILLM(LLM):
    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_OPENAI_MODEL,
        base_url: str = DEFAULT_OPENAI_BASE_URL,
        client: Optional[Any] = None,
    ) -> None:
        self.model = model
        self.client = client if client is not None else OpenAI(api_key=api_key, base_url=base_url)

    def _create(self, ctx: Optional[RunContext], **kwargs: Any) -> Any:
        if ctx is not None:
            ctx.check()
            remaining = ctx.remaining()
            if remaining is not None:
                kwargs["timeout"] = remaining
        try:
            return self.client.chat.completions.create(model=self.model, **kwargs)
        except OpenAIError as exc:
            raise LLMError(f"LLM request failed: {exc}") from exc

    @staticmethod
    def _reply(response: Any) -> LLMReply:
        msg = response.choices[0].message
        calls = [
            ToolCall(id=c.id, name=c.function.name, raw_arguments=c.function.arguments or "{}")
            for c in (msg.tool_calls or [])
        ]
        return LLMReply(content=msg.content or "", tool_calls=calls)

    def complete(
        self,
        messages: List[Message],
        tools: Optional[List[Dict[str, Any]]] = None,
        ctx: Optional[RunContext] = None,
    ) -> LLMReply:
        kwargs: Dict[str, Any] = {"messages": messages}
        if tools:
            kwargs["tools"] = tools
            kwargs["tool_choice"] = "auto"
        return self._reply(self._create(ctx, **kwargs))

    def extract(
        self,
        messages: List[Message],
        schema: Dict[str, Any],
        ctx: Optional[RunContext] = None,
    ) -> Dict[str, Any]:
        tool = {
            "type": "function",
            "function": {
                "name": EXTRACT_FUNCTION,
                "description": "Return the structured answer",
                "parameters": schema,
            },
        }
        reply = self._reply(
            self._create(
                ctx,
                messages=messages,
                tools=[tool],
                tool_choice={"type": "function", "function": {"name": EXTRACT_FUNCTION}},
            )
        )
        try:
            if reply.tool_calls:
                return reply.tool_calls[0].arguments()
            return _loads_object(reply.content)
        except (ToolParameterError, ValueError) as exc:
            raise ExtractionError(f"could not extract structured output: {exc}") from exc


__all__ = ["LLM", "LLMReply", "Message", "OpenAILLM", "ToolCall"]
