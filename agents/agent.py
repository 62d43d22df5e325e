from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence, Type

from pydantic import BaseModel, ValidationError

from gopher_client.client import GopherClient
from gopher_client.config import (
    DEFAULT_OPENAI_BASE_URL,
    DEFAULT_OPENAI_MODEL,
    Config,
    load_config,
)
from gopher_client.context import RunContext
from gopher_client.errors import ContextCancelledError, DeadlineExceededError

from . import prompts
from .agent_base import AgentBase
from .errors import AgentError, NoToolSelectedError, OpenAITokenRequiredError
from .llm import LLM, Message, OpenAILLM, ToolCall
from .prompts import PromptStore
from .tools import Tool
from .twitter_search import TwitterSearch
from .types import Output
from .web_search import WebSearch

logger = logging.getLogger(__name__)

DEFAULT_MODEL = DEFAULT_OPENAI_MODEL
DEFAULT_ITERATIONS = 6
DEFAULT_MAX_ATTEMPTS = 1
EXTRACTION_TIMEOUT = 120.0
DEFAULT_LOOKBACK_DAYS = 1
SAMPLE_MIN = 3
SAMPLE_MAX = 6

# short labels used in the data-collection instructions
TOOL_SUMMARIES = {
    "search_web": "Search and scrape web pages",
    "search_twitter": "Search Twitter for tweets from specific accounts",
}

DEFAULT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "assets": {
            "type": "array",
            "description": (
                "Track the market sentiment of assets, such as Bitcoin, Ethereum, "
                "and other cryptocurrencies."
            ),
            "items": {
                "type": "object",
                "additionalProperties": False,
                "properties": {
                    "asset": {"type": "string", "description": "Asset name"},
                    "reasoning": {
                        "type": "string",
                        "description": "Brief reasoning about the sentiment of the asset",
                    },
                    "sentiment": {
                        "type": "integer",
                        "description": (
                            "Numeric sentiment score from 0-100. Scale: 0 = most bearish, "
                            "50 = neutral, 100 = most bullish. Each asset should have a "
                            "distinct score based on its unique data and sentiment signals."
                        ),
                    },
                },
                "required": ["asset", "reasoning", "sentiment"],
            },
        }
    },
    "required": ["assets"],
}


@dataclass
class QueryOptions:
    """Per-query overrides. None means "use the rendered default prompt"."""

    schema: Optional[Dict[str, Any]] = None
    instructions: Optional[str] = None
    prompt_suffix: Optional[str] = None
    final_prompt: Optional[str] = None
    iterations: int = DEFAULT_ITERATIONS
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    output_model: Type[BaseModel] = Output


class Agent(AgentBase):
    """Runs a query through a bounded tool-calling loop, then extracts a
    structured answer.

    The loop only fails hard on LLM API errors or when the model never selects
    a tool; tool failures are fed back to the model as result strings.
    """

    def __init__(
        self,
        llm: LLM,
        client: GopherClient,
        tools: Optional[Sequence[Tool]] = None,
        prompt_store: Optional[PromptStore] = None,
    ) -> None:
        self.llm = llm
        self.client = client
        self.tools: List[Tool] = (
            list(tools) if tools is not None else [WebSearch(client), TwitterSearch(client)]
        )
        self.prompt_store = prompt_store

    @classmethod
    def new(
        cls,
        client: GopherClient,
        openai_token: str,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_OPENAI_BASE_URL,
        **kwargs: Any,
    ) -> "Agent":
        if not openai_token:
            raise OpenAITokenRequiredError()
        return cls(OpenAILLM(openai_token, model=model, base_url=base_url), client, **kwargs)

    @classmethod
    def from_config(
        cls, config: Config, client: Optional[GopherClient] = None, **kwargs: Any
    ) -> "Agent":
        if client is None:
            client = GopherClient.from_config(config)
        return cls.new(
            client,
            config.openai_token,
            model=config.openai_model,
            base_url=config.openai_base_url,
            **kwargs,
        )

    @classmethod
    def from_env(cls, env_file: Optional[str] = ".env", **kwargs: Any) -> "Agent":
        """Build both the client and the agent from the environment / .env."""
        return cls.from_config(load_config(env_file=env_file), **kwargs)

    # --- prompt composition ---
    def build_prompt(
        self,
        query: str,
        options: Optional[QueryOptions] = None,
        today: Optional[date] = None,
    ) -> str:
        options = options or QueryOptions()
        since = ((today or date.today()) - timedelta(days=DEFAULT_LOOKBACK_DAYS)).isoformat()
        tool_lines = [f"{t.name} - {TOOL_SUMMARIES.get(t.name, t.description)}" for t in self.tools]
        parts = [
            query,
            self.render_prompt(
                prompts.DATA_COLLECTION_PROMPT,
                {
                    "tools": tool_lines,
                    "since": since,
                    "sample_min": SAMPLE_MIN,
                    "sample_max": SAMPLE_MAX,
                },
            ),
        ]
        instructions = options.instructions
        if instructions is None:
            instructions = self.render_prompt(prompts.TWITTER_QUERY_PROMPT, {"since": since})
        if instructions:
            parts.append(instructions)
        suffix = options.prompt_suffix
        if suffix is None:
            suffix = self.render_prompt(
                prompts.PROMPT_SUFFIX_PROMPT, {"lookback_days": DEFAULT_LOOKBACK_DAYS}
            )
        if suffix:
            parts.append(suffix)
        return "\n\n".join(p.strip("\n") for p in parts)

    # --- query ---
    def query(
        self,
        query: str,
        ctx: Optional[RunContext] = None,
        options: Optional[QueryOptions] = None,
        **overrides: Any,
    ) -> BaseModel:
        """Run `query` and return the extracted structured output.

        `overrides` are QueryOptions fields, applied on top of `options`.
        """
        ctx = ctx if ctx is not None else RunContext.background()
        options = replace(options or QueryOptions(), **overrides)

        messages: List[Message] = [{"role": "user", "content": self.build_prompt(query, options)}]
        executed = self._tool_loop(messages, options, ctx)
        logger.info("Tool loop finished after %d tool executions", executed)

        final_prompt = options.final_prompt
        if final_prompt is None:
            final_prompt = self.render_prompt(prompts.FINAL_PROMPT)
        messages.append({"role": "user", "content": final_prompt})
        ctx.check()
        reply = self.llm.complete(messages, ctx=ctx)
        messages.append(reply.to_message())

        return self._extract(reply.content, options, ctx)

    def _tool_loop(self, messages: List[Message], options: QueryOptions, ctx: RunContext) -> int:
        definitions = [t.definition() for t in self.tools]
        executed = 0
        for iteration in range(options.iterations):
            ctx.check()
            reply = None
            for attempt in range(max(1, options.max_attempts)):
                reply = self.llm.complete(messages, tools=definitions, ctx=ctx)
                if reply.tool_calls:
                    break
                logger.debug(
                    "Iteration %d attempt %d: no tool selected", iteration + 1, attempt + 1
                )
            if reply is None or not reply.tool_calls:
                if executed == 0:
                    raise NoToolSelectedError(
                        "LLM did not select any tools. This task requires using "
                        + " and ".join(t.name for t in self.tools)
                        + " tools to gather data"
                    )
                if reply is not None:
                    messages.append(reply.to_message())
                break

            messages.append(reply.to_message())
            for call in reply.tool_calls:
                result = self._run_tool(call, ctx)
                messages.append({"role": "tool", "tool_call_id": call.id, "content": result})
                executed += 1
        return executed

    def _run_tool(self, call: ToolCall, ctx: RunContext) -> str:
        tool = next((t for t in self.tools if t.name == call.name), None)
        if tool is None:
            logger.warning("LLM requested unknown tool %r", call.name)
            return f"error: unknown tool {call.name}"
        try:
            return tool.execute(call.arguments(), ctx=ctx)
        except (ContextCancelledError, DeadlineExceededError):
            raise
        except Exception as exc:
            logger.warning("Tool %s failed: %s", call.name, exc)
            return f"error: {exc}"

    def _extract(self, answer: str, options: QueryOptions, ctx: RunContext) -> BaseModel:
        schema = options.schema if options.schema is not None else DEFAULT_SCHEMA
        model = options.output_model
        data: Any = None
        messages: List[Message] = [
            {
                "role": "system",
                "content": self.render_prompt(
                    prompts.EXTRACTION_PROMPT, {"schema": json.dumps(schema)}
                ),
            },
            {"role": "user", "content": answer},
        ]
        try:
            with ctx.with_timeout(EXTRACTION_TIMEOUT) as ectx:
                data = self.llm.extract(messages, schema, ctx=ectx)
            return model.model_validate(data)
        except (AgentError, ContextCancelledError, DeadlineExceededError, ValidationError) as exc:
            if ctx.cancelled:
                raise
            logger.error("Extraction error: %s", exc)
        from_partial = getattr(model, "from_partial", None)
        if from_partial is not None:
            return from_partial(data)
        return model.model_construct()


__all__ = [
    "Agent",
    "QueryOptions",
    "DEFAULT_SCHEMA",
    "DEFAULT_MODEL",
    "DEFAULT_ITERATIONS",
    "DEFAULT_MAX_ATTEMPTS",
    "EXTRACTION_TIMEOUT",
]
