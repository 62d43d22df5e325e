# Agents package: LLM orchestration on top of gopher_client
from .agent import Agent, QueryOptions, DEFAULT_SCHEMA
from .agent_base import AgentBase
from .llm import LLM, LLMReply, OpenAILLM, ToolCall
from .prompts import PromptStore, ps
from .tools import Tool
from .twitter_search import TwitterSearch
from .types import AssetSentiment, Output
from .web_search import WebSearch

__all__ = [
    "Agent",
    "QueryOptions",
    "DEFAULT_SCHEMA",
    "AgentBase",
    "LLM",
    "LLMReply",
    "OpenAILLM",
    "ToolCall",
    "PromptStore",
    "ps",
    "Tool",
    "TwitterSearch",
    "WebSearch",
    "AssetSentiment",
    "Output",
]
