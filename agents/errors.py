class AgentError(Exception):
    """Base class for agent-side errors."""


class OpenAITokenRequiredError(AgentError):
    def __init__(self) -> None:
        super().__init__("must supply an OPENAI_TOKEN")


class LLMError(AgentError):
    """The LLM API call itself failed."""


class NoToolSelectedError(AgentError):
    """The LLM never requested a tool although the task requires data."""


class ExtractionError(AgentError):
    """The final answer could not be turned into the requested structure."""


class ToolParameterError(AgentError, ValueError):
    """Tool arguments from the LLM failed validation."""


class ToolExecutionError(AgentError):
    """A tool failed in a way worth reporting back to the LLM verbatim."""
