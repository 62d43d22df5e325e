"""Small agent base helper that centralizes prompt rendering for agents.

Agents can subclass AgentBase to call `self.render_prompt(prompt_id, variables)`
which uses the packaged `agents/prompts.json` store, or the store passed to the agent.
"""

from typing import Any, Dict, Optional

from . import prompts
from .prompts import PromptStore


class AgentBase:
    prompt_store: Optional[PromptStore] = None

    def render_prompt(
        self, prompt_id: str, variables: Optional[Dict[str, Any]] = None
    ) -> str:
        # resolve the module default lazily so set_default_promptstore() takes effect
        store = self.prompt_store or prompts.ps
        return store.render(prompt_id, variables or {})
