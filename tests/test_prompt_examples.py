import json
import os

import pytest

from agents.prompts import PromptStore

PROMPTS_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "agents", "prompts.json"))


def load_prompts():
    with open(PROMPTS_PATH, "r", encoding="utf-8") as f:
        return json.load(f).get("prompts", [])


def test_prompt_examples_contain_declared_variables():
    for p in load_prompts():
        vars_decl = set(p.get("variables", []))
        missing = vars_decl - set(p.get("example", {}).keys())
        assert not missing, f"Prompt {p.get('id')} example missing variables: {missing}"


@pytest.mark.parametrize("strict", [False, True])
def test_prompt_examples_render_with_promptstore(strict):
    store = PromptStore(strict=strict)
    for p in load_prompts():
        out = store.render(p["id"], p.get("example", {}))
        assert isinstance(out, str)
        assert out.strip(), f"Prompt {p['id']} rendered empty"
