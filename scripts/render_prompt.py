#!/usr/bin/env python3
"""Render an agent prompt by id using agents/prompts.json.

Usage: python scripts/render_prompt.py <prompt_id> [variables.json]
       python scripts/render_prompt.py --list

Without a variables file the prompt's own `example` is used.
"""
import json
import sys

from agents import ps


def main(argv):
    if len(argv) < 2:
        print("Usage: render_prompt.py <prompt_id> [variables.json] | --list")
        return 2
    if argv[1] == "--list":
        for pid in ps.list_prompts():
            print(f"{pid}\t{(ps.get(pid) or {}).get('title', '')}")
        return 0
    pid = argv[1]
    prompt = ps.get(pid)
    if prompt is None:
        print(f"prompt {pid} not found")
        return 3
    variables = prompt.get("example") or {}
    if len(argv) >= 3:
        with open(argv[2], "r", encoding="utf-8") as f:
            variables = json.load(f)
    print(ps.render(pid, variables))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
