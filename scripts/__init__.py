"""scripts package initializer so the command-line helpers can be run with
`python -m scripts.validate_prompts` and `python -m scripts.gopher`.

Expose the main validator symbol so linters and importers can reference it.
"""


__all__ = ["validate_prompts"]
