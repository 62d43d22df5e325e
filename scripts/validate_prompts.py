"""Check prompt files before the agent renders them.

Usage:
  python -m scripts.validate_prompts [--paths PATH [PATH ...]] [--agent | --no-agent]
                                     [--strict] [--no-validate] [--autofix] [--report-json FILE]

Without --paths the packaged agents/prompts.json is checked. --agent also
requires the prompts the agent renders (pr-001..pr-005) with the variables it
passes; it defaults to on for the packaged file and off for other paths.

Exit code 0 when every file passes, 2 otherwise.
"""
import argparse
import json
import sys
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from agents.prompts import DEFAULT_PROMPTS_PATH, EXAMPLE_TYPES, PromptStore


def _as_int(v: Any) -> Any:
    if isinstance(v, str) and v.strip().isdigit():
        return int(v)
    return v


def _as_list(v: Any) -> Any:
    if isinstance(v, str) and v.strip().startswith("["):
        try:
            parsed = json.loads(v)
        except ValueError:
            # left for validation to report
            return v
        if isinstance(parsed, list):
            return parsed
    return v


# how a mistyped example value is repaired, keyed by the type it should have
_REPAIRS = {"an integer": _as_int, "a list of strings": _as_list}


@dataclass
class FileReport:
    path: str
    ok: bool = True
    error: str = ""
    fixed: List[str] = field(default_factory=list)
    agent_contract: Dict[str, List[str]] = field(default_factory=dict)

    def fail(self, error: str) -> "FileReport":
        self.ok = False
        self.error = error
        return self


def autofix(path: Path) -> List[str]:
    """Repair example values stored as strings; return "id.variable" per fix."""
    data = json.loads(path.read_text(encoding="utf-8"))
    fixed = []
    for p in data.get("prompts", []) if isinstance(data, dict) else []:
        example = p.get("example")
        if not isinstance(example, dict):
            continue
        for name, value in example.items():
            repair = _REPAIRS.get(EXAMPLE_TYPES.get(name, (None, ""))[1])
            if repair is None:
                continue
            new = repair(value)
            if new is not value:
                example[name] = new
                fixed.append(f"{p.get('id')}.{name}")
    if fixed:
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return fixed


def check_file(
    path: Path,
    strict: bool = False,
    validate: bool = True,
    fix: bool = False,
    agent: Optional[bool] = None,
) -> FileReport:
    report = FileReport(path=str(path))
    if not path.exists():
        return report.fail("file not found")
    if fix:
        try:
            report.fixed = autofix(path)
        except (OSError, ValueError) as e:
            return report.fail(f"autofix failed: {e}")
    try:
        store = PromptStore(path=str(path), strict=strict, validate_schema=validate)
    except (OSError, ValueError) as e:
        return report.fail(str(e))

    if agent is None:
        agent = path.resolve() == Path(DEFAULT_PROMPTS_PATH).resolve()
    if agent:
        report.agent_contract = store.contract_errors()
        if report.agent_contract:
            detail = ", ".join(f"{pid}: {', '.join(v)}" for pid, v in report.agent_contract.items())
            report.fail(f"agent prompts not served ({detail})")
    return report


def main(argv=None):
    parser = argparse.ArgumentParser(description="Validate agent prompt files")
    parser.add_argument("--paths", nargs="*", help=f"Prompt files (default: {DEFAULT_PROMPTS_PATH})")
    parser.add_argument("--agent", dest="agent", action="store_true", default=None,
                        help="Require the prompts the agent renders")
    parser.add_argument("--no-agent", dest="agent", action="store_false",
                        help="Skip the agent prompt check")
    parser.add_argument("--strict", action="store_true", help="Use strict Jinja rendering")
    parser.add_argument("--no-validate", dest="validate", action="store_false",
                        help="Skip per-prompt example validation")
    parser.add_argument("--autofix", action="store_true",
                        help="Coerce example values stored as strings before checking")
    parser.add_argument("--report-json", help="Write the per-file results to this file")
    args = parser.parse_args(argv)

    reports = [
        check_file(Path(p), strict=args.strict, validate=args.validate, fix=args.autofix, agent=args.agent)
        for p in (args.paths or [DEFAULT_PROMPTS_PATH])
    ]

    if args.report_json:
        try:
            Path(args.report_json).write_text(
                json.dumps([asdict(r) for r in reports], indent=2), encoding="utf-8"
            )
        except OSError as e:
            print(f"Failed to write report: {e}", file=sys.stderr)

    for r in reports:
        if r.fixed:
            print(f"{r.path}: fixed {', '.join(r.fixed)}")
    failed = [r for r in reports if not r.ok]
    for r in failed:
        print(f"Validation failed for {r.path}: {r.error}", file=sys.stderr)
    if failed:
        sys.exit(2)
    print(f"{len(reports)} prompt file(s) OK")


if __name__ == "__main__":
    main()
