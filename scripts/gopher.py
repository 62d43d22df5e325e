#!/usr/bin/env python3
"""Command-line access to the job API and the agent.

Usage:
  python -m scripts.gopher twitter QUERY [QUERY ...] [--timeout SECONDS]
  python -m scripts.gopher web URL [--timeout SECONDS]
  python -m scripts.gopher query TEXT [--iterations N]

Configuration comes from GOPHER_CLIENT_* / OPENAI_* environment variables or a
.env file (see --env-file). Results are printed as JSON on stdout.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from agents.agent import DEFAULT_ITERATIONS, Agent
from agents.twitter_search import TwitterSearch
from gopher_client.client import GopherClient
from gopher_client.config import ConfigError, load_config
from gopher_client.errors import GopherError
from agents.errors import AgentError

logger = logging.getLogger("gopher")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="gopher", description=__doc__.splitlines()[0])
    p.add_argument("--env-file", default=".env", help="Optional .env file (default: .env)")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    tw = sub.add_parser("twitter", help="Search Twitter; several queries run concurrently")
    tw.add_argument("queries", nargs="+")
    tw.add_argument("--timeout", type=float, default=None, help="Job timeout in seconds")

    web = sub.add_parser("web", help="Scrape one web page")
    web.add_argument("url")
    web.add_argument("--timeout", type=float, default=None, help="Job timeout in seconds")

    q = sub.add_parser("query", help="Run the sentiment agent on a natural-language query")
    q.add_argument("text")
    q.add_argument("--iterations", type=int, default=DEFAULT_ITERATIONS)
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = load_config(env_file=args.env_file)
    except ConfigError as e:
        print(f"configuration error: {e}", file=sys.stderr)
        return 2

    client = GopherClient.from_config(config)
    try:
        if args.command == "twitter":
            if len(args.queries) == 1:
                docs = client.search_twitter(args.queries[0], timeout=args.timeout)
                out = json.dumps([d.to_dict() for d in docs], indent=2)
            else:
                out = TwitterSearch(client, timeout=args.timeout).execute({"queries": args.queries})
                out = json.dumps(json.loads(out), indent=2)
        elif args.command == "web":
            docs = client.scrape_web(args.url, timeout=args.timeout)
            out = json.dumps([d.to_dict() for d in docs], indent=2)
        else:
            agent = Agent.from_config(config, client=client)
            result = agent.query(args.text, iterations=args.iterations)
            out = result.model_dump_json(indent=2)
    except (GopherError, AgentError) as e:
        logger.debug("command %s failed", args.command, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
