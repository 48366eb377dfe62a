"""
cors_demo/client/cli.py

Console front-end for the demo client.

Runs the named actions in order against the policy server and prints each
result the way the browser page shows it.

Usage:
    python -m cors_demo.client                     # every action
    python -m cors_demo.client login protected
    python -m cors_demo.client restricted --origin http://evil.example
    python -m cors_demo.client --list
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from cors_demo.app.config import get_settings
from cors_demo.client.actions import ACTIONS
from cors_demo.client.dispatcher import Dispatcher
from cors_demo.client.state import Failure, render


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="python -m cors_demo.client",
        description="Trigger each cross-origin demo case and show the outcome.",
    )
    parser.add_argument(
        "actions",
        nargs="*",
        metavar="ACTION",
        help=f"actions to run in order (default: all). Choices: {', '.join(ACTIONS)}, reset",
    )
    parser.add_argument("--base-url", default=settings.API_BASE_URL, help="policy server address")
    parser.add_argument(
        "--origin",
        default=settings.CLIENT_ORIGIN,
        help="origin of the simulated page; '' behaves like curl (no Origin header)",
    )
    parser.add_argument("--list", action="store_true", help="list the actions and exit")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    unknown = [n for n in args.actions if n not in ACTIONS and n != "reset"]
    if unknown:
        parser.error(f"unknown action(s): {', '.join(unknown)}")

    if args.list:
        for action in ACTIONS.values():
            print(f"{action.name:<16} {action.method:<5} {action.path:<20} {action.label} ({action.description})")
        return 0

    client = Dispatcher(base_url=args.base_url, origin=args.origin)
    failures = 0
    for name in args.actions or list(ACTIONS):
        if name == "reset":
            client.reset()
            print("== reset")
            continue
        action = ACTIONS[name]
        print(f"== {action.label}  ({action.method} {action.path})")
        state = client.dispatch(action)
        print(render(state))
        if isinstance(state, Failure):
            failures += 1
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
