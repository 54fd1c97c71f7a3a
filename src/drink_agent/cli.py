# src/drink_agent/cli.py
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Any, Dict, List, Optional, get_args

from claude_agent_sdk import ClaudeSDKError

from drink_agent.agent import runners
from drink_agent.config.settings import ConfigError, get_settings
from drink_agent.logging_utils import configure_logging
from drink_agent.tools import registry
from drink_agent.tools.pricing import TOOL_NAME, Currency, DrinkType, IceLevel, Size

logger = logging.getLogger(__name__)

COMMANDS = ("interactive", "pricing", "system-prompt", "multi-turn", "openai", "price")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="drink-agent",
        description="Claude Agent SDK examples with a drink pricing tool.",
    )
    ap.add_argument("-v", "--verbose", action="count", default=0, help="debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("interactive", "ask one question, agent may use Read/Glob/Bash/Grep"),
        ("pricing", "ask one question with the calculate_drink_price tool mounted"),
        ("system-prompt", "same as pricing, with a barista system prompt override"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("question", nargs="?", help="question text (prompted on stdin if omitted)")

    sub.add_parser("multi-turn", help="keep one agent session open until an empty line or 'exit'")

    p = sub.add_parser("openai", help="OpenAI function-calling loop over the same tools")
    p.add_argument("question", nargs="?", help="question text (prompted on stdin if omitted)")

    p = sub.add_parser("price", help="compute a price locally, no LLM involved")
    p.add_argument("-d", "--drink", required=True, choices=get_args(DrinkType))
    p.add_argument("-s", "--size", required=True, choices=get_args(Size))
    p.add_argument("-c", "--currency", choices=get_args(Currency))
    p.add_argument("-i", "--ice", choices=get_args(IceLevel))

    return ap


def _price(args: argparse.Namespace) -> int:
    arguments: Dict[str, Any] = {"drink_type": args.drink, "size": args.size}
    if args.currency:
        arguments["currency"] = args.currency
    if args.ice:
        arguments["ice_level"] = args.ice

    result = registry.invoke(TOOL_NAME, arguments)
    print(result.text_content)
    return 1 if result.is_error else 0


def _openai(question: Optional[str]) -> int:
    # openai 예제는 필요할 때만 import (OPENAI_API_KEY 가 없어도 다른 명령은 동작)
    from drink_agent.agent.simple_tool_agent import run_once

    question = question or input(runners.QUESTION_PROMPT).strip()
    if not question:
        print("No question given.")
        return 1
    print(f"\nAssistant: {run_once(question)}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    if args.command not in COMMANDS:
        ap.error(f"unknown command {args.command!r}")

    try:
        settings = get_settings()
    except ConfigError as e:
        configure_logging(args.verbose)
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    configure_logging(args.verbose, settings.log_level)

    try:
        if args.command == "price":
            return _price(args)
        if args.command == "openai":
            return _openai(args.question)

        print("Starting Claude Agent SDK example...\n")
        if args.command == "interactive":
            return asyncio.run(runners.interactive(settings, args.question))
        if args.command == "pricing":
            return asyncio.run(runners.pricing(settings, args.question))
        if args.command == "system-prompt":
            return asyncio.run(runners.system_prompt(settings, args.question))
        return asyncio.run(runners.multi_turn(settings))
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except ClaudeSDKError as e:
        logger.error("agent SDK error: %s", e)
        print(f"Agent error: {e}", file=sys.stderr)
        return 1
    except (KeyboardInterrupt, EOFError):
        print()
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
