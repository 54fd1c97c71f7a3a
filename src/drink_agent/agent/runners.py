# src/drink_agent/agent/runners.py
from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator, Callable, Dict, Optional

from claude_agent_sdk import (
    AssistantMessage,
    ClaudeAgentOptions,
    ClaudeSDKClient,
    ResultMessage,
    query,
)

from drink_agent.agent.messages import RunStats, assistant_text, prompt_stream, tool_uses
from drink_agent.config.settings import Settings
from drink_agent.llm.client import SYSTEM_PROMPT
from drink_agent.tools.server import SERVER_NAME, build_custom_tools_server, qualified_tool_names

logger = logging.getLogger(__name__)

QUESTION_PROMPT = "Enter your question: "
EXIT_WORDS = {"exit", "quit"}

Ask = Callable[[str], str]
Out = Callable[[str], Any]


def build_options(
    settings: Settings,
    *,
    with_pricing: bool = False,
    system_prompt: Optional[str] = None,
) -> ClaudeAgentOptions:
    """
    예제들이 공통으로 쓰는 ClaudeAgentOptions.

    - max_turns: 무한 루프 방지 (비용/시간 제한)
    - allowed_tools: 필요한 tool 만 허용
    - with_pricing: custom-tools MCP server 를 붙이고 calculate_drink_price 를 허용
    """
    allowed = list(settings.allowed_tools)
    kwargs: Dict[str, Any] = {"max_turns": settings.max_turns}

    if with_pricing:
        kwargs["mcp_servers"] = {SERVER_NAME: build_custom_tools_server()}
        allowed += [name for name in qualified_tool_names() if name not in allowed]

    kwargs["allowed_tools"] = allowed

    if system_prompt:
        kwargs["system_prompt"] = system_prompt
    if settings.claude_model:
        kwargs["model"] = settings.claude_model
    if settings.anthropic_api_key:
        kwargs["env"] = {"ANTHROPIC_API_KEY": settings.anthropic_api_key}

    return ClaudeAgentOptions(**kwargs)


async def print_stream(
    messages: AsyncIterator[Any],
    out: Out = print,
    *,
    show_tools: bool = False,
) -> Optional[RunStats]:
    """
    query() / receive_response() 가 흘려보내는 메시지를 출력한다.

    - AssistantMessage: 텍스트 블록만 출력 (show_tools 이면 tool 호출도 표시)
    - ResultMessage: 성공이면 최종 결과 출력, 통계를 돌려준다
    """
    stats: Optional[RunStats] = None
    async for message in messages:
        if isinstance(message, AssistantMessage):
            text = assistant_text(message)
            if text:
                out(f"\nAssistant: {text}")
            if show_tools:
                for name in tool_uses(message):
                    out(f"[tool call] {name}")
        elif isinstance(message, ResultMessage):
            stats = RunStats.from_result(message)
            if message.subtype == "success" and not message.is_error:
                out("\n=== Final result ===")
                out(message.result or "")
            else:
                logger.warning("agent run ended with %s (error=%s)", message.subtype, message.is_error)
                out(f"\n=== Run ended: {message.subtype} ===")
        else:
            logger.debug("skipping %s", type(message).__name__)
    return stats


def _exit_code(stats: Optional[RunStats]) -> int:
    if stats is None:
        logger.warning("agent stream ended without a result message")
        return 1
    return 1 if stats.is_error else 0


async def _resolve_question(question: Optional[str], ask: Ask) -> str:
    if question:
        return question
    # input() 은 blocking 이라 thread 로 넘긴다
    return (await asyncio.to_thread(ask, QUESTION_PROMPT)).strip()


# ---------- 1. 기본 interactive 예제 (내장 tool 만) ----------

async def interactive(
    settings: Settings,
    question: Optional[str] = None,
    *,
    ask: Ask = input,
    out: Out = print,
) -> int:
    question = await _resolve_question(question, ask)
    if not question:
        out("No question given.")
        return 1

    options = build_options(settings)
    stats = await print_stream(
        query(prompt=prompt_stream([question], settings.session_id), options=options),
        out,
    )
    return _exit_code(stats)


# ---------- 2. custom tool (음료 가격) 예제 ----------

async def pricing(
    settings: Settings,
    question: Optional[str] = None,
    *,
    ask: Ask = input,
    out: Out = print,
) -> int:
    # SDK MCP server 의 tool 은 streaming 입력(async generator)일 때만 쓸 수 있다
    question = await _resolve_question(question, ask)
    if not question:
        out("No question given.")
        return 1

    options = build_options(settings, with_pricing=True)
    stats = await print_stream(
        query(prompt=prompt_stream([question], settings.session_id), options=options),
        out,
        show_tools=True,
    )
    if stats is not None:
        out(stats.render())
    return _exit_code(stats)


# ---------- 3. system prompt override 예제 ----------

async def system_prompt(
    settings: Settings,
    question: Optional[str] = None,
    *,
    prompt: str = SYSTEM_PROMPT,
    ask: Ask = input,
    out: Out = print,
) -> int:
    question = await _resolve_question(question, ask)
    if not question:
        out("No question given.")
        return 1

    options = build_options(settings, with_pricing=True, system_prompt=prompt)
    stats = await print_stream(
        query(prompt=prompt_stream([question], settings.session_id), options=options),
        out,
        show_tools=True,
    )
    if stats is not None:
        out(stats.render())
    return _exit_code(stats)


# ---------- 4. multi-turn 예제 (하나의 client 세션 유지) ----------

async def multi_turn(
    settings: Settings,
    *,
    ask: Ask = input,
    out: Out = print,
) -> int:
    options = build_options(settings, with_pricing=True)
    turns = 0
    failed = False

    async with ClaudeSDKClient(options=options) as client:
        while True:
            question = (await asyncio.to_thread(ask, QUESTION_PROMPT)).strip()
            if not question or question.lower() in EXIT_WORDS:
                break

            await client.query(question, session_id=settings.session_id)
            stats = await print_stream(client.receive_response(), out, show_tools=True)
            turns += 1
            if _exit_code(stats):
                failed = True
            elif stats is not None:
                out(stats.render())

    logger.info("multi-turn session finished after %d question(s)", turns)
    return 1 if failed else 0
