# src/drink_agent/agent/messages.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, AsyncIterable, AsyncIterator, Dict, Iterable, List, Optional, Union

from claude_agent_sdk import AssistantMessage, ResultMessage, TextBlock, ToolUseBlock


def user_message(text: str, session_id: str) -> Dict[str, Any]:
    """
    streaming 모드의 query() 에 넘길 user 메시지.

    parent_tool_use_id 는 tool 결과에 대한 응답일 때만 채운다. 사용자가 직접 입력한 메시지는 None.
    """
    return {
        "type": "user",
        "message": {"role": "user", "content": text},
        "parent_tool_use_id": None,
        "session_id": session_id,
    }


async def prompt_stream(
    questions: Union[Iterable[str], AsyncIterable[str]],
    session_id: str,
) -> AsyncIterator[Dict[str, Any]]:
    """질문들을 차례로 user 메시지로 바꿔 yield 하는 async generator."""
    if hasattr(questions, "__aiter__"):
        async for q in questions:  # type: ignore[union-attr]
            yield user_message(q, session_id)
    else:
        for q in questions:  # type: ignore[union-attr]
            yield user_message(q, session_id)


def assistant_text(message: AssistantMessage) -> str:
    """assistant 메시지에서 텍스트 블록만 뽑아 줄바꿈으로 잇는다 (tool_use 블록은 무시)."""
    return "\n".join(block.text for block in message.content if isinstance(block, TextBlock))


def tool_uses(message: AssistantMessage) -> List[str]:
    return [block.name for block in message.content if isinstance(block, ToolUseBlock)]


@dataclass
class RunStats:
    num_turns: int
    duration_ms: int
    duration_api_ms: int
    total_cost_usd: Optional[float]
    input_tokens: int
    output_tokens: int
    session_id: str
    is_error: bool = False

    @classmethod
    def from_result(cls, msg: ResultMessage) -> "RunStats":
        usage = msg.usage or {}
        return cls(
            num_turns=msg.num_turns,
            duration_ms=msg.duration_ms,
            duration_api_ms=msg.duration_api_ms,
            total_cost_usd=msg.total_cost_usd,
            input_tokens=int(usage.get("input_tokens") or 0)
            + int(usage.get("cache_read_input_tokens") or 0)
            + int(usage.get("cache_creation_input_tokens") or 0),
            output_tokens=int(usage.get("output_tokens") or 0),
            session_id=msg.session_id,
            is_error=msg.is_error,
        )

    def render(self) -> str:
        cost = "n/a" if self.total_cost_usd is None else f"${self.total_cost_usd:.4f}"
        lines = [
            "=== Run statistics ===",
            f"turns:         {self.num_turns}",
            f"duration:      {self.duration_ms / 1000:.2f}s (API {self.duration_api_ms / 1000:.2f}s)",
            f"cost:          {cost}",
            f"input tokens:  {self.input_tokens}",
            f"output tokens: {self.output_tokens}",
            f"session:       {self.session_id}",
        ]
        return "\n".join(lines)
