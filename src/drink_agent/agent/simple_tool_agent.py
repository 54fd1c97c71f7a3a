# src/drink_agent/agent/simple_tool_agent.py
from __future__ import annotations

import logging
from typing import Any, Dict, List

from drink_agent.llm.client import SYSTEM_PROMPT, chat_raw
from drink_agent.tools import registry

logger = logging.getLogger(__name__)


def _openai_message_from_choice(msg) -> Dict[str, Any]:
    """
    OpenAI ChatCompletionMessage 객체를, 다음 호출에 쓸 수 있는 dict 형태로 변환.
    (role, content, tool_calls 만 뽑아서 사용)
    """
    data: Dict[str, Any] = {
        "role": msg.role,
        "content": msg.content,
    }
    if msg.tool_calls:
        data["tool_calls"] = [tc.model_dump(exclude_none=True) for tc in msg.tool_calls]
    return data


def run_once(user_input: str) -> str:
    """
    1턴짜리 간단 tool agent (OpenAI function calling).

    1) system + user 메시지로 LLM 호출 (tools 포함, tool_choice="auto")
    2) tool_calls가 있으면 registry 로 실제 파이썬 함수 실행
    3) tool 결과를 tool 메시지로 붙이고, tool_choice="none" 으로 다시 LLM 호출
    4) 최종 assistant 응답 텍스트를 반환
    """
    messages: List[Dict[str, Any]] = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_input},
    ]
    tools = registry.list_openai_tools()

    resp1 = chat_raw(messages, tools=tools, tool_choice="auto")
    msg1 = resp1.choices[0].message
    messages.append(_openai_message_from_choice(msg1))

    # tool_calls 없으면 바로 답변했다고 보고 content 리턴
    if not msg1.tool_calls:
        return msg1.content or ""

    for tc in msg1.tool_calls:
        tool_name = tc.function.name
        try:
            result = registry.invoke(tool_name, tc.function.arguments)
            content = result.text_content
        except KeyError as e:
            logger.warning("model requested unknown tool %s", tool_name)
            content = f"Error: {e}"
        logger.debug("tool %s -> %s", tool_name, content)

        messages.append(
            {
                "role": "tool",
                "tool_call_id": tc.id,
                "name": tool_name,
                "content": content,
            }
        )

    # tool 결과를 보고 최종 답변 생성 (더 이상 새 tool 호출은 금지)
    resp2 = chat_raw(messages, tools=tools, tool_choice="none")
    msg2 = resp2.choices[0].message
    return msg2.content or ""
