# src/drink_agent/llm/client.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from openai import OpenAI

from drink_agent.config.settings import get_settings

SYSTEM_PROMPT: str = """\
You are a friendly barista assistant for a drink shop.
- When the user asks what a drink costs, call the calculate_drink_price tool instead of guessing.
- drink_type and size are required; ask the user if either is missing.
- Quote the price exactly as the tool returns it, including the currency symbol.
"""

_client: Optional[OpenAI] = None


def get_client() -> OpenAI:
    """
    OpenAI 클라이언트를 전역에서 하나만 생성해서 재사용한다.
    API 키는 .env 에서 읽은 settings.openai_api_key 를 사용.
    """
    global _client
    if _client is None:
        _client = OpenAI(api_key=get_settings().require_openai_key())
    return _client


def chat_raw(
    messages: List[Dict[str, Any]],
    *,
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    tools: Optional[List[Dict[str, Any]]] = None,
    tool_choice: Optional[Any] = "auto",
    max_tokens: Optional[int] = None,
) -> Any:
    settings = get_settings()
    client = get_client()

    params: Dict[str, Any] = {
        "model": model or settings.openai_model,
        "messages": messages,
        "temperature": settings.openai_temperature if temperature is None else temperature,
    }

    if tools:
        params["tools"] = tools
        if tool_choice is not None:
            params["tool_choice"] = tool_choice

    if max_tokens is not None:
        params["max_tokens"] = max_tokens

    return client.chat.completions.create(**params)
