# src/drink_agent/config/settings.py
from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import List, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# 프로젝트 루트 디렉토리 (.env 위치)
BASE_DIR = Path(__file__).resolve().parents[3]

DEFAULT_ALLOWED_TOOLS = ["Read", "Glob", "Bash", "Grep"]


class ConfigError(RuntimeError):
    """환경변수 값이 잘못되었거나 필요한 값이 없을 때."""


class Settings(BaseModel):
    # --- Claude Agent SDK ---
    anthropic_api_key: Optional[str] = None
    claude_model: Optional[str] = None
    max_turns: int = 10
    allowed_tools: List[str] = Field(default_factory=lambda: list(DEFAULT_ALLOWED_TOOLS))
    session_id: str = "session_1"

    # --- OpenAI (function calling 예제용) ---
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_temperature: float = 0.2

    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env

        allowed_raw = env.get("AGENT_ALLOWED_TOOLS")
        if allowed_raw is None:
            allowed_tools = list(DEFAULT_ALLOWED_TOOLS)
        else:
            allowed_tools = [t.strip() for t in allowed_raw.split(",") if t.strip()]

        max_turns = _parse_number(env, "AGENT_MAX_TURNS", "10", int)
        if max_turns < 1:
            raise ConfigError(f"AGENT_MAX_TURNS 는 1 이상이어야 합니다: {max_turns}")

        return cls(
            anthropic_api_key=env.get("ANTHROPIC_API_KEY") or None,
            claude_model=env.get("CLAUDE_MODEL") or None,
            max_turns=max_turns,
            allowed_tools=allowed_tools,
            session_id=env.get("AGENT_SESSION_ID", "session_1"),
            openai_api_key=env.get("OPENAI_API_KEY") or None,
            openai_model=env.get("OPENAI_MODEL", "gpt-4o-mini"),
            openai_temperature=_parse_number(env, "OPENAI_TEMPERATURE", "0.2", float),
            log_level=env.get("LOG_LEVEL", "WARNING").upper(),
        )

    def require_openai_key(self) -> str:
        if not self.openai_api_key:
            raise ConfigError(
                "OPENAI_API_KEY 가 .env(또는 환경변수)에 없습니다. "
                "프로젝트 루트의 .env 파일을 확인하세요."
            )
        return self.openai_api_key


def _parse_number(env: Mapping[str, str], key: str, default: str, cast):
    raw = env.get(key, default)
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"{key} 값이 올바르지 않습니다: {raw!r}") from None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """.env 를 읽고 Settings 를 한 번만 만든다. import 시점에는 아무것도 읽지 않는다."""
    load_dotenv(BASE_DIR / ".env")
    load_dotenv()
    return Settings.from_env()
