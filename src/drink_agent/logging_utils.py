# src/drink_agent/logging_utils.py
from __future__ import annotations

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"

# -v 한 번으로는 이 라이브러리들의 DEBUG 로그까지 켜지 않는다 (-vv 부터)
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "claude_agent_sdk")


def _level_from_name(name: Optional[str]) -> Optional[int]:
    if not name:
        return None
    candidate = getattr(logging, name.upper(), None)
    return candidate if isinstance(candidate, int) else None


def configure_logging(verbose: int = 0, level_name: Optional[str] = None) -> int:
    """
    CLI 에서 한 번 호출하는 root logging 설정. 여러 번 불러도 handler 가 늘어나지 않는다.

    - verbose >= 1 이면 DEBUG, 아니면 level_name (settings.log_level) → LOG_LEVEL 환경변수 → WARNING 순
    - 적용한 level 을 돌려준다
    """
    if verbose:
        level = logging.DEBUG
    else:
        level = (
            _level_from_name(level_name)
            or _level_from_name(os.environ.get("LOG_LEVEL"))
            or logging.WARNING
        )

    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        for h in root.handlers:
            h.setLevel(level)
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT)

    noisy_level = level if verbose >= 2 else max(level, logging.INFO)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)

    return level
