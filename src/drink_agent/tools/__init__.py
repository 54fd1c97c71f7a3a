# src/drink_agent/tools/__init__.py
from drink_agent.tools.__base__ import ToolRegistry, ToolResult, ToolSpec, registry, tool
from drink_agent.tools import pricing  # noqa: F401  # import 되어야 데코레이터가 실행되어 registry에 등록됨

__all__ = ["ToolRegistry", "ToolResult", "ToolSpec", "registry", "tool", "pricing"]
