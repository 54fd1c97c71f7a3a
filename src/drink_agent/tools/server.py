# src/drink_agent/tools/server.py
from __future__ import annotations

from typing import List, Optional

from claude_agent_sdk import McpSdkServerConfig, create_sdk_mcp_server

from drink_agent.tools.__base__ import ToolRegistry, registry

SERVER_NAME = "custom-tools"
SERVER_VERSION = "1.0.0"


def build_custom_tools_server(reg: Optional[ToolRegistry] = None) -> McpSdkServerConfig:
    """
    등록된 모든 tool 을 하나의 in-process MCP server 로 묶는다.
    새 tool 은 @tool 로 등록만 하면 여기에 자동으로 포함된다.
    """
    reg = reg or registry
    return create_sdk_mcp_server(
        name=SERVER_NAME,
        version=SERVER_VERSION,
        tools=reg.list_sdk_tools(),
    )


def qualified_tool_name(tool_name: str, server_name: str = SERVER_NAME) -> str:
    """allowed_tools 에 넣을 이름: mcp__<server>__<tool>"""
    return f"mcp__{server_name}__{tool_name}"


def qualified_tool_names(reg: Optional[ToolRegistry] = None) -> List[str]:
    reg = reg or registry
    return [qualified_tool_name(name) for name in reg.names()]
