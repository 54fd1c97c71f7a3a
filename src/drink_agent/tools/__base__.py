# src/drink_agent/tools/__base__.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Type

from claude_agent_sdk import SdkMcpTool
from claude_agent_sdk import tool as sdk_tool
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

ERROR_PREFIX = "Error: "


class ToolResult(BaseModel):
    """
    tool 실행 결과 envelope.

    Claude Agent SDK 의 tool 응답 형식과 같다:
        {"content": [{"type": "text", "text": "..."}], "is_error": false}
    """
    content: List[Dict[str, str]] = Field(default_factory=list)
    is_error: bool = False

    @classmethod
    def text(cls, text: str) -> "ToolResult":
        return cls(content=[{"type": "text", "text": text}])

    @classmethod
    def error(cls, message: str) -> "ToolResult":
        return cls(content=[{"type": "text", "text": f"{ERROR_PREFIX}{message}"}], is_error=True)

    @classmethod
    def coerce(cls, value: Any) -> "ToolResult":
        """핸들러가 str / dict 등을 돌려줘도 envelope 로 맞춘다."""
        if isinstance(value, ToolResult):
            return value
        if isinstance(value, str):
            return cls.text(value)
        return cls.text(json.dumps(value, ensure_ascii=False, default=str))

    @property
    def text_content(self) -> str:
        return "\n".join(block.get("text", "") for block in self.content if block.get("type") == "text")

    def to_sdk(self) -> Dict[str, Any]:
        return self.model_dump()


@dataclass
class ToolSpec:
    """
    하나의 tool 을 표현하는 스펙.

    - name: LLM 이 호출할 tool 이름
    - description: tool 의 용도 설명 (LLM 이 읽는다)
    - input_model: Pydantic BaseModel (arguments 스키마)
    - func: 실제 파이썬 함수. input_model 인스턴스를 받아 결과를 반환.

    같은 스펙을 OpenAI function calling 과 Claude Agent SDK (in-process MCP) 양쪽으로 내보낸다.
    """
    name: str
    description: str
    input_model: Type[BaseModel]
    func: Callable[[BaseModel], Any]

    def input_schema(self) -> Dict[str, Any]:
        return self.input_model.model_json_schema()

    def to_openai_tool(self) -> Dict[str, Any]:
        """
        OpenAI tools 포맷으로 변환.

        tools = [
          {
            "type": "function",
            "function": {"name": "...", "description": "...", "parameters": { ... JSON Schema ... }}
          },
          ...
        ]
        """
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.input_schema(),
            },
        }

    def to_sdk_tool(self) -> SdkMcpTool:
        """
        Claude Agent SDK 의 SdkMcpTool 로 변환 (create_sdk_mcp_server 에 넘길 수 있음).
        SDK 는 async handler 를 기대하므로 동기 함수를 감싼다.
        """

        async def handler(args: Dict[str, Any]) -> Dict[str, Any]:
            return self.invoke_from_json(args).to_sdk()

        return sdk_tool(self.name, self.description, self.input_schema())(handler)

    def invoke_from_json(self, arguments: str | Dict[str, Any] | None) -> ToolResult:
        """
        tool_call 로부터 받은 arguments 를 이용해 실제 함수 실행.

        - arguments 가 str 이면 JSON string 으로 보고 dict 로 parse
        - arguments 가 dict 면 그대로 사용
        - JSON / 스키마 검증 실패는 예외 대신 에러 envelope 로 돌려준다
        """
        if isinstance(arguments, str):
            try:
                data = json.loads(arguments or "{}")
            except json.JSONDecodeError as e:
                logger.warning("tool %s got malformed JSON arguments: %s", self.name, e)
                return ToolResult.error(f"invalid arguments: {e}")
        else:
            data = arguments or {}

        try:
            model_instance = self.input_model.model_validate(data)
        except ValidationError as e:
            logger.warning("tool %s got invalid arguments: %s", self.name, e)
            return ToolResult.error(f"invalid arguments: {describe_validation_error(e)}")

        return ToolResult.coerce(self.func(model_instance))


def describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


class ToolRegistry:
    """
    프로젝트 전역에서 사용할 tool 들을 등록/조회하는 레지스트리.
    """

    def __init__(self) -> None:
        self._tools: Dict[str, ToolSpec] = {}

    def register(self, spec: ToolSpec) -> None:
        if spec.name in self._tools:
            raise ValueError(f"Tool '{spec.name}' is already registered.")
        self._tools[spec.name] = spec

    def get(self, name: str) -> ToolSpec:
        try:
            return self._tools[name]
        except KeyError:
            raise KeyError(f"Tool '{name}' is not registered.")

    def names(self) -> List[str]:
        return list(self._tools)

    def list_specs(self) -> List[ToolSpec]:
        return list(self._tools.values())

    def list_openai_tools(self) -> List[Dict[str, Any]]:
        """
        OpenAI chat.completions.create 에 그대로 넘길 tools 리스트.
        """
        return [spec.to_openai_tool() for spec in self._tools.values()]

    def list_sdk_tools(self) -> List[SdkMcpTool]:
        return [spec.to_sdk_tool() for spec in self._tools.values()]

    def invoke(self, name: str, arguments: str | Dict[str, Any] | None) -> ToolResult:
        """
        tool 이름과 arguments(JSON string or dict)를 받아 실제 파이썬 함수를 실행.
        """
        spec = self.get(name)
        return spec.invoke_from_json(arguments)


# 전역 레지스트리 인스턴스
registry = ToolRegistry()


def tool(
    *,
    name: Optional[str] = None,
    description: str = "",
    input_model: Type[BaseModel],
    target: Optional[ToolRegistry] = None,
) -> Callable[[Callable[[BaseModel], Any]], Callable[[BaseModel], Any]]:
    """
    데코레이터 형태로 ToolSpec 을 등록하기 위한 helper.

    사용 예:
        class PriceRequest(BaseModel):
            drink_type: Literal["coffee", "tea"] = Field(..., description="음료 종류")

        @tool(name="calculate_drink_price", description="음료 가격 계산", input_model=PriceRequest)
        def calculate_drink_price(args: PriceRequest) -> ToolResult:
            ...

    target 을 주지 않으면 전역 registry 에 등록된다.
    """
    def decorator(func: Callable[[BaseModel], Any]) -> Callable[[BaseModel], Any]:
        tool_name = name or func.__name__
        spec = ToolSpec(
            name=tool_name,
            description=description or (func.__doc__ or "").strip(),
            input_model=input_model,
            func=func,
        )
        (target or registry).register(spec)
        return func

    return decorator
