# src/drink_agent/tools/pricing.py
from __future__ import annotations

import json
import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from types import MappingProxyType
from typing import Any, Dict, Literal, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, Field

from drink_agent.tools.__base__ import ToolResult, tool

logger = logging.getLogger(__name__)

DrinkType = Literal["coffee", "tea", "smoothie", "juice"]
Size = Literal["small", "medium", "large"]
Currency = Literal["USD", "TWD", "EUR", "JPY"]
IceLevel = Literal["no-ice", "less-ice", "normal", "extra-ice"]

DEFAULT_CURRENCY: Currency = "USD"
DEFAULT_ICE_LEVEL: IceLevel = "normal"

TOOL_NAME = "calculate_drink_price"
TOOL_DESCRIPTION = (
    "Calculate the price of a drink from its type and size. "
    "drink_type (coffee/tea/smoothie/juice) and size (small/medium/large) are required; "
    "currency (USD/TWD/EUR/JPY, default USD) and ice_level are optional."
)

_CENTS = Decimal("0.01")


# ---------- 1. 가격표 (USD 기준) ----------

PRICE_TABLE: Mapping[Tuple[str, str], Decimal] = MappingProxyType(
    {
        ("coffee", "small"): Decimal("3.50"),
        ("coffee", "medium"): Decimal("4.50"),
        ("coffee", "large"): Decimal("5.50"),
        ("tea", "small"): Decimal("3.00"),
        ("tea", "medium"): Decimal("4.00"),
        ("tea", "large"): Decimal("5.00"),
        ("smoothie", "small"): Decimal("5.00"),
        ("smoothie", "medium"): Decimal("6.50"),
        ("smoothie", "large"): Decimal("8.00"),
        ("juice", "small"): Decimal("4.00"),
        ("juice", "medium"): Decimal("5.00"),
        ("juice", "large"): Decimal("6.00"),
    }
)

# 1 USD 당 환율
EXCHANGE_RATES: Mapping[str, Decimal] = MappingProxyType(
    {
        "USD": Decimal("1"),
        "TWD": Decimal("31.5"),
        "EUR": Decimal("0.92"),
        "JPY": Decimal("149.5"),
    }
)

CURRENCY_SYMBOLS: Mapping[str, str] = MappingProxyType(
    {
        "USD": "$",
        "TWD": "NT$",
        "EUR": "€",
        "JPY": "¥",
    }
)


# ---------- 2. 입력 / 결과 모델 ----------

class PriceRequest(BaseModel):
    drink_type: DrinkType = Field(..., description="Drink type: coffee, tea, smoothie, juice")
    size: Size = Field(..., description="Cup size: small, medium, large")
    currency: Optional[Currency] = Field(
        None, description="Currency: USD, TWD, EUR, JPY (defaults to USD)"
    )
    ice_level: Optional[IceLevel] = Field(
        None, description="Ice level (optional): no-ice, less-ice, normal, extra-ice"
    )


class PriceQuote(BaseModel):
    ok: Literal[True] = True
    drink: DrinkType
    size: Size
    currency: Currency
    ice_level: IceLevel
    price: str
    message: str
    amount: Decimal = Field(exclude=True)

    def payload(self) -> Dict[str, Any]:
        """tool 응답으로 내보낼 필드만 (ok / amount 제외)."""
        return self.model_dump(exclude={"ok"})


class PriceFailure(BaseModel):
    ok: Literal[False] = False
    error: str


PriceResult = Union[PriceQuote, PriceFailure]


def round_price(amount: Decimal) -> Decimal:
    """소수 둘째 자리까지, half-up 반올림."""
    return amount.quantize(_CENTS, rounding=ROUND_HALF_UP)


def format_price(symbol: str, amount: Decimal) -> str:
    return f"{symbol}{round_price(amount):.2f}"


def calculate_price(
    request: PriceRequest,
    *,
    prices: Mapping[Tuple[str, str], Decimal] = PRICE_TABLE,
    rates: Mapping[str, Decimal] = EXCHANGE_RATES,
    symbols: Mapping[str, str] = CURRENCY_SYMBOLS,
) -> PriceResult:
    """
    음료 한 잔의 가격을 계산한다.

    - currency 가 없으면 USD, ice_level 이 없으면 "normal" 로 채운 뒤 계산
    - ice_level 은 표시용이며 가격에는 영향을 주지 않는다
    - 표에 항목이 없거나 결과가 유한한 양수가 아니면 PriceFailure 를 반환 (예외를 던지지 않음)

    prices / rates / symbols 는 테스트에서 다른 표를 주입하기 위한 인자.
    """
    currency = request.currency or DEFAULT_CURRENCY
    ice_level = request.ice_level or DEFAULT_ICE_LEVEL

    base_price = prices.get((request.drink_type, request.size))
    if base_price is None:
        return PriceFailure(
            error=f"no base price for {request.size} {request.drink_type}"
        )

    rate = rates.get(currency)
    if rate is None:
        return PriceFailure(error=f"no exchange rate for currency {currency}")

    symbol = symbols.get(currency)
    if symbol is None:
        return PriceFailure(error=f"no display symbol for currency {currency}")

    # 잘못된 값이 들어와도 예외 대신 NaN 으로 남겨 아래에서 걸러낸다
    try:
        with localcontext() as ctx:
            ctx.traps[InvalidOperation] = False
            converted = Decimal(base_price) * Decimal(rate)
    except (TypeError, ValueError, ArithmeticError) as e:
        return PriceFailure(
            error=f"price table entry for {request.size} {request.drink_type} in {currency} "
            f"is not a number: {e}"
        )
    if not converted.is_finite() or converted < 0:
        return PriceFailure(
            error=f"computed price {converted} for {request.size} {request.drink_type} "
            f"in {currency} is not a valid amount"
        )

    amount = round_price(converted)
    price = format_price(symbol, amount)

    return PriceQuote(
        drink=request.drink_type,
        size=request.size,
        currency=currency,
        ice_level=ice_level,
        price=price,
        message=f"Your {request.size} {request.drink_type} costs {price} {currency}",
        amount=amount,
    )


def to_tool_result(result: PriceResult) -> ToolResult:
    """PriceResult → tool 응답 envelope (성공: JSON 텍스트 / 실패: 'Error: ...' + is_error)."""
    if isinstance(result, PriceFailure):
        return ToolResult.error(result.error)
    return ToolResult.text(json.dumps(result.payload(), ensure_ascii=False, indent=2))


# ---------- 3. tool 핸들러 ----------

@tool(name=TOOL_NAME, description=TOOL_DESCRIPTION, input_model=PriceRequest)
def calculate_drink_price(args: PriceRequest) -> ToolResult:
    logger.debug("calculate_drink_price called with %s", args.model_dump(exclude_none=True))
    result = calculate_price(args)
    if isinstance(result, PriceFailure):
        logger.warning("calculate_drink_price failed: %s", result.error)
    return to_tool_result(result)

