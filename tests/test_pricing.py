"""Tests for the drink pricing tool."""
from __future__ import annotations

import json
from decimal import Decimal
from itertools import product
from typing import get_args

import pytest
from pydantic import ValidationError

from drink_agent.tools.pricing import (
    CURRENCY_SYMBOLS,
    EXCHANGE_RATES,
    PRICE_TABLE,
    Currency,
    DrinkType,
    IceLevel,
    PriceFailure,
    PriceQuote,
    PriceRequest,
    Size,
    calculate_drink_price,
    calculate_price,
    round_price,
    to_tool_result,
)

DRINKS = get_args(DrinkType)
SIZES = get_args(Size)
CURRENCIES = get_args(Currency)
ICE_LEVELS = get_args(IceLevel)


def quote(**kwargs) -> PriceQuote:
    result = calculate_price(PriceRequest(**kwargs))
    assert isinstance(result, PriceQuote), result
    return result


class TestScenarios:
    def test_large_coffee_defaults_to_usd(self):
        q = quote(drink_type="coffee", size="large")
        assert q.price == "$5.50"
        assert q.currency == "USD"
        assert q.ice_level == "normal"

    def test_small_tea_in_twd(self):
        assert quote(drink_type="tea", size="small", currency="TWD").price == "NT$94.50"

    def test_medium_smoothie_in_eur(self):
        assert quote(drink_type="smoothie", size="medium", currency="EUR").price == "€5.98"

    def test_large_juice_in_jpy_with_ice(self):
        q = quote(drink_type="juice", size="large", currency="JPY", ice_level="extra-ice")
        assert q.price == "¥897.00"
        assert q.ice_level == "extra-ice"

    def test_message_mentions_order_and_price(self):
        q = quote(drink_type="tea", size="medium", currency="EUR")
        assert "medium" in q.message
        assert "tea" in q.message
        assert q.price in q.message


class TestProperties:
    @pytest.mark.parametrize("drink,size,currency", list(product(DRINKS, SIZES, CURRENCIES)))
    def test_every_combination_is_quoted_with_two_decimals(self, drink, size, currency):
        q = quote(drink_type=drink, size=size, currency=currency)
        symbol = CURRENCY_SYMBOLS[currency]
        assert q.price.startswith(symbol)
        digits = q.price[len(symbol):]
        whole, _, frac = digits.partition(".")
        assert whole.isdigit() and len(frac) == 2 and frac.isdigit()
        assert q.amount >= 0
        assert Decimal(digits) == q.amount

    @pytest.mark.parametrize("currency", CURRENCIES)
    def test_conversion_is_linear(self, currency):
        for drink, size in product(DRINKS, SIZES):
            usd = quote(drink_type=drink, size=size).amount
            converted = quote(drink_type=drink, size=size, currency=currency).amount
            assert abs(converted - usd * EXCHANGE_RATES[currency]) <= Decimal("0.005")

    def test_omitted_currency_equals_usd(self):
        for drink, size in product(DRINKS, SIZES):
            assert quote(drink_type=drink, size=size) == quote(
                drink_type=drink, size=size, currency="USD"
            )

    @pytest.mark.parametrize("ice", ICE_LEVELS)
    def test_ice_level_is_echoed_and_never_changes_price(self, ice):
        plain = quote(drink_type="smoothie", size="large", currency="TWD")
        iced = quote(drink_type="smoothie", size="large", currency="TWD", ice_level=ice)
        assert iced.ice_level == ice
        assert iced.price == plain.price
        assert iced.amount == plain.amount

    def test_repeated_calls_are_identical(self):
        request = PriceRequest(drink_type="juice", size="medium", currency="EUR")
        first = to_tool_result(calculate_price(request)).model_dump()
        for _ in range(5):
            assert to_tool_result(calculate_price(request)).model_dump() == first


class TestRounding:
    def test_half_up_at_half_cent(self):
        # banker's rounding would give 0.12
        prices = {("coffee", "small"): Decimal("0.125")}
        result = calculate_price(PriceRequest(drink_type="coffee", size="small"), prices=prices)
        assert isinstance(result, PriceQuote)
        assert result.price == "$0.13"

    def test_half_up_where_binary_float_would_round_down(self):
        # float("2.675") formats as 2.67
        prices = {("tea", "large"): Decimal("2.675")}
        result = calculate_price(PriceRequest(drink_type="tea", size="large"), prices=prices)
        assert result.price == "$2.68"

    def test_round_price_helper(self):
        assert round_price(Decimal("5.985")) == Decimal("5.99")
        assert round_price(Decimal("5.984")) == Decimal("5.98")
        assert round_price(Decimal("897")) == Decimal("897.00")


class TestMalformedTables:
    def test_missing_base_price(self):
        prices = {k: v for k, v in PRICE_TABLE.items() if k != ("coffee", "large")}
        result = calculate_price(PriceRequest(drink_type="coffee", size="large"), prices=prices)
        assert isinstance(result, PriceFailure)
        assert result.ok is False
        assert "coffee" in result.error and "large" in result.error

    def test_missing_exchange_rate(self):
        rates = {"USD": Decimal("1")}
        result = calculate_price(
            PriceRequest(drink_type="tea", size="small", currency="JPY"), rates=rates
        )
        assert isinstance(result, PriceFailure)
        assert "JPY" in result.error

    def test_missing_symbol(self):
        symbols = {"USD": "$"}
        result = calculate_price(
            PriceRequest(drink_type="tea", size="small", currency="EUR"), symbols=symbols
        )
        assert isinstance(result, PriceFailure)
        assert result.error

    @pytest.mark.parametrize("bad", [Decimal("NaN"), float("nan"), "not-a-number", Decimal("-1")])
    def test_invalid_amount_is_a_failure_not_nan(self, bad):
        prices = {("juice", "small"): bad}
        result = calculate_price(PriceRequest(drink_type="juice", size="small"), prices=prices)
        assert isinstance(result, PriceFailure)
        assert "not a valid amount" in result.error

    def test_infinite_times_zero_rate_is_a_failure(self):
        prices = {("juice", "small"): Decimal("Infinity")}
        rates = {"USD": Decimal("0")}
        result = calculate_price(
            PriceRequest(drink_type="juice", size="small"), prices=prices, rates=rates
        )
        assert isinstance(result, PriceFailure)

    def test_wrong_type_base_price_is_a_failure(self):
        prices = {("juice", "small"): [4]}
        result = calculate_price(PriceRequest(drink_type="juice", size="small"), prices=prices)
        assert isinstance(result, PriceFailure)
        assert "not a number" in result.error
        envelope = to_tool_result(result)
        assert envelope.is_error is True
        assert envelope.text_content.startswith("Error: ")

    def test_wrong_type_exchange_rate_is_a_failure(self):
        rates = {"EUR": object()}
        result = calculate_price(
            PriceRequest(drink_type="tea", size="small", currency="EUR"), rates=rates
        )
        assert isinstance(result, PriceFailure)
        assert "EUR" in result.error


class TestTables:
    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            PRICE_TABLE[("coffee", "small")] = Decimal("0")  # type: ignore[index]
        with pytest.raises(TypeError):
            EXCHANGE_RATES["USD"] = Decimal("2")  # type: ignore[index]

    def test_tables_cover_every_enum_value(self):
        assert set(PRICE_TABLE) == set(product(DRINKS, SIZES))
        assert set(EXCHANGE_RATES) == set(CURRENCIES) == set(CURRENCY_SYMBOLS)
        assert EXCHANGE_RATES["USD"] == 1


class TestToolEnvelope:
    def test_success_envelope_is_json_object(self):
        result = calculate_drink_price(PriceRequest(drink_type="smoothie", size="medium", currency="EUR"))
        assert result.is_error is False
        assert len(result.content) == 1
        assert result.content[0]["type"] == "text"
        text = result.content[0]["text"]
        assert "€" in text
        payload = json.loads(text)
        assert payload == {
            "drink": "smoothie",
            "size": "medium",
            "currency": "EUR",
            "ice_level": "normal",
            "price": "€5.98",
            "message": payload["message"],
        }

    def test_failure_envelope_is_marked(self):
        result = to_tool_result(PriceFailure(error="no base price for large coffee"))
        assert result.is_error is True
        assert result.text_content == "Error: no base price for large coffee"
        assert result.to_sdk() == {
            "content": [{"type": "text", "text": "Error: no base price for large coffee"}],
            "is_error": True,
        }


class TestQuoteModel:
    def test_quote_fields_keep_enum_values(self):
        with pytest.raises(ValidationError):
            PriceQuote(
                drink="beer",
                size="large",
                currency="USD",
                ice_level="normal",
                price="$1.00",
                message="",
                amount=Decimal("1.00"),
            )
