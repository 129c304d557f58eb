import pytest

from trip_tools.currency.codes import CountryCode, CurrencyCode
from trip_tools.currency.format import format_price, format_price_compact, format_price_range
from trip_tools.currency.resolver import (
    CurrencyContext,
    currency_metadata,
    decode_context,
    encode_context,
    resolve,
    resolve_request,
)
from trip_tools.currency.tables import COUNTRY_TO_CURRENCY, CURRENCY_METADATA
from trip_tools.errors import ValidationError


def test_geo_country_maps_to_its_currency():
    ctx = resolve(geo="IN")
    assert (ctx.currency, ctx.country, ctx.source) == ("INR", "IN", "geo")
    assert ctx.symbol == "₹"
    assert ctx.name == "Indian Rupee"


def test_override_beats_geo():
    ctx = resolve(override="EUR", geo="IN")
    assert (ctx.currency, ctx.country, ctx.source) == ("EUR", "IN", "user_override")


def test_unknown_country_falls_back_to_default():
    ctx = resolve(geo="ZZ")
    assert (ctx.currency, ctx.country, ctx.source) == ("USD", "US", "default")


@pytest.mark.parametrize(
    "override, geo",
    [("EURO", None), ("12", None), (None, "IND"), (None, "1N"), ("E U", "??")],
)
def test_malformed_signals_are_skipped_not_raised(override, geo):
    ctx = resolve(override=override, geo=geo)
    assert ctx.source == "default"
    assert ctx.currency == "USD"


def test_invalid_override_still_uses_valid_geo():
    ctx = resolve(override="DOLLARS", geo="JP")
    assert (ctx.currency, ctx.source) == ("JPY", "geo")


def test_every_mapped_currency_is_well_formed():
    for country, code in COUNTRY_TO_CURRENCY.items():
        assert CountryCode(country) == country
        assert CurrencyCode(code) == code


def test_code_types_validate_and_normalize():
    assert CurrencyCode(" usd ") == "USD"
    assert CurrencyCode.parse("US") is None
    with pytest.raises(ValidationError):
        CountryCode("USA")
    with pytest.raises(ValueError):
        CurrencyCode(42)


def test_metadata_for_unknown_code_uses_default():
    assert currency_metadata("XYZ") == CURRENCY_METADATA["USD"]
    assert currency_metadata("jpy").decimal_places == 0


def test_override_without_metadata_keeps_code_but_default_labels():
    ctx = resolve(override="XYZ", geo="IN")
    assert (ctx.currency, ctx.source) == ("XYZ", "user_override")
    assert (ctx.symbol, ctx.name) == ("$", "US Dollar")


def test_context_serializes_with_camel_case_timestamp():
    dumped = resolve(geo="DE").model_dump(mode="json", by_alias=True)
    assert dumped["currency"] == "EUR"
    assert dumped["source"] == "geo"
    assert "resolvedAt" in dumped


def test_context_header_round_trip_keeps_override_only():
    override = resolve(override="GBP")
    assert decode_context(encode_context(override))["currency"] == "GBP"

    headers = {"X-Currency-Context": encode_context(override), "x-vercel-ip-country": "IN"}
    assert resolve_request(headers).currency == "GBP"

    # A geo-derived context from the client is not trusted; the server's geo wins.
    stale = resolve(geo="JP")
    headers = {"x-currency-context": encode_context(stale), "x-vercel-ip-country": "IN"}
    assert resolve_request(headers).currency == "INR"


def test_request_signals_in_priority_order():
    headers = {"x-user-currency": "AUD", "x-vercel-ip-country": "IN"}
    body = {"currency": "EUR", "source": "user_override"}
    assert resolve_request(headers, body, "CAD").currency == "EUR"
    assert resolve_request(headers, None, "CAD").currency == "CAD"
    assert resolve_request(headers).currency == "AUD"
    assert resolve_request({"x-vercel-ip-country": "IN"}).source == "geo"
    assert resolve_request({}).source == "default"


def test_request_skips_bad_candidates():
    headers = {"x-user-currency": "???", "x-currency-context": "not-base64!"}
    ctx = resolve_request(headers, {"currency": "EUR", "source": "geo"}, "dollars")
    assert isinstance(ctx, CurrencyContext)
    assert ctx.source == "default"


def test_price_formatting_follows_currency_metadata():
    assert format_price(1234.5, "USD") == "$1,234.50"
    assert format_price(15000, "JPY") == "¥15,000"
    assert format_price_range(80, 240, "EUR") == "€80 - €240"
    assert format_price_compact(1500, "USD") == "$1.5K"
    assert format_price_compact(2_000_000, "INR") == "₹2M"
    assert format_price_compact(99.5, "USD") == "$99.5"
