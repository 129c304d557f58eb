from enum import Enum
from typing import Any, Mapping, Optional
import base64
import binascii
import json
import logging
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from ..config import CONFIG
from .codes import CountryCode, CurrencyCode
from .tables import COUNTRY_TO_CURRENCY, CURRENCY_METADATA, CurrencyMeta


USER_CURRENCY_HEADER = "x-user-currency"
CURRENCY_CONTEXT_HEADER = "x-currency-context"


class CurrencySource(str, Enum):
    USER_OVERRIDE = "user_override"
    GEO = "geo"
    DEFAULT = "default"


class CurrencyContext(BaseModel):
    """The one currency every price in a request is expressed in."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, use_enum_values=True)

    currency: CurrencyCode
    country: CountryCode
    source: CurrencySource
    symbol: str
    name: str
    resolved_at: str = Field(alias="resolvedAt")


def _log_event(event: str, **details: Any) -> None:
    log_data = {
        "ts": datetime.utcnow().isoformat(),
        "module": "currency",
        "event": event,
        **details,
    }
    if event in ("warning", "fallback"):
        logging.warning(json.dumps(log_data))
    else:
        logging.info(json.dumps(log_data))


def default_currency() -> CurrencyCode:
    return CurrencyCode(CONFIG.default_currency)


def default_country() -> CountryCode:
    return CountryCode(CONFIG.default_country)


def currency_metadata(code: str) -> CurrencyMeta:
    """Display metadata for ``code``; unknown codes get the default currency's."""
    meta = CURRENCY_METADATA.get(str(code).upper())
    if meta is None:
        meta = CURRENCY_METADATA.get(CONFIG.default_currency) or CURRENCY_METADATA["USD"]
    return meta


def currency_for_country(country: str) -> Optional[CurrencyCode]:
    code = COUNTRY_TO_CURRENCY.get(str(country).upper())
    return CurrencyCode(code) if code else None


def build_context(currency: CurrencyCode, country: CountryCode, source: CurrencySource) -> CurrencyContext:
    meta = currency_metadata(currency)
    return CurrencyContext(
        currency=currency,
        country=country,
        source=source,
        symbol=meta.symbol,
        name=meta.name,
        resolved_at=datetime.now(timezone.utc).isoformat(),
    )


def default_context() -> CurrencyContext:
    return build_context(default_currency(), default_country(), CurrencySource.DEFAULT)


def resolve(override: Optional[str] = None, geo: Optional[str] = None) -> CurrencyContext:
    """Pick the request currency: explicit override, then geo country, then the default.

    Malformed input at any step is logged and skipped. This never raises.
    """
    currency = CurrencyCode.parse(override)
    if override and currency is None:
        _log_event("warning", message="Invalid currency override", received=override)

    country = CountryCode.parse(geo)
    if geo and country is None:
        _log_event("warning", message="Invalid geo country", received=geo, fallback=CONFIG.default_country)

    if currency is not None:
        ctx = build_context(currency, country or default_country(), CurrencySource.USER_OVERRIDE)
    elif country is not None:
        mapped = currency_for_country(country)
        if mapped is None:
            _log_event("fallback", reason="Unknown country", country=str(country), fallback=CONFIG.default_currency)
            ctx = default_context()
        else:
            ctx = build_context(mapped, country, CurrencySource.GEO)
    else:
        ctx = default_context()

    _log_event("resolution", source=ctx.source, currency=str(ctx.currency), country=str(ctx.country))
    return ctx


def encode_context(ctx: CurrencyContext) -> str:
    raw = json.dumps(ctx.model_dump(mode="json", by_alias=True)).encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def decode_context(value: str) -> Optional[dict]:
    try:
        decoded = json.loads(base64.b64decode(value, validate=True).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError):
        _log_event("warning", message="Unreadable currency context header")
        return None
    return decoded if isinstance(decoded, dict) else None


def _declared_override(declared: Optional[Mapping[str, Any]]) -> Optional[str]:
    # Only an explicit user choice survives; geo/default are always re-derived here.
    if not declared or declared.get("source") != CurrencySource.USER_OVERRIDE.value:
        return None
    value = declared.get("currency")
    return value if isinstance(value, str) else None


def resolve_request(
    headers: Mapping[str, str],
    body_context: Optional[Mapping[str, Any]] = None,
    legacy_currency: Optional[str] = None,
) -> CurrencyContext:
    """Resolve the context for an inbound request from its headers and body."""
    lowered = {str(k).lower(): v for k, v in headers.items()}

    candidates = [
        _declared_override(body_context),
        legacy_currency,
        lowered.get(USER_CURRENCY_HEADER),
    ]
    context_header = lowered.get(CURRENCY_CONTEXT_HEADER)
    if context_header:
        candidates.append(_declared_override(decode_context(context_header)))

    override = None
    for candidate in candidates:
        if candidate and CurrencyCode.parse(candidate) is not None:
            override = candidate
            break
        if candidate:
            _log_event("warning", message="Ignoring invalid currency override", received=candidate)

    return resolve(override=override, geo=lowered.get(CONFIG.geo_country_header))
