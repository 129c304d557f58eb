import re
from typing import Any, Optional

from pydantic_core import core_schema

from ..errors import ValidationError


class _Code(str):
    """Upper-cased ISO code that can only be built from well-formed input."""

    _pattern: re.Pattern = re.compile(r"^$")
    _label = "code"

    def __new__(cls, value: Any):
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValidationError(f"Invalid {cls._label}: {value!r}")
        normalized = value.strip().upper()
        if not cls._pattern.match(normalized):
            raise ValidationError(f"Invalid {cls._label}: {value!r}")
        return super().__new__(cls, normalized)

    @classmethod
    def parse(cls, value: Any) -> Optional["_Code"]:
        if value is None:
            return None
        try:
            return cls(value)
        except ValidationError:
            return None

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls,
            core_schema.str_schema(),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


class CurrencyCode(_Code):
    """ISO-4217 alphabetic code, e.g. ``USD``."""

    _pattern = re.compile(r"^[A-Z]{3}$")
    _label = "currency code"


class CountryCode(_Code):
    """ISO-3166-1 alpha-2 code, e.g. ``IN``."""

    _pattern = re.compile(r"^[A-Z]{2}$")
    _label = "country code"
