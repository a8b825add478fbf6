# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Exchange rate schemas."""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ExchangeRate(BaseModel):
    """Canonical rate as delivered by a rate provider."""

    model_config = ConfigDict(frozen=True)

    base_code: str
    target_code: str
    conversion_rate: float = Field(gt=0, allow_inf_nan=False)
    observed_at: datetime
    next_update_at: datetime | None = None


class CachedRate(BaseModel):
    """Rate persisted in the cache.

    Serialized with camelCase keys, e.g.
    ``{"baseCode": "USD", "targetCode": "EUR", "conversionRate": 0.92,
    "cachedAt": 1736899200000}``.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    base_code: str
    target_code: str
    conversion_rate: float = Field(gt=0, allow_inf_nan=False)
    cached_at: int = Field(ge=0, description="Epoch milliseconds")

    def to_json(self) -> str:
        """Serialize for storage."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, raw: str) -> "CachedRate":
        """Deserialize a stored value.

        Raises:
            pydantic.ValidationError: If ``raw`` is not a valid cached rate.
        """
        return cls.model_validate_json(raw)


class CacheStats(BaseModel):
    """Snapshot of the rate cache."""

    model_config = ConfigDict(frozen=True)

    total: int
    valid: int
    expired: int


class ProviderPayload(BaseModel):
    """Raw provider response.

    Providers disagree on field names, so every field accepts the known
    alternates. Use :meth:`to_exchange_rate` to get the canonical shape.
    """

    model_config = ConfigDict(extra="ignore")

    result: str | None = None
    success: bool | None = None
    base_code: str | None = Field(
        default=None, validation_alias=AliasChoices("base_code", "base")
    )
    target_code: str | None = Field(
        default=None, validation_alias=AliasChoices("target_code", "target")
    )
    conversion_rate: float | None = Field(
        default=None, validation_alias=AliasChoices("conversion_rate", "rate")
    )
    last_update: str | int | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "time_last_update_utc", "time_last_update", "date"
        ),
    )
    next_update: str | int | None = Field(
        default=None,
        validation_alias=AliasChoices("time_next_update_utc", "time_next_update"),
    )
    rates: dict[str, float] | None = None

    @property
    def is_success(self) -> bool:
        return self.success is True or self.result == "success"

    def rate_for(self, target_code: str) -> float | None:
        """Pick the rate for ``target_code``, preferring a direct rate field."""
        if self.conversion_rate is not None:
            return self.conversion_rate
        if self.rates is None:
            return None
        return self.rates.get(target_code.upper())

    def to_exchange_rate(self, base_code: str, target_code: str) -> ExchangeRate:
        """Normalize into an :class:`ExchangeRate` for the requested pair.

        Raises:
            ValueError: If the provider reported failure or sent no usable rate.
        """
        if not self.is_success:
            raise ValueError(
                f"Provider reported failure (result={self.result!r}, "
                f"success={self.success!r})"
            )
        rate = self.rate_for(target_code)
        if rate is None:
            raise ValueError(f"No rate for {target_code.upper()} in response")

        return ExchangeRate(
            base_code=(self.base_code or base_code).upper(),
            target_code=(self.target_code or target_code).upper(),
            conversion_rate=rate,
            observed_at=parse_timestamp(self.last_update)
            or datetime.now(timezone.utc),
            next_update_at=parse_timestamp(self.next_update),
        )


def parse_timestamp(value: str | int | None) -> datetime | None:
    """Parse the timestamp formats seen in provider payloads.

    Accepts unix seconds, RFC 2822 dates ("Fri, 27 Mar 2020 00:00:01 +0000")
    and ISO 8601 dates. Returns None for anything else.
    """
    if value is None:
        return None
    if isinstance(value, int):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
