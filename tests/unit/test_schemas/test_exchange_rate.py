# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for exchange rate schemas."""

import json
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from fxcache.schemas.exchange_rate import (
    CachedRate,
    ExchangeRate,
    ProviderPayload,
    parse_timestamp,
)


class TestCachedRate:
    """Tests for the persisted rate model."""

    def test_serializes_with_camel_case_keys(self):
        rate = CachedRate(
            base_code="USD",
            target_code="EUR",
            conversion_rate=0.92,
            cached_at=1_736_899_200_000,
        )

        assert json.loads(rate.to_json()) == {
            "baseCode": "USD",
            "targetCode": "EUR",
            "conversionRate": 0.92,
            "cachedAt": 1_736_899_200_000,
        }

    def test_reads_stored_json(self):
        rate = CachedRate.from_json(
            '{"baseCode":"USD","targetCode":"EUR",'
            '"conversionRate":0.85,"cachedAt":1736899200000}'
        )

        assert rate.conversion_rate == 0.85
        assert rate.cached_at == 1_736_899_200_000

    @pytest.mark.parametrize("rate", [float("inf"), float("-inf"), float("nan")])
    def test_rejects_non_finite_rate(self, rate):
        with pytest.raises(ValidationError):
            CachedRate(
                base_code="USD", target_code="EUR", conversion_rate=rate, cached_at=0
            )

    @pytest.mark.parametrize("rate", [0, -1.5])
    def test_rejects_non_positive_rate(self, rate):
        with pytest.raises(ValidationError):
            CachedRate(
                base_code="USD", target_code="EUR", conversion_rate=rate, cached_at=0
            )

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            '{"baseCode":"USD"}',
            '{"baseCode":"USD","targetCode":"EUR","conversionRate":-1,"cachedAt":0}',
        ],
    )
    def test_from_json_rejects_malformed_values(self, raw):
        with pytest.raises(ValidationError):
            CachedRate.from_json(raw)

    def test_is_immutable(self):
        rate = CachedRate(
            base_code="USD", target_code="EUR", conversion_rate=0.92, cached_at=0
        )

        with pytest.raises(ValidationError):
            rate.conversion_rate = 1.0


class TestProviderPayload:
    """Tests for provider payload normalization."""

    def test_exchangerate_api_shape(self):
        payload = ProviderPayload.model_validate(
            {
                "result": "success",
                "base_code": "USD",
                "target_code": "EUR",
                "conversion_rate": 0.92,
                "time_last_update_utc": "Wed, 15 Jan 2025 00:00:01 +0000",
                "time_next_update_utc": "Thu, 16 Jan 2025 00:00:01 +0000",
            }
        )

        rate = payload.to_exchange_rate("USD", "EUR")

        assert rate == ExchangeRate(
            base_code="USD",
            target_code="EUR",
            conversion_rate=0.92,
            observed_at=datetime(2025, 1, 15, 0, 0, 1, tzinfo=timezone.utc),
            next_update_at=datetime(2025, 1, 16, 0, 0, 1, tzinfo=timezone.utc),
        )

    def test_alternate_field_names(self):
        payload = ProviderPayload.model_validate(
            {
                "success": True,
                "base": "USD",
                "target": "EUR",
                "rate": 0.91,
                "date": "2025-01-15",
            }
        )

        rate = payload.to_exchange_rate("USD", "EUR")

        assert rate.conversion_rate == 0.91
        assert rate.observed_at == datetime(2025, 1, 15, tzinfo=timezone.utc)
        assert rate.next_update_at is None

    def test_rate_from_rates_map(self):
        payload = ProviderPayload.model_validate(
            {"success": True, "base": "USD", "rates": {"EUR": 0.9, "GBP": 0.8}}
        )

        rate = payload.to_exchange_rate("USD", "gbp")

        assert rate.conversion_rate == 0.8
        assert rate.target_code == "GBP"

    def test_direct_rate_preferred_over_rates_map(self):
        payload = ProviderPayload.model_validate(
            {"result": "success", "conversion_rate": 0.92, "rates": {"EUR": 0.5}}
        )

        assert payload.rate_for("EUR") == 0.92

    @pytest.mark.parametrize(
        "data",
        [
            {"result": "error", "conversion_rate": 0.92},
            {"success": False, "conversion_rate": 0.92},
            {"conversion_rate": 0.92},
        ],
    )
    def test_non_success_status_is_rejected(self, data):
        payload = ProviderPayload.model_validate(data)

        assert not payload.is_success
        with pytest.raises(ValueError):
            payload.to_exchange_rate("USD", "EUR")

    def test_missing_rate_is_rejected(self):
        payload = ProviderPayload.model_validate(
            {"result": "success", "rates": {"GBP": 0.8}}
        )

        with pytest.raises(ValueError):
            payload.to_exchange_rate("USD", "EUR")

    def test_non_positive_rate_is_rejected(self):
        payload = ProviderPayload.model_validate(
            {"result": "success", "conversion_rate": 0}
        )

        with pytest.raises(ValueError):
            payload.to_exchange_rate("USD", "EUR")


    @pytest.mark.parametrize("rate", [float("inf"), float("nan")])
    def test_non_finite_rate_is_rejected(self, rate):
        payload = ProviderPayload.model_validate(
            {"result": "success", "conversion_rate": rate}
        )

        with pytest.raises(ValueError):
            payload.to_exchange_rate("USD", "EUR")

    def test_out_of_range_update_time_falls_back_to_now(self):
        payload = ProviderPayload.model_validate(
            {
                "result": "success",
                "conversion_rate": 0.92,
                "time_last_update": 10**20,
                "time_next_update": -(10**20),
            }
        )

        before = datetime.now(timezone.utc)
        rate = payload.to_exchange_rate("USD", "EUR")

        assert rate.observed_at >= before
        assert rate.next_update_at is None


class TestParseTimestamp:
    """Tests for provider timestamp parsing."""

    def test_unix_seconds(self):
        assert parse_timestamp(1736899200) == datetime(
            2025, 1, 15, tzinfo=timezone.utc
        )

    def test_unparseable_returns_none(self):
        assert parse_timestamp("yesterday-ish") is None

    def test_none(self):
        assert parse_timestamp(None) is None

    @pytest.mark.parametrize("value", [10**20, -(10**20)])
    def test_out_of_range_unix_seconds_returns_none(self, value):
        assert parse_timestamp(value) is None
