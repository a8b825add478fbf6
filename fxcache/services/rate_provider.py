# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Remote exchange rate providers."""

import logging
from abc import ABC, abstractmethod

import httpx

from fxcache.exceptions import RateProviderError
from fxcache.schemas.exchange_rate import ExchangeRate, ProviderPayload

logger = logging.getLogger(__name__)

# ExchangeRate-API compatible endpoint
DEFAULT_PROVIDER_URL = "https://v6.exchangerate-api.com"
LATEST_RATES_PATH = "/v6/latest"

DEFAULT_TIMEOUT_SECONDS = 10.0


class RateProvider(ABC):
    """Source of live exchange rates."""

    @abstractmethod
    async def fetch_rate(self, base_code: str, target_code: str) -> ExchangeRate:
        """Fetch the current rate for a directional pair.

        Raises:
            RateProviderError: If no usable rate could be obtained.
        """
        ...

    async def close(self) -> None:
        """Clean up resources."""
        pass


class HttpRateProvider(RateProvider):
    """Rate provider speaking the ExchangeRate-API JSON format over HTTP."""

    def __init__(
        self,
        base_url: str = DEFAULT_PROVIDER_URL,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the provider.

        Args:
            base_url: Provider root URL.
            api_key: Optional key sent as a bearer token.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._http_client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._http_client is None or self._http_client.is_closed:
            headers = {}
            if self.api_key:
                headers["Authorization"] = f"Bearer {self.api_key}"
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
            )
        return self._http_client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def fetch_rate(self, base_code: str, target_code: str) -> ExchangeRate:
        base_code = base_code.upper()
        target_code = target_code.upper()
        try:
            client = await self._get_client()
            response = await client.get(
                LATEST_RATES_PATH,
                params={"base": base_code, "symbols": target_code},
            )
            response.raise_for_status()
            payload = ProviderPayload.model_validate(response.json())
            return payload.to_exchange_rate(base_code, target_code)

        except httpx.HTTPStatusError as e:
            logger.error(f"Provider error fetching {base_code}->{target_code}: {e}")
            raise RateProviderError(
                f"Provider returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch {base_code}->{target_code}: {e}")
            raise RateProviderError(f"Failed to fetch rate: {e}") from e
        except (ValueError, OverflowError) as e:
            # Covers undecodable JSON and payload validation errors
            logger.error(f"Invalid provider response for {base_code}->{target_code}: {e}")
            raise RateProviderError(f"Invalid provider response: {e}") from e
