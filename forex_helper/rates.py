"""Currency conversion providers.

A provider answers ``get_rate(from, to)`` with the multiplier such that
``amount_in_to = amount_in_from * rate``. Lookups are single-shot: retries and
backoff, if wanted, belong inside a provider, never in the engine.
"""

from typing import Protocol

import httpx
from loguru import logger

from forex_helper.config import Settings
from forex_helper.errors import MissingConversionError


class RateProvider(Protocol):
    async def get_rate(self, from_currency: str, to_currency: str) -> float: ...


class StaticRateProvider:
    """Rates from an in-memory table keyed by 6-letter pair (``"EURUSD": 1.08``).

    Missing direct rates are derived from the inverse pair when available.
    """

    def __init__(self, rates: dict[str, float] | None = None):
        self._rates: dict[str, float] = {}
        for pair, rate in (rates or {}).items():
            self.set_rate(pair[:3], pair[-3:], rate)

    def set_rate(self, from_currency: str, to_currency: str, rate: float):
        if rate <= 0:
            raise ValueError(f"Rate for {from_currency}{to_currency} must be positive")
        self._rates[f"{from_currency.upper()}{to_currency.upper()}"] = rate

    async def get_rate(self, from_currency: str, to_currency: str) -> float:
        src, dst = from_currency.upper(), to_currency.upper()
        if src == dst:
            return 1.0
        direct = self._rates.get(f"{src}{dst}")
        if direct is not None:
            return direct
        inverse = self._rates.get(f"{dst}{src}")
        if inverse is not None:
            return 1.0 / inverse
        raise MissingConversionError(f"No exchange rate available for {src} -> {dst}")


class HttpRateProvider:
    """Rates from a JSON endpoint: ``GET {base_url}/latest?from=X&to=Y``.

    Expects a body like ``{"rates": {"Y": 1.2345}}``.
    """

    def __init__(self, base_url: str, timeout: float = 5.0, client: httpx.AsyncClient | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    async def get_rate(self, from_currency: str, to_currency: str) -> float:
        src, dst = from_currency.upper(), to_currency.upper()
        if src == dst:
            return 1.0

        url = f"{self.base_url}/latest"
        params = {"from": src, "to": dst}
        try:
            if self._client is not None:
                resp = await self._client.get(url, params=params, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    resp = await client.get(url, params=params)
            resp.raise_for_status()
            rate = float(resp.json()["rates"][dst])
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Rate lookup {src}->{dst} failed: {e}")
            raise MissingConversionError(f"No exchange rate available for {src} -> {dst}") from e

        logger.debug(f"Rate {src}->{dst} = {rate}")
        return rate


def build_rate_provider(config: Settings) -> RateProvider:
    """Pick the provider the settings ask for."""
    if config.use_http_rates:
        logger.info(f"Using HTTP exchange rates from {config.rates_api_url}")
        return HttpRateProvider(config.rates_api_url, timeout=config.rates_timeout_seconds)
    logger.info(f"Using static exchange rates ({len(config.static_rates)} pairs)")
    return StaticRateProvider(config.static_rates)
