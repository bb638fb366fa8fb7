# cryptopulse/clients/coingecko.py

import logging
from typing import Any, Dict, Iterable

import requests

from cryptopulse.errors import NetworkFailure, ResponseShapeError
from cryptopulse.Feed import Feed, PricePoints
from cryptopulse.types import Asset

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.coingecko.com/api/v3"


class CoinGeckoFeed(Feed):
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout_s: float = 10,
        vs_currency: str = "usd",
    ):
        super().__init__(vs_currency)
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s

    def _get(self, path: str, params: Dict[str, Any]) -> Any:
        url = f"{self.base_url}{path}"
        try:
            r = requests.get(url, params=params, timeout=self.timeout_s)
            r.raise_for_status()
        except requests.RequestException as exc:
            raise NetworkFailure(f"GET {path} failed: {exc}") from exc

        try:
            return r.json()
        except ValueError as exc:
            raise ResponseShapeError(f"GET {path} returned invalid JSON") from exc

    def fetch_spot(self, assets: Iterable[Asset]) -> Dict[Asset, float]:
        assets = list(assets)
        payload = self._get(
            "/simple/price",
            {
                "ids": ",".join(a.provider_id for a in assets),
                "vs_currencies": self.vs_currency,
            },
        )
        if not isinstance(payload, dict):
            raise ResponseShapeError("simple/price payload is not an object")

        out: Dict[Asset, float] = {}
        for asset in assets:
            entry = payload.get(asset.provider_id)
            if not isinstance(entry, dict) or entry.get(self.vs_currency) is None:
                raise ResponseShapeError(
                    f"simple/price missing {self.vs_currency} price for {asset.provider_id}"
                )
            out[asset] = entry[self.vs_currency]
        return out

    def fetch_market_chart(self, asset: Asset, days: int) -> PricePoints:
        payload = self._get(
            f"/coins/{asset.provider_id}/market_chart",
            {"vs_currency": self.vs_currency, "days": days},
        )
        prices = payload.get("prices") if isinstance(payload, dict) else None
        if not isinstance(prices, list):
            raise ResponseShapeError(f"market_chart for {asset.provider_id} has no prices")

        points: PricePoints = []
        for p in prices:
            try:
                points.append((int(p[0]), p[1]))
            except (TypeError, ValueError, IndexError, KeyError) as exc:
                raise ResponseShapeError(
                    f"market_chart for {asset.provider_id} has a malformed point: {p!r}"
                ) from exc

        # CoinGecko already returns oldest-first, keep the contract explicit
        points.sort(key=lambda x: x[0])

        logger.debug("market_chart %s days=%s -> %d points", asset.provider_id, days, len(points))
        return points
