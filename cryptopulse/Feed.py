# cryptopulse/Feed.py

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Tuple

from cryptopulse.types import Asset

# (epoch millis, price) pairs, ascending in time
PricePoints = List[Tuple[int, float]]


class Feed(ABC):
    def __init__(self, vs_currency: str = "usd"):
        self.vs_currency = vs_currency

    @abstractmethod
    def fetch_spot(self, assets: Iterable[Asset]) -> Dict[Asset, float]:
        """
        Fetch the current price for every asset in a single request.
        """
        raise NotImplementedError

    @abstractmethod
    def fetch_market_chart(self, asset: Asset, days: int) -> PricePoints:
        """
        Fetch the price history of one asset over the last `days` days.
        Must return points in ascending time order.
        """
        raise NotImplementedError
