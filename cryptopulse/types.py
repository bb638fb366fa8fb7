# cryptopulse/types.py

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple


class Asset(Enum):
    BTC = ("BTC", "bitcoin", "Bitcoin (BTC)")
    ETH = ("ETH", "ethereum", "Ethereum (ETH)")
    BNB = ("BNB", "binancecoin", "BNB (BNB)")

    def __init__(self, symbol: str, provider_id: str, display_name: str):
        self.symbol = symbol
        self.provider_id = provider_id     # CoinGecko coin id, only used on the wire
        self.display_name = display_name


ASSETS: Tuple[Asset, ...] = tuple(Asset)


class Mode(Enum):
    LIVE = "live"
    WINDOW_30D = "30"
    WINDOW_180D = "180"
    WINDOW_365D = "365"

    @property
    def is_live(self) -> bool:
        return self is Mode.LIVE

    @property
    def days(self) -> Optional[int]:
        if self is Mode.LIVE:
            return None
        return int(self.value)

    @property
    def title(self) -> str:
        return _MODE_TITLES[self]

    @classmethod
    def parse(cls, value: str) -> "Mode":
        """
        Accepts "live", "30", "180", "365" (or the enum member names).
        """
        text = str(value).strip()
        for mode in cls:
            if text == mode.value or text.upper() == mode.name:
                return mode
        raise ValueError(f"Unsupported mode: {value!r}")


_MODE_TITLES = {
    Mode.LIVE: "Live",
    Mode.WINDOW_30D: "1 Month",
    Mode.WINDOW_180D: "6 Months",
    Mode.WINDOW_365D: "1 Year",
}


class View(Enum):
    GRAPH = "graph"
    COMPARISON = "comparison"

    @classmethod
    def parse(cls, value: str) -> "View":
        text = str(value).strip().lower()
        for view in cls:
            if text == view.value:
                return view
        raise ValueError(f"Unsupported view: {value!r}")


@dataclass(frozen=True)
class LiveSample:
    label: str
    prices: Dict[Asset, str]


@dataclass(frozen=True)
class HistoricalSeries:
    labels: Tuple[str, ...]
    prices: Dict[Asset, Tuple[str, ...]]


@dataclass(frozen=True)
class SeriesSnapshot:
    labels: Tuple[str, ...] = ()
    samples: Dict[Asset, Tuple[str, ...]] = field(
        default_factory=lambda: {asset: () for asset in ASSETS}
    )
    mode: Optional[Mode] = None

    def series(self, asset: Asset) -> Tuple[str, ...]:
        return self.samples[asset]

    def __len__(self) -> int:
        return len(self.labels)
