# cryptopulse/utils.py

from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Dict, Mapping, Optional, Sequence

from cryptopulse.clients.coingecko import CoinGeckoFeed
from cryptopulse.errors import ResponseShapeError, SeriesMisalignedError
from cryptopulse.Feed import Feed, PricePoints
from cryptopulse.types import ASSETS, Asset, HistoricalSeries, LiveSample

_CENTS = Decimal("0.01")


def format_price(value) -> str:
    """
    Render a provider price as a 2-decimal display string.

    Rounds half-up on the decimal text of the number, so 400.005 -> "400.01"
    even though the float itself sits just below the midpoint.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise ResponseShapeError(f"price is not numeric: {value!r}")
    try:
        d = Decimal(str(value))
    except InvalidOperation as exc:
        raise ResponseShapeError(f"price is not numeric: {value!r}") from exc
    if not d.is_finite():
        raise ResponseShapeError(f"price is not finite: {value!r}")
    return str(d.quantize(_CENTS, rounding=ROUND_HALF_UP))


def time_label(dt: datetime) -> str:
    return dt.strftime("%X")


def date_label(dt: datetime) -> str:
    return dt.strftime("%x")


def label_for_epoch_ms(epoch_ms: int, days: int) -> str:
    dt = datetime.fromtimestamp(epoch_ms / 1000)
    # a single-day window is intraday data
    if days == 1:
        return time_label(dt)
    return date_label(dt)


def normalize_live(
    prices: Mapping[Asset, object],
    now: Optional[datetime] = None,
) -> LiveSample:
    missing = [a.symbol for a in ASSETS if a not in prices]
    if missing:
        raise ResponseShapeError(f"live prices missing for {', '.join(missing)}")

    formatted = {asset: format_price(prices[asset]) for asset in ASSETS}
    return LiveSample(label=time_label(now or datetime.now()), prices=formatted)


def normalize_historical(
    points: Mapping[Asset, PricePoints],
    days: int,
) -> HistoricalSeries:
    """
    Turn per-asset (epoch_ms, price) sequences into aligned display series.

    Labels come from the first asset's timestamps; the other assets must
    carry the same number of points or the whole batch is rejected.
    """
    missing = [a.symbol for a in ASSETS if a not in points]
    if missing:
        raise ResponseShapeError(f"historical prices missing for {', '.join(missing)}")

    reference = points[ASSETS[0]]
    for asset in ASSETS[1:]:
        if len(points[asset]) != len(reference):
            raise SeriesMisalignedError(
                f"{asset.symbol} has {len(points[asset])} points, "
                f"{ASSETS[0].symbol} has {len(reference)}"
            )

    labels = tuple(label_for_epoch_ms(ts, days) for ts, _ in reference)
    prices: Dict[Asset, tuple] = {
        asset: tuple(format_price(price) for _, price in points[asset])
        for asset in ASSETS
    }
    return HistoricalSeries(labels=labels, prices=prices)


def table_rows(labels: Sequence[str], samples: Mapping[Asset, Sequence[str]]):
    """
    Row-per-label view: (label, BTC, ETH, BNB).
    """
    return [
        (label, *(samples[asset][i] for asset in ASSETS))
        for i, label in enumerate(labels)
    ]


def get_feed(provider: str = "coingecko", **kwargs) -> Feed:
    provider = provider.lower()

    if provider == "coingecko":
        return CoinGeckoFeed(**kwargs)

    raise ValueError(f"Unsupported provider: {provider}")
