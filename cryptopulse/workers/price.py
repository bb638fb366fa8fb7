import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Callable, Dict, Optional

from PySide6.QtCore import QRunnable

from cryptopulse.Feed import Feed, PricePoints
from cryptopulse.types import ASSETS, Asset, HistoricalSeries, LiveSample
from cryptopulse.utils import normalize_historical, normalize_live

logger = logging.getLogger(__name__)


def fetch_live(feed: Feed, clock: Callable[[], datetime] = datetime.now) -> LiveSample:
    """
    One spot-price request for all assets, normalized into a single sample.
    The label is taken when the response arrives.
    """
    prices = feed.fetch_spot(ASSETS)
    return normalize_live(prices, now=clock())


def fetch_historical(
    feed: Feed,
    days: int,
    executor: Optional[ThreadPoolExecutor] = None,
) -> HistoricalSeries:
    """
    Runs one market-chart request per asset concurrently and joins them.

    Any failing request fails the whole batch; nothing partial is returned.
    """
    own_executor = executor is None
    pool = executor or ThreadPoolExecutor(
        max_workers=len(ASSETS), thread_name_prefix="market-chart"
    )
    try:
        futures = {asset: pool.submit(feed.fetch_market_chart, asset, days) for asset in ASSETS}
        points: Dict[Asset, PricePoints] = {}
        for asset, fut in futures.items():
            # result() re-raises the first failure; the other requests are
            # left to finish and are ignored
            points[asset] = fut.result()
    finally:
        if own_executor:
            pool.shutdown(wait=False, cancel_futures=True)

    logger.debug(
        "historical days=%s joined: %s",
        days,
        ", ".join(f"{a.symbol}={len(p)}" for a, p in points.items()),
    )
    return normalize_historical(points, days)


class FetchWorker(QRunnable):
    """
    Runs one fetch job on a QThreadPool thread and hands the outcome to
    `on_done(result, error)`; error is None on success.
    """

    def __init__(
        self,
        job: Callable[[], object],
        on_done: Callable[[Optional[object], Optional[BaseException]], None],
    ):
        super().__init__()
        self.job = job
        self.on_done = on_done

    def run(self):
        try:
            result = self.job()
        except Exception as exc:
            self.on_done(None, exc)
            return
        self.on_done(result, None)
