"""
Shared pytest fixtures: one offscreen QApplication, a scripted price feed and
executors that let tests decide when a fetch completes.
"""

import os
import threading
from concurrent.futures import Future

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication

from cryptopulse.Feed import Feed
from cryptopulse.types import Asset

DAY_MS = 24 * 60 * 60 * 1000
T0_MS = 1_700_000_000_000


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


class FakeFeed(Feed):
    """
    Scripted feed. `spot` is a list of responses consumed one per call (the
    last one repeats); an Exception instance in the list is raised instead.
    `charts` maps Asset -> points or Exception.
    """

    def __init__(self, spot=None, charts=None):
        super().__init__()
        self.spot = list(spot or [{Asset.BTC: 50000.1, Asset.ETH: 3000, Asset.BNB: 400.005}])
        self.charts = dict(charts or {})
        self.spot_calls = 0
        self.chart_calls = []
        self._lock = threading.Lock()

    def fetch_spot(self, assets):
        with self._lock:
            idx = min(self.spot_calls, len(self.spot) - 1)
            self.spot_calls += 1
        resp = self.spot[idx]
        if isinstance(resp, Exception):
            raise resp
        return dict(resp)

    def fetch_market_chart(self, asset, days):
        with self._lock:
            self.chart_calls.append((asset, days))
        resp = self.charts.get(asset, [])
        if isinstance(resp, Exception):
            raise resp
        return list(resp)


def make_points(n, start_price=100.0, start_ms=T0_MS, step_ms=DAY_MS):
    return [(start_ms + i * step_ms, start_price + i) for i in range(n)]


def spot_sequence(n):
    return [
        {Asset.BTC: 1000 + i, Asset.ETH: 200 + i, Asset.BNB: 30 + i}
        for i in range(n)
    ]


class SyncExecutor:
    """Runs every job immediately on the calling thread."""

    def __init__(self):
        self.submitted = 0

    def submit(self, fn, *args, **kwargs):
        self.submitted += 1
        fut = Future()
        try:
            fut.set_result(fn(*args, **kwargs))
        except Exception as exc:
            fut.set_exception(exc)
        return fut

    def shutdown(self, wait=True, cancel_futures=False):
        pass


class ManualExecutor:
    """Holds jobs until the test completes them, in any order."""

    def __init__(self):
        self.pending = []

    def submit(self, fn, *args, **kwargs):
        fut = Future()
        self.pending.append((fut, fn, args, kwargs))
        return fut

    def complete(self, index=0):
        fut, fn, args, kwargs = self.pending.pop(index)
        try:
            fut.set_result(fn(*args, **kwargs))
        except Exception as exc:
            fut.set_exception(exc)

    def complete_all(self):
        while self.pending:
            self.complete(0)

    def shutdown(self, wait=True, cancel_futures=False):
        pass


@pytest.fixture
def feed():
    return FakeFeed()


@pytest.fixture
def sync_executor():
    return SyncExecutor()


@pytest.fixture
def manual_executor():
    return ManualExecutor()
