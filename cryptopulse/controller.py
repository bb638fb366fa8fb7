import logging
from concurrent.futures import Executor, Future
from functools import partial
from typing import Callable, Optional, Union

from PySide6.QtCore import QObject, QThreadPool, QTimer, Signal

from cryptopulse.buffer import LIVE_CAPACITY, SeriesStore
from cryptopulse.errors import FetchError
from cryptopulse.Feed import Feed
from cryptopulse.types import HistoricalSeries, LiveSample, Mode, SeriesSnapshot, View
from cryptopulse.workers.price import FetchWorker, fetch_historical, fetch_live

logger = logging.getLogger(__name__)

LIVE_POLL_SECONDS = 30

FETCH_LIVE = "live"
FETCH_HISTORICAL = "historical"


class ModeController(QObject):
    """
    Owns the display mode, the view selector, the live polling timer and
    the series store.

    Every mode change bumps a generation counter; each fetch is tagged with
    the generation it was issued under and its result is dropped on arrival
    if the generation has moved on. Fetches run as FetchWorker jobs on a
    QThreadPool (or on `executor` when one is given) and their completion
    is delivered back on the thread this object lives in, which is the only
    place the store is mutated.
    """

    store_changed = Signal(object)   # SeriesSnapshot
    mode_changed = Signal(object)    # Mode
    view_changed = Signal(object)    # View
    fetch_failed = Signal(str)

    # kind, generation, mode, result, error
    _fetch_done = Signal(str, object, object, object, object)

    def __init__(
        self,
        feed: Feed,
        store: Optional[SeriesStore] = None,
        executor: Optional[Executor] = None,
        poll_seconds: float = LIVE_POLL_SECONDS,
        live_capacity: int = LIVE_CAPACITY,
        max_workers: int = 4,
        mode: Mode = Mode.LIVE,
        view: View = View.GRAPH,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        if poll_seconds <= 0:
            raise ValueError("poll_seconds must be > 0")

        self._feed = feed
        self.store = store if store is not None else SeriesStore(capacity=live_capacity)
        self._executor = executor
        self._pool = QThreadPool(self)
        self._pool.setMaxThreadCount(max_workers)

        self._mode = mode
        self._view = view
        self._generation = 0
        self._started = False

        self._poll_timer = QTimer(self)
        self._poll_timer.setInterval(int(poll_seconds * 1000))
        self._poll_timer.timeout.connect(self._poll_live)

        self._fetch_done.connect(self._on_fetch_done)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def view(self) -> View:
        return self._view

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_polling(self) -> bool:
        return self._poll_timer.isActive()

    @property
    def poll_seconds(self) -> float:
        return self._poll_timer.interval() / 1000

    def snapshot(self) -> SeriesSnapshot:
        return self.store.snapshot()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Run the transition effect for the initial mode."""
        if self._started:
            return
        self._started = True
        self._apply_mode()

    def set_mode(self, mode: Union[Mode, str]) -> None:
        if not isinstance(mode, Mode):
            mode = Mode.parse(mode)

        if mode == self._mode and self._started:
            return

        self._mode = mode
        self._generation += 1
        logger.info("mode -> %s (generation %d)", mode.value, self._generation)
        self.mode_changed.emit(mode)

        if self._started:
            self._apply_mode()

    def set_view(self, view: Union[View, str]) -> None:
        if not isinstance(view, View):
            view = View.parse(view)
        if view == self._view:
            return
        self._view = view
        self.view_changed.emit(view)

    def refresh(self) -> None:
        """Re-issue the fetch for the current mode without touching the timer."""
        if not self._started:
            return
        if self._mode.is_live:
            self._poll_live()
        else:
            self._fetch_historical()

    def shutdown(self) -> None:
        self._stop_polling()
        self._generation += 1
        self._started = False
        # queued jobs are dropped, running ones finish and are discarded
        self._pool.clear()

    def _apply_mode(self) -> None:
        if self._mode.is_live:
            self._poll_live()
            self._start_polling()
        else:
            self._stop_polling()
            self._fetch_historical()

    def _start_polling(self) -> None:
        # start() on an active QTimer restarts it, there is only ever one
        self._poll_timer.start()

    def _stop_polling(self) -> None:
        if self._poll_timer.isActive():
            self._poll_timer.stop()
            logger.debug("live polling stopped")

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def _poll_live(self) -> None:
        self._dispatch(FETCH_LIVE, partial(fetch_live, self._feed))

    def _fetch_historical(self) -> None:
        self._dispatch(FETCH_HISTORICAL, partial(fetch_historical, self._feed, self._mode.days))

    def _dispatch(self, kind: str, job: Callable[[], object]) -> None:
        generation = self._generation
        mode = self._mode
        if self._executor is None:
            done = partial(self._fetch_done.emit, kind, generation, mode)
            self._pool.start(FetchWorker(job, done))
            return

        try:
            future = self._executor.submit(job)
        except RuntimeError as exc:
            # executor already shut down
            logger.warning("%s fetch for mode %s not issued: %s", kind, mode.value, exc)
            return
        future.add_done_callback(partial(self._deliver, kind, generation, mode))

    def _deliver(self, kind: str, generation: int, mode: Mode, future: Future) -> None:
        # Runs on the worker thread; the signal hops back to our thread.
        if future.cancelled():
            return
        error = future.exception()
        result = None if error is not None else future.result()
        self._fetch_done.emit(kind, generation, mode, result, error)

    def _on_fetch_done(
        self,
        kind: str,
        generation: int,
        mode: Mode,
        result: Optional[Union[LiveSample, HistoricalSeries]],
        error: Optional[BaseException],
    ) -> None:
        if generation != self._generation:
            logger.debug(
                "discarding stale %s result for mode %s (generation %d, current %d)",
                kind, mode.value, generation, self._generation,
            )
            return

        if error is not None:
            if isinstance(error, FetchError):
                logger.warning("%s fetch failed for mode %s: %s", kind, mode.value, error)
            else:
                logger.error(
                    "%s fetch crashed for mode %s",
                    kind, mode.value,
                    exc_info=(type(error), error, error.__traceback__),
                )
            self.fetch_failed.emit(f"{kind} fetch failed: {error}")
            return

        try:
            if kind == FETCH_LIVE:
                snapshot = self.store.append_with_eviction(result.label, result.prices, mode=mode)
            else:
                snapshot = self.store.replace_all(result.labels, result.prices, mode=mode)
        except ValueError as exc:
            logger.warning("%s result rejected for mode %s: %s", kind, mode.value, exc)
            self.fetch_failed.emit(f"{kind} result rejected: {exc}")
            return

        logger.debug("%s update applied for mode %s, %d rows", kind, mode.value, len(snapshot))
        self.store_changed.emit(snapshot)
