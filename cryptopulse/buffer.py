from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from cryptopulse.types import ASSETS, Asset, Mode, SeriesSnapshot
from cryptopulse.utils import table_rows

LIVE_CAPACITY = 10


@dataclass(frozen=True)
class StoreStats:
    size: int
    capacity: Optional[int]
    oldest_label: Optional[str]
    newest_label: Optional[str]


class SeriesStore:
    """
    Three aligned price series (BTC, ETH, BNB) plus one label series.

    Guarantees:
      - len(labels) == len(samples[asset]) for every asset, always
      - Live appends keep only the most recent `capacity` entries
      - Historical replacement swaps everything at once, no cap
      - Readers get an immutable snapshot, never a half-applied update
    """

    def __init__(self, capacity: int = LIVE_CAPACITY):
        if capacity <= 0:
            raise ValueError("capacity must be > 0")

        self.capacity = capacity
        self._snapshot = SeriesSnapshot()

    @staticmethod
    def _check_assets(samples: Mapping[Asset, object]) -> None:
        missing = [a.symbol for a in ASSETS if a not in samples]
        if missing:
            raise ValueError(f"missing samples for {', '.join(missing)}")

    def append_with_eviction(
        self,
        label: str,
        samples: Mapping[Asset, str],
        capacity: Optional[int] = None,
        mode: Mode = Mode.LIVE,
    ) -> SeriesSnapshot:
        """
        Appends one sample per asset and one label, then drops from the
        front so that no sequence is longer than `capacity`.
        """
        self._check_assets(samples)
        cap = self.capacity if capacity is None else capacity
        if cap <= 0:
            raise ValueError("capacity must be > 0")

        current = self._snapshot
        labels = (current.labels + (label,))[-cap:]
        series = {
            asset: (current.samples[asset] + (samples[asset],))[-cap:]
            for asset in ASSETS
        }

        self._snapshot = SeriesSnapshot(labels=labels, samples=series, mode=mode)
        return self._snapshot

    def replace_all(
        self,
        labels: Sequence[str],
        samples: Mapping[Asset, Sequence[str]],
        mode: Optional[Mode] = None,
    ) -> SeriesSnapshot:
        """
        Replaces every sequence wholesale. Rejects the update (leaving the
        store untouched) if lengths disagree.
        """
        self._check_assets(samples)
        new_labels = tuple(labels)
        series = {asset: tuple(samples[asset]) for asset in ASSETS}

        for asset, values in series.items():
            if len(values) != len(new_labels):
                raise ValueError(
                    f"{asset.symbol} has {len(values)} samples for {len(new_labels)} labels"
                )

        self._snapshot = SeriesSnapshot(labels=new_labels, samples=series, mode=mode)
        return self._snapshot

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def snapshot(self) -> SeriesSnapshot:
        return self._snapshot

    @property
    def labels(self) -> Tuple[str, ...]:
        return self._snapshot.labels

    def series(self, asset: Asset) -> Tuple[str, ...]:
        return self._snapshot.series(asset)

    def latest(self) -> Optional[Tuple[str, Dict[Asset, str]]]:
        snap = self._snapshot
        if not snap.labels:
            return None
        return snap.labels[-1], {asset: snap.samples[asset][-1] for asset in ASSETS}

    def rows(self) -> List[tuple]:
        snap = self._snapshot
        return table_rows(snap.labels, snap.samples)

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def clear(self) -> None:
        self._snapshot = SeriesSnapshot()

    def stats(self) -> StoreStats:
        snap = self._snapshot
        live = snap.mode is None or snap.mode.is_live
        return StoreStats(
            size=len(snap.labels),
            capacity=self.capacity if live else None,
            oldest_label=snap.labels[0] if snap.labels else None,
            newest_label=snap.labels[-1] if snap.labels else None,
        )

    def __len__(self) -> int:
        return len(self._snapshot.labels)
