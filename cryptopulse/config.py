import json
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from cryptopulse.buffer import LIVE_CAPACITY
from cryptopulse.clients.coingecko import DEFAULT_BASE_URL
from cryptopulse.controller import LIVE_POLL_SECONDS
from cryptopulse.types import Mode, View

ENV_PREFIX = "CRYPTOPULSE_"


@dataclass(frozen=True)
class AppConfig:
    base_url: str = DEFAULT_BASE_URL
    timeout_s: float = 10.0
    poll_seconds: float = LIVE_POLL_SECONDS
    live_capacity: int = LIVE_CAPACITY
    max_workers: int = 4
    mode: Mode = Mode.LIVE
    view: View = View.GRAPH
    log_level: str = "INFO"

    def with_overrides(self, **overrides: Any) -> "AppConfig":
        """
        Returns a copy with every non-None override applied (and coerced).
        """
        values = {k: v for k, v in overrides.items() if v is not None}
        return _validate(replace(self, **_coerce(values)))


def _coerce(values: Mapping[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(AppConfig)}
    out: Dict[str, Any] = {}
    for key, value in values.items():
        if key not in known:
            raise ValueError(f"Unknown config key: {key}")
        if key == "mode":
            out[key] = value if isinstance(value, Mode) else Mode.parse(value)
        elif key == "view":
            out[key] = value if isinstance(value, View) else View.parse(value)
        elif key in ("timeout_s", "poll_seconds"):
            out[key] = float(value)
        elif key in ("live_capacity", "max_workers"):
            out[key] = int(value)
        elif key == "log_level":
            out[key] = str(value).upper()
        else:
            out[key] = str(value)
    return out


def _validate(config: AppConfig) -> AppConfig:
    if config.timeout_s <= 0:
        raise ValueError("timeout_s must be > 0")
    if config.poll_seconds <= 0:
        raise ValueError("poll_seconds must be > 0")
    if config.live_capacity <= 0:
        raise ValueError("live_capacity must be > 0")
    if config.max_workers <= 0:
        raise ValueError("max_workers must be > 0")
    return config


def _from_env(environ: Mapping[str, str]) -> Dict[str, str]:
    out = {}
    for f in fields(AppConfig):
        raw = environ.get(ENV_PREFIX + f.name.upper())
        if raw not in (None, ""):
            out[f.name] = raw
    return out


def load_config(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """
    Defaults, then the JSON file at `path` (if given), then CRYPTOPULSE_*
    environment variables.
    """
    values: Dict[str, Any] = {}
    if path is not None:
        payload = json.loads(Path(path).read_text())
        if not isinstance(payload, dict):
            raise ValueError(f"{path} must contain a JSON object")
        values.update(payload)

    values.update(_from_env(os.environ if environ is None else environ))
    return _validate(AppConfig(**_coerce(values)))
