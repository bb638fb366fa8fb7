import argparse
import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

from cryptopulse.config import load_config
from cryptopulse.controller import ModeController
from cryptopulse.logging_config import setup_logging
from cryptopulse.types import Mode, View
from cryptopulse.ui.layout import MainLayout
from cryptopulse.utils import get_feed

logger = logging.getLogger("cryptopulse")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="CryptoPulse: BTC/ETH/BNB price dashboard")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a JSON configuration file",
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in Mode],
        default=None,
        help="Initial mode: live or a historical window in days",
    )
    parser.add_argument(
        "--view",
        choices=[v.value for v in View],
        default=None,
        help="Initial view",
    )
    parser.add_argument(
        "--base-url",
        type=str,
        default=None,
        help="Base URL for the CoinGecko API",
    )
    parser.add_argument(
        "--poll-seconds",
        type=float,
        default=None,
        help="Live polling interval in seconds",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ...)",
    )
    return parser.parse_args(argv)


def main() -> None:
    args = parse_args()

    try:
        config = load_config(args.config).with_overrides(
            mode=args.mode,
            view=args.view,
            base_url=args.base_url,
            poll_seconds=args.poll_seconds,
            log_level=args.log_level,
        )
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Invalid configuration: {exc}")

    setup_logging(config.log_level)
    logger.info("starting in %s mode against %s", config.mode.value, config.base_url)

    app = QApplication(sys.argv)

    feed = get_feed("coingecko", base_url=config.base_url, timeout_s=config.timeout_s)
    controller = ModeController(
        feed,
        max_workers=config.max_workers,
        poll_seconds=config.poll_seconds,
        live_capacity=config.live_capacity,
        mode=config.mode,
        view=config.view,
    )

    window = MainLayout(controller)
    window.resize(1100, 800)
    window.show()

    controller.start()
    exit_code = app.exec()
    controller.shutdown()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
