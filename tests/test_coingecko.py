from unittest.mock import MagicMock, patch

import pytest
import requests

from cryptopulse.clients.coingecko import DEFAULT_BASE_URL, CoinGeckoFeed
from cryptopulse.errors import NetworkFailure, ResponseShapeError
from cryptopulse.types import ASSETS, Asset


def _resp(payload, status_code=200):
    resp = MagicMock(status_code=status_code)
    resp.json.return_value = payload
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    return resp


@patch("requests.get")
def test_fetch_spot_single_request_for_all_assets(mock_get):
    mock_get.return_value = _resp({
        "bitcoin": {"usd": 50000.1},
        "ethereum": {"usd": 3000},
        "binancecoin": {"usd": 400.005},
    })

    prices = CoinGeckoFeed().fetch_spot(ASSETS)

    assert prices == {Asset.BTC: 50000.1, Asset.ETH: 3000, Asset.BNB: 400.005}
    mock_get.assert_called_once_with(
        f"{DEFAULT_BASE_URL}/simple/price",
        params={"ids": "bitcoin,ethereum,binancecoin", "vs_currencies": "usd"},
        timeout=10,
    )


@patch("requests.get")
def test_fetch_spot_missing_asset_is_shape_error(mock_get):
    mock_get.return_value = _resp({"bitcoin": {"usd": 1}, "ethereum": {"usd": 2}})

    with pytest.raises(ResponseShapeError):
        CoinGeckoFeed().fetch_spot(ASSETS)


@patch("requests.get")
def test_fetch_spot_missing_currency_is_shape_error(mock_get):
    mock_get.return_value = _resp({
        "bitcoin": {"eur": 1},
        "ethereum": {"usd": 2},
        "binancecoin": {"usd": 3},
    })

    with pytest.raises(ResponseShapeError):
        CoinGeckoFeed().fetch_spot(ASSETS)


@patch("requests.get")
def test_http_error_is_network_failure(mock_get):
    mock_get.return_value = _resp({}, status_code=429)

    with pytest.raises(NetworkFailure):
        CoinGeckoFeed().fetch_spot(ASSETS)


@patch("requests.get")
def test_timeout_is_network_failure(mock_get):
    mock_get.side_effect = requests.Timeout("read timed out")

    with pytest.raises(NetworkFailure):
        CoinGeckoFeed().fetch_market_chart(Asset.ETH, 30)


@patch("requests.get")
def test_invalid_json_is_shape_error(mock_get):
    resp = _resp(None)
    resp.json.side_effect = ValueError("no json")
    mock_get.return_value = resp

    with pytest.raises(ResponseShapeError):
        CoinGeckoFeed().fetch_spot(ASSETS)


@patch("requests.get")
def test_fetch_market_chart(mock_get):
    mock_get.return_value = _resp({
        "prices": [[1700000086400000, 2.5], [1700000000000000, 1.25]],
        "market_caps": [],
    })

    feed = CoinGeckoFeed(base_url="http://example.test/api/v3/", timeout_s=4)
    points = feed.fetch_market_chart(Asset.BNB, 180)

    assert points == [(1700000000000000, 1.25), (1700000086400000, 2.5)]
    mock_get.assert_called_once_with(
        "http://example.test/api/v3/coins/binancecoin/market_chart",
        params={"vs_currency": "usd", "days": 180},
        timeout=4,
    )


@patch("requests.get")
def test_fetch_market_chart_without_prices(mock_get):
    mock_get.return_value = _resp({"error": "coin not found"})

    with pytest.raises(ResponseShapeError):
        CoinGeckoFeed().fetch_market_chart(Asset.BTC, 30)


@patch("requests.get")
def test_fetch_market_chart_malformed_point(mock_get):
    mock_get.return_value = _resp({"prices": [[1700000000000, 1.0], [1700000086400]]})

    with pytest.raises(ResponseShapeError):
        CoinGeckoFeed().fetch_market_chart(Asset.BTC, 30)
