from cryptopulse.types import Asset

BACKGROUND = "#052737"
TABLE_BACKGROUND = "#0D3B4C"
TABLE_HEADER = "#133B5C"
GRID = "#444"
INACTIVE = "#444"
ACTIVE_MODE = "#FFD700"
ACTIVE_VIEW = "#4CAF50"
FOREGROUND = "white"
ERROR = "#FF6B6B"

ASSET_COLORS = {
    Asset.BTC: "white",
    Asset.ETH: "yellow",
    Asset.BNB: "#39FF14",  # neon green
}
