from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QButtonGroup,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from cryptopulse.types import ASSETS, Mode, SeriesSnapshot, View
from cryptopulse.ui.components.StatBox import StatBox
from cryptopulse.ui.theme import ACTIVE_MODE, ACTIVE_VIEW, ASSET_COLORS, ERROR, INACTIVE

MODE_BUTTONS = (
    (Mode.LIVE, "🔴 Live"),
    (Mode.WINDOW_30D, "📆 1 Month"),
    (Mode.WINDOW_180D, "🗓 6 Months"),
    (Mode.WINDOW_365D, "📊 1 Year"),
)

VIEW_BUTTONS = (
    (View.GRAPH, "📈 Graph"),
    (View.COMPARISON, "📋 Comparison"),
)


def subtitle_for(mode: Mode, poll_seconds: float) -> str:
    if mode.is_live:
        return f"Live cryptocurrency dashboard (auto-refreshes every {poll_seconds:g} seconds)"
    return f"Historical cryptocurrency prices (last {mode.title})"


def _button_style(active: bool, active_color: str, text_color: str) -> str:
    return (
        f"background-color: {active_color if active else INACTIVE};"
        f" color: {text_color}; font-weight: bold;"
        " border: none; border-radius: 5px; padding: 8px 15px; margin: 5px;"
    )


class TopPanel(QWidget):
    """Title, mode/view selectors and the latest-price row."""

    mode_selected = Signal(object)
    view_selected = Signal(object)

    def __init__(self, poll_seconds: float = 30):
        super().__init__()
        self._poll_seconds = poll_seconds

        panel_layout = QVBoxLayout(self)
        panel_layout.setContentsMargins(0, 0, 0, 0)
        panel_layout.setSpacing(2)
        panel_layout.setAlignment(Qt.AlignmentFlag.AlignTop)

        self.title_label = QLabel("💹 CryptoPulse")
        self.title_label.setStyleSheet("font-size: 24px; font-weight: bold;")
        self.title_label.setAlignment(Qt.AlignmentFlag.AlignHCenter)
        panel_layout.addWidget(self.title_label)

        self.subtitle_label = QLabel(subtitle_for(Mode.LIVE, poll_seconds))
        self.subtitle_label.setAlignment(Qt.AlignmentFlag.AlignHCenter)
        panel_layout.addWidget(self.subtitle_label)

        mode_row = QHBoxLayout()
        mode_row.setAlignment(Qt.AlignmentFlag.AlignHCenter)
        self.mode_group = QButtonGroup(self)
        self.mode_buttons = {}
        for mode, text in MODE_BUTTONS:
            btn = QPushButton(text)
            btn.setCheckable(True)
            btn.clicked.connect(lambda _checked=False, m=mode: self.mode_selected.emit(m))
            self.mode_group.addButton(btn)
            self.mode_buttons[mode] = btn
            mode_row.addWidget(btn)
        panel_layout.addLayout(mode_row)

        view_row = QHBoxLayout()
        view_row.setAlignment(Qt.AlignmentFlag.AlignHCenter)
        self.view_group = QButtonGroup(self)
        self.view_buttons = {}
        for view, text in VIEW_BUTTONS:
            btn = QPushButton(text)
            btn.setCheckable(True)
            btn.clicked.connect(lambda _checked=False, v=view: self.view_selected.emit(v))
            self.view_group.addButton(btn)
            self.view_buttons[view] = btn
            view_row.addWidget(btn)
        panel_layout.addLayout(view_row)

        stats_row = QHBoxLayout()
        stats_row.setAlignment(Qt.AlignmentFlag.AlignHCenter)
        stats_row.setSpacing(16)
        self.price_boxes = {}
        for asset in ASSETS:
            box = StatBox(f"{asset.symbol} (USD)", ASSET_COLORS[asset])
            self.price_boxes[asset] = box
            stats_row.addWidget(box)
        panel_layout.addLayout(stats_row)

        self.status_label = QLabel("")
        self.status_label.setStyleSheet(f"color: {ERROR};")
        self.status_label.setAlignment(Qt.AlignmentFlag.AlignHCenter)
        self.status_label.setVisible(False)
        panel_layout.addWidget(self.status_label)

        self.set_mode(Mode.LIVE)
        self.set_view(View.GRAPH)

    def set_mode(self, mode: Mode):
        self.subtitle_label.setText(subtitle_for(mode, self._poll_seconds))
        for m, btn in self.mode_buttons.items():
            btn.setChecked(m == mode)
            btn.setStyleSheet(_button_style(m == mode, ACTIVE_MODE, "black"))

    def set_view(self, view: View):
        for v, btn in self.view_buttons.items():
            btn.setChecked(v == view)
            btn.setStyleSheet(_button_style(v == view, ACTIVE_VIEW, "white"))

    def update_prices(self, snapshot: SeriesSnapshot):
        for asset, box in self.price_boxes.items():
            series = snapshot.samples[asset]
            box.update_value(f"${series[-1]}" if series else None)

    def show_status(self, message: str):
        self.status_label.setText(message)
        self.status_label.setVisible(bool(message))

    def clear_status(self):
        self.show_status("")
