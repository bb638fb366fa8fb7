from PySide6.QtWidgets import (
    QAbstractItemView,
    QHeaderView,
    QLabel,
    QStackedWidget,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)
from PySide6.QtCore import Qt

from matplotlib.figure import Figure
from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.ticker import FuncFormatter, MaxNLocator

from cryptopulse.types import ASSETS, Mode, SeriesSnapshot, View
from cryptopulse.ui.theme import (
    ASSET_COLORS,
    BACKGROUND,
    FOREGROUND,
    GRID,
    TABLE_BACKGROUND,
    TABLE_HEADER,
)
from cryptopulse.utils import table_rows


def table_headers(mode: Mode) -> list[str]:
    first = "Time" if mode.is_live else "Date"
    return [first] + [f"{asset.symbol} (USD)" for asset in ASSETS]


def table_title(mode: Mode) -> str:
    return "Latest Live Prices" if mode.is_live else "Historical Price Data"


class ChartView(QWidget):
    def __init__(self):
        super().__init__()

        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)

        self.figure = Figure(facecolor=BACKGROUND)
        self.canvas = FigureCanvas(self.figure)
        layout.addWidget(self.canvas)

        self.ax = self.figure.add_subplot(111)
        self.ax.set_facecolor(BACKGROUND)
        self.ax.tick_params(colors=FOREGROUND)
        self.ax.grid(color=GRID)
        for spine in self.ax.spines.values():
            spine.set_color(GRID)

        self._labels: tuple[str, ...] = ()
        self.lines = {}
        for asset in ASSETS:
            line, = self.ax.plot([], [], color=ASSET_COLORS[asset], linewidth=1.5, label=asset.display_name)
            self.lines[asset] = line

        legend = self.ax.legend(facecolor=BACKGROUND, edgecolor=GRID)
        for text in legend.get_texts():
            text.set_color(FOREGROUND)

        # x is the sample index; ticks show the label at that index
        self.ax.xaxis.set_major_locator(MaxNLocator(nbins=8, integer=True))
        self.ax.xaxis.set_major_formatter(FuncFormatter(self._format_tick))

    def _format_tick(self, x, _pos):
        i = int(round(x))
        if 0 <= i < len(self._labels):
            return self._labels[i]
        return ""

    def render(self, snapshot: SeriesSnapshot):
        self._labels = snapshot.labels
        xs = list(range(len(snapshot.labels)))
        for asset, line in self.lines.items():
            line.set_data(xs, [float(v) for v in snapshot.samples[asset]])

        if xs:
            self.ax.relim()
            self.ax.autoscale_view()
            self.ax.set_xlim(-0.5, max(len(xs) - 0.5, 0.5))

        self.canvas.draw_idle()


class ComparisonView(QWidget):
    def __init__(self):
        super().__init__()

        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)

        self.title_label = QLabel(table_title(Mode.LIVE))
        self.title_label.setStyleSheet("font-size: 16px; font-weight: bold;")
        self.title_label.setAlignment(Qt.AlignmentFlag.AlignHCenter)
        layout.addWidget(self.title_label)

        self.table = QTableWidget(0, len(ASSETS) + 1)
        self.table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.table.verticalHeader().setVisible(False)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
        self.table.setStyleSheet(
            f"QTableWidget {{ background-color: {TABLE_BACKGROUND}; color: {FOREGROUND}; }}"
            f" QHeaderView::section {{ background-color: {TABLE_HEADER}; color: {FOREGROUND}; }}"
        )
        layout.addWidget(self.table)

    def render(self, snapshot: SeriesSnapshot, mode: Mode):
        self.title_label.setText(table_title(mode))
        self.table.setHorizontalHeaderLabels(table_headers(mode))

        rows = table_rows(snapshot.labels, snapshot.samples)
        self.table.setRowCount(len(rows))
        for r, (label, *prices) in enumerate(rows):
            self.table.setItem(r, 0, QTableWidgetItem(label))
            for c, price in enumerate(prices, start=1):
                self.table.setItem(r, c, QTableWidgetItem(f"${price}"))


class BottomPanel(QStackedWidget):
    def __init__(self):
        super().__init__()

        self.chart = ChartView()
        self.comparison = ComparisonView()
        self.addWidget(self.chart)
        self.addWidget(self.comparison)

        self._pages = {View.GRAPH: self.chart, View.COMPARISON: self.comparison}

    def set_view(self, view: View):
        self.setCurrentWidget(self._pages[view])

    def render(self, snapshot: SeriesSnapshot, mode: Mode):
        self.chart.render(snapshot)
        self.comparison.render(snapshot, mode)
