from PySide6.QtWidgets import QWidget, QVBoxLayout
from PySide6.QtCore import Qt

from cryptopulse.controller import ModeController
from cryptopulse.types import Mode, SeriesSnapshot, View
from cryptopulse.ui.top_panel import TopPanel
from cryptopulse.ui.bottom_panel import BottomPanel
from cryptopulse.ui.theme import BACKGROUND, FOREGROUND


class MainLayout(QWidget):
    def __init__(self, controller: ModeController):
        super().__init__()
        self.controller = controller

        self.setWindowTitle("CryptoPulse")
        self.setStyleSheet(f"background-color: {BACKGROUND}; color: {FOREGROUND};")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.setSpacing(0)

        self.top_panel = TopPanel(poll_seconds=controller.poll_seconds)
        layout.addWidget(self.top_panel, alignment=Qt.AlignmentFlag.AlignHCenter)

        self.bottom_panel = BottomPanel()
        layout.addWidget(self.bottom_panel)

        # user actions -> controller
        self.top_panel.mode_selected.connect(self.on_mode_selected)
        self.top_panel.view_selected.connect(controller.set_view)

        # controller -> widgets
        controller.mode_changed.connect(self.on_mode_changed)
        controller.view_changed.connect(self.on_view_changed)
        controller.store_changed.connect(self.on_store_changed)
        controller.fetch_failed.connect(self.top_panel.show_status)

        self.on_mode_changed(controller.mode)
        self.on_view_changed(controller.view)
        self.on_store_changed(controller.snapshot())

    def on_mode_selected(self, mode: Mode):
        # the active window button retries its one-shot fetch
        if mode == self.controller.mode and not mode.is_live:
            self.controller.refresh()
        else:
            self.controller.set_mode(mode)

    def on_mode_changed(self, mode: Mode):
        self.top_panel.set_mode(mode)
        self.top_panel.clear_status()

    def on_view_changed(self, view: View):
        self.top_panel.set_view(view)
        self.bottom_panel.set_view(view)

    def on_store_changed(self, snapshot: SeriesSnapshot):
        self.top_panel.clear_status()
        self.top_panel.update_prices(snapshot)
        self.bottom_panel.render(snapshot, snapshot.mode or self.controller.mode)

    def closeEvent(self, event):
        self.controller.shutdown()
        super().closeEvent(event)
