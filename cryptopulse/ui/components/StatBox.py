from PySide6.QtWidgets import (
    QWidget,
    QLabel,
    QVBoxLayout,
)

PLACEHOLDER = "—"


class StatBox(QWidget):
    def __init__(self, title: str, accent: str = "white", initial_value: str = PLACEHOLDER):
        super().__init__()

        layout = QVBoxLayout()
        self.setLayout(layout)

        self.title_label = QLabel(title)
        self.title_label.setStyleSheet(f"font-size: 14px; font-weight: bold; color: {accent};")
        layout.addWidget(self.title_label)

        self.value_label = QLabel(initial_value)
        self.value_label.setStyleSheet("font-size: 24px;")
        layout.addWidget(self.value_label)

    def update_value(self, new_value: str | None):
        self.value_label.setText(new_value if new_value else PLACEHOLDER)

    def value(self) -> str:
        return self.value_label.text()
