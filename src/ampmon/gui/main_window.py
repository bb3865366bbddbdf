"""Main window for the AmpMon GUI."""

from __future__ import annotations

import logging

from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QCloseEvent, QFont
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from ..config.app_config import AppConfig
from ..core.view_model import SWR_NOMINAL_COLOR, DashboardView
from ..remote.button_state import ButtonState
from ..remote.control_actuator import ActionOutcome, ControlAction
from ..remote.webengine_surface import WebEngineSurface
from .dialogs import ask_yes_no, show_warning
from .monitor_controller import MonitorController

# (caption, DashboardView attribute); None marks a spacer row.
DASHBOARD_ROWS: list[tuple[str, str] | None] = [
    ("FWD", "forward_power"),
    ("REF", "reflected_power"),
    ("SWR", "swr"),
    ("Gain", "gain"),
    ("Input P", "input_power"),
    ("DC V", "dc_voltage"),
    ("DC A", "dc_current"),
    ("Bias L", "bias_left"),
    ("Bias R", "bias_right"),
    ("Temp C", "temperature"),
    ("Temp Rel", "temperature_trend"),
    ("Dissip", "dissipated_power"),
    None,
    ("Band", "band"),
    ("Mode", "mode"),
    ("ATU", "tuner_status"),
    ("ATU SWR", "tuner_swr"),
    ("ATU Temp", "tuner_temperature"),
    ("CAT", "cat"),
    ("RC", "remote"),
]

_BUTTON_STYLE = (
    "QPushButton {{ background-color: {bg}; color: white; border: 1px solid #777;"
    " font-weight: bold; font-size: 12pt; min-width: 120px; min-height: 40px; }}"
)


class MainWindow(QMainWindow):
    """Main window: dashboard values, control buttons, and the amplifier page."""

    def __init__(self, app_config: AppConfig | None = None, *, show_page: bool = False) -> None:
        super().__init__()
        self.setWindowTitle("ACOM Live Monitor")
        self.resize(1100, 900)

        self._app_config = app_config or AppConfig()
        self._logger = logging.getLogger(__name__)
        self._value_labels: dict[str, QLabel] = {}

        self._web_view = QWebEngineView()
        self._surface = WebEngineSurface(parent=self)
        self._web_view.setPage(self._surface.page)
        self._web_view.setVisible(show_page)

        self.controller = MonitorController(
            self._surface,
            self._app_config.monitor,
            confirm=self._confirm,
            parent=self,
        )

        self._build_ui()
        self._wire_controller()

    # --------------------------------------------------------------- layout
    def _build_ui(self) -> None:
        dashboard = QWidget()
        dashboard.setStyleSheet("background-color: black; color: white;")
        grid = QGridLayout(dashboard)
        grid.setContentsMargins(20, 20, 20, 20)
        grid.setColumnStretch(0, 3)
        grid.setColumnStretch(1, 7)

        caption_font = QFont("Segoe UI", 14)
        value_font = QFont("Consolas", 20, QFont.Weight.Bold)
        for row, entry in enumerate(DASHBOARD_ROWS):
            if entry is None:
                grid.setRowMinimumHeight(row, 15)
                continue
            caption, attr = entry
            name_label = QLabel(caption)
            name_label.setFont(caption_font)
            value_label = QLabel("")
            value_label.setFont(value_font)
            value_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
            grid.addWidget(name_label, row, 0)
            grid.addWidget(value_label, row, 1)
            self._value_labels[attr] = value_label

        self.btn_standby = self._make_button("Standby", "#323232", ControlAction.STANDBY)
        self.btn_tune = self._make_button("TUNE", "#323232", ControlAction.TUNE)
        self.btn_bypass = self._make_button("Bypass", "#323232", ControlAction.BYPASS)
        self.btn_power = self._make_button("Power Off", "#501414", ControlAction.POWER_TOGGLE)

        button_row = QHBoxLayout()
        for button in (self.btn_standby, self.btn_tune, self.btn_bypass, self.btn_power):
            button_row.addWidget(button)
        button_row.addStretch(1)
        grid.addLayout(button_row, len(DASHBOARD_ROWS), 1)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.addWidget(dashboard)
        splitter.addWidget(self._web_view)

        container = QWidget()
        layout = QVBoxLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(splitter)
        self.setCentralWidget(container)
        self.statusBar().showMessage(f"Amplifier: {self._app_config.amplifier_url}")

    def _make_button(self, text: str, background: str, action: ControlAction) -> QPushButton:
        button = QPushButton(text)
        button.setStyleSheet(_BUTTON_STYLE.format(bg=background))
        button.clicked.connect(lambda _checked=False, a=action: self.controller.request_action(a))
        return button

    def _wire_controller(self) -> None:
        self.controller.view_updated.connect(self._on_view_updated)
        self.controller.buttons_updated.connect(self._on_buttons_updated)
        self.controller.error_reported.connect(self._on_error_reported)
        self.controller.stats_updated.connect(self._on_stats_updated)
        self.controller.action_finished.connect(self._on_action_finished)

    # --------------------------------------------------------------- lifecycle
    def start(self) -> None:
        self.controller.start(self._app_config.amplifier_url)

    def closeEvent(self, event: QCloseEvent) -> None:
        try:
            self.controller.stop()
        except Exception:  # pragma: no cover - best-effort shutdown
            self._logger.exception("Failed to stop poll loop on close")
        super().closeEvent(event)

    # --------------------------------------------------------------- slots
    @Slot(object)
    def _on_view_updated(self, view: DashboardView) -> None:
        for attr, label in self._value_labels.items():
            label.setText(str(getattr(view, attr, "")))
        swr_label = self._value_labels.get("swr")
        if swr_label is not None:
            swr_label.setStyleSheet(f"color: {view.swr_color or SWR_NOMINAL_COLOR};")

    @Slot(object)
    def _on_buttons_updated(self, state: ButtonState) -> None:
        # Empty captions mean "button not on the page right now": keep the old text.
        if state.standby:
            self.btn_standby.setText(state.standby)
        if state.bypass:
            self.btn_bypass.setText(state.bypass)
        if state.power:
            self.btn_power.setText(state.power)

    @Slot(str)
    def _on_error_reported(self, message: str) -> None:
        show_warning(self, "Error", message)

    @Slot(str)
    def _on_stats_updated(self, message: str) -> None:
        self.statusBar().showMessage(message, 5000)

    @Slot(object)
    def _on_action_finished(self, outcome: ActionOutcome) -> None:
        if outcome.ok:
            self.statusBar().showMessage(f"Clicked {outcome.label}", 3000)

    async def _confirm(self, message: str) -> bool:
        return await ask_yes_no(self, "Confirm", message)
