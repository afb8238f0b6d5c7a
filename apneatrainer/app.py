"""Main application window for ApneaTrainer."""

from __future__ import annotations

import logging

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QLabel, QTabBar, QMessageBox, QPushButton, QSpinBox,
    QTableWidget, QTableWidgetItem, QHeaderView, QFrame,
)

from .audio.cues import CuePlayer
from .session.engine import SessionEngine, SessionSnapshot
from .session.state import Phase
from .settings import Settings, load_settings
from .tables.generator import Round, TableType, ValidationError
from .ui.styles import build_stylesheet
from .ui.timer_display import TimerDisplay, format_time

logger = logging.getLogger(__name__)


TAB_TABLE_TYPES = (TableType.CO2, TableType.O2)

TAB_TITLES: dict[TableType, str] = {
    TableType.CO2: "CO₂ Tolerance Table",
    TableType.O2:  "O₂ Tolerance Table",
}

DESCRIPTIONS: dict[TableType, str] = {
    TableType.CO2: (
        "Enter your maximum comfortable breath-hold time (PB). The "
        "table's hold time will be ~60% of your PB, with decreasing "
        "recovery periods."
    ),
    TableType.O2: (
        "Enter your maximum comfortable breath-hold time (PB). The table "
        "will have increasing hold times with a constant 2-minute recovery."
    ),
}

SAFETY_WARNINGS: dict[TableType, str] = {
    TableType.CO2: (
        "Never train breath-holds in or near water. Sit or lie down "
        "somewhere safe and stop at the first sign of discomfort."
    ),
    TableType.O2: (
        "O₂ tables push you close to your limit. Never train in water, "
        "never train alone, and only attempt them once CO₂ tables feel easy."
    ),
}

PREP_HEADERS: dict[TableType, str] = {
    TableType.CO2: "Prep (Recovery)",
    TableType.O2:  "Prep (2:00)",
}

HOLD_HEADERS: dict[TableType, str] = {
    TableType.CO2: "Hold (Constant)",
    TableType.O2:  "Hold (Increasing)",
}

COMPLETION_TEXT = (
    "Congratulations! Remember to recover fully and wait at least "
    "24 hours before your next session."
)


class TrainingWindow(QMainWindow):
    """Table form, generated table, countdown and completion views."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        cue_player: CuePlayer | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("ApneaTrainer")

        # ── settings ──────────────────────────────────────────────────
        self._settings: Settings = settings or load_settings()
        self.resize(self._settings.window_width, self._settings.window_height)
        self.setStyleSheet(build_stylesheet())

        # ── engine + audio ────────────────────────────────────────────
        self._engine = SessionEngine(
            self,
            tick_interval_ms=self._settings.tick_interval_ms,
            recovery_seconds=self._settings.recovery_seconds,
        )
        self._cue_player = cue_player or CuePlayer(parent=self)
        self._cue_player.set_volume(self._settings.sound_volume)
        self._cue_player.set_enabled(self._settings.sound_enabled)

        try:
            self._table_type = TableType(self._settings.default_table_type)
        except ValueError:
            self._table_type = TableType.CO2

        self._build_ui()
        self._connect_signals()
        self._update_views()

    # ══════════════════════════════════════════════════════════════════
    #  BUILD UI
    # ══════════════════════════════════════════════════════════════════

    def _build_ui(self) -> None:
        central = QWidget()
        self.setCentralWidget(central)
        root = QVBoxLayout(central)
        root.setContentsMargins(16, 12, 16, 12)
        root.setSpacing(12)

        # ── table type tabs ──────────────────────────────────────────
        self._tabs = QTabBar(central)
        for table_type in TAB_TABLE_TYPES:
            self._tabs.addTab(TAB_TITLES[table_type])
        self._tabs.setCurrentIndex(TAB_TABLE_TYPES.index(self._table_type))
        root.addWidget(self._tabs)

        # ── setup: warning + PB form ─────────────────────────────────
        self._setup_view = QWidget(central)
        setup = QVBoxLayout(self._setup_view)
        setup.setContentsMargins(0, 0, 0, 0)

        self._warning_label = QLabel(self._setup_view)
        self._warning_label.setObjectName("warning")
        self._warning_label.setWordWrap(True)
        setup.addWidget(self._warning_label)

        self._description_label = QLabel(self._setup_view)
        self._description_label.setWordWrap(True)
        setup.addWidget(self._description_label)

        form_row = QHBoxLayout()
        self._pb_spin = QSpinBox(self._setup_view)
        self._pb_spin.setRange(0, 999)
        self._pb_spin.setSuffix(" s")
        self._pb_spin.setValue(self._settings.default_personal_best)
        self._generate_btn = QPushButton("Generate Table", self._setup_view)
        self._generate_btn.setObjectName("primaryButton")
        form_row.addWidget(self._pb_spin, 1)
        form_row.addWidget(self._generate_btn)
        setup.addLayout(form_row)
        root.addWidget(self._setup_view)

        # ── generated table + start ──────────────────────────────────
        self._table_view = QWidget(central)
        table_layout = QVBoxLayout(self._table_view)
        table_layout.setContentsMargins(0, 0, 0, 0)

        title = QLabel("Your Training Protocol", self._table_view)
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        table_layout.addWidget(title)

        self._table_widget = QTableWidget(0, 3, self._table_view)
        self._table_widget.verticalHeader().setVisible(False)
        self._table_widget.horizontalHeader().setSectionResizeMode(
            QHeaderView.ResizeMode.Stretch,
        )
        self._table_widget.setEditTriggers(
            QTableWidget.EditTrigger.NoEditTriggers,
        )
        table_layout.addWidget(self._table_widget)

        self._start_btn = QPushButton("START SESSION", self._table_view)
        self._start_btn.setObjectName("primaryButton")
        table_layout.addWidget(self._start_btn)
        root.addWidget(self._table_view)

        # ── running session ──────────────────────────────────────────
        self._session_view = QWidget(central)
        session = QVBoxLayout(self._session_view)
        session.setContentsMargins(0, 0, 0, 0)
        self._timer_display = TimerDisplay(self._session_view)
        session.addWidget(self._timer_display)
        self._stop_btn = QPushButton("STOP SESSION", self._session_view)
        self._stop_btn.setObjectName("dangerButton")
        session.addWidget(self._stop_btn)
        root.addWidget(self._session_view)

        # ── completion ───────────────────────────────────────────────
        self._complete_view = QFrame(central)
        self._complete_view.setObjectName("card")
        complete = QVBoxLayout(self._complete_view)
        complete.setAlignment(Qt.AlignmentFlag.AlignCenter)
        heading = QLabel("Session Complete!", self._complete_view)
        heading.setObjectName("complete")
        heading.setAlignment(Qt.AlignmentFlag.AlignCenter)
        complete.addWidget(heading)
        body = QLabel(COMPLETION_TEXT, self._complete_view)
        body.setWordWrap(True)
        body.setAlignment(Qt.AlignmentFlag.AlignCenter)
        complete.addWidget(body)
        self._new_session_btn = QPushButton(
            "Start New Session", self._complete_view,
        )
        complete.addWidget(self._new_session_btn)
        root.addWidget(self._complete_view)

        root.addStretch(1)
        self._refresh_setup_text()

    # ══════════════════════════════════════════════════════════════════
    #  SIGNALS
    # ══════════════════════════════════════════════════════════════════

    def _connect_signals(self) -> None:
        self._tabs.currentChanged.connect(self._on_tab_changed)
        self._generate_btn.clicked.connect(self._on_generate)
        self._start_btn.clicked.connect(self._on_start)
        self._stop_btn.clicked.connect(self._on_stop_requested)
        self._new_session_btn.clicked.connect(self._on_new_session)

        self._engine.on_tick(self._on_tick)
        self._engine.on_cue(self._cue_player.play)
        self._engine.phase_changed.connect(lambda _phase: self._update_views())
        self._engine.table_changed.connect(self._populate_table)

    # ── slots ─────────────────────────────────────────────────────────

    def _on_tab_changed(self, index: int) -> None:
        self._table_type = TAB_TABLE_TYPES[index]
        self._engine.reset()
        self._pb_spin.setValue(self._settings.default_personal_best)
        self._refresh_setup_text()
        self._update_views()

    def _on_generate(self) -> None:
        try:
            self._engine.submit_personal_best(
                self._table_type, self._pb_spin.value(),
            )
        except ValidationError as exc:
            self._show_alert(str(exc))
            return
        self._update_views()

    def _on_start(self) -> None:
        self._engine.start()
        self._update_views()

    def _on_stop_requested(self) -> None:
        if self._confirm_stop():
            self._end_session()

    def _on_new_session(self) -> None:
        self._end_session()

    def _on_tick(self, snap: SessionSnapshot) -> None:
        self._timer_display.update_snapshot(snap)

    # ══════════════════════════════════════════════════════════════════
    #  HELPERS
    # ══════════════════════════════════════════════════════════════════

    def _end_session(self) -> None:
        """Stop, drop the table and go back to the form."""
        self._engine.stop(clear_table=True)
        self._pb_spin.setValue(self._settings.default_personal_best)
        self._update_views()

    def _confirm_stop(self) -> bool:
        reply = QMessageBox.question(
            self,
            "Are you sure?",
            "This will end your current training session and reset "
            "your progress.",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No,
        )
        return reply == QMessageBox.StandardButton.Yes

    def _show_alert(self, message: str) -> None:
        logger.info("Rejected personal best: %s", message)
        QMessageBox.warning(self, "Invalid Input", message)

    def _refresh_setup_text(self) -> None:
        self._warning_label.setText(SAFETY_WARNINGS[self._table_type])
        self._description_label.setText(DESCRIPTIONS[self._table_type])

    def _populate_table(self, table: tuple[Round, ...] | None) -> None:
        rows = table or ()
        self._table_widget.setHorizontalHeaderLabels([
            "Set",
            PREP_HEADERS[self._table_type],
            HOLD_HEADERS[self._table_type],
        ])
        self._table_widget.setRowCount(len(rows))
        for row, rnd in enumerate(rows):
            for col, text in enumerate(
                (str(rnd.round), format_time(rnd.prep), format_time(rnd.hold))
            ):
                item = QTableWidgetItem(text)
                item.setTextAlignment(Qt.AlignmentFlag.AlignCenter)
                self._table_widget.setItem(row, col, item)

    def _update_views(self) -> None:
        """Show the view that matches the engine's phase."""
        finished = self._engine.phase == Phase.FINISHED
        active = self._engine.is_active
        has_table = self._engine.table is not None

        self._tabs.setVisible(not finished)
        self._tabs.setEnabled(not active)
        self._setup_view.setVisible(not finished and not active)
        self._table_view.setVisible(not finished and not active and has_table)
        self._session_view.setVisible(active)
        self._complete_view.setVisible(finished)

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW EVENTS
    # ══════════════════════════════════════════════════════════════════

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """Cancel any pending tick before the window goes away."""
        self._engine.stop()
        event.accept()

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        """Escape asks to stop a running session."""
        if event.key() == Qt.Key.Key_Escape and self._engine.is_active:
            self._on_stop_requested()
            event.accept()
            return
        super().keyPressEvent(event)
