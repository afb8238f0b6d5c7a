"""Countdown display shown while a session runs.

Layout (top → bottom):
    - Round counter ("Round 3 / 8")
    - Phase label ("Hold")
    - Large m:ss countdown (turns red in the last 3 seconds)
    - Hold target for the current round
"""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QFrame, QLabel, QVBoxLayout, QWidget

from ..session.engine import SessionSnapshot
from ..session.state import Phase
from .styles import ENDING_COLOR, PHASE_COLORS


PHASE_LABELS: dict[Phase, str] = {
    Phase.READY:    "Ready",
    Phase.PREP:     "Prep",
    Phase.HOLD:     "Hold",
    Phase.RECOVERY: "Recovery",
    Phase.FINISHED: "Session Complete",
}


def format_time(seconds: int) -> str:
    m, s = divmod(max(0, seconds), 60)
    return f"{m}:{s:02d}"


class TimerDisplay(QWidget):
    """Renders ``SessionSnapshot``s from ``SessionEngine.tick``."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._ending = False
        self._build_ui()

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(8)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._round_label = QLabel("", card)
        self._phase_label = QLabel(PHASE_LABELS[Phase.READY], card)
        self._time_label = QLabel(format_time(0), card)
        self._target_label = QLabel("", card)
        for label in (
            self._round_label, self._phase_label,
            self._time_label, self._target_label,
        ):
            label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            layout.addWidget(label)

        self._phase_label.setStyleSheet("font-size: 26px; font-weight: 600;")
        self._apply_time_style(PHASE_COLORS[Phase.READY])

    # ── public ────────────────────────────────────────────────────────────

    @property
    def is_ending(self) -> bool:
        """True while the last 3 seconds of a phase are showing."""
        return self._ending

    def update_snapshot(self, snap: SessionSnapshot) -> None:
        if snap.phase == Phase.FINISHED:
            self._round_label.setText("Well done!")
        else:
            self._round_label.setText(
                f"Round {snap.current_round_index + 1} / {snap.total_rounds}"
            )
        self._phase_label.setText(PHASE_LABELS[snap.phase])
        self._time_label.setText(format_time(snap.time_remaining))
        self._target_label.setText(
            f"Hold target {format_time(snap.hold_target)}"
            if snap.hold_target else ""
        )

        self._ending = 0 < snap.time_remaining <= 3
        self._apply_time_style(
            ENDING_COLOR if self._ending else PHASE_COLORS[snap.phase]
        )

    # ── internal ──────────────────────────────────────────────────────────

    def _apply_time_style(self, color: str) -> None:
        self._time_label.setStyleSheet(
            f"font-size: 96px; font-family: Menlo, monospace; color: {color};"
        )
