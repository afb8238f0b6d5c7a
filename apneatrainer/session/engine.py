"""Qt driver for the breath-hold session state machine.

The engine owns one table, one ``SessionState`` and one single-shot
``QTimer``.  Each timeout applies a TICK to the pure state machine in
``state.py``, emits the resulting cues and a fresh snapshot, then
re-arms the timer if the session is still active.  Exactly one wake-up
is ever pending, and every external control (start, stop, reset, new
table) stops it before touching state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..tables.generator import (
    Round,
    TableType,
    generate_table,
    validate_personal_best,
    with_recovery,
)
from .state import (
    COUNTING_PHASES,
    INITIAL_STATE,
    CueKind,
    Event,
    InvalidTransition,
    Phase,
    SessionState,
    transition,
)

logger = logging.getLogger(__name__)


TICK_INTERVAL_MS = 1000


@dataclass(frozen=True)
class SessionSnapshot:
    """Everything the display needs to render one frame."""

    phase: Phase
    time_remaining: int
    current_round_index: int
    total_rounds: int
    hold_target: int = 0


# ── engine ────────────────────────────────────────────────────────────────


class SessionEngine(QObject):
    """Runs a CO2/O2 table through its phases, one tick per second.

    Signals
    -------
    tick(snapshot: SessionSnapshot)
        Emitted on every state change (start, each tick, stop, reset).
    cue(kind: CueKind)
        One per phase start, warning tick and phase end.  Connect an
        audio player; the engine never makes sound itself.
    phase_changed(phase: Phase)
        Emitted when the phase differs from the previous one.
    session_finished()
        Emitted once when the last round completes.
    table_changed(table: tuple)
        Emitted when a table is bound or cleared.
    """

    tick = pyqtSignal(object)
    cue = pyqtSignal(object)
    phase_changed = pyqtSignal(object)
    session_finished = pyqtSignal()
    table_changed = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        tick_interval_ms: int = TICK_INTERVAL_MS,
        recovery_seconds: int = 0,
    ) -> None:
        super().__init__(parent)

        self._table: tuple[Round, ...] | None = None
        self._state: SessionState = INITIAL_STATE
        self._recovery_seconds: int = max(0, recovery_seconds)

        # ── Qt timer (single-shot, re-armed after every tick) ─────────
        self._qt_timer = QTimer(self)
        self._qt_timer.setSingleShot(True)
        self._qt_timer.setInterval(tick_interval_ms)
        self._qt_timer.timeout.connect(self._on_tick)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def time_remaining(self) -> int:
        return self._state.time_remaining

    @property
    def current_round_index(self) -> int:
        """0-based index into the bound table."""
        return self._state.round_index

    @property
    def table(self) -> tuple[Round, ...] | None:
        return self._table

    @property
    def total_rounds(self) -> int:
        return len(self._table) if self._table else 0

    @property
    def is_active(self) -> bool:
        return self._state.active

    @property
    def has_pending_tick(self) -> bool:
        """True while a wake-up is scheduled."""
        return self._qt_timer.isActive()

    @property
    def recovery_seconds(self) -> int:
        return self._recovery_seconds

    @recovery_seconds.setter
    def recovery_seconds(self, value: int) -> None:
        """Applies to tables submitted after the change."""
        self._recovery_seconds = max(0, value)

    def snapshot(self) -> SessionSnapshot:
        hold_target = 0
        if self._table and 0 <= self._state.round_index < len(self._table):
            hold_target = self._table[self._state.round_index].hold
        return SessionSnapshot(
            phase=self._state.phase,
            time_remaining=self._state.time_remaining,
            current_round_index=self._state.round_index,
            total_rounds=self.total_rounds,
            hold_target=hold_target,
        )

    # ══════════════════════════════════════════════════════════════════
    #  SUBSCRIPTIONS
    # ══════════════════════════════════════════════════════════════════

    def on_tick(self, callback: Callable[[SessionSnapshot], None]) -> None:
        self.tick.connect(callback)

    def on_cue(self, callback: Callable[[CueKind], None]) -> None:
        self.cue.connect(callback)

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def submit_personal_best(
        self, table_type: TableType | str, personal_best: int
    ) -> tuple[Round, ...]:
        """Validate, generate and bind a fresh table.

        Raises ``ValidationError`` before anything changes when the
        personal best is out of range for *table_type*.  On success any
        running session is cancelled and the engine returns to READY.
        """
        validate_personal_best(table_type, personal_best)
        table = generate_table(table_type, personal_best)
        if self._recovery_seconds > 0:
            table = with_recovery(table, self._recovery_seconds)

        self._qt_timer.stop()
        self._bind_table(table)
        self._apply(Event.RESET)
        logger.info(
            "Generated %s table for PB %ss (%d rounds)",
            TableType(table_type).value, personal_best, len(table),
        )
        return table

    def start(self, table: tuple[Round, ...] | None = None) -> None:
        """Begin a session from round 1 prep.

        Binds *table* first when given.  Silently does nothing when no
        table is bound.
        """
        self._qt_timer.stop()
        if table is not None:
            self._bind_table(tuple(table))
        if not self._table:
            logger.debug("start ignored: no table bound")
            self._apply(Event.RESET)
            return
        self._apply(Event.START)
        logger.info("Session started (%d rounds)", self.total_rounds)
        self._arm()

    def stop(self, *, clear_table: bool = False) -> None:
        """End the current session and return to READY.

        The table stays bound unless *clear_table* is set.
        """
        self._qt_timer.stop()
        if clear_table:
            self._bind_table(None)
        self._apply(Event.STOP)

    def reset(self) -> None:
        """Unbind the table and return to READY, whatever was running."""
        self._qt_timer.stop()
        self._bind_table(None)
        self._apply(Event.RESET)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — timer mechanics
    # ══════════════════════════════════════════════════════════════════

    def _arm(self) -> None:
        if self._state.active and self._state.phase in COUNTING_PHASES:
            self._qt_timer.start()  # restarts if already pending
        else:
            self._qt_timer.stop()

    def _on_tick(self) -> None:
        self._apply(Event.TICK)
        self._arm()

    def _apply(self, event: Event) -> None:
        previous = self._state
        try:
            new_state, cues = transition(previous, event, self._table)
        except InvalidTransition as exc:
            logger.warning("Invalid %s transition: %s", event.value, exc)
            self._qt_timer.stop()
            if event == Event.START:
                new_state = INITIAL_STATE
            else:
                new_state = SessionState(
                    active=False,
                    round_index=previous.round_index,
                    phase=Phase.FINISHED,
                    time_remaining=0,
                )
            cues = []

        self._state = new_state
        for kind in cues:
            self.cue.emit(kind)

        if new_state.phase != previous.phase:
            logger.debug(
                "Phase %s -> %s (round %d)",
                previous.phase.value, new_state.phase.value,
                new_state.round_index + 1,
            )
            self.phase_changed.emit(new_state.phase)

        self.tick.emit(self.snapshot())

        if new_state.phase == Phase.FINISHED and previous.phase != Phase.FINISHED:
            logger.info("Session finished after %d rounds", self.total_rounds)
            self.session_finished.emit()

    def _bind_table(self, table: tuple[Round, ...] | None) -> None:
        self._table = table
        self.table_changed.emit(table)
