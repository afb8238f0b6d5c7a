"""Pure session state machine.

Phases
------
READY      No session running.
PREP       Breathe / rest before a hold.
HOLD       The breath-hold itself.
RECOVERY   Rest after a hold (three-phase tables only).
FINISHED   Terminal; the last round's final phase has completed.

Transitions
-----------
any → PREP (round 0)                      (start, needs a table)
PREP → HOLD                               (countdown reaches 0)
HOLD → PREP (next round)                  (two-phase tables)
HOLD → RECOVERY → PREP (next round)       (three-phase tables)
HOLD | RECOVERY → FINISHED                (last round done)
any → READY                               (stop / reset)

``transition`` never touches timers or audio; it returns the new state
plus the list of cues the caller should emit, in order.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from ..tables.generator import Round


# ── enums ─────────────────────────────────────────────────────────────────


class Phase(Enum):
    READY = "ready"
    PREP = "prep"
    HOLD = "hold"
    RECOVERY = "recovery"
    FINISHED = "finished"


class CueKind(Enum):
    START = "start"
    TICK = "tick"
    END = "end"


class Event(Enum):
    START = "start"
    TICK = "tick"
    STOP = "stop"
    RESET = "reset"


# ── constants ─────────────────────────────────────────────────────────────

# A tick cue sounds on each decrement while 1 < remaining <= 4,
# i.e. on the way down to 3, 2 and 1 seconds left.
TICK_CUE_FLOOR = 1
TICK_CUE_CEILING = 4

COUNTING_PHASES = (Phase.PREP, Phase.HOLD, Phase.RECOVERY)


# ── errors ────────────────────────────────────────────────────────────────


class InvalidTransition(RuntimeError):
    """Event cannot apply: no table bound or round index out of range."""


# ── state ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SessionState:
    active: bool = False
    round_index: int = 0
    phase: Phase = Phase.READY
    time_remaining: int = 0


INITIAL_STATE = SessionState()


def phase_duration(rnd: Round, phase: Phase) -> int:
    """Seconds *phase* lasts in *rnd* (0 for non-counting phases)."""
    if phase == Phase.PREP:
        return rnd.prep
    if phase == Phase.HOLD:
        return rnd.hold
    if phase == Phase.RECOVERY:
        return rnd.recovery or 0
    return 0


def _round_at(table: tuple[Round, ...], index: int) -> Round:
    if not 0 <= index < len(table):
        raise InvalidTransition(
            f"round index {index} out of range for {len(table)}-round table"
        )
    return table[index]


def _next_position(
    state: SessionState, table: tuple[Round, ...]
) -> tuple[int, Phase] | None:
    """Where the session goes after the current phase ends.

    ``None`` means the session is finished.  In three-phase tables the
    ``recovery == 0`` end marker is read from the round whose hold is ending.
    """
    idx = state.round_index
    rnd = _round_at(table, idx)
    is_last = idx == len(table) - 1

    if state.phase == Phase.PREP:
        return idx, Phase.HOLD

    if state.phase == Phase.HOLD:
        if rnd.has_recovery:
            # recovery == 0 is the table's own end marker
            if rnd.recovery == 0:
                return None
            return idx, Phase.RECOVERY
        return None if is_last else (idx + 1, Phase.PREP)

    if state.phase == Phase.RECOVERY:
        return None if is_last else (idx + 1, Phase.PREP)

    raise InvalidTransition(f"no countdown runs in phase {state.phase.value}")


def transition(
    state: SessionState,
    event: Event,
    table: tuple[Round, ...] | None,
) -> tuple[SessionState, list[CueKind]]:
    """Apply *event* to *state*.  Returns ``(new_state, cues)``.

    Raises ``InvalidTransition`` when starting without a table or when
    the state points outside *table*; callers decide how to recover.
    """
    if event in (Event.STOP, Event.RESET):
        return INITIAL_STATE, []

    if event == Event.START:
        if not table:
            raise InvalidTransition("cannot start without a table")
        first = table[0]
        return (
            SessionState(
                active=True,
                round_index=0,
                phase=Phase.PREP,
                time_remaining=first.prep,
            ),
            [CueKind.START],
        )

    # ── tick ──────────────────────────────────────────────────────────
    if not state.active:
        return state, []
    if not table:
        raise InvalidTransition("tick with no table bound")
    _round_at(table, state.round_index)

    cues: list[CueKind] = []
    if state.time_remaining > 0:
        if TICK_CUE_FLOOR < state.time_remaining <= TICK_CUE_CEILING:
            cues.append(CueKind.TICK)
        state = replace(state, time_remaining=state.time_remaining - 1)
        if state.time_remaining > 0:
            return state, cues

    # ── phase boundary ────────────────────────────────────────────────
    cues.append(CueKind.END)
    nxt = _next_position(state, table)
    if nxt is None:
        return (
            SessionState(
                active=False,
                round_index=state.round_index,
                phase=Phase.FINISHED,
                time_remaining=0,
            ),
            cues,
        )

    index, phase = nxt
    cues.append(CueKind.START)
    return (
        SessionState(
            active=True,
            round_index=index,
            phase=phase,
            time_remaining=phase_duration(_round_at(table, index), phase),
        ),
        cues,
    )
