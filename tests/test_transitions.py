"""Tests for the pure session transition function (no Qt needed)."""

import pytest

from apneatrainer.session.state import (
    CueKind, Event, InvalidTransition, Phase, SessionState,
    INITIAL_STATE, transition,
)
from apneatrainer.tables.generator import Round, generate_co2_table, with_recovery


TABLE = (
    Round(round=1, prep=3, hold=2),
    Round(round=2, prep=2, hold=5),
)


def tick(state, table=TABLE):
    return transition(state, Event.TICK, table)


def started(table=TABLE):
    state, _ = transition(INITIAL_STATE, Event.START, table)
    return state


# ═══════════════════════════════════════════════════════════════════════════
#  START / STOP / RESET
# ═══════════════════════════════════════════════════════════════════════════


class TestControlEvents:

    def test_initial_state(self):
        assert INITIAL_STATE == SessionState(
            active=False, round_index=0, phase=Phase.READY, time_remaining=0,
        )

    def test_start_loads_first_prep(self):
        state, cues = transition(INITIAL_STATE, Event.START, TABLE)
        assert state == SessionState(True, 0, Phase.PREP, 3)
        assert cues == [CueKind.START]

    @pytest.mark.parametrize("table", [None, ()])
    def test_start_without_table_raises(self, table):
        with pytest.raises(InvalidTransition):
            transition(INITIAL_STATE, Event.START, table)

    @pytest.mark.parametrize("event", [Event.STOP, Event.RESET])
    def test_stop_and_reset_return_to_ready(self, event):
        mid = SessionState(True, 1, Phase.HOLD, 4)
        state, cues = transition(mid, event, TABLE)
        assert state == INITIAL_STATE
        assert cues == []

    def test_restart_from_finished(self):
        done = SessionState(False, 1, Phase.FINISHED, 0)
        state, _ = transition(done, Event.START, TABLE)
        assert state == SessionState(True, 0, Phase.PREP, 3)


# ═══════════════════════════════════════════════════════════════════════════
#  TICKS
# ═══════════════════════════════════════════════════════════════════════════


class TestTick:

    def test_inactive_tick_is_noop(self):
        state, cues = tick(INITIAL_STATE)
        assert state == INITIAL_STATE
        assert cues == []

    def test_decrements_by_one(self):
        state, _ = tick(SessionState(True, 0, Phase.PREP, 3))
        assert state.time_remaining == 2
        assert state.phase == Phase.PREP

    def test_no_tick_cue_above_four(self):
        _, cues = tick(SessionState(True, 1, Phase.HOLD, 5))
        assert cues == []

    @pytest.mark.parametrize("remaining", [4, 3, 2])
    def test_tick_cue_in_warning_window(self, remaining):
        _, cues = tick(SessionState(True, 1, Phase.HOLD, remaining))
        assert cues == [CueKind.TICK]

    def test_last_second_ends_phase_without_tick_cue(self):
        state, cues = tick(SessionState(True, 0, Phase.PREP, 1))
        assert cues == [CueKind.END, CueKind.START]
        assert state == SessionState(True, 0, Phase.HOLD, 2)

    def test_hold_advances_to_next_round_prep(self):
        state, cues = tick(SessionState(True, 0, Phase.HOLD, 1))
        assert state == SessionState(True, 1, Phase.PREP, 2)
        assert cues == [CueKind.END, CueKind.START]

    def test_last_hold_finishes(self):
        state, cues = tick(SessionState(True, 1, Phase.HOLD, 1))
        assert state == SessionState(False, 1, Phase.FINISHED, 0)
        assert cues == [CueKind.END]

    def test_zero_length_phase_ends_on_next_tick(self):
        table = (Round(round=1, prep=0, hold=2),)
        state = started(table)
        assert state.time_remaining == 0
        state, cues = tick(state, table)
        assert state.phase == Phase.HOLD
        assert state.time_remaining == 2
        assert cues == [CueKind.END, CueKind.START]

    def test_out_of_range_round_raises(self):
        with pytest.raises(InvalidTransition):
            tick(SessionState(True, 7, Phase.HOLD, 3))

    def test_tick_without_table_raises(self):
        with pytest.raises(InvalidTransition):
            tick(SessionState(True, 0, Phase.PREP, 3), None)

    def test_active_ready_phase_raises_at_boundary(self):
        with pytest.raises(InvalidTransition):
            tick(SessionState(True, 0, Phase.READY, 0))


# ═══════════════════════════════════════════════════════════════════════════
#  WHOLE SESSIONS
# ═══════════════════════════════════════════════════════════════════════════


class TestWholeSession:

    def test_eight_round_co2_table_finishes(self):
        table = generate_co2_table(90)
        state = started(table)
        ticks = 0
        phases = []
        while state.active:
            state, cues = tick(state, table)
            ticks += 1
            if CueKind.START in cues:
                phases.append((state.round_index, state.phase))

        assert state.phase == Phase.FINISHED
        assert state.active is False
        assert ticks == sum(r.prep + r.hold for r in table)
        # 15 more phase starts after round 1 prep
        assert len(phases) == 15
        assert phases[-1] == (7, Phase.HOLD)

    def test_time_remaining_strictly_decreases_within_phase(self):
        table = generate_co2_table(60)
        state = started(table)
        while state.active:
            new, cues = tick(state, table)
            if CueKind.END not in cues:
                assert new.time_remaining == state.time_remaining - 1
            state = new

    def test_three_phase_sequence(self):
        table = with_recovery(TABLE, 4)
        state = started(table)
        seen = [(state.round_index, state.phase)]
        while state.active:
            state, cues = tick(state, table)
            if CueKind.START in cues:
                seen.append((state.round_index, state.phase))

        assert seen == [
            (0, Phase.PREP), (0, Phase.HOLD), (0, Phase.RECOVERY),
            (1, Phase.PREP), (1, Phase.HOLD),
        ]
        assert state.phase == Phase.FINISHED

    def test_recovery_loads_its_duration(self):
        table = with_recovery(TABLE, 4)
        state, _ = tick(SessionState(True, 0, Phase.HOLD, 1), table)
        assert state == SessionState(True, 0, Phase.RECOVERY, 4)

    def test_zero_recovery_marks_end_before_last_round(self):
        table = (
            Round(round=1, prep=2, hold=2, recovery=0),
            Round(round=2, prep=2, hold=2, recovery=10),
        )
        state, cues = tick(SessionState(True, 0, Phase.HOLD, 1), table)
        assert state.phase == Phase.FINISHED
        assert cues == [CueKind.END]

    def test_recovery_on_last_round_then_finish(self):
        table = (Round(round=1, prep=2, hold=2, recovery=3),)
        state, _ = tick(SessionState(True, 0, Phase.HOLD, 1), table)
        assert state.phase == Phase.RECOVERY
        state, _ = tick(SessionState(True, 0, Phase.RECOVERY, 1), table)
        assert state.phase == Phase.FINISHED
