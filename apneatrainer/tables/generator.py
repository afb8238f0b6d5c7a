"""CO2 / O2 breath-hold table generation.

Tables
------
CO2   Constant hold, shrinking prep.  Trains tolerance to rising CO2 by
      cutting rest while the exposure stays the same.
O2    Growing hold, constant prep.  Trains tolerance to low O2 by
      lengthening exposure while rest stays fixed.

Both tables are ``NUM_ROUNDS`` long and numbered from 1.  Generators are
pure: the same personal best always yields an identical table.  They
only apply their own floors; range checks on the personal best belong
to ``validate_personal_best``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum


# ── enums ─────────────────────────────────────────────────────────────────


class TableType(Enum):
    CO2 = "co2"
    O2 = "o2"


# ── constants ─────────────────────────────────────────────────────────────

NUM_ROUNDS = 8

CO2_HOLD_RATIO = 0.60
CO2_MIN_HOLD = 30
CO2_PREP_HEADROOM = 75  # first prep = hold + 75 s
CO2_PREP_STEP = 15
CO2_MIN_PREP = 30

O2_HOLD_RATIO = 0.5
O2_MIN_HOLD = 45
O2_PREP = 120  # 2 min constant rest
O2_HOLD_STEP = 10

MIN_PERSONAL_BEST: dict[TableType, int] = {
    TableType.CO2: 30,
    TableType.O2: 60,  # O2 tables are for experienced divers only
}
MAX_PERSONAL_BEST = 600

_TOO_SHORT_MESSAGES: dict[TableType, str] = {
    TableType.CO2: (
        "Please enter a comfortable Personal Best time of at least "
        "30 seconds for CO₂ tables."
    ),
    TableType.O2: (
        "O₂ tables are dangerous. Please enter a Personal Best time "
        "of at least 60 seconds to ensure you are experienced enough."
    ),
}


# ── errors ────────────────────────────────────────────────────────────────


class ValidationError(ValueError):
    """Personal best rejected for the chosen table type.

    ``str(err)`` is a message suitable for showing to the user as-is.
    """


# ── data ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Round:
    """One row of a training table (durations in seconds).

    ``recovery`` is ``None`` for two-phase tables.  In three-phase
    tables a ``recovery`` of 0 marks the final round.
    """

    round: int
    prep: int
    hold: int
    recovery: int | None = None

    @property
    def has_recovery(self) -> bool:
        return self.recovery is not None


# ══════════════════════════════════════════════════════════════════════════
#  GENERATORS
# ══════════════════════════════════════════════════════════════════════════


def _round_half_up(value: float) -> int:
    # round() would give banker's rounding: 22.5 -> 22
    return math.floor(value + 0.5)


def generate_co2_table(personal_best: int) -> tuple[Round, ...]:
    """CO2 tolerance table: constant hold, prep shrinking by 15 s a round."""
    hold = max(CO2_MIN_HOLD, _round_half_up(personal_best * CO2_HOLD_RATIO))
    start_prep = hold + CO2_PREP_HEADROOM
    return tuple(
        Round(
            round=i,
            prep=max(CO2_MIN_PREP, start_prep - (i - 1) * CO2_PREP_STEP),
            hold=hold,
        )
        for i in range(1, NUM_ROUNDS + 1)
    )


def generate_o2_table(personal_best: int) -> tuple[Round, ...]:
    """O2 tolerance table: 2 min prep, hold growing by 10 s a round."""
    start_hold = max(O2_MIN_HOLD, _round_half_up(personal_best * O2_HOLD_RATIO))
    return tuple(
        Round(
            round=i,
            prep=O2_PREP,
            hold=start_hold + (i - 1) * O2_HOLD_STEP,
        )
        for i in range(1, NUM_ROUNDS + 1)
    )


_GENERATORS = {
    TableType.CO2: generate_co2_table,
    TableType.O2: generate_o2_table,
}


def generate_table(
    table_type: TableType | str, personal_best: int
) -> tuple[Round, ...]:
    return _GENERATORS[TableType(table_type)](personal_best)


def with_recovery(table: tuple[Round, ...], seconds: int) -> tuple[Round, ...]:
    """Return a three-phase copy of *table*.

    Every round gets a ``seconds``-long recovery after its hold, except
    the last one whose recovery is 0 (the session ends after its hold).
    """
    if not table:
        return ()
    last = len(table) - 1
    return tuple(
        replace(r, recovery=0 if i == last else max(0, seconds))
        for i, r in enumerate(table)
    )


# ══════════════════════════════════════════════════════════════════════════
#  VALIDATION
# ══════════════════════════════════════════════════════════════════════════


def validate_personal_best(table_type: TableType | str, personal_best) -> int:
    """Check *personal_best* against the table type's allowed range.

    Returns the value unchanged; raises ``ValidationError`` otherwise.
    Out-of-range values are rejected, never clamped.
    """
    try:
        table_type = TableType(table_type)
    except ValueError:
        raise ValidationError(f"Unknown table type: {table_type!r}.") from None
    if isinstance(personal_best, bool) or not isinstance(personal_best, int):
        raise ValidationError("Personal Best must be a whole number of seconds.")
    if personal_best < MIN_PERSONAL_BEST[table_type]:
        raise ValidationError(_TOO_SHORT_MESSAGES[table_type])
    if personal_best > MAX_PERSONAL_BEST:
        raise ValidationError(
            f"Max Personal Best is {MAX_PERSONAL_BEST} seconds."
        )
    return personal_best
