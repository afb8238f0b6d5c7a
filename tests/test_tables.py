"""Tests for CO2/O2 table generation and personal-best validation."""

import pytest
from dataclasses import FrozenInstanceError

from apneatrainer.tables.generator import (
    Round, TableType, ValidationError,
    generate_co2_table, generate_o2_table, generate_table,
    validate_personal_best, with_recovery,
    NUM_ROUNDS, MAX_PERSONAL_BEST,
)


PERSONAL_BESTS = [30, 45, 60, 90, 93, 120, 181, 240, 600]


# ═══════════════════════════════════════════════════════════════════════════
#  CO2 TABLE
# ═══════════════════════════════════════════════════════════════════════════


class TestCo2Table:

    def test_example_pb_90(self):
        table = generate_co2_table(90)
        assert table[0] == Round(round=1, prep=129, hold=54)
        assert table[-1] == Round(round=8, prep=30, hold=54)

    def test_full_pb_90_prep_sequence(self):
        preps = [r.prep for r in generate_co2_table(90)]
        assert preps == [129, 114, 99, 84, 69, 54, 39, 30]

    @pytest.mark.parametrize("pb", PERSONAL_BESTS)
    def test_hold_is_constant(self, pb):
        holds = {r.hold for r in generate_co2_table(pb)}
        assert len(holds) == 1

    @pytest.mark.parametrize("pb", PERSONAL_BESTS)
    def test_prep_non_increasing_and_floored(self, pb):
        preps = [r.prep for r in generate_co2_table(pb)]
        assert all(a >= b for a, b in zip(preps, preps[1:]))
        assert min(preps) >= 30

    def test_hold_floor_applies_to_short_pb(self):
        table = generate_co2_table(30)  # 30 * 0.6 = 18 → floored
        assert table[0].hold == 30
        assert table[0].prep == 105

    def test_long_pb_never_hits_prep_floor(self):
        table = generate_co2_table(600)
        assert table[0].hold == 360
        assert table[-1].prep == 360 + 75 - 7 * 15


# ═══════════════════════════════════════════════════════════════════════════
#  O2 TABLE
# ═══════════════════════════════════════════════════════════════════════════


class TestO2Table:

    def test_example_pb_90(self):
        table = generate_o2_table(90)
        assert table[0] == Round(round=1, prep=120, hold=45)
        assert table[-1] == Round(round=8, prep=120, hold=115)

    @pytest.mark.parametrize("pb", PERSONAL_BESTS)
    def test_prep_constant_120(self, pb):
        assert all(r.prep == 120 for r in generate_o2_table(pb))

    @pytest.mark.parametrize("pb", PERSONAL_BESTS)
    def test_hold_increases_by_10(self, pb):
        holds = [r.hold for r in generate_o2_table(pb)]
        assert holds[0] == max(45, int(pb * 0.5 + 0.5))
        assert all(b - a == 10 for a, b in zip(holds, holds[1:]))

    def test_halves_round_up(self):
        """93 * 0.5 = 46.5 rounds to 47, not banker's 46."""
        assert generate_o2_table(93)[0].hold == 47


# ═══════════════════════════════════════════════════════════════════════════
#  SHARED PROPERTIES
# ═══════════════════════════════════════════════════════════════════════════


class TestTableShape:

    @pytest.mark.parametrize("gen", [generate_co2_table, generate_o2_table])
    def test_eight_contiguous_rounds(self, gen):
        table = gen(120)
        assert len(table) == NUM_ROUNDS == 8
        assert [r.round for r in table] == list(range(1, 9))

    @pytest.mark.parametrize("gen", [generate_co2_table, generate_o2_table])
    def test_generators_are_pure(self, gen):
        assert gen(137) == gen(137)

    @pytest.mark.parametrize("gen", [generate_co2_table, generate_o2_table])
    def test_two_phase_rounds_have_no_recovery(self, gen):
        assert all(r.recovery is None for r in gen(90))
        assert not gen(90)[0].has_recovery

    def test_rounds_are_immutable(self):
        rnd = generate_co2_table(90)[0]
        with pytest.raises(FrozenInstanceError):
            rnd.hold = 1

    def test_generate_table_dispatches(self):
        assert generate_table(TableType.CO2, 90) == generate_co2_table(90)
        assert generate_table("o2", 90) == generate_o2_table(90)

    def test_generate_table_unknown_type(self):
        with pytest.raises(ValueError):
            generate_table("n2", 90)


# ═══════════════════════════════════════════════════════════════════════════
#  RECOVERY PHASE
# ═══════════════════════════════════════════════════════════════════════════


class TestWithRecovery:

    def test_last_round_marked_with_zero(self):
        table = with_recovery(generate_co2_table(90), 30)
        assert [r.recovery for r in table] == [30] * 7 + [0]

    def test_other_fields_unchanged(self):
        base = generate_o2_table(90)
        table = with_recovery(base, 30)
        assert [(r.round, r.prep, r.hold) for r in table] == [
            (r.round, r.prep, r.hold) for r in base
        ]

    def test_empty_table(self):
        assert with_recovery((), 30) == ()


# ═══════════════════════════════════════════════════════════════════════════
#  VALIDATION
# ═══════════════════════════════════════════════════════════════════════════


class TestValidation:

    def test_co2_minimum(self):
        assert validate_personal_best(TableType.CO2, 30) == 30
        with pytest.raises(ValidationError, match="at least 30 seconds"):
            validate_personal_best(TableType.CO2, 29)

    def test_o2_requires_experience(self):
        assert validate_personal_best(TableType.O2, 60) == 60
        with pytest.raises(ValidationError, match="O₂ tables are dangerous"):
            validate_personal_best(TableType.O2, 59)

    def test_maximum(self):
        assert validate_personal_best("co2", MAX_PERSONAL_BEST) == 600
        with pytest.raises(ValidationError, match="600"):
            validate_personal_best("co2", 601)

    @pytest.mark.parametrize("value", [90.5, "90", None, True])
    def test_non_integers_rejected(self, value):
        with pytest.raises(ValidationError):
            validate_personal_best(TableType.CO2, value)

    def test_validation_error_is_value_error(self):
        assert issubclass(ValidationError, ValueError)

    @pytest.mark.parametrize("table_type", ["n2", "", None])
    def test_unknown_table_type_rejected(self, table_type):
        with pytest.raises(ValidationError, match="Unknown table type"):
            validate_personal_best(table_type, 90)
