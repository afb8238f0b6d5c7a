"""Training table package."""

from .generator import (
    Round,
    TableType,
    ValidationError,
    generate_co2_table,
    generate_o2_table,
    generate_table,
    validate_personal_best,
    with_recovery,
    NUM_ROUNDS,
    MIN_PERSONAL_BEST,
    MAX_PERSONAL_BEST,
)

__all__ = [
    "Round",
    "TableType",
    "ValidationError",
    "generate_co2_table",
    "generate_o2_table",
    "generate_table",
    "validate_personal_best",
    "with_recovery",
    "NUM_ROUNDS",
    "MIN_PERSONAL_BEST",
    "MAX_PERSONAL_BEST",
]
