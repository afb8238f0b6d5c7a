"""ApneaTrainer: CO2/O2 breath-hold table trainer."""

__version__ = "0.1.0"
