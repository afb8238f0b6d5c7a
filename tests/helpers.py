"""Shared test helpers for ApneaTrainer."""

from apneatrainer.session.engine import SessionEngine


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


def run_ticks(engine: SessionEngine, count: int) -> None:
    """Fire *count* ticks without waiting on the Qt timer."""
    for _ in range(count):
        engine._on_tick()


def session_length(table) -> int:
    """Ticks needed to run a two-phase table from start to finish."""
    return sum(max(1, r.prep) + max(1, r.hold) for r in table)
