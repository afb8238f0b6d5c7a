"""Shared pytest fixtures for ApneaTrainer tests."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from apneatrainer.session.engine import SessionEngine
from apneatrainer.tables.generator import Round


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture
def engine(qapp):
    """Fresh SessionEngine, two-phase tables."""
    return SessionEngine(parent=None)


@pytest.fixture
def engine_recovery(qapp):
    """Fresh SessionEngine that adds a 20 s recovery phase to new tables."""
    return SessionEngine(parent=None, recovery_seconds=20)


@pytest.fixture
def short_table():
    """Two small rounds so whole sessions can be ticked through quickly."""
    return (
        Round(round=1, prep=3, hold=2),
        Round(round=2, prep=2, hold=5),
    )
