"""QSS stylesheet and phase colors for ApneaTrainer."""

from __future__ import annotations

from ..session.state import Phase

# ── phase colors (countdown text) ─────────────────────────────────────────

PHASE_COLORS: dict[Phase, str] = {
    Phase.READY:    "#7A7A9A",
    Phase.PREP:     "#4ECDC4",   # cool teal, breathe
    Phase.HOLD:     "#89B4FA",   # calm blue, hold
    Phase.RECOVERY: "#A18CD1",
    Phase.FINISHED: "#A6E3A1",
}

ENDING_COLOR = "#F38BA8"

PALETTE: dict[str, str] = {
    "bg":           "#12142A",
    "surface":      "#1E2140",
    "accent":       "#89B4FA",
    "text":         "#E2E2F0",
    "text_muted":   "#7A7A9A",
    "success":      "#A6E3A1",
    "warning":      "#F9E2AF",
    "danger":       "#F38BA8",
    "border":       "#313154",
}


def build_stylesheet(p: dict[str, str] | None = None) -> str:
    """Return the application QSS for palette *p*."""
    p = p or PALETTE
    return f"""
    QMainWindow, QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-size: 14px;
    }}
    QFrame#card {{
        background-color: {p['surface']};
        border: 1px solid {p['border']};
        border-radius: 12px;
    }}
    QLabel#warning {{
        color: {p['warning']};
        border: 1px solid {p['warning']};
        border-radius: 8px;
        padding: 10px;
    }}
    QLabel#complete {{
        color: {p['success']};
        font-size: 22px;
        font-weight: bold;
    }}
    QPushButton#primaryButton {{
        background-color: {p['accent']};
        color: {p['bg']};
        border-radius: 8px;
        padding: 10px 20px;
        font-weight: bold;
    }}
    QPushButton#dangerButton {{
        background-color: {p['danger']};
        color: {p['bg']};
        border-radius: 8px;
        padding: 10px 20px;
        font-weight: bold;
    }}
    QTableWidget {{
        gridline-color: {p['border']};
        font-family: Menlo, monospace;
    }}
    """
