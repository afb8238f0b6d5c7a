"""Cue tone synthesis and playback using numpy + QSoundEffect.

Each session cue is a single sine tone with a short attack/release ramp,
rendered to a WAV file in the cache directory on first launch.

Cues
----
- ``start`` — 700 Hz eighth note, a new phase begins
- ``tick``  — 900 Hz sixteenth note, last seconds of a phase
- ``end``   — 500 Hz eighth note, the phase is over

Missing or undecodable sounds are logged and skipped; a bad sound file
must never stop the countdown.
"""

from __future__ import annotations

import io
import logging
import wave
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from ..session.state import CueKind

logger = logging.getLogger(__name__)


# ── paths ────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "ApneaTrainer"
SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

SAMPLE_RATE = 44100

# Note lengths at 120 bpm
EIGHTH_NOTE = 0.25
SIXTEENTH_NOTE = 0.125


@dataclass(frozen=True)
class Tone:
    frequency: float  # Hz
    duration: float  # seconds


CUE_TONES: dict[CueKind, Tone] = {
    CueKind.START: Tone(700.0, EIGHTH_NOTE),
    CueKind.TICK: Tone(900.0, SIXTEENTH_NOTE),
    CueKind.END: Tone(500.0, EIGHTH_NOTE),
}


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


ATTACK = 0.01  # seconds
RELEASE = 0.05
SUSTAIN_LEVEL = 0.8
TAIL_SILENCE = 0.03
PEAK_AMPLITUDE = 0.6


def synthesize_tone(tone: Tone) -> bytes:
    """Render *tone* as mono 16-bit PCM WAV bytes.

    The sine is shaped by a linear attack / sustain / release ramp and
    followed by a short stretch of silence, so playback never clicks.
    """
    n = int(SAMPLE_RATE * tone.duration)
    attack = min(ATTACK, tone.duration / 2)
    t = np.arange(n) / SAMPLE_RATE
    ramp = np.interp(
        t,
        [0.0, attack, max(attack, tone.duration - RELEASE), tone.duration],
        [0.0, 1.0, SUSTAIN_LEVEL, 0.0],
    )
    wave_form = np.sin(2 * np.pi * tone.frequency * t) * ramp * PEAK_AMPLITUDE
    samples = np.concatenate(
        [wave_form, np.zeros(int(SAMPLE_RATE * TAIL_SILENCE))]
    )
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype("<i2")

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(pcm.tobytes())
    return buf.getvalue()


# ═══════════════════════════════════════════════════════════════════════════
#  CUE PLAYER
# ═══════════════════════════════════════════════════════════════════════════


class CuePlayer(QObject):
    """Plays session cues.  Connect to ``SessionEngine.cue``::

        player = CuePlayer(parent=self)
        engine.on_cue(player.play)
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._volume = 0.7  # 0.0–1.0
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[CueKind, QSoundEffect] = {}

        self._ensure_wav_files()
        self._load_effects()

    # ── public API ────────────────────────────────────────────────────

    def set_volume(self, level: int) -> None:
        """Set volume (0-100).  Updates all loaded effects."""
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def play(self, kind: CueKind) -> None:
        """Play the tone for *kind*.  No-op if disabled or not loaded."""
        if not self._enabled:
            return
        effect = self._effects.get(kind)
        if effect is None:
            return
        if effect.status() == QSoundEffect.Status.Error:
            logger.warning("Skipping %s cue: sound failed to load", kind.value)
            return
        effect.play()

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    @property
    def enabled(self) -> bool:
        return self._enabled

    # ── internal ──────────────────────────────────────────────────────

    def _path_for(self, kind: CueKind) -> Path:
        return self._sounds_dir / f"{kind.value}.wav"

    def _ensure_wav_files(self) -> None:
        """Generate any missing WAV files to the cache directory."""
        try:
            self._sounds_dir.mkdir(parents=True, exist_ok=True)
            for kind, tone in CUE_TONES.items():
                path = self._path_for(kind)
                if not path.exists():
                    path.write_bytes(synthesize_tone(tone))
        except OSError:
            logger.warning(
                "Cue sounds unavailable: cannot write to %s",
                self._sounds_dir, exc_info=True,
            )

    def _load_effects(self) -> None:
        """Create QSoundEffect instances from cached WAV files."""
        for kind in CUE_TONES:
            path = self._path_for(kind)
            if path.exists():
                effect = QSoundEffect(self)
                effect.statusChanged.connect(
                    lambda e=effect, p=path: self._on_status_changed(e, p)
                )
                effect.setSource(QUrl.fromLocalFile(str(path)))
                effect.setVolume(self._volume)
                self._effects[kind] = effect
            else:
                logger.warning("Missing cue sound %s", path)

    def _on_status_changed(self, effect: QSoundEffect, path: Path) -> None:
        # decode failures surface here, QSoundEffect never raises
        if effect.status() == QSoundEffect.Status.Error:
            logger.warning("Cue sound %s failed to load", path)
