"""Audio package."""

from .cues import CuePlayer, CUE_TONES, Tone, synthesize_tone

__all__ = ["CuePlayer", "CUE_TONES", "Tone", "synthesize_tone"]
