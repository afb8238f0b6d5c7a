"""UI package."""

from .timer_display import TimerDisplay, format_time

__all__ = ["TimerDisplay", "format_time"]
