"""Real-time, room-based speech/text translation relay for hotels."""

__version__ = "1.0.0"
