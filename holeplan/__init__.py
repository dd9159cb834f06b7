"""Hole planning engine: shot sequences, plays-like distances and drag updates."""

__version__ = "0.1.0"
