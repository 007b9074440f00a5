"""Replay local git commits as checkins against a centralized server."""

__version__ = "0.1.0"
