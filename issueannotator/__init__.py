"""Annotate Markdown notes with YouTrack issue titles."""

__version__ = "0.1.0"
