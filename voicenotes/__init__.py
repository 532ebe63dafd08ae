"""Voice Notes AI: record, transcribe, and chat about voice memos."""

__version__ = "0.1.0"
