"""Recording, transcription, and chat workflows operating on ``PageState``."""
