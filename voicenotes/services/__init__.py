"""Backend services: storage, transcription, and chat gateways."""
