"""Shared configuration, errors, models, and helpers."""
