"""Streamlit UI and the client-side workflows behind it."""
