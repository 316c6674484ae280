"""Pydantic models for wire formats, canonical playlists and API payloads."""
