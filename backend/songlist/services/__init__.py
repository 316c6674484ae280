"""Playlist resolution services."""
