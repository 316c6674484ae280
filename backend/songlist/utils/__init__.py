"""Transport, signing and text helpers."""
