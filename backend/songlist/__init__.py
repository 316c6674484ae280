"""Songlist Resolver - turns QQ Music playlist links into "Title - Artist" lists."""

__version__ = "1.0.0"
