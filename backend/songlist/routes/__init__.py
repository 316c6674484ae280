"""App routes module - exports all route routers"""

from songlist.routes import songlist

__all__ = ["songlist"]
