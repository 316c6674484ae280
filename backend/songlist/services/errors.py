"""
Song list errors

Every failure that can reach a caller of ``resolve_playlist`` is one of the
classes below. Each carries the underlying exception (if any) as ``cause`` so
the HTTP layer and the logs can report which tier or platform gave up.
"""

from typing import Optional


class SongListError(Exception):
    """Base class for all resolution failures."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class InvalidLink(SongListError):
    """The link does not carry a usable playlist identifier."""


class UnsupportedLinkFormat(InvalidLink):
    """The link matched none of the known playlist link shapes."""


class RedirectResolutionFailed(SongListError):
    """A short link could not be expanded to its landing URL."""


class RedirectLoop(RedirectResolutionFailed):
    """Short links kept redirecting to other short links."""


class TransportError(SongListError):
    """The HTTP request itself failed (connection error or error status)."""


class MalformedProviderResponse(SongListError):
    """The provider answered, but not with the expected JSON shape."""


class AllFetchStrategiesFailed(SongListError):
    """Neither the legacy endpoint nor any paginated platform produced a playlist."""
