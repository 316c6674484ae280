"""
Link Resolver

Turns a user supplied QQ Music link into a playlist id (``disstid``).

Supported link shapes, checked in this order:
    - ``https://y.qq.com/n/ryqq/playlist/7364061065``
    - ``...?id=7364061065`` (any link carrying ``id=<digits>``)
    - ``https://c6.y.qq.com/base/fcgi-bin/u?__=xxxx`` short links, which are
      expanded through one redirect and resolved again
    - ``.../details/taoge.html?...`` share pages, read through the
      configured query parameter

Classes:
    LinkShape: The recognized link shapes
    LinkResolver: Classifies a link and extracts its playlist id
"""

import logging
import re
from enum import Enum
from typing import Callable, Dict, List, Pattern, Protocol, Tuple

from songlist.services.errors import (
    InvalidLink,
    RedirectLoop,
    RedirectResolutionFailed,
    UnsupportedLinkFormat,
)
from songlist.utils.query import extract_query_param

logger = logging.getLogger(__name__)

MAX_PLAYLIST_ID = 2**63 - 1

_DIGITS = re.compile(r"[0-9]+")


class LinkShape(str, Enum):
    PLAYLIST_PATH = "playlist_path"
    ID_QUERY_PARAM = "id_query_param"
    SHORT_REDIRECT = "short_redirect"
    DETAILS_PAGE = "details_page"
    UNRECOGNIZED = "unrecognized"


# First match wins
LINK_PATTERNS: List[Tuple[LinkShape, Pattern[str]]] = [
    (LinkShape.PLAYLIST_PATH, re.compile(r"playlist/\d+$")),
    (LinkShape.ID_QUERY_PARAM, re.compile(r"id=\d+")),
    (LinkShape.SHORT_REDIRECT, re.compile(r"fcgi-bin")),
    (LinkShape.DETAILS_PAGE, re.compile(r"details")),
]


class RedirectResolver(Protocol):
    def resolve_redirect(self, url: str) -> str: ...


def classify_link(link: str) -> LinkShape:
    """Return the first shape whose pattern matches ``link``."""
    for shape, pattern in LINK_PATTERNS:
        if pattern.search(link):
            return shape
    return LinkShape.UNRECOGNIZED


def parse_playlist_id(digits: str) -> int:
    """Parse a run of ASCII digits, rejecting values that overflow a signed 64-bit id."""
    if not _DIGITS.fullmatch(digits):
        raise InvalidLink(f"Playlist id is not a number: {digits!r}")
    value = int(digits)
    if value > MAX_PLAYLIST_ID:
        raise InvalidLink(f"Playlist id out of range: {digits}")
    return value


def number_after_keyword(link: str, keyword: str) -> int:
    """Parse the digits immediately following the first ``keyword`` in ``link``."""
    index = link.find(keyword)
    if index < 0:
        raise InvalidLink(f"Keyword {keyword!r} not found in link")
    match = _DIGITS.match(link, index + len(keyword))
    if not match:
        raise InvalidLink(f"No playlist id after {keyword!r}")
    return parse_playlist_id(match.group(0))


class LinkResolver:
    """
    Playlist Link Resolver

    Args:
        transport: Anything with ``resolve_redirect(url) -> url``
        details_param: Query parameter holding the id on details pages
        max_redirect_depth: Short-link hops followed before ``RedirectLoop``
    """

    def __init__(self, transport: RedirectResolver, details_param: str = "id", max_redirect_depth: int = 3):
        self.transport = transport
        self.details_param = details_param
        self.max_redirect_depth = max_redirect_depth
        self._handlers: Dict[LinkShape, Callable[[str, int], int]] = {
            LinkShape.PLAYLIST_PATH: self._from_playlist_path,
            LinkShape.ID_QUERY_PARAM: self._from_id_param,
            LinkShape.SHORT_REDIRECT: self._from_short_link,
            LinkShape.DETAILS_PAGE: self._from_details_page,
        }

    def resolve(self, link: str) -> int:
        """
        Extract the playlist id from ``link``.

        Returns:
            int: Positive playlist id

        Raises:
            UnsupportedLinkFormat: No known link shape matched
            InvalidLink: A shape matched but no usable id was found, or the id is 0
            RedirectResolutionFailed: A short link could not be expanded
        """
        playlist_id = self._resolve(link.strip(), depth=0)
        if playlist_id <= 0:
            raise InvalidLink(f"Invalid playlist id {playlist_id} in link")
        return playlist_id

    def _resolve(self, link: str, depth: int) -> int:
        shape = classify_link(link)
        handler = self._handlers.get(shape)
        if handler is None:
            raise UnsupportedLinkFormat(f"Unsupported playlist link: {link}")
        return handler(link, depth)

    def _from_playlist_path(self, link: str, depth: int) -> int:
        return number_after_keyword(link, "playlist/")

    def _from_id_param(self, link: str, depth: int) -> int:
        return number_after_keyword(link, "id=")

    def _from_short_link(self, link: str, depth: int) -> int:
        if depth >= self.max_redirect_depth:
            raise RedirectLoop(f"Gave up after {depth} short-link redirects at {link}")
        try:
            landing = self.transport.resolve_redirect(link)
        except RedirectResolutionFailed as e:
            logger.error(f"Failed to resolve short link {link}: {e}")
            raise
        logger.info(f"Short link resolved: {link} -> {landing}")
        return self._resolve(landing, depth + 1)

    def _from_details_page(self, link: str, depth: int) -> int:
        try:
            value = extract_query_param(link, self.details_param)
        except InvalidLink as e:
            logger.error(f"Failed to read playlist id from details link: {e}")
            raise
        return parse_playlist_id(value)
