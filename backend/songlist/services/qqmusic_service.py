"""
QQ Music Service Module

Resolves a QQ Music playlist link into a ``SongList``.

The legacy ``fcg_ucc_getcdinfo_byids_cp.fcg`` endpoint returns whole playlists
and is tried first. When it fails, the signed ``musics.fcg`` endpoint is used,
cycling through platform identities until one returns something other than
the provider's fixed-size error body.

Classes:
    FetchedPayload: Raw provider body plus the schema it is in
    QQMusicService: Fetch orchestration and song list building

Functions:
    build_song_list: Render a canonical playlist into display strings
    get_qqmusic_service: Dependency injection function for FastAPI routes
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, Optional, Protocol

from songlist.config import Settings, get_settings
from songlist.models.schemas import PaginatedRequest, ProviderPlaylist, SongList
from songlist.services.errors import (
    AllFetchStrategiesFailed,
    MalformedProviderResponse,
    SongListError,
)
from songlist.services.link_resolver import LinkResolver
from songlist.services.normalizer import PayloadSchema, normalize, parse_legacy, strip_json_callback
from songlist.utils.http_client import HttpTransport
from songlist.utils.sign import sign
from songlist.utils.song_name import standardize

logger = logging.getLogger(__name__)

LEGACY_API_URL = "http://c.y.qq.com/qzone/fcg-bin/fcg_ucc_getcdinfo_byids_cp.fcg"
LEGACY_REFERER = "https://y.qq.com/n/yqq/playlist"
PAGINATED_API_URL = "https://u6.y.qq.com/cgi-bin/musics.fcg?sign={sign}&_={timestamp}"


class Transport(Protocol):
    def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> bytes: ...

    def post_with_headers(self, url: str, body: str, headers: Optional[Dict[str, str]] = None) -> bytes: ...

    def resolve_redirect(self, url: str) -> str: ...


@dataclass(frozen=True)
class FetchedPayload:
    schema: PayloadSchema
    body: bytes


def build_song_list(
    playlist: ProviderPlaylist,
    detailed: bool,
    clean: Callable[[str], str] = standardize,
) -> SongList:
    """
    Render each song as ``"<name> - <artist> / <artist>"``.

    Args:
        playlist: Canonical playlist
        detailed: Keep the provider's song name verbatim; otherwise run it through ``clean``
        clean: Name-cleaning transform

    Songs whose name is blank are skipped so no entry renders as ``" - "``.

    Returns:
        SongList: Display strings in provider order
    """
    songs = []
    for position, song in enumerate(playlist.songs):
        if not song.name.strip():
            logger.warning(f"Skipping song without a name at position {position} in '{playlist.title}'")
            continue
        name = song.name if detailed else clean(song.name)
        songs.append(f"{name} - {' / '.join(song.artists)}")

    return SongList(
        name=playlist.title,
        songs=songs,
        songs_count=playlist.declared_song_count,
    )


class QQMusicService:
    """
    QQ Music playlist service

    Args:
        settings: Application settings (platform list, page size, headers...)
        transport: HTTP transport; a real ``HttpTransport`` is built when omitted
        signer: Signs the paginated request body
        clock: Returns the current time in seconds, used for the ``_`` cache buster
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[Transport] = None,
        signer: Callable[[str], str] = sign,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings
        self.transport = transport or HttpTransport(timeout=settings.http_timeout_seconds)
        self.signer = signer
        self.clock = clock
        self.link_resolver = LinkResolver(
            self.transport,
            details_param=settings.qqmusic_details_param,
            max_redirect_depth=settings.qqmusic_max_redirect_depth,
        )

    @property
    def legacy_headers(self) -> Dict[str, str]:
        return {
            "Referer": LEGACY_REFERER,
            "User-Agent": self.settings.qqmusic_user_agent,
        }

    @property
    def paginated_headers(self) -> Dict[str, str]:
        # Without these the endpoint silently caps playlists at 30 songs
        return {
            "Referer": "https://y.qq.com/",
            "Origin": "https://y.qq.com",
            "User-Agent": self.settings.qqmusic_user_agent,
        }

    def resolve_playlist(self, link: str, detailed: bool = False) -> SongList:
        """
        Resolve a playlist link into its song list

        Args:
            link: Any supported QQ Music playlist link
            detailed: Keep raw song names (brackets and all)

        Returns:
            SongList: Playlist title, display strings and declared song count

        Raises:
            InvalidLink: The link has no usable playlist id
            RedirectResolutionFailed: A short link could not be expanded
            AllFetchStrategiesFailed: Both endpoints failed
            MalformedProviderResponse: The provider body could not be mapped
        """
        playlist_id = self.link_resolver.resolve(link)
        payload = self.fetch_playlist_payload(playlist_id)

        try:
            playlist = normalize(payload.body, payload.schema)
        except MalformedProviderResponse as e:
            logger.error(f"Failed to parse {payload.schema.value} response for playlist {playlist_id}: {e}")
            raise

        song_list = build_song_list(playlist, detailed)
        logger.info(
            f"Resolved playlist {playlist_id} '{song_list.name}' with {len(song_list.songs)} songs "
            f"(declared {song_list.songs_count}, source {payload.schema.value})"
        )
        return song_list

    def fetch_playlist_payload(self, playlist_id: int) -> FetchedPayload:
        """
        Fetch the raw playlist body, legacy endpoint first.

        Raises:
            AllFetchStrategiesFailed: The legacy call and every paginated platform failed
        """
        try:
            return self._fetch_legacy(playlist_id)
        except SongListError as e:
            logger.warning(f"Legacy API failed for playlist {playlist_id}, trying paginated API: {e}")

        return self._fetch_paginated(playlist_id, song_begin=0, song_num=self.settings.qqmusic_page_size)

    def _fetch_legacy(self, playlist_id: int) -> FetchedPayload:
        url = f"{LEGACY_API_URL}?type=1&utf8=1&disstid={playlist_id}&loginUin=0"
        raw = self.transport.get(url, headers=self.legacy_headers)

        body = strip_json_callback(raw)
        playlist = parse_legacy(body)
        logger.info(f"Legacy API returned playlist {playlist_id} with {len(playlist.songs)} songs")
        return FetchedPayload(schema=PayloadSchema.LEGACY, body=body)

    def _fetch_paginated(self, playlist_id: int, song_begin: int, song_num: int) -> FetchedPayload:
        """
        Fetch one page from the signed endpoint, trying each platform in order.

        Only the first page is ever requested; playlists longer than
        ``qqmusic_page_size`` come back truncated.
        """
        last_error: Optional[BaseException] = None

        for platform, body in self._signed_requests(playlist_id, song_begin, song_num):
            url = PAGINATED_API_URL.format(sign=self.signer(body), timestamp=int(self.clock() * 1000))
            try:
                data = self.transport.post_with_headers(url, body, headers=self.paginated_headers)
            except SongListError as e:
                logger.error(f"Paginated API request failed (platform: {platform}): {e}")
                last_error = e
                continue

            if len(data) == self.settings.qqmusic_error_response_length:
                logger.warning(f"Paginated API returned an error body (platform: {platform})")
                last_error = MalformedProviderResponse(
                    f"Error body of {len(data)} bytes for platform {platform}"
                )
                continue

            logger.info(f"Paginated API returned {len(data)} bytes for playlist {playlist_id} (platform: {platform})")
            return FetchedPayload(schema=PayloadSchema.PAGINATED, body=data)

        raise AllFetchStrategiesFailed(
            f"All platforms failed for playlist {playlist_id}",
            cause=last_error,
        )

    def _signed_requests(self, playlist_id: int, song_begin: int, song_num: int) -> Iterator[tuple[str, str]]:
        for platform in self.settings.qqmusic_platforms:
            request = PaginatedRequest.for_playlist(playlist_id, platform, song_begin, song_num)
            yield platform, request.model_dump_json()


def get_qqmusic_service() -> Iterator[QQMusicService]:
    """
    Dependency injection function for FastAPI routes

    Builds a service with its own HTTP client and closes it after the request.

    Example:
        @router.post("/songlist")
        async def songlist(
            service: QQMusicService = Depends(get_qqmusic_service)
        ):
            return service.resolve_playlist(url)
    """
    transport = HttpTransport(timeout=get_settings().http_timeout_seconds)
    try:
        yield QQMusicService(get_settings(), transport=transport)
    finally:
        transport.close()
