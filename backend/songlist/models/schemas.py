"""
Data Models and Schemas

This module defines all Pydantic models used by the song list service: the two
QQ Music wire formats, the canonical playlist both are normalized into, and the
request/response models of the HTTP API.

Classes:
    LegacyResponse: Body of the legacy ``fcg_ucc_getcdinfo_byids_cp.fcg`` endpoint
    PaginatedRequest: Signed body POSTed to the ``musics.fcg`` endpoint
    PaginatedResponse: Body returned by the ``musics.fcg`` endpoint
    SongEntry: One canonical song (name + artist names)
    ProviderPlaylist: Canonical playlist produced by either wire format
    SongList: Final "Title - Artist" list returned to API clients
    SongListRequest: Body of ``POST /songlist``
    ErrorResponse: Standard error response format
"""

from pydantic import BaseModel, ConfigDict
from typing import Optional, List

PLAYLIST_MODULE = "music.srfDissInfo.aiDissInfo"
PLAYLIST_METHOD = "uniform_get_Dissinfo"


# ---------------------------------------------------------------------------
# Legacy endpoint (no page limit)
# ---------------------------------------------------------------------------

class LegacySinger(BaseModel):
    name: Optional[str] = None


class LegacySong(BaseModel):
    songname: Optional[str] = None
    singer: Optional[List[LegacySinger]] = None


class LegacyCd(BaseModel):
    dissname: Optional[str] = None
    songnum: int = 0
    songlist: Optional[List[LegacySong]] = None


class LegacyResponse(BaseModel):
    """
    Legacy Playlist Response

    Only ``code`` and the first ``cdlist`` entry are read; every other field
    the provider sends is dropped.

    Attributes:
        code: 0 on success
        cdlist: Playlists matching the requested ids (normally exactly one)
    """
    code: int
    cdlist: List[LegacyCd] = []


# ---------------------------------------------------------------------------
# Paginated endpoint (signed, header sensitive)
# ---------------------------------------------------------------------------

class PlaylistParam(BaseModel):
    disstid: int
    enc_host_uin: str = ""
    tag: int = 1
    userinfo: int = 1
    song_begin: int = 0
    song_num: int


class PlaylistRequestItem(BaseModel):
    module: str = PLAYLIST_MODULE
    method: str = PLAYLIST_METHOD
    param: PlaylistParam


class CommonParams(BaseModel):
    g_tk: int = 5381
    uin: int = 0
    format: str = "json"
    platform: str


class PaginatedRequest(BaseModel):
    """
    Paginated Playlist Request

    Field order is the wire order; the signature is computed over
    ``model_dump_json()`` so the body must be serialized exactly once.
    """
    req_0: PlaylistRequestItem
    comm: CommonParams

    @classmethod
    def for_playlist(cls, disstid: int, platform: str, song_begin: int, song_num: int) -> "PaginatedRequest":
        return cls(
            req_0=PlaylistRequestItem(
                param=PlaylistParam(disstid=disstid, song_begin=song_begin, song_num=song_num)
            ),
            comm=CommonParams(platform=platform),
        )


class PaginatedSinger(BaseModel):
    name: Optional[str] = None


class PaginatedSong(BaseModel):
    name: Optional[str] = None
    singer: Optional[List[PaginatedSinger]] = None


class DirInfo(BaseModel):
    title: Optional[str] = None
    songnum: int = 0


class PaginatedData(BaseModel):
    dirinfo: DirInfo = DirInfo()
    songlist: Optional[List[PaginatedSong]] = None


class PaginatedResult(BaseModel):
    code: int = 0
    data: PaginatedData = PaginatedData()


class PaginatedResponse(BaseModel):
    """
    Paginated Playlist Response

    ``code`` fields are parsed but never checked; a body that parses is
    taken at face value.
    """
    code: int = 0
    req_0: PaginatedResult


# ---------------------------------------------------------------------------
# Canonical playlist
# ---------------------------------------------------------------------------

class SongEntry(BaseModel):
    """
    Canonical Song

    Attributes:
        name: Song name as the provider spells it
        artists: Artist names in provider order (may be empty)
    """
    name: str
    artists: List[str] = []


class ProviderPlaylist(BaseModel):
    """
    Canonical Playlist

    ``declared_song_count`` is what the provider claims; it is not reconciled
    with ``len(songs)``.

    Attributes:
        title: Playlist title
        declared_song_count: Song count reported by the provider
        songs: Songs in provider order
    """
    title: str
    declared_song_count: int
    songs: List[SongEntry] = []


# ---------------------------------------------------------------------------
# API models
# ---------------------------------------------------------------------------

class SongListRequest(BaseModel):
    """
    Song List Request

    Attributes:
        url: Any supported QQ Music playlist link
        detailed: Keep raw song names instead of cleaning them
    """
    url: str
    detailed: bool = False

    model_config = ConfigDict(extra="forbid")


class SongList(BaseModel):
    """
    Song List

    Attributes:
        name: Playlist title
        songs: ``"<song> - <artist> / <artist>"`` strings in playlist order
        songs_count: Song count reported by the provider
    """
    name: str
    songs: List[str]
    songs_count: int


class ErrorResponse(BaseModel):
    """
    Standard Error Response

    Consistent error response format for all API endpoints.

    Attributes:
        error: Error type or code
        message: Human-readable error message
        detail: Additional error details (optional)
    """
    error: str
    message: str
    detail: Optional[str] = None
