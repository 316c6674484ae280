"""
Response Normalizer

QQ Music answers playlist requests in two unrelated formats. Both are mapped
here into one ``ProviderPlaylist`` so nothing downstream has to know which
endpoint produced the data.

Functions:
    strip_json_callback: Remove the ``jsonCallback(...)`` wrapper from legacy bodies
    parse_legacy: Map a legacy body to a canonical playlist
    parse_paginated: Map a paginated body to a canonical playlist
    normalize: Dispatch on the payload schema
"""

from enum import Enum

from pydantic import ValidationError

from songlist.models.schemas import (
    LegacyResponse,
    PaginatedResponse,
    ProviderPlaylist,
    SongEntry,
)
from songlist.services.errors import MalformedProviderResponse

JSON_CALLBACK_PREFIX = b"jsonCallback("
JSON_CALLBACK_SUFFIX = b")"


class PayloadSchema(str, Enum):
    LEGACY = "legacy"
    PAGINATED = "paginated"


def strip_json_callback(raw: bytes) -> bytes:
    """Return the JSON inside ``jsonCallback(...)``, or ``raw`` unchanged if it is not wrapped."""
    body = raw.strip()
    if body.startswith(JSON_CALLBACK_PREFIX) and body.endswith(JSON_CALLBACK_SUFFIX):
        return body[len(JSON_CALLBACK_PREFIX):-len(JSON_CALLBACK_SUFFIX)]
    return raw


def parse_legacy(raw: bytes) -> ProviderPlaylist:
    """
    Map a legacy ``fcg_ucc_getcdinfo_byids_cp.fcg`` body.

    Raises:
        MalformedProviderResponse: Body is not valid JSON, ``code`` is not 0,
            or ``cdlist`` is empty
    """
    try:
        resp = LegacyResponse.model_validate_json(strip_json_callback(raw))
    except ValidationError as e:
        raise MalformedProviderResponse("Legacy response is not valid playlist JSON", cause=e) from e

    if resp.code != 0 or not resp.cdlist:
        raise MalformedProviderResponse(
            f"Legacy response rejected: code={resp.code}, cdlist={len(resp.cdlist)}"
        )

    cd = resp.cdlist[0]
    return ProviderPlaylist(
        title=cd.dissname or "",
        declared_song_count=cd.songnum,
        songs=[
            SongEntry(name=song.songname or "", artists=[singer.name or "" for singer in song.singer or []])
            for song in cd.songlist or []
        ],
    )


def parse_paginated(raw: bytes) -> ProviderPlaylist:
    """
    Map a paginated ``musics.fcg`` body.

    Unlike the legacy mapping no status code is checked.

    Raises:
        MalformedProviderResponse: Body is not valid JSON or has no ``req_0``
    """
    try:
        resp = PaginatedResponse.model_validate_json(raw)
    except ValidationError as e:
        raise MalformedProviderResponse("Paginated response is not valid playlist JSON", cause=e) from e

    data = resp.req_0.data
    return ProviderPlaylist(
        title=data.dirinfo.title or "",
        declared_song_count=data.dirinfo.songnum,
        songs=[
            SongEntry(name=song.name or "", artists=[singer.name or "" for singer in song.singer or []])
            for song in data.songlist or []
        ],
    )


_PARSERS = {
    PayloadSchema.LEGACY: parse_legacy,
    PayloadSchema.PAGINATED: parse_paginated,
}


def normalize(raw: bytes, schema: PayloadSchema) -> ProviderPlaylist:
    return _PARSERS[schema](raw)
