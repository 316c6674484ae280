"""
Song List Routes

This module defines the song list endpoint:
- Resolving a QQ Music playlist link into "Title - Artist" strings

Routes are mounted at the application root and need no authentication.
"""

from fastapi import APIRouter, HTTPException, Depends
from fastapi.concurrency import run_in_threadpool
import logging

from songlist.models.schemas import SongList, SongListRequest
from songlist.services.errors import (
    AllFetchStrategiesFailed,
    InvalidLink,
    MalformedProviderResponse,
    RedirectResolutionFailed,
)
from songlist.services.qqmusic_service import QQMusicService, get_qqmusic_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["songlist"])


@router.post("/songlist", response_model=SongList)
async def get_song_list(
    request: SongListRequest,
    service: QQMusicService = Depends(get_qqmusic_service)
):
    """
    Resolve a Playlist Link

    Accepts any supported QQ Music playlist link (playlist page, ``id=`` link,
    short link or details share page) and returns the playlist's songs.

    Args:
        request: Link and the ``detailed`` flag

    Returns:
        SongList: Playlist title, songs and declared song count

    Raises:
        HTTPException: 400 for links without a playlist id, 502 when QQ Music
                      cannot be reached or answers with something unusable

    Example Response:
        {
            "name": "Road Trip",
            "songs": ["晴天 - 周杰伦", "Fix You - Coldplay"],
            "songs_count": 2
        }

    Note:
        When QQ Music only serves the paginated API, playlists longer than one
        page come back truncated; this is not reported as an error.
    """
    url = request.url.strip()
    if not url:
        raise HTTPException(status_code=400, detail="Playlist link is required")

    try:
        return await run_in_threadpool(service.resolve_playlist, url, request.detailed)
    except InvalidLink as e:
        logger.warning(f"Rejected playlist link {url!r}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except (RedirectResolutionFailed, AllFetchStrategiesFailed, MalformedProviderResponse) as e:
        logger.error(f"Failed to resolve playlist {url!r}: {e}")
        raise HTTPException(
            status_code=502,
            detail=f"Failed to fetch playlist: {e.message}"
        )
