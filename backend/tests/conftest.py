import json
import sys
from pathlib import Path

import pytest

# Ensure backend modules are importable when running from repo root
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from songlist.config import Settings
from songlist.services.errors import RedirectResolutionFailed, TransportError


class FakeTransport:
    """Records calls and replays canned responses (bytes or exceptions)."""

    def __init__(self, get_responses=None, post_responses=None, redirects=None):
        self.get_responses = list(get_responses or [])
        self.post_responses = list(post_responses or [])
        self.redirects = dict(redirects or {})
        self.get_calls = []
        self.post_calls = []
        self.redirect_calls = []

    def get(self, url, headers=None):
        self.get_calls.append((url, headers))
        return self._next(self.get_responses, url)

    def post_with_headers(self, url, body, headers=None):
        self.post_calls.append((url, body, headers))
        return self._next(self.post_responses, url)

    def resolve_redirect(self, url):
        self.redirect_calls.append(url)
        if url not in self.redirects:
            raise RedirectResolutionFailed(f"no redirect for {url}")
        return self.redirects[url]

    @staticmethod
    def _next(responses, url):
        if not responses:
            raise TransportError(f"unexpected request to {url}")
        result = responses.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result


def legacy_body(code=0, cdlist=None, wrap=False):
    if cdlist is None:
        cdlist = [
            {
                "dissname": "Road Trip",
                "songnum": 2,
                "songlist": [
                    {"songname": "晴天 (Live)", "singer": [{"name": "周杰伦", "mid": "0025NhlN2yWrP4"}]},
                    {"songname": "Fix You", "singer": [{"name": "Coldplay"}], "albumname": "X&Y"},
                ],
            }
        ]
    body = json.dumps({"code": code, "subcode": 0, "cdlist": cdlist}, ensure_ascii=False)
    if wrap:
        body = f"jsonCallback({body})"
    return body.encode("utf-8")


def paginated_body(title="Night Drive", songnum=3, songs=None, code=0):
    if songs is None:
        songs = [
            {"name": "Song A", "singer": [{"name": "A1"}, {"name": "A2"}]},
            {"name": "Song B", "singer": []},
        ]
    return json.dumps(
        {
            "code": code,
            "req_0": {
                "code": code,
                "data": {"dirinfo": {"title": title, "songnum": songnum}, "songlist": songs},
            },
        }
    ).encode("utf-8")


@pytest.fixture
def settings():
    return Settings(
        environment="testing",
        qqmusic_platforms=["-1", "android", "iphone", "h5"],
        qqmusic_error_response_length=108,
    )


@pytest.fixture
def fake_transport():
    return FakeTransport()
