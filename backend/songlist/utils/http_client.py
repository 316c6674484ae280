"""
HTTP Transport

Thin wrapper around ``httpx.Client`` used for every outbound provider call.
The playlist service only sees ``get``, ``post_with_headers`` and
``resolve_redirect``, which keeps it testable with a fake transport.

Classes:
    HttpTransport: Synchronous transport with a shared client and timeout
"""

import logging
from typing import Dict, Optional

import httpx

from songlist.services.errors import RedirectResolutionFailed, TransportError

logger = logging.getLogger(__name__)

REDIRECT_STATUSES = {301, 302, 303, 307, 308}


class HttpTransport:
    """
    Outbound HTTP transport

    Args:
        timeout: Per-request deadline in seconds
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``)
    """

    def __init__(self, timeout: float = 15.0, transport: Optional[httpx.BaseTransport] = None):
        self.client = httpx.Client(timeout=timeout, transport=transport, follow_redirects=True)

    def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> bytes:
        """GET ``url`` and return the raw body."""
        try:
            resp = self.client.get(url, headers=headers)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise TransportError(f"GET {url} failed", cause=e) from e
        return resp.content

    def post_with_headers(self, url: str, body: str, headers: Optional[Dict[str, str]] = None) -> bytes:
        """POST ``body`` verbatim to ``url`` and return the raw body."""
        try:
            resp = self.client.post(url, content=body.encode("utf-8"), headers=headers)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise TransportError(f"POST {url} failed", cause=e) from e
        return resp.content

    def resolve_redirect(self, url: str) -> str:
        """
        Return the landing URL of a short link without following it.

        Raises:
            RedirectResolutionFailed: On network errors or when no redirect is returned
        """
        try:
            resp = self.client.get(url, follow_redirects=False)
        except httpx.HTTPError as e:
            raise RedirectResolutionFailed(f"Could not resolve short link {url}", cause=e) from e

        location = resp.headers.get("location")
        if resp.status_code not in REDIRECT_STATUSES or not location:
            raise RedirectResolutionFailed(
                f"Short link {url} did not redirect (status {resp.status_code})"
            )
        landing = str(resp.url.join(location))
        logger.debug("Short link %s redirects to %s", url, landing)
        return landing

    def close(self) -> None:
        self.client.close()
