"""Signed URL generation for private lesson videos.

This service handles:
- Token authentication for time-limited video access
- Building the playable URL for a lesson's stored video

SECURITY: The signing key is kept server-side and never exposed to clients.
Access must be resolved before a URL is signed; this module only signs.
"""

import hashlib
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from urllib.parse import quote, urlencode

import structlog

from src.config.settings import Settings


logger = structlog.get_logger(__name__)


class VideoServiceError(Exception):
    """Base exception for video signing errors."""


class VideoNotConfiguredError(VideoServiceError):
    """Raised when content signing is not configured."""


@dataclass
class SignedContentUrl:
    """A signed, time-limited content URL."""

    url: str
    expires: int

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.expires, tz=UTC)


class ContentSigner:
    """Generates signed URLs for stored lesson videos.

    The URL carries:
    - token: SHA256 hash of (signing_key + path + expiration)
    - expires: UNIX timestamp for URL expiration
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._base_url = settings.content_url_base.rstrip("/")
        self._signing_key = settings.content_signing_key
        self._expiry = settings.content_url_expiry_seconds

    @property
    def is_configured(self) -> bool:
        """Check if content signing is configured."""
        return self.settings.content_signing_configured

    def _generate_token(self, path: str, expires: int) -> str:
        """Generate SHA256 token: SHA256_HEX(signing_key + path + expires)."""
        if not self._signing_key:
            raise VideoNotConfiguredError("Content signing key not configured")

        data = f"{self._signing_key}{path}{expires}"
        return hashlib.sha256(data.encode()).hexdigest()

    def sign(self, video_path: str, *, now: float | None = None) -> SignedContentUrl:
        """Sign a stored video path.

        Args:
            video_path: Object path of the video in the private bucket.
            now: Current UNIX time (defaults to ``time.time()``).

        Raises:
            VideoNotConfiguredError: If signing is not configured.
        """
        if not self.is_configured:
            raise VideoNotConfiguredError(
                "Content signing is not configured. "
                "Please set CONTENT_SIGNING_KEY and CONTENT_URL_BASE."
            )

        path = "/" + video_path.lstrip("/")
        expires = int(now if now is not None else time.time()) + self._expiry
        token = self._generate_token(path, expires)

        query_string = urlencode({"token": token, "expires": expires})
        url = f"{self._base_url}{quote(path)}?{query_string}"

        logger.debug("content_url_signed", path=path, expires=expires)
        return SignedContentUrl(url=url, expires=expires)
