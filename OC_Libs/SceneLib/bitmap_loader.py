"""
Bitmap Loader for Open Canvas.

Fetches and decodes the bitmap behind an image URL. HTTP(S) URLs are fetched
with requests; ``file://`` URLs and plain filesystem paths are read from disk.
Every bitmap is converted to RGBA for consistency with the renderer.

Loading is blocking. The scene editor runs it on a worker thread so the
event loop is never stalled by network I/O or decoding.

Classes:
    BitmapLoader: Blocking URL-to-PIL-Image loader

Functions:
    is_remote_url: True for http/https URLs
"""

import logging
from io import BytesIO
from pathlib import Path
from typing import Any, Optional
from urllib.parse import unquote, urlparse

import requests
from PIL import Image, UnidentifiedImageError

from OC_Libs.constants import DEFAULT_IMAGE_LOAD_TIMEOUT
from OC_Libs.errors import ImageLoadFailed

logger = logging.getLogger(__name__)

REMOTE_SCHEMES = {"http", "https"}


def is_remote_url(url: str) -> bool:
    return urlparse(url).scheme.lower() in REMOTE_SCHEMES


class BitmapLoader:
    """
    Load bitmaps from URLs or local paths.

    Args:
        timeout: Per-request timeout in seconds for remote URLs
        session: Optional requests.Session for every request (requests.get per call if omitted)
    """

    def __init__(
        self,
        timeout: Optional[float] = DEFAULT_IMAGE_LOAD_TIMEOUT,
        session: Optional[Any] = None,
    ) -> None:
        self.timeout = timeout
        self._session = session

    def _get(self, url: str, **kwargs: Any) -> Any:
        # Sessions are not thread-safe; only an injected one is reused
        if self._session is not None:
            return self._session.get(url, **kwargs)
        return requests.get(url, **kwargs)

    def load(self, url: str) -> Any:
        """
        Fetch and decode the bitmap at ``url``.

        Args:
            url: http(s) URL, file:// URL or filesystem path

        Returns:
            Fully decoded PIL Image in RGBA mode

        Raises:
            ImageLoadFailed: If the bitmap cannot be fetched or decoded
        """
        if not url or not str(url).strip():
            raise ImageLoadFailed(str(url), "No image URL given.")

        url = str(url).strip()

        if is_remote_url(url):
            data = self._fetch_remote(url)
        else:
            data = self._read_local(url)

        image = self._decode(url, data)
        logger.info("Loaded bitmap %s (%dx%d)", url, image.width, image.height)
        return image

    def _fetch_remote(self, url: str) -> bytes:
        try:
            response = self._get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Failed to fetch image from %s: %s", url, e)
            raise ImageLoadFailed(url, f"Could not download the image: {e}") from e

        return response.content

    def _read_local(self, url: str) -> bytes:
        parsed = urlparse(url)
        if parsed.scheme == "file":
            path = Path(unquote(parsed.path))
        else:
            path = Path(url)

        if not path.is_file():
            raise ImageLoadFailed(url, f"Image file not found: {path}")

        try:
            return path.read_bytes()
        except OSError as e:
            raise ImageLoadFailed(url, f"Could not read the image file: {e}") from e

    def _decode(self, url: str, data: bytes) -> Any:
        try:
            with Image.open(BytesIO(data)) as img:
                # convert() forces a full decode so truncated data fails here
                return img.convert("RGBA")
        except (UnidentifiedImageError, OSError, ValueError) as e:
            logger.warning("Failed to decode image from %s: %s", url, e)
            raise ImageLoadFailed(url, f"The image could not be decoded: {e}") from e

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
