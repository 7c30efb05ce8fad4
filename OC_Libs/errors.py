"""
Error taxonomy for Open Canvas.

Every condition the core reports derives from OpenCanvasError and carries a
user-facing ``message``. Lower-level exceptions (requests, Pillow, OSError)
are chained as ``__cause__`` when re-raised as one of these.

Classes:
    OpenCanvasError: Base class for all editor conditions
    InvalidQuery: Search input was empty or whitespace
    NoResults: Search succeeded with zero matches (informational)
    SearchUnavailable: Search request failed (transport, status or body)
    SceneNotReady: Scene command issued outside the Ready state
    ExportFailed: Scene could not be serialized
    ImageLoadFailed: Bitmap could not be fetched or decoded
"""

from typing import Optional


class OpenCanvasError(Exception):
    """Base class for Open Canvas conditions."""

    default_message = "Something went wrong."

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidQuery(OpenCanvasError, ValueError):
    default_message = "Please enter something to search for."


class NoResults(OpenCanvasError):
    """Valid search, zero matches. Reported as a condition, not raised."""

    default_message = "No images found."

    def __init__(self, query: str, message: Optional[str] = None) -> None:
        self.query = query
        super().__init__(message or f"No images found for '{query}'.")


class SearchUnavailable(OpenCanvasError):
    default_message = "Image search is unavailable right now. Please try again later."

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class SceneNotReady(OpenCanvasError, RuntimeError):
    default_message = "The canvas is not ready."


class ExportFailed(OpenCanvasError):
    default_message = "Could not export the canvas."


class ImageLoadFailed(OpenCanvasError):
    default_message = "Could not load the image."

    def __init__(self, url: str, message: Optional[str] = None) -> None:
        self.url = url
        super().__init__(message)
