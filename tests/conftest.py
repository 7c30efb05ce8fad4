"""
Pytest configuration and shared fixtures for Open Canvas tests.

This module provides shared test fixtures and helpers used across
multiple test modules. No test talks to the network: HTTP is stubbed with
mock sessions returning FakeResponse objects.
"""

from io import BytesIO
from typing import Any, Optional

import pytest
import requests
from PIL import Image

from OC_Libs.config import EditorConfig


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(
        self,
        status_code: int = 200,
        json_data: Any = None,
        content: bytes = b"",
        text: str = "",
        json_error: Optional[Exception] = None,
    ) -> None:
        self.status_code = status_code
        self._json_data = json_data
        self._json_error = json_error
        self.content = content
        self.text = text

    def json(self) -> Any:
        if self._json_error is not None:
            raise self._json_error
        return self._json_data

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


def png_bytes(size=(40, 20), color="purple") -> bytes:
    buffer = BytesIO()
    Image.new("RGBA", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def pixabay_hit(hit_id: int = 1, tags: str = "sunset, sea") -> dict:
    return {
        "id": hit_id,
        "previewURL": f"https://cdn.example.com/{hit_id}_150.jpg",
        "largeImageURL": f"https://cdn.example.com/{hit_id}_1280.jpg",
        "tags": tags,
        "pageURL": f"https://pixabay.com/photos/{hit_id}/",
        "imageWidth": 1920,
        "imageHeight": 1080,
        "user": "photographer",
    }


@pytest.fixture
def editor_config():
    """Default canvas configuration with a short image load timeout."""
    return EditorConfig(api_key="test-key", image_load_timeout=5.0)


@pytest.fixture
def sample_image_path(tmp_path):
    """
    Write a 200x100 opaque blue PNG and return its path.

    Args:
        tmp_path: Pytest's built-in temporary directory fixture
    """
    path = tmp_path / "sample.png"
    Image.new("RGBA", (200, 100), (0, 0, 255, 255)).save(path, format="PNG")
    return path
