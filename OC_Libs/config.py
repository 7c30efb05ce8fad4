"""
Editor configuration for Open Canvas.

Configuration is layered: built-in defaults, then an optional JSON file,
then environment variables. Unknown keys in the JSON file are ignored.

Classes:
    EditorConfig: All tunable settings for search, canvas and loading

Functions:
    load_config: Build an EditorConfig from defaults, file and environment
"""

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from OC_Libs.constants import (
    DEFAULT_BACKGROUND,
    DEFAULT_CANVAS_HEIGHT,
    DEFAULT_CANVAS_WIDTH,
    DEFAULT_CONTENT_FILTER,
    DEFAULT_IMAGE_LOAD_TIMEOUT,
    DEFAULT_IMAGE_SCALE,
    DEFAULT_PER_PAGE,
    DEFAULT_REQUEST_TIMEOUT,
    ENV_API_KEY,
    ENV_CONFIG_PATH,
    ENV_LOG_LEVEL,
    PIXABAY_ENDPOINT,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class EditorConfig:
    """Configuration for the search adapter and scene editor.

    Attributes:
        api_key: Pixabay API credential
        search_endpoint: Search API URL
        content_filter: Value sent as ``image_type`` (photos only by default)
        per_page: Number of hits requested per search (3-200 per Pixabay)
        request_timeout: Search request timeout in seconds
        canvas_width: Scene width in pixels
        canvas_height: Scene height in pixels
        background: Pillow colour string for the canvas, None = transparent
        image_scale: Scale factor applied to inserted images (both axes)
        image_load_timeout: Seconds to wait for a bitmap, None = wait forever
        font_path: Optional TrueType font used for text objects
        log_level: Logging level name for the application
    """
    api_key: str = ""
    search_endpoint: str = PIXABAY_ENDPOINT
    content_filter: str = DEFAULT_CONTENT_FILTER
    per_page: int = DEFAULT_PER_PAGE
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    canvas_width: int = DEFAULT_CANVAS_WIDTH
    canvas_height: int = DEFAULT_CANVAS_HEIGHT
    background: Optional[str] = DEFAULT_BACKGROUND
    image_scale: float = DEFAULT_IMAGE_SCALE
    image_load_timeout: Optional[float] = DEFAULT_IMAGE_LOAD_TIMEOUT
    font_path: Optional[str] = None
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate configuration values."""
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise ValueError(
                f"canvas size must be positive, got {self.canvas_width}x{self.canvas_height}"
            )

        if not (3 <= self.per_page <= 200):
            raise ValueError(f"per_page must be 3-200, got {self.per_page}")

        if self.request_timeout <= 0:
            raise ValueError(f"request_timeout must be positive, got {self.request_timeout}")

        if self.image_scale <= 0:
            raise ValueError(f"image_scale must be positive, got {self.image_scale}")

        if self.image_load_timeout is not None and self.image_load_timeout <= 0:
            raise ValueError(
                f"image_load_timeout must be positive or None, got {self.image_load_timeout}"
            )

        self.log_level = str(self.log_level).upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Unknown log_level: {self.log_level}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EditorConfig":
        """Create from dictionary, ignoring unknown keys."""
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)


def _read_config_file(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")
    return data


def load_config(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> EditorConfig:
    """
    Build the editor configuration.

    Args:
        path: Optional JSON config file. Falls back to $OPEN_CANVAS_CONFIG.
        environ: Environment mapping (defaults to os.environ)

    Returns:
        EditorConfig with defaults < file values < environment values

    Raises:
        FileNotFoundError: If an explicit config path does not exist
        ValueError: If the file is not a JSON object or a value is invalid
    """
    env = os.environ if environ is None else environ
    values: Dict[str, Any] = {}

    if path is None and env.get(ENV_CONFIG_PATH):
        path = env[ENV_CONFIG_PATH]

    if path is not None:
        config_path = Path(path)
        if not config_path.is_file():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        values.update(_read_config_file(config_path))
        logger.debug("Loaded config file %s", config_path)

    if env.get(ENV_API_KEY):
        values["api_key"] = env[ENV_API_KEY]
    if env.get(ENV_LOG_LEVEL):
        values["log_level"] = env[ENV_LOG_LEVEL]

    return EditorConfig.from_dict(values)
