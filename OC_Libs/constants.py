"""
Constants and configuration values for Open Canvas.

This module centralizes all constant values, default object tables and
configuration settings used throughout the application.
"""

# Canvas constants
DEFAULT_CANVAS_WIDTH = 600
DEFAULT_CANVAS_HEIGHT = 400
DEFAULT_BACKGROUND = None  # Transparent
EXPORT_FILE_NAME = "canvas-image.png"

# Default object position (top-left anchor)
DEFAULT_OBJECT_X = 100.0
DEFAULT_OBJECT_Y = 100.0

# Text defaults
DEFAULT_TEXT = "Enter text here"
DEFAULT_FONT_SIZE = 20
DEFAULT_TEXT_FILL = "#000"
FALLBACK_FONT_NAMES = ("DejaVuSans.ttf", "Arial.ttf", "arial.ttf")

# Shape kinds
SHAPE_CIRCLE = "circle"
SHAPE_RECTANGLE = "rectangle"
SHAPE_TRIANGLE = "triangle"

# Per-kind defaults applied at creation time
SHAPE_DEFAULTS = {
    SHAPE_CIRCLE: {"radius": 50.0, "fill": "red"},
    SHAPE_RECTANGLE: {"width": 100.0, "height": 50.0, "fill": "green"},
    SHAPE_TRIANGLE: {"width": 100.0, "height": 100.0, "fill": "blue"},
}
SUPPORTED_SHAPES = frozenset(SHAPE_DEFAULTS)

# Image defaults
DEFAULT_IMAGE_X = 0.0
DEFAULT_IMAGE_Y = 0.0
DEFAULT_IMAGE_SCALE = 0.5
DEFAULT_IMAGE_LOAD_TIMEOUT = 30.0

# Export formats
EXPORT_FORMAT_PNG = "png"
EXPORT_FORMAT_JPEG = "jpeg"
EXPORT_FORMAT_ALIASES = {
    "png": EXPORT_FORMAT_PNG,
    "jpeg": EXPORT_FORMAT_JPEG,
    "jpg": EXPORT_FORMAT_JPEG,
}
JPEG_FLATTEN_COLOR = "white"

# Search provider constants
PIXABAY_ENDPOINT = "https://pixabay.com/api/"
DEFAULT_CONTENT_FILTER = "photo"
DEFAULT_PER_PAGE = 20
DEFAULT_REQUEST_TIMEOUT = 10.0

# Pixabay response field names
FIELD_TOTAL = "total"
FIELD_TOTAL_HITS = "totalHits"
FIELD_HITS = "hits"
FIELD_HIT_ID = "id"
FIELD_PREVIEW_URL = "previewURL"
FIELD_FULL_URL = "largeImageURL"
FIELD_TAGS = "tags"
FIELD_PAGE_URL = "pageURL"
FIELD_IMAGE_WIDTH = "imageWidth"
FIELD_IMAGE_HEIGHT = "imageHeight"
FIELD_USER = "user"

# Environment variables
ENV_API_KEY = "PIXABAY_API_KEY"
ENV_LOG_LEVEL = "OPEN_CANVAS_LOG_LEVEL"
ENV_CONFIG_PATH = "OPEN_CANVAS_CONFIG"

# UI constants
DEFAULT_WINDOW_WIDTH = 1200
DEFAULT_WINDOW_HEIGHT = 800
RESULT_THUMBNAIL_SIZE = 96
