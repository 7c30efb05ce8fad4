"""
Scene data models for Open Canvas.

This module defines the canvas scene and the objects that can be placed on it.

Classes:
    SceneObject: Base class for anything placed on the canvas
    TextObject: Editable text box
    ShapeObject: Filled circle, rectangle or triangle
    ImageObject: Decoded bitmap with scale factors
    Scene: Ordered, append-only collection of SceneObjects

Functions:
    create_text: Build a TextObject with the default text settings
    create_shape: Build a ShapeObject with a kind's default size and colour
    create_image: Build an ImageObject from a decoded bitmap

Type Aliases:
    BoundingBox: (left, top, right, bottom) in canvas pixels
"""

import uuid
from dataclasses import asdict, dataclass, field, fields
from typing import Any, ClassVar, Dict, Iterator, List, Optional, Tuple

from OC_Libs.constants import (
    DEFAULT_BACKGROUND,
    DEFAULT_CANVAS_HEIGHT,
    DEFAULT_CANVAS_WIDTH,
    DEFAULT_FONT_SIZE,
    DEFAULT_IMAGE_SCALE,
    DEFAULT_IMAGE_X,
    DEFAULT_IMAGE_Y,
    DEFAULT_OBJECT_X,
    DEFAULT_OBJECT_Y,
    DEFAULT_TEXT,
    DEFAULT_TEXT_FILL,
    SHAPE_CIRCLE,
    SHAPE_DEFAULTS,
    SHAPE_RECTANGLE,
    SUPPORTED_SHAPES,
)

BoundingBox = Tuple[float, float, float, float]


def _new_object_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(eq=False)
class SceneObject:
    """Base class for objects placed on the canvas.

    Attributes:
        x: Left edge in canvas pixels
        y: Top edge in canvas pixels
        object_id: Identifier unique within the session
    """
    x: float = 0.0
    y: float = 0.0
    object_id: str = field(default_factory=_new_object_id)

    kind: ClassVar[str] = "object"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["kind"] = self.kind
        return data


@dataclass(eq=False)
class TextObject(SceneObject):
    """Editable text placed with its top-left corner at (x, y)."""
    text: str = DEFAULT_TEXT
    font_size: int = DEFAULT_FONT_SIZE
    fill: str = DEFAULT_TEXT_FILL

    kind: ClassVar[str] = "text"

    def __post_init__(self):
        if self.font_size <= 0:
            raise ValueError(f"font_size must be positive, got {self.font_size}")

    def set_text(self, text: str) -> None:
        self.text = str(text)


@dataclass(eq=False)
class ShapeObject(SceneObject):
    """Filled vector shape.

    Circles use ``radius``; rectangles and triangles use ``width`` and
    ``height``. Triangles are isosceles with the apex at the top centre.
    """
    shape: str = SHAPE_RECTANGLE
    radius: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    fill: str = ""

    kind: ClassVar[str] = "shape"

    def __post_init__(self):
        """Validate shape kind and geometry."""
        if self.shape not in SUPPORTED_SHAPES:
            raise ValueError(f"Unsupported shape: {self.shape}")

        if self.shape == SHAPE_CIRCLE:
            if self.radius is None or self.radius <= 0:
                raise ValueError(f"circle requires a positive radius, got {self.radius}")
        else:
            if not self.width or not self.height or self.width <= 0 or self.height <= 0:
                raise ValueError(
                    f"{self.shape} requires positive width and height, "
                    f"got {self.width}x{self.height}"
                )

    def bounding_box(self) -> BoundingBox:
        if self.shape == SHAPE_CIRCLE:
            diameter = 2 * self.radius
            return (self.x, self.y, self.x + diameter, self.y + diameter)
        return (self.x, self.y, self.x + self.width, self.y + self.height)


@dataclass(eq=False)
class ImageObject(SceneObject):
    """Decoded bitmap drawn at (x, y) and scaled by (scale_x, scale_y).

    Attributes:
        bitmap: Decoded PIL Image (RGBA)
        source_url: Where the bitmap was loaded from
        scale_x: Horizontal scale factor
        scale_y: Vertical scale factor
    """
    bitmap: Optional[Any] = None
    source_url: str = ""
    scale_x: float = 1.0
    scale_y: float = 1.0

    kind: ClassVar[str] = "image"

    def __post_init__(self):
        """Validate that the bitmap is present and scales are positive."""
        if self.bitmap is None or not hasattr(self.bitmap, "size"):
            raise ValueError("ImageObject requires a decoded bitmap")

        if self.scale_x <= 0 or self.scale_y <= 0:
            raise ValueError(
                f"scale factors must be positive, got {self.scale_x}, {self.scale_y}"
            )

    def rendered_size(self) -> Tuple[int, int]:
        """Size of the bitmap on the canvas after scaling (at least 1x1)."""
        width, height = self.bitmap.size
        return (
            max(1, int(round(width * self.scale_x))),
            max(1, int(round(height * self.scale_y))),
        )

    def bounding_box(self) -> BoundingBox:
        width, height = self.rendered_size()
        return (self.x, self.y, self.x + width, self.y + height)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (excludes the bitmap itself)."""
        data = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "bitmap"}
        data["kind"] = self.kind
        data["bitmap_size"] = tuple(self.bitmap.size)
        return data


def create_text(x: float = DEFAULT_OBJECT_X, y: float = DEFAULT_OBJECT_Y) -> TextObject:
    """Create a text object with the default placeholder content."""
    return TextObject(x=x, y=y)


def create_shape(kind: str, x: float = DEFAULT_OBJECT_X, y: float = DEFAULT_OBJECT_Y) -> ShapeObject:
    """
    Create a shape with the fixed defaults for its kind.

    Args:
        kind: One of 'circle', 'rectangle', 'triangle'
        x: Left edge
        y: Top edge

    Returns:
        New ShapeObject

    Raises:
        ValueError: If kind is not a supported shape
    """
    if kind not in SHAPE_DEFAULTS:
        raise ValueError(f"Unsupported shape: {kind}")
    return ShapeObject(x=x, y=y, shape=kind, **SHAPE_DEFAULTS[kind])


def create_image(
    bitmap: Any,
    source_url: str = "",
    scale: float = DEFAULT_IMAGE_SCALE,
    x: float = DEFAULT_IMAGE_X,
    y: float = DEFAULT_IMAGE_Y,
) -> ImageObject:
    """Create an image object with the same scale applied on both axes."""
    return ImageObject(
        x=x,
        y=y,
        bitmap=bitmap,
        source_url=source_url,
        scale_x=scale,
        scale_y=scale,
    )


class Scene:
    """
    The in-memory model of everything placed on the canvas.

    Objects are kept in insertion order, which is also their z-order
    (first inserted is drawn first, i.e. at the back). The sequence is
    append-only; ``clear`` exists only for teardown.
    """

    def __init__(
        self,
        width: int = DEFAULT_CANVAS_WIDTH,
        height: int = DEFAULT_CANVAS_HEIGHT,
        background: Optional[str] = DEFAULT_BACKGROUND,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Scene size must be positive, got {width}x{height}")

        self._width = int(width)
        self._height = int(height)
        self.background = background
        self._objects: List[SceneObject] = []

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> Tuple[int, int]:
        return (self._width, self._height)

    @property
    def objects(self) -> Tuple[SceneObject, ...]:
        """Snapshot of the objects, back to front."""
        return tuple(self._objects)

    def append(self, obj: SceneObject) -> SceneObject:
        """
        Append a fully constructed object on top of the scene.

        Raises:
            TypeError: If obj is not a SceneObject
            ValueError: If obj is already part of the scene
        """
        if not isinstance(obj, SceneObject):
            raise TypeError(f"Expected SceneObject, got {type(obj)}")

        if any(existing is obj for existing in self._objects):
            raise ValueError(f"Object {obj.object_id} is already in the scene")

        self._objects.append(obj)
        return obj

    def clear(self) -> None:
        """Release every object. Only used on teardown."""
        self._objects.clear()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self._width,
            "height": self._height,
            "background": self.background,
            "objects": [obj.to_dict() for obj in self._objects],
        }

    def __len__(self) -> int:
        return len(self._objects)

    def __contains__(self, obj: object) -> bool:
        return any(existing is obj for existing in self._objects)

    def __iter__(self) -> Iterator[SceneObject]:
        return iter(tuple(self._objects))
