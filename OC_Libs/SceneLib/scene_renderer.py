"""
Scene Renderer.

Draws a Scene back to front onto a fresh RGBA canvas. Each object is drawn on
its own transparent full-size layer which is then alpha-composited onto the
result, so objects hanging off the canvas edge are clipped rather than
rejected.

Example:
    >>> scene = Scene(600, 400)
    >>> scene.append(create_shape("circle"))
    >>> image = SceneRenderer().render(scene)
    >>> image.size
    (600, 400)
"""

from io import BytesIO
from typing import Any, Dict, Optional

from PIL import Image, ImageDraw, ImageFont

from OC_Libs.constants import (
    EXPORT_FORMAT_ALIASES,
    EXPORT_FORMAT_JPEG,
    FALLBACK_FONT_NAMES,
    JPEG_FLATTEN_COLOR,
    SHAPE_CIRCLE,
    SHAPE_RECTANGLE,
    SHAPE_TRIANGLE,
)
from OC_Libs.SceneLib.scene_models import (
    ImageObject,
    Scene,
    SceneObject,
    ShapeObject,
    TextObject,
)

TRANSPARENT = (0, 0, 0, 0)


class SceneRenderer:
    """Renders scenes to PIL Images."""

    def __init__(self, font_path: Optional[str] = None) -> None:
        self.font_path = font_path
        self._fonts: Dict[int, Any] = {}

    def render(self, scene: Scene) -> Any:
        """
        Render every object of the scene in z-order.

        Args:
            scene: Scene to draw

        Returns:
            RGBA PIL Image with the scene's pixel dimensions

        Raises:
            TypeError: If the scene holds an object type the renderer cannot draw
            ValueError: If an object's colour cannot be parsed
        """
        result = Image.new("RGBA", scene.size, scene.background or TRANSPARENT)

        for obj in scene.objects:
            layer = self._render_object(scene.size, obj)
            result = Image.alpha_composite(result, layer)

        return result

    def _render_object(self, size, obj: SceneObject) -> Any:
        layer = Image.new("RGBA", size, TRANSPARENT)

        if isinstance(obj, TextObject):
            self._draw_text(layer, obj)
        elif isinstance(obj, ShapeObject):
            self._draw_shape(layer, obj)
        elif isinstance(obj, ImageObject):
            self._draw_image(layer, obj)
        else:
            raise TypeError(f"Cannot render object of type {type(obj)}")

        return layer

    def _draw_text(self, layer: Any, obj: TextObject) -> None:
        draw = ImageDraw.Draw(layer)
        draw.text((obj.x, obj.y), obj.text, fill=obj.fill, font=self.get_font(obj.font_size))

    def _draw_shape(self, layer: Any, obj: ShapeObject) -> None:
        draw = ImageDraw.Draw(layer)
        left, top, right, bottom = obj.bounding_box()
        # Pillow boxes are inclusive on both ends
        inner = [left, top, max(left, right - 1), max(top, bottom - 1)]

        if obj.shape == SHAPE_CIRCLE:
            draw.ellipse(inner, fill=obj.fill)
        elif obj.shape == SHAPE_RECTANGLE:
            draw.rectangle(inner, fill=obj.fill)
        elif obj.shape == SHAPE_TRIANGLE:
            apex = (left + obj.width / 2.0, top)
            draw.polygon([apex, (right, bottom), (left, bottom)], fill=obj.fill)
        else:
            raise ValueError(f"Unsupported shape: {obj.shape}")

    def _draw_image(self, layer: Any, obj: ImageObject) -> None:
        bitmap = obj.bitmap.convert("RGBA")
        target_size = obj.rendered_size()
        if bitmap.size != target_size:
            bitmap = bitmap.resize(target_size, Image.Resampling.LANCZOS)

        # paste() clips anything outside the layer, including negative offsets
        layer.paste(bitmap, (int(round(obj.x)), int(round(obj.y))))

    def get_font(self, size: int) -> Any:
        """Return a font of the given pixel size, cached per size."""
        font = self._fonts.get(size)
        if font is None:
            font = self._load_font(size)
            self._fonts[size] = font
        return font

    def _load_font(self, size: int) -> Any:
        candidates = [self.font_path] if self.font_path else []
        candidates.extend(FALLBACK_FONT_NAMES)

        for candidate in candidates:
            try:
                return ImageFont.truetype(candidate, size)
            except OSError:
                continue

        return ImageFont.load_default(size=size)


def get_export_save_kwargs(export_format: str = "png", quality: float = 1.0) -> Dict[str, Any]:
    """
    Get PIL Image.save() kwargs for an export request.

    Args:
        export_format: 'png', 'jpeg' or 'jpg' (case-insensitive)
        quality: 0.0-1.0, only used for JPEG (mapped to 1-100)

    Returns:
        Keyword arguments for Image.save()

    Raises:
        ValueError: If the format is unsupported or quality is out of range
    """
    normalized = EXPORT_FORMAT_ALIASES.get(str(export_format).strip().lower())
    if normalized is None:
        raise ValueError(f"Unsupported export format: {export_format}")

    if not (0.0 <= quality <= 1.0):
        raise ValueError(f"quality must be 0.0-1.0, got {quality}")

    kwargs: Dict[str, Any] = {"format": normalized.upper()}

    if normalized == EXPORT_FORMAT_JPEG:
        kwargs["quality"] = max(1, min(100, int(round(quality * 100))))

    return kwargs


def encode_image(image: Any, export_format: str = "png", quality: float = 1.0) -> bytes:
    """
    Encode a rendered canvas as image file bytes.

    JPEG has no alpha channel, so the canvas is flattened onto white first.

    Raises:
        ValueError: If the format or quality is invalid
        OSError: If Pillow fails to encode the image
    """
    kwargs = get_export_save_kwargs(export_format, quality)

    if kwargs["format"] == "JPEG":
        rgba = image.convert("RGBA")
        flattened = Image.new("RGB", rgba.size, JPEG_FLATTEN_COLOR)
        flattened.paste(rgba, mask=rgba.getchannel("A"))
        image = flattened

    buffer = BytesIO()
    image.save(buffer, **kwargs)
    return buffer.getvalue()
