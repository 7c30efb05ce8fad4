"""
Scene Editor for Open Canvas.

The SceneEditor owns the Scene and its drawing surface and exposes the
editing commands. Every successful mutation is followed by a full redraw of
the scene onto the surface; there is no dirty-region tracking because scenes
hold tens of objects, not thousands.

Lifecycle:
    UNINITIALIZED --open()--> READY --close()--> DISPOSED

Only ``is_ready`` / ``state`` are valid outside READY. Mutating commands
raise SceneNotReady there; ``export`` raises ExportFailed.

Threading:
    All commands must be issued from the single thread that owns the editor
    (normally an asyncio event loop thread, see EditorLoop). ``add_image``
    hands the blocking fetch/decode to a worker thread and resumes on the
    loop thread before touching the scene, so the object sequence only ever
    has one writer.

Example:
    >>> with SceneEditor() as editor:
    ...     editor.add_text()
    ...     editor.add_shape("circle")
    ...     png_bytes = editor.export()
"""

import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple, Union

from OC_Libs.config import EditorConfig
from OC_Libs.constants import SUPPORTED_SHAPES
from OC_Libs.errors import ExportFailed, ImageLoadFailed, SceneNotReady
from OC_Libs.SceneLib.bitmap_loader import BitmapLoader
from OC_Libs.SceneLib.scene_models import (
    ImageObject,
    Scene,
    SceneObject,
    ShapeObject,
    TextObject,
    create_image,
    create_shape,
    create_text,
)
from OC_Libs.SceneLib.scene_renderer import SceneRenderer, encode_image

logger = logging.getLogger(__name__)

RedrawListener = Callable[[Any], None]


class SceneState(Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    DISPOSED = "disposed"


class SceneEditor:
    """
    Owns a Scene and mutates it in response to discrete commands.

    Args:
        config: Editor configuration (canvas size, image scale, timeouts)
        loader: Bitmap loader used by add_image (default BitmapLoader)
        renderer: Scene renderer (default SceneRenderer)
        executor: Executor for blocking image loads (None = loop default)
    """

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        loader: Optional[BitmapLoader] = None,
        renderer: Optional[SceneRenderer] = None,
        executor: Optional[Any] = None,
    ) -> None:
        self.config = config or EditorConfig()
        self._owns_loader = loader is None
        self._loader = loader or BitmapLoader(timeout=self.config.image_load_timeout)
        self._renderer = renderer or SceneRenderer(font_path=self.config.font_path)
        self._executor = executor

        self._state = SceneState.UNINITIALIZED
        self._scene: Optional[Scene] = None
        self._surface: Optional[Any] = None
        self._listeners: List[RedrawListener] = []
        self.redraw_count = 0

    # Lifecycle -------------------------------------------------------------

    @property
    def state(self) -> SceneState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is SceneState.READY

    def open(self) -> "SceneEditor":
        """
        Create the scene and its drawing surface.

        Opening a READY editor does nothing.

        Raises:
            SceneNotReady: If the editor has already been disposed
        """
        if self._state is SceneState.READY:
            return self

        if self._state is SceneState.DISPOSED:
            raise SceneNotReady("The canvas has been closed and cannot be reopened.")

        self._scene = Scene(
            width=self.config.canvas_width,
            height=self.config.canvas_height,
            background=self.config.background,
        )
        self._surface = self._renderer.render(self._scene)
        self._state = SceneState.READY
        logger.debug("Scene opened (%dx%d)", self._scene.width, self._scene.height)
        return self

    def close(self) -> None:
        """Release every object and detach the drawing surface."""
        if self._state is SceneState.DISPOSED:
            return

        if self._scene is not None:
            self._scene.clear()

        self._scene = None
        self._surface = None
        self._listeners.clear()
        self._state = SceneState.DISPOSED

        if self._owns_loader:
            self._loader.close()

        logger.debug("Scene disposed")

    def __enter__(self) -> "SceneEditor":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _require_ready(self, command: str) -> Scene:
        if self._state is not SceneState.READY or self._scene is None:
            raise SceneNotReady(
                f"Cannot {command}: the canvas is {self._state.value}."
            )
        return self._scene

    # Read access -------------------------------------------------------------

    @property
    def surface(self) -> Optional[Any]:
        """The last rendered drawing surface (None unless READY)."""
        return self._surface

    @property
    def objects(self) -> Tuple[SceneObject, ...]:
        if self._scene is None:
            return ()
        return self._scene.objects

    @property
    def size(self) -> Tuple[int, int]:
        return (self.config.canvas_width, self.config.canvas_height)

    # Redraw ------------------------------------------------------------------

    def add_redraw_listener(self, listener: RedrawListener) -> None:
        """Register a callback receiving the surface after every redraw."""
        if not callable(listener):
            raise ValueError(f"listener must be callable, got {type(listener)}")
        self._listeners.append(listener)

    def remove_redraw_listener(self, listener: RedrawListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _redraw(self) -> None:
        self._surface = self._renderer.render(self._scene)
        self.redraw_count += 1
        for listener in list(self._listeners):
            try:
                listener(self._surface)
            except Exception:
                # A listener failure never undoes a completed mutation
                logger.exception("Redraw listener %r failed", listener)

    def _append(self, obj: SceneObject) -> SceneObject:
        self._scene.append(obj)
        self._redraw()
        logger.debug("Added %s %s (%d objects)", obj.kind, obj.object_id, len(self._scene))
        return obj

    # Commands ----------------------------------------------------------------

    def add_text(self) -> TextObject:
        """
        Add the default text box at (100, 100).

        Raises:
            SceneNotReady: If the canvas is not READY
        """
        self._require_ready("add text")
        return self._append(create_text())

    def add_shape(self, kind: str) -> Optional[ShapeObject]:
        """
        Add a circle, rectangle or triangle with that kind's defaults.

        Unknown kinds are ignored: nothing is added and None is returned.

        Raises:
            SceneNotReady: If the canvas is not READY
        """
        self._require_ready("add shape")

        if kind not in SUPPORTED_SHAPES:
            logger.debug("Ignoring unsupported shape kind %r", kind)
            return None

        return self._append(create_shape(kind))

    def edit_text(self, obj: TextObject, text: str) -> TextObject:
        """
        Replace the content of a text box already on the canvas.

        The object keeps its place in the z-order.

        Raises:
            SceneNotReady: If the canvas is not READY
            ValueError: If ``obj`` is not a TextObject in this scene
        """
        scene = self._require_ready("edit text")

        if not isinstance(obj, TextObject):
            raise ValueError(f"Expected TextObject, got {type(obj).__name__}")
        if obj not in scene:
            raise ValueError(f"Text {obj.object_id} is not on this canvas")

        obj.set_text(text)
        self._redraw()
        logger.debug("Edited text %s", obj.object_id)
        return obj

    async def add_image(self, url: str) -> ImageObject:
        """
        Load the bitmap at ``url`` and add it at half size.

        The object is only appended once the bitmap is fully decoded. Commands
        issued while the load is in flight may land in the scene first.

        Raises:
            SceneNotReady: If the canvas is not READY when called or when the
                load completes
            ImageLoadFailed: If the bitmap cannot be loaded or the load times out
        """
        self._require_ready("add image")

        loop = asyncio.get_running_loop()
        pending = loop.run_in_executor(self._executor, self._loader.load, url)
        timeout = self.config.image_load_timeout

        try:
            if timeout is None:
                bitmap = await pending
            else:
                bitmap = await asyncio.wait_for(pending, timeout)
        except asyncio.TimeoutError as e:
            logger.warning("Timed out after %ss loading %s", timeout, url)
            raise ImageLoadFailed(url, f"Timed out loading the image after {timeout} seconds.") from e

        self._require_ready("add image")
        obj = create_image(bitmap, source_url=url, scale=self.config.image_scale)
        return self._append(obj)

    def export(self, format: str = "png", quality: float = 1.0) -> bytes:
        """
        Render the whole scene and encode it.

        Args:
            format: 'png' (default) or 'jpeg'
            quality: 0.0-1.0, used by JPEG only

        Returns:
            Encoded image bytes at the scene's pixel dimensions

        Raises:
            ExportFailed: If the canvas is not READY or encoding fails
        """
        if not self.is_ready:
            raise ExportFailed(f"Cannot export: the canvas is {self._state.value}.")

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Exporting scene %s", self._scene.to_dict())

        try:
            image = self._renderer.render(self._scene)
            data = encode_image(image, format, quality)
        except Exception as e:
            logger.warning("Export failed: %s", e)
            raise ExportFailed() from e

        logger.info("Exported %s (%d bytes)", format, len(data))
        return data

    def save_export(
        self,
        path: Union[str, Path],
        format: str = "png",
        quality: float = 1.0,
    ) -> Path:
        """
        Export the scene and write it to ``path``.

        Raises:
            ExportFailed: If export fails or the file cannot be written
        """
        data = self.export(format, quality)
        target = Path(path)

        try:
            target.write_bytes(data)
        except OSError as e:
            raise ExportFailed(f"Could not save the image to {target}.") from e

        return target
