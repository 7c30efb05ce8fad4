"""
SceneLib - Canvas scene model and editing

This module provides the scene data model, the Pillow renderer, bitmap
loading, and the SceneEditor that ties them together.
"""

from OC_Libs.SceneLib.scene_models import (
    Scene,
    SceneObject,
    TextObject,
    ShapeObject,
    ImageObject,
    create_text,
    create_shape,
    create_image,
)
from OC_Libs.SceneLib.scene_renderer import SceneRenderer, encode_image
from OC_Libs.SceneLib.bitmap_loader import BitmapLoader
from OC_Libs.SceneLib.scene_editor import SceneEditor, SceneState
from OC_Libs.SceneLib.editor_loop import EditorLoop

__all__ = [
    "Scene",
    "SceneObject",
    "TextObject",
    "ShapeObject",
    "ImageObject",
    "create_text",
    "create_shape",
    "create_image",
    "SceneRenderer",
    "encode_image",
    "BitmapLoader",
    "SceneEditor",
    "SceneState",
    "EditorLoop",
]
