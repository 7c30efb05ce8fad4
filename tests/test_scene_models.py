"""
Tests for the scene data models.

Tests cover:
- Default tables for text and shapes
- Shape and image validation
- Bounding boxes and scaled sizes
- Append-only Scene ordering
"""

import unittest

from PIL import Image

from OC_Libs.SceneLib.scene_models import (
    ImageObject,
    Scene,
    ShapeObject,
    TextObject,
    create_image,
    create_shape,
    create_text,
)


class TestTextObject(unittest.TestCase):
    """Test TextObject defaults and editing."""

    def test_default_text(self):
        text = create_text()

        self.assertEqual(text.text, "Enter text here")
        self.assertEqual(text.font_size, 20)
        self.assertEqual(text.fill, "#000")
        self.assertEqual((text.x, text.y), (100, 100))
        self.assertEqual(text.kind, "text")

    def test_set_text_edits_in_place(self):
        text = create_text()
        text.set_text("Hello")

        self.assertEqual(text.text, "Hello")

    def test_rejects_non_positive_font_size(self):
        with self.assertRaises(ValueError):
            TextObject(font_size=0)

    def test_object_ids_are_unique(self):
        ids = {create_text().object_id for _ in range(20)}

        self.assertEqual(len(ids), 20)


class TestShapeObject(unittest.TestCase):
    """Test shape defaults and validation."""

    def test_circle_defaults(self):
        circle = create_shape("circle")

        self.assertEqual(circle.shape, "circle")
        self.assertEqual(circle.radius, 50)
        self.assertEqual(circle.fill, "red")
        self.assertEqual(circle.bounding_box(), (100, 100, 200, 200))

    def test_rectangle_defaults(self):
        rect = create_shape("rectangle")

        self.assertEqual((rect.width, rect.height), (100, 50))
        self.assertEqual(rect.fill, "green")
        self.assertEqual(rect.bounding_box(), (100, 100, 200, 150))

    def test_triangle_defaults(self):
        triangle = create_shape("triangle")

        self.assertEqual((triangle.width, triangle.height), (100, 100))
        self.assertEqual(triangle.fill, "blue")

    def test_unknown_kind_rejected(self):
        with self.assertRaises(ValueError):
            create_shape("hexagon")

        with self.assertRaises(ValueError):
            ShapeObject(shape="hexagon", width=10, height=10)

    def test_circle_requires_radius(self):
        with self.assertRaises(ValueError):
            ShapeObject(shape="circle")

    def test_rectangle_requires_size(self):
        with self.assertRaises(ValueError):
            ShapeObject(shape="rectangle", width=10)

    def test_to_dict(self):
        data = create_shape("circle").to_dict()

        self.assertEqual(data["kind"], "shape")
        self.assertEqual(data["shape"], "circle")
        self.assertEqual(data["radius"], 50)


class TestImageObject(unittest.TestCase):
    """Test image object scaling and validation."""

    def setUp(self):
        self.bitmap = Image.new("RGBA", (200, 100), "blue")

    def test_create_image_applies_scale(self):
        image = create_image(self.bitmap, source_url="https://example.com/a.png")

        self.assertEqual((image.scale_x, image.scale_y), (0.5, 0.5))
        self.assertEqual((image.x, image.y), (0, 0))
        self.assertEqual(image.rendered_size(), (100, 50))
        self.assertEqual(image.bounding_box(), (0, 0, 100, 50))

    def test_requires_bitmap(self):
        with self.assertRaises(ValueError):
            ImageObject(source_url="https://example.com/a.png")

    def test_rejects_non_positive_scale(self):
        with self.assertRaises(ValueError):
            ImageObject(bitmap=self.bitmap, scale_x=0)

    def test_rendered_size_never_zero(self):
        image = ImageObject(bitmap=Image.new("RGBA", (1, 1)), scale_x=0.1, scale_y=0.1)

        self.assertEqual(image.rendered_size(), (1, 1))

    def test_to_dict_excludes_bitmap(self):
        data = create_image(self.bitmap, source_url="a.png").to_dict()

        self.assertNotIn("bitmap", data)
        self.assertEqual(data["bitmap_size"], (200, 100))
        self.assertEqual(data["source_url"], "a.png")
        self.assertEqual(data["kind"], "image")


class TestScene(unittest.TestCase):
    """Test the append-only scene container."""

    def test_default_size(self):
        scene = Scene()

        self.assertEqual(scene.size, (600, 400))
        self.assertEqual(len(scene), 0)

    def test_append_preserves_insertion_order(self):
        scene = Scene()
        first = scene.append(create_text())
        second = scene.append(create_shape("circle"))
        third = scene.append(create_shape("triangle"))

        self.assertEqual(scene.objects, (first, second, third))
        self.assertEqual(list(scene), [first, second, third])

    def test_objects_is_a_snapshot(self):
        scene = Scene()
        scene.append(create_text())
        snapshot = scene.objects
        scene.append(create_text())

        self.assertEqual(len(snapshot), 1)
        self.assertEqual(len(scene), 2)

    def test_rejects_duplicate_object(self):
        scene = Scene()
        text = scene.append(create_text())

        with self.assertRaises(ValueError):
            scene.append(text)

    def test_contains_by_identity(self):
        scene = Scene()
        text = scene.append(create_text())

        self.assertIn(text, scene)
        self.assertNotIn(create_text(), scene)

    def test_rejects_non_scene_object(self):
        with self.assertRaises(TypeError):
            Scene().append("not an object")

    def test_rejects_invalid_size(self):
        with self.assertRaises(ValueError):
            Scene(0, 400)

    def test_clear_releases_objects(self):
        scene = Scene()
        scene.append(create_text())
        scene.clear()

        self.assertEqual(len(scene), 0)

    def test_to_dict(self):
        scene = Scene(background="white")
        scene.append(create_shape("rectangle"))

        data = scene.to_dict()

        self.assertEqual(data["width"], 600)
        self.assertEqual(data["background"], "white")
        self.assertEqual(data["objects"][0]["shape"], "rectangle")


if __name__ == "__main__":
    unittest.main()
