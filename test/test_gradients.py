import unittest

from svgsharp.core.color import Color
from svgsharp.core.context import ParseContext
from svgsharp.core.gradients import (
    Gradient,
    GradientRegistry,
    LinearShader,
    RadialShader,
    TileMode,
)
from svgsharp.core.matrix import Matrix


def linear(gradient_id, **attributes):
    attributes["id"] = gradient_id
    return Gradient.from_attributes(True, attributes)


class TestGradient(unittest.TestCase):
    def test_linear_defaults(self):
        gradient = linear("g")
        self.assertEqual((gradient.x1, gradient.y1, gradient.x2, gradient.y2), (0, 0, 1, 0))
        self.assertTrue(gradient.bounding_box)
        self.assertIsNone(gradient.tile_mode)
        self.assertIsNone(gradient.matrix)

    def test_attributes(self):
        gradient = Gradient.from_attributes(
            False,
            {
                "id": "r",
                "cx": "5",
                "cy": "6",
                "r": "7",
                "gradientUnits": "userSpaceOnUse",
                "spreadMethod": "reflect",
                "gradientTransform": "scale(2)",
                "href": "#parent",
            },
        )
        self.assertFalse(gradient.linear)
        self.assertEqual((gradient.cx, gradient.cy, gradient.r), (5, 6, 7))
        self.assertFalse(gradient.bounding_box)
        self.assertEqual(gradient.tile_mode, TileMode.MIRROR)
        self.assertEqual(gradient.matrix, Matrix.scale(2))
        self.assertEqual(gradient.href, "parent")

    def test_build_shader(self):
        gradient = linear("g", spreadMethod="repeat")
        gradient.add_stop(0.0, Color(255, 0, 0))
        gradient.add_stop(1.0, Color(0, 0, 255))
        shader = gradient.build_shader()
        self.assertIsInstance(shader, LinearShader)
        self.assertEqual(shader.positions, (0.0, 1.0))
        self.assertEqual(shader.colors, (Color(255, 0, 0), Color(0, 0, 255)))
        self.assertEqual(shader.tile_mode, TileMode.REPEAT)

    def test_build_shader_without_stops(self):
        self.assertIsNone(linear("g").build_shader())

    def test_shader_for_bounds(self):
        gradient = linear("g")
        gradient.add_stop(0.0, Color(0, 0, 0))
        gradient.build_shader()
        shader = gradient.shader_for_bounds((10, 20, 30, 60))
        self.assertEqual(shader.matrix.point_in_matrix_space(0, 0), (10, 20))
        self.assertEqual(shader.matrix.point_in_matrix_space(1, 1), (30, 60))
        self.assertIsNone(gradient.shader.matrix)

    def test_shader_for_bounds_user_space(self):
        gradient = linear("g", gradientUnits="userSpaceOnUse", gradientTransform="translate(5,0)")
        gradient.add_stop(0.0, Color(0, 0, 0))
        gradient.build_shader()
        shader = gradient.shader_for_bounds((10, 20, 30, 60))
        self.assertEqual(shader.matrix, Matrix.translate(5, 0))


class TestGradientRegistry(unittest.TestCase):
    def setUp(self):
        self.context = ParseContext()
        self.warnings = []
        self.context.watch(self.warnings.append)
        self.registry = GradientRegistry(self.context)

    def test_register_requires_id(self):
        self.registry.register(Gradient())
        self.assertEqual(len(self.registry), 0)

    def test_inherit_stops(self):
        parent = linear("parent", spreadMethod="repeat", gradientTransform="translate(1,0)")
        parent.add_stop(0.0, Color(255, 0, 0))
        parent.add_stop(1.0, Color(0, 255, 0))
        child = linear("child", href="#parent", gradientTransform="scale(2)")
        self.registry.register(parent)
        self.registry.register(child)
        self.registry.finish()
        self.assertEqual(child.colors, parent.colors)
        self.assertEqual(child.tile_mode, TileMode.REPEAT)
        # Child transform first, then the parent's.
        self.assertEqual(child.matrix.point_in_matrix_space(1, 1), (3, 2))
        self.assertIsInstance(child.shader, LinearShader)

    def test_child_stops_kept(self):
        parent = linear("parent")
        parent.add_stop(0.0, Color(255, 0, 0))
        child = linear("child", href="#parent", spreadMethod="pad")
        child.add_stop(0.5, Color(0, 0, 255))
        self.registry.register(child)
        self.registry.register(parent)
        self.registry.finish()
        self.assertEqual(child.colors, [Color(0, 0, 255)])
        self.assertEqual(child.positions, [0.5])

    def test_radial_inherits_linear_stops(self):
        parent = linear("parent")
        parent.add_stop(0.0, Color(255, 0, 0))
        child = Gradient.from_attributes(False, {"id": "child", "href": "#parent", "r": "5"})
        self.registry.register(parent)
        self.registry.register(child)
        self.assertIsInstance(self.registry.get("child").shader, RadialShader)

    def test_lazy_get(self):
        parent = linear("parent")
        parent.add_stop(0.0, Color(255, 0, 0))
        self.registry.register(parent)
        gradient = self.registry.get("parent")
        self.assertTrue(gradient.finished)
        self.assertIsNotNone(gradient.shader)
        self.assertIsNone(self.registry.get("missing"))

    def test_missing_parent(self):
        self.registry.register(linear("child", href="#nothing"))
        self.registry.finish()
        self.assertIsNone(self.registry.get("child").shader)
        self.assertEqual(len(self.warnings), 2)

    def test_cycle(self):
        self.registry.register(linear("a", href="#b"))
        self.registry.register(linear("b", href="#a"))
        self.registry.finish()
        self.assertTrue(self.registry.get("a").finished)
        self.assertTrue(self.registry.get("b").finished)
        self.assertTrue(any("circular" in w for w in self.warnings))
