import unittest

from svgsharp.core.color import Color
from svgsharp.core.elements import DrawType
from svgsharp.core.exceptions import EmptyPictureError
from svgsharp.core.loader import Sharp
from svgsharp.core.paint import Paint, PaintStyle
from svgsharp.core.pathpicture import (
    PathCollector,
    RenderOptions,
    StylePath,
    load_path_picture,
)
from svgsharp.tools.geomstr import Geomstr


def document(body, attributes='width="100" height="100"'):
    return f'<svg xmlns="http://www.w3.org/2000/svg" {attributes}>{body}</svg>'


class TestRenderOptions(unittest.TestCase):
    def test_fit_scale(self):
        self.assertEqual(RenderOptions().fit_scale((0, 0, 100, 50)), 1)
        self.assertEqual(RenderOptions(viewport_width=50).fit_scale((0, 0, 100, 50)), 0.5)
        options = RenderOptions(viewport_width=200, viewport_height=200)
        self.assertEqual(options.fit_scale((0, 0, 100, 50)), 2)
        self.assertEqual(options.fit_scale((0, 0, 0, 0)), 1)

    def test_path_style(self):
        outline = Geomstr()
        self.assertEqual(StylePath(outline, Paint.fill()).path_style, PaintStyle.FILL)
        self.assertEqual(StylePath(outline, None).path_style, PaintStyle.STROKE)
        path = StylePath(outline, Paint.fill(), style=PaintStyle.STROKE)
        self.assertEqual(path.path_style, PaintStyle.STROKE)


class TestPathPicture(unittest.TestCase):
    def test_rect(self):
        picture = load_path_picture(document('<rect width="100" height="50" fill="red"/>'))
        self.assertEqual(len(picture), 1)
        path = picture.paths[0]
        self.assertEqual(path.kind, DrawType.ROUND_RECT)
        self.assertEqual(path.paint.color, Color(255, 0, 0))
        self.assertEqual(picture.bounds, (0, 0, 100, 50))
        self.assertEqual(len(picture.canvas.calls_named("draw_path")), 1)

    def test_outlines_in_document_space(self):
        picture = load_path_picture(
            document(
                '<g transform="translate(5,5)"><rect x="10" y="10" width="20" height="20"/></g>',
                'viewBox="10 10 100 100"',
            )
        )
        self.assertEqual(picture.bounds, (5, 5, 25, 25))
        self.assertEqual(picture.canvas.calls_named("translate"), [(-5, -5)])

    def test_text_and_images_dropped(self):
        picture = load_path_picture(
            document('<text x="0" y="10">label</text><circle cx="5" cy="5" r="5"/>')
        )
        self.assertEqual([p.kind for p in picture], [DrawType.OVAL])

    def test_fill_and_stroke_paths(self):
        picture = load_path_picture(
            document('<rect width="10" height="10" fill="red" stroke="blue"/>')
        )
        self.assertEqual([p.path_style for p in picture], [PaintStyle.FILL, PaintStyle.STROKE])

    def test_force_color(self):
        options = RenderOptions(force_color=Color(0, 255, 0))
        picture = load_path_picture(
            document('<rect width="10" height="10" fill="red" stroke="blue"/>'), options
        )
        self.assertTrue(all(p.paint.color == Color(0, 255, 0) for p in picture))

    def test_force_stroke_style(self):
        options = RenderOptions(
            force_style=PaintStyle.STROKE, viewport_width=200, viewport_height=200
        )
        picture = load_path_picture(
            document('<rect width="100" height="50" fill="red"/>').encode("utf-8"), options
        )
        path = picture.paths[0]
        self.assertEqual(path.paint.style, PaintStyle.STROKE)
        self.assertEqual(path.path_style, PaintStyle.STROKE)
        self.assertEqual(path.paint.stroke_width, 0.5)

    def test_force_fill_style(self):
        options = RenderOptions(force_style=PaintStyle.FILL)
        picture = load_path_picture(
            document('<rect width="10" height="10" fill="none" stroke="red" stroke-width="3"/>'),
            options,
        )
        path = picture.paths[0]
        self.assertEqual(path.path_style, PaintStyle.FILL)
        self.assertEqual(path.paint.stroke_width, 3)

    def test_force_paint(self):
        paint = Paint.stroke()
        options = RenderOptions(force_paint=paint)
        picture = load_path_picture(
            document('<rect width="10" height="10"/><circle cx="5" cy="5" r="2"/>'), options
        )
        self.assertTrue(all(args[1] is paint for args in picture.canvas.calls_named("draw_path")))

    def test_from_sharp(self):
        sharp = Sharp.load_string(document('<rect width="10" height="10"/>'))
        picture = load_path_picture(sharp)
        self.assertEqual(len(picture), 1)
        self.assertEqual(len(sharp.listeners), 0)

    def test_empty(self):
        with self.assertRaises(EmptyPictureError):
            load_path_picture(document(""))
        with self.assertRaises(EmptyPictureError):
            load_path_picture(document('<text x="0" y="10">only text</text>'))

    def test_zero_area(self):
        with self.assertRaises(EmptyPictureError):
            load_path_picture(document('<line x1="0" y1="5" x2="10" y2="5"/>'))


class TestPathCollector(unittest.TestCase):
    def test_collector_intercepts(self):
        collector = PathCollector()
        sharp = Sharp.load_string(document('<rect width="10" height="10"/>'))
        sharp.add_listener(collector)
        picture = sharp.get_picture()
        self.assertEqual(len(collector.paths), 1)
        self.assertEqual(collector.bounds, (0, 0, 10, 10))
        self.assertEqual(picture.canvas.calls_named("draw_rect"), [])
