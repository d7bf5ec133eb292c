import os
import tempfile
import unittest

from svgsharp.core.color import Color
from svgsharp.core.context import LOG_INFO, LOG_WARN
from svgsharp.core.paint import PaintStyle
from svgsharp.core.pathpicture import RenderOptions
from svgsharp.kernel.settings import Settings


class TestSettings(unittest.TestCase):
    """Tests the ini backed settings store."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_file = os.path.join(self.temp_dir, "svgsharp.ini")

    def tearDown(self):
        if os.path.exists(self.config_file):
            os.remove(self.config_file)
        os.rmdir(self.temp_dir)

    def test_settings_without_file(self):
        settings = Settings()
        self.assertEqual(settings._config_dict, {})
        self.assertEqual(settings.read_persistent(str, "render", "force_style", "x"), "x")

    def test_settings_missing_file(self):
        settings = Settings(self.config_file)
        self.assertEqual(settings._config_dict, {})

    def test_settings_without_section_header(self):
        with open(self.config_file, "w", encoding="utf-8") as fp:
            fp.write("force_style = stroke\n")
        settings = Settings(self.config_file)
        self.assertEqual(settings._config_dict, {})

    def test_read_file(self):
        with open(self.config_file, "w", encoding="utf-8") as fp:
            fp.write("[render]\nforce_color = #ff0000\nviewport_width = 200\n")
        settings = Settings(self.config_file)
        self.assertEqual(settings.read_persistent(str, "render", "force_color"), "#ff0000")
        self.assertEqual(settings.read_persistent(int, "render", "viewport_width"), 200)

    def test_read_persistent_types(self):
        settings = Settings()
        settings.read_string(
            "[render]\n"
            "force_style = stroke\n"
            "scale = 1.5\n"
            "[parser]\n"
            "strict = True\n"
            "font_dirs = ['a', 'b']\n"
        )
        self.assertEqual(settings.read_persistent(str, "render", "force_style"), "stroke")
        self.assertEqual(settings.read_persistent(float, "render", "scale"), 1.5)
        self.assertTrue(settings.read_persistent(bool, "parser", "strict"))
        self.assertEqual(settings.read_persistent(list, "parser", "font_dirs"), ["a", "b"])

    def test_read_persistent_defaults(self):
        settings = Settings()
        settings.read_string("[render]\nviewport_width = wide\n[parser]\nfont_dirs = [unclosed\n")
        self.assertEqual(settings.read_persistent(int, "render", "viewport_width", 7), 7)
        self.assertEqual(settings.read_persistent(list, "parser", "font_dirs", []), [])
        self.assertEqual(settings.read_persistent(str, "missing", "key", "x"), "x")

    def test_read_string_extends_sections(self):
        settings = Settings()
        settings.read_string("[render]\na = 1\n")
        settings.read_string("[render]\nb = 2\n")
        self.assertEqual(settings.read_persistent(int, "render", "a"), 1)
        self.assertEqual(settings.read_persistent(int, "render", "b"), 2)


class TestRenderOptionsFromSettings(unittest.TestCase):
    def test_from_settings(self):
        settings = Settings()
        settings.read_string(
            "[render]\n"
            "force_color = #ff0000\n"
            "force_style = Stroke\n"
            "viewport_width = 200\n"
            "viewport_height = 0\n"
            "[parser]\n"
            "log_level = 3\n"
            "font_dirs = ['fonts', '~/fonts']\n"
        )
        options = RenderOptions.from_settings(settings)
        self.assertEqual(options.force_color, Color(255, 0, 0))
        self.assertEqual(options.force_style, PaintStyle.STROKE)
        self.assertEqual(options.viewport_width, 200)
        self.assertIsNone(options.viewport_height)
        self.assertEqual(options.log_level, LOG_INFO)
        self.assertEqual(options.font_dirs, ("fonts", "~/fonts"))

    def test_from_empty_settings(self):
        options = RenderOptions.from_settings(Settings())
        self.assertIsNone(options.force_color)
        self.assertIsNone(options.force_style)
        self.assertIsNone(options.viewport_width)
        self.assertEqual(options.log_level, LOG_WARN)
        self.assertEqual(options.font_dirs, ())
