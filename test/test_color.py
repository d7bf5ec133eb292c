import unittest

from svgsharp.core.color import BLACK, Color


class TestColor(unittest.TestCase):
    def test_hex(self):
        self.assertEqual(Color.parse("#ff0000"), Color(255, 0, 0))
        self.assertEqual(Color.parse("#0F0"), Color(0, 255, 0))
        self.assertEqual(Color.parse(" #00f ").rgb, (0, 0, 255))

    def test_rgb_function(self):
        self.assertEqual(Color.parse("rgb(1, 2, 3)"), Color(1, 2, 3))
        self.assertEqual(Color.parse("rgb(100%,0%,50%)"), Color(255, 0, 128))
        self.assertIsNone(Color.parse("rgb(a,b,c)"))

    def test_named(self):
        self.assertEqual(Color.parse("red"), Color(255, 0, 0))
        self.assertEqual(Color.parse("CornflowerBlue"), Color(100, 149, 237))

    def test_unrecognised(self):
        self.assertIsNone(Color.parse(None))
        self.assertIsNone(Color.parse("#12"))
        self.assertIsNone(Color.parse("url(#g)"))

    def test_parsed_colors_are_opaque(self):
        self.assertEqual(Color.parse("#123456").alpha, 255)

    def test_channels(self):
        c = Color(10, 20, 30, 40)
        self.assertEqual((c.red, c.green, c.blue, c.alpha), (10, 20, 30, 40))
        self.assertEqual(int(c), 0x280A141E)

    def test_with_alpha(self):
        c = Color(255, 0, 0).with_alpha(128)
        self.assertEqual(c.alpha, 128)
        self.assertEqual(c.rgb, (255, 0, 0))

    def test_crimp(self):
        self.assertEqual(Color(300, -5, 12.6).rgb, (255, 0, 13))

    def test_hex_strings(self):
        self.assertEqual(Color(255, 0, 0).hex, "#ff0000")
        self.assertEqual(Color(255, 0, 0, 0).hex, "#00ff0000")
        self.assertEqual(str(BLACK), "#000000")

    def test_equality_and_hash(self):
        self.assertEqual(Color(1, 2, 3), Color(1, 2, 3))
        self.assertEqual(Color(1, 2, 3), 0xFF010203)
        self.assertEqual(len({Color(1, 2, 3), Color(1, 2, 3)}), 1)
        self.assertNotEqual(Color(1, 2, 3), "#010203")
