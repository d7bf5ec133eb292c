import unittest

from svgsharp.core.context import ParseContext
from svgsharp.core.exceptions import InconsistentUnitsError, SvgParseError
from svgsharp.core.units import PX_PER_MM, parse_length


class TestParseLength(unittest.TestCase):
    def test_plain(self):
        self.assertEqual(parse_length("12"), 12)
        self.assertEqual(parse_length(" -1.5e1 "), -15)

    def test_default(self):
        self.assertIsNone(parse_length(None))
        self.assertEqual(parse_length(None, 7), 7)
        self.assertEqual(parse_length("wide", 3), 3)

    def test_px(self):
        self.assertEqual(parse_length("10px"), 10)

    def test_pt_offset(self):
        self.assertEqual(parse_length("10pt"), 10.5)

    def test_mm(self):
        self.assertAlmostEqual(parse_length("25.4mm"), 96)
        self.assertAlmostEqual(parse_length("1mm"), PX_PER_MM)

    def test_percent(self):
        self.assertEqual(parse_length("50%"), 0.5)

    def test_unknown_unit_is_user_units(self):
        self.assertEqual(parse_length("4em"), 4)

    def test_unit_guard(self):
        context = ParseContext()
        parse_length("10px", context=context)
        parse_length("5%", context=context)
        parse_length("3", context=context)
        self.assertEqual(context.assumed_unit, "px")
        with self.assertRaises(InconsistentUnitsError) as cm:
            parse_length("3mm", context=context)
        self.assertEqual(cm.exception.first, "px")
        self.assertEqual(cm.exception.second, "mm")
        self.assertIsInstance(cm.exception, SvgParseError)

    def test_unit_guard_per_context(self):
        parse_length("1pt", context=ParseContext())
        self.assertAlmostEqual(parse_length("1mm", context=ParseContext()), PX_PER_MM)
