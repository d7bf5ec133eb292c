import unittest
from copy import copy

import numpy as np

from svgsharp.core.matrix import Matrix
from svgsharp.tools.geomstr import (
    TYPE_CLOSE,
    TYPE_CUBIC,
    TYPE_LINE,
    TYPE_MOVE,
    Geomstr,
)


class TestGeomstr(unittest.TestCase):
    def test_geomstr_empty(self):
        path = Geomstr()
        self.assertEqual(len(path), 0)
        self.assertFalse(path)
        self.assertIsNone(path.first_point)
        self.assertIsNone(path.last_point)
        self.assertFalse(path.is_closed())
        self.assertTrue(np.isnan(path.bbox()[0]))

    def test_geomstr_capacity_grows(self):
        path = Geomstr()
        path.move(None, 0j)
        for i in range(100):
            path.line(complex(i, 0), complex(i + 1, 0))
        self.assertEqual(len(path), 101)
        self.assertEqual(path.last_point, complex(100, 0))
        self.assertGreaterEqual(path.capacity, 101)

    def test_geomstr_copy_is_independent(self):
        path = Geomstr.lines(0j, complex(10, 0))
        other = copy(path)
        other.transform(Matrix.translate(5, 5))
        self.assertEqual(path.last_point, complex(10, 0))
        self.assertEqual(other.last_point, complex(15, 5))

    def test_geomstr_equality(self):
        a = Geomstr.lines(0j, complex(10, 0), close=True)
        b = Geomstr.lines(0j, complex(10, 0), close=True)
        self.assertEqual(a, b)
        self.assertNotEqual(a, Geomstr.lines(0j, complex(10, 0)))
        self.assertNotEqual(a, "path")

    def test_geomstr_close(self):
        path = Geomstr.lines(0j, complex(10, 0), complex(10, 10), close=True)
        self.assertTrue(path.is_closed())
        self.assertEqual(path.last_point, 0j)
        self.assertEqual(path.count(TYPE_CLOSE), 1)
        with self.assertRaises(ValueError):
            Geomstr().close()

    def test_geomstr_subpath_start_after_close(self):
        path = Geomstr.lines(complex(5, 5), complex(10, 5), close=True)
        path.line(complex(5, 5), complex(5, 10))
        self.assertEqual(path.subpath_start(), complex(5, 5))

    def test_geomstr_rect(self):
        path = Geomstr.rect(0, 0, 10, 20)
        self.assertEqual(path.count(TYPE_LINE), 3)
        self.assertTrue(path.is_closed())
        self.assertEqual(path.bbox(), (0, 0, 10, 20))

    def test_geomstr_round_rect(self):
        path = Geomstr.rect(0, 0, 10, 20, 2, 3)
        self.assertEqual(path.count(TYPE_CUBIC), 4)
        min_x, min_y, max_x, max_y = path.bbox()
        self.assertAlmostEqual(min_x, 0)
        self.assertAlmostEqual(min_y, 0)
        self.assertAlmostEqual(max_x, 10)
        self.assertAlmostEqual(max_y, 20)

    def test_geomstr_ellipse(self):
        path = Geomstr.ellipse(10, 5, 0, 0)
        self.assertEqual(path.count(TYPE_CUBIC), 4)
        min_x, min_y, max_x, max_y = path.bbox()
        self.assertAlmostEqual(min_x, -10)
        self.assertAlmostEqual(min_y, -5)
        self.assertAlmostEqual(max_x, 10)
        self.assertAlmostEqual(max_y, 5)
        for i in range(path.index):
            if path.segment_type(i) == "cubic":
                p = path.position(i, 0.5)
                self.assertAlmostEqual((p.real / 10) ** 2 + (p.imag / 5) ** 2, 1, delta=0.001)

    def test_geomstr_bbox_with_matrix(self):
        path = Geomstr.rect(0, 0, 10, 10)
        self.assertEqual(path.bbox(Matrix.scale(2)), (0, 0, 20, 20))
        self.assertEqual(path.bbox(), (0, 0, 10, 10))

    def test_geomstr_bbox_lone_move(self):
        path = Geomstr()
        path.move(None, complex(3, 4))
        self.assertEqual(path.bbox(), (3, 4, 3, 4))

    def test_geomstr_transform_controls(self):
        path = Geomstr()
        path.move(None, 0j)
        path.cubic(0j, complex(0, 10), complex(10, 10), complex(10, 0))
        path.transform(Matrix.translate(1, 2))
        segment = path.segments[1]
        self.assertEqual(segment[1], complex(1, 12))
        self.assertEqual(segment[3], complex(11, 12))
        self.assertEqual(segment[4], complex(11, 2))
        # The move keeps its destination in the end point.
        self.assertEqual(path.first_point, complex(1, 2))

    def test_geomstr_as_subpaths(self):
        path = Geomstr.lines(0j, complex(1, 0))
        path.polyline([complex(5, 5), complex(6, 5), complex(6, 6)], close=True)
        subpaths = list(path.as_subpaths())
        self.assertEqual(len(subpaths), 2)
        self.assertEqual(subpaths[0].count(TYPE_MOVE), 1)
        self.assertTrue(subpaths[1].is_closed())

    def test_geomstr_as_path_d(self):
        path = Geomstr.lines(0j, complex(10, 0), complex(10, 10), close=True)
        self.assertEqual(path.as_path_d(), "M0,0 L10,0 L10,10 Z")
        path = Geomstr()
        path.line(0j, complex(1.5, 0))
        self.assertEqual(path.as_path_d(), "M0,0 L1.5,0")

    def test_geomstr_as_points(self):
        path = Geomstr.lines(0j, complex(10, 0), complex(10, 10))
        self.assertEqual(list(path.as_points()), [0j, complex(10, 0), complex(10, 10)])

    def test_geomstr_almost_equal(self):
        a = Geomstr.lines(0j, complex(10, 0))
        b = Geomstr.lines(0j, complex(10, 1e-9))
        c = Geomstr.lines(0j, complex(10, 1))
        self.assertTrue(a.almost_equal(b))
        self.assertFalse(a.almost_equal(c))
        d = Geomstr.lines(complex(0, 1), complex(10, 0))
        self.assertFalse(a.almost_equal(d))

    def test_geomstr_append(self):
        a = Geomstr.lines(0j, complex(10, 0))
        b = Geomstr.lines(complex(20, 0), complex(30, 0))
        a.append(b)
        self.assertEqual(len(a), 4)
        self.assertEqual(a.count(TYPE_MOVE), 2)
        self.assertEqual(a.last_point, complex(30, 0))
