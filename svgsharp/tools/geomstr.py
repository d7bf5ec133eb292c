"""
Geomstr objects store aligned arrays of path primitives. These primitives are line,
quad and cubic. There are two structural elements, move and close.

All the primitives are stored in an array with a width of 5 complex numbers. Index 0
and index 4 are the start and end points of the segment. The quad stores its control
point in index 1 and 3, the cubic stores its first and second control points in 1 and 3.
Index 2 stores the segment type in its real component.

A move segment starts a new sub-path at index 4, the position it moved from is kept in
index 0. A close segment is the straight line from the current point back to the start
of its sub-path, so the sub-path it closes can always be recovered.
"""

import math
from copy import copy

import numpy as np

# Note lower nibble is which indexes are positions (except info index)
TYPE_NOP = 0x00 | 0b0000
TYPE_LINE = 0x20 | 0b1001
TYPE_QUAD = 0x30 | 0b1111
TYPE_CUBIC = 0x40 | 0b1111
TYPE_MOVE = 0x60 | 0b0000
TYPE_CLOSE = 0xC0 | 0b1001

# Circle approximation constant for a quarter arc.
KAPPA = 4.0 * (math.sqrt(2) - 1) / 3.0


def _fmt(v):
    """
    Shortest float text that round-trips.
    """
    if v == int(v):
        return str(int(v))
    return repr(float(v))


class Geomstr:
    """
    Geometry String Class
    """

    def __init__(self, segments=None):
        if segments is not None:
            if isinstance(segments, Geomstr):
                self.index = segments.index
                segments = segments.segments
            else:
                # Given raw segments, index is equal to count
                self.index = len(segments)
            self.segments = copy(segments)
            self.capacity = len(segments)
        else:
            self.index = 0
            self.capacity = 12
            self.segments = np.zeros((self.capacity, 5), dtype="complex")

    def __str__(self):
        return f"Geomstr({self.index} segments)"

    def __repr__(self):
        return f"Geomstr({repr(self.segments[:self.index])})"

    def __eq__(self, other):
        if not isinstance(other, Geomstr):
            return False
        if other.index != self.index:
            return False
        m = self.segments[: self.index] == other.segments[: other.index]
        return m.all()

    def __copy__(self):
        """
        Create a geomstr copy.

        @return: Copy of geomstr.
        """
        geomstr = Geomstr()
        geomstr.index = self.index
        geomstr.capacity = self.capacity
        geomstr.segments = np.copy(self.segments)
        return geomstr

    def __len__(self):
        """
        @return: length of the geomstr (note not the capacity).
        """
        return self.index

    def __bool__(self):
        return bool(self.index != 0)

    @staticmethod
    def _segtype(info):
        # Index 2 of a segment does contain the segment-type in the lower byte of the number
        return int(info[2].real) & 0xFF

    def _ensure_capacity(self, capacity):
        if self.capacity > capacity:
            return
        self.capacity = max(self.capacity << 1, capacity)
        new_segments = np.zeros((self.capacity, 5), dtype="complex")
        new_segments[0 : self.index] = self.segments[0 : self.index]
        self.segments = new_segments

    def clear(self):
        self.index = 0

    def append_segment(self, start, control, info, control2, end):
        self._ensure_capacity(self.index + 1)
        self.segments[self.index] = (start, control, info, control2, end)
        self.index += 1

    def append(self, other):
        self._ensure_capacity(self.index + other.index + 1)
        self.segments[self.index : self.index + other.index] = other.segments[
            : other.index
        ]
        self.index += other.index

    #######################
    # Geometric Primitives
    #######################

    def move(self, start, end):
        """
        Start a new sub-path at end.

        @param start: (complex) position moved away from, may be None
        @param end: (complex) start of the new sub-path
        @return:
        """
        if start is None:
            start = end
        self.append_segment(start, 0, complex(TYPE_MOVE, 0), 0, end)

    def line(self, start, end):
        """
        Add a line between start and end points.

        @param start: complex: start point
        @param end: complex: end point
        @return:
        """
        self.append_segment(start, 0, complex(TYPE_LINE, 0), 0, end)

    def quad(self, start, control, end):
        """
        Add a quadratic bezier curve.
        @param start: (complex) start point
        @param control: (complex) control point
        @param end: (complex) end point
        @return:
        """
        self.append_segment(start, control, complex(TYPE_QUAD, 0), control, end)

    def cubic(self, start, control0, control1, end):
        """
        Add in a cubic Bezier curve
        @param start: (complex) start point
        @param control0: (complex) first control point
        @param control1: (complex) second control point
        @param end: (complex) end point
        @return:
        """
        self.append_segment(start, control0, complex(TYPE_CUBIC, 0), control1, end)

    def close(self):
        """
        Close the current sub-path. The close segment runs from the current point back to
        the start of the sub-path.

        @return: start point of the closed sub-path
        """
        if self.index == 0:
            raise ValueError("Empty path cannot close")
        start = self.subpath_start()
        end = self.segments[self.index - 1][4]
        self.append_segment(end, 0, complex(TYPE_CLOSE, 0), 0, start)
        return start

    def subpath_start(self):
        """
        Start point of the current sub-path.
        """
        for i in range(self.index - 1, -1, -1):
            segment = self.segments[i]
            segtype = self._segtype(segment)
            if segtype == TYPE_MOVE:
                return segment[4]
            if segtype == TYPE_CLOSE:
                # A sub-path continued after a close begins at the closed point.
                return segment[4]
        if self.index:
            return self.segments[0][0]
        return None

    def polyline(self, points, close=False):
        """
        Add a polyline sub-path through the given points.

        @param points: sequence of complex points
        @param close: close the sub-path back to its first point
        @return:
        """
        if not points:
            return
        last = self.last_point
        self.move(last, points[0])
        for i in range(1, len(points)):
            self.line(points[i - 1], points[i])
        if close:
            self.close()

    @classmethod
    def lines(cls, *points, close=False):
        path = cls()
        path.polyline(list(points), close=close)
        return path

    @classmethod
    def rect(cls, x, y, width, height, rx=0.0, ry=0.0):
        """
        Rectangle outline, with elliptical corners when rx and ry are given.
        """
        path = cls()
        if rx <= 0 or ry <= 0:
            path.polyline(
                [
                    complex(x, y),
                    complex(x + width, y),
                    complex(x + width, y + height),
                    complex(x, y + height),
                ],
                close=True,
            )
            return path
        kx = rx * KAPPA
        ky = ry * KAPPA
        x1 = x + width
        y1 = y + height
        path.move(None, complex(x + rx, y))
        path.line(complex(x + rx, y), complex(x1 - rx, y))
        path.cubic(
            complex(x1 - rx, y),
            complex(x1 - rx + kx, y),
            complex(x1, y + ry - ky),
            complex(x1, y + ry),
        )
        path.line(complex(x1, y + ry), complex(x1, y1 - ry))
        path.cubic(
            complex(x1, y1 - ry),
            complex(x1, y1 - ry + ky),
            complex(x1 - rx + kx, y1),
            complex(x1 - rx, y1),
        )
        path.line(complex(x1 - rx, y1), complex(x + rx, y1))
        path.cubic(
            complex(x + rx, y1),
            complex(x + rx - kx, y1),
            complex(x, y1 - ry + ky),
            complex(x, y1 - ry),
        )
        path.line(complex(x, y1 - ry), complex(x, y + ry))
        path.cubic(
            complex(x, y + ry),
            complex(x, y + ry - ky),
            complex(x + rx - kx, y),
            complex(x + rx, y),
        )
        path.close()
        return path

    @classmethod
    def ellipse(cls, rx, ry, cx, cy):
        """
        Closed ellipse outline made of four cubic quarters, clockwise from the rightmost point.
        """
        path = cls()
        kx = rx * KAPPA
        ky = ry * KAPPA
        right = complex(cx + rx, cy)
        bottom = complex(cx, cy + ry)
        left = complex(cx - rx, cy)
        top = complex(cx, cy - ry)
        path.move(None, right)
        path.cubic(right, right + complex(0, ky), bottom + complex(kx, 0), bottom)
        path.cubic(bottom, bottom - complex(kx, 0), left + complex(0, ky), left)
        path.cubic(left, left - complex(0, ky), top - complex(kx, 0), top)
        path.cubic(top, top + complex(kx, 0), right - complex(0, ky), right)
        path.close()
        return path

    #######################
    # Query
    #######################

    def segment_type(self, e=None, line=None):
        if line is None:
            line = self.segments[e]
        infor = self._segtype(line)
        if infor == TYPE_LINE:
            return "line"
        if infor == TYPE_QUAD:
            return "quad"
        if infor == TYPE_CUBIC:
            return "cubic"
        if infor == TYPE_MOVE:
            return "move"
        if infor == TYPE_CLOSE:
            return "close"
        if infor == TYPE_NOP:
            return "nop"

    def count(self, segtype):
        """
        Number of segments of the given type.
        """
        types = np.real(self.segments[: self.index, 2]).astype(int)
        return int(np.count_nonzero(types == segtype))

    @property
    def first_point(self):
        """
        First point within the path if said point exists
        @return:
        """
        for i in range(self.index):
            segment = self.segments[i]
            if self._segtype(segment) == TYPE_MOVE:
                return segment[4]
            if int(segment[2].real) & 0b1000:
                return segment[0]
        return None

    @property
    def last_point(self):
        """
        Last point within the path if said point exists

        @return:
        """
        if self.index == 0:
            return None
        return self.segments[self.index - 1][4]

    def is_closed(self):
        if self.index == 0:
            return False
        return self._segtype(self.segments[self.index - 1]) == TYPE_CLOSE

    def bbox(self, mx=None):
        """
        Get the bounds of the path. Moves contribute their position so a lone move still
        has a location.

        @param mx: optional matrix applied before measuring
        @return: (min_x, min_y, max_x, max_y), nan values for an empty path
        """
        if mx is not None:
            g = copy(self)
            g.transform(mx)
            return g.bbox()
        min_x = min_y = math.inf
        max_x = max_y = -math.inf
        for i in range(self.index):
            x0, y0, x1, y1 = self._bbox_segment(self.segments[i])
            min_x = min(min_x, x0)
            min_y = min(min_y, y0)
            max_x = max(max_x, x1)
            max_y = max(max_y, y1)
        if min_x == math.inf:
            return np.nan, np.nan, np.nan, np.nan
        return min_x, min_y, max_x, max_y

    def _bbox_segment(self, line):
        segtype = self._segtype(line)
        if segtype in (TYPE_LINE, TYPE_CLOSE):
            return (
                min(line[0].real, line[-1].real),
                min(line[0].imag, line[-1].imag),
                max(line[0].real, line[-1].real),
                max(line[0].imag, line[-1].imag),
            )
        elif segtype == TYPE_MOVE:
            return line[4].real, line[4].imag, line[4].real, line[4].imag
        elif segtype == TYPE_QUAD:
            local_extremizers = list(self._quad_local_extremes(0, line))
            local_extrema = self._quad_position(line, local_extremizers).real
            xmin = min(local_extrema)
            xmax = max(local_extrema)

            local_extremizers = list(self._quad_local_extremes(1, line))
            local_extrema = self._quad_position(line, local_extremizers).imag
            ymin = min(local_extrema)
            ymax = max(local_extrema)
            return xmin, ymin, xmax, ymax
        elif segtype == TYPE_CUBIC:
            local_extremizers = list(self._cubic_local_extremes(0, line))
            local_extrema = self._cubic_position(line, local_extremizers).real
            xmin = min(local_extrema)
            xmax = max(local_extrema)

            local_extremizers = list(self._cubic_local_extremes(1, line))
            local_extrema = self._cubic_position(line, local_extremizers).imag
            ymin = min(local_extrema)
            ymax = max(local_extrema)
            return xmin, ymin, xmax, ymax
        return math.inf, math.inf, -math.inf, -math.inf

    def position(self, e, t):
        """
        Get the position t [0-1] within the segment at index e.
        """
        line = self.segments[e]
        segtype = self._segtype(line)
        if segtype == TYPE_QUAD:
            return complex(self._quad_position(line, [t])[0])
        if segtype == TYPE_CUBIC:
            return complex(self._cubic_position(line, [t])[0])
        return line[0] + (line[4] - line[0]) * t

    def _quad_position(self, line, positions):
        x0, y0 = line[0].real, line[0].imag
        x1, y1 = line[1].real, line[1].imag
        # line[3] is identical to line[1]
        x2, y2 = line[4].real, line[4].imag

        def _compute_point(position):
            n_pos = 1 - position
            pos_2 = position * position
            n_pos_2 = n_pos * n_pos
            n_pos_pos = n_pos * position

            return (n_pos_2 * x0 + 2 * n_pos_pos * x1 + pos_2 * x2) + (
                n_pos_2 * y0 + 2 * n_pos_pos * y1 + pos_2 * y2
            ) * 1j

        return _compute_point(np.array(positions))

    def _quad_local_extremes(self, v, e):
        yield 0
        yield 1
        if v == 0:
            a = e[0].real, e[1].real, e[4].real
        else:
            a = e[0].imag, e[1].imag, e[4].imag

        n = a[0] - a[1]
        d = a[0] - 2 * a[1] + a[2]
        if d != 0:
            t = n / float(d)
            if 0 < t < 1:
                yield t
        else:
            yield 0.5

    def _cubic_position(self, line, positions):
        x0, y0 = line[0].real, line[0].imag
        x1, y1 = line[1].real, line[1].imag
        x2, y2 = line[3].real, line[3].imag
        x3, y3 = line[4].real, line[4].imag

        def _compute_point(position):
            pos_3 = position * position * position
            n_pos = 1 - position
            n_pos_3 = n_pos * n_pos * n_pos
            pos_2_n_pos = position * position * n_pos
            n_pos_2_pos = n_pos * n_pos * position
            return (
                n_pos_3 * x0 + 3 * (n_pos_2_pos * x1 + pos_2_n_pos * x2) + pos_3 * x3
            ) + (
                n_pos_3 * y0 + 3 * (n_pos_2_pos * y1 + pos_2_n_pos * y2) + pos_3 * y3
            ) * 1j

        return _compute_point(np.array(positions))

    def _cubic_local_extremes(self, v, e):
        """
        returns the extreme t values for a cubic Bezier curve, with a non-zero denom
        """
        yield 0
        yield 1
        if v == 0:
            a = e[0].real, e[1].real, e[3].real, e[4].real
        else:
            a = e[0].imag, e[1].imag, e[3].imag, e[4].imag

        denom = a[0] - 3 * a[1] + 3 * a[2] - a[3]
        if abs(denom) >= 1e-12:
            delta = (
                a[1] * a[1] - (a[0] + a[1]) * a[2] + a[2] * a[2] + (a[0] - a[1]) * a[3]
            )
            if delta >= 0:  # otherwise no local extrema
                sqdelta = math.sqrt(delta)
                tau = a[0] - 2 * a[1] + a[2]
                r1 = (tau + sqdelta) / denom
                r2 = (tau - sqdelta) / denom
                if 0 < r1 < 1:
                    yield r1
                if 0 < r2 < 1:
                    yield r2
        else:
            # Quadratic degenerate: the derivative is linear.
            d = a[0] - 2 * a[1] + a[2]
            if d != 0:
                t = (a[0] - a[1]) / d
                if 0 < t < 1:
                    yield t

    #######################
    # Transform
    #######################

    def transform(self, mx):
        """
        Affine Transformation by an arbitrary matrix.
        @param mx: Matrix to transform by
        @return:
        """
        segments = self.segments
        index = self.index
        for col in (0, 4):
            pts = segments[:index, col]
            reals = pts.real * mx.a + pts.imag * mx.c + 1 * mx.e
            imags = pts.real * mx.b + pts.imag * mx.d + 1 * mx.f
            segments[:index, col] = reals + 1j * imags

        infos = segments[:index, 2]
        q = np.where(np.real(infos).astype(int) & 0b0110)[0]
        for col in (1, 3):
            pts = segments[q, col]
            reals = pts.real * mx.a + pts.imag * mx.c + 1 * mx.e
            imags = pts.real * mx.b + pts.imag * mx.d + 1 * mx.f
            segments[q, col] = reals + 1j * imags

    #######################
    # Conversion
    #######################

    def as_subpaths(self):
        """
        Generate individual sub-paths, each starting at a move.

        @return:
        """
        types = np.real(self.segments[: self.index, 2]).astype(int)
        q = np.where(types == TYPE_MOVE)[0]
        last = 0
        for m in q:
            if m != last:
                yield Geomstr(self.segments[last:m])
            last = m
        if last != self.index:
            yield Geomstr(self.segments[last : self.index])

    def as_path_d(self):
        """
        Serialize to SVG path data using absolute commands.

        Moves write `M`, a close writes `Z`. Segments that do not start where the previous
        one ended get an explicit move so the outline parses back to the same geometry.
        """
        parts = []
        current = None
        for i in range(self.index):
            s, c0, info, c1, e = self.segments[i]
            segtype = self._segtype(self.segments[i])
            if segtype == TYPE_MOVE:
                parts.append(f"M{_fmt(e.real)},{_fmt(e.imag)}")
                current = e
                continue
            if segtype == TYPE_CLOSE:
                parts.append("Z")
                current = e
                continue
            if segtype == TYPE_NOP:
                continue
            if current is None or current != s:
                parts.append(f"M{_fmt(s.real)},{_fmt(s.imag)}")
            if segtype == TYPE_LINE:
                parts.append(f"L{_fmt(e.real)},{_fmt(e.imag)}")
            elif segtype == TYPE_QUAD:
                parts.append(
                    f"Q{_fmt(c0.real)},{_fmt(c0.imag)} {_fmt(e.real)},{_fmt(e.imag)}"
                )
            elif segtype == TYPE_CUBIC:
                parts.append(
                    f"C{_fmt(c0.real)},{_fmt(c0.imag)} {_fmt(c1.real)},{_fmt(c1.imag)} "
                    f"{_fmt(e.real)},{_fmt(e.imag)}"
                )
            current = e
        return " ".join(parts)

    def as_points(self):
        """
        Yield every on-curve point in segment order.
        """
        for i in range(self.index):
            segment = self.segments[i]
            if self._segtype(segment) != TYPE_NOP:
                yield segment[4]

    def almost_equal(self, other, tolerance=1e-6):
        """
        Same segment types with positions equal up to tolerance.
        """
        if not isinstance(other, Geomstr) or other.index != self.index:
            return False
        a = self.segments[: self.index]
        b = other.segments[: other.index]
        if not np.array_equal(np.real(a[:, 2]).astype(int), np.real(b[:, 2]).astype(int)):
            return False
        infos = np.real(a[:, 2]).astype(int)
        for col, mask in ((0, 0b1000), (1, 0b0100), (3, 0b0010), (4, 0b0001)):
            q = np.where(infos & mask)[0]
            if np.any(np.abs(a[q, col] - b[q, col]) > tolerance):
                return False
        # Move destinations are not flagged as positions.
        q = np.where(infos == TYPE_MOVE)[0]
        return not np.any(np.abs(a[q, 4] - b[q, 4]) > tolerance)
