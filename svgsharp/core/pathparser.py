"""
SVG path data interpreter.

Path data is read with a NumberScanner and written into a Geomstr outline. Each command
letter is dispatched through a table, numbers that follow without a new letter repeat
the previous command (a move repeats as a line).
"""

from math import atan2, ceil, cos, degrees, fabs, radians, sin, sqrt, tan

from ..tools.geomstr import Geomstr
from .matrix import Matrix
from .numbers import PATH_COMMANDS, NumberScanner

CURVE_NONE = 0
CURVE_CUBIC = 1
CURVE_QUAD = 2


class PathCommandInterpreter:
    """
    State machine over one path data string.

    current is the current point, start the current sub-path start and last_control the
    last control point of the previous curve, used to reflect shorthand curves.
    """

    def __init__(self, context=None):
        self.context = context
        self.command_elements = {
            "M": self.move_to,
            "L": self.line_to,
            "H": self.h_to,
            "V": self.v_to,
            "C": self.cubic_to,
            "S": self.smooth_cubic_to,
            "Q": self.quad_to,
            "T": self.smooth_quad_to,
            "A": self.arc_to,
            "Z": self.close,
        }
        self.outline = None
        self.scanner = None
        self.command = None
        self.absolute = True
        self.current = 0j
        self.start = 0j
        self.last_control = 0j
        self.last_curve = CURVE_NONE

    def parse(self, pathdef, outline=None):
        """
        Interpret path data into an outline.

        @param pathdef: SVG path data
        @param outline: Geomstr to append to, a new one if None
        @return: outline
        """
        self.outline = outline if outline is not None else Geomstr()
        self.scanner = NumberScanner(pathdef or "")
        self.command = None
        self.current = 0j
        self.start = 0j
        self.last_control = 0j
        self.last_curve = CURVE_NONE
        scanner = self.scanner
        while True:
            scanner.skip_separators()
            if scanner.at_end():
                break
            c = scanner.peek()
            if c in PATH_COMMANDS:
                scanner.pos += 1
                self.command = c.upper()
                self.absolute = c.isupper()
            elif self.command is None or self.command == "Z":
                self._warn(f"Unexpected data in path at {scanner.pos}: {pathdef}")
                break
            if not self.command_elements[self.command]():
                self._warn(f"Truncated path data at {scanner.pos}: {pathdef}")
                break
        return self.outline

    def _warn(self, message):
        if self.context is not None:
            self.context.warning(message)

    def _point(self):
        x = self.scanner.next_float()
        if x is None:
            return None
        y = self.scanner.next_float()
        if y is None:
            return None
        p = complex(x, y)
        if not self.absolute:
            p += self.current
        return p

    def _points(self, n):
        points = []
        for _ in range(n):
            p = self._point()
            if p is None:
                return None
            points.append(p)
        return points

    def move_to(self):
        p = self._point()
        if p is None:
            return False
        self.outline.move(self.current if self.outline else None, p)
        self.current = p
        self.start = p
        self.last_control = p
        self.last_curve = CURVE_NONE
        # Implicit moveto commands are treated as lineto commands.
        self.command = "L"
        return True

    def line_to(self):
        p = self._point()
        if p is None:
            return False
        self._line(p)
        return True

    def _line(self, p):
        self.outline.line(self.current, p)
        self.current = p
        self.last_control = p
        self.last_curve = CURVE_NONE

    def h_to(self):
        x = self.scanner.next_float()
        if x is None:
            return False
        if not self.absolute:
            x += self.current.real
        self._line(complex(x, self.current.imag))
        return True

    def v_to(self):
        y = self.scanner.next_float()
        if y is None:
            return False
        if not self.absolute:
            y += self.current.imag
        self._line(complex(self.current.real, y))
        return True

    def cubic_to(self):
        points = self._points(3)
        if points is None:
            return False
        self._cubic(*points)
        return True

    def smooth_cubic_to(self):
        points = self._points(2)
        if points is None:
            return False
        if self.last_curve == CURVE_CUBIC:
            control1 = 2 * self.current - self.last_control
        else:
            control1 = self.current
        self._cubic(control1, *points)
        return True

    def _cubic(self, control1, control2, end):
        self.outline.cubic(self.current, control1, control2, end)
        self.current = end
        self.last_control = control2
        self.last_curve = CURVE_CUBIC

    def quad_to(self):
        points = self._points(2)
        if points is None:
            return False
        self._quad(*points)
        return True

    def smooth_quad_to(self):
        end = self._point()
        if end is None:
            return False
        if self.last_curve == CURVE_QUAD:
            control = 2 * self.current - self.last_control
        else:
            control = self.current
        self._quad(control, end)
        return True

    def _quad(self, control, end):
        self.outline.quad(self.current, control, end)
        self.current = end
        self.last_control = control
        self.last_curve = CURVE_QUAD

    def arc_to(self):
        scanner = self.scanner
        rx = scanner.next_float()
        ry = scanner.next_float()
        rotation = scanner.next_float()
        large_arc = scanner.next_flag()
        sweep = scanner.next_flag()
        end = self._point()
        if None in (rx, ry, rotation, large_arc, sweep, end):
            return False
        arc_to_bezier(
            self.outline, self.current, end, rx, ry, rotation, large_arc, sweep
        )
        self.current = end
        self.last_control = end
        self.last_curve = CURVE_NONE
        return True

    def close(self):
        if self.outline:
            self.current = self.outline.close()
        else:
            self.current = self.start
        self.start = self.current
        self.last_control = self.current
        self.last_curve = CURVE_NONE
        return True


def parse_path(pathdef, context=None):
    """
    Parse SVG path data into a new outline.
    """
    return PathCommandInterpreter(context).parse(pathdef)


def arc_to_bezier(outline, start, end, rx, ry, theta, large_arc, sweep):
    """
    Append an SVG elliptical arc as cubic segments.

    Endpoint to center conversion follows the W3C implementation notes. Radii too small to
    reach the endpoint are scaled up, with a 0.1% margin against rounding.

    @param outline: Geomstr receiving the curves
    @param start: (complex) current point
    @param end: (complex) arc endpoint
    @param rx: x radius
    @param ry: y radius
    @param theta: x-axis rotation in degrees
    @param large_arc: large arc flag
    @param sweep: sweep flag
    @return:
    """
    if rx == 0 or ry == 0:
        outline.line(start, end)
        return
    if start == end:
        return
    rx = fabs(rx)
    ry = fabs(ry)

    thrad = radians(theta)
    st = sin(thrad)
    ct = cos(thrad)

    xc = (start.real - end.real) / 2
    yc = (start.imag - end.imag) / 2
    x1t = ct * xc + st * yc
    y1t = -st * xc + ct * yc

    x1ts = x1t * x1t
    y1ts = y1t * y1t
    rxs = rx * rx
    rys = ry * ry

    lam = (x1ts / rxs + y1ts / rys) * 1.001
    if lam > 1:
        lamsr = sqrt(lam)
        rx *= lamsr
        ry *= lamsr
        rxs = rx * rx
        rys = ry * ry

    radicand = (rxs * rys - rxs * y1ts - rys * x1ts) / (rxs * y1ts + rys * x1ts)
    r = sqrt(max(radicand, 0.0))
    if bool(large_arc) == bool(sweep):
        r = -r
    cxt = r * rx * y1t / ry
    cyt = -r * ry * x1t / rx
    cx = ct * cxt - st * cyt + (start.real + end.real) / 2
    cy = st * cxt + ct * cyt + (start.imag + end.imag) / 2

    ux = (x1t - cxt) / rx
    uy = (y1t - cyt) / ry
    vx = (-x1t - cxt) / rx
    vy = (-y1t - cyt) / ry
    th1 = degrees(atan2(uy, ux))
    dth = (degrees(atan2(vy, vx)) - th1) % 360
    if not sweep and dth > 0:
        dth -= 360
    elif sweep and dth < 0:
        dth += 360

    if theta % 360 == 0:
        _ellipse_arc(outline, start, end, cx, cy, rx, ry, th1, dth, None)
    else:
        mx = Matrix.rotate(thrad)
        mx.post_translate(cx, cy)
        _ellipse_arc(outline, start, end, 0.0, 0.0, rx, ry, th1, dth, mx)


def _ellipse_arc(outline, start, end, cx, cy, rx, ry, start_angle, sweep_angle, mx):
    """
    Cubic approximation of an axis aligned elliptical arc, at most 90 degrees per curve.

    When mx is given the arc is built around the origin and mapped through mx. The first
    and last points are pinned to start and end.
    """
    count = max(int(ceil(fabs(sweep_angle) / 90.0 - 1e-9)), 1)
    step = radians(sweep_angle / count)
    alpha = 4.0 / 3.0 * tan(step / 4.0)
    angle = radians(start_angle)

    def point_at(a):
        return complex(cx + rx * cos(a), cy + ry * sin(a))

    def derivative_at(a):
        return complex(-rx * sin(a), ry * cos(a))

    def mapped(p):
        if mx is None:
            return p
        return complex(*mx.point_in_matrix_space(p.real, p.imag))

    current = start
    for i in range(count):
        a0 = angle + step * i
        a1 = a0 + step
        p0 = point_at(a0)
        p1 = point_at(a1)
        c0 = p0 + alpha * derivative_at(a0)
        c1 = p1 - alpha * derivative_at(a1)
        p_end = end if i == count - 1 else mapped(p1)
        outline.cubic(current, mapped(c0), mapped(c1), p_end)
        current = p_end
