import re
from math import cos, radians, sin, tan

from .numbers import parse_numbers

ERROR = 1e-12

SVG_TRANSFORM_MATRIX = "matrix"
SVG_TRANSFORM_TRANSLATE = "translate"
SVG_TRANSFORM_SCALE = "scale"
SVG_TRANSFORM_ROTATE = "rotate"
SVG_TRANSFORM_SKEW_X = "skewX"
SVG_TRANSFORM_SKEW_Y = "skewY"

REGEX_TRANSFORM_TEMPLATE = re.compile(
    r"(matrix|translate|scale|rotate|skewX|skewY)\s*\(([^)]*)\)"
)


class Matrix:
    """
    Affine matrix in SVG form:

    [a c e]
    [b d f]

    `m1 @ m2` applies m1 first and m2 second. `pre_*` operations act in the local frame
    of the matrix, `post_*` operations act on its output.
    """

    def __init__(self, *components):
        self.a = 1.0
        self.b = 0.0
        self.c = 0.0
        self.d = 1.0
        self.e = 0.0
        self.f = 0.0
        len_args = len(components)
        if len_args == 0:
            pass
        elif len_args == 1:
            m = components[0]
            self.a = m[0]
            self.b = m[1]
            self.c = m[2]
            self.d = m[3]
            self.e = m[4]
            self.f = m[5]
        else:
            self.a = components[0]
            self.b = components[1]
            self.c = components[2]
            self.d = components[3]
            self.e = components[4]
            self.f = components[5]

    def __ne__(self, other):
        return not self.__eq__(other)

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return False
        return all(
            abs(p - q) <= ERROR for p, q in zip(self, other)
        )

    def __len__(self):
        return 6

    def __iter__(self):
        yield self.a
        yield self.b
        yield self.c
        yield self.d
        yield self.e
        yield self.f

    def __getitem__(self, item):
        return (self.a, self.b, self.c, self.d, self.e, self.f)[item]

    def __invert__(self):
        m = self.__copy__()
        return m.inverse()

    def __matmul__(self, other):
        m = self.__copy__()
        m.__imatmul__(other)
        return m

    def __imatmul__(self, other):
        self.a, self.b, self.c, self.d, self.e, self.f = Matrix.matrix_multiply(
            self, other
        )
        return self

    def __repr__(self):
        return f"Matrix({self.a:g}, {self.b:g}, {self.c:g}, {self.d:g}, {self.e:g}, {self.f:g})"

    def __copy__(self):
        return Matrix(self.a, self.b, self.c, self.d, self.e, self.f)

    def inverse(self):
        """
        Invert in place. A singular matrix collapses to identity.
        """
        m00 = self.a
        m01 = self.c
        m02 = self.e
        m10 = self.b
        m11 = self.d
        m12 = self.f
        determinant = m00 * m11 - m01 * m10
        if determinant == 0:
            self.reset()
            return self
        inverse_determinant = 1.0 / determinant
        self.a = m11 * inverse_determinant
        self.c = -m01 * inverse_determinant
        self.b = -m10 * inverse_determinant
        self.d = m00 * inverse_determinant

        self.e = (m01 * m12 - m02 * m11) * inverse_determinant
        self.f = (m10 * m02 - m00 * m12) * inverse_determinant
        return self

    def reset(self):
        self.a = 1.0
        self.b = 0.0
        self.c = 0.0
        self.d = 1.0
        self.e = 0.0
        self.f = 0.0

    def is_identity(self):
        return (
            self.a == 1
            and self.b == 0
            and self.c == 0
            and self.d == 1
            and self.e == 0
            and self.f == 0
        )

    def post_cat(self, mx):
        self.__imatmul__(mx)

    def post_scale(self, sx=1.0, sy=None):
        self.post_cat(Matrix.scale(sx, sy))

    def post_translate(self, tx=0.0, ty=0.0):
        self.post_cat(Matrix.translate(tx, ty))

    def post_rotate(self, angle):
        self.post_cat(Matrix.rotate(angle))

    def pre_cat(self, mx):
        self.a, self.b, self.c, self.d, self.e, self.f = Matrix.matrix_multiply(
            mx, self
        )

    def pre_scale(self, sx=1.0, sy=None):
        self.pre_cat(Matrix.scale(sx, sy))

    def pre_translate(self, tx=0.0, ty=0.0):
        self.pre_cat(Matrix.translate(tx, ty))

    def pre_rotate(self, angle, x=0.0, y=0.0):
        if x == 0 and y == 0:
            self.pre_cat(Matrix.rotate(angle))
        else:
            self.pre_translate(x, y)
            self.pre_rotate(angle)
            self.pre_translate(-x, -y)

    def pre_skew_x(self, angle):
        self.pre_cat(Matrix.skew(angle, 0.0))

    def pre_skew_y(self, angle):
        self.pre_cat(Matrix.skew(0.0, angle))

    def point_in_matrix_space(self, x, y):
        return (
            x * self.a + y * self.c + 1 * self.e,
            x * self.b + y * self.d + 1 * self.f,
        )

    def map_rect(self, bounds):
        """
        Axis aligned bounds of the transformed rectangle.

        @param bounds: (left, top, right, bottom)
        @return: (left, top, right, bottom)
        """
        left, top, right, bottom = bounds
        corners = (
            self.point_in_matrix_space(left, top),
            self.point_in_matrix_space(right, top),
            self.point_in_matrix_space(right, bottom),
            self.point_in_matrix_space(left, bottom),
        )
        xs = [p[0] for p in corners]
        ys = [p[1] for p in corners]
        return min(xs), min(ys), max(xs), max(ys)

    def scale_factor(self):
        """
        Mean linear scale of the matrix, used to bring stroke widths into device space.
        """
        return abs(self.a * self.d - self.b * self.c) ** 0.5

    @classmethod
    def scale(cls, sx=1.0, sy=None):
        if sy is None:
            sy = sx
        return cls(sx, 0, 0, sy, 0, 0)

    @classmethod
    def translate(cls, tx=0.0, ty=0.0):
        return cls(1.0, 0.0, 0.0, 1.0, tx, ty)

    @classmethod
    def rotate(cls, angle=0.0):
        """
        @param angle: angle in radians
        """
        ct = cos(angle)
        st = sin(angle)
        return cls(ct, st, -st, ct, 0.0, 0.0)

    @classmethod
    def skew(cls, angle_a=0.0, angle_b=0.0):
        aa = tan(angle_a)
        bb = tan(angle_b)
        return cls(1.0, bb, aa, 1.0, 0.0, 0.0)

    @staticmethod
    def matrix_multiply(m, s):
        """
        [a c e]      [a c e]   [a b 0]
        [b d f]   %  [b d f] = [c d 0]
        [0 0 1]      [0 0 1]   [e f 1]

        :param m: matrix applied first
        :param s: matrix applied second
        :return: multiplied matrix components.
        """
        r0 = (
            s.a * m.a + s.c * m.b,
            s.a * m.c + s.c * m.d,
            s.a * m.e + s.c * m.f + s.e,
        )
        r1 = (
            s.b * m.a + s.d * m.b,
            s.b * m.c + s.d * m.d,
            s.b * m.e + s.d * m.f + s.f,
        )
        return r0[0], r1[0], r0[1], r1[1], r0[2], r1[2]


def parse_transform(transform_str):
    """
    Parse an SVG transform list, left to right, into a single matrix.

    Each function acts in the local frame established by the functions before it. A list
    without any recognised function gives None rather than an identity matrix.

    @param transform_str: value of a transform or gradientTransform attribute
    @return: Matrix or None
    """
    if not transform_str:
        return None
    matrix = None
    for name, arguments in REGEX_TRANSFORM_TEMPLATE.findall(transform_str):
        params = parse_numbers(arguments)
        if not params:
            continue
        if name == SVG_TRANSFORM_MATRIX:
            if len(params) != 6:
                continue
            local = Matrix(*params)
        elif name == SVG_TRANSFORM_TRANSLATE:
            local = Matrix.translate(params[0], params[1] if len(params) > 1 else 0.0)
        elif name == SVG_TRANSFORM_SCALE:
            local = Matrix.scale(params[0], params[1] if len(params) > 1 else None)
        elif name == SVG_TRANSFORM_ROTATE:
            local = Matrix()
            if len(params) > 2:
                local.pre_rotate(radians(params[0]), params[1], params[2])
            else:
                local.pre_rotate(radians(params[0]))
        elif name == SVG_TRANSFORM_SKEW_X:
            local = Matrix.skew(radians(params[0]), 0.0)
        else:
            local = Matrix.skew(0.0, radians(params[0]))
        if matrix is None:
            matrix = local
        else:
            matrix.pre_cat(local)
    return matrix
