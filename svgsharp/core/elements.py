"""
Draw elements, the fully resolved output of the interpreter.

The geometry of a DrawElement is a tagged variant: the `kind` names which of the
geometry classes the element carries, and the pairing is checked on construction.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple

from ..tools.geomstr import Geomstr
from .matrix import Matrix
from .paint import Paint

Bounds = Tuple[float, float, float, float]


class DrawType(Enum):
    ROUND_RECT = "round_rect"
    LINE = "line"
    OVAL = "oval"
    PATH = "path"
    TEXT = "text"
    IMAGE = "image"


@dataclass(frozen=True)
class RoundRectGeometry:
    rect: Bounds
    rx: float = 0.0
    ry: float = 0.0

    def bounds(self):
        return self.rect

    def as_outline(self):
        left, top, right, bottom = self.rect
        return Geomstr.rect(left, top, right - left, bottom - top, self.rx, self.ry)


@dataclass(frozen=True)
class LineGeometry:
    x1: float
    y1: float
    x2: float
    y2: float

    def bounds(self):
        return (
            min(self.x1, self.x2),
            min(self.y1, self.y2),
            max(self.x1, self.x2),
            max(self.y1, self.y2),
        )

    def as_outline(self):
        return Geomstr.lines(complex(self.x1, self.y1), complex(self.x2, self.y2))


@dataclass(frozen=True)
class OvalGeometry:
    rect: Bounds

    def bounds(self):
        return self.rect

    def as_outline(self):
        left, top, right, bottom = self.rect
        rx = (right - left) / 2.0
        ry = (bottom - top) / 2.0
        return Geomstr.ellipse(rx, ry, left + rx, top + ry)


@dataclass(frozen=True)
class PathGeometry:
    outline: Geomstr
    data: Optional[str] = None

    def bounds(self):
        return self.outline.bbox()

    def as_outline(self):
        return Geomstr(self.outline)


@dataclass
class TextRun:
    """
    One run of text ready to draw: its characters and the drawing origin after alignment.
    Glyph positions are set when the text carries a per-character x list.
    """

    text: str
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0
    glyph_positions: List[Tuple[str, float, float]] = field(default_factory=list)


@dataclass(frozen=True)
class TextGeometry:
    run: TextRun

    def bounds(self):
        run = self.run
        return run.x, run.y - run.height, run.x + run.width, run.y

    def as_outline(self):
        return None


@dataclass(frozen=True)
class ImageGeometry:
    image: Any
    rect: Bounds

    def bounds(self):
        return self.rect

    def as_outline(self):
        left, top, right, bottom = self.rect
        return Geomstr.rect(left, top, right - left, bottom - top)


GEOMETRY_KINDS = {
    DrawType.ROUND_RECT: RoundRectGeometry,
    DrawType.LINE: LineGeometry,
    DrawType.OVAL: OvalGeometry,
    DrawType.PATH: PathGeometry,
    DrawType.TEXT: TextGeometry,
    DrawType.IMAGE: ImageGeometry,
}


def geometry_kind(geometry):
    """
    DrawType carried by a geometry, None when it is not a draw geometry.
    """
    for kind, geometry_type in GEOMETRY_KINDS.items():
        if isinstance(geometry, geometry_type):
            return kind
    return None


@dataclass(frozen=True)
class DrawElement:
    """
    One resolved drawable unit.

    group_path lists the enclosing group ids, outermost first. view_box, width and height
    are the attribute strings of the enclosing `<svg>`.
    """

    kind: DrawType
    geometry: Any
    paint: Optional[Paint] = None
    matrix: Optional[Matrix] = None
    group_path: Tuple[str, ...] = ()
    inside_defs: bool = False
    id: Optional[str] = None
    data_name: Optional[str] = None
    view_box: Optional[str] = None
    width: Optional[str] = None
    height: Optional[str] = None
    document_bounds: Optional[Bounds] = None

    def __post_init__(self):
        expected = GEOMETRY_KINDS[self.kind]
        if not isinstance(self.geometry, expected):
            raise TypeError(
                f"{self.kind.name} element needs {expected.__name__}, got {type(self.geometry).__name__}"
            )

    def bounds(self):
        return self.geometry.bounds()

    def as_outline(self):
        """
        The element's geometry as a path outline in its local coordinates, None for text.
        """
        return self.geometry.as_outline()

    @staticmethod
    def points_data(points, close):
        """
        Serialize a point list to path data.

        Points are written as absolute `M` then `L` commands, a final `Z` only when close
        is set.

        @param points: flat sequence x0, y0, x1, y1, ...
        @param close: the point list is a closed polygon
        @return: path data string
        """
        parts = []
        for i in range(0, len(points) - 1, 2):
            command = "M" if i == 0 else "L"
            parts.append(f"{command}{points[i]:.10g},{points[i + 1]:.10g}")
        if close and parts:
            parts.append("Z")
        return " ".join(parts)
