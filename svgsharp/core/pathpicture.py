"""
Path pictures: every drawable of a document collected as an outline in device space,
redrawn with optionally forced color, style or paint.
"""

from copy import copy
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..tools.geomstr import Geomstr
from .canvas import RecordingCanvas
from .color import Color
from .context import LOG_WARN
from .elements import DrawType
from .exceptions import EmptyPictureError
from .listener import ElementListener
from .loader import Sharp
from .matrix import Matrix
from .paint import Paint, PaintStyle

PAINT_STYLES = {
    "fill": PaintStyle.FILL,
    "stroke": PaintStyle.STROKE,
}


@dataclass
class RenderOptions:
    force_color: Optional[Color] = None
    force_style: Optional[PaintStyle] = None
    force_paint: Optional[Paint] = None
    viewport_width: Optional[float] = None
    viewport_height: Optional[float] = None
    log_level: int = LOG_WARN
    font_dirs: Tuple[str, ...] = ()

    @classmethod
    def from_settings(cls, settings, section="render"):
        """
        Options stored in an ini file.

        [render]
        force_color = #ff0000
        force_style = stroke
        viewport_width = 200
        viewport_height = 100

        [parser]
        log_level = 3
        font_dirs = ["fonts"]
        """
        options = cls()
        color = settings.read_persistent(str, section, "force_color", None)
        if color:
            options.force_color = Color.parse(color)
        style = settings.read_persistent(str, section, "force_style", None)
        if style:
            options.force_style = PAINT_STYLES.get(style.strip().lower())
        width = settings.read_persistent(float, section, "viewport_width", 0.0)
        height = settings.read_persistent(float, section, "viewport_height", 0.0)
        options.viewport_width = width if width > 0 else None
        options.viewport_height = height if height > 0 else None
        options.log_level = settings.read_persistent(int, "parser", "log_level", LOG_WARN)
        options.font_dirs = tuple(settings.read_persistent(list, "parser", "font_dirs", []))
        return options

    def fit_scale(self, bounds):
        """
        Scale bringing bounds into the viewport, 1 when no viewport is set.
        """
        left, top, right, bottom = bounds
        scales = []
        if self.viewport_width and right - left > 0:
            scales.append(self.viewport_width / (right - left))
        if self.viewport_height and bottom - top > 0:
            scales.append(self.viewport_height / (bottom - top))
        if not scales:
            return 1.0
        return min(scales)


@dataclass
class StylePath:
    outline: Geomstr
    paint: Paint
    kind: DrawType = DrawType.PATH
    id: Optional[str] = None
    style: Optional[PaintStyle] = None

    @property
    def path_style(self):
        if self.style is not None:
            return self.style
        if self.paint is not None:
            return self.paint.style
        return PaintStyle.STROKE


@dataclass
class PathPicture:
    paths: List[StylePath] = field(default_factory=list)
    bounds: Optional[Tuple[float, float, float, float]] = None
    canvas: Optional[RecordingCanvas] = None

    def __len__(self):
        return len(self.paths)

    def __iter__(self):
        return iter(self.paths)


class PathCollector(ElementListener):
    """
    Intercepts every draw element and keeps its outline, mapped to device space.
    Text and images have no outline and are dropped.
    """

    def __init__(self, force_color=None):
        self.force_color = force_color
        self.paths = []
        self.bounds = None

    def on_intercept(self, canvas, draw_element):
        if draw_element.kind in (DrawType.TEXT, DrawType.IMAGE):
            return True
        outline = draw_element.as_outline()
        matrix = copy(draw_element.matrix) if draw_element.matrix is not None else Matrix()
        if draw_element.document_bounds is not None:
            left, top = draw_element.document_bounds[:2]
            matrix.post_translate(-left, -top)
        outline.transform(matrix)
        paint = draw_element.paint.snapshot()
        if self.force_color is not None:
            paint.color = Color(self.force_color)
        self.paths.append(StylePath(outline, paint, draw_element.kind, draw_element.id))
        self._grow(outline.bbox())
        return True

    def _grow(self, bbox):
        if bbox[0] != bbox[0]:
            # Empty outline.
            return
        if self.bounds is None:
            self.bounds = tuple(float(v) for v in bbox)
            return
        left, top, right, bottom = self.bounds
        self.bounds = (
            min(left, bbox[0]),
            min(top, bbox[1]),
            max(right, bbox[2]),
            max(bottom, bbox[3]),
        )


def load_path_picture(svg, options=None):
    """
    Collect the outlines of a document and redraw them with the forced options.

    @param svg: Sharp, SVG text or SVG bytes
    @param options: RenderOptions
    @return: PathPicture
    """
    if options is None:
        options = RenderOptions()
    if isinstance(svg, Sharp):
        sharp = svg
    elif isinstance(svg, (bytes, bytearray)):
        sharp = Sharp.load_bytes(bytes(svg))
    else:
        sharp = Sharp.load_string(svg)
    sharp.with_log_level(options.log_level).with_font_dirs(*options.font_dirs)
    collector = PathCollector(options.force_color)
    sharp.add_listener(collector)
    try:
        sharp.get_picture()
    finally:
        sharp.remove_listener(collector)

    bounds = collector.bounds
    if not collector.paths or bounds is None:
        raise EmptyPictureError("SVG has no drawable paths")
    left, top, right, bottom = bounds
    if (right - left) * (bottom - top) <= 0:
        raise EmptyPictureError(f"SVG path bounds have no area: {bounds}")

    canvas = RecordingCanvas()
    canvas.translate(-left, -top)
    # One device pixel once the picture is fitted to the viewport.
    stroke_width = 1.0 / options.fit_scale(bounds)
    for path in collector.paths:
        if options.force_paint is not None:
            canvas.draw_path(path.outline, options.force_paint)
            continue
        if options.force_style is not None:
            if options.force_style == PaintStyle.STROKE:
                path.paint.stroke_width = stroke_width
            path.paint.style = options.force_style
            path.style = options.force_style
        canvas.draw_path(path.outline, path.paint)
    return PathPicture(collector.paths, bounds, canvas)
