"""
Streaming SVG document interpreter.

Consumes `(event, name, value)` tuples from an event source and turns every drawable
element into fully resolved DrawElements. The interpreter owns the inheritance stacks:
composed matrix, fill and stroke paints with their set flags, groups and text frames.

Every start event opens an ElementFrame. State pushed for an element is entered into the
frame's ExitStack, and the frame is closed by the matching end event, so stacks stay
paired even when a parse aborts part way.
"""

import math
import re
from base64 import b64decode
from contextlib import ExitStack, contextmanager
from copy import copy
from dataclasses import dataclass
from io import BytesIO
from typing import Optional
from xml.etree.ElementTree import ParseError

from PIL import Image, UnidentifiedImageError

from ..tools.geomstr import Geomstr
from .canvas import RecordingCanvas, draw_element
from .color import BLACK, Color
from .context import ParseContext
from .elements import (
    DrawElement,
    DrawType,
    ImageGeometry,
    LineGeometry,
    OvalGeometry,
    PathGeometry,
    RoundRectGeometry,
    TextGeometry,
    geometry_kind,
)
from .events import EVENT_END, EVENT_START, EVENT_TEXT
from .exceptions import SvgParseError
from .gradients import Gradient, GradientRegistry
from .listener import ElementListener
from .matrix import Matrix, parse_transform
from .numbers import parse_numbers
from .paint import LINECAP_VALUES, LINEJOIN_VALUES, Paint, PaintStyle
from .pathparser import PathCommandInterpreter
from .style import Properties, StyleSheet
from .text import SvgText, TextMeasurer, apply_text_style
from .units import parse_length

REGEX_URL = re.compile(r"^url\(\s*#([^)\s]+)\s*\)")
REGEX_VIEWBOX_SEPARATOR = re.compile(r"[\s,]+")

DEFAULT_DOCUMENT_SIZE = 100.0
BOUNDS_GROUP_ID = "bounds"

# Skipped together with their descendants.
IGNORED_ELEMENTS = ("metadata", "title", "desc", "namedview")

TRANSPARENT = Color(0, 0, 0, 0)


@dataclass
class SvgGroup:
    id: Optional[str] = None


class ElementFrame:
    """
    One open element. scope holds the pushed state, on_end the actions run when the
    element ends normally.
    """

    def __init__(self, name):
        self.name = name
        self.scope = ExitStack()
        self.on_end = []

    def end(self):
        try:
            for action in reversed(self.on_end):
                action()
        finally:
            self.scope.close()


class DocumentInterpreter:
    def __init__(self, canvas=None, listener=None, context=None, measurer=None):
        self.canvas = canvas if canvas is not None else RecordingCanvas()
        self.listener = listener if listener is not None else ElementListener()
        self.context = context if context is not None else ParseContext()
        self.measurer = (
            measurer if measurer is not None else TextMeasurer(context=self.context)
        )
        self.path_interpreter = PathCommandInterpreter(self.context)
        self.style_sheet = StyleSheet()
        self.gradients = GradientRegistry(self.context)
        self.gradient = None
        self.defs = {}
        self.elements = []

        self.bounds = None
        self._limits = [math.inf, math.inf, -math.inf, -math.inf]
        self.view_box = None
        self.width = None
        self.height = None

        self.matrix_stack = [Matrix()]
        self.fill_paint = Paint.fill()
        self.stroke_paint = Paint.stroke()
        self.stroke_paint.color = TRANSPARENT
        self.fill_set = False
        self.stroke_set = False
        self.group_stack = []
        self.text_stack = []
        self.frames = []

        self.hidden_level = 0
        self.ignore_depth = 0
        self.bounds_mode = False
        self.reading_defs = False
        self.reading_style = False
        self.style_text = []

        self.start_handlers = {
            "svg": self.start_svg,
            "defs": self.start_defs,
            "style": self.start_style,
            "linearGradient": self.start_linear_gradient,
            "radialGradient": self.start_radial_gradient,
            "stop": self.start_stop,
            "g": self.start_group,
            "rect": self.start_rect,
            "line": self.start_line,
            "circle": self.start_circle,
            "ellipse": self.start_ellipse,
            "polygon": self.start_polygon,
            "polyline": self.start_polyline,
            "path": self.start_path,
            "image": self.start_image,
            "text": self.start_text,
            "tspan": self.start_tspan,
            "clipPath": self.start_clip_path,
        }
        # Processed even while hidden.
        self.structural = ("svg", "defs", "style", "linearGradient", "radialGradient", "stop", "g")

    @property
    def hidden(self):
        return self.hidden_level > 0

    @property
    def limits(self):
        """
        Tight bounds of everything drawn, stroke included. None when nothing was drawn.
        """
        if self._limits[0] == math.inf:
            return None
        return tuple(self._limits)

    #######################
    # Event loop
    #######################

    def interpret(self, events):
        """
        Consume an event source to its end.

        @param events: iterable of (event, name, value) tuples
        @return: list of emitted DrawElements
        """
        try:
            for event, name, value in events:
                if event == EVENT_START:
                    self.start_element(name, value)
                elif event == EVENT_TEXT:
                    self.characters(value)
                elif event == EVENT_END:
                    self.end_element(name)
            self.gradients.finish()
        except ParseError as e:
            self.context.error(f"Failed parsing SVG: {e}")
            raise SvgParseError(f"Failed parsing SVG: {e}") from e
        except (OSError, EOFError) as e:
            self.context.error(f"Failed reading SVG: {e}")
            raise SvgParseError(f"Failed reading SVG: {e}") from e
        finally:
            self._unwind()
            self.context.close()
        return self.elements

    def _unwind(self):
        while self.frames:
            self.frames.pop().scope.close()

    def start_element(self, name, attributes):
        if self.ignore_depth:
            self.ignore_depth += 1
            return
        if name in IGNORED_ELEMENTS:
            self.ignore_depth = 1
            return
        frame = ElementFrame(name)
        self.frames.append(frame)
        if self.bounds_mode:
            if name == "rect":
                self._read_bounds_rect(attributes)
            return
        if name == "use" and not self.hidden:
            name = "path"
        handler = self.start_handlers.get(name)
        if handler is None:
            if not self.hidden:
                self.context.warning(f"Unrecognized SVG command: {name}")
            return
        if self.hidden and name not in self.structural:
            return
        handler(attributes, frame)

    def characters(self, text):
        if self.ignore_depth:
            return
        if self.text_stack:
            self.text_stack[-1].append(text, self.context)
        if self.reading_style:
            self.style_text.append(text)

    def end_element(self, name):
        if self.ignore_depth:
            self.ignore_depth -= 1
            return
        if not self.frames:
            return
        self.frames.pop().end()

    #######################
    # Scopes
    #######################

    @contextmanager
    def transform_scope(self, attributes):
        """
        Concatenates the element's transform onto the canvas and the matrix stack.
        """
        transform = attributes.get("transform")
        if transform is None:
            yield
            return
        self.canvas.save()
        matrix = parse_transform(transform)
        if matrix is not None:
            self.canvas.concat(matrix)
            self.matrix_stack.append(matrix @ self.matrix_stack[-1])
        try:
            yield
        finally:
            if matrix is not None:
                self.matrix_stack.pop()
            self.canvas.restore()

    @contextmanager
    def group_scope(self, group):
        """
        Saves the fill and stroke state, restored when the group ends.
        """
        saved = (self.fill_paint, self.stroke_paint, self.fill_set, self.stroke_set)
        self.fill_paint = self.fill_paint.snapshot()
        self.stroke_paint = self.stroke_paint.snapshot()
        self.group_stack.append(group)
        try:
            yield group
        finally:
            self.group_stack.pop()
            self.fill_paint, self.stroke_paint, self.fill_set, self.stroke_set = saved

    @contextmanager
    def layer_scope(self, opacity):
        if opacity is not None and opacity < 1.0:
            self.canvas.save_layer_alpha(self._layer_bounds(), int(255 * max(opacity, 0.0)))
        else:
            self.canvas.save()
        try:
            yield
        finally:
            self.canvas.restore()

    @contextmanager
    def hidden_scope(self):
        self.hidden_level += 1
        try:
            yield
        finally:
            self.hidden_level -= 1

    @contextmanager
    def text_scope(self, text):
        self.text_stack.append(text)
        try:
            yield text
        finally:
            self.text_stack.pop()

    def _device_matrix(self):
        matrix = copy(self.matrix_stack[-1])
        if self.bounds is not None:
            matrix.post_translate(-self.bounds[0], -self.bounds[1])
        return matrix

    def _layer_bounds(self):
        if self.bounds is None:
            return None
        left, top, right, bottom = self.bounds
        return (~self._device_matrix()).map_rect((0.0, 0.0, right - left, bottom - top))

    #######################
    # Paint resolution
    #######################

    def properties(self, attributes):
        return Properties(attributes, self.style_sheet)

    def resolve_fill(self, props, bounds, base=None):
        """
        Fill paint for an element.

        @param props: cascaded properties of the element
        @param bounds: element bounds for bounding box gradients, may be None
        @param base: paint to start from, the current fill if None
        @return: (visible, paint)
        """
        paint = (base if base is not None else self.fill_paint).snapshot()
        paint.style = PaintStyle.FILL
        if props.get_string("display") == "none":
            return False, paint
        fill = props.get_string("fill")
        if fill is None:
            if self.fill_set:
                return self._visible(paint), paint
            paint.shader = None
            self._apply_color(props, BLACK, "fill-opacity", paint)
            return True, paint
        fill = fill.strip()
        if fill.startswith("url("):
            self._apply_reference(props, fill, bounds, "fill-opacity", paint)
            return True, paint
        if fill.lower() == "none":
            paint.shader = None
            paint.color = TRANSPARENT
            return False, paint
        color = props.get_color("fill")
        if color is None:
            self.context.warning(f"Unrecognized fill color, using black: {fill}")
            color = BLACK
        paint.shader = None
        self._apply_color(props, color, "fill-opacity", paint)
        return True, paint

    def resolve_stroke(self, props, bounds, default=None, base=None):
        """
        Stroke paint for an element.

        @param default: stroke value used when the element has none
        @return: (visible, paint)
        """
        paint = (base if base is not None else self.stroke_paint).snapshot()
        paint.style = PaintStyle.STROKE
        if props.get_string("display") == "none":
            return False, paint
        stroke = props.get_string("stroke")
        if stroke is None:
            stroke = default
        if stroke is None:
            if self.stroke_set:
                return self._visible(paint), paint
            paint.shader = None
            paint.color = TRANSPARENT
            return False, paint
        stroke = stroke.strip()
        if stroke.lower() == "none":
            paint.shader = None
            paint.dash = None
            paint.color = TRANSPARENT
            return False, paint
        width = parse_length(props.get_string("stroke-width"), None, self.context)
        if width is not None:
            paint.stroke_width = width
        dash = props.get_string("stroke-dasharray")
        if dash is not None and dash.strip().lower() != "none":
            paint.dash = tuple(parse_numbers(dash)) or None
        else:
            paint.dash = None
        cap = props.get_string("stroke-linecap")
        if cap is not None and cap.strip() in LINECAP_VALUES:
            paint.cap = LINECAP_VALUES[cap.strip()]
        join = props.get_string("stroke-linejoin")
        if join is not None and join.strip() in LINEJOIN_VALUES:
            paint.join = LINEJOIN_VALUES[join.strip()]
        if stroke.startswith("url("):
            self._apply_reference(props, stroke, bounds, "stroke-opacity", paint)
            return True, paint
        if props.get_string("stroke") is not None:
            color = props.get_color("stroke")
        else:
            color = Color.parse(stroke)
        if color is None:
            self.context.warning(f"Unrecognized stroke color, using black: {stroke}")
            color = BLACK
        paint.shader = None
        self._apply_color(props, color, "stroke-opacity", paint)
        return True, paint

    @staticmethod
    def _visible(paint):
        return paint.shader is not None or paint.alpha != 0

    @staticmethod
    def _apply_color(props, color, opacity_name, paint):
        paint.color = Color(color).with_alpha(props.get_opacity(opacity_name))

    def _apply_reference(self, props, value, bounds, opacity_name, paint):
        match = REGEX_URL.match(value)
        gradient = self.gradients.get(match.group(1)) if match else None
        shader = None
        if gradient is not None:
            shader = gradient.shader_for_bounds(bounds)
        if shader is None:
            self.context.warning(f"Didn't find shader, using black: {value}")
            paint.shader = None
            self._apply_color(props, BLACK, opacity_name, paint)
            return
        paint.shader = shader
        self._apply_color(props, BLACK, opacity_name, paint)

    #######################
    # Emission
    #######################

    def _emit(self, kind, geometry, element_id, data_name, paint, bounds, stroke=False):
        """
        One fill or stroke pass: listener, interception, default draw and limits.
        """
        replacement = self.listener.on_element(
            element_id, geometry, bounds, self.canvas, self.bounds, paint
        )
        if replacement is not None and replacement is not geometry:
            kind = geometry_kind(replacement)
            if kind is None:
                self.context.warning(
                    f"Listener returned {type(replacement).__name__} for {element_id}, skipping"
                )
                replacement = None
            else:
                bounds = replacement.bounds()
        geometry = replacement
        if geometry is not None:
            element = DrawElement(
                kind,
                geometry,
                paint=paint,
                matrix=copy(self.matrix_stack[-1]),
                group_path=tuple(g.id for g in self.group_stack if g.id is not None),
                inside_defs=self.reading_defs,
                id=element_id,
                data_name=data_name,
                view_box=self.view_box,
                width=self.width,
                height=self.height,
                document_bounds=self.bounds,
            )
            self.elements.append(element)
            if not self.listener.on_intercept(self.canvas, element):
                draw_element(self.canvas, element)
                self.listener.on_element_drawn(element_id, geometry, self.canvas, paint)
        if bounds is not None:
            self._do_limits(bounds, paint if stroke else None)

    def _draw(self, kind, geometry, element_id, props, bounds, default_stroke=None, fill=True):
        data_name = props.get_string("data-name")
        if fill:
            visible, paint = self.resolve_fill(props, bounds)
            if visible:
                self._emit(kind, geometry, element_id, data_name, paint, bounds)
        visible, paint = self.resolve_stroke(props, bounds, default_stroke)
        if visible:
            self._emit(kind, geometry, element_id, data_name, paint, bounds, stroke=True)

    def _do_limits(self, bounds, stroke=None):
        left, top, right, bottom = self.matrix_stack[-1].map_rect(bounds)
        half = stroke.stroke_width / 2.0 if stroke is not None else 0.0
        limits = self._limits
        limits[0] = min(limits[0], left - half)
        limits[1] = min(limits[1], top - half)
        limits[2] = max(limits[2], right + half)
        limits[3] = max(limits[3], bottom + half)

    def _length(self, attributes, name, default=None):
        return parse_length(attributes.get(name), default, self.context)

    def _missing(self, name, element_id):
        self.context.info(f"Missing geometry for {name} {element_id or ''}".rstrip())

    #######################
    # Structure
    #######################

    def start_svg(self, attributes, frame):
        self.view_box = attributes.get("viewBox")
        self.width = attributes.get("width")
        self.height = attributes.get("height")
        x = y = 0.0
        width = height = -1.0
        if self.view_box is not None:
            coords = REGEX_VIEWBOX_SEPARATOR.split(self.view_box.strip())
            if len(coords) == 4:
                x = parse_length(coords[0], 0.0)
                y = parse_length(coords[1], 0.0)
                width = parse_length(coords[2], -1.0)
                height = parse_length(coords[3], -1.0)
        else:
            svg_width = self._length(attributes, "width")
            svg_height = self._length(attributes, "height")
            if svg_width is not None and svg_height is not None:
                width = float(math.ceil(svg_width))
                height = float(math.ceil(svg_height))
        if width < 0 or height < 0:
            width = height = DEFAULT_DOCUMENT_SIZE
            self.context.warning(
                f"Element 'svg' does not provide its dimensions; using {width:g}x{height:g}"
            )
        self.bounds = (x, y, x + width, y + height)
        self.canvas.translate(-x, -y)
        self.listener.on_document_start(self.canvas, self.bounds)
        frame.on_end.append(lambda: self.listener.on_document_end(self.canvas, self.bounds))

    def start_defs(self, attributes, frame):
        self.reading_defs = True
        frame.scope.callback(self._end_defs)
        frame.on_end.append(self.gradients.finish)

    def _end_defs(self):
        self.reading_defs = False

    def start_style(self, attributes, frame):
        self.reading_style = True
        self.style_text = []
        frame.scope.callback(self._end_style)
        frame.on_end.append(lambda: self.style_sheet.parse("".join(self.style_text)))

    def _end_style(self):
        self.reading_style = False

    def start_linear_gradient(self, attributes, frame):
        self._start_gradient(True, attributes, frame)

    def start_radial_gradient(self, attributes, frame):
        self._start_gradient(False, attributes, frame)

    def _start_gradient(self, linear, attributes, frame):
        gradient = Gradient.from_attributes(linear, attributes, self.context)
        self.gradient = gradient
        frame.scope.callback(self._end_gradient)
        frame.on_end.append(lambda: self.gradients.register(gradient))

    def _end_gradient(self):
        self.gradient = None

    def start_stop(self, attributes, frame):
        if self.gradient is None:
            return
        props = self.properties(attributes)
        offset = parse_length(props.get_string("offset"), 0.0, self.context)
        color = props.get_color("stop-color")
        if color is None:
            color = BLACK
        opacity = min(max(props.get_float("stop-opacity", 1.0), 0.0), 1.0)
        self.gradient.add_stop(offset, color.with_alpha(round(255 * opacity)))

    def start_group(self, attributes, frame):
        props = Properties(attributes, self.style_sheet, layered=True)
        group_id = attributes.get("id")
        scope = frame.scope
        if group_id is not None and group_id.lower() == BOUNDS_GROUP_ID:
            self.bounds_mode = True
            scope.callback(self._end_bounds_mode)
        if self.hidden or props.get_string("display") == "none":
            scope.enter_context(self.hidden_scope())
        scope.enter_context(self.layer_scope(props.get_float("opacity")))
        scope.enter_context(self.transform_scope(attributes))
        group = scope.enter_context(self.group_scope(SvgGroup(group_id)))

        _, self.fill_paint = self.resolve_fill(props, None)
        _, self.stroke_paint = self.resolve_stroke(props, None)
        self.fill_set |= props.get_string("fill") is not None
        self.stroke_set |= props.get_string("stroke") is not None

        self.listener.on_element(group_id, group, None, self.canvas, self.bounds, None)
        frame.on_end.append(
            lambda: self.listener.on_element_drawn(group_id, group, self.canvas, None)
        )

    def _end_bounds_mode(self):
        self.bounds_mode = False

    def _read_bounds_rect(self, attributes):
        x = self._length(attributes, "x", 0.0)
        y = self._length(attributes, "y", 0.0)
        width = self._length(attributes, "width")
        height = self._length(attributes, "height")
        if width is None or height is None:
            self._missing("rect", attributes.get("id"))
            return
        self.bounds = (x, y, x + width, y + height)

    def start_clip_path(self, attributes, frame):
        if self.hidden:
            return
        frame.scope.enter_context(self.hidden_scope())
        self.context.warning("Unsupported SVG command: clipPath")

    #######################
    # Shapes
    #######################

    def start_rect(self, attributes, frame):
        element_id = attributes.get("id")
        x = self._length(attributes, "x", 0.0)
        y = self._length(attributes, "y", 0.0)
        width = self._length(attributes, "width")
        height = self._length(attributes, "height")
        if width is None or height is None:
            self._missing("rect", element_id)
            return
        rx = self._length(attributes, "rx")
        ry = self._length(attributes, "ry")
        if ry is None:
            ry = rx
        if rx is None:
            rx = ry
        if rx is None or rx < 0:
            rx = 0.0
        if ry is None or ry < 0:
            ry = 0.0
        rx = min(rx, width / 2.0)
        ry = min(ry, height / 2.0)
        with self.transform_scope(attributes):
            rect = (x, y, x + width, y + height)
            geometry = RoundRectGeometry(rect, rx, ry)
            self._draw(DrawType.ROUND_RECT, geometry, element_id, self.properties(attributes), rect)

    def start_line(self, attributes, frame):
        element_id = attributes.get("id")
        x1 = self._length(attributes, "x1")
        y1 = self._length(attributes, "y1")
        x2 = self._length(attributes, "x2")
        y2 = self._length(attributes, "y2")
        if None in (x1, y1, x2, y2):
            self._missing("line", element_id)
            return
        with self.transform_scope(attributes):
            geometry = LineGeometry(x1, y1, x2, y2)
            self._draw(
                DrawType.LINE,
                geometry,
                element_id,
                self.properties(attributes),
                geometry.bounds(),
                default_stroke="black",
                fill=False,
            )

    def start_circle(self, attributes, frame):
        r = self._length(attributes, "r")
        self._oval(attributes, r, r)

    def start_ellipse(self, attributes, frame):
        self._oval(attributes, self._length(attributes, "rx"), self._length(attributes, "ry"))

    def _oval(self, attributes, rx, ry):
        element_id = attributes.get("id")
        cx = self._length(attributes, "cx")
        cy = self._length(attributes, "cy")
        if None in (cx, cy, rx, ry):
            self._missing("oval", element_id)
            return
        with self.transform_scope(attributes):
            rect = (cx - rx, cy - ry, cx + rx, cy + ry)
            self._draw(DrawType.OVAL, OvalGeometry(rect), element_id, self.properties(attributes), rect)

    def start_polygon(self, attributes, frame):
        self._poly(attributes, True)

    def start_polyline(self, attributes, frame):
        self._poly(attributes, False)

    def _poly(self, attributes, close):
        element_id = attributes.get("id")
        points_str = attributes.get("points")
        if points_str is None:
            self._missing("polygon" if close else "polyline", element_id)
            return
        points = parse_numbers(points_str)
        if len(points) < 2:
            return
        outline = Geomstr()
        outline.polyline(
            [complex(points[i], points[i + 1]) for i in range(0, len(points) - 1, 2)],
            close=close,
        )
        with self.transform_scope(attributes):
            geometry = PathGeometry(outline, DrawElement.points_data(points, close))
            self._draw(DrawType.PATH, geometry, element_id, self.properties(attributes), outline.bbox())

    def start_path(self, attributes, frame):
        element_id = attributes.get("id")
        d = attributes.get("d")
        if self.reading_defs and element_id is not None and d:
            self.defs[element_id] = d
        if not d:
            href = attributes.get("href")
            if href is not None and href.startswith("#"):
                href = href[1:]
            d = self.defs.get(href) if href is not None else None
            if not d:
                self._missing("path", element_id)
                return
        outline = self.path_interpreter.parse(d)
        if not outline:
            self._missing("path", element_id)
            return
        with self.transform_scope(attributes):
            geometry = PathGeometry(outline, d)
            self._draw(DrawType.PATH, geometry, element_id, self.properties(attributes), outline.bbox())

    def start_image(self, attributes, frame):
        element_id = attributes.get("id")
        props = self.properties(attributes)
        if props.get_string("display") == "none":
            return
        href = attributes.get("href")
        if href is not None and href.startswith("#"):
            href = href[1:]
        if href is not None and href in self.defs:
            href = self.defs[href]
        if href is None or not href.startswith("data:image/"):
            self.context.info(f"Unsupported image reference for {element_id}")
            return
        index = href.find("base64,")
        payload = href[index + 7 :] if index > 0 else href
        try:
            image = Image.open(BytesIO(b64decode(payload)))
            image.load()
        except (ValueError, UnidentifiedImageError, OSError) as e:
            self.context.warning(f"Could not decode image {element_id}: {e}")
            return
        with self.transform_scope(attributes):
            x = self._length(attributes, "x", 0.0)
            y = self._length(attributes, "y", 0.0)
            width = self._length(attributes, "width", float(image.width))
            height = self._length(attributes, "height", float(image.height))
            rect = (x, y, x + width, y + height)
            self._emit(
                DrawType.IMAGE,
                ImageGeometry(image, rect),
                element_id,
                props.get_string("data-name"),
                self.stroke_paint.snapshot(),
                rect,
            )

    #######################
    # Text
    #######################

    def start_text(self, attributes, frame):
        frame.scope.enter_context(self.transform_scope(attributes))
        self._open_text(attributes, frame)

    def start_tspan(self, attributes, frame):
        self._open_text(attributes, frame)

    def _open_text(self, attributes, frame):
        props = self.properties(attributes)
        parent = self.text_stack[-1] if self.text_stack else None
        text = SvgText.from_attributes(attributes, props, parent, self.context)
        display_none = props.get_string("display") == "none"

        if parent is not None and parent.fill is not None and props.get_string("fill") is None:
            text.fill = None if display_none else parent.fill.snapshot()
        else:
            visible, paint = self.resolve_fill(props, None)
            text.fill = paint if visible else None
        if parent is not None and parent.stroke is not None and props.get_string("stroke") is None:
            text.stroke = None if display_none else parent.stroke.snapshot()
        else:
            visible, paint = self.resolve_stroke(props, None)
            text.stroke = paint if visible else None
        for paint in (text.fill, text.stroke):
            if paint is not None:
                apply_text_style(paint, props, self.context)

        frame.scope.enter_context(self.text_scope(text))
        frame.on_end.append(lambda: self._render_text(text))

    def _render_text(self, text):
        if not text.text or not text.text.strip():
            return
        run = text.layout(self.measurer)
        if run is None:
            return
        geometry = TextGeometry(run)
        bounds = geometry.bounds()
        if text.fill is not None:
            self._emit(DrawType.TEXT, geometry, text.id, text.data_name, text.fill, bounds)
        if text.stroke is not None:
            self._emit(
                DrawType.TEXT, geometry, text.id, text.data_name, text.stroke, bounds, stroke=True
            )
