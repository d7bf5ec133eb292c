"""
Text layout.

Text and tspan elements open a text frame holding their position, alignment and paints.
Character data accumulates in the innermost frame, and the frame is laid out when its
element closes: the baseline is shifted by the measured height for vertical alignment,
the origin by the measured width for horizontal alignment. A per-character x list places
glyphs individually.

Metrics come from Pillow fonts. Font families are looked up as font files in the
configured font directories, a family that can not be found falls back to Pillow's
default font.
"""

import os
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

from PIL import ImageFont

from .elements import TextRun
from .numbers import parse_numbers
from .paint import Paint, TextAlign, Typeface
from .units import parse_length

FONT_EXTENSIONS = (".ttf", ".otf", ".ttc")


class VerticalAlign(IntEnum):
    BOTTOM = 0
    MIDDLE = 1
    TOP = 2


HORIZONTAL_ALIGN = {
    "left": TextAlign.LEFT,
    "center": TextAlign.CENTER,
    "right": TextAlign.RIGHT,
}

TEXT_ANCHOR = {
    "start": TextAlign.LEFT,
    "middle": TextAlign.CENTER,
    "end": TextAlign.RIGHT,
}

VERTICAL_ALIGN = {
    "bottom": VerticalAlign.BOTTOM,
    "middle": VerticalAlign.MIDDLE,
    "top": VerticalAlign.TOP,
}


def font_families(family):
    """
    Split a font-family value into the candidate family names.

    >>> font_families("'Open Sans', Arial")
    ['Open Sans', 'Arial']
    """
    if not family:
        return []
    names = []
    for name in family.split(","):
        name = name.strip().strip("'\"").strip()
        if name:
            names.append(name)
    return names


def apply_text_style(paint, props, context=None):
    """
    Applies font-size, font-family, font-style, font-weight and text-anchor to paint.
    """
    size = parse_length(props.get_string("font-size"), None, context)
    if size is not None:
        paint.text_size = size
    family = props.get_string("font-family")
    style = props.get_string("font-style")
    weight = props.get_string("font-weight")
    typeface = replace(paint.typeface)
    if family is not None:
        typeface.family = family
    if style is not None:
        typeface.italic = style.strip() in ("italic", "oblique")
    if weight is not None:
        weight = weight.strip()
        typeface.bold = weight in ("bold", "bolder") or (weight.isdigit() and int(weight) >= 600)
    paint.typeface = typeface
    anchor = props.get_string("text-anchor")
    if anchor is not None:
        paint.text_align = TEXT_ANCHOR.get(anchor.strip(), TextAlign.LEFT)


class TextMeasurer:
    """
    Caches Pillow fonts per typeface and size, and measures text runs with them.
    """

    def __init__(self, font_dirs=(), context=None):
        self.font_dirs = [os.path.expanduser(d) for d in font_dirs]
        self.context = context
        self._fonts: Dict[Tuple, object] = {}
        self._paths: Dict[Tuple, Optional[str]] = {}

    def font(self, paint):
        typeface = paint.typeface
        size = max(1, int(round(paint.text_size)))
        key = (typeface.family, typeface.bold, typeface.italic, size)
        font = self._fonts.get(key)
        if font is not None:
            return font
        font = None
        path = self.locate(typeface)
        if path is not None:
            try:
                font = ImageFont.truetype(path, size)
            except OSError as e:
                self._warn(f"Could not load font file {path}: {e}")
        if font is None:
            if typeface.family:
                self._warn(f"Typeface {typeface.family} not found, using default font")
            font = ImageFont.load_default(size)
        self._fonts[key] = font
        return font

    def locate(self, typeface):
        """
        Font file for the typeface in the font directories, or None.
        """
        key = (typeface.family, typeface.bold, typeface.italic)
        if key in self._paths:
            return self._paths[key]
        path = None
        for family in font_families(typeface.family):
            for name in self._candidate_names(family, typeface.bold, typeface.italic):
                path = self._find_file(name)
                if path is not None:
                    break
            if path is not None:
                break
        self._paths[key] = path
        return path

    @staticmethod
    def _candidate_names(family, bold, italic):
        suffix = ""
        if bold:
            suffix += "Bold"
        if italic:
            suffix += "Italic"
        if suffix:
            yield f"{family}-{suffix}"
            yield f"{family}{suffix}"
        yield family

    def _find_file(self, name):
        wanted = name.lower()
        for directory in self.font_dirs:
            if not os.path.isdir(directory):
                continue
            for filename in os.listdir(directory):
                stem, ext = os.path.splitext(filename)
                if ext.lower() in FONT_EXTENSIONS and stem.lower() == wanted:
                    return os.path.join(directory, filename)
        return None

    def measure(self, text, paint):
        """
        @return: (advance width, ink height) of text drawn with paint
        """
        font = self.font(paint)
        width = float(font.getlength(text))
        left, top, right, bottom = font.getbbox(text)
        return width, float(bottom - top)

    def _warn(self, message):
        if self.context is not None:
            self.context.warning(message)


@dataclass
class SvgText:
    """
    Open text or tspan element. Text is only drawn when the element ends.
    """

    id: Optional[str] = None
    data_name: Optional[str] = None
    x: float = 0.0
    y: float = 0.0
    x_coords: Optional[List[float]] = None
    fill: Optional[Paint] = None
    stroke: Optional[Paint] = None
    text: Optional[str] = None
    h_align: TextAlign = TextAlign.LEFT
    v_align: VerticalAlign = VerticalAlign.BOTTOM
    bounds: Tuple[float, float, float, float] = field(default=(0.0, 0.0, 0.0, 0.0))

    @classmethod
    def from_attributes(cls, attributes, props, parent=None, context=None):
        """
        New text frame inheriting position and alignment from parent. Paints are set by
        the caller.
        """
        text = cls(id=attributes.get("id"), data_name=props.get_string("data-name"))
        parent_x = parent.x if parent is not None else 0.0
        x_str = attributes.get("x")
        if x_str is not None and ("," in x_str or " " in x_str.strip()):
            text.x = parent_x
            text.x_coords = parse_numbers(x_str)
        else:
            text.x = parse_length(x_str, parent_x, context)
            text.x_coords = parent.x_coords if parent is not None else None
        text.y = parse_length(attributes.get("y"), parent.y if parent is not None else 0.0, context)

        halign = props.get_string("text-align")
        anchor = props.get_string("text-anchor")
        if halign is not None:
            text.h_align = HORIZONTAL_ALIGN.get(halign.strip(), TextAlign.LEFT)
        elif anchor is not None:
            text.h_align = TEXT_ANCHOR.get(anchor.strip(), TextAlign.LEFT)
        elif parent is not None:
            text.h_align = parent.h_align

        valign = props.get_string("alignment-baseline")
        if valign is not None:
            text.v_align = VERTICAL_ALIGN.get(valign.strip(), VerticalAlign.BOTTOM)
        elif parent is not None:
            text.v_align = parent.v_align
        return text

    def append(self, text, context=None):
        if self.text is None:
            self.text = text
        else:
            self.text += text
        if context is not None:
            self.text = context.substitute(self.text)

    def layout(self, measurer):
        """
        Place the accumulated text.

        @return: TextRun, None when there is no text
        """
        if not self.text:
            return None
        paint = self.stroke if self.stroke is not None else self.fill
        if paint is None:
            paint = Paint.fill()
        text = self.text
        width, height = measurer.measure(text, paint)
        y_offset = 0.0
        if self.v_align == VerticalAlign.TOP:
            y_offset = height
        elif self.v_align == VerticalAlign.MIDDLE:
            y_offset = height / 2.0
        x_offset = 0.0
        if self.h_align == TextAlign.CENTER:
            x_offset = -width / 2.0
        elif self.h_align == TextAlign.RIGHT:
            x_offset = -width
        y = self.y + y_offset
        run = TextRun(text, self.x + x_offset, y, width, height)
        self.bounds = (self.x, self.y, self.x + width, self.y + height)
        if self.x_coords:
            count = min(len(text), len(self.x_coords))
            for i in range(count):
                run.glyph_positions.append((text[i], self.x_coords[i] + x_offset, y))
            if count < len(text):
                last = count - 1
                next_x = self.x_coords[last] + measurer.measure(text[last], paint)[0]
                run.glyph_positions.append((text[count:], next_x + x_offset, y))
        return run
