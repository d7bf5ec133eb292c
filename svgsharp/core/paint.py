from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Optional, Tuple

from .color import Color


class PaintStyle(IntEnum):
    FILL = 0
    STROKE = 1


# LINECAP
# Value	butt | round | square
# Default value	butt
class Linecap(IntEnum):
    CAP_BUTT = 0
    CAP_ROUND = 1
    CAP_SQUARE = 2


# LINEJOIN
# Value	miter | round | bevel
# Default value	miter
class Linejoin(IntEnum):
    JOIN_MITER = 0
    JOIN_ROUND = 1
    JOIN_BEVEL = 2


class TextAlign(IntEnum):
    LEFT = 0
    CENTER = 1
    RIGHT = 2


LINECAP_VALUES = {
    "butt": Linecap.CAP_BUTT,
    "round": Linecap.CAP_ROUND,
    "square": Linecap.CAP_SQUARE,
}

LINEJOIN_VALUES = {
    "miter": Linejoin.JOIN_MITER,
    "round": Linejoin.JOIN_ROUND,
    "bevel": Linejoin.JOIN_BEVEL,
}


@dataclass
class Typeface:
    family: Optional[str] = None
    bold: bool = False
    italic: bool = False


@dataclass
class Paint:
    """
    Resolved fill or stroke style.

    Paints live on the interpreter's fill and stroke stacks and are mutated as styles are
    applied. Every emitted element carries its own snapshot.
    """

    style: PaintStyle = PaintStyle.FILL
    color: Color = field(default_factory=lambda: Color(0, 0, 0))
    stroke_width: float = 1.0
    cap: Linecap = Linecap.CAP_BUTT
    join: Linejoin = Linejoin.JOIN_MITER
    dash: Optional[Tuple[float, ...]] = None
    shader: Optional[object] = None
    text_size: float = 12.0
    typeface: Typeface = field(default_factory=Typeface)
    text_align: TextAlign = TextAlign.LEFT
    anti_alias: bool = True

    @property
    def alpha(self):
        return self.color.alpha

    @alpha.setter
    def alpha(self, a):
        self.color = self.color.with_alpha(a)

    def snapshot(self):
        return replace(self, typeface=replace(self.typeface))

    @classmethod
    def fill(cls):
        return cls(style=PaintStyle.FILL)

    @classmethod
    def stroke(cls):
        return cls(style=PaintStyle.STROKE)
