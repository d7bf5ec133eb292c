"""
Gradient definitions and their resolution into shader descriptors.

Gradients are collected while the document streams by. After a `<defs>` block ends (and
again at the end of the document) every gradient is finished: `href` chains are followed
so a child without stops takes its parent's stops, the child's transform is applied
before the parent's and an undeclared spread method is inherited.
"""

from copy import copy
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

from .color import Color
from .matrix import Matrix, parse_transform
from .units import parse_length


class TileMode(IntEnum):
    CLAMP = 0
    REPEAT = 1
    MIRROR = 2


SPREAD_METHODS = {
    "pad": TileMode.CLAMP,
    "repeat": TileMode.REPEAT,
    "reflect": TileMode.MIRROR,
}


@dataclass(frozen=True)
class LinearShader:
    x1: float
    y1: float
    x2: float
    y2: float
    colors: Tuple[Color, ...]
    positions: Tuple[float, ...]
    tile_mode: TileMode = TileMode.CLAMP
    matrix: Optional[Matrix] = None

    def with_matrix(self, matrix):
        return replace(self, matrix=matrix)


@dataclass(frozen=True)
class RadialShader:
    cx: float
    cy: float
    r: float
    colors: Tuple[Color, ...]
    positions: Tuple[float, ...]
    tile_mode: TileMode = TileMode.CLAMP
    matrix: Optional[Matrix] = None

    def with_matrix(self, matrix):
        return replace(self, matrix=matrix)


@dataclass
class Gradient:
    id: Optional[str] = None
    linear: bool = True
    x1: float = 0.0
    y1: float = 0.0
    x2: float = 1.0
    y2: float = 0.0
    cx: float = 0.0
    cy: float = 0.0
    r: float = 0.0
    positions: List[float] = field(default_factory=list)
    colors: List[Color] = field(default_factory=list)
    matrix: Optional[Matrix] = None
    tile_mode: Optional[TileMode] = None
    bounding_box: bool = True
    href: Optional[str] = None
    shader: Optional[object] = None
    finished: bool = False

    @classmethod
    def from_attributes(cls, linear, attributes, context=None):
        gradient = cls(id=attributes.get("id"), linear=linear)
        if linear:
            gradient.x1 = parse_length(attributes.get("x1"), 0.0, context)
            gradient.x2 = parse_length(attributes.get("x2"), 1.0, context)
            gradient.y1 = parse_length(attributes.get("y1"), 0.0, context)
            gradient.y2 = parse_length(attributes.get("y2"), 0.0, context)
        else:
            gradient.cx = parse_length(attributes.get("cx"), 0.0, context)
            gradient.cy = parse_length(attributes.get("cy"), 0.0, context)
            gradient.r = parse_length(attributes.get("r"), 0.0, context)
        gradient.matrix = parse_transform(attributes.get("gradientTransform"))
        spread = attributes.get("spreadMethod")
        if spread is not None:
            gradient.tile_mode = SPREAD_METHODS.get(spread.strip(), TileMode.CLAMP)
        units = attributes.get("gradientUnits") or "objectBoundingBox"
        gradient.bounding_box = units != "userSpaceOnUse"
        href = attributes.get("href")
        if href is not None:
            gradient.href = href[1:] if href.startswith("#") else href
        return gradient

    def add_stop(self, offset, color):
        self.positions.append(offset)
        self.colors.append(color)

    def build_shader(self):
        if not self.colors:
            self.shader = None
            return None
        tile_mode = self.tile_mode if self.tile_mode is not None else TileMode.CLAMP
        if self.linear:
            self.shader = LinearShader(
                self.x1,
                self.y1,
                self.x2,
                self.y2,
                tuple(self.colors),
                tuple(self.positions),
                tile_mode,
                self.matrix,
            )
        else:
            self.shader = RadialShader(
                self.cx,
                self.cy,
                self.r,
                tuple(self.colors),
                tuple(self.positions),
                tile_mode,
                self.matrix,
            )
        return self.shader

    def shader_for_bounds(self, bounds):
        """
        Shader placed for an element. Bounding box units map the unit square onto bounds.

        @param bounds: (left, top, right, bottom) of the element, may be None
        @return: shader descriptor or None
        """
        if self.shader is None:
            return None
        if bounds is None:
            return self.shader
        matrix = copy(self.matrix) if self.matrix is not None else Matrix()
        if self.bounding_box:
            left, top, right, bottom = bounds
            matrix.pre_translate(left, top)
            matrix.pre_scale(right - left, bottom - top)
        return self.shader.with_matrix(matrix)


class GradientRegistry:
    def __init__(self, context=None):
        self.context = context
        self.gradients: Dict[str, Gradient] = {}

    def __contains__(self, gradient_id):
        return gradient_id in self.gradients

    def __len__(self):
        return len(self.gradients)

    def register(self, gradient):
        if gradient.id is None:
            return
        self.gradients[gradient.id] = gradient

    def get(self, gradient_id):
        """
        Registered gradient by id. A gradient not finished yet is resolved on demand.
        """
        gradient = self.gradients.get(gradient_id)
        if gradient is not None and not gradient.finished:
            self._resolve(gradient, set())
        return gradient

    def finish(self):
        for gradient in self.gradients.values():
            if not gradient.finished:
                self._resolve(gradient, set())

    def _resolve(self, gradient, visiting):
        visiting.add(gradient.id)
        if gradient.href is not None:
            parent = self.gradients.get(gradient.href)
            if parent is None:
                self._warn(f"Gradient {gradient.id} refers to unknown gradient {gradient.href}")
            elif parent.id in visiting:
                self._warn(f"Gradient {gradient.id} has a circular reference")
            else:
                if not parent.finished:
                    self._resolve(parent, visiting)
                self._inherit(gradient, parent)
        gradient.finished = True
        if gradient.build_shader() is None:
            self._warn(f"Failed to parse gradient for id {gradient.id}")

    @staticmethod
    def _inherit(child, parent):
        if not child.colors:
            child.positions = list(parent.positions)
            child.colors = list(parent.colors)
        if child.matrix is None:
            child.matrix = copy(parent.matrix) if parent.matrix is not None else None
        elif parent.matrix is not None:
            child.matrix = child.matrix @ parent.matrix
        if child.tile_mode is None:
            child.tile_mode = parent.tile_mode

    def _warn(self, message):
        if self.context is not None:
            self.context.warning(message)
