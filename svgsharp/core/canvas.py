"""
Render backend interface.

The interpreter issues canvas calls as draw elements are emitted. A backend implements
Canvas, RecordingCanvas keeps every call for later replay or inspection.
"""

from copy import copy

from .elements import DrawType
from .matrix import Matrix


class Canvas:
    def save(self):
        raise NotImplementedError

    def save_layer_alpha(self, bounds, alpha):
        raise NotImplementedError

    def restore(self):
        raise NotImplementedError

    def concat(self, matrix):
        raise NotImplementedError

    def translate(self, dx, dy):
        raise NotImplementedError

    def draw_path(self, outline, paint):
        raise NotImplementedError

    def draw_rect(self, rect, paint):
        raise NotImplementedError

    def draw_round_rect(self, rect, rx, ry, paint):
        raise NotImplementedError

    def draw_oval(self, rect, paint):
        raise NotImplementedError

    def draw_line(self, x1, y1, x2, y2, paint):
        raise NotImplementedError

    def draw_text(self, text, x, y, paint):
        raise NotImplementedError

    def draw_bitmap(self, image, rect, paint):
        raise NotImplementedError


class RecordingCanvas(Canvas):
    """
    Canvas recording its calls as `(name, args)` tuples, tracking the current matrix and
    the layer alpha requested by group opacity.
    """

    def __init__(self):
        self.calls = []
        self.matrix = Matrix()
        self._stack = []

    def __len__(self):
        return len(self.calls)

    def calls_named(self, name):
        return [args for call, args in self.calls if call == name]

    def save(self):
        self._stack.append(copy(self.matrix))
        self.calls.append(("save", ()))

    def save_layer_alpha(self, bounds, alpha):
        self._stack.append(copy(self.matrix))
        self.calls.append(("save_layer_alpha", (bounds, alpha)))

    def restore(self):
        if self._stack:
            self.matrix = self._stack.pop()
        self.calls.append(("restore", ()))

    def concat(self, matrix):
        self.matrix = matrix @ self.matrix
        self.calls.append(("concat", (copy(matrix),)))

    def translate(self, dx, dy):
        self.matrix = Matrix.translate(dx, dy) @ self.matrix
        self.calls.append(("translate", (dx, dy)))

    def draw_path(self, outline, paint):
        self.calls.append(("draw_path", (outline, paint)))

    def draw_rect(self, rect, paint):
        self.calls.append(("draw_rect", (rect, paint)))

    def draw_round_rect(self, rect, rx, ry, paint):
        self.calls.append(("draw_round_rect", (rect, rx, ry, paint)))

    def draw_oval(self, rect, paint):
        self.calls.append(("draw_oval", (rect, paint)))

    def draw_line(self, x1, y1, x2, y2, paint):
        self.calls.append(("draw_line", (x1, y1, x2, y2, paint)))

    def draw_text(self, text, x, y, paint):
        self.calls.append(("draw_text", (text, x, y, paint)))

    def draw_bitmap(self, image, rect, paint):
        self.calls.append(("draw_bitmap", (image, rect, paint)))


def draw_element(canvas, element, paint=None):
    """
    Default drawing of a draw element, dispatched on its kind.
    """
    if paint is None:
        paint = element.paint
    geometry = element.geometry
    kind = element.kind
    if kind == DrawType.ROUND_RECT:
        if geometry.rx > 0 or geometry.ry > 0:
            canvas.draw_round_rect(geometry.rect, geometry.rx, geometry.ry, paint)
        else:
            canvas.draw_rect(geometry.rect, paint)
    elif kind == DrawType.LINE:
        canvas.draw_line(geometry.x1, geometry.y1, geometry.x2, geometry.y2, paint)
    elif kind == DrawType.OVAL:
        canvas.draw_oval(geometry.rect, paint)
    elif kind == DrawType.PATH:
        canvas.draw_path(geometry.outline, paint)
    elif kind == DrawType.TEXT:
        run = geometry.run
        if run.glyph_positions:
            for text, x, y in run.glyph_positions:
                canvas.draw_text(text, x, y, paint)
        else:
            canvas.draw_text(run.text, run.x, run.y, paint)
    elif kind == DrawType.IMAGE:
        canvas.draw_bitmap(geometry.image, geometry.rect, paint)
