"""
Loading entry points.

A Sharp wraps one SVG source: text, bytes, a file path or an open stream. Sources are
read lazily when a picture is requested, gzip compressed sources are recognised by their
magic number. Every parse runs with a fresh ParseContext.
"""

import gzip
import threading
from dataclasses import dataclass, field
from io import BytesIO
from typing import Any, List, Optional, Tuple

from .context import LOG_WARN, ParseContext
from .elements import DrawElement
from .events import IterparseEventSource
from .exceptions import EmptyPictureError, SvgParseError
from .interpreter import DocumentInterpreter
from .listener import ListenerChain
from .pathparser import parse_path
from .text import TextMeasurer

GZIP_MAGIC = b"\x1f\x8b"


@dataclass
class SharpPicture:
    """
    Result of one parse.

    bounds is the declared document rectangle, limits the tight bounds of what was drawn.
    """

    elements: List[DrawElement] = field(default_factory=list)
    bounds: Optional[Tuple[float, float, float, float]] = None
    limits: Optional[Tuple[float, float, float, float]] = None
    canvas: Any = None

    def __len__(self):
        return len(self.elements)

    def require_content(self):
        if not self.elements or self.limits is None:
            raise EmptyPictureError("SVG has no drawable content")
        left, top, right, bottom = self.limits
        if right - left <= 0 and bottom - top <= 0:
            raise EmptyPictureError("SVG content is degenerate")
        return self


def decompress(stream):
    """
    Stream yielding the document bytes, unwrapping gzip when the magic number is present.
    """
    if not stream.seekable():
        stream = BytesIO(stream.read())
    position = stream.tell()
    magic = stream.read(2)
    stream.seek(position)
    if magic == GZIP_MAGIC:
        return gzip.GzipFile(fileobj=stream)
    return stream


class Sharp:
    def __init__(self, opener, name=None, owned=True):
        self._opener = opener
        self.name = name
        self.owned = owned
        self.listeners = ListenerChain()
        self.text_substitutions = {}
        self.font_dirs = []
        self.log_level = LOG_WARN
        self._watchers = []

    def __repr__(self):
        return f"Sharp({self.name!r})"

    @classmethod
    def load_string(cls, text):
        data = text.encode("utf-8")
        return cls(lambda: BytesIO(data), "<string>")

    @classmethod
    def load_bytes(cls, data):
        return cls(lambda: BytesIO(data), "<bytes>")

    @classmethod
    def load_file(cls, path):
        return cls(lambda: open(path, "rb"), str(path))

    @classmethod
    def load_stream(cls, stream):
        return cls(lambda: stream, getattr(stream, "name", "<stream>"), owned=False)

    @staticmethod
    def load_path(pathdef, context=None):
        """
        Bare path data, without a document.

        @return: Geomstr outline
        """
        return parse_path(pathdef, context)

    def add_listener(self, listener):
        self.listeners.add(listener)
        return self

    def remove_listener(self, listener):
        self.listeners.remove(listener)
        return self

    def prepare_texts(self, substitutions):
        """
        Text content equal to a key is replaced by its value. Cleared after each parse.
        """
        self.text_substitutions = dict(substitutions) if substitutions else {}
        return self

    def with_font_dirs(self, *font_dirs):
        self.font_dirs.extend(font_dirs)
        return self

    def with_log_level(self, log_level):
        self.log_level = log_level
        return self

    def watch(self, monitor_function, level=LOG_WARN):
        """
        Receive the log messages of every parse up to the given level.
        """
        self._watchers.append((monitor_function, level))
        return self

    def _context(self):
        context = ParseContext(self.text_substitutions, self.log_level)
        for monitor_function, level in self._watchers:
            context.watch(monitor_function, level)
        return context

    def get_picture(self, canvas=None):
        """
        Parse the source.

        @param canvas: Canvas receiving the draw calls, a RecordingCanvas if None
        @return: SharpPicture
        """
        context = self._context()
        interpreter = DocumentInterpreter(
            canvas, self.listeners, context, TextMeasurer(self.font_dirs, context)
        )
        try:
            stream = self._opener()
        except OSError as e:
            context.error(f"Failed opening SVG {self.name}: {e}")
            raise SvgParseError(f"Failed opening SVG {self.name}: {e}") from e
        try:
            interpreter.interpret(IterparseEventSource(decompress(stream)))
        finally:
            self.text_substitutions.clear()
            if self.owned:
                stream.close()
        return SharpPicture(
            interpreter.elements, interpreter.bounds, interpreter.limits, interpreter.canvas
        )

    def parse_async(self, callback, canvas=None):
        """
        Parse in a worker thread. callback receives (picture, None) or (None, error).

        @return: the started thread
        """

        def run():
            try:
                picture = self.get_picture(canvas)
            except Exception as e:
                callback(None, e)
            else:
                callback(picture, None)

        thread = threading.Thread(target=run, name=f"svg-{self.name}", daemon=True)
        thread.start()
        return thread
