"""SVG to drawing primitives interpreter."""

from .core.canvas import Canvas, RecordingCanvas
from .core.color import Color
from .core.context import LOG_ERROR, LOG_INFO, LOG_WARN, ParseContext
from .core.elements import DrawElement, DrawType
from .core.exceptions import (
    EmptyPictureError,
    InconsistentUnitsError,
    SvgError,
    SvgParseError,
)
from .core.listener import ElementListener, ListenerChain
from .core.loader import Sharp, SharpPicture
from .core.matrix import Matrix, parse_transform
from .core.paint import Paint, PaintStyle
from .core.pathparser import parse_path
from .core.pathpicture import PathPicture, RenderOptions, StylePath, load_path_picture

__version__ = "0.1.0"
