# Define svgsharp specific exceptions

# Base svgsharp exception
class SvgError(Exception):
    pass


class SvgParseError(SvgError):
    """Abort loading a malformed document. The underlying cause is chained."""


class InconsistentUnitsError(SvgParseError):
    """
    A document established one physical unit and later used a different one.

    Raised as soon as the second unit is seen, e.g. `10pt` followed by `3mm`.
    """

    def __init__(self, first, second):
        super().__init__(f"Mixing units; SVG contains both {first} and {second}")
        self.first = first
        self.second = second


class EmptyPictureError(SvgError):
    """Parsing finished but nothing drawable was produced."""
