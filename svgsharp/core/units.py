"""
Length parsing for SVG attribute values.

All lengths are reduced to user units. Points are offset by half a unit, percentages
become fractions and millimeters are converted at 96 user units per inch. Every
recognised physical unit is registered with the parse context so a document can not
mix them.
"""

import re

PATTERN_FLOAT = r"[-+]?[0-9]*\.?[0-9]+(?:[eE][-+]?[0-9]+)?"
REGEX_LENGTH = re.compile(r"^\s*(%s)\s*([A-Za-z%%]*)\s*$" % PATTERN_FLOAT)
DEFAULT_PPI = 96.0
MM_PER_INCH = 25.4
PX_PER_MM = DEFAULT_PPI / MM_PER_INCH

UNIT_PERCENT = "%"
UNIT_PT = "pt"
UNIT_PX = "px"
UNIT_MM = "mm"

PHYSICAL_UNITS = (UNIT_PT, UNIT_PX, UNIT_MM)


def parse_length(value, default=None, context=None):
    """
    Parse a length attribute into user units.

    @param value: attribute string, may be None
    @param default: value returned when the attribute is absent or not numeric
    @param context: ParseContext holding the unit guard
    @return: float or default
    """
    if value is None:
        return default
    match = REGEX_LENGTH.match(value)
    if not match:
        if context is not None:
            context.info(f"Could not parse length: {value}")
        return default
    amount = float(match.group(1))
    unit = match.group(2)
    if not unit:
        return amount
    if unit == UNIT_PT:
        amount = amount + 0.5
    elif unit == UNIT_PERCENT:
        amount = amount / 100.0
    elif unit == UNIT_MM:
        amount = amount * PX_PER_MM
    elif unit != UNIT_PX:
        # Unknown units are read as user units.
        return amount
    if context is not None and unit in PHYSICAL_UNITS:
        context.check_unit(unit)
    return amount
