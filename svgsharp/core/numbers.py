"""
Number lexing for path data, transform lists and point lists.

SVG numbers are permissive: they may be separated by whitespace, a comma or nothing
at all when the next number starts with a sign or a second decimal point. Scientific
notation is part of a single number.
"""

import re

REGEX_NUMBER = re.compile(r"[-+]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?")
PATH_COMMANDS = "MmZzLlHhVvCcSsQqTtAa"
SEPARATORS = " \t\n\r\f,"
BOUNDARIES = PATH_COMMANDS + ")"


class NumberScanner:
    """
    Cursor over a string of SVG numbers.

    The scanner never raises on malformed text. Reads return None once no further number
    can be recognised at the cursor, the caller decides whether that is an error.
    """

    def __init__(self, text, pos=0):
        self.text = text
        self.pos = pos
        self.length = len(text)

    def skip_separators(self):
        while self.pos < self.length and self.text[self.pos] in SEPARATORS:
            self.pos += 1

    def at_end(self):
        return self.pos >= self.length

    def peek(self):
        if self.pos < self.length:
            return self.text[self.pos]
        return None

    def at_boundary(self):
        """
        True if the cursor rests on a command letter or a closing parenthesis.
        """
        c = self.peek()
        return c is not None and c in BOUNDARIES

    def next_float(self):
        self.skip_separators()
        match = REGEX_NUMBER.match(self.text, self.pos)
        if match is None:
            return None
        self.pos = match.end()
        return float(match.group(0))

    def next_flag(self):
        """
        Arc flags are a single 0 or 1 and need no separator: `a1 1 0 0110 10`.
        """
        self.skip_separators()
        c = self.peek()
        if c == "0" or c == "1":
            self.pos += 1
            return c == "1"
        return None

    def has_number(self):
        self.skip_separators()
        return REGEX_NUMBER.match(self.text, self.pos) is not None


def parse_numbers(s):
    """
    Read numbers until the first command letter, closing parenthesis or unreadable text.

    @param s: text starting just after a command letter or opening parenthesis
    @return: list of floats read so far
    """
    numbers = []
    if not s:
        return numbers
    scanner = NumberScanner(s)
    while True:
        scanner.skip_separators()
        if scanner.at_end() or scanner.at_boundary():
            break
        value = scanner.next_float()
        if value is None:
            break
        numbers.append(value)
    return numbers
