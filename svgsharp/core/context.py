"""
Per-parse state that used to be process wide.

A ParseContext is created at the start of every parse and handed to every component
that needs it. It owns the unit consistency guard, the text substitution table and the
logging channels of that parse.
"""

from typing import Dict, Optional

from ..kernel.channel import Channel
from .exceptions import InconsistentUnitsError

LOG_ERROR = 1
LOG_WARN = 2
LOG_INFO = 3


class ParseContext:
    def __init__(self, text_substitutions: Optional[Dict[str, str]] = None, log_level=LOG_WARN):
        self.assumed_unit = None
        self.text_substitutions = dict(text_substitutions) if text_substitutions else {}
        self.log_level = log_level
        self.channel_error = Channel("svg/error")
        self.channel_warn = Channel("svg/warn")
        self.channel_info = Channel("svg/info")

    def check_unit(self, unit: str):
        """
        First unit wins. Any later, different unit aborts the parse.
        """
        if self.assumed_unit is None:
            self.assumed_unit = unit
        if self.assumed_unit != unit:
            raise InconsistentUnitsError(self.assumed_unit, unit)

    def substitute(self, text: str) -> str:
        return self.text_substitutions.get(text, text)

    def watch(self, monitor_function, level=LOG_INFO):
        """
        Send every message at or below the given level to monitor_function.
        """
        self.channel_error.watch(monitor_function)
        if level >= LOG_WARN:
            self.channel_warn.watch(monitor_function)
        if level >= LOG_INFO:
            self.channel_info.watch(monitor_function)

    def error(self, message: str):
        if self.log_level >= LOG_ERROR:
            self.channel_error(message)

    def warning(self, message: str):
        if self.log_level >= LOG_WARN:
            self.channel_warn(message)

    def info(self, message: str):
        if self.log_level >= LOG_INFO:
            self.channel_info(message)

    def close(self):
        self.text_substitutions.clear()
