import ast
from configparser import ConfigParser, MissingSectionHeaderError, NoSectionError
from pathlib import Path
from typing import Any, Union


class Settings:
    """
    Read only view of an ini file: a dictionary of sections, each a dictionary of string
    values. Render and parser options are kept in the `render` and `parser` sections.
    """

    def __init__(self, filename=None):
        self._config_file = Path(filename) if filename is not None else None
        self._config_dict = {}
        if self._config_file is not None:
            self.read_configuration()

    def read_configuration(self):
        try:
            parser = ConfigParser()
            parser.read(self._config_file, encoding="utf-8")
        except (PermissionError, NoSectionError, MissingSectionHeaderError):
            return
        self._load(parser)

    def read_string(self, text: str):
        """
        Read ini formatted text, as if it were the configuration file.
        """
        parser = ConfigParser()
        parser.read_string(text)
        self._load(parser)

    def _load(self, parser):
        for section in parser.sections():
            config_section = self._config_dict.setdefault(section, dict())
            for option in parser.options(section):
                config_section[option] = parser.get(section, option)

    def read_persistent(
        self,
        t: type,
        section: str,
        key: str,
        default: Union[str, int, float, bool, list, tuple] = None,
    ) -> Any:
        """
        Value of an item converted to the given type.

        @param t: datatype.
        @param section: storing section
        @param key: reference item
        @param default: default value if item does not exist or does not convert.
        @return: value
        """
        try:
            value = self._config_dict[section][key]
            if t == bool:
                return value == "True"
            elif t in (list, tuple):
                try:
                    return ast.literal_eval(value)
                except (ValueError, SyntaxError):
                    return default
            return t(value)
        except (KeyError, ValueError):
            return default
