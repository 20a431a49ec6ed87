import re
from typing import Any

_LINE_BREAKS = re.compile(r"\s*[\r\n\x0b\x0c\x1c\x1d\x1e\x85\u2028\u2029]+\s*")
_BREAK_RUN = re.compile(r"[\r\n\x0b\x0c\x1c\x1d\x1e\x85\u2028\u2029]+")


class TextValidator:
    """Field presence checks and normalisation for catalog text fields.

    Catalog records are stored one field per line, so every title and author
    must fit on a single line.
    """

    @staticmethod
    def has_text(value: Any) -> bool:
        return isinstance(value, str) and bool(value.strip())

    @staticmethod
    def to_single_line(text: str) -> str:
        if text is None:
            return ""
        return _LINE_BREAKS.sub(" ", text).strip()

    @staticmethod
    def flatten_line_breaks(text: str) -> str:
        """Replace each run of line-break characters with a space, keeping other whitespace."""
        return _BREAK_RUN.sub(" ", text)
