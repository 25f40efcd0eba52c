"""JavaScript literal rendering."""

from typing import Any


def quote_string(value: str) -> str:
    """Render a JavaScript single-quoted string literal."""
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def js_literal(value: Any) -> str:
    """Render a non-string Python value as JavaScript source."""
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return "null"
    return str(value)
