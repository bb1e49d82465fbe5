"""
Input sanitization for values headed to HTML output.
"""

from __future__ import annotations

import html
from typing import Any


def sanitize(data: Any) -> Any:
    """
    Trim and HTML-escape strings (quotes included), recursing into
    dicts, lists and tuples. Other values are returned unchanged.
    """
    if isinstance(data, dict):
        return {key: sanitize(value) for key, value in data.items()}
    if isinstance(data, list):
        return [sanitize(value) for value in data]
    if isinstance(data, tuple):
        return tuple(sanitize(value) for value in data)
    if isinstance(data, str):
        return html.escape(data.strip(), quote=True)
    return data


__all__ = ["sanitize"]
