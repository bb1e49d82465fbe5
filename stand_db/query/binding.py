"""
Parameter binding strategies.

Two calling conventions are supported, each implemented as a Binding
variant chosen once when a Connection is constructed:

    PositionalBinding
        ``col = ?`` placeholders, parameters supplied as an ordered list.
        Each value is tagged with a scalar bind code:

            int    -> "i"
            float  -> "d"
            str    -> "s"
            other  -> "s"   (coerced to str; bool becomes "1"/"0",
                             bytes are passed through)

    NamedBinding
        ``col = :col`` placeholders, parameters supplied as a mapping.

The placeholder marker itself is provided by the backend, so the same
strategies serve sqlite3 ("?" / ":name") and psycopg2 ("%s" / "%(name)s").
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Union

from ..errors import ConfigurationError


Params = Union[List[Any], Dict[str, Any]]

_NON_IDENT = re.compile(r"\W")


class ParamStyle(str, Enum):
    POSITIONAL = "positional"
    NAMED = "named"

    @classmethod
    def parse(cls, value: Union[str, "ParamStyle"]) -> "ParamStyle":
        """
        Resolve a backend-kind tag.

        Raises
        ------
        ConfigurationError
            If the value is not a known binding convention.
        """
        if isinstance(value, ParamStyle):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ConfigurationError(
                f"Invalid connection kind: {value!r} (expected 'positional' or 'named')"
            ) from None


# ----------------------------------------------------------------------
# Scalar bind codes
# ----------------------------------------------------------------------

def bind_code(value: Any) -> str:
    """
    Infer the scalar bind code for a positional parameter.

    bool is checked before int on purpose: it is a subclass of int but
    binds as a string.
    """
    if isinstance(value, bool):
        return "s"
    if isinstance(value, int):
        return "i"
    if isinstance(value, float):
        return "d"
    return "s"


def coerce(value: Any, code: str) -> Any:
    """Coerce a value to the representation implied by its bind code."""
    if value is None or code != "s" or isinstance(value, (str, bytes, bytearray)):
        return value
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def param_name(column: str) -> str:
    """Turn a column reference such as ``t.col`` into a bindable name."""
    return _NON_IDENT.sub("_", column)


# ----------------------------------------------------------------------
# Parameter collectors
# ----------------------------------------------------------------------

class ParamCollector(ABC):
    """Accumulates parameters while a statement is being built."""

    @abstractmethod
    def add(self, name: str, value: Any) -> str:
        """Register a value and return the placeholder text for it."""
        raise NotImplementedError

    @property
    @abstractmethod
    def values(self) -> Params:
        raise NotImplementedError

    @property
    def types(self) -> str:
        return ""


class _PositionalCollector(ParamCollector):
    def __init__(self, marker: str):
        self._marker = marker
        self._values: List[Any] = []
        self._types: List[str] = []

    def add(self, name: str, value: Any) -> str:
        code = bind_code(value)
        self._types.append(code)
        self._values.append(coerce(value, code))
        return self._marker

    @property
    def values(self) -> List[Any]:
        return self._values

    @property
    def types(self) -> str:
        return "".join(self._types)


class _NamedCollector(ParamCollector):
    def __init__(self, template: str):
        self._template = template
        self._values: Dict[str, Any] = {}

    def add(self, name: str, value: Any) -> str:
        base = param_name(name)
        key = base
        n = 2
        # `limit` may collide with a column literally called "limit"
        while key in self._values:
            key = f"{base}_{n}"
            n += 1
        self._values[key] = value
        return self._template.format(name=key)

    @property
    def values(self) -> Dict[str, Any]:
        return self._values


# ----------------------------------------------------------------------
# Strategies
# ----------------------------------------------------------------------

class Binding(ABC):
    """Strategy interface for one parameter binding convention."""

    style: ParamStyle

    @abstractmethod
    def collector(self) -> ParamCollector:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class PositionalBinding(Binding):
    style = ParamStyle.POSITIONAL

    def __init__(self, marker: str = "?"):
        self.marker = marker

    def collector(self) -> ParamCollector:
        return _PositionalCollector(self.marker)


class NamedBinding(Binding):
    style = ParamStyle.NAMED

    def __init__(self, template: str = ":{name}"):
        self.template = template

    def collector(self) -> ParamCollector:
        return _NamedCollector(self.template)


__all__ = [
    "Params",
    "ParamStyle",
    "bind_code",
    "coerce",
    "param_name",
    "ParamCollector",
    "Binding",
    "PositionalBinding",
    "NamedBinding",
]
