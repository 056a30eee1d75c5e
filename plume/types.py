"""Runtime value model for Plume.

Plume has exactly four kinds of value, represented directly by Python
objects:

* Number -- ``float`` (there is no separate integer kind)
* String -- ``str``
* Bool   -- ``bool``
* Nil    -- the ``NIL`` singleton

All four are immutable, so binding a value to a second name never
introduces shared mutable state. Python considers ``True == 1.0``, so
code comparing values must look at the kind first (see `type_name`).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any
import math


class NilVal:
    """Marker object for the Plume `nil` value."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'nil'


NIL = NilVal()


def is_number(value: Any) -> bool:
    return isinstance(value, float) and not isinstance(value, bool)


def type_name(value: Any) -> str:
    """Return the Plume kind name of a runtime value."""
    if isinstance(value, bool):
        return 'Bool'
    if isinstance(value, float):
        return 'Number'
    if isinstance(value, str):
        return 'String'
    if isinstance(value, NilVal):
        return 'Nil'
    return type(value).__name__


def format_number(value: float) -> str:
    """Render a Number as canonical decimal text.

    The digits are those of Python's shortest round-trip repr, written out
    positionally (never with an exponent). Integral values drop the
    fractional part so that ``30.0`` prints as ``30``.
    """
    if math.isnan(value):
        return 'nan'
    if math.isinf(value):
        return 'inf' if value > 0 else '-inf'
    text = format(Decimal(repr(value)), 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text


def to_string(value: Any) -> str:
    """Convert a Plume value to the text used by `print` and by `+` concatenation."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, str):
        return value
    if isinstance(value, NilVal):
        return 'nil'
    return str(value)


def to_repr(value: Any) -> str:
    """Like `to_string` but quotes strings; used for the REPL echo and traces."""
    if isinstance(value, str):
        return '"' + value + '"'
    return to_string(value)
