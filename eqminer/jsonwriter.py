"""Render :class:`~eqminer.jsonvalue.Value` trees as JSON text."""

from __future__ import annotations

import io
from typing import Any, TextIO

from eqminer.jsonvalue import Pair, Value, ValueType

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

_INDENT = "    "


def _unicode_escape(code: int) -> str:
    if code > 0xFFFF:
        code -= 0x10000
        high = 0xD800 + (code >> 10)
        low = 0xDC00 + (code & 0x3FF)
        return f"\\u{high:04X}\\u{low:04X}"
    return f"\\u{code:04X}"


def add_esc_chars(text: str) -> str:
    """Escape a string for use between JSON quotes.

    Quotes, backslashes and the usual control characters get short escapes;
    any other character outside printable ASCII becomes ``\\uXXXX``.
    """
    parts = []
    for char in text:
        escaped = _ESCAPES.get(char)
        if escaped is not None:
            parts.append(escaped)
        elif 0x20 <= ord(char) < 0x7F:
            parts.append(char)
        else:
            parts.append(_unicode_escape(ord(char)))
    return "".join(parts)


class _Generator:
    def __init__(self, stream: TextIO, pretty: bool) -> None:
        self._out = stream
        self._pretty = pretty
        self._level = 0

    def _indent(self) -> None:
        if self._pretty:
            self._out.write(_INDENT * self._level)

    def _space(self) -> None:
        if self._pretty:
            self._out.write(" ")

    def _new_line(self) -> None:
        if self._pretty:
            self._out.write("\n")

    def _string(self, text: str) -> None:
        self._out.write('"' + add_esc_chars(text) + '"')

    def _member(self, pair: Pair) -> None:
        self._string(pair.name)
        self._space()
        self._out.write(":")
        self._space()
        self.output(pair.value)

    def _container(self, items: list, start: str, end: str, emit) -> None:
        self._out.write(start)
        self._new_line()
        self._level += 1
        last = len(items) - 1
        for position, item in enumerate(items):
            self._indent()
            emit(item)
            if position != last:
                self._out.write(",")
            self._new_line()
        self._level -= 1
        self._indent()
        self._out.write(end)

    def output(self, value: Value) -> None:
        kind = value.type()
        if kind is ValueType.OBJ:
            self._container(value.as_object(), "{", "}", self._member)
        elif kind is ValueType.ARRAY:
            self._container(value.as_array(), "[", "]", self.output)
        elif kind is ValueType.STR:
            self._string(value.as_str())
        elif kind is ValueType.BOOL:
            self._out.write("true" if value.as_bool() else "false")
        elif kind is ValueType.INT:
            number = value.as_uint64() if value.is_uint64() else value.as_int64()
            self._out.write(str(number))
        elif kind is ValueType.REAL:
            self._out.write(f"{value.as_real():.8f}")
        else:
            self._out.write("null")


def write_stream(value: Any, stream: TextIO, pretty: bool = False) -> None:
    """Write ``value`` as JSON to a text stream, optionally indented."""
    if not isinstance(value, Value):
        value = Value(value)
    _Generator(stream, pretty).output(value)


def write(value: Any) -> str:
    """Return ``value`` as compact JSON text."""
    buffer = io.StringIO()
    write_stream(value, buffer, False)
    return buffer.getvalue()


def write_formatted(value: Any) -> str:
    """Return ``value`` as indented JSON text."""
    buffer = io.StringIO()
    write_stream(value, buffer, True)
    return buffer.getvalue()