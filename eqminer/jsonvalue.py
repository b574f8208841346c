"""A typed JSON value model with objects kept as ordered name/value pairs."""

from __future__ import annotations

import copy
import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_UINT64_MAX = (1 << 64) - 1


class ValueType(enum.Enum):
    """The kind of data a JSON value holds."""

    OBJ = "obj"
    ARRAY = "array"
    STR = "str"
    BOOL = "bool"
    INT = "int"
    REAL = "real"
    NULL = "null"


class TypeMismatchError(RuntimeError):
    """Raised when a value is read as a type it does not hold."""


class ErrorPosition(Exception):
    """A parse error located by line and column."""

    def __init__(self, line: int = 0, column: int = 0, reason: str = "") -> None:
        super().__init__(line, column, reason)
        self.line = line
        self.column = column
        self.reason = reason

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ErrorPosition):
            return NotImplemented
        return (self.reason, self.line, self.column) == (
            other.reason,
            other.line,
            other.column,
        )

    def __hash__(self) -> int:
        return hash((self.reason, self.line, self.column))

    def __str__(self) -> str:
        return f"{self.reason} (line {self.line}, column {self.column})"


def _coerce(item: Any) -> "Value":
    return item if isinstance(item, Value) else Value(item)


def _to_signed64(number: int) -> int:
    number &= _UINT64_MAX
    return number - (1 << 64) if number > _INT64_MAX else number


class Value:
    """A JSON value: null, bool, 64-bit integer, real, string, array or object.

    Objects are lists of :class:`Pair`, keeping order and duplicate names.
    """

    __slots__ = ("_type", "_data", "_is_uint64")

    def __init__(self, value: Any = None) -> None:
        self._is_uint64 = False
        if isinstance(value, Value):
            self._type = value._type
            self._data = copy.deepcopy(value._data)
            self._is_uint64 = value._is_uint64
        elif value is None:
            self._type, self._data = ValueType.NULL, None
        elif isinstance(value, bool):
            self._type, self._data = ValueType.BOOL, value
        elif isinstance(value, int):
            if not _INT64_MIN <= value <= _INT64_MAX:
                raise OverflowError(f"integer {value} does not fit in 64 signed bits")
            self._type, self._data = ValueType.INT, value
        elif isinstance(value, float):
            self._type, self._data = ValueType.REAL, value
        elif isinstance(value, str):
            self._type, self._data = ValueType.STR, value
        elif isinstance(value, Mapping):
            pairs = []
            for name, item in value.items():
                if not isinstance(name, str):
                    raise TypeError(f"object member names must be str, not {type(name).__name__}")
                pairs.append(Pair(name, _coerce(item)))
            self._type, self._data = ValueType.OBJ, pairs
        elif isinstance(value, (list, tuple)):
            if value and all(isinstance(item, Pair) for item in value):
                self._type = ValueType.OBJ
                self._data = [Pair(p.name, Value(p.value)) for p in value]
            else:
                self._type = ValueType.ARRAY
                self._data = [Value(item) if isinstance(item, Value) else _coerce(item) for item in value]
        else:
            raise TypeError(f"cannot make a JSON value from {type(value).__name__}")

    @classmethod
    def from_uint64(cls, value: int) -> "Value":
        """Make an integer value marked as unsigned 64-bit."""
        if not 0 <= value <= _UINT64_MAX:
            raise OverflowError(f"integer {value} does not fit in 64 unsigned bits")
        result = cls(_to_signed64(value))
        result._is_uint64 = True
        return result

    @classmethod
    def from_python(cls, data: Any) -> "Value":
        """Convert nested Python data, using unsigned storage for large integers."""
        if isinstance(data, Value):
            return cls(data)
        if isinstance(data, int) and not isinstance(data, bool) and _INT64_MAX < data <= _UINT64_MAX:
            return cls.from_uint64(data)
        if isinstance(data, Mapping):
            return cls({name: cls.from_python(item) for name, item in data.items()})
        if isinstance(data, (list, tuple)) and not (data and all(isinstance(i, Pair) for i in data)):
            return cls([cls.from_python(item) for item in data])
        return cls(data)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Value):
            return NotImplemented
        if self._type is not other._type:
            return False
        return self._data == other._data

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._is_uint64:
            return f"Value.from_uint64({self.as_uint64()!r})"
        return f"Value({self._data!r})"

    def type(self) -> ValueType:
        """Return the kind of data held."""
        return self._type

    def is_uint64(self) -> bool:
        """True when the integer was stored as unsigned 64-bit."""
        return self._is_uint64

    def is_null(self) -> bool:
        """True for the null value."""
        return self._type is ValueType.NULL

    def _check_type(self, expected: ValueType) -> None:
        if self._type is not expected:
            raise TypeMismatchError(
                f"value is type {self._type.value}, expected {expected.value}"
            )

    def as_str(self) -> str:
        self._check_type(ValueType.STR)
        return self._data

    def as_object(self) -> list["Pair"]:
        """Return the object's pairs; the list is the value's own and may be changed."""
        self._check_type(ValueType.OBJ)
        return self._data

    def as_array(self) -> list["Value"]:
        """Return the array's items; the list is the value's own and may be changed."""
        self._check_type(ValueType.ARRAY)
        return self._data

    def as_bool(self) -> bool:
        self._check_type(ValueType.BOOL)
        return self._data

    def as_int(self) -> int:
        """Return the integer truncated to 32 signed bits."""
        self._check_type(ValueType.INT)
        number = self._data & 0xFFFFFFFF
        return number - (1 << 32) if number > 0x7FFFFFFF else number

    def as_int64(self) -> int:
        self._check_type(ValueType.INT)
        return self._data

    def as_uint64(self) -> int:
        self._check_type(ValueType.INT)
        return self._data & _UINT64_MAX

    def as_real(self) -> float:
        """Return a real; integers are converted."""
        if self._type is ValueType.INT:
            return float(self.as_uint64() if self._is_uint64 else self.as_int64())
        self._check_type(ValueType.REAL)
        return self._data

    def get_value(self, kind: type) -> Any:
        """Read the value as a Python type: bool, int, float, str, list or dict."""
        readers = {
            bool: self.as_bool,
            int: self.as_int64,
            float: self.as_real,
            str: self.as_str,
            list: self.as_array,
            dict: lambda: obj_to_map(self.as_object()),
        }
        try:
            reader = readers[kind]
        except (KeyError, TypeError):
            raise TypeError(f"unsupported value kind: {kind!r}") from None
        return reader()


@dataclass
class Pair:
    """A named member of a JSON object."""

    name: str
    value: Value = field(default_factory=Value)

    def __post_init__(self) -> None:
        self.value = _coerce(self.value)


def find_value(obj: list[Pair], name: str) -> Value:
    """Return the value of the first member called ``name``, or null."""
    return next((pair.value for pair in obj if pair.name == name), Value())


def obj_to_map(obj: list[Pair]) -> dict[str, Value]:
    """Turn object pairs into a dict; later duplicates win."""
    return {pair.name: pair.value for pair in obj}


def map_to_obj(mapping: Mapping[str, Any]) -> list[Pair]:
    """Turn a mapping into object pairs ordered by name."""
    return [Pair(name, _coerce(item)) for name, item in sorted(mapping.items())]