"""Typed, nullable values used in records, expressions and aggregation."""

from __future__ import annotations

import struct
from typing import Iterable

from wsdb.types import (
    DBError,
    DivideByZeroError,
    FieldType,
    TypeMismatchError,
    UnsupportedOperationError,
)

_INT32 = struct.Struct("<i")
_FLOAT32 = struct.Struct("<f")
_BOOL = struct.Struct("<?")

NULL_STRING = "(null)"


def _wrap_int32(value: int) -> int:
    return ((value + 2**31) % 2**32) - 2**31


def _to_float32(value: float) -> float:
    return _FLOAT32.unpack(_FLOAT32.pack(value))[0]


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b > 0) else -quotient


class Value:
    """Base of all values: a field type, a size in bytes and a null flag."""

    def __init__(self, field_type: FieldType, size: int, is_null: bool) -> None:
        self.field_type = field_type
        self.size = size
        self.is_null = is_null

    def _check(self, other: Value) -> None:
        if self.field_type != other.field_type:
            raise TypeMismatchError(
                f"Type mismatch: {self.field_type.name} != {other.field_type.name}"
            )

    def _equals(self, other: Value) -> bool:
        raise NotImplementedError

    def _less(self, other: Value) -> bool:
        raise NotImplementedError

    def _greater(self, other: Value) -> bool:
        raise NotImplementedError

    def _copy_from(self, other: Value) -> None:
        self.size = other.size
        self.is_null = other.is_null

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        self._check(other)
        if self.is_null and other.is_null:
            return True
        if self.is_null or other.is_null:
            return False
        return self._equals(other)

    __hash__ = None  # type: ignore[assignment]

    def __lt__(self, other: Value) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        self._check(other)
        if self.is_null or other.is_null:
            return False
        return self._less(other)

    def __gt__(self, other: Value) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        self._check(other)
        if self.is_null or other.is_null:
            return False
        return self._greater(other)

    def __le__(self, other: Value) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return not self.is_null and not other.is_null and not self > other

    def __ge__(self, other: Value) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return not self.is_null and not other.is_null and not self < other

    def add(self, other: Value) -> Value:
        """Add ``other`` into this value in place and return this value."""
        raise UnsupportedOperationError(self.field_type.name)

    def divide(self, k: int) -> Value:
        """Divide this value by ``k`` in place and return it; used for averages."""
        raise UnsupportedOperationError(self.field_type.name)

    def __str__(self) -> str:
        raise DBError("value of unknown kind has no text form")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self})"


class _ScalarValue(Value):
    value: object

    def _equals(self, other: Value) -> bool:
        return self.value == other.value  # type: ignore[attr-defined]

    def _less(self, other: Value) -> bool:
        return self.value < other.value  # type: ignore[attr-defined,operator]

    def _greater(self, other: Value) -> bool:
        return self.value > other.value  # type: ignore[attr-defined,operator]

    def _copy_from(self, other: Value) -> None:
        super()._copy_from(other)
        self.value = other.value  # type: ignore[attr-defined]


class IntValue(_ScalarValue):
    """A 32-bit signed integer."""

    def __init__(self, value: int = 0, is_null: bool = False) -> None:
        super().__init__(FieldType.TYPE_INT, _INT32.size, is_null)
        self.value = _wrap_int32(int(value))

    def add(self, other: Value) -> Value:
        self._check(other)
        if self.is_null:
            self._copy_from(other)
        else:
            self.value = _wrap_int32(self.value + other.value)  # type: ignore[attr-defined]
        return self

    def divide(self, k: int) -> Value:
        if self.is_null:
            return self
        if k == 0:
            raise DivideByZeroError("Divide by zero")
        self.value = _wrap_int32(_trunc_div(self.value, k))
        return self

    def __str__(self) -> str:
        return NULL_STRING if self.is_null else str(self.value)


class FloatValue(_ScalarValue):
    """A single-precision floating point number."""

    def __init__(self, value: float = 0.0, is_null: bool = False) -> None:
        super().__init__(FieldType.TYPE_FLOAT, _FLOAT32.size, is_null)
        self.value = _to_float32(float(value))

    def add(self, other: Value) -> Value:
        self._check(other)
        if self.is_null:
            self._copy_from(other)
        else:
            self.value = _to_float32(self.value + other.value)  # type: ignore[attr-defined]
        return self

    def divide(self, k: int) -> Value:
        if self.is_null:
            return self
        if k == 0:
            raise DivideByZeroError("Divide by zero")
        self.value = _to_float32(self.value / float(k))
        return self

    def __str__(self) -> str:
        return NULL_STRING if self.is_null else f"{self.value:.6f}"


class BoolValue(_ScalarValue):
    """A boolean."""

    def __init__(self, value: bool = False, is_null: bool = False) -> None:
        super().__init__(FieldType.TYPE_BOOL, _BOOL.size, is_null)
        self.value = bool(value)

    def __str__(self) -> str:
        return NULL_STRING if self.is_null else str(int(self.value))


def _cut_string(raw: str | bytes, size: int | None = None) -> bytes:
    data = raw.encode("utf-8") if isinstance(raw, str) else bytes(raw)
    data = data.split(b"\x00", 1)[0]
    return data if size is None else data[:size]


class StringValue(_ScalarValue):
    """A character string; text after a NUL character is dropped."""

    def __init__(self, value: str | bytes = "", size: int | None = None, is_null: bool = False) -> None:
        data = _cut_string(value, size)
        super().__init__(FieldType.TYPE_STRING, len(data), is_null)
        self._value = data.decode("utf-8", errors="ignore")

    @property
    def value(self) -> str:  # type: ignore[override]
        return self._value

    @value.setter
    def value(self, new_value: str | bytes) -> None:
        self._value = _cut_string(new_value).decode("utf-8", errors="ignore")

    def add(self, other: Value) -> Value:
        self._check(other)
        if self.is_null:
            self._copy_from(other)
        else:
            self.value = self._value + other.value  # type: ignore[attr-defined]
        return self

    def __str__(self) -> str:
        return NULL_STRING if self.is_null else self._value


class ArrayValue(Value):
    """An ordered list of values; its size is the sum of its elements' sizes."""

    def __init__(self, values: Iterable[Value] | None = None, is_null: bool = False) -> None:
        super().__init__(FieldType.TYPE_ARRAY, 0, is_null)
        self.values: list[Value] = list(values) if values is not None else []
        self.size = sum(v.size for v in self.values)

    def _equals(self, other: Value) -> bool:
        rhs = other.values  # type: ignore[attr-defined]
        if len(self.values) != len(rhs):
            return False
        return all(a == b for a, b in zip(self.values, rhs))

    def _less(self, other: Value) -> bool:
        rhs = other.values  # type: ignore[attr-defined]
        if len(self.values) != len(rhs):
            return len(self.values) < len(rhs)
        return any(a < b for a, b in zip(self.values, rhs))

    def _greater(self, other: Value) -> bool:
        rhs = other.values  # type: ignore[attr-defined]
        if len(self.values) != len(rhs):
            return len(self.values) > len(rhs)
        return any(a > b for a, b in zip(self.values, rhs))

    def _copy_from(self, other: Value) -> None:
        super()._copy_from(other)
        self.values = list(other.values)  # type: ignore[attr-defined]

    def add(self, other: Value) -> Value:
        self._check(other)
        if self.is_null:
            self._copy_from(other)
            return self
        rhs = other.values  # type: ignore[attr-defined]
        if len(self.values) != len(rhs):
            raise TypeMismatchError(f"sizes: {len(self.values)}, {len(rhs)}")
        for mine, theirs in zip(self.values, rhs):
            mine.add(theirs)
        return self

    def divide(self, k: int) -> Value:
        for v in self.values:
            v.divide(k)
        return self

    def contains(self, value: Value) -> bool:
        """Whether any element equals ``value``."""
        return any(v == value for v in self.values)

    def append(self, value: Value) -> None:
        self.values.append(value)
        self.size += value.size

    def __len__(self) -> int:
        return len(self.values)

    def __str__(self) -> str:
        if self.is_null:
            return NULL_STRING
        return "[" + ", ".join(str(v) for v in self.values) + "]"


def value_max(lval: Value, rval: Value) -> Value:
    """The larger of two values, ignoring a null one."""
    if lval.is_null:
        return rval
    if rval.is_null:
        return lval
    return lval if lval > rval else rval


def value_min(lval: Value, rval: Value) -> Value:
    """The smaller of two values, ignoring a null one."""
    if lval.is_null:
        return rval
    if rval.is_null:
        return lval
    return lval if lval < rval else rval


def create_value(field_type: FieldType, data: bytes | bytearray | memoryview, size: int | None = None) -> Value:
    """Decode a non-null value of ``field_type`` from its stored bytes."""
    if field_type == FieldType.TYPE_BOOL:
        return BoolValue(bytes(data[:1]) != b"\x00")
    if field_type == FieldType.TYPE_INT:
        return IntValue(_INT32.unpack_from(data)[0])
    if field_type == FieldType.TYPE_FLOAT:
        return FloatValue(_FLOAT32.unpack_from(data)[0])
    if field_type == FieldType.TYPE_STRING:
        return StringValue(bytes(data), size)
    raise DBError("Unsupported field type")


def create_null_value(field_type: FieldType) -> Value:
    """A null value of ``field_type``."""
    if field_type == FieldType.TYPE_INT:
        return IntValue(0, True)
    if field_type == FieldType.TYPE_FLOAT:
        return FloatValue(0.0, True)
    if field_type == FieldType.TYPE_BOOL:
        return BoolValue(False, True)
    if field_type == FieldType.TYPE_STRING:
        return StringValue("", 0, True)
    if field_type == FieldType.TYPE_ARRAY:
        return ArrayValue([], True)
    raise DBError("Unknown FieldType")


def align_types(lval: Value, rval: Value) -> tuple[Value, Value]:
    """Bring two values to one type, widening an int to float; return both."""
    if lval.field_type == rval.field_type:
        return lval, rval
    if lval.field_type == FieldType.TYPE_INT and rval.field_type == FieldType.TYPE_FLOAT:
        return FloatValue(float(lval.value)), rval  # type: ignore[attr-defined]
    if lval.field_type == FieldType.TYPE_FLOAT and rval.field_type == FieldType.TYPE_INT:
        return lval, FloatValue(float(rval.value))  # type: ignore[attr-defined]
    raise TypeMismatchError(f"Type mismatch: {lval.field_type.name} != {rval.field_type.name}")


def cast_to(value: Value, field_type: FieldType) -> Value:
    """Convert between int and float; any other conversion is a type mismatch."""
    if value.field_type == field_type:
        return value
    mismatch = TypeMismatchError(f"Type mismatch {value.field_type.name} != {field_type.name}")
    if value.field_type == FieldType.TYPE_INT:
        if field_type != FieldType.TYPE_FLOAT:
            raise mismatch
        if value.is_null:
            return create_null_value(field_type)
        return FloatValue(float(value.value))  # type: ignore[attr-defined]
    if value.field_type == FieldType.TYPE_FLOAT:
        if field_type != FieldType.TYPE_INT:
            raise mismatch
        if value.is_null:
            return create_null_value(field_type)
        return IntValue(int(value.value))  # type: ignore[attr-defined]
    raise mismatch