"""Record schemas, fixed-length records and column chunks."""

from __future__ import annotations

import copy
import struct
from typing import Iterable, Sequence

from wsdb import bitmap
from wsdb.meta import RTField
from wsdb.rid import INVALID_RID, RID
from wsdb.types import (
    DBError,
    FieldType,
    StringOverflowError,
    TypeMismatchError,
)
from wsdb.value import (
    ArrayValue,
    BoolValue,
    StringValue,
    Value,
    cast_to,
    create_null_value,
    create_value,
)

_INT32 = struct.Struct("<i")
_FLOAT32 = struct.Struct("<f")
_BOOL = struct.Struct("<?")


class RecordSchema:
    """An ordered list of fields together with each field's byte offset in a record."""

    def __init__(self, fields: Iterable[RTField]) -> None:
        self.fields: list[RTField] = [copy.deepcopy(f) for f in fields]
        self.offsets: list[int] = []
        length = 0
        for rtfield in self.fields:
            self.offsets.append(length)
            length += rtfield.field.field_size
        self.record_length = length

    @property
    def field_count(self) -> int:
        return len(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def set_table_id(self, tid: int) -> None:
        """Mark every field as belonging to table ``tid``."""
        for rtfield in self.fields:
            rtfield.field.table_id = tid

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.fields):
            raise IndexError("Index out of range")

    def field_at(self, index: int) -> RTField:
        self._check_index(index)
        return self.fields[index]

    def field_offset(self, index: int) -> int:
        self._check_index(index)
        return self.offsets[index]

    def field_index(self, tid: int, name: str) -> int:
        """Position of the field named ``name`` of table ``tid``; the field count if absent."""
        return next(
            (
                i
                for i, f in enumerate(self.fields)
                if f.field.table_id == tid and f.field.field_name == name
            ),
            len(self.fields),
        )

    def rt_field_index(self, rtfield: RTField) -> int:
        """Position of a field matching ``rtfield`` (alias ignored); the field count if absent."""
        return next(
            (
                i
                for i, f in enumerate(self.fields)
                if f.is_agg == rtfield.is_agg
                and f.agg_type == rtfield.agg_type
                and f.field == rtfield.field
            ),
            len(self.fields),
        )

    def field_by_name(self, tid: int, name: str) -> RTField:
        index = self.field_index(tid, name)
        if index == len(self.fields):
            raise DBError(f"no field {name} in table {tid}")
        return self.fields[index]

    def has_field(self, tid: int, name: str) -> bool:
        return self.field_index(tid, name) != len(self.fields)

    def __str__(self) -> str:
        return ", ".join(str(f) for f in self.fields)


class Record:
    """An immutable row: a null map and fixed-length data laid out by a schema.

    Only the record id may be changed after construction.
    """

    def __init__(
        self,
        schema: RecordSchema,
        null_map: bytes | bytearray | memoryview,
        data: bytes | bytearray | memoryview,
        rid: RID = INVALID_RID,
    ) -> None:
        nullmap_size = bitmap.bitmap_size(schema.field_count)
        if len(data) < schema.record_length:
            raise ValueError(f"record data needs {schema.record_length} bytes, got {len(data)}")
        if len(null_map) < nullmap_size:
            raise ValueError(f"null map needs {nullmap_size} bytes, got {len(null_map)}")
        self.schema = schema
        self.data = bytes(data[: schema.record_length])
        self.null_map = bytes(null_map[:nullmap_size])
        self.rid = rid

    @classmethod
    def from_values(cls, schema: RecordSchema, values: Sequence[Value], rid: RID = INVALID_RID) -> Record:
        """Encode one value per field; ints and floats are converted to the field's type."""
        data = bytearray(schema.record_length)
        null_map = bytearray(bitmap.bitmap_size(schema.field_count))
        for i, (rtfield, value) in enumerate(zip(schema.fields, values, strict=True)):
            offset = schema.offsets[i]
            field = rtfield.field
            if value.is_null:
                bitmap.set_bit(null_map, i, True)
                continue
            mismatch = TypeMismatchError(f"{field.field_type.name} != {value.field_type.name}")
            if field.field_type == FieldType.TYPE_BOOL:
                if not isinstance(value, BoolValue):
                    raise mismatch
                _BOOL.pack_into(data, offset, value.value)
            elif field.field_type == FieldType.TYPE_INT:
                converted = cast_to(value, FieldType.TYPE_INT)
                _INT32.pack_into(data, offset, converted.value)  # type: ignore[attr-defined]
            elif field.field_type == FieldType.TYPE_FLOAT:
                converted = cast_to(value, FieldType.TYPE_FLOAT)
                _FLOAT32.pack_into(data, offset, converted.value)  # type: ignore[attr-defined]
            elif field.field_type == FieldType.TYPE_STRING:
                if not isinstance(value, StringValue):
                    raise mismatch
                encoded = value.value.encode("utf-8")
                if len(encoded) > field.field_size:
                    raise StringOverflowError(
                        f"field:{field.field_name}, size:{field.field_size}, requested:{len(encoded)}"
                    )
                data[offset : offset + len(encoded)] = encoded
            else:
                raise DBError("Unsupported field type")
        return cls(schema, null_map, data, rid)

    @classmethod
    def project(cls, schema: RecordSchema, other: Record) -> Record:
        """Pick the fields of ``schema`` out of ``other``, whose schema must contain them."""
        data = bytearray(schema.record_length)
        null_map = bytearray(bitmap.bitmap_size(schema.field_count))
        other_schema = other.schema
        for i, rtfield in enumerate(schema.fields):
            other_idx = other_schema.rt_field_index(rtfield)
            if other_idx == other_schema.field_count:
                raise DBError("Field not found in other record")
            size = rtfield.field.field_size
            src = other_schema.offsets[other_idx]
            dst = schema.offsets[i]
            data[dst : dst + size] = other.data[src : src + size]
            if bitmap.get_bit(other.null_map, other_idx):
                bitmap.set_bit(null_map, i, True)
        return cls(schema, null_map, data, INVALID_RID)

    @classmethod
    def concat(cls, schema: RecordSchema, rec1: Record, rec2: Record) -> Record:
        """Join two records side by side under a schema that combines theirs."""
        if schema.field_count != rec1.schema.field_count + rec2.schema.field_count:
            raise DBError("Field count mismatch")
        if schema.record_length != rec1.schema.record_length + rec2.schema.record_length:
            raise DBError("Record length mismatch")
        null_map = bytearray(bitmap.bitmap_size(schema.field_count))
        first = rec1.schema.field_count
        for i in range(first):
            if bitmap.get_bit(rec1.null_map, i):
                bitmap.set_bit(null_map, i, True)
        for i in range(rec2.schema.field_count):
            if bitmap.get_bit(rec2.null_map, i):
                bitmap.set_bit(null_map, first + i, True)
        return cls(schema, null_map, rec1.data + rec2.data, INVALID_RID)

    @classmethod
    def all_null(cls, schema: RecordSchema) -> Record:
        """A record whose every field is null."""
        null_map = b"\xff" * bitmap.bitmap_size(schema.field_count)
        return cls(schema, null_map, bytes(schema.record_length), INVALID_RID)

    def is_null(self, index: int) -> bool:
        self.schema._check_index(index)
        return bitmap.get_bit(self.null_map, index)

    def value_at(self, index: int) -> Value:
        """Decode the value of field ``index``."""
        rtfield = self.schema.field_at(index)
        field = rtfield.field
        if bitmap.get_bit(self.null_map, index):
            return create_null_value(field.field_type)
        offset = self.schema.offsets[index]
        return create_value(field.field_type, self.data[offset : offset + field.field_size], field.field_size)

    def values(self) -> list[Value]:
        return [self.value_at(i) for i in range(self.schema.field_count)]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self.schema is other.schema and self.data == other.data and self.null_map == other.null_map

    def __hash__(self) -> int:
        result = 0
        for i, rtfield in enumerate(self.schema.fields):
            if bitmap.get_bit(self.null_map, i):
                continue
            field = rtfield.field
            offset = self.schema.offsets[i]
            if field.field_type == FieldType.TYPE_BOOL:
                result ^= hash(_BOOL.unpack_from(self.data, offset)[0])
            elif field.field_type == FieldType.TYPE_INT:
                result ^= hash(_INT32.unpack_from(self.data, offset)[0])
            elif field.field_type == FieldType.TYPE_FLOAT:
                result ^= hash(_FLOAT32.unpack_from(self.data, offset)[0])
            elif field.field_type == FieldType.TYPE_STRING:
                result ^= hash(self.data[offset : offset + field.field_size])
            else:
                raise DBError("Unsupported field type to hash")
        return result

    def __repr__(self) -> str:
        return f"Record({', '.join(str(v) for v in self.values())}, rid={self.rid})"


def compare_records(lrec: Record, rrec: Record) -> int:
    """Compare field by field: -1, 0 or 1; a null sorts before any value."""
    if lrec.schema.field_count != rrec.schema.field_count:
        raise DBError("field count mismatch")
    for i in range(lrec.schema.field_count):
        lval = lrec.value_at(i)
        rval = rrec.value_at(i)
        if lval.is_null and rval.is_null:
            continue
        if lval.is_null or rval.is_null:
            return -1 if lval.is_null else 1
        if lval < rval:
            return -1
        if lval > rval:
            return 1
    return 0


class Chunk:
    """A set of columns, one array value per field of a schema."""

    def __init__(self, schema: RecordSchema, cols: Iterable[ArrayValue]) -> None:
        self.schema = schema
        self.cols: list[ArrayValue] = list(cols)
        if schema.field_count != len(self.cols):
            raise DBError("Field count mismatch")

    def col(self, index: int) -> ArrayValue:
        return self.cols[index]

    def __len__(self) -> int:
        return len(self.cols)