import struct

import pytest

from wsdb.meta import FieldSchema, RTField
from wsdb.record import Chunk, Record, RecordSchema, compare_records
from wsdb.rid import INVALID_RID, RID
from wsdb.types import (
    AggType,
    DBError,
    FieldType,
    StringOverflowError,
    TypeMismatchError,
)
from wsdb.value import ArrayValue, BoolValue, FloatValue, IntValue, StringValue, create_null_value


def _field(name, ftype, size, alias=""):
    return RTField(field=FieldSchema(field_name=name, field_type=ftype, field_size=size), alias=alias)


def _schema():
    return RecordSchema(
        [
            _field("id", FieldType.TYPE_INT, 4),
            _field("score", FieldType.TYPE_FLOAT, 4),
            _field("name", FieldType.TYPE_STRING, 8),
            _field("flag", FieldType.TYPE_BOOL, 1),
        ]
    )


def test_schema_offsets_and_length():
    schema = _schema()
    assert schema.offsets == [0, 4, 8, 16]
    assert schema.record_length == 17
    assert schema.field_count == 4
    assert schema.field_offset(2) == 8


def test_schema_index_out_of_range():
    schema = _schema()
    with pytest.raises(IndexError):
        schema.field_at(4)
    with pytest.raises(IndexError):
        schema.field_offset(10)


def test_set_table_id_and_lookup():
    schema = _schema()
    schema.set_table_id(7)
    assert schema.field_index(7, "name") == 2
    assert schema.field_index(8, "name") == 4
    assert schema.has_field(7, "flag")
    assert not schema.has_field(7, "missing")
    assert schema.field_by_name(7, "score").field.field_type == FieldType.TYPE_FLOAT
    with pytest.raises(DBError):
        schema.field_by_name(7, "missing")


def test_schema_copies_fields():
    fields = [_field("id", FieldType.TYPE_INT, 4)]
    schema = RecordSchema(fields)
    schema.set_table_id(3)
    assert fields[0].field.table_id == -1
    assert schema.field_at(0).field.table_id == 3


def test_rt_field_index_ignores_alias_but_not_agg():
    schema = _schema()
    assert schema.rt_field_index(_field("score", FieldType.TYPE_FLOAT, 4, alias="s")) == 1
    agg = _field("score", FieldType.TYPE_FLOAT, 4)
    agg.is_agg = True
    agg.agg_type = AggType.AGG_SUM
    assert schema.rt_field_index(agg) == 4


def test_schema_str():
    schema = RecordSchema([_field("a", FieldType.TYPE_INT, 4), _field("b", FieldType.TYPE_FLOAT, 4)])
    assert str(schema) == "#.a:TYPE_INT(4), #.b:TYPE_FLOAT(4)"
    assert str(RecordSchema([])) == ""


def test_from_values_round_trip():
    schema = _schema()
    values = [IntValue(42), FloatValue(1.5), StringValue("alice"), BoolValue(True)]
    rec = Record.from_values(schema, values, RID(1, 2))
    assert rec.rid == RID(1, 2)
    assert rec.value_at(0) == IntValue(42)
    assert rec.value_at(1) == FloatValue(1.5)
    assert rec.value_at(2) == StringValue("alice")
    assert rec.value_at(3) == BoolValue(True)
    assert rec.data[0:4] == struct.pack("<i", 42)
    assert rec.null_map == b"\x00"


def test_from_values_nulls():
    schema = _schema()
    values = [create_null_value(FieldType.TYPE_INT), FloatValue(2.0), create_null_value(FieldType.TYPE_STRING), BoolValue(False)]
    rec = Record.from_values(schema, values, INVALID_RID)
    assert rec.value_at(0).is_null
    assert rec.value_at(2).is_null
    assert not rec.value_at(1).is_null
    assert rec.is_null(0) and not rec.is_null(3)


def test_from_values_casts_numbers():
    schema = _schema()
    rec = Record.from_values(schema, [FloatValue(3.75), IntValue(2), StringValue("x"), BoolValue(False)], INVALID_RID)
    assert rec.value_at(0) == IntValue(3)
    assert rec.value_at(1) == FloatValue(2.0)


def test_from_values_type_mismatch():
    schema = _schema()
    with pytest.raises(TypeMismatchError):
        Record.from_values(schema, [StringValue("a"), FloatValue(1.0), StringValue("x"), BoolValue(True)], INVALID_RID)
    with pytest.raises(TypeMismatchError):
        Record.from_values(schema, [IntValue(1), FloatValue(1.0), IntValue(5), BoolValue(True)], INVALID_RID)
    with pytest.raises(TypeMismatchError):
        Record.from_values(schema, [IntValue(1), FloatValue(1.0), StringValue("x"), IntValue(1)], INVALID_RID)


def test_from_values_string_overflow():
    schema = _schema()
    with pytest.raises(StringOverflowError):
        Record.from_values(schema, [IntValue(1), FloatValue(1.0), StringValue("waytoolong"), BoolValue(True)], INVALID_RID)


def test_string_of_exact_field_size():
    schema = _schema()
    rec = Record.from_values(schema, [IntValue(1), FloatValue(1.0), StringValue("abcdefgh"), BoolValue(True)], INVALID_RID)
    assert rec.value_at(2) == StringValue("abcdefgh")


def test_raw_constructor_round_trip():
    schema = _schema()
    original = Record.from_values(schema, [IntValue(9), FloatValue(0.5), StringValue("bob"), BoolValue(True)], INVALID_RID)
    copy = Record(schema, original.null_map, original.data, RID(3, 4))
    assert copy == original
    assert copy.rid == RID(3, 4)
    with pytest.raises(ValueError):
        Record(schema, b"\x00", b"\x00" * 3)


def test_all_null():
    schema = _schema()
    rec = Record.all_null(schema)
    assert all(rec.value_at(i).is_null for i in range(schema.field_count))
    assert rec.rid == INVALID_RID


def test_equality_requires_same_schema_object():
    s1 = _schema()
    s2 = _schema()
    values = [IntValue(1), FloatValue(1.0), StringValue("x"), BoolValue(True)]
    a = Record.from_values(s1, values, INVALID_RID)
    b = Record.from_values(s1, values, RID(0, 1))
    c = Record.from_values(s2, values, INVALID_RID)
    assert a == b
    assert hash(a) == hash(b)
    assert a != c
    d = Record.from_values(s1, [IntValue(2), FloatValue(1.0), StringValue("x"), BoolValue(True)], INVALID_RID)
    assert a != d


def test_hash_usable_in_set():
    schema = _schema()
    values = [IntValue(1), FloatValue(1.0), StringValue("x"), BoolValue(True)]
    recs = {Record.from_values(schema, values, INVALID_RID), Record.from_values(schema, values, RID(1, 1))}
    assert len(recs) == 1


def test_project():
    schema = _schema()
    rec = Record.from_values(
        schema, [IntValue(5), create_null_value(FieldType.TYPE_FLOAT), StringValue("zed"), BoolValue(True)], RID(1, 1)
    )
    sub = RecordSchema([_field("name", FieldType.TYPE_STRING, 8), _field("score", FieldType.TYPE_FLOAT, 4)])
    projected = Record.project(sub, rec)
    assert projected.value_at(0) == StringValue("zed")
    assert projected.value_at(1).is_null
    assert projected.rid == INVALID_RID


def test_project_missing_field():
    schema = _schema()
    rec = Record.all_null(schema)
    other = RecordSchema([_field("absent", FieldType.TYPE_INT, 4)])
    with pytest.raises(DBError):
        Record.project(other, rec)


def test_concat():
    left = RecordSchema([_field("a", FieldType.TYPE_INT, 4)])
    right = RecordSchema([_field("b", FieldType.TYPE_STRING, 4), _field("c", FieldType.TYPE_INT, 4)])
    joined = RecordSchema(left.fields + right.fields)
    r1 = Record.from_values(left, [IntValue(10)], INVALID_RID)
    r2 = Record.from_values(right, [StringValue("hi"), create_null_value(FieldType.TYPE_INT)], INVALID_RID)
    rec = Record.concat(joined, r1, r2)
    assert rec.value_at(0) == IntValue(10)
    assert rec.value_at(1) == StringValue("hi")
    assert rec.value_at(2).is_null
    assert rec.data == r1.data + r2.data


def test_concat_mismatch():
    left = RecordSchema([_field("a", FieldType.TYPE_INT, 4)])
    r1 = Record.all_null(left)
    with pytest.raises(DBError):
        Record.concat(left, r1, r1)


def test_compare_records():
    schema = RecordSchema([_field("a", FieldType.TYPE_INT, 4), _field("b", FieldType.TYPE_STRING, 4)])
    low = Record.from_values(schema, [IntValue(1), StringValue("b")], INVALID_RID)
    high = Record.from_values(schema, [IntValue(1), StringValue("c")], INVALID_RID)
    null_first = Record.from_values(schema, [create_null_value(FieldType.TYPE_INT), StringValue("z")], INVALID_RID)
    assert compare_records(low, high) == -1
    assert compare_records(high, low) == 1
    assert compare_records(low, low) == 0
    assert compare_records(null_first, low) == -1
    assert compare_records(low, null_first) == 1
    assert compare_records(Record.all_null(schema), Record.all_null(schema)) == 0


def test_compare_records_field_count_mismatch():
    a = Record.all_null(RecordSchema([_field("a", FieldType.TYPE_INT, 4)]))
    b = Record.all_null(_schema())
    with pytest.raises(DBError):
        compare_records(a, b)


def test_chunk():
    schema = RecordSchema([_field("a", FieldType.TYPE_INT, 4)])
    col = ArrayValue([IntValue(1), IntValue(2)])
    chunk = Chunk(schema, [col])
    assert chunk.col(0) is col
    assert len(chunk) == 1
    with pytest.raises(DBError):
        Chunk(schema, [col, col])