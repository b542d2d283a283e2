# wsdb

The storage core of a small relational database engine. It is written in pure
Python and has no runtime dependencies.

## What is in it

- `wsdb.types` defines the constants for identifiers, page size and limits. It
  holds the enumerations `FieldType`, `AggType`, `CompOp`, `StorageModel`,
  `JoinType`, `JoinStrategy` and `OrderByDir`, and the helpers
  `agg_type_to_string` and `comp_op_to_string`. It also defines the exceptions,
  which all derive from `DBError`: `TypeMismatchError`,
  `UnsupportedOperationError`, `DivideByZeroError`, `StringOverflowError`,
  `RecordMissError`, `RecordExistsError` and `PageMissError`.
- `wsdb.bitmap` works on bitmaps held in byte arrays, least significant bit
  first. Its functions are `bitmap_size`, `set_bit`, `get_bit`, `clear`,
  `set_all` and `find_first`.
- `wsdb.rid` defines `RID`, a frozen pair of page id and slot id, and
  `INVALID_RID`.
- `wsdb.page` defines `Page`, a 4096-byte buffer. Its header holds the `lsn`,
  the `next_free_page_id` and the `record_num`, all readable as properties.
  Page 0 is the file header page, and reading or writing these properties on
  page 0 raises `DBError`.
- `wsdb.meta` defines the `FieldSchema`, `RTField` and `TableHeader`
  dataclasses.
- `wsdb.value` defines `IntValue` (32-bit, wraps on overflow), `FloatValue`
  (single precision), `BoolValue`, `StringValue` and `ArrayValue`. The
  in-place operations are `add` and `divide`. The module also has
  `value_max`, `value_min`, `create_value`, `create_null_value`,
  `align_types` and `cast_to`.
- `wsdb.record` defines `RecordSchema`, `Record`, `Chunk` and
  `compare_records`. A `Record` keeps raw fixed-length bytes and a null map. You
  can build one in four ways:
  - `Record.from_values` builds it from values.
  - `Record.project` builds it from another record, keeping only some fields.
  - `Record.concat` builds it from two records.
  - `Record.all_null` builds a record in which every field is null.
- `wsdb.condition` defines `Condition`, whose right-hand side is a value, a
  column or a subquery id. The constructors are `with_value`, `with_column`
  and `with_subquery`. `CondRvalType` names the kind of right-hand side.
- `wsdb.page_handle` defines `PageHandle` and `NAryPageHandle`. These give
  slotted access to a data page in the row layout, where each slot holds a
  null map followed by the record data.
- `wsdb.table_handle` defines `make_table_header` and `TableHandle`. A
  `TableHandle` inserts, reads, updates, deletes and scans records. Pages that
  have an empty slot are kept on a free list.

## Installation

```
pip install .
```

The tests use pytest:

```
pip install ".[test]"
pytest
```

## Example

```python
from wsdb.meta import FieldSchema, RTField
from wsdb.record import Record, RecordSchema
from wsdb.table_handle import TableHandle
from wsdb.types import FieldType
from wsdb.value import IntValue, StringValue

schema = RecordSchema([
    RTField(FieldSchema(field_name="id", field_size=4, field_type=FieldType.TYPE_INT)),
    RTField(FieldSchema(field_name="name", field_size=16, field_type=FieldType.TYPE_STRING)),
])

record = Record.from_values(schema, [IntValue(7), StringValue("alice")])
print(record.value_at(0), record.value_at(1))   # 7 alice

table = TableHandle(schema, table_id=1, table_name="people")
rid = table.insert_record(record)               # RID(page_id=1, slot_id=0)
print(table.get_record(rid).value_at(1))        # alice
print(len(table), [r.value_at(0).value for r in table])   # 1 [7]
table.delete_record(rid)
```

## Values and NULL

- An ordering comparison (`<`, `>`, `<=`, `>=`) that involves a NULL value
  returns `False`.
- Two NULL values of the same type compare as equal.
- Comparing values of different types raises `TypeMismatchError`.
- `compare_records` sorts a NULL before any other value.

## Limits

- `TableHandle` keeps its pages in memory only. Nothing is written to or read
  from disk, and there is no buffer pool, log or recovery.
- Only the row (`NARY_MODEL`) storage model is supported. Asking for
  `PAX_MODEL` raises `UnsupportedOperationError`.
- A record must be between 1 and `MAX_REC_SIZE` (1024) bytes long.
- The package does not include any of the following: an SQL parser, a query
  planner or executor, indexes, transactions, or a network server.