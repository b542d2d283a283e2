"""Core identifiers, enumerations, configuration constants and errors."""

from __future__ import annotations

from enum import IntEnum

# Identifier sentinels
INVALID_PAGE_ID = -1
INVALID_SLOT_ID = -1
INVALID_TABLE_ID = -1
INVALID_FRAME_ID = -1
INVALID_TXN_ID = -1
INVALID_FILE_ID = -1

# Storage configuration
PAGE_SIZE = 4096
BUFFER_POOL_SIZE = 8
REPLACER = "LRUReplacer"
REPLACER_LRU_K = 10

# System limits
MAX_REC_SIZE = 1024

# Executor configuration
SORT_BUFFER_SIZE = 64 * 1024 * 1024
SORT_WAY_NUM = 10

# File layout
DB_SUFFIX = ".db"
TAB_SUFFIX = ".tab"
IDX_SUFFIX = ".idx"
TMP_SUFFIX = ".tmp"

DB_DIR = "db"
TAB_DIR = "tab"
IDX_DIR = "idx"
TMP_DIR = ".tmp"

DATA_DIR = "./data"


class DBError(Exception):
    """Base class of every error raised by the database engine."""


class TypeMismatchError(DBError):
    """Two values or a value and a field have incompatible types."""


class UnsupportedOperationError(DBError):
    """The operation is not defined for the value's type."""


class DivideByZeroError(DBError):
    """A value was divided by zero."""


class StringOverflowError(DBError):
    """A string does not fit into its field."""


class RecordMissError(DBError):
    """No record is stored at the requested slot."""


class RecordExistsError(DBError):
    """A record is already stored at the requested slot."""


class PageMissError(DBError):
    """The requested page does not exist."""


class StorageModel(IntEnum):
    NARY_MODEL = 0
    PAX_MODEL = 1


class FieldType(IntEnum):
    TYPE_NULL = 0
    TYPE_BOOL = 1
    TYPE_INT = 2
    TYPE_FLOAT = 3
    TYPE_STRING = 4
    TYPE_ARRAY = 5


class AggType(IntEnum):
    AGG_NONE = 0
    AGG_COUNT = 1
    AGG_COUNT_STAR = 2
    AGG_SUM = 3
    AGG_AVG = 4
    AGG_MAX = 5
    AGG_MIN = 6


class JoinType(IntEnum):
    INNER_JOIN = 0
    OUTER_JOIN = 1


class JoinStrategy(IntEnum):
    NESTED_LOOP = 0
    SORT_MERGE = 1


class OrderByDir(IntEnum):
    OrderBy_ASC = 0
    OrderBy_DESC = 1


class CompOp(IntEnum):
    OP_EQ = 0
    OP_NE = 1
    OP_LT = 2
    OP_GT = 3
    OP_LE = 4
    OP_GE = 5
    OP_IN = 6
    OP_RNG = 7


_AGG_NAMES = {
    AggType.AGG_MIN: "MIN",
    AggType.AGG_MAX: "MAX",
    AggType.AGG_SUM: "SUM",
    AggType.AGG_AVG: "AVG",
    AggType.AGG_COUNT: "COUNT",
    AggType.AGG_COUNT_STAR: "COUNT(*)",
}

_COMP_OP_SYMBOLS = {
    CompOp.OP_EQ: "=",
    CompOp.OP_NE: "<>",
    CompOp.OP_LT: "<",
    CompOp.OP_GT: ">",
    CompOp.OP_LE: "<=",
    CompOp.OP_GE: ">=",
    CompOp.OP_IN: "IN",
    CompOp.OP_RNG: "RANGE",
}


def agg_type_to_string(agg_type: AggType) -> str:
    """Return the SQL spelling of an aggregate, or "UNKNOWN"."""
    return _AGG_NAMES.get(agg_type, "UNKNOWN")


def comp_op_to_string(op: CompOp) -> str:
    """Return the SQL spelling of a comparison operator, or "UNKNOWN"."""
    return _COMP_OP_SYMBOLS.get(op, "UNKNOWN")