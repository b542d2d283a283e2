"""Predicates comparing a column with a value, another column or a subquery."""

from __future__ import annotations

from enum import IntEnum

from wsdb.meta import RTField
from wsdb.types import CompOp, DBError, comp_op_to_string
from wsdb.value import Value


class CondRvalType(IntEnum):
    """What stands on the right-hand side of a condition."""

    NONE = 0
    VALUE = 1
    COLUMN = 2
    SUBQUERY = 3

    def __str__(self) -> str:
        return self.name.capitalize()


class Condition:
    """A comparison whose left side is a column.

    The right side is a value, a column or a subquery id, as told by ``rhs_type``.
    """

    def __init__(
        self,
        op: CompOp = CompOp.OP_EQ,
        l_col: RTField | None = None,
        rhs_type: CondRvalType = CondRvalType.NONE,
        r_col: RTField | None = None,
        r_val: Value | None = None,
        subquery_id: int = -1,
    ) -> None:
        self.op = op
        self.l_col = l_col if l_col is not None else RTField()
        self.rhs_type = rhs_type
        self._r_col = r_col if r_col is not None else RTField()
        self._r_val = r_val
        self._subquery_id = subquery_id

    @classmethod
    def with_value(cls, op: CompOp, l_col: RTField, r_val: Value) -> Condition:
        """A condition comparing a column with a constant value."""
        return cls(op, l_col, CondRvalType.VALUE, r_val=r_val)

    @classmethod
    def with_column(cls, op: CompOp, l_col: RTField, r_col: RTField) -> Condition:
        """A condition comparing two columns."""
        return cls(op, l_col, CondRvalType.COLUMN, r_col=r_col)

    @classmethod
    def with_subquery(cls, op: CompOp, l_col: RTField, subquery_id: int) -> Condition:
        """A condition comparing a column with the result of a subquery."""
        return cls(op, l_col, CondRvalType.SUBQUERY, subquery_id=subquery_id)

    @property
    def r_col(self) -> RTField:
        if self.rhs_type != CondRvalType.COLUMN:
            raise DBError(f"should be: {self.rhs_type}")
        return self._r_col

    @property
    def r_val(self) -> Value:
        if self.rhs_type != CondRvalType.VALUE or self._r_val is None:
            raise DBError(f"should be: {self.rhs_type}")
        return self._r_val

    @property
    def subquery_id(self) -> int:
        if self.rhs_type != CondRvalType.SUBQUERY:
            raise DBError("should be subquery")
        return self._subquery_id

    def __str__(self) -> str:
        text = f"{self.l_col} {comp_op_to_string(self.op)} "
        if self.rhs_type == CondRvalType.VALUE:
            text += str(self._r_val)
        elif self.rhs_type == CondRvalType.COLUMN:
            text += str(self._r_col)
        elif self.rhs_type == CondRvalType.SUBQUERY:
            text += f"subquery {self._subquery_id}"
        return text

    def __repr__(self) -> str:
        return f"Condition({self})"