"""Record identifiers."""

from __future__ import annotations

from dataclasses import dataclass

from wsdb.types import INVALID_PAGE_ID, INVALID_SLOT_ID


@dataclass(frozen=True)
class RID:
    """Location of a record: page id and slot id within the page."""

    page_id: int = INVALID_PAGE_ID
    slot_id: int = INVALID_SLOT_ID

    def __hash__(self) -> int:
        return (self.page_id << 16) | self.slot_id


INVALID_RID = RID(INVALID_PAGE_ID, INVALID_SLOT_ID)