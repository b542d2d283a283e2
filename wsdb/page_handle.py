"""Slotted access to the records stored in a data page."""

from __future__ import annotations

from wsdb import bitmap
from wsdb.meta import TableHeader
from wsdb.page import PAGE_HEADER_SIZE, Page
from wsdb.types import DBError, RecordExistsError, RecordMissError


class PageHandle:
    """A data page seen through its table's header: a slot bitmap followed by slot memory."""

    def __init__(self, tab_hdr: TableHeader, page: Page) -> None:
        if bitmap.bitmap_size(tab_hdr.rec_per_page) != tab_hdr.bitmap_size:
            raise DBError("bitmap size not match")
        self.tab_hdr = tab_hdr
        self.page = page
        self._bitmap_offset = PAGE_HEADER_SIZE
        self._slots_offset = PAGE_HEADER_SIZE + tab_hdr.bitmap_size

    @property
    def bitmap(self) -> memoryview:
        """A writable view of the page's slot bitmap."""
        start = self._bitmap_offset
        return memoryview(self.page.data)[start : start + self.tab_hdr.bitmap_size]

    def _check_slot(self, slot_id: int) -> None:
        if not 0 <= slot_id < self.tab_hdr.rec_per_page:
            raise IndexError("slot_id out of range")

    def write_slot(self, slot_id: int, null_map: bytes, data: bytes, update: bool) -> None:
        """Store a record in a slot; ``update`` says whether the slot already holds one."""
        raise DBError(f"{type(self).__name__} cannot write slots")

    def read_slot(self, slot_id: int) -> tuple[bytes, bytes]:
        """Return the null map and the data stored in a slot."""
        raise DBError(f"{type(self).__name__} cannot read slots")


class NAryPageHandle(PageHandle):
    """Row layout: each slot holds a record's null map immediately followed by its data."""

    @property
    def _rec_full_size(self) -> int:
        return self.tab_hdr.nullmap_size + self.tab_hdr.rec_size

    def _slot_start(self, slot_id: int) -> int:
        return self._slots_offset + slot_id * self._rec_full_size

    def write_slot(self, slot_id: int, null_map: bytes, data: bytes, update: bool) -> None:
        self._check_slot(slot_id)
        occupied = bitmap.get_bit(self.bitmap, slot_id)
        if occupied and not update:
            raise RecordExistsError(f"slot {slot_id} already holds a record")
        if not occupied and update:
            raise RecordMissError(f"slot {slot_id} is empty")
        nsize, rsize = self.tab_hdr.nullmap_size, self.tab_hdr.rec_size
        if len(null_map) < nsize or len(data) < rsize:
            raise ValueError(f"slot needs a {nsize}-byte null map and {rsize} bytes of data")
        start = self._slot_start(slot_id)
        self.page.data[start : start + nsize] = bytes(null_map[:nsize])
        self.page.data[start + nsize : start + nsize + rsize] = bytes(data[:rsize])

    def read_slot(self, slot_id: int) -> tuple[bytes, bytes]:
        self._check_slot(slot_id)
        if not bitmap.get_bit(self.bitmap, slot_id):
            raise RecordMissError(f"slot {slot_id} is empty")
        nsize, rsize = self.tab_hdr.nullmap_size, self.tab_hdr.rec_size
        start = self._slot_start(slot_id)
        null_map = bytes(self.page.data[start : start + nsize])
        data = bytes(self.page.data[start + nsize : start + nsize + rsize])
        return null_map, data