"""Tables of fixed-length records kept in slotted pages."""

from __future__ import annotations

from typing import Iterator

from wsdb import bitmap
from wsdb.meta import TableHeader
from wsdb.page import FILE_HEADER_PAGE_ID, PAGE_HEADER_SIZE, Page
from wsdb.page_handle import NAryPageHandle, PageHandle
from wsdb.record import Record, RecordSchema
from wsdb.rid import INVALID_RID, RID
from wsdb.types import (
    INVALID_PAGE_ID,
    MAX_REC_SIZE,
    PAGE_SIZE,
    DBError,
    PageMissError,
    RecordExistsError,
    RecordMissError,
    StorageModel,
    UnsupportedOperationError,
)


def make_table_header(schema: RecordSchema) -> TableHeader:
    """Header of a freshly created, empty table laid out for ``schema``."""
    rec_size = schema.record_length
    if rec_size > MAX_REC_SIZE or rec_size < 1:
        raise DBError(f"invalid record length: {rec_size}")
    nullmap_size = bitmap.bitmap_size(schema.field_count)
    # n slots fit when PAGE_HEADER_SIZE + bitmap_size(n) + n * (rec_size + nullmap_size) <= PAGE_SIZE
    width = bitmap.BITMAP_WIDTH
    rec_per_page = (width * (PAGE_SIZE - PAGE_HEADER_SIZE - 1) + 1) // (
        1 + (rec_size + nullmap_size) * width
    )
    return TableHeader(
        page_num=1,
        first_free_page=INVALID_PAGE_ID,
        rec_num=0,
        rec_size=rec_size,
        rec_per_page=rec_per_page,
        field_num=schema.field_count,
        bitmap_size=bitmap.bitmap_size(rec_per_page),
        nullmap_size=nullmap_size,
    )


class TableHandle:
    """A table in memory: its schema, its header and its data pages.

    Page 0 is reserved for the table header; records live on pages 1 and up.
    Pages with at least one empty slot are chained in a free list that starts
    at ``header.first_free_page``.
    """

    def __init__(
        self,
        schema: RecordSchema,
        table_id: int = 0,
        header: TableHeader | None = None,
        storage_model: StorageModel = StorageModel.NARY_MODEL,
        table_name: str = "",
    ) -> None:
        if storage_model != StorageModel.NARY_MODEL:
            raise UnsupportedOperationError(f"storage model {storage_model.name}")
        self.schema = schema
        self.table_id = table_id
        self.table_name = table_name
        self.storage_model = storage_model
        self.header = header if header is not None else make_table_header(schema)
        self._pages: dict[int, Page] = {}
        self.schema.set_table_id(table_id)

    # page access

    def page(self, page_id: int) -> Page:
        """The data page ``page_id``; raises PageMissError for pages the table does not have."""
        if page_id == FILE_HEADER_PAGE_ID or not 0 < page_id < self.header.page_num:
            raise PageMissError(f"Page: {page_id}")
        page = self._pages.get(page_id)
        if page is None:
            page = Page()
            page.set_file_page_id(self.table_id, page_id)
            self._pages[page_id] = page
        return page

    def _wrap(self, page: Page) -> PageHandle:
        return NAryPageHandle(self.header, page)

    def _fetch_page_handle(self, page_id: int) -> PageHandle:
        return self._wrap(self.page(page_id))

    def _create_page_handle(self) -> PageHandle:
        """A handle on a page with at least one empty slot."""
        if self.header.first_free_page == INVALID_PAGE_ID:
            return self._create_new_page_handle()
        return self._fetch_page_handle(self.header.first_free_page)

    def _create_new_page_handle(self) -> PageHandle:
        page_id = self.header.page_num
        self.header.page_num += 1
        page = self.page(page_id)
        handle = self._wrap(page)
        page.next_free_page_id = self.header.first_free_page
        self.header.first_free_page = page_id
        return handle

    def _check_slot(self, slot_id: int) -> None:
        if not 0 <= slot_id < self.header.rec_per_page:
            raise IndexError("slot_id out of range")

    def _require_record(self, handle: PageHandle, rid: RID) -> None:
        self._check_slot(rid.slot_id)
        if not bitmap.get_bit(handle.bitmap, rid.slot_id):
            raise RecordMissError(
                f"no record at RID(page_id={rid.page_id}, slot_id={rid.slot_id})"
            )

    def _fill_slot(self, handle: PageHandle, slot_id: int, record: Record) -> None:
        page = handle.page
        handle.write_slot(slot_id, record.null_map, record.data, False)
        bitmap.set_bit(handle.bitmap, slot_id, True)
        self.header.rec_num += 1
        record_num = page.record_num
        page.record_num = record_num + 1
        if record_num + 1 == self.header.rec_per_page:
            self.header.first_free_page = page.next_free_page_id
            page.next_free_page_id = INVALID_PAGE_ID

    # record operations

    def get_record(self, rid: RID) -> Record:
        """The record stored at ``rid``."""
        handle = self._fetch_page_handle(rid.page_id)
        self._require_record(handle, rid)
        null_map, data = handle.read_slot(rid.slot_id)
        return Record(self.schema, null_map, data, rid)

    def insert_record(self, record: Record) -> RID:
        """Store ``record`` in the first empty slot of a free page and return where it went."""
        handle = self._create_page_handle()
        slot_id = bitmap.find_first(handle.bitmap, self.header.rec_per_page, 0, False)
        page_id = handle.page.page_id
        self._fill_slot(handle, slot_id, record)
        return RID(page_id, slot_id)

    def insert_record_at(self, rid: RID, record: Record) -> None:
        """Store ``record`` in the slot named by ``rid``, which must be empty."""
        if rid.page_id == INVALID_PAGE_ID:
            raise PageMissError(f"Page: {rid.page_id}")
        handle = self._fetch_page_handle(rid.page_id)
        self._check_slot(rid.slot_id)
        if bitmap.get_bit(handle.bitmap, rid.slot_id):
            raise RecordExistsError(
                f"record already at RID(page_id={rid.page_id}, slot_id={rid.slot_id})"
            )
        self._fill_slot(handle, rid.slot_id, record)

    def delete_record(self, rid: RID) -> None:
        """Remove the record at ``rid``; a page that was full rejoins the free list."""
        handle = self._fetch_page_handle(rid.page_id)
        self._require_record(handle, rid)
        page = handle.page
        bitmap.set_bit(handle.bitmap, rid.slot_id, False)
        self.header.rec_num -= 1
        record_num = page.record_num
        page.record_num = record_num - 1
        if record_num == self.header.rec_per_page:
            page.next_free_page_id = self.header.first_free_page
            self.header.first_free_page = rid.page_id

    def update_record(self, rid: RID, record: Record) -> None:
        """Overwrite the record at ``rid``."""
        handle = self._fetch_page_handle(rid.page_id)
        self._require_record(handle, rid)
        handle.write_slot(rid.slot_id, record.null_map, record.data, True)

    # scanning

    def first_rid(self) -> RID:
        """The first occupied slot of the table, or INVALID_RID if it is empty."""
        for page_id in range(FILE_HEADER_PAGE_ID + 1, self.header.page_num):
            handle = self._fetch_page_handle(page_id)
            slot = bitmap.find_first(handle.bitmap, self.header.rec_per_page, 0, True)
            if slot != self.header.rec_per_page:
                return RID(page_id, slot)
        return INVALID_RID

    def next_rid(self, rid: RID) -> RID:
        """The occupied slot after ``rid``, or INVALID_RID at the end of the table."""
        page_id, slot_id = rid.page_id, rid.slot_id
        while page_id < self.header.page_num:
            handle = self._fetch_page_handle(page_id)
            slot_id = bitmap.find_first(
                handle.bitmap, self.header.rec_per_page, slot_id + 1, True
            )
            if slot_id != self.header.rec_per_page:
                return RID(page_id, slot_id)
            page_id += 1
            slot_id = -1
        return INVALID_RID

    def __iter__(self) -> Iterator[Record]:
        rid = self.first_rid()
        while rid != INVALID_RID:
            yield self.get_record(rid)
            rid = self.next_rid(rid)

    def __len__(self) -> int:
        return self.header.rec_num

    def has_field(self, field_name: str) -> bool:
        return self.schema.has_field(self.table_id, field_name)