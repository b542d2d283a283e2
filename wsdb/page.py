"""Fixed-size pages with a small header of log sequence number, free list link and record count."""

from __future__ import annotations

import struct

from wsdb.types import INVALID_FILE_ID, INVALID_PAGE_ID, PAGE_SIZE, DBError

FILE_HEADER_PAGE_ID = 0

_LSN = struct.Struct("<i")
_PAGE_ID = struct.Struct("<i")
_COUNT = struct.Struct("<Q")

PAGE_LSN_OFFSET = 0
PAGE_NEXT_FREE_PAGE_ID_OFFSET = PAGE_LSN_OFFSET + _LSN.size
PAGE_RECORD_NUM_OFFSET = PAGE_NEXT_FREE_PAGE_ID_OFFSET + _PAGE_ID.size
PAGE_HEADER_SIZE = PAGE_RECORD_NUM_OFFSET + _COUNT.size


class Page:
    """A page buffer identified by file id and page id."""

    def __init__(self) -> None:
        self.file_id = INVALID_FILE_ID
        self.page_id = INVALID_PAGE_ID
        self.data = bytearray(PAGE_SIZE)

    def set_file_page_id(self, fid: int, pid: int) -> None:
        self.file_id = fid
        self.page_id = pid

    def _check_not_file_header(self) -> None:
        if self.page_id == FILE_HEADER_PAGE_ID:
            raise DBError("the file header page has no page header")

    def _read(self, fmt: struct.Struct, offset: int) -> int:
        self._check_not_file_header()
        return fmt.unpack_from(self.data, offset)[0]

    def _write(self, fmt: struct.Struct, offset: int, value: int) -> None:
        self._check_not_file_header()
        fmt.pack_into(self.data, offset, value)

    @property
    def lsn(self) -> int:
        return self._read(_LSN, PAGE_LSN_OFFSET)

    @lsn.setter
    def lsn(self, value: int) -> None:
        self._write(_LSN, PAGE_LSN_OFFSET, value)

    @property
    def next_free_page_id(self) -> int:
        return self._read(_PAGE_ID, PAGE_NEXT_FREE_PAGE_ID_OFFSET)

    @next_free_page_id.setter
    def next_free_page_id(self, value: int) -> None:
        self._write(_PAGE_ID, PAGE_NEXT_FREE_PAGE_ID_OFFSET, value)

    @property
    def record_num(self) -> int:
        return self._read(_COUNT, PAGE_RECORD_NUM_OFFSET)

    @record_num.setter
    def record_num(self, value: int) -> None:
        self._write(_COUNT, PAGE_RECORD_NUM_OFFSET, value)

    def clear(self) -> None:
        """Forget the page's identity and zero its contents."""
        self.file_id = INVALID_FILE_ID
        self.page_id = INVALID_PAGE_ID
        self.data[:] = bytes(PAGE_SIZE)