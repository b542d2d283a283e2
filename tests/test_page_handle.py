import pytest

from wsdb import bitmap
from wsdb.meta import TableHeader
from wsdb.page import PAGE_HEADER_SIZE, Page
from wsdb.page_handle import NAryPageHandle, PageHandle
from wsdb.types import DBError, RecordExistsError, RecordMissError


def _header() -> TableHeader:
    return TableHeader(
        page_num=2,
        rec_size=8,
        rec_per_page=10,
        field_num=2,
        bitmap_size=bitmap.bitmap_size(10),
        nullmap_size=bitmap.bitmap_size(2),
    )


@pytest.fixture
def handle() -> NAryPageHandle:
    page = Page()
    page.set_file_page_id(1, 1)
    return NAryPageHandle(_header(), page)


def test_bitmap_size_mismatch_rejected():
    hdr = _header()
    hdr.bitmap_size += 1
    with pytest.raises(DBError):
        NAryPageHandle(hdr, Page())


def test_write_then_read_round_trip(handle):
    bitmap.set_bit(handle.bitmap, 3, True)
    handle.write_slot(3, b"\x02", b"ABCDEFGH", True)
    assert handle.read_slot(3) == (b"\x02", b"ABCDEFGH")


def test_new_write_into_empty_slot(handle):
    handle.write_slot(0, b"\x01", b"12345678", False)
    bitmap.set_bit(handle.bitmap, 0, True)
    assert handle.read_slot(0) == (b"\x01", b"12345678")


def test_slot_layout_in_page(handle):
    handle.write_slot(2, b"\x03", b"abcdefgh", False)
    hdr = handle.tab_hdr
    full = hdr.nullmap_size + hdr.rec_size
    start = PAGE_HEADER_SIZE + hdr.bitmap_size + 2 * full
    assert bytes(handle.page.data[start : start + full]) == b"\x03abcdefgh"


def test_bitmap_view_is_in_page(handle):
    bitmap.set_bit(handle.bitmap, 9, True)
    assert bitmap.get_bit(handle.page.data[PAGE_HEADER_SIZE:], 9) is True


def test_slots_do_not_overlap(handle):
    for slot in (4, 5):
        handle.write_slot(slot, bytes([slot]), bytes([slot]) * 8, False)
        bitmap.set_bit(handle.bitmap, slot, True)
    assert handle.read_slot(4) == (b"\x04", b"\x04" * 8)
    assert handle.read_slot(5) == (b"\x05", b"\x05" * 8)


def test_read_empty_slot_raises(handle):
    with pytest.raises(RecordMissError):
        handle.read_slot(1)


def test_insert_into_occupied_slot_raises(handle):
    bitmap.set_bit(handle.bitmap, 1, True)
    with pytest.raises(RecordExistsError):
        handle.write_slot(1, b"\x00", b"x" * 8, False)


def test_update_empty_slot_raises(handle):
    with pytest.raises(RecordMissError):
        handle.write_slot(1, b"\x00", b"x" * 8, True)


def test_slot_out_of_range(handle):
    with pytest.raises(IndexError):
        handle.write_slot(10, b"\x00", b"x" * 8, False)
    with pytest.raises(IndexError):
        handle.read_slot(-1)


def test_short_data_rejected(handle):
    with pytest.raises(ValueError):
        handle.write_slot(0, b"\x00", b"short", False)


def test_base_handle_cannot_access_slots():
    base = PageHandle(_header(), Page())
    with pytest.raises(DBError):
        base.read_slot(0)
    with pytest.raises(DBError):
        base.write_slot(0, b"\x00", b"x" * 8, False)