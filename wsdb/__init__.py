"""Storage core of a small relational database: values, pages, records and in-memory tables."""

__version__ = "0.1.0"

__all__ = [
    "bitmap",
    "condition",
    "meta",
    "page",
    "page_handle",
    "record",
    "rid",
    "table_handle",
    "types",
    "value",
]