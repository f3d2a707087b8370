"""Cursors over streamed responses: raw chunks, RowBinary rows, raw bytes and JSON rows."""

__all__ = ["raw", "row_cursor", "bytes_cursor", "json_cursor"]