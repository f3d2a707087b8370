"""Wire-level building blocks for a ClickHouse HTTP client: RowBinary, LZ4 framing, responses and cursors."""

__version__ = "0.13.3"