# chwire

Wire-level pieces for talking to ClickHouse over HTTP, written for asyncio.

- `chwire.rowbinary` encodes and decodes values in the RowBinary format,
  driven by a schema built from `Scalar` members (`Scalar.INT8` …
  `Scalar.UINT128`, `Scalar.FLOAT32`, `Scalar.FLOAT64`, `Scalar.BOOL`) and
  the containers `String`, `Bytes`, `FixedString`, `Nullable`, `Array`,
  `Tuple`, `Variant` and `Struct`. Entry points: `serialize`,
  `serialize_into`, `deserialize_from`, plus `Reader` and the LEB128 helpers
  `put_unsigned_leb128` / `get_unsigned_leb128`.
- `chwire.lz4frame` builds and reads LZ4 blocks framed with a CityHash128
  checksum and a header (`compress`, `Lz4Decoder`, `Lz4Meta`,
  `calc_checksum`); the hash itself is `chwire.cityhash.cityhash128`.
- `chwire.row` gives the column names of a dataclass row type, with
  renamed and skipped fields (`column`, `column_names`,
  `join_column_names`, `escape_identifier`).
- `chwire.body` holds request bodies: a whole payload
  (`RequestBody.full`, `RequestBody.empty`) or chunks streamed through a
  `ChunkSender` (`RequestBody.chunked`).
- `chwire.response` turns an HTTP reply into a stream of decoded chunks
  (`HttpReply`, `Response`, `Chunks`) and detects server exceptions embedded
  at the end of a body (`extract_exception`).
- `chwire.cursors` reads responses: `RawCursor` (decoded byte chunks),
  `RowCursor` (RowBinary rows), `BytesCursor` (raw bytes with `read` and
  `readline`) and `JsonCursor` (JSONEachRowWithProgress rows).

All failures are subclasses of `chwire.errors.ClickHouseError`, such as
`NotEnoughDataError`, `BadResponseError` or `DecompressionError`.
`chwire.compression` defines `Compression.NONE` / `Compression.LZ4` and the
`Chunk` type.

## Installation

```
pip install chwire
```

For running the test suite:

```
pip install "chwire[test]"
pytest
```

## Example: RowBinary

```python
from dataclasses import dataclass

from chwire import rowbinary
from chwire.row import join_column_names


@dataclass
class Event:
    no: int
    name: str


schema = rowbinary.Struct(
    [("no", rowbinary.Scalar.UINT32), ("name", rowbinary.String())],
    factory=Event,
)

payload = rowbinary.serialize(Event(1, "foo"), schema)
event = rowbinary.deserialize_from(payload, schema)  # Event(no=1, name='foo')

print(join_column_names(Event))  # `no`,`name`
```

Without a `factory`, `Struct` decodes rows as dictionaries. `Variant`
values are `(index, value)` pairs; `Nullable` uses `None`.

## Example: LZ4 frames

```python
from chwire.lz4frame import Lz4Decoder, compress

frame = compress(b"some RowBinary data")


async def chunks():
    yield frame


async def decode():
    async for chunk in Lz4Decoder(chunks()):
        print(chunk.data, chunk.net_size)
```

## Example: reading rows from a response

`Response` takes an awaitable that resolves to an `HttpReply` (a status
code and an async iterable body), so any HTTP library can supply it.

```python
from chwire import rowbinary
from chwire.compression import Compression
from chwire.cursors.row_cursor import RowCursor
from chwire.response import HttpReply, Response


async def body():
    yield rowbinary.serialize(7, rowbinary.Scalar.UINT64)


async def reply():
    return HttpReply(status=200, body=body())


async def main():
    cursor = RowCursor(Response(reply(), Compression.NONE), rowbinary.Scalar.UINT64)
    async for value in cursor:
        print(value)  # 7
```

A non-200 status raises `BadResponseError` with the body's text; a body
ending in a `Code: ... DB::Exception: ...` line raises it mid-stream.

## What this package does not do

It has no client of its own: it does not open connections, send HTTP
requests, build or escape SQL queries, or batch inserts. The caller supplies
the transport and feeds replies to `Response`, and sends request bodies
produced by `RequestBody`.