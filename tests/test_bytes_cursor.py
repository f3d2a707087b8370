import pytest

from chwire.compression import Compression
from chwire.cursors.bytes_cursor import BytesCursor
from chwire.errors import BadResponseError
from chwire.response import HttpReply, Response

CHUNKS = [b"a,1\nb,", b"", b"2\n", b"c,3\n"]


def make_response(chunks, status=200):
    async def body():
        for chunk in chunks:
            yield chunk

    async def reply():
        return HttpReply(status, body())

    return Response(reply(), Compression.NONE)


@pytest.mark.asyncio
async def test_collect_joins_all_chunks():
    cursor = BytesCursor(make_response(CHUNKS))
    assert await cursor.collect() == b"".join(CHUNKS)


@pytest.mark.asyncio
async def test_collect_single_chunk():
    cursor = BytesCursor(make_response([b"only"]))
    assert await cursor.collect() == b"only"


@pytest.mark.asyncio
async def test_next_emits_chunks_in_order():
    cursor = BytesCursor(make_response(CHUNKS))
    got = []
    while (chunk := await cursor.next()) is not None:
        got.append(chunk)
    assert got == CHUNKS


@pytest.mark.asyncio
async def test_async_iteration():
    cursor = BytesCursor(make_response(CHUNKS))
    assert [chunk async for chunk in cursor] == CHUNKS


@pytest.mark.asyncio
async def test_readline_splits_lines_across_chunks():
    cursor = BytesCursor(make_response(CHUNKS))
    lines = []
    while line := await cursor.readline():
        lines.append(line)
    assert lines == b"".join(CHUNKS).splitlines(keepends=True)


@pytest.mark.asyncio
async def test_read_fixed_sizes():
    data = b"".join(CHUNKS)
    cursor = BytesCursor(make_response(CHUNKS))
    parts = []
    while part := await cursor.read(3):
        parts.append(part)
    assert b"".join(parts) == data
    assert all(len(part) == 3 for part in parts[:-1])


@pytest.mark.asyncio
async def test_read_all():
    cursor = BytesCursor(make_response(CHUNKS))
    assert await cursor.read() == b"".join(CHUNKS)
    assert await cursor.read(5) == b""


@pytest.mark.asyncio
async def test_mixing_apis_is_rejected():
    cursor = BytesCursor(make_response(CHUNKS))
    assert await cursor.read(1) == CHUNKS[0][:1]
    with pytest.raises(RuntimeError):
        await cursor.next()


@pytest.mark.asyncio
async def test_counts_bytes():
    cursor = BytesCursor(make_response(CHUNKS))
    await cursor.collect()
    total = sum(map(len, CHUNKS))
    assert cursor.received_bytes() == total
    assert cursor.decoded_bytes() == total


@pytest.mark.asyncio
async def test_exception_in_stream_is_raised():
    error = (
        "Code: 159. DB::Exception: Timeout exceeded: elapsed 1.2 seconds, "
        "maximum: 0.1. (TIMEOUT_EXCEEDED) (version 24.10.1.2812 (official build))"
    )
    cursor = BytesCursor(make_response([b"data", f"{error}\n".encode()]))
    with pytest.raises(BadResponseError) as info:
        await cursor.collect()
    assert info.value.reason == error