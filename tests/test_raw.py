import pytest

from chwire.compression import Compression
from chwire.cursors.raw import RawCursor
from chwire.errors import BadResponseError, NetworkError
from chwire.lz4frame import compress
from chwire.response import HttpReply, Response

LZ4_SOURCE = bytes(
    [
        245, 5, 222, 235, 225, 158, 59, 108, 225, 31, 65, 215, 66, 66, 36, 92,
        0x82,
        34, 0, 0, 0,
        23, 0, 0, 0,
        240, 8, 1, 0, 2, 255, 255, 255, 255, 0, 1, 1, 1, 115, 6, 83, 116, 114,
        105, 110, 103, 3, 97, 98, 99,
    ]
)
LZ4_EXPECTED = bytes(
    [
        1, 0, 2, 255, 255, 255, 255, 0, 1, 1, 1, 115, 6, 83, 116, 114, 105,
        110, 103, 3, 97, 98, 99,
    ]
)


async def _body(parts):
    for part in parts:
        yield part


async def _reply(status, parts):
    return HttpReply(status=status, body=_body(parts))


def _cursor(status, parts, compression=Compression.NONE):
    return RawCursor(Response(_reply(status, parts), compression))


@pytest.mark.asyncio
async def test_yields_chunks_then_none():
    parts = [b"abc", b"de"]
    cursor = _cursor(200, parts)
    assert await cursor.next() == b"abc"
    assert await cursor.next() == b"de"
    assert await cursor.next() is None
    assert await cursor.next() is None
    assert cursor.is_terminated()


@pytest.mark.asyncio
async def test_counts_bytes_plain():
    parts = [b"abc", b"de"]
    cursor = _cursor(200, parts)
    assert cursor.received_bytes() == 0
    assert cursor.decoded_bytes() == 0
    assert not cursor.is_terminated()
    while await cursor.next() is not None:
        pass
    total = sum(len(p) for p in parts)
    assert cursor.received_bytes() == total
    assert cursor.decoded_bytes() == total


@pytest.mark.asyncio
async def test_counts_bytes_lz4():
    cursor = _cursor(200, [LZ4_SOURCE[:7], LZ4_SOURCE[7:]], Compression.LZ4)
    assert await cursor.next() == LZ4_EXPECTED
    assert await cursor.next() is None
    assert cursor.received_bytes() == len(LZ4_SOURCE)
    assert cursor.decoded_bytes() == len(LZ4_EXPECTED)


@pytest.mark.asyncio
async def test_lz4_round_trip_many_frames():
    payloads = [b"first block" * 10, b"second block" * 20]
    frames = [compress(p) for p in payloads]
    cursor = _cursor(200, [b"".join(frames)], Compression.LZ4)
    received = []
    while (chunk := await cursor.next()) is not None:
        received.append(chunk)
    assert received == payloads
    assert cursor.received_bytes() == sum(len(f) for f in frames)


@pytest.mark.asyncio
async def test_bad_status_then_fused():
    cursor = _cursor(500, [b"Something failed\n"])
    with pytest.raises(BadResponseError) as info:
        await cursor.next()
    assert info.value.reason == "Something failed"
    assert await cursor.next() is None
    assert cursor.is_terminated()
    assert cursor.received_bytes() == 0


@pytest.mark.asyncio
async def test_network_error_on_request():
    async def reply():
        raise ConnectionError("refused")

    cursor = RawCursor(Response(reply(), Compression.NONE))
    with pytest.raises(NetworkError):
        await cursor.next()
    assert await cursor.next() is None


@pytest.mark.asyncio
async def test_exception_in_stream():
    error = (
        "Code: 159. DB::Exception: Timeout exceeded: elapsed 1.2 seconds, "
        "maximum: 0.1. (TIMEOUT_EXCEEDED) (version 24.10.1.2812 (official build))"
    )
    cursor = _cursor(200, [b"data", f"{error}\n".encode()])
    assert await cursor.next() == b"data"
    with pytest.raises(BadResponseError) as info:
        await cursor.next()
    assert info.value.reason == error
    assert cursor.is_terminated()


@pytest.mark.asyncio
async def test_response_can_feed_one_cursor():
    response = Response(_reply(200, [b"x"]), Compression.NONE)
    cursor = RawCursor(response)
    with pytest.raises(RuntimeError):
        RawCursor(response)
    assert await cursor.next() == b"x"