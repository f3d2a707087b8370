import json

import pytest

from chwire.compression import Compression
from chwire.cursors.json_cursor import JsonCursor
from chwire.errors import BadResponseError
from chwire.response import HttpReply, Response

ROWS = [{"no": 1, "name": "foo"}, {"no": 2, "name": "bar"}]


def make_response(chunks, status=200):
    async def body():
        for chunk in chunks:
            yield chunk

    async def reply():
        return HttpReply(status, body())

    return Response(reply(), Compression.NONE)


def stream_text():
    lines = [json.dumps({"progress": {"read_rows": "0"}})]
    lines += [json.dumps({"row": row}) for row in ROWS]
    lines.append(json.dumps({"progress": {}}))
    return ("\n".join(lines) + "\n").encode()


async def fetch_all(cursor):
    rows = []
    while (row := await cursor.next()) is not None:
        rows.append(row)
    return rows


@pytest.mark.asyncio
async def test_reads_rows_and_skips_progress_at_every_split():
    data = stream_text()
    for i in range(len(data) + 1):
        cursor = JsonCursor(make_response([data[:i], data[i:]]))
        assert await fetch_all(cursor) == ROWS


@pytest.mark.asyncio
async def test_factory_builds_rows():
    cursor = JsonCursor(make_response([stream_text()]), factory=lambda row: row["name"])
    assert await fetch_all(cursor) == [row["name"] for row in ROWS]


@pytest.mark.asyncio
async def test_incomplete_last_line_is_ignored():
    data = stream_text() + b'{"row": {"no": 3'
    cursor = JsonCursor(make_response([data]))
    assert await fetch_all(cursor) == ROWS


@pytest.mark.asyncio
async def test_invalid_json_raises_bad_response():
    cursor = JsonCursor(make_response([b"not json\n"]))
    with pytest.raises(BadResponseError):
        await cursor.next()


@pytest.mark.asyncio
async def test_unknown_variant_raises_bad_response():
    cursor = JsonCursor(make_response([b'{"other": 1}\n']))
    with pytest.raises(BadResponseError):
        await cursor.next()


@pytest.mark.asyncio
async def test_empty_response_has_no_rows():
    cursor = JsonCursor(make_response([]))
    assert await cursor.next() is None