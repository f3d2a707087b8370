"""HTTP responses from the server, streamed as decoded chunks."""

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, AsyncIterable

from chwire.compression import Chunk, Compression
from chwire.errors import BadResponseError, ClickHouseError, NetworkError
from chwire.lz4frame import Lz4Decoder

_STATUS_OK = 200


@dataclass
class HttpReply:
    """A received HTTP response: its status code and an async iterable body."""

    status: int
    body: AsyncIterable[Any]


async def _incoming(body):
    """Yield the body's chunks as bytes, turning transport failures into our errors."""
    iterator = aiter(body)
    while True:
        try:
            data = await anext(iterator)
        except StopAsyncIteration:
            return
        except ClickHouseError:
            raise
        except Exception as err:
            raise NetworkError(err) from err
        yield bytes(data)


async def decompress(stream, compression):
    """Yield :class:`Chunk` objects decoded from an async stream of bytes."""
    if compression.is_lz4():
        async for chunk in Lz4Decoder(stream):
            yield chunk
    else:
        async for data in stream:
            data = bytes(data)
            yield Chunk(data=data, net_size=len(data))


def extract_exception(chunk):
    """Return the server exception at the end of ``chunk``, or None.

    The server appends ``Code: <code>. DB::Exception: <desc> (version <v>
    (official build))`` and a newline when a query fails mid-stream.
    """
    chunk = bytes(chunk)
    # `))\n` is very rare in real data, so it is a cheap first check.
    if not chunk.endswith(b"))\n"):
        return None
    index = chunk.rfind(b"Code:")
    if index < 0:
        return None
    tail = chunk[index:]
    if b"DB::" not in tail or b"Exception:" not in tail:
        return None
    return BadResponseError(chunk[index:-1].decode("utf-8", errors="replace"))


def stringify_status(status):
    """Return the status code followed by its standard reason phrase."""
    try:
        reason = HTTPStatus(status).phrase
    except ValueError:
        reason = "<unknown>"
    return f"{int(status)} {reason}"


async def collect_bad_response(status, body, compression):
    """Read a failed response's body and return the error it describes."""
    try:
        parts = [bytes(part) async for part in body]
    except Exception:
        return BadResponseError(stringify_status(status))
    raw = b"".join(parts)

    async def _once():
        yield raw

    # The server compresses even error bodies, but a proxy may not.
    try:
        data = b"".join(
            [chunk.data async for chunk in decompress(_once(), compression)]
        )
    except ClickHouseError:
        data = raw

    try:
        reason = data.decode("utf-8").strip()
    except UnicodeDecodeError:
        reason = stringify_status(status)
    return BadResponseError(reason)


async def _close(stream):
    aclose = getattr(stream, "aclose", None)
    if aclose is not None:
        await aclose()


class Chunks:
    """Decoded chunks of a response body.

    Stops for good after the end of the body or the first error. A chunk
    ending with a server exception raises :class:`BadResponseError`.
    """

    def __init__(self, body=None, compression=Compression.NONE):
        if body is None:
            self._stream = None
        else:
            self._stream = decompress(_incoming(body), compression)

    @staticmethod
    def empty():
        """Return chunks that are already exhausted."""
        return Chunks()

    def is_terminated(self):
        """Return True when no more chunks will be produced."""
        return self._stream is None

    def __aiter__(self):
        return self

    async def __anext__(self):
        stream = self._stream
        if stream is None:
            raise StopAsyncIteration
        try:
            chunk = await anext(stream)
        except BaseException:
            self._stream = None
            raise
        error = extract_exception(chunk.data)
        if error is not None:
            self._stream = None
            await _close(stream)
            raise error
        return chunk


class Response:
    """A pending response: first the headers, then a body of chunks."""

    def __init__(self, reply, compression=Compression.NONE):
        self._reply = reply
        self._compression = compression
        self._chunks = None

    def into_future(self):
        """Return a coroutine resolving to the body's :class:`Chunks`.

        It can be taken only once, and not after streaming has started.
        """
        if self._chunks is not None:
            raise RuntimeError("response is already streaming")
        if self._reply is None:
            raise RuntimeError("response is already taken")
        reply, self._reply = self._reply, None
        return self._resolve(reply)

    async def _resolve(self, reply):
        try:
            response = await reply
        except ClickHouseError:
            raise
        except Exception as err:
            raise NetworkError(err) from err

        if response.status == _STATUS_OK:
            # Likely successful; a failure can still show up in the stream.
            return Chunks(response.body, self._compression)
        raise await collect_bad_response(
            response.status, response.body, self._compression
        )

    async def finish(self):
        """Wait for the response and read its whole body, raising on errors."""
        if self._chunks is None:
            self._chunks = await self.into_future()
        async for _ in self._chunks:
            pass