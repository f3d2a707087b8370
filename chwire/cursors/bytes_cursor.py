"""A cursor over raw bytes of a response in any output format."""

from chwire.cursors.raw import RawCursor

_MIXING = "mixing `BytesCursor.next()` and read methods is not allowed"


class BytesCursor:
    """Emits raw bytes of a response without decoding them.

    Chunks come from :meth:`next`, :meth:`collect` or async iteration;
    :meth:`read` and :meth:`readline` read across chunk boundaries. Chunk
    methods cannot be used while read methods hold buffered bytes.
    """

    def __init__(self, response):
        self._raw = RawCursor(response)
        self._bytes = b""

    async def next(self):
        """Return the next chunk of bytes, or None at the end of the response."""
        if self._bytes:
            raise RuntimeError(_MIXING)
        return await self._raw.next()

    async def collect(self):
        """Return the rest of the response as one bytes object."""
        chunks = []
        while (chunk := await self.next()) is not None:
            chunks.append(chunk)
        if len(chunks) == 1:
            return chunks[0]
        return b"".join(chunks)

    async def _refill(self):
        # Empty chunks are skipped so that reads never return b"" before the end.
        while not self._bytes:
            chunk = await self._raw.next()
            if chunk is None:
                return False
            self._bytes = bytes(chunk)
        return True

    async def read(self, size=-1):
        """Read ``size`` bytes, fewer only at the end; all the rest if negative."""
        parts = []
        needed = size
        while needed != 0:
            if not self._bytes and not await self._refill():
                break
            take = len(self._bytes) if needed < 0 else min(needed, len(self._bytes))
            parts.append(self._bytes[:take])
            self._bytes = self._bytes[take:]
            if needed > 0:
                needed -= take
        return b"".join(parts)

    async def readline(self):
        """Read up to and including the next newline; b"" at the end."""
        parts = []
        while True:
            if not self._bytes and not await self._refill():
                break
            end = self._bytes.find(b"\n")
            if end >= 0:
                parts.append(self._bytes[:end + 1])
                self._bytes = self._bytes[end + 1:]
                break
            parts.append(self._bytes)
            self._bytes = b""
        return b"".join(parts)

    def __aiter__(self):
        return self

    async def __anext__(self):
        chunk = await self.next()
        if chunk is None:
            raise StopAsyncIteration
        return chunk

    def received_bytes(self):
        """Return the number of bytes received from the server so far."""
        return self._raw.received_bytes()

    def decoded_bytes(self):
        """Return the number of bytes produced after decompression so far."""
        return self._raw.decoded_bytes()