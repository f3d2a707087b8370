"""A cursor that decodes rows from a RowBinary response."""

from chwire.buffer import ByteBuffer
from chwire.cursors.raw import RawCursor
from chwire.errors import NotEnoughDataError
from chwire.rowbinary import Reader, deserialize_from

_END = object()


class RowCursor:
    """Emits rows decoded with a RowBinary ``schema`` from a response."""

    def __init__(self, response, schema):
        self._raw = RawCursor(response)
        self._buffer = ByteBuffer()
        self._schema = schema

    async def _fetch(self):
        while True:
            reader = Reader(self._buffer.view())
            try:
                value = deserialize_from(reader, self._schema)
            except NotEnoughDataError:
                pass
            else:
                self._buffer.set_remaining(reader.remaining())
                return value

            chunk = await self._raw.next()
            if chunk is None:
                if self._buffer.remaining() > 0:
                    # An incomplete row is left: usually a schema mismatch.
                    raise NotEnoughDataError()
                return _END
            self._buffer.extend(chunk)

    async def next(self):
        """Return the next row, or None when the response is exhausted."""
        value = await self._fetch()
        return None if value is _END else value

    def __aiter__(self):
        return self

    async def __anext__(self):
        value = await self._fetch()
        if value is _END:
            raise StopAsyncIteration
        return value

    def received_bytes(self):
        """Return the number of bytes received from the server so far."""
        return self._raw.received_bytes()

    def decoded_bytes(self):
        """Return the number of bytes produced after decompression so far."""
        return self._raw.decoded_bytes()