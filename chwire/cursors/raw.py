"""A cursor over the raw decoded bytes of a response."""

import asyncio

from chwire.response import Chunks


class RawCursor:
    """Yields decoded byte chunks of a response; other cursors build on it."""

    def __init__(self, response):
        self._future = response.into_future()
        self._task = None
        self._chunks = None
        self._net_size = 0
        self._data_size = 0

    async def next(self):
        """Return the next chunk of bytes, or None at the end of the response."""
        if self._chunks is None:
            await self._resolve()
        try:
            chunk = await anext(self._chunks)
        except StopAsyncIteration:
            return None
        self._net_size += chunk.net_size
        self._data_size += len(chunk.data)
        return chunk.data

    async def _resolve(self):
        if self._task is None:
            self._task = asyncio.ensure_future(self._future)
            self._future = None
        # Shielded, so that cancelling a call leaves the request running and
        # the next call picks it up again.
        try:
            chunks = await asyncio.shield(self._task)
        except asyncio.CancelledError:
            if not self._task.done():
                raise
            self._chunks = Chunks.empty()
            raise
        except BaseException:
            # Later calls report the end of data instead of repeating the error.
            self._chunks = Chunks.empty()
            raise
        self._chunks = chunks

    def received_bytes(self):
        """Return the number of bytes received from the server so far."""
        return self._net_size

    def decoded_bytes(self):
        """Return the number of bytes produced after decompression so far."""
        return self._data_size

    def is_terminated(self):
        """Return True when no more chunks will be produced."""
        return self._chunks is not None and self._chunks.is_terminated()