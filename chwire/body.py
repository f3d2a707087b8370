"""Request bodies: a whole payload at once or chunks streamed by a sender."""

import asyncio

from chwire.errors import NetworkError

_END = object()
_ABORT = object()


class _Channel:
    """A one-slot channel from a :class:`ChunkSender` to a :class:`RequestBody`."""

    def __init__(self):
        self.queue = asyncio.Queue()
        # The sender has one guaranteed slot; it is freed when a chunk is taken.
        self.slot = asyncio.Semaphore(1)
        self.sender_closed = False
        self.receiver_closed = False


class RequestBody:
    """The body of an HTTP request, iterated asynchronously as byte chunks."""

    def __init__(self, content=b""):
        self._content = bytes(content)
        self._channel = None

    @staticmethod
    def empty():
        """Return a body with no content."""
        return RequestBody()

    @staticmethod
    def full(content):
        """Return a body holding ``content`` (text is encoded as UTF-8)."""
        if isinstance(content, str):
            content = content.encode("utf-8")
        return RequestBody(content)

    @staticmethod
    def chunked():
        """Return a ``(sender, body)`` pair for streaming chunks."""
        body = RequestBody()
        body._channel = _Channel()
        return ChunkSender(body._channel), body

    def size_hint(self):
        """Return ``(lower, upper)`` bounds of the remaining size; upper may be None."""
        if self._channel is None:
            return len(self._content), len(self._content)
        return 0, None

    def is_end_stream(self):
        """Return True when it is known that no more data will come."""
        if self._channel is None:
            return not self._content
        return False

    def close(self):
        """Stop receiving; pending and later sends report failure."""
        if self._channel is not None and not self._channel.receiver_closed:
            self._channel.receiver_closed = True
            self._channel.slot.release()
        self._content = b""

    def __aiter__(self):
        return self

    async def __anext__(self):
        channel = self._channel
        if channel is None:
            if not self._content:
                raise StopAsyncIteration
            content, self._content = self._content, b""
            return content

        if channel.receiver_closed:
            raise StopAsyncIteration
        message = await channel.queue.get()
        if message is _END:
            channel.receiver_closed = True
            raise StopAsyncIteration
        if message is _ABORT:
            self.close()
            raise NetworkError("aborted")
        channel.slot.release()
        return message


class ChunkSender:
    """Sends chunks into a chunked :class:`RequestBody`."""

    def __init__(self, channel):
        self._channel = channel

    async def send(self, chunk):
        """Send a chunk, waiting for room; return False if the body is gone."""
        channel = self._channel
        if channel.sender_closed or channel.receiver_closed:
            return False
        await channel.slot.acquire()
        if channel.sender_closed or channel.receiver_closed:
            channel.slot.release()
            return False
        channel.queue.put_nowait(bytes(chunk))
        return True

    def abort(self):
        """Make the body fail after the chunks already sent; never waits."""
        if not self._channel.receiver_closed:
            self._channel.queue.put_nowait(_ABORT)

    def close(self):
        """End the body after the chunks already sent."""
        if not self._channel.sender_closed:
            self._channel.sender_closed = True
            self._channel.queue.put_nowait(_END)