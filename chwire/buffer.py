"""A byte buffer with a read cursor, fed by incoming chunks."""


class ByteBuffer:
    """Holds unread bytes of a stream; new chunks are appended at the end."""

    __slots__ = ("_data", "_cursor")

    def __init__(self, data=b""):
        self._data = bytes(data)
        self._cursor = 0

    def view(self):
        """Return the unread bytes without copying them."""
        return memoryview(self._data)[self._cursor:]

    def remaining(self):
        """Return the number of unread bytes."""
        return len(self._data) - self._cursor

    def __len__(self):
        return self.remaining()

    def is_empty(self):
        """Return True when every byte has been read."""
        return self._cursor >= len(self._data)

    def set_remaining(self, n):
        """Mark everything but the last ``n`` bytes as read."""
        if not 0 <= n <= len(self._data):
            raise ValueError(f"cannot leave {n} bytes of {len(self._data)}")
        self._cursor = len(self._data) - n

    def advance(self, n):
        """Mark the next ``n`` bytes as read."""
        if not 0 <= n <= self.remaining():
            raise ValueError(f"cannot advance by {n}, only {self.remaining()} left")
        self._cursor += n

    def extend(self, chunk):
        """Append a chunk after the unread bytes."""
        if self.is_empty():
            # Usually the previous chunk is fully consumed: just take the new one.
            self._data = bytes(chunk)
        else:
            self._data = self._data[self._cursor:] + bytes(chunk)
        self._cursor = 0