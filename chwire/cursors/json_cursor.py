"""A cursor over rows in the JSONEachRowWithProgress format."""

import json

from chwire.buffer import ByteBuffer
from chwire.cursors.raw import RawCursor
from chwire.errors import BadResponseError, CustomError

_PROGRESS = object()


def _parse_line(line):
    try:
        obj = json.loads(line)
    except ValueError as err:
        raise BadResponseError(str(err)) from err
    if not isinstance(obj, dict) or len(obj) != 1:
        raise BadResponseError("expected an object with a single `row` or `progress` key")
    (key, value), = obj.items()
    if key == "row":
        return value
    if key == "progress":
        if not isinstance(value, dict):
            raise BadResponseError("invalid type: expected struct variant `progress`")
        return _PROGRESS
    raise BadResponseError(f"unknown variant `{key}`, expected `row` or `progress`")


class JsonCursor:
    """Emits the ``row`` values of a JSONEachRowWithProgress response.

    Progress lines are skipped. Each row is passed to ``factory`` when given.
    """

    def __init__(self, response, factory=None):
        self._raw = RawCursor(response)
        self._buffer = ByteBuffer()
        self._factory = factory

    async def next(self):
        """Return the next row, or None when the response is exhausted."""
        while True:
            data = bytes(self._buffer.view())
            end = data.find(b"\n")
            if end >= 0:
                self._buffer.advance(end + 1)
                try:
                    line = data[:end].decode("utf-8")
                except UnicodeDecodeError as err:
                    raise CustomError(str(err)) from err
                value = _parse_line(line)
                if value is _PROGRESS:
                    continue
                return self._factory(value) if self._factory is not None else value

            chunk = await self._raw.next()
            if chunk is None:
                return None
            self._buffer.extend(chunk)