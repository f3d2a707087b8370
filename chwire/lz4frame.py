"""LZ4-compressed blocks framed with a checksum and a header."""

from dataclasses import dataclass

import lz4.block

from chwire.buffer import ByteBuffer
from chwire.cityhash import cityhash128
from chwire.compression import Chunk
from chwire.errors import CompressionError, DecompressionError, NotEnoughDataError

MAX_COMPRESSED_SIZE = 1024 * 1024 * 1024

# Meta = checksum + header
# - [16b] checksum
# - [ 1b] magic number (0x82)
# - [ 4b] compressed size (data + header)
# - [ 4b] uncompressed size
LZ4_CHECKSUM_SIZE = 16
LZ4_HEADER_SIZE = 9
LZ4_META_SIZE = LZ4_CHECKSUM_SIZE + LZ4_HEADER_SIZE
LZ4_MAGIC = 0x82


@dataclass(frozen=True)
class Lz4Meta:
    """The checksum and header in front of a compressed block."""

    checksum: int
    compressed_size: int
    uncompressed_size: int

    def total_size(self):
        """Return the size of the whole frame: checksum, header and data."""
        return LZ4_CHECKSUM_SIZE + self.compressed_size

    @staticmethod
    def read(data):
        """Parse the meta from the first bytes of ``data``."""
        data = bytes(data[:LZ4_META_SIZE])
        if len(data) < LZ4_META_SIZE:
            raise NotEnoughDataError()
        checksum = int.from_bytes(data[:16], "little")
        magic = data[16]
        compressed_size = int.from_bytes(data[17:21], "little")
        uncompressed_size = int.from_bytes(data[21:25], "little")

        if magic != LZ4_MAGIC:
            raise DecompressionError("incorrect magic number")
        if compressed_size > MAX_COMPRESSED_SIZE:
            raise DecompressionError("too big compressed data")

        return Lz4Meta(checksum, compressed_size, uncompressed_size)

    def header(self):
        """Return the header bytes: magic number and both sizes."""
        return (
            bytes([LZ4_MAGIC])
            + self.compressed_size.to_bytes(4, "little")
            + self.uncompressed_size.to_bytes(4, "little")
        )


def calc_checksum(data):
    """Return the checksum of a frame's header and data."""
    return cityhash128(data)


def compress(data):
    """Compress ``data`` into one framed LZ4 block."""
    data = bytes(data)
    try:
        compressed = lz4.block.compress(data, store_size=False)
    except (lz4.block.LZ4BlockError, ValueError, OverflowError) as err:
        raise CompressionError(err) from err

    meta = Lz4Meta(
        checksum=0,
        compressed_size=LZ4_HEADER_SIZE + len(compressed),
        uncompressed_size=len(data),
    )
    body = meta.header() + compressed
    return calc_checksum(body).to_bytes(LZ4_CHECKSUM_SIZE, "little") + body


class Lz4Decoder:
    """Turns an async stream of byte chunks into decompressed :class:`Chunk` objects."""

    def __init__(self, stream):
        self._stream = stream
        self._iterator = None
        self._buffer = ByteBuffer()
        self._meta = None

    def __aiter__(self):
        return self

    async def __anext__(self):
        while True:
            size = self._buffer.remaining()
            required = LZ4_META_SIZE if self._meta is None else self._meta.total_size()

            if size < required:
                chunk = await self._next_chunk()
                if chunk is None:
                    if size > 0:
                        raise DecompressionError("malformed data")
                    raise StopAsyncIteration
                self._buffer.extend(chunk)
                continue

            if self._meta is None:
                self._meta = Lz4Meta.read(self._buffer.view())
                continue

            meta, self._meta = self._meta, None
            break

        data = self._read_data(meta)
        net_size = meta.total_size()
        self._buffer.advance(net_size)
        return Chunk(data=data, net_size=net_size)

    async def _next_chunk(self):
        if self._iterator is None:
            self._iterator = aiter(self._stream)
        try:
            return await anext(self._iterator)
        except StopAsyncIteration:
            return None

    def _read_data(self, meta):
        frame = bytes(self._buffer.view()[:meta.total_size()])
        if calc_checksum(frame[LZ4_CHECKSUM_SIZE:]) != meta.checksum:
            raise DecompressionError("checksum mismatch")
        try:
            return lz4.block.decompress(
                frame[LZ4_META_SIZE:], uncompressed_size=meta.uncompressed_size
            )
        except (lz4.block.LZ4BlockError, ValueError) as err:
            raise DecompressionError(err) from err