"""Compression modes and decoded chunks."""

from dataclasses import dataclass
from enum import Enum


class Compression(Enum):
    """How request and response bodies are compressed."""

    NONE = "none"
    LZ4 = "lz4"

    def is_lz4(self):
        """Return True if LZ4 is used."""
        return self is not Compression.NONE

    @staticmethod
    def default():
        """Return the compression used when none is chosen."""
        return Compression.LZ4


@dataclass(frozen=True)
class Chunk:
    """A piece of decoded response data and how many bytes it took on the wire."""

    data: bytes
    net_size: int