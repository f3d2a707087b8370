import dataclasses

import pytest

from chwire.compression import Chunk, Compression


def test_default_is_lz4():
    assert Compression.default() is Compression.LZ4


def test_is_lz4():
    assert Compression.LZ4.is_lz4() is True
    assert Compression.NONE.is_lz4() is False


def test_default_is_lz4_enabled():
    assert Compression.default().is_lz4()


def test_chunk_keeps_fields():
    chunk = Chunk(data=b"abc", net_size=10)
    assert chunk.data == b"abc"
    assert chunk.net_size == 10
    assert chunk == Chunk(b"abc", 10)


def test_chunk_is_immutable():
    chunk = Chunk(b"abc", 3)
    with pytest.raises(dataclasses.FrozenInstanceError):
        chunk.net_size = 4
    assert chunk.net_size == 3