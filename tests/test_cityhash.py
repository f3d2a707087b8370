import random

import pytest

from chwire.cityhash import cityhash128

FRAME = bytes(
    [
        245, 5, 222, 235, 225, 158, 59, 108, 225, 31, 65, 215, 66, 66, 36, 92,
        0x82, 34, 0, 0, 0, 23, 0, 0, 0,
        240, 8, 1, 0, 2, 255, 255, 255, 255, 0, 1, 1, 1, 115, 6, 83, 116, 114,
        105, 110, 103, 3, 97, 98, 99,
    ]
)

FRAME_CHECKSUM = int.from_bytes(FRAME[:16], "little")


def test_checksum_of_known_frame():
    assert cityhash128(FRAME[16:]) == FRAME_CHECKSUM


def test_hash_of_reassembled_pieces():
    pieces = [FRAME[16:20], FRAME[20:33], FRAME[33:]]
    assert cityhash128(b"".join(pieces)) == FRAME_CHECKSUM


def test_accepts_bytes_like_objects():
    data = FRAME[16:]
    assert cityhash128(bytearray(data)) == FRAME_CHECKSUM
    assert cityhash128(memoryview(data)) == FRAME_CHECKSUM


@pytest.mark.parametrize("length", [0, 1, 3, 4, 7, 8, 15, 16, 17, 127, 128, 129, 255, 256, 1000])
def test_fits_into_128_bits(length):
    data = (bytes(range(256)) * 4)[:length]
    value = cityhash128(data)
    assert 0 <= value < 1 << 128


def test_every_prefix_hashes_differently():
    data = random.Random(11).randbytes(400)
    hashes = {cityhash128(data[:length]) for length in range(len(data) + 1)}
    assert len(hashes) == len(data) + 1


@pytest.mark.parametrize("length", [5, 12, 40, 200, 777])
def test_single_byte_change_alters_hash(length):
    data = bytearray(random.Random(length).randbytes(length))
    original = cityhash128(data)
    data[length // 2] ^= 0x01
    assert cityhash128(data) != original
    data[length // 2] ^= 0x01
    assert cityhash128(data) == original