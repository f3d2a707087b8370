"""CityHash v1.0.2, 128-bit variant, as used for compressed block checksums."""

_MASK = (1 << 64) - 1

_K0 = 0xC3A5C85C97CB3127
_K1 = 0xB492B66FBE98F273
_K2 = 0x9AE16A3B2F90404F
_K3 = 0xC949D7C7509E6557
_KMUL = 0x9DDFEA08EB382D69


def _fetch64(data, pos):
    return int.from_bytes(data[pos:pos + 8], "little")


def _fetch32(data, pos):
    return int.from_bytes(data[pos:pos + 4], "little")


def _rotate(value, shift):
    if shift == 0:
        return value
    return ((value >> shift) | (value << (64 - shift))) & _MASK


def _shift_mix(value):
    return value ^ (value >> 47)


def _hash_len16(low, high):
    a = ((low ^ high) * _KMUL) & _MASK
    a ^= a >> 47
    b = ((high ^ a) * _KMUL) & _MASK
    b ^= b >> 47
    return (b * _KMUL) & _MASK


def _hash_len_0_to_16(data):
    length = len(data)
    if length > 8:
        a = _fetch64(data, 0)
        b = _fetch64(data, length - 8)
        return _hash_len16(a, _rotate((b + length) & _MASK, length)) ^ b
    if length >= 4:
        a = _fetch32(data, 0)
        return _hash_len16((length + (a << 3)) & _MASK, _fetch32(data, length - 4))
    if length > 0:
        a = data[0]
        b = data[length >> 1]
        c = data[length - 1]
        y = (a + (b << 8)) & 0xFFFFFFFF
        z = (length + (c << 2)) & 0xFFFFFFFF
        return (_shift_mix(((y * _K2) ^ (z * _K3)) & _MASK) * _K2) & _MASK
    return _K2


def _weak_hash_len32_with_seeds(data, pos, a, b):
    w = _fetch64(data, pos)
    x = _fetch64(data, pos + 8)
    y = _fetch64(data, pos + 16)
    z = _fetch64(data, pos + 24)
    a = (a + w) & _MASK
    b = _rotate((b + a + z) & _MASK, 21)
    c = a
    a = (a + x) & _MASK
    a = (a + y) & _MASK
    b = (b + _rotate(a, 44)) & _MASK
    return (a + z) & _MASK, (b + c) & _MASK


def _city_murmur(data, seed_low, seed_high):
    length = len(data)
    a, b = seed_low, seed_high
    left = length - 16
    if left <= 0:
        a = (_shift_mix((a * _K1) & _MASK) * _K1) & _MASK
        c = (b * _K1 + _hash_len_0_to_16(data)) & _MASK
        d = _shift_mix((a + (_fetch64(data, 0) if length >= 8 else c)) & _MASK)
    else:
        c = _hash_len16((_fetch64(data, length - 8) + _K1) & _MASK, a)
        d = _hash_len16((b + length) & _MASK, (c + _fetch64(data, length - 16)) & _MASK)
        a = (a + d) & _MASK
        pos = 0
        while True:
            a ^= (_shift_mix((_fetch64(data, pos) * _K1) & _MASK) * _K1) & _MASK
            a = (a * _K1) & _MASK
            b ^= a
            c ^= (_shift_mix((_fetch64(data, pos + 8) * _K1) & _MASK) * _K1) & _MASK
            c = (c * _K1) & _MASK
            d ^= c
            pos += 16
            left -= 16
            if left <= 0:
                break
    a = _hash_len16(a, c)
    b = _hash_len16(d, b)
    return a ^ b, _hash_len16(b, a)


def _city_hash128_with_seed(data, seed_low, seed_high):
    length = len(data)
    if length < 128:
        return _city_murmur(data, seed_low, seed_high)

    x, y = seed_low, seed_high
    z = (length * _K1) & _MASK
    v0 = (_rotate(y ^ _K1, 49) * _K1 + _fetch64(data, 0)) & _MASK
    v1 = (_rotate(v0, 42) * _K1 + _fetch64(data, 8)) & _MASK
    w0 = (_rotate((y + z) & _MASK, 35) * _K1 + x) & _MASK
    w1 = (_rotate((x + _fetch64(data, 88)) & _MASK, 53) * _K1) & _MASK

    pos = 0
    remaining = length
    while True:
        for _ in range(2):
            x = (_rotate((x + y + v0 + _fetch64(data, pos + 16)) & _MASK, 37) * _K1) & _MASK
            y = (_rotate((y + v1 + _fetch64(data, pos + 48)) & _MASK, 42) * _K1) & _MASK
            x ^= w1
            y ^= v0
            z = _rotate(z ^ w0, 33)
            v0, v1 = _weak_hash_len32_with_seeds(data, pos, (v1 * _K1) & _MASK, (x + w0) & _MASK)
            w0, w1 = _weak_hash_len32_with_seeds(data, pos + 32, (z + w1) & _MASK, y)
            z, x = x, z
            pos += 64
        remaining -= 128
        if remaining < 128:
            break

    y = (y + _rotate(w0, 37) * _K0 + z) & _MASK
    x = (x + _rotate((v0 + z) & _MASK, 49) * _K0) & _MASK

    # Hash up to four 32-byte chunks taken from the end of the input.
    tail_done = 0
    while tail_done < remaining:
        tail_done += 32
        y = (_rotate((y - x) & _MASK, 42) * _K0 + v1) & _MASK
        w0 = (w0 + _fetch64(data, pos + remaining - tail_done + 16)) & _MASK
        x = (_rotate(x, 49) * _K0 + w0) & _MASK
        w0 = (w0 + v0) & _MASK
        v0, v1 = _weak_hash_len32_with_seeds(data, pos + remaining - tail_done, v0, v1)

    x = _hash_len16(x, v0)
    y = _hash_len16(y, w0)
    return (
        (_hash_len16((x + v1) & _MASK, w1) + y) & _MASK,
        _hash_len16((x + w1) & _MASK, (y + v1) & _MASK),
    )


def cityhash128(data):
    """Return the 128-bit CityHash of ``data``.

    The low 64 bits of the result are the first half of the hash and the high
    64 bits the second one, so ``to_bytes(16, "little")`` gives the wire order.
    """
    data = bytes(data)
    length = len(data)
    if length >= 16:
        low, high = _city_hash128_with_seed(
            data[16:], _fetch64(data, 0) ^ _K3, _fetch64(data, 8)
        )
    elif length >= 8:
        low, high = _city_hash128_with_seed(
            b"",
            _fetch64(data, 0) ^ ((length * _K0) & _MASK),
            _fetch64(data, length - 8) ^ _K1,
        )
    else:
        low, high = _city_hash128_with_seed(data, _K0, _K1)
    return low | (high << 64)