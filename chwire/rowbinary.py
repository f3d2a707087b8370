"""Encoding and decoding of rows in the RowBinary format.

Values are described by a schema built from :class:`Scalar` members and the
container types :class:`String`, :class:`Bytes`, :class:`FixedString`,
:class:`Nullable`, :class:`Array`, :class:`Tuple`, :class:`Variant` and
:class:`Struct`. Every schema object has ``encode(buffer, value)`` and
``decode(reader)``.
"""

import struct
from collections.abc import Mapping, Sized
from enum import Enum
from operator import index as _as_index

from chwire.errors import (
    CustomError,
    DeserializeAnyNotSupportedError,
    InvalidTagEncodingError,
    InvalidUtf8Error,
    NotEnoughDataError,
    SequenceMustHaveLengthError,
    VariantDiscriminatorOutOfBoundError,
)

_U64_LIMIT = 1 << 64
_MAX_VARIANT_INDEX = 255


class Reader:
    """Reads bytes from a buffer and remembers how many were consumed."""

    __slots__ = ("_data", "_pos")

    def __init__(self, data):
        self._data = memoryview(data).cast("B")
        self._pos = 0

    def read(self, size):
        """Return the next ``size`` bytes, or raise if there are not enough."""
        if size < 0 or len(self._data) - self._pos < size:
            raise NotEnoughDataError()
        start = self._pos
        self._pos += size
        return bytes(self._data[start:self._pos])

    def read_byte(self):
        """Return the next byte as an integer."""
        if self._pos >= len(self._data):
            raise NotEnoughDataError()
        value = self._data[self._pos]
        self._pos += 1
        return value

    def consumed(self):
        """Return the number of bytes read so far."""
        return self._pos

    def remaining(self):
        """Return the number of bytes not read yet."""
        return len(self._data) - self._pos


def put_unsigned_leb128(buffer, value):
    """Append ``value`` to ``buffer`` as unsigned LEB128."""
    if not 0 <= value < _U64_LIMIT:
        raise ValueError(f"{value} does not fit into an unsigned 64-bit integer")
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            byte |= 0x80
        buffer.append(byte)
        if not value:
            return


def get_unsigned_leb128(reader):
    """Read an unsigned LEB128 integer from ``reader``."""
    value = 0
    shift = 0
    while True:
        byte = reader.read_byte()
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return value
        shift += 7
        if shift > 57:
            raise NotEnoughDataError()


class Scalar(Enum):
    """Fixed-size numbers and booleans, little-endian."""

    INT8 = ("Int8", 1, True)
    INT16 = ("Int16", 2, True)
    INT32 = ("Int32", 4, True)
    INT64 = ("Int64", 8, True)
    INT128 = ("Int128", 16, True)
    UINT8 = ("UInt8", 1, False)
    UINT16 = ("UInt16", 2, False)
    UINT32 = ("UInt32", 4, False)
    UINT64 = ("UInt64", 8, False)
    UINT128 = ("UInt128", 16, False)
    FLOAT32 = ("Float32", 4, None)
    FLOAT64 = ("Float64", 8, None)
    BOOL = ("Bool", 1, None)

    def __init__(self, label, size, signed):
        self.label = label
        self.size = size
        self.signed = signed

    @property
    def _float_format(self):
        return "<f" if self is Scalar.FLOAT32 else "<d"

    def encode(self, buffer, value):
        if self is Scalar.BOOL:
            buffer.append(1 if value else 0)
        elif self.signed is None:
            try:
                buffer += struct.pack(self._float_format, value)
            except (struct.error, OverflowError) as err:
                raise CustomError(f"invalid {self.label} value {value!r}: {err}") from err
        else:
            try:
                number = _as_index(value)
                buffer += number.to_bytes(self.size, "little", signed=self.signed)
            except (TypeError, OverflowError) as err:
                raise CustomError(f"invalid {self.label} value {value!r}") from err

    def decode(self, reader):
        if self is Scalar.BOOL:
            tag = reader.read_byte()
            if tag == 0:
                return False
            if tag == 1:
                return True
            raise InvalidTagEncodingError(tag)
        data = reader.read(self.size)
        if self.signed is None:
            return struct.unpack(self._float_format, data)[0]
        return int.from_bytes(data, "little", signed=self.signed)


class String:
    """A length-prefixed UTF-8 string, decoded to ``str``."""

    def encode(self, buffer, value):
        if not isinstance(value, str):
            raise CustomError(f"expected a string, got {value!r}")
        data = value.encode("utf-8")
        put_unsigned_leb128(buffer, len(data))
        buffer += data

    def decode(self, reader):
        data = reader.read(get_unsigned_leb128(reader))
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as err:
            raise InvalidUtf8Error(err) from err

    def __repr__(self):
        return "String()"


class Bytes:
    """A length-prefixed blob, decoded to ``bytes``."""

    def encode(self, buffer, value):
        try:
            data = bytes(value)
        except TypeError as err:
            raise CustomError(f"expected bytes, got {value!r}") from err
        put_unsigned_leb128(buffer, len(data))
        buffer += data

    def decode(self, reader):
        return reader.read(get_unsigned_leb128(reader))

    def __repr__(self):
        return "Bytes()"


class FixedString:
    """Exactly ``size`` raw bytes with no length prefix."""

    def __init__(self, size):
        if size < 0:
            raise ValueError("size must not be negative")
        self.size = size

    def encode(self, buffer, value):
        try:
            data = bytes(value)
        except TypeError as err:
            raise CustomError(f"expected bytes, got {value!r}") from err
        if len(data) != self.size:
            raise CustomError(
                f"invalid length {len(data)}, expected an array of length {self.size}"
            )
        buffer += data

    def decode(self, reader):
        return reader.read(self.size)

    def __repr__(self):
        return f"FixedString({self.size})"


class Nullable:
    """A value that may be ``None``; a tag byte of 1 marks NULL."""

    def __init__(self, inner):
        self.inner = _check_schema(inner)

    def encode(self, buffer, value):
        if value is None:
            buffer.append(1)
        else:
            buffer.append(0)
            self.inner.encode(buffer, value)

    def decode(self, reader):
        tag = reader.read_byte()
        if tag == 0:
            return self.inner.decode(reader)
        if tag == 1:
            return None
        raise InvalidTagEncodingError(tag)

    def __repr__(self):
        return f"Nullable({self.inner!r})"


class Array:
    """A length-prefixed sequence of items, decoded to ``list``."""

    def __init__(self, item):
        self.item = _check_schema(item)

    def encode(self, buffer, value):
        if not isinstance(value, Sized):
            raise SequenceMustHaveLengthError()
        put_unsigned_leb128(buffer, len(value))
        for element in value:
            self.item.encode(buffer, element)

    def decode(self, reader):
        length = get_unsigned_leb128(reader)
        return [self.item.decode(reader) for _ in range(length)]

    def __repr__(self):
        return f"Array({self.item!r})"


class Tuple:
    """A fixed number of values of given types, decoded to ``tuple``."""

    def __init__(self, *items):
        self.items = tuple(_check_schema(item) for item in items)

    def encode(self, buffer, value):
        values = tuple(value)
        if len(values) != len(self.items):
            raise CustomError(
                f"invalid length {len(values)}, expected a tuple of size {len(self.items)}"
            )
        for schema, element in zip(self.items, values):
            schema.encode(buffer, element)

    def decode(self, reader):
        return tuple(schema.decode(reader) for schema in self.items)

    def __repr__(self):
        return f"Tuple({', '.join(map(repr, self.items))})"


class Variant:
    """One of several types; values are ``(index, value)`` pairs."""

    def __init__(self, *types):
        self.types = tuple(_check_schema(item) for item in types)

    def encode(self, buffer, value):
        try:
            position, inner = value
            position = _as_index(position)
        except (TypeError, ValueError) as err:
            raise CustomError(f"expected an (index, value) pair, got {value!r}") from err
        if position > _MAX_VARIANT_INDEX:
            raise VariantDiscriminatorOutOfBoundError(position)
        if not 0 <= position < len(self.types):
            raise CustomError(self._unknown(position))
        buffer.append(position)
        self.types[position].encode(buffer, inner)

    def decode(self, reader):
        position = reader.read_byte()
        if position >= len(self.types):
            raise CustomError(self._unknown(position))
        return position, self.types[position].decode(reader)

    def _unknown(self, position):
        return (
            f"invalid value: integer `{position}`, "
            f"expected variant index 0 <= i < {len(self.types)}"
        )

    def __repr__(self):
        return f"Variant({', '.join(map(repr, self.types))})"


class Struct:
    """Named fields written one after another, without names or prefixes.

    Values are read from a mapping by key or from an object by attribute.
    Decoded rows are passed as keyword arguments to ``factory``, or returned
    as a ``dict`` when no factory is given.
    """

    def __init__(self, fields, factory=None):
        items = fields.items() if isinstance(fields, Mapping) else fields
        self.fields = tuple((name, _check_schema(schema)) for name, schema in items)
        self.factory = factory

    def encode(self, buffer, value):
        for name, schema in self.fields:
            schema.encode(buffer, self._field(value, name))

    @staticmethod
    def _field(value, name):
        try:
            if isinstance(value, Mapping):
                return value[name]
            return getattr(value, name)
        except (KeyError, AttributeError):
            raise CustomError(f"missing field `{name}`") from None

    def decode(self, reader):
        values = {name: schema.decode(reader) for name, schema in self.fields}
        return self.factory(**values) if self.factory is not None else values

    def __repr__(self):
        return f"Struct({list(self.fields)!r})"


def _check_schema(schema):
    if not (hasattr(schema, "encode") and hasattr(schema, "decode")):
        raise TypeError(f"{schema!r} is not a RowBinary schema")
    return schema


def serialize_into(buffer, value, schema):
    """Append ``value`` encoded by ``schema`` to ``buffer``; return bytes written."""
    _check_schema(schema)
    before = len(buffer)
    schema.encode(buffer, value)
    return len(buffer) - before


def serialize(value, schema):
    """Return ``value`` encoded by ``schema`` as bytes."""
    buffer = bytearray()
    serialize_into(buffer, value, schema)
    return bytes(buffer)


def deserialize_from(data, schema):
    """Decode one value described by ``schema``.

    ``data`` is a :class:`Reader`, which is left positioned after the value,
    or any bytes-like object.
    """
    if schema is None:
        raise DeserializeAnyNotSupportedError()
    _check_schema(schema)
    reader = data if isinstance(data, Reader) else Reader(data)
    return schema.decode(reader)