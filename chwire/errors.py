"""Exceptions raised by the client."""


class ClickHouseError(Exception):
    """Base class of every error raised by the client.

    Raised directly it carries an arbitrary message, as a catch-all error.
    """


class _SourcedError(ClickHouseError):
    """An error caused by another error or described by a message."""

    prefix = ""

    def __init__(self, source):
        self.source = source
        super().__init__(f"{self.prefix}: {source}")
        if isinstance(source, BaseException):
            self.__cause__ = source


class _FixedMessageError(ClickHouseError):
    """An error whose text never changes."""

    message = ""

    def __init__(self):
        super().__init__(self.message)


class InvalidParamsError(_SourcedError):
    """The request could not be built from the given parameters."""

    prefix = "invalid params"


class NetworkError(_SourcedError):
    """The transport failed."""

    prefix = "network error"


class CompressionError(_SourcedError):
    """Data could not be compressed."""

    prefix = "compression error"


class DecompressionError(_SourcedError):
    """Data could not be decompressed."""

    prefix = "decompression error"


class RowNotFoundError(_FixedMessageError):
    """A query expected to return a row returned none."""

    message = "no rows returned by a query that expected to return at least one row"


class SequenceMustHaveLengthError(_FixedMessageError):
    """A sequence of unknown length cannot be encoded."""

    message = "sequences must have a known size ahead of time"


class DeserializeAnyNotSupportedError(_FixedMessageError):
    """A value cannot be decoded without knowing its type."""

    message = "`deserialize_any` is not supported"


class NotEnoughDataError(_FixedMessageError):
    """The input ended in the middle of a row."""

    message = "not enough data, probably a row type mismatches a database schema"


class InvalidUtf8Error(ClickHouseError):
    """A string column held bytes that are not valid UTF-8."""

    message = "string is not valid utf8"

    def __init__(self, source=None):
        self.source = source
        super().__init__(self.message)
        if isinstance(source, BaseException):
            self.__cause__ = source


class InvalidTagEncodingError(ClickHouseError):
    """A tag byte (boolean, nullable marker, enum) held an unknown value."""

    message = "tag for enum is not valid"

    def __init__(self, tag):
        self.tag = tag
        super().__init__(self.message)


class VariantDiscriminatorOutOfBoundError(ClickHouseError):
    """A Variant discriminator does not fit into one byte."""

    def __init__(self, index):
        self.index = index
        super().__init__(
            f"max number of types in the Variant data type is 255, got {index}"
        )


class CustomError(ClickHouseError):
    """A free-form error raised while encoding or decoding values."""

    def __init__(self, message):
        self.detail = message
        super().__init__(f"a custom error message from serde: {message}")


class BadResponseError(ClickHouseError):
    """The server answered with an error."""

    def __init__(self, reason):
        self.reason = reason
        super().__init__(f"bad response: {reason}")


class TimedOutError(_FixedMessageError):
    """An operation did not finish in time."""

    message = "timeout expired"


class UnsupportedError(ClickHouseError):
    """The requested feature is not supported."""

    def __init__(self, what):
        self.what = what
        super().__init__(f"unsupported: {what}")