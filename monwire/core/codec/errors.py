class CodecError(Exception):
    """Base class for every failure of the wire codec."""


class ParseError(CodecError):
    """
    A received frame could not be turned into a message.

    `raw` keeps the unmodified input so that callers can log it.
    """
    def __init__(self, reason: str, raw: bytes = b"") -> None:
        super().__init__(reason)
        self.reason = reason
        self.raw = raw


class MalformedFrame(ParseError):
    """The frame is empty or has no payload token."""


class UnknownKind(ParseError):
    """The first token is not the name of a kind of the domain."""


class DecodeFailure(ParseError):
    """The payload token is not valid text-safe encoded data."""


class DecompressFailure(ParseError):
    """The decoded payload is not a valid compressed stream."""


class SerializeError(CodecError):
    """A message could not be turned into a frame. Nothing was written."""


class CompressFailure(SerializeError):
    pass


class EncodeFailure(SerializeError):
    pass
