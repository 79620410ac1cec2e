import io
import logging
import os
from dataclasses import dataclass
from typing import BinaryIO, Generic, TextIO

from monwire.core.codec.errors import (
    DecodeFailure,
    DecompressFailure,
    EncodeFailure,
    MalformedFrame,
    ParseError,
    SerializeError,
    UnknownKind,
)
from monwire.core.models.kind import K, kind_table
from monwire.core.models.message import Message
from monwire.core.ports.compressor import Compressor
from monwire.core.ports.encoder import TextEncoder

Sink = bytearray | int | BinaryIO | TextIO
"""
Destination of a serialized frame: an in-memory buffer, a writable file
descriptor, or a binary/text output stream.
"""


@dataclass(frozen=True)
class ParseResult(Generic[K]):
    """
    Outcome of MessageCodec.parse().

    On failure `message.kind` is UNDEFINED, `message.payload` is the raw
    input and `error` holds the reason, kept for logging only.
    """
    message: Message[K]
    error: ParseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class MessageCodec(Generic[K]):
    """
    Frames, compresses and tags monitoring messages of one kind domain.

    A frame is a single line:

        <KIND-NAME> ' ' <ENCODED-COMPRESSED-PAYLOAD> '\\n'

    The payload is compressed by the Compressor, then turned into
    whitespace-free text by the TextEncoder, so neither field can contain
    the separator or the terminator.

    Parsing never raises. Every failure (malformed frame, unknown kind,
    undecodable or corrupt payload) collapses into the same outcome: an
    UNDEFINED message carrying the raw input, with a failed ParseResult.
    Serialization either produces a complete frame or raises a
    SerializeError; no partial frame is ever written.

    The codec holds no per-call state and may be shared between threads
    as long as each call works on its own message and buffers.
    """
    def __init__(
        self,
        kinds: type[K],
        compressor: Compressor,
        encoder: TextEncoder,
    ) -> None:
        # Raises TypeError for enumerations without UNDEFINED
        kind_table(kinds)

        self._kinds = kinds
        self._undefined: K = kinds["UNDEFINED"]
        self._compressor = compressor
        self._encoder = encoder
        self._logger = logging.getLogger("core.codec")

    @property
    def kinds(self) -> type[K]:
        return self._kinds

    def parse(self, data: bytes) -> ParseResult[K]:
        raw = bytes(data)

        try:
            kind, token = self._tokenize(raw)
            payload = self._decompress(self._decode(token, raw), raw)
        except ParseError as exc:
            self._logger.debug(f"{type(exc).__name__}: {exc.reason}")
            return ParseResult(Message(self._undefined, raw), exc)

        return ParseResult(Message(kind, payload))

    def serialize(self, message: Message[K]) -> bytes:
        kind = message.kind

        if not isinstance(kind, self._kinds):
            raise EncodeFailure(
                f"Kind {kind!r} does not belong to {self._kinds.__name__}"
            )

        if kind is self._undefined:
            raise EncodeFailure("Cannot serialize an UNDEFINED message")

        compressed = self._compressor.compress(message.payload)
        text = self._encoder.encode(compressed)

        if not text or len(text.split()) != 1:
            raise EncodeFailure("Encoded payload is empty or contains whitespace")

        try:
            encoded = text.encode("ascii")
        except UnicodeEncodeError as exc:
            raise EncodeFailure(f"Encoded payload is not ASCII: {exc}") from exc

        return b"".join((kind.to_str().encode("ascii"), b" ", encoded, b"\n"))

    def write_to(self, message: Message[K], sink: Sink) -> bool:
        """
        Serialize `message` into `sink`.

        - bytearray: its contents are replaced by the frame
        - int: the frame is written with a single os.write() call
        - text stream: the frame is written as ASCII text
        - any other stream: the frame is written as bytes

        Short writes are not detected; sinks needing retries must wrap the
        destination. Returns False, leaving the sink untouched, when the
        message cannot be serialized.
        """
        try:
            frame = self.serialize(message)
        except SerializeError as exc:
            self._logger.error(f"Failed to serialize {message.kind_name} message: {exc}")
            return False

        if isinstance(sink, bytearray):
            sink[:] = frame
        elif isinstance(sink, int):
            os.write(sink, frame)
        elif isinstance(sink, io.TextIOBase):
            sink.write(frame.decode("ascii"))
        else:
            sink.write(frame)

        return True

    def _tokenize(self, raw: bytes) -> tuple[K, bytes]:
        fields = raw.split(None, 1)

        if not fields:
            raise MalformedFrame("Empty frame", raw)

        try:
            name = fields[0].decode("ascii")
        except UnicodeDecodeError:
            raise UnknownKind("Kind name is not ASCII", raw) from None

        kind = self._kinds.from_str(name)

        if kind is self._undefined:
            raise UnknownKind(f"Unknown message kind '{name}'", raw)

        # The payload is a single token: anything after it makes it undecodable
        token = fields[1].strip() if len(fields) == 2 else b""

        if not token:
            raise MalformedFrame(f"Missing payload for {name} message", raw)

        return kind, token

    def _decode(self, token: bytes, raw: bytes) -> bytes:
        try:
            return self._encoder.decode(token)
        except DecodeFailure as exc:
            raise DecodeFailure(exc.reason, raw) from exc

    def _decompress(self, data: bytes, raw: bytes) -> bytes:
        try:
            return self._compressor.decompress(data)
        except DecompressFailure as exc:
            raise DecompressFailure(exc.reason, raw) from exc
