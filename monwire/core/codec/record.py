from dataclasses import dataclass
from typing import Any, Generic

from monwire.core.codec.errors import DecodeFailure, EncodeFailure
from monwire.core.codec.frame import MessageCodec
from monwire.core.models.kind import K
from monwire.core.models.message import Message
from monwire.core.ports.serializer import Serializer


@dataclass(frozen=True)
class Record(Generic[K]):
    kind: K
    value: Any


class RecordCodec(Generic[K]):
    """
    Carries structured records (host or VM monitoring data, probe
    configuration...) as message payloads.

    The record is serialized into payload bytes by the Serializer, then
    framed by the MessageCodec. No schema is enforced on the record.
    """
    def __init__(self, codec: MessageCodec[K], serializer: Serializer) -> None:
        self._codec = codec
        self._serializer = serializer

    def pack(self, kind: K, record: Any) -> bytes:
        """Raises EncodeFailure when the record cannot be serialized."""
        try:
            payload = self._serializer.serialize(record)
        except Exception as exc:
            raise EncodeFailure(f"Invalid {kind.to_str()} record: {exc}") from exc

        return self._codec.serialize(Message(kind, payload))

    def unpack(self, frame: bytes) -> Record[K]:
        """
        Parse a frame and deserialize its payload.

        Raises the ParseError of the failed parse, or DecodeFailure when the
        payload is not a serialized record. In both cases `raw` holds the
        unmodified frame.
        """
        result = self._codec.parse(frame)

        if result.error is not None:
            raise result.error

        message = result.message

        try:
            value = self._serializer.deserialize(message.payload)
        except Exception as exc:
            raise DecodeFailure(f"Invalid {message.kind_name} record: {exc}", bytes(frame)) from exc

        return Record(message.kind, value)
