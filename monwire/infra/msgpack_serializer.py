import msgpack
from typing import Any

from monwire.core.ports.serializer import Serializer


class MsgPackSerializer(Serializer):
    """
    MsgPack-based implementation of the Serializer interface.

    - deterministic binary encoding
    - compact, so records compress well before framing
    - bytes and str stay distinct (use_bin_type)
    """
    def serialize(self, record: Any) -> bytes:
        return msgpack.packb(record, use_bin_type=True)

    def deserialize(self, data: bytes) -> Any:
        return msgpack.unpackb(data, raw=False)
