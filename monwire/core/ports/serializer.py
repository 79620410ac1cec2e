from typing import Protocol, Any


class Serializer(Protocol):
    """
    Defines the interface for turning structured records into message
    payloads and back.

    Implementations must be:
    - deterministic
    - pure (no side effects)
    - safe against malformed input
    """

    def serialize(self, record: Any) -> bytes:
        """Encode a Python object into payload bytes."""

    def deserialize(self, data: bytes) -> Any:
        """Decode payload bytes into a Python object."""
