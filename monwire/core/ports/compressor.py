from typing import Protocol


class Compressor(Protocol):
    """
    Defines the interface of the compression stage of the wire pipeline.

    Implementations must be:
    - deterministic
    - pure (no side effects)
    - strict: malformed, truncated or oversized streams are rejected
    """

    def compress(self, data: bytes) -> bytes:
        """Compress a payload. Raises CompressFailure on error."""

    def decompress(self, data: bytes) -> bytes:
        """Restore a compressed payload. Raises DecompressFailure on error."""
