import zlib

from monwire.core.codec.errors import CompressFailure, DecompressFailure
from monwire.core.ports.compressor import Compressor


class ZlibCompressor(Compressor):
    """
    zlib-based implementation of the Compressor interface.

    - deflate stream with zlib header and adler32 checksum
    - truncated streams and trailing garbage are rejected
    - optional ceiling on the decompressed size
    """
    def __init__(
        self,
        level: int = zlib.Z_DEFAULT_COMPRESSION,
        max_payload_size: int | None = None
    ) -> None:
        self._level = level
        self._max_payload_size = max_payload_size

    def compress(self, data: bytes) -> bytes:
        try:
            return zlib.compress(data, self._level)
        except (zlib.error, TypeError) as exc:
            raise CompressFailure(f"zlib compression failed: {exc}") from exc

    def decompress(self, data: bytes) -> bytes:
        decompressor = zlib.decompressobj()
        limit = self._max_payload_size

        try:
            # max_length=0 means unbounded
            out = decompressor.decompress(data, limit + 1 if limit else 0)
        except (zlib.error, TypeError) as exc:
            raise DecompressFailure(f"Corrupt compressed stream: {exc}") from exc

        if limit and len(out) > limit:
            raise DecompressFailure(
                f"Payload exceeds {self._max_payload_size} bytes once decompressed"
            )

        if not decompressor.eof:
            raise DecompressFailure("Truncated compressed stream")

        if decompressor.unused_data:
            raise DecompressFailure("Trailing data after compressed stream")

        return out
