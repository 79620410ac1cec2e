import base64

from monwire.core.codec.errors import DecodeFailure, EncodeFailure
from monwire.core.ports.encoder import TextEncoder


class Base64Encoder(TextEncoder):
    """
    Standard base64 (RFC 4648) implementation of the TextEncoder interface.
    The alphabet contains no whitespace, and decoding is strict.
    """
    def encode(self, data: bytes) -> str:
        try:
            return base64.b64encode(data).decode("ascii")
        except TypeError as exc:
            raise EncodeFailure(f"base64 encoding failed: {exc}") from exc

    def decode(self, text: bytes | str) -> bytes:
        try:
            return base64.b64decode(text.strip(), validate=True)
        except ValueError as exc:
            raise DecodeFailure(f"Invalid base64 payload: {exc}") from exc
