from typing import Protocol


class TextEncoder(Protocol):
    """
    Defines the text-safe encoding stage of the wire pipeline.

    Encoded text must not contain whitespace, so that it can be carried as a
    single token of a newline-terminated frame.
    """

    def encode(self, data: bytes) -> str:
        """Encode bytes into whitespace-free text. Raises EncodeFailure on error."""

    def decode(self, text: bytes | str) -> bytes:
        """Decode a text token back into bytes. Raises DecodeFailure on error."""
