from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic

from monwire.core.models.kind import K


@dataclass(eq=False)
class Message(Generic[K]):
    """
    Application-level representation of a monitoring message.

    The payload is kept decoded and decompressed: compression and text-safe
    encoding only exist on the wire representation produced by the codec.
    Both attributes may be reassigned freely; a Message is never shared
    between connections or threads.

    Kinds of different domains may share a wire name (INIT, START_MONITOR...),
    so equality compares kinds by identity, not by name.
    """
    kind: K
    """
    Classification tag of the message. `UNDEFINED` only appears on messages
    produced by a failed parse.
    """

    payload: bytes = b""
    """
    Opaque application content. After a failed parse it holds the raw,
    unmodified input bytes instead.
    """

    def __post_init__(self) -> None:
        if not isinstance(self.payload, (bytes, bytearray, memoryview)):
            raise TypeError(
                f"Message payload must be bytes-like, not {type(self.payload).__name__}"
            )
        self.payload = bytes(self.payload)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Message):
            return NotImplemented
        return self.kind is other.kind and self.payload == other.payload

    @property
    def kind_name(self) -> str:
        return self.kind.to_str()


ReceiveMessage = Callable[[], Awaitable[Message | None]]
"""
Coroutine provided to the application for receiving a message.
It suspends until a message is available and returns None once the
connection is lost.
"""


SendMessage = Callable[[Message], Awaitable[bool]]
"""
Coroutine provided to the application for sending a message to the peer.
Returns False when the message could not be serialized.
"""


Application = Callable[[ReceiveMessage, SendMessage], Awaitable[None]]
"""
Per-connection handler: `async def app(receive, send)`.
It loops on `receive()` until it returns None, and may `send()` messages
back on connections that accept writes. The connection is closed once the
handler returns or raises.
"""
