import asyncio
import logging

from monwire.core.codec.errors import SerializeError
from monwire.core.codec.frame import MessageCodec
from monwire.core.models.message import Application, Message
from monwire.core.transport.flow import FlowControl


class Streamer:
    """
    Manages the bidirectional flow of messages for a single connection.

    It receives parsed Message objects from the FrameProtocol through an
    internal queue and exposes them to the Application via `receive()`.
    When the Application sends a message, the Streamer frames it with the
    MessageCodec and writes the frame to the transport in a single call.

    A message that cannot be serialized, or a send on a read-only pipe, is
    reported to the Application by a False return value; the connection
    stays open.
    """
    def __init__(
        self,
        transport: asyncio.BaseTransport,
        flow: FlowControl,
        codec: MessageCodec,
        queue: asyncio.Queue[Message | None]
    ) -> None:
        self.queue = queue
        self._transport = transport
        self._flow = flow
        self._codec = codec
        self._logger = logging.getLogger("core.transport.stream")

    async def send(self, message: Message) -> bool:
        if not isinstance(self._transport, asyncio.WriteTransport):
            self._logger.error(f"Cannot send {message.kind_name} message on a read-only pipe")
            return False

        await self._flow.drain()

        try:
            frame = self._codec.serialize(message)
        except SerializeError as exc:
            self._logger.error(f"Failed to send {message.kind_name} message: {exc}")
            return False

        self._transport.write(frame)
        return True

    async def receive(self) -> Message | None:
        return await self.queue.get()

    async def run_app(self, app: Application) -> None:
        try:
            await app(self.receive, self.send)
        except BaseException as exc:
            self._logger.error("Exception in Application", exc_info=exc)
        finally:
            self._transport.close()
