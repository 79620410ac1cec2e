import asyncio
import logging

from monwire.core.codec.frame import MessageCodec
from monwire.core.models.config import StreamConfig
from monwire.core.models.state import StreamState
from monwire.core.transport.flow import FlowControl
from monwire.core.transport.stream import Streamer


class FrameProtocol(asyncio.Protocol):
    """
    Implements newline framing and the connection lifecycle for a single
    monitoring peer (a probe pipe, a driver socket...).

    Incoming bytes are accumulated until a newline terminates a frame. Each
    complete frame is parsed by the MessageCodec on its own: frames carry no
    ordering or linkage, so a bad frame never affects its neighbours. Parsed
    messages are pushed into the Streamer's queue, while frames that fail to
    parse are logged with their raw bytes and dropped.

    If a frame still waiting for its terminator grows beyond the configured
    `max_frame_size`, the connection is closed immediately.

    When the connection is lost, FrameProtocol removes itself from the
    stream state, resumes writing if flow control was active, closes the
    transport if the disconnection was clean, and signals termination to the
    Streamer by pushing a None sentinel into its queue.
    """
    def __init__(
        self,
        config: StreamConfig,
        state: StreamState,
        codec: MessageCodec,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._transport: asyncio.Transport = None   # type: ignore[assignment]
        self._flow: FlowControl = None  # type: ignore[assignment]
        self._streamer: Streamer = None   # type: ignore[assignment]

        self._config = config
        self._app = config.app
        self._loop = loop or asyncio.get_event_loop()
        self._connections = state.connections
        self._tasks = state.tasks
        self._codec = codec
        self._buffer = bytearray()
        self._peer: str = ""
        self._logger = logging.getLogger("core.transport.protocol")

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        self._transport = transport  # type: ignore[assignment]
        self._flow = FlowControl()
        self._connections.add(self)
        self._streamer = Streamer(
            transport=self._transport,
            flow=self._flow,
            queue=asyncio.Queue(),
            codec=self._codec
        )
        task = self._loop.create_task(self._streamer.run_app(self._app))
        task.add_done_callback(self._tasks.discard)
        self._tasks.add(task)

        peername = transport.get_extra_info("peername")
        if isinstance(peername, tuple) and len(peername) >= 2:
            self._peer = "%s:%d" % peername[:2]
        self._logger.debug(f"{self._peer} - Connection made")

    def connection_lost(self, exc: Exception | None) -> None:
        self._connections.discard(self)
        self._logger.debug(f"{self._peer} - Connection lost.")

        if self._flow is not None:
            self._flow.resume_writing()
        if exc is None:
            self._transport.close()

        self._streamer.queue.put_nowait(None)

    def eof_received(self) -> None:
        if self._buffer:
            self._logger.warning(
                f"{self._peer} - Discarding {len(self._buffer)} bytes of unterminated frame"
            )
            self._buffer.clear()

    def data_received(self, data: bytes) -> None:
        self._buffer.extend(data)

        while (end := self._buffer.find(b"\n")) != -1:
            frame = bytes(self._buffer[:end + 1])
            del self._buffer[:end + 1]
            self._dispatch(frame)

        if len(self._buffer) > self._config.max_frame_size:
            self._logger.warning("Frame too large, closing connection")
            self._buffer.clear()
            self._transport.close()

    def pause_writing(self) -> None:
        self._flow.pause_writing()

    def resume_writing(self) -> None:
        self._flow.resume_writing()

    def shutdown(self) -> None:
        self._transport.close()

    def _dispatch(self, frame: bytes) -> None:
        result = self._codec.parse(frame)

        if not result.ok:
            self._logger.warning(
                f"{self._peer} - Dropping invalid frame ({result.error}): "
                f"{result.message.payload!r}"
            )
            return

        self._streamer.queue.put_nowait(result.message)
