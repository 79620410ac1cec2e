import asyncio
import logging
from typing import Any

from monwire.core.codec.frame import MessageCodec
from monwire.core.models.config import StreamConfig
from monwire.core.models.state import StreamState
from monwire.core.transport.protocol import FrameProtocol


class FrameServer:
    """
    Accepts newline-framed monitoring connections and runs the configured
    Application once per connection.

    Two sources are supported:
    - TCP: `start()` listens on the configured host/port; every probe
      connection gets its own FrameProtocol.
    - pipes: `serve_pipe()` reads frames from a readable pipe (a driver's
      stdout, the process stdin) until EOF. Pipe connections are
      receive-only.

    `shutdown()` stops accepting connections, closes the active ones and
    waits up to `timeout_graceful_shutdown` for their application tasks.
    """
    def __init__(self, config: StreamConfig, codec: MessageCodec) -> None:
        self.state = StreamState()
        self._config = config
        self._codec = codec
        self._server: asyncio.Server | None = None
        self._logger = logging.getLogger("core.transport.server")

    def _protocol_factory(self) -> FrameProtocol:
        return FrameProtocol(
            self._config,
            self.state,
            self._codec,
            loop=asyncio.get_running_loop()
        )

    async def start(self) -> asyncio.Server:
        loop = asyncio.get_running_loop()
        self._server = await loop.create_server(
            self._protocol_factory,
            host=self._config.host,
            port=self._config.port,
        )

        for sock in self._server.sockets:
            self._logger.info("Listening on %s:%d" % sock.getsockname()[:2])

        return self._server

    async def serve_pipe(self, pipe: Any) -> None:
        """Read frames from `pipe` until EOF and the application returns."""
        loop = asyncio.get_running_loop()
        await loop.connect_read_pipe(self._protocol_factory, pipe)
        self._logger.debug(f"Reading frames from {pipe!r}")

        await asyncio.gather(*self.state.tasks)

    async def shutdown(self) -> None:
        if self._server is not None:
            self._server.close()

        for connection in list(self.state.connections):
            connection.shutdown()

        if self.state.tasks:
            _, pending = await asyncio.wait(
                set(self.state.tasks),
                timeout=self._config.timeout_graceful_shutdown
            )
            for task in pending:
                self._logger.warning("Cancelling application task after graceful timeout")
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        if self._server is not None:
            await self._server.wait_closed()
            self._server = None
