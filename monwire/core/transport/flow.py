import asyncio


class FlowControl:
    """
    Write-side backpressure for a monitoring connection.

    The transport toggles the state through pause_writing()/resume_writing();
    senders await `drain()` before writing, so a monitor pushing
    START_MONITOR/HOST_LIST frames to a slow probe waits for the kernel
    buffer instead of growing the transport buffer without bound.
    """

    def __init__(self) -> None:
        self._writable = asyncio.Event()
        self._writable.set()

    @property
    def write_paused(self) -> bool:
        return not self._writable.is_set()

    async def drain(self) -> None:
        if self.write_paused:
            await self._writable.wait()

    def pause_writing(self) -> None:
        self._writable.clear()

    def resume_writing(self) -> None:
        self._writable.set()
