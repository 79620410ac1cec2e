import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from monwire.core.transport.protocol import FrameProtocol


@dataclass
class StreamState:
    """
    Shared runtime state for the connections of a monitoring endpoint.

    This object is mutated by:
    - FrameProtocol: adds/removes active connections
    - FrameProtocol: registers the Streamer task of each connection
    """
    connections: set["FrameProtocol"] = field(default_factory=set)
    """
    Set of active FrameProtocol instances, one per pipe or socket.
    """

    tasks: set[asyncio.Task[None]] = field(default_factory=set)
    """
    Set of running application tasks. Each task removes itself
    through task.add_done_callback(tasks.discard).
    """
