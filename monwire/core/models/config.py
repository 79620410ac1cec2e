from dataclasses import dataclass

from monwire.core.models.message import Application


@dataclass
class StreamConfig:
    """
    Static configuration for newline-framed monitoring connections.
    """
    app: Application
    """
    The user-defined application coroutine with the signature:
        async def app(receive, send)
    It receives parsed messages and may send messages back.
    """

    host: str = "127.0.0.1"
    """
    Address a FrameServer listens on for probe connections.
    """

    port: int = 4124
    """
    TCP port to bind. If set to 0, the OS selects an available port.
    """

    max_frame_size: int = 4 * 1024 * 1024  # 4MB
    """
    Maximum size of a frame still waiting for its newline terminator.
    Protects against peers that never terminate a frame.
    """

    timeout_graceful_shutdown: float = 5.0
    """
    Maximum time (in seconds) granted to application tasks once their
    connections are closed. Remaining tasks are cancelled afterwards.
    """
