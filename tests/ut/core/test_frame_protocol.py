import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from monwire.core.models.config import StreamConfig
from monwire.core.models.kind import ProbeKind
from monwire.core.models.message import Message
from monwire.core.models.state import StreamState
from monwire.core.transport.flow import FlowControl
from monwire.core.transport.protocol import FrameProtocol


@pytest.fixture
def state():
    return StreamState()


@pytest.fixture
def config():
    return StreamConfig(app=AsyncMock(), max_frame_size=1024)


def connect(config, state, codec, transport) -> FrameProtocol:
    proto = FrameProtocol(config, state, codec)
    proto.connection_made(transport)
    proto._streamer.queue = Mock()
    return proto


@pytest.mark.ut
@pytest.mark.asyncio
async def test_connection_made_initializes_everything(config, state, codec, transport):
    proto = FrameProtocol(config, state, codec)
    proto.connection_made(transport)

    assert proto._transport is transport
    assert isinstance(proto._flow, FlowControl)
    assert proto in state.connections
    assert len(state.tasks) == 1
    assert proto._peer == "127.0.0.1:9999"


@pytest.mark.ut
@pytest.mark.asyncio
async def test_connection_lost_cleans_up(config, state, codec, transport):
    proto = FrameProtocol(config, state, codec)
    proto.connection_made(transport)

    proto.connection_lost(exc=None)

    assert proto not in state.connections
    assert transport.is_closing()
    assert proto._streamer.queue.get_nowait() is None


@pytest.mark.ut
@pytest.mark.asyncio
async def test_single_frame(config, state, codec, transport):
    proto = connect(config, state, codec, transport)

    proto.data_received(codec.serialize(Message(ProbeKind.MONITOR_HOST, b"CPU=2")))

    proto._streamer.queue.put_nowait.assert_called_once_with(
        Message(ProbeKind.MONITOR_HOST, b"CPU=2")
    )


@pytest.mark.ut
@pytest.mark.asyncio
async def test_fragmented_frame(config, state, codec, transport):
    proto = connect(config, state, codec, transport)
    frame = codec.serialize(Message(ProbeKind.LOG, b"hello"))

    proto.data_received(frame[:3])
    proto.data_received(frame[3:-1])
    proto._streamer.queue.put_nowait.assert_not_called()

    proto.data_received(frame[-1:])
    proto._streamer.queue.put_nowait.assert_called_once()


@pytest.mark.ut
@pytest.mark.asyncio
async def test_multiple_frames_in_one_chunk(config, state, codec, transport):
    proto = connect(config, state, codec, transport)
    first = codec.serialize(Message(ProbeKind.MONITOR_VM, b"a"))
    second = codec.serialize(Message(ProbeKind.STATE_VM, b"b\nc"))

    proto.data_received(first + second + second[:5])

    messages = [call.args[0] for call in proto._streamer.queue.put_nowait.call_args_list]
    assert messages == [
        Message(ProbeKind.MONITOR_VM, b"a"),
        Message(ProbeKind.STATE_VM, b"b\nc"),
    ]
    assert proto._buffer == second[:5]


@pytest.mark.ut
@pytest.mark.asyncio
async def test_invalid_frame_is_dropped_and_logged(config, state, codec, transport, caplog):
    proto = connect(config, state, codec, transport)
    good = codec.serialize(Message(ProbeKind.LOG, b"ok"))

    with caplog.at_level("WARNING", logger="core.transport.protocol"):
        proto.data_received(b"BOGUS payload\n" + good)

    proto._streamer.queue.put_nowait.assert_called_once_with(Message(ProbeKind.LOG, b"ok"))
    assert "Unknown message kind 'BOGUS'" in caplog.text
    assert "BOGUS payload" in caplog.text
    assert not transport.is_closing()


@pytest.mark.ut
@pytest.mark.asyncio
async def test_unterminated_frame_too_large_closes_connection(config, state, codec, transport):
    config.max_frame_size = 10
    proto = connect(config, state, codec, transport)

    proto.data_received(b"MONITOR_HOST " + b"A" * 20)

    assert transport.is_closing()
    proto._streamer.queue.put_nowait.assert_not_called()


@pytest.mark.ut
@pytest.mark.asyncio
async def test_large_chunk_of_complete_frames_is_accepted(config, state, codec, transport):
    config.max_frame_size = 64
    proto = connect(config, state, codec, transport)
    frame = codec.serialize(Message(ProbeKind.BEACON_HOST, b""))

    proto.data_received(frame * 10)

    assert not transport.is_closing()
    assert proto._streamer.queue.put_nowait.call_count == 10


@pytest.mark.ut
@pytest.mark.asyncio
async def test_eof_discards_partial_frame(config, state, codec, transport):
    proto = connect(config, state, codec, transport)

    proto.data_received(b"LOG abc")
    proto.eof_received()

    assert proto._buffer == b""


@pytest.mark.ut
@pytest.mark.asyncio
async def test_pause_resume_writing(config, state, codec, transport):
    proto = connect(config, state, codec, transport)
    proto._flow = Mock()

    proto.pause_writing()
    proto._flow.pause_writing.assert_called_once()

    proto.resume_writing()
    proto._flow.resume_writing.assert_called_once()


@pytest.mark.ut
@pytest.mark.asyncio
async def test_application_echo(state, codec, transport):
    received = []

    async def app(receive, send):
        while (message := await receive()) is not None:
            received.append(message)
            await send(Message(ProbeKind.LOG, b"ack " + message.payload))

    proto = FrameProtocol(StreamConfig(app=app), state, codec)
    proto.connection_made(transport)

    proto.data_received(codec.serialize(Message(ProbeKind.INIT, b"probe-1")))
    await asyncio.sleep(0.01)
    proto.connection_lost(exc=None)
    await asyncio.gather(*state.tasks)

    assert received == [Message(ProbeKind.INIT, b"probe-1")]
    assert codec.parse(transport.buffer).message == Message(ProbeKind.LOG, b"ack probe-1")
    assert not state.tasks
