import pytest

from monwire.core.models.kind import MonitorKind, ProbeKind
from monwire.core.models.message import Message


@pytest.mark.ut
def test_payload_is_normalized_to_bytes():
    message = Message(MonitorKind.HOST_LIST, bytearray(b"hosts"))

    assert message.payload == b"hosts"
    assert type(message.payload) is bytes


@pytest.mark.ut
def test_str_payload_is_rejected():
    with pytest.raises(TypeError):
        Message(MonitorKind.HOST_LIST, "hosts")  # type: ignore[arg-type]


@pytest.mark.ut
def test_kind_and_payload_are_mutable():
    message = Message(MonitorKind.INIT)

    message.kind = MonitorKind.FINALIZE
    message.payload = b"bye"

    assert message == Message(MonitorKind.FINALIZE, b"bye")
    assert message.kind_name == "FINALIZE"


@pytest.mark.ut
@pytest.mark.parametrize("payload", [5, None, [1, 2]])
def test_non_bytes_payload_is_rejected(payload):
    with pytest.raises(TypeError, match="bytes-like"):
        Message(MonitorKind.HOST_LIST, payload)  # type: ignore[arg-type]


@pytest.mark.ut
def test_memoryview_payload_is_copied():
    message = Message(MonitorKind.VM_STATE, memoryview(b"VM=3"))

    assert message.payload == b"VM=3"
    assert type(message.payload) is bytes


@pytest.mark.ut
def test_equality_distinguishes_domains():
    # Same wire name in both domains
    assert ProbeKind.INIT == MonitorKind.INIT
    assert Message(ProbeKind.INIT, b"x") != Message(MonitorKind.INIT, b"x")
    assert Message(MonitorKind.INIT, b"x") == Message(MonitorKind.INIT, bytearray(b"x"))
    assert Message(MonitorKind.INIT, b"x") != (MonitorKind.INIT, b"x")
