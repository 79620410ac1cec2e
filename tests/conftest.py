import pytest

from tests.fake.fake_transport import FakeTransport

from monwire.bootstrap import deps
from monwire.bootstrap.config import loader
from monwire.core.codec.frame import MessageCodec
from monwire.core.codec.record import RecordCodec
from monwire.core.models.kind import MonitorKind, ProbeKind
from monwire.infra.base64_encoder import Base64Encoder
from monwire.infra.msgpack_serializer import MsgPackSerializer
from monwire.infra.zlib_compressor import ZlibCompressor


@pytest.fixture
def codec() -> MessageCodec[ProbeKind]:
    return MessageCodec(ProbeKind, ZlibCompressor(), Base64Encoder())


@pytest.fixture
def monitor_codec() -> MessageCodec[MonitorKind]:
    return MessageCodec(MonitorKind, ZlibCompressor(), Base64Encoder())


@pytest.fixture
def record_codec(codec) -> RecordCodec[ProbeKind]:
    return RecordCodec(codec, MsgPackSerializer())


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def clean_settings(monkeypatch, tmp_path):
    """
    Isolate configuration lookups from the environment and the working
    directory, and reset the cached dependencies around the test.
    """
    # setenv first so that teardown also removes values written by main()
    for name in ("MONWIRECONFIG", "MONWIRE_CODEC__DOMAIN", "MONWIRE_CODEC__COMPRESSION_LEVEL"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)

    caches = (
        loader.get_cli_args,
        loader.get_configfile,
        deps.get_config,
        deps.get_codec,
        deps.get_record_codec,
    )
    for cached in caches:
        cached.cache_clear()

    yield tmp_path

    for cached in caches:
        cached.cache_clear()
