import json
from functools import lru_cache

from pydantic import ValidationError

from monwire.bootstrap.config.settings import MonwireConfig
from monwire.core.codec.frame import MessageCodec
from monwire.core.codec.record import RecordCodec
from monwire.core.models.config import StreamConfig
from monwire.core.models.kind import KIND_DOMAINS
from monwire.core.models.message import Application
from monwire.core.transport.server import FrameServer
from monwire.infra.base64_encoder import Base64Encoder
from monwire.infra.msgpack_serializer import MsgPackSerializer
from monwire.infra.zlib_compressor import ZlibCompressor


@lru_cache
def get_codec(domain: str | None = None) -> MessageCodec:
    config = get_config()
    kinds = KIND_DOMAINS[domain or config.codec.domain]
    compressor = ZlibCompressor(
        level=config.codec.compression_level,
        max_payload_size=config.codec.max_payload_size
    )

    return MessageCodec(kinds, compressor=compressor, encoder=Base64Encoder())


@lru_cache
def get_record_codec(domain: str | None = None) -> RecordCodec:
    return RecordCodec(get_codec(domain), MsgPackSerializer())


def get_stream_config(app: Application) -> StreamConfig:
    stream = get_config().stream

    return StreamConfig(
        app=app,
        host=stream.host,
        port=stream.port,
        max_frame_size=stream.max_frame_size,
        timeout_graceful_shutdown=stream.timeout_graceful_shutdown
    )


def get_frame_server(app: Application, domain: str | None = None) -> FrameServer:
    return FrameServer(get_stream_config(app), get_codec(domain))


@lru_cache
def get_config() -> MonwireConfig:
    try:
        return MonwireConfig()
    except ValidationError as ex:
        msg = ["Configuration validation failed:"]
        errs = json.loads(ex.json())
        for err in errs:
            msg.append(f"  {'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}")
        raise SystemExit("\n".join(msg))
