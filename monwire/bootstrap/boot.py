import argparse
import asyncio
import base64
import contextlib
import json
import logging
import os
import sys
from pathlib import Path
from typing import BinaryIO, Iterator

from monwire.bootstrap.config.loader import get_cli_args
from monwire.bootstrap.deps import get_codec, get_frame_server, get_record_codec
from monwire.core.codec.errors import ParseError, SerializeError
from monwire.core.helpers.utils import setup_logging, setup_signal_handler
from monwire.core.models.kind import MessageKind
from monwire.core.models.message import Application, Message, ReceiveMessage, SendMessage
from monwire.core.transport.server import FrameServer

logger = logging.getLogger("bootstrap")


class RecordJSONEncoder(json.JSONEncoder):
    """
    JSON encoder for decoded records: bytes values are rendered
    as {"__bytes__": <base64>}.
    """

    def default(self, obj):
        if isinstance(obj, bytes):
            return {"__bytes__": base64.b64encode(obj).decode()}
        return super().default(obj)


@contextlib.contextmanager
def open_output(path: str | None) -> Iterator[BinaryIO]:
    if path is None:
        yield sys.stdout.buffer
        sys.stdout.buffer.flush()
        return

    with open(path, "wb") as fh:
        yield fh


@contextlib.contextmanager
def open_input(path: str | None) -> Iterator[BinaryIO]:
    if path is None:
        yield sys.stdin.buffer
        return

    with open(path, "rb") as fh:
        yield fh


def write_payload(out: BinaryIO, kind: MessageKind | None, body: bytes) -> None:
    """Write a payload, prefixed by its kind name and terminated by a newline when a kind is given."""
    if kind is None:
        out.write(body)
        return

    out.write(kind.to_str().encode("ascii") + b" " + body)
    if not body.endswith(b"\n"):
        out.write(b"\n")


def encode(cli: argparse.Namespace) -> int:
    codec = get_codec(cli.domain)
    kind = codec.kinds.from_str(cli.kind)

    if kind.undefined:
        logger.error(f"Unknown {codec.kinds.__name__} kind '{cli.kind}'")
        return 1

    with open_input(cli.input) as fh:
        data = fh.read()

    if not cli.json:
        with open_output(cli.output) as out:
            return 0 if codec.write_to(Message(kind, data), out) else 1

    try:
        record = json.loads(data)
    except ValueError as exc:
        logger.error(f"Input is not a JSON document: {exc}")
        return 1

    try:
        frame = get_record_codec(cli.domain).pack(kind, record)
    except SerializeError as exc:
        logger.error(f"Failed to serialize {kind} record: {exc}")
        return 1

    with open_output(cli.output) as out:
        out.write(frame)

    return 0


def decode(cli: argparse.Namespace) -> int:
    codec = get_codec(cli.domain)
    records = get_record_codec(cli.domain)
    failures = 0

    with open_input(cli.input) as fh, open_output(cli.output) as out:
        for line in fh:
            if not line.strip():
                continue

            if cli.json:
                try:
                    record = records.unpack(line)
                except ParseError as exc:
                    logger.warning(f"Invalid frame ({exc}): {exc.raw!r}")
                    failures += 1
                    continue

                try:
                    body = json.dumps(record.value, cls=RecordJSONEncoder).encode() + b"\n"
                except (TypeError, ValueError) as exc:
                    logger.warning(f"Cannot render {record.kind} record as JSON ({exc}): {line!r}")
                    failures += 1
                    continue

                kind = record.kind
            else:
                result = codec.parse(line)

                if not result.ok:
                    logger.warning(f"Invalid frame ({result.error}): {result.message.payload!r}")
                    failures += 1
                    continue

                kind, body = result.message.kind, result.message.payload

            write_payload(out, kind if cli.show_kind else None, body)

    return 1 if failures else 0


def dump_app(out: BinaryIO) -> Application:
    async def app(receive: ReceiveMessage, send: SendMessage) -> None:
        while (message := await receive()) is not None:
            write_payload(out, message.kind, message.payload)
            out.flush()

    return app


async def serve_tcp(server: FrameServer) -> None:
    with setup_signal_handler() as stop_event:
        await server.start()
        await stop_event.wait()

    logger.info("Shutting down")
    await server.shutdown()


def listen(cli: argparse.Namespace) -> int:
    with open_output(cli.output) as out:
        server = get_frame_server(dump_app(out), cli.domain)

        if cli.tcp:
            asyncio.run(serve_tcp(server))
        else:
            asyncio.run(server.serve_pipe(sys.stdin.buffer))

    return 0


def kinds(cli: argparse.Namespace) -> int:
    codec = get_codec(cli.domain)

    for kind in codec.kinds:
        if not kind.undefined:
            print(kind.to_str())

    return 0


COMMANDS = {
    "encode": encode,
    "decode": decode,
    "listen": listen,
    "kinds": kinds,
}


def main() -> int:
    cli = get_cli_args()

    setup_logging(cli.log_level)

    if cli.config:
        os.environ["MONWIRECONFIG"] = str(Path(cli.config).absolute())

    return COMMANDS[cli.command](cli)


if __name__ == "__main__":
    raise SystemExit(main())
