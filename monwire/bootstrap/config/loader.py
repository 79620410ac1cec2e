import argparse
import os
from functools import lru_cache
from pathlib import Path

from monwire.core.models.kind import KIND_DOMAINS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="monwire",
        description=(
            "Encode and decode monitoring wire frames.\n\n"
            "A frame is '<KIND> <base64(zlib(payload))>\\n', the line format\n"
            "exchanged between the monitor and its probes."
        ),
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        help="Path to a monwire configuration file"
    )

    parser.add_argument(
        "-l", "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help=(
            "Logging verbosity.\n"
            "Choose among: DEBUG, INFO, WARNING, ERROR, CRITICAL.\n\n"
            "DEBUG    → reason of every rejected frame.\n"
            "WARNING  → only warnings and errors (default).\n\n"
            "Logs go to stderr, payloads to stdout."
        ),
    )

    parser.add_argument(
        "-d", "--domain",
        type=str,
        choices=sorted(KIND_DOMAINS),
        help="Message kind domain (overrides codec.domain from the configuration)"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    encode = commands.add_parser(
        "encode",
        help="Read a payload and write one frame"
    )
    encode.add_argument("kind", type=str, help="Message kind, e.g. MONITOR_HOST")
    encode.add_argument("-i", "--input", type=str, help="Payload file (default: stdin)")
    encode.add_argument("-o", "--output", type=str, help="Frame file (default: stdout)")
    encode.add_argument(
        "--json",
        action="store_true",
        help="Treat the input as a JSON document and send it as a msgpack record"
    )

    decode = commands.add_parser(
        "decode",
        help="Read frames, one per line, and write their payloads"
    )
    decode.add_argument("-i", "--input", type=str, help="Frame file (default: stdin)")
    decode.add_argument("-o", "--output", type=str, help="Payload file (default: stdout)")
    decode.add_argument(
        "--json",
        action="store_true",
        help="Print msgpack record payloads as JSON lines"
    )
    decode.add_argument(
        "--show-kind",
        action="store_true",
        help="Prefix each payload with its kind name and a space"
    )

    listen = commands.add_parser(
        "listen",
        help="Receive frames from stdin, or from TCP peers, and print their payloads"
    )
    listen.add_argument("-o", "--output", type=str, help="Payload file (default: stdout)")
    listen.add_argument(
        "--tcp",
        action="store_true",
        help=(
            "Accept connections on stream.host:stream.port instead of reading stdin.\n"
            "Runs until SIGINT or SIGTERM."
        )
    )

    commands.add_parser("kinds", help="List the kind names of the domain")

    return parser


@lru_cache
def get_cli_args() -> argparse.Namespace:
    return build_parser().parse_args()


@lru_cache
def get_configfile() -> Path | None:
    # Priority: ENV (set from --config by the CLI) > default file in current working directory
    raw = os.getenv("MONWIRECONFIG")

    if raw is None:
        file = Path.cwd() / "monwire.yaml"
        return file if file.is_file() else None

    file = Path(raw)

    if not file.is_file():
        raise SystemExit(
            f"[config] Configuration file not found: '{file}'.\n"
            "  - Use --config <file.yaml>\n"
            "  - Or set the MONWIRECONFIG environment variable\n"
            "  - Or place a 'monwire.yaml' file in the current working directory."
        )

    return file
