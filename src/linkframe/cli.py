"""Command line interface for the linkframe toolkit."""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Iterable, List, Sequence

from rich.console import Console
from rich.markup import escape

from .exceptions import ConfigurationError, LinkFrameError
from .framing.channel import NoisyChannel
from .framing.codec import CODECS
from .framing.config import DEFAULT_CFG, LinkCfg, load_config
from .link import DataLink, FrameResult
from .utils import configure_logging

# Status output goes to stderr so that ``--out -`` can carry binary data.
console = Console(stderr=True)

LOG_LEVELS = ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


def _read_bytes(path: str | None) -> bytes:
    if not path or path == "-":
        return sys.stdin.buffer.read()
    return Path(path).read_bytes()


def _write_bytes(path: str | None, data: bytes) -> None:
    if not path or path == "-":
        sys.stdout.buffer.write(data)
        return
    Path(path).write_bytes(data)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--scheme",
        choices=sorted(CODECS),
        help="Error-control scheme (default: from --config, else hamming)",
    )
    parser.add_argument("--config", help="JSON file with link configuration")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Set the log level for the CLI session.",
    )


def _resolve_cfg(args: argparse.Namespace) -> LinkCfg:
    cfg = load_config(args.config) if args.config else DEFAULT_CFG
    overrides = {}
    if args.scheme:
        overrides["scheme"] = args.scheme
    if getattr(args, "max_payload", None) is not None:
        overrides["max_payload"] = args.max_payload
    return replace(cfg, **overrides) if overrides else cfg


def _report(results: Sequence[FrameResult]) -> int:
    dropped = 0
    for index, result in enumerate(results):
        if not result.ok:
            dropped += 1
            console.print(f"[red]frame {index}: dropped ({result.error})[/red]")
        elif result.mismatches:
            console.print(
                f"[yellow]frame {index}: corrected parity mismatch at positions "
                f"{list(result.mismatches)}[/yellow]"
            )
    return dropped


def _handle_encode(argv: Sequence[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="linkframe encode",
        description="Frame a file into an error-controlled byte stream.",
        allow_abbrev=False,
    )
    parser.add_argument("--in", dest="input_path", required=True, help="Input file path ('-' for stdin)")
    parser.add_argument("--out", dest="output_path", required=True, help="Output stream path ('-' for stdout)")
    parser.add_argument("--max-payload", type=int, help="Payload bytes per frame")
    _add_common_arguments(parser)
    args = parser.parse_args(list(argv))
    configure_logging(args.log_level)

    frames: List[bytes] = []
    try:
        cfg = _resolve_cfg(args)
        link = DataLink(frames.append, cfg=cfg)
        link.send(_read_bytes(args.input_path))
    except (ConfigurationError, LinkFrameError, OSError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        return 1

    _write_bytes(args.output_path, b"".join(frames))
    console.print(f"Wrote {len(frames)} {cfg.scheme} frame(s)")
    return 0


def _handle_decode(argv: Sequence[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="linkframe decode",
        description="Recover the payload from an error-controlled byte stream.",
        allow_abbrev=False,
    )
    parser.add_argument("--in", dest="input_path", required=True, help="Input stream path ('-' for stdin)")
    parser.add_argument("--out", dest="output_path", required=True, help="Output file path ('-' for stdout)")
    _add_common_arguments(parser)
    args = parser.parse_args(list(argv))
    configure_logging(args.log_level)

    try:
        cfg = _resolve_cfg(args)
        link = DataLink(lambda frame: None, cfg=cfg)
        results = link.receive(_read_bytes(args.input_path))
    except (ConfigurationError, LinkFrameError, OSError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        return 1

    dropped = _report(results)
    if link.pending:
        console.print(f"[red]{len(link.pending)} trailing byte(s) do not form a frame[/red]")

    _write_bytes(args.output_path, b"".join(r.payload for r in results if r.ok))
    console.print(f"Decoded {len(results) - dropped} of {len(results)} frame(s)")
    return 1 if dropped or link.pending else 0


def _handle_loopback(argv: Sequence[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="linkframe loopback",
        description="Send a message through a noisy loopback channel.",
        allow_abbrev=False,
    )
    parser.add_argument("--message", required=True, help="Text to send")
    parser.add_argument("--flips", type=int, default=0, help="Bits flipped per frame body")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the noise generator")
    parser.add_argument("--max-payload", type=int, help="Payload bytes per frame")
    _add_common_arguments(parser)
    args = parser.parse_args(list(argv))
    configure_logging(args.log_level)

    if args.flips < 0:
        parser.error("--flips must be non-negative")

    results: List[FrameResult] = []
    try:
        cfg = _resolve_cfg(args)
        receiver = DataLink(lambda frame: None, cfg=cfg)
        channel = NoisyChannel(
            lambda frame: results.extend(receiver.receive(frame)),
            flips_per_frame=args.flips,
            seed=args.seed,
            cfg=cfg,
        )
        sender = DataLink(channel, cfg=cfg)
        message = args.message.encode("utf-8")
        sender.send(message)
    except (ConfigurationError, LinkFrameError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        return 1

    for index, (result, flipped) in enumerate(zip(results, channel.flipped)):
        console.print(f"frame {index}: flipped bits {flipped} -> {escape(repr(result))}")

    received = b"".join(r.payload for r in results if r.ok)
    if received == message:
        console.print("[green]Message received intact.[/green]")
        return 0
    console.print(f"[red]Message differs:[/red] {escape(repr(received))}")
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linkframe",
        description="Framed byte links with Hamming or CRC error control.",
    )
    subparsers = parser.add_subparsers(dest="command")
    for command in ["encode", "decode", "loopback"]:
        subparsers.add_parser(command)
    return parser


def main(argv: Iterable[str] | None = None) -> int:
    args = list(argv) if argv is not None else sys.argv[1:]
    if not args:
        build_parser().print_help()
        return 0

    command, rest = args[0], args[1:]
    if command in ("-h", "--help"):
        build_parser().print_help()
        return 0

    if command == "encode":
        return _handle_encode(rest)
    if command == "decode":
        return _handle_decode(rest)
    if command == "loopback":
        return _handle_loopback(rest)

    console.print(f"[red]Error:[/red] unknown command '{command}'")
    build_parser().print_help()
    return 1


if __name__ == "__main__":  # pragma: no cover - module entry point
    sys.exit(main())
