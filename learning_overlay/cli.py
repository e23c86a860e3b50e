"""Command-line interface for the learning overlay engine.

WHY: The engine normally runs inside a host that drives a real page, but
its building blocks are useful on their own: checking what a subtitle
file parses into, seeing how a line would be colored, editing the local
vocabulary, and checking which adapter a URL would get.

HOW: argparse with one subcommand per tool. Results go to stdout (JSON
for structured output) so they can be piped; status messages go to
stderr. The status subcommand runs the async flush via asyncio.run()
when an auth token is configured.

RULES:
- parse FILE [--format F] [--plain]: segments as JSON (or one line per cue)
- tokens TEXT --language L: tokens with status and color as JSON
- status WORD --language L [--set STATUS]: read or edit the local entry
- detect URL: platform name; exit code 1 when unsupported
- Status output goes to stderr (not stdout)
- logging.basicConfig is called here and nowhere else
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from learning_overlay.adapters import ADAPTERS, detect_platform
from learning_overlay.api.client import VocabAPIClient
from learning_overlay.config import STORAGE_DIR, load_auth_token
from learning_overlay.core.colors import color_for
from learning_overlay.core.ir import VocabStatus
from learning_overlay.core.text import tokenize
from learning_overlay.core.timestamps import format_timestamp
from learning_overlay.parsers import PARSERS, parse_subtitles
from learning_overlay.vocab.cache import VocabCache
from learning_overlay.vocab.storage import LocalVocabStore


def _status(msg: str) -> None:
    """Print a status message to stderr."""
    print(msg, file=sys.stderr, flush=True)


def _open_cache(args: argparse.Namespace, user_id: Optional[str] = None,
                remote: Optional[VocabAPIClient] = None) -> VocabCache:
    store = LocalVocabStore(Path(args.storage_dir))
    cache = VocabCache(store, args.language, remote=remote, user_id=user_id)
    cache.load()
    return cache


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def _cmd_parse(args: argparse.Namespace) -> int:
    path = Path(args.file)
    if not path.is_file():
        print("Error: File not found: {}".format(path), file=sys.stderr)
        return 1

    data = path.read_text(encoding="utf-8-sig")
    segments = parse_subtitles(data, args.format)
    _status("Parsed {} segments from {}".format(len(segments), path.name))

    if args.plain:
        for seg in segments:
            print("{} --> {}  {}".format(
                format_timestamp(seg.start_time), format_timestamp(seg.end_time), seg.text,
            ))
    else:
        print(json.dumps([seg.to_dict() for seg in segments], ensure_ascii=False, indent=2))
    return 0


def _cmd_tokens(args: argparse.Namespace) -> int:
    cache = _open_cache(args)
    rows = []
    for token in tokenize(args.text):
        if token.is_word:
            status = cache.get_status(token.normalized_text)
            rows.append({
                "text": token.display_text,
                "word": token.normalized_text,
                "status": status.value,
                "color": color_for(status),
            })
        else:
            rows.append({"text": token.display_text})
    print(json.dumps(rows, ensure_ascii=False, indent=2))
    return 0


async def _set_and_flush(args: argparse.Namespace, token: str) -> bool:
    async with VocabAPIClient(auth_token=token) as client:
        cache = _open_cache(args, user_id="cli", remote=client)
        cache.update_status(args.word, args.set)
        return await cache.flush()


def _cmd_status(args: argparse.Namespace) -> int:
    if args.set is None:
        cache = _open_cache(args)
        print(cache.get_status(args.word).value)
        return 0

    token = load_auth_token()
    if token is None:
        cache = _open_cache(args)
        cache.update_status(args.word, args.set)
        _status("Saved locally (no auth token configured, not synced)")
    else:
        synced = asyncio.run(_set_and_flush(args, token))
        _status("Saved and synced" if synced else "Saved locally; sync failed")
    print(VocabStatus(args.set).value)
    return 0


def _cmd_detect(args: argparse.Namespace) -> int:
    platform = detect_platform(args.url)
    if platform is None:
        _status("No supported platform for {}".format(args.url))
        return 1
    print(platform)
    return 0


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser (separate from main() for tests)."""
    parser = argparse.ArgumentParser(
        prog="learning-overlay",
        description="Subtitle parsing, word coloring and vocabulary tools "
                    "for the learning overlay engine.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output to stderr.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_parse = sub.add_parser("parse", help="Parse a subtitle file into segments.")
    p_parse.add_argument("file", help="Path to a WebVTT, TTML/DFXP or SRT file.")
    p_parse.add_argument(
        "--format",
        default="auto",
        choices=["auto"] + sorted(PARSERS),
        help="Subtitle format (default: %(default)s, sniffed from content).",
    )
    p_parse.add_argument(
        "--plain",
        action="store_true",
        help="Print one 'start --> end  text' line per segment instead of JSON.",
    )
    p_parse.set_defaults(func=_cmd_parse)

    statuses = [s.value for s in VocabStatus]

    p_tokens = sub.add_parser("tokens", help="Tokenize a line and color it by word status.")
    p_tokens.add_argument("text", help="Subtitle text.")
    p_tokens.set_defaults(func=_cmd_tokens)

    p_status = sub.add_parser("status", help="Read or set a word's vocabulary status.")
    p_status.add_argument("word", help="The word to look up.")
    p_status.add_argument(
        "--set",
        default=None,
        choices=statuses,
        help="New status to record.",
    )
    p_status.set_defaults(func=_cmd_status)

    for p in (p_tokens, p_status):
        p.add_argument(
            "--language",
            required=True,
            help="Target language whose vocabulary is used.",
        )
        p.add_argument(
            "--storage-dir",
            default=str(STORAGE_DIR),
            help="Local vocabulary directory (default: %(default)s).",
        )

    p_detect = sub.add_parser("detect", help="Show which platform adapter a URL gets.")
    p_detect.add_argument(
        "url",
        help="Page URL. Supported: {}.".format(", ".join(sorted(ADAPTERS))),
    )
    p_detect.set_defaults(func=_cmd_detect)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``learning-overlay`` and ``python -m learning_overlay``.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    - Exits with the subcommand's return code
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
