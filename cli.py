"""CLI entry point for CaptionLens."""

import argparse
import io
import json
import logging
import sys

from config import ConfigError, load_config
from transcript import parse_transcript
from validators import InvalidPayloadError, validate_payload


def _read_payload(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8", errors="replace") as f:
        return f.read()


def run(path: str, output_format: str) -> int:
    try:
        config = load_config("CLI")
        raw = validate_payload(_read_payload(path), max_bytes=config.max_payload_bytes)
    except (OSError, ConfigError, InvalidPayloadError) as e:
        print(f"captionlens: {e}", file=sys.stderr)
        return 1

    result = parse_transcript(raw)
    if output_format == "text":
        print(result.full_text)
    elif output_format == "segments":
        for seg in result.segments:
            print(f"[{seg.start:.3f} --> {seg.end:.3f}] {seg.text}")
    else:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    return 0


def main():
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")
    parser = argparse.ArgumentParser(
        description="CaptionLens - clean WebVTT auto-captions into transcripts"
    )
    parser.add_argument("path", help="WebVTT file, or - to read stdin")
    parser.add_argument(
        "--format",
        choices=("text", "segments", "json"),
        default="text",
        help="output: transcript text, timed segments, or both as JSON",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="log dropped cues and duplicates to stderr",
    )
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.exit(run(args.path, args.format))


if __name__ == "__main__":
    main()
