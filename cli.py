"""
Command-line entry point — scene spec JSON in, scene output JSON out.

Run:
  scene-engine spec.json -o scene.json
  scene-engine spec.json --seed 7 --indent 2
  cat spec.json | scene-engine - --theme "a spiral galaxy"
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from config import settings
from orchestrator import SceneOrchestrator


def load_payload(source: str) -> Any:
    """Read a JSON payload from a file path, or stdin for '-'."""
    if source == "-":
        return json.load(sys.stdin)
    with open(source, "r", encoding="utf-8") as f:
        return json.load(f)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scene-engine",
        description="Generate a bounded 3D polyline scene from a scene spec.",
    )
    parser.add_argument("spec", help="Scene spec JSON file, or '-' for stdin")
    parser.add_argument("-o", "--output", help="Write the scene here instead of stdout")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--theme", default=None, help="Free-text hint used to theme the fallback scene"
    )
    parser.add_argument("--indent", type=int, default=None, help="JSON indent")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.LOG_LEVEL.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        payload = load_payload(args.spec)
    except (OSError, json.JSONDecodeError) as exc:
        print(f"error: could not read scene spec: {exc}", file=sys.stderr)
        return 2

    scene = SceneOrchestrator(seed=args.seed).generate(payload, theme=args.theme)
    text = json.dumps(scene.to_dict(), indent=args.indent)

    if args.output:
        path = Path(args.output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n", encoding="utf-8")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
