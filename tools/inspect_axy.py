#!/usr/bin/env python3
"""
Inspection helper for astrometry.net ``.axy`` reference lists.

Example:
    python tools/inspect_axy.py sample.axy --rows 10
    python tools/inspect_axy.py sample.axy --json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cat2axy.axy_io import read_axy  # noqa: E402

_HEADER_KEYS = ("TTYPE1", "TFORM1", "TTYPE2", "TFORM2", "NAXIS2", "IMAGEW", "IMAGEH")


def summarize(path: Path, rows: int) -> dict:
    x, y, header = read_axy(path)
    cards = {key: header[key] for key in _HEADER_KEYS if key in header}
    limit = max(0, rows)
    return {
        "path": str(path),
        "rows": int(x.size),
        "header": cards,
        "first_rows": [[float(xv), float(yv)] for xv, yv in zip(x[:limit], y[:limit])],
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Print the content of an .axy reference list")
    parser.add_argument("axy", type=Path, help="Path to the .axy file")
    parser.add_argument("--rows", type=int, default=5, help="Number of rows to print")
    parser.add_argument("--json", action="store_true", help="Emit a JSON summary")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.INFO), format="%(levelname)s: %(message)s")
    try:
        info = summarize(args.axy, args.rows)
    except (OSError, KeyError, IndexError) as exc:
        logging.error("unable to read %s: %s", args.axy, exc)
        return 1
    if args.json:
        print(json.dumps(info, indent=2))
        return 0
    print(f"{info['path']}: {info['rows']} row(s)")
    for key, value in info["header"].items():
        print(f"  {key:<8} = {value}")
    for idx, (xv, yv) in enumerate(info["first_rows"], start=1):
        print(f"  {idx:>4}: X={xv:10.3f}  Y={yv:10.3f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
