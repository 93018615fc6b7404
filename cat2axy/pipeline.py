from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from .axy_io import axy_path_for, write_axy
from .catalog import load_catalog
from .config import DEFAULT_CONFIG, SelectionConfig, load_settings
from .errors import Cat2AxyError, ExitStatus, InsufficientReferences, UsageError
from .grid_select import select_reference_stars

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    status: ExitStatus
    message: str
    output_path: Optional[Path] = None
    candidates: int = 0
    references: int = 0

    @property
    def success(self) -> bool:
        return self.status == ExitStatus.OK


def run(
    catalog_path: Path | str,
    width: int,
    height: int,
    *,
    config: SelectionConfig | None = None,
    output_path: Path | str | None = None,
) -> PipelineResult:
    """Convert one catalog into an ``.axy`` reference list.

    Errors never escape: each failure kind is reported through the returned
    :class:`PipelineResult` with its own :class:`ExitStatus`.
    """
    cfg = config or DEFAULT_CONFIG
    catalog = Path(catalog_path)
    logger.debug("converting %s for a %sx%s image", catalog, width, height)
    n_candidates = 0
    n_refs = 0
    try:
        if int(width) <= 0 or int(height) <= 0:
            raise UsageError(f"image size must be positive, got {width}x{height}")
        candidates = load_catalog(catalog, cfg)
        n_candidates = int(candidates.size)
        refs = select_reference_stars(candidates, int(width), int(height), cfg)
        n_refs = int(refs.size)
        if n_refs < cfg.min_reference_count:
            raise InsufficientReferences(n_refs, cfg.min_reference_count)
        target = Path(output_path) if output_path else axy_path_for(catalog)
        written = write_axy(refs, target, image_width=int(width), image_height=int(height))
    except Cat2AxyError as exc:
        return PipelineResult(
            status=exc.exit_status,
            message=str(exc),
            candidates=n_candidates,
            references=n_refs,
        )
    return PipelineResult(
        status=ExitStatus.OK,
        message=f"{n_refs} reference star(s) written to {written}",
        output_path=written,
        candidates=n_candidates,
        references=n_refs,
    )


class _StdoutArgumentParser(argparse.ArgumentParser):
    """Argument parser reporting usage errors on standard output."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stdout)
        self.exit(int(ExitStatus.USAGE), f"{self.prog}: error: {message}\n")

    def exit(self, status: int = 0, message: str | None = None) -> None:  # type: ignore[override]
        if message:
            sys.stdout.write(message)
        raise SystemExit(status)


def build_parser() -> argparse.ArgumentParser:
    parser = _StdoutArgumentParser(
        prog="cat2axy",
        description="Convert a SExtractor catalog into an astrometry.net .axy reference list",
    )
    parser.add_argument("catalog", help="Path to the source-extraction catalog (x y flux fwhm elongation)")
    parser.add_argument("width", type=int, help="Image width in pixels")
    parser.add_argument("height", type=int, help="Image height in pixels")
    parser.add_argument("--output", help="Output path (default: catalog path with .axy extension)")
    parser.add_argument("--cell-size", type=int, default=None, help="Grid cell edge in pixels (default: 128)")
    parser.add_argument("--per-cell-cap", type=int, default=None, help="Per-cell counter cap (default: 5)")
    parser.add_argument("--min-refs", type=int, default=None, help="Minimum reference stars required (default: 5)")
    parser.add_argument("--settings", help="JSON settings file with default overrides")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        # usage errors exit with ExitStatus.USAGE, --help with 0
        return int(exc.code or 0)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(levelname)s: %(message)s",
        stream=sys.stdout,
    )
    settings = load_settings(args.settings)
    try:
        config = DEFAULT_CONFIG.with_overrides(settings).with_overrides(
            {
                "cell_size": args.cell_size,
                "per_cell_cap": args.per_cell_cap,
                "min_reference_count": args.min_refs,
            }
        )
    except ValueError as exc:
        print(f"cat2axy: error: {exc}")
        return int(ExitStatus.USAGE)
    result = run(args.catalog, args.width, args.height, config=config, output_path=args.output)
    print(result.message)
    return int(result.status)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
