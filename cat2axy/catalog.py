from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import numpy as np

from .config import DEFAULT_CONFIG, SelectionConfig
from .errors import CatalogReadError

logger = logging.getLogger(__name__)

CATALOG_COLUMNS = ("x", "y", "flux", "fwhm", "elongation")
CATALOG_DTYPE = np.dtype([(name, "f4") for name in CATALOG_COLUMNS])
COMMENT_PREFIX = "#"


@dataclass(frozen=True, slots=True)
class CatalogRecord:
    """One source-extraction detection (pixel centroid + shape)."""

    x: float
    y: float
    flux: float
    fwhm: float
    elongation: float


def empty_catalog() -> np.ndarray:
    return np.zeros(0, dtype=CATALOG_DTYPE)


def parse_catalog_line(line: str) -> Optional[tuple[float, float, float, float, float]]:
    """Parse the leading ``x y flux fwhm elongation`` columns of *line*.

    Comment and blank lines return ``None``, as do lines with a non-numeric
    or non-finite value among the first five tokens. Lines with fewer than
    five tokens are rejected; extra columns are ignored.
    """
    if line.startswith(COMMENT_PREFIX):
        return None
    tokens = line.split()[: len(CATALOG_COLUMNS)]
    if len(tokens) < len(CATALOG_COLUMNS):
        return None
    values = [0.0] * len(CATALOG_COLUMNS)
    for pos, token in enumerate(tokens):
        try:
            values[pos] = float(token)
        except ValueError:
            return None
        if not math.isfinite(values[pos]):
            return None
    return tuple(values)  # type: ignore[return-value]


def passes_quality_cuts(flux: float, fwhm: float, elongation: float, config: SelectionConfig = DEFAULT_CONFIG) -> bool:
    return flux > config.min_flux and fwhm > config.min_fwhm and elongation < config.max_elongation


def load_catalog(path: Path | str, config: SelectionConfig | None = None) -> np.ndarray:
    """Read a SExtractor-style catalog and return admitted stars, brightest first.

    The result is a structured array with :data:`CATALOG_DTYPE`. Raises
    :class:`CatalogReadError` when the file cannot be opened.
    """
    cfg = config or DEFAULT_CONFIG
    source = Path(path)
    rows: list[tuple[float, float, float, float, float]] = []
    skipped = 0
    try:
        with source.open("r", encoding="utf-8", errors="replace") as handle:
            for lineno, line in enumerate(handle, start=1):
                parsed = parse_catalog_line(line)
                if parsed is None:
                    if line.strip() and not line.startswith(COMMENT_PREFIX):
                        logger.debug("%s:%d: unparsable line skipped", source.name, lineno)
                    continue
                _, _, flux, fwhm, elongation = parsed
                if passes_quality_cuts(flux, fwhm, elongation, cfg):
                    rows.append(parsed)
                else:
                    skipped += 1
    except OSError as exc:
        raise CatalogReadError(f"failed to load CAT file: {source} ({exc.strerror or exc})") from exc

    if not rows:
        logger.info("%s: no detection passed the quality cuts (%d rejected)", source.name, skipped)
        return empty_catalog()
    stars = np.array(rows, dtype=CATALOG_DTYPE)
    order = np.argsort(stars["flux"])[::-1]
    logger.info("%s: %d candidate(s) kept, %d rejected", source.name, stars.size, skipped)
    return stars[order]


def iter_records(stars: np.ndarray) -> Iterator[CatalogRecord]:
    for row in stars:
        yield CatalogRecord(*(float(row[name]) for name in CATALOG_COLUMNS))
