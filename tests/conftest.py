from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import numpy as np
import pytest

from cat2axy.catalog import CATALOG_DTYPE


def make_stars(rows) -> np.ndarray:
    """Structured candidate array from ``(x, y, flux)`` tuples (fwhm=2, elongation=1)."""
    stars = np.zeros(len(rows), dtype=CATALOG_DTYPE)
    for idx, (x, y, flux) in enumerate(rows):
        stars[idx] = (x, y, flux, 2.0, 1.0)
    return stars


@pytest.fixture
def write_catalog(tmp_path):
    def _write(lines, name: str = "sample.cat") -> Path:
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def spread_catalog_lines():
    """Six good stars, one per 128 px cell of a 512x512 image, plus rejects."""
    return [
        "# x y flux fwhm elongation",
        "64 64 500 2.5 1.1",
        "192 64 450 2.5 1.1",
        "320 64 400 2.5 1.1",
        "64 192 350 2.5 1.1",
        "192 192 300 2.5 1.1",
        "320 320 250 2.5 1.1",
        "100 100 20 2.5 1.1",
        "100 100 900 0.5 1.1",
        "100 100 900 2.5 3.0",
    ]
