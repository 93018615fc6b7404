from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import numpy as np
from astropy.io import fits

from .config import AXY_EXTENSION
from .errors import TableWriteError

logger = logging.getLogger(__name__)

AXY_COLUMNS = ("X", "Y")


def axy_path_for(catalog_path: Path | str) -> Path:
    """``sample.cat`` -> ``sample.axy`` next to the catalog."""
    return Path(catalog_path).with_suffix(AXY_EXTENSION)


def _build_table(references: np.ndarray, image_width: Optional[int], image_height: Optional[int]) -> fits.HDUList:
    x = np.asarray(references["x"], dtype=np.float32) if len(references) else np.zeros(0, dtype=np.float32)
    y = np.asarray(references["y"], dtype=np.float32) if len(references) else np.zeros(0, dtype=np.float32)
    table = fits.BinTableHDU.from_columns(
        [
            fits.Column(name="X", format="E", array=x),
            fits.Column(name="Y", format="E", array=y),
        ]
    )
    # solve-field reads the image size from these cards when given an xylist
    if image_width is not None:
        table.header["IMAGEW"] = (int(image_width), "image width (pixels)")
    if image_height is not None:
        table.header["IMAGEH"] = (int(image_height), "image height (pixels)")
    return fits.HDUList([fits.PrimaryHDU(), table])


def write_axy(
    references: np.ndarray,
    path: Path | str,
    *,
    image_width: Optional[int] = None,
    image_height: Optional[int] = None,
) -> Path:
    """Write the ``X``/``Y`` columns of *references* as a FITS binary table.

    An existing file at *path* is replaced. Any astropy or filesystem failure
    is raised as :class:`TableWriteError` with the library message attached.
    """
    target = Path(path)
    try:
        if target.exists():
            target.unlink()
        hdul = _build_table(references, image_width, image_height)
        hdul.writeto(target, output_verify="exception")
    except (OSError, ValueError, TypeError, fits.VerifyError) as exc:
        try:
            target.unlink(missing_ok=True)
        except OSError:
            logger.debug("could not remove partial output %s", target)
        raise TableWriteError(f"failed to write AXY file {target}: {exc}") from exc
    logger.info("%s: wrote %d reference star(s)", target.name, len(references))
    return target


def read_axy(path: Path | str) -> tuple[np.ndarray, np.ndarray, fits.Header]:
    """Return ``(x, y, header)`` of the first table extension in *path*."""
    with fits.open(path, memmap=False) as hdul:
        table = hdul[1]
        x = np.array(table.data["X"], dtype=np.float32) if table.data is not None else np.zeros(0, dtype=np.float32)
        y = np.array(table.data["Y"], dtype=np.float32) if table.data is not None else np.zeros(0, dtype=np.float32)
        header = table.header.copy()
    return x, y, header
