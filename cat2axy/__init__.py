"""Convert source-extraction catalogs into astrometry.net ``.axy`` lists (lazy exports).

Public names are re-exported on first access via module ``__getattr__``
(PEP 562) so ``python -m cat2axy.pipeline`` does not import astropy twice.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "CatalogRecord",
    "load_catalog",
    "select_reference_stars",
    "write_axy",
    "read_axy",
    "run",
    "main",
    "SelectionConfig",
    "ExitStatus",
]


def __getattr__(name: str) -> Any:  # PEP 562 lazy re-exports
    if name in {"CatalogRecord", "load_catalog"}:
        from . import catalog as _catalog

        return getattr(_catalog, name)
    if name == "select_reference_stars":
        from .grid_select import select_reference_stars

        return select_reference_stars
    if name in {"write_axy", "read_axy"}:
        from . import axy_io as _io

        return getattr(_io, name)
    if name in {"run", "main"}:
        from . import pipeline as _pipeline

        return getattr(_pipeline, name)
    if name == "SelectionConfig":
        from .config import SelectionConfig

        return SelectionConfig
    if name == "ExitStatus":
        from .errors import ExitStatus

        return ExitStatus
    raise AttributeError(name)


def __dir__() -> list[str]:  # helps IDEs
    return sorted(set(globals().keys()) | set(__all__))
