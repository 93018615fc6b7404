from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

logger = logging.getLogger(__name__)

AXY_EXTENSION = ".axy"
SETTINGS_PATH = Path.home() / ".cat2axy_settings.json"


@dataclass(frozen=True)
class SelectionConfig:
    """Quality cuts and grid parameters used to pick reference stars.

    min_flux, min_fwhm, max_elongation:
        admission filter; a detection is kept when
        ``flux > min_flux and fwhm > min_fwhm and elongation < max_elongation``
    cell_size:
        edge length (pixels) of the square grid cells
    per_cell_cap:
        a cell keeps accepting stars while its counter is <= this value,
        so each cell contributes at most ``per_cell_cap + 1`` stars
    min_reference_count:
        fewer selected stars than this and no table is written
    """

    min_flux: float = 30.0
    min_fwhm: float = 1.0
    max_elongation: float = 2.0
    cell_size: int = 128
    per_cell_cap: int = 5
    min_reference_count: int = 5

    def __post_init__(self) -> None:
        if int(self.cell_size) <= 0:
            raise ValueError(f"cell_size must be positive, got {self.cell_size!r}")
        if int(self.per_cell_cap) < 0:
            raise ValueError(f"per_cell_cap must be >= 0, got {self.per_cell_cap!r}")
        if int(self.min_reference_count) < 0:
            raise ValueError(f"min_reference_count must be >= 0, got {self.min_reference_count!r}")

    def with_overrides(self, overrides: Mapping[str, Any] | None) -> "SelectionConfig":
        """Return a copy with the recognised keys of *overrides* applied.

        Unknown keys and values that cannot be coerced to the field type are
        skipped; ``None`` values leave the current setting untouched.
        """
        if not overrides:
            return self
        changes: dict[str, Any] = {}
        for field_info in fields(self):
            value = overrides.get(field_info.name)
            if value is None:
                continue
            caster = int if field_info.type in ("int", int) else float
            try:
                changes[field_info.name] = caster(value)
            except (TypeError, ValueError):
                logger.warning("ignoring invalid %s=%r", field_info.name, value)
        if not changes:
            return self
        return replace(self, **changes)


DEFAULT_CONFIG = SelectionConfig()


def load_settings(path: Path | str | None = None) -> dict:
    """Load CLI defaults from the JSON settings file if present."""
    settings_path = Path(path).expanduser() if path else SETTINGS_PATH
    try:
        payload = json.loads(settings_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("unable to read settings %s (%s)", settings_path, exc)
        return {}
    if not isinstance(payload, dict):
        return {}
    return payload
