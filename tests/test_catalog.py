from __future__ import annotations

import numpy as np
import pytest

from cat2axy.catalog import (
    CATALOG_DTYPE,
    CatalogRecord,
    iter_records,
    load_catalog,
    parse_catalog_line,
    passes_quality_cuts,
)
from cat2axy.config import SelectionConfig
from cat2axy.errors import CatalogReadError, ExitStatus


def test_parse_line_reads_first_five_columns():
    assert parse_catalog_line("1 2 3 4 5 6 7\n") == (1.0, 2.0, 3.0, 4.0, 5.0)


def test_parse_line_rejects_short_lines():
    assert parse_catalog_line("10.5 20.5 40") is None
    assert parse_catalog_line("10.5 20.5 40 2.5") is None


@pytest.mark.parametrize(
    "line",
    ["# comment 1 2 3 4 5", "", "   \n", "1 2 abc 4 5", "10 10 500 2.5", "nan 10 500 2.5 1.1", "10 inf 500 2.5 1.1"],
)
def test_parse_line_skips_comments_blank_and_garbage(line):
    assert parse_catalog_line(line) is None


def test_quality_cuts_are_strict():
    assert passes_quality_cuts(30.1, 1.1, 1.9)
    assert not passes_quality_cuts(30.0, 1.1, 1.9)
    assert not passes_quality_cuts(31.0, 1.0, 1.9)
    assert not passes_quality_cuts(31.0, 1.1, 2.0)


def test_load_filters_and_sorts(write_catalog, spread_catalog_lines):
    stars = load_catalog(write_catalog(spread_catalog_lines))
    assert stars.dtype == CATALOG_DTYPE
    assert stars.size == 6
    flux = stars["flux"]
    assert np.all(flux[:-1] >= flux[1:])
    assert np.all(flux > 30.0)
    assert np.all(stars["fwhm"] > 1.0)
    assert np.all(stars["elongation"] < 2.0)


def test_load_filter_matches_predicate_for_every_line(write_catalog):
    rng = np.random.default_rng(7)
    rows = np.column_stack(
        [
            rng.uniform(0, 1000, 200),
            rng.uniform(0, 1000, 200),
            rng.uniform(0, 80, 200),
            rng.uniform(0, 3, 200),
            rng.uniform(0.5, 3, 200),
        ]
    ).astype(np.float32)
    path = write_catalog([" ".join(repr(float(v)) for v in row) for row in rows])
    stars = load_catalog(path)
    expected = sum(1 for row in rows if passes_quality_cuts(*map(float, row[2:])))
    assert stars.size == expected
    assert np.all(np.diff(stars["flux"]) <= 0)


def test_load_comment_and_short_lines_give_empty(write_catalog):
    path = write_catalog(["# header", "# more", "1 2 3", "4 5", "10 10 500 2.5", ""])
    stars = load_catalog(path)
    assert stars.size == 0
    assert stars.dtype == CATALOG_DTYPE


def test_load_uses_config_thresholds(write_catalog):
    path = write_catalog(["1 1 50 2 1", "2 2 100 2 1"])
    stars = load_catalog(path, SelectionConfig(min_flux=60.0))
    assert stars.size == 1
    assert float(stars["flux"][0]) == pytest.approx(100.0)


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(CatalogReadError) as info:
        load_catalog(tmp_path / "missing.cat")
    assert isinstance(info.value, OSError)
    assert info.value.exit_status == ExitStatus.CATALOG_READ


def test_iter_records_yields_dataclasses(write_catalog):
    stars = load_catalog(write_catalog(["5 6 40 1.5 1.2", "7 8 90 2.5 1.1"]))
    records = list(iter_records(stars))
    assert isinstance(records[0], CatalogRecord)
    assert (records[0].x, records[0].y, records[0].flux) == (7.0, 8.0, 90.0)
    assert records[0].elongation == pytest.approx(1.1)
    assert [rec.x for rec in records] == [7.0, 5.0]


def test_load_four_column_line_is_not_a_candidate(write_catalog):
    # would pass the cuts if the missing elongation were read as 0
    stars = load_catalog(write_catalog(["10 10 500 2.5", "12 12 400 2.5 1.1"]))
    assert stars.size == 1
    assert float(stars["flux"][0]) == pytest.approx(400.0)


def test_load_skips_non_finite_coordinates(write_catalog):
    stars = load_catalog(write_catalog(["nan 10 500 2.5 1.1", "10 -inf 500 2.5 1.1", "5 5 300 2.5 1.1"]))
    assert stars.size == 1
    assert np.all(np.isfinite(stars["x"])) and np.all(np.isfinite(stars["y"]))
