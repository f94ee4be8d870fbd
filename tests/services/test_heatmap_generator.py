"""Unit tests for rfheatmap.services.heatmap_generator."""

from __future__ import annotations

import numpy as np
import pytest

from conftest import make_ap
from rfheatmap.services.domain import BoundingBox, HeatmapGrid
from rfheatmap.services.heatmap_generator import generate_coverage_report, render_heatmap_png


def _grid(values, width, height) -> HeatmapGrid:
    return HeatmapGrid(
        width=width,
        height=height,
        bounds=BoundingBox(40.0, -75.0, 40.0002, -74.9997),
        data=np.array(values, dtype=np.float32),
    )


def test_coverage_report_breakdown() -> None:
    grid = _grid([-45.0, -55.0, -65.0, -75.0, -85.0, -100.0], 3, 2)
    report = generate_coverage_report(grid, threshold_dbm=-70.0)

    breakdown = report["coverage_breakdown"]
    assert report["total_cells"] == 6
    assert [breakdown[k]["cells"] for k in ("excellent", "good", "fair", "weak", "dead_zone")] == [1, 1, 1, 1, 2]
    assert report["acceptable_coverage_percent"] == pytest.approx(50.0)
    assert report["total_coverage_percent"] == pytest.approx(4 / 6 * 100)


def test_coverage_statistics_skip_sentinel_cells() -> None:
    grid = _grid([-50.0, -60.0, -100.0, -100.0], 2, 2)
    stats = generate_coverage_report(grid)["signal_statistics"]

    assert stats["mean"] == pytest.approx(-55.0)
    assert stats["min"] == pytest.approx(-60.0)
    assert stats["max"] == pytest.approx(-50.0)


def test_coverage_report_all_sentinel() -> None:
    report = generate_coverage_report(_grid([-100.0] * 4, 2, 2))

    assert report["signal_statistics"]["mean"] == -100.0
    assert report["acceptable_coverage_percent"] == 0.0
    assert report["coverage_breakdown"]["dead_zone"]["percentage"] == pytest.approx(100.0)


def test_render_heatmap_png() -> None:
    grid = _grid(np.linspace(-90, -40, 12), 4, 3)
    png = render_heatmap_png(grid, aps=[make_ap()])

    assert png.startswith(b"\x89PNG\r\n\x1a\n")
    assert len(png) > 1000
