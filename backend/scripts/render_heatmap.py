#!/usr/bin/env python3
"""
Compute a heatmap from a JSON request file without running the API.

The request file uses the same layout as POST /api/v1/propagation/heatmap.

Run with: python scripts/render_heatmap.py request.json --out grid.json --png preview.png
"""

import sys
import os
import json
import logging

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pydantic import ValidationError

from rfheatmap.core.config import settings
from rfheatmap.core.logging import configure_logging
from rfheatmap.schemas.propagation import CoverageRequest, HeatmapResponse
from rfheatmap.services.antenna_patterns import AntennaPatternLoader
from rfheatmap.services.heatmap_generator import generate_coverage_report, render_heatmap_png
from rfheatmap.services.materials import MaterialAttenuation
from rfheatmap.services.mount_types import ModelMountTypeResolver
from rfheatmap.services.rf_propagation import PropagationEngine

logger = logging.getLogger("render_heatmap")


def render(request_path: str, out_path: str = None, png_path: str = None, workers: int = None) -> int:
    """Compute the heatmap described in request_path and write the outputs."""
    with open(request_path, "r", encoding="utf-8") as f:
        try:
            request = CoverageRequest.model_validate(json.load(f))
        except ValidationError as e:
            logger.error(f"Invalid request {request_path}:\n{e}")
            return 2

    mounts = ModelMountTypeResolver()
    engine = PropagationEngine(
        AntennaPatternLoader.from_file(settings.ANTENNA_PATTERN_PATH),
        MaterialAttenuation(),
        mounts,
        workers=workers
    )
    aps = request.domain_aps(mounts)

    grid = engine.compute_heatmap(
        bounds=request.bounds(),
        band=request.band,
        aps=aps,
        walls_by_floor=request.domain_walls(),
        active_floor=request.active_floor,
        grid_resolution_m=request.grid_resolution_m,
        buildings=request.domain_buildings(),
    )

    report = generate_coverage_report(grid, request.threshold_dbm, engine.no_coverage_dbm)
    print(f"Grid: {grid.width}x{grid.height} cells")
    print(f"Acceptable coverage (>= {request.threshold_dbm} dBm): {report['acceptable_coverage_percent']:.1f}%")
    print(f"Mean signal: {report['signal_statistics']['mean']:.1f} dBm")

    if out_path:
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(HeatmapResponse.from_grid(grid).model_dump_json())
        print(f"Grid written to {out_path}")

    if png_path:
        with open(png_path, "wb") as f:
            f.write(render_heatmap_png(grid, aps=aps))
        print(f"Preview written to {png_path}")

    return 0


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Compute an RF heatmap from a JSON request")
    parser.add_argument("request", help="Path to the request JSON file")
    parser.add_argument("--out", help="Write the grid as JSON to this path")
    parser.add_argument("--png", help="Write a PNG preview to this path")
    parser.add_argument("--workers", type=int, default=None, help="Threads used for grid rows")
    parser.add_argument("--log-level", default=None, help="Logging level (default from settings)")

    args = parser.parse_args()

    configure_logging(args.log_level)
    sys.exit(render(args.request, args.out, args.png, args.workers))
