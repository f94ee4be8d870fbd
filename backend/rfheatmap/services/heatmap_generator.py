"""Heatmap preview rendering and coverage statistics."""

import io
import numpy as np
import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt
from matplotlib.colors import LinearSegmentedColormap
from typing import Optional, Sequence

from rfheatmap.services.domain import AccessPoint, HeatmapGrid


# Custom colormap: Red (weak) -> Yellow -> Green (strong)
SIGNAL_COLORMAP = LinearSegmentedColormap.from_list(
    'signal_strength',
    [
        (0.8, 0.0, 0.0),    # Red (weak signal)
        (1.0, 0.5, 0.0),    # Orange
        (1.0, 1.0, 0.0),    # Yellow
        (0.5, 1.0, 0.0),    # Light green
        (0.0, 0.8, 0.0),    # Green (strong signal)
    ]
)

# Signal quality bands, strongest first: (name, lower bound dBm)
SIGNAL_LEVELS = [
    ("excellent", -50.0),
    ("good", -60.0),
    ("fair", -70.0),
    ("weak", -80.0),
]


def render_heatmap_png(
    heatmap: HeatmapGrid,
    aps: Optional[Sequence[AccessPoint]] = None,
    vmin: float = -90.0,
    vmax: float = -30.0,
    alpha: float = 0.85,
    dpi: int = 120,
    title: str = 'WiFi Signal Coverage Heatmap'
) -> bytes:
    """
    Render a heatmap as a PNG image in map coordinates.

    Args:
        heatmap: Computed signal grid
        aps: Optional access points to mark
        vmin: Minimum signal for colormap (dBm)
        vmax: Maximum signal for colormap (dBm)
        alpha: Heatmap transparency (0-1)
        dpi: Output image DPI
        title: Figure title

    Returns:
        PNG bytes
    """
    bounds = heatmap.bounds
    # Longitude on x, latitude on y; row 0 is the southern edge
    extent = [bounds.sw_lng, bounds.ne_lng, bounds.sw_lat, bounds.ne_lat]

    fig_width = max(6, min(16, heatmap.width / 100.0 * 4))
    fig_height = max(5, min(16, heatmap.height / 100.0 * 4))
    fig, ax = plt.subplots(figsize=(fig_width, fig_height))

    try:
        im = ax.imshow(
            heatmap.as_2d(),
            cmap=SIGNAL_COLORMAP,
            origin='lower',
            aspect='auto',
            vmin=vmin,
            vmax=vmax,
            alpha=alpha,
            extent=extent
        )

        cbar = plt.colorbar(im, ax=ax, shrink=0.8, pad=0.02)
        cbar.set_label('Signal Strength (dBm)', rotation=270, labelpad=15)

        if aps:
            for i, ap in enumerate(aps):
                ax.plot(ap.longitude, ap.latitude, 'b^', markersize=12,
                        markeredgecolor='white', markeredgewidth=2)
                ax.annotate(
                    f'{ap.model} (F{ap.floor})' if ap.model else f'AP{i + 1}',
                    (ap.longitude, ap.latitude),
                    textcoords="offset points",
                    xytext=(0, 10),
                    ha='center',
                    fontsize=8,
                    fontweight='bold',
                    color='blue'
                )

        ax.set_xlim(bounds.sw_lng, bounds.ne_lng)
        ax.set_ylim(bounds.sw_lat, bounds.ne_lat)
        ax.set_xlabel('Longitude')
        ax.set_ylabel('Latitude')
        ax.set_title(title)
        plt.tight_layout()

        buf = io.BytesIO()
        plt.savefig(buf, format='png', dpi=dpi, bbox_inches='tight', facecolor='white')
    finally:
        plt.close(fig)

    return buf.getvalue()


def generate_coverage_report(
    heatmap: HeatmapGrid,
    threshold_dbm: float = -70.0,
    no_coverage_dbm: float = -100.0
) -> dict:
    """
    Generate a coverage report with statistics.

    Args:
        heatmap: Computed signal grid
        threshold_dbm: Minimum acceptable signal strength
        no_coverage_dbm: Sentinel for cells without any AP

    Returns:
        Dictionary with coverage statistics
    """
    grid = heatmap.data
    total_cells = int(grid.size)

    breakdown = {}
    upper = None
    for name, lower in SIGNAL_LEVELS:
        mask = grid >= lower
        if upper is not None:
            mask &= grid < upper
            label = f"{lower} to {upper} dBm"
        else:
            label = f">= {lower} dBm"
        cells = int(np.sum(mask))
        breakdown[name] = {
            "cells": cells,
            "percentage": float(cells / total_cells * 100),
            "threshold": label
        }
        upper = lower

    dead_cells = int(np.sum(grid < upper))
    breakdown["dead_zone"] = {
        "cells": dead_cells,
        "percentage": float(dead_cells / total_cells * 100),
        "threshold": f"< {upper} dBm"
    }

    # Cells with no AP at all carry the sentinel and are excluded from stats
    valid_signals = grid[grid > no_coverage_dbm]
    if len(valid_signals) > 0:
        statistics = {
            "mean": float(np.mean(valid_signals)),
            "median": float(np.median(valid_signals)),
            "std": float(np.std(valid_signals)),
            "min": float(np.min(valid_signals)),
            "max": float(np.max(valid_signals)),
            "percentile_10": float(np.percentile(valid_signals, 10)),
            "percentile_90": float(np.percentile(valid_signals, 90))
        }
    else:
        statistics = {
            "mean": no_coverage_dbm,
            "median": no_coverage_dbm,
            "std": 0.0,
            "min": no_coverage_dbm,
            "max": no_coverage_dbm,
            "percentile_10": no_coverage_dbm,
            "percentile_90": no_coverage_dbm
        }

    return {
        "total_cells": total_cells,
        "coverage_breakdown": breakdown,
        "total_coverage_percent": float((total_cells - dead_cells) / total_cells * 100),
        "acceptable_coverage_percent": float(np.sum(grid >= threshold_dbm) / total_cells * 100),
        "threshold_dbm": threshold_dbm,
        "signal_statistics": statistics
    }
