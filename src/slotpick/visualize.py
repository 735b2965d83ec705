"""
Lightweight visualizations for quick inspection.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import matplotlib

# Use a non-interactive backend to avoid display issues in headless environments.
matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd

from .config import DAYS_OF_WEEK, TIME_RANGES
from .models import SlotDistribution


def distribution_frames(dist: SlotDistribution) -> dict:
    """Histograms as Series, days and buckets in calendar order."""
    extra_days = [d for d in dist.by_day if d not in DAYS_OF_WEEK]
    by_day = pd.Series({d: dist.by_day.get(d, 0) for d in DAYS_OF_WEEK + extra_days}, dtype=int)
    by_time = pd.Series({b: dist.by_time.get(b, 0) for b in TIME_RANGES}, dtype=int)
    by_clinician = pd.Series(dist.by_clinician, dtype=int).sort_values(ascending=False)
    return {"by_day": by_day, "by_time": by_time, "by_clinician": by_clinician}


def plot_distribution(dist: SlotDistribution, outfile: Optional[Path] = None) -> None:
    frames = distribution_frames(dist)
    fig, axes = plt.subplots(1, 3, figsize=(15, 4))

    frames["by_day"].plot(kind="bar", ax=axes[0], color="tab:blue")
    axes[0].set_title("Open slots by day")
    axes[0].set_ylabel("Slots")

    frames["by_time"].plot(kind="bar", ax=axes[1], color="tab:green")
    axes[1].set_title("Open slots by time of day")

    if not frames["by_clinician"].empty:
        frames["by_clinician"].plot(kind="bar", ax=axes[2], color="tab:purple")
    axes[2].set_title("Open seats by clinician")

    plt.tight_layout()
    if outfile:
        plt.savefig(outfile, dpi=150)
    else:
        plt.show()
    plt.close(fig)
