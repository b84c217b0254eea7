"""
BAC-over-time graph. Produces image file or returns data for web clients.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from bac_tracker.calculations import bac_curve
from bac_tracker.constants import DEFAULT_CONSTANTS, BACConstants
from bac_tracker.models import Beverage, UserProfile
from bac_tracker.severity import LEGAL_LIMIT_BAC


def curve_data(
    profile: Optional[UserProfile],
    beverages: Sequence[Beverage],
    start: Optional[datetime] = None,
    step_minutes: float = 15.0,
    max_hours: float = 24.0,
    constants: BACConstants = DEFAULT_CONSTANTS,
) -> List[Dict[str, Any]]:
    """[{"t": iso_time, "bac": percent}, ...] for use in any frontend."""
    points = bac_curve(
        profile,
        beverages,
        start=start,
        step_minutes=step_minutes,
        max_hours=max_hours,
        constants=constants,
    )
    return [{"t": t.isoformat(timespec="minutes"), "bac": bac} for t, bac in points]


def save_bac_graph(
    profile: Optional[UserProfile],
    beverages: Sequence[Beverage],
    output_path: str = "bac_graph.png",
    start: Optional[datetime] = None,
    max_hours: float = 24.0,
    title: str = "Projected BAC",
    constants: BACConstants = DEFAULT_CONSTANTS,
) -> str:
    """
    Plot the projected BAC curve with matplotlib and save to file.
    Returns path to saved file.
    """
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    if start is None:
        start = datetime.now()
    points = bac_curve(profile, beverages, start=start, max_hours=max_hours, constants=constants)
    if not points:
        hours, bacs = [0.0], [0.0]
    else:
        hours = [(t - start).total_seconds() / 3600.0 for t, _ in points]
        bacs = [bac for _, bac in points]

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(hours, bacs, color="#2563eb", linewidth=2, label="BAC")
    ax.fill_between(hours, bacs, alpha=0.2, color="#2563eb")
    ax.axhline(y=LEGAL_LIMIT_BAC, color="#dc2626", linestyle="--", linewidth=1, label="Legal limit (0.08%)")
    ax.set_xlabel("Hours from now")
    ax.set_ylabel("BAC (%)")
    ax.set_title(title)
    ax.legend(loc="upper right")
    ax.set_ylim(bottom=0)
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path
