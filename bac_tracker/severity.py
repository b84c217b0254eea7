"""BAC severity bands for display.

The bands follow the usual legal-limit convention and are not configurable.
"""

from enum import Enum

LEGAL_LIMIT_BAC = 0.08
CAUTION_BAC = 0.04


class Severity(str, Enum):
    SAFE = "safe"
    WARNING = "warning"
    DANGER = "danger"

    @property
    def css_class(self) -> str:
        return _CSS_CLASSES[self]


_CSS_CLASSES = {
    Severity.SAFE: "text-success",
    Severity.WARNING: "text-warning",
    Severity.DANGER: "text-danger",
}


def classify_severity(bac: float) -> Severity:
    """Map an estimated BAC (%) to its severity band."""
    if bac >= LEGAL_LIMIT_BAC:
        return Severity.DANGER
    if bac >= CAUTION_BAC:
        return Severity.WARNING
    return Severity.SAFE


def format_bac(bac: float) -> str:
    """BAC as shown to users, e.g. "0.045"."""
    return f"{bac:.3f}"
