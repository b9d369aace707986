"""
Alerts Module - Advisory Alert Container
FinDash Financial Analysis Core

Shared alert record emitted by the ratio and cash-flow engines for the latest
reporting period. Alerts are advisory only; generating them never raises.

Version: 1.0.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Any

from .config import AlertSeverity


__version__ = "1.0.0"


@dataclass(frozen=True)
class Alert:
    """Single advisory alert for one metric."""

    severity: AlertSeverity
    message: str
    metric: str
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "severity": self.severity.value,
            "message": self.message,
            "metric": self.metric,
            "value": self.value,
        }


__all__ = ["__version__", "Alert"]
