"""Counters collected while scanning a dependency tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from installguard.models.schemas import PackageScanResult, RiskLevel


@dataclass
class ErrorEntry:
    """A package that was skipped because it could not be scanned."""

    timestamp: datetime
    path: str
    error_type: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "path": self.path,
            "error_type": self.error_type,
            "message": self.message,
        }


def _empty_distribution() -> dict[str, int]:
    return {level.value: 0 for level in RiskLevel}


@dataclass
class ScanMetrics:
    """Outcome counts of the most recent scan."""

    root: str = ""
    scanned_packages: int = 0
    flagged_packages: int = 0
    skipped_packages: int = 0
    risk_distribution: dict[str, int] = field(default_factory=_empty_distribution)
    errors: list[ErrorEntry] = field(default_factory=list)

    def reset(self, root: Path | str = "") -> None:
        """Clear all counters before a new scan."""
        self.root = str(root)
        self.scanned_packages = 0
        self.flagged_packages = 0
        self.skipped_packages = 0
        self.risk_distribution = _empty_distribution()
        self.errors = []

    def record_scanned(self, result: PackageScanResult, flagged: bool) -> None:
        self.scanned_packages += 1
        if flagged:
            self.flagged_packages += 1
            self.risk_distribution[result.overall_risk.value] += 1

    def record_skipped(self, path: Path | str, error: Exception) -> None:
        self.skipped_packages += 1
        self.errors.append(ErrorEntry(
            timestamp=datetime.now(timezone.utc),
            path=str(path),
            error_type=type(error).__name__,
            message=str(error),
        ))

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": self.root,
            "scanned_packages": self.scanned_packages,
            "flagged_packages": self.flagged_packages,
            "skipped_packages": self.skipped_packages,
            "risk_distribution": dict(self.risk_distribution),
            "errors": [e.to_dict() for e in self.errors],
        }
