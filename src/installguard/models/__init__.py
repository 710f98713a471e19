"""Data models and schemas."""

from installguard.models.schemas import (
    Capability,
    Finding,
    Match,
    PackageScanResult,
    PatternCategory,
    RiskLevel,
    ScriptAnalysis,
)

__all__ = [
    "Capability",
    "Finding",
    "Match",
    "PackageScanResult",
    "PatternCategory",
    "RiskLevel",
    "ScriptAnalysis",
]
