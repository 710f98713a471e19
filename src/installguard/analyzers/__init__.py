"""Analyzers for lifecycle script risk."""

from installguard.analyzers.aggregator import LIFECYCLE_SCRIPTS, MalformedScriptError, RiskAggregator
from installguard.analyzers.pipeline import ScanPipeline
from installguard.analyzers.script import ScriptAnalyzer

__all__ = [
    "LIFECYCLE_SCRIPTS",
    "MalformedScriptError",
    "RiskAggregator",
    "ScanPipeline",
    "ScriptAnalyzer",
]
