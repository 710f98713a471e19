"""Roll per-script analyses up into a package-level verdict."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from installguard.adapters.base import MetadataParseError
from installguard.analyzers.script import ScriptAnalyzer
from installguard.models.schemas import (
    Finding,
    PackageScanResult,
    RiskLevel,
    ScriptAnalysis,
)

logger = logging.getLogger(__name__)


# Lifecycle scripts a package manager runs on install/uninstall, in check order
LIFECYCLE_SCRIPTS: tuple[str, ...] = (
    "preinstall",
    "install",
    "postinstall",
    "preuninstall",
    "uninstall",
    "postuninstall",
)


class MalformedScriptError(Exception):
    """Raised when a lifecycle script value is not a string."""

    def __init__(self, script_name: str, value: object, path: Path | None = None) -> None:
        self.script_name = script_name
        self.value_type = type(value).__name__
        self.path = path
        location = f" in {path}" if path else ""
        super().__init__(
            f"Lifecycle script '{script_name}'{location} must be a string, got {self.value_type}"
        )


class RiskAggregator:
    """Builds a PackageScanResult from parsed package metadata."""

    def __init__(self, script_analyzer: ScriptAnalyzer | None = None) -> None:
        self.script_analyzer = script_analyzer or ScriptAnalyzer()

    def aggregate(self, package_json: dict, path: Path | None = None) -> PackageScanResult:
        """Analyze every lifecycle script of a package.

        Args:
            package_json: Parsed package.json content.
            path: Where the metadata was read from, if anywhere.

        Returns:
            PackageScanResult with per-script analyses and findings.

        Raises:
            MetadataParseError: If ``scripts`` is present but not a mapping.
            MalformedScriptError: If a lifecycle script is not a string.
        """
        result = PackageScanResult(
            package_name=self._string_field(package_json, "name"),
            version=self._string_field(package_json, "version"),
            path=str(path) if path else None,
        )

        for script_name, script_content in self.lifecycle_scripts(package_json, path).items():
            analysis = self.script_analyzer.analyze(script_name, script_content)
            result.scripts[script_name] = analysis
            result.total_matches += len(analysis.matches)

        result.overall_risk = self.calculate_overall_risk(result.scripts.values())
        result.findings = self.generate_findings(result.scripts)

        return result

    def lifecycle_scripts(self, package_json: dict, path: Path | None = None) -> dict[str, str]:
        """Extract present, non-empty lifecycle scripts in check order."""
        scripts = package_json.get("scripts")
        if not scripts:
            return {}
        if not isinstance(scripts, dict):
            raise MetadataParseError(
                path, f"'scripts' must be an object, got {type(scripts).__name__}"
            )

        found = {}
        for script_name in LIFECYCLE_SCRIPTS:
            value = scripts.get(script_name)
            if value is None or value == "":
                continue
            if not isinstance(value, str):
                raise MalformedScriptError(script_name, value, path)
            found[script_name] = value
        return found

    def calculate_overall_risk(self, analyses: Iterable[ScriptAnalysis]) -> RiskLevel:
        """Tier of the highest script score; SAFE when there are no scripts."""
        max_score = max((analysis.score for analysis in analyses), default=RiskLevel.SAFE.score)
        return RiskLevel.from_score(max_score)

    def generate_findings(self, scripts: dict[str, ScriptAnalysis]) -> list[Finding]:
        """One finding per script analysis, preserving lifecycle order."""
        findings = []

        for script_name, analysis in scripts.items():
            findings.append(Finding(
                severity=analysis.risk_level,
                script=script_name,
                message=(
                    f"{script_name} script detected with "
                    f"{len(analysis.matches)} suspicious pattern(s)"
                ),
                details=list(analysis.risks),
                matches=list(analysis.matches),
            ))

        return findings

    @staticmethod
    def _string_field(package_json: dict, key: str) -> str:
        value = package_json.get(key)
        if isinstance(value, str) and value:
            return value
        return "unknown"
