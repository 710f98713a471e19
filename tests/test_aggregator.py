"""
Unit tests for RiskAggregator.
"""

import pytest

from conftest import EXFIL_SCRIPT
from installguard.adapters.base import MetadataParseError
from installguard.analyzers.aggregator import LIFECYCLE_SCRIPTS, MalformedScriptError
from installguard.models.schemas import RiskLevel


class TestAggregateSafePackages:
    """Packages without lifecycle scripts."""

    @pytest.mark.parametrize(
        "package_json",
        [
            {"name": "a", "version": "1.0.0"},
            {"name": "a", "version": "1.0.0", "scripts": {}},
            {"name": "a", "version": "1.0.0", "scripts": {"test": "jest", "build": "tsc"}},
            {"name": "a", "version": "1.0.0", "scripts": {"postinstall": ""}},
        ],
    )
    def test_no_lifecycle_scripts_is_safe(self, aggregator, package_json):
        result = aggregator.aggregate(package_json)

        assert result.overall_risk == RiskLevel.SAFE
        assert result.scripts == {}
        assert result.findings == []
        assert result.total_matches == 0

    def test_missing_name_and_version(self, aggregator):
        result = aggregator.aggregate({})

        assert result.package_name == "unknown"
        assert result.version == "unknown"
        assert result.path is None


class TestAggregateScripts:
    """Packages with one or more lifecycle scripts."""

    def test_overall_risk_is_maximum_tier(self, aggregator):
        result = aggregator.aggregate({
            "name": "mixed",
            "version": "2.0.0",
            "scripts": {"preinstall": "echo hi", "postinstall": EXFIL_SCRIPT},
        })

        assert result.scripts["preinstall"].risk_level == RiskLevel.LOW
        assert result.scripts["postinstall"].risk_level == RiskLevel.CRITICAL
        assert result.overall_risk == RiskLevel.CRITICAL

    def test_total_matches_is_sum(self, aggregator):
        result = aggregator.aggregate({
            "scripts": {
                "install": "node setup_bun.js",
                "postinstall": EXFIL_SCRIPT,
                "uninstall": "echo bye",
            },
        })

        assert result.total_matches == sum(len(a.matches) for a in result.scripts.values())
        assert result.total_matches == 7

    def test_lifecycle_order_is_preserved(self, aggregator):
        scripts = {name: "echo hi" for name in reversed(LIFECYCLE_SCRIPTS)}
        result = aggregator.aggregate({"scripts": scripts})

        assert list(result.scripts) == list(LIFECYCLE_SCRIPTS)
        assert [f.script for f in result.findings] == list(LIFECYCLE_SCRIPTS)

    def test_single_no_match_script_is_low(self, aggregator):
        result = aggregator.aggregate({"name": "echoer", "scripts": {"install": "echo hello"}})

        assert result.overall_risk == RiskLevel.LOW
        assert result.total_matches == 0
        assert len(result.findings) == 1

    def test_findings_mirror_analyses(self, aggregator):
        result = aggregator.aggregate({"scripts": {"postinstall": EXFIL_SCRIPT}})
        finding = result.findings[0]
        analysis = result.scripts["postinstall"]

        assert finding.type == "lifecycle_script"
        assert finding.severity == analysis.risk_level
        assert finding.script == "postinstall"
        assert finding.message == "postinstall script detected with 6 suspicious pattern(s)"
        assert finding.details == analysis.risks
        assert finding.matches == analysis.matches


class TestAggregateMalformed:
    """Lifecycle values that are not strings."""

    @pytest.mark.parametrize("value", [["curl", "x"], {"cmd": "x"}, 42, True])
    def test_non_string_script_raises(self, aggregator, value):
        with pytest.raises(MalformedScriptError) as exc_info:
            aggregator.aggregate({"scripts": {"postinstall": value}})

        assert exc_info.value.script_name == "postinstall"
        assert exc_info.value.value_type == type(value).__name__

    def test_null_script_is_skipped(self, aggregator):
        result = aggregator.aggregate({"scripts": {"postinstall": None}})
        assert result.overall_risk == RiskLevel.SAFE

    def test_non_mapping_scripts_raises(self, aggregator):
        with pytest.raises(MetadataParseError):
            aggregator.aggregate({"scripts": "node install.js"})
