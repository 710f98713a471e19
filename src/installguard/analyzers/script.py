"""Per-script analysis of lifecycle commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from installguard.analyzers.patterns import (
    SUSPICIOUS_PATTERNS,
    SuspiciousPattern,
    classify_capabilities,
)
from installguard.models.schemas import Capability, Match, RiskLevel, ScriptAnalysis

logger = logging.getLogger(__name__)


DEFAULT_CONTEXT_RADIUS = 50

# Match-count thresholds, checked in order
COUNT_THRESHOLDS: list[tuple[int, RiskLevel]] = [
    (5, RiskLevel.CRITICAL),
    (3, RiskLevel.HIGH),
    (1, RiskLevel.MEDIUM),
]

OBFUSCATION_NOTE = "Uses code obfuscation techniques"


@dataclass(frozen=True)
class CombinationRule:
    """Forces a minimum tier when all required capabilities are present."""

    required: frozenset[Capability]
    forced_level: RiskLevel
    note: str

    def applies_to(self, capabilities: frozenset[Capability]) -> bool:
        return self.required <= capabilities


COMBINATION_RULES: tuple[CombinationRule, ...] = (
    CombinationRule(
        required=frozenset({Capability.NETWORK, Capability.CREDENTIALS}),
        forced_level=RiskLevel.CRITICAL,
        note="Combines network access with environment variable reading",
    ),
    CombinationRule(
        required=frozenset({Capability.EXEC, Capability.OBFUSCATION}),
        forced_level=RiskLevel.CRITICAL,
        note="Combines shell execution with code obfuscation",
    ),
)


class ScriptAnalyzer:
    """Applies the pattern catalog to a single lifecycle script."""

    def __init__(
        self,
        patterns: tuple[SuspiciousPattern, ...] = SUSPICIOUS_PATTERNS,
        rules: tuple[CombinationRule, ...] = COMBINATION_RULES,
        context_radius: int = DEFAULT_CONTEXT_RADIUS,
    ) -> None:
        """Initialize the analyzer.

        Args:
            patterns: Ordered pattern catalog to apply.
            rules: Combination rules evaluated after counting.
            context_radius: Characters of context kept on each side of a match.
        """
        if context_radius < 0:
            raise ValueError(f"context_radius must be non-negative, got {context_radius}")
        self.patterns = patterns
        self.rules = rules
        self.context_radius = context_radius

    def analyze(self, script_name: str, script_content: str) -> ScriptAnalysis:
        """Analyze one lifecycle script.

        Args:
            script_name: Lifecycle key the script is registered under.
            script_content: Shell command text of the script.

        Returns:
            ScriptAnalysis with matches, tier, notes and score.
        """
        matches = self.find_matches(script_content)
        risk_level = self._level_from_count(len(matches))
        risks: list[str] = []

        capabilities = classify_capabilities(script_content)
        for rule in self.rules:
            if rule.applies_to(capabilities):
                # Rules only ever raise severity
                if rule.forced_level.score > risk_level.score:
                    risk_level = rule.forced_level
                risks.append(rule.note)

        if Capability.OBFUSCATION in capabilities:
            risks.append(OBFUSCATION_NOTE)

        logger.debug(
            f"{script_name}: {len(matches)} match(es), "
            f"capabilities={sorted(c.value for c in capabilities)}, level={risk_level.value}"
        )

        return ScriptAnalysis(
            script_name=script_name,
            script_content=script_content,
            matches=matches,
            risk_level=risk_level,
            risks=risks,
            score=risk_level.score,
        )

    def find_matches(self, content: str) -> list[Match]:
        """Return the first occurrence of each catalog pattern, in catalog order."""
        matches = []
        for pattern in self.patterns:
            found = pattern.regex.search(content)
            if found is None:
                continue
            matches.append(Match(
                pattern=pattern.source,
                matched=found.group(0),
                context=self._get_context(content, found.start()),
            ))
        return matches

    def _get_context(self, content: str, index: int) -> str:
        """Return the window of ``context_radius`` characters around ``index``."""
        start = max(0, index - self.context_radius)
        end = min(len(content), index + self.context_radius)
        return content[start:end]

    def _level_from_count(self, count: int) -> RiskLevel:
        for threshold, level in COUNT_THRESHOLDS:
            if count >= threshold:
                return level
        # A script with no matches is still LOW; SAFE means no script at all
        return RiskLevel.LOW
