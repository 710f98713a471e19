"""Pydantic models for lifecycle script scan results."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class RiskLevel(str, Enum):
    """Risk tiers, totally ordered by their score."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    SAFE = "SAFE"  # No lifecycle script present at all

    @property
    def score(self) -> int:
        """Fixed numeric score for this tier."""
        return RISK_SCORES[self]

    @classmethod
    def from_score(cls, score: int) -> RiskLevel:
        """Return the highest tier whose score does not exceed ``score``."""
        for level in cls:
            if score >= level.score:
                return level
        return cls.SAFE


RISK_SCORES: dict[RiskLevel, int] = {
    RiskLevel.CRITICAL: 100,
    RiskLevel.HIGH: 75,
    RiskLevel.MEDIUM: 50,
    RiskLevel.LOW: 25,
    RiskLevel.SAFE: 0,
}


class PatternCategory(str, Enum):
    """Categories of suspicious script content."""

    NETWORK = "network"
    FILESYSTEM = "filesystem"
    SHELL_EXEC = "shell_exec"
    CREDENTIALS = "credentials"  # Environment, dotfile paths and token names
    OBFUSCATION = "obfuscation"
    CRYPTO_WALLET = "crypto_wallet"
    MALWARE_FILENAME = "malware_filename"


class Capability(str, Enum):
    """Coarse capabilities a script exhibits, used by combination rules."""

    NETWORK = "network"
    CREDENTIALS = "credentials"
    EXEC = "exec"
    OBFUSCATION = "obfuscation"


# --- Scan Result Models ---


class Match(BaseModel):
    """First occurrence of one catalog pattern inside a script."""

    pattern: str  # Regex source of the catalog entry
    matched: str
    context: str  # Bounded window around the match offset


class ScriptAnalysis(BaseModel):
    """Analysis of a single lifecycle script."""

    script_name: str
    script_content: str
    matches: list[Match] = Field(default_factory=list)
    risk_level: RiskLevel = RiskLevel.LOW
    risks: list[str] = Field(default_factory=list)
    score: int = Field(default=RISK_SCORES[RiskLevel.LOW], ge=0, le=100)


class Finding(BaseModel):
    """Reportable summary of one script analysis."""

    type: str = "lifecycle_script"
    severity: RiskLevel
    script: str
    message: str
    details: list[str] = Field(default_factory=list)
    matches: list[Match] = Field(default_factory=list)


class PackageScanResult(BaseModel):
    """Package-level verdict built from all of its lifecycle scripts."""

    package_name: str = "unknown"
    version: str = "unknown"
    path: str | None = None

    # Keyed by lifecycle script name, in lifecycle check order
    scripts: dict[str, ScriptAnalysis] = Field(default_factory=dict)

    overall_risk: RiskLevel = RiskLevel.SAFE
    total_matches: int = 0
    findings: list[Finding] = Field(default_factory=list)

    @property
    def has_blocking_risk(self) -> bool:
        """Whether this result should fail a CI run."""
        return self.overall_risk in (RiskLevel.CRITICAL, RiskLevel.HIGH)

    @property
    def is_clean(self) -> bool:
        """Whether a tree scan should leave this result out."""
        return self.overall_risk == RiskLevel.SAFE and self.total_matches == 0
