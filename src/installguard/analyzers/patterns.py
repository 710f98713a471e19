"""Pattern catalog for suspicious lifecycle script content.

Signatures are drawn from recent npm supply chain attacks, including the
Shai Hulud worm:
- Network exfiltration
- Filesystem tampering
- Shell execution
- Credential and token harvesting
- Obfuscation primitives
- Crypto wallet theft
- Known malware file names
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from installguard.models.schemas import Capability, PatternCategory


@dataclass(frozen=True)
class SuspiciousPattern:
    """A compiled catalog entry. Identity is its regex source."""

    source: str
    category: PatternCategory
    regex: re.Pattern[str]


# === Pattern Definitions ===

# Ordered (regex, category) pairs; reported matches follow this order
PATTERN_DEFINITIONS: list[tuple[str, PatternCategory]] = [
    # Network activity
    (r"fetch\s*\(", PatternCategory.NETWORK),
    (r"axios\s*\(", PatternCategory.NETWORK),
    (r"https?:\/\/", PatternCategory.NETWORK),
    (r"webhook\.site", PatternCategory.NETWORK),
    # File system access
    (r"writeFile(Sync)?\s*\(", PatternCategory.FILESYSTEM),
    (r"unlink(Sync)?\s*\(", PatternCategory.FILESYSTEM),
    (r"rmdir\s*\(", PatternCategory.FILESYSTEM),
    (r"rm\s+-rf", PatternCategory.FILESYSTEM),
    # Shell execution
    (r"exec(Sync)?\s*\(", PatternCategory.SHELL_EXEC),
    (r"spawn(Sync)?\s*\(", PatternCategory.SHELL_EXEC),
    (r"child_process", PatternCategory.SHELL_EXEC),
    # Environment and credential file access
    (r"process\.env", PatternCategory.CREDENTIALS),
    (r"\.ssh", PatternCategory.CREDENTIALS),
    (r"\.aws", PatternCategory.CREDENTIALS),
    (r"\.git", PatternCategory.CREDENTIALS),
    # Token names
    (r"github.*token", PatternCategory.CREDENTIALS),
    (r"npm.*token", PatternCategory.CREDENTIALS),
    (r"api.*key", PatternCategory.CREDENTIALS),
    # Obfuscation
    (r"eval\s*\(", PatternCategory.OBFUSCATION),
    (r"Function\s*\(", PatternCategory.OBFUSCATION),
    (r"Buffer\.from.*base64", PatternCategory.OBFUSCATION),
    # Crypto hijacking
    (r"crypto.*wallet", PatternCategory.CRYPTO_WALLET),
    (r"ethereum", PatternCategory.CRYPTO_WALLET),
    (r"bitcoin", PatternCategory.CRYPTO_WALLET),
    # Bun runtime bootstrap files (Shai Hulud 2.0)
    (r"setup_bun\.js", PatternCategory.MALWARE_FILENAME),
    (r"bun_environment\.js", PatternCategory.MALWARE_FILENAME),
]

SUSPICIOUS_PATTERNS: tuple[SuspiciousPattern, ...] = tuple(
    SuspiciousPattern(source=regex, category=category, regex=re.compile(regex, re.IGNORECASE))
    for regex, category in PATTERN_DEFINITIONS
)

# Probes for combination rules, broader than the catalog entries:
# "exec" also catches execa/execFile, "base64" catches atob-style decoders.
CAPABILITY_PROBES: dict[Capability, re.Pattern[str]] = {
    Capability.NETWORK: re.compile(r"fetch|axios|https?://", re.IGNORECASE),
    Capability.CREDENTIALS: re.compile(r"process\.env", re.IGNORECASE),
    Capability.EXEC: re.compile(r"exec|spawn|child_process", re.IGNORECASE),
    Capability.OBFUSCATION: re.compile(r"eval|Function\(|base64", re.IGNORECASE),
}


def patterns_for(category: PatternCategory) -> list[SuspiciousPattern]:
    """Return the catalog entries tagged with ``category``, in catalog order."""
    return [pattern for pattern in SUSPICIOUS_PATTERNS if pattern.category == category]


def classify_capabilities(content: str) -> frozenset[Capability]:
    """Return the set of capabilities whose probe matches ``content``."""
    return frozenset(
        capability for capability, probe in CAPABILITY_PROBES.items() if probe.search(content)
    )
