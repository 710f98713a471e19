"""End-to-end scan pipeline for package metadata files and dependency trees."""

from __future__ import annotations

import logging
from pathlib import Path

from installguard.adapters.base import BaseAdapter, MetadataNotFoundError, MetadataParseError
from installguard.adapters.npm import NpmAdapter
from installguard.analyzers.aggregator import MalformedScriptError, RiskAggregator
from installguard.analyzers.script import DEFAULT_CONTEXT_RADIUS, ScriptAnalyzer
from installguard.models.schemas import PackageScanResult
from installguard.monitoring import ScanMetrics

logger = logging.getLogger(__name__)

# Per-package failures that a tree walk absorbs
SKIPPABLE_ERRORS = (MetadataNotFoundError, MetadataParseError, MalformedScriptError, OSError)


class ScanPipeline:
    """Orchestrates metadata scanning.

    Pipeline stages, per package:
    1. Read and parse the metadata file (adapter)
    2. Analyze each lifecycle script (ScriptAnalyzer)
    3. Roll analyses into a package verdict (RiskAggregator)
    """

    def __init__(
        self,
        adapter: BaseAdapter | None = None,
        context_radius: int = DEFAULT_CONTEXT_RADIUS,
        metrics: ScanMetrics | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            adapter: Package metadata adapter. Defaults to npm.
            context_radius: Characters of context kept around each match.
            metrics: Collector for scan counters. A fresh one is created if omitted.
        """
        self.adapter = adapter or NpmAdapter()
        self.aggregator = RiskAggregator(ScriptAnalyzer(context_radius=context_radius))
        self.metrics = metrics or ScanMetrics()

    def scan_single(self, path: Path | str) -> PackageScanResult:
        """Scan one metadata file.

        Args:
            path: Path to the metadata file.

        Returns:
            PackageScanResult for the package, clean or not.

        Raises:
            MetadataNotFoundError: If the file doesn't exist.
            MetadataParseError: If the file is not well-formed metadata.
            MalformedScriptError: If a lifecycle script is not a string.
        """
        path = Path(path)
        package_json = self.adapter.read_metadata(path)
        return self.aggregator.aggregate(package_json, path=path)

    def scan_tree(self, root: Path | str) -> list[PackageScanResult]:
        """Scan every package installed directly under ``root``.

        Packages that cannot be read or parsed are skipped and counted in
        ``self.metrics``; clean packages are left out of the result.

        Args:
            root: Dependency directory such as node_modules.

        Returns:
            Results with any lifecycle script or match, in directory order.
        """
        root = Path(root)
        self.metrics.reset(root)
        results = []

        if not root.is_dir():
            logger.warning(f"Dependency directory not found: {root}")
            return results

        logger.info(f"Scanning packages in {root}")

        for metadata_path in self.adapter.iter_metadata_paths(root):
            try:
                result = self.scan_single(metadata_path)
            except SKIPPABLE_ERRORS as e:
                logger.debug(f"Skipping {metadata_path}: {e}")
                self.metrics.record_skipped(metadata_path, e)
                continue

            flagged = not result.is_clean
            self.metrics.record_scanned(result, flagged)
            if flagged:
                results.append(result)

        logger.info(
            f"Scanned {self.metrics.scanned_packages} packages in {root}: "
            f"{self.metrics.flagged_packages} flagged, {self.metrics.skipped_packages} skipped"
        )

        return results
