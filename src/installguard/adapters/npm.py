"""NPM package metadata adapter."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

from installguard.adapters.base import BaseAdapter, MetadataNotFoundError, MetadataParseError

logger = logging.getLogger(__name__)


class NpmAdapter(BaseAdapter):
    """Adapter for npm-style dependency trees.

    Layout:
    - Unscoped packages: node_modules/{package}/package.json
    - Scoped packages: node_modules/@{scope}/{package}/package.json
    """

    METADATA_FILENAME = "package.json"
    SCOPE_PREFIX = "@"

    def __init__(self, max_scope_depth: int = 1) -> None:
        """Initialize the adapter.

        Args:
            max_scope_depth: How many scope directory levels to descend into.
        """
        self.max_scope_depth = max_scope_depth

    @property
    def metadata_filename(self) -> str:
        return self.METADATA_FILENAME

    @property
    def scope_prefix(self) -> str:
        return self.SCOPE_PREFIX

    def read_metadata(self, path: Path) -> dict:
        """Read and parse a package.json file.

        Args:
            path: Path to package.json.

        Returns:
            Parsed package.json content.

        Raises:
            MetadataNotFoundError: If ``path`` is not an existing file.
            MetadataParseError: If the file is not a JSON object.
        """
        path = Path(path)
        if not path.is_file():
            raise MetadataNotFoundError(path)

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except UnicodeDecodeError as e:
            raise MetadataParseError(path, f"not valid UTF-8 ({e.reason})") from e
        except json.JSONDecodeError as e:
            raise MetadataParseError(path, str(e)) from e
        except RecursionError as e:
            raise MetadataParseError(path, "nesting too deep") from e

        if not isinstance(data, dict):
            raise MetadataParseError(path, f"expected a JSON object, got {type(data).__name__}")

        return data

    def iter_metadata_paths(self, root: Path) -> Iterator[Path]:
        """Yield package.json paths for packages directly under ``root``.

        Scope directories are descended ``max_scope_depth`` levels; nested
        node_modules are never visited.
        """
        root = Path(root)
        if not root.is_dir():
            return
        yield from self._walk(root, scope_depth=0)

    def _walk(self, directory: Path, scope_depth: int) -> Iterator[Path]:
        try:
            entries = sorted(directory.iterdir(), key=lambda entry: entry.name)
        except OSError as e:
            logger.debug(f"Cannot list {directory}: {e}")
            return

        for entry in entries:
            if entry.name.startswith(".") or not entry.is_dir():
                continue

            if self.is_scope(entry.name):
                if scope_depth < self.max_scope_depth:
                    yield from self._walk(entry, scope_depth + 1)
                continue

            metadata_path = entry / self.metadata_filename
            try:
                exists = metadata_path.is_file()
            except OSError as e:
                # Let the reader fail on it so the package is counted as skipped
                logger.debug(f"Cannot stat {metadata_path}: {e}")
                exists = True
            if exists:
                yield metadata_path
