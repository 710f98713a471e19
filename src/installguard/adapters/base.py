"""Abstract base class for package metadata adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path


class BaseAdapter(ABC):
    """Base class for package metadata adapters.

    Each adapter knows how one package manager lays out installed
    dependencies on disk and how to read a package's metadata file.
    """

    @property
    @abstractmethod
    def metadata_filename(self) -> str:
        """Name of the per-package metadata file."""
        ...

    @property
    @abstractmethod
    def scope_prefix(self) -> str:
        """Directory-name prefix marking a scope namespace."""
        ...

    @abstractmethod
    def read_metadata(self, path: Path) -> dict:
        """Read and parse a metadata file.

        Args:
            path: Path to the metadata file.

        Returns:
            Parsed metadata mapping.

        Raises:
            MetadataNotFoundError: If the file doesn't exist.
            MetadataParseError: If the content is not well-formed metadata.
        """
        ...

    @abstractmethod
    def iter_metadata_paths(self, root: Path) -> Iterator[Path]:
        """Yield metadata files of the packages installed under ``root``.

        Args:
            root: Dependency directory (e.g. node_modules).

        Returns:
            Iterator of metadata file paths in a stable order.
        """
        ...

    def is_scope(self, name: str) -> bool:
        return name.startswith(self.scope_prefix)


class MetadataNotFoundError(Exception):
    """Raised when a metadata file cannot be found."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Package metadata not found at {path}")


class MetadataParseError(Exception):
    """Raised when metadata content is not well-formed."""

    def __init__(self, path: Path | None, reason: str) -> None:
        self.path = path
        self.reason = reason
        location = f" {path}" if path else ""
        super().__init__(f"Could not parse package metadata{location}: {reason}")
