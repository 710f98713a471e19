"""Package metadata adapters."""

from installguard.adapters.base import BaseAdapter, MetadataNotFoundError, MetadataParseError
from installguard.adapters.npm import NpmAdapter

__all__ = ["BaseAdapter", "MetadataNotFoundError", "MetadataParseError", "NpmAdapter"]
