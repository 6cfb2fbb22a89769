"""Content-addressed JSON file store for feedpages."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from .config import Paths
from .models import CategoryData, EntryData, RepositoryData, SiteWithEntries

logger = logging.getLogger(__name__)

JSON_SUFFIX = ".json"


class ContentDirectoryNotFoundError(Exception):
    """Raised when the feed contents directory does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Feed contents directory '{path}' not found")


def dump_json(value: Any) -> str:
    """Serialize a value compactly, the same way every time."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


class DataStore:
    """Directory-backed store for entries, sites, categories and readability cache.

    Every record is one JSON file; hashed records are named by their hash.
    """

    def __init__(self, paths: Paths):
        """Initialize the store.

        Args:
            paths: Locations of the content tree, outputs and cache
        """
        self.paths = paths

    def prepare(self) -> None:
        """Check the content tree exists and create every output directory.

        Raises:
            ContentDirectoryNotFoundError: If the feed contents directory is missing
        """
        if not self.paths.feeds_content_path.is_dir():
            raise ContentDirectoryNotFoundError(self.paths.feeds_content_path)

        for directory in (
            self.paths.embedded_data_path,
            self.paths.data_path,
            self.paths.category_data_path,
            self.paths.sites_data_path,
            self.paths.entries_data_path,
            self.paths.readability_cache_path,
        ):
            directory.mkdir(parents=True, exist_ok=True)

    def clear_generated(self) -> int:
        """Remove entry, site and category records left by a previous pass.

        The readability cache is kept.

        Returns:
            Number of records removed
        """
        removed = 0
        for directory in (
            self.paths.entries_data_path,
            self.paths.sites_data_path,
            self.paths.category_data_path,
        ):
            for name in self._list_names(directory):
                if name.endswith(JSON_SUFFIX):
                    (directory / name).unlink(missing_ok=True)
                    removed += 1
        if removed:
            logger.debug("Removed %d records from a previous pass", removed)
        return removed

    # Low level file operations

    def write_text(self, path: Path, text: str) -> None:
        """Write text atomically through a temporary sibling file."""
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def write_json(self, path: Path, value: Any) -> None:
        self.write_text(path, dump_json(value))

    @staticmethod
    def read_json(path: Path) -> Any:
        return json.loads(path.read_text(encoding="utf-8"))

    @staticmethod
    def _list_names(directory: Path) -> list[str]:
        """List visible names in a directory, sorted."""
        return sorted(name for name in os.listdir(directory) if not name.startswith("."))

    @classmethod
    def _list_hashes(cls, directory: Path) -> list[str]:
        return [
            name[: -len(JSON_SUFFIX)]
            for name in cls._list_names(directory)
            if name.endswith(JSON_SUFFIX)
        ]

    # Content tree

    def list_categories(self) -> list[str]:
        """List category directory names in the content tree."""
        return self._list_names(self.paths.feeds_content_path)

    def list_sites(self, category: str) -> list[str]:
        """List site file names in a category directory."""
        return self._list_names(self.paths.feeds_content_path / category)

    def site_source_path(self, category: str, site_file: str) -> Path:
        return self.paths.feeds_content_path / category / site_file

    # Entries

    def entry_path(self, entry_hash: str) -> Path:
        return self.paths.entries_data_path / f"{entry_hash}{JSON_SUFFIX}"

    def write_entry(self, entry: EntryData) -> None:
        self.write_json(self.entry_path(entry.entry_hash), entry.to_dict())

    def read_entry(self, entry_hash: str) -> EntryData:
        return EntryData.from_dict(self.read_json(self.entry_path(entry_hash)))

    def list_entry_hashes(self) -> list[str]:
        """List the hashes of every entry in the entry store."""
        return self._list_hashes(self.paths.entries_data_path)

    # Sites

    def site_path(self, site_hash: str) -> Path:
        return self.paths.sites_data_path / f"{site_hash}{JSON_SUFFIX}"

    def write_site(self, site: SiteWithEntries) -> None:
        self.write_json(self.site_path(site.site_hash), site.to_dict())

    # Categories and indexes

    def category_path(self, name: str) -> Path:
        return self.paths.category_data_path / f"{name}{JSON_SUFFIX}"

    def write_category_entries(self, name: str, entries: list[EntryData]) -> None:
        self.write_json(self.category_path(name), [entry.to_dict() for entry in entries])

    def write_categories_index(self, categories: list[CategoryData]) -> None:
        """Write the category index to the embedded data and data directories.

        Both files receive the same serialized text.
        """
        text = dump_json([category.to_dict() for category in categories])
        self.write_text(self.paths.embedded_data_path / "categories.json", text)
        self.write_text(self.paths.data_path / "categories.json", text)

    def write_all_entries(self, entries: list[EntryData]) -> None:
        self.write_json(self.paths.data_path / "all.json", [entry.to_dict() for entry in entries])

    def write_repository_data(self, data: RepositoryData) -> None:
        self.write_json(self.paths.repository_data_path, data.to_dict())

    # Readability cache

    def cache_path(self, entry_hash: str) -> Path:
        return self.paths.readability_cache_path / f"{entry_hash}{JSON_SUFFIX}"

    def list_cached_hashes(self) -> list[str]:
        """List the entry hashes that have a readability cache record."""
        return self._list_hashes(self.paths.readability_cache_path)

    def has_cached_entry(self, entry_hash: str) -> bool:
        return self.cache_path(entry_hash).is_file()

    def write_cached_entry(self, entry: EntryData) -> None:
        self.write_json(self.cache_path(entry.entry_hash), entry.to_dict())

    def remove_cached_entry(self, entry_hash: str) -> bool:
        """Remove a readability cache record.

        Args:
            entry_hash: Hash of the cached entry

        Returns:
            True if a record was removed, False if it was already gone
        """
        try:
            self.cache_path(entry_hash).unlink()
        except FileNotFoundError:
            logger.debug("%s - Cache record already removed", entry_hash)
            return False
        return True
