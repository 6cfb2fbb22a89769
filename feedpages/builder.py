"""Site data generation for feedpages."""

import hashlib
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import BuildConfig
from .fetcher import ContentFetcher
from .models import (
    CategoryData,
    EntryData,
    FeedEntry,
    RepositoryData,
    SiteWithEntries,
)
from .reconciler import ReconcileResult, reconcile_readability_cache
from .store import JSON_SUFFIX, DataStore

logger = logging.getLogger(__name__)


class FeedContentError(Exception):
    """Raised when a site feed file cannot be read or parsed."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid site feed '{path}': {reason}")


@dataclass
class BuildResult:
    """Summary of one build pass."""

    categories: int
    sites: int
    entries: int
    readability: Optional[ReconcileResult] = None


def create_hash(value: str) -> str:
    """Return the SHA-256 hex digest of a string."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def sort_by_date(entries: list[EntryData]) -> list[EntryData]:
    """Sort entries newest first, keeping the order of entries with equal dates."""
    return sorted(entries, key=lambda entry: entry.date, reverse=True)


def create_repository_data(store: DataStore, config: BuildConfig) -> RepositoryData:
    """Write the repository metadata used to build page URLs.

    Sites served from ``<owner>.github.io/<repo>`` need ``/<repo>`` as a
    path prefix; a custom domain serves from the root.

    Args:
        store: Data store
        config: Build configuration

    Returns:
        The written RepositoryData
    """
    parts = config.repository_name.split("/")
    repository = ""
    if not config.custom_domain and len(parts) > 1 and parts[1]:
        repository = f"/{parts[1]}"

    data = RepositoryData(repository=repository)
    store.write_repository_data(data)
    return data


def create_entry_data(
    store: DataStore,
    category: str,
    site_title: str,
    site_hash: str,
    entry: FeedEntry,
) -> EntryData:
    """Materialize one feed entry into the entry store.

    Args:
        store: Data store
        category: Category the site belongs to
        site_title: Title of the owning site
        site_hash: Hash of the owning site
        entry: Raw feed entry

    Returns:
        The written EntryData
    """
    data = EntryData(
        title=entry.title,
        link=entry.link,
        date=entry.date,
        author=entry.author,
        site_title=site_title,
        site_hash=site_hash,
        entry_hash=create_hash(f"{entry.title},{entry.link}"),
        category=category,
    )
    store.write_entry(data)
    return data


def _load_site_feed(path: Path) -> tuple[dict, list[FeedEntry]]:
    try:
        site = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise FeedContentError(path, f"cannot read file: {e}") from e
    except json.JSONDecodeError as e:
        raise FeedContentError(path, f"malformed JSON: {e}") from e

    if not isinstance(site, dict):
        raise FeedContentError(path, f"expected an object, got {type(site).__name__}")

    missing = [key for key in ("title", "link", "updatedAt") if key not in site]
    if missing:
        raise FeedContentError(path, f"missing field '{missing[0]}'")

    try:
        entries = [FeedEntry.from_dict(entry) for entry in site.get("entries", [])]
    except (KeyError, TypeError) as e:
        raise FeedContentError(path, f"invalid entry: {e!r}") from e
    return site, entries


def create_sites_data(store: DataStore, category: str, site_files: list[str]) -> list[SiteWithEntries]:
    """Materialize every site of a category and its entries.

    The site hash comes from the file name rather than the title, so it
    survives title changes.

    Args:
        store: Data store
        category: Category directory name
        site_files: Site feed file names in the category directory

    Returns:
        List of written SiteWithEntries

    Raises:
        FeedContentError: If a site feed file is unreadable or malformed
    """
    result = []
    for site_file in site_files:
        site, feed_entries = _load_site_feed(store.site_source_path(category, site_file))
        site_hash = create_hash(site_file.removesuffix(JSON_SUFFIX))

        entries = [
            create_entry_data(store, category, site["title"], site_hash, entry).summary()
            for entry in feed_entries
        ]
        data = SiteWithEntries(
            title=site["title"],
            link=site["link"],
            updated_at=site["updatedAt"],
            site_hash=site_hash,
            entries=sort_by_date(entries),
        )
        store.write_site(data)
        logger.debug("%s - Site %s with %d entries", site_hash, data.title, len(entries))
        result.append(data)
    return result


def create_category_data(store: DataStore) -> list[CategoryData]:
    """Materialize every category of the content tree.

    Writes one entries file per category and the category index.

    Args:
        store: Data store

    Returns:
        List of CategoryData in the index
    """
    categories = []
    for category in store.list_categories():
        sites = create_sites_data(store, category, store.list_sites(category))
        categories.append(
            CategoryData(name=category, sites=[site.summary() for site in sites])
        )

        entries = [entry for site in sites for entry in site.entries]
        store.write_category_entries(category, sort_by_date(entries))
        logger.info("Category %s: %d sites, %d entries", category, len(sites), len(entries))

    store.write_categories_index(categories)
    return categories


def create_all_entries_data(store: DataStore) -> list[EntryData]:
    """Write the index of every entry in the entry store, newest first.

    Args:
        store: Data store

    Returns:
        List of entry summaries as written
    """
    entries = [store.read_entry(entry_hash).summary() for entry_hash in store.list_entry_hashes()]
    entries = sort_by_date(entries)
    store.write_all_entries(entries)
    return entries


def prepare_site_data(config: BuildConfig, fetcher: Optional[ContentFetcher] = None) -> BuildResult:
    """Run a full build pass.

    Args:
        config: Build configuration
        fetcher: Content fetch collaborator. Readability reconciliation is
            skipped when None.

    Returns:
        BuildResult summarizing the pass

    Raises:
        ContentDirectoryNotFoundError: If the feed contents directory is missing
        FeedContentError: If a site feed file is unreadable or malformed
    """
    logger.info("Preparing site data")
    store = DataStore(config.paths)
    store.prepare()
    store.clear_generated()
    create_repository_data(store, config)
    categories = create_category_data(store)
    entries = create_all_entries_data(store)

    readability = None
    if fetcher is not None:
        readability = reconcile_readability_cache(store, fetcher)

    return BuildResult(
        categories=len(categories),
        sites=sum(len(category.sites) for category in categories),
        entries=len(entries),
        readability=readability,
    )
