"""Readability cache reconciliation for feedpages."""

import logging
from dataclasses import dataclass

from .fetcher import ContentFetcher, minify_html
from .store import DataStore

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    """Summary of one readability cache reconciliation."""

    evicted: int = 0
    cached: int = 0
    fetched: int = 0
    empty: int = 0
    failed: int = 0


def evict_stale_cache(store: DataStore, entry_hashes: list[str]) -> int:
    """Remove cache records whose entry is no longer in the entry store.

    Args:
        store: Data store
        entry_hashes: Hashes of the current entries

    Returns:
        Number of cache records removed
    """
    stale = set(store.list_cached_hashes()) - set(entry_hashes)
    logger.info("Delete old caches %d", len(stale))

    removed = 0
    for entry_hash in sorted(stale):
        if store.remove_cached_entry(entry_hash):
            removed += 1
    return removed


def reconcile_readability_cache(store: DataStore, fetcher: ContentFetcher) -> ReconcileResult:
    """Evict stale cache records and fetch content for uncached entries.

    Entries are processed one at a time. A failure on one entry is logged
    and the next entry is processed; the fetcher is released after every
    attempt.

    Args:
        store: Data store holding the current entries and the cache
        fetcher: Content fetch collaborator

    Returns:
        ReconcileResult with counts for each outcome
    """
    entry_hashes = store.list_entry_hashes()
    result = ReconcileResult(evicted=evict_stale_cache(store, entry_hashes))

    for entry_hash in entry_hashes:
        if store.has_cached_entry(entry_hash):
            logger.debug("%s - Readability loaded, skip", entry_hash)
            result.cached += 1
            continue

        entry = store.read_entry(entry_hash)
        logger.info("%s - Load %s", entry_hash, entry.link)
        try:
            content = fetcher.fetch(entry)
            if not content:
                logger.info("%s - Skip %s", entry_hash, entry.link)
                result.empty += 1
                continue

            store.write_cached_entry(entry.with_content(minify_html(content)))
            result.fetched += 1
        except Exception as e:
            logger.warning("%s - Fail to load %s: %s", entry_hash, entry.link, e)
            result.failed += 1
        finally:
            fetcher.release()

    logger.info(
        "Readability cache: %d fetched, %d cached, %d empty, %d failed",
        result.fetched,
        result.cached,
        result.empty,
        result.failed,
    )
    return result
