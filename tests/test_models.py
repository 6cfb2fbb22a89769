"""Tests for data models."""

from feedpages.models import (
    CategoryData,
    EntryData,
    FeedEntry,
    RepositoryData,
    SiteData,
    SiteWithEntries,
)


ENTRY_DICT = {
    "title": "E1",
    "link": "https://a/1",
    "date": 100,
    "author": "x",
    "siteTitle": "A",
    "siteHash": "sitehash",
    "entryHash": "entryhash",
    "category": "tech",
}


class TestFeedEntry:
    """Tests for FeedEntry."""

    def test_from_dict(self):
        entry = FeedEntry.from_dict({"title": "E1", "link": "https://a/1", "date": 100, "author": "x"})
        assert entry == FeedEntry(title="E1", link="https://a/1", date=100, author="x")

    def test_null_author(self):
        entry = FeedEntry.from_dict({"title": "E1", "link": "https://a/1", "date": 100, "author": None})
        assert entry.author == ""


class TestEntryData:
    """Tests for EntryData."""

    def test_to_dict_keys(self):
        entry = EntryData.from_dict(ENTRY_DICT)
        assert entry.to_dict() == ENTRY_DICT

    def test_content_only_when_set(self):
        entry = EntryData.from_dict(ENTRY_DICT).with_content("<p>x</p>")
        assert entry.to_dict()["content"] == "<p>x</p>"
        assert "content" not in entry.summary().to_dict()

    def test_with_content_returns_copy(self):
        entry = EntryData.from_dict(ENTRY_DICT)
        enriched = entry.with_content("<p>x</p>")
        assert entry.content is None
        assert enriched.entry_hash == entry.entry_hash


class TestSiteModels:
    """Tests for site and category models."""

    def test_site_summary_drops_entries(self):
        site = SiteWithEntries(
            title="A",
            link="https://a",
            updated_at=1,
            site_hash="s",
            entries=[EntryData.from_dict(ENTRY_DICT)],
        )
        assert site.summary() == SiteData(title="A", link="https://a", updated_at=1, site_hash="s")
        assert "entries" not in site.summary().to_dict()

    def test_category_to_dict(self):
        category = CategoryData(
            name="tech", sites=[SiteData(title="A", link="https://a", updated_at=1, site_hash="s")]
        )
        assert category.to_dict() == {
            "name": "tech",
            "sites": [{"title": "A", "link": "https://a", "updatedAt": 1, "siteHash": "s"}],
        }

    def test_repository_to_dict(self):
        assert RepositoryData(repository="/feeds").to_dict() == {"repository": "/feeds"}
