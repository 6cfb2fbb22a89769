"""Data models for feedpages."""

from dataclasses import dataclass, field, replace
from typing import Any, Optional


@dataclass
class FeedEntry:
    """Represents one entry of a site feed file."""

    title: str
    link: str
    date: float
    author: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "FeedEntry":
        return cls(
            title=data["title"],
            link=data["link"],
            date=data["date"],
            author=data.get("author") or "",
        )


@dataclass
class EntryData:
    """Represents a materialized entry record.

    The same shape is used for the entry store, for entry summaries embedded
    in site and category files, and for readability cache records (which
    carry the extracted ``content``).
    """

    title: str
    link: str
    date: float
    author: str
    site_title: str
    site_hash: str
    entry_hash: str
    category: str
    content: Optional[str] = None

    def summary(self) -> "EntryData":
        """Return a copy without the extracted content."""
        return replace(self, content=None)

    def with_content(self, content: str) -> "EntryData":
        return replace(self, content=content)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "title": self.title,
            "link": self.link,
            "date": self.date,
            "author": self.author,
            "siteTitle": self.site_title,
            "siteHash": self.site_hash,
            "entryHash": self.entry_hash,
            "category": self.category,
        }
        if self.content is not None:
            data["content"] = self.content
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "EntryData":
        return cls(
            title=data["title"],
            link=data["link"],
            date=data["date"],
            author=data.get("author") or "",
            site_title=data["siteTitle"],
            site_hash=data["siteHash"],
            entry_hash=data["entryHash"],
            category=data["category"],
            content=data.get("content"),
        )


@dataclass
class SiteData:
    """Represents a site summary as listed in the category index."""

    title: str
    link: str
    updated_at: float
    site_hash: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "link": self.link,
            "updatedAt": self.updated_at,
            "siteHash": self.site_hash,
        }


@dataclass
class SiteWithEntries(SiteData):
    """Represents a persisted site record with its entry summaries."""

    entries: list[EntryData] = field(default_factory=list)

    def summary(self) -> SiteData:
        return SiteData(
            title=self.title,
            link=self.link,
            updated_at=self.updated_at,
            site_hash=self.site_hash,
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["entries"] = [entry.to_dict() for entry in self.entries]
        return data


@dataclass
class CategoryData:
    """Represents a category and the sites it groups."""

    name: str
    sites: list[SiteData] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "sites": [site.to_dict() for site in self.sites]}


@dataclass
class RepositoryData:
    """Repository metadata consumed by the page templates."""

    repository: str

    def to_dict(self) -> dict[str, Any]:
        return {"repository": self.repository}
