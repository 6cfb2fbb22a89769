"""Build configuration for feedpages."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class Paths:
    """Every location a build pass reads from or writes to."""

    feeds_content_path: Path
    embedded_data_path: Path
    data_path: Path
    category_data_path: Path
    sites_data_path: Path
    entries_data_path: Path
    readability_cache_path: Path
    repository_data_path: Path

    @classmethod
    def from_workspace(
        cls, workspace: Optional[Path] = None, action_path: Optional[Path] = None
    ) -> "Paths":
        """Derive the directory layout from the CI workspace and action checkout.

        The readability cache lives under the workspace so it survives
        between runs. It must also sit inside the published site output
        (the workspace `data/` directory is deployed with the site),
        otherwise the pages cannot load the cached article content.

        Args:
            workspace: Checkout holding the feed contents and the previous
                readability cache. None for a local run.
            action_path: Checkout holding the page templates. Ignored (and
                the current directory used) when no workspace is given.

        Returns:
            Paths for a build pass
        """
        site_root = (action_path or Path(".")) if workspace else Path(".")
        embedded_data_path = site_root / "pages" / "_data"
        data_path = site_root / "pages" / "data"
        return cls(
            feeds_content_path=(workspace or Path(".")) / "contents",
            embedded_data_path=embedded_data_path,
            data_path=data_path,
            category_data_path=data_path / "categories",
            sites_data_path=data_path / "sites",
            entries_data_path=data_path / "entries",
            readability_cache_path=(workspace or Path("_site")) / "data" / "readability",
            repository_data_path=embedded_data_path / "github.json",
        )


@dataclass(frozen=True)
class BuildConfig:
    """Settings for one build pass, constructed once at process start."""

    paths: Paths
    repository_name: str = ""
    custom_domain: str = ""
    fetch_timeout: int = 30
