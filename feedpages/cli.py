"""CLI commands for feedpages."""

from pathlib import Path
from typing import Optional

import click

from .builder import BuildResult, FeedContentError, prepare_site_data
from .config import BuildConfig, Paths
from .fetcher import ReadabilityFetcher
from .logging_config import setup_logging
from .reconciler import ReconcileResult, reconcile_readability_cache
from .store import ContentDirectoryNotFoundError, DataStore


def path_options(func):
    """Options locating the workspace and the site checkout."""
    func = click.option(
        "--action-path",
        type=click.Path(file_okay=False, path_type=Path),
        envvar="GITHUB_ACTION_PATH",
        help="Checkout holding the page templates (defaults to the current directory)",
    )(func)
    func = click.option(
        "--workspace",
        type=click.Path(file_okay=False, path_type=Path),
        envvar="GITHUB_WORKSPACE",
        help="Workspace holding the feed contents and readability cache",
    )(func)
    return func


def common_options(func):
    func = click.option(
        "--log-dir",
        type=click.Path(file_okay=False, path_type=Path),
        help="Also write logs to this directory",
    )(func)
    func = click.option("--verbose", "-v", is_flag=True, help="Show debug output")(func)
    func = click.option("--timeout", default=30, show_default=True, help="Page fetch timeout in seconds")(func)
    return func


@click.group()
@click.version_option(package_name="feedpages")
def cli():
    """feedpages - Prepare feed data for the static site build."""
    pass


@cli.command()
@path_options
@click.option("--repository", envvar="GITHUB_REPOSITORY", default="", help="Repository root name (owner/repo)")
@click.option("--custom-domain", envvar="INPUT_CUSTOMDOMAIN", default="", help="Custom domain the site is served from")
@click.option("--skip-readability", is_flag=True, help="Do not fetch article content")
@common_options
def build(
    workspace: Optional[Path],
    action_path: Optional[Path],
    repository: str,
    custom_domain: str,
    skip_readability: bool,
    timeout: int,
    verbose: bool,
    log_dir: Optional[Path],
):
    """Generate site data from the feed contents."""
    setup_logging(verbose=verbose, log_dir=log_dir)
    config = BuildConfig(
        paths=Paths.from_workspace(workspace, action_path),
        repository_name=repository,
        custom_domain=custom_domain,
        fetch_timeout=timeout,
    )
    fetcher = None if skip_readability else ReadabilityFetcher(timeout=config.fetch_timeout)

    try:
        result = prepare_site_data(config, fetcher)
    except (ContentDirectoryNotFoundError, FeedContentError, OSError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"))
        raise SystemExit(1)

    _print_build_result(result)


@cli.command()
@path_options
@common_options
def reconcile(
    workspace: Optional[Path],
    action_path: Optional[Path],
    timeout: int,
    verbose: bool,
    log_dir: Optional[Path],
):
    """Refresh the readability cache for the last generated entries."""
    setup_logging(verbose=verbose, log_dir=log_dir)
    paths = Paths.from_workspace(workspace, action_path)
    if not paths.entries_data_path.is_dir():
        click.echo(
            click.style(
                f"Error: No entries found at '{paths.entries_data_path}'. "
                "Run 'feedpages build' first.",
                fg="red",
            )
        )
        raise SystemExit(1)

    paths.readability_cache_path.mkdir(parents=True, exist_ok=True)
    result = reconcile_readability_cache(DataStore(paths), ReadabilityFetcher(timeout=timeout))
    _print_reconcile_result(result)


def _print_build_result(result: BuildResult):
    """Print a build summary."""
    click.echo(
        click.style("Site data ready: ", fg="green", bold=True)
        + f"{result.categories} categories | {result.sites} sites | {result.entries} entries"
    )
    if result.readability is not None:
        _print_reconcile_result(result.readability)


def _print_reconcile_result(result: ReconcileResult):
    """Print a readability cache summary."""
    failed_color = "red" if result.failed else "white"
    click.echo(
        f"Readability: Fetched: {result.fetched} | Cached: {result.cached} | "
        f"Empty: {result.empty} | Evicted: {result.evicted} | "
        + click.style(f"Failed: {result.failed}", fg=failed_color)
    )


if __name__ == "__main__":
    cli()
