"""CLI entry point for blog-archiver."""

import logging
import sys

import click

from .core.controller import ArchiverController, RunConfig
from .core.document_extractor import DEFAULT_CONTENT_SELECTOR, DEFAULT_TITLE_SELECTOR
from .core.link_filter import DEFAULT_DOCUMENT_PATTERN
from .core.logger import initialize_logging
from .exceptions import ConfigError, FatalPipelineError
from .models import RunPhase


@click.command()
@click.argument("base_url")
@click.argument("output_dir", type=click.Path(file_okay=False))
@click.option(
    "--concurrency", "-c",
    type=int,
    default=4,
    show_default=True,
    help="Maximum number of posts fetched at the same time",
)
@click.option(
    "--timeout",
    type=float,
    default=30.0,
    show_default=True,
    help="Per-request timeout in seconds",
)
@click.option(
    "--delay",
    type=float,
    default=0.0,
    show_default=True,
    help="Minimum seconds between requests across all workers (0 = no limit)",
)
@click.option(
    "--pattern",
    type=str,
    default=DEFAULT_DOCUMENT_PATTERN,
    show_default=True,
    help="Regex a post path must match, relative to the base URL's path",
)
@click.option(
    "--title-selector",
    type=str,
    default=DEFAULT_TITLE_SELECTOR,
    show_default=True,
    help="CSS selector for the post title",
)
@click.option(
    "--content-selector",
    type=str,
    default=DEFAULT_CONTENT_SELECTOR,
    show_default=True,
    help="CSS selector for the post's main content",
)
@click.option(
    "--max-links",
    type=int,
    default=0,
    help="Only process the first N post links (0 = all)",
)
@click.option(
    "--manifest/--no-manifest",
    default=False,
    help="Write manifest.jsonl with one record per post into OUTPUT_DIR",
)
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Also write rotating log files into this directory",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output",
)
def main(base_url, output_dir, concurrency, timeout, delay, pattern, title_selector,
         content_selector, max_links, manifest, log_dir, verbose):
    """Download every post linked from an archived blog index page.

    BASE_URL is the archived index page, OUTPUT_DIR receives one Markdown
    file per post.

    Example: blog-archiver https://web.archive.org/web/2015/http://example.com/ posts
    """
    initialize_logging(log_dir, logging.DEBUG if verbose else logging.WARNING)

    config = RunConfig(
        base_url=base_url,
        output_dir=output_dir,
        concurrency=concurrency,
        timeout=timeout,
        delay_secs=delay,
        document_pattern=pattern,
        title_selector=title_selector,
        content_selector=content_selector,
        max_links=max_links,
        write_manifest=manifest,
    )

    try:
        controller = ArchiverController(config)
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(2)

    bar = None

    def on_progress(event):
        nonlocal bar
        if event["type"] == "phase" and event["phase"] is RunPhase.FETCHING_INDEX:
            click.echo(f"Fetching index: {base_url}")
        elif event["type"] == "discovery":
            click.echo(f"Found {event['total']} post links")
            bar = click.progressbar(length=event["total"], label="Processing posts")
        elif event["type"] == "link" and bar is not None:
            bar.update(1)

    try:
        report = controller.run(progress=on_progress)
    except FatalPipelineError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)
    finally:
        if bar is not None:
            bar.render_finish()

    click.echo(f"\nPosts found: {report.links_found}")
    click.echo(f"Saved: {report.success_count}")
    click.echo(f"Failed: {report.failure_count}")
    for outcome in report.failed:
        click.echo(f"  {outcome.url}: {outcome.error_type}: {outcome.error}", err=True)

    sys.exit(0)


if __name__ == "__main__":
    main()
