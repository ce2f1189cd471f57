"""Command line interface for the hosting SEO content bot."""

import asyncio
import logging
import sys

import click

logger = logging.getLogger(__name__)


def _load_settings(ctx: click.Context):
    from hostseo.models.settings import Settings

    return Settings(debug=ctx.obj.get("debug", False))


def _repository(settings, dry_run: bool):
    """WordPress for real runs, process memory for dry runs."""
    if dry_run:
        from hostseo.core.repository import InMemoryRepository

        return InMemoryRepository()

    from hostseo.clients.wordpress import WordPressRepository

    if not settings.wordpress_configured:
        return None
    return WordPressRepository.from_settings(settings)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug mode")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Hosting SEO content bot CLI.

    Plans hosting topics, writes articles with OpenAI, skips anything too
    close to existing posts and publishes the rest with SEO metadata.
    """
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    # Set up logging before any other logging calls
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(level=log_level, force=True)
    logger.debug("Debug mode enabled")


@cli.command()
@click.option("--max", "max_items", default=3, show_default=True, type=int,
              help="Maximum number of articles to publish")
@click.option("--dry-run", is_flag=True, help="Generate without publishing to WordPress")
@click.pass_context
def run(ctx: click.Context, max_items: int, dry_run: bool) -> None:
    """Run the publication pipeline once."""
    from hostseo.core.pipeline import PublicationPipeline

    settings = _load_settings(ctx)
    repository = _repository(settings, dry_run)
    if repository is None:
        click.echo("❌ WordPress is not configured (WORDPRESS_URL, WORDPRESS_USER, "
                   "WORDPRESS_APP_PASSWORD). Use --dry-run to test without it.")
        sys.exit(1)

    if dry_run:
        logger.info("🔍 DRY RUN MODE - articles are kept in memory only")

    async def _run():
        try:
            return await PublicationPipeline(settings, repository).run(max_items)
        finally:
            await repository.close()

    result = asyncio.run(_run())
    click.echo(result.message)
    for reason in result.skipped:
        click.echo(f"  skipped - {reason}")


@cli.command()
@click.option("--limit", default=10, show_default=True, type=int,
              help="Maximum number of topics")
@click.pass_context
def topics(ctx: click.Context, limit: int) -> None:
    """Show the topics the next run would write about."""
    from hostseo.core.topics import plan_topics

    settings = _load_settings(ctx)
    for i, topic in enumerate(plan_topics(settings, limit), 1):
        click.echo(f"{i}. {topic}")


@cli.command()
@click.pass_context
def headlines(ctx: click.Context) -> None:
    """Fetch and show recent competitor headlines."""
    from hostseo.clients.rss import RSSClient

    settings = _load_settings(ctx)
    client = RSSClient(settings)
    titles = asyncio.run(client.fetch_headlines(settings.competitor_feed_urls))
    if not titles:
        click.echo("No competitor headlines available")
        return
    for title in titles:
        click.echo(f"- {title}")


@cli.command("check-duplicate")
@click.argument("title")
@click.option("--body", default="", help="Candidate body text")
@click.pass_context
def check_duplicate(ctx: click.Context, title: str, body: str) -> None:
    """Score a candidate title against existing WordPress posts."""
    from hostseo.core.duplicates import DuplicateDetector

    settings = _load_settings(ctx)
    repository = _repository(settings, dry_run=False)
    if repository is None:
        click.echo("❌ WordPress is not configured")
        sys.exit(1)

    async def _check():
        try:
            return await repository.list_items(settings.duplicate_scan_limit)
        finally:
            await repository.close()

    existing = asyncio.run(_check())
    verdict = DuplicateDetector(settings.duplicate_threshold).check(title, body, existing)
    if verdict.is_duplicate:
        click.echo(
            f"DUPLICATE of #{verdict.matched_item_id} {verdict.matched_title!r} "
            f"({verdict.reason} similarity {verdict.score:.1f}%)"
        )
    else:
        click.echo(f"Unique against {verdict.items_scanned} existing item(s)")


@cli.command()
@click.pass_context
def health(ctx: click.Context) -> None:
    """Check connections to OpenAI, WordPress and competitor feeds."""
    from hostseo.clients.openai import OpenAIClient
    from hostseo.clients.rss import RSSClient

    settings = _load_settings(ctx)

    async def _health():
        results = {
            "openai": await OpenAIClient(
                settings.openai_api_key, settings=settings
            ).test_connection()
        }
        repository = _repository(settings, dry_run=False)
        if repository is None:
            results["wordpress"] = False
        else:
            try:
                results["wordpress"] = await repository.test_connection()
            finally:
                await repository.close()
        feeds = await RSSClient(settings).test_feeds(settings.competitor_feed_urls)
        results["competitor_feeds"] = any(feeds.values()) if feeds else False
        return results, feeds

    results, feeds = asyncio.run(_health())
    for service, ok in results.items():
        click.echo(f"  {service}: {'✅' if ok else '❌'}")
    for url, ok in feeds.items():
        click.echo(f"    {url}: {'✅' if ok else '❌'}")

    if not (results["openai"] and results["wordpress"]):
        sys.exit(1)


@cli.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Display current configuration (without sensitive values)."""
    settings = _load_settings(ctx)

    click.echo("\n📋 Hosting SEO Bot Configuration\n")
    click.echo(f"Brand: {settings.brand}")
    click.echo(f"Schedule: {settings.schedule}")
    click.echo(f"Post status: {settings.post_status}")
    click.echo(f"Category: {settings.category_id or '-'}")
    click.echo(f"Minimum words: {settings.min_words}")
    click.echo(f"Duplicate threshold: {settings.duplicate_threshold}%")

    click.echo("\n🔑 Credentials:")
    click.echo(f"  OpenAI: {'✅ Configured' if settings.openai_api_key else '❌ Missing'}")
    click.echo(
        f"  WordPress: {'✅ Configured' if settings.wordpress_configured else '❌ Missing'}"
    )

    click.echo("\n📡 Competitor feeds:")
    for i, url in enumerate(settings.competitor_feed_urls, 1):
        click.echo(f"  {i}. {url}")


if __name__ == "__main__":
    cli()
