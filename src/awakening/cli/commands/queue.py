"""
Moderation queue commands.

Usage:
    awakening queue next [--kind book]
    awakening queue progress [--kind book]
    awakening queue process <id> [--image-url URL] [--isbn ISBN] [--link URL ...] [--notes TEXT]
    awakening queue skip <id> [--notes TEXT]
    awakening queue requeue <id>

Every command accepts --data FILE to work on a JSON export instead of the
database.
"""

from pathlib import Path
from typing import Optional

import click

from ...models.entities import Resource, ResourceKind
from ...registry import describe
from ...services.processing import ProcessingService, ProgressCounts
from ...services.resources import EnrichmentData
from ...validation import missing_required_fields
from ..store import data_option, open_store, run_async

kind_option = click.option(
    "--kind",
    type=click.Choice([kind.value for kind in ResourceKind]),
    default=None,
    help="Limit to one resource kind",
)


def _show(resource: Resource) -> None:
    spec = describe(resource.kind)
    click.echo(f"{resource.title}  [{resource.kind.value}]")
    click.echo(f"  id:      {resource.id}")
    click.echo(f"  slug:    {resource.slug}")
    click.echo(f"  status:  {resource.status.value}")
    if resource.creator:
        label = spec.creator_label_plural if len(resource.creator) > 1 else spec.creator_label
        click.echo(f"  {label.lower()}: {', '.join(resource.creator)}")
    for link in getattr(resource.detail, spec.link_field):
        click.echo(f"  link:    {link.label} {link.url}")
    missing = missing_required_fields(resource)
    if missing:
        click.secho(f"  missing: {', '.join(missing)}", fg="yellow")


def _counts_row(name: str, counts: ProgressCounts) -> str:
    return (
        f"{name:<16}{counts.total:>7}{counts.processed:>11}{counts.skipped:>9}"
        f"{counts.remaining:>11}{counts.completion:>8.0%}"
    )


@click.command(name="next")
@kind_option
@data_option
def next_command(kind: Optional[str], data_file: Optional[Path]):
    """Show the next pending resource (by title)."""
    run_async(_next_async(kind, data_file))


async def _next_async(kind: Optional[str], data_file: Optional[Path]):
    async with open_store(data_file) as store:
        resource = await ProcessingService(store).next_pending(kind)
    if resource is None:
        click.secho("Queue is empty", fg="green")
        return
    _show(resource)


@click.command()
@kind_option
@data_option
def progress(kind: Optional[str], data_file: Optional[Path]):
    """Show processed/skipped/remaining counts per kind."""
    run_async(_progress_async(kind, data_file))


async def _progress_async(kind: Optional[str], data_file: Optional[Path]):
    async with open_store(data_file) as store:
        report = await ProcessingService(store).progress(kind)

    click.echo(f"{'kind':<16}{'total':>7}{'processed':>11}{'skipped':>9}{'remaining':>11}{'done':>8}")
    click.echo("-" * 62)
    for resource_kind, counts in report.by_kind.items():
        click.echo(_counts_row(resource_kind.value, counts))
    click.echo("-" * 62)
    click.echo(_counts_row("overall", report.overall))


@click.command()
@click.argument("resource_id")
@click.option("--image-url", default=None, help="Cover/logo image to store")
@click.option("--isbn", default=None, help="ISBN (books only)")
@click.option("--link", "links", multiple=True, help="Additional link URL (repeatable)")
@click.option("--notes", default=None, help="Processing notes")
@data_option
def process(
    resource_id: str,
    image_url: Optional[str],
    isbn: Optional[str],
    links: tuple[str, ...],
    notes: Optional[str],
    data_file: Optional[Path],
):
    """Mark a pending resource processed, applying enrichment in the same write."""
    enrichment = EnrichmentData(image_url=image_url, isbn=isbn, links=list(links))
    run_async(_process_async(resource_id, enrichment, notes, data_file))


async def _process_async(
    resource_id: str,
    enrichment: EnrichmentData,
    notes: Optional[str],
    data_file: Optional[Path],
):
    async with open_store(data_file, writable=True) as store:
        resource = await ProcessingService(store).mark_processed(resource_id, enrichment, notes)
    click.secho(f"✓ Processed {resource.title} ({resource.slug})", fg="green")


@click.command()
@click.argument("resource_id")
@click.option("--notes", default=None, help="Why the resource was skipped")
@data_option
def skip(resource_id: str, notes: Optional[str], data_file: Optional[Path]):
    """Skip a pending resource."""
    run_async(_skip_async(resource_id, notes, data_file))


async def _skip_async(resource_id: str, notes: Optional[str], data_file: Optional[Path]):
    async with open_store(data_file, writable=True) as store:
        resource = await ProcessingService(store).skip(resource_id, notes)
    click.secho(f"✓ Skipped {resource.title} ({resource.slug})", fg="yellow")


@click.command()
@click.argument("resource_id")
@data_option
def requeue(resource_id: str, data_file: Optional[Path]):
    """Send a processed or skipped resource back to the queue."""
    run_async(_requeue_async(resource_id, data_file))


async def _requeue_async(resource_id: str, data_file: Optional[Path]):
    async with open_store(data_file, writable=True) as store:
        resource = await ProcessingService(store).requeue(resource_id)
    click.secho(f"✓ Re-queued {resource.title} ({resource.slug})", fg="green")


def register_commands(queue_group):
    """Register all queue commands."""
    queue_group.add_command(next_command)
    queue_group.add_command(progress)
    queue_group.add_command(process)
    queue_group.add_command(skip)
    queue_group.add_command(requeue)
