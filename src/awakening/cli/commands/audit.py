"""
Audit command.

Usage:
    awakening audit                                  # Audit the database
    awakening audit --repair                         # Audit and repair the database
    awakening audit --input export.json              # Audit a JSON export
    awakening audit --input export.json --repair --output repaired.json
    awakening audit --input export.json --report findings.json

Exits with status 1 when violations remain (unrepaired, or found without --repair).
"""

import json
from pathlib import Path
from typing import Optional

import click
from loguru import logger

from ...services.audit import AuditReport, AuditService, audit_documents
from ..store import open_store, read_documents, run_async, write_documents


def _summarize(report: AuditReport, repair: bool) -> None:
    click.echo(f"Scanned:          {report.scanned}")
    click.echo(f"With violations:  {len(report.findings)}")
    for code, count in report.violation_counts().items():
        click.echo(f"  {code:<24}{count:>6}")
    if repair:
        click.echo(f"Repaired:         {report.repaired}")
        for finding in report.findings:
            for violation in finding.remaining:
                click.secho(
                    f"  needs manual fix: {finding.resource_id} {violation.code.value} at {violation.path}",
                    fg="yellow",
                )


def _failed(report: AuditReport, repair: bool) -> bool:
    if not repair:
        return not report.clean
    return any(not finding.repaired for finding in report.findings)


@click.command()
@click.option(
    "--input",
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Audit a JSON export instead of the database",
)
@click.option(
    "--output",
    "output_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Where to write repaired documents (defaults to overwriting --input)",
)
@click.option("--repair", is_flag=True, help="Renormalize resources with violations")
@click.option(
    "--report",
    "report_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the findings as JSON",
)
def audit(
    input_file: Optional[Path],
    output_file: Optional[Path],
    repair: bool,
    report_file: Optional[Path],
):
    """Validate every resource and optionally repair what can be derived."""
    if input_file is not None:
        report = _audit_file(input_file, output_file, repair)
    else:
        if output_file is not None:
            raise click.UsageError("--output requires --input")
        report = run_async(_audit_store(repair))

    if report_file is not None:
        report_file.write_text(report.model_dump_json(indent=2) + "\n", encoding="utf-8")
        logger.info(f"Wrote findings to {report_file}")

    _summarize(report, repair)
    if _failed(report, repair):
        raise click.exceptions.Exit(1)


def _audit_file(input_file: Path, output_file: Optional[Path], repair: bool) -> AuditReport:
    from ...settings import settings

    try:
        documents = read_documents(input_file)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{input_file} is not valid JSON: {e}")

    report, repaired = audit_documents(
        documents, repair=repair, max_slug_attempts=settings.processing.max_slug_attempts
    )
    if repair:
        target = output_file or input_file
        write_documents(target, repaired)
        logger.info(f"Wrote {len(repaired)} documents to {target}")
    return report


async def _audit_store(repair: bool) -> AuditReport:
    async with open_store(None) as store:
        return await AuditService(store).run(repair=repair)


def register_command(cli_group):
    """Register the audit command."""
    cli_group.add_command(audit)
