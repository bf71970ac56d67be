"""
Awakening directory CLI entry point.

Usage:
    awakening db init
    awakening queue next --kind podcast
    awakening queue progress
    awakening queue process <id> --link https://example.com
    awakening queue skip <id> --notes "Duplicate of another entry"
    awakening queue requeue <id>
    awakening audit --input export.json --repair --output repaired.json
"""

import sys

import click
from loguru import logger

from ..settings import settings


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool):
    """Awakening directory - resource moderation and maintenance CLI."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else settings.log_level.upper())


@cli.group()
def db():
    """Database operations."""
    pass


@cli.group()
def queue():
    """Moderation queue: navigate, process, skip and re-queue resources."""
    pass


# Register commands
from .commands.audit import register_command as register_audit_command
from .commands.db import register_commands as register_db_commands
from .commands.queue import register_commands as register_queue_commands

register_db_commands(db)
register_queue_commands(queue)
register_audit_command(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
