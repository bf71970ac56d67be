"""
Database management commands.

Usage:
    awakening db init                 # Create the resources table and indexes
    awakening db init --table staging_resources
"""

import click
from loguru import logger

from ..store import run_async


@click.command()
@click.option("--table", default=None, help="Table name (defaults to POSTGRES__TABLE_NAME)")
def init(table: str | None):
    """Create the resources table, unique slug index and query indexes."""
    run_async(_init_async(table))


async def _init_async(table: str | None):
    from ...services.postgres import get_postgres_service
    from ...settings import settings

    db = get_postgres_service()
    if not db:
        click.secho("Error: PostgreSQL is disabled in settings.", fg="red")
        raise click.Abort()

    await db.connect()
    try:
        table_name = table or settings.postgres.table_name
        await db.init_schema(table_name)
        logger.info(f"Initialized table {table_name}")
        click.secho(f"✓ Schema ready: {table_name}", fg="green")
    finally:
        await db.disconnect()


def register_commands(db_group):
    """Register all db commands."""
    db_group.add_command(init)
