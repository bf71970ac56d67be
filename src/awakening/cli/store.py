"""
Store selection for CLI commands.

Commands run against PostgreSQL when POSTGRES__ENABLED is set. Passing
--data FILE instead loads a JSON export into an in-memory store, and writes
it back after commands that change resources.
"""

import asyncio
import json
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Optional

import click
from loguru import logger
from pydantic import ValidationError

from ..errors import ResourceError
from ..normalization import prepare
from ..serialization import from_legacy_document, to_public_document
from ..services.postgres import get_postgres_service
from ..services.repositories import InMemoryResourceStore, PostgresResourceStore, ResourceStore

data_option = click.option(
    "--data",
    "data_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Work on a JSON export instead of the database",
)


def read_documents(path: Path) -> list[Any]:
    documents = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(documents, list):
        raise click.ClickException(f"{path} must contain a JSON array of resources")
    return documents


def write_documents(path: Path, documents: list[dict[str, Any]]) -> None:
    path.write_text(json.dumps(documents, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


async def load_documents(store: InMemoryResourceStore, documents: list[Any]) -> int:
    """Load exported documents into an in-memory store, keeping ids and slugs."""
    loaded = 0
    for doc in documents:
        resource = prepare(from_legacy_document(doc).data).resource
        await store.create(resource)
        loaded += 1
    logger.debug(f"Loaded {loaded} resources into memory")
    return loaded


async def dump_documents(store: ResourceStore) -> list[dict[str, Any]]:
    resources = await store.query({}, order_by="title ASC, id ASC")
    return [to_public_document(resource) for resource in resources]


@asynccontextmanager
async def open_store(data_file: Optional[Path], writable: bool = False) -> AsyncIterator[ResourceStore]:
    """
    Yield the store a command should use.

    Raises:
        click.ClickException: no --data file and PostgreSQL is disabled
    """
    if data_file is not None:
        store = InMemoryResourceStore()
        try:
            await load_documents(store, read_documents(data_file))
        except (ResourceError, ValidationError) as e:
            raise click.ClickException(f"Cannot load {data_file}: {e} (run `awakening audit --repair` first)")
        yield store
        if writable:
            write_documents(data_file, await dump_documents(store))
            logger.info(f"Wrote {data_file}")
        return

    db = get_postgres_service()
    if db is None:
        raise click.ClickException(
            "PostgreSQL is disabled (set POSTGRES__ENABLED=true) and no --data file was given"
        )
    await db.connect()
    try:
        yield PostgresResourceStore(db)
    finally:
        await db.disconnect()


def run_async(coro: Any) -> Any:
    """Run a command coroutine; resource errors are logged and exit with status 1."""
    try:
        return asyncio.run(coro)
    except ResourceError as e:
        logger.error(str(e))
        raise click.exceptions.Exit(1) from e
