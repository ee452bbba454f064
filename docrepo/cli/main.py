#!/usr/bin/env python3
"""
Command line access to a document container.

Lets an operator list, fetch, count and delete the documents stored in one
container without writing any code. Documents are read with LooseDocument,
so every stored field is shown whatever the original document class was.
"""

import asyncio
from typing import Optional

import click

from docrepo.config import ContainerBackend, RepositorySettings
from docrepo.document_repository import DocumentRepository
from docrepo.domain import LooseDocument
from docrepo.logging_config import setup_logging
from docrepo.repos import create_container_provider


def _repository(ctx: click.Context) -> DocumentRepository[LooseDocument]:
    return ctx.obj["repository"]


@click.group()
@click.option(
    "--database-path",
    required=True,
    envvar="DOCREPO_DATABASE_PATH",
    help="Database file (local backend) or bucket (minio backend).",
)
@click.option(
    "--container-name",
    required=True,
    envvar="DOCREPO_CONTAINER_NAME",
    help="Container to operate on.",
)
@click.option(
    "--backend",
    type=click.Choice([b.value for b in ContainerBackend]),
    default=None,
    help="Container backend (defaults to DOCREPO_BACKEND or 'local').",
)
@click.option(
    "--log/--no-log",
    default=None,
    help="Log every repository operation at DEBUG level.",
)
@click.pass_context
def main(
    ctx: click.Context,
    database_path: str,
    container_name: str,
    backend: Optional[str],
    log: Optional[bool],
) -> None:
    """Inspect and manage the documents in a container."""
    settings = RepositorySettings.from_env(backend=backend, log=log)
    setup_logging(debug=settings.log)
    provider = create_container_provider(settings)
    ctx.ensure_object(dict)
    ctx.obj["repository"] = DocumentRepository(
        provider,
        settings,
        LooseDocument,
        database_path=database_path,
        container_name=container_name,
    )


@main.command("list")
@click.pass_context
def list_documents(ctx: click.Context) -> None:
    """Print every document as one JSON line."""
    result = asyncio.run(_repository(ctx).get_all_with_report())
    for document in result.documents:
        click.echo(document.model_dump_json())
    if result.skipped:
        click.echo(
            f"Skipped {result.skipped} unreadable item(s)", err=True
        )


@main.command("get")
@click.argument("document_id")
@click.pass_context
def get_document(ctx: click.Context, document_id: str) -> None:
    """Print one document, pretty-printed."""
    document = asyncio.run(_repository(ctx).get_item(document_id))
    if document is None:
        raise click.ClickException(f"Document not found: {document_id}")
    click.echo(document.model_dump_json(indent=2))


@main.command("count")
@click.pass_context
def count_documents(ctx: click.Context) -> None:
    """Print how many documents the container holds."""

    async def _count() -> int:
        queryable = await _repository(ctx).build_queryable()
        return queryable.count()

    click.echo(str(asyncio.run(_count())))


@main.command("delete")
@click.argument("document_id")
@click.pass_context
def delete_document(ctx: click.Context, document_id: str) -> None:
    """Delete one document. Deleting a missing document is not an error."""
    asyncio.run(_repository(ctx).delete_item(document_id))
    click.echo(f"Deleted {document_id}")


@main.command("delete-all")
@click.option(
    "--yes",
    is_flag=True,
    default=False,
    help="Confirm deleting every document in the container.",
)
@click.pass_context
def delete_all_documents(ctx: click.Context, yes: bool) -> None:
    """Delete every document in the container."""
    repository = _repository(ctx)
    if not yes:
        raise click.UsageError(
            "Refusing to delete all documents in "
            f"'{repository.container_name}' without --yes"
        )
    asyncio.run(repository.delete_all())
    click.echo(f"Deleted all documents in {repository.container_name}")


if __name__ == "__main__":
    main()
