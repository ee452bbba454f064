"""
docrepo: a typed document repository over pluggable key/value containers.

Typical use:

    settings = RepositorySettings.from_env()
    provider = create_container_provider(settings)
    repo = DocumentRepository(
        provider, settings, Widget, "data/app.json", "widgets"
    )
    await repo.add_item(Widget(name="sprocket"))
"""

from .config import ContainerBackend, RepositorySettings
from .document_repository import DocumentRepository
from .domain import BulkReadResult, Document, IdNamePair, LooseDocument
from .exceptions import (
    ContainerProviderError,
    DeserializationError,
    DocumentRepositoryError,
    SerializationError,
)
from .queryable import Queryable
from .repos import create_container_provider
from .repositories import Container, ContainerProvider

__all__ = [
    "BulkReadResult",
    "Container",
    "ContainerBackend",
    "ContainerProvider",
    "ContainerProviderError",
    "DeserializationError",
    "Document",
    "DocumentRepository",
    "DocumentRepositoryError",
    "IdNamePair",
    "LooseDocument",
    "Queryable",
    "RepositorySettings",
    "SerializationError",
    "create_container_provider",
]
