"""
Typed CRUD repository over a single container.

DocumentRepository is generic over the document class it manages. It owns
nothing but the (database_path, container_name) pair that identifies its
container and a reference to the settings; every call resolves the
container through the provider, converts between documents and JSON, and
forwards to the container's raw string operations.

Batch writes (``add_items``, ``update_items``) are best-effort and
sequential, not transactional: items are written one at a time in input
order, and a failure part way through leaves the earlier items stored.
"""

import logging
from typing import ClassVar, Generic, List, Optional, Type

from .config import RepositorySettings
from .domain import BulkReadResult, IdNamePair, TDocument
from .exceptions import SerializationError
from .queryable import Queryable, T
from .repositories import Container, ContainerProvider
from .serialization import deserialize, serialize, try_deserialize

logger = logging.getLogger(__name__)


class DocumentRepository(Generic[TDocument]):
    """Typed CRUD façade over one container.

    The container is located by ``database_path`` and ``container_name``.
    Both can be passed to the constructor or set as class attributes by a
    subclass dedicated to one kind of document:

        class WidgetRepository(DocumentRepository[Widget]):
            document_class = Widget
            database_path = "data/app.json"
            container_name = "widgets"

    Args:
        provider: Resolves the container for every operation
        settings: Repository settings; ``settings.log`` turns on DEBUG
            logging of every operation
        document_class: Document model to deserialize into
        database_path: Storage location of the container's database
        container_name: Name of the container within the database

    Raises:
        ValueError: If the document class or either half of the container
            address is missing
    """

    document_class: ClassVar[Optional[Type]] = None
    database_path: Optional[str] = None
    container_name: Optional[str] = None

    def __init__(
        self,
        provider: ContainerProvider,
        settings: Optional[RepositorySettings] = None,
        document_class: Optional[Type[TDocument]] = None,
        database_path: Optional[str] = None,
        container_name: Optional[str] = None,
    ) -> None:
        self.provider = provider
        self.settings = settings or RepositorySettings()
        self.logger = logger

        model = document_class or type(self).document_class
        if model is None:
            raise ValueError(f"{type(self).__name__} needs a document_class")
        self.model: Type[TDocument] = model

        if database_path is not None:
            self.database_path = database_path
        if container_name is not None:
            self.container_name = container_name
        if not self.database_path or not self.container_name:
            raise ValueError(
                f"{type(self).__name__} needs both database_path and "
                "container_name"
            )

    @property
    def _log(self) -> bool:
        return self.settings.log

    @property
    def _type_name(self) -> str:
        return self.model.__name__

    async def _get_container(self) -> Container:
        assert self.database_path is not None  # For MyPy
        assert self.container_name is not None  # For MyPy
        return await self.provider.get_container(
            self.database_path, self.container_name
        )

    def _serialize(self, document: TDocument) -> str:
        serialized = serialize(document)
        if not serialized:
            raise SerializationError(
                f"Failed to serialize {self._type_name} {document.id}"
            )
        return serialized

    def _log_write(self, operation: str, document: TDocument) -> None:
        if self._log:
            self.logger.debug(
                f"DocumentRepository: {operation} ({self._type_name}): "
                f"{serialize(document, pretty=True)}",
                extra={
                    "operation": operation,
                    "document_type": self._type_name,
                    "document_id": document.id,
                },
            )

    def _log_operation(self, operation: str, **extra: object) -> None:
        if self._log:
            self.logger.debug(
                f"DocumentRepository: {operation} ({self._type_name})",
                extra={
                    "operation": operation,
                    "document_type": self._type_name,
                    **extra,
                },
            )

    async def build_queryable(
        self, model_class: Optional[Type[T]] = None
    ) -> Queryable[T]:
        """Build a lazy query view over the container's items.

        Args:
            model_class: Model to read items as; defaults to the
                repository's document class

        Returns:
            A Queryable that reads the container only when evaluated
        """
        container = await self._get_container()
        return container.build_queryable(model_class or self.model)

    def get_items(self, queryable: Queryable[T]) -> List[T]:
        """Materialize a queryable previously built by build_queryable."""
        self._log_operation("get_items")
        return queryable.to_list()

    async def get_item(self, id: str) -> Optional[TDocument]:
        """Retrieve a document by id.

        Returns:
            The document if found, None otherwise

        Raises:
            DeserializationError: If the stored JSON is not a valid document
        """
        self._log_operation("get_item", document_id=id)

        container = await self._get_container()
        item = await container.get_item(id)
        if item is None:
            return None

        return deserialize(item, self.model)

    async def get_item_by_id_name_pair(
        self, id_name_pair: IdNamePair
    ) -> Optional[TDocument]:
        return await self.get_item(id_name_pair.id)

    async def get_all_with_report(self) -> BulkReadResult[TDocument]:
        """Retrieve every document and report how many could not be read.

        Items that fail to deserialize are skipped, logged at WARNING and
        counted in ``skipped``.
        """
        self._log_operation("get_all")

        container = await self._get_container()
        items = await container.get_all_items()

        documents: List[TDocument] = []
        skipped = 0
        for item in items:
            document = try_deserialize(item, self.model)
            if document is None:
                skipped += 1
                continue
            documents.append(document)

        if skipped:
            self.logger.warning(
                f"DocumentRepository: skipped {skipped} of {len(items)} "
                f"{self._type_name} items that failed to deserialize",
                extra={
                    "document_type": self._type_name,
                    "container_name": self.container_name,
                    "skipped": skipped,
                    "total": len(items),
                },
            )

        return BulkReadResult(
            documents=documents, skipped=skipped, total=len(items)
        )

    async def get_all(self) -> Optional[List[TDocument]]:
        """Retrieve every document in the container.

        Returns:
            The documents that deserialized successfully, or None if the
            container holds no items at all
        """
        result = await self.get_all_with_report()
        if result.total == 0:
            return None
        return result.documents

    async def add_item(self, document: TDocument) -> str:
        """Add a document; the container decides what a duplicate id means.

        Returns:
            The document's id

        Raises:
            SerializationError: If the document cannot be serialized
        """
        self._log_write("add_item", document)

        container = await self._get_container()
        serialized = self._serialize(document)
        await container.add_item(document.id, serialized)

        return document.id

    async def add_items(self, documents: List[TDocument]) -> List[TDocument]:
        """Add documents one by one, in order.

        Not transactional: if a document fails to serialize, the ones
        before it are already stored and the ones after it are not tried.

        Returns:
            The input list
        """
        self._log_operation("add_items", count=len(documents))

        container = await self._get_container()
        for document in documents:
            serialized = self._serialize(document)
            await container.add_item(document.id, serialized)

        return documents

    async def update_item(self, document: TDocument) -> str:
        """Store a new version of a document.

        Returns:
            The document's id

        Raises:
            SerializationError: If the document cannot be serialized
        """
        self._log_write("update_item", document)

        container = await self._get_container()
        serialized = self._serialize(document)
        await container.update_item(document.id, serialized)

        return document.id

    async def update_items(
        self, documents: List[TDocument]
    ) -> List[TDocument]:
        """Update documents one by one, in order. Same rules as add_items."""
        self._log_operation("update_items", count=len(documents))

        container = await self._get_container()
        for document in documents:
            serialized = self._serialize(document)
            await container.update_item(document.id, serialized)

        return documents

    async def delete_item(self, id: str) -> None:
        self._log_operation("delete_item", document_id=id)

        container = await self._get_container()
        await container.delete_item(id)

    async def delete_all(self) -> None:
        """Delete every document in the container. Irreversible."""
        self.logger.warning(
            f"DocumentRepository: delete_all ({self._type_name})",
            extra={
                "document_type": self._type_name,
                "database_path": self.database_path,
                "container_name": self.container_name,
            },
        )

        container = await self._get_container()
        await container.delete_all_items()
