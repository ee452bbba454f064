"""
Protocols for the storage collaborators behind a DocumentRepository.

A *container* is a raw key/value store of JSON strings. A *container
provider* resolves a ``(database_path, container_name)`` pair to a live
container. The DocumentRepository only talks to these two protocols, so any
storage engine can sit behind it: an in-memory dict, a JSON file on disk, a
MinIO bucket.

All operations follow the same principles:

- **Raw strings**: containers never see typed documents. Serialization
  happens in the repository.

- **Key ownership**: the container decides what happens when a key is added
  twice or deleted when absent. Implementations here keep the first value on
  a duplicate add, upsert on update, and treat deletes as idempotent.

- **No atomicity across calls**: each call stands alone. Callers that need
  all-or-nothing semantics must provide them themselves.
"""

from typing import List, Optional, Protocol, Type, TypeVar, runtime_checkable

from pydantic import BaseModel

from .queryable import Queryable

M = TypeVar("M", bound=BaseModel)


@runtime_checkable
class Container(Protocol):
    """Raw string-keyed document storage."""

    def build_queryable(self, model_class: Type[M]) -> Queryable[M]:
        """Build a lazy view over the stored items, typed as model_class.

        Nothing is read until the view is evaluated. Items that do not
        validate as ``model_class`` are left out of the view.
        """
        ...

    async def get_item(self, key: str) -> Optional[str]:
        """Retrieve the stored value for key.

        Returns:
            The JSON string if present, None otherwise
        """
        ...

    async def get_all_items(self) -> List[str]:
        """Retrieve every stored value.

        Order is stable between calls: insertion order for the memory and
        local backends, object-name order for Minio.
        """
        ...

    async def add_item(self, key: str, value: str) -> bool:
        """Store value under key unless the key already exists.

        Returns:
            True if the value was stored, False if the key was taken (the
            existing value is left untouched)
        """
        ...

    async def update_item(self, key: str, value: str) -> bool:
        """Store value under key, replacing any existing value.

        Returns:
            True if an existing value was replaced, False if key was new
        """
        ...

    async def delete_item(self, key: str) -> bool:
        """Remove key. Removing an absent key is not an error.

        Returns:
            True if something was removed
        """
        ...

    async def delete_all_items(self) -> int:
        """Remove every item in the container.

        Returns:
            Number of items removed
        """
        ...


@runtime_checkable
class ContainerProvider(Protocol):
    """Resolves a (database_path, container_name) pair to a Container."""

    async def get_container(
        self, database_path: str, container_name: str
    ) -> Container:
        """Return the container for the given pair.

        Implementation Notes:
        - Must be safe to call repeatedly and concurrently
        - May create the container (and its database) on first use
        - May cache handles; callers must not rely on either behaviour
        """
        ...
