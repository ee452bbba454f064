"""
Memory implementation of Container and ContainerProvider.

Values live in Python dictionaries, which makes this backend ideal for
tests and for short-lived processes where nothing needs to survive a
restart. All operations are still async to keep the interface identical to
the persistent backends.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Tuple

from docrepo.repos.base import ContainerMixin

logger = logging.getLogger(__name__)


class MemoryContainer(ContainerMixin):
    """Container storing JSON strings in a dict keyed by document id."""

    def __init__(self, container_name: str) -> None:
        self.logger = logger
        self.container_name = container_name
        self.storage_dict: Dict[str, str] = {}

    def _snapshot(self) -> List[str]:
        return list(self.storage_dict.values())

    async def get_item(self, key: str) -> Optional[str]:
        return self.storage_dict.get(key)

    async def get_all_items(self) -> List[str]:
        return self._snapshot()

    async def add_item(self, key: str, value: str) -> bool:
        if key in self.storage_dict:
            self.logger.debug(
                "MemoryContainer: key already exists, add ignored",
                extra={"container_name": self.container_name, "key": key},
            )
            return False
        self.storage_dict[key] = value
        return True

    async def update_item(self, key: str, value: str) -> bool:
        existed = key in self.storage_dict
        self.storage_dict[key] = value
        return existed

    async def delete_item(self, key: str) -> bool:
        return self.storage_dict.pop(key, None) is not None

    async def delete_all_items(self) -> int:
        count = len(self.storage_dict)
        self.storage_dict.clear()
        self.logger.info(
            "MemoryContainer: all items deleted",
            extra={"container_name": self.container_name, "count": count},
        )
        return count


class MemoryContainerProvider:
    """Hands out one MemoryContainer per (database_path, container_name)."""

    def __init__(self) -> None:
        self._containers: Dict[Tuple[str, str], MemoryContainer] = {}
        self._lock = asyncio.Lock()
        logger.debug("Initializing MemoryContainerProvider")

    async def get_container(
        self, database_path: str, container_name: str
    ) -> MemoryContainer:
        key = (database_path, container_name)
        async with self._lock:
            container = self._containers.get(key)
            if container is None:
                logger.debug(
                    "Creating memory container",
                    extra={
                        "database_path": database_path,
                        "container_name": container_name,
                    },
                )
                container = MemoryContainer(container_name)
                self._containers[key] = container
            return container
