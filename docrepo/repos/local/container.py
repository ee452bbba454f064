"""
Local file-based implementation of Container and ContainerProvider.

A database is a single JSON file holding any number of named containers:

    {"containers": {"<container_name>": {"<id>": "<document json>", ...}}}

The whole file is loaded once per process and kept in memory. Every
mutation is written straight back to disk through a temporary file and
``os.replace`` so a crash never leaves a half-written database behind.
"""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

from docrepo.repos.base import ContainerMixin

logger = logging.getLogger(__name__)


class LocalDatabase:
    """One JSON database file and the containers stored in it."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._containers: Dict[str, Dict[str, str]] = {}
        self._loaded = False
        self.lock = asyncio.Lock()

    async def load(self) -> None:
        """Read the database file if it exists. Safe to call repeatedly."""
        async with self.lock:
            if self._loaded:
                return
            if self.path.exists():
                with open(self.path, "r") as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ValueError(
                        f"Database file is not a JSON object: {self.path}"
                    )
                containers = data.get("containers", {})
                if not isinstance(containers, dict):
                    raise ValueError(
                        f"'containers' must be a mapping in {self.path}"
                    )
                self._containers = {
                    name: dict(items) for name, items in containers.items()
                }
                logger.info(
                    f"Loaded database {self.path} with "
                    f"{len(self._containers)} containers"
                )
            else:
                logger.debug(
                    f"Database file not found, starting empty: {self.path}"
                )
            self._loaded = True

    def items(self, container_name: str) -> Dict[str, str]:
        """Current items of a container. Treat the result as read-only."""
        return self._containers.get(container_name, {})

    def commit(self, container_name: str, items: Dict[str, str]) -> None:
        """Replace a container's items, writing them to disk first.

        The in-memory copy only changes once the file has been written, so
        a failed write leaves the database as it was. Callers must hold
        ``lock``.
        """
        containers = {**self._containers, container_name: items}
        self._persist(containers)
        self._containers = containers

    def _persist(self, containers: Dict[str, Dict[str, str]]) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            os.makedirs(self.path.parent, exist_ok=True)
            with open(tmp_path, "w") as f:
                json.dump({"containers": containers}, f)
            os.replace(tmp_path, self.path)
        except OSError:
            logger.error(
                f"Failed to write database file: {self.path}",
                exc_info=True,
            )
            raise


class LocalContainer(ContainerMixin):
    """A named container inside a LocalDatabase."""

    def __init__(self, database: LocalDatabase, container_name: str) -> None:
        self.logger = logger
        self.database = database
        self.container_name = container_name

    @property
    def _items(self) -> Dict[str, str]:
        return self.database.items(self.container_name)

    def _snapshot(self) -> List[str]:
        return list(self._items.values())

    async def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    async def get_all_items(self) -> List[str]:
        return self._snapshot()

    async def add_item(self, key: str, value: str) -> bool:
        async with self.database.lock:
            if key in self._items:
                self.logger.debug(
                    "LocalContainer: key already exists, add ignored",
                    extra={"container_name": self.container_name, "key": key},
                )
                return False
            self.database.commit(
                self.container_name, {**self._items, key: value}
            )
            return True

    async def update_item(self, key: str, value: str) -> bool:
        async with self.database.lock:
            existed = key in self._items
            self.database.commit(
                self.container_name, {**self._items, key: value}
            )
            return existed

    async def delete_item(self, key: str) -> bool:
        async with self.database.lock:
            if key not in self._items:
                return False
            remaining = {k: v for k, v in self._items.items() if k != key}
            self.database.commit(self.container_name, remaining)
            return True

    async def delete_all_items(self) -> int:
        async with self.database.lock:
            count = len(self._items)
            self.database.commit(self.container_name, {})
        self.logger.info(
            "LocalContainer: all items deleted",
            extra={
                "database_path": str(self.database.path),
                "container_name": self.container_name,
                "count": count,
            },
        )
        return count


class LocalContainerProvider:
    """Resolves containers stored in JSON database files.

    Databases are cached by resolved path, so two repositories pointing at
    the same file share one in-memory copy and one write lock.
    """

    def __init__(self) -> None:
        self._databases: Dict[Path, LocalDatabase] = {}
        self._lock = asyncio.Lock()

    async def get_container(
        self, database_path: str, container_name: str
    ) -> LocalContainer:
        path = Path(database_path).expanduser().resolve()
        async with self._lock:
            database = self._databases.get(path)
            if database is None:
                logger.debug(
                    "Opening local database",
                    extra={"database_path": str(path)},
                )
                database = LocalDatabase(path)
                self._databases[path] = database
        await database.load()
        return LocalContainer(database, container_name)
