"""
Minio implementation of Container and ContainerProvider.

The database path names a bucket and the container name is an object
prefix inside it. Each document is stored as the JSON object
``<container_name>/<id>.json``. Buckets are created the first time a
container in them is requested.
"""

import io
import logging
from typing import Dict, List, Optional, Set, Tuple

from minio.error import S3Error

from docrepo.repos.base import ContainerMixin
from .client import MinioClient

logger = logging.getLogger(__name__)

_OBJECT_SUFFIX = ".json"


def _is_missing(e: S3Error) -> bool:
    return getattr(e, "code", None) in ("NoSuchKey", "NoSuchObject")


class MinioContainer(ContainerMixin):
    """Container storing one JSON object per document in a Minio bucket."""

    def __init__(
        self, client: MinioClient, bucket_name: str, container_name: str
    ) -> None:
        self.logger = logger
        self.client = client
        self.bucket_name = bucket_name
        self.container_name = container_name
        self.prefix = f"{container_name}/"

    def _object_name(self, key: str) -> str:
        return f"{self.prefix}{key}{_OBJECT_SUFFIX}"

    def _read(self, object_name: str) -> Optional[str]:
        try:
            response = self.client.get_object(
                bucket_name=self.bucket_name, object_name=object_name
            )
            try:
                data = response.read()
            finally:
                response.close()
                response.release_conn()
        except S3Error as e:
            if _is_missing(e):
                self.logger.debug(
                    "MinioContainer: object not found (NoSuchKey)",
                    extra={
                        "bucket": self.bucket_name,
                        "object_name": object_name,
                    },
                )
                return None
            self.logger.error(
                "MinioContainer: error retrieving object",
                extra={
                    "bucket": self.bucket_name,
                    "object_name": object_name,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
                exc_info=True,
            )
            raise
        return data.decode("utf-8")

    def _exists(self, object_name: str) -> bool:
        try:
            self.client.stat_object(
                bucket_name=self.bucket_name, object_name=object_name
            )
            return True
        except S3Error as e:
            if _is_missing(e):
                return False
            raise

    def _write(self, key: str, value: str) -> None:
        payload = value.encode("utf-8")
        object_name = self._object_name(key)
        try:
            self.client.put_object(
                bucket_name=self.bucket_name,
                object_name=object_name,
                data=io.BytesIO(payload),
                length=len(payload),
                content_type="application/json",
            )
        except S3Error as e:
            self.logger.error(
                "MinioContainer: failed to store object",
                extra={
                    "bucket": self.bucket_name,
                    "object_name": object_name,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
                exc_info=True,
            )
            raise
        self.logger.debug(
            "MinioContainer: object stored",
            extra={
                "bucket": self.bucket_name,
                "object_name": object_name,
                "payload_size_bytes": len(payload),
            },
        )

    def _object_names(self) -> List[str]:
        objects = self.client.list_objects(
            bucket_name=self.bucket_name, prefix=self.prefix, recursive=True
        )
        return [
            obj.object_name
            for obj in objects
            if obj.object_name and obj.object_name.endswith(_OBJECT_SUFFIX)
        ]

    def _snapshot(self) -> List[str]:
        values = []
        for object_name in self._object_names():
            value = self._read(object_name)
            # Removed between listing and reading
            if value is not None:
                values.append(value)
        return values

    async def get_item(self, key: str) -> Optional[str]:
        return self._read(self._object_name(key))

    async def get_all_items(self) -> List[str]:
        return self._snapshot()

    async def add_item(self, key: str, value: str) -> bool:
        if self._exists(self._object_name(key)):
            self.logger.debug(
                "MinioContainer: key already exists, add ignored",
                extra={"container_name": self.container_name, "key": key},
            )
            return False
        self._write(key, value)
        return True

    async def update_item(self, key: str, value: str) -> bool:
        existed = self._exists(self._object_name(key))
        self._write(key, value)
        return existed

    async def delete_item(self, key: str) -> bool:
        object_name = self._object_name(key)
        if not self._exists(object_name):
            return False
        self.client.remove_object(
            bucket_name=self.bucket_name, object_name=object_name
        )
        return True

    async def delete_all_items(self) -> int:
        object_names = self._object_names()
        for object_name in object_names:
            self.client.remove_object(
                bucket_name=self.bucket_name, object_name=object_name
            )
        self.logger.info(
            "MinioContainer: all items deleted",
            extra={
                "bucket": self.bucket_name,
                "container_name": self.container_name,
                "count": len(object_names),
            },
        )
        return len(object_names)


class MinioContainerProvider:
    """Resolves containers backed by a Minio server."""

    def __init__(self, client: MinioClient) -> None:
        """Initialize provider with Minio client.

        Args:
            client: MinioClient protocol implementation (real or fake)
        """
        self.client = client
        self._ready_buckets: Set[str] = set()
        self._containers: Dict[Tuple[str, str], MinioContainer] = {}

    def _ensure_bucket_exists(self, bucket_name: str) -> None:
        if bucket_name in self._ready_buckets:
            return
        try:
            if not self.client.bucket_exists(bucket_name=bucket_name):
                logger.info(
                    "Creating Minio bucket",
                    extra={"bucket_name": bucket_name},
                )
                self.client.make_bucket(bucket_name=bucket_name)
            else:
                logger.debug(
                    "Minio bucket already exists",
                    extra={"bucket_name": bucket_name},
                )
        except S3Error as e:
            logger.error(
                "Failed to create Minio bucket",
                extra={"bucket_name": bucket_name, "error": str(e)},
            )
            raise
        self._ready_buckets.add(bucket_name)

    async def get_container(
        self, database_path: str, container_name: str
    ) -> MinioContainer:
        # Listing is recursive, so a nested name would overlap its parent
        if not container_name or "/" in container_name:
            raise ValueError(
                f"Invalid Minio container name: {container_name!r}"
            )
        key = (database_path, container_name)
        container = self._containers.get(key)
        if container is None:
            self._ensure_bucket_exists(database_path)
            container = MinioContainer(
                self.client, database_path, container_name
            )
            self._containers[key] = container
        return container
