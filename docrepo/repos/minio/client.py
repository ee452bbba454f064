"""
MinioClient protocol definition.

This module defines the protocol interface that both the real Minio client
and the fake test client must implement, so the container depends on an
abstraction rather than on minio.Minio directly.
"""

from typing import Any, Dict, Iterator, Optional, Protocol, runtime_checkable

from minio.datatypes import Object
from urllib3.response import HTTPResponse


@runtime_checkable
class MinioClient(Protocol):
    """
    Protocol defining the MinIO client interface used by the containers.

    Only the methods actually called are listed. Both minio.Minio and the
    FakeMinioClient used in tests satisfy it.
    """

    def bucket_exists(self, bucket_name: str) -> bool:
        """Check if a bucket exists."""
        ...

    def make_bucket(self, bucket_name: str) -> None:
        """Create a bucket.

        Raises:
            S3Error: If bucket creation fails
        """
        ...

    def put_object(
        self,
        bucket_name: str,
        object_name: str,
        data: Any,
        length: int,
        content_type: str = "application/octet-stream",
        metadata: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Store an object in the bucket.

        Raises:
            S3Error: If object storage fails
        """
        ...

    def get_object(
        self, bucket_name: str, object_name: str
    ) -> HTTPResponse:
        """Retrieve an object from the bucket.

        Raises:
            S3Error: If object retrieval fails (e.g., NoSuchKey)
        """
        ...

    def stat_object(self, bucket_name: str, object_name: str) -> Object:
        """Get object metadata without retrieving the object data.

        Raises:
            S3Error: If object doesn't exist (NoSuchKey) or other errors
        """
        ...

    def list_objects(
        self,
        bucket_name: str,
        prefix: Optional[str] = None,
        recursive: bool = False,
    ) -> Iterator[Object]:
        """List objects in a bucket, optionally under a prefix."""
        ...

    def remove_object(self, bucket_name: str, object_name: str) -> None:
        """Remove an object. Removing a missing object is not an error."""
        ...
