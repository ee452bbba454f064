"""
Factory function for creating ContainerProvider implementations.
"""

import logging

from minio import Minio

from docrepo.config import ContainerBackend, RepositorySettings
from docrepo.exceptions import ContainerProviderError
from docrepo.repositories import ContainerProvider
from .local import LocalContainerProvider
from .memory import MemoryContainerProvider
from .minio import MinioContainerProvider

logger = logging.getLogger(__name__)


def create_container_provider(
    settings: RepositorySettings,
) -> ContainerProvider:
    """Create the ContainerProvider selected by ``settings.backend``.

    Args:
        settings: Repository settings naming the backend and, for Minio,
            how to reach the server

    Returns:
        A ContainerProvider ready to resolve containers

    Raises:
        ContainerProviderError: If the backend is not supported

    Example:
        >>> settings = RepositorySettings(backend="memory")
        >>> provider = create_container_provider(settings)
        >>> container = await provider.get_container("db", "widgets")
    """
    logger.debug(
        "Creating ContainerProvider via factory",
        extra={"backend": settings.backend},
    )

    if settings.backend == ContainerBackend.MEMORY:
        return MemoryContainerProvider()

    if settings.backend == ContainerBackend.LOCAL:
        return LocalContainerProvider()

    if settings.backend == ContainerBackend.MINIO:
        client = Minio(
            settings.minio_endpoint,
            access_key=settings.minio_access_key,
            secret_key=settings.minio_secret_key,
            secure=settings.minio_secure,
        )
        return MinioContainerProvider(client)

    raise ContainerProviderError(
        f"Unsupported container backend: {settings.backend}"
    )
