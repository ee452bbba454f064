from .client import MinioClient
from .container import MinioContainer, MinioContainerProvider

__all__ = [
    "MinioClient",
    "MinioContainer",
    "MinioContainerProvider",
]
