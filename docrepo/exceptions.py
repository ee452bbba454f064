"""
Exceptions raised by the document repository layer.

Failures from a container backend (``OSError``, ``S3Error`` and so on) are
not wrapped; they reach the caller unchanged.
"""


class DocumentRepositoryError(Exception):
    """Base class for errors raised by docrepo itself"""

    pass


class SerializationError(DocumentRepositoryError):
    """Raised when a document cannot be turned into JSON"""

    pass


class DeserializationError(DocumentRepositoryError):
    """Raised when stored JSON cannot be turned back into a document"""

    pass


class ContainerProviderError(DocumentRepositoryError):
    """Raised when no container provider can be built for the settings"""

    pass
