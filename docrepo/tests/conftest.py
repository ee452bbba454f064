import pytest

from docrepo.config import ContainerBackend, RepositorySettings
from docrepo.document_repository import DocumentRepository
from docrepo.repos.memory import MemoryContainerProvider
from docrepo.tests.factories import Widget


@pytest.fixture
def settings() -> RepositorySettings:
    return RepositorySettings(backend=ContainerBackend.MEMORY, log=True)


@pytest.fixture
def memory_provider() -> MemoryContainerProvider:
    """Create a fresh memory provider for each test."""
    return MemoryContainerProvider()


@pytest.fixture
def widget_repo(
    memory_provider: MemoryContainerProvider, settings: RepositorySettings
) -> DocumentRepository[Widget]:
    return DocumentRepository(
        memory_provider,
        settings,
        Widget,
        database_path="test.db",
        container_name="widgets",
    )
