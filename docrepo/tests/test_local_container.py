"""
Tests for the local JSON-file container backend.

Covers what the contract tests cannot: the file layout, persistence across
providers (i.e. across process restarts) and handling of bad files.
"""

import json
from pathlib import Path

import pytest

from docrepo.document_repository import DocumentRepository
from docrepo.repos.local import LocalContainerProvider
from docrepo.tests.factories import Widget, WidgetFactory


@pytest.fixture
def database_path(tmp_path: Path) -> Path:
    return tmp_path / "app.json"


class TestLocalDatabaseFile:
    @pytest.mark.asyncio
    async def test_mutation_writes_database_file(
        self, database_path: Path
    ) -> None:
        provider = LocalContainerProvider()
        container = await provider.get_container(str(database_path), "widgets")

        await container.add_item("k1", '{"id": "k1"}')

        with open(database_path, "r") as f:
            data = json.load(f)
        assert data == {"containers": {"widgets": {"k1": '{"id": "k1"}'}}}
        assert not database_path.with_name("app.json.tmp").exists()

    @pytest.mark.asyncio
    async def test_several_containers_share_one_file(
        self, database_path: Path
    ) -> None:
        provider = LocalContainerProvider()
        widgets = await provider.get_container(str(database_path), "widgets")
        gadgets = await provider.get_container(str(database_path), "gadgets")

        await widgets.add_item("w1", "widget")
        await gadgets.add_item("g1", "gadget")

        with open(database_path, "r") as f:
            data = json.load(f)
        assert data["containers"] == {
            "widgets": {"w1": "widget"},
            "gadgets": {"g1": "gadget"},
        }

    @pytest.mark.asyncio
    async def test_reads_are_not_written(self, database_path: Path) -> None:
        provider = LocalContainerProvider()
        container = await provider.get_container(str(database_path), "widgets")

        await container.get_item("missing")
        await container.get_all_items()

        assert not database_path.exists()

    @pytest.mark.asyncio
    async def test_read_only_container_is_not_added_to_file(
        self, database_path: Path
    ) -> None:
        provider = LocalContainerProvider()
        widgets = await provider.get_container(str(database_path), "widgets")
        gadgets = await provider.get_container(str(database_path), "gadgets")

        await gadgets.get_all_items()
        await widgets.add_item("w1", "widget")

        with open(database_path, "r") as f:
            data = json.load(f)
        assert data["containers"] == {"widgets": {"w1": "widget"}}

    @pytest.mark.asyncio
    async def test_invalid_containers_section_raises(
        self, database_path: Path
    ) -> None:
        database_path.write_text(json.dumps({"containers": ["not", "a", "map"]}))
        provider = LocalContainerProvider()

        with pytest.raises(ValueError, match="containers"):
            await provider.get_container(str(database_path), "widgets")

    @pytest.mark.asyncio
    async def test_corrupt_file_propagates_error(
        self, database_path: Path
    ) -> None:
        database_path.write_text("{ truncated")
        provider = LocalContainerProvider()

        with pytest.raises(json.JSONDecodeError):
            await provider.get_container(str(database_path), "widgets")


class TestLocalPersistence:
    @pytest.mark.asyncio
    async def test_documents_survive_a_new_provider(
        self, database_path: Path
    ) -> None:
        widget = WidgetFactory.build(name="durable")
        first: DocumentRepository[Widget] = DocumentRepository(
            LocalContainerProvider(), None, Widget,
            str(database_path), "widgets",
        )
        await first.add_item(widget)

        second: DocumentRepository[Widget] = DocumentRepository(
            LocalContainerProvider(), None, Widget,
            str(database_path), "widgets",
        )

        assert await second.get_item(widget.id) == widget

    @pytest.mark.asyncio
    async def test_delete_all_is_persisted(self, database_path: Path) -> None:
        repo: DocumentRepository[Widget] = DocumentRepository(
            LocalContainerProvider(), None, Widget,
            str(database_path), "widgets",
        )
        await repo.add_items(WidgetFactory.build_batch(3))

        await repo.delete_all()

        reopened: DocumentRepository[Widget] = DocumentRepository(
            LocalContainerProvider(), None, Widget,
            str(database_path), "widgets",
        )
        assert await reopened.get_all() is None

    @pytest.mark.asyncio
    async def test_same_file_through_different_spellings_is_shared(
        self, tmp_path: Path
    ) -> None:
        provider = LocalContainerProvider()
        direct = await provider.get_container(
            str(tmp_path / "app.json"), "widgets"
        )
        indirect = await provider.get_container(
            str(tmp_path / "sub" / ".." / "app.json"), "widgets"
        )

        await direct.add_item("k1", "v1")

        assert await indirect.get_item("k1") == "v1"


class TestLocalWriteFailures:
    """A failed write must leave both the file and the container unchanged."""

    @pytest.fixture
    def unwritable_path(self, tmp_path: Path) -> Path:
        # The parent "directory" is a regular file, so makedirs fails
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        return blocker / "app.json"

    @pytest.mark.asyncio
    async def test_failed_add_is_not_visible(
        self, unwritable_path: Path
    ) -> None:
        provider = LocalContainerProvider()
        container = await provider.get_container(str(unwritable_path), "widgets")

        with pytest.raises(OSError):
            await container.add_item("k", '{"id": "k"}')

        assert await container.get_item("k") is None
        assert await container.get_all_items() == []

    @pytest.mark.asyncio
    async def test_failed_update_delete_and_clear_keep_items(
        self, database_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        provider = LocalContainerProvider()
        container = await provider.get_container(str(database_path), "widgets")
        await container.add_item("k1", "v1")
        await container.add_item("k2", "v2")

        def disk_full(*args, **kwargs):
            raise OSError("No space left on device")

        monkeypatch.setattr(
            "docrepo.repos.local.container.os.replace", disk_full
        )

        with pytest.raises(OSError):
            await container.update_item("k1", "changed")
        with pytest.raises(OSError):
            await container.delete_item("k2")
        with pytest.raises(OSError):
            await container.delete_all_items()

        assert await container.get_all_items() == ["v1", "v2"]
        with open(database_path, "r") as f:
            data = json.load(f)
        assert data["containers"]["widgets"] == {"k1": "v1", "k2": "v2"}
