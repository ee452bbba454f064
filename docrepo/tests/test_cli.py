"""
Tests for the docrepo command line program.

The CLI runs against the local backend in a temporary directory, seeded
through a DocumentRepository so the tests read exactly what an application
would have written.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Iterator, List

import pytest
from click.testing import CliRunner

from docrepo.cli.main import main
from docrepo.document_repository import DocumentRepository
from docrepo.repos.local import LocalContainerProvider
from docrepo.tests.factories import Widget, WidgetFactory


@pytest.fixture
def database_path(tmp_path: Path) -> str:
    return str(tmp_path / "app.json")


@pytest.fixture
def runner(monkeypatch: pytest.MonkeyPatch) -> Iterator[CliRunner]:
    for name in (
        "DOCREPO_BACKEND", "DOCREPO_LOG",
        "DOCREPO_DATABASE_PATH", "DOCREPO_CONTAINER_NAME",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LOG_LEVEL", "WARNING")

    # The CLI reconfigures the root logger; put it back afterwards
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield CliRunner()
    root.handlers[:] = handlers
    root.setLevel(level)


def _seed(database_path: str, widgets: List[Widget]) -> None:
    repo: DocumentRepository[Widget] = DocumentRepository(
        LocalContainerProvider(), None, Widget, database_path, "widgets"
    )
    asyncio.run(repo.add_items(widgets))


def _invoke(runner: CliRunner, database_path: str, *args: str):
    return runner.invoke(
        main,
        [
            "--database-path", database_path,
            "--container-name", "widgets",
            "--backend", "local",
            *args,
        ],
    )


class TestDocrepoCLI:
    def test_list_prints_one_json_line_per_document(
        self, runner: CliRunner, database_path: str
    ) -> None:
        widgets = WidgetFactory.build_batch(2)
        _seed(database_path, widgets)

        result = _invoke(runner, database_path, "list")

        assert result.exit_code == 0
        lines = [json.loads(line) for line in result.output.splitlines()]
        assert [line["id"] for line in lines] == [w.id for w in widgets]
        assert lines[0]["name"] == widgets[0].name

    def test_get_prints_document(
        self, runner: CliRunner, database_path: str
    ) -> None:
        widget = WidgetFactory.build(name="sprocket", quantity=3)
        _seed(database_path, [widget])

        result = _invoke(runner, database_path, "get", widget.id)

        assert result.exit_code == 0
        assert json.loads(result.output) == json.loads(
            widget.model_dump_json()
        )

    def test_get_missing_document_fails(
        self, runner: CliRunner, database_path: str
    ) -> None:
        result = _invoke(runner, database_path, "get", "missing")

        assert result.exit_code == 1
        assert "Document not found: missing" in result.output

    def test_count(self, runner: CliRunner, database_path: str) -> None:
        _seed(database_path, WidgetFactory.build_batch(3))

        result = _invoke(runner, database_path, "count")

        assert result.exit_code == 0
        assert result.output.strip() == "3"

    def test_delete(self, runner: CliRunner, database_path: str) -> None:
        widget = WidgetFactory.build()
        _seed(database_path, [widget])

        result = _invoke(runner, database_path, "delete", widget.id)
        after = _invoke(runner, database_path, "count")

        assert result.exit_code == 0
        assert f"Deleted {widget.id}" in result.output
        assert after.output.strip() == "0"

    def test_delete_all_requires_confirmation(
        self, runner: CliRunner, database_path: str
    ) -> None:
        _seed(database_path, WidgetFactory.build_batch(2))

        refused = _invoke(runner, database_path, "delete-all")
        still_there = _invoke(runner, database_path, "count")

        assert refused.exit_code == 2
        assert "without --yes" in refused.output
        assert still_there.output.strip() == "2"

    def test_delete_all_with_confirmation(
        self, runner: CliRunner, database_path: str
    ) -> None:
        _seed(database_path, WidgetFactory.build_batch(2))

        result = _invoke(runner, database_path, "delete-all", "--yes")
        after = _invoke(runner, database_path, "count")

        assert result.exit_code == 0
        assert after.output.strip() == "0"

    def test_container_options_are_required(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["list"])

        assert result.exit_code == 2
        assert "--database-path" in result.output

    def test_log_flag_emits_repository_debug_output(
        self, runner: CliRunner, database_path: str
    ) -> None:
        widget = WidgetFactory.build()
        _seed(database_path, [widget])

        result = _invoke(runner, database_path, "--log", "get", widget.id)

        assert result.exit_code == 0
        assert "DocumentRepository: get_item (LooseDocument)" in result.output
        repo_logger = logging.getLogger("docrepo.document_repository")
        assert repo_logger.isEnabledFor(logging.DEBUG)

    def test_without_log_flag_repository_debug_is_silent(
        self, runner: CliRunner, database_path: str
    ) -> None:
        widget = WidgetFactory.build()
        _seed(database_path, [widget])

        result = _invoke(runner, database_path, "get", widget.id)

        assert result.exit_code == 0
        assert "DocumentRepository: get_item" not in result.output
