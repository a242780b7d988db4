"""Tests for the delivery-tool command line interface."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from delivery_tool.api.exceptions import NotFoundError
from delivery_tool.cli.commands.export import select_deliveries
from delivery_tool.cli.main import Context, cli
from delivery_tool.models.delivery import Delivery


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def invoke(runner: CliRunner, tmp_path: Path):
    def run(*args: str):
        return runner.invoke(cli, ["--project-root", str(tmp_path), *args])

    return run


@pytest.fixture
def document(invoke, tmp_path: Path) -> Path:
    """Project document with one component whose version is fixed"""
    path = tmp_path / "project.xml"
    assert invoke("component", "add", "Firmware", "--output", str(path)).exit_code == 0
    assert invoke("component", "assign", "Firmware", "Version", "ConstText", "1.0",
                  "--source", str(path)).exit_code == 0
    return path


class TestSelectDeliveries:
    """Test select_deliveries."""

    @pytest.fixture
    def deliveries(self, make_delivery):
        return sorted([make_delivery("1.0"), make_delivery("1.1", minutes=1), make_delivery("1.2", minutes=2)])

    def test_defaults_to_all(self, deliveries) -> None:
        assert [d.name for d in select_deliveries(deliveries)] == ["1.2", "1.1", "1.0"]

    def test_range(self, deliveries) -> None:
        assert [d.name for d in select_deliveries(deliveries, "1.1")] == ["1.2", "1.1"]
        assert [d.name for d in select_deliveries(deliveries, "1.0", "1.1")] == ["1.1", "1.0"]
        assert [d.name for d in select_deliveries(deliveries, "1.1", "1.1")] == ["1.1"]

    def test_reversed_bounds(self, deliveries) -> None:
        assert [d.name for d in select_deliveries(deliveries, "1.2", "1.0")] == ["1.2", "1.1", "1.0"]

    def test_unknown_name(self, deliveries) -> None:
        with pytest.raises(NotFoundError):
            select_deliveries(deliveries, "9.9")

    def test_empty(self) -> None:
        assert select_deliveries([]) == []


class TestContext:
    """Test the lazy CLI context."""

    def test_project_root_from_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PROJECT_ROOT", str(tmp_path))

        assert Context().project_root == tmp_path

    def test_explicit_project_root(self, tmp_path: Path) -> None:
        context = Context(tmp_path)

        assert context.project_root == tmp_path
        assert context.config_service.config_path == tmp_path / ".delivery-tool.yaml"

    def test_startup_file_opened(self, tmp_path: Path, document: Path) -> None:
        (tmp_path / ".delivery-tool.yaml").write_text(f"project:\n  startup_file: {document.name}\n")

        project = Context(tmp_path).create_project()

        assert project.find_component("Firmware") is not None


class TestComponentCommands:
    """Test the component command group."""

    def test_add_and_list(self, invoke, document: Path) -> None:
        result = invoke("component", "list", "--source", str(document), "--strategies")

        assert result.exit_code == 0
        assert "Firmware" in result.output
        assert "ConstText" in result.output

    def test_add_sub_component(self, invoke, document: Path) -> None:
        result = invoke("component", "add", "Bootloader", "--parent", "Firmware", "--internal",
                        "--source", str(document))

        assert result.exit_code == 0
        assert "Firmware\\Bootloader" in result.output
        assert 'name="Bootloader" relevant="false"' in document.read_text(encoding="utf-8")

    def test_unknown_parent(self, invoke, document: Path) -> None:
        result = invoke("component", "add", "Bootloader", "--parent", "Missing", "--source", str(document))

        assert result.exit_code == 1
        assert "Component 'Missing' not found" in result.output

    def test_unknown_strategy(self, invoke, document: Path) -> None:
        result = invoke("component", "assign", "Firmware", "Version", "Guess", "--source", str(document))

        assert result.exit_code == 1
        assert "Unknown strategy 'Guess'" in result.output

    def test_remove(self, invoke, document: Path) -> None:
        result = invoke("component", "remove", "Firmware", "--source", str(document))

        assert result.exit_code == 0
        assert 'name="Firmware"' not in document.read_text(encoding="utf-8")

    def test_without_output_not_saved(self, invoke) -> None:
        result = invoke("component", "add", "Firmware")

        assert result.exit_code == 0
        assert "Project not saved" in result.output


class TestDeliveryCommands:
    """Test the delivery command group."""

    def test_add_and_list(self, invoke, document: Path) -> None:
        result = invoke("delivery", "add", "1.0", "--integrator", "alice", "--source", str(document))

        assert result.exit_code == 0
        assert "Delivery created successfully" in result.output
        assert 'integrator="alice"' in document.read_text(encoding="utf-8")

        listing = invoke("delivery", "list", "--source", str(document))
        assert listing.exit_code == 0
        assert "1.0" in listing.output
        assert "alice" in listing.output

    def test_write_to_other_document(self, invoke, document: Path, tmp_path: Path) -> None:
        target = tmp_path / "released.xml"

        result = invoke("delivery", "add", "1.0", "--integrator", "alice",
                        "--source", str(document), "--output", str(target))

        assert result.exit_code == 0
        assert 'name="1.0"' in target.read_text(encoding="utf-8")
        assert 'name="1.0"' not in document.read_text(encoding="utf-8")

    def test_duplicate(self, invoke, document: Path) -> None:
        invoke("delivery", "add", "1.0", "--integrator", "alice", "--source", str(document))

        result = invoke("delivery", "add", "1.0", "--integrator", "bob", "--source", str(document))

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_remove(self, invoke, document: Path) -> None:
        invoke("delivery", "add", "1.0", "--integrator", "alice", "--source", str(document))

        result = invoke("delivery", "remove", "1.0", "--source", str(document))

        assert result.exit_code == 0
        assert 'name="1.0"' not in document.read_text(encoding="utf-8")

    def test_remove_unknown(self, invoke, document: Path) -> None:
        result = invoke("delivery", "remove", "9.9", "--source", str(document))

        assert result.exit_code == 1
        assert "Delivery '9.9' not found" in result.output

    def test_list_empty(self, invoke, document: Path) -> None:
        result = invoke("delivery", "list", "--source", str(document))

        assert result.exit_code == 0
        assert "No deliveries found" in result.output

    def test_source_not_a_project(self, invoke, tmp_path: Path) -> None:
        broken = tmp_path / "broken.xml"
        broken.write_text("<Other/>")

        result = invoke("delivery", "list", "--source", str(broken))

        assert result.exit_code == 1
        assert "Error opening project" in result.output


class TestExportCommands:
    """Test the export command group."""

    def test_docbook(self, invoke, document: Path, tmp_path: Path) -> None:
        invoke("delivery", "add", "1.0", "--integrator", "alice", "--source", str(document))
        output = tmp_path / "notes.xml"

        result = invoke("export", "docbook", "--source", str(document), "--output", str(output))

        assert result.exit_code == 0
        text = output.read_text(encoding="utf-8")
        assert "<!DOCTYPE article" in text
        assert "<title>1.0</title>" in text

    def test_unknown_delivery(self, invoke, document: Path, tmp_path: Path) -> None:
        invoke("delivery", "add", "1.0", "--integrator", "alice", "--source", str(document))

        result = invoke("export", "docbook", "--source", str(document), "--output", str(tmp_path / "n.xml"),
                        "--from", "0.1")

        assert result.exit_code == 1
        assert "Delivery not found: 0.1" in result.output

    def test_no_deliveries(self, invoke, document: Path, tmp_path: Path) -> None:
        result = invoke("export", "docbook", "--source", str(document), "--output", str(tmp_path / "n.xml"))

        assert result.exit_code == 1
        assert "no deliveries" in result.output


class TestPluginCommands:
    """Test the plugins command group."""

    def test_list(self, invoke) -> None:
        result = invoke("plugins", "list")

        assert result.exit_code == 0
        assert "Version" in result.output

    def test_show(self, invoke) -> None:
        result = invoke("plugins", "show", "Version")

        assert result.exit_code == 0
        assert "Local git Tag" in result.output
        assert "File Parser" in result.output

    def test_show_unknown(self, invoke) -> None:
        result = invoke("plugins", "show", "Coverage")

        assert result.exit_code == 1
        assert "Import strategy not found: Coverage" in result.output
