"""Tests for CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from critpath.cli import app
from critpath.config import set_config_path

runner = CliRunner()

CHAIN_PLAN = """
tasks:
  - name: Design
    phase: Plan
    effort: 4 story points
  - name: Build
    phase: Make
    effort: 6 story points
    dependencies: [Design]
  - name: Ship
    phase: Make
    dependencies: [Build]
"""


@pytest.fixture(autouse=True)
def _clear_config_path():
    yield
    set_config_path(None)


@pytest.fixture
def chain_plan(tmp_path: Path) -> Path:
    plan = tmp_path / "plan.yaml"
    plan.write_text(CHAIN_PLAN)
    return plan


class TestBuildCommand:
    """Test the build CLI command."""

    def test_default_gantt_to_stdout(self, chain_plan: Path) -> None:
        result = runner.invoke(app, ["build", str(chain_plan)])

        assert result.exit_code == 0
        assert "gantt" in result.stdout
        assert "title Project Timeline" in result.stdout
        assert "    section Plan" in result.stdout
        assert "    Build :crit, task2, after task1, 3d" in result.stdout

    def test_multiple_formats_to_stdout(self, chain_plan: Path) -> None:
        result = runner.invoke(app, ["build", str(chain_plan), "-f", "mermaid", "-f", "dot"])

        assert result.exit_code == 0
        assert "graph LR" in result.stdout
        assert "digraph TaskGraph" in result.stdout
        assert "gantt" not in result.stdout

    def test_single_format_to_file(self, chain_plan: Path, tmp_path: Path) -> None:
        output = tmp_path / "out" / "chart.md"
        result = runner.invoke(app, ["build", str(chain_plan), "--output", str(output)])

        assert result.exit_code == 0
        assert output.exists()
        content = output.read_text()
        assert content.startswith("```mermaid\ngantt")
        assert content.endswith("```\n")
        assert "gantt written to" in result.stdout

    def test_multiple_formats_to_directory(self, chain_plan: Path, tmp_path: Path) -> None:
        out_dir = tmp_path / "renderings"
        result = runner.invoke(
            app, ["build", str(chain_plan), "-f", "json", "-f", "yaml", "-o", str(out_dir)]
        )

        assert result.exit_code == 0
        data = json.loads((out_dir / "plan.json").read_text())
        assert set(data) == {"nodes", "edges"}
        assert (out_dir / "plan.yaml").exists()

    def test_config_next_to_plan(self, chain_plan: Path) -> None:
        (chain_plan.parent / "critpath_config.yaml").write_text(
            "gantt:\n  title: Configured\n"
        )

        result = runner.invoke(app, ["build", str(chain_plan)])

        assert result.exit_code == 0
        assert "title Configured" in result.stdout

    def test_global_config_option(self, chain_plan: Path, tmp_path: Path) -> None:
        config = tmp_path / "custom.yaml"
        config.write_text("engine:\n  formats: [json]\n")

        result = runner.invoke(app, ["--config", str(config), "build", str(chain_plan)])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["edges"][0] == {
            "from": "task1",
            "to": "task2",
            "critical": True,
        }

    def test_missing_plan(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["build", str(tmp_path / "missing.yaml")])

        assert result.exit_code == 1

    def test_strict_resolution_error(self, tmp_path: Path) -> None:
        plan = tmp_path / "plan.yaml"
        plan.write_text("tasks:\n  - name: A\n    dependencies: [Ghost]\n")
        (tmp_path / "critpath_config.yaml").write_text("engine:\n  strict_resolution: true\n")

        result = runner.invoke(app, ["build", str(plan)])

        assert result.exit_code == 1

    def test_write_failure(self, chain_plan: Path, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        result = runner.invoke(app, ["build", str(chain_plan), "-o", str(blocker / "chart.mmd")])

        assert result.exit_code == 1


class TestRenderCommand:
    """Test the render CLI command."""

    def test_render_example_dot(self) -> None:
        result = runner.invoke(app, ["render", "examples/plan.yaml", "--format", "dot"])

        assert result.exit_code == 0
        assert "digraph TaskGraph" in result.stdout
        assert "task6 -> task7" in result.stdout

    def test_render_summary(self, chain_plan: Path) -> None:
        result = runner.invoke(app, ["render", str(chain_plan), "-f", "summary"])

        assert result.exit_code == 0
        assert "## Critical Path" in result.stdout
        assert "Total duration: 6 days" in result.stdout

    def test_invalid_format(self, chain_plan: Path) -> None:
        result = runner.invoke(app, ["render", str(chain_plan), "-f", "pdf"])

        assert result.exit_code != 0


class TestPathCommand:
    """Test the path CLI command."""

    def test_path_text(self, chain_plan: Path) -> None:
        result = runner.invoke(app, ["path", str(chain_plan)])

        assert result.exit_code == 0
        assert "task1\t2d\tDesign" in result.stdout
        assert "task3\t1d\tShip" in result.stdout
        assert "Total duration: 6d" in result.stdout

    def test_path_json(self, chain_plan: Path) -> None:
        result = runner.invoke(app, ["path", str(chain_plan), "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert [step["id"] for step in payload["critical_path"]] == ["task1", "task2", "task3"]
        assert payload["total_duration"] == 6
        assert payload["cycle"] is None

    def test_path_example(self) -> None:
        result = runner.invoke(app, ["path", "examples/plan.yaml"])

        assert result.exit_code == 0
        assert "Implement core features" in result.stdout
        assert "Total duration: 13d" in result.stdout


class TestCheckCommand:
    """Test the check CLI command."""

    def test_clean_plan(self, chain_plan: Path) -> None:
        result = runner.invoke(app, ["check", str(chain_plan)])

        assert result.exit_code == 0
        assert "OK: 3 tasks, 2 dependencies" in result.stdout

    def test_reports_misses_and_cycles(self, tmp_path: Path) -> None:
        plan = tmp_path / "plan.yaml"
        plan.write_text(
            "tasks:\n"
            "  - name: A\n    dependencies: [B]\n"
            "  - name: B\n    dependencies: [A]\n"
            "  - name: C\n    dependencies: [Nonexistent]\n"
        )

        result = runner.invoke(app, ["check", str(plan)])

        assert result.exit_code == 1
        assert "Unresolved dependency: task3 (C) -> 'Nonexistent'" in result.stdout
        assert "Dependency cycle: task1 -> task2 -> task1" in result.stdout


class TestVerbosity:
    """Test the global verbosity option."""

    def test_changes_level_reports_build(self, chain_plan: Path) -> None:
        result = runner.invoke(app, ["-v", "1", "path", str(chain_plan)])

        assert result.exit_code == 0
        assert "Critical path: task1 -> task2 -> task3 (6 days)" in result.output

    def test_verbosity_above_debug_rejected(self, chain_plan: Path) -> None:
        result = runner.invoke(app, ["-v", "4", "path", str(chain_plan)])

        assert result.exit_code == 2
