"""
Tests for the CLI, run against JSON files (no database).
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from awakening.cli.main import cli

BOOK_ID = "64b0f1a2c3d4e5f601234569"
PODCAST_ID = "64b0f1a2c3d4e5f60123456a"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def export_file(tmp_path: Path, legacy_export) -> Path:
    path = tmp_path / "export.json"
    path.write_text(json.dumps(legacy_export))
    return path


@pytest.fixture
def repaired_file(runner: CliRunner, tmp_path: Path, legacy_export) -> Path:
    """Export with the readable documents repaired."""
    source = tmp_path / "readable.json"
    source.write_text(json.dumps(legacy_export[:4]))
    target = tmp_path / "repaired.json"
    result = runner.invoke(cli, ["audit", "--input", str(source), "--repair", "--output", str(target)])
    assert result.exit_code == 0, result.output
    return target


class TestAuditCommand:
    def test_audit_reports_and_fails(self, runner, export_file, tmp_path):
        report_file = tmp_path / "report.json"
        result = runner.invoke(cli, ["audit", "--input", str(export_file), "--report", str(report_file)])

        assert result.exit_code == 1
        assert "Scanned:          5" in result.output
        report = json.loads(report_file.read_text())
        assert len(report["findings"]) == 5
        # Input untouched without --repair
        assert len(json.loads(export_file.read_text())) == 5

    def test_repair_writes_output(self, runner, export_file, tmp_path):
        output = tmp_path / "out.json"
        result = runner.invoke(
            cli, ["audit", "--input", str(export_file), "--repair", "--output", str(output)]
        )
        # The unknown-kind document cannot be repaired
        assert result.exit_code == 1
        assert "Repaired:         4" in result.output
        documents = json.loads(output.read_text())
        assert [doc.get("slug") for doc in documents[:4]] == [
            "dharma-seed",
            "tara-talks",
            "the-mind-illuminated",
            "tara-talks-1",
        ]

    def test_repaired_file_is_clean(self, runner, repaired_file):
        result = runner.invoke(cli, ["audit", "--input", str(repaired_file)])
        assert result.exit_code == 0, result.output
        assert "With violations:  0" in result.output

    def test_output_requires_input(self, runner, tmp_path):
        result = runner.invoke(cli, ["audit", "--output", str(tmp_path / "x.json")])
        assert result.exit_code == 2


class TestQueueCommands:
    def test_next_and_process(self, runner, repaired_file):
        result = runner.invoke(cli, ["queue", "next", "--data", str(repaired_file)])
        assert result.exit_code == 0, result.output
        assert "Tara Talks" in result.output
        assert PODCAST_ID in result.output

        result = runner.invoke(cli, ["queue", "process", PODCAST_ID, "--data", str(repaired_file)])
        assert result.exit_code == 0, result.output

        result = runner.invoke(cli, ["queue", "next", "--data", str(repaired_file)])
        assert "The Mind Illuminated" in result.output
        assert "missing: link, isbn" in result.output

    def test_incomplete_book_exit_code(self, runner, repaired_file):
        result = runner.invoke(cli, ["queue", "process", BOOK_ID, "--data", str(repaired_file)])
        assert result.exit_code == 1

        statuses = {doc["id"]: doc["status"] for doc in json.loads(repaired_file.read_text())}
        assert statuses[BOOK_ID] == "pending"

        result = runner.invoke(
            cli, ["queue", "process", BOOK_ID, "--isbn", "978-1501156984", "--data", str(repaired_file)]
        )
        assert result.exit_code == 0, result.output
        documents = {doc["id"]: doc for doc in json.loads(repaired_file.read_text())}
        assert documents[BOOK_ID]["status"] == "processed"
        assert documents[BOOK_ID]["bookDetails"]["isbn"] == "978-1501156984"

    def test_skip_requeue_and_progress(self, runner, repaired_file):
        result = runner.invoke(
            cli, ["queue", "skip", BOOK_ID, "--notes", "Out of print", "--data", str(repaired_file)]
        )
        assert result.exit_code == 0, result.output

        result = runner.invoke(cli, ["queue", "progress", "--data", str(repaired_file)])
        assert result.exit_code == 0, result.output
        overall = [line for line in result.output.splitlines() if line.startswith("overall")][0]
        assert overall.split()[1:5] == ["4", "1", "2", "1"]

        result = runner.invoke(cli, ["queue", "requeue", BOOK_ID, "--data", str(repaired_file)])
        assert result.exit_code == 0, result.output
        result = runner.invoke(cli, ["queue", "requeue", BOOK_ID, "--data", str(repaired_file)])
        assert result.exit_code == 1

    def test_database_required_without_data_file(self, runner):
        result = runner.invoke(cli, ["queue", "next"])
        assert result.exit_code == 1
        assert "POSTGRES__ENABLED" in result.output
