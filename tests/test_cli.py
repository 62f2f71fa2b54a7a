"""Tests for the command-line interface."""

import json
from pathlib import Path

import pytest

from transaction_analytics.cli import collect_files, create_parser, get_log_level, main, run_analysis
from transaction_analytics.config import Config
from transaction_analytics.parsers import FileDetector


def write_records(path: Path, records: list[dict[str, object]]) -> Path:
    """Helper to write an extractor JSON file."""
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


JANUARY = [
    {"date": "2024-01-05", "description": "Netflix 1", "amount": -15.99, "category": "entertainment", "notes": ""},
    {"date": "2024-01-10", "description": "Salary", "amount": 3000, "category": "salary", "notes": ""},
]
FEBRUARY = [
    {"date": "2024-02-05", "description": "Netflix 2", "amount": -15.99, "category": "entertainment", "notes": ""},
    {"date": "2024-01-10", "description": "Salary", "amount": 3000, "category": "salary", "notes": ""},
]


class TestParser:
    """Tests for argument parsing helpers."""

    def test_repeated_inputs(self) -> None:
        """Test that --input may be given several times."""
        args = create_parser().parse_args(["-i", "a.json", "-i", "b.csv"])

        assert args.inputs == [Path("a.json"), Path("b.csv")]
        assert args.limit == 50

    @pytest.mark.parametrize("verbosity,level", [(0, "WARNING"), (1, "INFO"), (2, "DEBUG"), (5, "DEBUG")])
    def test_log_level(self, verbosity: int, level: str) -> None:
        """Test verbosity to log level mapping."""
        assert get_log_level(verbosity) == level


class TestRunAnalysis:
    """Tests for run_analysis."""

    def test_chunks_reanalyzed_together(self, tmp_path: Path) -> None:
        """Test that a later chunk updates flags on earlier records."""
        files = [
            write_records(tmp_path / "a.json", JANUARY),
            write_records(tmp_path / "b.json", FEBRUARY),
        ]

        batch, analyzed, errors = run_analysis(files, Config(), show_progress=False)

        assert errors == []
        assert batch.version == 2
        assert len(analyzed) == 4
        assert [t.is_recurring for t in analyzed] == [True, True, True, True]
        assert [t.duplicate_flag for t in analyzed] == [False, True, False, True]

    def test_parse_failure_keeps_earlier_chunks(self, tmp_path: Path) -> None:
        """Test that a bad file stops the run but keeps what was read."""
        bad = tmp_path / "b.json"
        bad.write_text("not json", encoding="utf-8")
        files = [write_records(tmp_path / "a.json", JANUARY), bad]

        batch, analyzed, errors = run_analysis(files, Config(), show_progress=False)

        assert len(batch) == 2
        assert len(analyzed) == 2
        assert len(errors) == 1
        assert errors[0].startswith("Error processing file b.json")

    def test_collect_files_missing_input(self, tmp_path: Path) -> None:
        """Test that a missing input path is reported."""
        with pytest.raises(FileNotFoundError):
            collect_files([tmp_path / "missing"], FileDetector())


class TestMain:
    """Tests for main."""

    def test_json_output(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test the JSON report shape and display order."""
        write_records(tmp_path / "a.json", JANUARY)
        write_records(tmp_path / "b.json", FEBRUARY)

        exit_code = main(["-i", str(tmp_path), "--json", "--config-dir", str(tmp_path / "cfg")])

        assert exit_code == 0
        data = json.loads(capsys.readouterr().out)
        assert [t["date"] for t in data["transactions"]] == [
            "2024-02-05", "2024-01-10", "2024-01-10", "2024-01-05",
        ]
        assert data["summary"]["totalRecords"] == 4
        assert data["summary"]["duplicates"] == 2
        assert data["summary"]["totalSpending"] == 31.98
        assert data["categories"] == [{"name": "Entertainment", "value": 31.98}]
        assert data["errors"] == []

    def test_csv_export(self, tmp_path: Path) -> None:
        """Test writing the CSV export."""
        source = write_records(tmp_path / "a.json", JANUARY)
        output = tmp_path / "out.csv"

        exit_code = main(["-i", str(source), "-o", str(output), "--config-dir", str(tmp_path)])

        assert exit_code == 0
        lines = output.read_text(encoding="utf-8").splitlines()
        assert lines[0] == '"Date","Description","Amount","Category","Notes"'
        # Newest first
        assert lines[1].startswith('"2024-01-10","Salary"')

    def test_excel_export(self, tmp_path: Path) -> None:
        """Test writing the Excel workbook."""
        source = write_records(tmp_path / "a.json", JANUARY)
        output = tmp_path / "out.xlsx"

        exit_code = main(["-i", str(source), "-o", str(output), "--config-dir", str(tmp_path)])

        assert exit_code == 0
        assert output.exists()

    def test_missing_input_argument(self) -> None:
        """Test that running without inputs fails."""
        assert main([]) == 1

    def test_missing_input_path(self, tmp_path: Path) -> None:
        """Test that a nonexistent input fails."""
        assert main(["-i", str(tmp_path / "missing.json"), "--config-dir", str(tmp_path)]) == 1

    def test_invalid_record_fails(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that a bad record is reported and fails the run."""
        write_records(tmp_path / "a.json", [{"date": "2024-01-05", "description": "X", "amount": "abc"}])

        exit_code = main(["-i", str(tmp_path), "--json", "--config-dir", str(tmp_path / "cfg")])

        assert exit_code == 1
        data = json.loads(capsys.readouterr().out)
        assert data["summary"] is None
        assert len(data["errors"]) == 1

    def test_empty_directory(self, tmp_path: Path) -> None:
        """Test that a directory without supported files is not an error."""
        assert main(["-i", str(tmp_path), "--config-dir", str(tmp_path)]) == 0

    def test_validate_only(self, tmp_path: Path) -> None:
        """Test configuration validation."""
        (tmp_path / "settings.yaml").write_text("analytics: 5\n", encoding="utf-8")

        assert main(["--validate-only", "--config-dir", str(tmp_path)]) == 1

    def test_suspicious_threshold_override(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test that the threshold flag changes the suspicious count."""
        write_records(tmp_path / "a.json", [
            {"date": "2024-01-01", "description": "A", "amount": -100},
            {"date": "2024-01-02", "description": "B", "amount": -300},
        ])

        main(["-i", str(tmp_path), "--json", "--suspicious-threshold", "0.5",
              "--config-dir", str(tmp_path / "cfg")])

        data = json.loads(capsys.readouterr().out)
        assert data["summary"]["suspicious"] == 1
