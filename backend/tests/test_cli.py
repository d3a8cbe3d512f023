"""Tests for the command line interface."""

import sys
from pathlib import Path

import pytest
from rich.console import Console

from etf_overlap import cli


@pytest.fixture
def holdings_files(tmp_path: Path, cibr_text: str, vti_text: str) -> list[Path]:
    cibr = tmp_path / "cibr.txt"
    cibr.write_text(cibr_text)
    vti = tmp_path / "vti.txt"
    vti.write_text(vti_text)
    return [cibr, vti]


def run_cli(monkeypatch: pytest.MonkeyPatch, *args: str) -> None:
    monkeypatch.setattr(sys, "argv", ["etf-overlap", *args])
    monkeypatch.setattr(cli, "console", Console(width=200))
    cli.main()


class TestLoadComparison:
    """Tests for building a comparison set from files."""

    def test_names_default_to_file_stem(self, holdings_files: list[Path]) -> None:
        comparison = cli.load_comparison(holdings_files, [])

        assert [f.name for f in comparison.funds] == ["CIBR", "VTI"]
        assert [h.ticker for h in comparison.funds[0].holdings] == ["AAPL", "MSFT"]

    def test_explicit_names(self, holdings_files: list[Path]) -> None:
        comparison = cli.load_comparison(holdings_files, ["Cyber"])

        assert [f.name for f in comparison.funds] == ["Cyber", "VTI"]


class TestAnalyzeCommand:
    """Tests for the analyze command."""

    def test_prints_overlap(self, monkeypatch, capsys, holdings_files: list[Path]) -> None:
        run_cli(monkeypatch, "analyze", *map(str, holdings_files))

        out = capsys.readouterr().out
        assert "Overlap Analysis" in out
        assert "33.3%" in out
        assert "AAPL" in out
        assert "8.10%" in out

    def test_single_file(self, monkeypatch, capsys, holdings_files: list[Path]) -> None:
        run_cli(monkeypatch, "analyze", str(holdings_files[0]))

        out = capsys.readouterr().out
        assert "at least two" in out

    def test_missing_file(self, monkeypatch, capsys, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as excinfo:
            run_cli(monkeypatch, "analyze", str(tmp_path / "missing.txt"))

        assert excinfo.value.code == 1
        assert "File not found" in capsys.readouterr().out

    def test_file_without_holdings(self, monkeypatch, capsys, tmp_path: Path, holdings_files: list[Path]) -> None:
        empty = tmp_path / "empty.txt"
        empty.write_text("\n\n")

        with pytest.raises(SystemExit) as excinfo:
            run_cli(monkeypatch, "analyze", str(holdings_files[0]), str(empty))

        assert excinfo.value.code == 1
        assert "empty.txt" in capsys.readouterr().out

    def test_no_command_prints_help(self, monkeypatch) -> None:
        with pytest.raises(SystemExit) as excinfo:
            run_cli(monkeypatch)

        assert excinfo.value.code == 1
