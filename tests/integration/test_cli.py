"""Tests for the defcite command-line tool."""
import json

import pytest
from click.testing import CliRunner

from defcite.service.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def ml_file(tmp_path, ml_document):
    path = tmp_path / "machine_learning-intro.txt"
    path.write_text(ml_document, encoding="utf-8")
    return path


class TestExtractCommand:
    """Tests for `defcite extract`."""

    def test_json_output(self, runner, ml_file):
        result = runner.invoke(main, ["extract", str(ml_file), "machine learning", "--json"])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["confidence"] == "HIGH"
        assert payload["strategy"] == "direct"
        assert payload["candidates"][0]["score"] == 10

    def test_table_output(self, runner, ml_file):
        result = runner.invoke(main, ["extract", str(ml_file), "machine learning"])
        assert result.exit_code == 0
        assert "Confidence: HIGH (direct)" in result.output

    def test_no_candidates(self, runner, ml_file):
        result = runner.invoke(main, ["extract", str(ml_file), "blockchain"])
        assert result.exit_code == 0
        assert 'No definition candidates for "blockchain".' in result.output

    def test_unsupported_file(self, runner, tmp_path):
        path = tmp_path / "gambar.png"
        path.write_bytes(b"\x89PNG")
        result = runner.invoke(main, ["extract", str(path), "algoritma"])
        assert result.exit_code == 1


class TestProcessCommand:
    """Tests for `defcite process`."""

    def test_offline_json(self, runner, ml_file):
        """Offline runs use template paraphrases and still cite."""
        result = runner.invoke(main, [
            "process", str(ml_file), "machine learning",
            "--author", "Smith, J.", "--year", "2020", "--sentences", "3", "--offline", "--json",
        ])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["definition_found"] is True
        assert payload["confidence"] == "HIGH"
        assert payload["sentence_analysis"]["actual_sentences"] == 3
        assert payload["sentence_analysis"]["processing_success"] is True
        assert payload["citation"].startswith("Menurut Smith (2020), ")
        assert payload["bibliography"] == "Smith, J. (2020). Machine Learning Intro. Dokumen Akademik."

    def test_offline_text(self, runner, ml_file):
        result = runner.invoke(main, [
            "process", str(ml_file), "machine learning",
            "--author", "Smith", "--year", "2020", "--format", "mla", "--offline",
        ])
        assert result.exit_code == 0
        assert "Definition found: yes (HIGH)" in result.output
        assert "(Smith 2020)." in result.output

    def test_invalid_year(self, runner, ml_file):
        result = runner.invoke(main, [
            "process", str(ml_file), "machine learning", "--author", "Smith", "--year", "1700", "--offline",
        ])
        assert result.exit_code == 1
        assert "Publication year" in result.output
