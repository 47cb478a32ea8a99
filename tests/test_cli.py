"""
Tests for the command line interface.
"""

from typer.testing import CliRunner

from pyslopes import __version__
from pyslopes.cli import app


runner = CliRunner()


class TestVersion:

    def test_prints_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert f"pyslopes {__version__}" in result.output


class TestFitCommand:

    def test_single_run_report(self, boston_csv):
        result = runner.invoke(app, ["fit", str(boston_csv)])
        assert result.exit_code == 0, result.output
        assert "Marginal Regression Results" in result.output
        assert "Mean-Square Error" in result.output
        assert "AIC" in result.output
        assert "lstat" in result.output
        assert "Starting all" not in result.output

    def test_repeated_runs(self, boston_csv):
        result = runner.invoke(app, ["fit", str(boston_csv), "--runs", "2", "--backend", "sequential"])
        assert result.exit_code == 0, result.output
        assert "Starting all 2 runs" in result.output
        assert "Run 1:" in result.output
        assert "Run 2 finished. Time taken:" in result.output
        assert "All runs finished. Total time taken:" in result.output
        assert result.output.count("Mean-Square Error") == 2

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["fit", str(tmp_path / "absent.csv")])
        assert result.exit_code == 1
        assert "Mean-Square Error" not in result.output

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "narrow.csv"
        path.write_text("a,b\n1,2\n")
        result = runner.invoke(app, ["fit", str(path)])
        assert result.exit_code == 1

    def test_unknown_backend(self, boston_csv):
        result = runner.invoke(app, ["fit", str(boston_csv), "--backend", "gpu"])
        assert result.exit_code != 0

    def test_zero_runs_rejected(self, boston_csv):
        result = runner.invoke(app, ["fit", str(boston_csv), "--runs", "0"])
        assert result.exit_code != 0

    def test_bad_log_level(self, boston_csv):
        result = runner.invoke(app, ["fit", str(boston_csv), "--log-level", "CHATTY"])
        assert result.exit_code != 0

    def test_directory_reported_not_raised(self, tmp_path):
        result = runner.invoke(app, ["fit", str(tmp_path)])
        assert result.exit_code == 1
        assert not isinstance(result.exception, OSError)
        assert "Error reading data" in result.output

    def test_latin1_file_fits(self, tmp_path, boston_csv):
        path = tmp_path / "latin1.csv"
        text = boston_csv.read_text().replace("Town 0", "Caf\xe9")
        path.write_bytes(text.encode('latin-1'))
        result = runner.invoke(app, ["fit", str(path)])
        assert result.exit_code == 0, result.output
        assert "Mean-Square Error" in result.output
