"""
Command-line entry point: exit codes and printed output.
"""

import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))
sys.path.insert(0, str(Path(__file__).parent))

import pytest  # noqa: E402

import main as cli  # noqa: E402
from test_coefficients import write_table  # noqa: E402


class TestRun:

    def test_deterministic_run_prints_lift(self, capsys):
        assert cli.main([]) == 0
        out = capsys.readouterr().out
        assert out.strip().splitlines()[-1].startswith("Lift force = ")
        assert "density=" in out

    def test_environment_run(self, capsys):
        assert cli.main(["--configuration", "environment", "--samples", "200"]) == 0
        assert "Lift force = " in capsys.readouterr().out

    def test_table_selects_aoa_configuration(self, tmp_path, capsys):
        path = write_table(tmp_path / "all_angles.csv")
        report = tmp_path / "lift.json"
        assert cli.main([str(path), "--samples", "200", "--report", str(report)]) == 0

        data = json.loads(report.read_text())
        assert data["configuration"] == "aoa"
        assert data["lift_force"]["sample_count"] == 200
        assert "Lift force = " in capsys.readouterr().out


class TestFailures:

    def test_aoa_without_table_is_rejected(self, capsys):
        assert cli.main(["--configuration", "aoa"]) == 2
        assert "coefficient table" in capsys.readouterr().err

    def test_missing_table_file(self, tmp_path, capsys):
        assert cli.main([str(tmp_path / "absent.csv")]) == 2
        captured = capsys.readouterr()
        assert "Lift force" not in captured.out
        assert captured.err.startswith("ERROR")

    def test_short_row_aborts_without_lift(self, tmp_path, capsys):
        path = write_table(tmp_path / "short.csv", short_row=3)
        assert cli.main([str(path)]) == 1
        captured = capsys.readouterr()
        assert "Lift force" not in captured.out
        assert "Line 5" in captured.err

    def test_invalid_sample_count(self, capsys):
        assert cli.main(["--samples", "0"]) != 0


class TestInformational:

    def test_summary(self, capsys):
        assert cli.main(["--summary"]) == 0
        assert "NACA 2412" in capsys.readouterr().out

    def test_validate(self, capsys):
        assert cli.main(["--validate"]) == 0
        assert "Configuration valid" in capsys.readouterr().out

    def test_unknown_configuration_exits(self):
        with pytest.raises(SystemExit):
            cli.main(["--configuration", "bogus"])


class TestSmokeScript:

    def test_run_smoke_covers_all_configurations(self, tmp_path):
        sys.path.insert(0, str(REPO_ROOT / "scripts"))
        import smoke_test

        table = write_table(tmp_path / "all_angles.csv")
        results = smoke_test.run_smoke(table, tmp_path / "reports", sample_count=100)

        assert [r.inputs.configuration.value for r in results] == [
            "deterministic", "environment", "aoa",
        ]
        assert sorted(p.name for p in (tmp_path / "reports").iterdir()) == [
            "lift_aoa.json", "lift_deterministic.json", "lift_environment.json",
        ]
