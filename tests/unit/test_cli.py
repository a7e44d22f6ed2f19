"""
Unit tests for the heated-plate command line.
"""

import pytest

from heated_plate.cli import EPSILON_MESSAGE, main
from heated_plate.utils.logging import configure_logging

SMALL = ["--rows", "3", "--cols", "3", "-e", "1.0"]

EXPECTED_FILE = "3\n3\n  0.00   0.00   0.00 \n100.00  75.00 100.00 \n100.00 100.00 100.00 \n"


@pytest.fixture(autouse=True)
def restore_logging():
    """Rebind log handlers to the real stderr once capture has ended."""
    yield
    configure_logging(level="WARNING")


class TestCliOutput:
    def test_verbose_run(self, capsys):
        assert main(SMALL) == 0
        out = capsys.readouterr().out
        assert "HEATED_PLATE_NUMPY" in out
        assert "  Spatial grid of 3 by 3 points." in out
        assert "  The iteration will be repeated until the change is <= 1.000000e+00" in out
        assert "  Number of threads =              1" in out
        assert "  MEAN = 62.500000" in out
        assert "         1  12.500000" in out
        assert "  Error tolerance achieved." in out
        assert "  Execution time = " in out
        assert "  Normal end of execution." in out

    def test_quiet_run(self, capsys):
        assert main(SMALL + ["-q"]) == 0
        assert capsys.readouterr().out == ""

    def test_quiet_with_time(self, capsys):
        assert main(SMALL + ["-q", "-t"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("  Execution time = ")
        assert "MEAN" not in out

    def test_output_file(self, tmp_path, capsys):
        target = tmp_path / "plate.txt"
        assert main(SMALL + ["-q", "-o", str(target)]) == 0
        assert target.read_text() == EXPECTED_FILE
        assert f"  Solution written to the output file '{target}'" in capsys.readouterr().out

    def test_threaded_backend_output_matches(self, tmp_path):
        target = tmp_path / "plate.txt"
        assert main(SMALL + ["-q", "--backend", "threaded", "--threads", "2", "-o", str(target)]) == 0
        assert target.read_text() == EXPECTED_FILE

    def test_non_option_arguments_echoed(self, capsys):
        assert main(["extra", *SMALL, "-q", "more"]) == 0
        out = capsys.readouterr().out
        assert "Non-option argument extra" in out
        assert "Non-option argument more" in out

    def test_list_backends(self, capsys):
        assert main(["--list-backends"]) == 0
        out = capsys.readouterr().out
        assert "numpy" in out
        assert "threaded" in out

    def test_help(self, capsys):
        assert main(["--help"]) == 0
        assert "--epsilon" in capsys.readouterr().out


class TestCliErrors:
    """Test exit codes for usage and runtime failures."""

    @pytest.mark.parametrize("value", ["0", "--epsilon=-0.5"])
    def test_non_positive_epsilon(self, capsys, value):
        argv = ["-e", value] if value == "0" else [value]
        assert main(argv) == 1
        assert EPSILON_MESSAGE in capsys.readouterr().out

    def test_unknown_option(self, capsys):
        assert main(["-x"]) == 1
        assert "No such option" in capsys.readouterr().err

    def test_missing_option_value(self):
        assert main(["-e"]) == 1

    def test_bad_epsilon_type(self):
        assert main(["-e", "abc"]) == 1

    def test_unknown_backend(self, capsys):
        assert main(SMALL + ["--backend", "fortran"]) == 1
        assert "backend" in capsys.readouterr().err

    def test_invalid_rows(self, capsys):
        assert main(["--rows", "0", "-q"]) == 1
        assert "rows" in capsys.readouterr().err

    def test_unwritable_output(self, tmp_path, capsys):
        target = tmp_path / "missing" / "plate.txt"
        assert main(SMALL + ["-q", "-o", str(target)]) == 2
        assert "OUTPUT_WRITE_FAILURE" in capsys.readouterr().err

    def test_iteration_cap(self, capsys):
        assert main(SMALL + ["--max-iterations", "1"]) == 2
        out = capsys.readouterr().out
        assert "Iteration limit of 1 reached" in out
        assert "Error tolerance achieved." not in out
