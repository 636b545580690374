"""Tests for the profilefit command-line entry point."""

import numpy as np
import pytest

from profilefit.io.config_reader import read_config_file_with_limits
from profilefit.scripts.profilefit import build_parser, main


@pytest.fixture
def profile_path(write_file, exponential_mu):
    r = np.linspace(0.0, 40.0, 21)
    rows = "\n".join(f"{x:.3f} {mu:.6f} 0.05" for x, mu in zip(r, exponential_mu(r, 18.0, 10.0)))
    return write_file("profile.dat", "# r mu err\n" + rows + "\n")


class TestParser:

    def test_defaults(self):
        args = build_parser().parse_args(["cfg.txt", "prof.dat"])
        assert args.generations is None
        assert args.seed is None
        assert not args.list_functions

    def test_quiet_and_debug_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--quiet", "--debug"])


class TestListing:

    def test_list_functions(self, capsys):
        assert main(["--list-functions"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("Available function/components:\n")
        assert "Sersic-1D" in out

    def test_list_parameters(self, capsys):
        assert main(["--list-parameters"]) == 0
        out = capsys.readouterr().out
        assert "FUNCTION Exponential-1D\nmu_0\nh\n" in out


class TestRun:

    def test_fit_and_write_output(self, write_file, exponential_fit_config_text,
                                  profile_path, tmp_path, capsys):
        config = write_file("config.txt", exponential_fit_config_text)
        out = tmp_path / "bestfit.txt"
        status = main([str(config), str(profile_path), "--generations", "40",
                       "--seed", "3", "-o", str(out), "--quiet"])
        assert status == 0

        stdout = capsys.readouterr().out
        assert "Best-fit parameters:" in stdout
        assert "Final chi^2" in stdout

        best = read_config_file_with_limits(out)
        assert best.function_names == ["Exponential-1D"]
        assert best.bounds[0].is_fixed
        assert best.parameters[1] == pytest.approx(18.0, abs=0.2)

    def test_generations_from_config(self, write_file, profile_path, capsys):
        config = write_file(
            "config.txt",
            "GENERATIONS 2\nZP 20\nX0 0 fixed\nFUNCTION Exponential-1D\nmu_0 18 15,22\nh 10 1,50\n",
        )
        assert main([str(config), str(profile_path), "--seed", "1", "-q"]) == 0
        assert "Generations: 2," in capsys.readouterr().out

    def test_missing_limits_is_an_error(self, write_file, profile_path, capsys):
        config = write_file(
            "config.txt", "ZP 20\nX0 0 fixed\nFUNCTION Exponential-1D\nmu_0 18\nh 10 1,50\n"
        )
        assert main([str(config), str(profile_path), "-q"]) == 1
        err = capsys.readouterr().err
        assert err.startswith("Error: parameter limits must be supplied")
        assert "mu_0 (#1)" in err

    def test_config_error_reports_line(self, write_file, profile_path, capsys):
        config = write_file("config.txt", "X0 0 fixed\nFUNCTION Exponential-1D\nmu_0 18 22,15\n")
        assert main([str(config), str(profile_path), "-q"]) == 1
        assert "line 3" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, profile_path, capsys):
        assert main([str(tmp_path / "none.txt"), str(profile_path)]) == 1
        assert "file not found" in capsys.readouterr().err

    def test_files_required(self):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 2


class TestInputErrors:

    def test_negative_seed_in_config(self, write_file, exponential_fit_config_text,
                                     profile_path, capsys):
        config = write_file("config.txt", "SEED -1\n" + exponential_fit_config_text)
        assert main([str(config), str(profile_path), "--generations", "2", "--quiet"]) == 1
        err = capsys.readouterr().err
        assert err.startswith("Error: line 1: SEED should be a non-negative integer")

    def test_negative_seed_on_command_line(self, write_file, exponential_fit_config_text,
                                           profile_path, capsys):
        config = write_file("config.txt", exponential_fit_config_text)
        with pytest.raises(SystemExit) as exc:
            main([str(config), str(profile_path), "--seed", "-3"])
        assert exc.value.code == 2
        assert "non-negative integer" in capsys.readouterr().err

    def test_config_not_utf8(self, tmp_path, exponential_fit_config_text, profile_path, capsys):
        config = tmp_path / "config.txt"
        config.write_bytes(b"# r\xe9sum\xe9\n" + exponential_fit_config_text.encode())
        assert main([str(config), str(profile_path), "--generations", "2", "--quiet"]) == 1
        err = capsys.readouterr().err
        assert err.startswith("Error: configuration file")
        assert "not valid UTF-8" in err
