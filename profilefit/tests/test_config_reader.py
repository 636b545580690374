"""Tests for profilefit.io.config_reader -- configuration file parsing."""

import pytest

from profilefit.errors import (
    BoundValidationError,
    ConfigFileError,
    IncompleteXYError,
    InvalidValueError,
    NoFunctionSectionError,
    NoFunctionsError,
    StructuralConfigError,
)
from profilefit.io.config_reader import (
    BoundKind,
    GlobalOption,
    ParameterBound,
    parse_config,
    read_config_file,
    read_config_file_with_limits,
)


def _config(*param_lines, header="X0 0.0 fixed\nFUNCTION Gaussian-1D\n"):
    return header + "\n".join(param_lines) + "\n"


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------

class TestBasicParse:

    def test_function_names_in_order(self, basic_config_text):
        spec = parse_config(basic_config_text)
        assert spec.function_names == ['Exponential-1D', 'Gaussian-1D']

    def test_parameter_values(self, basic_config_text):
        spec = parse_config(basic_config_text)
        assert spec.parameters == [0.0, 18.0, 10.0, 17.0, 1.5]

    def test_parameter_labels_kept(self, basic_config_text):
        spec = parse_config(basic_config_text)
        assert spec.parameter_labels == ['X0', 'mu_0', 'h', 'mu_0', 'sigma']

    def test_options_collected(self, basic_config_text):
        spec = parse_config(basic_config_text)
        assert [(o.name, o.value) for o in spec.options] == [('GAIN', '4.5'), ('ZP', '20.0')]

    def test_option_line_numbers(self, basic_config_text):
        spec = parse_config(basic_config_text)
        assert [o.line_number for o in spec.options] == [2, 3]

    def test_single_set(self, basic_config_text):
        spec = parse_config(basic_config_text)
        assert spec.set_starts == [0]

    def test_two_sets(self, two_set_config_text):
        spec = parse_config(two_set_config_text)
        assert spec.function_names == ['Sersic-1D', 'Delta-1D', 'Sech2-1D']
        assert spec.set_starts == [0, 1]
        assert [[f.name for f in s] for s in spec.function_sets()] == [
            ['Sersic-1D'], ['Delta-1D', 'Sech2-1D'],
        ]

    def test_parsed_function_counts(self, two_set_config_text):
        spec = parse_config(two_set_config_text)
        assert [f.n_params for f in spec.functions] == [3, 1, 2]
        # X0 of set 1 sits at index 0, Sersic params 1-3, X0 of set 2 at 4
        assert [f.param_start for f in spec.functions] == [1, 5, 6]

    def test_function_line_numbers(self, two_set_config_text):
        spec = parse_config(two_set_config_text)
        assert spec.functions[0].line_number == 2
        assert spec.functions[1].line_number == 8

    def test_accepts_iterable_of_lines(self, basic_config_text):
        spec = parse_config(basic_config_text.splitlines(keepends=True))
        assert spec.function_names == ['Exponential-1D', 'Gaussian-1D']

    def test_fortran_exponent(self):
        spec = parse_config(_config("mu_0 1.5D+01", "sigma 2.0d0"))
        assert spec.parameters[1:] == [15.0, 2.0]

    def test_comments_and_blank_lines_ignored(self):
        text = """
        # leading comment

        X0   5.0    # centre
           # indented comment
        FUNCTION  Delta-1D   # a point source
        mu_0   12.0
        """
        spec = parse_config(text)
        assert spec.parameters == [5.0, 12.0]
        assert spec.function_names == ['Delta-1D']

    def test_malformed_option_skipped(self):
        text = "NCOLS 100 200\nNROWS 50\n" + _config("mu_0 1", "sigma 2")
        spec = parse_config(text)
        assert spec.options == [GlobalOption('NROWS', '50', 2)]


class TestRoundTripCounts:
    """Parameter and function counts match the number of declaring lines."""

    def test_counts_match_lines(self, two_set_config_text):
        spec = parse_config(two_set_config_text)
        lines = [ln.split('#')[0].split() for ln in two_set_config_text.splitlines()]
        lines = [ln for ln in lines if ln]
        n_function_lines = sum(1 for ln in lines if ln[0] == 'FUNCTION')
        assert len(spec.functions) == n_function_lines
        assert len(spec.parameters) == len(lines) - n_function_lines
        assert len(spec.bounds) == len(spec.parameters)


# ---------------------------------------------------------------------------
# Structural errors
# ---------------------------------------------------------------------------

class TestStructuralErrors:

    def test_no_x0(self):
        with pytest.raises(NoFunctionSectionError) as exc:
            parse_config("ZP 20\nFUNCTION Gaussian-1D\nmu_0 1\nsigma 2\n")
        assert exc.value.line_number is None

    def test_empty_input(self):
        with pytest.raises(NoFunctionSectionError):
            parse_config("# nothing here\n\n")

    def test_x0_without_function(self):
        with pytest.raises(NoFunctionsError) as exc:
            parse_config("ZP 20\nX0 1.0\nmu_0 20\n")
        assert exc.value.line_number is None

    def test_function_before_x0_only(self):
        with pytest.raises(NoFunctionsError):
            parse_config("FUNCTION Gaussian-1D\nX0 1.0\nmu_0 20\n")

    def test_2d_missing_y0(self):
        text = "NCOLS 100\n\nX0 10.0\nFUNCTION Gaussian-1D\nmu_0 20\nsigma 2\n"
        with pytest.raises(IncompleteXYError) as exc:
            parse_config(text, mode_2d=True)
        assert exc.value.line_number == 3

    def test_2d_x0_last_line(self):
        with pytest.raises(IncompleteXYError) as exc:
            parse_config("FUNCTION Gaussian-1D\nX0 1.0\n", mode_2d=True)
        assert exc.value.line_number == 2

    def test_2d_missing_y0_in_later_set(self):
        text = ("X0 1\nY0 2\nFUNCTION Delta-1D\nmu_0 20\n"
                "X0 5\nFUNCTION Delta-1D\nmu_0 20\n")
        with pytest.raises(IncompleteXYError) as exc:
            parse_config(text, mode_2d=True)
        assert exc.value.line_number == 5

    def test_2d_valid(self):
        text = "X0 1\nY0 2\nFUNCTION Delta-1D\nmu_0 20\n"
        spec = parse_config(text, mode_2d=True)
        assert spec.parameters == [1.0, 2.0, 20.0]
        assert spec.mode_2d

    def test_1d_mode_treats_y0_as_parameter(self):
        spec = parse_config("X0 1\nY0 2\nFUNCTION Delta-1D\nmu_0 20\n")
        assert spec.parameters == [1.0, 2.0, 20.0]

    def test_function_without_name(self):
        with pytest.raises(StructuralConfigError) as exc:
            parse_config("X0 1\nFUNCTION\nmu_0 20\n")
        assert exc.value.line_number == 2

    def test_parameter_line_without_value(self):
        with pytest.raises(StructuralConfigError) as exc:
            parse_config(_config("mu_0"))
        assert exc.value.line_number == 3

    def test_error_message_includes_line(self):
        with pytest.raises(ConfigFileError, match=r"^line 3: "):
            parse_config(_config("mu_0 abc"))


# ---------------------------------------------------------------------------
# Numeric values
# ---------------------------------------------------------------------------

class TestNumericValues:

    def test_malformed_value_is_error(self):
        with pytest.raises(InvalidValueError) as exc:
            parse_config(_config("mu_0 20", "sigma two"))
        assert exc.value.line_number == 4
        assert exc.value.token == 'two'

    def test_non_finite_value_is_error(self):
        with pytest.raises(InvalidValueError):
            parse_config(_config("mu_0 nan", "sigma 1"))

    def test_malformed_value_rejected_by_value_only_variant(self):
        with pytest.raises(InvalidValueError):
            parse_config(_config("mu_0 20x", "sigma 1"), read_limits=False)


# ---------------------------------------------------------------------------
# Parameter limits
# ---------------------------------------------------------------------------

class TestLimits:

    def test_limited(self):
        spec = parse_config(_config("I_0 100 50,150", "sigma 2 1,3"))
        assert spec.parameters[1] == 100.0
        assert spec.bounds[1] == ParameterBound.limited(50, 150)
        assert spec.bounds[1].kind is BoundKind.LIMITED

    def test_fixed(self):
        spec = parse_config(_config("I_0 100 fixed", "sigma 2"))
        assert spec.parameters[1] == 100.0
        assert spec.bounds[1].is_fixed

    def test_free_when_absent(self):
        spec = parse_config(_config("I_0 100", "sigma 2"))
        assert spec.bounds[1].is_free
        assert spec.bounds[2].is_free

    def test_value_outside_limits(self):
        with pytest.raises(BoundValidationError) as exc:
            parse_config(_config("I_0 200 50,150", "sigma 2"))
        assert exc.value.line_number == 3
        assert exc.value.parameter_name == 'I_0'

    def test_value_on_limit_accepted(self):
        spec = parse_config(_config("I_0 150 50,150", "sigma 50 50,60"))
        assert spec.bounds[1].contains(150.0)
        assert spec.bounds[2].contains(50.0)

    def test_reversed_limits(self):
        with pytest.raises(BoundValidationError, match="must be <="):
            parse_config(_config("I_0 100 150,50", "sigma 2"))

    def test_degenerate_limits_allowed(self):
        spec = parse_config(_config("I_0 100 100,100", "sigma 2"))
        assert spec.bounds[1] == ParameterBound.limited(100, 100)

    def test_unrecognized_limit_token(self):
        with pytest.raises(BoundValidationError) as exc:
            parse_config(_config("I_0 100 frozen", "sigma 2"))
        assert exc.value.token == 'frozen'

    def test_malformed_limit_numbers(self):
        with pytest.raises(BoundValidationError):
            parse_config(_config("I_0 100 50,abc", "sigma 2"))

    def test_too_many_limit_pieces(self):
        with pytest.raises(BoundValidationError):
            parse_config(_config("I_0 100 1,2,3", "sigma 2"))

    def test_limits_found_flag(self):
        assert parse_config(_config("I_0 100 50,150", "sigma 2")).limits_found
        assert not parse_config("X0 0\nFUNCTION Gaussian-1D\nI_0 1\nsigma 2\n").limits_found

    def test_limits_on_x0(self):
        spec = parse_config("X0 10 5,15\nFUNCTION Delta-1D\nmu_0 20 fixed\n")
        assert spec.bounds[0] == ParameterBound.limited(5, 15)

    def test_bad_limit_in_later_line_aborts_parse(self):
        text = _config("I_0 100 50,150", "sigma 9 1,3")
        with pytest.raises(BoundValidationError) as exc:
            parse_config(text)
        assert exc.value.line_number == 4

    def test_value_only_variant_ignores_limits(self):
        spec = parse_config(_config("I_0 200 50,150", "sigma 2 bogus"), read_limits=False)
        assert spec.parameters == [0.0, 200.0, 2.0]
        assert all(b.is_free for b in spec.bounds)
        assert not spec.limits_found


class TestParameterBound:

    def test_limited_rejects_reversed(self):
        with pytest.raises(ValueError):
            ParameterBound.limited(2.0, 1.0)

    def test_free_rejects_limits(self):
        with pytest.raises(ValueError):
            ParameterBound(BoundKind.FREE, 1.0, 2.0)

    def test_limit_spec_text(self):
        assert ParameterBound.fixed().to_limit_spec() == 'fixed'
        assert ParameterBound.limited(0.5, 10).to_limit_spec() == '0.5,10'
        assert ParameterBound.free().to_limit_spec() == ''


# ---------------------------------------------------------------------------
# File readers
# ---------------------------------------------------------------------------

class TestFileReaders:

    def test_read_with_limits(self, write_file, basic_config_text):
        path = write_file("model.txt", basic_config_text)
        spec = read_config_file_with_limits(path)
        assert spec.limits_found
        assert spec.bounds[0].is_fixed
        assert spec.bounds[2] == ParameterBound.limited(1, 50)

    def test_read_values_only(self, write_file, basic_config_text):
        path = write_file("model.txt", basic_config_text)
        spec = read_config_file(str(path))
        assert spec.parameters == [0.0, 18.0, 10.0, 17.0, 1.5]
        assert not spec.limits_found

    def test_line_numbers_refer_to_file(self, write_file):
        path = write_file("bad.txt", "# header\n\nX0 0\nFUNCTION Delta-1D\n\nmu_0 30 10,20\n")
        with pytest.raises(BoundValidationError) as exc:
            read_config_file_with_limits(path)
        assert exc.value.line_number == 6


class TestFileEncoding:

    @pytest.mark.parametrize("reader", [read_config_file, read_config_file_with_limits])
    def test_invalid_utf8(self, tmp_path, basic_config_text, reader):
        path = tmp_path / "latin1.txt"
        path.write_bytes(b"# r\xe9sum\xe9\n" + basic_config_text.encode())
        with pytest.raises(ConfigFileError, match="not valid UTF-8") as exc:
            reader(path)
        assert str(path) in str(exc.value)
