import numpy as np
import pytest

from constants import M_CHIC1, Parameters
from main import calc_observable, quick_print, save_file, scan


def test_quick_print_expands_complex_columns(tmp_path):
    filename = tmp_path / "amplitude.dat"
    quick_print(filename, [1.0, 2.0], np.array([1 + 2j, 3 - 4j]), np.array([5.0, 6.0]))

    data = np.loadtxt(filename)
    assert data.shape == (2, 5)
    assert data[0] == pytest.approx([1.0, 1.0, 2.0, np.sqrt(5.0), 5.0])
    assert data[1] == pytest.approx([2.0, 3.0, -4.0, 5.0, 6.0])


def test_scan_records_failures_as_nan():
    def function(x):
        if x == 2.0:
            raise ValueError("no solution")
        return x**2

    result = scan(function, [1.0, 2.0, 3.0])
    assert result[0] == 1.0
    assert np.isnan(result[1])
    assert result[2] == 9.0


def test_parameters_filename_and_header():
    parameters = Parameters("dxs", "s", "omega exchange", {"mX": M_CHIC1, "L": 2})
    assert parameters.filename == "omega_exchange/dxs-vs-s-mX=3.511e+00-L=2.dat"
    assert parameters.header.splitlines() == [
        "amplitude = omega exchange",
        f"mX = {M_CHIC1}",
        "L = 2",
        "Columns:s,dxs",
    ]

    with pytest.raises(AssertionError):
        Parameters("dxs", "s", "omega", {"theta": 0.5})
    with pytest.raises(AssertionError):
        Parameters("dxs", "s", "omega", {"mX": M_CHIC1, "s": 20.0})


def test_save_file_appends_and_sorts(tmp_path):
    filepath = tmp_path / "scan.dat"
    header = "amplitude = omega\nColumns:s,dxs"

    save_file(filepath, header, np.array([[2.0, 20.0], [1.0, 10.0]]))
    save_file(filepath, header, np.array([[0.0, 0.5]]))

    data = np.loadtxt(filepath, delimiter=",")
    assert data[:, 0] == pytest.approx([0.0, 1.0, 2.0])
    assert data[:, 1] == pytest.approx([0.5, 10.0, 20.0])

    with open(filepath) as f:
        lines = f.readlines()
    assert lines[0].strip() == "# amplitude = omega"
    assert lines[1].strip() == "# Columns:s,dxs"


def test_save_file_refreshes_repeated_points(tmp_path):
    filepath = tmp_path / "scan.dat"
    header = "amplitude = omega\nColumns:s,dxs"

    save_file(filepath, header, np.array([[1.0, 10.0], [2.0, 20.0]]))
    save_file(filepath, header, np.array([2.0, 25.0]))

    data = np.loadtxt(filepath, delimiter=",", ndmin=2)
    assert data.shape == (2, 2)
    assert data[:, 1] == pytest.approx([10.0, 25.0])


def test_calc_observable_saves_scan(tmp_path):
    xs = np.linspace(20.0, 30.0, 5)
    params = {"mX": M_CHIC1, "theta": 45.0}

    result = calc_observable(
        lambda s: 2.0 * s, "dxs", "s", xs, params, "omega", directory=tmp_path, save=True
    )
    assert result == pytest.approx(2.0 * xs)

    filepath = tmp_path / Parameters("dxs", "s", "omega", params).filename
    assert filepath.is_file()
    assert np.loadtxt(filepath, delimiter=",") == pytest.approx(np.column_stack([xs, 2.0 * xs]))


def test_calc_observable_without_saving(tmp_path):
    result = calc_observable(np.sqrt, "dxs", "s", [4.0, 9.0], {"mX": M_CHIC1}, "omega")
    assert result == pytest.approx([2.0, 3.0])
    assert not any(tmp_path.iterdir())
