"""Tests for the work-precision sweep and plotting helpers."""

import numpy as np
import pytest

import filament.benchmark as benchmark
from filament import DegenerateConfiguration, make_params
from filament.benchmark import (
    load_work_precision,
    save_work_precision,
    split_method,
    work_precision,
)
from filament.plotting import plot_rod, plot_work_precision


@pytest.fixture(scope="module")
def params():
    return make_params(N=6, Cm=4.0, total_time=0.002, benchmark_repeats=1,
                       reference_rtol=1e-11, reference_atol=1e-11, verbose=False)


@pytest.fixture(scope="module")
def points(params):
    return work_precision(params, methods=["Radau", "BDF-fd"], tolerances=[1e-4, 1e-7])


def test_split_method():
    assert split_method("Radau") == ("Radau", True)
    assert split_method("BDF-fd") == ("BDF", False)


def test_sweep(points):
    assert [(pt.method, pt.tol) for pt in points] == [
        ("Radau", 1e-4), ("Radau", 1e-7), ("BDF-fd", 1e-4), ("BDF-fd", 1e-7),
    ]
    for pt in points:
        assert pt.status == "ok"
        assert np.isfinite(pt.error) and pt.error >= 0
        assert pt.wall_time > 0
        assert pt.nfev > 0
    assert points[1].error < 1e-3


def test_failures_are_recorded(params, monkeypatch):
    solve_final = benchmark._solve_final

    def failing(model, r0, t_span, method, rtol, atol, use_jacobian):
        if method == "BDF":
            raise DegenerateConfiguration(0, 0.0)
        return solve_final(model, r0, t_span, method, rtol, atol, use_jacobian)

    monkeypatch.setattr(benchmark, "_solve_final", failing)
    reference = np.zeros(3 * 7)
    points = work_precision(params, methods=["BDF", "Radau"], tolerances=[1e-4],
                            reference=reference)
    assert points[0].status == "failed"
    assert np.isnan(points[0].error) and np.isnan(points[0].wall_time)
    assert points[1].status == "ok"


def test_csv_round_trip(tmp_path, points):
    points = points + [benchmark.WorkPrecisionPoint("LSODA", 1e-6, np.nan, np.nan, 0, 0, "failed")]
    path = save_work_precision(points, str(tmp_path / "wp.csv"))
    loaded = load_work_precision(path)
    assert [pt.method for pt in loaded] == [pt.method for pt in points]
    assert loaded[0].error == points[0].error
    assert np.isnan(loaded[-1].error)
    assert loaded[-1].status == "failed"


def test_plots(points):
    ax = plot_work_precision(points)
    assert len(ax.get_lines()) == 2

    X = np.zeros((5, 7, 3))
    X[:, :, 0] = np.linspace(0, 1, 7)
    ax = plot_rod(X, t=np.linspace(0, 1, 5), every=2)
    assert len(ax.get_lines()) == 3


def test_non_finite_result_is_failed(params, monkeypatch):
    class Result:
        success = True
        message = "ok"
        nfev = 1
        njev = 0
        y = np.full((3 * 7, 1), np.nan)

    monkeypatch.setattr(benchmark, "solve_ivp", lambda *args, **kwargs: Result())
    points = work_precision(params, methods=["Radau"], tolerances=[1e-4],
                            reference=np.zeros(3 * 7))
    assert points[0].status == "failed"
    assert np.isnan(points[0].error)
