"""Tests for the command line entry point."""

import os

from filament.__main__ import build_parser, main, params_from_args


def test_parser_overrides():
    args = build_parser().parse_args(
        ["simulate", "--N", "7", "--tol", "1e-5", "--no-jacobian", "--quiet"]
    )
    p = params_from_args(args)
    assert p["N"] == 7 and p["mu"] == 7.0
    assert p["rtol"] == p["atol"] == 1e-5
    assert p["use_jacobian"] is False
    assert p["verbose"] is False


def test_simulate_command():
    result = main(["simulate", "--N", "5", "--Cm", "2", "--total-time", "0.001",
                   "--frames", "3", "--quiet"])
    assert result.X.shape == (3, 6, 3)


def test_benchmark_command(tmp_path):
    out = str(tmp_path / "wp.csv")
    points = main(["benchmark", "--N", "4", "--Cm", "2", "--total-time", "0.001",
                   "--methods", "Radau", "--tolerances", "1e-5", "--repeats", "1",
                   "--out", out, "--quiet"])
    assert len(points) == 1
    assert os.path.exists(out)
