"""Unit tests for the magnetic forcing."""

import numpy as np
import pytest

from filament import NoMagneticForce, RotatingMagneticForce


N, MU, CM, OMEGA = 10, 10.0, 32.0, 200.0


@pytest.fixture
def force():
    return RotatingMagneticForce(N, MU, CM, OMEGA)


def test_end_forces_at_t0(force):
    F = force.compute_force(None, 0.0, np.full(3 * (N + 1), np.nan))
    expected = np.zeros(3 * (N + 1))
    expected[0] = -MU * CM
    expected[3 * N] = MU * CM
    assert np.allclose(F, expected)


def test_rotation_in_xy_plane(force):
    t = np.pi / (2 * OMEGA)
    F = force.compute_force(None, t, np.zeros(3 * (N + 1)))
    assert F[1] == pytest.approx(-MU * CM)
    assert F[3 * N + 1] == pytest.approx(MU * CM)
    assert F[0] == pytest.approx(0.0, abs=1e-9)
    assert F[2] == 0.0 and F[3 * N + 2] == 0.0


@pytest.mark.parametrize("t", [0.0, 1e-3, 0.0137, -0.5])
def test_torque_pair(force, t):
    F = force.compute_force(None, t, np.zeros(3 * (N + 1))).reshape(N + 1, 3)
    assert np.allclose(F[0], -F[-1])
    assert np.linalg.norm(F[0]) == pytest.approx(MU * CM)
    assert np.all(F[1:-1] == 0)


def test_non_monotonic_times(force):
    out = np.zeros(3 * (N + 1))
    late = force.compute_force(None, 0.02, out).copy()
    force.compute_force(None, 0.001, out)
    again = force.compute_force(None, 0.02, out)
    assert np.array_equal(late, again)


def test_returns_out(force):
    out = np.zeros(3 * (N + 1))
    assert force.compute_force(None, 0.1, out) is out


def test_no_force():
    out = np.ones(12)
    assert np.all(NoMagneticForce().compute_force(None, 1.0, out) == 0)
