"""External forces acting on the filament nodes."""

import numpy as np


class MagneticForce:
    """
    Interface for external forcing.

    Subclasses fill `out` (length 3(N+1), interleaved x, y, z) with the
    force at time t for the rod state `state` and return it.
    """

    def compute_force(self, state, t, out):
        raise NotImplementedError


class RotatingMagneticForce(MagneticForce):
    """
    Ferromagnetic rod in a field rotating in the x-y plane.

    The field exerts a torque on the rod, modelled as two opposite forces
    of magnitude mu*Cm at the free ends, rotating at angular frequency omega.
    """

    def __init__(self, N, mu, Cm, omega):
        self.N = N
        self.mu = mu
        self.Cm = Cm
        self.omega = omega

    def compute_force(self, state, t, out):
        amplitude = self.mu * self.Cm
        fx = amplitude * np.cos(self.omega * t)
        fy = amplitude * np.sin(self.omega * t)
        tail = 3 * self.N

        out[:] = 0.0
        out[0] = -fx
        out[1] = -fy
        out[tail] = fx
        out[tail + 1] = fy
        return out

    def __repr__(self):
        return (
            f"{type(self).__name__}(N={self.N}, mu={self.mu}, "
            f"Cm={self.Cm}, omega={self.omega})"
        )


class NoMagneticForce(MagneticForce):
    """Unforced rod, it only relaxes under bending."""

    def compute_force(self, state, t, out):
        out[:] = 0.0
        return out
