"""
Right-hand side of an inextensible elastic filament driven by a rotating
magnetic field.

The rod is discretised into N+1 nodes. Its unconstrained dynamics are
dr/dt = A r + F(t), with A the bending stiffness and F the magnetic end
forces. Inextensibility is enforced by projecting onto the tangent space of
the segment-length constraints:

    dr/dt = P(r) (A r + F(t)),    P = I - J^T (J J^T)^-1 J

A FilamentModel owns every buffer it needs, so repeated evaluations do not
allocate when an output array is passed in. Use one instance per run.
"""

import numpy as np

from .constraints import ConstraintProjector
from .errors import ConfigurationError
from .forces import RotatingMagneticForce
from .stiffness import stiffness_matrix

_SHAPE_AXES = {"straight_x": 0, "straight_y": 1, "straight_z": 2}


def initial_configuration(N, shape="straight_x"):
    """
    Straight rod of unit length along one axis.

    Args:
        N: Number of segments.
        shape: "straight_x", "straight_y" or "straight_z".

    Returns:
        Rod state of length 3(N+1).
    """
    if shape not in _SHAPE_AXES:
        raise ConfigurationError(
            f"Unknown initial configuration {shape!r}. "
            f"Options: {', '.join(sorted(_SHAPE_AXES))}"
        )
    if N < 1:
        raise ConfigurationError(f"N must be >= 1, got {N}")
    r = np.zeros(3 * (N + 1))
    r[_SHAPE_AXES[shape]::3] = np.linspace(0.0, 1.0, N + 1)
    return r


class FilamentModel:
    """
    Constrained right-hand side of an N-segment filament.

    Builds the stiffness matrix once and owns the projector, force and scratch
    buffers. Callable as fun(t, y) and jac(t, y) for scipy.integrate.solve_ivp.
    """

    def __init__(self, N=20, mu=None, Cm=32.0, omega=200.0, force=None, pivot_tol=1e-12):
        if not isinstance(N, (int, np.integer)) or isinstance(N, bool) or N < 3:
            raise ConfigurationError(f"N must be an integer >= 3, got {N!r}")
        if mu is None:
            mu = float(N)
        for name, value in (("mu", mu), ("Cm", Cm), ("omega", omega), ("pivot_tol", pivot_tol)):
            if not np.isfinite(value) or value < 0:
                raise ConfigurationError(f"{name} must be finite and >= 0, got {value!r}")

        self.N = int(N)
        self.mu = float(mu)
        self.Cm = float(Cm)
        self.omega = float(omega)
        self.size = 3 * (self.N + 1)

        self.A = stiffness_matrix(self.N, self.mu)
        self.projector = ConstraintProjector(self.N, pivot_tol)
        if force is None:
            force = RotatingMagneticForce(self.N, self.mu, self.Cm, self.omega)
        self.force = force

        # Owned copy of the state, force vector and scratch buffers
        self.r = np.zeros(self.size)
        self.F = np.zeros(self.size)
        self.S1 = np.zeros(self.size)
        self.S2 = np.zeros(self.size)

    @property
    def P(self):
        return self.projector.P

    @property
    def J(self):
        return self.projector.J

    def _load_state(self, state):
        state = np.asarray(state)
        if state.shape != (self.size,):
            raise ConfigurationError(
                f"Expected a state of shape ({self.size},), got {state.shape}"
            )
        np.copyto(self.r, state)
        self.projector.update(self.r)

    def evaluate(self, state, t, out=None):
        """
        Constrained time derivative of the rod state.

        Args:
            state: Rod state of length 3(N+1). Not retained.
            t: Simulation time; any order of calls is allowed.
            out: Optional array receiving the result.

        Returns:
            dr/dt = P (A r + F(t)).

        Raises:
            DegenerateConfiguration: if a segment has collapsed.
        """
        self._load_state(state)
        self.force.compute_force(self.r, t, self.F)

        np.matmul(self.A, self.r, out=self.S1)
        self.S1 += self.F
        np.matmul(self.P, self.S1, out=self.S2)

        if out is None:
            return self.S2.copy()
        np.copyto(out, self.S2)
        return out

    def analytic_jacobian(self, state, t, out=None):
        """Jacobian P A of the right-hand side, with P frozen at `state`."""
        self._load_state(state)
        if out is None:
            out = np.empty((self.size, self.size))
        np.matmul(self.P, self.A, out=out)
        return out

    def initial_configuration(self, shape="straight_x"):
        return initial_configuration(self.N, shape)

    # scipy.integrate.solve_ivp call signatures
    def __call__(self, t, y):
        return self.evaluate(y, t)

    def jac(self, t, y):
        return self.analytic_jacobian(y, t)

    def __repr__(self):
        return (
            f"{type(self).__name__}(N={self.N}, mu={self.mu}, Cm={self.Cm}, "
            f"omega={self.omega}, force={self.force!r})"
        )


# --- Functional interface ---

def initialize(N, mu=None, Cm=32.0, omega=200.0, **kwargs):
    """Build a FilamentModel: stiffness matrix plus buffers sized to N."""
    return FilamentModel(N, mu=mu, Cm=Cm, omega=omega, **kwargs)


def evaluate(handle, state, time, out=None):
    return handle.evaluate(state, time, out=out)


def analytic_jacobian(handle, state, time, out=None):
    return handle.analytic_jacobian(state, time, out=out)


def model_from_params(p):
    """FilamentModel from a parameter dictionary (see filament.params)."""
    return FilamentModel(
        p["N"], mu=p["mu"], Cm=p["Cm"], omega=p["omega"], pivot_tol=p["pivot_tol"]
    )
