import copy

import numpy as np

from .errors import ConfigurationError

# --- Parameters ---
PARAMS = {
    # Rod properties
    "N": 20,  # Number of segments (the rod has N+1 nodes)
    "mu": None,  # Bending scale, A is multiplied by -mu**4. None -> 1/ds = N for a unit rod
    "initial_shape": "straight_x",  # Options: "straight_x", "straight_y", "straight_z"

    # Magnetic forcing (torque pair at the two free ends)
    "Cm": 32.0,  # Magnetic coupling constant
    "omega": 200.0,  # Angular frequency of the rotating field (rad/s)

    # Constraint projection
    "pivot_tol": 1e-12,  # Relative pivot threshold of the J J^T factorization

    # Time integration (scipy.integrate.solve_ivp)
    "t_start": 0.0,  # Start time (s)
    "total_time": 0.01,  # Length of the integration window (s)
    "method": "Radau",  # Any solve_ivp method name
    "rtol": 1e-6,
    "atol": 1e-6,
    "use_jacobian": True,  # Hand P*A to implicit methods instead of finite differences
    "num_frames": 101,  # Number of stored snapshots (including t_start)

    # Work-precision benchmark
    "benchmark_methods": ["Radau", "BDF", "LSODA", "Radau-fd", "BDF-fd"],
    "benchmark_tolerances": [1e-5, 1e-6, 1e-7, 1e-8],
    "benchmark_repeats": 3,  # Best-of-n wall time per point
    "reference_method": "Radau",
    "reference_rtol": 1e-12,
    "reference_atol": 1e-12,

    # Output
    "save_history": False,
    "history_dir": "simulation_history",
    "verbose": True,
}

_POSITIVE_KEYS = ("total_time", "rtol", "atol", "reference_rtol", "reference_atol")
_NON_NEGATIVE_KEYS = ("mu", "Cm", "omega", "pivot_tol")


def make_params(overrides=None, **kwargs):
    """
    Copy of PARAMS with overrides applied and derived values filled in.

    Args:
        overrides: Optional dict of parameter overrides.
        **kwargs: More overrides, applied after `overrides`.

    Returns:
        A new, validated parameter dictionary.
    """
    p = copy.deepcopy(PARAMS)
    updates = dict(overrides or {})
    updates.update(kwargs)
    unknown = sorted(set(updates) - set(PARAMS) - {"L_eff", "ds"})
    if unknown:
        raise ConfigurationError(f"Unknown parameter(s): {', '.join(unknown)}")
    p.update(updates)

    if not isinstance(p["N"], (int, np.integer)) or isinstance(p["N"], bool):
        raise ConfigurationError(f"N must be an integer, got {p['N']!r}")
    if p["mu"] is None:
        p["mu"] = float(p["N"])
    p["L_eff"] = 1.0
    p["ds"] = p["L_eff"] / p["N"] if p["N"] > 0 else np.nan

    validate_params(p)
    return p


def validate_params(p):
    """Raise ConfigurationError if the parameter dictionary is unusable."""
    n = p["N"]
    if not isinstance(n, (int, np.integer)) or isinstance(n, bool) or n < 3:
        raise ConfigurationError(f"N must be an integer >= 3, got {n!r}")
    for key in _NON_NEGATIVE_KEYS:
        value = p[key]
        if value is None or not np.isfinite(value) or value < 0:
            raise ConfigurationError(f"{key} must be finite and >= 0, got {value!r}")
    for key in _POSITIVE_KEYS:
        value = p[key]
        if not np.isfinite(value) or value <= 0:
            raise ConfigurationError(f"{key} must be finite and > 0, got {value!r}")
    if not np.isfinite(p["t_start"]):
        raise ConfigurationError(f"t_start must be finite, got {p['t_start']!r}")
    if int(p["num_frames"]) < 2:
        raise ConfigurationError(f"num_frames must be >= 2, got {p['num_frames']!r}")
    if int(p["benchmark_repeats"]) < 1:
        raise ConfigurationError("benchmark_repeats must be >= 1")
    return p
