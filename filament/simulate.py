import ast
import os
import time
from dataclasses import dataclass

import numpy as np
from scipy.integrate import solve_ivp

from .constraints import segment_lengths
from .errors import FilamentError
from .model import model_from_params
from .params import make_params

# solve_ivp methods that make use of a Jacobian
IMPLICIT_METHODS = ("Radau", "BDF", "LSODA")


@dataclass
class SimulationResult:
    t: np.ndarray  # (num_frames,)
    X: np.ndarray  # (num_frames, N+1, 3)
    nfev: int
    njev: int
    wall_time: float
    message: str
    length_drift: float  # Max relative deviation of a segment length from its initial value

    @property
    def final_state(self):
        return self.X[-1].ravel()


def solver_options(model, method, rtol, atol, use_jacobian=True):
    """Keyword arguments for solve_ivp; jac is only passed to implicit methods."""
    options = {"method": method, "rtol": rtol, "atol": atol}
    if use_jacobian and method in IMPLICIT_METHODS:
        options["jac"] = model.jac
    return options


def max_length_drift(X, lengths0):
    """Max over frames and segments of |l(t) - l(0)| / l(0)."""
    drift = 0.0
    for frame in X:
        drift = max(drift, float(np.max(np.abs(segment_lengths(frame) - lengths0) / lengths0)))
    return drift


def simulate(params=None, model=None, r0=None):
    """
    Integrate the filament with scipy.integrate.solve_ivp.

    Args:
        params: Parameter dictionary from make_params(); defaults to PARAMS.
        model: Optional prebuilt FilamentModel (must match params["N"]).
        r0: Optional initial state; defaults to params["initial_shape"].

    Returns:
        SimulationResult with num_frames snapshots.

    Raises:
        DegenerateConfiguration: a segment collapsed during the run.
        FilamentError: the integrator failed or produced NaN/Inf.
    """
    p = params if params is not None else make_params()
    verbose = p["verbose"]
    if model is None:
        model = model_from_params(p)
    if r0 is None:
        r0 = model.initial_configuration(p["initial_shape"])
    r0 = np.asarray(r0, dtype=np.float64)

    t_span = (p["t_start"], p["t_start"] + p["total_time"])
    t_eval = np.linspace(t_span[0], t_span[1], int(p["num_frames"]))
    options = solver_options(model, p["method"], p["rtol"], p["atol"], p["use_jacobian"])

    if verbose:
        print(f"Starting simulation for {p['total_time']}s with {p['method']} "
              f"(rtol={p['rtol']}, atol={p['atol']}, jacobian={'jac' in options}).")
        print(f"Rod: N={model.N} segments, mu={model.mu}, Cm={model.Cm}, omega={model.omega}")

    start_time = time.perf_counter()
    sol = solve_ivp(model, t_span, r0, t_eval=t_eval, **options)
    wall_time = time.perf_counter() - start_time

    if not sol.success:
        raise FilamentError(f"Integration with {p['method']} failed: {sol.message}")
    if not np.all(np.isfinite(sol.y)):
        raise FilamentError("NaN/Inf detected in coordinates. Simulation unstable.")

    X = sol.y.T.reshape(len(sol.t), model.N + 1, 3)
    drift = max_length_drift(X, segment_lengths(r0))
    result = SimulationResult(
        t=sol.t, X=X, nfev=int(sol.nfev), njev=int(sol.njev),
        wall_time=wall_time, message=sol.message, length_drift=drift,
    )

    if verbose:
        print(f"Simulation finished. Total wall time: {wall_time:.3f} seconds "
              f"({result.nfev} RHS evaluations, {result.njev} Jacobians).")
        print(f"Max relative segment length drift: {drift:.3e}")

    if p["save_history"]:
        save_history(result, p, p["history_dir"], verbose=verbose)
    return result


def save_history(result, params, history_dir="simulation_history", verbose=False):
    """Write history_X.txt and simulation_params.txt into history_dir."""
    os.makedirs(history_dir, exist_ok=True)
    num_frames, M, _ = result.X.shape

    path = os.path.join(history_dir, "history_X.txt")
    np.savetxt(path, result.X.reshape(num_frames * M, 3), fmt="%.16e", header="x y z", comments="")
    if verbose:
        print(f" -> Saved: {path}")

    path = os.path.join(history_dir, "simulation_params.txt")
    dt_snapshot = float(result.t[-1] - result.t[0]) / (num_frames - 1)
    with open(path, "w") as f:
        f.write(f"num_frames = {num_frames}\n")
        f.write(f"M = {M}\n")
        f.write(f"dt_snapshot = {dt_snapshot!r}\n")
        for key, value in params.items():
            if key in ("num_frames", "M", "dt_snapshot"):
                continue
            f.write(f"{key} = {_format_value(value)}\n")
    if verbose:
        print(f" -> Saved: {path}")
    return history_dir


def _format_value(value):
    if isinstance(value, np.generic):
        value = value.item()
    elif isinstance(value, (list, tuple)):
        value = [v.item() if isinstance(v, np.generic) else v for v in value]
    return f"{value}"


def _parse_value(value):
    """Numbers, booleans, None and lists come back typed, anything else as a string."""
    try:
        return ast.literal_eval(value)
    except (ValueError, TypeError, SyntaxError):
        pass
    try:
        return float(value)
    except ValueError:
        return value


def load_history(history_dir="simulation_history"):
    """
    Read back a saved run.

    Returns:
        params: dict parsed from simulation_params.txt
        t: snapshot times, shape (num_frames,)
        X: node positions, shape (num_frames, M, 3)
    """
    params_path = os.path.join(history_dir, "simulation_params.txt")
    x_path = os.path.join(history_dir, "history_X.txt")
    for path in (params_path, x_path):
        if not os.path.exists(path):
            raise FileNotFoundError(f"Missing history file: {path}")

    params = {}
    with open(params_path) as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            key, value = line.split(" = ", 1)
            params[key] = _parse_value(value)

    num_frames = int(params["num_frames"])
    M = int(params["M"])
    X = np.loadtxt(x_path, skiprows=1).reshape(num_frames, M, 3)
    t = float(params.get("t_start", 0.0)) + np.arange(num_frames) * float(params["dt_snapshot"])
    return params, t, X
