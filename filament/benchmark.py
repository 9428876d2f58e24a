"""
Work-precision data for scipy's integrators on the filament problem.

Every (method, tolerance) pair is solved from the straight initial rod to
t_start + total_time and compared against a tight-tolerance reference. A
method name ending in "-fd" runs the implicit method without the analytic
Jacobian, so scipy falls back to finite differences.
"""

import csv
import time
from dataclasses import dataclass

import numpy as np
from scipy.integrate import solve_ivp

from .errors import FilamentError
from .model import model_from_params
from .params import make_params
from .simulate import solver_options

FD_SUFFIX = "-fd"


@dataclass
class WorkPrecisionPoint:
    method: str
    tol: float
    error: float
    wall_time: float
    nfev: int
    njev: int
    status: str


def split_method(name):
    """'BDF-fd' -> ('BDF', False); 'Radau' -> ('Radau', True)."""
    if name.endswith(FD_SUFFIX):
        return name[: -len(FD_SUFFIX)], False
    return name, True


def _solve_final(model, r0, t_span, method, rtol, atol, use_jacobian):
    options = solver_options(model, method, rtol, atol, use_jacobian)
    sol = solve_ivp(model, t_span, r0, t_eval=[t_span[1]], **options)
    if not sol.success:
        raise FilamentError(f"{method} failed: {sol.message}")
    if not np.all(np.isfinite(sol.y)):
        raise FilamentError(f"{method} returned a non-finite state")
    return sol


def reference_solution(params=None):
    """Final state of a tight-tolerance solve, used as ground truth."""
    p = params if params is not None else make_params()
    model = model_from_params(p)
    r0 = model.initial_configuration(p["initial_shape"])
    t_span = (p["t_start"], p["t_start"] + p["total_time"])
    sol = _solve_final(model, r0, t_span, p["reference_method"],
                       p["reference_rtol"], p["reference_atol"], True)
    return sol.y[:, -1]


def work_precision(params=None, methods=None, tolerances=None, repeats=None, reference=None):
    """
    Sweep methods and tolerances.

    Args:
        params: Parameter dictionary; defaults to PARAMS.
        methods: solve_ivp method names, optionally with the "-fd" suffix.
        tolerances: Values used for both rtol and atol.
        repeats: Runs per point; the fastest wall time is kept.
        reference: Precomputed reference final state.

    Returns:
        List of WorkPrecisionPoint, in sweep order. Failed runs have
        status "failed" and NaN error and wall time.
    """
    p = params if params is not None else make_params()
    methods = methods if methods is not None else p["benchmark_methods"]
    tolerances = tolerances if tolerances is not None else p["benchmark_tolerances"]
    repeats = int(repeats if repeats is not None else p["benchmark_repeats"])
    verbose = p["verbose"]

    if reference is None:
        if verbose:
            print(f"Computing reference with {p['reference_method']} "
                  f"(rtol={p['reference_rtol']}, atol={p['reference_atol']})...")
        reference = reference_solution(p)

    t_span = (p["t_start"], p["t_start"] + p["total_time"])
    points = []
    for name in methods:
        method, use_jacobian = split_method(name)
        for tol in tolerances:
            # Fresh model per point, buffers are not shared between runs
            model = model_from_params(p)
            r0 = model.initial_configuration(p["initial_shape"])
            best = np.inf
            try:
                for _ in range(repeats):
                    start = time.perf_counter()
                    sol = _solve_final(model, r0, t_span, method, tol, tol, use_jacobian)
                    best = min(best, time.perf_counter() - start)
            except FilamentError as e:
                if verbose:
                    print(f"{name:>10s} tol={tol:.0e}: failed ({e})")
                points.append(WorkPrecisionPoint(name, tol, np.nan, np.nan, 0, 0, "failed"))
                continue

            error = float(np.linalg.norm(sol.y[:, -1] - reference))
            point = WorkPrecisionPoint(name, tol, error, best, int(sol.nfev), int(sol.njev), "ok")
            points.append(point)
            if verbose:
                print(f"{name:>10s} tol={tol:.0e}: error={error:.3e}, "
                      f"time={best:.4f}s, nfev={point.nfev}, njev={point.njev}")
    return points


def save_work_precision(points, path):
    """Write the sweep as CSV with a header row."""
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["method", "tol", "error", "wall_time", "nfev", "njev", "status"])
        for pt in points:
            writer.writerow([pt.method, repr(float(pt.tol)), repr(float(pt.error)), repr(float(pt.wall_time)),
                             pt.nfev, pt.njev, pt.status])
    return path


def load_work_precision(path):
    points = []
    with open(path, newline="") as f:
        for row in csv.DictReader(f):
            points.append(WorkPrecisionPoint(
                row["method"], float(row["tol"]), float(row["error"]),
                float(row["wall_time"]), int(row["nfev"]), int(row["njev"]), row["status"],
            ))
    return points
