"""
Inextensible elastic filament in a rotating magnetic field.

Main components:
- model: constrained right-hand side dr/dt = P (A r + F) and its Jacobian P A
- simulate: integration with scipy.integrate.solve_ivp, history files
- benchmark: work-precision sweeps over scipy's integrators
"""

from .errors import FilamentError, ConfigurationError, DegenerateConfiguration
from .params import PARAMS, make_params
from .stiffness import stiffness_matrix
from .forces import MagneticForce, RotatingMagneticForce, NoMagneticForce
from .constraints import ConstraintProjector, constraint_jacobian, segment_lengths
from .model import (
    FilamentModel,
    initialize,
    evaluate,
    analytic_jacobian,
    initial_configuration,
)
from .simulate import simulate, save_history, load_history, SimulationResult
from .benchmark import work_precision, reference_solution, WorkPrecisionPoint

__all__ = [
    # Errors
    "FilamentError",
    "ConfigurationError",
    "DegenerateConfiguration",

    # Configuration
    "PARAMS",
    "make_params",

    # Model
    "stiffness_matrix",
    "MagneticForce",
    "RotatingMagneticForce",
    "NoMagneticForce",
    "ConstraintProjector",
    "constraint_jacobian",
    "segment_lengths",
    "FilamentModel",
    "initialize",
    "evaluate",
    "analytic_jacobian",
    "initial_configuration",

    # Drivers
    "simulate",
    "save_history",
    "load_history",
    "SimulationResult",
    "work_precision",
    "reference_solution",
    "WorkPrecisionPoint",
]
