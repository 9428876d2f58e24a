"""
Command line entry point.

    python -m filament simulate --N 20 --method Radau --tol 1e-6 --save
    python -m filament benchmark --methods Radau BDF BDF-fd --out wp.csv --plot
"""

import argparse

import matplotlib.pyplot as plt

from .benchmark import save_work_precision, work_precision
from .params import make_params
from .plotting import plot_rod, plot_work_precision
from .simulate import simulate


def build_parser():
    ap = argparse.ArgumentParser(prog="filament", description=__doc__.strip().splitlines()[0])
    sub = ap.add_subparsers(dest="command", required=True)

    def add_model_args(p):
        p.add_argument("--N", type=int, default=None, help="number of rod segments")
        p.add_argument("--mu", type=float, default=None, help="bending scale (default N)")
        p.add_argument("--Cm", type=float, default=None, help="magnetic coupling constant")
        p.add_argument("--omega", type=float, default=None, help="field angular frequency")
        p.add_argument("--total-time", type=float, default=None)
        p.add_argument("--quiet", action="store_true")
        p.add_argument("--plot", action="store_true")

    sp = sub.add_parser("simulate", help="integrate the filament once")
    add_model_args(sp)
    sp.add_argument("--method", type=str, default=None)
    sp.add_argument("--tol", type=float, default=None, help="rtol = atol")
    sp.add_argument("--no-jacobian", action="store_true")
    sp.add_argument("--frames", type=int, default=None)
    sp.add_argument("--save", action="store_true", help="write simulation_history/")
    sp.add_argument("--history-dir", type=str, default=None)

    bp = sub.add_parser("benchmark", help="work-precision sweep over solve_ivp methods")
    add_model_args(bp)
    bp.add_argument("--methods", nargs="+", default=None)
    bp.add_argument("--tolerances", nargs="+", type=float, default=None)
    bp.add_argument("--repeats", type=int, default=None)
    bp.add_argument("--out", type=str, default="work_precision_filament.csv")
    return ap


def params_from_args(args):
    overrides = {
        "N": args.N,
        "mu": args.mu,
        "Cm": args.Cm,
        "omega": args.omega,
        "total_time": args.total_time,
    }
    if args.command == "simulate":
        overrides.update({
            "method": args.method,
            "rtol": args.tol,
            "atol": args.tol,
            "num_frames": args.frames,
            "history_dir": args.history_dir,
        })
        if args.no_jacobian:
            overrides["use_jacobian"] = False
        if args.save:
            overrides["save_history"] = True
    else:
        overrides.update({
            "benchmark_methods": args.methods,
            "benchmark_tolerances": args.tolerances,
            "benchmark_repeats": args.repeats,
        })
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if args.quiet:
        overrides["verbose"] = False
    return make_params(overrides)


def main(argv=None):
    args = build_parser().parse_args(argv)
    p = params_from_args(args)

    if args.command == "simulate":
        result = simulate(p)
        if args.plot:
            plot_rod(result.X, result.t)
            plt.show()
        return result

    points = work_precision(p)
    save_work_precision(points, args.out)
    if p["verbose"]:
        print(f" -> Saved: {args.out}")
    if args.plot:
        plot_work_precision(points)
        plt.show()
    return points


if __name__ == '__main__':
    main()
