import matplotlib.pyplot as plt
import numpy as np


def plot_work_precision(points, ax=None):
    """Log-log work-precision diagram: wall time against final-state error."""
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 6))

    methods = []
    for pt in points:
        if pt.method not in methods:
            methods.append(pt.method)

    for method in methods:
        ok = [pt for pt in points if pt.method == method and pt.status == "ok"]
        if not ok:
            continue
        ok.sort(key=lambda pt: pt.error)
        ax.loglog([pt.error for pt in ok], [pt.wall_time for pt in ok], "o-", label=method)

    ax.set_xlabel("Error (L2, final state)")
    ax.set_ylabel("Time (s)")
    ax.set_title("Filament work-precision diagram")
    ax.legend()
    ax.grid(True, which="both", alpha=0.3)
    return ax


def plot_rod(X, t=None, ax=None, every=10):
    """
    3D snapshots of the rod.

    Args:
        X: Node positions, shape (num_frames, N+1, 3).
        t: Optional snapshot times for the legend.
        ax: Optional 3D axes.
        every: Plot one frame out of `every` (the last frame is always drawn).
    """
    if ax is None:
        fig = plt.figure(figsize=(10, 8))
        ax = fig.add_subplot(111, projection='3d')

    frames = list(range(0, len(X), max(1, every)))
    if frames[-1] != len(X) - 1:
        frames.append(len(X) - 1)
    colors = plt.cm.viridis(np.linspace(0, 1, len(frames)))

    for color, i in zip(colors, frames):
        label = f"t = {t[i]:.2e} s" if t is not None else None
        ax.plot(X[i, :, 0], X[i, :, 1], X[i, :, 2], 'o-', lw=1.5, markersize=2, color=color, label=label)

    ax.set_xlabel("X")
    ax.set_ylabel("Y")
    ax.set_zlabel("Z")
    ax.set_title("Filament in a rotating magnetic field")
    if t is not None:
        ax.legend(fontsize='small')
    return ax
