import numba
import numpy as np

from .errors import ConfigurationError


@numba.njit(cache=True)
def _fill_bending_stencil(A, N):
    """
    Writes the fourth-difference stencil with free-end rows into A (zeroed).
    Node k, component c lives at row/column 3*k + c.
    """
    for c in range(3):
        # Free end at node 0
        A[c, c] = 1.0
        A[c, 3 + c] = -2.0
        A[c, 6 + c] = 1.0

        A[3 + c, c] = -2.0
        A[3 + c, 3 + c] = 5.0
        A[3 + c, 6 + c] = -4.0
        A[3 + c, 9 + c] = 1.0

        # Interior nodes
        for k in range(2, N - 1):
            row = 3 * k + c
            A[row, 3 * (k - 2) + c] = 1.0
            A[row, 3 * (k - 1) + c] = -4.0
            A[row, 3 * k + c] = 6.0
            A[row, 3 * (k + 1) + c] = -4.0
            A[row, 3 * (k + 2) + c] = 1.0

        # Free end at node N
        row = 3 * (N - 1) + c
        A[row, 3 * (N - 3) + c] = 1.0
        A[row, 3 * (N - 2) + c] = -4.0
        A[row, 3 * (N - 1) + c] = 5.0
        A[row, 3 * N + c] = -2.0

        row = 3 * N + c
        A[row, 3 * (N - 2) + c] = 1.0
        A[row, 3 * (N - 1) + c] = -2.0
        A[row, 3 * N + c] = 1.0


def stiffness_matrix(N, mu):
    """
    Dense bending stiffness matrix of a rod with N segments.

    Args:
        N: Number of segments (N+1 nodes), at least 3.
        mu: Bending scale; the stencil is multiplied by -mu**4.

    Returns:
        Read-only (3(N+1), 3(N+1)) float64 array.
    """
    if N < 3:
        raise ConfigurationError(f"The bending stencil needs N >= 3, got N={N}")
    if not np.isfinite(mu) or mu < 0:
        raise ConfigurationError(f"mu must be finite and >= 0, got {mu!r}")

    size = 3 * (N + 1)
    A = np.zeros((size, size))
    _fill_bending_stencil(A, N)
    A *= -float(mu) ** 4
    A.flags.writeable = False
    return A
