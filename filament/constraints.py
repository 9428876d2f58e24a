import numba
import numpy as np

from .errors import DegenerateConfiguration

# --- Numba JITed kernels for the inextensibility constraint ---

@numba.njit(cache=True)
def _fill_constraint_jacobian(r, J):
    """
    Gradient of |X_{i+1} - X_i|^2 for every segment i.
    Only the 6 entries of each row belonging to nodes i and i+1 are written.
    """
    N = J.shape[0]
    for i in range(N):
        a = 3 * i
        b = 3 * (i + 1)
        dx = r[b] - r[a]
        dy = r[b + 1] - r[a + 1]
        dz = r[b + 2] - r[a + 2]

        J[i, a] = -2.0 * dx
        J[i, a + 1] = -2.0 * dy
        J[i, a + 2] = -2.0 * dz
        J[i, b] = 2.0 * dx
        J[i, b + 1] = 2.0 * dy
        J[i, b + 2] = 2.0 * dz


@numba.njit(cache=True)
def gram_tridiagonal(J, diag, off):
    """
    Main and first off-diagonal of G = J J^T.
    Rows i and j of J only share a node when |i - j| <= 1, so G is tridiagonal.
    """
    N = J.shape[0]
    for i in range(N):
        a = 3 * i
        s = 0.0
        for k in range(a, a + 6):
            s += J[i, k] * J[i, k]
        diag[i] = s
    for i in range(N - 1):
        # Shared node i+1
        b = 3 * (i + 1)
        off[i] = J[i, b] * J[i + 1, b] + J[i, b + 1] * J[i + 1, b + 1] + J[i, b + 2] * J[i + 1, b + 2]


@numba.njit(cache=True)
def ldlt_tridiagonal(diag, off, d, l, tol):
    """
    In-place LDL^T factorization of a symmetric tridiagonal matrix.

    Returns -1 on success, otherwise the index of the first pivot that is not
    finite or not larger than tol * max(diag). The failing pivot is left in d.
    """
    N = diag.shape[0]
    scale = 0.0
    for i in range(N):
        if diag[i] > scale:
            scale = diag[i]
    threshold = tol * scale

    d[0] = diag[0]
    if not (d[0] > threshold) or not np.isfinite(d[0]):
        return 0
    for k in range(1, N):
        l[k - 1] = off[k - 1] / d[k - 1]
        d[k] = diag[k] - l[k - 1] * off[k - 1]
        if not (d[k] > threshold) or not np.isfinite(d[k]):
            return k
    return -1


@numba.njit(cache=True)
def ldlt_solve(d, l, B):
    """Overwrite B with the solution X of (L D L^T) X = B, column by column."""
    N = B.shape[0]
    M = B.shape[1]
    for j in range(M):
        for k in range(1, N):
            B[k, j] -= l[k - 1] * B[k - 1, j]
        for k in range(N):
            B[k, j] /= d[k]
        for k in range(N - 2, -1, -1):
            B[k, j] -= l[k] * B[k + 1, j]


def constraint_jacobian(r, out=None):
    """
    Jacobian of the segment-length constraints.

    Args:
        r: Rod state, interleaved (x, y, z) of N+1 nodes.
        out: Optional (N, 3(N+1)) array, zero outside each row's 6-entry band.

    Returns:
        The (N, 3(N+1)) constraint Jacobian.
    """
    r = np.ascontiguousarray(r, dtype=np.float64)
    N = r.shape[0] // 3 - 1
    if out is None:
        out = np.zeros((N, r.shape[0]))
    _fill_constraint_jacobian(r, out)
    return out


def segment_lengths(r):
    """Length of each of the N segments of the rod state r."""
    nodes = np.asarray(r, dtype=np.float64).reshape(-1, 3)
    return np.linalg.norm(np.diff(nodes, axis=0), axis=1)


class ConstraintProjector:
    """
    Orthogonal projector onto the tangent space of the length constraints,
    P = I - J^T (J J^T)^-1 J, rebuilt in place from the rod state.

    All buffers are allocated once for a given N.
    """

    def __init__(self, N, pivot_tol=1e-12):
        self.N = N
        self.pivot_tol = pivot_tol
        size = 3 * (N + 1)

        self.J = np.zeros((N, size))
        self.X = np.zeros((N, size))
        self.P = np.zeros((size, size))
        self.identity = np.eye(size)

        # Gram matrix bands and their LDL^T factors
        self.diag = np.zeros(N)
        self.off = np.zeros(N - 1)
        self.d = np.zeros(N)
        self.l = np.zeros(N - 1)

    def update(self, r):
        """Recompute J and P for the state r; r must be contiguous float64."""
        _fill_constraint_jacobian(r, self.J)
        gram_tridiagonal(self.J, self.diag, self.off)

        bad = ldlt_tridiagonal(self.diag, self.off, self.d, self.l, self.pivot_tol)
        if bad >= 0:
            raise DegenerateConfiguration(int(bad), float(self.d[bad]))

        # X = (J J^T)^-1 J, then P = I - X^T J
        np.copyto(self.X, self.J)
        ldlt_solve(self.d, self.l, self.X)
        np.matmul(self.X.T, self.J, out=self.P)
        np.subtract(self.identity, self.P, out=self.P)
        return self.P
