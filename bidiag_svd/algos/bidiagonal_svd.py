"""SVD drivers for bidiagonal matrices.

Wraps the in-place QR routine in a functional interface that returns
(U, S, Vt) factors, and provides dense NumPy / SciPy baselines for comparison.
"""

import numpy as np
import scipy.linalg

from .svd_qr import DEFAULT_MAX_SWEEPS, Uplo, svd_qr


class ConvergenceError(RuntimeError):
    """Raised when the bidiagonal QR iteration runs out of iterations."""

    def __init__(self, index, max_sweeps):
        self.index = index
        self.max_sweeps = max_sweeps
        super().__init__(
            f"Bidiagonal QR did not converge within {max_sweeps} sweeps per "
            f"singular value, {index} singular values unresolved"
        )


def _validate(d, e):
    d = np.array(d, dtype=np.result_type(np.asarray(d).dtype, np.float32), copy=True)
    e = np.array(e, dtype=d.dtype, copy=True)

    if d.ndim != 1:
        raise ValueError(f"d must be one-dimensional, got shape {d.shape}")
    if e.ndim != 1:
        raise ValueError(f"e must be one-dimensional, got shape {e.shape}")
    n = d.shape[0]
    if e.shape[0] != max(n - 1, 0):
        raise ValueError(f"e must have length {max(n - 1, 0)} for n = {n}, got {e.shape[0]}")

    return d, e


def to_dense(d, e, lower=False):
    """
    Build the dense n x n bidiagonal matrix.

    Args:
        d: (n,) diagonal
        e: (n-1,) off-diagonal
        lower: if True, ``e`` is placed on the subdiagonal

    Returns:
        B: (n x n) numpy array
    """
    d, e = _validate(d, e)
    B = np.diag(d)
    if e.size > 0:
        B += np.diag(e, k=-1 if lower else 1)
    return B


def bidiagonal_svd(d, e, lower=False, compute_uv=True, max_sweeps=DEFAULT_MAX_SWEEPS):
    """
    SVD of a bidiagonal matrix using implicit-shift QR iteration.

    The inputs are not modified.

    Args:
        d: (n,) diagonal entries
        e: (n-1,) off-diagonal entries
        lower: True if ``e`` is the subdiagonal
        compute_uv: if False, only the singular values are computed
        max_sweeps: iteration budget per singular value

    Returns:
        U: (n x n) numpy array - left singular vectors
        S: (n,) numpy array - singular values in decreasing order
        Vt: (n x n) numpy array - right singular vectors (transposed)

        or only S when ``compute_uv`` is False.

    Raises:
        ValueError: If d / e have inconsistent shapes
        ConvergenceError: If the QR iteration does not converge
    """
    d, e = _validate(d, e)
    n = d.shape[0]
    uplo = Uplo.LOWER if lower else Uplo.UPPER

    if compute_uv:
        U = np.eye(n, dtype=d.dtype)
        Vt = np.eye(n, dtype=d.dtype)
    else:
        U = Vt = None

    info = svd_qr(uplo, compute_uv, compute_uv, d, e, U, Vt, max_sweeps=max_sweeps)
    if info:
        raise ConvergenceError(info, max_sweeps)

    if compute_uv:
        return U, d, Vt
    return d


def bidiagonal_svd_lowrank(d, e, rank, lower=False):
    """
    Low-rank approximation of a bidiagonal matrix from its truncated SVD.

    Args:
        d: (n,) diagonal entries
        e: (n-1,) off-diagonal entries
        rank: int - desired rank for approximation
        lower: True if ``e`` is the subdiagonal

    Returns:
        U: (n x rank) numpy array - left singular vectors
        S: (rank,) numpy array - singular values
        Vt: (rank x n) numpy array - right singular vectors (transposed)

    Raises:
        ValueError: If rank is invalid (< 1 or >= n)
    """
    n = np.asarray(d).shape[0]

    if rank < 1:
        raise ValueError(f"Rank must be at least 1, got {rank}")
    if rank >= n:
        raise ValueError(f"Rank must be less than n = {n}, got {rank}")

    U, S, Vt = bidiagonal_svd(d, e, lower=lower)

    return U[:, :rank], S[:rank], Vt[:rank, :]


def numpy_bidiagonal_svd(d, e, lower=False):
    """Dense baseline: ``numpy.linalg.svd`` of the assembled bidiagonal matrix."""
    B = to_dense(d, e, lower=lower)
    return np.linalg.svd(B)


def scipy_bidiagonal_svd(d, e, lower=False):
    """Dense baseline: ``scipy.linalg.svd`` with the LAPACK gesvd driver.

    gesvd finishes with the same bidiagonal QR iteration (xBDSQR), which makes
    it the closest library counterpart.
    """
    B = to_dense(d, e, lower=lower)
    return scipy.linalg.svd(B, lapack_driver="gesvd")
