"""Bidiagonal SVD algorithms.

This package contains the implicit-shift QR iteration for the singular value
decomposition of bidiagonal matrices, the plane-rotation and 2x2 kernels it is
built from, and dense baselines used for comparison.
"""

from .bidiagonal_svd import (
    ConvergenceError,
    bidiagonal_svd,
    bidiagonal_svd_lowrank,
    numpy_bidiagonal_svd,
    scipy_bidiagonal_svd,
    to_dense,
)
from .rotations import iamax, lartg, rot, scal, swap
from .svd22 import singularvalues22, svd22
from .svd_qr import DEFAULT_MAX_SWEEPS, Uplo, svd_qr

__all__ = [
    "ConvergenceError",
    "DEFAULT_MAX_SWEEPS",
    "Uplo",
    "bidiagonal_svd",
    "bidiagonal_svd_lowrank",
    "iamax",
    "lartg",
    "numpy_bidiagonal_svd",
    "rot",
    "scal",
    "scipy_bidiagonal_svd",
    "singularvalues22",
    "svd22",
    "svd_qr",
    "swap",
    "to_dense",
]
