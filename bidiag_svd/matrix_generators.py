"""Bidiagonal matrix generators for testing the bidiagonal SVD.

This module provides generators for bidiagonal test problems with controlled
properties: random entries, geometric grading, constant entries and zero
diagonals. Every generator returns the pair ``(d, e)``.
"""

from typing import Dict, Tuple

import numpy as np

from .algos import to_dense


class MatrixGenerator:
    """Generate bidiagonal test matrices with controlled properties."""

    @staticmethod
    def _check_size(n: int):
        if n < 1:
            raise ValueError(f"n must be at least 1, got {n}")

    @staticmethod
    def random_bidiagonal(n: int, seed: int = 42) -> Tuple[np.ndarray, np.ndarray]:
        """
        Generate a random bidiagonal matrix.

        Diagonal and off-diagonal entries are drawn from the standard normal
        distribution. The same pair serves as upper or lower bidiagonal input.

        Args:
            n: matrix order
            seed: random seed for reproducibility

        Returns:
            d: (n,) diagonal with entries from N(0,1)
            e: (n-1,) off-diagonal with entries from N(0,1)
        """
        MatrixGenerator._check_size(n)
        np.random.seed(seed)
        d = np.random.randn(n)
        e = np.random.randn(n - 1)
        return d, e

    @staticmethod
    def graded_bidiagonal(
        n: int,
        ratio: float = 0.1,
        seed: int = 42,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Generate a geometrically graded bidiagonal matrix.

        Entry ``i`` of both diagonals is scaled by ``ratio**i``, so singular
        values span many orders of magnitude. These matrices are where the
        relative accuracy of the small singular values is tested.

        Args:
            n: matrix order
            ratio: grading factor, 0 < ratio <= 1
            seed: random seed for reproducibility

        Returns:
            d: (n,) diagonal
            e: (n-1,) off-diagonal

        Raises:
            ValueError: if ratio is not in (0, 1]
        """
        MatrixGenerator._check_size(n)
        if not 0 < ratio <= 1:
            raise ValueError(f"ratio must be in (0, 1], got {ratio}")

        np.random.seed(seed)
        scale = ratio ** np.arange(n, dtype=float)
        d = np.random.uniform(0.5, 1.5, n) * scale
        e = np.random.uniform(0.5, 1.5, n - 1) * scale[:-1] * ratio
        return d, e

    @staticmethod
    def constant_bidiagonal(n: int, a: float = 1.0, b: float = 1.0) -> Tuple[np.ndarray, np.ndarray]:
        """
        Generate a bidiagonal matrix with constant diagonals.

        Args:
            n: matrix order
            a: value on the diagonal
            b: value on the off-diagonal

        Returns:
            d: (n,) array filled with a
            e: (n-1,) array filled with b
        """
        MatrixGenerator._check_size(n)
        return np.full(n, float(a)), np.full(n - 1, float(b))

    @staticmethod
    def zero_diagonal_bidiagonal(
        n: int,
        num_zeros: int = 1,
        seed: int = 42,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Generate a random bidiagonal matrix with exact zeros on the diagonal.

        A zero diagonal entry makes the matrix singular. The off-diagonal
        entry above it never becomes small relative to the zero, so these
        matrices exercise the forward convergence test of the QR iteration.

        Args:
            n: matrix order
            num_zeros: number of diagonal entries set to zero
            seed: random seed for reproducibility

        Returns:
            d: (n,) diagonal with ``num_zeros`` zero entries
            e: (n-1,) off-diagonal

        Raises:
            ValueError: if num_zeros is negative or larger than n
        """
        MatrixGenerator._check_size(n)
        if not 0 <= num_zeros <= n:
            raise ValueError(f"num_zeros must be between 0 and n = {n}, got {num_zeros}")

        d, e = MatrixGenerator.random_bidiagonal(n, seed)
        zeros = np.random.choice(n, size=num_zeros, replace=False)
        d[zeros] = 0.0
        return d, e

    @staticmethod
    def get_matrix_info(d: np.ndarray, e: np.ndarray, lower: bool = False) -> Dict:
        """
        Get information about a bidiagonal matrix for logging.

        Args:
            d: diagonal
            e: off-diagonal
            lower: True if ``e`` is the subdiagonal

        Returns:
            Dictionary with matrix properties:
                - n: matrix order
                - dtype: numpy data type
                - norm_fro: Frobenius norm
                - norm_2: spectral norm
                - condition: 2-norm condition number (inf if singular)
                - zero_diagonals: number of exact zeros on the diagonal
        """
        B = to_dense(d, e, lower=lower)
        s = np.linalg.svd(B, compute_uv=False)
        smin = s[-1] if s.size else 0.0
        return {
            'n': B.shape[0],
            'dtype': B.dtype,
            'norm_fro': np.linalg.norm(B, 'fro'),
            'norm_2': s[0] if s.size else 0.0,
            'condition': s[0] / smin if smin > 0 else np.inf,
            'zero_diagonals': int(np.count_nonzero(np.asarray(d) == 0)),
        }
