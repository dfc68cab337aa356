"""Tests for the functional bidiagonal SVD drivers."""

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from bidiag_svd.algos import (
    ConvergenceError,
    bidiagonal_svd,
    bidiagonal_svd_lowrank,
    numpy_bidiagonal_svd,
    scipy_bidiagonal_svd,
    to_dense,
)
from bidiag_svd.matrix_generators import MatrixGenerator

EPS = np.finfo(float).eps


class TestToDense:
    def test_upper(self):
        B = to_dense([1.0, 2.0, 3.0], [4.0, 5.0])
        assert_array_equal(B, [[1, 4, 0], [0, 2, 5], [0, 0, 3]])

    def test_lower(self):
        B = to_dense([1.0, 2.0, 3.0], [4.0, 5.0], lower=True)
        assert_array_equal(B, [[1, 0, 0], [4, 2, 0], [0, 5, 3]])

    def test_integer_input_becomes_float(self):
        assert to_dense([1, 2], [3]).dtype == np.float64


class TestBidiagonalSVD:
    """Tests for bidiagonal_svd."""

    @pytest.mark.parametrize("lower", [False, True])
    def test_factors_reconstruct(self, lower):
        d, e = MatrixGenerator.random_bidiagonal(25, seed=1)
        B = to_dense(d, e, lower=lower)

        U, S, Vt = bidiagonal_svd(d, e, lower=lower)

        assert U.shape == (25, 25) and S.shape == (25,) and Vt.shape == (25, 25)
        assert_allclose((U * S) @ Vt, B, atol=1000 * EPS * np.linalg.norm(B, 2))

    def test_inputs_not_modified(self):
        d, e = MatrixGenerator.random_bidiagonal(8, seed=2)
        d_copy, e_copy = d.copy(), e.copy()

        bidiagonal_svd(d, e)

        assert_array_equal(d, d_copy)
        assert_array_equal(e, e_copy)

    def test_values_only(self):
        d, e = MatrixGenerator.random_bidiagonal(12, seed=3)
        S = bidiagonal_svd(d, e, compute_uv=False)
        _, S_full, _ = bidiagonal_svd(d, e)
        assert_allclose(S, S_full, atol=100 * EPS * S_full[0])

    @pytest.mark.parametrize("baseline", [numpy_bidiagonal_svd, scipy_bidiagonal_svd])
    def test_matches_dense_baselines(self, baseline):
        d, e = MatrixGenerator.random_bidiagonal(30, seed=4)
        _, S_ref, _ = baseline(d, e)
        S = bidiagonal_svd(d, e, compute_uv=False)
        assert_allclose(S, S_ref, atol=1000 * EPS * S_ref[0])

    def test_three_four_five(self):
        assert_allclose(bidiagonal_svd([3, 0], [4], compute_uv=False), [5.0, 0.0], atol=1e-15)

    def test_empty(self):
        U, S, Vt = bidiagonal_svd([], [])
        assert U.shape == (0, 0) and S.shape == (0,) and Vt.shape == (0, 0)

    def test_convergence_error(self):
        d, e = MatrixGenerator.random_bidiagonal(40, seed=8)
        with pytest.raises(ConvergenceError) as excinfo:
            bidiagonal_svd(d, e, max_sweeps=1)
        assert isinstance(excinfo.value, RuntimeError)
        assert 0 < excinfo.value.index <= 40
        assert excinfo.value.max_sweeps == 1

    def test_rejects_matrix_input(self):
        with pytest.raises(ValueError, match="one-dimensional"):
            bidiagonal_svd(np.eye(3), np.ones(2))

    def test_rejects_wrong_off_diagonal_length(self):
        with pytest.raises(ValueError, match="length 2"):
            bidiagonal_svd(np.ones(3), np.ones(3))


class TestBidiagonalSVDLowrank:
    """Tests for bidiagonal_svd_lowrank."""

    def test_shapes(self):
        d, e = MatrixGenerator.random_bidiagonal(10, seed=5)
        U, S, Vt = bidiagonal_svd_lowrank(d, e, rank=3)
        assert U.shape == (10, 3)
        assert S.shape == (3,)
        assert Vt.shape == (3, 10)

    def test_error_is_next_singular_value(self):
        """Eckart-Young: the spectral error of the rank-k truncation is sigma_{k+1}."""
        d, e = MatrixGenerator.random_bidiagonal(15, seed=6)
        B = to_dense(d, e)
        S_all = bidiagonal_svd(d, e, compute_uv=False)

        U, S, Vt = bidiagonal_svd_lowrank(d, e, rank=4)

        error = np.linalg.norm(B - (U * S) @ Vt, ord=2)
        assert_allclose(error, S_all[4], rtol=1e-10)

    @pytest.mark.parametrize("rank", [0, 10, 11])
    def test_invalid_rank(self, rank):
        d, e = MatrixGenerator.random_bidiagonal(10, seed=5)
        with pytest.raises(ValueError, match="Rank"):
            bidiagonal_svd_lowrank(d, e, rank=rank)
