"""Tests for the bidiagonal test matrix generators."""

import numpy as np
import pytest
from numpy.testing import assert_array_equal

from bidiag_svd.matrix_generators import MatrixGenerator


class TestMatrixGenerator:

    def test_random_shapes(self):
        d, e = MatrixGenerator.random_bidiagonal(7)
        assert d.shape == (7,)
        assert e.shape == (6,)

    def test_random_is_reproducible(self):
        d1, e1 = MatrixGenerator.random_bidiagonal(5, seed=3)
        d2, e2 = MatrixGenerator.random_bidiagonal(5, seed=3)
        assert_array_equal(d1, d2)
        assert_array_equal(e1, e2)

    def test_graded_decays(self):
        d, e = MatrixGenerator.graded_bidiagonal(6, ratio=0.01)
        assert np.all(d > 0) and np.all(e > 0)
        assert np.all(d[1:] < d[:-1])
        assert d[-1] < 1e-8

    def test_graded_rejects_bad_ratio(self):
        with pytest.raises(ValueError, match="ratio"):
            MatrixGenerator.graded_bidiagonal(4, ratio=0.0)

    def test_constant(self):
        d, e = MatrixGenerator.constant_bidiagonal(4, a=2.0, b=-1.0)
        assert_array_equal(d, [2.0, 2.0, 2.0, 2.0])
        assert_array_equal(e, [-1.0, -1.0, -1.0])

    def test_zero_diagonal(self):
        d, e = MatrixGenerator.zero_diagonal_bidiagonal(10, num_zeros=3)
        assert np.count_nonzero(d == 0) == 3
        assert e.shape == (9,)

    def test_zero_diagonal_rejects_too_many_zeros(self):
        with pytest.raises(ValueError, match="num_zeros"):
            MatrixGenerator.zero_diagonal_bidiagonal(3, num_zeros=4)

    def test_rejects_empty_size(self):
        with pytest.raises(ValueError, match="at least 1"):
            MatrixGenerator.random_bidiagonal(0)

    def test_matrix_info(self):
        d, e = MatrixGenerator.zero_diagonal_bidiagonal(5, num_zeros=1)
        info = MatrixGenerator.get_matrix_info(d, e)

        assert info['n'] == 5
        assert info['zero_diagonals'] == 1
        assert info['condition'] == np.inf or info['condition'] > 1e12
        assert info['norm_2'] <= info['norm_fro']
