"""Implicit-shift QR iteration for the SVD of a real bidiagonal matrix.

Computes the singular values and, optionally, the left and/or right singular
vectors of an n-by-n (upper or lower) bidiagonal matrix

    B = Q @ diag(S) @ P.T

where the bidiagonal matrix is given by its diagonal ``d`` and off-diagonal
``e``. When vectors are requested the routine does not return Q and P.T but
updates caller-owned matrices: ``U`` is overwritten by ``U @ Q`` and ``Vt`` by
``P.T @ Vt``. If ``U`` and ``Vt`` are the orthogonal factors that reduced a
general matrix A to bidiagonal form, A = U @ B @ Vt, then on return

    A = U @ diag(d) @ Vt

is the SVD of A.

See "Computing Small Singular Values of Bidiagonal Matrices With Guaranteed
High Relative Accuracy", J. Demmel and W. Kahan, LAPACK Working Note #3.
"""

import logging
from enum import Enum

import numpy as np

from .rotations import col, iamax, lartg, rot, row, scal, swap
from .svd22 import singularvalues22, svd22

logger = logging.getLogger(__name__)

DEFAULT_MAX_SWEEPS = 30


class Uplo(str, Enum):
    """Which off-diagonal of the bidiagonal matrix ``e`` holds."""

    UPPER = "upper"
    LOWER = "lower"


def svd_qr(uplo, want_u, want_vt, d, e, U=None, Vt=None, *, max_sweeps=DEFAULT_MAX_SWEEPS):
    """
    SVD of a bidiagonal matrix by implicit zero-shift / shifted QR sweeps.

    All arrays are modified in place.

    Args:
        uplo: Uplo.UPPER / "upper" if ``e`` is the superdiagonal,
              Uplo.LOWER / "lower" if it is the subdiagonal
        want_u: accumulate the left rotations into the columns of ``U``
        want_vt: accumulate the right rotations into the rows of ``Vt``
        d: (n,) array - on entry the diagonal, on exit the singular values
           in decreasing order
        e: (n-1,) array - on entry the off-diagonal, on exit all zero
        U: (nu x n) array - on exit ``U @ Q``; not touched unless ``want_u``
        Vt: (n x nvt) array - on exit ``P.T @ Vt``; not touched unless ``want_vt``
        max_sweeps: iteration budget per singular value, the QR loop runs at
                    most ``max_sweeps * n`` iterations

    Returns:
        0 on success. A positive value ``istop`` if the iteration budget ran
        out; then the singular values ``d[istop:]`` have converged but the
        leading block ``d[:istop]`` has not, and ``d`` is not sorted.

    Raises:
        ValueError: on an unknown ``uplo``, ``max_sweeps < 1`` or a requested
                    accumulator that is None
    """
    uplo = Uplo(uplo)
    if max_sweeps < 1:
        raise ValueError(f"max_sweeps must be at least 1, got {max_sweeps}")
    if want_u and U is None:
        raise ValueError("want_u is set but no U was given")
    if want_vt and Vt is None:
        raise ValueError("want_vt is set but no Vt was given")

    n = d.shape[0]
    if n == 0:
        return 0

    eps = np.finfo(d.dtype).eps
    tol = 10.0 * eps
    itmax = max_sweeps * n

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        if uplo == Uplo.LOWER:
            _lower_to_upper(want_u, d, e, U)

        thresh = _absolute_threshold(d, e, tol, itmax)
        info = _qr_iteration(want_u, want_vt, d, e, U, Vt, eps, tol, thresh, itmax)
        if info:
            logger.warning(
                "Bidiagonal QR failed to converge after %d iterations, "
                "leading %d singular values unresolved",
                itmax,
                info,
            )
            return info

        _sort_singular_values(want_u, want_vt, d, U, Vt)

    return 0


def _lower_to_upper(want_u, d, e, U):
    """Rotate a lower bidiagonal matrix into upper bidiagonal form."""
    n = d.shape[0]
    for i in range(n - 1):
        c, s, r = lartg(d[i], e[i])
        d[i] = r
        e[i] = s * d[i + 1]
        d[i + 1] = c * d[i + 1]

        if want_u:
            rot(col(U, i), col(U, i + 1), c, s)


def _absolute_threshold(d, e, tol, itmax):
    """
    Absolute negligibility threshold for off-diagonal entries.

    ``tol`` times an estimate of the smallest singular value, floored at
    ``itmax * n * safe_min`` so that underflowing entries always split.
    """
    n = d.shape[0]
    safe_min = np.finfo(d.dtype).tiny

    smin = abs(d[0])
    mu = smin
    for i in range(1, n):
        if smin == 0:
            break
        mu = abs(d[i]) * (mu / (mu + abs(e[i - 1])))
        smin = min(smin, mu)

    return max(tol * smin / np.sqrt(n), itmax * n * safe_min)


def _split_forward(d, e, istart, istop, tol):
    """
    Relative convergence test run in the direction of the chase.

    ``mu`` tracks a lower bound on the smallest singular value of the leading
    part of the block, so ``e[i]`` is compared with everything above it and
    not only with ``d[i + 1]``, which may be zero. Returns the index of a
    negligible entry, or -1.
    """
    mu = abs(d[istart])
    for i in range(istart, istop - 1):
        if abs(e[i]) <= tol * mu:
            return i
        mu = abs(d[i + 1]) * (mu / (mu + abs(e[i])))
    return -1


def _qr_iteration(want_u, want_vt, d, e, U, Vt, eps, tol, thresh, itmax):
    """Main deflation loop. Returns 0 once every block is 1x1, else istop."""
    n = d.shape[0]

    # [istart, istop) is the active block
    istart = 0
    istop = n

    for _ in range(itmax):
        if istop <= 1:
            return 0

        # Find active block
        for i in range(istop - 1, istart, -1):
            if abs(e[i - 1]) <= tol * abs(d[i]) or abs(e[i - 1]) <= thresh:
                e[i - 1] = 0.0
                istart = i
                break

        # A singular value has split off
        if istart == istop - 1:
            istop -= 1
            istart = 0
            continue

        # A 2x2 block has split off
        if istart + 1 == istop - 1:
            sigmn, sigmx, csl, snl, csr, snr = svd22(d[istart], e[istart], d[istart + 1])
            logger.debug("closed-form 2x2 block at %d: %g, %g", istart, sigmx, sigmn)
            d[istart] = sigmx
            d[istart + 1] = sigmn
            e[istart] = 0.0

            if want_u:
                rot(col(U, istart), col(U, istart + 1), csl, snl)
            if want_vt:
                rot(row(Vt, istart), row(Vt, istart + 1), csr, snr)

            istop -= 2
            istart = 0
            continue

        # An entry above a zero diagonal never passes the test above
        i = _split_forward(d, e, istart, istop, tol)
        if i >= 0:
            e[i] = 0.0
            continue

        # The sweep always chases top to bottom
        shift = _compute_shift(d, e, istart, istop, eps)

        if shift == 0:
            _zero_shift_sweep(want_u, want_vt, d, e, U, Vt, istart, istop)
        else:
            _shifted_sweep(want_u, want_vt, d, e, U, Vt, istart, istop, shift)

    if istop <= 1:
        return 0
    return istop


def _compute_shift(d, e, istart, istop, eps):
    """Smaller singular value of the trailing 2x2 block, or zero if negligible."""
    sstart = abs(d[istart])
    if sstart == 0:
        # The shifted sweep divides by d[istart]
        return 0.0

    shift, _ = singularvalues22(d[istop - 2], e[istop - 2], d[istop - 1])

    # Shifting by a negligible amount would ruin relative accuracy
    if (shift / sstart) ** 2 < eps:
        return 0.0
    return shift


def _zero_shift_sweep(want_u, want_vt, d, e, U, Vt, istart, istop):
    """One implicit zero-shift QR sweep over the block [istart, istop)."""
    cs = 1.0
    oldcs = 1.0
    oldsn = 0.0
    for i in range(istart, istop - 1):
        cs, sn, r = lartg(d[i] * cs, e[i])
        if i > istart:
            e[i - 1] = oldsn * r
        oldcs, oldsn, d[i] = lartg(oldcs * r, d[i + 1] * sn)

        if want_u:
            rot(col(U, i), col(U, i + 1), oldcs, oldsn)
        if want_vt:
            rot(row(Vt, i), row(Vt, i + 1), cs, sn)

    h = d[istop - 1] * cs
    d[istop - 1] = h * oldcs
    e[istop - 2] = h * oldsn


def _shifted_sweep(want_u, want_vt, d, e, U, Vt, istart, istop, shift):
    """One implicit shifted QR sweep over the block [istart, istop)."""
    f = (abs(d[istart]) - shift) * (np.copysign(1.0, d[istart]) + shift / d[istart])
    g = e[istart]
    for i in range(istart, istop - 1):
        csr, snr, r = lartg(f, g)
        if i > istart:
            e[i - 1] = r
        f = csr * d[i] + snr * e[i]
        e[i] = csr * e[i] - snr * d[i]
        g = snr * d[i + 1]
        d[i + 1] = csr * d[i + 1]

        csl, snl, r = lartg(f, g)
        d[i] = r
        f = csl * e[i] + snl * d[i + 1]
        d[i + 1] = csl * d[i + 1] - snl * e[i]
        if i + 1 < istop - 1:
            g = snl * e[i + 1]
            e[i + 1] = csl * e[i + 1]

        if want_u:
            rot(col(U, i), col(U, i + 1), csl, snl)
        if want_vt:
            rot(row(Vt, i), row(Vt, i + 1), csr, snr)

    e[istop - 2] = f


def _sort_singular_values(want_u, want_vt, d, U, Vt):
    """Make singular values non-negative and sort them in decreasing order."""
    n = d.shape[0]

    for i in range(n):
        if d[i] < 0:
            d[i] = -d[i]
            if want_vt:
                scal(-1.0, row(Vt, i))

    # Selection sort keeps the vector permutation paired with the values
    for i in range(n - 1):
        imax = i + iamax(d[i:])
        if imax != i:
            d[i], d[imax] = d[imax], d[i]
            if want_u:
                swap(col(U, imax), col(U, i))
            if want_vt:
                swap(row(Vt, imax), row(Vt, i))
