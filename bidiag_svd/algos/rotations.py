"""Plane rotations and the vector primitives used by the bidiagonal QR sweep.

Every routine here works on scalars or on NumPy views supplied by the caller.
Vector routines mutate their arguments in place and never allocate a result
array that the caller has to copy back, so a column view of ``U`` or a row view
of ``Vt`` is updated directly in the owning matrix.
"""

import numpy as np


def lartg(f, g):
    """
    Construct a plane rotation that annihilates ``g`` against ``f``.

    Returns ``(c, s, r)`` such that::

        [ c  s ] [ f ]   [ r ]
        [-s  c ] [ g ] = [ 0 ]

    with ``c**2 + s**2 = 1``. Follows the LAPACK xLARTG conventions:

        - g == 0: c = 1, s = 0, r = f
        - f == 0: c = 0, s = sign(g), r = |g|
        - otherwise r carries the sign of f and c > 0

    Args:
        f: first component (kept)
        g: second component (annihilated)

    Returns:
        c, s, r: cosine, sine and the combined magnitude
    """
    if g == 0:
        return 1.0, 0.0, f
    if f == 0:
        return 0.0, np.copysign(1.0, g), abs(g)

    d = np.hypot(f, g)
    c = abs(f) / d
    r = np.copysign(d, f)
    s = g / r
    return c, s, r


def rot(x, y, c, s):
    """Apply the rotation ``(c, s)`` to the vector pair ``(x, y)`` in place.

    ``x <- c*x + s*y`` and ``y <- c*y - s*x``.
    """
    temp = c * x + s * y
    y[...] = c * y - s * x
    x[...] = temp


def swap(x, y):
    """Exchange the contents of two equal-length views in place."""
    temp = x.copy()
    x[...] = y
    y[...] = temp


def scal(alpha, x):
    """Scale a view in place."""
    x *= alpha


def iamax(x):
    """Index of the first entry of maximum absolute value."""
    return int(np.argmax(np.abs(x)))


def col(A, j):
    """Column ``j`` of ``A`` as a view."""
    return A[:, j]


def row(A, i):
    """Row ``i`` of ``A`` as a view."""
    return A[i, :]
