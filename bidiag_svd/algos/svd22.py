"""Closed-form singular value decomposition of a 2x2 upper triangular matrix.

Both routines treat the matrix

    [ f  g ]
    [ 0  h ]

and avoid overflow and unnecessary underflow by working with ratios of the
entries rather than their squares.
"""

import numpy as np

EPS = np.finfo(np.float64).eps


def singularvalues22(f, g, h):
    """
    Singular values of the 2x2 triangular matrix [[f, g], [0, h]].

    Args:
        f: (0, 0) entry
        g: (0, 1) entry
        h: (1, 1) entry

    Returns:
        ssmin, ssmax: smaller and larger singular value, both non-negative
    """
    fa = abs(np.float64(f))
    ga = abs(np.float64(g))
    ha = abs(np.float64(h))
    fhmn = min(fa, ha)
    fhmx = max(fa, ha)

    if fhmn == 0:
        ssmin = np.float64(0.0)
        if fhmx == 0:
            ssmax = ga
        else:
            ssmax = max(fhmx, ga) * np.sqrt(1.0 + (min(fhmx, ga) / max(fhmx, ga)) ** 2)
        return ssmin, ssmax

    if ga < fhmx:
        as_ = 1.0 + fhmn / fhmx
        at = (fhmx - fhmn) / fhmx
        au = (ga / fhmx) ** 2
        c = 2.0 / (np.sqrt(as_ * as_ + au) + np.sqrt(at * at + au))
        return fhmn * c, fhmx / c

    au = fhmx / ga
    if au == 0:
        # Entries differ so much that fhmx / ga underflows
        return (fhmn * fhmx) / ga, ga

    as_ = 1.0 + fhmn / fhmx
    at = (fhmx - fhmn) / fhmx
    c = 1.0 / (np.sqrt(1.0 + (as_ * au) ** 2) + np.sqrt(1.0 + (at * au) ** 2))
    ssmin = (fhmn * c) * au
    return ssmin + ssmin, ga / (c + c)


def svd22(f, g, h):
    """
    Singular value decomposition of the 2x2 triangular matrix [[f, g], [0, h]].

    Computes ``ssmin``, ``ssmax`` and two rotations such that::

        [ csl  snl ] [ f  g ] [ csr -snr ]   [ ssmax   0   ]
        [-snl  csl ] [ 0  h ] [ snr  csr ] = [   0   ssmin ]

    ``|ssmax| >= |ssmin|``. The singular values carry signs so that the
    identity holds exactly; callers that want non-negative values fix the signs
    afterwards.

    Args:
        f: (0, 0) entry
        g: (0, 1) entry
        h: (1, 1) entry

    Returns:
        ssmin, ssmax, csl, snl, csr, snr
    """
    f = np.float64(f)
    g = np.float64(g)
    h = np.float64(h)

    ft = f
    fa = abs(ft)
    ht = h
    ha = abs(h)

    # pmax points to the entry of largest magnitude: 1 = f, 2 = g, 3 = h
    pmax = 1
    swapped = ha > fa
    if swapped:
        pmax = 3
        ft, ht = ht, ft
        fa, ha = ha, fa

    gt = g
    ga = abs(gt)
    if ga == 0:
        # Already diagonal
        ssmin = ha
        ssmax = fa
        clt, crt = 1.0, 1.0
        slt, srt = 0.0, 0.0
    else:
        gasmal = True
        if ga > fa:
            pmax = 2
            if fa / ga < EPS:
                # Very large ga
                gasmal = False
                ssmax = ga
                if ha > 1.0:
                    ssmin = fa / (ga / ha)
                else:
                    ssmin = (fa / ga) * ha
                clt = 1.0
                slt = ht / gt
                srt = 1.0
                crt = ft / gt
        if gasmal:
            d = fa - ha
            if d == fa:
                # Copes with infinite f or h
                l = 1.0
            else:
                l = d / fa
            m = gt / ft
            t = 2.0 - l
            mm = m * m
            tt = t * t
            s = np.sqrt(tt + mm)
            if l == 0:
                r = abs(m)
            else:
                r = np.sqrt(l * l + mm)
            a = 0.5 * (s + r)
            ssmin = ha / a
            ssmax = fa * a
            if mm == 0:
                # m is tiny
                if l == 0:
                    t = np.copysign(2.0, ft) * np.copysign(1.0, gt)
                else:
                    t = gt / np.copysign(d, ft) + m / t
            else:
                t = (m / (s + t) + m / (r + l)) * (1.0 + a)
            l = np.sqrt(t * t + 4.0)
            crt = 2.0 / l
            srt = t / l
            clt = (crt + srt * m) / a
            slt = (ht / ft) * srt / a

    if swapped:
        csl, snl, csr, snr = srt, crt, slt, clt
    else:
        csl, snl, csr, snr = clt, slt, crt, srt

    # Correct the signs of ssmax and ssmin
    if pmax == 1:
        tsign = np.copysign(1.0, csr) * np.copysign(1.0, csl) * np.copysign(1.0, f)
    elif pmax == 2:
        tsign = np.copysign(1.0, snr) * np.copysign(1.0, csl) * np.copysign(1.0, g)
    else:
        tsign = np.copysign(1.0, snr) * np.copysign(1.0, snl) * np.copysign(1.0, h)
    ssmax = np.copysign(ssmax, tsign)
    ssmin = np.copysign(ssmin, tsign * np.copysign(1.0, f) * np.copysign(1.0, h))

    return ssmin, ssmax, csl, snl, csr, snr
