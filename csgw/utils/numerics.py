"""Numerical utilities: table interpolation and adaptive quadrature."""

from typing import Callable, Union
import numpy as np
from numpy.typing import ArrayLike, NDArray


def interpolate(
    x: Union[float, ArrayLike],
    xs: NDArray[np.floating],
    ys: NDArray[np.floating],
) -> Union[float, NDArray[np.floating]]:
    """Linearly interpolate a tabulated function.

    The table is searched by bisection; queries outside [xs[0], xs[-1]] are
    clamped to the boundary value (no extrapolation).

    Args:
        x: Query point(s)
        xs: Strictly increasing abscissae
        ys: Ordinates aligned with xs

    Returns:
        Interpolated value(s); a float for a scalar query
    """
    result = np.interp(x, xs, ys)
    if np.ndim(result) == 0:
        return float(result)
    return result


def simpson(a: float, b: float, fa: float, fb: float, fm: float) -> float:
    """Simpson's rule on [a, b] given the end and mid-point values."""
    return (b - a) * (fa + 4.0 * fm + fb) / 6.0


def adaptive_simpson(
    f: Callable[[float], float],
    a: float,
    b: float,
    tol: float,
    max_depth: int = 22,
) -> float:
    """Integrate f over [a, b] by adaptive Simpson quadrature.

    Each interval is compared against the sum over its two halves. The
    refined estimate, with the Richardson correction (I2 - I0)/15, is
    accepted once |I2 - I0| < 15 tol or the depth budget is spent;
    otherwise both halves are refined with tolerance tol/2.

    Args:
        f: Scalar integrand
        a: Lower limit
        b: Upper limit
        tol: Absolute error tolerance
        max_depth: Maximum number of bisection levels

    Returns:
        Estimate of the integral
    """
    fa = f(a)
    fb = f(b)
    m = 0.5 * (a + b)
    fm = f(m)
    whole = simpson(a, b, fa, fb, fm)
    return _refine(f, a, b, fa, fb, fm, whole, tol, max_depth)


def _refine(
    f: Callable[[float], float],
    a: float,
    b: float,
    fa: float,
    fb: float,
    fm: float,
    whole: float,
    tol: float,
    depth: int,
) -> float:
    m = 0.5 * (a + b)
    m_left = 0.5 * (a + m)
    m_right = 0.5 * (m + b)
    f_left = f(m_left)
    f_right = f(m_right)

    left = simpson(a, m, fa, fm, f_left)
    right = simpson(m, b, fm, fb, f_right)
    halves = left + right
    err = abs(halves - whole)

    if depth <= 0 or err < 15.0 * tol:
        return halves + (halves - whole) / 15.0

    return (
        _refine(f, a, m, fa, fm, f_left, left, 0.5 * tol, depth - 1)
        + _refine(f, m, b, fm, fb, f_right, right, 0.5 * tol, depth - 1)
    )


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide, returning ``default`` when the denominator is not positive.

    Used for ratios of non-negative masses and counts.
    """
    if denominator > 0:
        return numerator / denominator
    return default
