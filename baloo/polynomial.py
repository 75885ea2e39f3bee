"""
Univariate Polynomials over Z_r
===============================

Polynomials are ``galois.Poly`` objects over ``ScalarField.GF``; products,
sums and ``divmod`` are galois arithmetic. This module adds the
constructors and conversions the protocol uses on top of it.

Conventions:
------------
- galois stores coefficients in descending order [a_n, ..., a_0]; the
  coefficient lists handed to commitments are ascending ints
  (coeffs[i] is the coefficient of X^i), trailing zeros trimmed
- the zero polynomial has degree -1 here (galois reports 0)
- scalars enter a product or sum as constant polynomials
"""

from typing import List, Sequence, Tuple

import galois

from .field import ScalarField


def from_coefficients(coeffs: Sequence[int], field: ScalarField) -> galois.Poly:
    """Build a polynomial from ascending coefficients."""
    coeffs = [field.elem(c) for c in coeffs] or [0]
    return galois.Poly(coeffs, field=field.GF, order="asc")


def coefficients(poly: galois.Poly) -> List[int]:
    """Ascending coefficients as ints; [] for the zero polynomial."""
    if is_zero(poly):
        return []
    return [int(c) for c in poly.coeffs[::-1]]


def coefficient(poly: galois.Poly, i: int) -> int:
    if i > poly.degree:
        return 0
    return int(poly.coeffs[poly.degree - i])


def is_zero(poly: galois.Poly) -> bool:
    return poly.degree == 0 and int(poly.coeffs[0]) == 0


def degree(poly: galois.Poly) -> int:
    return -1 if is_zero(poly) else poly.degree


def zero(field: ScalarField) -> galois.Poly:
    return galois.Poly.Zero(field.GF)


def constant(c, field: ScalarField) -> galois.Poly:
    return galois.Poly([field.elem(c)], field=field.GF)


def monomial(k: int, field: ScalarField) -> galois.Poly:
    """X^k"""
    return galois.Poly.Degrees([k], field=field.GF)


def vanishing(roots: Sequence[int], field: ScalarField) -> galois.Poly:
    """Monic polynomial Π (X - root)."""
    return galois.Poly.Roots(field.array(roots))


def subgroup_vanishing(n: int, field: ScalarField) -> galois.Poly:
    """X^n - 1"""
    return monomial(n, field) - constant(1, field)


def from_evaluations(evals: Sequence[int], field: ScalarField) -> galois.Poly:
    """Interpolate values given on the power-of-two subgroup of size len(evals)."""
    return from_coefficients(field.intt(evals), field)


def evaluate(poly: galois.Poly, x, field: ScalarField) -> int:
    return int(poly(field.scalar(x)))


def scale(poly: galois.Poly, c, field: ScalarField) -> galois.Poly:
    return poly * constant(c, field)


def shift(poly: galois.Poly, k: int, field: ScalarField) -> galois.Poly:
    """Multiply by X^k."""
    if k < 0:
        raise ValueError("negative shift")
    return poly * monomial(k, field)


def divide_by_linear(poly: galois.Poly, root, field: ScalarField) -> Tuple[galois.Poly, int]:
    """
    Divide by (X - root).

    Returns (q, r) with poly = q·(X - root) + r; r equals poly(root).
    """
    divisor = galois.Poly([1, field.neg(root)], field=field.GF)
    quotient, remainder = divmod(poly, divisor)
    return quotient, coefficient(remainder, 0)

