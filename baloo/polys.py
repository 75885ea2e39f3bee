"""
Protocol Polynomials
====================

Construction of every polynomial the prover commits to, over two
domains:

- V = {ν^0, ..., ν^{m-1}}, the lookup domain (a subgroup: NTT applies)
- H_I = {ω^i : i ∈ I}, the m points selected from the table domain
  (not a subgroup: Lagrange interpolation)

Polynomials:
------------
- z_I(X) = Π_{h ∈ H_I} (X - h)                       deg m, monic
- t_I(X): t_I(h_j) = t_{I_j}                          deg < m
- φ(X):   φ(ν^i) = f_i                                deg < m
- v(X):   v(ν^i) = h_{col(i)}                         deg < m
- z_V(X) = X^m - 1                                    deg m
- μ_i(X) = z_V(X) / (X - ν^i) · ν^i / m               (μ_i(ν^l) = δ_il)
- τ̂_j(X) = z_I(X) / (X - h_j) · (-h_j) / z_I(0)       (τ̂_j(0) = 1)

The barycentric weights w_j = Π_{l≠j} (h_j - h_l)^{-1} of H_I combine the
preprocessed per-index quotients into the sub-table quotients.
"""

from collections import namedtuple
from typing import List, Sequence

import galois

from .field import ScalarField
from .index import LookupIndex
from .polynomial import (coefficient, constant, divide_by_linear, from_evaluations, scale,
                         subgroup_vanishing, vanishing)

LookupPolynomials = namedtuple('LookupPolynomials', [
    'h_i',        # H_I, ordered like the index set
    'weights',    # barycentric weights of H_I
    'z_i',        # vanishing polynomial of H_I
    't_i',        # sub-table interpolation
    'phi',        # lookup interpolation over V
    'v',          # assigned H_I root per lookup entry, over V
    'z_v',        # vanishing polynomial of V
    'v_domain',   # [ν^0, ..., ν^{m-1}]
])


def barycentric_weights(points: Sequence[int], field: ScalarField) -> List[int]:
    """w_j = Π_{l≠j} (x_j - x_l)^{-1}; points must be distinct."""
    xs = field.array(points)
    products = []
    for j in range(len(points)):
        acc = field.GF(1)
        for l in range(len(points)):
            if l != j:
                acc = acc * (xs[j] - xs[l])
        if acc == 0:
            raise ValueError(f"interpolation points are not distinct (point {j})")
        products.append(int(acc))
    return field.multi_inv(products)


def lagrange_interpolate(points: Sequence[int], values: Sequence[int], field: ScalarField) -> galois.Poly:
    """
    Interpolate values over arbitrary distinct points.

    Examples
    --------
    Points {2, 3, 4} with values {4, 9, 16} give X^2.
    """
    if len(points) != len(values):
        raise ValueError(f"{len(points)} points but {len(values)} values")
    if len(set(field.elem(x) for x in points)) != len(points):
        raise ValueError("interpolation points are not distinct")
    if len(points) == 1:
        return constant(values[0], field)
    return galois.lagrange_poly(field.array(points), field.array(values))


def lagrange_basis_v(i: int, v_domain: Sequence[int], field: ScalarField) -> galois.Poly:
    """μ_i(X) = z_V(X) / (X - ν^i) · ν^i / m, the Lagrange basis of V."""
    m = len(v_domain)
    quotient, _ = divide_by_linear(subgroup_vanishing(m, field), v_domain[i], field)
    return scale(quotient, field.div(v_domain[i], m), field)


def normalized_basis(j: int, h_i: Sequence[int], z_i: galois.Poly, field: ScalarField) -> galois.Poly:
    """τ̂_j(X) = z_I(X) / (X - h_j) · (-h_j) / z_I(0), normalized so τ̂_j(0) = 1."""
    quotient, _ = divide_by_linear(z_i, h_i[j], field)
    return scale(quotient, field.div(field.neg(h_i[j]), coefficient(z_i, 0)), field)


def build_polynomials(domain: Sequence[int], index: LookupIndex, lookup: Sequence[int],
                      field: ScalarField) -> LookupPolynomials:
    """
    Build z_I, t_I, φ, v and z_V for a lookup.

    Parameters
    ----------
    domain : Sequence[int]
        The table domain H.
    index : LookupIndex
        Output of pad_indices().
    lookup : Sequence[int]
        The lookup vector f.
    """
    m = len(lookup)
    h_i = [domain[i] for i in index.positions]
    weights = barycentric_weights(h_i, field)
    z_i = vanishing(h_i, field)
    t_i = lagrange_interpolate(h_i, index.values, field)

    phi = from_evaluations(lookup, field)
    v = from_evaluations([h_i[c] for c in index.col], field)

    return LookupPolynomials(
        h_i=tuple(h_i),
        weights=tuple(weights),
        z_i=z_i,
        t_i=t_i,
        phi=phi,
        v=v,
        z_v=subgroup_vanishing(m, field),
        v_domain=tuple(field.domain(m)),
    )
