"""
Test Suite for Field, Polynomial and Index Construction
=======================================================

These tests check the algebra the prover builds on, without any group
operations:

1. Scalar field domains and the NTT
2. Interpolation over arbitrary points
3. z_I, t_I and the normalized bases
4. Index extraction, padding and the column map
"""

import pytest

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from baloo.groups import setup, two_adicity
from baloo.field import ScalarField, is_power_of_two
from baloo.polynomial import (
    coefficient, degree, divide_by_linear, evaluate, from_coefficients, from_evaluations, is_zero,
    monomial, shift, subgroup_vanishing, vanishing, zero
)
from baloo.polys import (
    barycentric_weights, lagrange_interpolate, lagrange_basis_v, normalized_basis, build_polynomials
)
from baloo.index import extract_indices, pad_indices, check_lookup_shape
from baloo.config import Config
from baloo.errors import SetupError, WitnessError


@pytest.fixture(scope="module")
def pairing_params():
    """Initialize pairing group."""
    return setup('SS512')


@pytest.fixture(scope="module")
def field(pairing_params):
    return ScalarField(pairing_params['order'])


def poly(coeffs, field):
    return from_coefficients(coeffs, field)


# ============================================================================
# Field and domains
# ============================================================================

def test_two_adicity_supports_tables(pairing_params, field):
    assert pairing_params['two_adicity'] == field.TWO_ADICITY
    assert field.TWO_ADICITY >= 20
    assert two_adicity(17) == 4


def test_fields_share_one_galois_class(pairing_params, field):
    assert ScalarField(pairing_params['order']).GF is field.GF
    assert field.GF.order == pairing_params['order']


def test_non_prime_modulus_rejected():
    with pytest.raises(SetupError):
        ScalarField(15)


def test_root_of_unity_is_primitive(field):
    omega = field.scalar(field.root_of_unity(8))
    assert omega ** 8 == 1
    assert omega ** 4 != 1
    assert field.root_of_unity(1) == 1


def test_root_of_unity_rejects_bad_sizes(field):
    with pytest.raises(SetupError):
        field.root_of_unity(6)
    with pytest.raises(SetupError):
        field.root_of_unity(1 << (field.TWO_ADICITY + 1))


def test_ntt_matches_domain_evaluation(field):
    coeffs = [5, 0, 7, 11, 3, 1, 0, 2]
    evals = field.ntt(coeffs)
    p = poly(coeffs, field)

    assert evals == [evaluate(p, x, field) for x in field.domain(8)]
    assert field.intt(evals) == coeffs


def test_ntt_of_size_one(field):
    assert field.ntt([7]) == [7]
    assert field.intt([7]) == [7]


def test_multi_inv(field):
    values = [3, 7, field.MODULUS - 1, 12345]
    for v, inv in zip(values, field.multi_inv(values)):
        assert field.mul(v, inv) == 1
    with pytest.raises(ZeroDivisionError):
        field.multi_inv([1, 0])


def test_is_power_of_two():
    assert [n for n in range(1, 20) if is_power_of_two(n)] == [1, 2, 4, 8, 16]
    assert not is_power_of_two(0)


def test_config_rejects_zero_workers():
    with pytest.raises(ValueError):
        Config(workers=0)
    assert Config(workers=3).workers == 3


# ============================================================================
# Polynomial helpers
# ============================================================================

def test_coefficients_are_ascending(field):
    p = poly([4, 0, 3], field)
    assert coefficient(p, 0) == 4
    assert coefficient(p, 2) == 3
    assert coefficient(p, 5) == 0
    assert degree(p) == 2
    assert evaluate(p, 2, field) == 4 + 3 * 4


def test_divmod_identity(field):
    a = poly([4, 0, 3, 9, 1], field)
    b = poly([2, 5, 1], field)
    q, r = divmod(a, b)
    assert degree(r) < degree(b)
    assert q * b + r == a


def test_divide_by_linear_remainder_is_evaluation(field):
    p = poly([1, 2, 3], field)
    q, r = divide_by_linear(p, 10, field)
    assert r == evaluate(p, 10, field) == 321
    assert q * poly([-10, 1], field) + poly([r], field) == p


def test_shift_and_zero(field):
    p = poly([1, 2], field)
    assert shift(p, 3, field) == poly([0, 0, 0, 1, 2], field)
    assert degree(zero(field)) == -1
    assert is_zero(p - p)
    assert degree(monomial(0, field)) == 0


def test_from_evaluations(field):
    domain = field.domain(4)
    p = from_evaluations([9, 8, 7, 6], field)
    assert [evaluate(p, x, field) for x in domain] == [9, 8, 7, 6]


# ============================================================================
# Interpolation and protocol polynomials
# ============================================================================

def test_lagrange_interpolation_recovers_square(field):
    p = lagrange_interpolate([2, 3, 4], [4, 9, 16], field)
    assert p == poly([0, 0, 1], field)
    assert evaluate(p, 5, field) == 25


def test_lagrange_interpolation_single_point(field):
    assert lagrange_interpolate([5], [42], field) == poly([42], field)


def test_repeated_points_rejected(field):
    with pytest.raises(ValueError):
        barycentric_weights([1, 2, 1], field)
    with pytest.raises(ValueError):
        lagrange_interpolate([1, 2, 1], [1, 1, 1], field)


def test_barycentric_weights(field):
    points = [2, 3, 4]
    weights = barycentric_weights(points, field)
    # w_0 = 1 / ((2 - 3)(2 - 4)) = 1/2
    assert field.mul(weights[0], 2) == 1


def test_vanishing_polynomial(field):
    h_i = [field.domain(8)[i] for i in (2, 6, 3)]
    z_i = vanishing(h_i, field)
    assert degree(z_i) == 3
    assert coefficient(z_i, 3) == 1
    assert all(evaluate(z_i, h, field) == 0 for h in h_i)


def test_lookup_polynomials(field):
    table = [1, 2, 3, 4, 5, 6, 7, 8]
    lookup = [3, 7, 3, 4]
    domain = field.domain(8)
    index = pad_indices(extract_indices(table, lookup), table)
    polys = build_polynomials(domain, index, lookup, field)

    assert degree(polys.z_i) == 4
    assert coefficient(polys.z_i, 4) == 1
    assert degree(polys.t_i) < 4
    for j, h in enumerate(polys.h_i):
        assert evaluate(polys.t_i, h, field) == index.values[j]
    for i, f in enumerate(lookup):
        h = polys.h_i[index.col[i]]
        assert evaluate(polys.t_i, h, field) == f
        assert evaluate(polys.v, polys.v_domain[i], field) == h
        assert evaluate(polys.phi, polys.v_domain[i], field) == f
    assert polys.z_v == subgroup_vanishing(4, field)


def test_lookup_polynomials_single_entry(field):
    table = [1, 2, 3, 4]
    index = pad_indices(extract_indices(table, [3]), table)
    polys = build_polynomials(field.domain(4), index, [3], field)
    assert degree(polys.z_i) == 1
    assert polys.t_i == poly([3], field)
    assert polys.phi == poly([3], field)
    assert polys.v_domain == (1,)


def test_lagrange_basis_v_is_kronecker(field):
    v_domain = field.domain(4)
    for i in range(4):
        mu = lagrange_basis_v(i, v_domain, field)
        assert [evaluate(mu, x, field) for x in v_domain] == [1 if l == i else 0 for l in range(4)]


def test_normalized_basis(field):
    h_i = [field.domain(8)[i] for i in (1, 4, 5)]
    z_i = vanishing(h_i, field)
    for j in range(3):
        tau = normalized_basis(j, h_i, z_i, field)
        assert evaluate(tau, 0, field) == 1
        assert degree(tau) == 2
        for l, h in enumerate(h_i):
            if l != j:
                assert evaluate(tau, h, field) == 0


# ============================================================================
# Index extraction
# ============================================================================

def test_extract_indices_first_seen_order():
    index = extract_indices([1, 2, 3, 4, 5, 6, 7, 8], [3, 7, 3, 4])
    assert index.values == (3, 7, 4)
    assert index.positions == (2, 6, 3)
    assert index.col == (0, 1, 0, 2)


def test_pad_indices_appends_smallest_unused_positions():
    table = [1, 2, 3, 4, 5, 6, 7, 8]
    index = pad_indices(extract_indices(table, [3, 7, 3, 4]), table)
    assert index.positions == (2, 6, 3, 0)
    assert index.values == (3, 7, 4, 1)
    assert index.col == (0, 1, 0, 2)


def test_pad_indices_skips_used_positions():
    table = [10, 20, 30, 40]
    index = pad_indices(extract_indices(table, [10, 10]), table)
    assert index.positions == (0, 1)
    assert index.values == (10, 20)


def test_pad_indices_full_index_unchanged():
    table = [1, 2, 3, 4]
    index = extract_indices(table, [4, 3, 2, 1])
    assert pad_indices(index, table) == index


def test_extract_indices_uses_first_occurrence():
    index = extract_indices([5, 5, 6, 6], [6, 5])
    assert index.positions == (2, 0)


def test_extract_indices_single_value():
    index = extract_indices([1, 2, 3, 4], [2, 2])
    assert index.positions == (1,)
    assert index.col == (0, 0)


def test_extract_indices_missing_value():
    with pytest.raises(WitnessError):
        extract_indices([1, 2, 3, 4], [3, 9])


@pytest.mark.parametrize("m,n", [(1, 4), (2, 4), (4, 4), (1, 1)])
def test_lookup_shape_accepted(m, n):
    check_lookup_shape(m, n)


@pytest.mark.parametrize("m,n", [(3, 4), (8, 4), (0, 4)])
def test_lookup_shape_rejected(m, n):
    with pytest.raises(WitnessError):
        check_lookup_shape(m, n)
