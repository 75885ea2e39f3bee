"""
Test Suite for KZG Commitments and the Transcript
=================================================

Covers the commitment scheme contract the protocol relies on:

1. SRS generation and validation, including at trim time
2. Commit / open / verify in G1, batched openings, G2 openings
3. Commit-and-write helpers and batch commitments
4. Degree-shift commitments
5. Transcript determinism and the element encodings
"""

import pytest
from charm.toolbox.pairinggroup import G1, G2, GT, pair

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from baloo.groups import setup, get_generators
from baloo.field import ScalarField
from baloo.polynomial import evaluate, from_coefficients, monomial, shift, vanishing
from baloo.crs import keygen_srs, validate_srs
from baloo.kzg import UnivariateKzg, degree_shift_commitments
from baloo.transcript import (
    Transcript, encode_element, decode_element, encode_scalar, decode_scalar, scalar_width
)
from baloo.utils import multiexp_g1, pair_prod, gt_eq, ordered_map
from baloo.errors import OpeningError, SerializationError, SetupError, VerificationError


@pytest.fixture(scope="module")
def pairing_params():
    """Initialize pairing group."""
    return setup('SS512')


@pytest.fixture(scope="module")
def group(pairing_params):
    return pairing_params['group']


@pytest.fixture(scope="module")
def field(pairing_params):
    return ScalarField(pairing_params['order'])


@pytest.fixture(scope="module")
def scheme(group):
    return UnivariateKzg(group)


@pytest.fixture(scope="module")
def params(scheme):
    """Seeded SRS of degree 8, trimmed to (pp, vp)."""
    srs = scheme.setup(8, seed=b"kzg-tests")
    return scheme.trim(srs, 8)


# ============================================================================
# SRS
# ============================================================================

def test_srs_shape_and_validation(group):
    srs = keygen_srs(4, group, seed=b"srs-shape")
    assert len(srs['g1_powers']) == 5
    assert len(srs['g2_powers']) == 5
    assert srs['g1_powers'][0] == srs['g1']
    assert validate_srs(srs)


def test_srs_tampered_power_fails_validation(group):
    srs = keygen_srs(4, group, seed=b"srs-tamper")
    srs['g1_powers'][2] = srs['g1_powers'][2] * srs['g1']
    assert not validate_srs(srs)


def test_seeded_srs_is_reproducible(group):
    a = keygen_srs(2, group, seed=b"same")
    b = keygen_srs(2, group, seed=b"same")
    assert a['g1_powers'] == b['g1_powers']


def test_srs_rejects_degree_zero(group):
    with pytest.raises(SetupError):
        keygen_srs(0, group)


def test_generators_are_deterministic(group):
    assert get_generators(group) == get_generators(group)


def test_trim_rejects_larger_degree(scheme):
    srs = scheme.setup(4, seed=b"trim")
    with pytest.raises(SetupError):
        scheme.trim(srs, 5)


def test_trim_validates_kept_powers(scheme):
    srs = scheme.setup(4, seed=b"trim-tamper")
    srs['g2_powers'][3] = srs['g2_powers'][3] * srs['g2']
    with pytest.raises(SetupError):
        scheme.trim(srs, 4)
    # the tampered power is cut away below degree 3
    pp, _ = scheme.trim(srs, 2)
    assert len(pp['g2_powers']) == 3


# ============================================================================
# Commit / open / verify
# ============================================================================

def test_commit_is_multiexp_over_powers(scheme, params, field, group):
    pp, _ = params
    poly = from_coefficients([3, 0, 5], field)
    expected = multiexp_g1(pp['g1_powers'][:3], [3, 0, 5], group)
    assert scheme.commit(pp, poly) == expected


def test_commit_rejects_degree_above_srs(scheme, params, field):
    pp, _ = params
    with pytest.raises(SetupError):
        scheme.commit(pp, monomial(9, field))


def test_open_verify(scheme, params, field, group):
    pp, vp = params
    poly = from_coefficients([1, 2, 3, 4], field)
    comm = scheme.commit(pp, poly)
    value = evaluate(poly, 7, field)

    transcript = Transcript(group)
    scheme.open(pp, poly, comm, 7, value, transcript)
    proof = transcript.into_proof()

    scheme.verify(vp, comm, 7, value, Transcript.from_proof(group, proof))
    with pytest.raises(VerificationError):
        scheme.verify(vp, comm, 7, value + 1, Transcript.from_proof(group, proof))


def test_open_wrong_value_raises(scheme, params, field, group):
    pp, _ = params
    poly = from_coefficients([1, 2, 3], field)
    with pytest.raises(OpeningError):
        scheme.open(pp, poly, scheme.commit(pp, poly), 2, evaluate(poly, 2, field) + 1, Transcript(group))


def test_batch_open_verify(scheme, params, field, group):
    pp, vp = params
    polys = [from_coefficients([1, 2], field), from_coefficients([5, 0, 7], field)]
    comms = [scheme.commit(pp, p) for p in polys]
    point = 11
    values = [evaluate(p, point, field) for p in polys]

    transcript = Transcript(group)
    scheme.batch_open(pp, polys, comms, point, values, transcript)
    proof = transcript.into_proof()

    scheme.batch_verify(vp, comms, point, values, Transcript.from_proof(group, proof))
    with pytest.raises(VerificationError):
        scheme.batch_verify(vp, comms, point, [values[0], values[1] + 1], Transcript.from_proof(group, proof))


def test_g2_open_verify(scheme, params, field, group):
    pp, vp = params
    poly = vanishing([2, 3, 5], field)
    comm = scheme.commit_g2(pp, poly)

    transcript = Transcript(group)
    scheme.open_g2(pp, poly, comm, 0, evaluate(poly, 0, field), transcript)
    proof = transcript.into_proof()

    scheme.verify_g2(vp, comm, 0, evaluate(poly, 0, field), Transcript.from_proof(group, proof))
    with pytest.raises(VerificationError):
        scheme.verify_g2(vp, comm, 0, 1, Transcript.from_proof(group, proof))


def test_degree_shift_commitments(scheme, params, field):
    pp, vp = params
    shifts = degree_shift_commitments(pp, 4)
    assert shifts['x_m_g2'] == scheme.commit_g2(pp, monomial(4, field))
    assert shifts['x_shift_1_g1'] == pp['g1_powers'][5]
    assert 'x_shift_2_g2' not in shifts

    # deg p <= d - (d - m + 1) = 3 certifies; X^4 does not fit the shifted SRS
    p = from_coefficients([1, 1, 1, 1], field)
    lhs = pair_prod([scheme.commit(pp, p)], [shifts['x_shift_1_g2']], scheme.group)
    rhs = pair_prod([scheme.commit(pp, shift(p, 5, field))], [vp['g2']], scheme.group)
    assert gt_eq(lhs, rhs, scheme.group)
    with pytest.raises(SetupError):
        scheme.commit(pp, shift(monomial(4, field), 5, field))


def test_degree_shift_for_single_entry(params):
    pp, _ = params
    shifts = degree_shift_commitments(pp, 1)
    assert shifts['x_m_g2'] == pp['g2_powers'][1]
    assert shifts['x_shift_1_g1'] == pp['g1_powers'][8]


@pytest.mark.parametrize("m", [0, 9])
def test_degree_shift_rejects_sizes(params, m):
    pp, _ = params
    with pytest.raises(SetupError):
        degree_shift_commitments(pp, m)


# ============================================================================
# Commit-and-write helpers
# ============================================================================

def test_commit_and_write(scheme, params, field, group):
    pp, _ = params
    poly = from_coefficients([2, 7], field)

    transcript = Transcript(group)
    comm = scheme.commit_and_write(pp, poly, transcript)
    comm_g2 = scheme.commit_and_write(pp, poly, transcript, kind=G2)
    assert comm == scheme.commit(pp, poly)
    assert comm_g2 == scheme.commit_g2(pp, poly)

    reference = Transcript(group)
    reference.write_commitment(comm, G1)
    reference.write_commitment(comm_g2, G2)
    assert transcript.into_proof() == reference.into_proof()
    assert transcript.squeeze_challenge() == reference.squeeze_challenge()


def test_batch_commit_keeps_order(scheme, params, field):
    pp, _ = params
    polys = [from_coefficients([i, 1, i * i], field) for i in range(6)]
    expected = [scheme.commit(pp, p) for p in polys]
    assert scheme.batch_commit(pp, polys) == expected
    assert scheme.batch_commit(pp, polys, workers=4) == expected

    kinds = [G1, G2, G1, G2, G1, G2]
    mixed = scheme.batch_commit(pp, polys, kinds, workers=3)
    assert mixed[1] == scheme.commit_g2(pp, polys[1])
    assert mixed[2] == expected[2]
    with pytest.raises(ValueError):
        scheme.batch_commit(pp, polys, [G1])


def test_batch_commit_and_write_matches_sequential_writes(scheme, params, field, group):
    pp, _ = params
    polys = [from_coefficients([5, 3], field), vanishing([1, 2], field), from_coefficients([9], field)]
    kinds = [G1, G2, G1]

    parallel = Transcript(group)
    comms = scheme.batch_commit_and_write(pp, polys, parallel, kinds=kinds, workers=3)

    sequential = Transcript(group)
    for poly, kind in zip(polys, kinds):
        scheme.commit_and_write(pp, poly, sequential, kind=kind)

    assert parallel.into_proof() == sequential.into_proof()
    reader = Transcript.from_proof(group, parallel.into_proof())
    assert [reader.read_commitment(kind) for kind in kinds] == comms
    reader.finish()


# ============================================================================
# Transcript
# ============================================================================

def test_transcript_is_deterministic(group, params):
    pp, _ = params

    def run(label):
        t = Transcript(group, label)
        t.write_commitment(pp['g1_powers'][1], G1)
        t.write_field_element(42)
        return t.squeeze_challenge(), t.squeeze_challenge()

    a1, a2 = run(b"label-a")
    assert (a1, a2) == run(b"label-a")
    assert a1 != a2
    assert run(b"label-b")[0] != a1


def test_transcript_replay(group, params):
    pp, _ = params
    writer = Transcript(group)
    writer.write_commitment(pp['g2_powers'][2], G2)
    writer.write_field_element(7)
    challenge = writer.squeeze_challenge()

    reader = Transcript.from_proof(group, writer.into_proof())
    assert reader.read_commitment(G2) == pp['g2_powers'][2]
    assert reader.read_field_element() == 7
    assert reader.squeeze_challenge() == challenge
    reader.finish()


def test_transcript_rejects_trailing_bytes(group):
    writer = Transcript(group)
    writer.write_field_element(1)
    reader = Transcript.from_proof(group, writer.into_proof() + b"\x00")
    reader.read_field_element()
    with pytest.raises(SerializationError):
        reader.finish()


def test_identity_encoding(group):
    identity = group.init(G1, 1)
    data = encode_element(identity, group, G1)
    assert data == b"\x00\x00"
    elem, offset = decode_element(data, 0, group, G1)
    assert elem == identity and offset == 2


def test_element_decoding_errors(group, params):
    pp, _ = params
    data = encode_element(pp['g1_powers'][1], group, G1)
    elem, _ = decode_element(data, 0, group, G1)
    assert elem == pp['g1_powers'][1]

    with pytest.raises(SerializationError):
        decode_element(data[:-1], 0, group, G1)
    with pytest.raises(SerializationError):
        decode_element(b"\x00", 0, group, G1)
    with pytest.raises(SerializationError):
        decode_element(b"\x00\x04junk", 0, group, G1)


def test_scalar_encoding(group):
    order = int(group.order())
    width = scalar_width(group)
    assert len(encode_scalar(5, group)) == width
    assert decode_scalar(encode_scalar(order - 1, group), 0, group) == (order - 1, width)
    with pytest.raises(SerializationError):
        decode_scalar(order.to_bytes(width, 'big'), 0, group)
    with pytest.raises(SerializationError):
        decode_scalar(b"\x01", 0, group)


def test_ordered_map_keeps_order():
    assert ordered_map(lambda x: x * x, range(10), workers=4) == [x * x for x in range(10)]


def test_element_of_wrong_group_rejected(group, params):
    pp, _ = params
    data = encode_element(pp['g2_powers'][1], group, G2)
    with pytest.raises(SerializationError):
        decode_element(data, 0, group, G1)

    gt = pair(pp['g1_powers'][1], pp['g2_powers'][1])
    data = encode_element(gt, group, GT)
    with pytest.raises(SerializationError):
        decode_element(data, 0, group, G1)
    with pytest.raises(SerializationError):
        decode_element(data, 0, group, G2)


@pytest.mark.parametrize("proof", [None, "not bytes", 5])
def test_transcript_requires_bytes(group, proof):
    with pytest.raises(SerializationError):
        Transcript.from_proof(group, proof)
