"""
Utility Functions
=================

This module provides utility functions for group operations,
multi-exponentiation, pairing products, serialization and ordered
parallel evaluation.

Key Operations:
- Multi-exponentiation: Compute ∏ g_i^{e_i} with integer exponents
- Pairing products: Compute ∏ e(g_i, ĝ_i)
- GT equality
- Serialization: Convert group elements to/from bytes
- ordered_map: Evaluate independent jobs, optionally on a thread pool,
  returning results in submission order

According to charm-crypto documentation:
- Group operations use * for multiplication, ** for exponentiation
- Inverse is computed as elem ** -1
- Pairing is computed as pair(g1_elem, g2_elem)
- Serialization uses group.serialize() and group.deserialize()
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1, G2, GT, pair


def to_zr(value: int, group: PairingGroup) -> ZR:
    """Lift a Python integer into Z_r."""
    return group.init(ZR, int(value) % int(group.order()))


def multiexp(bases: list, exponents: List[int], group: PairingGroup, elem_type=G1):
    """
    Compute multi-exponentiation ∏ bases[i]^{exponents[i]} in G1 or G2.

    Formula:
    --------
    result = ∏_{i=0}^{len(bases)-1} bases[i]^{exponents[i]}

    Parameters
    ----------
    bases : list
        Base elements, all of type elem_type
    exponents : List[int]
        Exponents as integers modulo r
    group : PairingGroup
        The pairing group
    elem_type : G1 or G2
        Type of the identity returned for an empty or all-zero input

    Notes
    -----
    Zero exponents are skipped, so sparse polynomials such as
    X^{d-m+1}·D(X) cost only their non-zero coefficients.
    """
    if len(bases) != len(exponents):
        raise ValueError(f"bases and exponents must have same length: {len(bases)} != {len(exponents)}")

    p = int(group.order())
    result = group.init(elem_type, 1)
    for base, exp in zip(bases, exponents):
        exp = int(exp) % p
        if exp == 0:
            continue
        result *= base ** group.init(ZR, exp)
    return result


def multiexp_g1(bases: list, exponents: List[int], group: PairingGroup) -> G1:
    return multiexp(bases, exponents, group, G1)


def multiexp_g2(bases: list, exponents: List[int], group: PairingGroup) -> G2:
    return multiexp(bases, exponents, group, G2)


def pair_prod(g1_elems: list, g2_elems: list, group: PairingGroup) -> GT:
    """
    Compute product of pairings: ∏ e(g1_elems[i], g2_elems[i]).

    Notes
    -----
    - If lists are empty, returns the identity element 1_GT
    - g1_elems and g2_elems must have the same length
    """
    if len(g1_elems) != len(g2_elems):
        raise ValueError(f"g1_elems and g2_elems must have same length: {len(g1_elems)} != {len(g2_elems)}")

    result = group.init(GT, 1)
    for g1, g2 in zip(g1_elems, g2_elems):
        result *= pair(g1, g2)
    return result


def gt_eq(a: GT, b: GT, group: PairingGroup) -> bool:
    """
    Test equality of two GT elements.

    Direct comparison is tried first; serialized forms are compared as a
    fallback for representations that compare unequal while encoding the
    same element.
    """
    if a == b:
        return True
    return group.serialize(a) == group.serialize(b)


def is_identity(elem, group: PairingGroup, elem_type=G1) -> bool:
    return elem == group.init(elem_type, 1)


def serialize_element(elem, group: PairingGroup) -> bytes:
    """
    Serialize a single group element to bytes.

    group.serialize is used rather than objectToBytes: the latter pickles,
    and proofs are parsed from untrusted input.
    """
    return group.serialize(elem)


def deserialize_element(data: bytes, group: PairingGroup):
    """Inverse of serialize_element; returns None for unparseable input."""
    elem = group.deserialize(data)
    if elem is None or elem is False:
        return None
    return elem


def ordered_map(fn: Callable, items: Iterable, workers: int = 1) -> list:
    """
    Apply fn to every item and return the results in input order.

    With workers > 1 the calls run on a thread pool; Executor.map yields
    results in submission order whatever the completion order, so callers
    can append them to a transcript directly.
    """
    items = list(items)
    if workers <= 1 or len(items) <= 1:
        return [fn(item) for item in items]
    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(fn, items))
