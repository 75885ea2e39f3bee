"""
Structured Reference String (SRS) Generation
============================================

This module generates the powers-of-τ reference string the KZG
commitments are computed against.

The SRS consists of powers of a secret τ in both source groups:
- For G1:  [τ^i]_1 := g1^{τ^i}      for i ∈ [0, d]
- For G2:  [τ^i]_2 := g2^{τ^i}      for i ∈ [0, d]

d is the maximum supported degree. τ is the trapdoor: knowing it breaks
binding, so it is dropped as soon as the powers are computed. Generation
is the only step of the system that needs randomness.
"""

import logging

from charm.toolbox.pairinggroup import PairingGroup, ZR, pair

from .errors import SetupError
from .groups import get_generators
from .utils import gt_eq

logger = logging.getLogger(__name__)


def keygen_srs(max_degree: int, group: PairingGroup, seed: bytes = None) -> dict:
    """
    Generate the SRS for polynomials of degree at most max_degree.

    Parameters
    ----------
    max_degree : int
        The maximum degree d; the SRS holds d + 1 powers per group.
    group : PairingGroup
        The initialized pairing group from setup()
    seed : bytes, optional
        Deterministic seed for τ, for reproducible tests. If None, τ is
        drawn from the group's random source.
        WARNING: a seeded SRS is insecure outside of testing.

    Returns
    -------
    dict
        A dictionary containing:
        - 'group': The PairingGroup object
        - 'max_degree': d
        - 'g1': [1]_1, the G1 generator
        - 'g2': [1]_2, the G2 generator
        - 'g1_powers': list [τ^0]_1 ... [τ^d]_1
        - 'g2_powers': list [τ^0]_2 ... [τ^d]_2

    Examples
    --------
    >>> from baloo.groups import setup
    >>> params = setup('SS512')
    >>> srs = keygen_srs(8, params['group'])
    >>> len(srs['g1_powers'])
    9
    """
    if not isinstance(max_degree, int) or max_degree < 1:
        raise SetupError(f"SRS degree must be a positive integer, got {max_degree!r}")

    if seed is None:
        tau = group.random(ZR)
    else:
        tau = group.hash(b"baloo/srs-seed/" + bytes(seed), ZR)

    g1, g2 = get_generators(group)

    # Compute powers of τ
    tau_powers = [group.init(ZR, 1)]
    for _ in range(max_degree):
        tau_powers.append(tau_powers[-1] * tau)

    g1_powers = [g1 ** power for power in tau_powers]
    g2_powers = [g2 ** power for power in tau_powers]
    del tau, tau_powers

    logger.debug("generated SRS of degree %d", max_degree)
    return {
        'group': group,
        'max_degree': max_degree,
        'g1': g1,
        'g2': g2,
        'g1_powers': g1_powers,
        'g2_powers': g2_powers,
    }


def validate_srs(srs: dict) -> bool:
    """
    Validate that the SRS is well-formed.

    Checks:
    - both power lists have d + 1 elements
    - the first powers are the generators
    - consecutive powers share the same ratio, e([τ^{i+1}]_1, [1]_2) = e([τ^i]_1, [τ]_2)
    """
    d = srs['max_degree']
    g1_powers = srs['g1_powers']
    g2_powers = srs['g2_powers']

    if len(g1_powers) != d + 1 or len(g2_powers) != d + 1:
        return False
    if g1_powers[0] != srs['g1'] or g2_powers[0] != srs['g2']:
        return False

    group = srs['group']
    for i in range(d):
        if not gt_eq(pair(g1_powers[i + 1], g2_powers[0]), pair(g1_powers[i], g2_powers[1]), group):
            return False
        if not gt_eq(pair(g1_powers[0], g2_powers[i + 1]), pair(g1_powers[1], g2_powers[i]), group):
            return False
    return True
