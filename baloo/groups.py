"""
Group Initialization and Setup
===============================

This module initializes the bilinear pairing group the lookup argument
runs over.

According to charm-crypto documentation (https://jhuisi.github.io/charm/tutorial.html):
- PairingGroup('SS512') is a symmetric pairing over a 512-bit base field
  whose group order r satisfies r - 1 = 2^107 * (2^52 + 1)
- PairingGroup('BN254') / ('MNT224') are asymmetric Type-3 pairings
- G1, G2 are the source groups; GT is the target group
- Pairing operation: pair(g1_elem, g2_elem) -> GT element

The protocol needs multiplicative subgroups of Z_r of size N (the table
length), so the curve must have two-adicity of r - 1 at least log2(N).
SS512 is the default for that reason.
"""

import logging

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1, G2, GT, pair

from .config import config

logger = logging.getLogger(__name__)

FALLBACK_CURVE = 'SS512'


def setup(group_name: str = None) -> dict:
    """
    Initialize the pairing group.

    Parameters
    ----------
    group_name : str, optional
        The pairing curve identifier. Defaults to the configured curve
        (``BALOO_PAIRING_CURVE``, 'SS512' if unset).

    Returns
    -------
    dict
        A dictionary containing:
        - 'group': The PairingGroup object
        - 'group_name': The name of the curve used
        - 'order': The scalar field modulus r as a Python int
        - 'two_adicity': The largest s with 2^s | r - 1
        - 'G1', 'G2', 'GT', 'ZR': The charm type constants
        - 'pair': The pairing function

    Notes
    -----
    If the requested curve cannot be loaded, SS512 is used instead and a
    warning is logged.

    Examples
    --------
    >>> params = setup('SS512')
    >>> group = params['group']
    >>> params['two_adicity'] >= 4
    True
    """
    group_name = group_name or config.pairing_curve
    try:
        group = PairingGroup(group_name)
    except Exception as e:
        if group_name == FALLBACK_CURVE:
            raise
        logger.warning("%s not available (%s), falling back to %s", group_name, e, FALLBACK_CURVE)
        group = PairingGroup(FALLBACK_CURVE)
        group_name = FALLBACK_CURVE

    order = int(group.order())
    return {
        'group': group,
        'group_name': group_name,
        'order': order,
        'two_adicity': two_adicity(order),
        'G1': G1,
        'G2': G2,
        'GT': GT,
        'ZR': ZR,
        'pair': pair,
    }


def two_adicity(order: int) -> int:
    """Return the largest s such that 2^s divides order - 1."""
    s = 0
    q = order - 1
    while q % 2 == 0:
        q //= 2
        s += 1
    return s


def get_generators(group: PairingGroup) -> tuple:
    """
    Derive canonical generators for G1 and G2.

    The generators are obtained by hashing fixed strings into the groups,
    so two parties that load the same curve agree on them without
    exchanging anything.

    Returns
    -------
    tuple
        (g1, g2) with g1 ∈ G1 and g2 ∈ G2
    """
    g1 = group.hash(b"baloo/generator/G1", G1)
    g2 = group.hash(b"baloo/generator/G2", G2)
    return g1, g2
