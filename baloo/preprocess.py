"""
Table Preprocessing
===================

One-time, table-only setup. For a table t of length N (a power of two)
over the domain H = {ω^0, ..., ω^{N-1}} it produces:

- [z_H]_1 with z_H(X) = X^N - 1 (closed form)
- [t]_1 with t(X) the inverse-NTT interpolation of the table over H
- [q_i]_1 with q_i(X) = (t(X) - t_i) / (X - ω^i), for every i
- [z_H / (X - ω^i)]_1, for every i

The per-index quotients let the prover commit to the sub-table quotients

    (t - t_I) / z_I = Σ_j w_j · q_{I_j}
    z_H / z_I       = Σ_j w_j · z_H / (X - h_j)

(w_j the barycentric weights of H_I) with O(k) group operations, so the
prover never touches anything of size N again.

The result is immutable and can be shared across concurrent proofs.
"""

import logging
from typing import List, Sequence

import galois

from .config import config
from .errors import SetupError
from .field import ScalarField, is_power_of_two
from .kzg import CommitmentScheme
from .polynomial import divide_by_linear, from_evaluations, subgroup_vanishing

logger = logging.getLogger(__name__)


class PreprocessedTable:
    """Reusable, read-only artifacts for one table."""

    __slots__ = ('_table', '_domain', '_t_poly', '_z_h_comm', '_t_comm',
                 '_quotient_comms', '_vanishing_quotient_comms')

    def __init__(self, table, domain, t_poly, z_h_comm, t_comm, quotient_comms, vanishing_quotient_comms):
        self._table = tuple(table)
        self._domain = tuple(domain)
        self._t_poly = t_poly
        self._z_h_comm = z_h_comm
        self._t_comm = t_comm
        self._quotient_comms = tuple(quotient_comms)
        self._vanishing_quotient_comms = tuple(vanishing_quotient_comms)

    @property
    def table(self):
        return self._table

    @property
    def size(self) -> int:
        return len(self._table)

    @property
    def domain(self):
        return self._domain

    @property
    def t_poly(self) -> galois.Poly:
        return self._t_poly

    @property
    def z_h_comm(self):
        return self._z_h_comm

    @property
    def t_comm(self):
        return self._t_comm

    @property
    def quotient_comms(self):
        return self._quotient_comms

    @property
    def vanishing_quotient_comms(self):
        return self._vanishing_quotient_comms

    def verifier_view(self) -> dict:
        """The part of the preprocessing a verifier needs."""
        return {
            'n': self.size,
            'z_h_comm': self._z_h_comm,
            't_comm': self._t_comm,
        }


def preprocess(table: Sequence[int], pp: dict, scheme: CommitmentScheme, field: ScalarField,
               workers: int = None) -> PreprocessedTable:
    """
    Run the one-time preprocessing for a table.

    Parameters
    ----------
    table : Sequence[int]
        Table values in Z_r; length N must be a power of two.
    pp : dict
        Prover parameters from scheme.trim(), of degree at least N.
    scheme : CommitmentScheme
        The commitment scheme.
    field : ScalarField
        The scalar field of the pairing group.
    workers : int, optional
        Threads for the per-index commitments (defaults to BALOO_WORKERS).

    Raises
    ------
    SetupError
        If N is not a power of two, exceeds the field's 2-adicity, or
        exceeds the SRS degree.
    """
    n = len(table)
    if not is_power_of_two(n):
        raise SetupError(f"table length {n} is not a power of two")
    if n > pp['max_degree']:
        raise SetupError(f"table length {n} exceeds SRS degree {pp['max_degree']}")
    workers = workers if workers is not None else config.workers

    values = [field.elem(v) for v in table]
    domain = field.domain(n)
    t_poly = from_evaluations(values, field)
    z_h = subgroup_vanishing(n, field)

    quotients: List[galois.Poly] = []
    vanishing_quotients: List[galois.Poly] = []
    for i, root in enumerate(domain):
        q, rem = divide_by_linear(t_poly, root, field)
        if rem != values[i]:
            raise SetupError(f"table interpolation mismatch at position {i}")
        quotients.append(q)
        vq, rem = divide_by_linear(z_h, root, field)
        if rem != 0:
            raise SetupError(f"ω^{i} is not a root of X^{n} - 1")
        vanishing_quotients.append(vq)

    polys = [z_h, t_poly] + quotients + vanishing_quotients
    comms = scheme.batch_commit(pp, polys, workers=workers)

    logger.debug("preprocessed table of size %d (%d commitments)", n, len(comms))
    return PreprocessedTable(
        table=values,
        domain=domain,
        t_poly=t_poly,
        z_h_comm=comms[0],
        t_comm=comms[1],
        quotient_comms=comms[2:2 + n],
        vanishing_quotient_comms=comms[2 + n:],
    )
