"""
Baloo Prover
============

Three strictly sequential rounds over a Fiat-Shamir transcript.

Round 1 - commit the lookup-specific polynomials
    [φ]_1, [z_I]_2, [t_I]_1, [v]_1, then [t_I]_2, [v]_2, the sub-table
    quotients [q_I]_1, [q_H]_1, [X^{d-m+1} t_I]_1 and
    [X^{d-m+1} (z_I - X^m)]_2; squeeze α, β.

Round 2 - combine over the normalized bases
    D(X) = Σ_i μ_i(α) · τ̂_{col(i)}(X)
    E(X) = Σ_i μ_i(X) · τ̂_{col(i)}(β)
    D·t_I - φ(α) = Q_D·z_I + R         with R(0) = 0
    E·(β - v) + v·z_I(β)/z_I(0) = Q_E·z_V
    commit D, R, Q_D, E, Q_E and the degree certificates.

Round 3 - open
    φ(α), E(α) = D(β), R(0) = 0, z_I(0), z_I(β) with KZG openings.

I always has m positions (see ``baloo.index.pad_indices``), so z_I is
monic of degree m and R is the unique remainder of degree < m.

Witness and setup problems are rejected before any commitment is
computed. A remainder that should vanish but does not raises
ProofGenerationError and no proof is returned.
"""

import logging
from typing import Sequence

from charm.toolbox.pairinggroup import G1, G2

from .config import config
from .errors import ProofGenerationError, SetupError
from .field import ScalarField
from .index import LookupIndex, extract_indices, pad_indices
from .kzg import CommitmentScheme
from .polynomial import (coefficient, constant, degree, evaluate, is_zero, monomial, scale, shift,
                         zero)
from .polys import LookupPolynomials, build_polynomials, lagrange_basis_v, normalized_basis
from .preprocess import PreprocessedTable
from .transcript import Transcript
from .utils import multiexp_g1, ordered_map

logger = logging.getLogger(__name__)


class Prover:
    """
    Prover for lookups into one preprocessed table.

    A Prover holds only read-only state, so one instance can serve
    concurrent ``prove`` calls.
    """

    def __init__(self, pp: dict, table: PreprocessedTable, scheme: CommitmentScheme, field: ScalarField,
                 workers: int = None):
        if table.size > pp['max_degree']:
            raise SetupError(f"table length {table.size} exceeds SRS degree {pp['max_degree']}")
        self.pp = pp
        self.table = table
        self.scheme = scheme
        self.field = field
        self.group = scheme.group
        self.workers = workers if workers is not None else config.workers

    def prove(self, lookup: Sequence[int], label: bytes = None) -> bytes:
        """
        Prove that every entry of lookup occurs in the table.

        Returns
        -------
        bytes
            The proof: the transcript byte stream.

        Raises
        ------
        WitnessError
            A lookup value is missing from the table, or the lookup length
            is unsupported.
        ProofGenerationError
            An internal invariant failed; no proof is produced.
        """
        transcript = Transcript(self.group, label)
        state = self.round1(lookup, transcript)
        self.round2(state, transcript)
        self.round3(state, transcript)
        return transcript.into_proof()

    # --- Witness steps, one method each so they can be inspected in isolation ---

    def select_indices(self, lookup: Sequence[int]) -> LookupIndex:
        """The m-position index set I and the column map."""
        return pad_indices(extract_indices(self.table.table, lookup), self.table.table)

    def build_polynomials(self, index: LookupIndex, lookup: Sequence[int]) -> LookupPolynomials:
        return build_polynomials(self.table.domain, index, lookup, self.field)

    def divide_remainder(self, d_poly, polys: LookupPolynomials, phi_at_alpha: int):
        """Return (Q_D, R) with D·t_I - φ(α) = Q_D·z_I + R; R must vanish at 0."""
        q_d, r_poly = divmod(d_poly * polys.t_i - constant(phi_at_alpha, self.field), polys.z_i)
        if coefficient(r_poly, 0) != 0:
            raise ProofGenerationError("remainder of D·t_I - φ(α) modulo z_I does not vanish at 0")
        return q_d, r_poly

    # --- Rounds ---

    def round1(self, lookup: Sequence[int], transcript: Transcript) -> dict:
        field, pp, scheme = self.field, self.pp, self.scheme
        lookup = [field.elem(f) for f in lookup]
        index = self.select_indices(lookup)
        m = len(lookup)
        d = pp['max_degree']

        polys = self.build_polynomials(index, lookup)

        comms = scheme.batch_commit_and_write(
            pp, [polys.phi, polys.z_i, polys.t_i, polys.v, polys.t_i, polys.v], transcript,
            kinds=[G1, G2, G1, G1, G2, G2], workers=self.workers)

        # sub-table quotients from the preprocessed per-index commitments
        weights = list(polys.weights)
        q_i_bases = [self.table.quotient_comms[i] for i in index.positions]
        q_h_bases = [self.table.vanishing_quotient_comms[i] for i in index.positions]
        quotient_comms = ordered_map(lambda bases: multiexp_g1(bases, weights, self.group),
                                     [q_i_bases, q_h_bases], self.workers)
        for comm in quotient_comms:
            transcript.write_commitment(comm, G1)

        scheme.commit_and_write(pp, shift(polys.t_i, d - m + 1, field), transcript)
        scheme.commit_and_write(pp, shift(polys.z_i - monomial(m, field), d - m + 1, field),
                                transcript, kind=G2)

        alpha = transcript.squeeze_challenge()
        beta = transcript.squeeze_challenge()
        logger.debug("round 1: m=%d distinct=%d committed, challenges squeezed",
                     m, len(set(index.col)))

        return {
            'lookup': lookup,
            'index': index,
            'polys': polys,
            'm': m,
            'phi_comm': comms[0],
            'z_i_comm': comms[1],
            'alpha': alpha,
            'beta': beta,
        }

    def round2(self, state: dict, transcript: Transcript) -> dict:
        field, pp, scheme = self.field, self.pp, self.scheme
        polys = state['polys']
        col = state['index'].col
        alpha, beta = state['alpha'], state['beta']
        m = state['m']
        d = pp['max_degree']

        z_i_at_0 = coefficient(polys.z_i, 0)
        tau_hat = {j: normalized_basis(j, polys.h_i, polys.z_i, field) for j in set(col)}
        tau_hat_at_beta = {j: evaluate(tau, beta, field) for j, tau in tau_hat.items()}

        d_poly = zero(field)
        e_poly = zero(field)
        for i in range(m):
            mu = lagrange_basis_v(i, polys.v_domain, field)
            d_poly = d_poly + scale(tau_hat[col[i]], evaluate(mu, alpha, field), field)
            e_poly = e_poly + scale(mu, tau_hat_at_beta[col[i]], field)

        phi_at_alpha = evaluate(polys.phi, alpha, field)
        q_d, r_poly = self.divide_remainder(d_poly, polys, phi_at_alpha)

        z_i_at_beta = evaluate(polys.z_i, beta, field)
        numerator = (e_poly * (constant(beta, field) - polys.v)
                     + scale(polys.v, field.div(z_i_at_beta, z_i_at_0), field))
        q_e, r_e = divmod(numerator, polys.z_v)
        if not is_zero(r_e):
            raise ProofGenerationError("E·(β - v) + v·z_I(β)/z_I(0) is not divisible by z_V")

        s = d - m + 1
        comms = scheme.batch_commit_and_write(
            pp, [d_poly, r_poly, q_d, e_poly, q_e,
                 shift(d_poly, s, field), shift(r_poly, s, field), shift(e_poly, s, field)],
            transcript, workers=self.workers)
        logger.debug("round 2: deg D=%d deg E=%d deg Q_D=%d deg Q_E=%d deg R=%d",
                     degree(d_poly), degree(e_poly), degree(q_d), degree(q_e), degree(r_poly))

        state.update({
            'd_poly': d_poly,
            'e_poly': e_poly,
            'r_poly': r_poly,
            'q_d': q_d,
            'q_e': q_e,
            'phi_at_alpha': phi_at_alpha,
            'z_i_at_0': z_i_at_0,
            'z_i_at_beta': z_i_at_beta,
            'd_comm': comms[0],
            'r_comm': comms[1],
            'e_comm': comms[3],
        })
        return state

    def round3(self, state: dict, transcript: Transcript) -> dict:
        field, pp, scheme = self.field, self.pp, self.scheme
        polys = state['polys']
        alpha, beta = state['alpha'], state['beta']

        e_at_alpha = evaluate(state['e_poly'], alpha, field)
        if evaluate(state['d_poly'], beta, field) != e_at_alpha:
            raise ProofGenerationError("D(β) and E(α) disagree")

        for value in (state['phi_at_alpha'], e_at_alpha, state['z_i_at_0'], state['z_i_at_beta']):
            transcript.write_field_element(value)

        scheme.batch_open(pp, [polys.phi, state['e_poly']], [state['phi_comm'], state['e_comm']],
                          alpha, [state['phi_at_alpha'], e_at_alpha], transcript)
        scheme.open(pp, state['d_poly'], state['d_comm'], beta, e_at_alpha, transcript)
        scheme.open(pp, state['r_poly'], state['r_comm'], 0, 0, transcript)
        scheme.open_g2(pp, polys.z_i, state['z_i_comm'], 0, state['z_i_at_0'], transcript)
        scheme.open_g2(pp, polys.z_i, state['z_i_comm'], beta, state['z_i_at_beta'], transcript)
        logger.debug("round 3: openings written")

        state['e_at_alpha'] = e_at_alpha
        return state
