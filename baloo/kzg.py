"""
Univariate KZG Commitments
==========================

This module implements the polynomial commitment scheme the lookup
argument is built on, behind the abstract ``CommitmentScheme`` interface.
The protocol layer only uses the interface, so another pairing-based
backend can be swapped in.

Formulas:
---------
- Commitment:       [p]_1 = ∏ [τ^i]_1^{p_i}        (G1), [p]_2 likewise in G2
- Opening witness:  W = [(p(X) - y) / (X - z)]
- Verification:     e(C - y·[1]_1 + z·W, [1]_2) = e(W, [τ]_2)
- G2 opening:       e([τ]_1 - z·[1]_1, W) = e([1]_1, C - y·[1]_2)
- Batched opening:  P = Σ η^i p_i, one witness for P at z,
                    η squeezed from the transcript after the evaluations

Group elements are written multiplicatively, as charm does; "C - y·[1]"
is computed as C * [1]^{-y}.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple

import galois
from charm.toolbox.pairinggroup import PairingGroup, G1, G2, pair

from .crs import keygen_srs, validate_srs
from .errors import OpeningError, SetupError, VerificationError
from .field import ScalarField
from .polynomial import coefficients, degree, divide_by_linear, scale, zero
from .utils import multiexp_g1, multiexp_g2, gt_eq, ordered_map, to_zr


class CommitmentScheme(ABC):
    """Capabilities the protocol engine needs from a commitment scheme."""

    @abstractmethod
    def setup(self, size: int, seed: bytes = None) -> dict:
        ...

    @abstractmethod
    def trim(self, param: dict, size: int) -> Tuple[dict, dict]:
        ...

    @abstractmethod
    def commit(self, pp: dict, poly: galois.Poly):
        ...

    @abstractmethod
    def commit_g2(self, pp: dict, poly: galois.Poly):
        ...

    @abstractmethod
    def open(self, pp, poly, comm, point, value, transcript):
        ...

    @abstractmethod
    def verify(self, vp, comm, point, value, transcript):
        ...

    @abstractmethod
    def batch_open(self, pp, polys, comms, point, values, transcript):
        ...

    @abstractmethod
    def batch_verify(self, vp, comms, point, values, transcript):
        ...

    @abstractmethod
    def open_g2(self, pp, poly, comm, point, value, transcript):
        ...

    @abstractmethod
    def verify_g2(self, vp, comm, point, value, transcript):
        ...

    # --- Commit-and-write helpers, shared by every backend ---

    def _commit_in(self, pp: dict, poly: galois.Poly, kind):
        return self.commit_g2(pp, poly) if kind == G2 else self.commit(pp, poly)

    def commit_and_write(self, pp: dict, poly: galois.Poly, transcript, kind=G1):
        """Commit to poly in G1 (or G2) and append the commitment to the transcript."""
        comm = self._commit_in(pp, poly, kind)
        transcript.write_commitment(comm, kind)
        return comm

    def batch_commit(self, pp: dict, polys: Sequence[galois.Poly], kinds: Sequence = None,
                     workers: int = 1) -> list:
        """
        Commit to several polynomials, on a thread pool when workers > 1.

        Commitments come back in the order of polys whatever the
        scheduling. kinds defaults to G1 for every polynomial.
        """
        kinds = list(kinds) if kinds is not None else [G1] * len(polys)
        if len(kinds) != len(polys):
            raise ValueError("polys and kinds must have the same length")
        jobs = list(zip(polys, kinds))
        return ordered_map(lambda job: self._commit_in(pp, job[0], job[1]), jobs, workers)

    def batch_commit_and_write(self, pp: dict, polys: Sequence[galois.Poly], transcript,
                               kinds: Sequence = None, workers: int = 1) -> list:
        """batch_commit(), then write every commitment to the transcript in order."""
        kinds = list(kinds) if kinds is not None else [G1] * len(polys)
        comms = self.batch_commit(pp, polys, kinds, workers)
        for comm, kind in zip(comms, kinds):
            transcript.write_commitment(comm, kind)
        return comms


class UnivariateKzg(CommitmentScheme):
    """KZG over a charm pairing group."""

    def __init__(self, group: PairingGroup):
        self.group = group
        self.order = int(group.order())
        self.field = ScalarField(self.order)

    # --- Parameters ---

    def setup(self, size: int, seed: bytes = None) -> dict:
        """
        Generate parameters for polynomials of degree at most size.

        Randomness enters the system only here; pass seed for a
        reproducible (insecure) SRS in tests.
        """
        return keygen_srs(size, self.group, seed=seed)

    def trim(self, param: dict, size: int) -> Tuple[dict, dict]:
        """
        Cut the SRS down to degree size, after checking the kept powers.

        Returns
        -------
        (pp, vp)
            pp: 'max_degree', 'g1_powers', 'g2_powers'
            vp: 'max_degree', 'g1', 'g2', 'tau_g1', 'tau_g2'

        Raises
        ------
        SetupError
            If size is out of range or the powers up to size do not share
            one trapdoor.
        """
        if size < 1 or size > param['max_degree']:
            raise SetupError(f"cannot trim SRS of degree {param['max_degree']} to {size}")
        g1_powers = param['g1_powers'][:size + 1]
        g2_powers = param['g2_powers'][:size + 1]
        kept = {
            'group': self.group,
            'max_degree': size,
            'g1': param['g1'],
            'g2': param['g2'],
            'g1_powers': g1_powers,
            'g2_powers': g2_powers,
        }
        if not validate_srs(kept):
            raise SetupError(f"SRS powers up to degree {size} are inconsistent")
        pp = {
            'max_degree': size,
            'g1_powers': g1_powers,
            'g2_powers': g2_powers,
        }
        vp = {
            'max_degree': size,
            'g1': g1_powers[0],
            'g2': g2_powers[0],
            'tau_g1': g1_powers[1],
            'tau_g2': g2_powers[1],
        }
        return pp, vp

    # --- Commitments ---

    def _check_degree(self, pp: dict, poly: galois.Poly):
        if degree(poly) > pp['max_degree']:
            raise SetupError(f"polynomial degree {degree(poly)} exceeds SRS degree {pp['max_degree']}")

    def commit(self, pp: dict, poly: galois.Poly):
        self._check_degree(pp, poly)
        coeffs = coefficients(poly)
        return multiexp_g1(pp['g1_powers'][:len(coeffs)], coeffs, self.group)

    def commit_g2(self, pp: dict, poly: galois.Poly):
        self._check_degree(pp, poly)
        coeffs = coefficients(poly)
        return multiexp_g2(pp['g2_powers'][:len(coeffs)], coeffs, self.group)

    # --- Openings in G1 ---

    def _witness(self, poly: galois.Poly, point: int, value: int) -> galois.Poly:
        quotient, remainder = divide_by_linear(poly, point, self.field)
        if remainder != value % self.order:
            raise OpeningError(f"claimed evaluation does not match polynomial at point {point}")
        return quotient

    def open(self, pp, poly, comm, point, value, transcript):
        """Write the witness [(p(X) - y)/(X - z)]_1; raises OpeningError if p(z) != y."""
        witness = self.commit(pp, self._witness(poly, point, value))
        transcript.write_commitment(witness, G1)
        return witness

    def _check_g1(self, vp, comm, point, value, witness) -> bool:
        g1, g2 = vp['g1'], vp['g2']
        lhs_g1 = comm * (g1 ** to_zr(-value, self.group)) * (witness ** to_zr(point, self.group))
        return gt_eq(pair(lhs_g1, g2), pair(witness, vp['tau_g2']), self.group)

    def verify(self, vp, comm, point, value, transcript):
        """Read a witness and check it; raises VerificationError on mismatch."""
        witness = transcript.read_commitment(G1)
        if not self._check_g1(vp, comm, point, value, witness):
            raise VerificationError(f"KZG opening at point {point} failed")

    def batch_open(self, pp, polys: List[galois.Poly], comms, point, values, transcript):
        """
        Open several G1 commitments at one point with a single witness.

        The evaluations must already be in the transcript; the combining
        challenge η is squeezed here.
        """
        if not (len(polys) == len(comms) == len(values)):
            raise ValueError("polys, comms and values must have the same length")
        eta = transcript.squeeze_challenge()
        combined = zero(self.field)
        combined_value = 0
        for poly, value in zip(reversed(polys), reversed(values)):
            combined = scale(combined, eta, self.field) + poly
            combined_value = (combined_value * eta + value) % self.order
        return self.open(pp, combined, None, point, combined_value, transcript)

    def batch_verify(self, vp, comms, point, values, transcript):
        if len(comms) != len(values):
            raise ValueError("comms and values must have the same length")
        eta = transcript.squeeze_challenge()
        combined = self.group.init(G1, 1)
        combined_value = 0
        for comm, value in zip(reversed(comms), reversed(values)):
            combined = (combined ** to_zr(eta, self.group)) * comm
            combined_value = (combined_value * eta + value) % self.order
        self.verify(vp, combined, point, combined_value, transcript)

    # --- Openings in G2 ---

    def open_g2(self, pp, poly, comm, point, value, transcript):
        """Open a G2 commitment with a G2 witness."""
        witness = self.commit_g2(pp, self._witness(poly, point, value))
        transcript.write_commitment(witness, G2)
        return witness

    def verify_g2(self, vp, comm, point, value, transcript):
        witness = transcript.read_commitment(G2)
        g1, g2 = vp['g1'], vp['g2']
        lhs = pair(vp['tau_g1'] * (g1 ** to_zr(-point, self.group)), witness)
        rhs = pair(g1, comm * (g2 ** to_zr(-value, self.group)))
        if not gt_eq(lhs, rhs, self.group):
            raise VerificationError(f"G2 KZG opening at point {point} failed")


def degree_shift_commitments(pp: dict, m: int) -> dict:
    """
    Commit the monomials X^m and X^{d-m+1} in both groups.

    They depend only on the SRS degree d and the lookup size m, so they
    are computed once and shared by every verification for that size.
    A degree bound deg(p) <= m - 1 is certified by
    e([p]_1, [X^{d-m+1}]_2) = e([X^{d-m+1}·p]_1, [1]_2): the shifted
    polynomial only has a commitment when it fits in the SRS.
    """
    d = pp['max_degree']
    if m < 1 or m > d:
        raise SetupError(f"lookup size {m} is not supported by an SRS of degree {d}")
    exponents = {'x_m': m, 'x_shift_1': d - m + 1}
    shifts = {'max_degree': d, 'm': m}
    for name, e in exponents.items():
        shifts[name + '_g1'] = pp['g1_powers'][e]
        shifts[name + '_g2'] = pp['g2_powers'][e]
    return shifts
