"""
Baloo Verifier
==============

The verifier replays the prover's transcript from the proof bytes,
recomputes α, β and the batching challenge, checks every KZG opening and
the pairing equations below. No polynomial is ever reconstructed.

Sub-table correctness:
----------------------
(a1) e([t]_1 - [t_I]_1, [1]_2) = e([q_I]_1, [z_I]_2)        t_I = t on H_I
(a2) e([z_H]_1, [1]_2) = e([q_H]_1, [z_I]_2)                 H_I ⊆ H
(a3) e([t_I]_1, [X^{d-m+1}]_2) = e([X^{d-m+1} t_I]_1, [1]_2)  deg t_I < m
(a4) e([t_I]_1, [1]_2) = e([1]_1, [t_I]_2), same for v       G1/G2 copies agree
(a5) e([1]_1, [X^{d-m+1} (z_I - X^m)]_2)
       = e([X^{d-m+1}]_1, [z_I]_2 - [X^m]_2)                   z_I monic, deg m

Round-2 consistency:
--------------------
(b1) e([D]_1, [t_I]_2) = e(φ(α)·[1]_1 + [R]_1, [1]_2) · e([Q_D]_1, [z_I]_2)
(b2) e([E]_1, β·[1]_2 - [v]_2) · e(c·[v]_1, [1]_2) = e([Q_E]_1, [X^m]_2 - [1]_2),
     c = z_I(β) / z_I(0)
(b3) e([D]_1, [X^{d-m+1}]_2) = e([X^{d-m+1} D]_1, [1]_2), same for E
(b4) e([R]_1, [X^{d-m+1}]_2) = e([X^{d-m+1} R]_1, [1]_2)      deg R < m
     and a KZG opening of R at 0 to the value 0

and E(α) = D(β) through a single declared value opened against both.

With a1, a2 and a5, H_I is a set of exactly m points of H; R is then
the unique remainder of degree < m, so it cannot absorb a wrong φ(α).

Each equation is checked on its own; there is no aggregation into one
multi-pairing.
"""

import enum
import logging

from charm.toolbox.pairinggroup import PairingGroup, G1, G2

from .errors import SerializationError, SetupError, VerificationError
from .index import check_lookup_shape
from .kzg import CommitmentScheme
from .transcript import Transcript
from .utils import gt_eq, pair_prod, to_zr

logger = logging.getLogger(__name__)


class VerificationOutcome(enum.Enum):
    ACCEPT = 'accept'
    REJECT_MALFORMED = 'malformed'
    REJECT_INVALID = 'invalid'

    def __bool__(self):
        return self is VerificationOutcome.ACCEPT


class Verifier:
    """
    Verifier for lookups of size m into one preprocessed table.

    Parameters
    ----------
    vp : dict
        Verifier parameters from scheme.trim().
    table_view : dict
        PreprocessedTable.verifier_view(): 'n', 'z_h_comm', 't_comm'.
    m : int
        Lookup length.
    shifts : dict
        kzg.degree_shift_commitments() for (d, m).
    scheme : CommitmentScheme
        The commitment scheme the proofs were produced with.
    """

    def __init__(self, vp: dict, table_view: dict, m: int, shifts: dict, scheme: CommitmentScheme):
        check_lookup_shape(m, table_view['n'])
        if shifts['m'] != m or shifts['max_degree'] != vp['max_degree']:
            raise SetupError("degree-shift commitments do not match the lookup size and SRS degree")
        if table_view['n'] > vp['max_degree']:
            raise SetupError(f"table length {table_view['n']} exceeds SRS degree {vp['max_degree']}")
        self.vp = vp
        self.table_view = table_view
        self.m = m
        self.shifts = shifts
        self.scheme = scheme
        self.group: PairingGroup = scheme.group

    def verify(self, proof: bytes, label: bytes = None) -> VerificationOutcome:
        """
        Verify a proof.

        Never raises for a bad proof: input that is not bytes or does
        not decode gives REJECT_MALFORMED, a failed opening or pairing
        gives REJECT_INVALID. Both are non-acceptance. An error the group
        library raises on decoded elements is also REJECT_MALFORMED.
        """
        try:
            transcript = Transcript.from_proof(self.group, proof, label)
            self._verify(transcript)
        except SerializationError as e:
            logger.info("proof rejected, malformed encoding: %s", e)
            return VerificationOutcome.REJECT_MALFORMED
        except VerificationError as e:
            logger.info("proof rejected: %s", e)
            return VerificationOutcome.REJECT_INVALID
        except Exception as e:
            logger.warning("proof rejected, group operation failed: %s: %s", type(e).__name__, e)
            return VerificationOutcome.REJECT_MALFORMED
        return VerificationOutcome.ACCEPT

    def _check(self, name: str, lhs, rhs):
        """lhs, rhs: lists of (G1, G2) pairs whose pairing products must agree."""
        left = pair_prod([a for a, _ in lhs], [b for _, b in lhs], self.group)
        right = pair_prod([a for a, _ in rhs], [b for _, b in rhs], self.group)
        if not gt_eq(left, right, self.group):
            raise VerificationError(f"pairing check {name} failed")

    def _verify(self, transcript: Transcript):
        group, vp, shifts, scheme = self.group, self.vp, self.shifts, self.scheme
        g1, g2 = vp['g1'], vp['g2']

        # round 1
        phi_comm = transcript.read_commitment(G1)
        z_i_comm = transcript.read_commitment(G2)
        t_i_comm = transcript.read_commitment(G1)
        v_comm = transcript.read_commitment(G1)
        t_i_comm_g2 = transcript.read_commitment(G2)
        v_comm_g2 = transcript.read_commitment(G2)
        q_i_comm = transcript.read_commitment(G1)
        q_h_comm = transcript.read_commitment(G1)
        t_i_shift_comm = transcript.read_commitment(G1)
        z_i_shift_comm = transcript.read_commitment(G2)
        alpha = transcript.squeeze_challenge()
        beta = transcript.squeeze_challenge()

        # round 2
        d_comm = transcript.read_commitment(G1)
        r_comm = transcript.read_commitment(G1)
        q_d_comm = transcript.read_commitment(G1)
        e_comm = transcript.read_commitment(G1)
        q_e_comm = transcript.read_commitment(G1)
        d_shift_comm = transcript.read_commitment(G1)
        r_shift_comm = transcript.read_commitment(G1)
        e_shift_comm = transcript.read_commitment(G1)

        # round 3
        phi_at_alpha = transcript.read_field_element()
        e_at_alpha = transcript.read_field_element()
        z_i_at_0 = transcript.read_field_element()
        z_i_at_beta = transcript.read_field_element()

        scheme.batch_verify(vp, [phi_comm, e_comm], alpha, [phi_at_alpha, e_at_alpha], transcript)
        scheme.verify(vp, d_comm, beta, e_at_alpha, transcript)
        scheme.verify(vp, r_comm, 0, 0, transcript)
        scheme.verify_g2(vp, z_i_comm, 0, z_i_at_0, transcript)
        scheme.verify_g2(vp, z_i_comm, beta, z_i_at_beta, transcript)
        transcript.finish()

        # sub-table correctness
        self._check('a1', [(t_i_comm ** -1 * self.table_view['t_comm'], g2)], [(q_i_comm, z_i_comm)])
        self._check('a2', [(self.table_view['z_h_comm'], g2)], [(q_h_comm, z_i_comm)])
        self._check('a3', [(t_i_comm, shifts['x_shift_1_g2'])], [(t_i_shift_comm, g2)])
        self._check('a4/t_I', [(t_i_comm, g2)], [(g1, t_i_comm_g2)])
        self._check('a4/v', [(v_comm, g2)], [(g1, v_comm_g2)])
        self._check('a5', [(g1, z_i_shift_comm)],
                    [(shifts['x_shift_1_g1'], z_i_comm * (shifts['x_m_g2'] ** -1))])

        # round-2 consistency
        if z_i_at_0 == 0:
            raise VerificationError("z_I(0) = 0, H_I contains 0")
        scale = z_i_at_beta * pow(z_i_at_0, -1, scheme.order) % scheme.order
        self._check('b1',
                    [(d_comm, t_i_comm_g2)],
                    [((g1 ** to_zr(phi_at_alpha, group)) * r_comm, g2), (q_d_comm, z_i_comm)])
        self._check('b2',
                    [(e_comm, (g2 ** to_zr(beta, group)) * (v_comm_g2 ** -1)),
                     (v_comm ** to_zr(scale, group), g2)],
                    [(q_e_comm, shifts['x_m_g2'] * (g2 ** -1))])
        self._check('b3/D', [(d_comm, shifts['x_shift_1_g2'])], [(d_shift_comm, g2)])
        self._check('b3/E', [(e_comm, shifts['x_shift_1_g2'])], [(e_shift_comm, g2)])
        self._check('b4', [(r_comm, shifts['x_shift_1_g2'])], [(r_shift_comm, g2)])
        logger.debug("proof accepted")
