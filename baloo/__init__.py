"""
Baloo Lookup Argument
=====================

A non-interactive lookup argument over KZG commitments: a prover shows
that every entry of a short vector f occurs in a large, preprocessed
table t, with prover work after preprocessing independent of |t|.

Built on charm-crypto pairing groups (the default curve is SS512), with
scalar-field and polynomial arithmetic from galois.

Modules:
--------
- groups: Pairing group initialization
- field: The scalar field as a galois GF(r), roots of unity, NTT
- polynomial: galois.Poly constructors and conversions
- crs: Structured reference string generation (powers of τ)
- kzg: The CommitmentScheme interface and univariate KZG
- transcript: Fiat-Shamir transcript and proof byte encoding
- preprocess: One-time table preprocessing
- index: Index set I and column map col of a lookup
- polys: z_I, t_I, φ, v and the normalized bases
- prover / verifier: The three-round protocol
- proof: Parsed view of the proof layout

Usage:
------
    from baloo import setup, UnivariateKzg, ScalarField, preprocess
    from baloo import Prover, Verifier, degree_shift_commitments

    params = setup()
    scheme = UnivariateKzg(params['group'])
    field = ScalarField(params['order'])
    pp, vp = scheme.trim(scheme.setup(16), 16)

    table = preprocess([1, 2, 3, 4], pp, scheme, field)
    proof = Prover(pp, table, scheme, field).prove([3, 2, 3, 4])

    shifts = degree_shift_commitments(pp, 4)
    verifier = Verifier(vp, table.verifier_view(), 4, shifts, scheme)
    assert verifier.verify(proof)
"""

__version__ = "0.1.0"

from .groups import setup
from .field import ScalarField
from .kzg import CommitmentScheme, UnivariateKzg, degree_shift_commitments
from .preprocess import preprocess, PreprocessedTable
from .prover import Prover
from .verifier import Verifier, VerificationOutcome
from .proof import Proof
from .errors import (
    BalooError, SetupError, WitnessError, ProofGenerationError,
    OpeningError, VerificationError, SerializationError,
)

__all__ = [
    'setup', 'ScalarField', 'CommitmentScheme', 'UnivariateKzg', 'degree_shift_commitments',
    'preprocess', 'PreprocessedTable', 'Prover', 'Verifier', 'VerificationOutcome', 'Proof',
    'BalooError', 'SetupError', 'WitnessError', 'ProofGenerationError',
    'OpeningError', 'VerificationError', 'SerializationError',
]
