"""
Error Taxonomy
==============

Every failure raised by the protocol engine derives from ``BalooError``.

- SetupError: invalid table size, degree beyond the SRS, bad parameters
- WitnessError: a lookup value is absent from the table, or the lookup has
  an unsupported shape
- ProofGenerationError: a quotient that must be exact left a remainder
- OpeningError: a claimed evaluation does not match the polynomial
- VerificationError: a pairing or opening check failed
- SerializationError: malformed proof bytes

SetupError and WitnessError are raised before any commitment work.
The verifier never lets VerificationError or SerializationError escape;
it turns them into a rejecting outcome.
"""


class BalooError(Exception):  # Base class for all protocol failures.
    pass


class SetupError(BalooError):  # Raised on invalid table size or SRS degree.
    pass


class WitnessError(BalooError):  # Raised when the lookup is not contained in the table.
    pass


class ProofGenerationError(BalooError):  # Raised when a quotient division is not exact.
    pass


class OpeningError(BalooError):  # Raised when a claimed evaluation is wrong.
    pass


class VerificationError(BalooError):  # Raised when a pairing or opening check fails.
    pass


class SerializationError(BalooError):  # Raised on malformed proof bytes.
    pass
