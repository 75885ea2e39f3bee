"""
Scalar Field and Evaluation Domains
===================================

Z_r, the scalar field of the pairing group, as a ``galois`` prime field,
plus the multiplicative subgroups used as interpolation domains.

- H: the table domain {ω^0, ..., ω^{N-1}}
- V: the lookup domain {ν^0, ..., ν^{m-1}}

Both are subgroups of order a power of two. Their generators are
``GF.primitive_root_of_unity(n)``, the same roots ``galois.ntt`` and
``galois.intt`` use, so values move between evaluation and coefficient
form with the library NTT.

Values cross module boundaries (transcript, commitments) as Python ints
in [0, r); ``scalar`` and ``array`` lift them into the field.
"""

import functools
from typing import List, Sequence

import galois

from .errors import SetupError


class ScalarField:
    """Z_r with the helpers the protocol needs."""

    def __init__(self, modulus: int):
        try:
            self.GF = prime_field(modulus)
        except ValueError as e:
            raise SetupError(f"modulus {modulus} does not define a prime field: {e}") from e
        if self.GF.degree != 1:
            raise SetupError(f"modulus {modulus} is not prime")
        self.MODULUS = modulus
        self.BYTES = (modulus.bit_length() + 7) // 8

        self.TWO_ADICITY = 0
        q = modulus - 1
        while q % 2 == 0:
            q //= 2
            self.TWO_ADICITY += 1

    def __repr__(self):
        return f"ScalarField(bits={self.MODULUS.bit_length()}, two_adicity={self.TWO_ADICITY})"

    # --- Conversions ---

    def elem(self, x) -> int:
        return int(x) % self.MODULUS

    def scalar(self, x):
        return self.GF(self.elem(x))

    def array(self, values: Sequence[int]):
        return self.GF([self.elem(v) for v in values])

    # --- Arithmetic on ints ---

    def neg(self, x) -> int:
        return int(-self.scalar(x))

    def mul(self, x, y) -> int:
        return int(self.scalar(x) * self.scalar(y))

    def inv(self, a) -> int:
        if self.elem(a) == 0:
            raise ZeroDivisionError("inverse of zero in the scalar field")
        return int(self.scalar(a) ** -1)

    def div(self, x, y) -> int:
        return self.mul(x, self.inv(y))

    def multi_inv(self, values: Sequence[int]) -> List[int]:
        """Batch inversion over a field array; every input must be non-zero."""
        if any(self.elem(v) == 0 for v in values):
            raise ZeroDivisionError("inverse of zero in the scalar field")
        if not values:
            return []
        return [int(v) for v in self.array(values) ** -1]

    # --- Domains ---

    def root_of_unity(self, n: int) -> int:
        """
        Return the primitive n-th root of unity galois uses, n a power of two.

        Raises SetupError if n is not a power of two or exceeds the
        two-adicity of the field.
        """
        if not is_power_of_two(n):
            raise SetupError(f"domain size {n} is not a power of two")
        if n.bit_length() - 1 > self.TWO_ADICITY:
            raise SetupError(f"domain size {n} exceeds the field's 2-adicity 2^{self.TWO_ADICITY}")
        if n == 1:
            return 1
        return int(self.GF.primitive_root_of_unity(n))

    def domain(self, n: int) -> List[int]:
        """Return [ω^0, ω^1, ..., ω^{n-1}] for the n-th root ω."""
        omega = self.scalar(self.root_of_unity(n))
        points = [self.GF(1)]
        for _ in range(n - 1):
            points.append(points[-1] * omega)
        return [int(p) for p in points]

    def ntt(self, coeffs: Sequence[int]) -> List[int]:
        """Evaluate coefficients on the subgroup of size len(coeffs)."""
        n = len(coeffs)
        self.root_of_unity(n)
        if n == 1:
            return [self.elem(coeffs[0])]
        evals = galois.ntt([self.elem(c) for c in coeffs], size=n, modulus=self.MODULUS)
        return [int(v) for v in evals]

    def intt(self, evals: Sequence[int]) -> List[int]:
        """Interpolate evaluations on the subgroup of size len(evals) into coefficients."""
        n = len(evals)
        self.root_of_unity(n)
        if n == 1:
            return [self.elem(evals[0])]
        coeffs = galois.intt([self.elem(v) for v in evals], size=n, modulus=self.MODULUS)
        return [int(c) for c in coeffs]


@functools.lru_cache(maxsize=None)
def prime_field(modulus: int):
    """One galois field class per modulus, shared by every ScalarField."""
    return galois.GF(modulus)


def is_power_of_two(n: int) -> bool:
    return isinstance(n, int) and n > 0 and n & (n - 1) == 0
