"""
Fiat-Shamir Transcript
======================

This module implements the transcript that turns the interactive Baloo
protocol into a non-interactive one.

The transcript is append-only. Every commitment and field element the
prover writes is both absorbed into a SHA-256 chained state and appended
to the proof byte stream. Challenges are derived from the state only, so
they depend on everything written before them and on nothing written
after.

The verifier opens the same stream with ``Transcript.from_proof`` and
reads the elements back in the same order; since reading absorbs exactly
the bytes the prover wrote, the replay squeezes identical challenges.

Wire encoding:
--------------
- group element: 2-byte big-endian length || group.serialize(elem);
  a zero length encodes the identity. The payload starts with charm's
  type tag (b"1:" for G1, b"2:" for G2), which must match the group the
  reader expects
- field element: fixed-width big-endian integer, ceil(bits(r) / 8) bytes

Domain Separation:
------------------
The state is seeded with a label (``BALOO_TRANSCRIPT_LABEL``); absorbed
items are tagged b"C" (commitment) or b"F" (field element) and squeezes
are tagged b"SQ".
"""

import hashlib
from typing import Tuple

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1

from .config import config
from .errors import SerializationError
from .utils import serialize_element, deserialize_element, is_identity

LENGTH_BYTES = 2


def encode_element(elem, group: PairingGroup, elem_type=G1) -> bytes:
    if is_identity(elem, group, elem_type):
        return (0).to_bytes(LENGTH_BYTES, 'big')
    payload = serialize_element(elem, group)
    if len(payload) >= 1 << (8 * LENGTH_BYTES):
        raise SerializationError(f"group element encoding of {len(payload)} bytes is too long")
    return len(payload).to_bytes(LENGTH_BYTES, 'big') + payload


def decode_element(data: bytes, offset: int, group: PairingGroup, elem_type=G1) -> Tuple[object, int]:
    """Decode one group element at offset; returns (element, next offset)."""
    if offset + LENGTH_BYTES > len(data):
        raise SerializationError("truncated proof: missing group element length")
    length = int.from_bytes(data[offset:offset + LENGTH_BYTES], 'big')
    offset += LENGTH_BYTES
    if length == 0:
        return group.init(elem_type, 1), offset
    if offset + length > len(data):
        raise SerializationError("truncated proof: group element runs past the end")
    payload = bytes(data[offset:offset + length])
    if not payload.startswith(b"%d:" % elem_type):
        raise SerializationError(f"group element is not of the expected type {elem_type}")
    try:
        elem = deserialize_element(payload, group)
        valid = elem is not None and group.ismember(elem)
    except Exception as e:
        raise SerializationError(f"malformed group element: {e}") from e
    if not valid:
        raise SerializationError("malformed group element")
    return elem, offset + length


def encode_scalar(value: int, group: PairingGroup) -> bytes:
    order = int(group.order())
    return (int(value) % order).to_bytes(scalar_width(group), 'big')


def decode_scalar(data: bytes, offset: int, group: PairingGroup) -> Tuple[int, int]:
    width = scalar_width(group)
    if offset + width > len(data):
        raise SerializationError("truncated proof: missing field element")
    value = int.from_bytes(data[offset:offset + width], 'big')
    if value >= int(group.order()):
        raise SerializationError("non-canonical field element")
    return value, offset + width


def scalar_width(group: PairingGroup) -> int:
    return (int(group.order()).bit_length() + 7) // 8


class Transcript:
    """
    Hash-chained Fiat-Shamir transcript over a pairing group.

    Write mode (prover): ``write_commitment`` / ``write_field_element``
    then ``into_proof``. Read mode (verifier): ``from_proof`` then
    ``read_commitment`` / ``read_field_element`` and ``finish``.
    """

    def __init__(self, group: PairingGroup, label: bytes = None):
        self.group = group
        self.order = int(group.order())
        label = label if label is not None else config.transcript_label
        self._state = hashlib.sha256(b"baloo-transcript" + label).digest()
        self._stream = bytearray()
        self._proof = None
        self._offset = 0

    @classmethod
    def from_proof(cls, group: PairingGroup, proof: bytes, label: bytes = None):
        if not isinstance(proof, (bytes, bytearray, memoryview)):
            raise SerializationError(f"proof must be bytes, got {type(proof).__name__}")
        transcript = cls(group, label)
        transcript._proof = bytes(proof)
        return transcript

    @property
    def reading(self) -> bool:
        return self._proof is not None

    def _absorb(self, tag: bytes, data: bytes):
        self._state = hashlib.sha256(self._state + tag + data).digest()

    # --- Prover side ---

    def write_commitment(self, elem, elem_type=G1):
        data = encode_element(elem, self.group, elem_type)
        self._absorb(b"C", data)
        self._stream += data

    def write_field_element(self, value: int):
        data = encode_scalar(value, self.group)
        self._absorb(b"F", data)
        self._stream += data

    def into_proof(self) -> bytes:
        return bytes(self._stream)

    # --- Verifier side ---

    def read_commitment(self, elem_type=G1):
        if not self.reading:
            raise SerializationError("transcript is not in read mode")
        start = self._offset
        elem, self._offset = decode_element(self._proof, start, self.group, elem_type)
        data = self._proof[start:self._offset]
        # only canonical encodings are accepted, so replay absorbs what the prover absorbed
        if encode_element(elem, self.group, elem_type) != data:
            raise SerializationError("non-canonical group element encoding")
        self._absorb(b"C", data)
        return elem

    def read_field_element(self) -> int:
        if not self.reading:
            raise SerializationError("transcript is not in read mode")
        start = self._offset
        value, self._offset = decode_scalar(self._proof, start, self.group)
        self._absorb(b"F", self._proof[start:self._offset])
        return value

    def finish(self):
        """Reject trailing bytes after the last expected element."""
        if self.reading and self._offset != len(self._proof):
            raise SerializationError(f"{len(self._proof) - self._offset} trailing bytes after proof")

    # --- Challenges ---

    def squeeze_challenge(self) -> int:
        """
        Derive a challenge in Z_r from everything absorbed so far.

        The state is ratcheted afterwards, so consecutive squeezes give
        independent challenges.
        """
        challenge = int(self.group.hash(self._state + b"SQ", ZR)) % self.order
        self._absorb(b"SQ", b"")
        return challenge
