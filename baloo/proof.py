"""
Proof Layout and Encoding
=========================

A Baloo proof is the byte stream the prover writes to its transcript.
There is no schema beyond the element encodings of ``baloo.transcript``:
the verifier reads the elements back in exactly this order.

Round 1 (then α, β are squeezed)
    phi_comm        [φ]_1
    z_i_comm        [z_I]_2
    t_i_comm        [t_I]_1
    v_comm          [v]_1
    t_i_comm_g2     [t_I]_2
    v_comm_g2       [v]_2
    q_i_comm        [(t - t_I) / z_I]_1
    q_h_comm        [z_H / z_I]_1
    t_i_shift_comm  [X^{d-m+1} · t_I]_1
    z_i_shift_comm  [X^{d-m+1} · (z_I - X^m)]_2

Round 2
    d_comm, r_comm, q_d_comm, e_comm, q_e_comm
    d_shift_comm    [X^{d-m+1} · D]_1
    r_shift_comm    [X^{d-m+1} · R]_1
    e_shift_comm    [X^{d-m+1} · E]_1

Round 3 (the batch challenge η is squeezed before w_alpha)
    phi_at_alpha    φ(α)
    e_at_alpha      E(α), which must equal D(β)
    z_i_at_0        z_I(0)
    z_i_at_beta     z_I(β)
    w_alpha         batched opening of φ, E at α
    w_beta          opening of D at β
    w_r_0           opening of R at 0, to the value 0
    w_z_0           G2 opening of z_I at 0
    w_z_beta        G2 opening of z_I at β

``Proof`` parses and re-encodes this layout for inspection; it performs
no hashing and no checks beyond well-formed encoding.
"""

from charm.toolbox.pairinggroup import PairingGroup, G1, G2

from .errors import SerializationError
from .transcript import encode_element, decode_element, encode_scalar, decode_scalar

SCALAR = 'scalar'

PROOF_LAYOUT = (
    ('phi_comm', G1),
    ('z_i_comm', G2),
    ('t_i_comm', G1),
    ('v_comm', G1),
    ('t_i_comm_g2', G2),
    ('v_comm_g2', G2),
    ('q_i_comm', G1),
    ('q_h_comm', G1),
    ('t_i_shift_comm', G1),
    ('z_i_shift_comm', G2),
    ('d_comm', G1),
    ('r_comm', G1),
    ('q_d_comm', G1),
    ('e_comm', G1),
    ('q_e_comm', G1),
    ('d_shift_comm', G1),
    ('r_shift_comm', G1),
    ('e_shift_comm', G1),
    ('phi_at_alpha', SCALAR),
    ('e_at_alpha', SCALAR),
    ('z_i_at_0', SCALAR),
    ('z_i_at_beta', SCALAR),
    ('w_alpha', G1),
    ('w_beta', G1),
    ('w_r_0', G1),
    ('w_z_0', G2),
    ('w_z_beta', G2),
)

FIELD_NAMES = tuple(name for name, _ in PROOF_LAYOUT)


class Proof:
    """Parsed view of a proof byte stream, one attribute per layout entry."""

    def __init__(self, **elements):
        missing = set(FIELD_NAMES) - set(elements)
        unknown = set(elements) - set(FIELD_NAMES)
        if missing or unknown:
            raise ValueError(f"bad proof fields: missing {sorted(missing)}, unknown {sorted(unknown)}")
        self.__dict__.update(elements)

    def items(self):
        return [(name, getattr(self, name)) for name in FIELD_NAMES]

    def replace(self, **changes) -> 'Proof':
        elements = dict(self.items())
        elements.update(changes)
        return Proof(**elements)

    def to_bytes(self, group: PairingGroup) -> bytes:
        out = bytearray()
        for name, kind in PROOF_LAYOUT:
            value = getattr(self, name)
            if kind == SCALAR:
                out += encode_scalar(value, group)
            else:
                out += encode_element(value, group, kind)
        return bytes(out)

    @classmethod
    def from_bytes(cls, data: bytes, group: PairingGroup) -> 'Proof':
        offset = 0
        elements = {}
        for name, kind in PROOF_LAYOUT:
            if kind == SCALAR:
                elements[name], offset = decode_scalar(data, offset, group)
            else:
                elements[name], offset = decode_element(data, offset, group, kind)
        if offset != len(data):
            raise SerializationError(f"{len(data) - offset} trailing bytes after proof")
        return cls(**elements)

    def __eq__(self, other):
        if not isinstance(other, Proof):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in FIELD_NAMES)

    def __repr__(self):
        return f"Proof({len(FIELD_NAMES)} elements)"
