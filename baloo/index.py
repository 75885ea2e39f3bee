"""
Index Extraction and Column Mapping
===================================

Given a table t and a lookup vector f of length m, this module derives

- I: m distinct table positions. The first k are the first occurrences
  of the distinct lookup values, in first-seen order; the remaining
  m - k are the smallest positions not already selected,
- values: table[I[j]] for every j,
- col: for every lookup entry, the slot of its value within I,

so that table[I[col(i)]] == f[i] for every i. I always has exactly m
elements, so z_I has degree m whatever the number of distinct values.
The result is a pure function of (table, f).

Example
-------
table  = [1, 2, 3, 4, 5, 6, 7, 8]
lookup = [3, 7, 3, 4]
values = [3, 7, 4, 1]      # first-seen order, then padding
I      = [2, 6, 3, 0]
col    = [0, 1, 0, 2]
"""

from collections import namedtuple
from typing import Sequence

from .errors import WitnessError
from .field import is_power_of_two

LookupIndex = namedtuple('LookupIndex', ['values', 'positions', 'col'])
LookupIndex.__doc__ = """Sub-table selection for one lookup: values, I and col."""


def check_lookup_shape(m: int, n: int):
    """Reject lookup sizes the protocol cannot handle."""
    if not is_power_of_two(m):
        raise WitnessError(f"lookup length {m} must be a power of two")
    if m > n:
        raise WitnessError(f"lookup length {m} exceeds table length {n}")


def extract_indices(table: Sequence[int], lookup: Sequence[int]) -> LookupIndex:
    """
    Compute the distinct-value positions and the column map for a lookup.

    The returned index has one position per distinct lookup value; see
    pad_indices() for the m-element index set the prover commits to.

    Raises
    ------
    WitnessError
        If the lookup has an unsupported length or any value is absent
        from the table. Raised before any polynomial is built.
    """
    check_lookup_shape(len(lookup), len(table))

    first_position = {}
    for i, value in enumerate(table):
        first_position.setdefault(value, i)

    values = []
    slot = {}
    col = []
    for i, value in enumerate(lookup):
        if value not in first_position:
            raise WitnessError(f"lookup entry {i} (value {value}) does not occur in the table")
        if value not in slot:
            slot[value] = len(values)
            values.append(value)
        col.append(slot[value])

    positions = [first_position[value] for value in values]
    return LookupIndex(values=tuple(values), positions=tuple(positions), col=tuple(col))


def pad_indices(index: LookupIndex, table: Sequence[int]) -> LookupIndex:
    """
    Extend I with unused table positions until it has one slot per lookup entry.

    Padding slots are never referenced by col.
    """
    m = len(index.col)
    positions = list(index.positions)
    used = set(positions)
    for i in range(len(table)):
        if len(positions) == m:
            break
        if i not in used:
            positions.append(i)
    values = [table[i] for i in positions]
    return LookupIndex(values=tuple(values), positions=tuple(positions), col=index.col)
