"""Hidden-state construction for haplotype inference at variable sites.

Hidden-state matrices have one row per possible state and one column per
haplotype (four haplotypes for a tetraploid).  Nucleotide codes are small
integers; ``-1`` marks a gap.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional, Sequence

import numpy as np

NUM_CLASS = 4
_GAP = -1
_BALANCED_LOW = 0.45
_BALANCED_HIGH = 0.55


def _column_major(values: Sequence[int], nrow: int) -> np.ndarray:
    return np.array(values, dtype=int).reshape(nrow, NUM_CLASS, order="F")


def _pair(a: Sequence[int]) -> tuple:
    if len(a) < 2:
        raise ValueError("two nucleotide codes are needed")
    return int(a[0]), int(a[1])


def double_heter(a: Sequence[int]) -> np.ndarray:
    """Return the 4 x 4 double-heterozygous states for nucleotides a[0], a[1]."""
    a0, a1 = _pair(a)
    return _column_major(
        [a0, a0, a1, a1, a1, a1, a0, a0, a1, a0, a0, a1, a0, a1, a1, a0], 4)


def two_possible(a: Sequence[int]) -> np.ndarray:
    """Return the 2 x 4 states splitting a[0], a[1] between the subgenomes."""
    a0, a1 = _pair(a)
    return _column_major([a0, a1, a0, a1, a1, a0, a1, a0], 2)


def four_possible(small: Sequence[int], big: int) -> np.ndarray:
    """Return the 4 x 4 states with the majority nucleotide ``big`` twice."""
    s0, s1 = _pair(small)
    b = int(big)
    return _column_major(
        [s0, s1, b, b, s1, s0, b, b, b, b, s0, s1, b, b, s1, s0], 4)


def _first_max(values: Sequence[float]) -> int:
    best = 0
    for position, value in enumerate(values):
        if value > values[best]:
            best = position
    return best


def n3_gap(hap_site: Sequence[int], sum_site: Sequence[int], ref_j: int,
           uni_alignment: Sequence[str], opt: Mapping[str, Any]) -> dict:
    """Hidden states at a site with a gap and two further nucleotides.

    ``hap_site[0]`` is the gap; ``sum_site`` holds the counts.  Returns a
    dict with ``n_row`` (number of states) and ``temp`` (the states, or
    None when empirical states were not requested).
    """
    if len(hap_site) < 3 or len(sum_site) < 3:
        raise ValueError("three sites and counts are needed")
    emprical = bool(opt["emprical"])
    not_mismatch = uni_alignment[ref_j] != "M"
    total = float(sum_site[1]) + float(sum_site[2])
    ratio = float(sum_site[1]) / total if total else math.nan
    h1, h2 = int(hap_site[1]), int(hap_site[2])
    temp: Optional[np.ndarray] = None

    if _BALANCED_LOW <= ratio <= _BALANCED_HIGH:
        if emprical:
            if not_mismatch:
                temp = _column_major(
                    [_GAP, _GAP, h1, h2, _GAP, _GAP, h2, h1,
                     h1, h2, _GAP, _GAP, h2, h1, _GAP, _GAP], 4)
            else:
                temp = np.zeros((4, NUM_CLASS), dtype=int)
        n_row = 4
    else:
        hap = int(hap_site[_first_max([sum_site[1], sum_site[2]]) + 1])
        if not_mismatch:
            if emprical:
                temp = _column_major(
                    [_GAP, hap, _GAP, hap, hap, _GAP, hap, _GAP], 2)
            n_row = 2
        else:
            temp = np.full(NUM_CLASS, hap, dtype=int)
            n_row = 1
    return {"n_row": n_row, "temp": temp}


def make_hap(hidden_states, haplotype, location: Sequence[int], p_tmax: int,
             combination: Sequence[int], time_pos: int, num: int,
             hap_min_pos: int) -> np.ndarray:
    """Fill the chosen hidden states into a copy of haplotype.

    For each of the first ``num`` locations, the state ``combination[j]``
    of ``hidden_states[location[j]]`` is written to that column.  Returns
    the ``p_tmax`` columns starting at ``time_pos - hap_min_pos``.
    """
    filled = np.array(haplotype, dtype=int, copy=True)
    if filled.ndim != 2 or filled.shape[0] != NUM_CLASS:
        raise ValueError(f"haplotype must have {NUM_CLASS} rows")
    for site, choice in zip(list(location)[:num], list(combination)[:num]):
        hidden = np.atleast_2d(np.asarray(hidden_states[site], dtype=int))
        filled[:, site] = hidden[int(choice), :NUM_CLASS]
    start = time_pos - hap_min_pos
    end = start + p_tmax
    if start < 0 or end > filled.shape[1] or p_tmax < 0:
        raise IndexError(f"columns {start} to {end} are outside the haplotype")
    return filled[:, start:end].copy()


def fill_all_hap(hidden_states, hap_length: int,
                 n_row: Sequence[int]) -> np.ndarray:
    """Return a NUM_CLASS x hap_length haplotype with invariant sites filled.

    Sites with a single hidden state take it; all others stay zero.
    """
    haplotype = np.zeros((NUM_CLASS, hap_length), dtype=int)
    for j in range(hap_length):
        if n_row[j] == 1:
            haplotype[:, j] = np.asarray(hidden_states[j], dtype=int).ravel()[:NUM_CLASS]
    return haplotype