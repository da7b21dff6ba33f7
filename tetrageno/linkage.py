"""Read-linkage based choice and pruning of hidden-state combinations.

Linkage matrices hold one read per row and one variable site per column;
``-1`` marks a site the read does not cover.  In read data the code ``4``
marks a gap in the genome and is compared as ``-1``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np

from tetrageno.hmm_state import NUM_CLASS

_MISSING = -1
_GENOME_GAP = 4


@dataclass
class FilterResult:
    """Outcome of filtering state combinations against read linkage.

    ``num_states`` counts the combinations kept, ``exclude`` flags each
    combination that was dropped, and ``relaxed`` is True when no
    combination was supported by the reads, so that all were kept.
    """

    num_states: int
    exclude: List[bool] = field(default_factory=list)
    relaxed: bool = False


def _position(values: Sequence[int], target: int, site: int) -> int:
    for index, value in enumerate(values):
        if value == target:
            return index
    raise ValueError(f"nucleotide {target} at site {site} is not a possible state")


def best_branch(link, transition, initial, possi_nuc, i: int) -> np.ndarray:
    """Impute the missing sites of read ``i`` by the most likely path.

    ``transition[j]`` holds log transition probabilities from the states
    ``possi_nuc[j]`` (rows) to ``possi_nuc[j + 1]`` (columns); ``initial``
    holds log probabilities of the states at the first site.  Known sites
    keep their nucleotide; missing ones are filled along the Viterbi path.
    """
    reads = np.atleast_2d(np.asarray(link, dtype=int))
    read = reads[i]
    ncol = reads.shape[1]
    if ncol == 0:
        raise ValueError("linkage has no sites")
    start = np.asarray(initial, dtype=float)

    candidates: List[np.ndarray] = []
    scores: List[np.ndarray] = []
    for j in range(ncol):
        nuc = np.asarray(possi_nuc[j], dtype=int)
        known = read[j] != _MISSING
        if known:
            candidates.append(np.array([read[j]], dtype=int))
            state = _position(nuc, int(read[j]), j)
        else:
            candidates.append(nuc)
        if j == 0:
            scores.append(start[[state]] if known else start)
            continue
        trans = np.atleast_2d(np.asarray(transition[j - 1], dtype=float))
        if read[j - 1] != _MISSING:
            previous = _position(np.asarray(possi_nuc[j - 1], dtype=int),
                                 int(read[j - 1]), j - 1)
            rows = trans[[previous], :]
        else:
            rows = trans
        scores.append(rows[:, [state]] if known else rows)

    path = np.asarray(scores[0][:len(candidates[0])], dtype=float)
    backpointers: List[np.ndarray] = []
    for k in range(1, ncol):
        totals = path[:, None] + scores[k][:len(path), :len(candidates[k])]
        backpointers.append(np.argmax(totals, axis=0))
        path = totals.max(axis=0)

    hidden = np.empty(ncol, dtype=int)
    best = int(np.argmax(path))
    hidden[ncol - 1] = candidates[ncol - 1][best]
    for k in range(ncol - 2, -1, -1):
        best = int(backpointers[k][best])
        hidden[k] = candidates[k][best]
    return hidden


def _state_matrix(hidden) -> np.ndarray:
    return np.atleast_2d(np.asarray(hidden, dtype=int))


def filter_combination(sub_link, combination, hidden_states, location,
                       num: int, num_states: int) -> FilterResult:
    """Drop state combinations whose haplotypes no read supports.

    A combination is kept when each of its NUM_CLASS haplotypes agrees
    with some read at every adjacent pair of the ``num`` sites.  If no
    combination is kept, all of them are, and ``relaxed`` is set.
    """
    reads = np.atleast_2d(np.asarray(sub_link, dtype=int)).copy()
    reads[reads == _GENOME_GAP] = _MISSING
    reads = reads[:, :num]
    combos = np.atleast_2d(np.asarray(combination, dtype=int))
    matrices = [_state_matrix(hidden_states[location[j]]) for j in range(num)]

    exclude: List[bool] = []
    for m in range(num_states):
        comb = combos[m]
        haps = np.column_stack(
            [matrices[j][comb[j], :NUM_CLASS] for j in range(num)])
        supported = 0
        for hap in haps:
            pairs = ((reads[:, :-1] == hap[:-1]) & (reads[:, 1:] == hap[1:]))
            if reads.shape[0] and np.any(pairs.sum(axis=1) >= num - 1):
                supported += 1
        exclude.append(supported != NUM_CLASS)

    dropped = sum(exclude)
    if num_states and dropped == num_states:
        return FilterResult(num_states, [False] * num_states, relaxed=True)
    return FilterResult(num_states - dropped, exclude)


def prepare_ini_hmm(t_max: int, num_states, trans_indicator,
                    further_limit) -> List[np.ndarray]:
    """Restrict transition indicators to the states left at each time.

    ``further_limit[t]`` flags the states at time ``t`` to leave out; the
    result for step ``t`` has shape ``(num_states[t], num_states[t + 1])``.
    """
    if t_max < 1:
        raise ValueError("t_max must be at least 1")
    restricted: List[np.ndarray] = []
    for t in range(t_max - 1):
        indicator = np.atleast_2d(np.asarray(trans_indicator[t], dtype=int))
        rows = [m for m in range(indicator.shape[0]) if not further_limit[t][m]]
        cols = [w for w in range(indicator.shape[1])
                if not further_limit[t + 1][w]]
        out = np.zeros((int(num_states[t]), int(num_states[t + 1])), dtype=int)
        if len(rows) > out.shape[0] or len(cols) > out.shape[1]:
            raise ValueError(f"more states remain at step {t} than num_states allows")
        if rows and cols:
            out[:len(rows), :len(cols)] = indicator[np.ix_(rows, cols)]
        restricted.append(out)
    return restricted