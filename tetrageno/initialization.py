"""Initial haplotypes for the haplotype inference.

Haplotype matrices have NUM_CLASS rows, one per haplotype, and one column
per aligned position.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

import numpy as np

from tetrageno.hmm_state import NUM_CLASS, fill_all_hap, make_hap

_DELETION = 4
_GAP = -1
_NO_DELETION = -1


def _check_count(values: Sequence[Any], what: str) -> None:
    if len(values) < NUM_CLASS:
        raise ValueError(f"{what} needs {NUM_CLASS} entries, got {len(values)}")


def sample_hap(dat_info: Mapping[str, Any], start: Sequence[int],
               idx: Sequence[int], hap_deletion_len: Sequence[int]) -> dict:
    """Build haplotypes from NUM_CLASS chosen reads.

    ``idx`` holds the 1-based read numbers, ``start`` where each read's
    entries begin in the flattened data.  Observed nucleotides are placed
    at their reference positions and deletions are marked with 4.

    Returns a dict with ``hap``, ``deletion_pos`` (deleted positions,
    relative to the alignment start), ``hap_deletion_len`` and
    ``hap_del_start_id`` (where each haplotype's deletions begin in
    ``deletion_pos``, or -1 when it has none).
    """
    _check_count(start, "start")
    _check_count(idx, "idx")
    _check_count(hap_deletion_len, "hap_deletion_len")
    deletion = dat_info["deletion"]
    del_flag = deletion["del_flag"]
    del_id_all = deletion["del_id_all"]
    del_ref_pos = deletion["del_ref_pos"]
    del_total = int(deletion["del_total"])
    ref_pos = dat_info["ref_pos"]
    obs = dat_info["nuc"]
    length = dat_info["length"]
    hap_length = int(dat_info["ref_length_max"]) - int(dat_info["ref_start"])
    if hap_length < 0:
        raise ValueError("reference end lies before reference start")

    hap_nuc = np.zeros((NUM_CLASS, hap_length), dtype=int)
    deletion_lengths = [int(n) for n in hap_deletion_len[:NUM_CLASS]]
    deletion_pos = np.zeros(sum(deletion_lengths), dtype=int)
    filled = 0

    for hap, (first, read) in enumerate(zip(start[:NUM_CLASS], idx[:NUM_CLASS])):
        read = int(read)
        if read < 1:
            raise ValueError(f"read numbers start from 1, got {read}")
        first = int(first)
        for offset in range(int(length[read - 1])):
            hap_nuc[hap, int(ref_pos[first + offset])] = int(obs[first + offset])
        if del_flag[read - 1]:
            for m in range(del_total):
                if int(del_id_all[m]) == read:
                    if filled >= len(deletion_pos):
                        raise ValueError("more deletions than hap_deletion_len allows")
                    hap_nuc[hap, int(del_ref_pos[m])] = _DELETION
                    deletion_pos[filled] = int(del_ref_pos[m])
                    filled += 1

    start_id = np.zeros(NUM_CLASS, dtype=int)
    for hap, count in enumerate(deletion_lengths):
        start_id[hap] = sum(deletion_lengths[:hap]) if count else _NO_DELETION

    return {
        "hap": hap_nuc,
        "deletion_pos": deletion_pos,
        "hap_deletion_len": np.array(deletion_lengths, dtype=int),
        "hap_del_start_id": start_id,
    }


def sample_hap2(hmm_info: Mapping[str, Any], hap_length: int, hap_min_pos: int,
                rng: Optional[np.random.Generator] = None) -> dict:
    """Draw NUM_CLASS haplotypes at random from the hidden states.

    Invariant sites take their single state; at each undecided site one
    of its ``pos_possibility`` states is drawn uniformly.  Returns a dict
    with ``haplotype``, ``gap_in`` (True when a gap was drawn) and
    ``sample`` (the 0-based state drawn at each undecided site).
    """
    generator = np.random.default_rng() if rng is None else rng
    hidden_states = hmm_info["hidden_states"]
    n_row = hmm_info["n_row"]
    pos_possibility = [int(n) for n in hmm_info["pos_possibility"]]
    undecided_pos = [int(p) for p in hmm_info["undecided_pos"]]
    if any(n < 1 for n in pos_possibility):
        raise ValueError("every undecided site needs at least one state")

    haplotype = fill_all_hap(hidden_states, hap_length, n_row)
    drawn = np.array([int(generator.integers(0, n)) for n in pos_possibility],
                     dtype=int)
    result = make_hap(hidden_states, haplotype, undecided_pos, hap_length,
                      drawn, hap_min_pos, len(pos_possibility), hap_min_pos)
    return {
        "haplotype": result,
        "gap_in": bool(np.any(result == _GAP)),
        "sample": drawn,
    }