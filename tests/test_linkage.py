import math

import numpy as np
import pytest

from tetrageno.linkage import (
    FilterResult,
    best_branch,
    filter_combination,
    prepare_ini_hmm,
)

LOG = math.log


def _transitions():
    trans0 = np.log(np.array([[0.9, 0.1], [0.2, 0.8]]))
    trans1 = np.log(np.array([[0.3, 0.7], [0.6, 0.4]]))
    return [trans0, trans1]


POSSI = [[0, 1], [2, 3], [0, 1]]
INITIAL = np.log([0.5, 0.5])


def test_best_branch_keeps_complete_read():
    link = np.array([[1, 3, 0], [0, -1, 1]])
    out = best_branch(link, _transitions(), INITIAL, POSSI, 0)
    assert out.tolist() == [1, 3, 0]


def test_best_branch_fills_middle_site():
    link = np.array([[0, -1, 1]])
    out = best_branch(link, _transitions(), INITIAL, POSSI, 0)
    assert out[0] == 0 and out[2] == 1
    assert out[1] == 2


def test_best_branch_fills_first_site_from_initial():
    link = np.array([[-1, 3, 0]])
    initial = np.log([0.05, 0.95])
    out = best_branch(link, _transitions(), initial, POSSI, 0)
    assert out.tolist()[1:] == [3, 0]
    assert out[0] == 1


def test_best_branch_result_uses_possible_states():
    link = np.array([[-1, -1, -1]])
    out = best_branch(link, _transitions(), INITIAL, POSSI, 0)
    for value, allowed in zip(out.tolist(), POSSI):
        assert value in allowed


def test_best_branch_impossible_paths_pick_first_candidate():
    minus_inf = np.full((2, 2), -np.inf)
    link = np.array([[-1, -1, -1]])
    out = best_branch(link, [minus_inf, minus_inf], INITIAL, POSSI, 0)
    assert out.tolist() == [POSSI[0][0], POSSI[1][0], POSSI[2][0]]


def test_best_branch_unknown_nucleotide_raises():
    link = np.array([[7, -1, 1]])
    with pytest.raises(ValueError):
        best_branch(link, _transitions(), INITIAL, POSSI, 0)


SITE0 = np.array([[0, 0, 1, 1], [1, 1, 0, 0]])
SITE1 = np.array([[2, 2, 3, 3], [3, 3, 2, 2]])
COMBOS = np.array([[0, 0], [0, 1], [1, 0], [1, 1]])


def test_filter_combination_keeps_supported_states():
    reads = np.array([[0, 2], [1, 3]])
    result = filter_combination(reads, COMBOS, [SITE0, SITE1], [0, 1], 2, 4)
    assert result.exclude == [False, True, True, False]
    assert result.num_states == 4 - sum(result.exclude)
    assert result.relaxed is False


def test_filter_combination_treats_genome_gap_as_missing():
    site1 = np.array([[-1, -1, 3, 3]])
    reads = np.array([[0, 4], [1, 3]])
    result = filter_combination(reads, np.array([[0, 0]]), [SITE0, site1],
                                [0, 1], 2, 1)
    assert result.exclude == [False]
    assert result.num_states == 1


def test_filter_combination_relaxes_when_nothing_supported():
    reads = np.array([[0, 0], [1, 1]])
    result = filter_combination(reads, COMBOS, [SITE0, SITE1], [0, 1], 2, 4)
    assert result == FilterResult(4, [False, False, False, False], True)


def test_filter_combination_uses_location_indices():
    reads = np.array([[0, 2], [1, 3]])
    hidden = [SITE1, SITE0, SITE1]
    result = filter_combination(reads, COMBOS, hidden, [1, 2], 2, 4)
    direct = filter_combination(reads, COMBOS, [SITE0, SITE1], [0, 1], 2, 4)
    assert result == direct


def test_prepare_ini_hmm_removes_limited_states():
    ind0 = np.arange(9).reshape(3, 3)
    ind1 = np.arange(10, 16).reshape(3, 2)
    limits = [[0, 1, 0], [1, 0, 0], [0, 0]]
    out = prepare_ini_hmm(3, [2, 2, 2], [ind0, ind1], limits)
    assert len(out) == 2
    assert out[0].tolist() == [[1, 2], [7, 8]]
    assert out[1].tolist() == [[12, 13], [14, 15]]


def test_prepare_ini_hmm_without_limits_is_identity():
    ind = np.array([[1, 0], [0, 1]])
    out = prepare_ini_hmm(2, [2, 2], [ind], [[0, 0], [0, 0]])
    assert np.array_equal(out[0], ind)


def test_prepare_ini_hmm_single_time_is_empty():
    assert prepare_ini_hmm(1, [3], [], [[0, 0, 0]]) == []


def test_prepare_ini_hmm_too_few_states_raises():
    ind = np.ones((3, 3), dtype=int)
    with pytest.raises(ValueError):
        prepare_ini_hmm(2, [1, 3], [ind], [[0, 0, 0], [0, 0, 0]])


def test_prepare_ini_hmm_rejects_zero_time():
    with pytest.raises(ValueError):
        prepare_ini_hmm(0, [], [], [])