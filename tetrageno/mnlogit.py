"""Helpers for the multinomial logit error model."""

from __future__ import annotations

from typing import Sequence

import numpy as np

_NUC_RANK = {"A": 1, "C": 2, "G": 3, "T": 4}
_INDICATOR_COLUMNS = {"C": (4, 7), "G": (5, 8), "T": (6, 9)}
_MIN_COLUMNS = 10


def sort_ind(nucleotides: Sequence[str]) -> np.ndarray:
    """Return indices that stably sort nucleotides in A, C, G, T order.

    Symbols other than A, C, G, T rank before A.
    """
    ranks = np.array([_NUC_RANK.get(n, 0) for n in nucleotides], dtype=float)
    return np.argsort(ranks, kind="stable")


def form_design_matrix(qua, ref_pos, read_pos, hap_nuc, pd_length: int) -> np.ndarray:
    """Build the design matrix for the error model.

    Columns: intercept, read position, reference position, quality, then
    indicators for haplotype C, G, T and their quality interactions.
    """
    qua = np.asarray(qua, dtype=float)
    n = len(qua)
    if not (len(ref_pos) == len(read_pos) == len(hap_nuc) == n):
        raise ValueError("all columns must have the same length")
    if pd_length < _MIN_COLUMNS:
        raise ValueError(f"design matrix needs at least {_MIN_COLUMNS} columns")
    x = np.zeros((n, pd_length))
    x[:, 0] = 1
    x[:, 1] = np.asarray(read_pos, dtype=float)
    x[:, 2] = np.asarray(ref_pos, dtype=float)
    x[:, 3] = qua
    nuc = np.asarray(list(hap_nuc), dtype=object)
    for symbol, (indicator, interaction) in _INDICATOR_COLUMNS.items():
        mask = nuc == symbol
        x[mask, indicator] = 1
        x[mask, interaction] = qua[mask]
    return x