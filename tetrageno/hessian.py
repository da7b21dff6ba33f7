"""Hessian of the multinomial logit negative log-likelihood.

Data layout (all numpy arrays):

* ``x``: individual-specific variables, shape ``(N, p)``.
* ``y``: choice-specific variables with choice-specific coefficients,
  shape ``(K, N, f)``; block 0 belongs to the base choice.
* ``z``: choice-specific variables with generic coefficients, shape
  ``(N, K - 1, d)``; the base choice has no entries.
* ``prob``: probabilities of the non-base choices, shape ``(N, K - 1)``.
* ``base_prob``: probabilities of the base choice, shape ``(N,)``.
* ``weights``: optional frequency weights, shape ``(N,)``.

Parameters are ordered as ``(K - 1) * p`` individual-specific
coefficients, then ``f`` for the base choice, ``(K - 1) * f`` for the
remaining choices, and finally ``d`` generic coefficients.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import numpy as np


@dataclass(frozen=True)
class ModelSize:
    """Dimensions of a multinomial logit model.

    n: observations, k: choices, p: individual-specific variables,
    f: choice-specific variables with choice-specific coefficients,
    d: choice-specific variables with generic coefficients.
    """

    n: int
    k: int
    p: int = 0
    f: int = 0
    d: int = 0

    def __post_init__(self) -> None:
        for name in ("n", "k", "p", "f", "d"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if self.k < 1:
            raise ValueError("a model needs at least one choice")

    def nparams(self) -> int:
        """Number of parameters to be estimated."""
        return (self.k - 1) * self.p + self.k * self.f + self.d


@dataclass
class _Block:
    design: np.ndarray
    choice: int
    prob: np.ndarray
    offset: int

    @property
    def width(self) -> int:
        return self.design.shape[1]

    @property
    def span(self) -> slice:
        return slice(self.offset, self.offset + self.width)


def _array(value, shape, name: str) -> np.ndarray:
    if value is None:
        raise ValueError(f"{name} is required for this model")
    arr = np.asarray(value, dtype=float)
    if arr.shape != shape:
        raise ValueError(f"{name} has shape {arr.shape}, expected {shape}")
    return arr


def _weights(size: ModelSize, weights) -> Optional[np.ndarray]:
    if weights is None:
        return None
    return _array(weights, (size.n,), "weights")


def _hessian_target(size: ModelSize, hessian) -> np.ndarray:
    if not isinstance(hessian, np.ndarray):
        raise TypeError("hessian must be a numpy array")
    nparams = size.nparams()
    if hessian.shape != (nparams, nparams):
        raise ValueError(f"hessian has shape {hessian.shape}, "
                         f"expected {(nparams, nparams)}")
    return hessian


def _blocks(size: ModelSize, x, y, prob: np.ndarray,
            base_prob) -> List[_Block]:
    blocks: List[_Block] = []
    if size.p:
        xs = _array(x, (size.n, size.p), "x")
        blocks.extend(_Block(xs, m, prob[:, m], m * size.p)
                      for m in range(size.k - 1))
    if size.f:
        ys = _array(y, (size.k, size.n, size.f), "y")
        base = _array(base_prob, (size.n,), "base_prob")
        start = (size.k - 1) * size.p
        for j in range(size.k):
            choice_prob = base if j == 0 else prob[:, j - 1]
            blocks.append(_Block(ys[j], j - 1, choice_prob, start + j * size.f))
    return blocks


def compute_non_generic_hessian(size: ModelSize, x, y, weights, prob,
                                base_prob, hessian: np.ndarray) -> np.ndarray:
    """Fill the blocks for choice-specific coefficients into hessian."""
    target = _hessian_target(size, hessian)
    probs = _array(prob, (size.n, size.k - 1), "prob")
    wt = _weights(size, weights)
    blocks = _blocks(size, x, y, probs, base_prob)
    for position, first in enumerate(blocks):
        for second in blocks[position:]:
            if first.choice == second.choice:
                w = first.prob * (1.0 - second.prob)
            else:
                w = -first.prob * second.prob
            if wt is not None:
                w = w * wt
            block = first.design.T @ (w[:, None] * second.design)
            target[first.span, second.span] = block
            target[second.span, first.span] = block.T
    return target


def compute_generic_hessian_corner(size: ModelSize, z, weights, prob,
                                   hessian: np.ndarray) -> np.ndarray:
    """Fill the block of generic coefficients (lower right corner)."""
    target = _hessian_target(size, hessian)
    zs = _array(z, (size.n, size.k - 1, size.d), "z")
    probs = _array(prob, (size.n, size.k - 1), "prob")
    wt = _weights(size, weights)
    weighted = probs if wt is None else probs * wt[:, None]
    corner = np.einsum("ikb,ik,ika->ba", zs, weighted, zs)
    mean = np.einsum("ik,ika->ia", probs, zs)
    row_weight = np.ones(size.n) if wt is None else wt
    corner -= mean.T @ (row_weight[:, None] * mean)
    start = size.nparams() - size.d
    target[start:, start:] = corner
    return target


def compute_generic_hessian(size: ModelSize, x, y, z, weights, prob,
                            base_prob, hessian: np.ndarray) -> np.ndarray:
    """Fill every block involving generic coefficients into hessian."""
    target = compute_generic_hessian_corner(size, z, weights, prob, hessian)
    if size.p == 0 and size.f == 0:
        return target
    zs = _array(z, (size.n, size.k - 1, size.d), "z")
    probs = _array(prob, (size.n, size.k - 1), "prob")
    wt = _weights(size, weights)
    weighted = probs if wt is None else probs * wt[:, None]
    start = size.nparams() - size.d
    choices = np.arange(size.k - 1)
    for block in _blocks(size, x, y, probs, base_prob):
        same = (choices == block.choice)[None, :]
        w = np.where(same, weighted * (1.0 - block.prob[:, None]),
                     -weighted * block.prob[:, None])
        mixed = np.einsum("ik,ika->ia", w, zs)
        cross = block.design.T @ mixed
        target[block.span, start:] = cross
        target[start:, block.span] = cross.T
    return target


def compute_hessian(size: ModelSize, x, y, z, weights, prob,
                    base_prob) -> np.ndarray:
    """Return the full symmetric Hessian, shape (nparams, nparams)."""
    nparams = size.nparams()
    hessian = np.zeros((nparams, nparams))
    if size.p or size.f:
        compute_non_generic_hessian(size, x, y, weights, prob, base_prob,
                                    hessian)
    if size.d:
        compute_generic_hessian(size, x, y, z, weights, prob, base_prob,
                                hessian)
    return hessian


def format_matrix(msg: str, matrix) -> str:
    """Render a titled matrix, one tab-separated row per line."""
    arr = np.atleast_2d(np.asarray(matrix, dtype=float))
    lines = ["\n%s:\n" % msg]
    for row in arr:
        lines.append("".join("\t%f" % value for value in row) + "\n")
    return "".join(lines)