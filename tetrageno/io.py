"""Plain-text rendering of numeric vectors and vectorized matrices."""

from __future__ import annotations

import sys
from typing import Optional, Sequence, TextIO

_SMALL = 1e-2


def _flat(values, needed: int, what: str) -> list:
    flat = list(values)
    if len(flat) < needed:
        raise ValueError(f"{what} holds {len(flat)} values, {needed} needed")
    return flat


def _cell(value: float) -> str:
    return " %8.2e" % value if value < _SMALL else " %8.3f" % value


def _element(mat: list, nrows: int, ncols: int, i: int, j: int, row: bool):
    return mat[i * ncols + j] if row else mat[j * nrows + i]


def _check_uint(value) -> int:
    number = int(value)
    if number < 0:
        raise ValueError(f"negative value {value} where an unsigned one is needed")
    return number


def format_doubles(values: Sequence[float], precision: int = 6,
                   newline: bool = False) -> str:
    """Render each value with a leading space at the given precision."""
    text = "".join(" %.*f" % (precision, v) for v in values)
    return text + "\n" if newline else text


def format_uints(values: Sequence[int], width: int = 0,
                 newline: bool = False) -> str:
    """Render unsigned integers, right-aligned to width when width is nonzero."""
    numbers = [_check_uint(v) for v in values]
    if width:
        text = "".join(f" {v:>{width}d}" for v in numbers)
    else:
        text = "".join(f" {v}" for v in numbers)
    return text + "\n" if newline else text


def format_vectorized_sq_matrix(mat: Sequence[float], n: int,
                                row: bool = True) -> str:
    """Render an n x n matrix stored row-major (row) or column-major."""
    flat = _flat(mat, n * n, "matrix")
    lines = []
    for i in range(n):
        cells = "".join(_cell(_element(flat, n, n, i, j, row)) for j in range(n))
        lines.append(cells + "\n")
    return "".join(lines)


def format_vectorized_matrix(mat: Sequence[float], n: int, ncols: int,
                             row: bool = True) -> str:
    """Render an n x ncols matrix, each line prefixed with its row index."""
    flat = _flat(mat, n * ncols, "matrix")
    lines = []
    for i in range(n):
        cells = "".join(_cell(_element(flat, n, ncols, i, j, row))
                        for j in range(ncols))
        lines.append("%3d" % i + cells + "\n")
    return "".join(lines)


def format_vectorized_uint_matrix(mat: Sequence[int], n: int, ncols: int,
                                  row: bool = True) -> str:
    """Render an n x ncols matrix of unsigned integers."""
    flat = _flat(mat, n * ncols, "matrix")
    lines = []
    for i in range(n):
        cells = "".join(
            f" {_check_uint(_element(flat, n, ncols, i, j, row))}"
            for j in range(ncols))
        lines.append(cells + "\n")
    return "".join(lines)


def _out(stream: Optional[TextIO]) -> TextIO:
    return sys.stderr if stream is None else stream


def print_doubles(stream: Optional[TextIO], values: Sequence[float],
                  precision: int = 6, newline: bool = False) -> None:
    """Write format_doubles output to stream (stderr if None)."""
    _out(stream).write(format_doubles(values, precision, newline))


def print_uints(stream: Optional[TextIO], values: Sequence[int],
                width: int = 0, newline: bool = False) -> None:
    """Write format_uints output to stream (stderr if None)."""
    _out(stream).write(format_uints(values, width, newline))


def print_vectorized_sq_matrix(stream: Optional[TextIO], mat: Sequence[float],
                               n: int, row: bool = True) -> None:
    """Write a square vectorized matrix to stream (stderr if None)."""
    _out(stream).write(format_vectorized_sq_matrix(mat, n, row))


def print_vectorized_matrix(stream: Optional[TextIO], mat: Sequence[float],
                            n: int, ncols: int, row: bool = True) -> None:
    """Write a vectorized matrix to stream (stderr if None)."""
    _out(stream).write(format_vectorized_matrix(mat, n, ncols, row))


def print_vectorized_uint_matrix(stream: Optional[TextIO], mat: Sequence[int],
                                 n: int, ncols: int, row: bool = True) -> None:
    """Write a vectorized unsigned integer matrix to stream (stderr if None)."""
    _out(stream).write(format_vectorized_uint_matrix(mat, n, ncols, row))