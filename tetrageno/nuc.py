"""Nucleotide encodings: 2-bit xy codes and 4-bit IUPAC codes.

The xy encoding orders A=0, C=1, T=2, G=3 (bits 1-2 of the ASCII letter).
The IUPAC encoding sets one bit per nucleotide, high to low T G C A.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Iterable, Sequence, TextIO


class Encoding(IntEnum):
    """Kinds of nucleotide encoding."""

    DEFAULT = 0
    IUPAC = 1
    XY = 2
    NUC = 3


NUM_NUCLEOTIDES = 4
NUM_IUPAC_SYMBOLS = 16

XY_A, XY_C, XY_T, XY_G = 0, 1, 2, 3
XY_NON_NUCLEOTIDE = 1 << 7

IUPAC_X = 0
IUPAC_A = 1
IUPAC_C = 2
IUPAC_M = 3
IUPAC_G = 4
IUPAC_R = 5
IUPAC_S = 6
IUPAC_V = 7
IUPAC_T = 8
IUPAC_U = 8
IUPAC_W = 9
IUPAC_Y = 10
IUPAC_H = 11
IUPAC_K = 12
IUPAC_D = 13
IUPAC_B = 14
IUPAC_N = 15

STD_A, STD_C, STD_G, STD_T = 0, 1, 2, 3

MIN_NUCLEOTIDE_ASCII = "A"
NUCLEOTIDE_ALPHABET_SIZE = ord("Z") - ord("A")

POPCNT = (0, 1, 1, 2, 1, 2, 2, 3, 1, 2, 2, 3, 2, 3, 3, 4)

XY_TO_CHAR = "ACTG"
STD_TO_CHAR = "ACGT"
IUPAC_TO_CHAR = "-ACMGRSVTWYHKDBN"

XY_TO_IUPAC = (IUPAC_A, IUPAC_C, IUPAC_T, IUPAC_G)
XY_TO_RC = (XY_T, XY_G, XY_A, XY_C)
IUPAC_TO_RC = (15, 8, 4, 12, 2, 10, 6, 14, 1, 9, 5, 13, 3, 11, 7, 0)
IUPAC_TO_XY = (0, XY_A, XY_C, 0, XY_G, 0, 0, 0, XY_T, 0, 0, 0, 0, 0, 0, 0)
IUPAC_TO_STD = (0, STD_A, STD_C, 0, STD_G, 0, 0, 0, STD_T, 0, 0, 0, 0, 0, 0, 0)
XY_TO_STD = (0, 1, 3, 2)
STD_TO_XY = (0, 1, 3, 2)

NUC_TO_IUPAC = (1, 14, 2, 13, 0, 0, 4, 11, 0, 0, 12, 0, 3, 15, 0, 0, 0,
                5, 6, 8, 8, 7, 9, 0, 10)
NUC_TO_XY = (0, 0, 1, 0, 0, 0, 3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0,
             2, 2, 0, 0, 0, 0)

_CHAR_TO_IUPAC = {
    "A": IUPAC_A, "C": IUPAC_C, "G": IUPAC_G, "T": IUPAC_T, "U": IUPAC_U,
    "R": IUPAC_R, "Y": IUPAC_Y, "S": IUPAC_S, "W": IUPAC_W, "K": IUPAC_K,
    "M": IUPAC_M, "B": IUPAC_B, "D": IUPAC_D, "H": IUPAC_H, "V": IUPAC_V,
    "N": IUPAC_N,
}


def valid_iupac(c: str) -> bool:
    """Whether c (any case) is an IUPAC symbol, a gap '-' or 'X'."""
    upper = c.upper()
    return upper in IUPAC_TO_CHAR or upper == "X"


def valid_nucleotide(c: str) -> bool:
    """Whether c (any case) is one of A, C, G, T or U."""
    return c.upper() in ("A", "C", "G", "T", "U")


def char_to_xy(c: str) -> int:
    """Return the xy code of c, or XY_NON_NUCLEOTIDE for anything else."""
    upper = c.upper()
    if upper == "U":
        upper = "T"
    if upper in ("A", "C", "G", "T"):
        return (ord(upper) >> 1) & 3
    return XY_NON_NUCLEOTIDE


def char_to_iupac(c: str) -> int:
    """Return the IUPAC code of c; unknown characters give IUPAC_X."""
    return _CHAR_TO_IUPAC.get(c.upper(), IUPAC_X)


def char_to_data(c: str, encoding: int) -> int:
    """Encode c with the requested encoding (xy or IUPAC)."""
    if encoding == Encoding.XY:
        return char_to_xy(c)
    if encoding == Encoding.IUPAC:
        return char_to_iupac(c)
    raise ValueError(f"unsupported nucleotide encoding: {encoding}")


def _nuc_index(c: str) -> int:
    index = ord(c) - ord(MIN_NUCLEOTIDE_ASCII)
    if not 0 <= index < NUCLEOTIDE_ALPHABET_SIZE:
        raise ValueError(f"character {c!r} is outside 'A' to 'Y'")
    return index


def nuc_to_iupac_code(c: str) -> int:
    """Look up the IUPAC code of an uppercase letter 'A' to 'Y'."""
    return NUC_TO_IUPAC[_nuc_index(c)]


def nuc_to_xy_code(c: str) -> int:
    """Look up the xy code of an uppercase letter 'A' to 'Y' (unknown gives A)."""
    return NUC_TO_XY[_nuc_index(c)]


def _alphabet(encoding: int) -> str:
    if encoding == Encoding.XY:
        return XY_TO_CHAR
    if encoding == Encoding.IUPAC:
        return IUPAC_TO_CHAR
    raise ValueError(f"unsupported nucleotide encoding: {encoding}")


def format_nuc_segment(codes: Sequence[int], encoding: int, start: int,
                       end: int) -> str:
    """Render codes[start:end] as letters of the given encoding."""
    alphabet = _alphabet(encoding)
    return "".join(alphabet[code] for code in codes[start:end])


def format_nuc_sequence(codes: Sequence[int], encoding: int) -> str:
    """Render a whole encoded sequence as letters."""
    return format_nuc_segment(codes, encoding, 0, len(codes))


def write_nuc_sequence(stream: TextIO, codes: Sequence[int], encoding: int) -> None:
    """Write an encoded sequence to stream as letters."""
    stream.write(format_nuc_sequence(codes, encoding))


def reverse_complement_iupac(codes: Iterable[int]) -> list:
    """Return the reverse complement of an IUPAC-encoded sequence."""
    return [IUPAC_TO_RC[code] for code in reversed(list(codes))]


def reverse_complement_xy(codes: Iterable[int]) -> list:
    """Return the reverse complement of an xy-encoded sequence."""
    return [XY_TO_RC[code] for code in reversed(list(codes))]