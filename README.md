# tetrageno

Python building blocks for genotyping allotetraploid organisms from aligned
sequencing reads. The package gathers pieces a genotyping pipeline needs
between reading alignments and fitting a model:

- **`tetrageno.nuc`** – nucleotide encodings. Characters convert to the 2-bit
  `xy` code (A=0, C=1, T=2, G=3) or the 4-bit IUPAC code (bits T G C A), with
  validation, reverse complements and formatting of encoded sequences
  (`Encoding`, `char_to_xy`, `char_to_iupac`, `char_to_data`, `valid_iupac`,
  `valid_nucleotide`, `nuc_to_iupac_code`, `nuc_to_xy_code`,
  `reverse_complement_iupac`, `reverse_complement_xy`, `format_nuc_sequence`,
  `format_nuc_segment`, `write_nuc_sequence`).
- **`tetrageno.errors`** – uniformly formatted info, debug, warning and error
  messages with a set of canned error texts, a global verbosity level and a
  time-limit check (`MessageType`, `ErrorCode`, `Verbosity`, `format_message`,
  `message`, `debug_msg`, `debug_enabled`, `set_debug_level`,
  `get_debug_level`, `check_time`).
- **`tetrageno.io`** – plain-text formatting and printing of vectors and of
  matrices stored in row- or column-vectorized form (`format_doubles`,
  `format_uints`, `format_vectorized_matrix`, `format_vectorized_sq_matrix`,
  `format_vectorized_uint_matrix` and their `print_*` counterparts, which
  write to a stream or to stderr when the stream is `None`).
- **`tetrageno.mnlogit`** – helpers for the multinomial logit error model of
  read nucleotides: a stable A, C, G, T ordering (`sort_ind`) and the design
  matrix (`form_design_matrix`).
- **`tetrageno.hessian`** – the Hessian of a multinomial logit
  log-likelihood with individual-specific, choice-specific and generic
  coefficients, optionally with frequency weights (`ModelSize`,
  `compute_hessian`, `compute_non_generic_hessian`,
  `compute_generic_hessian`, `compute_generic_hessian_corner`,
  `format_matrix`).
- **`tetrageno.hmm_state`** – candidate hidden states per site for four
  haplotypes and assembly of haplotypes from chosen states (`two_possible`,
  `four_possible`, `double_heter`, `n3_gap`, `make_hap`, `fill_all_hap`).
- **`tetrageno.linkage`** – read-linkage based pruning of state
  combinations, Viterbi imputation of partially covered reads and
  restriction of transition indicators (`best_branch`, `filter_combination`,
  `FilterResult`, `prepare_ini_hmm`).
- **`tetrageno.initialization`** – initial haplotypes, either built from
  chosen reads (`sample_hap`) or drawn at random over the variable sites
  (`sample_hap2`, which takes an optional `numpy.random.Generator`).
- **`tetrageno.options`** – the preprocessing options and their argument
  parser (`Options`, `parse_options`, `CommandLineError`, `format_usage`).

The only runtime dependency is NumPy; Python 3.10 or later is required.

## Nucleotide codes

```python
from tetrageno.nuc import Encoding, char_to_iupac, char_to_xy, format_nuc_sequence

char_to_iupac("R")   # 5: A or G
char_to_xy("t")      # 2
codes = [char_to_iupac(c) for c in "ACGTN"]
format_nuc_sequence(codes, Encoding.IUPAC)   # "ACGTN"
```

Characters that are not nucleotides give `XY_NON_NUCLEOTIDE` (128) from
`char_to_xy` and `IUPAC_X` (0) from `char_to_iupac`. `char_to_data` and the
formatting functions accept only `Encoding.XY` and `Encoding.IUPAC` and raise
`ValueError` otherwise. `reverse_complement_iupac` and
`reverse_complement_xy` return the reverse complement: the sequence reversed,
with every code replaced by the code of its complementary base.

## Messages

```python
import sys
from tetrageno.errors import ErrorCode, MessageType, message

message(sys.stderr, MessageType.ERROR_MSG, ErrorCode.FILE_OPEN_ERROR, "reads.sam",
        file_name="pipeline.py", fxn_name="load", line=42)
# ERROR [pipeline.py::load(  42)]: could not open file "reads.sam"
```

`message` returns the error code it was given. When `file_name`, `fxn_name`
or `line` is left out, the caller's location is used. `format_message` builds
the same text without writing it. `debug_msg` writes only when its condition
holds or its level is at most the level set by `set_debug_level`, and returns
whether it wrote. `check_time` returns the seconds elapsed since a start time
and, past a nonzero limit, reports "out of time" and raises `TimeoutError`.

## Hessian of a multinomial logit model

`compute_hessian` takes a `ModelSize` (numbers of observations `n`, choices
`k`, and variables `p`, `f`, `d`), the design arrays `x` of shape `(n, p)`,
`y` of shape `(k, n, f)` and `z` of shape `(n, k - 1, d)`, optional frequency
weights of shape `(n,)`, the probabilities of the non-base choices of shape
`(n, k - 1)` and those of the base choice of shape `(n,)`. It returns the
symmetric `nparams × nparams` Hessian as a NumPy array. Parameters are ordered
as individual-specific coefficients first, then choice-specific coefficients
(base choice first), then generic coefficients. Arrays of the wrong shape
raise `ValueError`.

## Options

`parse_options` reads an argument list (program name first, `sys.argv` when
none is given) into an `Options` instance, reporting each setting on stderr.
It raises `CommandLineError` for an unknown option or a missing or invalid
argument; `-h` writes the usage to stderr and raises `SystemExit(0)`.
`format_usage` returns the usage text.

## What the package does not do

The package has no command to run and no complete pipeline. It does not read
or write SAM, BAM, FASTA or FASTQ files, does not merge alignments to two
subgenomes into a universal alignment, and does not fit the error model or
the hidden Markov model; `parse_options` only collects the settings such a
step would use.

## Running the tests

The test suite uses pytest, available through the `test` extra:

```
pip install -e .[test]
pytest
```