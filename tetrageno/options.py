"""Command-line options of the alignment preprocessing step."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass, field
from typing import List, Optional, TextIO, Union

from tetrageno.errors import ErrorCode, MessageType, message

N_FILES = 2
_DEFAULT_CMDNAME = "make_aln"

Number = Union[int, float]


def _file_slots() -> List[Optional[str]]:
    return [None] * N_FILES


@dataclass
class Options:
    """Settings chosen on the command line; unlimited bounds are infinite."""

    drop_unmapped: bool = True
    drop_secondary: bool = True
    display_alignment: bool = False
    drop_soft_clipped: Number = math.inf
    drop_indel: Number = math.inf
    min_length: int = 0
    max_length: Number = math.inf
    max_eerr: float = math.inf
    n_sample: int = 100
    out_file: Optional[str] = None
    uni_geno_file: Optional[str] = None
    error_file: Optional[TextIO] = None
    use_bam: bool = False
    sbam_files: List[Optional[str]] = field(default_factory=_file_slots)
    fsa_files: List[Optional[str]] = field(default_factory=_file_slots)
    ref_names: List[Optional[str]] = field(default_factory=_file_slots)
    sam_file: Optional[str] = None
    uni_genome: Optional[str] = None
    selected_fq: Optional[str] = None


class CommandLineError(ValueError):
    """An invalid command line; ``code`` and ``index`` locate the problem."""

    def __init__(self, text: str, code: ErrorCode = ErrorCode.INVALID_CMD_ARGUMENT,
                 index: Optional[int] = None) -> None:
        super().__init__(text)
        self.code = code
        self.index = index


def _info(text: str) -> None:
    message(None, MessageType.INFO_MSG, ErrorCode.NO_ERROR, "%s", text)


def _take(args: List[str], i: int, count: int, option: str) -> List[str]:
    if i + count >= len(args):
        raise CommandLineError(
            f"Too few arguments to --{option} command-line option.",
            ErrorCode.INVALID_CMD_ARGUMENT, i)
    return args[i + 1:i + 1 + count]


def _read_int(args: List[str], i: int, option: str, unsigned: bool) -> int:
    (text,) = _take(args, i, 1, option)
    try:
        value = int(text)
    except ValueError:
        raise CommandLineError(f"--{option} needs an integer, got {text!r}",
                               ErrorCode.INVALID_CMD_ARGUMENT, i + 1) from None
    if unsigned and value < 0:
        raise CommandLineError(f"--{option} needs a non-negative integer",
                               ErrorCode.INVALID_CMD_ARGUMENT, i + 1)
    return value


def parse_options(argv=None) -> Options:
    """Parse a full argument vector (program name first) into Options.

    Raises CommandLineError for an invalid command line; ``-h`` writes
    the usage to stderr and raises SystemExit(0).
    """
    args = list(sys.argv if argv is None else argv)
    cmdname = args[0] if args else _DEFAULT_CMDNAME
    opt = Options()
    i = 1
    while i < len(args):
        arg = args[i]
        if len(arg) < 2:
            raise CommandLineError(f"unrecognized argument {arg!r}",
                                   ErrorCode.INVALID_CMD_OPTION, i)
        j = 1
        while arg[j] == "-" and j + 1 < len(arg):
            j += 1
        key, name = arg[j], arg[j:]

        if key == "b":
            if not name.startswith("bam"):
                raise CommandLineError(f"invalid option {arg!r}",
                                       ErrorCode.INVALID_CMD_ARGUMENT, i)
            files = _take(args, i, N_FILES, "bam_files")
            opt.use_bam = True
            opt.sbam_files = files
            _info("BAM files: " + " ".join(files) + "\n")
            i += N_FILES
        elif key == "f":
            opt.fsa_files = _take(args, i, N_FILES, "fsa_files")
            _info("Fasta files: " + " ".join(opt.fsa_files) + "\n")
            i += N_FILES
        elif key == "g":
            (opt.sam_file,) = _take(args, i, 1, "g")
            _info(f"Sam file of aligned targets: {opt.sam_file}\n")
            i += 1
        elif key == "o":
            (opt.out_file,) = _take(args, i, 1, "o")
            _info(f"Output file: {opt.out_file}\n")
            i += 1
        elif key == "q":
            (opt.selected_fq,) = _take(args, i, 1, "q")
            _info(f"Selected reads file: {opt.selected_fq}\n")
            i += 1
        elif key == "n":
            (opt.uni_geno_file,) = _take(args, i, 1, "n")
            _info(f"Uni genome file: {opt.uni_geno_file}\n")
            i += 1
        elif key == "h":
            sys.stderr.write(format_usage(cmdname))
            raise SystemExit(0)
        elif key == "j":
            (opt.uni_genome,) = _take(args, i, 1, "j")
            _info(f"Fsa file of aligned targets: {opt.uni_genome}\n")
            i += 1
        elif key == "r":
            opt.ref_names = _take(args, i, N_FILES, "ref_names")
            _info("Reference names: " + " ".join(opt.ref_names) + "\n")
            i += N_FILES
        elif key == "s":
            if name.startswith("se"):
                opt.drop_secondary = not opt.drop_secondary
                verb = "Dropping" if opt.drop_secondary else "Keeping"
                _info(f"{verb} secondary alignments\n")
            elif name.startswith("so"):
                opt.drop_soft_clipped = _read_int(args, i, "soft_clip", False)
                _info(f"Dropping reads with soft clip >= {opt.drop_soft_clipped}"
                      " in either alignment.\n")
                i += 1
            elif name.startswith("samp"):
                opt.n_sample = _read_int(args, i, "sample", True)
                _info(f"{opt.n_sample} Monte Carlo samples.\n")
                i += 1
            elif name.startswith("sam"):
                opt.sbam_files = _take(args, i, N_FILES, "sam_files")
                _info("Sam files: " + " ".join(opt.sbam_files) + "\n")
                i += N_FILES
        elif key == "u":
            opt.drop_unmapped = not opt.drop_unmapped
            verb = "Dropping" if opt.drop_unmapped else "Keeping"
            _info(f"{verb} unmapped reads\n")
        else:
            raise CommandLineError(f"unrecognized command option {arg!r}",
                                   ErrorCode.INVALID_CMD_OPTION, i)
        i += 1
    return opt


def format_usage(cmdname: str) -> str:
    """Return the usage text for the command named cmdname."""
    name = cmdname.rsplit("/", 1)[-1]
    return (
        f"{name.upper()}(1)\n"
        f"\nNAME\n\t{name} - genotype tetraploids preprocessing\n"
        f"\nSYNOPSIS\n\t{name} --sam_files <fsam1> <fsam2> --fsa_files "
        "<fsa1> <fsa2> --j <fsat>\n --g <ftsam>\t\n"
        "\nOPTIONS\n"
        "\t--o <outfile> \n\t\tOut file \n"
        "\t--q <selected> \n\t\tSelected reads(fastq) file \n"
        "\t--n <uni_geno> \n\t\tUni_geno file \n"
        "\t--sam_files <fsam1> <fsam2>\n\t\tSpecify sam files "
        "containing alignments (Default: none)\n"
        "\t--ref_names <sref1> <sref2>\n\t\tSpecify names of "
        "subgenomic references for target region; must exist in sam "
        " files (Default: none)\n"
        "\t--g <ftsam>\n\t\tSpecify name of targeted regions sam file\n"
        "\t--j <fsat>\n\t\tSpecify name of targeted regions fsa file\n"
    )