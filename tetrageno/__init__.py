"""Building blocks for genotyping allotetraploids from sequencing reads."""

__version__ = "0.1.0"

__all__ = [
    "errors",
    "hessian",
    "hmm_state",
    "initialization",
    "io",
    "linkage",
    "mnlogit",
    "nuc",
    "options",
]