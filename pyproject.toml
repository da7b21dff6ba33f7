[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tetrageno"
version = "0.1.0"
description = "Building blocks for genotyping allotetraploids from sequencing reads: nucleotide encodings, multinomial logit Hessians, HMM hidden states and read linkage."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "bioinformatics",
    "genotyping",
    "polyploid",
    "tetraploid",
    "haplotype",
    "hidden markov model",
    "multinomial logit",
    "iupac",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["tetrageno"]

[tool.hatch.build.targets.sdist]
include = [
    "tetrageno",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
