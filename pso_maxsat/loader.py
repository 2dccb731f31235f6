import re
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np

from pso_maxsat.clauses import ClauseSet, MalformedInputError

# Benchmark files may encode their size in the name, e.g. "v20-c91.cnf".
_NAME_PATTERN = re.compile(r"^\D*(\d+)-c(\d+)")


def parse_problem_name(filepath: str) -> Optional[Tuple[int, int]]:
    """Return (variables, clauses) encoded in a file name like `v20-c91.cnf`, or None."""
    m = _NAME_PATTERN.match(Path(filepath).stem)
    if m is None:
        return None
    return int(m.group(1)), int(m.group(2))


def _parse_header(line: str) -> Optional[Tuple[int, int]]:
    parts = line.split()
    if len(parts) >= 4 and parts[1] in ("cnf", "wcnf"):
        try:
            return int(parts[2]), int(parts[3])
        except ValueError:
            return None
    return None


def read_literals(filepath: str) -> Tuple[List[int], Optional[Tuple[int, int]]]:
    """
    Read the literal stream of a DIMACS-like MAXSAT file.

    Format:
    - Lines starting with `c`: comments
    - Line starting with `p`: header (`p cnf <variables> <clauses>`), skipped
    - Line starting with `%`: end of clause data (SATLIB convention)
    - Other lines: whitespace-separated signed integers, clauses end with 0

    Returns the literals (terminators included) and the header counts if present.
    """
    path = Path(filepath)
    try:
        with path.open('r') as f:
            lines = f.readlines()
    except FileNotFoundError as exc:
        raise MalformedInputError(f"Problem file not found: {filepath}") from exc
    except OSError as exc:
        raise MalformedInputError(f"Could not read problem file {filepath}: {exc}") from exc

    literals: List[int] = []
    header = None
    for lineno, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith('c'):
            continue
        if line.startswith('%'):
            break
        if line.startswith('p'):
            header = _parse_header(line)
            continue

        for tok in line.split():
            try:
                literals.append(int(tok))
            except ValueError as exc:
                raise MalformedInputError(
                    f"{path.name}:{lineno}: unparseable clause token {tok!r}"
                ) from exc

    return literals, header


def load_problem(filepath: str,
                 variables: Optional[int] = None,
                 clauses: Optional[int] = None) -> ClauseSet:
    """
    Load a MAXSAT instance from disk.

    Variable and clause counts are taken from the explicit arguments first,
    then the `p` header, then the file name, and finally inferred from the data.
    """
    literals, header = read_literals(filepath)
    if not literals:
        raise MalformedInputError(f"No clauses found in {filepath}")

    declared = header or parse_problem_name(filepath)
    if declared is not None:
        if variables is None:
            variables = declared[0]
        if clauses is None:
            clauses = declared[1]

    try:
        return ClauseSet(np.array(literals, dtype=np.int64), variables=variables, clause_count=clauses)
    except MalformedInputError as exc:
        raise MalformedInputError(f"{Path(filepath).name}: {exc}") from exc
