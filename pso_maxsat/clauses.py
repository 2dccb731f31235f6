"""Clause model and fitness evaluation for MAXSAT instances.

A formula is stored the way it appears in a DIMACS file: one flat stream of
signed literals where every clause ends with a ``0`` terminator. The stream is
parsed once and then shared read-only by every particle in the swarm.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence, Tuple

import numpy as np


class MalformedInputError(ValueError):
    """Raised when problem data cannot form a valid clause set."""


@dataclass(frozen=True, eq=False)
class ClauseSet:
    """Immutable zero-terminated literal stream plus its clause count."""

    literals: np.ndarray
    variables: Optional[int] = None
    clause_count: Optional[int] = None

    # Precomputed per-literal lookups used by evaluate_fitness.
    _var_index: np.ndarray = field(init=False, repr=False)
    _positive: np.ndarray = field(init=False, repr=False)
    _clause_id: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        try:
            lits = np.array(self.literals, dtype=np.int64).ravel()
        except (TypeError, ValueError) as exc:
            raise MalformedInputError(f"Literals must be integers: {exc}") from exc

        terminators = lits == 0
        n_clauses = int(np.count_nonzero(terminators))
        if n_clauses == 0:
            raise MalformedInputError("Clause set is empty; at least one 0-terminated clause is required.")
        if not terminators[-1]:
            raise MalformedInputError("Last clause is not terminated by 0.")
        if self.clause_count is not None and int(self.clause_count) != n_clauses:
            raise MalformedInputError(
                f"Declared clause count {self.clause_count} does not match the {n_clauses} terminated clauses."
            )

        nonzero = ~terminators
        max_var = int(np.abs(lits[nonzero]).max()) if nonzero.any() else 0
        variables = max_var if self.variables is None else int(self.variables)
        if variables < max_var:
            raise MalformedInputError(
                f"Literal references variable {max_var} but only {variables} variables are declared."
            )
        if variables <= 0:
            raise MalformedInputError("Clause set must reference at least one variable.")

        # clause index of each literal = number of terminators strictly before it
        clause_of = np.cumsum(terminators) - terminators
        lits.setflags(write=False)

        object.__setattr__(self, 'literals', lits)
        object.__setattr__(self, 'variables', variables)
        object.__setattr__(self, 'clause_count', n_clauses)
        object.__setattr__(self, '_var_index', np.abs(lits[nonzero]) - 1)
        object.__setattr__(self, '_positive', lits[nonzero] > 0)
        object.__setattr__(self, '_clause_id', clause_of[nonzero])

    @classmethod
    def from_clauses(cls, clauses: Sequence[Sequence[int]], variables: Optional[int] = None) -> "ClauseSet":
        """Build from a list of clauses; a trailing 0 on a clause is optional."""
        stream = []
        for clause in clauses:
            body = [int(v) for v in clause]
            if body and body[-1] == 0:
                body = body[:-1]
            if 0 in body:
                raise MalformedInputError(f"Clause {list(clause)} contains a 0 before its end.")
            stream.extend(body)
            stream.append(0)
        return cls(np.array(stream, dtype=np.int64), variables=variables)

    def clauses(self) -> Iterator[Tuple[int, ...]]:
        """Yield each clause as a tuple of its literals (terminator excluded)."""
        current = []
        for lit in self.literals.tolist():
            if lit == 0:
                yield tuple(current)
                current = []
            else:
                current.append(lit)

    def __repr__(self) -> str:
        return f"ClauseSet(variables={self.variables}, clause_count={self.clause_count}, n_literals={self.literals.size - self.clause_count})"


def evaluate_fitness(assignment: Sequence[bool], clauses: ClauseSet) -> float:
    """
    Percentage of clauses satisfied by `assignment`.

    A positive literal ``v`` is satisfied when ``assignment[v-1]`` is True, a
    negative literal ``-v`` when ``assignment[v-1]`` is False. A clause with no
    literals is never satisfied. Returns a value in [0, 100].
    """
    a = np.asarray(assignment, dtype=bool)
    if a.shape != (clauses.variables,):
        raise ValueError(f"Assignment has shape {a.shape}; expected ({clauses.variables},).")

    lit_sat = (a[clauses._var_index] == clauses._positive).astype(np.float64)
    hits = np.bincount(clauses._clause_id, weights=lit_sat, minlength=clauses.clause_count)
    num_satisfied = int(np.count_nonzero(hits))
    return 100.0 * num_satisfied / clauses.clause_count
