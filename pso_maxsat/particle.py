"""Particle component: a probability vector evolved by the PSO velocity rule.

Each particle holds, per boolean variable, the probability of assigning it
True. A velocity update moves that vector freely; the result is mapped back
into [0, 1] by min-max normalization against every value seen so far for the
same variable. Fitness is the percentage of clauses satisfied by an assignment
sampled from the probabilities.

Neighbours are stored as indices into the swarm's particle list, which is
passed in when a neighbourhood best is needed.
"""

from __future__ import annotations

from typing import List, Sequence, Union

import numpy as np

from pso_maxsat.clauses import ClauseSet, evaluate_fitness
from pso_maxsat.constants import PHI1, PHI2, CONSTRICTION_FACTOR, VELOCITY_LOW, VELOCITY_HIGH


class Particle:
    """
    One member of the swarm.

    `personal_best` is the probability vector recorded at this particle's best
    fitness. With `legacy_pbest=True` the vector is left untouched on
    improvement (only the fitness moves), reproducing the reference runs.
    """

    def __init__(self, clauses: ClauseSet, rng: np.random.Generator, legacy_pbest: bool = False):
        self.clauses = clauses
        self.rng = rng
        self.legacy_pbest = bool(legacy_pbest)
        n = clauses.variables

        self.probability = rng.random(n)
        self.personal_best = self.probability.copy()
        self.velocity = rng.integers(VELOCITY_LOW, VELOCITY_HIGH, size=n).astype(float)

        # running bounds start at the initial value
        self.min_seen = self.probability.copy()
        self.max_seen = self.probability.copy()

        self.neighbors: List[int] = []
        self.assignment = np.zeros(n, dtype=bool)

        self.fitness = self.evaluate()
        self.personal_best_fitness = self.fitness

    @property
    def dimensions(self) -> int:
        return self.probability.size

    def evaluate(self) -> float:
        """Sample a fresh assignment from `probability` and score it."""
        self.assignment = self.rng.random(self.dimensions) <= self.probability
        return evaluate_fitness(self.assignment, self.clauses)

    def best_neighbor(self, swarm: Sequence["Particle"]) -> "Particle":
        """Neighbour (self included) with the highest personal-best fitness; first one wins ties."""
        if not self.neighbors:
            raise RuntimeError("Particle has no neighbours; assign a topology before updating.")
        scores = [swarm[j].personal_best_fitness for j in self.neighbors]
        return swarm[self.neighbors[int(np.argmax(scores))]]

    def best_neighbor_fitness(self, swarm: Sequence["Particle"]) -> float:
        return self.best_neighbor(swarm).personal_best_fitness

    def update(self, swarm: Sequence["Particle"]) -> float:
        """
        Advance velocity and probability by one PSO step, re-evaluate fitness
        and refresh the personal best. Returns the new fitness.
        """
        n = self.dimensions
        nbest = self.best_neighbor(swarm).personal_best

        r1 = self.rng.random(n)
        r2 = self.rng.random(n)
        p_attract = (self.personal_best - self.probability) * r1 * PHI1
        n_attract = (nbest - self.probability) * r2 * PHI2
        self.velocity = (self.velocity + p_attract + n_attract) * CONSTRICTION_FACTOR

        new_prob = self.probability + self.velocity
        negative = new_prob < 0
        if negative.any():
            # negative positions pin the lower bound at 0; max_seen grows by |0|
            self.min_seen[negative] = 0.0
            new_prob[negative] = 0.0
            self.max_seen[negative] += np.abs(new_prob[negative])

        rest = np.flatnonzero(~negative)
        new_prob[rest] = self.normalize(rest, new_prob[rest])
        self.probability = new_prob

        self.fitness = self.evaluate()
        if self.fitness > self.personal_best_fitness:
            self.personal_best_fitness = self.fitness
            if not self.legacy_pbest:
                self.personal_best = self.probability.copy()
        return self.fitness

    def normalize(self, i: Union[int, np.ndarray], cur: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        """
        Widen the running bounds of dimension(s) `i` with `cur` and return
        `(cur - min) / (max - min)`, or 0 where either term is 0.
        """
        self.min_seen[i] = np.minimum(self.min_seen[i], cur)
        self.max_seen[i] = np.maximum(self.max_seen[i], cur)

        numerator = np.asarray(cur - self.min_seen[i], dtype=float)
        denom = np.asarray(self.max_seen[i] - self.min_seen[i], dtype=float)
        safe = (numerator != 0) & (denom != 0)
        out = np.divide(numerator, denom, out=np.zeros_like(numerator), where=safe)
        if out.ndim == 0:
            return float(out)
        return out

    def __repr__(self):
        return (f"Particle(dimensions={self.dimensions}, fitness={self.fitness:.2f}, "
                f"personal_best_fitness={self.personal_best_fitness:.2f}, neighbors={self.neighbors})")
