"""Particle swarm optimizer for MAXSAT.

This module orchestrates one PSO run:
- validates the run settings and the neighbourhood topology up front
- creates the particles, all sharing one clause set and one RNG
- wires neighbourhoods once, before the loop
- updates every particle in list order for a fixed number of iterations
- records the best neighbourhood fitness of each iteration

The main entry points are the Swarm class and `pso_run`.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np

from pso_maxsat.clauses import ClauseSet
from pso_maxsat.config import PSOParams, ConfigurationError, require_params
from pso_maxsat.particle import Particle
from pso_maxsat.run_logger import RunLogger
from pso_maxsat.topologies import assign_neighbors, validate_topology


@dataclass(frozen=True)
class SwarmResult:
    best_fitness: float
    best_per_iteration: np.ndarray
    iterations: int
    evals_used: int
    best_probability: np.ndarray
    topology: str
    swarm_size: int


class Swarm:
    """Fixed-size swarm of particles with a static neighbourhood topology."""

    def __init__(self,
                 clauses: ClauseSet,
                 params: PSOParams,
                 rng: Optional[np.random.Generator] = None):
        if not isinstance(clauses, ClauseSet):
            raise TypeError("clauses must be a ClauseSet")
        self.params = require_params(params)
        # fail before any particle exists
        self.topology = validate_topology(self.params.topology, self.params.swarm_size)

        self.clauses = clauses
        self.rng = rng if rng is not None else np.random.default_rng(self.params.seed)
        legacy = bool(self.params.legacy_pbest)

        self.particles: List[Particle] = [
            Particle(clauses, self.rng, legacy_pbest=legacy)
            for _ in range(self.params.swarm_size)
        ]
        assign_neighbors(self.particles, self.topology, self.rng)

        self.best_per_iteration: List[float] = []

    @property
    def size(self) -> int:
        return len(self.particles)

    def neighborhood_bests(self) -> List[float]:
        """Current best-neighbour fitness of every particle, in list order."""
        return [p.best_neighbor_fitness(self.particles) for p in self.particles]

    def step(self) -> float:
        """
        One asynchronous iteration: each particle updates in order and reads
        whatever neighbour bests exist at that moment. Returns the iteration best.
        """
        nbest_values = []
        for particle in self.particles:
            particle.update(self.particles)
            nbest_values.append(particle.best_neighbor_fitness(self.particles))
        best = max(nbest_values)
        self.best_per_iteration.append(best)
        return best

    def best_particle(self) -> Particle:
        scores = [p.personal_best_fitness for p in self.particles]
        return self.particles[int(np.argmax(scores))]

    def run(self,
            iterations: Optional[int] = None,
            logger: Optional[RunLogger] = None,
            logger_metadata: Optional[Dict[str, Any]] = None,
            verbose: bool = False) -> SwarmResult:
        """Run the fixed iteration budget and return the collected result."""
        n_iter = self.params.iters if iterations is None else iterations
        if not isinstance(n_iter, int) or n_iter < 0:
            raise ConfigurationError("iterations must be a non-negative int.")
        log_every = self.params.log_every if self.params.log_every is not None else 100

        if logger is not None:
            metadata = {
                "topology": self.topology,
                "swarm_size": self.size,
                "variables": self.clauses.variables,
                "clauses": self.clauses.clause_count,
                "iterations": n_iter,
                "seed": self.params.seed,
            }
            if logger_metadata:
                metadata.update(logger_metadata)
            logger.update_metadata(**metadata)

        start_time = time.time()
        for iteration in range(n_iter):
            best = self.step()

            if verbose and log_every > 0 and (iteration + 1) % log_every == 0:
                print(f"Iter {iteration + 1}/{n_iter}: best {best:.2f}% of clauses satisfied")

            if logger is not None:
                logger.log_iteration(
                    iteration=iteration + 1,
                    best_fitness=best,
                    mean_personal_best=float(np.mean([p.personal_best_fitness for p in self.particles])),
                    runtime_ms=(time.time() - start_time) * 1000,
                )

        if n_iter > 0:
            best_fitness = self.best_per_iteration[-1]
            curve = np.array(self.best_per_iteration[-n_iter:], dtype=float)
        else:
            # loop never ran: report the initial personal bests
            best_fitness = max(self.neighborhood_bests())
            curve = np.empty(0, dtype=float)

        return SwarmResult(
            best_fitness=float(best_fitness),
            best_per_iteration=curve,
            iterations=n_iter,
            evals_used=self.size * (1 + n_iter),
            best_probability=self.best_particle().personal_best.copy(),
            topology=self.topology,
            swarm_size=self.size,
        )


def pso_run(clauses: ClauseSet,
            params: PSOParams,
            rng: Optional[np.random.Generator] = None,
            logger: Optional[RunLogger] = None,
            logger_metadata: Optional[Dict[str, Any]] = None,
            verbose: bool = False) -> SwarmResult:
    """Build a swarm for `clauses` and run one PSO trial."""
    swarm = Swarm(clauses, params, rng=rng)
    return swarm.run(logger=logger, logger_metadata=logger_metadata, verbose=verbose)
