from typing import List, Optional, Sequence

import numpy as np

from pso_maxsat.config import ConfigurationError, canonical_topology
from pso_maxsat.constants import (
    GLOBAL, RING, VON_NEUMANN, RANDOM,
    GRID_SHAPES, RANDOM_NEIGHBORHOOD_SIZE, RANDOM_REDRAW_PROB,
)

"""
Neighbourhood construction for the swarm.

Every builder returns one list of particle indices per particle. Lists are
ordered: the neighbourhood-best lookup keeps the first of several equally
good neighbours, so order is part of the result. Each particle appears in its
own neighbourhood.
"""


def global_best_neighbors(n_particles: int) -> List[List[int]]:
    """
    Fully-connected neighbourhood for gbest PSO.
    """
    if n_particles <= 0:
        raise ConfigurationError("n_particles must be positive.")
    return [list(range(n_particles)) for _ in range(n_particles)]


def ring_neighbors(n_particles: int) -> List[List[int]]:
    """
    Ring neighbourhood (lbest PSO).

    Particle i sees [i-1, i+1, i] with indices wrapping modulo n.
    For n=2 both sides are the same particle.
    """
    if n_particles < 2:
        raise ConfigurationError("n_particles must be >= 2 for a ring topology.")
    return [[(i - 1) % n_particles, (i + 1) % n_particles, i] for i in range(n_particles)]


def von_neumann_neighbors(n_particles: int) -> List[List[int]]:
    """
    Von Neumann neighbourhood on a wrapping 2D grid.

    Parameters
    ----------
    n_particles : int
        Swarm size; must be one of the keys of GRID_SHAPES (16, 30, 49).

    Returns
    -------
    nb : list of lists
        nb[i] = [up, down, left, right, i] for particle i laid out row-major.
    """
    if n_particles not in GRID_SHAPES:
        sizes = ", ".join(str(k) for k in sorted(GRID_SHAPES))
        raise ConfigurationError(
            f"Von Neumann topology supports swarm sizes {sizes}; got {n_particles}."
        )
    rows, cols = GRID_SHAPES[n_particles]

    nb = []
    for i in range(n_particles):
        r, c = divmod(i, cols)
        up = ((r - 1) % rows) * cols + c
        down = ((r + 1) % rows) * cols + c
        left = r * cols + (c - 1) % cols
        right = r * cols + (c + 1) % cols
        nb.append([up, down, left, right, i])
    return nb


def random_neighbors(n_particles: int, rng: np.random.Generator) -> List[List[int]]:
    """
    Random neighbourhoods of RANDOM_NEIGHBORHOOD_SIZE distinct particles.

    Each list starts with the particle itself. Every further draw picks a
    uniform index; when that index is already present, or an independent draw
    falls below RANDOM_REDRAW_PROB, the index is redrawn from
    [0, n_particles - 1). A redrawn index that is still present is dropped
    and the next round starts over from the full range. Membership is not
    symmetric.
    """
    if n_particles < RANDOM_NEIGHBORHOOD_SIZE:
        raise ConfigurationError(
            f"n_particles must be >= {RANDOM_NEIGHBORHOOD_SIZE} for a random topology."
        )

    nb = []
    for i in range(n_particles):
        members = [i]
        while len(members) < RANDOM_NEIGHBORHOOD_SIZE:
            num = int(rng.integers(n_particles))
            probability = rng.random()
            if num in members or probability < RANDOM_REDRAW_PROB:
                num = int(rng.integers(n_particles - 1))
            if num in members:
                continue
            members.append(num)
        nb.append(members)
    return nb


def build_topology(name: str, n_particles: int, rng: Optional[np.random.Generator] = None) -> List[List[int]]:
    """Dispatch to the builder for `name` (canonical name or short code)."""
    topo = canonical_topology(name)
    if topo == GLOBAL:
        return global_best_neighbors(n_particles)
    if topo == RING:
        return ring_neighbors(n_particles)
    if topo == VON_NEUMANN:
        return von_neumann_neighbors(n_particles)
    if topo == RANDOM:
        if rng is None:
            raise ConfigurationError("Random topology requires an rng.")
        return random_neighbors(n_particles, rng)
    raise ConfigurationError(f"Unknown topology: {name}")


def validate_topology(name: str, n_particles: int) -> str:
    """Check that `name` can be built for `n_particles` without building it."""
    topo = canonical_topology(name)
    if n_particles <= 0:
        raise ConfigurationError("n_particles must be positive.")
    if topo == RING and n_particles < 2:
        raise ConfigurationError("n_particles must be >= 2 for a ring topology.")
    if topo == RANDOM and n_particles < RANDOM_NEIGHBORHOOD_SIZE:
        raise ConfigurationError(
            f"n_particles must be >= {RANDOM_NEIGHBORHOOD_SIZE} for a random topology."
        )
    if topo == VON_NEUMANN and n_particles not in GRID_SHAPES:
        sizes = ", ".join(str(k) for k in sorted(GRID_SHAPES))
        raise ConfigurationError(
            f"Von Neumann topology supports swarm sizes {sizes}; got {n_particles}."
        )
    return topo


def assign_neighbors(particles: Sequence, name: str, rng: Optional[np.random.Generator] = None) -> List[List[int]]:
    """Build the topology for `particles` and store each index list on its particle."""
    nb = build_topology(name, len(particles), rng)
    for particle, members in zip(particles, nb):
        particle.neighbors = list(members)
    return nb
