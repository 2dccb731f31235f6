"""Particle swarm optimization heuristic for MAXSAT."""

from pso_maxsat.clauses import ClauseSet, MalformedInputError, evaluate_fitness
from pso_maxsat.config import PSOParams, ConfigurationError
from pso_maxsat.core import Swarm, SwarmResult, pso_run
from pso_maxsat.loader import load_problem
from pso_maxsat.particle import Particle
from pso_maxsat.topologies import build_topology

__version__ = "0.1.0"
