"""Constants and presets for the PSO MAXSAT solver."""


# ============= PSO Coefficients =============
# PHI1 / PHI2: acceleration towards the personal best and the neighbourhood best.
# CONSTRICTION_FACTOR: Clerc-Kennedy damping applied to the new velocity.
# These are fixed tuning parameters, not run configuration.
PHI1 = 2.05
PHI2 = 2.05
CONSTRICTION_FACTOR = 0.7298

# Initial velocities are drawn from the integers in [VELOCITY_LOW, VELOCITY_HIGH).
VELOCITY_LOW = -2
VELOCITY_HIGH = 4


# ============= Topology Settings =============
GLOBAL = 'global'
RING = 'ring'
VON_NEUMANN = 'von_neumann'
RANDOM = 'random'

TOPOLOGIES = (GLOBAL, RING, VON_NEUMANN, RANDOM)

# Accepted spellings, including the two-letter command-line codes.
TOPOLOGY_ALIASES = {
    'global': GLOBAL,
    'gl': GLOBAL,
    'gbest': GLOBAL,
    'ring': RING,
    'ri': RING,
    'von_neumann': VON_NEUMANN,
    'von-neumann': VON_NEUMANN,
    'vonneumann': VON_NEUMANN,
    'vn': VON_NEUMANN,
    'random': RANDOM,
    'ra': RANDOM,
}

# Von Neumann grid (rows, cols) per supported swarm size.
GRID_SHAPES = {
    16: (4, 4),
    30: (5, 6),
    49: (7, 7),
}

# Random neighbourhoods hold this many entries, the particle itself included.
RANDOM_NEIGHBORHOOD_SIZE = 5
# A draw below this probability forces a redraw from the narrower index range.
RANDOM_REDRAW_PROB = 0.2


# ============= Presets =============

# Quick smoke test: small swarm, short budget.
QUICK_TEST = {
    'swarm_size': 16,
    'iters': 200,
    'topology': GLOBAL,
}

# Default preset: mid-sized swarm that also fits the 5x6 von Neumann grid.
BASELINE = {
    'swarm_size': 30,
    'iters': 1000,
    'topology': GLOBAL,
}

# Long run on the 7x7 grid size.
STRONG = {
    'swarm_size': 49,
    'iters': 5000,
    'topology': GLOBAL,
}

PRESETS = {
    'quick': QUICK_TEST,
    'baseline': BASELINE,
    'strong': STRONG,
}
