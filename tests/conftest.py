from pathlib import Path

import numpy as np
import pytest

from pso_maxsat.clauses import ClauseSet

DATA_DIR = Path(__file__).resolve().parents[1] / "data"


@pytest.fixture
def rng():
    return np.random.default_rng(2024)


@pytest.fixture
def two_clauses():
    # (x1 or not x2) and (x2 or x3)
    return ClauseSet.from_clauses([[1, -2, 0], [2, 3, 0]], variables=3)


@pytest.fixture
def sample_problem():
    return DATA_DIR / "v10-c20.cnf"


@pytest.fixture
def random_3sat():
    gen = np.random.default_rng(7)
    clauses = []
    for _ in range(40):
        vars_ = gen.choice(12, size=3, replace=False) + 1
        signs = gen.choice([-1, 1], size=3)
        clauses.append([int(v) for v in vars_ * signs])
    return ClauseSet.from_clauses(clauses, variables=12)
