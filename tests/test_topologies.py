from types import SimpleNamespace

import numpy as np
import pytest

from pso_maxsat.config import ConfigurationError
from pso_maxsat.topologies import (
    assign_neighbors, build_topology, global_best_neighbors, random_neighbors,
    ring_neighbors, validate_topology, von_neumann_neighbors,
)


def test_global_sees_everyone():
    nb = global_best_neighbors(5)
    assert nb == [[0, 1, 2, 3, 4]] * 5


@pytest.mark.parametrize("n", [3, 4, 10])
def test_ring_two_neighbors_plus_self(n):
    nb = ring_neighbors(n)
    for i, members in enumerate(nb):
        assert i in members
        others = set(members) - {i}
        assert len(others) == 2
        assert others == {(i - 1) % n, (i + 1) % n}
    assert {n - 1, 1} <= set(nb[0])


def test_ring_too_small():
    with pytest.raises(ConfigurationError):
        ring_neighbors(1)


def test_von_neumann_4x4():
    nb = von_neumann_neighbors(16)
    for i, members in enumerate(nb):
        assert len(members) == 5
        assert members[-1] == i
        assert len(set(members) - {i}) == 4
    # corners wrap in both directions: [up, down, left, right, self]
    assert nb[0] == [12, 4, 3, 1, 0]
    assert nb[3] == [15, 7, 2, 0, 3]
    assert nb[12] == [8, 0, 15, 13, 12]
    assert nb[15] == [11, 3, 14, 12, 15]


def test_von_neumann_edge_keeps_column():
    nb = von_neumann_neighbors(16)
    # top edge, column 2: wraps to the bottom of the same column
    assert nb[2][0] == 14


def test_von_neumann_5x6():
    nb = von_neumann_neighbors(30)
    assert nb[0] == [24, 6, 5, 1, 0]
    assert nb[29] == [23, 5, 28, 24, 29]


@pytest.mark.parametrize("n", [1, 20, 36])
def test_von_neumann_unsupported_size(n):
    with pytest.raises(ConfigurationError):
        von_neumann_neighbors(n)


def test_random_neighborhoods_have_five_distinct_members(rng):
    nb = random_neighbors(10, rng)
    for i, members in enumerate(nb):
        assert len(members) == 5
        assert len(set(members)) == 5
        assert members[0] == i
        assert all(0 <= j < 10 for j in members)


def test_random_is_seeded():
    a = random_neighbors(12, np.random.default_rng(3))
    b = random_neighbors(12, np.random.default_rng(3))
    assert a == b


def test_random_neighborhoods_stay_distinct_over_many_builds():
    gen = np.random.default_rng(0)
    for _ in range(200):
        for members in random_neighbors(16, gen):
            assert len(set(members)) == 5


def test_random_smallest_swarm_uses_everyone(rng):
    nb = random_neighbors(5, rng)
    for i, members in enumerate(nb):
        assert members[0] == i
        assert sorted(members) == [0, 1, 2, 3, 4]


@pytest.mark.parametrize("n", [1, 2, 4])
def test_random_too_small(rng, n):
    with pytest.raises(ConfigurationError):
        random_neighbors(n, rng)


@pytest.mark.parametrize("code,expected", [("gl", 16), ("ri", 3), ("vn", 5), ("ra", 5)])
def test_short_codes(code, expected, rng):
    nb = build_topology(code, 16, rng)
    assert len(nb) == 16
    assert len(nb[0]) == expected


def test_unknown_topology(rng):
    with pytest.raises(ConfigurationError, match="Unknown topology"):
        build_topology("star", 16, rng)


def test_random_requires_rng():
    with pytest.raises(ConfigurationError):
        build_topology("random", 8)


def test_validate_topology():
    assert validate_topology("VN", 49) == "von_neumann"
    with pytest.raises(ConfigurationError):
        validate_topology("vn", 25)
    with pytest.raises(ConfigurationError):
        validate_topology("ring", 1)
    assert validate_topology("ra", 5) == "random"
    with pytest.raises(ConfigurationError):
        validate_topology("ra", 4)


def test_assign_neighbors_sets_lists():
    particles = [SimpleNamespace(neighbors=[]) for _ in range(4)]
    assign_neighbors(particles, "ring")
    assert particles[0].neighbors == [3, 1, 0]
    assert particles[3].neighbors == [2, 0, 3]
