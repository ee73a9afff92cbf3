import numpy as np
import pytest

from swarmdriver.algorithm.components.topology import (
    build_topology,
    ergodic_neighbors,
    ring_neighbors,
    star_neighbors,
)


@pytest.mark.parametrize("builder", [ergodic_neighbors, ring_neighbors, star_neighbors])
@pytest.mark.parametrize("n", [1, 2, 3, 7])
def test_adjacency_is_symmetric_without_self_loops(builder, n):
    nb = builder(n)
    assert nb.shape == (n, n)
    assert np.array_equal(nb, nb.T)
    assert not nb.diagonal().any()


def test_ergodic_links_every_pair():
    topo = build_topology("ergodic", 5)
    assert topo.of(2) == (0, 1, 3, 4)
    assert topo.n_edges() == 10


def test_ring_links_adjacent_indices_mod_n():
    topo = build_topology("ring", 6)
    assert topo.of(0) == (1, 5)
    assert topo.of(3) == (2, 4)
    assert all(topo.degree(i) == 2 for i in range(6))


def test_ring_of_two_links_the_pair_once():
    topo = build_topology("ring", 2)
    assert topo.of(0) == (1,)
    assert topo.of(1) == (0,)


def test_single_particle_has_no_neighbours():
    for name in ("ergodic", "ring", "star"):
        assert build_topology(name, 1).of(0) == ()


def test_star_hub_is_particle_zero():
    topo = build_topology("star", 5)
    assert topo.of(0) == (1, 2, 3, 4)
    for i in range(1, 5):
        assert topo.of(i) == (0,)


def test_topology_name_is_case_insensitive_and_immutable():
    topo = build_topology("RING", 4)
    assert topo.name == "ring"
    with pytest.raises(ValueError):
        topo.adjacency[0, 1] = False


def test_unknown_topology_rejected():
    with pytest.raises(ValueError):
        build_topology("hypercube", 4)


def test_non_positive_size_rejected():
    with pytest.raises(ValueError):
        ring_neighbors(0)
