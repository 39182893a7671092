"""Tests for odd-r hex-grid geometry."""

from worldsim.utils.hexgrid import hex_distance, hex_id, neighbor_coords, offset_to_cube


def test_hex_id():
    assert hex_id(0, 0, 42) == 0
    assert hex_id(5, 2, 42) == 89


def test_cube_coordinates_sum_to_zero():
    for q in range(6):
        for r in range(6):
            assert sum(offset_to_cube(q, r)) == 0


def test_distance_examples():
    assert hex_distance(0, 0, 3, 0) == 3
    assert hex_distance(0, 0, 0, 2) == 2
    assert hex_distance(4, 4, 4, 4) == 0


def test_distance_is_symmetric():
    for a in [(0, 0), (3, 1), (7, 5)]:
        for b in [(2, 2), (6, 3), (1, 7)]:
            assert hex_distance(*a, *b) == hex_distance(*b, *a)


def test_neighbors_are_one_step_away():
    """Every neighbor in the parity-dependent table is at distance 1."""
    for q, r in [(3, 2), (3, 3), (0, 4), (5, 1)]:
        neighbors = neighbor_coords(q, r)
        assert len(neighbors) == 6
        assert len(set(neighbors)) == 6
        for nq, nr in neighbors:
            assert hex_distance(q, r, nq, nr) == 1


def test_neighbor_relation_is_symmetric():
    for q, r in [(3, 2), (3, 3), (4, 4)]:
        for nq, nr in neighbor_coords(q, r):
            assert (q, r) in neighbor_coords(nq, nr)
