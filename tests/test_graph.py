from app.conditional_logic.graph import (
    condition_edges,
    find_cycle,
    is_reachable,
    would_create_cycle,
)
from tests.factories import make_condition


class TestCycleDetection:
    def test_chain_is_acyclic(self):
        edges = [(1, 2), (2, 3)]
        assert not would_create_cycle(edges, 3, 4)
        assert not would_create_cycle(edges, 1, 3)
        assert find_cycle(edges) is None

    def test_back_edge_closes_cycle(self):
        edges = [(1, 2), (2, 3)]
        assert would_create_cycle(edges, 3, 1)
        assert would_create_cycle(edges, 2, 1)

    def test_self_edge(self):
        assert would_create_cycle([], 5, 5)

    def test_find_cycle_returns_path(self):
        cycle = find_cycle([(1, 2), (2, 3), (3, 1), (3, 4)])
        assert cycle[0] == cycle[-1]
        assert set(cycle) == {1, 2, 3}

    def test_diamond_is_not_a_cycle(self):
        edges = [(1, 2), (1, 3), (2, 4), (3, 4)]
        assert find_cycle(edges) is None
        assert not would_create_cycle(edges, 1, 4)
        assert is_reachable(edges, 1, 4)
        assert not is_reachable(edges, 4, 1)

    def test_condition_edges(self):
        conditions = [make_condition(1, 2), make_condition(2, 3, "hide_if")]
        assert condition_edges(conditions) == [(1, 2), (2, 3)]
