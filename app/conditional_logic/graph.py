"""
Cycle checks over condition edges (source question -> target question).

The resolver tolerates cycles, but they make visibility hard to reason
about, so condition creation rejects any edge that would close one.
"""

from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

Edge = Tuple[Any, Any]


def condition_edges(conditions: Iterable[Any]) -> List[Edge]:
    return [(c.source_question_id, c.target_question_id) for c in conditions]


def _adjacency(edges: Iterable[Edge]) -> Dict[Any, Set[Any]]:
    graph: Dict[Any, Set[Any]] = defaultdict(set)
    for source, target in edges:
        graph[source].add(target)
    return graph


def is_reachable(edges: Iterable[Edge], start: Any, goal: Any) -> bool:
    graph = _adjacency(edges)
    stack = [start]
    seen: Set[Any] = set()
    while stack:
        node = stack.pop()
        if node == goal:
            return True
        if node in seen:
            continue
        seen.add(node)
        stack.extend(graph.get(node, ()))
    return False


def would_create_cycle(edges: Iterable[Edge], source_id: Any, target_id: Any) -> bool:
    """True if adding ``source_id -> target_id`` closes a cycle."""
    if source_id == target_id:
        return True
    return is_reachable(edges, target_id, source_id)


def find_cycle(edges: Iterable[Edge]) -> Optional[List[Any]]:
    """Returns one cycle as a node path (first node repeated at the end), or None."""
    graph = _adjacency(edges)
    visiting: List[Any] = []
    on_path: Set[Any] = set()
    done: Set[Any] = set()

    def visit(node) -> Optional[List[Any]]:
        visiting.append(node)
        on_path.add(node)
        for nxt in sorted(graph.get(node, ()), key=repr):
            if nxt in on_path:
                return visiting[visiting.index(nxt):] + [nxt]
            if nxt not in done:
                cycle = visit(nxt)
                if cycle:
                    return cycle
        on_path.discard(node)
        visiting.pop()
        done.add(node)
        return None

    for node in sorted(list(graph), key=repr):
        if node not in done:
            cycle = visit(node)
            if cycle:
                return cycle
    return None
