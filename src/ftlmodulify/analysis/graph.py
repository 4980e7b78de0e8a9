"""Graph algorithms for reference analysis.

Provides cycle detection over the message/term reference graph built by
:func:`~ftlmodulify.analysis.references.build_reference_graph`.

Python 3.13+.
"""

from collections.abc import Iterable, Iterator, Mapping

__all__ = ["detect_cycles"]


def detect_cycles(graph: Mapping[str, Iterable[str]]) -> list[list[str]]:
    """Detect cycles in a reference graph using iterative DFS.

    Iterative rather than recursive, so long reference chains in untrusted
    resources cannot raise RecursionError. Edges to nodes missing from
    ``graph`` are ignored.

    Args:
        graph: Mapping from node id to the ids it references.

    Returns:
        One path per distinct cycle, closed by repeating its first node
        (``["a", "b", "a"]``). Nodes are explored in sorted order, so the
        result is deterministic. Empty if the graph is acyclic.

    Example:
        >>> detect_cycles({"a": {"b"}, "b": {"c"}, "c": {"a"}})
        [['a', 'b', 'c', 'a']]
        >>> detect_cycles({"a": {"b"}, "b": set()})
        []

    Complexity:
        O(V + E) time, O(V) space.
    """
    visited: set[str] = set()
    cycles: list[list[str]] = []
    seen_cycles: set[frozenset[str]] = set()

    for root in sorted(graph):
        if root in visited:
            continue

        visited.add(root)
        path: list[str] = [root]
        on_path: set[str] = {root}
        stack: list[Iterator[str]] = [iter(sorted(graph[root]))]

        while stack:
            neighbor = next(stack[-1], None)

            if neighbor is None:
                # All neighbors done; leave this node.
                stack.pop()
                on_path.discard(path.pop())
                continue

            if neighbor in on_path:
                cycle = [*path[path.index(neighbor) :], neighbor]
                key = frozenset(cycle)
                if key not in seen_cycles:
                    seen_cycles.add(key)
                    cycles.append(cycle)
            elif neighbor not in visited and neighbor in graph:
                visited.add(neighbor)
                path.append(neighbor)
                on_path.add(neighbor)
                stack.append(iter(sorted(graph[neighbor])))

    return cycles
