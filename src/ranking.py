"""Generation layering: cycle breaking and longest-path rank assignment."""

import logging

import networkx as nx

logger = logging.getLogger(__name__)


def find_unranked_edges(G: nx.DiGraph) -> list[tuple[str, str]]:
    """
    Find the parent->child edges that must be left out of ranking so the
    remaining graph is acyclic.

    Strongly connected components are recomputed after every exclusion. An
    edge is cyclic when both endpoints share a component (a self-loop always
    does); of all cyclic edges the lexicographically greatest
    (parent_id, child_id) is excluded first.

    Returns:
        Excluded edges in the order they were removed.
    """
    residual = nx.DiGraph()
    residual.add_nodes_from(G.nodes)
    residual.add_edges_from(G.edges)

    excluded: list[tuple[str, str]] = []
    while True:
        component_of: dict[str, int] = {}
        for i, component in enumerate(nx.strongly_connected_components(residual)):
            for node in component:
                component_of[node] = i

        cyclic = [(u, v) for u, v in residual.edges if component_of[u] == component_of[v]]
        if not cyclic:
            return excluded

        edge = max(cyclic)
        logger.debug("Excluding edge %s -> %s from ranking to break a cycle", *edge)
        residual.remove_edge(*edge)
        excluded.append(edge)


def assign_ranks(G: nx.DiGraph, excluded: list[tuple[str, str]] | None = None) -> dict[str, int]:
    """
    Assign each person a generation with longest-path layering.

    A person with no ranked parents gets rank 0; otherwise one more than the
    deepest parent. Unrelated family lines are ranked independently.

    Args:
        G: Parent->child graph
        excluded: Edges to ignore; must leave the graph acyclic

    Returns:
        Mapping of person id -> rank
    """
    skip = set(excluded or ())
    dag = nx.DiGraph()
    dag.add_nodes_from(G.nodes)
    dag.add_edges_from(e for e in G.edges if e not in skip)

    ranks: dict[str, int] = {}
    for node in nx.lexicographical_topological_sort(dag):
        parents = list(dag.predecessors(node))
        ranks[node] = 1 + max(ranks[p] for p in parents) if parents else 0

    return ranks


def rank_graph(G: nx.DiGraph) -> tuple[dict[str, int], list[tuple[str, str]]]:
    """Break cycles, then rank. Returns (ranks, excluded edges)."""
    excluded = find_unranked_edges(G)
    return assign_ranks(G, excluded), excluded
