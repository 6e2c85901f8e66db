"""NetworkX graph building from person records."""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
import logging

import networkx as nx

from models import (
    DanglingReference,
    DanglingSpouse,
    Diagnostic,
    DuplicateIdentifier,
    DuplicateIdentifierError,
    Person,
)

logger = logging.getLogger(__name__)


@dataclass
class FamilyGraph:
    """A parent->child DiGraph plus the spouse pairs used only for ordering."""

    graph: nx.DiGraph
    affinity: list[tuple[str, str]] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def person_ids(self) -> list[str]:
        return list(self.graph.nodes)

    @property
    def edges(self) -> list[tuple[str, str]]:
        return sorted(self.graph.edges)


def build_graph(persons: Iterable[Person]) -> FamilyGraph:
    """
    Build a NetworkX directed graph from a snapshot of person records.

    Every person becomes a node (with the record stored under the `person`
    attribute) and every parent link becomes a parent -> child edge. Parent
    ids that do not name a person in the snapshot are dropped and reported
    as DanglingReference. Spouse links never become edges; they are returned
    as sorted, de-duplicated pairs.

    Raises:
        DuplicateIdentifierError: if two records share an id.
    """
    persons = list(persons)

    counts = Counter(p.id for p in persons)
    duplicates = sorted(pid for pid, n in counts.items() if n > 1)
    if duplicates:
        raise DuplicateIdentifierError([DuplicateIdentifier(pid) for pid in duplicates])

    G = nx.DiGraph()
    diagnostics: list[Diagnostic] = []

    # Add nodes (persons)
    for p in persons:
        G.add_node(p.id, person=p)

    # Add edges (parent links)
    for p in persons:
        for parent_id in p.parent_ids:
            if parent_id not in G:
                logger.debug("Dropping parent link %s -> %s: unknown parent", parent_id, p.id)
                diagnostics.append(DanglingReference(child_id=p.id, missing_parent_id=parent_id))
                continue
            G.add_edge(parent_id, p.id)

    # Collect spouse pairs (avoid duplicates by sorting)
    spouse_pairs: set[tuple[str, str]] = set()
    for p in persons:
        for spouse_id in p.spouse_ids:
            if spouse_id == p.id:
                continue
            if spouse_id not in G:
                logger.debug("Ignoring spouse link %s -> %s: unknown spouse", p.id, spouse_id)
                diagnostics.append(DanglingSpouse(person_id=p.id, missing_spouse_id=spouse_id))
                continue
            a, b = sorted((p.id, spouse_id))
            spouse_pairs.add((a, b))

    return FamilyGraph(graph=G, affinity=sorted(spouse_pairs), diagnostics=diagnostics)


def person_of(G: nx.DiGraph, person_id: str) -> Person:
    return G.nodes[person_id]["person"]
