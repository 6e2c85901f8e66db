"""Layered genealogy layout: graph building, ranking, ordering and placement."""

from collections.abc import Iterable
from dataclasses import dataclass, field
import logging

from config import DEFAULT_CONFIG, LayoutConfig
from graph import build_graph, person_of
from models import CycleBroken, Diagnostic, Person, RoutedEdge, Vertex
from ordering import count_crossings, lineage_chain, order_ranks
from placement import lane_points, place, route_edge
from ranking import rank_graph
from validation import validate_dates

logger = logging.getLogger(__name__)


@dataclass
class FamilyLayout:
    """Result of one layout run, consumed by a renderer."""

    vertices: dict[str, Vertex] = field(default_factory=dict)
    edges: list[RoutedEdge] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    persons: dict[str, Person] = field(default_factory=dict)
    crossings: int = 0

    def position(self, person_id: str) -> tuple[float, float]:
        v = self.vertices[person_id]
        return (v.x, v.y)

    def ranks(self) -> dict[str, int]:
        return {nid: v.rank for nid, v in self.vertices.items()}

    def layers(self) -> list[list[str]]:
        """Person ids per rank, left to right."""
        rows: list[list[str]] = []
        for v in self.vertices.values():
            while len(rows) <= v.rank:
                rows.append([])
            rows[v.rank].append(v.id)
        return rows

    def unranked_edges(self) -> list[tuple[str, str]]:
        return [(e.parent_id, e.child_id) for e in self.edges if e.unranked]

    def to_dict(self) -> dict:
        """JSON-ready representation for an external renderer."""
        return {
            "nodes": [
                {"id": v.id, "rank": v.rank, "order": v.order, "position": {"x": v.x, "y": v.y}}
                for v in self.vertices.values()
            ],
            "edges": [
                {
                    "id": f"{e.parent_id}-{e.child_id}",
                    "source": e.parent_id,
                    "target": e.child_id,
                    "unranked": e.unranked,
                    "route": {
                        "style": e.route.style,
                        "source": list(e.route.source),
                        "target": list(e.route.target),
                        "waypoints": [list(p) for p in e.route.waypoints],
                    },
                }
                for e in self.edges
            ],
            "diagnostics": [
                {"kind": type(d).__name__, **vars(d)} for d in self.diagnostics
            ],
        }


def layout_family(persons: Iterable[Person], config: LayoutConfig | None = None) -> FamilyLayout:
    """
    Lay out a snapshot of family members as a generation-banded diagram.

    Every call builds a fresh graph; nothing is kept between runs.

    Raises:
        DuplicateIdentifierError: if two records share an id.
    """
    config = config or DEFAULT_CONFIG
    family = build_graph(persons)
    G = family.graph

    ranks, excluded = rank_graph(G)
    layers = order_ranks(
        G,
        ranks,
        affinity=family.affinity,
        excluded=excluded,
        passes=config.ordering_passes,
        tolerance=config.affinity_tolerance,
    )
    vertices = place(layers, config)
    lanes = lane_points(layers, config)

    unranked = set(excluded)
    edges = []
    for u, v in sorted(G.edges):
        if (u, v) in unranked:
            through = []
        else:
            through = [lanes[bend] for bend in lineage_chain(u, v, ranks)[1:-1]]
        edges.append(
            RoutedEdge(
                parent_id=u,
                child_id=v,
                unranked=(u, v) in unranked,
                route=route_edge(vertices[u], vertices[v], config, through),
            )
        )

    diagnostics: list[Diagnostic] = list(family.diagnostics)
    diagnostics.extend(CycleBroken(excluded_edge=e) for e in excluded)
    diagnostics.extend(validate_dates(G))

    ranked_edges = [e for e in sorted(G.edges) if e not in unranked]
    crossings = count_crossings(layers, ranked_edges, ranks)
    logger.debug(
        "Laid out %d people in %d generations, %d edges (%d unranked), %d crossings",
        len(vertices),
        len(layers),
        len(edges),
        len(excluded),
        crossings,
    )

    return FamilyLayout(
        vertices=vertices,
        edges=edges,
        diagnostics=diagnostics,
        persons={nid: person_of(G, nid) for nid in vertices},
        crossings=crossings,
    )
