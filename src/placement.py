"""Coordinate assignment and connector routing."""

from collections.abc import Sequence

from config import DEFAULT_CONFIG, LayoutConfig
from models import Bend, Route, Vertex


def _slot_center(slot: int, row_length: int, config: LayoutConfig) -> float:
    return (slot - (row_length - 1) / 2) * config.slot_width


def place(layers: list[list[str | Bend]], config: LayoutConfig = DEFAULT_CONFIG) -> dict[str, Vertex]:
    """
    Give every person an (x, y) position from its rank and order.

    Each rank is a row `rank_height` below the previous one. Within a row
    every slot is `node_width + node_gap` wide, and the row is centered on
    x = 0 so adding someone to a generation does not shift the whole diagram
    sideways. Bend slots keep their space but get no vertex, and `order`
    counts people only. Coordinates are the top-left corner of the node box.
    """
    vertices: dict[str, Vertex] = {}
    for rank, layer in enumerate(layers):
        y = rank * config.rank_height
        people = [(slot, nid) for slot, nid in enumerate(layer) if not isinstance(nid, Bend)]
        for order, (slot, nid) in enumerate(people):
            x = _slot_center(slot, len(layer), config) - config.node_width / 2
            vertices[nid] = Vertex(id=nid, rank=rank, order=order, x=x, y=y)
    return vertices


def lane_points(
    layers: list[list[str | Bend]], config: LayoutConfig = DEFAULT_CONFIG
) -> dict[Bend, tuple[float, float]]:
    """Top-center point of every Bend slot, where a long connector crosses a row."""
    return {
        nid: (_slot_center(slot, len(layer), config), rank * config.rank_height)
        for rank, layer in enumerate(layers)
        for slot, nid in enumerate(layer)
        if isinstance(nid, Bend)
    }


def route_edge(
    parent: Vertex,
    child: Vertex,
    config: LayoutConfig = DEFAULT_CONFIG,
    lanes: Sequence[tuple[float, float]] = (),
) -> Route:
    """
    Connector from the parent's bottom anchor to the child's top anchor.

    `lanes` are the lane points of the rows between parent and child. The
    connector only moves sideways in the gap above a row, and crosses a row
    through its lane, so it never runs through another node box.
    """
    source = (parent.x + config.node_width / 2, parent.y + config.node_height)
    target = (child.x + config.node_width / 2, child.y)

    if target[1] <= source[1]:
        # Child not below: one horizontal run midway between the anchors
        run_y = (source[1] + target[1]) / 2
        return Route(
            style="orthogonal",
            source=source,
            target=target,
            waypoints=((source[0], run_y), (target[0], run_y)),
        )

    waypoints: list[tuple[float, float]] = []
    x = source[0]
    for lane_x, top in [*lanes, target]:
        if lane_x != x:
            run_y = top - config.rank_gap / 2
            waypoints.extend([(x, run_y), (lane_x, run_y)])
            x = lane_x

    return Route(
        style="orthogonal" if waypoints else "straight",
        source=source,
        target=target,
        waypoints=tuple(waypoints),
    )
