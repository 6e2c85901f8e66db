"""Rendering and export of computed family layouts."""

import json
from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.patches import FancyBboxPatch
import pydot

from config import DEFAULT_CONFIG, LayoutConfig
from layout import FamilyLayout
from models import Person

# Graphviz works in points (72 per inch), matplotlib figures in inches
POINTS_PER_INCH = 72


def fill_color(person: Person) -> str:
    """Node colour by gender tag."""
    gender = (person.gender or "").strip().upper()[:1]
    if gender == "M":
        return "lightblue"
    if gender == "F":
        return "lightpink"
    return "lightgray"


def node_label(person: Person) -> str:
    """Name plus birth-death years (dates are ISO, so the year is the first four characters)."""
    birth_year = person.birth_date[:4] if person.birth_date else ""
    death_year = person.death_date[:4] if person.death_date else ""
    if birth_year or death_year:
        return f"{person.name}\n{birth_year}-{death_year}"
    return person.name


def layout_to_dot(layout: FamilyLayout, config: LayoutConfig = DEFAULT_CONFIG) -> pydot.Dot:
    """
    Build a Graphviz graph with every node pinned to its computed position.

    Render with `neato -n` so Graphviz keeps the positions instead of running
    its own layout. Graphviz y grows upwards, so y is negated.
    """
    P = pydot.Dot(graph_type="digraph")
    P.set("splines", "ortho")
    P.set("outputorder", "edgesfirst")

    for v in layout.vertices.values():
        person = layout.persons[v.id]
        cx = v.x + config.node_width / 2
        cy = -(v.y + config.node_height / 2)
        P.add_node(
            pydot.Node(
                str(v.id),
                label=node_label(person),
                shape="box",
                style="rounded,filled",
                fillcolor=fill_color(person),
                fontsize="10",
                width=f"{config.node_width / POINTS_PER_INCH:.3f}",
                height=f"{config.node_height / POINTS_PER_INCH:.3f}",
                fixedsize="true",
                pos=f"{cx:g},{cy:g}!",
            )
        )

    for e in layout.edges:
        attrs = {"color": "darkgray"}
        if e.unranked:
            # Edge left out of ranking because it closes a cycle
            attrs.update(style="dashed", color="red", constraint="false")
        P.add_edge(pydot.Edge(str(e.parent_id), str(e.child_id), **attrs))

    return P


def plot_layout(
    layout: FamilyLayout,
    output_path: Path | None = None,
    config: LayoutConfig = DEFAULT_CONFIG,
):
    """
    Draw the family layout with matplotlib.

    Parents are above children, node boxes coloured by gender and connectors
    follow the routing hints of each edge. Unranked edges are dashed red.

    Args:
        layout: Result of layout_family
        output_path: Path to save the image (PNG, SVG, PDF; anything else is written as PNG).
            If None, displays interactively.
    """
    fig, ax = plt.subplots(figsize=(20, 16))

    for e in layout.edges:
        points = [e.route.source, *e.route.waypoints, e.route.target]
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        if e.unranked:
            ax.plot(xs, ys, color="red", linestyle="--", linewidth=1)
        else:
            ax.plot(xs, ys, color="darkgray", linewidth=1)

    for v in layout.vertices.values():
        person = layout.persons[v.id]
        ax.add_patch(
            FancyBboxPatch(
                (v.x, v.y),
                config.node_width,
                config.node_height,
                boxstyle="round,pad=0,rounding_size=12",
                facecolor=fill_color(person),
                edgecolor="gray",
            )
        )
        ax.text(
            v.x + config.node_width / 2,
            v.y + config.node_height / 2,
            node_label(person),
            ha="center",
            va="center",
            fontsize=8,
        )

    if layout.vertices:
        xs = [v.x for v in layout.vertices.values()]
        ys = [v.y for v in layout.vertices.values()]
        margin = config.node_gap
        ax.set_xlim(min(xs) - margin, max(xs) + config.node_width + margin)
        ax.set_ylim(max(ys) + config.node_height + margin, min(ys) - margin)  # Ancestors at top
    ax.set_aspect("equal")
    ax.axis("off")
    ax.set_title(f"Family Tree ({len(layout.vertices)} people, {len(layout.edges)} relationships)")
    fig.tight_layout()

    if output_path:
        # Determine format from extension
        ext = Path(output_path).suffix.lower().lstrip(".")
        if ext not in ("png", "svg", "pdf"):
            ext = "png"
        fig.savefig(output_path, format=ext, dpi=150, bbox_inches="tight")
        plt.close(fig)
        print(f"Graph saved to {output_path}")
    else:
        plt.show()


def write_layout_json(layout: FamilyLayout, output_path: Path) -> None:
    """Write the layout as JSON for an external renderer."""
    Path(output_path).write_text(json.dumps(layout.to_dict(), indent=2), encoding="utf-8")
