"""
1) Load a snapshot of family members (JSON export of `family_members` or a GEDCOM file).
2) Build the parent -> child graph and lay it out in generations.
3) Report diagnostics (dangling links, broken cycles, date problems).
4) Render the layout (PNG/SVG/PDF via matplotlib, DOT via pydot, or JSON).
"""

import argparse
import logging
from pathlib import Path

from layout import layout_family
from models import FamgraphError
from parsing import load_persons
from plotting import layout_to_dot, plot_layout, write_layout_json

MAX_REPORTED_DIAGNOSTICS = 10


def describe(diagnostic) -> str:
    fields = ", ".join(f"{k}={v!r}" for k, v in vars(diagnostic).items())
    return f"{type(diagnostic).__name__}({fields})"


def write_output(layout, output_path: Path) -> None:
    ext = output_path.suffix.lower().lstrip(".")
    if ext == "json":
        write_layout_json(layout, output_path)
        print(f"Layout saved to {output_path}")
    elif ext in ("dot", "gv"):
        layout_to_dot(layout).write(str(output_path), format="raw")
        print(f"Graph saved to {output_path}")
    else:
        plot_layout(layout, output_path)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Lay out a family tree as a generation diagram.")
    parser.add_argument("input", type=Path, help="JSON snapshot or GEDCOM (.ged) file.")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("family_tree.png"),
        help="Output file; suffix selects png/svg/pdf, dot or json (default: family_tree.png).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        print(f"Loading family members: {args.input}")
        persons = load_persons(args.input)
        print(f"  Found {len(persons)} persons")

        print("Laying out graph...")
        layout = layout_family(persons)
    except FamgraphError as e:
        print(f"  Error: {e}")
        return 1
    generations = len(layout.layers())
    print(f"  {len(layout.vertices)} nodes in {generations} generations, {len(layout.edges)} edges")

    diagnostics = layout.diagnostics
    if diagnostics:
        print(f"  Found {len(diagnostics)} diagnostics:")
        for d in diagnostics[:MAX_REPORTED_DIAGNOSTICS]:
            print(f"    - {describe(d)}")
        if len(diagnostics) > MAX_REPORTED_DIAGNOSTICS:
            print(f"    ... and {len(diagnostics) - MAX_REPORTED_DIAGNOSTICS} more")
    else:
        print("  No diagnostics")

    write_output(layout, args.output)
    print("Done!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
