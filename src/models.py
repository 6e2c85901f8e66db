"""Data classes for family members, layout results and diagnostics."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Person:
    id: str
    first_name: str = ""
    last_name: str = ""
    birth_date: str | None = None  # ISO format YYYY-MM-DD or None
    death_date: str | None = None  # ISO format YYYY-MM-DD or None
    gender: str | None = None
    notes: str | None = None
    photo_url: str | None = None
    parent_ids: tuple[str, ...] = ()
    spouse_ids: tuple[str, ...] = ()

    @property
    def name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) if parts else "Unknown"

    @classmethod
    def from_row(cls, row: dict) -> "Person":
        """Build a Person from a `family_members` row; lists are frozen to tuples."""
        return cls(
            id=str(row["id"]),
            first_name=row.get("first_name") or "",
            last_name=row.get("last_name") or "",
            birth_date=row.get("birth_date") or None,
            death_date=row.get("death_date") or None,
            gender=row.get("gender") or None,
            notes=row.get("notes") or None,
            photo_url=row.get("photo_url") or None,
            parent_ids=tuple(str(p) for p in row.get("parent_ids") or ()),
            spouse_ids=tuple(str(s) for s in row.get("spouse_ids") or ()),
        )


@dataclass(frozen=True)
class Vertex:
    id: str
    rank: int
    order: int
    x: float
    y: float


@dataclass(frozen=True)
class Bend:
    """Empty slot where a lineage line spanning several generations crosses `rank`."""

    parent: str
    child: str
    rank: int


@dataclass(frozen=True)
class Route:
    style: str  # "straight" or "orthogonal"
    source: tuple[float, float]
    target: tuple[float, float]
    waypoints: tuple[tuple[float, float], ...] = ()


@dataclass(frozen=True)
class RoutedEdge:
    parent_id: str
    child_id: str
    unranked: bool
    route: Route


# ============================================================================
# Diagnostics
# ============================================================================


@dataclass(frozen=True)
class DanglingReference:
    child_id: str
    missing_parent_id: str


@dataclass(frozen=True)
class DanglingSpouse:
    person_id: str
    missing_spouse_id: str


@dataclass(frozen=True)
class CycleBroken:
    excluded_edge: tuple[str, str]


@dataclass(frozen=True)
class DuplicateIdentifier:
    id: str


@dataclass(frozen=True)
class DateInconsistency:
    person_id: str
    message: str


Diagnostic = DanglingReference | DanglingSpouse | CycleBroken | DuplicateIdentifier | DateInconsistency


# ============================================================================
# Errors
# ============================================================================


class FamgraphError(Exception):
    """Base class for errors raised by famgraph."""


class DuplicateIdentifierError(FamgraphError):
    """Raised when the same person id appears more than once in a snapshot."""

    def __init__(self, duplicates: list[DuplicateIdentifier]):
        self.duplicates = duplicates
        ids = ", ".join(d.id for d in duplicates)
        super().__init__(f"Duplicate person identifiers: {ids}")
