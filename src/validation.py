"""Date plausibility checks for family members."""

from datetime import date

import networkx as nx

from graph import person_of
from models import DateInconsistency
from parsing import parse_date_string

MIN_PARENT_AGE_YEARS = 12


def _as_date(value: str | None) -> date | None:
    iso = parse_date_string(value)
    if iso is None:
        return None
    try:
        return date.fromisoformat(iso)
    except ValueError:
        return None


def validate_dates(G: nx.DiGraph) -> list[DateInconsistency]:
    """
    Validate the family graph for:
    - Impossible ages (child born before parent)
    - Suspiciously young parents (< 12 years old)
    - Death before birth

    Dates that cannot be parsed are skipped. Returns one diagnostic per issue:
    parent/child checks first (by edge), then per-person checks (by id).
    """
    warnings: list[DateInconsistency] = []

    for parent_id, child_id in sorted(G.edges):
        if parent_id == child_id:
            continue
        parent = person_of(G, parent_id)
        child = person_of(G, child_id)

        parent_birth = _as_date(parent.birth_date)
        child_birth = _as_date(child.birth_date)
        if not (parent_birth and child_birth):
            continue

        if child_birth < parent_birth:
            warnings.append(
                DateInconsistency(
                    person_id=child_id,
                    message=f"Impossible: {child.name} born before parent {parent.name}",
                )
            )
        elif child_birth.year - parent_birth.year < MIN_PARENT_AGE_YEARS:
            warnings.append(
                DateInconsistency(
                    person_id=child_id,
                    message=(
                        f"Suspicious: {parent.name} was less than {MIN_PARENT_AGE_YEARS} "
                        f"years old when {child.name} was born"
                    ),
                )
            )

    for person_id in sorted(G.nodes):
        person = person_of(G, person_id)
        birth = _as_date(person.birth_date)
        death = _as_date(person.death_date)

        if birth and death and death < birth:
            warnings.append(
                DateInconsistency(
                    person_id=person_id,
                    message=f"Impossible: {person.name} died before being born",
                )
            )

    return warnings
