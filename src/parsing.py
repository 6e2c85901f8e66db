"""Loading person snapshots (JSON export or GEDCOM) and date handling utilities."""

import json
import logging
from pathlib import Path
import re

from ged4py import GedcomReader

from models import FamgraphError, Person

logger = logging.getLogger(__name__)

MONTH_NAMES = [
    "JANUARY",
    "FEBRUARY",
    "MARCH",
    "APRIL",
    "MAY",
    "JUNE",
    "JULY",
    "AUGUST",
    "SEPTEMBER",
    "OCTOBER",
    "NOVEMBER",
    "DECEMBER",
]

# Qualifiers (ABT, ABOUT, BEF, AFT, EST, CAL, AROUND, etc.) - with optional colon
QUALIFIER_RE = re.compile(
    r"^(ABT\.?|ABOUT|BEF\.?|BEFORE|AFT\.?|AFTER|EST\.?|CAL\.?|FROM|TO|BET\.?|AND|CIRCA|CA\.?|AROUND):?\s*",
    flags=re.IGNORECASE,
)


class SnapshotError(FamgraphError):
    """Raised when a JSON snapshot is not a list of member rows."""


def month_number(word: str) -> int | None:
    """Month number for a full or abbreviated English month name ("Nov", "SEPT.", "march")."""
    word = word.upper().rstrip(".")
    if len(word) < 3:
        return None
    for number, name in enumerate(MONTH_NAMES, start=1):
        if name.startswith(word):
            return number
    return None


def _iso(year: int, month: int | None, day: int) -> str | None:
    if month is None or not 1 <= month <= 12 or not 1 <= day <= 31:
        return None
    return f"{year:04d}-{month:02d}-{day:02d}"


# (pattern, match -> (year, month, day)); tried in order, first valid result wins
DATE_PATTERNS = [
    # "1839-08-29" or "1746-00-00"; 00 month/day default to 1
    (
        re.compile(r"^(\d{4})-(\d{2})-(\d{2})$"),
        lambda m: (int(m[1]), int(m[2]) or 1, int(m[3]) or 1),
    ),
    # "25 NOV 1954", "11 Aug. 1968", "02 May1838"
    (
        re.compile(r"^(\d{1,2})\s+([A-Za-z]+)\.?\s*(\d{4})$"),
        lambda m: (int(m[3]), month_number(m[2]), int(m[1])),
    ),
    # "NOV 1954", "May, 1837"
    (
        re.compile(r"^([A-Za-z]+)\.?,?\s*(\d{4})$"),
        lambda m: (int(m[2]), month_number(m[1]), 1),
    ),
    # "1698"
    (re.compile(r"^(\d{4})$"), lambda m: (int(m[1]), 1, 1)),
    # "01-27-1920", "05/15/1923", "04 05 1911" (month first)
    (
        re.compile(r"^(\d{1,2})(?:[-/]|\s+)(\d{1,2})(?:[-/]|\s+)(\d{4})$"),
        lambda m: (int(m[3]), int(m[1]), int(m[2])),
    ),
    # "April 17, 1850", "SEPT. 17,1910", "Oct.12,1929"
    (
        re.compile(r"^([A-Za-z]+)\.?\s*(\d{1,2}),?\s*(\d{4})$"),
        lambda m: (int(m[3]), month_number(m[1]), int(m[2])),
    ),
]


def parse_date_string(date_str: str | None) -> str | None:
    """
    Parse a free-form genealogical date into ISO format (YYYY-MM-DD).
    Returns None if the date cannot be parsed.

    Partial dates are completed with the first month/day, so "ABOUT 1905"
    becomes "1905-01-01" and "JAN 1905" becomes "1905-01-01".
    """
    if not date_str:
        return None

    s = date_str.strip().strip("()").rstrip("?")
    s = QUALIFIER_RE.sub("", s).strip()
    if not s:
        return None

    for pattern, extract in DATE_PATTERNS:
        match = pattern.match(s)
        if match:
            iso = _iso(*extract(match))
            if iso:
                return iso

    return None


# ============================================================================
# JSON snapshots
# ============================================================================


def persons_from_rows(data) -> list[Person]:
    """
    Convert `family_members` rows into Person records.

    Accepts either a list of rows or an object with a "members" list.
    """
    rows = data.get("members") if isinstance(data, dict) else data
    if not isinstance(rows, list):
        raise SnapshotError("Expected a list of family member rows")

    persons: list[Person] = []
    for i, row in enumerate(rows):
        if not isinstance(row, dict) or row.get("id") in (None, ""):
            raise SnapshotError(f"Row {i} is not a family member with an id")
        persons.append(Person.from_row(row))
    return persons


def load_snapshot(path: Path) -> list[Person]:
    """Load persons from a JSON export of the family_members table."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return persons_from_rows(data)


# ============================================================================
# GEDCOM
# ============================================================================


def gedcom_id(xref_id: str) -> str:
    """Person id from a GEDCOM xref_id like '@I_347421849@'."""
    return xref_id.strip("@")


def extract_name_parts(indi) -> tuple[str, str]:
    """Extract given name and surname from an individual record."""
    name_rec = indi.sub_tag("NAME")
    if name_rec is None or name_rec.value is None:
        return ("", "")

    # ged4py returns NAME as tuple: (given, surname, suffix)
    if isinstance(name_rec.value, tuple):
        given, surname, _ = name_rec.value
        return (given or "", surname or "")

    givn = name_rec.sub_tag("GIVN")
    surn = name_rec.sub_tag("SURN")
    if givn or surn:
        return (givn.value if givn else "", surn.value if surn else "")

    # Fallback: string format "Given /Surname/"
    given, _, rest = str(name_rec.value).partition("/")
    return (given.strip(), rest.split("/")[0].strip())


def extract_event_date(indi, tag: str) -> str | None:
    """ISO date of an event tag (BIRT, DEAT, etc.), or None."""
    event = indi.sub_tag(tag)
    if event is None:
        return None

    date_rec = event.sub_tag("DATE")
    if not (date_rec and date_rec.value):
        return None

    # ged4py may return DateValue objects
    return parse_date_string(str(date_rec.value))


def read_gedcom(filepath: Path) -> list[Person]:
    """
    Read individuals and families from a GEDCOM file.

    Each FAM record makes HUSB and WIFE parents of every CHIL and spouses of
    each other. Non-standard tags are ignored.
    """
    parents: dict[str, list[str]] = {}
    spouses: dict[str, list[str]] = {}
    individuals = []

    with GedcomReader(str(filepath)) as reader:
        for rec in reader.records0("INDI"):
            if rec.xref_id is None:
                continue
            sex_rec = rec.sub_tag("SEX")
            given, surname = extract_name_parts(rec)
            individuals.append(
                {
                    "id": gedcom_id(rec.xref_id),
                    "first_name": given,
                    "last_name": surname,
                    "gender": sex_rec.value if sex_rec else None,
                    "birth_date": extract_event_date(rec, "BIRT"),
                    "death_date": extract_event_date(rec, "DEAT"),
                }
            )

        for rec in reader.records0("FAM"):
            husb = rec.sub_tag("HUSB")
            wife = rec.sub_tag("WIFE")
            partners = [gedcom_id(p.xref_id) for p in (husb, wife) if p and p.xref_id]

            if len(partners) == 2:
                a, b = partners
                spouses.setdefault(a, []).append(b)
                spouses.setdefault(b, []).append(a)

            for child in rec.sub_tags("CHIL"):
                if child.xref_id:
                    parents.setdefault(gedcom_id(child.xref_id), []).extend(partners)

    persons = [
        Person.from_row(
            {
                **row,
                "parent_ids": list(dict.fromkeys(parents.get(row["id"], []))),
                "spouse_ids": list(dict.fromkeys(spouses.get(row["id"], []))),
            }
        )
        for row in individuals
    ]
    logger.debug("Read %d individuals from %s", len(persons), filepath)
    return persons


def load_persons(path: Path) -> list[Person]:
    """Load a snapshot from a .ged or .json file."""
    path = Path(path)
    if path.suffix.lower() == ".ged":
        return read_gedcom(path)
    return load_snapshot(path)
