"""
Member directory parser for the spreadsheet CSV export.
Column names are not fixed: each logical field is found by synonym substrings
in the header row (Indonesian and English).
"""
import logging
import math
import re
from enum import Enum
from typing import Dict, List, Optional, Sequence

from .errors import ParseError
from .models import Member
from .utils import digits_only

logger = logging.getLogger(__name__)

LINE_BREAK = re.compile(r'\r\n|\n|\r')
DEFAULT_LEVEL = "Member"


class MemberField(str, Enum):
    NAME = "name"
    PHONE = "phone"
    LEVEL = "level"
    DISCOUNT = "discount"


# Resolution order matters: a column claimed by an earlier field is not
# offered to later ones.
FIELD_SYNONYMS: Dict[MemberField, tuple[str, ...]] = {
    MemberField.NAME: ("nama", "name"),
    MemberField.PHONE: ("hp", "phone", "wa", "nomor", "telp"),
    MemberField.LEVEL: ("level", "status", "tipe"),
    MemberField.DISCOUNT: ("diskon", "potongan", "discount"),
}

REQUIRED_FIELDS = (MemberField.NAME, MemberField.PHONE)


def split_lines(text: str) -> List[str]:
    """Split on any line break and drop blank lines."""
    return [line for line in LINE_BREAK.split(text or "") if line.strip()]


def _clean_field(raw: str) -> str:
    value = raw.strip()
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        value = value[1:-1].replace('""', '"')
    return value.strip()


def tokenize_line(line: str) -> List[str]:
    """
    Split one CSV line on commas. A double quote toggles quoted mode, in which
    commas are kept as part of the field.
    """
    fields = []
    current = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
            current.append(char)
        elif char == ',' and not in_quotes:
            fields.append(_clean_field(''.join(current)))
            current = []
        else:
            current.append(char)

    fields.append(_clean_field(''.join(current)))
    return fields


def resolve_columns(header: Sequence[str]) -> Dict[MemberField, int]:
    """Map each logical field to the first unclaimed header containing a synonym."""
    names = [h.strip().casefold() for h in header]
    claimed = set()
    columns: Dict[MemberField, int] = {}

    for field, synonyms in FIELD_SYNONYMS.items():
        for index, name in enumerate(names):
            if index in claimed:
                continue
            if any(synonym in name for synonym in synonyms):
                columns[field] = index
                claimed.add(index)
                break

    resolved = {field.value: names[index] for field, index in columns.items()}
    logger.debug(f"Resolved member columns: {resolved}")
    return columns


def parse_discount(raw: Optional[str]) -> float:
    """
    Normalize a discount cell to a percentage in [0, 100].

    "10%" -> 10, "0.5%" -> 0.5, "10" -> 10, "0.1" -> 10 (fraction of one),
    blank or garbage -> 0.
    """
    value = (raw or "").strip()
    if not value:
        return 0.0

    explicit_percent = '%' in value
    number_text = value.replace('%', '').replace(' ', '').replace(',', '.')
    try:
        number = float(number_text)
    except ValueError:
        logger.debug(f"Unparseable discount {raw!r}, using 0")
        return 0.0

    if not math.isfinite(number):
        logger.debug(f"Non-finite discount {raw!r}, using 0")
        return 0.0
    if not explicit_percent and 0 < number < 1:
        number *= 100

    if number < 0 or number > 100:
        logger.warning(f"Discount {raw!r} outside 0-100, clamping")
    return min(max(number, 0.0), 100.0)


def _cell(row: Sequence[str], columns: Dict[MemberField, int], field: MemberField) -> str:
    index = columns.get(field)
    if index is None or index >= len(row):
        return ""
    return row[index].strip()


def build_member(row: Sequence[str], columns: Dict[MemberField, int]) -> Member:
    """Materialize one data row. Raises ParseError when name or phone is missing."""
    name = _cell(row, columns, MemberField.NAME)
    phone = digits_only(_cell(row, columns, MemberField.PHONE))
    if not name:
        raise ParseError("row has no name")
    if not phone:
        raise ParseError(f"row for {name!r} has no phone digits")

    return Member(
        name=name,
        phone=phone,
        level=_cell(row, columns, MemberField.LEVEL) or DEFAULT_LEVEL,
        discount_percentage=parse_discount(_cell(row, columns, MemberField.DISCOUNT)),
    )


def parse_member_directory(text: str) -> List[Member]:
    """
    Parse the raw member feed into Member records, in feed order.

    Returns an empty list when the header lacks a name or phone column.
    Rows without a name or phone are skipped.
    """
    lines = split_lines(text)
    if not lines:
        return []

    columns = resolve_columns(tokenize_line(lines[0]))
    missing = [field.value for field in REQUIRED_FIELDS if field not in columns]
    if missing:
        logger.warning(f"Member feed unusable, no column for: {', '.join(missing)}")
        return []

    members = []
    for line_number, line in enumerate(lines[1:], start=2):
        try:
            members.append(build_member(tokenize_line(line), columns))
        except ParseError as e:
            logger.debug(f"Skipping feed line {line_number}: {e}")

    logger.info(f"Parsed {len(members)} members from {len(lines) - 1} feed rows")
    return members
