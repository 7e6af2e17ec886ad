"""
Grouping and sorting helpers shared by every renderer.

- Experience entries are bucketed by employer (CompanyGroups) and sorted by
  start date, most recent first.
- Skills are bucketed by their free-form category label (CategoryGroups).

Both groupings preserve first-seen order of their keys.
"""

import re
from datetime import datetime
from operator import attrgetter
from typing import Any, Callable, Dict, Iterable, List, Sequence, Tuple, Union

from resumeforge.contexts.templating.exceptions import InvalidResumeStructureError
from resumeforge.contexts.templating.resume_data_structure import (
    AdditionalSection,
    ExperienceEntry,
    Skill,
)

EPOCH = datetime(1970, 1, 1)

_YEAR_PATTERN = re.compile(r"^\d{4}$")
_MONTH_YEAR_NUMERIC_PATTERN = re.compile(r"^(\d{1,2})/(\d{4})$")
_MONTH_NAME_YEAR_PATTERN = re.compile(r"^([A-Za-z]+)\.?\s+(\d{4})$")

_MONTHS = {
    name: index
    for index, names in enumerate(
        [
            ("january", "jan"),
            ("february", "feb"),
            ("march", "mar"),
            ("april", "apr"),
            ("may",),
            ("june", "jun"),
            ("july", "jul"),
            ("august", "aug"),
            ("september", "sep", "sept"),
            ("october", "oct"),
            ("november", "nov"),
            ("december", "dec"),
        ],
        start=1,
    )
    for name in names
}

# Tried after datetime.fromisoformat, in order
_FALLBACK_LAYOUTS = ("%Y-%m", "%m-%Y", "%Y/%m", "%m/%d/%Y", "%d %B %Y", "%B %d, %Y", "%b %d, %Y")


def _month_start(year: int, month: int) -> datetime:
    try:
        return datetime(year, month, 1)
    except ValueError:
        return EPOCH


def parse_start_date(value: Any) -> datetime:
    """
    Parse a résumé date string into a comparable datetime.

    Recognized forms:
    - "2020" → 2020-01-01
    - "03/2020" → 2020-03-01
    - "March 2020" / "Mar 2020" (case-insensitive) → 2020-03-01
    - anything datetime.fromisoformat or a few common layouts accept

    Empty, absent or unparseable input returns EPOCH so undated entries sink
    to the bottom of a most-recent-first sort. Never raises.

    Args:
        value: Raw date string (other types are treated as unparseable)

    Returns:
        Naive datetime
    """
    if not isinstance(value, str):
        return EPOCH
    text = value.strip()
    if not text:
        return EPOCH

    if _YEAR_PATTERN.match(text):
        return _month_start(int(text), 1)

    match = _MONTH_YEAR_NUMERIC_PATTERN.match(text)
    if match:
        return _month_start(int(match.group(2)), int(match.group(1)))

    match = _MONTH_NAME_YEAR_PATTERN.match(text)
    if match:
        month = _MONTHS.get(match.group(1).lower())
        if month is None:
            return EPOCH
        return _month_start(int(match.group(2)), month)

    try:
        parsed = datetime.fromisoformat(text)
        return parsed.replace(tzinfo=None)
    except ValueError:
        pass

    for layout in _FALLBACK_LAYOUTS:
        try:
            return datetime.strptime(text, layout)
        except ValueError:
            continue

    return EPOCH


def _require_sequence(value: Any, name: str) -> Sequence:
    if not isinstance(value, (list, tuple)):
        raise InvalidResumeStructureError(f"{name} must be a list, got {type(value).__name__}")
    return value


def group_experiences_by_company(
    experiences: Sequence[ExperienceEntry],
) -> Dict[str, List[ExperienceEntry]]:
    """
    Bucket experience entries by employer and sort each bucket.

    The key is the company name with leading/trailing whitespace trimmed; no
    case folding. Buckets appear in first-seen order. Within a bucket entries
    are sorted by start date descending; the sort is stable, so entries with
    equal (or unparseable) dates keep their relative order.

    Args:
        experiences: Experience entries in user order

    Returns:
        Ordered mapping company → entries (CompanyGroups)

    Raises:
        InvalidResumeStructureError: If experiences is not a list or tuple

    Example:
        >>> groups = group_experiences_by_company([acme_2019, acme_2021, beta_2020])
        >>> list(groups)
        ['Acme', 'Beta']
        >>> [e.start_date for e in groups['Acme']]
        ['2021', '2019']
    """
    _require_sequence(experiences, "experience")

    grouped: Dict[str, List[ExperienceEntry]] = {}
    for entry in experiences:
        grouped.setdefault(entry.company.strip(), []).append(entry)

    for company, entries in grouped.items():
        entries.sort(key=lambda e: parse_start_date(e.start_date), reverse=True)

    return grouped


def _accessor(key: Union[str, Callable[[Any], Any]]) -> Callable[[Any], Any]:
    return attrgetter(key) if isinstance(key, str) else key


def group_by_category(
    items: Iterable[Any],
    key: Union[str, Callable[[Any], str]] = "category",
    value: Union[str, Callable[[Any], Any]] = "name",
) -> Dict[str, List[Any]]:
    """
    Bucket items by an exact, case-sensitive category label in one pass.

    First occurrence of a label fixes its output position; an empty label
    groups under "".

    Args:
        items: Items to group
        key: Attribute name or callable giving the category label
        value: Attribute name or callable giving the value to collect

    Returns:
        Ordered mapping label → values
    """
    if not isinstance(items, (list, tuple)):
        raise InvalidResumeStructureError(f"items must be a list, got {type(items).__name__}")

    get_key = _accessor(key)
    get_value = _accessor(value)

    grouped: Dict[str, List[Any]] = {}
    for item in items:
        grouped.setdefault(get_key(item) or "", []).append(get_value(item))
    return grouped


def group_skills(skills: Sequence[Skill]) -> Dict[str, List[str]]:
    """CategoryGroups for a skill list: category → skill names."""
    return group_by_category(skills, key="category", value="name")


def non_empty_sections(sections: Sequence[AdditionalSection]) -> Tuple[AdditionalSection, ...]:
    """Additional sections that have at least one item, in order."""
    _require_sequence(sections, "additionalSections")
    return tuple(section for section in sections if section.items)
