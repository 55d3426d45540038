"""
Filter / sort / pagination pipeline shared by every endpoint.

Records are plain dicts of raw string values. Filtering always sees the raw
values; normalization (empty -> sentinel) happens only on the records that
are returned to a caller.
"""

import logging
import math
from functools import cmp_to_key
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

Record = Mapping[str, Any]

OPERATORS = ("eq", "contains", "gt", "lt")
DEFAULT_MISSING_VALUE = "no_data"


# ============================================================================
# Models
# ============================================================================

class FilterCondition(BaseModel):
    """A single (field, op, value) filter."""
    field: str = Field(..., description="Record field to test")
    op: str = Field(..., description="One of: eq, contains, gt, lt")
    value: Any = Field(..., description="Operand compared against the field value")


class SortSpec(BaseModel):
    """Optional ordering of the filtered results."""
    field: str = Field(..., description="Record field to sort on")
    dir: str = Field("asc", description="'asc' or 'desc'")

    @property
    def descending(self) -> bool:
        return self.dir == "desc"


class ResultPage(BaseModel):
    """One page of query results."""
    total: int = Field(..., description="Number of records matching the filters")
    showing: int = Field(..., description="Number of records in this page")
    offset: int = Field(0, description="Offset of the first record in this page")
    results: List[Dict[str, Any]] = Field(default_factory=list, description="Normalized records")


# ============================================================================
# Coercion helpers
# ============================================================================

def to_number(value: Any) -> Optional[float]:
    """Parse a finite number from a value, or return None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        # Only plain ASCII number literals; float() also takes "1_000" and Unicode digits
        if not text or "_" in text or not text.isascii():
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def _as_text(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_filters(raw_filters: Any) -> List[FilterCondition]:
    """
    Build filter conditions from loosely typed input.

    Entries that are not mappings, lack field/op/value, or use an unknown
    operator are dropped rather than failing the request.
    """
    if not raw_filters:
        return []
    if isinstance(raw_filters, Mapping):
        raw_filters = [raw_filters]
    if not isinstance(raw_filters, (list, tuple)):
        logger.warning(f"Ignoring filters of unexpected type: {type(raw_filters).__name__}")
        return []

    conditions = []
    for raw in raw_filters:
        if isinstance(raw, FilterCondition):
            condition = raw
        elif isinstance(raw, Mapping) and all(raw.get(k) is not None for k in ("field", "op", "value")):
            condition = FilterCondition(field=str(raw["field"]), op=str(raw["op"]), value=raw["value"])
        else:
            logger.warning(f"Dropping malformed filter condition: {raw!r}")
            continue

        if condition.op not in OPERATORS:
            logger.warning(f"Dropping filter with unknown operator '{condition.op}'")
            continue
        conditions.append(condition)
    return conditions


def parse_sort(raw_sort: Any) -> Optional[SortSpec]:
    """Build a sort spec, or None when absent or missing a field."""
    if isinstance(raw_sort, SortSpec):
        return raw_sort
    if not isinstance(raw_sort, Mapping) or not raw_sort.get("field"):
        return None
    return SortSpec(field=str(raw_sort["field"]), dir=str(raw_sort.get("dir") or "asc"))


def coerce_int(value: Any, default: int) -> int:
    """Best-effort integer conversion for tool arguments."""
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


# ============================================================================
# Predicate evaluation
# ============================================================================

def matches(record: Record, condition: FilterCondition) -> bool:
    """Evaluate one condition against one record's raw values."""
    if condition.field not in record:
        return True

    actual = record[condition.field]
    expected = condition.value

    if condition.op == "eq":
        if actual is not None and _as_text(actual) == _as_text(expected):
            return True
        left, right = to_number(actual), to_number(expected)
        return left is not None and right is not None and left == right

    if condition.op == "contains":
        if actual is None or actual == "":
            return False
        return _as_text(expected).lower() in _as_text(actual).lower()

    if condition.op in ("gt", "lt"):
        # Non-numeric on either side is a non-match
        left, right = to_number(actual), to_number(expected)
        if left is None or right is None:
            return False
        return left > right if condition.op == "gt" else left < right

    return True


def matches_all(record: Record, conditions: Iterable[FilterCondition]) -> bool:
    """True iff every condition holds (or names a field the record lacks)."""
    return all(matches(record, condition) for condition in conditions)


# ============================================================================
# Normalization
# ============================================================================

def normalize_record(record: Record, missing_value: str = DEFAULT_MISSING_VALUE) -> Dict[str, Any]:
    """Return a copy of the record with empty/None values replaced by the sentinel."""
    return {
        key: missing_value if value is None or value == "" else value
        for key, value in record.items()
    }


# ============================================================================
# Pipeline
# ============================================================================

def _compare_values(a: Any, b: Any) -> int:
    num_a, num_b = to_number(a), to_number(b)
    if num_a is not None and num_b is not None:
        a, b = num_a, num_b
    else:
        a, b = _as_text(a), _as_text(b)
    return (a > b) - (a < b)


def sort_records(records: List[Dict[str, Any]], sort: SortSpec) -> List[Dict[str, Any]]:
    """
    Stable sort on one field, numeric when both sides are numbers.

    Records without the field keep their relative order after all others,
    in either direction.
    """
    sign = -1 if sort.descending else 1
    present = [r for r in records if r.get(sort.field) is not None]
    missing = [r for r in records if r.get(sort.field) is None]

    def compare(left: Dict[str, Any], right: Dict[str, Any]) -> int:
        return sign * _compare_values(left[sort.field], right[sort.field])

    return sorted(present, key=cmp_to_key(compare)) + missing


def run_query(
    records: Sequence[Record],
    filters: Any = None,
    sort: Any = None,
    limit: int = 50,
    offset: int = 0,
    max_limit: Optional[int] = None,
    missing_value: str = DEFAULT_MISSING_VALUE,
) -> ResultPage:
    """
    Filter, normalize, sort and paginate records.

    Args:
        records: Raw records to scan
        filters: Filter conditions (models or dicts); malformed entries are skipped
        sort: Optional sort spec (model or dict)
        limit: Requested page size
        offset: Index of the first record to return
        max_limit: Upper bound applied to limit, if any
        missing_value: Sentinel for empty values in returned records

    Returns:
        ResultPage where total counts every matching record regardless of paging
    """
    conditions = parse_filters(filters)
    sort_spec = parse_sort(sort)

    matched = [normalize_record(r, missing_value) for r in records if matches_all(r, conditions)]

    if sort_spec is not None:
        matched = sort_records(matched, sort_spec)

    limit = max(0, limit)
    if max_limit is not None:
        limit = min(limit, max_limit)
    offset = max(0, offset)

    page = matched[offset:offset + limit]
    return ResultPage(total=len(matched), showing=len(page), offset=offset, results=page)
