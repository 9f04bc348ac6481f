from __future__ import annotations

import locale
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Iterable, Literal, Mapping, Sequence, TypeVar, Union


R = TypeVar("R")
SortOrder = Literal["asc", "desc"]
FieldSelector = Union[str, Callable[[Any], Any]]


def _instant(value: datetime) -> float:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()


def field_value(record: Any, selector: FieldSelector) -> Any:
    if callable(selector):
        return selector(record)
    if isinstance(record, Mapping):
        return record.get(selector)
    return getattr(record, selector, None)


def sort_key(value: Any) -> tuple[int, Any]:
    """Comparable key for one field value.

    Numbers and timestamps share the numeric rank so a missing value sorts as
    zero. Text is ordered with the active locale, ignoring case.
    """
    if value is None:
        return (0, 0.0)
    if isinstance(value, datetime):
        return (0, _instant(value))
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, (bool, int, float)):
        number = float(value)
        return (0, 0.0 if math.isnan(number) else number)
    return (1, locale.strxfrm(str(value).casefold()))


def sort_records(records: Iterable[R], selector: FieldSelector, order: SortOrder = "desc") -> list[R]:
    if order not in ("asc", "desc"):
        raise ValueError(f"Unsupported sort order: {order}")
    # sorted() is stable in both directions
    return sorted(records, key=lambda r: sort_key(field_value(r, selector)), reverse=order == "desc")


def filter_records(records: Iterable[R], text: str, selector: FieldSelector = "symbol") -> list[R]:
    needle = (text or "").strip().casefold()
    if not needle:
        return list(records)
    return [r for r in records if needle in str(field_value(r, selector) or "").casefold()]


@dataclass(frozen=True)
class SortState:
    field: str
    order: SortOrder = "desc"

    def toggle(self, field: str) -> SortState:
        if field == self.field:
            return SortState(field, "asc" if self.order == "desc" else "desc")
        return SortState(field, "desc")


def arrange(
    records: Sequence[R],
    state: SortState,
    text: str = "",
    filter_field: FieldSelector = "symbol",
    selectors: Mapping[str, FieldSelector] | None = None,
) -> list[R]:
    selector = (selectors or {}).get(state.field, state.field)
    return sort_records(filter_records(records, text, filter_field), selector, state.order)
