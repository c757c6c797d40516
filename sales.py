# app/sales.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime

import pandas as pd

from errors import ValidationError

ENTRY_TABLE = "sales_entries"
PROFILE_TABLE = "profiles"


# -------------------- Coercion helpers --------------------
def safe_float(x, default: float = 0.0) -> float:
    """Coerce a backend value to float; blanks, junk, NaN and inf become ``default``."""
    if x is None or isinstance(x, bool):
        return default
    try:
        v = float(str(x).strip()) if isinstance(x, str) else float(x)
    except (TypeError, ValueError):
        return default
    if math.isnan(v) or math.isinf(v):
        return default
    return v


def safe_int(x, default: int = 0) -> int:
    return int(safe_float(x, float(default)))


def parse_timestamp(value) -> datetime:
    if isinstance(value, datetime):
        return value
    if value is None or str(value).strip() == "":
        raise ValueError("missing timestamp")
    ts = pd.Timestamp(str(value))
    if pd.isna(ts):
        raise ValueError(f"unparsable timestamp: {value!r}")
    return ts.to_pydatetime()


def money(x, currency: str = "₹") -> str:
    return f"{currency} {safe_float(x):,.2f}"


# -------------------- Records --------------------
@dataclass(frozen=True)
class SalesEntry:
    id: str
    owner_id: str
    created_at: datetime
    upper_items: int = 0
    lower_items: int = 0
    total_items: int = 0
    cost: float = 0.0

    @classmethod
    def from_row(cls, row: dict) -> SalesEntry:
        return cls(
            id=str(row.get("id") or ""),
            owner_id=str(row.get("user_id") or ""),
            created_at=parse_timestamp(row.get("created_at")),
            upper_items=safe_int(row.get("upper_items")),
            lower_items=safe_int(row.get("lower_items")),
            total_items=safe_int(row.get("total_items")),
            cost=safe_float(row.get("cost")),
        )


@dataclass(frozen=True)
class NewEntry:
    upper_items: int
    lower_items: int
    total_items: int
    cost: float

    def to_row(self, owner_id: str) -> dict:
        return {
            "user_id": owner_id,
            "upper_items": self.upper_items,
            "lower_items": self.lower_items,
            "total_items": self.total_items,
            "cost": round(self.cost, 2),
        }


@dataclass
class EntryPage:
    entries: list = field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = 10

    @property
    def total_pages(self) -> int:
        if self.total_count <= 0:
            return 1
        return math.ceil(self.total_count / self.page_size)


@dataclass(frozen=True)
class Profile:
    id: str
    name: str = ""
    email: str = ""
    username: str = ""

    @classmethod
    def from_row(cls, row: dict) -> Profile:
        return cls(
            id=str(row.get("id") or ""),
            name=row.get("name") or "",
            email=row.get("email") or "",
            username=row.get("username") or "",
        )


def page_bounds(page: int, page_size: int):
    """Inclusive (first, last) row offsets for a 1-based page number."""
    page = max(1, int(page))
    start = (page - 1) * page_size
    return start, start + page_size - 1


def entries_frame(entries) -> pd.DataFrame:
    cols = ["Date", "Upper Items", "Lower Items", "Total Items", "Cost"]
    if not entries:
        return pd.DataFrame(columns=cols)
    return pd.DataFrame(
        [
            {
                "Date": e.created_at.astimezone().strftime("%Y-%m-%d")
                if e.created_at.tzinfo
                else e.created_at.strftime("%Y-%m-%d"),
                "Upper Items": e.upper_items,
                "Lower Items": e.lower_items,
                "Total Items": e.total_items,
                "Cost": round(e.cost, 2),
            }
            for e in entries
        ],
        columns=cols,
    )


# -------------------- Form validation --------------------
def _parse_number(label: str, raw) -> float:
    text = "" if raw is None else str(raw).strip()
    if text == "":
        raise ValidationError(f"{label} is required.")
    try:
        v = float(text)
    except ValueError:
        raise ValidationError("Please enter valid numbers") from None
    if math.isnan(v) or math.isinf(v):
        raise ValidationError("Please enter valid numbers")
    if v < 0:
        raise ValidationError(f"{label} cannot be negative.")
    return v


def _parse_count(label: str, raw) -> int:
    v = _parse_number(label, raw)
    if not v.is_integer():
        raise ValidationError(f"{label} must be a whole number.")
    return int(v)


def validate_entry_form(upper_items, lower_items, total_items, cost) -> NewEntry:
    """Check raw form values and build a NewEntry, or raise ValidationError."""
    return NewEntry(
        upper_items=_parse_count("Upper Items", upper_items),
        lower_items=_parse_count("Lower Items", lower_items),
        total_items=_parse_count("Total Items", total_items),
        cost=_parse_number("Cost", cost),
    )
