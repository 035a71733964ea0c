"""
Filter and sort pipeline for the job feed.

Pure functions over FeedItem sequences: no store access, no mutation of the
input. Every sort mode ends in a total order (newest first, then job id), so
filtering an already filtered list with the same FeedFilter returns the same
sequence.
"""
import logging
import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable

from gigboard.core.errors import ValidationError

logger = logging.getLogger(__name__)


class SortMode:
    NEWEST = "Newest"
    HIGH_PAY = "HighPay"
    NEARBY = "Nearby"

    ALL = (NEWEST, HIGH_PAY, NEARBY)

    _LABELS = {
        "newest": NEWEST,
        "all": NEWEST,
        "highpay": HIGH_PAY,
        "nearby": NEARBY,
    }

    @classmethod
    def parse(cls, raw: str | None) -> str:
        """Accepts UI labels like "High Pay", "high_pay" or "nearby"; unknown -> Newest."""
        if not raw:
            return cls.NEWEST
        key = re.sub(r"[\s_\-]+", "", str(raw)).lower()
        mode = cls._LABELS.get(key)
        if mode is None:
            logger.info("Unknown sort mode %r; using %s", raw, cls.NEWEST)
            return cls.NEWEST
        return mode


@dataclass(frozen=True)
class FeedItem:
    """A job with its distance from the requester (None = unknown)."""

    job: Any
    distance_km: float | None = None

    @property
    def id(self) -> str:
        return str(self.job.id)


@dataclass(frozen=True)
class FeedFilter:
    query: str = ""
    min_pay: float | None = None
    food_only: bool = False
    sort: str = SortMode.NEWEST

    @classmethod
    def from_raw(
        cls,
        query: str | None = None,
        min_pay: Any = None,
        food_only: Any = False,
        sort: str | None = None,
    ) -> "FeedFilter":
        """Build a filter from loosely typed UI input. A bad min_pay only drops that dimension."""
        try:
            pay = parse_min_pay(min_pay)
        except ValidationError as e:
            logger.info("Ignoring min_pay filter: %s", e.message)
            pay = None
        return cls(
            query=(query or "").strip(),
            min_pay=pay,
            food_only=_parse_bool(food_only),
            sort=SortMode.parse(sort),
        )


def parse_min_pay(raw: Any) -> float | None:
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValidationError("min_pay must be a number")
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError as e:
            raise ValidationError(f"min_pay is not a number: {text!r}") from e
    if math.isnan(value) or math.isinf(value):
        raise ValidationError("min_pay must be finite")
    if value < 0:
        raise ValidationError("min_pay must not be negative")
    return value


def _parse_bool(raw: Any) -> bool:
    if isinstance(raw, str):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    return bool(raw)


def _created_ts(job: Any) -> float:
    created = getattr(job, "created_at", None)
    if isinstance(created, str):
        try:
            created = datetime.fromisoformat(created.replace("Z", "+00:00"))
        except ValueError:
            return float("-inf")
    if not isinstance(created, datetime):
        return float("-inf")
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created.timestamp()


def _amount(job: Any) -> float:
    return float(getattr(job, "amount", None) or 0)


def matches(item: FeedItem, feed_filter: FeedFilter) -> bool:
    job = item.job
    if feed_filter.query:
        needle = feed_filter.query.lower()
        title = (getattr(job, "title", None) or "").lower()
        location = (getattr(job, "location", None) or "").lower()
        if needle not in title and needle not in location:
            return False
    if feed_filter.min_pay is not None and _amount(job) < feed_filter.min_pay:
        return False
    if feed_filter.food_only and getattr(job, "has_food", False) is not True:
        return False
    return True


def sort_items(items: list[FeedItem], mode: str) -> list[FeedItem]:
    # Stable passes, least significant key first.
    ordered = sorted(items, key=lambda i: i.id)
    ordered.sort(key=lambda i: _created_ts(i.job), reverse=True)
    if mode == SortMode.HIGH_PAY:
        ordered.sort(key=lambda i: _amount(i.job), reverse=True)
    elif mode == SortMode.NEARBY:
        ordered.sort(key=lambda i: (i.distance_km is None, i.distance_km or 0.0))
    return ordered


def filter_feed(items: Iterable[FeedItem], feed_filter: FeedFilter) -> list[FeedItem]:
    kept = [item for item in items if matches(item, feed_filter)]
    return sort_items(kept, feed_filter.sort)
