"""Dashboard aggregation over purchase orders and their lines.

Pure functions: callers pass fully loaded orders (lines and catalog items
attached) and get back the derived metrics. Nothing here touches the database.
"""
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from po_tracker.domain.progress import is_dispatched
from po_tracker.domain.stages import parse_stages


@dataclass
class MonthlyWeight:
    month: str  # "YYYY-MM"
    weight: float


@dataclass
class DashboardStats:
    oldest_pending_date: datetime | None = None
    pending_items_count: int = 0
    monthly_dispatched_weight: list[MonthlyWeight] = field(default_factory=list)


def month_key(moment: datetime) -> str:
    """Bucket key for a date: "YYYY-MM" of its UTC calendar month.

    Naive datetimes are taken to be UTC already (SQLite drops the offset).
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m")


def line_weight(line) -> float:
    """Dispatched weight of one line: catalog weight times quantity (missing weight counts as 0)."""
    unit_weight = line.item.weight if line.item is not None and line.item.weight is not None else 0
    return float(unit_weight) * (line.quantity or 0)


def compute_dashboard_stats(orders: Iterable) -> DashboardStats:
    """Scan every order line's current stage array and derive dashboard metrics.

    Args:
        orders: Purchase orders exposing order_date, delivery_date and items,
            where each line exposes processes, quantity and item.weight

    Returns:
        DashboardStats with:
        - oldest_pending_date: earliest order_date among orders with a pending line
        - pending_items_count: number of lines whose last stage is not completed
        - monthly_dispatched_weight: per-month dispatched weight, ascending by month,
          bucketed by delivery_date (order_date when no delivery date), rounded to 2 places
    """
    pending_items = 0
    oldest_pending: datetime | None = None
    buckets: dict[str, float] = defaultdict(float)

    for order in orders:
        order_has_pending = False

        for line in order.items:
            stages = parse_stages(line.processes)

            if not is_dispatched(stages):
                pending_items += 1
                order_has_pending = True
                continue

            bucket_date = order.delivery_date or order.order_date
            buckets[month_key(bucket_date)] += line_weight(line)

        if order_has_pending and (oldest_pending is None or order.order_date < oldest_pending):
            oldest_pending = order.order_date

    return DashboardStats(
        oldest_pending_date=oldest_pending,
        pending_items_count=pending_items,
        monthly_dispatched_weight=[
            MonthlyWeight(month=month, weight=round(weight, 2))
            for month, weight in sorted(buckets.items())
        ],
    )
