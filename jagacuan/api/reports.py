import calendar
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Tuple

from flask import Blueprint, g, jsonify, request

from jagacuan.api.guards import login_required
from jagacuan.currency import format_rupiah_short
from jagacuan.errors import ValidationError
from jagacuan.repositories.spending import SpendingRepository
from jagacuan.repositories.transactions import TYPE_SPENDING, TransactionRepository, period_bounds
from jagacuan.validation import parse_int, parse_year


bp = Blueprint("reports", __name__)

CHART_PERIODS = ("daily", "weekly", "monthly")


def _ts(day: date) -> int:
    return int(datetime(day.year, day.month, day.day).timestamp())


def _shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def chart_window(period: str, today: date) -> Tuple[int, int]:
    """Unix [start, end) covered by a chart period ending today"""
    if period == "daily":
        return period_bounds(today.year, today.month)
    if period == "weekly":
        start = today - timedelta(days=6)
        return _ts(start), _ts(today + timedelta(days=1))
    start_year, start_month = _shift_month(today.year, today.month, -5)
    end_year, end_month = _shift_month(today.year, today.month, 1)
    return _ts(date(start_year, start_month, 1)), _ts(date(end_year, end_month, 1))


def generate_expense_chart(events: Iterable[Tuple[int, float]], period: str, today: date) -> Dict[str, Any]:
    """Bucket (timestamp, amount) spending events into chart points.

    daily: each day of the current month, weekly: the last 7 days labelled by
    weekday, monthly: the last 6 months labelled by month.
    """
    if period == "daily":
        days = calendar.monthrange(today.year, today.month)[1]
        keys = [date(today.year, today.month, d) for d in range(1, days + 1)]
        labels = [str(d.day) for d in keys]
        key_of = lambda dt: dt.date()
    elif period == "weekly":
        keys = [today - timedelta(days=offset) for offset in range(6, -1, -1)]
        labels = [d.strftime("%a") for d in keys]
        key_of = lambda dt: dt.date()
    else:
        keys = [_shift_month(today.year, today.month, offset) for offset in range(-5, 1)]
        labels = [calendar.month_abbr[month] for _, month in keys]
        key_of = lambda dt: (dt.year, dt.month)

    totals = dict.fromkeys(keys, 0.0)
    for timestamp, amount in events:
        key = key_of(datetime.fromtimestamp(timestamp))
        if key in totals:
            totals[key] += float(amount)

    points = [{"name": label, "amount": totals[key]} for label, key in zip(labels, keys)]
    for point in points:
        point["label"] = format_rupiah_short(point["amount"])
    return {"period": period, "data": points, "total": sum(totals.values())}


def spending_events(user_id: str, start: int, end: int) -> List[Tuple[int, float]]:
    """Spending transactions plus budget-tracked spending inside [start, end)"""
    events = [
        (tx["timestamp"], tx.get("amount", 0))
        for tx in TransactionRepository().find_between(user_id, start, end, tx_type=TYPE_SPENDING)
    ]
    rows = SpendingRepository().find_between(user_id, start, end)
    events.extend((row["date"], row.get("amount", 0)) for row in rows)
    return events


@bp.get("/expenses")
@login_required
def expenses_chart():
    period = request.args.get("period", "weekly")
    if period not in CHART_PERIODS:
        raise ValidationError(f"period must be one of: {', '.join(CHART_PERIODS)}", "period")

    today = date.today()
    start, end = chart_window(period, today)
    return jsonify(generate_expense_chart(spending_events(g.user_id, start, end), period, today))


@bp.get("/summary")
@login_required
def summary():
    """Income vs spending untuk satu tahun atau satu bulan"""
    today = date.today()
    year = parse_year(request.args.get("year", today.year))
    month = request.args.get("month")
    month = parse_int(month, "month", minimum=1, maximum=12) if month else None

    start, end = period_bounds(year, month)
    totals = TransactionRepository().totals_between(g.user_id, start, end)
    tracked = SpendingRepository().total_between(g.user_id, start, end)
    return jsonify({
        "year": year,
        "month": month,
        "start": start,
        "kpis": {
            "income": totals["income"],
            "spending": totals["spending"],
            "tracked_spending": tracked,
            "net_cashflow": totals["net_cashflow"],
        },
    })
