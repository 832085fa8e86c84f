# Overview: Service-layer operations for reporting; aggregate sales over the invoice ledger.

from __future__ import annotations

from sqlalchemy import case, func

from merrycream.extensions import db
from merrycream.models import Invoice
from merrycream.time_utils import parse_iso_date
from merrycream.validation import MAX_ID, ValidationError, coerce_int


def _parse_date(key: str, value):
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be an ISO date (YYYY-MM-DD)")
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{key} must be an ISO date (YYYY-MM-DD)")


def _cents_to_amount(cents: int) -> float:
    return round(cents / 100, 2)


def summarize(start_date=None, end_date=None, store_id=None) -> dict:
    """
    Totals over invoices matching every given filter.

    Dates are inclusive bounds compared as real DATE values. No match is not
    an error: all four figures come back as zero.
    """
    start = _parse_date("start_date", start_date)
    end = _parse_date("end_date", end_date)
    store_id = coerce_int("store_id", store_id, required=False, maximum=MAX_ID)

    line_total = Invoice.cups_delivered * Invoice.price_per_cup_cents
    unpaid = Invoice.is_paid.is_(False)

    query = db.session.query(
        func.coalesce(func.sum(line_total), 0).label("total_sales_cents"),
        func.coalesce(func.sum(case((unpaid, line_total), else_=0)), 0).label("total_unpaid_cents"),
        func.count(Invoice.id).label("total_invoices"),
        func.coalesce(func.sum(case((unpaid, 1), else_=0)), 0).label("unpaid_count"),
    )

    if start:
        query = query.filter(Invoice.date >= start)
    if end:
        query = query.filter(Invoice.date <= end)
    if store_id is not None:
        query = query.filter(Invoice.store_id == store_id)

    row = query.one()
    return {
        "total_sales": _cents_to_amount(int(row.total_sales_cents or 0)),
        "total_unpaid": _cents_to_amount(int(row.total_unpaid_cents or 0)),
        "total_invoices": int(row.total_invoices or 0),
        "unpaid_count": int(row.unpaid_count or 0),
    }
